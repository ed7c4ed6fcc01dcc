#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
主执行脚本 - Pipeline调度器
加载数据 -> 结构学习 -> 评分 -> 生成合成数据 -> 保存
"""
import argparse
import os
from typing import Optional

from bayesgen.api import generate, learn_hill_climbing, learn_sparse_candidate, learn_tan, score
from bayesgen.data.dataset import Dataset
from bayesgen.utils.config import LearnerConfig, load_config
from bayesgen.utils.io import load_data, save_data, save_metadata
from bayesgen.utils.logging import setup_logger

logger = setup_logger("main")


class BayesGenPipeline:
    """
    合成数据Pipeline

    完整流程：
    1. 数据加载与编码
    2. 贝叶斯网络学习（爬山 / Sparse Candidate / TAN）
    3. BIC评分
    4. 祖先采样生成数据并保存
    """

    SUPPORTED_METHODS = ['hill_climbing', 'sparse_candidate', 'tan']

    def __init__(self, config: Optional[LearnerConfig] = None):
        """
        初始化Pipeline

        Args:
            config: 学习配置
        """
        self.config = config or LearnerConfig()
        logger.info("=" * 80)
        logger.info("bayesgen Pipeline 初始化")
        logger.info(f"配置: {self.config.to_dict()}")
        logger.info("=" * 80)

    def learn(self, dataset: Dataset, method: str):
        """按方法学习网络"""
        if method not in self.SUPPORTED_METHODS:
            raise ValueError(f"不支持的方法: {method}。支持的方法: {self.SUPPORTED_METHODS}")

        if method == 'hill_climbing':
            return learn_hill_climbing(dataset, self.config)
        if method == 'sparse_candidate':
            return learn_sparse_candidate(dataset, self.config)
        if dataset.class_attribute_id is None:
            raise ValueError("TAN 需要通过 --class-column 指定类别属性")
        return learn_tan(dataset, dataset.class_attribute_id, self.config)

    def run(
        self,
        input_path: str,
        output_path: str,
        method: str = 'hill_climbing',
        count: Optional[int] = None,
        class_column: Optional[str] = None,
        structure_path: Optional[str] = None
    ) -> dict:
        """
        运行完整Pipeline

        Returns:
            统计信息字典
        """
        # ========== 阶段1: 数据加载 ==========
        logger.info("【阶段1】数据加载与编码")
        df = load_data(input_path)
        dataset = Dataset.from_frame(df, class_column)

        # ========== 阶段2: 结构学习 ==========
        logger.info(f"\n【阶段2】结构学习: {method}")
        network = self.learn(dataset, method)

        # ========== 阶段3: 评分 ==========
        logger.info("\n【阶段3】BIC评分")
        bic = score(network, dataset, self.config.smoothing)
        logger.info(f"BIC评分: {bic:.4f}")

        # ========== 阶段4: 生成数据 ==========
        n = count if count is not None else dataset.num_instances
        logger.info(f"\n【阶段4】生成 {n} 条合成数据")
        generated = generate(
            network,
            n,
            seed=self.config.random_seed,
            unseen_policy=self.config.unseen_policy,
            show_progress=True
        )
        save_data(generated.to_frame(), output_path)
        logger.info(f"合成数据已保存: {output_path}")

        stats = {
            'method': method,
            'input': input_path,
            'output': output_path,
            'n_input_instances': dataset.num_instances,
            'n_generated_instances': generated.num_instances,
            'bic_score': float(bic),
            'structure': network.export_structure(),
            'config': self.config.to_dict()
        }
        if structure_path:
            save_metadata(stats, structure_path)
            logger.info(f"网络结构已保存: {structure_path}")

        logger.info(f"\n{'=' * 80}")
        logger.info("处理完成！")
        logger.info(f"{'=' * 80}\n")
        return stats


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='离散贝叶斯网络结构学习与合成数据生成')
    parser.add_argument('--input', required=True, help='输入数据（.csv / .parquet）')
    parser.add_argument('--output', required=True, help='合成数据输出路径')
    parser.add_argument('--method', default='hill_climbing',
                        choices=BayesGenPipeline.SUPPORTED_METHODS, help='结构学习方法')
    parser.add_argument('--class-column', default=None, help='类别属性列名（TAN必需）')
    parser.add_argument('--count', type=int, default=None, help='生成实例数，默认与输入相同')
    parser.add_argument('--seed', type=int, default=None, help='随机种子，覆盖配置文件')
    parser.add_argument('--config', default=None, help='YAML配置文件')
    parser.add_argument('--structure-out', default=None, help='网络结构与评分导出路径（YAML）')
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    config_dict = {}
    if args.config:
        if not os.path.exists(args.config):
            raise FileNotFoundError(f"配置文件不存在: {args.config}")
        config_dict = load_config(args.config)
    config = LearnerConfig.from_dict(config_dict)
    if args.seed is not None:
        config.random_seed = args.seed

    pipeline = BayesGenPipeline(config)
    pipeline.run(
        args.input,
        args.output,
        method=args.method,
        count=args.count,
        class_column=args.class_column,
        structure_path=args.structure_out
    )
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
