#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
配置工具
"""
import yaml
from dataclasses import dataclass, fields, asdict
from pathlib import Path
from typing import Dict, Any, Optional

UNSEEN_POLICIES = ('uniform', 'raise')


def load_config(config_path: str = "configs/default.yaml") -> Dict[str, Any]:
    """
    加载配置文件

    Args:
        config_path: 配置文件路径

    Returns:
        配置字典
    """
    with open(config_path, 'r', encoding='utf-8') as f:
        config = yaml.safe_load(f)
    return config or {}


def ensure_dir(directory: str) -> None:
    """
    确保目录存在，不存在则创建

    Args:
        directory: 目录路径
    """
    if directory:  # 防止空字符串
        Path(directory).mkdir(parents=True, exist_ok=True)


@dataclass
class LearnerConfig:
    """
    结构学习与数据生成配置

    Attributes:
        max_parents: 每个节点的父节点数上限，None表示不限制
        candidate_set_size: Sparse Candidate 每个节点的候选父节点数 k
        max_rounds: Sparse Candidate 最大轮数
        max_iterations: 爬山搜索最大迭代次数，None表示直到局部最优
        random_seed: 数据生成的随机种子
        smoothing: CPD的Laplace平滑参数，0表示不平滑（最大似然）
        unseen_policy: 生成时遇到未见过的父节点取值组合的处理方式
    """
    max_parents: Optional[int] = 3
    candidate_set_size: int = 5
    max_rounds: int = 10
    max_iterations: Optional[int] = None
    random_seed: int = 42
    smoothing: float = 0.0
    unseen_policy: str = 'uniform'

    def __post_init__(self):
        if self.max_parents is not None and self.max_parents < 0:
            raise ValueError(f"max_parents 不能为负数: {self.max_parents}")
        if self.candidate_set_size < 1:
            raise ValueError(f"candidate_set_size 必须 >= 1: {self.candidate_set_size}")
        if self.max_rounds < 1:
            raise ValueError(f"max_rounds 必须 >= 1: {self.max_rounds}")
        if self.max_iterations is not None and self.max_iterations < 0:
            raise ValueError(f"max_iterations 不能为负数: {self.max_iterations}")
        if self.smoothing < 0:
            raise ValueError(f"smoothing 不能为负数: {self.smoothing}")
        if self.unseen_policy not in UNSEEN_POLICIES:
            raise ValueError(
                f"未知的 unseen_policy: {self.unseen_policy}，可选: {UNSEEN_POLICIES}"
            )

    @classmethod
    def from_dict(cls, config: Optional[Dict[str, Any]]) -> 'LearnerConfig':
        """
        从配置字典构造，支持嵌套在 'learner' 键下的写法

        未知键会被拒绝，避免拼写错误被静默忽略
        """
        config = dict(config or {})
        if 'learner' in config and isinstance(config['learner'], dict):
            config = dict(config['learner'])

        known = {f.name for f in fields(cls)}
        unknown = set(config) - known
        if unknown:
            raise ValueError(f"未知的配置项: {sorted(unknown)}")
        return cls(**config)

    @classmethod
    def from_yaml(cls, config_path: str) -> 'LearnerConfig':
        """从YAML文件加载"""
        return cls.from_dict(load_config(config_path))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
