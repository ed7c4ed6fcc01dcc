#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
祖先采样数据生成
按拓扑顺序依次为每个节点采样，条件是已经采样好的父节点取值
"""
from typing import Dict, Sequence, Union

import numpy as np
import pandas as pd
from tqdm import tqdm

from bayesgen.bayes.errors import MissingAssignmentError, MissingParentValueError
from bayesgen.bayes.structure import BayesianNetwork
from bayesgen.data.dataset import Dataset
from bayesgen.utils.config import UNSEEN_POLICIES
from bayesgen.utils.logging import setup_logger

logger = setup_logger("data_generator")

RandomSource = Union[int, np.random.Generator, None]


def pick_value(probabilities: Sequence[float], draw: float) -> int:
    """
    累积区间采样

    按取值顺序把 [0,1) 划分为与概率成比例的连续子区间，返回包含 draw 的区间对应的取值。
    由于浮点误差 draw 落在最后一个区间之外时，返回最后一个概率为正的取值

    Args:
        probabilities: 各取值的概率
        draw: [0,1) 上的均匀随机数

    Returns:
        取值编码
    """
    begin = end = 0.0
    last_positive = None
    for code, probability in enumerate(probabilities):
        begin = end
        end += probability
        if probability > 0:
            last_positive = code
            if begin <= draw < end:
                return code
    if last_positive is None:
        raise ValueError("概率分布全为0，无法采样")
    return last_positive


class DataGenerator:
    """
    祖先采样数据生成器

    随机数只来自显式传入的 numpy Generator，给定种子时结果可复现
    """

    def __init__(self, network: BayesianNetwork, unseen_policy: str = 'uniform'):
        """
        初始化

        Args:
            network: 已学习CPD的网络
            unseen_policy: 父节点取值组合在CPD中不存在时的处理方式
                - 'uniform': 回退为均匀分布
                - 'raise': 抛出 MissingAssignmentError
        """
        if unseen_policy not in UNSEEN_POLICIES:
            raise ValueError(f"未知的 unseen_policy: {unseen_policy}，可选: {UNSEEN_POLICIES}")
        missing = [n.attribute.name for n in network if n.cpd is None]
        if missing:
            raise ValueError(f"以下节点没有CPD，请先学习参数: {missing}")
        self.network = network
        self.unseen_policy = unseen_policy
        self.order = network.get_topological_order()
        self.unseen_count = 0

    def conditional_distribution(self, node: int, instance: Dict[int, int]) -> np.ndarray:
        """
        节点在当前实例父节点取值下的分布

        对节点的每个取值查询一次CPD

        Raises:
            MissingParentValueError: 父节点尚未采样
        """
        network_node = self.network.node(node)
        attribute = network_node.attribute

        assignment = {}
        for parent in network_node.parents:
            if parent not in instance:
                raise MissingParentValueError(
                    f"为属性 {attribute.name} 采样时，父节点 "
                    f"{self.network.attribute(parent).name} 尚未取值"
                )
            assignment[parent] = instance[parent]

        probabilities = np.zeros(attribute.cardinality)
        try:
            for code in attribute.codes:
                assignment[node] = code
                probabilities[code] = network_node.cpd.query(assignment)
        except MissingAssignmentError:
            if self.unseen_policy == 'raise':
                raise
            self.unseen_count += 1
            logger.debug(f"属性 {attribute.name} 的父节点取值组合未见过，使用均匀分布")
            probabilities = np.full(attribute.cardinality, 1.0 / attribute.cardinality)
        return probabilities

    def sample_instance(self, rng: np.random.Generator) -> Dict[int, int]:
        """按拓扑顺序采样一个实例"""
        instance: Dict[int, int] = {}
        for node in self.order:
            probabilities = self.conditional_distribution(node, instance)
            instance[node] = pick_value(probabilities, rng.random())
        return instance

    def generate(
        self,
        count: int,
        random_state: RandomSource = None,
        show_progress: bool = False
    ) -> Dataset:
        """
        生成数据集

        Args:
            count: 实例数
            random_state: 随机种子或 numpy Generator
            show_progress: 是否显示进度条

        Returns:
            与网络属性结构相同的数据集
        """
        if count < 0:
            raise ValueError(f"实例数不能为负数: {count}")
        rng = random_state if isinstance(random_state, np.random.Generator) \
            else np.random.default_rng(random_state)

        self.unseen_count = 0
        ids = self.network.node_ids
        rows = np.zeros((count, len(ids)), dtype=np.int64)
        for i in tqdm(range(count), desc="生成实例", disable=not show_progress):
            instance = self.sample_instance(rng)
            rows[i] = [instance[node] for node in ids]

        if self.unseen_count:
            logger.warning(f"共 {self.unseen_count} 次遇到未见过的父节点取值组合，已回退为均匀分布")
        logger.info(f"数据生成完成: {count} 条实例")

        frame = pd.DataFrame(rows, columns=ids)
        return Dataset(self.network.attributes, frame, self.network.class_attribute)


def generate_dataset(
    network: BayesianNetwork,
    count: int,
    seed: RandomSource = None,
    unseen_policy: str = 'uniform',
    show_progress: bool = False
) -> Dataset:
    """从网络生成数据集的便捷函数"""
    return DataGenerator(network, unseen_policy).generate(count, seed, show_progress)
