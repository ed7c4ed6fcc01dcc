#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
结构评分（BIC）
BIC = 对数似然 - 0.5 * log(N) * 自由参数个数，按节点分解
"""
import math
from typing import Dict, FrozenSet, Iterable, Sequence, Tuple

import numpy as np
from scipy.special import xlogy

from bayesgen.bayes.cpds import CPD, count_table
from bayesgen.data.dataset import Attribute, Dataset
from bayesgen.utils.logging import setup_logger

logger = setup_logger("bic_scorer")


def free_parameters(attribute: Attribute, parents: Sequence[Attribute]) -> int:
    """自由参数个数 (|节点取值| - 1) * Π |父节点取值|"""
    q = 1
    for parent in parents:
        q *= parent.cardinality
    return (attribute.cardinality - 1) * q


def bic_penalty(attribute: Attribute, parents: Sequence[Attribute], n: int) -> float:
    """复杂度惩罚项 0.5 * log(N) * 自由参数个数"""
    if n <= 1:
        return 0.0
    return 0.5 * math.log(n) * free_parameters(attribute, parents)


def score_cpd(cpd: CPD, dataset: Dataset) -> float:
    """
    数据集在给定CPD下的对数似然 Σ log P(x | pa(x))

    某个实例的概率为0，或父节点取值组合在CPD中不存在时，结果为 -inf，不做截断

    Args:
        cpd: 条件概率表
        dataset: 数据集

    Returns:
        对数似然
    """
    counts = count_table(dataset, cpd.attribute, cpd.parent_ids)
    log_likelihood = 0.0
    for key, value_counts in counts.items():
        if not cpd.has_assignment(key):
            return -math.inf
        log_likelihood += float(xlogy(value_counts, cpd.distribution(key)).sum())
    return log_likelihood


def bic_score(
    dataset: Dataset,
    node: int,
    parents: Iterable[int],
    smoothing: float = 0.0
) -> float:
    """
    单个节点的BIC局部评分

    Args:
        dataset: 数据集
        node: 节点ID
        parents: 父节点ID
        smoothing: CPD的平滑参数

    Returns:
        对数似然 - 复杂度惩罚
    """
    attribute = dataset.get_attribute_by_id(node)
    parent_attributes = [dataset.get_attribute_by_id(p) for p in sorted(parents)]
    cpd = CPD.build(attribute, parent_attributes, dataset, smoothing)
    log_likelihood = score_cpd(cpd, dataset)
    return log_likelihood - bic_penalty(attribute, parent_attributes, dataset.num_instances)


class BICScorer:
    """
    BIC评分器

    局部评分按 (节点, 父节点集合) 缓存，数据集在搜索过程中只读
    """

    def __init__(self, dataset: Dataset, smoothing: float = 0.0):
        """
        初始化评分器

        Args:
            dataset: 数据集
            smoothing: CPD的平滑参数
        """
        self.dataset = dataset
        self.smoothing = smoothing
        self._cache: Dict[Tuple[int, FrozenSet[int]], float] = {}

    def local_score(self, node: int, parents: Iterable[int]) -> float:
        key = (node, frozenset(parents))
        if key not in self._cache:
            self._cache[key] = bic_score(self.dataset, node, key[1], self.smoothing)
        return self._cache[key]

    def network_score(self, network) -> float:
        """网络评分 = 各节点局部评分之和"""
        return float(np.sum([
            self.local_score(node, network.get_parents(node))
            for node in network.node_ids
        ]))

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def clear(self) -> None:
        self._cache.clear()
