#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
信息论度量
互信息与条件互信息（自然对数），用于候选父节点排序和TAN建树
"""
from itertools import combinations
from typing import Dict, FrozenSet, Sequence

from sklearn.metrics import mutual_info_score

from bayesgen.data.dataset import Dataset


def mutual_information(dataset: Dataset, x: int, y: int) -> float:
    """
    互信息 I(X;Y)，由经验频率估计

    Args:
        dataset: 数据集
        x: 属性ID
        y: 属性ID

    Returns:
        互信息（nats），两列都不缺失的实例不足时为0
    """
    sub = dataset.complete_columns([x, y])
    if len(sub) == 0:
        return 0.0
    return float(mutual_info_score(sub[x], sub[y]))


def conditional_mutual_information(dataset: Dataset, x: int, y: int, c: int) -> float:
    """
    条件互信息 I(X;Y|C)

    CMI = Σ_c Σ_x Σ_y P(x,y,c) log( P(x,y|c) / (P(x|c)P(y|c)) )
        = Σ_c P(c) · I(X;Y | C=c)

    Args:
        dataset: 数据集
        x: 属性ID
        y: 属性ID
        c: 条件属性ID（通常是类别属性）

    Returns:
        条件互信息（nats）
    """
    sub = dataset.complete_columns([x, y, c])
    n = len(sub)
    if n == 0:
        return 0.0

    cmi = 0.0
    for _, group in sub.groupby(c):
        cmi += len(group) / n * mutual_info_score(group[x], group[y])
    return float(cmi)


def pairwise_mutual_information(
    dataset: Dataset,
    attribute_ids: Sequence[int]
) -> Dict[FrozenSet[int], float]:
    """
    所有属性对的互信息（对称，只计算一次）

    Returns:
        frozenset({x, y}) -> I(X;Y)
    """
    return {
        frozenset((x, y)): mutual_information(dataset, x, y)
        for x, y in combinations(attribute_ids, 2)
    }
