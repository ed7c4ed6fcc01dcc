#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
条件概率分布（CPD）学习
从数据中统计条件概率表，并支持点查询
"""
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from bayesgen.bayes.errors import MissingAssignmentError
from bayesgen.data.dataset import Attribute, Dataset
from bayesgen.utils.logging import setup_logger

logger = setup_logger("cpd_learner")

# 每个父节点取值组合的概率和允许的误差
NORMALIZATION_TOLERANCE = 1e-6

ParentKey = Tuple[int, ...]


class Query:
    """
    CPD查询

    有序的 (属性ID, 取值编码) 对，每个属性最多出现一次
    """

    def __init__(self, items: Iterable[Tuple[int, int]] = ()):
        self._items: Dict[int, int] = {}
        for attribute_id, value in items:
            self.add(attribute_id, value)

    def add(self, attribute_id: int, value: int) -> 'Query':
        if attribute_id in self._items:
            raise ValueError(f"查询中属性 {attribute_id} 重复")
        self._items[attribute_id] = int(value)
        return self

    def __getitem__(self, attribute_id: int) -> int:
        return self._items[attribute_id]

    def __contains__(self, attribute_id: int) -> bool:
        return attribute_id in self._items

    def __len__(self) -> int:
        return len(self._items)

    def items(self):
        return self._items.items()

    def as_dict(self) -> Dict[int, int]:
        return dict(self._items)

    def __repr__(self) -> str:
        return f"Query({list(self._items.items())})"


Assignment = Union[Query, Mapping[int, int]]


class CPD:
    """
    单个节点的条件概率表

    父节点取值组合（按父节点ID升序排列的编码元组） -> 节点各取值的概率（按取值顺序）
    """

    def __init__(
        self,
        attribute: Attribute,
        parents: Sequence[Attribute],
        table: Dict[ParentKey, np.ndarray],
        counts: Optional[Dict[ParentKey, np.ndarray]] = None,
        smoothing: float = 0.0
    ):
        self.attribute = attribute
        self.parents = sorted(parents, key=lambda a: a.id)
        self.smoothing = smoothing
        self._table = {}
        for key, probs in table.items():
            probs = np.asarray(probs, dtype=float)
            if probs.shape != (attribute.cardinality,):
                raise ValueError(
                    f"节点 {attribute.name} 的概率向量长度应为 {attribute.cardinality}"
                )
            if abs(probs.sum() - 1.0) > NORMALIZATION_TOLERANCE:
                raise ValueError(
                    f"节点 {attribute.name} 在取值组合 {key} 下概率和为 {probs.sum()}"
                )
            self._table[tuple(int(v) for v in key)] = probs
        self._counts = counts or {}

    @classmethod
    def build(
        cls,
        attribute: Attribute,
        parents: Sequence[Attribute],
        dataset: Dataset,
        smoothing: float = 0.0
    ) -> 'CPD':
        """
        从数据统计CPD

        节点自身或任一父节点缺失的实例不参与统计

        Args:
            attribute: 节点属性
            parents: 父节点属性
            dataset: 数据集
            smoothing: Laplace平滑参数，0表示最大似然估计

        Returns:
            CPD
        """
        parents = sorted(parents, key=lambda a: a.id)
        parent_ids = [p.id for p in parents]
        counts = count_table(dataset, attribute, parent_ids)

        r = attribute.cardinality
        table = {}
        for key, value_counts in counts.items():
            total = value_counts.sum()
            table[key] = (value_counts + smoothing) / (total + smoothing * r)

        return cls(attribute, parents, table, counts, smoothing)

    @classmethod
    def from_probabilities(
        cls,
        attribute: Attribute,
        parents: Sequence[Attribute],
        probabilities: Mapping[ParentKey, Sequence[float]]
    ) -> 'CPD':
        """直接给定概率表构造CPD（父节点取值按父节点ID升序）"""
        return cls(attribute, parents, {k: np.asarray(v, dtype=float) for k, v in probabilities.items()})

    # ============ 查询 ============

    @property
    def node(self) -> int:
        return self.attribute.id

    @property
    def parent_ids(self) -> List[int]:
        return [p.id for p in self.parents]

    def assignments(self) -> List[ParentKey]:
        """训练数据中出现过的父节点取值组合"""
        return sorted(self._table)

    def parent_key(self, assignment: Assignment) -> ParentKey:
        """从查询中取出父节点取值组合"""
        try:
            return tuple(int(assignment[p]) for p in self.parent_ids)
        except KeyError as e:
            raise MissingAssignmentError(
                f"节点 {self.attribute.name} 的查询缺少父节点 {e.args[0]} 的取值",
                node=self.node
            ) from None

    def distribution(self, parent_values: Union[ParentKey, Assignment]) -> np.ndarray:
        """
        给定父节点取值的条件分布

        Args:
            parent_values: 父节点编码元组，或包含父节点取值的查询

        Returns:
            节点各取值的概率（副本）

        Raises:
            MissingAssignmentError: 该父节点取值组合在训练数据中没有出现
        """
        if isinstance(parent_values, tuple):
            key = tuple(int(v) for v in parent_values)
        else:
            key = self.parent_key(parent_values)
        if key not in self._table:
            raise MissingAssignmentError(
                f"节点 {self.attribute.name} 没有父节点取值组合 {key} 的统计",
                node=self.node,
                assignment=key
            )
        return self._table[key].copy()

    def has_assignment(self, key: ParentKey) -> bool:
        return tuple(key) in self._table

    def query(self, assignment: Assignment) -> float:
        """
        查询 P(node = value | parents)

        Args:
            assignment: 包含节点自身及所有父节点取值的查询，多余的属性会被忽略

        Returns:
            概率值
        """
        if self.node not in assignment:
            raise MissingAssignmentError(
                f"查询缺少节点 {self.attribute.name} 自身的取值",
                node=self.node
            )
        value = int(assignment[self.node])
        if not 0 <= value < self.attribute.cardinality:
            raise ValueError(f"节点 {self.attribute.name} 没有编码 {value}")
        return float(self.distribution(assignment)[value])

    def counts(self, key: ParentKey) -> np.ndarray:
        """父节点取值组合下各取值的计数，未出现的组合返回全0"""
        if tuple(key) in self._counts:
            return self._counts[tuple(key)].copy()
        return np.zeros(self.attribute.cardinality)

    def is_normalized(self, tolerance: float = NORMALIZATION_TOLERANCE) -> bool:
        return all(abs(p.sum() - 1.0) <= tolerance for p in self._table.values())

    def to_frame(self) -> pd.DataFrame:
        """
        导出为DataFrame，行是父节点取值组合，列是节点取值名
        """
        index = self.assignments()
        data = [self._table[key] for key in index]
        if self.parents:
            names = [p.name for p in self.parents]
            index = pd.MultiIndex.from_tuples(
                [tuple(p.value_name(v) for p, v in zip(self.parents, key)) for key in index],
                names=names
            )
        else:
            index = pd.Index(['prior'])
        return pd.DataFrame(data, index=index, columns=list(self.attribute.values))

    def __repr__(self) -> str:
        return (f"CPD(node={self.attribute.name}, parents={[p.name for p in self.parents]}, "
                f"assignments={len(self._table)})")


def count_table(dataset: Dataset, attribute: Attribute, parent_ids: Sequence[int]) -> Dict[ParentKey, np.ndarray]:
    """
    统计 父节点取值组合 -> 节点各取值的频数

    Args:
        dataset: 数据集
        attribute: 节点属性
        parent_ids: 父节点ID（升序）

    Returns:
        频数字典，只包含出现过的组合
    """
    r = attribute.cardinality
    node_id = attribute.id
    sub = dataset.complete_columns(list(parent_ids) + [node_id])

    if not parent_ids:
        if len(sub) == 0:
            return {}
        return {(): np.bincount(sub[node_id].to_numpy(), minlength=r).astype(float)}

    counts: Dict[ParentKey, np.ndarray] = {}
    grouped = sub.groupby(list(parent_ids) + [node_id]).size()
    for key, count in grouped.items():
        parent_values = tuple(int(v) for v in key[:-1])
        if parent_values not in counts:
            counts[parent_values] = np.zeros(r)
        counts[parent_values][int(key[-1])] += count
    return counts


class CPDLearner:
    """
    条件概率分布学习器

    按网络当前的父节点集合为每个节点估计条件概率表
    """

    def __init__(self, smoothing: float = 0.0):
        """
        初始化CPD学习器

        Args:
            smoothing: Laplace平滑参数，默认0（不平滑，最大似然）
        """
        if smoothing < 0:
            raise ValueError(f"smoothing 不能为负数: {smoothing}")
        self.smoothing = smoothing

    def learn_node(self, network, node: int, dataset: Dataset) -> CPD:
        """
        学习单个节点的CPD并写回网络

        Args:
            network: BayesianNetwork
            node: 节点ID
            dataset: 数据集

        Returns:
            CPD
        """
        attribute = network.attribute(node)
        parents = [network.attribute(p) for p in network.get_parents(node)]
        cpd = CPD.build(attribute, parents, dataset, self.smoothing)
        network.node(node).cpd = cpd
        logger.debug(f"节点 {attribute.name} 的CPD已学习，父节点: {[p.name for p in parents]}")
        return cpd

    def learn_cpds(self, network, dataset: Dataset) -> Dict[int, CPD]:
        """
        从数据中学习所有CPD

        Args:
            network: BayesianNetwork
            dataset: 数据集

        Returns:
            节点ID -> CPD
        """
        cpds = {}
        for node in network.node_ids:
            cpds[node] = self.learn_node(network, node, dataset)
        logger.info(f"CPD学习完成，共学习 {len(cpds)} 个节点的CPD")
        return cpds
