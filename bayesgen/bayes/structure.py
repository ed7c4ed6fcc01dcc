#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
贝叶斯网络DAG结构定义
节点按属性ID存放，父节点集合以ID记录，所有结构修改都先做合法性检查
"""
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple, TYPE_CHECKING

import networkx as nx

from bayesgen.bayes.errors import InvalidStructureError
from bayesgen.bayes.graph import creates_cycle, has_cycle, topological_order
from bayesgen.data.dataset import Attribute, Dataset
from bayesgen.utils.logging import setup_logger

if TYPE_CHECKING:
    from bayesgen.bayes.cpds import CPD

logger = setup_logger("bayes_structure")

Edge = Tuple[int, int]


@dataclass
class Node:
    """
    网络节点

    Attributes:
        attribute: 节点对应的属性
        parents: 父节点ID（升序）
        cpd: 当前父节点集合下的条件概率表，父节点变化后置为None
    """
    attribute: Attribute
    parents: Tuple[int, ...] = ()
    cpd: Optional['CPD'] = None

    @property
    def id(self) -> int:
        return self.attribute.id


class BayesianNetwork:
    """
    贝叶斯网络DAG结构

    定义变量之间的父子关系，保证任何时刻都是有向无环图
    """

    def __init__(
        self,
        attributes: Sequence[Attribute],
        class_attribute: Optional[int] = None,
        max_parents: Optional[int] = None
    ):
        """
        初始化网络结构（无边）

        Args:
            attributes: 属性列表
            class_attribute: 类别属性ID
            max_parents: 每个节点的父节点数上限，None表示不限制
        """
        self.graph = nx.DiGraph()
        self.nodes: Dict[int, Node] = {}
        for attribute in attributes:
            if attribute.id in self.nodes:
                raise ValueError(f"属性ID重复: {attribute.id}")
            self.nodes[attribute.id] = Node(attribute)
            self.graph.add_node(attribute.id)
        if class_attribute is not None and class_attribute not in self.nodes:
            raise KeyError(f"类别属性 {class_attribute} 不在网络中")
        self.class_attribute = class_attribute
        self.max_parents = max_parents
        logger.debug(f"初始化贝叶斯网络结构: {len(self.nodes)} 个节点")

    @classmethod
    def from_dataset(
        cls,
        dataset: Dataset,
        edges: Iterable[Edge] = (),
        max_parents: Optional[int] = None
    ) -> 'BayesianNetwork':
        """
        按数据集的属性构造网络，可带初始骨架

        Args:
            dataset: 数据集
            edges: 初始边 (父节点ID, 子节点ID)
            max_parents: 父节点数上限

        Returns:
            BayesianNetwork
        """
        network = cls(dataset.attributes, dataset.class_attribute_id, max_parents)
        for parent, child in edges:
            network.add_edge(parent, child)
        return network

    # ============ 查询 ============

    @property
    def node_ids(self) -> List[int]:
        return sorted(self.nodes)

    @property
    def attributes(self) -> List[Attribute]:
        return [self.nodes[i].attribute for i in self.node_ids]

    def attribute(self, node: int) -> Attribute:
        return self.nodes[node].attribute

    def node(self, node: int) -> Node:
        return self.nodes[node]

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self):
        return (self.nodes[i] for i in self.node_ids)

    @property
    def edges(self) -> List[Edge]:
        """所有边，按 (子节点, 父节点) 升序"""
        return sorted(self.graph.edges, key=lambda e: (e[1], e[0]))

    def edge_set(self) -> FrozenSet[Edge]:
        return frozenset(self.graph.edges)

    def has_edge(self, parent: int, child: int) -> bool:
        return self.graph.has_edge(parent, child)

    def get_parents(self, node: int) -> List[int]:
        """
        获取节点的父节点

        Args:
            node: 节点ID

        Returns:
            父节点ID列表（升序）
        """
        return list(self.nodes[node].parents)

    def get_children(self, node: int) -> List[int]:
        """
        获取节点的子节点

        Args:
            node: 节点ID

        Returns:
            子节点ID列表（升序）
        """
        return sorted(self.graph.successors(node))

    def get_markov_blanket(self, node: int) -> List[int]:
        """
        获取Markov Blanket

        包含：父节点、子节点、子节点的其他父节点

        Args:
            node: 节点ID

        Returns:
            Markov Blanket节点ID列表（升序）
        """
        markov_blanket = set(self.get_parents(node))

        children = self.get_children(node)
        markov_blanket.update(children)
        for child in children:
            markov_blanket.update(self.get_parents(child))

        markov_blanket.discard(node)
        return sorted(markov_blanket)

    def is_acyclic(self) -> bool:
        """检查是否为有向无环图"""
        return not has_cycle(self.graph)

    def get_topological_order(self) -> List[int]:
        """获取拓扑排序，含环时抛出 CyclicGraphError"""
        return topological_order(self.graph)

    # ============ 合法性检查 ============

    def _check_nodes(self, parent: int, child: int) -> bool:
        return parent in self.nodes and child in self.nodes and parent != child

    def _under_cap(self, node: int, extra: int = 1) -> bool:
        if self.max_parents is None:
            return True
        return len(self.nodes[node].parents) + extra <= self.max_parents

    def can_add_edge(self, parent: int, child: int) -> bool:
        """添加 parent -> child 后仍无环且不超过父节点数上限"""
        if not self._check_nodes(parent, child) or self.graph.has_edge(parent, child):
            return False
        if not self._under_cap(child):
            return False
        return not creates_cycle(self.graph, parent, child)

    def can_remove_edge(self, parent: int, child: int) -> bool:
        return self.graph.has_edge(parent, child)

    def can_reverse_edge(self, parent: int, child: int) -> bool:
        """把 parent -> child 反转为 child -> parent 后仍然合法"""
        if not self.graph.has_edge(parent, child):
            return False
        if not self._under_cap(parent):
            return False
        # 去掉原边后 parent 不能再到达 child
        without_edge = nx.restricted_view(self.graph, [], [(parent, child)])
        return not creates_cycle(without_edge, child, parent)

    # ============ 结构修改 ============

    def _sync_parents(self, node: int) -> None:
        self.nodes[node].parents = tuple(sorted(self.graph.predecessors(node)))
        self.nodes[node].cpd = None

    def add_edge(self, parent: int, child: int) -> None:
        """
        添加有向边

        Args:
            parent: 父节点ID
            child: 子节点ID

        Raises:
            InvalidStructureError: 添加后出现环或超过父节点数上限
        """
        if not self.can_add_edge(parent, child):
            raise InvalidStructureError(f"非法的加边操作: {parent} -> {child}")
        self.graph.add_edge(parent, child)
        self._sync_parents(child)
        logger.debug(f"添加边: {parent} -> {child}")

    def remove_edge(self, parent: int, child: int) -> None:
        """删除有向边"""
        if not self.can_remove_edge(parent, child):
            raise InvalidStructureError(f"边不存在: {parent} -> {child}")
        self.graph.remove_edge(parent, child)
        self._sync_parents(child)
        logger.debug(f"删除边: {parent} -> {child}")

    def reverse_edge(self, parent: int, child: int) -> None:
        """把 parent -> child 反转为 child -> parent"""
        if not self.can_reverse_edge(parent, child):
            raise InvalidStructureError(f"非法的反转操作: {parent} -> {child}")
        self.graph.remove_edge(parent, child)
        self.graph.add_edge(child, parent)
        self._sync_parents(child)
        self._sync_parents(parent)
        logger.debug(f"反转边: {parent} -> {child} 变为 {child} -> {parent}")

    def copy(self) -> 'BayesianNetwork':
        """复制结构（CPD对象共享，结构修改时会被置空）"""
        clone = BayesianNetwork(self.attributes, self.class_attribute, self.max_parents)
        clone.graph.add_edges_from(self.graph.edges)
        for node_id, node in self.nodes.items():
            clone.nodes[node_id].parents = node.parents
            clone.nodes[node_id].cpd = node.cpd
        return clone

    # ============ 导出 ============

    def export_structure(self) -> Dict:
        """
        导出网络结构

        Returns:
            结构字典（使用属性名）
        """
        name = {i: n.attribute.name for i, n in self.nodes.items()}
        acyclic = self.is_acyclic()
        return {
            'nodes': [name[i] for i in self.node_ids],
            'edges': [[name[p], name[c]] for p, c in self.edges],
            'class_attribute': name.get(self.class_attribute),
            'is_acyclic': acyclic,
            'topological_order': [name[i] for i in self.get_topological_order()] if acyclic else None
        }

    def __repr__(self) -> str:
        return f"BayesianNetwork(nodes={len(self.nodes)}, edges={self.graph.number_of_edges()})"
