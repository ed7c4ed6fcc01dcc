#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
TAN（Tree-Augmented Naive Bayes）结构构建
以类别为条件的互信息加权完全图 -> 最大生成树 -> 定向 -> 类别作为所有节点的父节点
"""
from collections import deque
from itertools import combinations
from typing import Dict, FrozenSet, Optional

import networkx as nx

from bayesgen.bayes.cpds import CPDLearner
from bayesgen.bayes.information import conditional_mutual_information
from bayesgen.bayes.spanning_tree import maximum_spanning_tree
from bayesgen.bayes.structure import BayesianNetwork
from bayesgen.data.dataset import Dataset
from bayesgen.utils.logging import setup_logger

logger = setup_logger("tan_builder")


class TANBuilder:
    """
    TAN结构构建器

    结果中每个非类别节点有且只有一个树上的父节点（根节点除外）外加类别节点，
    类别节点没有父节点
    """

    def __init__(self, smoothing: float = 0.0, root: Optional[int] = None):
        """
        初始化

        Args:
            smoothing: CPD的平滑参数
            root: 树的根节点ID，默认取编号最小的非类别属性
        """
        self.smoothing = smoothing
        self.root = root
        self.weights: Dict[FrozenSet[int], float] = {}
        self.spanning_tree: Optional[nx.Graph] = None

    def build_weighted_graph(self, dataset: Dataset, class_id: int) -> nx.Graph:
        """
        非类别属性两两之间的条件互信息 I(X;Y|C) 构成的完全图
        """
        attributes = [a for a in dataset.attribute_ids if a != class_id]
        graph = nx.Graph()
        graph.add_nodes_from(attributes)
        self.weights = {}
        for x, y in combinations(attributes, 2):
            weight = conditional_mutual_information(dataset, x, y, class_id)
            self.weights[frozenset((x, y))] = weight
            graph.add_edge(x, y, weight=weight)
        return graph

    @staticmethod
    def orient(tree: nx.Graph, root: int) -> list:
        """
        从根节点出发做广度优先遍历，把树边定向为远离根的方向

        Returns:
            有向边列表 (父节点, 子节点)
        """
        edges = []
        visited = {root}
        queue = deque([root])
        while queue:
            node = queue.popleft()
            for neighbor in sorted(tree.neighbors(node)):
                if neighbor not in visited:
                    visited.add(neighbor)
                    edges.append((node, neighbor))
                    queue.append(neighbor)
        return edges

    def build(self, dataset: Dataset, class_attribute: Optional[int] = None) -> BayesianNetwork:
        """
        构建TAN网络并学习CPD

        Args:
            dataset: 数据集
            class_attribute: 类别属性ID，None时使用数据集指定的类别属性

        Returns:
            BayesianNetwork
        """
        dataset.require_nominal()
        class_id = class_attribute if class_attribute is not None else dataset.class_attribute_id
        if class_id is None:
            raise ValueError("构建TAN需要指定类别属性")
        if class_id not in dataset.attribute_ids:
            raise KeyError(f"类别属性 {class_id} 不在数据集中")

        logger.info(f"开始构建TAN: 类别属性 {dataset.get_attribute_by_id(class_id).name}")

        graph = self.build_weighted_graph(dataset, class_id)
        network = BayesianNetwork(dataset.attributes, class_id)

        if graph.number_of_nodes() > 0:
            root = self.root if self.root is not None else min(graph.nodes)
            if root not in graph:
                raise KeyError(f"根节点 {root} 不是非类别属性")
            self.spanning_tree = maximum_spanning_tree(graph, start=root)
            for parent, child in self.orient(self.spanning_tree, root):
                network.add_edge(parent, child)
        else:
            self.spanning_tree = nx.Graph()

        for node in graph.nodes:
            network.add_edge(class_id, node)

        logger.info(
            f"TAN构建完成: 树边 {self.spanning_tree.number_of_edges()} 条, "
            f"总边数 {len(network.edges)}"
        )

        CPDLearner(self.smoothing).learn_cpds(network, dataset)
        return network
