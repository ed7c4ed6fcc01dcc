#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
最大生成树（Prim算法）
TAN 用它在条件互信息加权的完全图上选出树结构
"""
import heapq
from typing import Hashable, Optional

import networkx as nx

from bayesgen.bayes.errors import DisconnectedGraphError
from bayesgen.utils.logging import setup_logger

logger = setup_logger("spanning_tree")


def maximum_spanning_tree(
    graph: nx.Graph,
    weight: str = 'weight',
    start: Optional[Hashable] = None
) -> nx.Graph:
    """
    计算无向加权图的最大生成树

    从起点出发，每次加入连接树内节点与树外节点的权重最大的边。
    权重相同时优先选编号小的目标节点，其次是编号小的源节点，保证结果固定

    Args:
        graph: 无向加权图
        weight: 边权重的属性名，缺省权重为0
        start: 起点，默认取编号最小的节点

    Returns:
        生成树（含 |V|-1 条边，边上保留权重）

    Raises:
        DisconnectedGraphError: 图不连通
    """
    tree = nx.Graph()
    if graph.number_of_nodes() == 0:
        return tree

    if start is None:
        start = min(graph.nodes)
    elif start not in graph:
        raise KeyError(f"起点 {start} 不在图中")

    tree.add_node(start)
    # 堆元素: (-权重, 目标节点, 源节点)
    frontier = []

    def push_edges(source):
        for target, data in graph[source].items():
            if target not in tree:
                heapq.heappush(frontier, (-data.get(weight, 0.0), target, source))

    push_edges(start)
    while frontier and tree.number_of_nodes() < graph.number_of_nodes():
        neg_weight, target, source = heapq.heappop(frontier)
        if target in tree:
            continue
        tree.add_edge(source, target, **{weight: -neg_weight})
        push_edges(target)

    if tree.number_of_nodes() < graph.number_of_nodes():
        unreached = sorted(set(graph.nodes) - set(tree.nodes))
        raise DisconnectedGraphError(f"图不连通，无法到达的节点: {unreached}")

    logger.debug(
        f"最大生成树完成: {tree.number_of_edges()} 条边, "
        f"总权重 {tree.size(weight=weight):.6f}"
    )
    return tree
