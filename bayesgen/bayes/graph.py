#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
有向图基础算法
环检测与拓扑排序，结构搜索的每一步都依赖它保证DAG合法
"""
from typing import Hashable, List

import networkx as nx

from bayesgen.bayes.errors import CyclicGraphError

# 深度优先遍历的节点状态
_WHITE, _GREY, _BLACK = 0, 1, 2


def has_cycle(graph: nx.DiGraph) -> bool:
    """
    检查有向图是否含环

    迭代式深度优先遍历，记录当前递归栈上的节点（灰色），
    遇到指向灰色节点的回边即存在环。复杂度 O(V+E)

    Args:
        graph: 有向图

    Returns:
        含环返回True
    """
    color = {node: _WHITE for node in graph.nodes}

    for root in sorted(graph.nodes):
        if color[root] != _WHITE:
            continue

        color[root] = _GREY
        stack = [(root, iter(sorted(graph.successors(root))))]

        while stack:
            node, successors = stack[-1]
            advanced = False
            for succ in successors:
                if color[succ] == _GREY:
                    return True
                if color[succ] == _WHITE:
                    color[succ] = _GREY
                    stack.append((succ, iter(sorted(graph.successors(succ)))))
                    advanced = True
                    break
            if not advanced:
                color[node] = _BLACK
                stack.pop()

    return False


def topological_order(graph: nx.DiGraph) -> List[Hashable]:
    """
    拓扑排序

    入度为0的节点中总是先取最小的，保证同一输入结果固定

    Args:
        graph: 有向无环图

    Returns:
        节点列表，父节点总在子节点之前

    Raises:
        CyclicGraphError: 图中存在环
    """
    try:
        return list(nx.lexicographical_topological_sort(graph))
    except nx.NetworkXUnfeasible as e:
        raise CyclicGraphError("图中存在环，无法进行拓扑排序") from e


def creates_cycle(graph: nx.DiGraph, parent: Hashable, child: Hashable) -> bool:
    """
    添加边 parent -> child 后是否会形成环

    即 child 是否已经能到达 parent
    """
    if parent == child:
        return True
    if child not in graph or parent not in graph:
        return False
    return nx.has_path(graph, child, parent)
