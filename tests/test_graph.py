#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
测试有向图基础算法
"""
import unittest
import networkx as nx

from bayesgen.bayes.errors import CyclicGraphError
from bayesgen.bayes.graph import has_cycle, topological_order, creates_cycle


class TestCycleDetection(unittest.TestCase):
    """测试环检测"""

    def test_three_node_cycle(self):
        """A->B->C->A 含环"""
        graph = nx.DiGraph([('A', 'B'), ('B', 'C'), ('C', 'A')])
        self.assertTrue(has_cycle(graph))

    def test_chain_is_acyclic(self):
        """A->B->C 无环，拓扑序为 [A, B, C]"""
        graph = nx.DiGraph([('A', 'B'), ('B', 'C')])
        self.assertFalse(has_cycle(graph))
        self.assertEqual(topological_order(graph), ['A', 'B', 'C'])

    def test_self_loop(self):
        """自环也是环"""
        graph = nx.DiGraph([(0, 0)])
        self.assertTrue(has_cycle(graph))

    def test_diamond_is_acyclic(self):
        """两条路径汇合不构成环"""
        graph = nx.DiGraph([(0, 1), (0, 2), (1, 3), (2, 3)])
        self.assertFalse(has_cycle(graph))

    def test_cycle_in_second_component(self):
        """环出现在后遍历到的连通分量中"""
        graph = nx.DiGraph([(0, 1), (2, 3), (3, 4), (4, 2)])
        self.assertTrue(has_cycle(graph))

    def test_empty_graph(self):
        """空图无环"""
        self.assertFalse(has_cycle(nx.DiGraph()))
        self.assertEqual(topological_order(nx.DiGraph()), [])


class TestTopologicalOrder(unittest.TestCase):
    """测试拓扑排序"""

    def test_cyclic_graph_raises(self):
        """含环的图抛出 CyclicGraphError"""
        graph = nx.DiGraph([(0, 1), (1, 0)])
        with self.assertRaises(CyclicGraphError):
            topological_order(graph)

    def test_parents_precede_children(self):
        """每条边的父节点都排在子节点之前"""
        edges = [(3, 1), (3, 0), (1, 2), (0, 2), (4, 2)]
        graph = nx.DiGraph(edges)
        order = topological_order(graph)
        position = {node: i for i, node in enumerate(order)}
        for parent, child in edges:
            self.assertLess(position[parent], position[child])

    def test_deterministic_tie_break(self):
        """相互独立的节点按编号从小到大"""
        graph = nx.DiGraph()
        graph.add_nodes_from([5, 2, 9, 0])
        self.assertEqual(topological_order(graph), [0, 2, 5, 9])
        self.assertEqual(topological_order(graph), topological_order(graph.copy()))

    def test_smallest_ready_node_first(self):
        """每一步在入度为0的节点中取最小的，而不是整体按编号排序"""
        graph = nx.DiGraph([(2, 0), (3, 1)])
        self.assertEqual(topological_order(graph), [2, 0, 3, 1])


class TestCreatesCycle(unittest.TestCase):
    """测试加边前的环预判"""

    def setUp(self):
        """准备测试数据"""
        self.graph = nx.DiGraph([(0, 1), (1, 2)])
        self.graph.add_node(3)

    def test_back_edge(self):
        """2->0 会闭合环"""
        self.assertTrue(creates_cycle(self.graph, 2, 0))

    def test_forward_edge(self):
        """0->2 不会形成环"""
        self.assertFalse(creates_cycle(self.graph, 0, 2))
        self.assertFalse(creates_cycle(self.graph, 3, 0))

    def test_long_path(self):
        """经过多步可达时同样判定为环"""
        graph = nx.DiGraph([(0, 1), (1, 2), (2, 3), (3, 4)])
        self.assertTrue(creates_cycle(graph, 4, 0))
        self.assertFalse(creates_cycle(graph, 0, 4))

    def test_self_edge(self):
        """自环总是非法"""
        self.assertTrue(creates_cycle(self.graph, 1, 1))


if __name__ == '__main__':
    unittest.main()
