#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
测试BIC评分
"""
import math
import unittest

from bayesgen.bayes.cpds import CPD
from bayesgen.bayes.information import pairwise_mutual_information
from bayesgen.bayes.scoring import BICScorer, bic_score, free_parameters, score_cpd
from bayesgen.bayes.structure import BayesianNetwork
from helpers import make_attribute, make_dataset, chain_dataset


class TestBICScore(unittest.TestCase):
    """测试局部评分"""

    def test_prior_score_by_hand(self):
        """无父节点时与手工计算一致"""
        dataset = make_dataset({'A': [0, 0, 0, 1]})
        expected = 3 * math.log(0.75) + math.log(0.25) - 0.5 * math.log(4) * 1
        self.assertAlmostEqual(bic_score(dataset, 0, []), expected)

    def test_conditional_score_by_hand(self):
        """有父节点时与手工计算一致"""
        dataset = make_dataset({'A': [0, 0, 1, 1], 'B': [0, 0, 1, 0]})
        log_likelihood = 2 * math.log(1.0) + 2 * math.log(0.5)
        penalty = 0.5 * math.log(4) * (2 - 1) * 2
        self.assertAlmostEqual(bic_score(dataset, 1, [0]), log_likelihood - penalty)

    def test_free_parameters(self):
        """(|节点| - 1) * Π |父节点|"""
        node = make_attribute(0, 'X', 3)
        parents = [make_attribute(1, 'P', 2), make_attribute(2, 'Q', 4)]
        self.assertEqual(free_parameters(node, parents), 16)
        self.assertEqual(free_parameters(node, []), 2)

    def test_zero_probability_is_negative_infinity(self):
        """概率为0的实例使对数似然为 -inf，不做截断"""
        attribute = make_attribute(0, 'A', 2)
        cpd = CPD.from_probabilities(attribute, [], {(): [1.0, 0.0]})
        dataset = make_dataset({'A': [0, 1, 0]})
        self.assertEqual(score_cpd(cpd, dataset), -math.inf)

    def test_unseen_assignment_is_negative_infinity(self):
        """外部数据出现CPD中没有的父节点组合时为 -inf"""
        train = make_dataset({'A': [0, 0], 'B': [0, 1]}, cardinalities={'A': 2, 'B': 2})
        test = make_dataset({'A': [1], 'B': [0]}, cardinalities={'A': 2, 'B': 2})
        a, b = train.attributes
        cpd = CPD.build(b, [a], train)
        self.assertEqual(score_cpd(cpd, test), -math.inf)


class TestNetworkScore(unittest.TestCase):
    """测试网络评分"""

    def setUp(self):
        """准备测试数据"""
        self.dataset = chain_dataset(n=800, seed=1)
        self.scorer = BICScorer(self.dataset)

    def test_decomposes_per_node(self):
        """网络评分等于各节点局部评分之和"""
        network = BayesianNetwork.from_dataset(self.dataset, edges=[(0, 1), (1, 2)])
        expected = sum(bic_score(self.dataset, n, network.get_parents(n)) for n in network.node_ids)
        self.assertAlmostEqual(self.scorer.network_score(network), expected)

    def test_cache(self):
        """同一 (节点, 父节点集合) 只计算一次"""
        self.scorer.local_score(1, [0])
        self.scorer.local_score(1, (0,))
        self.assertEqual(self.scorer.cache_size, 1)

    def test_adding_strongest_edge_improves_score(self):
        """空网络加上互信息最大的边后评分严格提升"""
        empty = BayesianNetwork.from_dataset(self.dataset)
        pairwise = pairwise_mutual_information(self.dataset, self.dataset.attribute_ids)
        parent, child = sorted(max(pairwise, key=pairwise.get))

        with_edge = empty.copy()
        with_edge.add_edge(parent, child)
        self.assertGreater(self.scorer.network_score(with_edge), self.scorer.network_score(empty))

    def test_irrelevant_edge_is_penalized(self):
        """独立属性之间的边被复杂度惩罚压低"""
        empty = BayesianNetwork.from_dataset(self.dataset)
        with_edge = BayesianNetwork.from_dataset(self.dataset, edges=[(3, 0)])
        self.assertLess(self.scorer.network_score(with_edge), self.scorer.network_score(empty))


if __name__ == '__main__':
    unittest.main()
