#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
测试条件概率分布学习与查询
"""
import unittest
import numpy as np

from bayesgen.bayes.cpds import CPD, CPDLearner, Query
from bayesgen.bayes.errors import MissingAssignmentError
from bayesgen.bayes.structure import BayesianNetwork
from helpers import make_attribute, make_dataset, chain_dataset


class TestCPDBuild(unittest.TestCase):
    """测试CPD统计"""

    def setUp(self):
        """A 有三个取值，其中取值2从未出现"""
        self.dataset = make_dataset(
            {'A': [0, 0, 1, 1, 1], 'B': [0, 1, 1, 1, 0]},
            cardinalities={'A': 3, 'B': 2}
        )
        self.a = self.dataset.get_attribute_by_name('A')
        self.b = self.dataset.get_attribute_by_name('B')
        self.cpd = CPD.build(self.b, [self.a], self.dataset)

    def test_maximum_likelihood(self):
        """默认不平滑，按频率估计"""
        np.testing.assert_allclose(self.cpd.distribution((0,)), [0.5, 0.5])
        np.testing.assert_allclose(self.cpd.distribution((1,)), [1 / 3, 2 / 3])

    def test_query(self):
        """点查询 P(B=1 | A=1)"""
        self.assertAlmostEqual(self.cpd.query({0: 1, 1: 1}), 2 / 3)
        self.assertAlmostEqual(self.cpd.query(Query([(1, 0), (0, 0)])), 0.5)

    def test_unseen_assignment(self):
        """未见过的父节点取值抛出 MissingAssignmentError"""
        with self.assertRaises(MissingAssignmentError):
            self.cpd.query({0: 2, 1: 0})
        self.assertEqual(self.cpd.assignments(), [(0,), (1,)])

    def test_missing_parent_in_query(self):
        """查询缺少父节点取值"""
        with self.assertRaises(MissingAssignmentError):
            self.cpd.query({1: 0})
        with self.assertRaises(KeyError):
            self.cpd.query({0: 0})

    def test_prior(self):
        """无父节点时为先验分布"""
        prior = CPD.build(self.a, [], self.dataset)
        np.testing.assert_allclose(prior.distribution(()), [0.4, 0.6, 0.0])
        self.assertAlmostEqual(prior.query({0: 2}), 0.0)

    def test_laplace_smoothing(self):
        """平滑只作用于出现过的父节点取值组合"""
        cpd = CPD.build(self.b, [self.a], self.dataset, smoothing=1.0)
        np.testing.assert_allclose(cpd.distribution((1,)), [0.4, 0.6])
        self.assertFalse(cpd.has_assignment((2,)))

    def test_counts(self):
        """计数表"""
        np.testing.assert_array_equal(self.cpd.counts((1,)), [1, 2])
        np.testing.assert_array_equal(self.cpd.counts((2,)), [0, 0])

    def test_missing_values_skipped(self):
        """缺失值所在的实例不参与统计"""
        dataset = make_dataset({'A': [0, 0, np.nan, 1], 'B': [0, np.nan, 1, 1]})
        cpd = CPD.build(dataset.get_attribute_by_name('B'), [dataset.get_attribute_by_name('A')], dataset)
        np.testing.assert_allclose(cpd.distribution((0,)), [1.0, 0.0])
        np.testing.assert_allclose(cpd.distribution((1,)), [0.0, 1.0])

    def test_parent_order_insensitive(self):
        """父节点按ID排序，查询与构造时的顺序无关"""
        dataset = chain_dataset(n=200)
        a, b, c = (dataset.get_attribute_by_id(i) for i in range(3))
        first = CPD.build(b, [c, a], dataset)
        second = CPD.build(b, [a, c], dataset)
        self.assertEqual(first.parent_ids, [0, 2])
        for key in first.assignments():
            np.testing.assert_allclose(first.distribution(key), second.distribution(key))


class TestCPDNormalization(unittest.TestCase):
    """测试概率归一化"""

    def test_every_assignment_sums_to_one(self):
        """每个父节点取值组合下概率和为1"""
        dataset = chain_dataset(n=500, seed=3)
        attributes = dataset.attributes
        for smoothing in (0.0, 0.5):
            cpd = CPD.build(attributes[3], attributes[:3], dataset, smoothing)
            self.assertTrue(cpd.is_normalized())
            for key in cpd.assignments():
                self.assertAlmostEqual(cpd.distribution(key).sum(), 1.0, delta=1e-6)

    def test_from_probabilities_validates(self):
        """手工给定的概率表必须归一化"""
        attribute = make_attribute(0, 'A', 2)
        with self.assertRaises(ValueError):
            CPD.from_probabilities(attribute, [], {(): [0.3, 0.6]})
        with self.assertRaises(ValueError):
            CPD.from_probabilities(attribute, [], {(): [1.0]})
        cpd = CPD.from_probabilities(attribute, [], {(): [0.3, 0.7]})
        self.assertAlmostEqual(cpd.query({0: 0}), 0.3)

    def test_to_frame(self):
        """导出为DataFrame"""
        dataset = make_dataset({'A': [0, 1, 1], 'B': [1, 1, 0]})
        a, b = dataset.attributes
        frame = CPD.build(b, [a], dataset).to_frame()
        self.assertEqual(list(frame.columns), ['0', '1'])
        self.assertEqual(len(frame), 2)


class TestQuery(unittest.TestCase):
    """测试查询对象"""

    def test_unique_attributes(self):
        """同一属性不能出现两次"""
        query = Query([(0, 1)])
        with self.assertRaises(ValueError):
            query.add(0, 0)
        self.assertEqual(query.as_dict(), {0: 1})


class TestCPDLearner(unittest.TestCase):
    """测试按网络结构学习全部CPD"""

    def test_learn_cpds(self):
        """每个节点都得到与父节点一致的CPD"""
        dataset = chain_dataset(n=300)
        network = BayesianNetwork.from_dataset(dataset, edges=[(0, 1), (1, 2)])
        cpds = CPDLearner().learn_cpds(network, dataset)
        self.assertEqual(sorted(cpds), [0, 1, 2, 3])
        self.assertEqual(network.node(2).cpd.parent_ids, [1])
        self.assertEqual(network.node(0).cpd.parent_ids, [])

    def test_structure_change_invalidates_cpd(self):
        """父节点变化后CPD被清空"""
        dataset = chain_dataset(n=100)
        network = BayesianNetwork.from_dataset(dataset)
        CPDLearner().learn_cpds(network, dataset)
        network.add_edge(0, 1)
        self.assertIsNone(network.node(1).cpd)
        self.assertIsNotNone(network.node(0).cpd)

    def test_negative_smoothing(self):
        """平滑参数不能为负"""
        with self.assertRaises(ValueError):
            CPDLearner(smoothing=-1)


if __name__ == '__main__':
    unittest.main()
