#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
贝叶斯推断
基于已学习的CPD做联合概率、对数似然和类别后验查询
"""
from typing import Dict, Optional

import numpy as np
import pandas as pd

from bayesgen.bayes.errors import MissingAssignmentError
from bayesgen.bayes.scoring import score_cpd
from bayesgen.bayes.structure import BayesianNetwork
from bayesgen.data.dataset import Dataset
from bayesgen.utils.logging import setup_logger

logger = setup_logger("bayes_inference")


class BayesianInference:
    """
    贝叶斯推断器

    所有节点都必须已经学习了CPD
    """

    def __init__(self, network: BayesianNetwork):
        """
        初始化推断器

        Args:
            network: 已学习CPD的网络
        """
        missing = [n.attribute.name for n in network if n.cpd is None]
        if missing:
            raise ValueError(f"以下节点没有CPD: {missing}")
        self.network = network

    def joint_probability(self, instance: Dict[int, int]) -> float:
        """
        完整实例的联合概率 Π P(x_i | pa(x_i))

        Raises:
            MissingAssignmentError: 实例缺少某个属性，或父节点取值组合未见过
        """
        probability = 1.0
        for node in self.network:
            probability *= node.cpd.query(instance)
        return probability

    def log_likelihood(self, dataset: Dataset) -> float:
        """数据集的对数似然，出现未见过的组合或零概率时为 -inf"""
        return float(sum(score_cpd(node.cpd, dataset) for node in self.network))

    def _target(self, target_variable: Optional[int]) -> int:
        target = target_variable if target_variable is not None else self.network.class_attribute
        if target is None:
            raise ValueError("没有指定目标变量，网络也没有类别属性")
        return target

    def predict_proba(
        self,
        evidence: Dict[int, int],
        target_variable: Optional[int] = None
    ) -> np.ndarray:
        """
        目标变量的后验分布

        P(T | evidence) ∝ P(T | pa(T)) Π_{子节点} P(child | pa(child))，
        只用到Markov Blanket内的取值；取值缺失的因子跳过，未见过的组合按0计。
        目标自身的父节点不在证据中时不做边缘化，跳过 P(T | pa(T))，只用子节点的因子

        Args:
            evidence: 观测证据 属性ID -> 编码
            target_variable: 目标变量ID，默认类别属性

        Returns:
            目标变量各取值的概率，全部为0时返回均匀分布
        """
        target = self._target(target_variable)
        attribute = self.network.attribute(target)
        factors = [target] + self.network.get_children(target)

        scores = np.zeros(attribute.cardinality)
        for code in attribute.codes:
            assignment = dict(evidence)
            assignment[target] = code
            probability = 1.0
            for factor in factors:
                node = self.network.node(factor)
                needed = (factor,) + node.parents
                if any(n not in assignment for n in needed):
                    continue
                try:
                    probability *= node.cpd.query(assignment)
                except MissingAssignmentError:
                    probability = 0.0
                    break
            scores[code] = probability

        total = scores.sum()
        if total <= 0:
            return np.full(attribute.cardinality, 1.0 / attribute.cardinality)
        return scores / total

    def infer_posterior(
        self,
        dataset: Dataset,
        target_variable: Optional[int] = None
    ) -> pd.DataFrame:
        """
        逐条实例计算目标变量的后验概率

        Returns:
            每行一个实例，每列是目标变量的一个取值名
        """
        target = self._target(target_variable)
        attribute = self.network.attribute(target)
        logger.info(f"开始计算 {attribute.name} 的后验概率...")

        rows = [self.predict_proba(instance, target) for instance in dataset.instances()]
        posterior = pd.DataFrame(rows, columns=list(attribute.values))

        logger.info("后验概率计算完成")
        return posterior

    def predict(self, dataset: Dataset, target_variable: Optional[int] = None) -> np.ndarray:
        """后验概率最大的取值编码"""
        posterior = self.infer_posterior(dataset, target_variable)
        return posterior.to_numpy().argmax(axis=1)

    def explain_prediction(
        self,
        evidence: Dict[int, int],
        target_variable: Optional[int] = None
    ) -> Dict:
        """
        解释预测结果

        返回Markov Blanket和参与计算的证据
        """
        target = self._target(target_variable)
        markov_blanket = self.network.get_markov_blanket(target)
        prediction = self.predict_proba(evidence, target)

        return {
            'target_variable': target,
            'prediction': prediction.tolist(),
            'markov_blanket': markov_blanket,
            'relevant_evidence': {k: v for k, v in evidence.items() if k in markov_blanket},
            'parents': self.network.get_parents(target)
        }


def network_log_likelihood(network: BayesianNetwork, dataset: Dataset) -> float:
    """便捷函数：数据集在网络下的对数似然"""
    return BayesianInference(network).log_likelihood(dataset)
