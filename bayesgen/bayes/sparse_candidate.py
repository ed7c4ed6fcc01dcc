#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Sparse Candidate 结构搜索
先按互信息为每个节点限定候选父节点，再在受限空间内爬山，反复迭代直到结构稳定
"""
from typing import Callable, Dict, List, Optional, Set

from bayesgen.bayes.cpds import CPDLearner
from bayesgen.bayes.hill_climbing import HillClimber, StepCallback
from bayesgen.bayes.information import pairwise_mutual_information
from bayesgen.bayes.scoring import BICScorer
from bayesgen.bayes.structure import BayesianNetwork
from bayesgen.utils.logging import setup_logger

logger = setup_logger("sparse_candidate")

RoundCallback = Callable[[int, BayesianNetwork, float], None]


class SparseCandidateSearch:
    """
    Sparse Candidate 搜索

    Restrict: 对每个节点按与其它属性的互信息排序，保留前k个作为候选父节点；
              当前父节点始终保留，互信息相同时ID小的优先
    Maximize: 用候选集合限制爬山搜索的加边/反转算子
    """

    def __init__(
        self,
        scorer: BICScorer,
        candidate_set_size: int = 5,
        max_rounds: int = 10,
        max_parents: Optional[int] = None,
        max_iterations: Optional[int] = None,
        on_step: Optional[StepCallback] = None,
        on_round: Optional[RoundCallback] = None
    ):
        """
        初始化

        Args:
            scorer: BIC评分器
            candidate_set_size: 每个节点的候选父节点个数 k
            max_rounds: 最大轮数
            max_parents: 父节点数上限
            max_iterations: 每轮爬山的最大迭代次数
            on_step: 爬山每一步的回调
            on_round: 每轮结束的回调 (轮次, 网络, 评分)
        """
        if candidate_set_size < 1:
            raise ValueError(f"candidate_set_size 必须 >= 1: {candidate_set_size}")
        if max_rounds < 1:
            raise ValueError(f"max_rounds 必须 >= 1: {max_rounds}")
        self.scorer = scorer
        self.candidate_set_size = candidate_set_size
        self.max_rounds = max_rounds
        self.max_parents = max_parents
        self.max_iterations = max_iterations
        self.on_step = on_step
        self.on_round = on_round

        self._pairwise = None
        self.rounds = 0
        self.converged = False
        self.candidate_history: List[Dict[int, Set[int]]] = []

    def _relevance(self, network: BayesianNetwork, node: int, other: int) -> float:
        """两个属性的互信息，整个搜索只计算一次"""
        if self._pairwise is None:
            self._pairwise = pairwise_mutual_information(self.scorer.dataset, network.node_ids)
        return self._pairwise[frozenset((node, other))]

    def restrict(self, network: BayesianNetwork) -> Dict[int, Set[int]]:
        """
        为每个节点选出候选父节点

        Returns:
            节点ID -> 候选父节点ID集合
        """
        candidates = {}
        for node in network.node_ids:
            parents = network.get_parents(node)
            chosen = set(parents)
            others = [o for o in network.node_ids if o != node and o not in chosen]
            ranked = sorted(others, key=lambda o: (-self._relevance(network, node, o), o))
            for other in ranked:
                if len(chosen) >= self.candidate_set_size:
                    break
                chosen.add(other)
            candidates[node] = chosen
        return candidates

    def search(
        self,
        initial: Optional[BayesianNetwork] = None,
        learn_cpds: bool = True
    ) -> BayesianNetwork:
        """
        迭代 Restrict/Maximize 直到结构不变或达到最大轮数

        Args:
            initial: 初始网络，None时从空网络开始
            learn_cpds: 结束后是否学习CPD

        Returns:
            学到的网络
        """
        dataset = self.scorer.dataset
        network = initial.copy() if initial is not None else BayesianNetwork.from_dataset(dataset)
        self.rounds = 0
        self.converged = False
        self.candidate_history = []

        logger.info(f"开始Sparse Candidate搜索: k={self.candidate_set_size}, 最多 {self.max_rounds} 轮")

        for round_index in range(1, self.max_rounds + 1):
            candidates = self.restrict(network)
            self.candidate_history.append(candidates)

            climber = HillClimber(
                self.scorer,
                max_parents=self.max_parents,
                max_iterations=self.max_iterations,
                candidates=candidates,
                on_step=self.on_step
            )
            learned = climber.search(network, learn_cpds=False)
            self.rounds = round_index
            score = climber.score_history[-1]
            logger.info(f"第 {round_index} 轮: {len(learned.edges)} 条边, 评分 {score:.4f}")

            if self.on_round is not None:
                self.on_round(round_index, learned, score)

            stable = learned.edge_set() == network.edge_set()
            network = learned
            if stable:
                self.converged = True
                break

        if self.converged:
            logger.info(f"结构在第 {self.rounds} 轮收敛")
        else:
            logger.info(f"达到最大轮数 {self.max_rounds}，停止搜索")

        if learn_cpds:
            CPDLearner(self.scorer.smoothing).learn_cpds(network, dataset)
        return network
