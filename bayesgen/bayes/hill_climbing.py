#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
爬山法结构搜索
在DAG空间上做贪心局部搜索，算子为加边、删边、反转边
"""
import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Iterator, List, Mapping, Optional, Set

from bayesgen.bayes.cpds import CPDLearner
from bayesgen.bayes.errors import InvalidStructureError
from bayesgen.bayes.scoring import BICScorer
from bayesgen.bayes.structure import BayesianNetwork
from bayesgen.utils.logging import setup_logger

logger = setup_logger("hill_climbing")

# 评分提升不超过该值视为没有提升
MIN_IMPROVEMENT = 1e-9


class OperatorKind(IntEnum):
    """算子类型，数值即枚举顺序"""
    ADD = 0
    REMOVE = 1
    REVERSE = 2


def _difference(new: float, old: float) -> float:
    if new == old:
        return 0.0
    return new - old


@dataclass(frozen=True)
class Operator:
    """
    作用于单条边的结构算子

    Attributes:
        kind: 算子类型
        parent: 边的父节点ID
        child: 边的子节点ID（反转时指原来的子节点）
    """
    kind: OperatorKind
    parent: int
    child: int

    def is_legal(
        self,
        network: BayesianNetwork,
        candidates: Optional[Mapping[int, Set[int]]] = None
    ) -> bool:
        """
        应用后仍为DAG、不超过父节点数上限，且新父节点在候选集合内
        """
        if self.kind == OperatorKind.ADD:
            if candidates is not None and self.parent not in candidates.get(self.child, ()):
                return False
            return network.can_add_edge(self.parent, self.child)
        if self.kind == OperatorKind.REMOVE:
            return network.can_remove_edge(self.parent, self.child)
        if candidates is not None and self.child not in candidates.get(self.parent, ()):
            return False
        return network.can_reverse_edge(self.parent, self.child)

    def delta(self, network: BayesianNetwork, scorer: BICScorer) -> float:
        """
        应用算子带来的评分变化

        只重新评分受影响的节点，父节点集合在副本上修改
        """
        child_parents = set(network.get_parents(self.child))
        old_child = scorer.local_score(self.child, child_parents)

        if self.kind == OperatorKind.ADD:
            return _difference(scorer.local_score(self.child, child_parents | {self.parent}), old_child)
        if self.kind == OperatorKind.REMOVE:
            return _difference(scorer.local_score(self.child, child_parents - {self.parent}), old_child)

        parent_parents = set(network.get_parents(self.parent))
        old = old_child + scorer.local_score(self.parent, parent_parents)
        new = (scorer.local_score(self.child, child_parents - {self.parent})
               + scorer.local_score(self.parent, parent_parents | {self.child}))
        return _difference(new, old)

    def apply(self, network: BayesianNetwork) -> None:
        """提交到网络，网络会再次检查合法性"""
        if self.kind == OperatorKind.ADD:
            network.add_edge(self.parent, self.child)
        elif self.kind == OperatorKind.REMOVE:
            network.remove_edge(self.parent, self.child)
        elif self.kind == OperatorKind.REVERSE:
            network.reverse_edge(self.parent, self.child)
        else:
            raise InvalidStructureError(f"未知的算子: {self.kind}")

    def describe(self, network: BayesianNetwork) -> str:
        parent = network.attribute(self.parent).name
        child = network.attribute(self.child).name
        return f"{self.kind.name} {parent} -> {child}"


StepCallback = Callable[[int, Operator, float], None]


class HillClimber:
    """
    爬山搜索

    每轮枚举所有合法的单边算子，选择评分严格提升最大的一个；
    没有严格提升时停在局部最优
    """

    def __init__(
        self,
        scorer: BICScorer,
        max_parents: Optional[int] = None,
        max_iterations: Optional[int] = None,
        candidates: Optional[Mapping[int, Set[int]]] = None,
        on_step: Optional[StepCallback] = None
    ):
        """
        初始化爬山搜索

        Args:
            scorer: BIC评分器（绑定数据集）
            max_parents: 父节点数上限
            max_iterations: 最大迭代次数，None表示直到局部最优
            candidates: 每个节点允许的候选父节点，None表示不限制
            on_step: 每次接受算子后的回调 (迭代次数, 算子, 新评分)
        """
        self.scorer = scorer
        self.max_parents = max_parents
        self.max_iterations = max_iterations
        self.candidates = candidates
        self.on_step = on_step

        self.score_history: List[float] = []
        self.steps: List[Operator] = []

    def enumerate_operators(self, network: BayesianNetwork) -> Iterator[Operator]:
        """
        固定顺序枚举算子：子节点ID升序；同一子节点先加边（父节点ID升序），
        再删边、反转边（现有父节点ID升序）
        """
        node_ids = network.node_ids
        for child in node_ids:
            parents = network.get_parents(child)
            for parent in node_ids:
                if parent != child and parent not in parents:
                    yield Operator(OperatorKind.ADD, parent, child)
            for parent in parents:
                yield Operator(OperatorKind.REMOVE, parent, child)
            for parent in parents:
                yield Operator(OperatorKind.REVERSE, parent, child)

    def best_operator(self, network: BayesianNetwork) -> Optional[Operator]:
        """评分提升最大的合法算子，平局取先枚举到的；没有严格提升时返回None"""
        best, best_delta = None, MIN_IMPROVEMENT
        for operator in self.enumerate_operators(network):
            if not operator.is_legal(network, self.candidates):
                continue
            delta = operator.delta(network, self.scorer)
            if delta > best_delta:
                best, best_delta = operator, delta
        return best

    def search(
        self,
        initial: BayesianNetwork,
        learn_cpds: bool = True
    ) -> BayesianNetwork:
        """
        从初始结构出发搜索

        Args:
            initial: 初始网络（空网络或骨架），不会被修改
            learn_cpds: 结束后是否为所有节点学习CPD

        Returns:
            局部最优的网络
        """
        network = initial.copy()
        network.max_parents = self.max_parents

        current = self.scorer.network_score(network)
        self.score_history = [current]
        self.steps = []
        logger.info(f"开始爬山搜索: {len(network)} 个节点, 初始评分 {current:.4f}")

        iteration = 0
        while self.max_iterations is None or iteration < self.max_iterations:
            operator = self.best_operator(network)
            if operator is None:
                break

            iteration += 1
            operator.apply(network)
            current = self.scorer.network_score(network)
            self.score_history.append(current)
            self.steps.append(operator)
            logger.debug(f"第 {iteration} 步: {operator.describe(network)}, 评分 {current:.4f}")

            if self.on_step is not None:
                self.on_step(iteration, operator, current)

        if math.isfinite(current):
            logger.info(f"爬山搜索结束: {iteration} 步, {len(network.edges)} 条边, 评分 {current:.4f}")
        else:
            logger.warning(f"爬山搜索结束但评分为 {current}")

        if learn_cpds:
            CPDLearner(self.scorer.smoothing).learn_cpds(network, self.scorer.dataset)
        return network
