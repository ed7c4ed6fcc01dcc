#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
对外接口
结构学习、评分与数据生成的入口函数
"""
from typing import Dict, Any, Optional, Union

from bayesgen.bayes.generator import DataGenerator
from bayesgen.bayes.hill_climbing import HillClimber, StepCallback
from bayesgen.bayes.scoring import BICScorer
from bayesgen.bayes.sparse_candidate import SparseCandidateSearch
from bayesgen.bayes.structure import BayesianNetwork
from bayesgen.bayes.tan import TANBuilder
from bayesgen.data.dataset import Dataset
from bayesgen.utils.config import LearnerConfig

ConfigLike = Union[LearnerConfig, Dict[str, Any], None]


def _as_config(config: ConfigLike) -> LearnerConfig:
    if isinstance(config, LearnerConfig):
        return config
    return LearnerConfig.from_dict(config)


def learn_hill_climbing(
    dataset: Dataset,
    config: ConfigLike = None,
    initial: Optional[BayesianNetwork] = None,
    on_step: Optional[StepCallback] = None
) -> BayesianNetwork:
    """
    爬山法学习网络结构和参数

    Args:
        dataset: 离散数据集
        config: LearnerConfig 或配置字典
        initial: 初始骨架，None时从空网络开始
        on_step: 每一步的进度回调

    Returns:
        学到的网络
    """
    config = _as_config(config)
    dataset.require_nominal()
    scorer = BICScorer(dataset, config.smoothing)
    climber = HillClimber(
        scorer,
        max_parents=config.max_parents,
        max_iterations=config.max_iterations,
        on_step=on_step
    )
    start = initial if initial is not None else BayesianNetwork.from_dataset(dataset)
    return climber.search(start)


def learn_sparse_candidate(
    dataset: Dataset,
    config: ConfigLike = None,
    on_step: Optional[StepCallback] = None
) -> BayesianNetwork:
    """
    Sparse Candidate 学习网络结构和参数
    """
    config = _as_config(config)
    dataset.require_nominal()
    search = SparseCandidateSearch(
        BICScorer(dataset, config.smoothing),
        candidate_set_size=config.candidate_set_size,
        max_rounds=config.max_rounds,
        max_parents=config.max_parents,
        max_iterations=config.max_iterations,
        on_step=on_step
    )
    return search.search()


def learn_tan(
    dataset: Dataset,
    class_attribute: Optional[Union[int, str]] = None,
    config: ConfigLike = None
) -> BayesianNetwork:
    """
    构建TAN网络

    Args:
        dataset: 离散数据集
        class_attribute: 类别属性ID或属性名，None时使用数据集的类别属性
        config: 配置（只用到 smoothing）
    """
    config = _as_config(config)
    if isinstance(class_attribute, str):
        class_attribute = dataset.get_attribute_by_name(class_attribute).id
    return TANBuilder(config.smoothing).build(dataset, class_attribute)


def generate(
    network: BayesianNetwork,
    count: int,
    seed: Optional[int] = None,
    unseen_policy: str = 'uniform',
    show_progress: bool = False
) -> Dataset:
    """
    从网络生成合成数据

    Args:
        network: 已学习CPD的网络
        count: 实例数
        seed: 随机种子
        unseen_policy: 未见过的父节点取值组合的处理方式 ('uniform' / 'raise')
        show_progress: 是否显示进度条
    """
    return DataGenerator(network, unseen_policy).generate(count, seed, show_progress)


def score(network: BayesianNetwork, dataset: Dataset, smoothing: float = 0.0) -> float:
    """网络结构在数据集上的BIC评分"""
    return BICScorer(dataset, smoothing).network_score(network)
