#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
贝叶斯网络模块
包含DAG结构、CPD学习、结构搜索、TAN构建与数据生成等核心功能
"""
from bayesgen.bayes.errors import (
    BayesNetError,
    CyclicGraphError,
    DisconnectedGraphError,
    MissingAssignmentError,
    MissingParentValueError,
    InvalidStructureError
)
from bayesgen.bayes.graph import has_cycle, topological_order, creates_cycle
from bayesgen.bayes.spanning_tree import maximum_spanning_tree
from bayesgen.bayes.structure import BayesianNetwork, Node
from bayesgen.bayes.cpds import CPD, CPDLearner, Query
from bayesgen.bayes.scoring import BICScorer, bic_score, score_cpd
from bayesgen.bayes.hill_climbing import HillClimber, Operator, OperatorKind
from bayesgen.bayes.sparse_candidate import SparseCandidateSearch
from bayesgen.bayes.tan import TANBuilder
from bayesgen.bayes.generator import DataGenerator, generate_dataset
from bayesgen.bayes.inference import BayesianInference

__all__ = [
    'BayesNetError',
    'CyclicGraphError',
    'DisconnectedGraphError',
    'MissingAssignmentError',
    'MissingParentValueError',
    'InvalidStructureError',
    'has_cycle',
    'topological_order',
    'creates_cycle',
    'maximum_spanning_tree',
    'BayesianNetwork',
    'Node',
    'CPD',
    'CPDLearner',
    'Query',
    'BICScorer',
    'bic_score',
    'score_cpd',
    'HillClimber',
    'Operator',
    'OperatorKind',
    'SparseCandidateSearch',
    'TANBuilder',
    'DataGenerator',
    'generate_dataset',
    'BayesianInference'
]
