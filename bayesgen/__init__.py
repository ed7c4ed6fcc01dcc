#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
bayesgen
离散贝叶斯网络结构学习与合成数据生成
"""
from bayesgen.api import (
    learn_hill_climbing,
    learn_sparse_candidate,
    learn_tan,
    generate,
    score
)

__version__ = '0.1.0'

__all__ = [
    'learn_hill_climbing',
    'learn_sparse_candidate',
    'learn_tan',
    'generate',
    'score'
]
