#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
数据模块
属性定义与整数编码的数据集
"""
from bayesgen.data.dataset import Attribute, AttributeType, Dataset

__all__ = [
    'Attribute',
    'AttributeType',
    'Dataset'
]
