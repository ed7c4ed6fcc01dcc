#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
测试用数据构造
"""
import numpy as np
import pandas as pd

from bayesgen.data.dataset import Attribute, Dataset


def make_attribute(attribute_id, name, cardinality):
    return Attribute(attribute_id, name, values=tuple(str(v) for v in range(cardinality)))


def make_dataset(columns, cardinalities=None, class_name=None):
    """
    按 {属性名: 编码数组} 构造数据集，属性ID按字典顺序从0开始
    """
    attributes = []
    frame = {}
    for attribute_id, (name, values) in enumerate(columns.items()):
        values = np.asarray(values, dtype=float)
        if cardinalities and name in cardinalities:
            cardinality = cardinalities[name]
        else:
            cardinality = int(np.nanmax(values)) + 1
        attributes.append(make_attribute(attribute_id, name, cardinality))
        frame[attribute_id] = values
    dataset = Dataset(attributes, pd.DataFrame(frame))
    if class_name is not None:
        dataset.set_class_attribute(class_name)
    return dataset


def flip(rng, values, noise):
    """以概率 noise 翻转二值编码"""
    return np.where(rng.random(len(values)) < noise, 1 - values, values)


def chain_dataset(n=1000, seed=0, noise=0.1):
    """
    A -> B -> C 的二值链，外加一个独立的三值属性 D
    """
    rng = np.random.default_rng(seed)
    a = rng.integers(0, 2, n)
    b = flip(rng, a, noise)
    c = flip(rng, b, noise)
    d = rng.integers(0, 3, n)
    return make_dataset({'A': a, 'B': b, 'C': c, 'D': d},
                        cardinalities={'A': 2, 'B': 2, 'C': 2, 'D': 3})


def classification_dataset(n=1000, seed=0):
    """
    类别 Y 决定 X1、X2、X3，X2 另外依赖 X1，X4 只与 Y 弱相关
    """
    rng = np.random.default_rng(seed)
    y = rng.integers(0, 2, n)
    x1 = flip(rng, y, 0.2)
    x2 = flip(rng, np.where(rng.random(n) < 0.5, x1, y), 0.1)
    x3 = flip(rng, y, 0.3)
    x4 = flip(rng, y, 0.45)
    return make_dataset({'Y': y, 'X1': x1, 'X2': x2, 'X3': x3, 'X4': x4},
                        cardinalities={k: 2 for k in ['Y', 'X1', 'X2', 'X3', 'X4']},
                        class_name='Y')
