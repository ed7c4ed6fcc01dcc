#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
贝叶斯网络异常定义
"""


class BayesNetError(Exception):
    """贝叶斯网络相关异常的基类"""


class CyclicGraphError(BayesNetError):
    """对含环的图请求拓扑排序"""


class DisconnectedGraphError(BayesNetError):
    """图不连通，无法构造生成树"""


class MissingAssignmentError(BayesNetError, KeyError):
    """
    CPD查询的父节点取值组合在训练数据中从未出现

    不会自动补一个概率，由调用方决定回退策略
    """

    def __init__(self, message: str, node=None, assignment=None):
        super().__init__(message)
        self.node = node
        self.assignment = assignment

    def __str__(self) -> str:
        # KeyError 默认会给消息加引号
        return str(self.args[0]) if self.args else ''


class MissingParentValueError(BayesNetError):
    """生成数据时父节点尚未取值，说明拓扑顺序有误"""


class InvalidStructureError(BayesNetError, ValueError):
    """未经合法性检查（无环、父节点数上限）就修改结构"""
