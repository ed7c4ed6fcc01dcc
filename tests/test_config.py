#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
测试配置加载
"""
import os
import tempfile
import unittest
from pathlib import Path

from bayesgen.utils.config import LearnerConfig, load_config

DEFAULT_CONFIG = Path(__file__).resolve().parent.parent / 'configs' / 'default.yaml'


class TestLearnerConfig(unittest.TestCase):
    """测试学习配置"""

    def test_defaults(self):
        """默认值"""
        config = LearnerConfig()
        self.assertEqual(config.smoothing, 0.0)
        self.assertEqual(config.unseen_policy, 'uniform')

    def test_from_nested_dict(self):
        """支持 learner 键下的嵌套写法"""
        config = LearnerConfig.from_dict({'learner': {'max_parents': 2, 'random_seed': 7}})
        self.assertEqual(config.max_parents, 2)
        self.assertEqual(config.random_seed, 7)

    def test_unknown_key(self):
        """未知配置项报错"""
        with self.assertRaises(ValueError):
            LearnerConfig.from_dict({'max_parent': 2})

    def test_invalid_values(self):
        """非法取值报错"""
        with self.assertRaises(ValueError):
            LearnerConfig(candidate_set_size=0)
        with self.assertRaises(ValueError):
            LearnerConfig(smoothing=-0.1)
        with self.assertRaises(ValueError):
            LearnerConfig(unseen_policy='backoff')

    def test_default_yaml(self):
        """仓库自带的默认配置可以加载"""
        config = LearnerConfig.from_yaml(str(DEFAULT_CONFIG))
        self.assertEqual(config.to_dict(), LearnerConfig(max_parents=3).to_dict())

    def test_yaml_round_trip(self):
        """写入再读取YAML"""
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'config.yaml')
            with open(path, 'w', encoding='utf-8') as f:
                f.write("max_parents: null\ncandidate_set_size: 3\n")
            self.assertEqual(load_config(path), {'max_parents': None, 'candidate_set_size': 3})
            config = LearnerConfig.from_yaml(path)
            self.assertIsNone(config.max_parents)
            self.assertEqual(config.candidate_set_size, 3)


if __name__ == '__main__':
    unittest.main()
