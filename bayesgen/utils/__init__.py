#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
工具模块
"""
from bayesgen.utils.io import load_data, save_data, save_metadata
from bayesgen.utils.logging import setup_logger
from bayesgen.utils.config import load_config, ensure_dir, LearnerConfig

__all__ = [
    'load_data',
    'save_data',
    'save_metadata',
    'setup_logger',
    'load_config',
    'ensure_dir',
    'LearnerConfig'
]
