#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
日志工具
"""
import os
import logging
from pathlib import Path
from typing import Optional

LOG_DIR_ENV = "BAYESGEN_LOG_DIR"
LOG_LEVEL_ENV = "BAYESGEN_LOG_LEVEL"


def setup_logger(
    name: str,
    log_dir: Optional[str] = None,
    level: Optional[str] = None
) -> logging.Logger:
    """
    设置日志记录器

    Args:
        name: 日志记录器名称
        log_dir: 日志目录，None时读取环境变量 BAYESGEN_LOG_DIR，仍为空则只输出到控制台
        level: 日志级别，None时读取环境变量 BAYESGEN_LOG_LEVEL（默认INFO）

    Returns:
        配置好的日志记录器
    """
    log_dir = log_dir or os.environ.get(LOG_DIR_ENV)
    level = (level or os.environ.get(LOG_LEVEL_ENV, "INFO")).upper()

    # 创建日志记录器
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level))

    # 避免重复添加处理器
    if logger.handlers:
        return logger

    # 格式化器
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # 控制台处理器
    console_handler = logging.StreamHandler()
    console_handler.setLevel(getattr(logging, level))
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # 文件处理器
    if log_dir:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(
            os.path.join(log_dir, f"{name}.log"),
            encoding='utf-8'
        )
        file_handler.setLevel(getattr(logging, level))
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
