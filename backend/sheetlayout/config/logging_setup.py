"""
日志初始化 - 按 LoggingConfig 配置根日志器
"""

from __future__ import annotations

import logging
from pathlib import Path

from .runtime_config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(config: LoggingConfig) -> logging.Logger:
    """配置 sheetlayout 日志器（重复调用不会叠加handler）"""
    logger = logging.getLogger("sheetlayout")
    logger.setLevel(config.log_level.upper())

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    stream = logging.StreamHandler()
    stream.setFormatter(formatter)
    logger.addHandler(stream)

    if config.log_to_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
