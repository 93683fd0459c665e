"""
日志模块

基于 loguru，进度写到标准输出，错误写到标准错误。
"""

import os
import sys
from typing import Optional

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {message}"
ERROR_LEVEL = logger.level("ERROR").no


def _below_error(record) -> bool:
    return record["level"].no < ERROR_LEVEL


def setup_logger(
    level: Optional[str] = None,
    out=None,
    err=None,
    enqueue: bool = True,
    colorize: bool = True,
) -> None:
    """
    设置日志记录器

    Args:
        level: 最低日志级别，缺省时由 MODBUNDLE_DEBUG 决定
        out: 低于 ERROR 的日志输出目标，缺省为标准输出
        err: ERROR 及以上的日志输出目标，缺省为标准错误
        enqueue: 是否启用队列（线程安全）
        colorize: 是否启用颜色
    """
    if level is None:
        level = "DEBUG" if os.environ.get("MODBUNDLE_DEBUG", "0") == "1" else "INFO"
    out = out or sys.stdout
    err = err or sys.stderr
    debug = level == "DEBUG"

    logger.remove()
    logger.add(
        sink=out,
        format=LOG_FORMAT,
        level=level,
        filter=_below_error,
        enqueue=enqueue,
        colorize=colorize,
    )
    # ERROR 以上单独走 stderr，调试模式下附带完整回溯
    logger.add(
        sink=err,
        format=LOG_FORMAT,
        level=max(ERROR_LEVEL, logger.level(level).no),
        enqueue=enqueue,
        colorize=colorize,
        backtrace=debug,
        diagnose=debug,
    )

    logger.debug(f"日志级别: {level}")


__all__ = ["logger", "setup_logger"]
