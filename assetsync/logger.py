"""
日志模块

使用 loguru 输出同步过程日志：控制台输出到 stderr（stdout 留给同步摘要），
可选的日志文件始终记录 DEBUG 级别的完整过程。
"""

import os
import sys
from typing import Optional

from loguru import logger

CONSOLE_FORMAT = "{time:HH:mm:ss} | {level: <8} | {message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{line} | {message}"


def resolve_level(level: Optional[str] = None, quiet: bool = False) -> str:
    """
    决定控制台日志级别

    优先级: 显式 level > quiet > ASSETSYNC_DEBUG 环境变量 > INFO
    """
    if level:
        return level.upper()
    if quiet:
        return "WARNING"
    if os.environ.get("ASSETSYNC_DEBUG", "0") == "1":
        return "DEBUG"
    return "INFO"


def setup_logger(
    level: Optional[str] = None,
    quiet: bool = False,
    log_file: Optional[str] = None,
    sink=None,
    colorize: Optional[bool] = None,
) -> str:
    """
    设置日志记录器

    Args:
        level: 控制台日志级别 (DEBUG, INFO, WARNING, ERROR)
        quiet: 只输出警告和错误
        log_file: 日志文件路径，按 10 MB 轮转
        sink: 控制台输出目标，默认 sys.stderr
        colorize: 是否启用颜色，默认由 loguru 根据终端判断

    Returns:
        实际使用的控制台日志级别
    """
    console_level = resolve_level(level, quiet)
    debug_mode = console_level == "DEBUG"

    logger.remove()

    logger.add(
        sink=sink if sink is not None else sys.stderr,
        format=CONSOLE_FORMAT,
        level=console_level,
        colorize=colorize,
        backtrace=debug_mode,
        diagnose=debug_mode,
    )

    if log_file:
        logger.add(
            log_file,
            format=FILE_FORMAT,
            level="DEBUG",
            rotation="10 MB",
            encoding="utf-8",
        )

    logger.debug(f"日志级别: {console_level}")
    return console_level


__all__ = ["logger", "setup_logger", "resolve_level"]
