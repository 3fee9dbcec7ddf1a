"""
日志模块

使用 loguru 提供统一的日志记录功能，并把 aiohttp / SQLAlchemy 的标准库日志转接到 loguru。
"""

import logging
import os
import sys
from typing import Iterable, Optional

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {message}"

# 需要转接到 loguru 的标准库 logger
STDLIB_LOGGERS = ("aiohttp.access", "aiohttp.server", "aiohttp.web", "sqlalchemy.engine")


class InterceptHandler(logging.Handler):
    """将标准库 logging 记录转发给 loguru"""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # 跳过 logging 模块自身的调用帧，保证 loguru 显示真实来源
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def intercept_stdlib(names: Iterable[str] = STDLIB_LOGGERS) -> None:
    """让指定的标准库 logger 走 loguru 输出"""
    handler = InterceptHandler()
    for name in names:
        std_logger = logging.getLogger(name)
        std_logger.handlers = [handler]
        std_logger.propagate = False


def setup_logger(
    level: Optional[str] = None,
    sink=sys.stdout,
    enqueue: bool = True,
    colorize: bool = True,
    log_file: Optional[str] = None,
) -> str:
    """
    设置日志记录器

    Args:
        level: 日志级别 (DEBUG, INFO, WARNING, ERROR)
        sink: 输出目标
        enqueue: 是否启用队列（线程安全）
        colorize: 是否启用颜色
        log_file: 额外写入的日志文件，按 10 MB 轮转

    Returns:
        实际生效的日志级别
    """
    if level is None:
        level = "DEBUG" if os.environ.get("MODLIST_DEBUG", "0") == "1" else "INFO"
    level = level.upper()
    debug_mode = level == "DEBUG"

    logger.remove()
    logger.add(
        sink=sink,
        format=LOG_FORMAT,
        enqueue=enqueue,
        level=level,
        colorize=colorize,
        backtrace=debug_mode,
        diagnose=debug_mode,
    )
    if log_file:
        logger.add(
            log_file,
            format=LOG_FORMAT,
            enqueue=enqueue,
            level=level,
            rotation="10 MB",
            backtrace=debug_mode,
            diagnose=False,
        )

    intercept_stdlib()
    # SQL 语句只在调试模式下输出
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if debug_mode else logging.WARNING
    )

    if debug_mode:
        logger.debug("DEBUG 模式已启用")
    return level


__all__ = ["logger", "setup_logger", "intercept_stdlib", "InterceptHandler"]
