"""日志工具模块.

所有模块的日志记录器都挂在 ``thumbnail_studio`` 包记录器之下，
处理器只安装在包记录器上，子记录器继承其级别。

Features:
    - 控制台彩色输出
    - app.log 轮转记录全部日志，error.log 只记录错误
    - 通过应用设置重新配置日志目录和级别
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from thumbnail_studio.utils.constants import LOG_DIR

PACKAGE_LOGGER = "thumbnail_studio"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024  # 10MB
LOG_FILE_BACKUP_COUNT = 5

_configured = False


class ColoredFormatter(logging.Formatter):
    """控制台彩色格式化器（只给级别名着色）."""

    COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        colored = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(record.levelno, "")
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


def _file_handler(path: Path, level: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        path,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    return handler


def _to_level(level: int | str) -> int:
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        return resolved if isinstance(resolved, int) else logging.INFO
    return level


def configure_logging(
    level: int | str = logging.INFO,
    log_dir: Optional[Path] = LOG_DIR,
    console: bool = True,
) -> logging.Logger:
    """(重新)配置包日志记录器.

    Args:
        level: 日志级别
        log_dir: 日志文件目录，None 表示不写文件
        console: 是否输出到控制台

    Returns:
        包日志记录器
    """
    global _configured

    package = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package.handlers):
        package.removeHandler(handler)
        handler.close()

    level = _to_level(level)
    package.setLevel(level)

    if console:
        stream = logging.StreamHandler(sys.stdout)
        stream.setFormatter(ColoredFormatter(LOG_FORMAT, DATE_FORMAT))
        package.addHandler(stream)

    if log_dir is not None:
        log_dir = Path(log_dir).expanduser()
        log_dir.mkdir(parents=True, exist_ok=True)
        package.addHandler(_file_handler(log_dir / "app.log", logging.NOTSET))
        package.addHandler(_file_handler(log_dir / "error.log", logging.ERROR))

    _configured = True
    return package


def setup_logger(name: str) -> logging.Logger:
    """获取模块日志记录器.

    首次调用时按默认值配置包日志记录器。

    Args:
        name: 日志记录器名称，通常使用 __name__

    Returns:
        日志记录器
    """
    if not _configured:
        configure_logging()
    if name != PACKAGE_LOGGER and not name.startswith(f"{PACKAGE_LOGGER}."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


def set_log_level(level: int | str) -> None:
    """设置包日志级别."""
    logging.getLogger(PACKAGE_LOGGER).setLevel(_to_level(level))


def get_log_level() -> int:
    """获取当前包日志级别."""
    return logging.getLogger(PACKAGE_LOGGER).level
