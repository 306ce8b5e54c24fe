"""
uniauth.logger - 日志

库内部统一通过 `logger` 代理输出日志。未调用 init_logger() 时直接转发到 loguru 默认实例，
作为库引用时无需任何初始化；嵌入方需要落盘、JSON 格式或凭据打码时再调用 init_logger()。

    from uniauth.logger import init_logger, logger

    init_logger(level="DEBUG", base_log_dir=Path("/var/log/myapp"), log_format="json")
    logger.bind(provider="github").info("Authorize url built")
"""
from datetime import UTC, time, timedelta
from pathlib import Path
from typing import TYPE_CHECKING

import loguru

from uniauth.logger.handler import LogFormat, LoggerHandler, RetentionType, RotationType, mask_credentials
from uniauth.toolkit.types import LazyProxy

if TYPE_CHECKING:
    from loguru import Logger

_manager: LoggerHandler | None = None


def init_logger(
    *,
    level: str = "INFO",
    base_log_dir: Path | None = None,
    rotation: RotationType = time(0, 0, 0, tzinfo=UTC),
    retention: RetentionType = timedelta(days=30),
    compression: str | None = None,
    use_utc: bool = True,
    enqueue: bool = False,
    log_format: LogFormat | str = LogFormat.TEXT,
    write_to_file: bool = True,
    write_to_console: bool = True,
) -> "Logger":
    """初始化日志，参数含义见 LoggerHandler；可重复调用，以最后一次为准"""
    global _manager

    manager = LoggerHandler(
        level=level,
        base_log_dir=base_log_dir,
        rotation=rotation,
        retention=retention,
        compression=compression,
        use_utc=use_utc,
        enqueue=enqueue,
        log_format=LogFormat(log_format),
    )
    configured = manager.setup(write_to_file=write_to_file, write_to_console=write_to_console)
    _manager = manager
    return configured


def get_logger_manager() -> LoggerHandler:
    if _manager is None:
        raise RuntimeError("LoggerHandler not initialized. Call init_logger() first.")
    return _manager


def _current_logger() -> "Logger":
    if _manager is None:
        return loguru.logger
    return _manager.logger


logger: "Logger" = LazyProxy(_current_logger)  # type: ignore[assignment]

__all__ = [
    "LoggerHandler",
    "LogFormat",
    "RotationType",
    "RetentionType",
    "init_logger",
    "get_logger_manager",
    "mask_credentials",
    "logger",
]
