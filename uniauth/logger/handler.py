import re
import sys
from datetime import UTC, time, timedelta
from enum import StrEnum
from pathlib import Path
from typing import Any

import loguru

from uniauth.toolkit.json import orjson_dumps

_DEFAULT_BASE_LOG_DIR = Path("/tmp/uniauth_logs")

RotationType = str | int | time | timedelta
RetentionType = str | int | timedelta

# 查询串 / 错误信息中可能出现的凭据参数
_SENSITIVE_PARAMS = ("client_secret", "secret", "access_token", "refresh_token", "code", "code_verifier")
_SENSITIVE_PATTERN = re.compile(r"\b(" + "|".join(_SENSITIVE_PARAMS) + r")=([^&\s\"']+)")


class LogFormat(StrEnum):
    JSON = "json"
    TEXT = "text"


def mask_credentials(message: str) -> str:
    """将 `client_secret=xxx`、`access_token=xxx` 等参数值替换为 ***"""
    return _SENSITIVE_PATTERN.sub(r"\1=***", message)


class LoggerHandler:
    """
    登录流程日志管理器

    - 每条日志带 provider 字段（策略通过 logger.bind(provider=...) 标记，未绑定时为 "-"）
    - 写出前对消息中的凭据参数打码，平台返回的错误体可原样记录
    - 可通过 logger.bind(json_content=...) 附带结构化数据
    """

    def __init__(
        self,
        *,
        level: str = "INFO",
        base_log_dir: Path | None = None,
        rotation: RotationType = time(0, 0, 0, tzinfo=UTC),
        retention: RetentionType = timedelta(days=30),
        compression: str | None = None,
        use_utc: bool = True,
        enqueue: bool = False,
        log_format: LogFormat = LogFormat.TEXT,
    ):
        """
        :param level: 日志等级 (e.g., "INFO", "DEBUG")
        :param base_log_dir: 日志目录，按天生成 YYYY-MM-DD.log
        :param rotation: 轮转策略 (默认: 每天 00:00, UTC时间)
        :param retention: 保留策略 (默认: 30天)
        :param compression: 压缩格式 (e.g., "zip")
        :param use_utc: 是否强制使用 UTC 时间
        :param enqueue: 是否使用多进程安全的队列写入
        :param log_format: LogFormat.JSON 或 LogFormat.TEXT
        """
        self._logger = loguru.logger
        self._is_initialized = False

        self.level = level
        self.base_log_dir = base_log_dir or _DEFAULT_BASE_LOG_DIR
        self.retention = retention
        self.compression = compression
        self.use_utc = use_utc
        self.enqueue = enqueue
        self.log_format = LogFormat(log_format)

        if self.use_utc and isinstance(rotation, time) and rotation.tzinfo is None:
            rotation = rotation.replace(tzinfo=UTC)
        self.rotation = rotation

    @property
    def is_initialized(self) -> bool:
        return self._is_initialized

    @property
    def logger(self) -> "loguru.Logger":
        return self._logger

    def setup(self, *, write_to_file: bool = True, write_to_console: bool = True) -> "loguru.Logger":
        self._logger.remove()
        self._logger.configure(
            extra={"provider": "-", "json_content": None},
            patcher=self._patch_record,
        )

        is_json = self.log_format == LogFormat.JSON

        if write_to_console:
            self._logger.add(
                sink=sys.stderr,
                level=self.level,
                enqueue=self.enqueue,
                colorize=not is_json,
                diagnose=False,
                format=self._format_json if is_json else self._format_console,
            )

        if write_to_file:
            self._ensure_dir(self.base_log_dir)
            self._logger.add(
                sink=self.base_log_dir / "{time:YYYY-MM-DD}.log",
                level=self.level,
                rotation=self.rotation,
                retention=self.retention,
                compression=self.compression,
                enqueue=self.enqueue,
                diagnose=False,
                format=self._format_json if is_json else self._format_file,
            )

        self._is_initialized = True
        self._logger.info(
            f"Logger initialized. utc={self.use_utc} | format={self.log_format} | "
            f"rotation={self.rotation} | level={self.level}"
        )
        return self._logger

    def _patch_record(self, record: Any) -> None:
        if self.use_utc:
            record["time"] = record["time"].astimezone(UTC)
        record["message"] = mask_credentials(record["message"])

    # --- 格式化器 ---

    @staticmethod
    def _text_layout(record: Any, *, colored: bool) -> str:
        if colored:
            fmt = (
                "<green>{time:YYYY-MM-DD HH:mm:ss.SSSZ}</green> | <level>{level: <8}</level> | "
                "<cyan>{name}:{function}:{line}</cyan> | <yellow>{extra[provider]}</yellow> - <level>{message}</level>"
            )
        else:
            fmt = "{time:YYYY-MM-DD HH:mm:ss.SSSZ} | {level: <8} | {name}:{function}:{line} | {extra[provider]} - {message}"

        json_content = record["extra"].get("json_content")
        if json_content is not None:
            record["extra"]["_json_text"] = orjson_dumps(json_content, default=str)
            fmt += "\n{extra[_json_text]}"
        return fmt + "\n"

    @classmethod
    def _format_console(cls, record: Any) -> str:
        return cls._text_layout(record, colored=True)

    @classmethod
    def _format_file(cls, record: Any) -> str:
        return cls._text_layout(record, colored=False)

    @staticmethod
    def _format_json(record: Any) -> str:
        """JSON Lines，一行一条"""
        extra = {k: v for k, v in record["extra"].items() if not k.startswith("_")}
        json_content = extra.pop("json_content", None)

        payload = {
            "time": record["time"].isoformat(timespec="milliseconds"),
            "level": record["level"].name,
            "location": f"{record['name']}.{record['function']}:{record['line']}",
            "message": record["message"],
            **extra,
        }
        if json_content is not None:
            payload["json_content"] = json_content

        record["extra"]["_json_line"] = orjson_dumps(payload, default=str)
        return "{extra[_json_line]}\n"

    @staticmethod
    def _ensure_dir(path: Path):
        if not path.parent.exists():
            raise FileNotFoundError(f"Parent directory does not exist: {path.parent}")
        path.mkdir(exist_ok=True)
