"""日志配置模块：提供彩色输出能力并统一全局日志格式。"""

import json
import logging
import logging.config
import sys
from contextvars import ContextVar
from datetime import datetime
from typing import Optional

from .config import get_settings


class _TZFormatter(logging.Formatter):
    """Formatter that renders timestamps in Settings.timezone."""

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: D401
        tz = get_settings().timezone_info
        dt = datetime.fromtimestamp(record.created, tz)
        if datefmt:
            return dt.strftime(datefmt)
        return dt.isoformat(sep=" ", timespec="milliseconds")


class ColorFormatter(_TZFormatter):
    """ANSI 彩色格式化器：根据不同日志级别渲染不同颜色。"""

    RESET = "\033[0m"
    COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[41m",
    }

    def __init__(
        self,
        fmt: str,
        datefmt: Optional[str] = None,
        style: str = "%",
        use_colors: Optional[bool] = None,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt, style=style)
        if use_colors is None:
            use_colors = sys.stderr.isatty()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if not self.use_colors:
            return message
        color = self.COLORS.get(record.levelno)
        if not color:
            return message
        return f"{color}{message}{self.RESET}"


class JsonFormatter(_TZFormatter):
    """每行一个 JSON 对象；``extra`` 中的 operation / context 会一并输出，便于按出错的 id 检索。"""

    EXTRA_FIELDS = ("operation", "context")

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record, datefmt=None),
            "logger": record.name,
            "level": record.levelname,
            "msg": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        for field in self.EXTRA_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


_request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


class RequestIdFilter(logging.Filter):
    """Injects request_id from contextvars into every LogRecord."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        record.request_id = _request_id_ctx.get()
        return True


def setup_logging() -> None:
    """初始化日志系统，确保所有模块使用统一的输出格式与级别。"""
    settings = get_settings()
    log_dir = settings.log_directory
    log_dir.mkdir(parents=True, exist_ok=True)

    formatter_name = "json" if settings.log_json else "standard"
    handlers = ["default", "file"]

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "()": "nitrofs.packages.catalog.core.logger.ColorFormatter",
                "format": "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s",
            },
            "plain": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s",
            },
            "json": {
                "()": "nitrofs.packages.catalog.core.logger.JsonFormatter",
            },
        },
        "filters": {
            "request_id": {
                "()": "nitrofs.packages.catalog.core.logger.RequestIdFilter",
            }
        },
        "handlers": {
            "default": {
                "level": settings.log_level,
                "class": "logging.StreamHandler",
                "formatter": formatter_name,
                "filters": ["request_id"],
            },
            "file": {
                "level": settings.log_level,
                "class": "logging.handlers.TimedRotatingFileHandler",
                "formatter": formatter_name if settings.log_json else "plain",
                "filename": str(settings.log_file_path),
                "when": "midnight",
                "backupCount": 14,
                "encoding": "utf-8",
                "delay": True,
                "filters": ["request_id"],
            },
        },
        "loggers": {
            "uvicorn": {"handlers": handlers, "level": settings.log_level, "propagate": False},
            "uvicorn.error": {"handlers": handlers, "level": settings.log_level, "propagate": False},
            "uvicorn.access": {"handlers": handlers, "level": settings.log_level, "propagate": False},
            "nitrofs": {"handlers": handlers, "level": settings.log_level, "propagate": False},
            # 连接池的 checkout/超时信息只在 DEBUG 下输出
            "sqlalchemy.pool": {"level": "DEBUG" if settings.debug else "WARNING"},
        },
        "root": {"handlers": handlers, "level": settings.log_level},
    }
    logging.config.dictConfig(logging_config)


logger = logging.getLogger("nitrofs")


def set_request_id(request_id: Optional[str]) -> None:
    _request_id_ctx.set(request_id)
