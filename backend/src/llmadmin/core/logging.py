"""Logging configuration for the LLM admin backend.

Human-readable colored output in development, JSON lines in production.

Log file management:
- Each process startup archives the previous log file with a timestamp suffix.
- Archives older than the retention window are pruned at startup.
"""

import json
import logging
import os
import socket
import sys
import traceback
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import ClassVar

from .config import get_settings_instance

# Internal guard to prevent double configuration when setup_logging() is called
# both from the lifespan hook and from a CLI entrypoint
_LOGGING_CONFIGURED = False

# LogRecord attributes that are not user supplied "extra" fields
_RESERVED_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "getMessage",
    }
)


class ColoredFormatter(logging.Formatter):
    """Colored formatter for human-readable logs."""

    COLORS: ClassVar[dict[str, str]] = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",
    }

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__()
        self.use_colors = use_colors and sys.stdout.isatty()

    def format(self, record: logging.LogRecord) -> str:
        level_color = self.COLORS.get(record.levelname, "") if self.use_colors else ""
        reset_color = self.COLORS["RESET"] if self.use_colors else ""

        timestamp = datetime.fromtimestamp(record.created, UTC).strftime("%Y-%m-%d %H:%M:%S")
        message = record.getMessage()

        # Only short scalar extras, the rest goes to the JSON formatter
        extra_fields = []
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or value is None:
                continue
            if isinstance(value, (str, int, float, bool)) and len(str(value)) < 100:
                extra_fields.append(f"{key}={value}")

        log_line = f"{timestamp} - {level_color}{record.levelname}{reset_color} - {record.name} - {message}"
        if extra_fields:
            log_line += f" | {' '.join(extra_fields)}"

        if record.exc_info:
            exc_info = traceback.format_exception(*record.exc_info)
            log_line += f"\n{level_color}Exception:{reset_color}\n" + "".join(exc_info)

        return log_line


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging (production/monitoring)."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            exc_type = record.exc_info[0]
            log_data["exception"] = {
                "type": exc_type.__name__ if exc_type is not None else "Unknown",
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info),
            }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)


def _cleanup_old_log_archives(log_dir: Path, hostname: str, retention_days: int) -> None:
    """Remove archived log files older than the retention window.

    Archives are named llmadmin_<host>.log.YYYY-MM-DD_HH-MM-SS.
    """
    prefix = f"llmadmin_{hostname}.log."
    cutoff = datetime.now(UTC) - timedelta(days=retention_days)
    try:
        for entry in os.scandir(log_dir):
            if not entry.name.startswith(prefix) or not entry.is_file():
                continue
            date_part = entry.name[len(prefix) :][:10]
            try:
                file_date = datetime.strptime(date_part, "%Y-%m-%d").replace(tzinfo=UTC)
            except ValueError:
                continue
            if file_date < cutoff:
                os.unlink(entry.path)
    except OSError:
        pass  # retention cleanup is best effort


def _build_file_handler(log_dir: Path, retention_days: int, formatter: logging.Formatter) -> logging.FileHandler:
    """Archive the previous run's log file and open a fresh one."""
    os.makedirs(log_dir, exist_ok=True)

    # Hostname in the filename so scaled replicas don't clobber each other
    hostname = socket.gethostname()
    log_path = log_dir / f"llmadmin_{hostname}.log"

    if log_path.exists() and log_path.stat().st_size > 0:
        ts = datetime.now(UTC).strftime("%Y-%m-%d_%H-%M-%S")
        try:
            log_path.rename(f"{log_path}.{ts}")
        except OSError:
            pass  # worst case we append

    _cleanup_old_log_archives(log_dir, hostname, retention_days)

    handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    handler.setFormatter(formatter)
    return handler


def setup_logging() -> None:
    """Configure root, application and third-party loggers from settings."""
    global _LOGGING_CONFIGURED  # noqa: PLW0603
    if _LOGGING_CONFIGURED:
        return

    settings = get_settings_instance()
    level = getattr(logging, settings.log_level)

    use_colors = settings.environment == "development" and sys.stdout.isatty()
    formatter = JSONFormatter() if settings.log_format == "json" else ColoredFormatter(use_colors=use_colors)

    handlers: list[logging.Handler] = []
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    if settings.log_to_file:
        handlers.append(_build_file_handler(Path(settings.log_dir), settings.log_retention_days, formatter))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)
    for handler in handlers:
        root_logger.addHandler(handler)

    # SQLAlchemy logs every statement at INFO; keep it to errors
    for logger_name in ["sqlalchemy", "sqlalchemy.engine", "sqlalchemy.pool", "sqlalchemy.orm"]:
        log = logging.getLogger(logger_name)
        log.handlers.clear()
        log.setLevel(logging.ERROR)

    # Outbound HTTP libraries are noisy at DEBUG; cap them at WARNING
    external_lib_level = max(level, logging.WARNING)
    for logger_name in ["httpx", "httpcore"]:
        logging.getLogger(logger_name).setLevel(external_lib_level)

    # Route uvicorn through our handlers at our level
    for logger_name in ["uvicorn", "uvicorn.access", "uvicorn.error"]:
        uvicorn_log = logging.getLogger(logger_name)
        uvicorn_log.handlers.clear()
        uvicorn_log.setLevel(level)
        for handler in handlers:
            uvicorn_log.addHandler(handler)
        uvicorn_log.propagate = False

    app_logger = logging.getLogger("llmadmin")
    app_logger.setLevel(level)
    app_logger.info(
        "Logging configured",
        extra={
            "log_level": settings.log_level,
            "log_format": settings.log_format,
            "environment": settings.environment,
            "use_colors": use_colors,
        },
    )
    _LOGGING_CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the llmadmin namespace.

    Module names that already start with the package are used unchanged.
    """
    if name == "llmadmin" or name.startswith("llmadmin."):
        return logging.getLogger(name)
    return logging.getLogger(f"llmadmin.{name}")
