"""
Logging setup shared by the WeatherDash server and the dashboard client.

The entrypoint configures logging once:

    from utils.logging_utils import setup_logging

    setup_logging(level="INFO", job_name="weatherdash")

and every module takes a tagged logger at import time:

    logger = get_tagged_logger(__name__, tag="favorites_store/sql")

Records carry `job_name` and `tag`, so uvicorn, SQLAlchemy and our own modules
all render through the same line format.
"""

from __future__ import annotations

import logging
import logging.config
from typing import Any, Mapping, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(job_name)s | %(tag)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Chatty libraries; their DEBUG/INFO output drowns request logs.
QUIET_LOGGERS = {
    "urllib3": "WARNING",
    "sqlalchemy.engine": "WARNING",
    "redis": "WARNING",
}

SECRET_QUERY_KEYS = ("pass", "pwd", "secret", "token", "key")

_CONFIGURED: bool = False


class StdoutLevelFilter(logging.Filter):
    """Keep records above `max_level` off stdout; stderr handles those."""

    def __init__(self, max_level: int = logging.INFO) -> None:
        super().__init__()
        self.max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        return record.levelno <= self.max_level


class RecordContextFilter(logging.Filter):
    """
    Fill in `job_name` and `tag` on records that lack them.

    Tagged adapters set `tag` themselves; third-party loggers get the last
    segment of their logger name instead.
    """

    def __init__(self, job_name: Optional[str] = None) -> None:
        super().__init__()
        self.job_name = job_name or "-"

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if not hasattr(record, "job_name"):
            record.job_name = self.job_name
        if not hasattr(record, "tag"):
            record.tag = record.name.rsplit(".", 1)[-1] if record.name else "-"
        return True


def build_logging_config(
    *,
    level: str | int = "INFO",
    job_name: Optional[str] = None,
    log_format: str = LOG_FORMAT,
) -> Mapping[str, Any]:
    """dictConfig mapping: DEBUG/INFO to stdout, WARNING and up to stderr."""
    handler_filters = ["record_context"]
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "record_context": {"()": RecordContextFilter, "job_name": job_name},
            "stdout_only": {"()": StdoutLevelFilter, "max_level": logging.INFO},
        },
        "formatters": {
            "line": {"format": log_format, "datefmt": DATE_FORMAT},
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "formatter": "line",
                "filters": handler_filters + ["stdout_only"],
                "level": "DEBUG",
                "stream": "ext://sys.stdout",
            },
            "stderr": {
                "class": "logging.StreamHandler",
                "formatter": "line",
                "filters": handler_filters,
                "level": "WARNING",
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {name: {"level": lvl} for name, lvl in QUIET_LOGGERS.items()},
        "root": {"level": level, "handlers": ["stdout", "stderr"]},
    }


def setup_logging(*, level: str | int = "INFO", job_name: Optional[str] = None, force: bool = False) -> None:
    """Configure logging for the process; later calls do nothing unless `force`."""
    global _CONFIGURED
    if _CONFIGURED and not force:
        return
    logging.config.dictConfig(build_logging_config(level=level, job_name=job_name))
    _CONFIGURED = True


def get_tagged_logger(name: str, *, tag: Optional[str] = None) -> logging.LoggerAdapter:
    """LoggerAdapter stamping `tag` (default: last dotted segment of `name`)."""
    return logging.LoggerAdapter(logging.getLogger(name), {"tag": tag or name.rsplit(".", 1)[-1]})


def _mask_query(query: str) -> str:
    pairs = parse_qsl(query, keep_blank_values=True)
    return urlencode(
        [(k, "***" if any(s in k.lower() for s in SECRET_QUERY_KEYS) else v) for k, v in pairs]
    )


def mask_db_url(url: str) -> str:
    """
    Hide credentials in a database or Redis URL before it is logged.

    postgresql://user:secret@db:5432/weatherdash -> postgresql://***:***@db:5432/weatherdash
    redis://:secret@cache:6379/0 -> redis://:***@cache:6379/0
    sqlite:///tmp/favorites.db -> unchanged
    """
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError:
        return url
    if not parts.scheme:
        return url

    userinfo = ""
    if parts.username:
        userinfo = "***"
    if parts.password is not None:
        userinfo += ":***"
    host = parts.hostname or ""
    if port:
        host = f"{host}:{port}"
    netloc = f"{userinfo}@{host}" if userinfo else host

    masked = urlunsplit((parts.scheme, netloc, parts.path, _mask_query(parts.query), parts.fragment))
    # urlunsplit drops the empty authority of "sqlite:///path" and "sqlite://"
    prefix = f"{parts.scheme}://"
    if not netloc and url.startswith(prefix) and not masked.startswith(prefix):
        masked = prefix + masked[len(parts.scheme) + 1:]
    return masked
