"""Logging helpers for resume-extractor.

Log lines stay plain text; structured context is appended as ``[key=value]``
pairs so that it greps well in container logs.
"""

import logging
import sys
import time
import uuid
from contextvars import ContextVar, Token
from typing import Any, Optional

# Request ID shared by every log line emitted while serving one upload
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ContextLogger:
    """Thin wrapper around ``logging.Logger`` that accepts ``extra_data``."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    @staticmethod
    def _render(extra_data: Optional[dict[str, Any]]) -> str:
        if not extra_data:
            return ""
        pairs = ", ".join(f"{key}={value}" for key, value in extra_data.items())
        return f" [{pairs}]"

    def _log(
        self,
        level: int,
        msg: str,
        extra_data: Optional[dict[str, Any]] = None,
        **kwargs,
    ):
        if not self.logger.isEnabledFor(level):
            return

        data = dict(extra_data or {})
        request_id = request_id_var.get()
        if request_id:
            data["request_id"] = request_id

        self.logger.log(level, msg + self._render(data), **kwargs)

    def debug(self, msg: str, extra_data: Optional[dict[str, Any]] = None, **kwargs):
        self._log(logging.DEBUG, msg, extra_data, **kwargs)

    def info(self, msg: str, extra_data: Optional[dict[str, Any]] = None, **kwargs):
        self._log(logging.INFO, msg, extra_data, **kwargs)

    def warning(self, msg: str, extra_data: Optional[dict[str, Any]] = None, **kwargs):
        self._log(logging.WARNING, msg, extra_data, **kwargs)

    def error(self, msg: str, extra_data: Optional[dict[str, Any]] = None, **kwargs):
        self._log(logging.ERROR, msg, extra_data, **kwargs)

    def exception(self, msg: str, extra_data: Optional[dict[str, Any]] = None, **kwargs):
        """Log at ERROR level with the active exception's traceback."""
        kwargs.setdefault("exc_info", True)
        self._log(logging.ERROR, msg, extra_data, **kwargs)


def setup_logging(log_level: str = "INFO") -> None:
    """Route all logging to stdout with a single plain-text handler.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Unknown names fall back to INFO.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    root_logger.addHandler(handler)
    root_logger.setLevel(level)


def get_logger(name: str) -> ContextLogger:
    """Return a ``ContextLogger`` for ``name`` (typically ``__name__``)."""
    return ContextLogger(logging.getLogger(name))


def set_request_id(request_id: Optional[str] = None) -> tuple[str, Token]:
    """Bind a request ID to the current context.

    Args:
        request_id: Incoming ID (e.g. from an ``X-Request-ID`` header). A new
            UUID4 is generated when it is empty.

    Returns:
        The bound request ID and the token needed to restore the previous one.
    """
    if not request_id:
        request_id = uuid.uuid4().hex
    token = request_id_var.set(request_id)
    return request_id, token


def reset_request_id(token: Token) -> None:
    request_id_var.reset(token)


def get_request_id() -> Optional[str]:
    return request_id_var.get()


class Timer:
    """Context manager measuring wall-clock milliseconds for one stage."""

    def __init__(self, name: str):
        self.name = name
        self._started: Optional[float] = None
        self._stopped: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._started = time.perf_counter()
        return self

    def __exit__(self, *exc_info) -> None:
        self._stopped = time.perf_counter()

    def get_elapsed_ms(self) -> int:
        """Elapsed milliseconds; still running timers report time so far."""
        if self._started is None:
            return 0
        end = self._stopped if self._stopped is not None else time.perf_counter()
        return int((end - self._started) * 1000)
