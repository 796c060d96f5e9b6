"""Structured JSON logging for ghissues."""

from __future__ import annotations

import json
import logging
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, TextIO

from .errors import redact

_RESERVED = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "exc_info",
    "exc_text",
    "stack_info",
    "taskName",
}


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": redact(record.getMessage()),
        }
        # Extra kwargs passed via ``extra=`` land on the record itself
        for k, v in record.__dict__.items():
            if k in _RESERVED or k.startswith("_") or k in entry:
                continue
            entry[k] = redact(v) if isinstance(v, str) else v
        return json.dumps(entry, default=str)


class StructuredLogger:
    def __init__(
        self,
        name: str = "ghissues",
        json_logging: bool = False,
        level: str = "INFO",
        stream: TextIO | None = None,
    ) -> None:
        self._logger = logging.getLogger(name)
        self._logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        for h in list(self._logger.handlers):
            self._logger.removeHandler(h)
        handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
        handler.setFormatter(
            JSONFormatter()
            if json_logging
            else logging.Formatter("%(asctime)s %(levelname)s %(message)s")
        )
        self._logger.addHandler(handler)
        self._logger.propagate = False

    def _emit(self, level: int, message: str, extra: dict[str, Any]) -> None:
        self._logger.log(level, redact(message), extra=extra)

    def log_operation(self, operation: str, **kw: Any) -> None:
        extra = {"operation": operation, **kw}
        self._emit(logging.INFO, f"Operation: {operation}", extra)

    def log_request(
        self, method: str, path: str, status: int, duration_ms: float, **kw: Any
    ) -> None:
        extra: dict[str, Any] = {
            "operation": "http_request",
            "method": method,
            "path": path,
            "status": status,
            "duration_ms": round(duration_ms, 2),
            **kw,
        }
        self._emit(
            logging.INFO,
            f"{method} {path} -> {status} ({duration_ms:.2f}ms)",
            extra,
        )

    def log_error(self, message: str, error: str | None = None, **kw: Any) -> None:
        extra = dict(kw)
        if error:
            extra["error"] = redact(error)
        self._emit(logging.ERROR, message, extra)

    def debug(self, message: str, **kw: Any) -> None:
        self._emit(logging.DEBUG, message, kw)

    def info(self, message: str, **kw: Any) -> None:
        self._emit(logging.INFO, message, kw)

    def warning(self, message: str, **kw: Any) -> None:
        self._emit(logging.WARNING, message, kw)

    def error(self, message: str, **kw: Any) -> None:  # noqa: D401
        self._emit(logging.ERROR, message, kw)

    @contextmanager
    def timed_operation(self, operation: str, **kw: Any) -> Iterator[None]:  # noqa: D401
        start = time.perf_counter()
        try:
            yield
        except Exception as exc:
            self.log_error(f"operation {operation} failed", error=str(exc), **kw)
            raise
        duration_ms = (time.perf_counter() - start) * 1000
        self._emit(
            logging.INFO,
            f"Performance: {operation} completed in {duration_ms:.2f}ms",
            {"operation": operation, "duration_ms": round(duration_ms, 2), **kw},
        )


_GLOBAL: StructuredLogger | None = None


def get_logger() -> StructuredLogger:
    global _GLOBAL  # noqa: PLW0603
    if _GLOBAL is None:
        _GLOBAL = StructuredLogger()
    return _GLOBAL


def configure_logging(
    json_logging: bool = False, level: str = "INFO", stream: TextIO | None = None
) -> StructuredLogger:
    global _GLOBAL  # noqa: PLW0603
    _GLOBAL = StructuredLogger(json_logging=json_logging, level=level, stream=stream)
    return _GLOBAL
