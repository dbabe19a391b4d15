"""
Logging bootstrap shared by the engine entry points.

`setup_logging` installs a python-json-logger formatter that stamps every record
with the service name and the current run id, so a report run can be traced
through its log lines without logging subscription contents.
"""

from __future__ import annotations

import logging
import os
from contextvars import ContextVar, Token
from uuid import uuid4

from pythonjsonlogger import jsonlogger

RunContextToken = Token

_logging_configured = False
_run_id_ctx_var: ContextVar[str | None] = ContextVar("run_id", default=None)


def setup_logging(service_name: str, level: str | None = None) -> None:
    """
    Configure JSON logging for the process once.

    Args:
        service_name: Logical service identifier stamped on every record.
        level: Log level name; falls back to LOG_LEVEL, then INFO.
    """

    global _logging_configured
    if _logging_configured:
        return

    formatter = jsonlogger.JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s %(service_name)s %(run_id)s"
    )
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    handler.addFilter(_RunContextLogFilter(service_name))

    resolved_level = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    logging.basicConfig(level=resolved_level, handlers=[handler], force=True)
    _logging_configured = True


def new_run_id() -> str:
    return os.getenv("RUN_ID_PREFIX", "") + str(uuid4())


def bind_run_context(run_id: str | None) -> RunContextToken:
    """
    Store the run ID in a ContextVar so log records can include it.
    """

    return _run_id_ctx_var.set(run_id)


def reset_run_context(token: RunContextToken | None) -> None:
    """Reset the ContextVar token emitted by `bind_run_context`."""

    if token is not None:
        _run_id_ctx_var.reset(token)


def current_run_id() -> str | None:
    return _run_id_ctx_var.get()


class _RunContextLogFilter(logging.Filter):
    def __init__(self, service_name: str) -> None:
        super().__init__()
        self._service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        record.service_name = self._service_name
        record.run_id = _run_id_ctx_var.get()
        return True
