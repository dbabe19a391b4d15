"""
Shared observability helpers (JSON logging, privacy utilities).

Entry points import from this package so every run logs the same way without
exposing subscription names or notes.
"""

from .logging_setup import (
    RunContextToken,
    bind_run_context,
    current_run_id,
    new_run_id,
    reset_run_context,
    setup_logging,
)
from .privacy import hash_payload

__all__ = [
    "hash_payload",
    "RunContextToken",
    "bind_run_context",
    "current_run_id",
    "new_run_id",
    "reset_run_context",
    "setup_logging",
]
