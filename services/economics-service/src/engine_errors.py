from __future__ import annotations


class EngineError(Exception):
    """Base class for every failure raised by the economics engine."""


class InvalidInputError(EngineError, ValueError):
    """Raised when a subscription record is malformed (negative cost, missing name, ...)."""

    def __init__(self, message: str, *, record_id: str | None = None, field: str | None = None) -> None:
        super().__init__(message)
        self.record_id = record_id
        self.field = field


class PreconditionViolationError(EngineError):
    """Raised when a caller breaks an operation's contract rather than supplying bad data."""
