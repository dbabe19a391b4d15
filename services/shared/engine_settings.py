"""
Environment-driven defaults for the subscription economics engine.

The engine never reads the environment itself; entry points (the report CLI,
future services) call `load_engine_settings` once and turn the result into a
per-call EngineConfig with an explicit `now`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

UNUSED_THRESHOLD_ENV = "SUBSCRIPTION_UNUSED_THRESHOLD_DAYS"
RENEWAL_WINDOW_ENV = "SUBSCRIPTION_RENEWAL_WINDOW_DAYS"
TREND_MONTHS_ENV = "SUBSCRIPTION_TREND_MONTHS"


class EngineSettingsError(RuntimeError):
    """Raised when engine configuration cannot be constructed."""


@dataclass(frozen=True, slots=True)
class EngineSettings:
    unused_threshold_days: int
    renewal_window_days: int
    trend_months: int


def load_engine_settings(
    *,
    unused_threshold_env: str = UNUSED_THRESHOLD_ENV,
    renewal_window_env: str = RENEWAL_WINDOW_ENV,
    trend_months_env: str = TREND_MONTHS_ENV,
    default_unused_threshold: int = 90,
    default_renewal_window: int = 30,
    default_trend_months: int = 6,
) -> EngineSettings:
    """
    Construct EngineSettings from the environment.

    Args:
        unused_threshold_env: Env var holding the dead-weight threshold in days.
        renewal_window_env: Env var holding the upcoming-renewal window in days.
        trend_months_env: Env var holding how many months the trend series covers.
        default_*: Fallback values when the env var is unset/empty.
    """

    return EngineSettings(
        unused_threshold_days=_parse_positive_int(
            os.getenv(unused_threshold_env), default_unused_threshold, unused_threshold_env
        ),
        renewal_window_days=_parse_positive_int(
            os.getenv(renewal_window_env), default_renewal_window, renewal_window_env
        ),
        trend_months=_parse_positive_int(os.getenv(trend_months_env), default_trend_months, trend_months_env),
    )


def _parse_positive_int(raw_value: Optional[str], default: int, env_key: str) -> int:
    if raw_value is None or raw_value.strip() == "":
        return default

    try:
        value = int(raw_value)
    except ValueError as exc:
        raise EngineSettingsError(f"{env_key} must be an integer (received '{raw_value}')") from exc

    if value < 1:
        raise EngineSettingsError(f"{env_key} must be at least 1 (received '{raw_value}')")
    return value
