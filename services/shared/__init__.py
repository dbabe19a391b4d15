"""
Shared utilities for the subscription economics services.

This package contains code shared across entry points:
- engine_settings: Environment-driven engine defaults
- observability: JSON logging and privacy utilities
"""

from .engine_settings import (
    RENEWAL_WINDOW_ENV,
    TREND_MONTHS_ENV,
    UNUSED_THRESHOLD_ENV,
    EngineSettings,
    EngineSettingsError,
    load_engine_settings,
)

__all__ = [
    "RENEWAL_WINDOW_ENV",
    "TREND_MONTHS_ENV",
    "UNUSED_THRESHOLD_ENV",
    "EngineSettings",
    "EngineSettingsError",
    "load_engine_settings",
]
