from __future__ import annotations

import logging
from typing import Iterable, List

from normalize_costs import MONTHS_PER_YEAR, active_records, monthly_cost, validate_config
from subscription_model import (
    DeadWeightEntry,
    DeadWeightReport,
    EngineConfig,
    SubscriptionRecord,
    as_calendar_date,
)

logger = logging.getLogger(__name__)


def days_unused(record: SubscriptionRecord, config: EngineConfig) -> int | None:
    """Whole days since the record was last used, or None when usage was never recorded."""
    if record.last_used is None:
        return None
    return (config.today - as_calendar_date(record.last_used)).days


def is_dead_weight(record: SubscriptionRecord, config: EngineConfig) -> bool:
    unused = days_unused(record, config)
    return unused is None or unused > config.unused_threshold_days


def dead_weight_reason(unused: int | None) -> str:
    if unused is None:
        return "never used"
    return f"unused for {unused} days"


def detect_dead_weight(records: Iterable[SubscriptionRecord], config: EngineConfig) -> DeadWeightReport:
    """
    Flag active subscriptions with no usage inside the configured threshold.

    Args:
        records: Subscription records of any status; only active ones are considered.
        config: EngineConfig providing `now` and `unused_threshold_days`.
    Returns:
        DeadWeightReport listing flagged records in input order with the monthly and
        yearly cost that cancelling all of them would save.
    """
    validate_config(config)
    entries: List[DeadWeightEntry] = []
    for record in active_records(records):
        if not is_dead_weight(record, config):
            continue
        unused = days_unused(record, config)
        entries.append(
            DeadWeightEntry(
                record=record,
                reason=dead_weight_reason(unused),
                days_unused=unused,
                monthly_cost=monthly_cost(record),
            )
        )

    monthly_savings = float(sum(entry.monthly_cost for entry in entries))
    logger.debug(
        "Detected dead weight subscriptions",
        extra={"flagged_count": len(entries), "threshold_days": config.unused_threshold_days},
    )
    return DeadWeightReport(
        records=entries,
        monthly_savings=monthly_savings,
        yearly_savings=monthly_savings * MONTHS_PER_YEAR,
        threshold_days=config.unused_threshold_days,
    )
