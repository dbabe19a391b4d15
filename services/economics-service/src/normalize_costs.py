from __future__ import annotations

import logging
import math
from typing import Iterable

from engine_errors import InvalidInputError, PreconditionViolationError
from subscription_model import (
    BillingCycle,
    EngineConfig,
    NormalizedCost,
    SpendOverview,
    SubscriptionRecord,
    SubscriptionStatus,
)

logger = logging.getLogger(__name__)

MONTHS_PER_YEAR = 12
WEEKS_PER_YEAR = 52
# Used for every weekly conversion so monthly and yearly totals never drift apart.
WEEKS_PER_MONTH = WEEKS_PER_YEAR / MONTHS_PER_YEAR


def validate_record(record: SubscriptionRecord) -> SubscriptionRecord:
    """
    Reject records that cannot be priced.

    Raises:
        InvalidInputError: when the id or name is blank, the cost is negative or not a
            finite number, or the status is not a SubscriptionStatus.
    """
    record_id = getattr(record, "id", None)
    if not record_id or not str(record_id).strip():
        raise InvalidInputError("Subscription record is missing an id", field="id")
    if not record.name or not record.name.strip():
        raise InvalidInputError("Subscription name must not be empty", record_id=record_id, field="name")

    cost = record.cost
    if isinstance(cost, bool) or not isinstance(cost, (int, float)):
        raise InvalidInputError(
            f"Subscription cost must be numeric (received {cost!r})", record_id=record_id, field="cost"
        )
    if not math.isfinite(cost) or cost < 0:
        raise InvalidInputError(
            f"Subscription cost must be a non-negative amount (received {cost!r})",
            record_id=record_id,
            field="cost",
        )
    if not isinstance(record.status, SubscriptionStatus):
        raise InvalidInputError(
            f"Unsupported subscription status {record.status!r}", record_id=record_id, field="status"
        )
    return record


def validate_config(config: EngineConfig) -> EngineConfig:
    if config.unused_threshold_days < 1:
        raise PreconditionViolationError(
            f"unused_threshold_days must be at least 1 (received {config.unused_threshold_days})"
        )
    if config.renewal_window_days < 1:
        raise PreconditionViolationError(
            f"renewal_window_days must be at least 1 (received {config.renewal_window_days})"
        )
    return config


def normalize_cost(record: SubscriptionRecord) -> NormalizedCost:
    """
    Express a record's cost on monthly and yearly bases.

    Args:
        record: SubscriptionRecord with a non-negative cost.
    Returns:
        NormalizedCost whose yearly figure equals monthly * 12 (up to float rounding).
    Assumptions:
        Unrecognised billing cycles are read as monthly charges; this is the documented
        fallback, not an error.
    """
    validate_record(record)
    cost = float(record.cost)
    cycle = BillingCycle.parse(record.billing_cycle)

    if cycle is BillingCycle.WEEKLY:
        monthly = cost * WEEKS_PER_MONTH
        yearly = cost * WEEKS_PER_YEAR
    elif cycle is BillingCycle.MONTHLY:
        monthly = cost
        yearly = cost * MONTHS_PER_YEAR
    elif cycle is BillingCycle.QUARTERLY:
        monthly = cost / 3
        yearly = cost * 4
    elif cycle is BillingCycle.YEARLY:
        monthly = cost / MONTHS_PER_YEAR
        yearly = cost
    else:
        monthly = cost
        yearly = cost * MONTHS_PER_YEAR

    return NormalizedCost(monthly=monthly, yearly=yearly)


def monthly_cost(record: SubscriptionRecord) -> float:
    return normalize_cost(record).monthly


def active_records(records: Iterable[SubscriptionRecord]) -> list[SubscriptionRecord]:
    """Validate every record and keep the active ones, preserving input order."""
    return [record for record in records if validate_record(record).is_active]


def compute_spend_overview(records: Iterable[SubscriptionRecord]) -> SpendOverview:
    """
    Calculate headline spend figures for a record list.

    Args:
        records: Subscription records of any status.
    Returns:
        SpendOverview with active monthly/yearly totals, record counts, and the raw
        sum of listed costs across every record.
    """
    all_records = [validate_record(record) for record in records]
    active = [record for record in all_records if record.is_active]

    total_monthly = float(sum(monthly_cost(record) for record in active))
    total_listed_cost = float(sum(float(record.cost) for record in all_records))

    logger.debug(
        "Computed spend overview",
        extra={"record_count": len(all_records), "active_count": len(active)},
    )
    return SpendOverview(
        total_monthly=total_monthly,
        total_yearly=total_monthly * MONTHS_PER_YEAR,
        total_subscriptions=len(all_records),
        active_subscriptions=len(active),
        total_listed_cost=total_listed_cost,
    )
