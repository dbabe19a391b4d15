from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, List

from engine_errors import PreconditionViolationError
from normalize_costs import active_records, monthly_cost, validate_config, validate_record
from subscription_model import (
    DEFAULT_TREND_MONTHS,
    CategoryTotal,
    EngineConfig,
    SubscriptionRecord,
    TrendPoint,
    as_calendar_date,
)

TREND_DATE_FIELDS = frozenset({"created_at", "next_billing_date", "last_used"})


def aggregate_by_category(records: Iterable[SubscriptionRecord]) -> List[CategoryTotal]:
    """
    Total the monthly-equivalent spend of active subscriptions per category.

    Args:
        records: Subscription records; categories are compared verbatim (no case folding).
    Returns:
        One CategoryTotal per category present among active records, ordered by
        descending total_monthly with ties broken by category name.
    """
    totals: Dict[str, float] = {}
    counts: Dict[str, int] = {}
    for record in active_records(records):
        totals[record.category] = totals.get(record.category, 0.0) + monthly_cost(record)
        counts[record.category] = counts.get(record.category, 0) + 1

    breakdown = [
        CategoryTotal(category=category, total_monthly=total, count=counts[category])
        for category, total in totals.items()
    ]
    breakdown.sort(key=lambda entry: (-entry.total_monthly, entry.category))
    return breakdown


def breakdown_as_mapping(breakdown: Iterable[CategoryTotal]) -> Dict[str, Dict[str, float | int]]:
    return {
        entry.category: {"total_monthly": entry.total_monthly, "count": entry.count}
        for entry in breakdown
    }


def compute_category_shares(records: Iterable[SubscriptionRecord]) -> Dict[str, float]:
    """
    Derive each category's share of total active monthly spend.

    Returns:
        Dict of ratios that sum to 1 when spend is positive; empty dict when it is zero.
    """
    breakdown = aggregate_by_category(records)
    total = float(sum(entry.total_monthly for entry in breakdown))
    if total == 0:
        return {}
    return {entry.category: entry.total_monthly / total for entry in breakdown}


def _month_index(value: date) -> int:
    return value.year * 12 + (value.month - 1)


def _month_label(index: int) -> str:
    year, month_offset = divmod(index, 12)
    return f"{year:04d}-{month_offset + 1:02d}"


def aggregate_trends(
    records: Iterable[SubscriptionRecord],
    config: EngineConfig,
    months: int = DEFAULT_TREND_MONTHS,
    date_field: str = "created_at",
) -> List[TrendPoint]:
    """
    Sum monthly-equivalent cost per calendar month of `date_field`.

    The window covers the month containing `config.now` and the `months - 1` months
    before it. Months without contributing records are omitted rather than zero-filled,
    so chart callers wanting a continuous axis must pad the gaps themselves.
    """
    validate_config(config)
    if date_field not in TREND_DATE_FIELDS:
        raise PreconditionViolationError(f"Cannot group trends by '{date_field}'")
    if months < 1:
        return []

    current_month = _month_index(config.today)
    first_month = current_month - (months - 1)
    totals: Dict[int, float] = {}
    for record in records:
        validate_record(record)
        stamp = getattr(record, date_field)
        if stamp is None:
            continue
        stamp = as_calendar_date(stamp)
        if stamp > config.today:
            continue
        index = _month_index(stamp)
        if index < first_month:
            continue
        totals[index] = totals.get(index, 0.0) + monthly_cost(record)

    return [TrendPoint(month=_month_label(index), total=totals[index]) for index in sorted(totals)]
