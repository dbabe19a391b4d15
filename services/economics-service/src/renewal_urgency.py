from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, List

from engine_errors import PreconditionViolationError
from normalize_costs import active_records, validate_config
from subscription_model import (
    DEFAULT_UPCOMING_LIMIT,
    SOON_WINDOW_DAYS,
    URGENT_WINDOW_DAYS,
    EngineConfig,
    SubscriptionRecord,
    UpcomingRenewal,
    UrgencyLevel,
    as_calendar_date,
)


def days_until(next_billing_date: date | datetime, now: date | datetime) -> int:
    """Whole calendar days from `now` to the next charge; negative once the date has passed."""
    return (as_calendar_date(next_billing_date) - as_calendar_date(now)).days


def classify_urgency(
    next_billing_date: date | datetime,
    now: date | datetime,
    renewal_window_days: int,
) -> UrgencyLevel:
    """
    Bucket a renewal date by how soon it charges.

    First match wins: <= 0 days overdue, <= 7 urgent, <= 30 soon, within the renewal
    window upcoming, anything further out later.
    """
    if renewal_window_days < 1:
        raise PreconditionViolationError(
            f"renewal_window_days must be at least 1 (received {renewal_window_days})"
        )

    remaining = days_until(next_billing_date, now)
    if remaining <= 0:
        return UrgencyLevel.OVERDUE
    if remaining <= URGENT_WINDOW_DAYS:
        return UrgencyLevel.URGENT
    if remaining <= SOON_WINDOW_DAYS:
        return UrgencyLevel.SOON
    if remaining <= renewal_window_days:
        return UrgencyLevel.UPCOMING
    return UrgencyLevel.LATER


def classify_record_urgency(record: SubscriptionRecord, config: EngineConfig) -> UrgencyLevel:
    """Classify an active record's renewal; inactive records or missing dates are rejected."""
    validate_config(config)
    if not record.is_active:
        raise PreconditionViolationError(
            f"Urgency is only defined for active subscriptions ({record.id} is {record.status.value})"
        )
    if record.next_billing_date is None:
        raise PreconditionViolationError(f"Subscription {record.id} has no next billing date")
    return classify_urgency(record.next_billing_date, config.now, config.renewal_window_days)


def find_upcoming_renewals(
    records: Iterable[SubscriptionRecord],
    config: EngineConfig,
    limit: int | None = DEFAULT_UPCOMING_LIMIT,
) -> List[UpcomingRenewal]:
    """
    Return active renewals falling inside the renewal window, soonest first.

    Overdue renewals are kept so they surface at the top of the list.
    """
    validate_config(config)
    upcoming: List[UpcomingRenewal] = []
    for record in active_records(records):
        if record.next_billing_date is None:
            continue
        remaining = days_until(record.next_billing_date, config.now)
        if remaining > config.renewal_window_days:
            continue
        upcoming.append(
            UpcomingRenewal(
                record=record,
                days_until=remaining,
                urgency=classify_urgency(record.next_billing_date, config.now, config.renewal_window_days),
            )
        )

    upcoming.sort(key=lambda renewal: (renewal.days_until, renewal.record.id))
    if limit is not None:
        upcoming = upcoming[: max(limit, 0)]
    return upcoming
