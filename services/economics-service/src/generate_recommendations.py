from __future__ import annotations

from typing import Iterable, List

from dead_weight import detect_dead_weight
from subscription_model import (
    DeadWeightEntry,
    EngineConfig,
    Recommendation,
    RecommendationPriority,
    RecommendationSet,
    SubscriptionRecord,
)


def _priority_for(entry: DeadWeightEntry, threshold_days: int) -> RecommendationPriority:
    """Never-used records and those idle for more than twice the threshold are high priority."""
    if entry.days_unused is None or entry.days_unused > 2 * threshold_days:
        return RecommendationPriority.HIGH
    return RecommendationPriority.MEDIUM


def _describe(entry: DeadWeightEntry) -> str:
    name = entry.record.name
    savings = f"${entry.monthly_cost:,.2f}"
    if entry.days_unused is None:
        return f"{name} has no recorded usage. Cancelling it would save about {savings} per month."
    return (
        f"{name} has not been used for {entry.days_unused} days. "
        f"Cancelling it would save about {savings} per month."
    )


def build_recommendations(records: Iterable[SubscriptionRecord], config: EngineConfig) -> RecommendationSet:
    """
    Produce one cancellation recommendation per dead-weight subscription.

    Recommendations are ordered by descending potential monthly savings, ties broken by
    subscription id, and the set carries the summed savings alongside the list.
    """
    report = detect_dead_weight(records, config)

    recommendations: List[Recommendation] = [
        Recommendation(
            id=f"unused-{entry.record.id}",
            subscription_id=entry.record.id,
            priority=_priority_for(entry, report.threshold_days),
            title=f"Consider cancelling {entry.record.name}",
            description=_describe(entry),
            potential_monthly_savings=entry.monthly_cost,
        )
        for entry in report.records
    ]
    recommendations.sort(key=lambda item: (-item.potential_monthly_savings, item.subscription_id))

    return RecommendationSet(
        recommendations=recommendations,
        total_potential_savings=float(sum(item.potential_monthly_savings for item in recommendations)),
    )
