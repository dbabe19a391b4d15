"""
One-call assembly of every derived subscription view.

Presentation layers that render a dashboard need the overview, category breakdown,
trend series, dead-weight list, recommendations and upcoming renewals together;
`build_economics_report` computes them from the same record list and config so the
figures agree with one another.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Iterable, List

from aggregate_spend import aggregate_by_category, aggregate_trends, compute_category_shares
from dead_weight import detect_dead_weight
from generate_recommendations import build_recommendations
from normalize_costs import compute_spend_overview, validate_config
from renewal_urgency import find_upcoming_renewals
from subscription_model import (
    DEFAULT_TREND_MONTHS,
    DEFAULT_UPCOMING_LIMIT,
    CategoryTotal,
    DeadWeightReport,
    EngineConfig,
    RecommendationSet,
    SpendOverview,
    SubscriptionRecord,
    TrendPoint,
    UpcomingRenewal,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EconomicsReport:
    generated_for: date
    overview: SpendOverview
    categories: List[CategoryTotal]
    category_shares: dict[str, float]
    trends: List[TrendPoint]
    dead_weight: DeadWeightReport
    recommendations: RecommendationSet
    upcoming_renewals: List[UpcomingRenewal]


def build_economics_report(
    records: Iterable[SubscriptionRecord],
    config: EngineConfig,
    trend_months: int = DEFAULT_TREND_MONTHS,
    upcoming_limit: int | None = DEFAULT_UPCOMING_LIMIT,
) -> EconomicsReport:
    validate_config(config)
    record_list = list(records)

    report = EconomicsReport(
        generated_for=config.today,
        overview=compute_spend_overview(record_list),
        categories=aggregate_by_category(record_list),
        category_shares=compute_category_shares(record_list),
        trends=aggregate_trends(record_list, config, months=trend_months),
        dead_weight=detect_dead_weight(record_list, config),
        recommendations=build_recommendations(record_list, config),
        upcoming_renewals=find_upcoming_renewals(record_list, config, limit=upcoming_limit),
    )
    logger.info(
        "Built economics report",
        extra={
            "record_count": report.overview.total_subscriptions,
            "dead_weight_count": report.dead_weight.count,
            "recommendation_count": len(report.recommendations.recommendations),
        },
    )
    return report


def report_to_dict(report: EconomicsReport) -> dict[str, Any]:
    """Flatten a report into JSON-serialisable plain data (ISO dates, enum values)."""
    return _to_plain(report)


def _to_plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if hasattr(value, "__dataclass_fields__"):
        plain = {name: _to_plain(getattr(value, name)) for name in value.__dataclass_fields__}
        if isinstance(value, DeadWeightReport):
            plain["count"] = value.count
        return plain
    if isinstance(value, dict):
        return {str(key): _to_plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_plain(item) for item in value]
    return value
