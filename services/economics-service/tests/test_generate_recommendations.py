"""Tests for generate_recommendations.py - cancellation recommendations for unused subscriptions."""

from datetime import date, timedelta

import pytest
from generate_recommendations import build_recommendations
from subscription_model import (
    BillingCycle,
    EngineConfig,
    RecommendationPriority,
    SubscriptionRecord,
    SubscriptionStatus,
)

NOW = date(2024, 6, 15)


def make_record(
    id_suffix: str,
    last_used: date | None,
    cost: float = 10.0,
    billing_cycle: BillingCycle = BillingCycle.MONTHLY,
    status: SubscriptionStatus = SubscriptionStatus.ACTIVE,
) -> SubscriptionRecord:
    """Create a SubscriptionRecord instance for testing."""
    return SubscriptionRecord(
        id=f"sub-{id_suffix}",
        name=f"Tool {id_suffix}",
        cost=cost,
        billing_cycle=billing_cycle,
        category="Marketing",
        last_used=last_used,
        status=status,
    )


def test_one_recommendation_per_dead_weight_record():
    records = [
        make_record("never", None),
        make_record("stale", NOW - timedelta(days=120)),
        make_record("recent", NOW - timedelta(days=5)),
        make_record("cancelled", None, status=SubscriptionStatus.CANCELLED),
    ]

    result = build_recommendations(records, EngineConfig(now=NOW))

    assert sorted(item.subscription_id for item in result.recommendations) == ["sub-never", "sub-stale"]


def test_priority_tracks_days_unused():
    records = [
        make_record("never", None),
        make_record("very-stale", NOW - timedelta(days=181)),
        make_record("stale", NOW - timedelta(days=100)),
    ]

    result = build_recommendations(records, EngineConfig(now=NOW, unused_threshold_days=90))
    priorities = {item.subscription_id: item.priority for item in result.recommendations}

    assert priorities["sub-never"] is RecommendationPriority.HIGH
    assert priorities["sub-very-stale"] is RecommendationPriority.HIGH
    assert priorities["sub-stale"] is RecommendationPriority.MEDIUM


def test_exactly_double_threshold_is_medium():
    records = [make_record("edge", NOW - timedelta(days=180))]

    result = build_recommendations(records, EngineConfig(now=NOW, unused_threshold_days=90))

    assert result.recommendations[0].priority is RecommendationPriority.MEDIUM


def test_ordered_by_savings_then_id():
    records = [
        make_record("b", None, cost=5.0),
        make_record("c", None, cost=240.0, billing_cycle=BillingCycle.YEARLY),
        make_record("a", None, cost=5.0),
    ]

    result = build_recommendations(records, EngineConfig(now=NOW))

    assert [item.subscription_id for item in result.recommendations] == ["sub-c", "sub-a", "sub-b"]
    assert result.recommendations[0].potential_monthly_savings == pytest.approx(20.0)


def test_total_equals_sum_of_individual_savings():
    records = [
        make_record("1", None, cost=3.0, billing_cycle=BillingCycle.WEEKLY),
        make_record("2", None, cost=30.0, billing_cycle=BillingCycle.QUARTERLY),
        make_record("3", NOW - timedelta(days=91), cost=12.5),
    ]

    result = build_recommendations(records, EngineConfig(now=NOW))

    assert result.total_potential_savings == pytest.approx(
        sum(item.potential_monthly_savings for item in result.recommendations)
    )
    assert result.total_potential_savings == pytest.approx(3.0 * 52 / 12 + 10.0 + 12.5)


def test_titles_and_descriptions_name_the_subscription():
    records = [make_record("stale", NOW - timedelta(days=100), cost=12.0)]

    recommendation = build_recommendations(records, EngineConfig(now=NOW)).recommendations[0]

    assert recommendation.id == "unused-sub-stale"
    assert recommendation.title == "Consider cancelling Tool stale"
    assert "100 days" in recommendation.description
    assert "$12.00" in recommendation.description


def test_no_dead_weight_yields_empty_set():
    result = build_recommendations([make_record("recent", NOW)], EngineConfig(now=NOW))

    assert result.recommendations == []
    assert result.total_potential_savings == 0.0
