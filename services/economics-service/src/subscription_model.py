from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

DEFAULT_UNUSED_THRESHOLD_DAYS = 90
DEFAULT_RENEWAL_WINDOW_DAYS = 30
DEFAULT_TREND_MONTHS = 6
DEFAULT_UPCOMING_LIMIT = 5

# Fixed urgency buckets; the renewal window only widens the "upcoming" band.
URGENT_WINDOW_DAYS = 7
SOON_WINDOW_DAYS = 30

OTHER_CATEGORY = "Other"
KNOWN_CATEGORIES = (
    "Design Tools",
    "Development",
    "Productivity",
    "Stock Assets",
    "Cloud Storage",
    "Marketing",
    "Communication",
    "Entertainment",
    OTHER_CATEGORY,
)

_CATEGORY_LOOKUP = {category.lower(): category for category in KNOWN_CATEGORIES}


def canonicalize_category(label: str | None) -> str:
    """Map a free-form label onto the known catalogue, falling back to "Other"."""
    if not label:
        return OTHER_CATEGORY
    return _CATEGORY_LOOKUP.get(label.strip().lower(), OTHER_CATEGORY)


class BillingCycle(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"
    # Anything outside the four recognised cycles; costs are read as monthly.
    UNRECOGNIZED = "unrecognized"

    @classmethod
    def parse(cls, raw_value: str | BillingCycle | None) -> BillingCycle:
        if isinstance(raw_value, BillingCycle):
            return raw_value
        candidate = (raw_value or "").strip().lower()
        for cycle in cls:
            if cycle is not cls.UNRECOGNIZED and cycle.value == candidate:
                return cycle
        return cls.UNRECOGNIZED


class SubscriptionStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    CANCELLED = "cancelled"
    PAUSED = "paused"


class UrgencyLevel(str, Enum):
    OVERDUE = "overdue"
    URGENT = "urgent"
    SOON = "soon"
    UPCOMING = "upcoming"
    LATER = "later"


class RecommendationPriority(str, Enum):
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True, slots=True)
class SubscriptionRecord:
    """
    A single subscription as resolved from storage.

    `billing_cycle` keeps whatever cycle the source declared; unknown cycles are
    carried as BillingCycle.UNRECOGNIZED rather than rejected.
    """

    id: str
    name: str
    cost: float
    billing_cycle: BillingCycle
    category: str
    next_billing_date: date | None = None
    last_used: date | None = None
    status: SubscriptionStatus = SubscriptionStatus.ACTIVE
    created_at: date | None = None
    notes: str = ""

    @property
    def is_active(self) -> bool:
        return self.status is SubscriptionStatus.ACTIVE


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """
    Per-call configuration. `now` is the only clock the engine ever consults.
    """

    now: date | datetime
    unused_threshold_days: int = DEFAULT_UNUSED_THRESHOLD_DAYS
    renewal_window_days: int = DEFAULT_RENEWAL_WINDOW_DAYS

    @property
    def today(self) -> date:
        return as_calendar_date(self.now)


def as_calendar_date(value: date | datetime) -> date:
    """Drop any time-of-day component so day arithmetic works on whole days."""
    if isinstance(value, datetime):
        return value.date()
    return value


@dataclass(frozen=True, slots=True)
class NormalizedCost:
    monthly: float
    yearly: float


@dataclass(frozen=True, slots=True)
class CategoryTotal:
    category: str
    total_monthly: float
    count: int


@dataclass(frozen=True, slots=True)
class TrendPoint:
    month: str  # YYYY-MM
    total: float


@dataclass(frozen=True, slots=True)
class DeadWeightEntry:
    record: SubscriptionRecord
    reason: str
    days_unused: int | None  # None when usage was never recorded
    monthly_cost: float


@dataclass(frozen=True, slots=True)
class DeadWeightReport:
    records: list[DeadWeightEntry]
    monthly_savings: float
    yearly_savings: float
    threshold_days: int

    @property
    def count(self) -> int:
        return len(self.records)


@dataclass(frozen=True, slots=True)
class Recommendation:
    id: str
    subscription_id: str
    priority: RecommendationPriority
    title: str
    description: str
    potential_monthly_savings: float


@dataclass(frozen=True, slots=True)
class RecommendationSet:
    recommendations: list[Recommendation] = field(default_factory=list)
    total_potential_savings: float = 0.0


@dataclass(frozen=True, slots=True)
class UpcomingRenewal:
    record: SubscriptionRecord
    days_until: int
    urgency: UrgencyLevel


@dataclass(frozen=True, slots=True)
class SpendOverview:
    total_monthly: float
    total_yearly: float
    total_subscriptions: int
    active_subscriptions: int
    total_listed_cost: float
