"""
Validated boundary models for subscription records.

Raw rows (CSV lines, JSON documents fetched by the data layer) are validated here
before they become SubscriptionRecord dataclasses, so the engine only ever sees
typed values.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from engine_errors import InvalidInputError
from subscription_model import BillingCycle, SubscriptionRecord, SubscriptionStatus

_CURRENCY_SYMBOLS = ("$", "€", "£")


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and value.strip() == "":
        return None
    return value


def _parse_date(value: Any) -> date | None:
    value = _blank_to_none(value)
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    # Timestamps keep only their date part; anything else must be a bare date.
    candidate = text[:10] if text[10:11] in ("T", " ") else text
    try:
        return date.fromisoformat(candidate)
    except ValueError as exc:
        raise ValueError(f"'{text}' is not a YYYY-MM-DD date") from exc


class SubscriptionPayload(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    cost: float = Field(ge=0, allow_inf_nan=False)
    billing_cycle: str = "monthly"
    category: str = "Other"
    next_billing_date: date | None = None
    last_used: date | None = None
    status: SubscriptionStatus = SubscriptionStatus.ACTIVE
    created_at: date | None = None
    notes: str = ""

    @field_validator("cost", mode="before")
    @classmethod
    def _strip_currency(cls, value: Any) -> Any:
        if isinstance(value, str):
            cleaned = value.replace(",", "").strip()
            for symbol in _CURRENCY_SYMBOLS:
                cleaned = cleaned.replace(symbol, "")
            return cleaned
        return value

    @field_validator("next_billing_date", "last_used", "created_at", mode="before")
    @classmethod
    def _coerce_date(cls, value: Any) -> date | None:
        return _parse_date(value)

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value: Any) -> Any:
        value = _blank_to_none(value)
        if value is None:
            return SubscriptionStatus.ACTIVE
        return str(value).strip().lower() if isinstance(value, str) else value

    @field_validator("billing_cycle", "category", "notes", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def to_dataclass(self) -> SubscriptionRecord:
        """Convert the validated payload into the engine's record type."""
        return SubscriptionRecord(
            id=self.id,
            name=self.name,
            cost=self.cost,
            billing_cycle=BillingCycle.parse(self.billing_cycle),
            category=self.category or "Other",
            next_billing_date=self.next_billing_date,
            last_used=self.last_used,
            status=self.status,
            created_at=self.created_at,
            notes=self.notes,
        )


def record_from_mapping(data: dict[str, Any]) -> SubscriptionRecord:
    """
    Validate a raw mapping and build a SubscriptionRecord from it.

    Raises:
        InvalidInputError: naming the first field pydantic rejected.
    """
    try:
        payload = SubscriptionPayload.model_validate(data)
    except ValidationError as exc:
        first_error = exc.errors()[0]
        location = ".".join(str(part) for part in first_error.get("loc", ())) or None
        raise InvalidInputError(
            f"Invalid subscription record: {location or 'record'}: {first_error.get('msg')}",
            record_id=str(data.get("id")) if data.get("id") else None,
            field=location,
        ) from exc
    return payload.to_dataclass()

