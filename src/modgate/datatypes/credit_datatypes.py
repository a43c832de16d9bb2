"""
Credit balance and subscription contracts.

`CreditState` is the snapshot the decision core reads; the other types are the
shapes reported back to account owners.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from modgate.datatypes.enums import BillingCycle, ModerationModel, Tier


def _parse_datetime(raw: Any) -> Optional[datetime]:
    if raw in (None, ""):
        return None
    if isinstance(raw, datetime):
        return raw
    return datetime.fromisoformat(str(raw))


def _format_datetime(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True, slots=True)
class CreditState:
    """Per-account credit snapshot.

    Attributes:
        remaining_credits: Credits still available this period; never negative.
        max_monthly_credits: Monthly cap granted by the account's tier.
        reset_date: When the balance is next reset to the cap, if scheduled.
        billing_cycle: Cadence of the subscription paying for the credits.
    """

    remaining_credits: int
    max_monthly_credits: int
    reset_date: Optional[datetime] = None
    billing_cycle: BillingCycle = BillingCycle.MONTHLY

    def __post_init__(self) -> None:
        if self.remaining_credits < 0:
            raise ValueError(f"remaining_credits must be non-negative, got {self.remaining_credits}")
        if self.max_monthly_credits < 0:
            raise ValueError(f"max_monthly_credits must be non-negative, got {self.max_monthly_credits}")

    @property
    def used_credits(self) -> int:
        return max(self.max_monthly_credits - self.remaining_credits, 0)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CreditState":
        return cls(
            remaining_credits=int(data["remaining_credits"]),
            max_monthly_credits=int(data["max_monthly_credits"]),
            reset_date=_parse_datetime(data.get("reset_date")),
            billing_cycle=BillingCycle.parse(data.get("billing_cycle", "monthly")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "remaining_credits": self.remaining_credits,
            "max_monthly_credits": self.max_monthly_credits,
            "reset_date": _format_datetime(self.reset_date),
            "billing_cycle": self.billing_cycle.to_wire_string(),
        }


@dataclass(slots=True)
class CreditBalance:
    """Balance summary shown to account owners."""

    used_current_period: int
    max_monthly_credits: int
    remaining_credits: int
    usage_percentage: float
    reset_date: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "used_current_period": self.used_current_period,
            "max_monthly_credits": self.max_monthly_credits,
            "remaining_credits": self.remaining_credits,
            "usage_percentage": self.usage_percentage,
            "reset_date": _format_datetime(self.reset_date),
        }


@dataclass(slots=True)
class CreditTransaction:
    """One ledger movement. Charges carry a negative ``amount``."""

    id: str
    amount: int
    transaction_type: str
    description: str
    created_at: datetime
    model_type: Optional[ModerationModel] = None
    bytes_processed: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "amount": self.amount,
            "transaction_type": self.transaction_type,
            "model_type": self.model_type.to_wire_string() if self.model_type is not None else None,
            "bytes_processed": self.bytes_processed,
            "description": self.description,
            "created_at": _format_datetime(self.created_at),
        }


@dataclass(slots=True)
class SubscriptionInfo:
    tier: Tier
    cycle: BillingCycle
    price: float
    max_monthly_credits: int
    is_active: bool
    expires_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SubscriptionInfo":
        return cls(
            tier=Tier.parse(data["tier"]),
            cycle=BillingCycle.parse(data["cycle"]),
            price=float(data.get("price", 0.0)),
            max_monthly_credits=int(data.get("max_monthly_credits", 0)),
            is_active=bool(data.get("is_active", False)),
            expires_at=_parse_datetime(data.get("expires_at")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tier": self.tier.to_wire_string(),
            "cycle": self.cycle.to_wire_string(),
            "price": self.price,
            "expires_at": _format_datetime(self.expires_at),
            "max_monthly_credits": self.max_monthly_credits,
            "is_active": self.is_active,
        }


@dataclass(slots=True)
class CreditProduct:
    """A purchasable credit pack."""

    id: str
    price_id: str
    name: str
    price_cents: int
    currency: str
    credits_amount: int
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CreditProduct":
        return cls(
            id=str(data["id"]),
            price_id=str(data["price_id"]),
            name=str(data["name"]),
            price_cents=int(data["price_cents"]),
            currency=str(data.get("currency", "usd")),
            credits_amount=int(data["credits_amount"]),
            description=data.get("description"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "price_id": self.price_id,
            "name": self.name,
            "description": self.description,
            "price_cents": self.price_cents,
            "currency": self.currency,
            "credits_amount": self.credits_amount,
        }
