"""Data models for custody holdings.

Pure data plus validation — no I/O.

State machine:
    pending -> approved   (checker/admin)
    pending -> rejected   (checker/admin)
    approved, rejected: terminal, no transition out
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import StrEnum
from typing import Any

from custodia.core.exceptions import InvalidStateError, ValidationError
from custodia.core.types import to_date, to_decimal

from .identifiers import validate_security_id


class HoldingStatus(StrEnum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ReviewDecision(StrEnum):
    APPROVE = "approve"
    REJECT = "reject"

    @property
    def target_status(self) -> HoldingStatus:
        return HoldingStatus.APPROVED if self is ReviewDecision.APPROVE else HoldingStatus.REJECTED


# Valid transitions: from_status -> set of allowed to_statuses
VALID_TRANSITIONS: dict[HoldingStatus, set[HoldingStatus]] = {
    HoldingStatus.PENDING: {HoldingStatus.APPROVED, HoldingStatus.REJECTED},
    HoldingStatus.APPROVED: set(),
    HoldingStatus.REJECTED: set(),
}

TERMINAL_STATUSES = frozenset({HoldingStatus.APPROVED, HoldingStatus.REJECTED})

# Fields a maker (or admin) may change while a holding is pending
EDITABLE_FIELDS = frozenset(
    {"security_id", "security_name", "quantity", "price", "purchase_price", "purchase_date", "asset_class"}
)
PROTECTED_FIELDS = frozenset({"id", "status", "owner_id", "created", "updated"})


def _now() -> str:
    return datetime.now().isoformat(timespec="seconds")


@dataclass
class HoldingRecord:
    """A single portfolio line item and its lifecycle state.

    Attributes:
        id: Store-assigned identifier (``hld-000001``).
        security_id: ISIN-style 12-character identifier.
        security_name: Human-readable instrument name.
        quantity: Units held; always > 0.
        price: Current (live) price per unit; >= 0.
        purchase_price: Cost per unit; None means "not recorded" (cost = current price).
        purchase_date: Trade date, if known.
        asset_class: e.g. "Equity", "Bond"; None falls back to the metrics default.
        status: Lifecycle state.
        owner_id: Id of the maker who submitted the holding.
    """

    id: str
    security_id: str
    security_name: str
    quantity: Decimal
    price: Decimal
    owner_id: str
    purchase_price: Decimal | None = None
    purchase_date: date | None = None
    asset_class: str | None = None
    status: HoldingStatus = HoldingStatus.PENDING
    created: str = field(default_factory=_now)
    updated: str = field(default_factory=_now)

    def __post_init__(self):
        self.security_id = validate_security_id(self.security_id)
        self.security_name = (self.security_name or "").strip()
        if not self.security_name:
            raise ValidationError("Security name is required")

        self.quantity = to_decimal(self.quantity, "quantity")
        if self.quantity <= 0:
            raise ValidationError(f"Quantity must be positive for {self.security_id}: {self.quantity}")

        self.price = to_decimal(self.price, "price")
        if self.price < 0:
            raise ValidationError(f"Negative price for {self.security_id}: {self.price}")

        if self.purchase_price is not None and self.purchase_price != "":
            self.purchase_price = to_decimal(self.purchase_price, "purchase_price")
            if self.purchase_price < 0:
                raise ValidationError(f"Negative purchase price for {self.security_id}: {self.purchase_price}")
        else:
            self.purchase_price = None

        if self.purchase_date is not None and self.purchase_date != "":
            self.purchase_date = to_date(self.purchase_date, "purchase_date")
        else:
            self.purchase_date = None

        if self.asset_class is not None:
            self.asset_class = str(self.asset_class).strip() or None

        if not isinstance(self.status, HoldingStatus):
            try:
                self.status = HoldingStatus(str(self.status))
            except ValueError:
                raise ValidationError(f"Unknown holding status: {self.status!r}") from None

    @property
    def current_value(self) -> Decimal:
        return self.quantity * self.price

    @property
    def purchase_value(self) -> Decimal:
        """Cost basis; equals current value when no purchase price was recorded."""
        cost = self.purchase_price if self.purchase_price is not None else self.price
        return self.quantity * cost

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


def validate_transition(current: HoldingStatus, target: HoldingStatus) -> None:
    """Raise InvalidStateError if the transition is invalid."""
    allowed = VALID_TRANSITIONS.get(current, set())
    if target not in allowed:
        if not allowed:
            raise InvalidStateError(f"Holding is already {current.value}; no further transition is allowed")
        raise InvalidStateError(
            f"Invalid transition: {current.value} -> {target.value}. "
            f"Allowed: {', '.join(s.value for s in sorted(allowed, key=lambda s: s.value))}"
        )


def parse_decision(raw: ReviewDecision | str) -> ReviewDecision:
    if isinstance(raw, ReviewDecision):
        return raw
    try:
        return ReviewDecision(str(raw).strip().lower())
    except ValueError:
        raise ValidationError(f"Unknown review decision {raw!r}. Allowed: approve, reject") from None


def holding_to_dict(holding: HoldingRecord) -> dict[str, Any]:
    """Serialize a HoldingRecord to a JSON/YAML-safe dict (Decimals as strings)."""
    return {
        "id": holding.id,
        "security_id": holding.security_id,
        "security_name": holding.security_name,
        "quantity": str(holding.quantity),
        "price": str(holding.price),
        "purchase_price": str(holding.purchase_price) if holding.purchase_price is not None else None,
        "purchase_date": holding.purchase_date.isoformat() if holding.purchase_date else None,
        "asset_class": holding.asset_class,
        "status": holding.status.value,
        "owner_id": holding.owner_id,
        "created": holding.created,
        "updated": holding.updated,
    }


def holding_from_dict(data: dict[str, Any]) -> HoldingRecord:
    """Deserialize a HoldingRecord; unknown keys are ignored."""
    known = EDITABLE_FIELDS | PROTECTED_FIELDS
    kwargs = {k: v for k, v in data.items() if k in known}
    # YAML loads bare dates as datetime.date and ids as ints
    kwargs["id"] = str(kwargs.get("id", ""))
    kwargs["owner_id"] = str(kwargs.get("owner_id", ""))
    for ts in ("created", "updated"):
        if ts in kwargs and not isinstance(kwargs[ts], str):
            kwargs[ts] = str(kwargs[ts])
    try:
        return HoldingRecord(**kwargs)
    except TypeError as e:
        raise ValidationError(f"Incomplete holding record: {e}") from None
