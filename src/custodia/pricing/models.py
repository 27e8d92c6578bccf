"""Price observation model — one recorded price per security per calendar day."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from custodia.core.exceptions import ValidationError
from custodia.core.types import to_date, to_decimal
from custodia.portfolio.identifiers import validate_security_id


@dataclass(frozen=True)
class PriceObservation:
    """A single price for one security on one day.

    ``key`` (``(security_id, date)``) is unique within a price series.
    """

    security_id: str
    date: date
    price: Decimal

    def __post_init__(self):
        object.__setattr__(self, "security_id", validate_security_id(self.security_id))
        object.__setattr__(self, "date", to_date(self.date))
        price = to_decimal(self.price, "price")
        if price < 0:
            raise ValidationError(f"Negative price for {self.security_id} on {self.date}: {price}")
        object.__setattr__(self, "price", price)

    @property
    def key(self) -> tuple[str, date]:
        return (self.security_id, self.date)

    def to_dict(self) -> dict[str, Any]:
        return {"security_id": self.security_id, "date": self.date.isoformat(), "price": str(self.price)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PriceObservation:
        try:
            return cls(security_id=data["security_id"], date=data["date"], price=data["price"])
        except KeyError as e:
            raise ValidationError(f"Price observation missing field: {e.args[0]}") from None
