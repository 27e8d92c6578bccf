"""Point-in-time portfolio valuation against the price series.

Pricing policy: a holding whose security has no observation for the
requested day is valued at its stored current price and flagged with
``used_fallback``. Whole-portfolio valuation therefore never fails for a
missing price, while single-security ``resolve_price`` still raises. The
flagged securities are what a caller prompts the user to supply prices for.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal

from loguru import logger

from custodia.core.events import VALUATION_PRICE_MISSING, EventBus
from custodia.core.exceptions import NotFoundError, ValidationError
from custodia.core.types import DateLike, to_date
from custodia.portfolio.models import HoldingRecord
from custodia.pricing.store import PriceSeriesStore


@dataclass(frozen=True)
class ValuedHolding:
    holding_id: str
    security_id: str
    quantity: Decimal
    resolved_price: Decimal
    resolved_value: Decimal
    used_fallback: bool = False


@dataclass
class ValuationSnapshot:
    """Valuation of a set of holdings as of one calendar day. Derived, never stored."""

    date: date
    items: list[ValuedHolding] = field(default_factory=list)
    total_value: Decimal = Decimal("0")

    @property
    def fallback_holdings(self) -> list[str]:
        """Ids of holdings valued at their current price instead of a recorded one."""
        return [item.holding_id for item in self.items if item.used_fallback]

    @property
    def missing_prices(self) -> list[str]:
        """Distinct security ids lacking an observation for this day, in first-seen order."""
        return list(dict.fromkeys(item.security_id for item in self.items if item.used_fallback))

    @property
    def complete(self) -> bool:
        return not any(item.used_fallback for item in self.items)


class ValuationEngine:
    """Values holdings as of a date using a PriceSeriesStore."""

    def __init__(self, prices: PriceSeriesStore, *, bus: EventBus | None = None) -> None:
        self._prices = prices
        self._bus = bus

    async def value_as_of(self, holdings: Iterable[HoldingRecord], as_of: DateLike) -> ValuationSnapshot:
        day = to_date(as_of)
        snapshot = ValuationSnapshot(date=day)
        total = Decimal("0")

        for holding in holdings:
            used_fallback = False
            try:
                price = await self._prices.resolve_price(holding.security_id, day)
            except NotFoundError:
                logger.debug(f"No price for {holding.security_id} on {day}; using current price {holding.price}")
                price = holding.price
                used_fallback = True

            value = holding.quantity * price
            total += value
            snapshot.items.append(
                ValuedHolding(
                    holding_id=holding.id,
                    security_id=holding.security_id,
                    quantity=holding.quantity,
                    resolved_price=price,
                    resolved_value=value,
                    used_fallback=used_fallback,
                )
            )

        snapshot.total_value = total

        missing = snapshot.missing_prices
        if missing:
            logger.info(
                f"Valuation for {day}: {len(missing)} securities priced at current price ({', '.join(missing)})"
            )
            if self._bus is not None:
                await self._bus.publish(
                    VALUATION_PRICE_MISSING,
                    {"date": day.isoformat(), "security_ids": missing, "holding_ids": snapshot.fallback_holdings},
                    source="valuation",
                )
        return snapshot

    async def value_over(
        self,
        holdings: Iterable[HoldingRecord],
        start: DateLike,
        end: DateLike,
    ) -> list[ValuationSnapshot]:
        """One snapshot per calendar day from *start* to *end*, inclusive."""
        first = to_date(start, "start")
        last = to_date(end, "end")
        if last < first:
            raise ValidationError(f"end ({last}) is before start ({first})")

        holdings = list(holdings)
        snapshots = []
        day = first
        while day <= last:
            snapshots.append(await self.value_as_of(holdings, day))
            day += timedelta(days=1)
        return snapshots
