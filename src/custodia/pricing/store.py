"""PriceSeriesStore — point-in-time prices keyed by (security, day).

Resolution is exact-match only: no interpolation and no nearest-earlier
fallback. A miss raises PriceNotFoundError so the caller can ask for a
manual price entry.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from datetime import date
from decimal import Decimal
from typing import Protocol, runtime_checkable

from loguru import logger

from custodia.core.events import PRICE_RECORDED, EventBus
from custodia.core.exceptions import PriceNotFoundError, ValidationError
from custodia.core.types import DateLike, Number, to_date
from custodia.portfolio.identifiers import normalize_security_id

from .models import PriceObservation


@runtime_checkable
class PriceSeriesStore(Protocol):
    """Protocol for historical price storage."""

    async def record_price(self, security_id: str, date: DateLike, price: Number) -> PriceObservation:
        """Upsert the price for (security_id, date); last write wins."""
        ...

    async def resolve_price(self, security_id: str, date: DateLike) -> Decimal:
        """Return the price recorded for exactly that day, or raise PriceNotFoundError."""
        ...


class InMemoryPriceSeriesStore:
    """Thread-safe, process-local PriceSeriesStore."""

    def __init__(self, *, bus: EventBus | None = None) -> None:
        self._lock = threading.Lock()
        self._prices: dict[tuple[str, date], PriceObservation] = {}
        self._bus = bus

    async def record_price(self, security_id: str, date: DateLike, price: Number) -> PriceObservation:
        observation = PriceObservation(security_id=security_id, date=date, price=price)
        with self._lock:
            previous = self._prices.get(observation.key)
            self._prices[observation.key] = observation

        if previous is not None and previous.price != observation.price:
            logger.info(
                f"Price for {observation.security_id} on {observation.date} overwritten: "
                f"{previous.price} -> {observation.price}"
            )
        else:
            logger.debug(f"Recorded price {observation.price} for {observation.security_id} on {observation.date}")

        if self._bus is not None:
            await self._bus.publish(
                PRICE_RECORDED,
                {**observation.to_dict(), "replaced": previous is not None},
                source="pricing",
            )
        return observation

    async def resolve_price(self, security_id: str, date: DateLike) -> Decimal:
        key = (normalize_security_id(security_id), to_date(date))
        with self._lock:
            observation = self._prices.get(key)
        if observation is None:
            raise PriceNotFoundError(key[0], key[1].isoformat())
        return observation.price

    async def history(
        self,
        security_id: str,
        *,
        start: DateLike | None = None,
        end: DateLike | None = None,
    ) -> list[PriceObservation]:
        """Observations for one security, oldest first, within inclusive bounds."""
        sid = normalize_security_id(security_id)
        lo = to_date(start, "start") if start is not None else None
        hi = to_date(end, "end") if end is not None else None
        if lo and hi and hi < lo:
            raise ValidationError(f"end ({hi}) is before start ({lo})")
        with self._lock:
            series = [o for (s, _), o in self._prices.items() if s == sid]
        series = [o for o in series if (lo is None or o.date >= lo) and (hi is None or o.date <= hi)]
        return sorted(series, key=lambda o: o.date)

    async def load(self, observations: Iterable[PriceObservation]) -> int:
        """Bulk upsert (no events). Returns the number of observations applied."""
        count = 0
        with self._lock:
            for observation in observations:
                self._prices[observation.key] = observation
                count += 1
        logger.debug(f"Loaded {count} price observations")
        return count

    def count(self) -> int:
        with self._lock:
            return len(self._prices)
