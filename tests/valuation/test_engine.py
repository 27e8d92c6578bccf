"""Tests for ValuationEngine."""

from datetime import date
from decimal import Decimal

import pytest

from custodia.core.events import VALUATION_PRICE_MISSING
from custodia.core.exceptions import ValidationError
from custodia.portfolio.models import HoldingRecord
from custodia.valuation.engine import ValuationEngine

APPLE = "US0378331005"
MICROSOFT = "US5949181045"


def _holding(hid, security_id, quantity, price, **kwargs):
    return HoldingRecord(
        id=hid,
        security_id=security_id,
        security_name=security_id,
        quantity=quantity,
        price=price,
        owner_id="usr-maker1",
        **kwargs,
    )


@pytest.fixture
def holdings():
    return [
        _holding("hld-000001", APPLE, 100, 150),
        _holding("hld-000002", MICROSOFT, 10, 400),
        _holding("hld-000003", APPLE, 20, 150),
    ]


@pytest.fixture
async def engine(price_store, bus):
    await price_store.record_price(APPLE, "2025-10-07", 148)
    await price_store.record_price(MICROSOFT, "2025-10-07", 410)
    await price_store.record_price(APPLE, "2025-10-08", 149)
    return ValuationEngine(price_store, bus=bus)


@pytest.mark.smoke
class TestValueAsOf:
    async def test_all_prices_recorded(self, engine, holdings):
        snapshot = await engine.value_as_of(holdings, "2025-10-07")
        assert snapshot.date == date(2025, 10, 7)
        assert [item.resolved_price for item in snapshot.items] == [Decimal("148"), Decimal("410"), Decimal("148")]
        assert snapshot.total_value == Decimal("100") * 148 + 10 * 410 + 20 * 148
        assert snapshot.complete
        assert snapshot.missing_prices == []

    async def test_partial_fallback(self, engine, holdings):
        snapshot = await engine.value_as_of(holdings, date(2025, 10, 8))
        msft = snapshot.items[1]
        assert msft.used_fallback
        assert msft.resolved_price == Decimal("400")
        assert msft.resolved_value == Decimal("4000")
        assert not snapshot.items[0].used_fallback
        assert snapshot.total_value == Decimal("120") * 149 + 4000
        assert snapshot.missing_prices == [MICROSOFT]
        assert snapshot.fallback_holdings == ["hld-000002"]

    async def test_no_prices_uses_current(self, engine, holdings):
        snapshot = await engine.value_as_of(holdings, "2025-10-09")
        assert all(item.used_fallback for item in snapshot.items)
        assert snapshot.total_value == Decimal("100") * 150 + 10 * 400 + 20 * 150
        assert snapshot.missing_prices == [APPLE, MICROSOFT]
        assert not snapshot.complete

    async def test_empty(self, engine):
        snapshot = await engine.value_as_of([], "2025-10-07")
        assert snapshot.items == []
        assert snapshot.total_value == 0
        assert snapshot.complete

    async def test_missing_prices_event(self, engine, holdings, recorder):
        def missing_events():
            return [e for e in recorder.events if e.name == VALUATION_PRICE_MISSING]

        await engine.value_as_of(holdings, "2025-10-07")
        assert missing_events() == []

        await engine.value_as_of(holdings, "2025-10-09")
        assert len(missing_events()) == 1
        payload = missing_events()[0].payload
        assert payload["date"] == "2025-10-09"
        assert payload["security_ids"] == [APPLE, MICROSOFT]
        assert payload["holding_ids"] == ["hld-000001", "hld-000002", "hld-000003"]

    async def test_bad_date(self, engine, holdings):
        with pytest.raises(ValidationError):
            await engine.value_as_of(holdings, "last tuesday")


class TestValueOver:
    async def test_one_snapshot_per_day(self, engine, holdings):
        snapshots = await engine.value_over(holdings, "2025-10-07", "2025-10-09")
        assert [s.date.day for s in snapshots] == [7, 8, 9]
        assert [s.complete for s in snapshots] == [True, False, False]

    async def test_single_day(self, engine, holdings):
        snapshots = await engine.value_over(iter(holdings), "2025-10-07", "2025-10-07")
        assert len(snapshots) == 1
        assert len(snapshots[0].items) == 3

    async def test_end_before_start(self, engine, holdings):
        with pytest.raises(ValidationError):
            await engine.value_over(holdings, "2025-10-09", "2025-10-07")
