"""Tests for portfolio metrics."""

from decimal import Decimal

import pytest

from custodia.core.exceptions import ValidationError
from custodia.portfolio.models import HoldingRecord, HoldingStatus
from custodia.valuation.metrics import (
    compute_metrics,
    gain_loss_percent,
    position_gains,
    status_totals,
)


def _holding(hid, quantity, price, purchase_price=None, asset_class=None, status=HoldingStatus.APPROVED):
    return HoldingRecord(
        id=hid,
        security_id="US0378331005",
        security_name="Apple Inc",
        quantity=quantity,
        price=price,
        owner_id="usr-maker1",
        purchase_price=purchase_price,
        asset_class=asset_class,
        status=status,
    )


@pytest.mark.smoke
class TestComputeMetrics:
    def test_empty(self):
        metrics = compute_metrics([])
        assert metrics.total_aum == 0
        assert metrics.total_gain_loss == 0
        assert metrics.gain_loss_percent == 0
        assert metrics.asset_breakdown == {}

    def test_single_position(self):
        metrics = compute_metrics([_holding("h1", 100, 150, purchase_price=140, asset_class="Equity")])
        assert metrics.total_aum == Decimal("15000")
        assert metrics.total_gain_loss == Decimal("1000")
        assert metrics.gain_loss_percent == Decimal("7.14")
        assert metrics.asset_breakdown == {"Equity": Decimal("15000")}

    def test_breakdown_sums_to_aum(self):
        metrics = compute_metrics(
            [
                _holding("h1", 100, 150, asset_class="Equity"),
                _holding("h2", 50, 100, asset_class="Bond"),
            ]
        )
        assert metrics.total_aum == Decimal("20000")
        assert metrics.asset_breakdown == {"Equity": Decimal("15000"), "Bond": Decimal("5000")}
        assert sum(metrics.asset_breakdown.values()) == metrics.total_aum

    def test_missing_purchase_price_means_no_gain(self):
        metrics = compute_metrics([_holding("h1", 10, 25)])
        assert metrics.total_gain_loss == 0
        assert metrics.gain_loss_percent == 0

    def test_zero_purchase_value(self):
        metrics = compute_metrics([_holding("h1", 10, 25, purchase_price=0)])
        assert metrics.total_gain_loss == Decimal("250")
        assert metrics.gain_loss_percent == 0

    def test_loss(self):
        metrics = compute_metrics([_holding("h1", 10, 90, purchase_price=100)])
        assert metrics.total_gain_loss == Decimal("-100")
        assert metrics.gain_loss_percent == Decimal("-10.00")

    def test_default_asset_class(self):
        holdings = [_holding("h1", 1, 10), _holding("h2", 1, 5, asset_class="Bond")]
        assert compute_metrics(holdings).asset_breakdown == {"Equity": Decimal("10"), "Bond": Decimal("5")}
        assert compute_metrics(holdings, default_asset_class="Fund").asset_breakdown["Fund"] == Decimal("10")

    def test_all_statuses_by_default(self):
        holdings = [
            _holding("h1", 1, 100, status=HoldingStatus.APPROVED),
            _holding("h2", 1, 10, status=HoldingStatus.PENDING),
            _holding("h3", 1, 1, status=HoldingStatus.REJECTED),
        ]
        assert compute_metrics(holdings).total_aum == Decimal("111")
        assert compute_metrics(holdings, status_filter=["approved"]).total_aum == Decimal("100")
        assert compute_metrics(holdings, status_filter=[HoldingStatus.PENDING, "rejected"]).total_aum == 11

    def test_single_status_string(self):
        holdings = [
            _holding("h1", 1, 100, status=HoldingStatus.APPROVED),
            _holding("h2", 1, 10, status=HoldingStatus.PENDING),
        ]
        assert compute_metrics(holdings, status_filter="approved").total_aum == Decimal("100")
        assert compute_metrics(holdings, status_filter=HoldingStatus.PENDING).total_aum == Decimal("10")

    @pytest.mark.parametrize("status_filter", ["archived", ["approved", "archived"]])
    def test_unknown_status_filter(self, status_filter):
        with pytest.raises(ValidationError, match="Unknown holding status"):
            compute_metrics([_holding("h1", 1, 100)], status_filter=status_filter)

    def test_to_dict(self):
        data = compute_metrics([_holding("h1", 100, 150, purchase_price=140, asset_class="Equity")]).to_dict()
        assert data["total_aum"] == "15000"
        assert data["gain_loss_percent"] == "7.14"
        assert data["asset_breakdown"] == {"Equity": "15000"}


class TestGainLossPercent:
    @pytest.mark.parametrize(
        "gain,cost,expected",
        [
            ("1000", "14000", "7.14"),
            ("1", "8", "12.50"),
            ("1", "3", "33.33"),
            ("2", "3", "66.67"),
            ("5", "0", "0"),
        ],
    )
    def test_rounding(self, gain, cost, expected):
        assert gain_loss_percent(Decimal(gain), Decimal(cost)) == Decimal(expected)


class TestStatusTotals:
    def test_every_status_present(self):
        totals = status_totals([])
        assert set(totals) == set(HoldingStatus)
        assert all(v == 0 for v in totals.values())

    def test_sums(self):
        totals = status_totals(
            [
                _holding("h1", 2, 50, status=HoldingStatus.APPROVED),
                _holding("h2", 1, 30, status=HoldingStatus.APPROVED),
                _holding("h3", 1, 7, status=HoldingStatus.PENDING),
            ]
        )
        assert totals[HoldingStatus.APPROVED] == Decimal("130")
        assert totals[HoldingStatus.PENDING] == Decimal("7")
        assert totals[HoldingStatus.REJECTED] == 0


class TestPositionGains:
    def test_per_holding(self):
        gains = position_gains(
            [
                _holding("h1", 100, 150, purchase_price=140),
                _holding("h2", 10, 90, purchase_price=100, status=HoldingStatus.PENDING),
            ]
        )
        assert [g.holding_id for g in gains] == ["h1", "h2"]
        assert gains[0].gain_loss == Decimal("1000")
        assert gains[1].gain_loss == Decimal("-100")

    def test_filtered(self):
        holdings = [
            _holding("h1", 1, 10, status=HoldingStatus.APPROVED),
            _holding("h2", 1, 10, status=HoldingStatus.REJECTED),
        ]
        assert [g.holding_id for g in position_gains(holdings, status_filter=["rejected"])] == ["h2"]

    def test_filter_errors(self):
        with pytest.raises(ValidationError):
            position_gains([_holding("h1", 1, 10)], status_filter="a")
        assert [g.holding_id for g in position_gains([_holding("h1", 1, 10)], status_filter="approved")] == ["h1"]
