"""Portfolio metrics from current (live) prices.

Aggregates AUM, unrealized gain/loss and the asset-class breakdown. Only each
holding's stored ``price`` is used, never the historical series. Holdings of
every status are included unless ``status_filter`` narrows them.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from custodia.core.exceptions import ValidationError
from custodia.portfolio.models import HoldingRecord, HoldingStatus

DEFAULT_ASSET_CLASS = "Equity"
_ZERO = Decimal("0")
_PERCENT_PLACES = Decimal("0.01")


@dataclass
class MetricsSnapshot:
    """Aggregate figures for a set of holdings. Derived, never stored."""

    total_aum: Decimal = _ZERO
    total_gain_loss: Decimal = _ZERO
    gain_loss_percent: Decimal = _ZERO
    asset_breakdown: dict[str, Decimal] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "total_aum": str(self.total_aum),
            "total_gain_loss": str(self.total_gain_loss),
            "gain_loss_percent": str(self.gain_loss_percent),
            "asset_breakdown": {k: str(v) for k, v in self.asset_breakdown.items()},
        }


@dataclass(frozen=True)
class PositionGain:
    holding_id: str
    security_id: str
    security_name: str
    current_value: Decimal
    purchase_value: Decimal

    @property
    def gain_loss(self) -> Decimal:
        return self.current_value - self.purchase_value


StatusFilter = HoldingStatus | str | Iterable[HoldingStatus | str] | None


def _filtered(holdings: Iterable[HoldingRecord], status_filter: StatusFilter) -> list[HoldingRecord]:
    if status_filter is None:
        return list(holdings)
    raw = [status_filter] if isinstance(status_filter, str) else list(status_filter)
    try:
        wanted = {HoldingStatus(s) for s in raw}
    except ValueError:
        raise ValidationError(f"Unknown holding status in {raw!r}") from None
    return [h for h in holdings if h.status in wanted]


def gain_loss_percent(gain_loss: Decimal, purchase_value: Decimal) -> Decimal:
    """Gain/loss as a percentage of cost, rounded half-up to 2 places; 0 when cost is 0."""
    if purchase_value <= 0:
        return _ZERO
    return (gain_loss / purchase_value * 100).quantize(_PERCENT_PLACES, rounding=ROUND_HALF_UP)


def compute_metrics(
    holdings: Iterable[HoldingRecord],
    *,
    status_filter: StatusFilter = None,
    default_asset_class: str = DEFAULT_ASSET_CLASS,
) -> MetricsSnapshot:
    """Compute AUM, gain/loss and asset-class breakdown.

    Args:
        holdings: Holdings snapshot to aggregate.
        status_filter: Statuses to include; None includes all (pending and
            rejected holdings count like approved ones).
        default_asset_class: Class used for holdings without one.
    """
    total_current = _ZERO
    total_purchase = _ZERO
    breakdown: dict[str, Decimal] = {}

    for holding in _filtered(holdings, status_filter):
        current = holding.current_value
        total_current += current
        total_purchase += holding.purchase_value

        asset_class = holding.asset_class or default_asset_class
        breakdown[asset_class] = breakdown.get(asset_class, _ZERO) + current

    total_gain_loss = total_current - total_purchase
    return MetricsSnapshot(
        total_aum=total_current,
        total_gain_loss=total_gain_loss,
        gain_loss_percent=gain_loss_percent(total_gain_loss, total_purchase),
        asset_breakdown=breakdown,
    )


def status_totals(holdings: Iterable[HoldingRecord]) -> dict[HoldingStatus, Decimal]:
    """Current value summed per status; every status is present, zero when empty."""
    totals = {status: _ZERO for status in HoldingStatus}
    for holding in holdings:
        totals[holding.status] += holding.current_value
    return totals


def position_gains(
    holdings: Iterable[HoldingRecord],
    *,
    status_filter: StatusFilter = None,
) -> list[PositionGain]:
    """Per-holding current value, cost basis and unrealized gain/loss."""
    return [
        PositionGain(
            holding_id=h.id,
            security_id=h.security_id,
            security_name=h.security_name,
            current_value=h.current_value,
            purchase_value=h.purchase_value,
        )
        for h in _filtered(holdings, status_filter)
    ]
