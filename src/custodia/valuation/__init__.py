"""Point-in-time valuation and current-price portfolio metrics."""

from .engine import ValuationEngine, ValuationSnapshot, ValuedHolding
from .metrics import (
    DEFAULT_ASSET_CLASS,
    MetricsSnapshot,
    PositionGain,
    compute_metrics,
    position_gains,
    status_totals,
)

__all__ = [
    "DEFAULT_ASSET_CLASS",
    "MetricsSnapshot",
    "PositionGain",
    "ValuationEngine",
    "ValuationSnapshot",
    "ValuedHolding",
    "compute_metrics",
    "position_gains",
    "status_totals",
]
