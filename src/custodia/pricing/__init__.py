"""Historical price series and exact-date price resolution."""

from .models import PriceObservation
from .store import InMemoryPriceSeriesStore, PriceSeriesStore

__all__ = [
    "InMemoryPriceSeriesStore",
    "PriceObservation",
    "PriceSeriesStore",
]
