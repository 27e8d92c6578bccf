"""custodia — maker-checker custody holdings with point-in-time valuation."""

__version__ = "0.1.0"
