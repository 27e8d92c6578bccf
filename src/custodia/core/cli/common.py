"""Shared setup logic for CLI commands."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path

import click
import yaml

from custodia.core.config import Config
from custodia.core.exceptions import ConfigurationError, CustodiaError, ValidationError
from custodia.core.utils.logging import configure_logging
from custodia.portfolio.models import HoldingRecord, holding_from_dict
from custodia.pricing.models import PriceObservation
from custodia.pricing.store import InMemoryPriceSeriesStore


@dataclass
class Book:
    """Holdings plus price history loaded from a YAML book file."""

    holdings: list[HoldingRecord] = field(default_factory=list)
    prices: InMemoryPriceSeriesStore = field(default_factory=InMemoryPriceSeriesStore)


def init_context(config_file: str | None, log_level: str | None) -> Config:
    """Load config and configure logging; config errors become CLI errors."""
    try:
        config = Config(config_file=config_file)
    except CustodiaError as e:
        raise click.ClickException(str(e)) from e
    configure_logging(config, level=log_level)
    return config


async def load_book(path: str | Path) -> Book:
    """Read a book file::

        holdings:
          - {id: hld-1, security_id: US0378331005, security_name: Apple Inc,
             quantity: 100, price: 150, purchase_price: 140, status: approved, owner_id: usr-1}
        prices:
          - {security_id: US0378331005, date: 2025-10-01, price: 145}
    """
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Cannot parse book {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError(f"Book {path} must be a mapping with 'holdings' and 'prices'")

    book = Book()
    for i, raw in enumerate(data.get("holdings") or [], start=1):
        if not isinstance(raw, dict):
            raise ValidationError(f"Holding #{i} in {path} is not a mapping")
        raw.setdefault("id", f"hld-{i:06d}")
        book.holdings.append(holding_from_dict(raw))

    observations = [PriceObservation.from_dict(raw) for raw in data.get("prices") or []]
    await book.prices.load(observations)
    return book


def run_or_fail(coro):
    """Run *coro*; translate custodia errors into a clean CLI failure."""
    try:
        return asyncio.run(coro)
    except CustodiaError as e:
        raise click.ClickException(f"{e.kind}: {e}") from e
