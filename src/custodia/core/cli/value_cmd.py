"""custodia value — value a book as of a date against its price history."""

from __future__ import annotations

import click

from custodia.valuation.engine import ValuationEngine

from .common import load_book, run_or_fail


@click.command()
@click.argument("book_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--date", "as_of", required=True, help="Valuation date (YYYY-MM-DD).")
def value(book_file: str, as_of: str) -> None:
    """Value the holdings in BOOK_FILE as of --date.

    Rows marked * had no recorded price for that day and use the current price.
    """

    async def _value():
        book = await load_book(book_file)
        return await ValuationEngine(book.prices).value_as_of(book.holdings, as_of)

    snapshot = run_or_fail(_value())

    click.echo(f"Valuation as of {snapshot.date.isoformat()}")
    for item in snapshot.items:
        marker = "*" if item.used_fallback else " "
        click.echo(
            f"{marker} {item.holding_id:<12}{item.security_id:<14}{item.quantity:>12} x "
            f"{item.resolved_price:>12,.2f} = {item.resolved_value:>16,.2f}"
        )
    click.echo(f"Total value: {snapshot.total_value:,.2f}")
    if snapshot.missing_prices:
        click.echo(f"Supply prices for {snapshot.date.isoformat()}: {', '.join(snapshot.missing_prices)}")
