"""custodia report — current value of a book per approval status."""

from __future__ import annotations

import click

from custodia.valuation.metrics import status_totals

from .common import load_book, run_or_fail


@click.command()
@click.argument("book_file", type=click.Path(exists=True, dir_okay=False))
def report(book_file: str) -> None:
    """Summarize current value by status (pending / approved / rejected)."""
    book = run_or_fail(load_book(book_file))
    for status, amount in status_totals(book.holdings).items():
        click.echo(f"{status.value:<10}{amount:>16,.2f}")
