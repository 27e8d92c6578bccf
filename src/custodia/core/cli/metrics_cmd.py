"""custodia metrics — AUM, gain/loss, and asset-class breakdown for a book."""

from __future__ import annotations

import click

from custodia.portfolio.models import HoldingStatus
from custodia.valuation.metrics import compute_metrics

from .common import load_book, run_or_fail


@click.command()
@click.argument("book_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--approved-only", is_flag=True, help="Only count approved holdings.")
@click.pass_obj
def metrics(config, book_file: str, approved_only: bool) -> None:
    """Show current-price metrics for the holdings in BOOK_FILE."""
    book = run_or_fail(load_book(book_file))
    status_filter = [HoldingStatus.APPROVED] if approved_only else None
    snapshot = compute_metrics(
        book.holdings,
        status_filter=status_filter,
        default_asset_class=config.get("metrics.default_asset_class", "Equity"),
    )

    click.echo(f"Total AUM:        {snapshot.total_aum:,.2f}")
    click.echo(f"Total gain/loss:  {snapshot.total_gain_loss:,.2f} ({snapshot.gain_loss_percent}%)")
    click.echo("Asset breakdown:")
    for asset_class, amount in sorted(snapshot.asset_breakdown.items()):
        click.echo(f"  {asset_class:<16}{amount:>16,.2f}")
