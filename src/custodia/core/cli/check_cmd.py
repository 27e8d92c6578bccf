"""custodia check-id — format-check a security identifier."""

from __future__ import annotations

import sys

import click

from custodia.portfolio.identifiers import is_valid_security_id, normalize_security_id


@click.command("check-id")
@click.argument("security_id")
def check_id(security_id: str) -> None:
    """Check SECURITY_ID against the 12-character ISIN format (no check digit math)."""
    normalized = normalize_security_id(security_id)
    if is_valid_security_id(normalized):
        click.echo(f"{normalized}: valid")
        return
    click.echo(f"{normalized or security_id!r}: invalid")
    sys.exit(1)
