"""Custodia CLI — entry point for metrics, value, report, and check-id commands."""

import click

from custodia import __version__


@click.group()
@click.version_option(version=__version__, package_name="custodia")
@click.option(
    "--config", "config_file", type=click.Path(dir_okay=False), default=None, help="YAML or JSON config file."
)
@click.option("--log-level", default=None, help="Override logging.level (DEBUG, INFO, WARNING, ERROR).")
@click.pass_context
def main(ctx: click.Context, config_file: str | None, log_level: str | None) -> None:
    """Custodia — custody holdings, valuation, and performance metrics."""
    from .common import init_context

    ctx.obj = init_context(config_file, log_level)


# Register subcommands
from .check_cmd import check_id
from .metrics_cmd import metrics
from .report_cmd import report
from .value_cmd import value

main.add_command(check_id)
main.add_command(metrics)
main.add_command(value)
main.add_command(report)
