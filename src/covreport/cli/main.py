"""covreport CLI - covreport command."""

from pathlib import Path

import click

from covreport import __version__
from covreport.cli.merge import merge_command
from covreport.cli.report import report_command
from covreport.cli.run import run_command
from covreport.cli.summary import summary_command
from covreport.cli.synthetic import synthetic_command
from covreport.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="covreport")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="YAML config file to use instead of ROOT/.covreport.yaml",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_file: Path | None) -> None:
    """covreport - line coverage collection and reporting."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_file"] = config_file
    # Replaced by the configured logging once a command loads its config
    configure_logging(level="DEBUG" if verbose else "INFO")


cli.add_command(report_command, name="report")
cli.add_command(summary_command, name="summary")
cli.add_command(merge_command, name="merge")
cli.add_command(synthetic_command, name="synthetic")
cli.add_command(run_command, name="run")


if __name__ == "__main__":
    cli()
