"""covreport merge command - combine raw coverage maps."""

from pathlib import Path

import click

from covreport.cli.utils import cli_errors, load_data_files, resolve_config
from covreport.coverage.report import write_coverage_file


@click.command()
@click.argument(
    "data_files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o",
    "--output",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Merged raw coverage map file",
)
def merge_command(data_files: tuple[Path, ...], output: Path) -> None:
    """Merge raw coverage maps, keeping the highest count per line."""
    config = resolve_config()
    merged = load_data_files(data_files)

    with cli_errors():
        write_coverage_file(output, merged, indent=config.report.json_indent)

    click.echo(f"Merged {len(data_files)} inputs into {output} ({len(merged)} files)", err=True)
