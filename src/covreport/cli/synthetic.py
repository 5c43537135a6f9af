"""covreport synthetic command - show statically executable lines."""

import json
from pathlib import Path

import click

from covreport.coverage.synthetic import generate_for_file


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def synthetic_command(file: Path) -> None:
    """Print the executable lines of FILE as a not-executed line map."""
    lines = generate_for_file(file)
    click.echo(json.dumps({str(line): count for line, count in lines.items()}, indent=2))
