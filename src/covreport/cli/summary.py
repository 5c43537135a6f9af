"""covreport summary command - coverage table for a directory."""

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from covreport.cli.utils import cli_errors, format_percent, load_data_files, resolve_config
from covreport.coverage.builder import ReportBuilder
from covreport.coverage.models import CoverageSummary, ReportNodeData


def _lines_cell(summary: CoverageSummary) -> str:
    if summary.total_lines is None:
        return "-"
    return f"{summary.executed_lines}/{summary.total_lines}"


def make_summary_table(report: ReportNodeData) -> Table:
    """One row per child of the report root plus a total row."""
    table = Table(title=f"Coverage: {report.name}")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Lines", justify="right")
    table.add_column("Line %", justify="right")
    table.add_column("Files", justify="right")
    table.add_column("File %", justify="right")

    for child in report.children or ():
        name = f"{child.name}/" if child.is_directory else child.name
        table.add_row(
            name,
            _lines_cell(child.summary),
            format_percent(child.summary.line_coverage),
            f"{child.summary.tested_files}/{child.summary.total_files}",
            format_percent(child.summary.file_coverage),
        )

    total = report.summary
    table.add_section()
    table.add_row(
        "Total",
        _lines_cell(total),
        format_percent(total.line_coverage),
        f"{total.tested_files}/{total.total_files}",
        format_percent(total.file_coverage),
        style="bold",
    )
    return table


@click.command()
@click.argument("root", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option(
    "-d",
    "--data",
    "data_files",
    multiple=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Raw coverage map file (repeatable, merged)",
)
@click.option("--synthetic", is_flag=True, help="Report never-run files as not executed")
def summary_command(root: Path, data_files: tuple[Path, ...], synthetic: bool) -> None:
    """Print a coverage table for ROOT."""
    config = resolve_config(root)
    coverage = load_data_files(data_files)

    with cli_errors():
        report = ReportBuilder(root, coverage, synthetic=synthetic, config=config.report).build()

    Console(width=120).print(make_summary_table(report))
