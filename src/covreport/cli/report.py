"""covreport report command - build a JSON coverage report."""

from pathlib import Path

import click

from covreport.cli.utils import cli_errors, load_data_files, resolve_config
from covreport.coverage.builder import ReportBuilder
from covreport.coverage.report import build_text_summary, render_json


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
@click.option(
    "-i",
    "--include",
    multiple=True,
    type=click.Path(exists=True, path_type=Path),
    help="File or directory under ROOT to report (default: everything)",
)
@click.option("--synthetic", is_flag=True, help="Report never-run files as not executed")
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the report here instead of stdout",
)
def report_command(
    root: Path,
    data_files: tuple[Path, ...],
    include: tuple[Path, ...],
    synthetic: bool,
    output: Path | None,
) -> None:
    """Build a coverage report for everything under ROOT."""
    config = resolve_config(root)
    coverage = load_data_files(data_files)

    with cli_errors():
        builder = ReportBuilder(root, coverage, synthetic=synthetic, config=config.report)
        for path in include:
            if path.is_dir():
                builder.include_directory(path.resolve())
            else:
                builder.include_file(path.resolve())
        report = builder.build()

    text = render_json(report, indent=config.report.json_indent)
    if output is None:
        click.echo(text)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text + "\n", encoding="utf-8")
    click.echo(build_text_summary(report), err=True)
