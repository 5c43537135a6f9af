"""covreport run command - collect coverage for a Python script."""

from pathlib import Path

import click

from covreport.cli.utils import cli_errors, resolve_config
from covreport.coverage.report import write_coverage_file
from covreport.coverage.session import CoverageSession, TraceProfiler, run_script


@click.command(context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False})
@click.option(
    "-o",
    "--output",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Raw coverage map file to write",
)
@click.argument("script", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def run_command(ctx: click.Context, output: Path, script: Path, args: tuple[str, ...]) -> None:
    """Run SCRIPT with ARGS and record which lines executed.

    Only files under the script's directory are traced unless
    profiler.include_paths is configured.
    """
    config = resolve_config()
    profiler_config = config.profiler
    if not profiler_config.include_paths:
        profiler_config = profiler_config.model_copy(
            update={"include_paths": [str(script.resolve().parent)]}
        )

    with cli_errors():
        session = CoverageSession(TraceProfiler(profiler_config))
        data, exit_code = run_script(script, list(args), session=session)
        write_coverage_file(output, data, indent=config.report.json_indent)

    click.echo(f"Wrote coverage for {len(data)} files to {output}", err=True)
    if exit_code:
        ctx.exit(exit_code)
