"""CLI utilities."""

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path

import click

from covreport.config import CovReportConfig, load_config, load_config_file
from covreport.core.errors import CovReportError
from covreport.core.logging import configure_logging
from covreport.coverage.merge import merge_coverage
from covreport.coverage.models import RawCoverageMap
from covreport.coverage.report import read_coverage_file


@contextmanager
def cli_errors() -> Iterator[None]:
    """Report covreport errors as click usage failures instead of tracebacks."""
    try:
        yield
    except CovReportError as e:
        raise click.ClickException(e.message) from e


def resolve_config(root: Path | None = None) -> CovReportConfig:
    """Load configuration for ``root`` (default: current directory) and apply its logging.

    A ``--config`` file given to the group replaces ``ROOT/.covreport.yaml``;
    ``--verbose`` forces the DEBUG level.

    Raises:
        click.ClickException: If the config is invalid
    """
    ctx = click.get_current_context(silent=True)
    options = (ctx.find_root().obj if ctx is not None else None) or {}
    config_file = options.get("config_file")

    with cli_errors():
        config = load_config_file(config_file) if config_file else load_config(root)

    logging_config = config.logging
    if options.get("verbose"):
        logging_config = logging_config.model_copy(update={"level": "DEBUG"})
    configure_logging(config=logging_config)
    return config


def load_data_files(paths: Iterable[Path]) -> RawCoverageMap:
    """Read and merge raw coverage map files. No files yields an empty map.

    Raises:
        click.ClickException: If a file is not a valid raw map
    """
    with cli_errors():
        return merge_coverage(*(read_coverage_file(path) for path in paths))


def format_percent(value: float | None) -> str:
    return "n/a" if value is None else f"{value:.2f}%"
