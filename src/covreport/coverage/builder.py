"""Report snapshot building.

``build_report`` walks a report tree once against a raw coverage map and
returns an immutable ``ReportNodeData`` tree. ``ReportBuilder`` is the
facade most callers use: it owns the tree, decides what goes in it, and
optionally fills gaps with synthetic coverage.

Usage:
    builder = ReportBuilder("/repo/src", coverage)
    builder.include_file("/repo/src/app/models.py")
    builder.include_directory("/repo/src/app/api")
    report = builder.build()
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from covreport.config.models import ReportConfig
from covreport.core.errors import TreeError
from covreport.core.logging import get_logger
from covreport.coverage.merge import merge_file_lines, normalize_lines
from covreport.coverage.models import RawCoverageMap, ReportNodeData
from covreport.coverage.paths import canonical_path
from covreport.coverage.synthetic import generate_for_file
from covreport.coverage.tree import ReportDirectory

log = get_logger("coverage.builder")


def canonicalize_coverage(coverage: Mapping[str, Mapping[int, int]]) -> RawCoverageMap:
    """Normalize a raw map and key it by canonical path.

    Entries whose paths collapse onto the same file are merged.
    """
    result: RawCoverageMap = {}
    for path, lines in coverage.items():
        key = str(canonical_path(path))
        normalized = normalize_lines(lines)
        if key in result:
            result[key] = merge_file_lines([result[key], normalized])
        else:
            result[key] = normalized
    return result


def build_report(
    tree: ReportDirectory,
    coverage: Mapping[str, Mapping[int, int]],
    *,
    exclude: tuple[str, ...] | list[str] = (),
    include_hidden: bool = False,
) -> ReportNodeData:
    """Snapshot ``tree`` against ``coverage``.

    An empty tree is auto-filled from disk first, so a bare root reports
    everything beneath it.
    """
    if tree.is_empty():
        tree.auto_fill(exclude=exclude, include_hidden=include_hidden)
    report = tree.to_node_data(canonicalize_coverage(coverage))
    log.info(
        "report_built",
        root=str(tree.path),
        files=report.summary.total_files,
        tested_files=report.summary.tested_files,
        line_coverage=report.summary.line_coverage,
    )
    return report


class ReportBuilder:
    """Builds a coverage report for everything under one root directory."""

    def __init__(
        self,
        root: str | Path,
        coverage: Mapping[str, Mapping[int, int]] | None = None,
        *,
        synthetic: bool = False,
        config: ReportConfig | None = None,
    ) -> None:
        """Create a builder rooted at an existing directory.

        Raises:
            PathNotFoundError: If ``root`` is not an existing directory.
        """
        self._config = config or ReportConfig()
        self._root = ReportDirectory(root)
        self._coverage = canonicalize_coverage(coverage or {})
        self._synthetic = synthetic

    @property
    def root(self) -> ReportDirectory:
        return self._root

    @property
    def coverage(self) -> RawCoverageMap:
        return self._coverage

    def include_all(self) -> ReportBuilder:
        self._root.auto_fill(
            exclude=self._config.exclude,
            include_hidden=self._config.include_hidden,
        )
        return self

    def include_file(self, path: str | Path) -> ReportBuilder:
        self._root.add_file(path)
        return self

    def include_directory(self, path: str | Path) -> ReportBuilder:
        directory = self._root.add_directory(path)
        directory.auto_fill(
            exclude=self._config.exclude,
            include_hidden=self._config.include_hidden,
        )
        return self

    def add_coverage_data(
        self, data: Mapping[str, Mapping[int, int]], add_missing: bool = False
    ) -> ReportBuilder:
        """Merge line data into the private maps of files in the tree.

        Paths not in the tree are skipped, or added when ``add_missing`` is
        set. Paths outside the root or missing on disk are always skipped.
        """
        for path, lines in data.items():
            report_file = self._root.get_file(path)
            if report_file is None:
                if not add_missing:
                    continue
                try:
                    report_file = self._root.add_file(path)
                except TreeError as e:
                    log.debug("coverage_path_skipped", path=path, error=e.error_name)
                    continue
            report_file.add_coverage_data(lines)
        return self

    def _apply_synthetic(self) -> None:
        extensions = set(self._config.synthetic_extensions)
        applied = 0
        for report_file in self._root.iter_files():
            if report_file.has_own_coverage or str(report_file.path) in self._coverage:
                continue
            if report_file.path.suffix not in extensions:
                continue
            report_file.add_coverage_data(generate_for_file(report_file.path))
            applied += 1
        log.debug("synthetic_applied", files=applied)

    def build(self) -> ReportNodeData:
        """Build the report snapshot.

        In synthetic mode, tree files without real data get a classifier
        baseline (all lines not executed) before the snapshot is taken.
        """
        if self._root.is_empty():
            self.include_all()
        if self._synthetic:
            self._apply_synthetic()
        return build_report(
            self._root,
            self._coverage,
            exclude=self._config.exclude,
            include_hidden=self._config.include_hidden,
        )
