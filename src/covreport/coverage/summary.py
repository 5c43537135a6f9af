"""Coverage summary calculation.

File summaries come straight from a line map; directory summaries roll up
the summaries of their children. Nothing here raises: every division is
guarded and "not applicable" is carried as None.

Rules:
- A file with no executable lines counts as 1 total file, 0 tested files,
  and has no line coverage.
- A file is a tested file iff at least one of its lines executed.
- A directory has no line coverage while none of its files is tested,
  however many lines those files have.
"""

from collections.abc import Iterable, Mapping

from covreport.coverage.models import CoverageSummary, percentage


def not_applicable_file() -> CoverageSummary:
    """Summary of a file without a single executable line."""
    return CoverageSummary(
        line_coverage=None,
        total_lines=None,
        executed_lines=None,
        total_files=1,
        tested_files=0,
        file_coverage=0.0,
    )


def summarize_file(lines: Mapping[int, int] | None) -> CoverageSummary:
    """Summarize one file's normalized line map (``-2`` already removed)."""
    if not lines:
        return not_applicable_file()

    total_lines = len(lines)
    executed_lines = sum(1 for count in lines.values() if count > 0)
    tested = executed_lines > 0

    return CoverageSummary(
        line_coverage=executed_lines / total_lines * 100,
        total_lines=total_lines,
        executed_lines=executed_lines,
        total_files=1,
        tested_files=1 if tested else 0,
        file_coverage=100.0 if tested else 0.0,
    )


def count_tested_files(summary: CoverageSummary) -> int:
    """Tested-file count recovered from a child's file coverage percentage.

    Rounded to the nearest integer; this is how counts travel up the tree.
    """
    if not summary.file_coverage:
        return 0
    return round(summary.total_files * summary.file_coverage / 100)


def summarize_directory(children: Iterable[CoverageSummary]) -> CoverageSummary:
    """Roll up child summaries (files and subdirectories) into one."""
    total_files = 0
    tested_files = 0
    total_lines = 0
    executed_lines = 0

    for child in children:
        total_files += child.total_files
        tested_files += count_tested_files(child)
        if child.line_coverage is not None:
            total_lines += child.total_lines or 0
            executed_lines += child.executed_lines or 0

    file_coverage = percentage(tested_files, total_files)

    if tested_files == 0:
        return CoverageSummary(
            line_coverage=None,
            total_lines=None,
            executed_lines=None,
            total_files=total_files,
            tested_files=0,
            file_coverage=file_coverage,
        )

    line_coverage = percentage(executed_lines, total_lines)
    return CoverageSummary(
        line_coverage=line_coverage if line_coverage is not None else 0.0,
        total_lines=total_lines,
        executed_lines=executed_lines,
        total_files=total_files,
        tested_files=tested_files,
        file_coverage=file_coverage,
    )
