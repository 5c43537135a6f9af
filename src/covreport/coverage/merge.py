"""Raw coverage map normalization and merging with max-hit semantics.

When merging multiple raw maps (e.g., from independent partial runs), we
take the per-file union of lines and, for lines present in more than one
input, the maximum marker:

- line[i] = max(line[i] across all maps)

This ensures the merged result represents "executed in any run" rather
than dropping an execution a single run observed. Since ``-1 < 0 < n``,
an executed count always wins over "not executed".
"""

from collections.abc import Iterable, Mapping
from pathlib import Path

from covreport.core.logging import get_logger
from covreport.coverage.models import DEAD_CODE, FileLines, RawCoverageMap
from covreport.coverage.paths import is_within

log = get_logger("coverage.merge")


def normalize_lines(lines: Mapping[int, int]) -> FileLines:
    """Drop dead-code markers and coerce line keys to int."""
    return {int(line): count for line, count in lines.items() if count != DEAD_CODE}


def normalize_coverage(data: Mapping[str, Mapping[int, int]]) -> RawCoverageMap:
    """Return a copy of ``data`` with every ``-2`` marker removed.

    Files whose lines were all dead code are kept with an empty line map:
    the profiler saw them, they just have nothing executable.
    """
    return {path: normalize_lines(lines) for path, lines in data.items()}


def merge_file_lines(lines: Iterable[Mapping[int, int]]) -> FileLines:
    """Merge line maps for the same file, keeping the max marker per line."""
    merged: FileLines = {}
    for file_lines in lines:
        for line, count in file_lines.items():
            if line in merged:
                merged[line] = max(merged[line], count)
            else:
                merged[line] = count
    return merged


def merge_coverage(*maps: Mapping[str, Mapping[int, int]]) -> RawCoverageMap:
    """Merge raw coverage maps.

    Files present in several maps are merged line by line; files present in
    only one are copied. Inputs are never mutated.

    Args:
        *maps: Raw coverage maps to merge.

    Returns:
        New merged raw coverage map.
    """
    lines_by_path: dict[str, list[Mapping[int, int]]] = {}
    for data in maps:
        for path, lines in data.items():
            lines_by_path.setdefault(path, []).append(lines)

    merged = {path: merge_file_lines(group) for path, group in lines_by_path.items()}
    log.debug("coverage_merged", inputs=len(maps), files=len(merged))
    return merged


def filter_coverage(data: Mapping[str, Mapping[int, int]], root: str | Path) -> RawCoverageMap:
    """Keep only files contained in ``root`` (canonical path containment)."""
    return {path: dict(lines) for path, lines in data.items() if is_within(path, root)}
