"""Report serialization and raw coverage map file I/O.

Report JSON is the ``ReportNodeData.to_dict()`` tree:
{
    "name": str,
    "summary": {
        "coverage": float | null,      # line coverage percent
        "fileCoverage": float | null,  # tested files percent
        "total": int | null,           # executable lines
        "executed": int | null,        # executed lines
        "files": int,                  # total files
        "lines": int                   # tested files
    },
    "children": [...],                 # directories only
    "coverage_data": {"12": 3, ...}    # files only
}

Raw map files hold ``{"/abs/path.py": {"12": 3, "13": -1}}``. Line keys are
strings on disk and ints in memory.
"""

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from covreport.core.errors import CoverageDataError
from covreport.core.logging import get_logger
from covreport.coverage.merge import normalize_coverage
from covreport.coverage.models import RawCoverageMap, ReportNodeData

log = get_logger("coverage.report")


def render_json(node: ReportNodeData, indent: int | None = 2) -> str:
    """Serialize a report snapshot to JSON."""
    return json.dumps(node.to_dict(), indent=indent)


def load_json(text: str, source: str = "<string>") -> ReportNodeData:
    """Parse report JSON produced by ``render_json``.

    Raises:
        CoverageDataError: If the text is not valid report JSON.
    """
    try:
        return ReportNodeData.from_dict(json.loads(text))
    except json.JSONDecodeError as e:
        raise CoverageDataError.invalid(source, str(e)) from e
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise CoverageDataError.invalid(source, f"unexpected report shape ({e!r})") from e


def compute_file_stats(node: ReportNodeData) -> list[dict[str, Any]]:
    """Per-file statistics for a report, lowest line coverage first.

    Paths are relative to ``node``. Files without executable lines sort last.
    """
    file_stats: list[dict[str, Any]] = []

    def visit(current: ReportNodeData, prefix: str) -> None:
        for child in current.children or ():
            path = f"{prefix}{child.name}"
            if child.is_directory:
                visit(child, f"{path}/")
                continue
            lines = child.coverage_data or {}
            summary = child.summary
            file_stats.append(
                {
                    "path": path,
                    "total_lines": summary.total_lines or 0,
                    "executed_lines": summary.executed_lines or 0,
                    "coverage_percent": (
                        round(summary.line_coverage, 2)
                        if summary.line_coverage is not None
                        else None
                    ),
                    "missed_lines": sorted(line for line, count in lines.items() if count <= 0),
                }
            )

    visit(node, "")
    file_stats.sort(
        key=lambda f: (f["coverage_percent"] is None, f["coverage_percent"] or 0.0, f["path"])
    )
    return file_stats


def build_text_summary(node: ReportNodeData) -> str:
    """One-line human-readable summary of a report node."""
    summary = node.summary
    if summary.line_coverage is None:
        return f"No coverage data ({summary.total_files} files, none tested)"

    return (
        f"Coverage: {summary.line_coverage:.1f}% "
        f"({summary.executed_lines}/{summary.total_lines} lines, "
        f"{summary.tested_files}/{summary.total_files} files)"
    )


def _parse_raw_map(data: Any, source: str) -> RawCoverageMap:
    if not isinstance(data, dict):
        raise CoverageDataError.invalid(source, "top level must be an object of files")

    raw: RawCoverageMap = {}
    for path, lines in data.items():
        if not isinstance(lines, dict):
            raise CoverageDataError.invalid(source, f"lines of {path} must be an object")
        try:
            raw[path] = {int(line): int(count) for line, count in lines.items()}
        except (TypeError, ValueError) as e:
            raise CoverageDataError.invalid(source, f"bad line entry for {path}: {e}") from e
    return raw


def read_coverage_file(path: str | Path) -> RawCoverageMap:
    """Read a raw coverage map file, dropping dead-code markers.

    Raises:
        CoverageDataError: If the file is unreadable or not a raw map.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise CoverageDataError.invalid(str(path), e.strerror or str(e)) from e
    except json.JSONDecodeError as e:
        raise CoverageDataError.invalid(str(path), str(e)) from e

    coverage = normalize_coverage(_parse_raw_map(data, str(path)))
    log.debug("coverage_file_read", path=str(path), files=len(coverage))
    return coverage


def write_coverage_file(
    path: str | Path,
    data: Mapping[str, Mapping[int, int]],
    indent: int | None = 2,
) -> None:
    """Write a raw coverage map, files and lines in sorted order."""
    path = Path(path)
    serializable = {
        file_path: {str(line): count for line, count in sorted(lines.items())}
        for file_path, lines in sorted(data.items())
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(serializable, indent=indent) + "\n", encoding="utf-8")
    log.debug("coverage_file_written", path=str(path), files=len(serializable))
