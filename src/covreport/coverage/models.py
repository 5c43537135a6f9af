"""Coverage data model.

File-centric model for line coverage. The raw map is the shared currency
between the execution profiler, the synthetic classifier and the report
tree; summaries and report nodes are immutable snapshots built from it.

Execution markers:
- ``count >= 0``: line executed ``count`` times
- ``-1``: executable but not executed
- ``-2``: not executable (profiler artifact, dropped on normalization)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

NOT_EXECUTED = -1
DEAD_CODE = -2

FileLines = dict[int, int]  # line_number → execution marker
RawCoverageMap = dict[str, FileLines]  # absolute path → lines


def percentage(part: int, total: int) -> float | None:
    """Percentage of ``part`` in ``total``, or None when there is nothing to count."""
    if total <= 0:
        return None
    return part / total * 100


@dataclass(frozen=True, slots=True)
class CoverageSummary:
    """Coverage statistics for a file or directory.

    ``line_coverage``, ``total_lines`` and ``executed_lines`` are either all
    present or all None. None means "not applicable": a file with no
    executable lines, or a directory without a single tested file.
    """

    line_coverage: float | None
    total_lines: int | None
    executed_lines: int | None
    total_files: int
    tested_files: int
    file_coverage: float | None

    @property
    def is_applicable(self) -> bool:
        return self.line_coverage is not None

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output. ``lines`` holds the tested-file count."""
        return {
            "coverage": self.line_coverage,
            "fileCoverage": self.file_coverage,
            "total": self.total_lines,
            "executed": self.executed_lines,
            "files": self.total_files,
            "lines": self.tested_files,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CoverageSummary:
        return cls(
            line_coverage=data.get("coverage"),
            total_lines=data.get("total"),
            executed_lines=data.get("executed"),
            total_files=data.get("files", 0),
            tested_files=data.get("lines", 0),
            file_coverage=data.get("fileCoverage"),
        )


@dataclass(frozen=True, slots=True)
class LineCoverage:
    """One source line with its display status."""

    number: int
    content: str
    status: str  # executed, not-executed, neutral


@dataclass(frozen=True, slots=True)
class ReportNodeData:
    """Immutable, serializable snapshot of one report tree node.

    Directories carry ``children`` (an empty tuple for empty directories)
    and no ``coverage_data``; files carry ``coverage_data`` and no
    ``children``.
    """

    name: str
    summary: CoverageSummary
    children: tuple[ReportNodeData, ...] | None = None
    coverage_data: FileLines | None = None

    @property
    def is_directory(self) -> bool:
        return self.children is not None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "summary": self.summary.to_dict(),
        }
        if self.children is not None:
            data["children"] = [child.to_dict() for child in self.children]
        if self.coverage_data is not None:
            data["coverage_data"] = {str(line): count for line, count in self.coverage_data.items()}
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReportNodeData:
        children = data.get("children")
        coverage_data = data.get("coverage_data")
        return cls(
            name=data["name"],
            summary=CoverageSummary.from_dict(data["summary"]),
            children=tuple(cls.from_dict(c) for c in children) if children is not None else None,
            coverage_data=(
                {int(line): count for line, count in coverage_data.items()}
                if coverage_data is not None
                else None
            ),
        )
