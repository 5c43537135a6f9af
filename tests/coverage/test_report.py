"""Tests for report JSON serialization and raw map file I/O."""

import json
from pathlib import Path

import pytest

from covreport.core.errors import CoverageDataError
from covreport.coverage.builder import ReportBuilder
from covreport.coverage.models import CoverageSummary, ReportNodeData
from covreport.coverage.report import (
    build_text_summary,
    compute_file_stats,
    load_json,
    read_coverage_file,
    render_json,
    write_coverage_file,
)


@pytest.fixture
def report(project: Path) -> ReportNodeData:
    coverage = {
        str(project / "main.py"): {1: 1, 3: -1},
        str(project / "app" / "models.py"): {2: 4},
    }
    return ReportBuilder(project, coverage, synthetic=True).build()


class TestJson:
    def test_round_trip_preserves_everything(self, report: ReportNodeData) -> None:
        restored = load_json(render_json(report))

        assert restored == report

    def test_document_shape(self, report: ReportNodeData) -> None:
        data = json.loads(render_json(report))

        assert set(data) == {"name", "summary", "children"}
        assert set(data["summary"]) == {
            "coverage",
            "fileCoverage",
            "total",
            "executed",
            "files",
            "lines",
        }
        main = next(c for c in data["children"] if c["name"] == "main.py")
        assert "children" not in main
        assert main["coverage_data"] == {"1": 1, "3": -1}

    def test_empty_directory_serializes_empty_children(self, tmp_path: Path) -> None:
        data = json.loads(render_json(ReportBuilder(tmp_path).build()))

        assert data["children"] == []
        assert data["summary"]["fileCoverage"] is None

    def test_compact_output(self, report: ReportNodeData) -> None:
        assert "\n" not in render_json(report, indent=None)

    @pytest.mark.parametrize("text", ["not json", '{"summary": {}}', "[]"])
    def test_invalid_report_json(self, text: str) -> None:
        with pytest.raises(CoverageDataError):
            load_json(text)


class TestTextSummary:
    def test_with_coverage(self, report: ReportNodeData) -> None:
        # main.py 1/2, models.py 1/1; handlers.py untested so its dir has no lines
        assert build_text_summary(report) == "Coverage: 66.7% (2/3 lines, 2/4 files)"

    def test_without_coverage(self) -> None:
        node = ReportNodeData(
            name="empty",
            summary=CoverageSummary(None, None, None, 3, 0, 0.0),
            children=(),
        )

        assert build_text_summary(node) == "No coverage data (3 files, none tested)"


class TestFileStats:
    def test_lowest_coverage_first_with_relative_paths(self, report: ReportNodeData) -> None:
        stats = compute_file_stats(report)

        assert [s["path"] for s in stats] == [
            "app/api/handlers.py",
            "main.py",
            "app/models.py",
            "README.md",
        ]
        main = stats[1]
        assert main["coverage_percent"] == 50.0
        assert main["missed_lines"] == [3]
        assert stats[-1]["coverage_percent"] is None


class TestCoverageFiles:
    def test_write_then_read(self, tmp_path: Path) -> None:
        path = tmp_path / "out" / "coverage.json"
        data = {"/src/b.py": {3: -1, 1: 2}, "/src/a.py": {5: 0}}

        write_coverage_file(path, data)

        assert read_coverage_file(path) == data
        on_disk = json.loads(path.read_text())
        assert list(on_disk) == ["/src/a.py", "/src/b.py"]
        assert on_disk["/src/b.py"] == {"1": 2, "3": -1}

    def test_read_drops_dead_code(self, tmp_path: Path) -> None:
        path = tmp_path / "coverage.json"
        path.write_text(json.dumps({"/src/a.py": {"1": 1, "2": -2, "3": -1}}))

        assert read_coverage_file(path) == {"/src/a.py": {1: 1, 3: -1}}

    @pytest.mark.parametrize(
        "content",
        [
            "{broken",
            "[1, 2]",
            '{"/a.py": [1, 2]}',
            '{"/a.py": {"one": 1}}',
        ],
    )
    def test_invalid_content(self, tmp_path: Path, content: str) -> None:
        path = tmp_path / "coverage.json"
        path.write_text(content)

        with pytest.raises(CoverageDataError) as exc_info:
            read_coverage_file(path)

        assert exc_info.value.details["path"] == str(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(CoverageDataError):
            read_coverage_file(tmp_path / "missing.json")
