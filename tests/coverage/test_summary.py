"""Tests for the coverage summary calculator."""

import pytest

from covreport.coverage.models import CoverageSummary
from covreport.coverage.summary import (
    not_applicable_file,
    summarize_directory,
    summarize_file,
    count_tested_files,
)


class TestSummarizeFile:
    def test_partially_executed_file(self) -> None:
        summary = summarize_file({10: -1, 11: 3, 12: -1})

        assert summary.total_lines == 3
        assert summary.executed_lines == 1
        assert summary.line_coverage == pytest.approx(33.33, abs=0.01)
        assert summary.total_files == 1
        assert summary.tested_files == 1
        assert summary.file_coverage == 100.0

    def test_nothing_executed(self) -> None:
        summary = summarize_file({1: -1, 2: -1})

        assert summary.line_coverage == 0.0
        assert summary.executed_lines == 0
        assert summary.tested_files == 0
        assert summary.file_coverage == 0.0

    def test_zero_count_is_not_executed(self) -> None:
        summary = summarize_file({1: 0, 2: 1})

        assert summary.executed_lines == 1

    @pytest.mark.parametrize("lines", [{}, None])
    def test_no_executable_lines_not_applicable(self, lines: dict[int, int] | None) -> None:
        summary = summarize_file(lines)

        assert summary == not_applicable_file()
        assert summary.line_coverage is None
        assert summary.total_lines is None
        assert summary.executed_lines is None
        assert summary.total_files == 1
        assert summary.tested_files == 0
        assert not summary.is_applicable


class TestCountTestedFiles:
    def test_recovered_from_percentage(self) -> None:
        summary = CoverageSummary(50.0, 10, 5, 3, 2, 2 / 3 * 100)
        assert count_tested_files(summary) == 2

    def test_none_percentage_is_zero(self) -> None:
        summary = CoverageSummary(None, None, None, 0, 0, None)
        assert count_tested_files(summary) == 0


class TestSummarizeDirectory:
    def test_two_files_one_tested(self) -> None:
        a = summarize_file({1: 1, 2: -1})
        b = summarize_file({1: -1})

        summary = summarize_directory([a, b])

        assert summary.total_files == 2
        assert summary.tested_files == 1
        assert summary.file_coverage == 50.0
        assert summary.total_lines == 3
        assert summary.executed_lines == 1
        assert summary.line_coverage == pytest.approx(33.33, abs=0.01)

    def test_no_tested_files_has_no_line_coverage(self) -> None:
        summary = summarize_directory([summarize_file({1: -1, 2: -1}), summarize_file({})])

        assert summary.line_coverage is None
        assert summary.total_lines is None
        assert summary.executed_lines is None
        assert summary.total_files == 2
        assert summary.file_coverage == 0.0

    def test_empty_directory(self) -> None:
        summary = summarize_directory([])

        assert summary.total_files == 0
        assert summary.tested_files == 0
        assert summary.file_coverage is None
        assert summary.line_coverage is None

    def test_not_applicable_files_count_toward_files_only(self) -> None:
        summary = summarize_directory([summarize_file({1: 2}), summarize_file({})])

        assert summary.total_files == 2
        assert summary.tested_files == 1
        assert summary.file_coverage == 50.0
        assert summary.total_lines == 1
        assert summary.line_coverage == 100.0

    def test_nested_rollup(self) -> None:
        inner = summarize_directory([summarize_file({1: 1}), summarize_file({1: -1})])
        outer = summarize_directory([inner, summarize_file({1: 1, 2: 1})])

        assert outer.total_files == 3
        assert outer.tested_files == 2
        assert outer.total_lines == 4
        assert outer.executed_lines == 3
        assert outer.line_coverage == 75.0


class TestSummarySerialization:
    def test_to_dict_keys(self) -> None:
        summary = summarize_file({1: 1, 2: -1})

        assert summary.to_dict() == {
            "coverage": 50.0,
            "fileCoverage": 100.0,
            "total": 2,
            "executed": 1,
            "files": 1,
            "lines": 1,
        }

    def test_not_applicable_serializes_nulls(self) -> None:
        data = not_applicable_file().to_dict()

        assert data["coverage"] is None
        assert data["total"] is None
        assert data["executed"] is None

    def test_from_dict_restores(self) -> None:
        summary = summarize_directory([summarize_file({1: 1}), summarize_file({1: -1})])

        assert CoverageSummary.from_dict(summary.to_dict()) == summary
