"""Tests for report snapshot building and the ReportBuilder facade."""

import os
from pathlib import Path

import pytest

from covreport.config.models import ReportConfig
from covreport.core.errors import FileOutsideRootError, PathNotFoundError
from covreport.coverage.builder import ReportBuilder, build_report, canonicalize_coverage
from covreport.coverage.models import ReportNodeData
from covreport.coverage.tree import ReportDirectory


def child(node: ReportNodeData, name: str) -> ReportNodeData:
    for c in node.children or ():
        if c.name == name:
            return c
    raise AssertionError(f"{name} not in {[c.name for c in node.children or ()]}")


class TestBuildReport:
    def test_empty_tree_auto_filled(self, project: Path) -> None:
        tree = ReportDirectory(project)

        report = build_report(tree, {})

        assert [c.name for c in report.children or ()] == ["app", "README.md", "main.py"]
        assert report.summary.total_files == 4
        assert report.summary.tested_files == 0
        assert report.summary.line_coverage is None

    def test_populated_tree_not_auto_filled(self, project: Path) -> None:
        tree = ReportDirectory(project)
        tree.add_file(project / "main.py")

        report = build_report(tree, {str(project / "main.py"): {1: 1}})

        assert [c.name for c in report.children or ()] == ["main.py"]
        assert report.summary.line_coverage == 100.0

    def test_coverage_keys_canonicalized(self, project: Path) -> None:
        tree = ReportDirectory(project)
        tree.add_file(project / "main.py")
        key = str(project / "app" / ".." / "main.py")

        report = build_report(tree, {key: {1: 2}})

        assert child(report, "main.py").coverage_data == {1: 2}

    def test_exclude_applies_to_fallback(self, project: Path) -> None:
        report = build_report(ReportDirectory(project), {}, exclude=["*.md"])

        assert [c.name for c in report.children or ()] == ["app", "main.py"]


class TestCanonicalizeCoverage:
    def test_colliding_keys_merged(self, project: Path) -> None:
        direct = str(project / "main.py")
        indirect = str(project / "app" / ".." / "main.py")

        result = canonicalize_coverage({direct: {1: 1, 3: -1}, indirect: {3: 2, 1: -2}})

        assert result == {direct: {1: 1, 3: 2}}

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_symlinked_key_resolved(self, project: Path, tmp_path: Path) -> None:
        link = tmp_path / "link"
        link.symlink_to(project, target_is_directory=True)

        result = canonicalize_coverage({str(link / "main.py"): {1: 1}})

        assert list(result) == [str(project / "main.py")]


class TestReportBuilder:
    def test_build_everything_by_default(self, project: Path) -> None:
        coverage = {str(project / "main.py"): {1: 1, 3: -1}}

        report = ReportBuilder(project, coverage).build()

        assert report.name == "project"
        assert report.summary.total_files == 4
        assert report.summary.tested_files == 1
        assert report.summary.file_coverage == 25.0
        assert child(report, "main.py").summary.line_coverage == 50.0

    def test_include_file_limits_report(self, project: Path) -> None:
        report = ReportBuilder(project).include_file(project / "app" / "models.py").build()

        app = child(report, "app")
        assert [c.name for c in app.children or ()] == ["models.py"]
        assert report.summary.total_files == 1

    def test_include_directory_fills_only_that_directory(self, project: Path) -> None:
        report = ReportBuilder(project).include_directory(project / "app" / "api").build()

        app = child(report, "app")
        assert [c.name for c in app.children or ()] == ["api"]
        assert [c.name for c in child(app, "api").children or ()] == ["handlers.py"]

    def test_include_outside_root_raises(self, project: Path, tmp_path: Path) -> None:
        builder = ReportBuilder(project / "app")

        with pytest.raises(FileOutsideRootError):
            builder.include_file(project / "main.py")

        assert builder.root.is_empty()

    def test_missing_root_raises(self, tmp_path: Path) -> None:
        with pytest.raises(PathNotFoundError):
            ReportBuilder(tmp_path / "nope").build()

    def test_config_exclude_and_hidden(self, project: Path) -> None:
        (project / ".env.py").write_text("SECRET = 1\n")
        config = ReportConfig(exclude=["README.md"], include_hidden=True)

        report = ReportBuilder(project, config=config).build()

        names = [c.name for c in report.children or ()]
        assert ".env.py" in names
        assert "README.md" not in names

    def test_synthetic_fills_files_without_data(self, project: Path) -> None:
        coverage = {str(project / "main.py"): {1: 1, 3: -1}}

        report = ReportBuilder(project, coverage, synthetic=True).build()

        app = child(report, "app")
        assert child(app, "models.py").coverage_data == {2: -1}
        assert child(child(app, "api"), "handlers.py").coverage_data == {2: -1}
        # Real data wins over the classifier.
        assert child(report, "main.py").coverage_data == {1: 1, 3: -1}
        # Only configured extensions are classified.
        assert child(report, "README.md").coverage_data == {}
        assert app.summary.line_coverage is None
        assert app.summary.total_files == 2

    def test_without_synthetic_unrun_files_have_no_lines(self, project: Path) -> None:
        report = ReportBuilder(project, {}).build()

        assert child(child(report, "app"), "models.py").coverage_data == {}

    def test_add_coverage_data_merges_into_tree_files(self, project: Path) -> None:
        path = str(project / "main.py")
        builder = ReportBuilder(project, {path: {1: 1}}).include_all()

        builder.add_coverage_data({path: {1: 3, 3: -1}})
        report = builder.build()

        assert child(report, "main.py").coverage_data == {1: 3, 3: -1}

    def test_add_coverage_data_skips_unknown_paths(self, project: Path, tmp_path: Path) -> None:
        builder = ReportBuilder(project).include_file(project / "main.py")

        builder.add_coverage_data(
            {
                str(project / "app" / "models.py"): {2: 1},
                str(tmp_path / "outside.py"): {1: 1},
            }
        )

        assert builder.root.get_file(project / "app" / "models.py") is None

    def test_add_missing_adds_files_inside_root_only(self, project: Path, tmp_path: Path) -> None:
        outside = tmp_path / "outside.py"
        outside.write_text("x = 1\n")
        builder = ReportBuilder(project).include_file(project / "main.py")

        builder.add_coverage_data(
            {
                str(project / "app" / "models.py"): {2: 1},
                str(outside): {1: 1},
                str(project / "gone.py"): {1: 1},
            },
            add_missing=True,
        )
        report = builder.build()

        assert child(child(report, "app"), "models.py").coverage_data == {2: 1}
        assert report.summary.total_files == 2
