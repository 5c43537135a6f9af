"""Tests for containment checks and report link helpers."""

import os
from pathlib import Path

import pytest

from covreport.coverage.paths import (
    CSS_ASSET,
    asset_path,
    breadcrumbs,
    canonical_path,
    css_path,
    directory_index,
    file_html,
    is_within,
    relative_link,
    relative_path,
)


class TestContainment:
    def test_child_is_within(self, tmp_path: Path) -> None:
        assert is_within(tmp_path / "app" / "a.py", tmp_path / "app")

    def test_root_is_within_itself(self, tmp_path: Path) -> None:
        assert is_within(tmp_path, tmp_path)

    def test_sibling_with_common_prefix_is_outside(self, tmp_path: Path) -> None:
        assert not is_within(tmp_path / "app2" / "a.py", tmp_path / "app")

    def test_dotdot_escape_is_outside(self, tmp_path: Path) -> None:
        assert not is_within(tmp_path / "app" / ".." / "other.py", tmp_path / "app")

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_symlink_resolved(self, tmp_path: Path) -> None:
        real = tmp_path / "real"
        real.mkdir()
        link = tmp_path / "link"
        link.symlink_to(real)

        assert canonical_path(link / "a.py") == real.resolve() / "a.py"
        assert is_within(link / "a.py", real)

    def test_relative_resolved_against_base(self, tmp_path: Path) -> None:
        assert canonical_path("pkg/a.py", base=tmp_path) == tmp_path.resolve() / "pkg" / "a.py"


class TestRelativePath:
    def test_nested(self) -> None:
        assert relative_path("/repo/src/pkg/a.py", "/repo/src") == "pkg/a.py"

    def test_root(self) -> None:
        assert relative_path("/repo/src", "/repo/src") == ""

    def test_outside(self) -> None:
        assert relative_path("/repo/srcx/a.py", "/repo/src") is None


class TestLinks:
    def test_directory_index(self) -> None:
        assert directory_index("/r", "/r") == "index.html"
        assert directory_index("/r/pkg/sub", "/r") == "pkg/sub/index.html"

    def test_file_html(self) -> None:
        assert file_html("/r/pkg/a.py", "/r") == "pkg/a.py.html"

    def test_css_path_for_root_index(self) -> None:
        assert css_path("/r", "/r") == CSS_ASSET

    def test_css_path_for_nested_directory(self) -> None:
        assert css_path("/r/pkg/sub", "/r") == "../../" + CSS_ASSET

    def test_css_path_for_file_page(self) -> None:
        assert css_path("/r/pkg/a.py", "/r", is_file=True) == "../" + CSS_ASSET

    def test_asset_path(self) -> None:
        assert asset_path("assets/js/app.js", "/r/pkg/a.py", "/r") == "../assets/js/app.js"

    def test_breadcrumbs_for_file(self) -> None:
        trail = breadcrumbs("/r/pkg/a.py", "/r", is_file=True)

        assert trail == [("Root", "../index.html"), ("pkg", "index.html"), ("a.py", None)]

    def test_breadcrumbs_for_directory(self) -> None:
        trail = breadcrumbs("/r/pkg/sub", "/r")

        assert trail == [
            ("Root", "../../index.html"),
            ("pkg", "../index.html"),
            ("sub", None),
        ]

    def test_relative_link_sibling_directory(self) -> None:
        assert relative_link("pkg/a.py.html", "other/index.html") == "../other/index.html"

    def test_relative_link_same_directory(self) -> None:
        assert relative_link("pkg/a.py.html", "pkg/b.py.html") == "b.py.html"

    def test_relative_link_page_named_like_target_directory(self) -> None:
        assert relative_link("a/b", "a/b/c.html") == "b/c.html"

    def test_relative_link_up_several_levels(self) -> None:
        assert relative_link("a/b/c/page.html", "a/x.html") == "../../x.html"

    def test_relative_link_to_enclosing_directory(self) -> None:
        assert relative_link("pkg/a.py.html", "pkg") == "../pkg"
