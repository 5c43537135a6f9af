"""Shared fixtures for coverage tests."""

from pathlib import Path

import pytest


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A small source tree.

    project/
        app/
            api/
                handlers.py
            models.py
        main.py
        README.md
    """
    root = tmp_path / "project"
    (root / "app" / "api").mkdir(parents=True)
    (root / "app" / "api" / "handlers.py").write_text(
        "def handle(request):\n    return request\n"
    )
    (root / "app" / "models.py").write_text("class Model:\n    name = 'model'\n")
    (root / "main.py").write_text("import sys\n\nprint(sys.argv)\n")
    (root / "README.md").write_text("# project\n")
    return root.resolve()
