"""Path containment and report-relative link helpers.

Containment (``is_within``) works on canonical paths: symlinks and ``..``
segments are resolved, then whole path segments are compared, so ``/app2``
is never considered inside ``/app``.

The link helpers are pure string functions used by presentation layers.
Report layout conventions:
- every directory renders to ``<dir>/index.html``
- every file renders to ``<file>.html`` beside its directory index
- the shared stylesheet lives at ``assets/css/coverage.css``
"""

import os
import posixpath
from pathlib import Path, PurePath

CSS_ASSET = "assets/css/coverage.css"
INDEX_PAGE = "index.html"
ROOT_LABEL = "Root"


def canonical_path(path: str | Path, base: str | Path | None = None) -> Path:
    """Absolute, symlink-resolved form of ``path``.

    Relative paths are resolved against ``base`` (or the working directory).
    The path does not need to exist.
    """
    candidate = Path(path).expanduser()
    if not candidate.is_absolute():
        candidate = Path(base or Path.cwd()) / candidate
    return candidate.resolve()


def is_within(path: str | Path, root: str | Path) -> bool:
    """True if ``path`` is ``root`` or lies below it, after canonicalization."""
    target = canonical_path(path)
    container = canonical_path(root)
    return target == container or container in target.parents


def relative_path(full_path: str | Path, root_path: str | Path) -> str | None:
    """Report-relative POSIX path of ``full_path``, "" for the root, None if outside."""
    full = PurePath(os.path.normpath(full_path))
    root = PurePath(os.path.normpath(root_path))
    if full == root:
        return ""
    if root in full.parents:
        return full.relative_to(root).as_posix()
    return None


def css_path(full_path: str | Path, root_path: str | Path, is_file: bool = False) -> str:
    """Relative URL from a directory index or file page to the stylesheet."""
    relative = relative_path(full_path, root_path)
    if relative is None:
        return CSS_ASSET
    if relative == "":
        depth = 0
    else:
        depth = relative.count("/")
        if not is_file:
            depth += 1
    return "../" * depth + CSS_ASSET


def directory_index(full_path: str | Path, root_path: str | Path) -> str:
    """URL of a directory's index page, relative to the report root."""
    relative = relative_path(full_path, root_path)
    if not relative:
        return INDEX_PAGE
    return f"{relative}/{INDEX_PAGE}"


def file_html(full_path: str | Path, root_path: str | Path) -> str:
    """URL of a file's page, relative to the report root."""
    relative = relative_path(full_path, root_path)
    if relative is None:
        return f"{PurePath(full_path).name}.html"
    return f"{relative}.html"


def asset_path(asset: str, from_path: str | Path, root_path: str | Path) -> str:
    """URL of a root-level asset as seen from the page for ``from_path``."""
    relative = relative_path(from_path, root_path)
    if relative is None:
        return asset
    depth = 0 if relative == "" else relative.count("/")
    return "../" * depth + asset


def breadcrumbs(
    full_path: str | Path, root_path: str | Path, is_file: bool = False
) -> list[tuple[str, str | None]]:
    """Breadcrumb trail as ``(label, url)`` pairs; the current item has no url."""
    relative = relative_path(full_path, root_path)
    if relative is None:
        return [(ROOT_LABEL, INDEX_PAGE), (PurePath(full_path).name, None)]

    parts = [part for part in relative.split("/") if part]
    depth = len(parts)
    base_depth = max(depth - 1 if is_file else depth, 0)

    trail: list[tuple[str, str | None]] = [(ROOT_LABEL, "../" * base_depth + INDEX_PAGE)]
    for i, part in enumerate(parts):
        if i == depth - 1:
            trail.append((part, None))
        else:
            link_depth = max(depth - i - 2 if is_file else depth - i - 1, 0)
            trail.append((part, "../" * link_depth + INDEX_PAGE))
    return trail


def relative_link(from_path: str, to_path: str) -> str:
    """Relative URL from the page at ``from_path`` to ``to_path``.

    Both are report-relative or both absolute. ``from_path`` names a page
    (a file), so its last segment does not count as a directory level.
    """
    from_dirs = posixpath.normpath(from_path.rstrip("/")).split("/")[:-1]
    to_parts = posixpath.normpath(to_path.rstrip("/")).split("/")

    # Always keep the target's last segment
    common = 0
    while (
        common < len(from_dirs)
        and common < len(to_parts) - 1
        and from_dirs[common] == to_parts[common]
    ):
        common += 1

    up = "../" * (len(from_dirs) - common)
    return up + "/".join(to_parts[common:])
