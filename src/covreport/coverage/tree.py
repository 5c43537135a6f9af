"""Report tree: the mutable directory/file structure built before a report.

Nodes are keyed by basename at each level, so one directory cannot hold two
children of the same name. Nodes never point back at their parent.

Two ways to populate a tree, freely mixed:
- explicit inclusion with ``add_file`` / ``add_directory``
- blanket inclusion with ``auto_fill``

Both are idempotent, so the same path can be included repeatedly.
"""

from __future__ import annotations

import fnmatch
from collections.abc import Iterator, Mapping, Sequence
from pathlib import Path

from covreport.core.errors import TreeError
from covreport.core.logging import get_logger
from covreport.coverage.merge import merge_file_lines, normalize_lines
from covreport.coverage.models import (
    CoverageSummary,
    FileLines,
    LineCoverage,
    RawCoverageMap,
    ReportNodeData,
)
from covreport.coverage.paths import canonical_path, is_within
from covreport.coverage.summary import summarize_directory, summarize_file

log = get_logger("coverage.tree")


class ReportFile:
    """A file in the report tree.

    Coverage is looked up in the raw map by path unless the file owns a
    private line map, which ``add_coverage_data`` creates and merges into.
    """

    def __init__(self, path: str | Path, name: str | None = None) -> None:
        self.path = Path(path)
        # Entry name in the tree; differs from path.name for symlinks
        self._name = name or self.path.name
        self._coverage: FileLines | None = None

    def __repr__(self) -> str:
        return f"ReportFile({str(self.path)!r})"

    @property
    def name(self) -> str:
        return self._name

    @property
    def has_own_coverage(self) -> bool:
        return self._coverage is not None

    def add_coverage_data(self, lines: Mapping[int, int]) -> None:
        """Merge ``lines`` into this file's private map (max per line)."""
        normalized = normalize_lines(lines)
        if self._coverage is None:
            self._coverage = normalized
        else:
            self._coverage = merge_file_lines([self._coverage, normalized])

    def get_coverage_data(self, coverage: Mapping[str, Mapping[int, int]]) -> FileLines:
        """Effective line map: the private map if any, else the raw map entry."""
        if self._coverage is not None:
            lines: Mapping[int, int] = self._coverage
        else:
            lines = coverage.get(str(self.path), {})
        return dict(sorted(normalize_lines(lines).items()))

    def get_source(self) -> str:
        return self.path.read_text(encoding="utf-8", errors="replace")

    def get_summary(self, coverage: Mapping[str, Mapping[int, int]]) -> CoverageSummary:
        return summarize_file(self.get_coverage_data(coverage))

    def get_line_coverage(self, coverage: Mapping[str, Mapping[int, int]]) -> list[LineCoverage]:
        """Per-line display data for the file's source."""
        lines = self.get_coverage_data(coverage)
        result: list[LineCoverage] = []
        for number, content in enumerate(self.get_source().split("\n"), start=1):
            if number not in lines:
                status = "neutral"
            elif lines[number] > 0:
                status = "executed"
            else:
                status = "not-executed"
            result.append(LineCoverage(number=number, content=content, status=status))
        return result

    def to_node_data(self, coverage: Mapping[str, Mapping[int, int]]) -> ReportNodeData:
        lines = self.get_coverage_data(coverage)
        return ReportNodeData(
            name=self.name,
            summary=summarize_file(lines),
            children=None,
            coverage_data=lines,
        )


class ReportDirectory:
    """A directory in the report tree.

    Subdirectories and files are kept in insertion order, indexed by basename.
    """

    def __init__(self, path: str | Path) -> None:
        """Create the node for an existing directory.

        Raises:
            PathNotFoundError: If ``path`` is not an existing directory.
        """
        self.path = canonical_path(path)
        if not self.path.is_dir():
            raise TreeError.not_found(str(self.path))
        self.directories: dict[str, ReportDirectory] = {}
        self.files: dict[str, ReportFile] = {}

    def __repr__(self) -> str:
        return f"ReportDirectory({str(self.path)!r})"

    @property
    def name(self) -> str:
        return self.path.name

    def is_empty(self) -> bool:
        return not self.files and not self.directories

    def _validate(self, path: str | Path) -> Path:
        """Canonicalize ``path`` and check it lies inside this directory.

        Raises:
            FileOutsideRootError: If the path resolves outside this directory.
            PathNotFoundError: If the path does not exist.
        """
        resolved = canonical_path(path, base=self.path)
        if resolved != self.path and self.path not in resolved.parents:
            raise TreeError.outside_root(str(resolved), str(self.path))
        if not resolved.exists():
            raise TreeError.not_found(str(resolved))
        return resolved

    def add_file(self, path: str | Path) -> ReportFile:
        """Add a file, creating every intermediate directory node.

        Returns the existing node if the file was already added.

        Raises:
            FileOutsideRootError: If the file is not inside this directory.
            PathNotFoundError: If the file does not exist.
        """
        resolved = self._validate(path)
        if not resolved.is_file():
            raise TreeError.not_found(str(resolved))

        if resolved.parent == self.path:
            existing = self.files.get(resolved.name)
            if existing is not None:
                return existing
            report_file = ReportFile(resolved)
            self.files[resolved.name] = report_file
            log.debug("file_added", path=str(resolved))
            return report_file

        return self.add_directory(resolved.parent).add_file(resolved)

    def add_directory(self, path: str | Path) -> ReportDirectory:
        """Find or create the node for a directory at any depth below this one.

        Adding this directory's own path returns this node.

        Raises:
            FileOutsideRootError: If the directory is not inside this one.
            PathNotFoundError: If the directory does not exist.
        """
        resolved = self._validate(path)
        if resolved == self.path:
            return self

        first = resolved.relative_to(self.path).parts[0]
        child = self.directories.get(first)
        if child is None:
            child = ReportDirectory(self.path / first)
            self.directories[first] = child
            log.debug("directory_added", path=str(child.path))

        return child.add_directory(resolved)

    def auto_fill(self, exclude: Sequence[str] = (), include_hidden: bool = False) -> None:
        """Recursively add every file and directory found on disk.

        Entries are visited in name order. Dot-entries are skipped unless
        ``include_hidden``; names matching an ``exclude`` pattern are skipped.
        Symlinked directories are not followed. A symlinked file is keyed by
        its link name but points at its canonical target, and is skipped when
        that target lies outside this directory. Unreadable directories are
        logged and left out.
        """
        self._fill(self.path, exclude, include_hidden)

    def _fill(self, root: Path, exclude: Sequence[str], include_hidden: bool) -> None:
        try:
            entries = sorted(self.path.iterdir(), key=lambda p: p.name)
        except OSError as e:
            log.warning("directory_unreadable", path=str(self.path), error=str(e))
            return

        for entry in entries:
            if not include_hidden and entry.name.startswith("."):
                continue
            if any(fnmatch.fnmatch(entry.name, pattern) for pattern in exclude):
                continue

            if entry.is_file():
                if entry.name in self.files:
                    continue
                target = entry.resolve() if entry.is_symlink() else entry
                if not is_within(target, root):
                    log.debug("link_outside_root", path=str(entry), target=str(target))
                    continue
                self.files[entry.name] = ReportFile(target, name=entry.name)
            elif entry.is_dir() and not entry.is_symlink():
                child = self.directories.get(entry.name)
                if child is None:
                    child = ReportDirectory(entry)
                    self.directories[entry.name] = child
                child._fill(root, exclude, include_hidden)

        log.debug(
            "directory_filled",
            path=str(self.path),
            files=len(self.files),
            directories=len(self.directories),
        )

    def _walk_to(self, path: str | Path) -> tuple[ReportDirectory | None, tuple[str, ...]]:
        resolved = canonical_path(path, base=self.path)
        if resolved == self.path:
            return self, ()
        if self.path not in resolved.parents:
            return None, ()
        parts = resolved.relative_to(self.path).parts
        node: ReportDirectory = self
        for part in parts[:-1]:
            next_node = node.directories.get(part)
            if next_node is None:
                return None, ()
            node = next_node
        return node, parts[-1:]

    def get_file(self, path: str | Path) -> ReportFile | None:
        """Look up an already-added file; None if it is not in the tree."""
        node, leaf = self._walk_to(path)
        if node is None or not leaf:
            return None
        return node.files.get(leaf[0])

    def get_directory(self, path: str | Path) -> ReportDirectory | None:
        """Look up an already-added directory; None if it is not in the tree."""
        node, leaf = self._walk_to(path)
        if node is None:
            return None
        if not leaf:
            return node
        return node.directories.get(leaf[0])

    def iter_files(self) -> Iterator[ReportFile]:
        """Every file below this directory: own files first, then subdirectories."""
        yield from self.files.values()
        for directory in self.directories.values():
            yield from directory.iter_files()

    def get_summary(self, coverage: Mapping[str, Mapping[int, int]]) -> CoverageSummary:
        """Summary recomputed from the raw map for the whole subtree."""
        summaries = [d.get_summary(coverage) for d in self.directories.values()]
        summaries.extend(f.get_summary(coverage) for f in self.files.values())
        return summarize_directory(summaries)

    def to_node_data(self, coverage: RawCoverageMap) -> ReportNodeData:
        """Snapshot this directory: subdirectories first, then files, in insertion order."""
        children = [d.to_node_data(coverage) for d in self.directories.values()]
        children.extend(f.to_node_data(coverage) for f in self.files.values())
        return ReportNodeData(
            name=self.name,
            summary=self.get_summary(coverage),
            children=tuple(children),
            coverage_data=None,
        )
