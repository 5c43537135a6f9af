"""Synthetic coverage: executable lines found by static analysis.

Parses Python source and marks every line a line-tracing profiler could
report, all as not executed (-1). The result is a baseline coverage map for
files that were never run.

Classification, first match wins per node; children are visited unless a
rule skips the whole statement:

- function/class headers and docstrings: skipped
- UPPER_CASE assignments at module/class level: the statement's line
- other class-level assignments with a value: the value's line; bare
  class-level annotations (``count: int``) are declarations and skipped
- if/while tests, for iterables, match subjects, case patterns,
  except handlers: that line only (bodies are classified on their own)
- break/continue/raise/import/pass: own line
- expression statements: own line
- return: own line only if the innermost enclosing function already has a
  line marked as executed; always when outside any function
- any other expression: own line

A file that fails to parse yields an empty map.
"""

from __future__ import annotations

import ast
import re
from pathlib import Path

from covreport.core.logging import get_logger
from covreport.coverage.models import NOT_EXECUTED, FileLines

log = get_logger("coverage.synthetic")

_CONSTANT_NAME = re.compile(r"^_*[A-Z][A-Z0-9_]*$")

# (start_line, end_line) of an enclosing function
Scope = tuple[int, int]

_FUNCTION_NODES = (ast.FunctionDef, ast.AsyncFunctionDef)
_SIMPLE_NODES = (ast.Break, ast.Continue, ast.Raise, ast.Import, ast.ImportFrom, ast.Pass)


def _is_docstring(node: ast.AST, body: list[ast.stmt]) -> bool:
    return (
        bool(body)
        and body[0] is node
        and isinstance(node, ast.Expr)
        and isinstance(node.value, ast.Constant)
        and isinstance(node.value.value, str)
    )


def _assignment_targets(node: ast.Assign | ast.AnnAssign) -> list[ast.expr]:
    if isinstance(node, ast.Assign):
        return node.targets
    return [node.target]


def _is_constant_declaration(node: ast.AST) -> bool:
    if not isinstance(node, (ast.Assign, ast.AnnAssign)):
        return False
    targets = _assignment_targets(node)
    return all(isinstance(t, ast.Name) and _CONSTANT_NAME.match(t.id) for t in targets)


def _condition_line(node: ast.AST) -> int | None:
    """Line of the controlling expression of a branch, loop or handler."""
    if isinstance(node, (ast.If, ast.While)):
        return node.test.lineno
    if isinstance(node, (ast.For, ast.AsyncFor)):
        return node.iter.lineno
    if isinstance(node, ast.Match):
        return node.subject.lineno
    if isinstance(node, ast.match_case):
        return node.pattern.lineno
    if isinstance(node, ast.ExceptHandler):
        return node.lineno
    return None


class SyntheticCoverageGenerator:
    """Classify the executable lines of one Python source file.

    ``container`` tracks what kind of body a statement belongs to
    (``module``, ``class`` or ``function``); it is inherited by statements
    nested in compound statements. Function scopes are kept on an explicit
    stack passed down the walk.
    """

    def __init__(self, source: str, filename: str = "<unknown>") -> None:
        self._source = source
        self._filename = filename
        self._coverage: FileLines = {}

    def generate(self) -> FileLines:
        """Return ``{line: -1}`` for every executable line, sorted by line."""
        try:
            tree = ast.parse(self._source, filename=self._filename)
        except (SyntaxError, ValueError) as e:
            log.debug("synthetic_parse_failed", filename=self._filename, error=str(e))
            return {}

        self._coverage = {}
        self._walk_body(tree.body, scopes=(), container="module", has_docstring=True)
        return dict(sorted(self._coverage.items()))

    def _mark(self, line: int) -> None:
        self._coverage.setdefault(line, NOT_EXECUTED)

    def _walk_body(
        self,
        body: list[ast.stmt],
        scopes: tuple[Scope, ...],
        container: str,
        has_docstring: bool = False,
    ) -> None:
        for stmt in body:
            if has_docstring and _is_docstring(stmt, body):
                continue
            self._walk(stmt, scopes, container)

    def _walk(self, node: ast.AST, scopes: tuple[Scope, ...], container: str) -> None:
        if isinstance(node, _FUNCTION_NODES):
            self._walk_header(node, scopes)
            inner = (*scopes, (node.lineno, node.end_lineno or node.lineno))
            self._walk_body(node.body, inner, container="function", has_docstring=True)
            return

        if isinstance(node, ast.ClassDef):
            self._walk_header(node, scopes)
            self._walk_body(node.body, scopes, container="class", has_docstring=True)
            return

        if container == "class" and isinstance(node, ast.AnnAssign) and node.value is None:
            # Bare field declaration, nothing to initialize
            return

        if container in ("module", "class") and _is_constant_declaration(node):
            self._mark(node.lineno)  # type: ignore[attr-defined]
        elif (
            container == "class"
            and isinstance(node, (ast.Assign, ast.AnnAssign))
            and node.value is not None
        ):
            # Only the initializer counts, not the attribute name.
            self._mark(node.value.lineno)
            self._walk(node.value, scopes, container)
            return
        elif (condition := _condition_line(node)) is not None:
            self._mark(condition)
        elif isinstance(node, (*_SIMPLE_NODES, ast.Expr)):
            self._mark(node.lineno)  # type: ignore[attr-defined]
        elif isinstance(node, ast.Return):
            if not scopes or self._scope_executed(scopes[-1]):
                self._mark(node.lineno)
        elif isinstance(node, ast.expr):
            self._mark(node.lineno)

        self._walk_children(node, scopes, container)

    def _walk_header(self, node: ast.AST, scopes: tuple[Scope, ...]) -> None:
        """Visit decorators, bases, defaults and annotations of a declaration."""
        for field_name, value in ast.iter_fields(node):
            if field_name != "body":
                self._walk_value(value, scopes, container="expression")

    def _walk_children(self, node: ast.AST, scopes: tuple[Scope, ...], container: str) -> None:
        for _field_name, value in ast.iter_fields(node):
            self._walk_value(value, scopes, container)

    def _walk_value(self, value: object, scopes: tuple[Scope, ...], container: str) -> None:
        if isinstance(value, list):
            for child in value:
                if isinstance(child, ast.AST):
                    self._walk(child, scopes, container)
        elif isinstance(value, ast.AST):
            self._walk(value, scopes, container)

    def _scope_executed(self, scope: Scope) -> bool:
        start, end = scope
        return any(self._coverage.get(ln, NOT_EXECUTED) > 0 for ln in range(start, end + 1))


def generate_synthetic_coverage(source: str, filename: str = "<unknown>") -> FileLines:
    """Convenience wrapper around ``SyntheticCoverageGenerator``."""
    return SyntheticCoverageGenerator(source, filename).generate()


def generate_for_file(path: str | Path) -> FileLines:
    """Classify a file on disk. Unreadable or undecodable files yield ``{}``."""
    path = Path(path)
    try:
        source = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        log.debug("synthetic_read_failed", path=str(path), error=str(e))
        return {}
    return generate_synthetic_coverage(source, filename=str(path))
