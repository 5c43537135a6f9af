"""Coverage collection sessions and the execution profiler capability.

A ``CoverageSession`` wraps an injected ``Profiler`` and enforces the
collection lifecycle: start once, stop once, in that order. Only one
session may collect per process at a time; a second ``start()`` before
``stop()`` is a programming error and raises immediately.

``TraceProfiler`` is the bundled profiler. It counts ``line`` trace events
per file through ``sys.settrace`` and, when configured to, reports
executable lines that never ran as ``-1`` using the synthetic classifier.
"""

from __future__ import annotations

import os
import runpy
import sys
import threading
from collections import Counter, defaultdict
from pathlib import Path
from types import FrameType
from typing import Any, Protocol

from covreport.config.models import ProfilerConfig, ReportConfig
from covreport.core.errors import CollectionError
from covreport.core.logging import clear_session_id, get_logger, set_session_id
from covreport.coverage.builder import ReportBuilder
from covreport.coverage.merge import merge_file_lines, normalize_coverage
from covreport.coverage.models import RawCoverageMap
from covreport.coverage.synthetic import generate_for_file

log = get_logger("coverage.session")

_THIS_FILE = os.path.realpath(__file__)


class Profiler(Protocol):
    """Protocol for execution profilers.

    Markers follow the raw map convention: ``count`` executed, ``-1`` not
    executed, ``-2`` not executable.
    """

    def is_available(self) -> bool:
        """Whether the profiler can collect in this process right now."""
        ...

    def start(self) -> None:
        ...

    def stop(self) -> RawCoverageMap:
        ...


class TraceProfiler:
    """Line profiler built on the interpreter's trace hook."""

    def __init__(self, config: ProfilerConfig | None = None) -> None:
        self._config = config or ProfilerConfig()
        self._include = [Path(p).resolve() for p in self._config.include_paths]
        self._counts: defaultdict[str, Counter[int]] = defaultdict(Counter)
        self._traceable: dict[str, str | None] = {}

    def is_available(self) -> bool:
        # A foreign trace function (debugger, another coverage tool) owns the hook.
        current = sys.gettrace()
        return current is None or current == self._trace

    def start(self) -> None:
        self._counts = defaultdict(Counter)
        self._traceable = {}
        threading.settrace(self._trace)
        sys.settrace(self._trace)

    def stop(self) -> RawCoverageMap:
        sys.settrace(None)
        threading.settrace(None)  # type: ignore[arg-type]

        data: RawCoverageMap = {}
        for path, counts in self._counts.items():
            executed = dict(counts)
            if self._config.include_unexecuted:
                data[path] = merge_file_lines([generate_for_file(path), executed])
            else:
                data[path] = executed
        return data

    def _canonical(self, filename: str) -> str | None:
        """Canonical path for a code filename, or None if it is not traced."""
        if filename in self._traceable:
            return self._traceable[filename]

        canonical: str | None = None
        if not filename.startswith("<"):
            resolved = os.path.realpath(filename)
            if resolved != _THIS_FILE and os.path.isfile(resolved):
                path = Path(resolved)
                if not self._include or any(
                    root == path or root in path.parents for root in self._include
                ):
                    canonical = resolved
        self._traceable[filename] = canonical
        return canonical

    def _trace(self, frame: FrameType, event: str, arg: Any) -> Any:  # noqa: ARG002
        if event != "call":
            return None
        path = self._canonical(frame.f_code.co_filename)
        if path is None:
            return None
        counts = self._counts[path]

        def trace_lines(frame: FrameType, event: str, arg: Any) -> Any:  # noqa: ARG001
            if event == "line":
                counts[frame.f_lineno] += 1
            return trace_lines

        return trace_lines


class CoverageSession:
    """One coverage collection session over an injected profiler."""

    def __init__(
        self, profiler: Profiler | None = None, config: ProfilerConfig | None = None
    ) -> None:
        self._profiler: Profiler = profiler or TraceProfiler(config)
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Start collecting.

        Raises:
            NotInCollectionModeError: If the profiler is unavailable.
            AlreadyStartedError: If this session is already collecting.
        """
        if not self._profiler.is_available():
            raise CollectionError.not_in_collection_mode(
                "another trace function is installed or the profiler is disabled"
            )
        if self._running:
            raise CollectionError.already_started()
        self._profiler.start()
        self._running = True
        log.info("collection_started", session_id=set_session_id())

    def stop(self) -> RawCoverageMap:
        """Stop collecting and return the normalized raw coverage map.

        Raises:
            NotStartedError: If the session is not collecting.
        """
        if not self._running:
            raise CollectionError.not_started()
        data = normalize_coverage(self._profiler.stop())
        self._running = False
        log.info("collection_stopped", files=len(data))
        clear_session_id()
        return data

    def builder(
        self,
        root: str | Path,
        data: RawCoverageMap,
        *,
        synthetic: bool = False,
        config: ReportConfig | None = None,
    ) -> ReportBuilder:
        return ReportBuilder(root, data, synthetic=synthetic, config=config)


def run_script(
    script: str | Path,
    args: list[str] | None = None,
    *,
    session: CoverageSession | None = None,
) -> tuple[RawCoverageMap, int]:
    """Run a Python script as ``__main__`` under a coverage session.

    Returns the collected raw map and the script's exit status. A script
    that raises is reported with status 1 after its traceback is logged.
    """
    script_path = Path(script).resolve()
    session = session or CoverageSession()

    session.start()
    original_argv = sys.argv
    original_path = sys.path[:]
    sys.argv = [str(script_path), *(args or [])]
    sys.path.insert(0, str(script_path.parent))

    exit_code = 0
    try:
        runpy.run_path(str(script_path), run_name="__main__")
    except SystemExit as e:
        exit_code = e.code if isinstance(e.code, int) else (0 if e.code is None else 1)
    except Exception:
        log.exception("script_failed", script=str(script_path))
        exit_code = 1
    finally:
        data = session.stop()
        sys.argv = original_argv
        sys.path[:] = original_path

    return data, exit_code
