"""Line coverage collection, aggregation and reporting.

This package provides:
- Raw coverage maps with max-hit merge across runs
- A report tree of directories and files under one root
- Synthetic coverage for files that were never executed
- Immutable, serializable report snapshots with rolled-up summaries

Usage:
    from covreport.coverage import CoverageSession, ReportBuilder, render_json

    # Collect
    session = CoverageSession()
    session.start()
    run_the_code()
    data = session.stop()

    # Build a report for everything under a root
    report = ReportBuilder("/repo/src", data).build()
    print(render_json(report))

Execution markers in raw maps:
    - count >= 0: executed count times
    - -1: executable, not executed
    - -2: not executable (dropped on normalization)
"""

from covreport.coverage.builder import ReportBuilder, build_report, canonicalize_coverage
from covreport.coverage.merge import (
    filter_coverage,
    merge_coverage,
    merge_file_lines,
    normalize_coverage,
    normalize_lines,
)
from covreport.coverage.models import (
    DEAD_CODE,
    NOT_EXECUTED,
    CoverageSummary,
    FileLines,
    LineCoverage,
    RawCoverageMap,
    ReportNodeData,
)
from covreport.coverage.report import (
    build_text_summary,
    compute_file_stats,
    load_json,
    read_coverage_file,
    render_json,
    write_coverage_file,
)
from covreport.coverage.session import CoverageSession, Profiler, TraceProfiler, run_script
from covreport.coverage.summary import summarize_directory, summarize_file
from covreport.coverage.synthetic import (
    SyntheticCoverageGenerator,
    generate_for_file,
    generate_synthetic_coverage,
)
from covreport.coverage.tree import ReportDirectory, ReportFile

__all__ = [
    # Models
    "DEAD_CODE",
    "NOT_EXECUTED",
    "CoverageSummary",
    "FileLines",
    "LineCoverage",
    "RawCoverageMap",
    "ReportNodeData",
    # Merge
    "filter_coverage",
    "merge_coverage",
    "merge_file_lines",
    "normalize_coverage",
    "normalize_lines",
    # Summary
    "summarize_directory",
    "summarize_file",
    # Tree
    "ReportDirectory",
    "ReportFile",
    # Synthetic
    "SyntheticCoverageGenerator",
    "generate_for_file",
    "generate_synthetic_coverage",
    # Builder
    "ReportBuilder",
    "build_report",
    "canonicalize_coverage",
    # Session
    "CoverageSession",
    "Profiler",
    "TraceProfiler",
    "run_script",
    # Report
    "build_text_summary",
    "compute_file_stats",
    "load_json",
    "read_coverage_file",
    "render_json",
    "write_coverage_file",
]
