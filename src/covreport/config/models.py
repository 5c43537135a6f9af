"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (COVREPORT__SECTION__KEY)
3. Repo YAML (<root>/.covreport.yaml)
4. Global YAML (~/.config/covreport/config.yaml)
5. Built-in defaults (this file)

Examples:
    COVREPORT__LOGGING__LEVEL=DEBUG
    COVREPORT__REPORT__INCLUDE_HIDDEN=true
    COVREPORT__PROFILER__INCLUDE_UNEXECUTED=false
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        COVREPORT__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every tree insertion and classified file.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ReportConfig(BaseModel):
    """Report tree and snapshot configuration.

    Env vars:
        COVREPORT__REPORT__INCLUDE_HIDDEN: Auto-fill dot-files and dot-directories
        COVREPORT__REPORT__JSON_INDENT: Indentation of JSON output
    """

    exclude: list[str] = Field(
        default_factory=lambda: ["__pycache__", "*.pyc"],
        description="fnmatch patterns on entry names skipped by auto-fill.",
    )
    include_hidden: bool = Field(
        default=False,
        description="Auto-fill entries whose name starts with a dot.",
    )
    synthetic_extensions: list[str] = Field(
        default_factory=lambda: [".py"],
        description="File suffixes the synthetic classifier is applied to.",
    )
    json_indent: int | None = Field(
        default=2,
        description="Indentation for JSON reports. None writes compact JSON.",
    )

    @field_validator("json_indent")
    @classmethod
    def validate_json_indent(cls, v: int | None) -> int | None:
        if v is not None and v < 0:
            raise ValueError(f"json_indent must be >= 0, got {v}")
        return v

    @field_validator("synthetic_extensions")
    @classmethod
    def validate_extensions(cls, v: list[str]) -> list[str]:
        return [ext if ext.startswith(".") else f".{ext}" for ext in v]


class ProfilerConfig(BaseModel):
    """Execution profiler configuration.

    Env vars:
        COVREPORT__PROFILER__INCLUDE_UNEXECUTED: Report never-run lines as -1
    """

    include_unexecuted: bool = Field(
        default=True,
        description="Add a synthetic baseline for traced files so unexecuted lines are reported.",
    )
    include_paths: list[str] = Field(
        default_factory=list,
        description="Only trace files under these directories. Empty traces every real file.",
    )


class CovReportConfig(BaseModel):
    """Root configuration for covreport.

    All settings can be configured via:
    1. Environment variables: COVREPORT__SECTION__KEY
    2. YAML config files (repo or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    profiler: ProfilerConfig = Field(default_factory=ProfilerConfig)
