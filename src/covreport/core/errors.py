"""covreport error types with typed error codes.

Error code ranges:
- 1xxx: Collection lifecycle
- 2xxx: Config
- 3xxx: Report tree
- 4xxx: Coverage data files
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Collection (1xxx)
    NOT_IN_COLLECTION_MODE = 1001
    ALREADY_STARTED = 1002
    NOT_STARTED = 1003

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Report tree (3xxx)
    FILE_OUTSIDE_ROOT = 3001
    PATH_NOT_FOUND = 3002

    # Coverage data (4xxx)
    INVALID_COVERAGE_DATA = 4001


@dataclass(frozen=True, slots=True)
class CovReportError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'FILE_OUTSIDE_ROOT')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class CollectionError(CovReportError):
    """Collection lifecycle misuse. These are programming errors."""

    @classmethod
    def not_in_collection_mode(cls, reason: str) -> "NotInCollectionModeError":
        return NotInCollectionModeError(
            code=ErrorCode.NOT_IN_COLLECTION_MODE,
            message=f"Coverage collection is unavailable: {reason}",
            details={"reason": reason},
        )

    @classmethod
    def already_started(cls) -> "AlreadyStartedError":
        return AlreadyStartedError(
            code=ErrorCode.ALREADY_STARTED,
            message="Coverage collection already started",
        )

    @classmethod
    def not_started(cls) -> "NotStartedError":
        return NotStartedError(
            code=ErrorCode.NOT_STARTED,
            message="Coverage collection must be started before calling stop()",
        )


class NotInCollectionModeError(CollectionError):
    """The execution profiler is unavailable or misconfigured."""


class AlreadyStartedError(CollectionError):
    """start() was called while a session was already running."""


class NotStartedError(CollectionError):
    """stop() was called without a running session."""


class TreeError(CovReportError):
    """Report tree construction misuse."""

    @classmethod
    def outside_root(cls, path: str, root: str) -> "FileOutsideRootError":
        return FileOutsideRootError(
            code=ErrorCode.FILE_OUTSIDE_ROOT,
            message=f"Path {path} is not in directory {root}",
            details={"path": path, "root": root},
        )

    @classmethod
    def not_found(cls, path: str) -> "PathNotFoundError":
        return PathNotFoundError(
            code=ErrorCode.PATH_NOT_FOUND,
            message=f"Path {path} does not exist",
            details={"path": path},
        )


class FileOutsideRootError(TreeError):
    """A path resolved outside the directory it was added to."""


class PathNotFoundError(TreeError):
    """A path that was added does not exist on disk."""


class ConfigError(CovReportError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class CoverageDataError(CovReportError):
    """A coverage data file could not be read or has the wrong shape."""

    @classmethod
    def invalid(cls, path: str, reason: str) -> "CoverageDataError":
        return cls(
            code=ErrorCode.INVALID_COVERAGE_DATA,
            message=f"Invalid coverage data in {path}: {reason}",
            details={"path": path, "reason": reason},
        )
