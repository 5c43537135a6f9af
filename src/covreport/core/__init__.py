"""Core module exports."""

from covreport.core.errors import (
    AlreadyStartedError,
    CollectionError,
    ConfigError,
    CoverageDataError,
    CovReportError,
    ErrorCode,
    FileOutsideRootError,
    NotInCollectionModeError,
    NotStartedError,
    PathNotFoundError,
    TreeError,
)
from covreport.core.logging import (
    clear_session_id,
    configure_logging,
    get_logger,
    get_session_id,
    set_session_id,
)

__all__ = [
    # Errors
    "AlreadyStartedError",
    "CollectionError",
    "ConfigError",
    "CoverageDataError",
    "CovReportError",
    "ErrorCode",
    "FileOutsideRootError",
    "NotInCollectionModeError",
    "NotStartedError",
    "PathNotFoundError",
    "TreeError",
    # Logging
    "clear_session_id",
    "configure_logging",
    "get_logger",
    "get_session_id",
    "set_session_id",
]
