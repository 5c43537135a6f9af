"""Config module exports."""

from covreport.config.loader import CovReportSettings, load_config, load_config_file
from covreport.config.models import (
    CovReportConfig,
    LoggingConfig,
    LogOutputConfig,
    ProfilerConfig,
    ReportConfig,
)

__all__ = [
    "load_config",
    "load_config_file",
    "CovReportConfig",
    "CovReportSettings",
    "LoggingConfig",
    "LogOutputConfig",
    "ProfilerConfig",
    "ReportConfig",
]
