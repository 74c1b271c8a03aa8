"""Exception hierarchy for Fleet Report."""

from .base import FleetReportError
from .config import ConfigurationError, InvalidConfigError
from .history import (
    ConstructionError,
    DoubleBuildError,
    DuplicateInstanceError,
    HistoryError,
    InvalidLocatorError,
    InvalidObservationError,
)
from .report import IngestError, InvalidSelectionError, ReportError

__all__ = [
    "FleetReportError",
    "HistoryError",
    "ConstructionError",
    "DuplicateInstanceError",
    "DoubleBuildError",
    "InvalidObservationError",
    "InvalidLocatorError",
    "ReportError",
    "InvalidSelectionError",
    "IngestError",
    "ConfigurationError",
    "InvalidConfigError",
]
