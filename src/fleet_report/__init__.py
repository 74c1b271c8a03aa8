"""
Fleet Report - Instance Placement History and Licensing Reports

Reconstructs which compute instances existed during an analysis window,
where they were placed (shared fleet hosts or sole-tenant nodes), and which
OS and license their images carry, then serves a filterable instance list
and a per-day histogram.
"""

__version__ = "0.1.0"

from .history import (
    ImageLocator,
    InstanceLocator,
    InstanceSetHistory,
    InstanceSetHistoryBuilder,
    InstanceState,
    LicenseType,
    OperatingSystem,
    Tenancy,
)
from .report import AnnotationTable, DateSelection, FilterState, ReportArchive, ReportView

__all__ = [
    "InstanceSetHistoryBuilder",  # Entry point: feed observations, then build()
    "InstanceSetHistory",
    "ReportArchive",
    "ReportView",
    "AnnotationTable",
    "DateSelection",
    "FilterState",
    "ImageLocator",
    "InstanceLocator",
    "InstanceState",
    "LicenseType",
    "OperatingSystem",
    "Tenancy",
]
