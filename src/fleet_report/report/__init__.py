"""Scheduling report: annotations, archive, filtering and histograms."""

from .annotations import UNKNOWN_ANNOTATION, AnnotationTable, LicenseAnnotation
from .archive import ReportArchive
from .filters import DateSelection, FilterState, filter_instances, matches_toggles
from .histogram import HistogramEntry, build_histogram
from .view import ReportView

__all__ = [
    "AnnotationTable",
    "DateSelection",
    "FilterState",
    "HistogramEntry",
    "LicenseAnnotation",
    "ReportArchive",
    "ReportView",
    "UNKNOWN_ANNOTATION",
    "build_histogram",
    "filter_instances",
    "matches_toggles",
]
