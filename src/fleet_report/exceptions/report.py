"""Report errors: selections and ingestion of collaborator input."""

from datetime import datetime
from pathlib import Path
from typing import Optional

from .base import FleetReportError


class ReportError(FleetReportError):
    """Base class for report-related errors."""

    pass


class InvalidSelectionError(ReportError):
    """Raised when a date selection ends before it starts."""

    def __init__(self, start: datetime, end: datetime):
        super().__init__(
            "Date selection end must not be before its start",
            details={"start": start.isoformat(), "end": end.isoformat()},
        )
        self.start = start
        self.end = end


class IngestError(FleetReportError):
    """Raised when observation or annotation input cannot be loaded."""

    def __init__(self, reason: str, source: Optional[Path] = None):
        details = {"reason": reason}
        if source is not None:
            details["source"] = str(source)

        super().__init__(f"Cannot load report input: {reason}", details=details)
        self.reason = reason
        self.source = source
