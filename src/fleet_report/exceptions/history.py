"""History reconstruction errors: windows, observations, build lifecycle."""

from datetime import datetime

from .base import FleetReportError


class HistoryError(FleetReportError):
    """Base class for history-building errors."""

    pass


class ConstructionError(HistoryError):
    """Raised when an analysis window is empty or inverted."""

    def __init__(self, window_start: datetime, window_end: datetime):
        super().__init__(
            "Analysis window end must be after its start",
            details={"start": window_start.isoformat(), "end": window_end.isoformat()},
        )
        self.window_start = window_start
        self.window_end = window_end


class DuplicateInstanceError(HistoryError):
    """Raised when the same instance id is registered twice."""

    def __init__(self, instance_id: int):
        super().__init__(
            f"Instance {instance_id} has already been added",
            details={"instance_id": str(instance_id)},
        )
        self.instance_id = instance_id


class DoubleBuildError(HistoryError):
    """Raised when a builder is used after it has been built."""

    def __init__(self, operation: str):
        super().__init__(
            f"Cannot {operation}: history has already been built",
            details={"operation": operation},
        )
        self.operation = operation


class InvalidObservationError(HistoryError):
    """Raised when an observation lies outside the analysis window."""

    def __init__(self, instance_id: int, observed_at: datetime, reason: str):
        super().__init__(
            f"Invalid observation for instance {instance_id}",
            details={
                "instance_id": str(instance_id),
                "observed_at": observed_at.isoformat(),
                "reason": reason,
            },
        )
        self.instance_id = instance_id
        self.observed_at = observed_at
        self.reason = reason


class InvalidLocatorError(HistoryError):
    """Raised when a resource locator string cannot be parsed."""

    def __init__(self, value: str, kind: str):
        super().__init__(
            f"Invalid {kind} locator: {value}",
            details={"value": value, "kind": kind},
        )
        self.value = value
        self.kind = kind
