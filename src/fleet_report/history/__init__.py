"""Instance history: observations, reconstruction and frozen snapshots."""

from .builder import InstanceObservation, InstanceSetHistoryBuilder
from .models import (
    ImageLocator,
    InstanceHistory,
    InstanceLocator,
    InstanceSetHistory,
    InstanceState,
    LicenseType,
    OperatingSystem,
    Tenancy,
)

__all__ = [
    "ImageLocator",
    "InstanceHistory",
    "InstanceLocator",
    "InstanceObservation",
    "InstanceSetHistory",
    "InstanceSetHistoryBuilder",
    "InstanceState",
    "LicenseType",
    "OperatingSystem",
    "Tenancy",
]
