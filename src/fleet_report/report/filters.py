"""Toggle and date-selection filtering of instance histories.

Everything here is a pure function of (filter state, history, annotation
lookup). ``ReportView`` calls these after each state change.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Callable, Iterable, Optional

from ..exceptions import InvalidSelectionError
from ..history.models import (
    InstanceHistory,
    LicenseType,
    OperatingSystem,
    Tenancy,
    to_utc,
)
from .annotations import LicenseAnnotation

if TYPE_CHECKING:
    from ..config import ReportConfig

Resolver = Callable[[InstanceHistory], LicenseAnnotation]


@dataclass(frozen=True)
class DateSelection:
    """Inclusive ``[start, end]`` range applied to ``observed_at``."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", to_utc(self.start))
        object.__setattr__(self, "end", to_utc(self.end))
        if self.end < self.start:
            raise InvalidSelectionError(self.start, self.end)

    def contains(self, timestamp: datetime) -> bool:
        return self.start <= to_utc(timestamp) <= self.end


@dataclass
class FilterState:
    """Tenancy, OS and license toggles. All enabled unless configured otherwise."""

    include_fleet_instances: bool = True
    include_sole_tenant_instances: bool = True

    include_windows_instances: bool = True
    include_linux_instances: bool = True
    include_unknown_os_instances: bool = True

    include_spla_instances: bool = True
    include_byol_instances: bool = True
    include_unknown_licensed_instances: bool = True

    @classmethod
    def from_config(cls, config: ReportConfig) -> FilterState:
        return cls(
            include_fleet_instances=config.include_fleet_instances,
            include_sole_tenant_instances=config.include_sole_tenant_instances,
            include_windows_instances=config.include_windows_instances,
            include_linux_instances=config.include_linux_instances,
            include_unknown_os_instances=config.include_unknown_os_instances,
            include_spla_instances=config.include_spla_instances,
            include_byol_instances=config.include_byol_instances,
            include_unknown_licensed_instances=config.include_unknown_licensed_instances,
        )

    def includes_tenancy(self, tenancy: Tenancy) -> bool:
        if tenancy is Tenancy.FLEET:
            return self.include_fleet_instances
        return self.include_sole_tenant_instances

    def includes_os(self, operating_system: OperatingSystem) -> bool:
        if operating_system is OperatingSystem.WINDOWS:
            return self.include_windows_instances
        if operating_system is OperatingSystem.LINUX:
            return self.include_linux_instances
        return self.include_unknown_os_instances

    def includes_license(self, license_type: LicenseType) -> bool:
        if license_type is LicenseType.SPLA:
            return self.include_spla_instances
        if license_type is LicenseType.BYOL:
            return self.include_byol_instances
        return self.include_unknown_licensed_instances


def matches_toggles(
    state: FilterState, instance: InstanceHistory, annotation: LicenseAnnotation
) -> bool:
    """Tenancy AND OS AND license toggle check for one instance."""
    return (
        state.includes_tenancy(instance.tenancy)
        and state.includes_os(annotation.operating_system)
        and state.includes_license(annotation.license_type)
    )


def filter_instances(
    instances: Iterable[InstanceHistory],
    resolve: Resolver,
    state: FilterState,
    selection: Optional[DateSelection] = None,
) -> list[InstanceHistory]:
    """Instances passing the toggles and, if given, the date selection.

    Input order is preserved.
    """
    return [
        instance
        for instance in instances
        if matches_toggles(state, instance, resolve(instance))
        and (selection is None or selection.contains(instance.observed_at))
    ]
