"""Data models for instance history, immutable records of one analysis window."""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Iterator, Optional

from ..exceptions import InvalidLocatorError

ONE_DAY = timedelta(days=1)

_URL_PREFIX = re.compile(r"^https://[^/]+/compute/(?:v1|beta)/")
_INSTANCE_PATTERN = re.compile(r"^projects/([^/]+)/zones/([^/]+)/instances/([^/]+)$")
_IMAGE_PATTERN = re.compile(r"^projects/([^/]+)/global/images/([^/]+)$")


def to_utc(value: datetime) -> datetime:
    """Normalise a timestamp to an aware UTC datetime (naive means UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def start_of_day(value: datetime) -> datetime:
    """Truncate a UTC timestamp to midnight of its calendar day."""
    return to_utc(value).replace(hour=0, minute=0, second=0, microsecond=0)


class Tenancy(Enum):
    """Placement classification of an instance."""

    FLEET = "fleet"  # shared host
    SOLE_TENANT = "sole_tenant"  # dedicated node


class InstanceState(Enum):
    RUNNING = "running"
    TERMINATED = "terminated"
    DELETED = "deleted"
    UNKNOWN = "unknown"


class OperatingSystem(Enum):
    WINDOWS = "windows"
    LINUX = "linux"
    UNKNOWN = "unknown"


class LicenseType(Enum):
    SPLA = "spla"  # license included, billed per use
    BYOL = "byol"  # bring your own license
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class InstanceLocator:
    """Project/zone/name address of a VM instance."""

    project: str
    zone: str
    name: str

    @classmethod
    def parse(cls, value: str) -> InstanceLocator:
        match = _INSTANCE_PATTERN.match(_URL_PREFIX.sub("", value.strip()))
        if match is None:
            raise InvalidLocatorError(value, "instance")
        return cls(*match.groups())

    def __str__(self) -> str:
        return f"projects/{self.project}/zones/{self.zone}/instances/{self.name}"


@dataclass(frozen=True)
class ImageLocator:
    """Project/name address of a source disk image."""

    project: str
    name: str

    @classmethod
    def parse(cls, value: str) -> ImageLocator:
        match = _IMAGE_PATTERN.match(_URL_PREFIX.sub("", value.strip()))
        if match is None:
            raise InvalidLocatorError(value, "image")
        return cls(*match.groups())

    def __str__(self) -> str:
        return f"projects/{self.project}/global/images/{self.name}"


@dataclass(frozen=True)
class InstanceHistory:
    """One reconstructed instance.

    ``observed_at`` is the timestamp the instance was first observed at and is
    what date selections filter on. ``start``/``end`` bound the closed
    interval during which the instance counts toward the histogram.
    """

    instance_id: int
    locator: InstanceLocator
    image: Optional[ImageLocator]
    state: InstanceState
    tenancy: Tenancy
    observed_at: datetime
    start: datetime
    end: datetime

    def exists_on(self, day: datetime) -> bool:
        """Return True if the interval overlaps the calendar day starting at ``day``."""
        return self.start < day + ONE_DAY and self.end >= day


@dataclass(frozen=True)
class InstanceSetHistory:
    """Frozen set of instance histories for ``[window_start, window_end)``.

    Records keep the order they were added in. Normally produced by
    ``InstanceSetHistoryBuilder.build``.
    """

    window_start: datetime
    window_end: datetime
    instances: tuple[InstanceHistory, ...] = ()
    _by_id: dict[int, InstanceHistory] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        # Frozen dataclass: populate the index through object.__setattr__
        object.__setattr__(self, "_by_id", {i.instance_id: i for i in self.instances})

    def __len__(self) -> int:
        return len(self.instances)

    def __iter__(self) -> Iterator[InstanceHistory]:
        return iter(self.instances)

    def get(self, instance_id: int) -> Optional[InstanceHistory]:
        return self._by_id.get(instance_id)

    def days(self) -> list[datetime]:
        """Midnight timestamps of every calendar day the window touches."""
        days = []
        day = start_of_day(self.window_start)
        while day < self.window_end:
            days.append(day)
            day += ONE_DAY
        return days

    def summary(self) -> dict[Tenancy, int]:
        """Instance counts per tenancy."""
        counts = Counter(i.tenancy for i in self.instances)
        return {tenancy: counts.get(tenancy, 0) for tenancy in Tenancy}
