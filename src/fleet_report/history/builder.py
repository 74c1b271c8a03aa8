"""Reconstruct instance histories from per-instance observations."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, NamedTuple, Optional

from ..exceptions import (
    ConstructionError,
    DoubleBuildError,
    DuplicateInstanceError,
    InvalidObservationError,
)
from .models import (
    ImageLocator,
    InstanceHistory,
    InstanceLocator,
    InstanceSetHistory,
    InstanceState,
    Tenancy,
    to_utc,
)

logger = logging.getLogger(__name__)


class InstanceObservation(NamedTuple):
    """An instance seen present at ``observed_at``, as delivered by ingestion."""

    instance_id: int
    locator: InstanceLocator
    image: Optional[ImageLocator]
    state: InstanceState
    observed_at: datetime
    tenancy: Tenancy


class InstanceSetHistoryBuilder:
    """Collects observations for one analysis window and freezes them once.

    Usage::

        builder = InstanceSetHistoryBuilder(start, end)
        builder.add_existing_instance(1, locator, image, InstanceState.RUNNING, start, Tenancy.FLEET)
        history = builder.build()
    """

    def __init__(self, window_start: datetime, window_end: datetime) -> None:
        window_start = to_utc(window_start)
        window_end = to_utc(window_end)
        if window_end <= window_start:
            raise ConstructionError(window_start, window_end)

        self.window_start = window_start
        self.window_end = window_end
        self._instances: dict[int, InstanceHistory] = {}
        self._built = False

    def add_existing_instance(
        self,
        instance_id: int,
        locator: InstanceLocator,
        image: Optional[ImageLocator],
        state: InstanceState,
        observed_at: datetime,
        tenancy: Tenancy,
    ) -> None:
        """Register an instance known to exist at ``observed_at``.

        Nothing is known about when the instance was created, so it is
        assumed to have existed since the start of the window. Its interval
        is ``[window_start, observed_at]``.
        """
        if self._built:
            raise DoubleBuildError("add instances")
        if instance_id in self._instances:
            raise DuplicateInstanceError(instance_id)

        observed_at = to_utc(observed_at)
        if not self.window_start <= observed_at < self.window_end:
            raise InvalidObservationError(
                instance_id, observed_at, "observation lies outside the analysis window"
            )

        self._instances[instance_id] = InstanceHistory(
            instance_id=instance_id,
            locator=locator,
            image=image,
            state=state,
            tenancy=tenancy,
            observed_at=observed_at,
            start=self.window_start,
            end=observed_at,
        )

    def add_observations(self, observations: Iterable[InstanceObservation]) -> int:
        """Register a batch of observations; returns how many were added."""
        count = 0
        for obs in observations:
            self.add_existing_instance(
                obs.instance_id,
                obs.locator,
                obs.image,
                obs.state,
                obs.observed_at,
                obs.tenancy,
            )
            count += 1
        return count

    def build(self) -> InstanceSetHistory:
        """Freeze all registered instances. May only be called once."""
        if self._built:
            raise DoubleBuildError("build history")
        self._built = True

        history = InstanceSetHistory(
            window_start=self.window_start,
            window_end=self.window_end,
            instances=tuple(self._instances.values()),
        )
        logger.debug(
            "Built history of %d instances for %s .. %s",
            len(history),
            self.window_start.isoformat(),
            self.window_end.isoformat(),
        )
        return history
