"""Live report view over an archive: filter toggles, date selection, derived views."""

from __future__ import annotations

import logging
from typing import Any, Optional

from ..history.models import InstanceHistory
from .annotations import UNKNOWN_ANNOTATION, LicenseAnnotation
from .archive import ReportArchive
from .filters import DateSelection, FilterState, filter_instances
from .histogram import HistogramEntry, build_histogram

logger = logging.getLogger(__name__)


class _Toggle:
    """Exposes one ``FilterState`` flag; setting it refreshes a populated view."""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, view: Optional[ReportView], owner: type) -> Any:
        if view is None:
            return self
        return getattr(view.filters, self.name)

    def __set__(self, view: ReportView, value: bool) -> None:
        setattr(view.filters, self.name, bool(value))
        view._refresh(histogram=True)


class ReportView:
    """Instances list and histogram derived from a ``ReportArchive``.

    The view starts unpopulated: ``instances`` and ``histogram`` are empty
    until ``repopulate()`` resolves annotations. From then on every toggle
    or selection change recomputes the derived views before returning.
    Annotation edits made after population only show up on the next
    ``repopulate()``.
    """

    include_fleet_instances = _Toggle()
    include_sole_tenant_instances = _Toggle()

    include_windows_instances = _Toggle()
    include_linux_instances = _Toggle()
    include_unknown_os_instances = _Toggle()

    include_spla_instances = _Toggle()
    include_byol_instances = _Toggle()
    include_unknown_licensed_instances = _Toggle()

    def __init__(self, archive: ReportArchive, filters: Optional[FilterState] = None) -> None:
        self.archive = archive
        self.filters = filters if filters is not None else FilterState()
        self._selection: Optional[DateSelection] = None
        self._resolved: Optional[dict[int, LicenseAnnotation]] = None
        self._instances: list[InstanceHistory] = []
        self._histogram: list[HistogramEntry] = []

    @property
    def is_populated(self) -> bool:
        return self._resolved is not None

    @property
    def selection(self) -> Optional[DateSelection]:
        return self._selection

    @selection.setter
    def selection(self, value: Optional[DateSelection]) -> None:
        self._selection = value
        self._refresh(histogram=False)

    @property
    def instances(self) -> list[InstanceHistory]:
        return list(self._instances)

    @property
    def histogram(self) -> list[HistogramEntry]:
        return list(self._histogram)

    def repopulate(self) -> None:
        """Resolve annotations for every instance and rebuild both views."""
        self._resolved = {
            instance.instance_id: self.archive.resolve(instance)
            for instance in self.archive.history
        }
        logger.debug(
            "Resolved annotations for %d instances (%d images annotated)",
            len(self._resolved),
            len(self.archive.annotations),
        )
        self._refresh(histogram=True)

    def _resolve(self, instance: InstanceHistory) -> LicenseAnnotation:
        if self._resolved is None:
            return UNKNOWN_ANNOTATION
        return self._resolved.get(instance.instance_id, UNKNOWN_ANNOTATION)

    def _refresh(self, histogram: bool) -> None:
        if not self.is_populated:
            return

        history = self.archive.history
        self._instances = filter_instances(history, self._resolve, self.filters, self._selection)
        if histogram:
            self._histogram = build_histogram(history, self._resolve, self.filters)
