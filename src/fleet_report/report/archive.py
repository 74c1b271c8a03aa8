"""Report archive: one frozen history paired with its annotation table."""

from __future__ import annotations

from typing import Optional

from ..history.models import (
    ImageLocator,
    InstanceHistory,
    InstanceSetHistory,
    LicenseType,
    OperatingSystem,
)
from .annotations import AnnotationTable, LicenseAnnotation


class ReportArchive:
    """The unit handed to report consumers.

    The history is read-only for the archive's lifetime; the annotation
    table may be edited at any time.
    """

    def __init__(
        self, history: InstanceSetHistory, annotations: Optional[AnnotationTable] = None
    ) -> None:
        self._history = history
        self.annotations = annotations if annotations is not None else AnnotationTable()

    @property
    def history(self) -> InstanceSetHistory:
        return self._history

    def add_license_annotation(
        self,
        image: ImageLocator,
        operating_system: OperatingSystem,
        license_type: LicenseType,
    ) -> None:
        self.annotations.add_license_annotation(image, operating_system, license_type)

    def resolve(self, instance: InstanceHistory) -> LicenseAnnotation:
        """Classification of ``instance``, falling back to unknown/unknown."""
        return self.annotations.resolve(instance.image)
