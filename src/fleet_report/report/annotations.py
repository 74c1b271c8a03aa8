"""OS and license classifications of images, resolved onto instances at query time."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Mapping, Optional

from ..history.models import ImageLocator, LicenseType, OperatingSystem


@dataclass(frozen=True)
class LicenseAnnotation:
    operating_system: OperatingSystem
    license_type: LicenseType


UNKNOWN_ANNOTATION = LicenseAnnotation(OperatingSystem.UNKNOWN, LicenseType.UNKNOWN)


class AnnotationTable:
    """Mutable mapping of image locator to license annotation.

    Edits never touch an already-built history; consumers see them the next
    time they recompute.
    """

    def __init__(self) -> None:
        self._annotations: dict[ImageLocator, LicenseAnnotation] = {}

    def add_license_annotation(
        self,
        image: ImageLocator,
        operating_system: OperatingSystem,
        license_type: LicenseType,
    ) -> None:
        """Insert or overwrite the classification of ``image``."""
        self._annotations[image] = LicenseAnnotation(operating_system, license_type)

    def update(self, annotations: Mapping[ImageLocator, LicenseAnnotation]) -> None:
        self._annotations.update(annotations)

    def resolve(self, image: Optional[ImageLocator]) -> LicenseAnnotation:
        if image is None:
            return UNKNOWN_ANNOTATION
        return self._annotations.get(image, UNKNOWN_ANNOTATION)

    def __len__(self) -> int:
        return len(self._annotations)

    def __contains__(self, image: object) -> bool:
        return image in self._annotations

    def __iter__(self) -> Iterator[ImageLocator]:
        return iter(self._annotations)
