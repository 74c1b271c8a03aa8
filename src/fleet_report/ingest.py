"""Load observations and annotations handed over by the event-ingestion layer.

Observation documents look like::

    {
      "window": {"start": "2020-01-01T00:00:00Z", "end": "2020-01-08T00:00:00Z"},
      "instances": [
        {"id": 1, "instance": "projects/p/zones/z/instances/vm-1",
         "image": "projects/p/global/images/win-2019", "state": "running",
         "observed_at": "2020-01-01T00:00:00Z", "tenancy": "fleet"}
      ]
    }

Annotation documents are a list of ``{"image", "os", "license"}`` objects.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Optional, TypeVar

from .exceptions import IngestError
from .history import (
    ImageLocator,
    InstanceLocator,
    InstanceObservation,
    InstanceSetHistory,
    InstanceSetHistoryBuilder,
    InstanceState,
    LicenseType,
    OperatingSystem,
    Tenancy,
)
from .report import AnnotationTable

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; a trailing ``Z`` means UTC."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def parse_observation(record: dict[str, Any]) -> InstanceObservation:
    image = record.get("image")
    return InstanceObservation(
        instance_id=int(record["id"]),
        locator=InstanceLocator.parse(record["instance"]),
        image=ImageLocator.parse(image) if image else None,
        state=_parse_enum(InstanceState, record.get("state", "unknown")),
        observed_at=parse_timestamp(record["observed_at"]),
        tenancy=_parse_enum(Tenancy, record.get("tenancy", "fleet")),
    )


def build_history(document: dict[str, Any], source: Optional[Path] = None) -> InstanceSetHistory:
    """Build a frozen history from a parsed observation document."""
    try:
        window = document["window"]
        builder = InstanceSetHistoryBuilder(
            parse_timestamp(window["start"]), parse_timestamp(window["end"])
        )
        observations = [parse_observation(r) for r in document.get("instances", [])]
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise IngestError(f"malformed observation document: {e}", source) from e

    builder.add_observations(observations)
    return builder.build()


def load_history(path: Path) -> InstanceSetHistory:
    """Read an observation document from ``path`` and build its history."""
    history = build_history(_read_json(path), source=path)
    logger.info("Loaded %d instances from %s", len(history), path)
    return history


def load_annotations(path: Path, table: Optional[AnnotationTable] = None) -> AnnotationTable:
    """Read license annotations from ``path`` into ``table`` (or a new one)."""
    table = table if table is not None else AnnotationTable()
    document = _read_json(path)
    if not isinstance(document, list):
        raise IngestError("annotation document must be a list", path)

    try:
        for record in document:
            table.add_license_annotation(
                ImageLocator.parse(record["image"]),
                _parse_enum(OperatingSystem, record.get("os", "unknown")),
                _parse_enum(LicenseType, record.get("license", "unknown")),
            )
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise IngestError(f"malformed annotation: {e}", path) from e

    logger.info("Loaded %d annotations from %s", len(document), path)
    return table


def _parse_enum(enum_type: type[E], value: str) -> E:
    try:
        return enum_type(str(value).lower())
    except ValueError:
        choices = ", ".join(m.value for m in enum_type)
        raise ValueError(f"{value!r} is not one of {choices}") from None


def _read_json(path: Path) -> Any:
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        raise IngestError(f"cannot read file: {e.strerror}", path) from e
    except json.JSONDecodeError as e:
        raise IngestError(f"invalid JSON: {e}", path) from e
