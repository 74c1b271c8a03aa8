"""Shared fixtures for Fleet Report tests."""

from datetime import datetime, timedelta, timezone

import pytest

from fleet_report.history import (
    ImageLocator,
    InstanceLocator,
    InstanceSetHistoryBuilder,
    InstanceState,
    Tenancy,
)
from fleet_report.report import ReportArchive, ReportView

BASELINE = datetime(2020, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def baseline():
    """Start of the analysis window: 2020-01-01 00:00 UTC."""
    return BASELINE


@pytest.fixture
def builder():
    """Builder for a 7-day window starting at the baseline."""
    return InstanceSetHistoryBuilder(BASELINE, BASELINE + timedelta(days=7))


@pytest.fixture
def add_instances():
    """Add ``count`` instances on consecutive days, ids continuing across calls.

    Instance ``n`` runs image ``image-n`` in project ``project``.
    """
    sequence = {"next": 0}

    def _add(builder, count, tenancy=Tenancy.FLEET):
        for day in range(count):
            sequence["next"] += 1
            n = sequence["next"]
            builder.add_existing_instance(
                n,
                InstanceLocator("project", "zone", f"instance-{n}"),
                ImageLocator("project", f"image-{n}"),
                InstanceState.RUNNING,
                BASELINE + timedelta(days=day),
                tenancy,
            )

    return _add


@pytest.fixture
def make_view(builder, add_instances):
    """Unpopulated report view with the given number of fleet/sole-tenant instances."""

    def _make(fleet_count=0, sole_tenant_count=0):
        add_instances(builder, fleet_count, Tenancy.FLEET)
        add_instances(builder, sole_tenant_count, Tenancy.SOLE_TENANT)
        return ReportView(ReportArchive(builder.build()))

    return _make
