"""Tests for FilterState, DateSelection and filter_instances."""

from datetime import timedelta

import pytest

from fleet_report.config import ReportConfig
from fleet_report.exceptions import InvalidSelectionError
from fleet_report.history import LicenseType, OperatingSystem, Tenancy
from fleet_report.report import (
    UNKNOWN_ANNOTATION,
    DateSelection,
    FilterState,
    LicenseAnnotation,
    filter_instances,
    matches_toggles,
)


def unknown(instance):
    return UNKNOWN_ANNOTATION


class TestDateSelection:
    def test_end_before_start_raises(self, baseline):
        with pytest.raises(InvalidSelectionError):
            DateSelection(baseline, baseline - timedelta(seconds=1))

    def test_single_instant_is_valid(self, baseline):
        selection = DateSelection(baseline, baseline)
        assert selection.contains(baseline)
        assert not selection.contains(baseline + timedelta(seconds=1))

    def test_bounds_are_inclusive(self, baseline):
        selection = DateSelection(baseline, baseline + timedelta(days=1))
        assert selection.contains(baseline)
        assert selection.contains(baseline + timedelta(days=1))
        assert not selection.contains(baseline - timedelta(seconds=1))


class TestFilterState:
    def test_defaults_enabled(self):
        state = FilterState()
        assert all(vars(state).values())

    def test_from_config(self):
        state = FilterState.from_config(
            ReportConfig(include_byol_instances=False, include_fleet_instances=False)
        )
        assert not state.include_byol_instances
        assert not state.include_fleet_instances
        assert state.include_spla_instances

    def test_matches_toggles_is_a_conjunction(self, builder, add_instances):
        add_instances(builder, 1, Tenancy.SOLE_TENANT)
        instance = next(iter(builder.build()))
        annotation = LicenseAnnotation(OperatingSystem.LINUX, LicenseType.BYOL)

        assert matches_toggles(FilterState(), instance, annotation)
        assert not matches_toggles(
            FilterState(include_sole_tenant_instances=False), instance, annotation
        )
        assert not matches_toggles(FilterState(include_linux_instances=False), instance, annotation)
        assert not matches_toggles(FilterState(include_byol_instances=False), instance, annotation)
        assert matches_toggles(FilterState(include_fleet_instances=False), instance, annotation)


class TestFilterInstances:
    def test_all_tenancies_off_is_empty(self, builder, add_instances):
        add_instances(builder, 2, Tenancy.FLEET)
        add_instances(builder, 2, Tenancy.SOLE_TENANT)
        state = FilterState(include_fleet_instances=False, include_sole_tenant_instances=False)
        assert filter_instances(builder.build(), unknown, state) == []

    def test_all_os_off_is_empty(self, builder, add_instances):
        add_instances(builder, 3)
        state = FilterState(
            include_windows_instances=False,
            include_linux_instances=False,
            include_unknown_os_instances=False,
        )
        assert filter_instances(builder.build(), unknown, state) == []

    def test_selection_filters_on_observed_at(self, builder, add_instances, baseline):
        add_instances(builder, 3)
        history = builder.build()
        selection = DateSelection(baseline + timedelta(days=1), baseline + timedelta(days=2))

        matched = filter_instances(history, unknown, FilterState(), selection)
        assert [i.instance_id for i in matched] == [2, 3]

    def test_preserves_history_order(self, builder, add_instances):
        add_instances(builder, 2, Tenancy.SOLE_TENANT)
        add_instances(builder, 2, Tenancy.FLEET)
        matched = filter_instances(builder.build(), unknown, FilterState())
        assert [i.instance_id for i in matched] == [1, 2, 3, 4]
