"""Tests for ReportView: population, live toggles, and date selection."""

from datetime import timedelta

from fleet_report.history import ImageLocator, LicenseType, OperatingSystem
from fleet_report.report import UNKNOWN_ANNOTATION, DateSelection


class TestPopulation:
    def test_unpopulated_view_is_empty(self, make_view):
        view = make_view(fleet_count=3)
        assert not view.is_populated
        assert view.instances == []
        assert view.histogram == []

    def test_toggle_before_populate_is_kept(self, make_view):
        view = make_view(fleet_count=1, sole_tenant_count=2)
        view.include_fleet_instances = False
        assert view.instances == []

        view.repopulate()
        assert view.is_populated
        assert len(view.instances) == 2

    def test_annotation_edits_need_repopulate(self, make_view):
        view = make_view(fleet_count=2)
        view.include_unknown_os_instances = False
        view.repopulate()
        assert len(view.instances) == 0

        view.archive.add_license_annotation(
            ImageLocator("project", "image-1"), OperatingSystem.WINDOWS, LicenseType.SPLA
        )
        view.include_windows_instances = True
        assert len(view.instances) == 0

        view.repopulate()
        assert [i.instance_id for i in view.instances] == [1]

    def test_returned_lists_are_copies(self, make_view):
        view = make_view(fleet_count=1)
        view.repopulate()
        view.instances.clear()
        view.histogram.clear()
        assert len(view.instances) == 1
        assert len(view.histogram) == 1


class TestTenancyFilter:
    def test_instances_follow_tenancy_toggles(self, make_view):
        view = make_view(fleet_count=1, sole_tenant_count=2)
        view.repopulate()
        assert len(view.instances) == 3

        view.include_fleet_instances = False
        assert len(view.instances) == 2

        view.include_sole_tenant_instances = False
        assert len(view.instances) == 0

        view.include_fleet_instances = True
        assert len(view.instances) == 1

    def test_histogram_follows_tenancy_toggles(self, make_view):
        view = make_view(fleet_count=1)
        view.repopulate()

        assert len(view.histogram) == 1
        assert view.histogram[0].value == 1

        view.include_fleet_instances = False
        assert view.histogram == []


class TestOsFilter:
    def test_instances_follow_os_toggles(self, make_view):
        view = make_view(fleet_count=3)
        archive = view.archive
        archive.add_license_annotation(
            ImageLocator("project", "image-1"), OperatingSystem.LINUX, LicenseType.UNKNOWN
        )
        archive.add_license_annotation(
            ImageLocator("project", "image-2"), OperatingSystem.WINDOWS, LicenseType.UNKNOWN
        )
        archive.add_license_annotation(
            ImageLocator("project", "image-3"), OperatingSystem.UNKNOWN, LicenseType.UNKNOWN
        )
        view.repopulate()

        view.include_windows_instances = False
        view.include_linux_instances = False
        view.include_unknown_os_instances = False
        assert len(view.instances) == 0
        assert view.histogram == []

        view.include_windows_instances = True
        assert len(view.instances) == 1

        view.include_linux_instances = True
        assert len(view.instances) == 2

        view.include_unknown_os_instances = True
        assert len(view.instances) == 3


class TestLicenseFilter:
    def test_instances_follow_license_toggles(self, make_view):
        view = make_view(fleet_count=3)
        archive = view.archive
        archive.add_license_annotation(
            ImageLocator("project", "image-1"), OperatingSystem.WINDOWS, LicenseType.SPLA
        )
        archive.add_license_annotation(
            ImageLocator("project", "image-2"), OperatingSystem.WINDOWS, LicenseType.BYOL
        )
        archive.add_license_annotation(
            ImageLocator("project", "image-3"), OperatingSystem.WINDOWS, LicenseType.UNKNOWN
        )
        view.repopulate()

        view.include_spla_instances = False
        view.include_byol_instances = False
        view.include_unknown_licensed_instances = False
        assert len(view.instances) == 0

        view.include_spla_instances = True
        assert len(view.instances) == 1

        view.include_byol_instances = True
        assert len(view.instances) == 2

        view.include_unknown_licensed_instances = True
        assert len(view.instances) == 3


class TestDateSelection:
    def test_selection_narrows_instances(self, make_view, baseline):
        view = make_view(fleet_count=3)
        view.repopulate()
        assert len(view.instances) == 3

        view.selection = DateSelection(baseline, baseline + timedelta(days=1))
        assert len(view.instances) == 2

        view.selection = None
        assert len(view.instances) == 3

    def test_selection_leaves_histogram_unchanged(self, make_view, baseline):
        view = make_view(fleet_count=3)
        view.repopulate()

        histogram = view.histogram
        assert histogram[0].timestamp == baseline
        assert histogram[-1].timestamp == baseline + timedelta(days=2)

        view.selection = DateSelection(baseline, baseline)
        assert len(view.instances) == 1
        assert view.histogram == histogram

    def test_toggles_respect_active_selection(self, make_view, baseline):
        view = make_view(fleet_count=2, sole_tenant_count=2)
        view.repopulate()
        view.selection = DateSelection(baseline, baseline)
        assert len(view.instances) == 2

        view.include_sole_tenant_instances = False
        assert len(view.instances) == 1


class TestResolution:
    def test_unpopulated_resolution_is_unknown(self, make_view):
        view = make_view(fleet_count=1)
        instance = next(iter(view.archive.history))
        assert view._resolve(instance) == UNKNOWN_ANNOTATION
