"""Tests for the Fleet Report exception hierarchy."""

from datetime import datetime, timezone

import pytest

from fleet_report.exceptions import (
    ConfigurationError,
    ConstructionError,
    DoubleBuildError,
    DuplicateInstanceError,
    FleetReportError,
    HistoryError,
    IngestError,
    InvalidConfigError,
    InvalidObservationError,
    InvalidSelectionError,
    ReportError,
)

T0 = datetime(2020, 1, 1, tzinfo=timezone.utc)


class TestHierarchy:
    @pytest.mark.parametrize(
        "error",
        [
            ConstructionError(T0, T0),
            DuplicateInstanceError(7),
            DoubleBuildError("build history"),
            InvalidObservationError(7, T0, "outside"),
        ],
    )
    def test_history_errors(self, error):
        assert isinstance(error, HistoryError)
        assert isinstance(error, FleetReportError)

    def test_selection_is_report_error(self):
        assert isinstance(InvalidSelectionError(T0, T0), ReportError)

    def test_config_errors(self):
        assert isinstance(InvalidConfigError("k", 1, "bad"), ConfigurationError)


class TestMessages:
    def test_details_rendered(self):
        error = DuplicateInstanceError(42)
        assert str(error) == "Instance 42 has already been added (instance_id=42)"

    def test_plain_message(self):
        assert str(FleetReportError("boom")) == "boom"

    def test_ingest_error_source(self, tmp_path):
        error = IngestError("bad", tmp_path / "x.json")
        assert error.details["source"].endswith("x.json")
        assert "source" not in IngestError("bad").details
