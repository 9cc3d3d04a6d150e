"""
Tests for raw row validation: numeric coercion, the acceptance rule, well defaults,
measured depth and timestamps.
"""

from datetime import datetime, timezone

import pytest

from app.schemas.surveys import QualityStatus, WellDefaults
from app.services.surveys.validator import coerce_number, is_acceptable, validate_rows
from app.utils.datetime_utils import parse_timestamp
from app.utils.error_handling import NoValidDataError

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


def create_row(**overrides):
    row = {"bitDepth": "1000", "inclination": "10.5", "azimuth": "45", "toolFace": "12",
           "bTotal": "0.5", "aTotal": "1.0", "dip": "60", "toolTemp": "120"}
    row.update(overrides)
    return row


@pytest.mark.parametrize("raw, expected", [
    (12, 12.0),
    (1.5, 1.5),
    ("1,234.5", 1234.5),
    (" 45.2° ", 45.2),
    ("100 ft", 100.0),
    ("-3.5", -3.5),
    ("1e3", 1000.0),
    ("abc", None),
    ("", None),
    (None, None),
    (float("nan"), None),
    ("inf", None),
])
def test_coerce_number(raw, expected):
    assert coerce_number(raw) == expected


def test_is_acceptable():
    assert is_acceptable([1000.0, None, None])
    assert is_acceptable([0.0, 0.0, 5.0])
    assert not is_acceptable([0.0, 0.0, 0.0])
    assert not is_acceptable([None, None, None])
    assert not is_acceptable([-10.0, None, None])


def test_valid_row_becomes_record():
    outcome = validate_rows([create_row()], WellDefaults(well_name="Smith 1H", rig_name="Rig 42"), now=NOW)
    record = outcome.records[0]
    assert record.bit_depth == 1000.0
    assert record.inclination == 10.5
    assert record.tool_temp == 120.0
    assert record.well_name == "Smith 1H"
    assert record.rig_name == "Rig 42"
    assert record.timestamp == NOW
    assert record.quality_check.status == QualityStatus.PASS
    assert outcome.warnings == []


def test_all_zero_and_empty_rows_are_rejected():
    rows = [create_row(), create_row(bitDepth="0", inclination="0", azimuth="0"),
            {"toolFace": "10", "dip": "60"}, create_row(bitDepth="1100")]
    outcome = validate_rows(rows, now=NOW)
    assert [r.bit_depth for r in outcome.records] == [1000.0, 1100.0]
    assert outcome.rejected == 2


def test_legitimately_zero_fields_are_kept():
    outcome = validate_rows([create_row(inclination="0", azimuth="0")], now=NOW)
    assert outcome.records[0].inclination == 0.0


def test_unparseable_field_defaults_to_zero_with_warning():
    outcome = validate_rows([create_row(toolFace="n/a")], now=NOW)
    assert outcome.records[0].tool_face == 0.0
    assert len(outcome.warnings) == 1
    warning = outcome.warnings[0]
    assert (warning.row_index, warning.field, warning.raw_value) == (0, "toolFace", "n/a")


def test_missing_fields_default_to_zero_without_warning():
    outcome = validate_rows([{"bitDepth": 1500.0, "inclination": 2.0, "azimuth": 90.0}], now=NOW)
    record = outcome.records[0]
    assert record.b_total == 0.0
    assert record.tvd is None
    assert outcome.warnings == []


def test_measured_depth_uses_default_sensor_offset():
    outcome = validate_rows([create_row()], WellDefaults(sensor_offset=50), now=NOW)
    record = outcome.records[0]
    assert record.sensor_offset == 50
    assert record.measured_depth == pytest.approx(950.0)


def test_row_sensor_offset_wins_over_default():
    outcome = validate_rows([create_row(sensorOffset="40")], WellDefaults(sensor_offset=50), now=NOW)
    assert outcome.records[0].measured_depth == pytest.approx(960.0)


def test_explicit_measured_depth_is_kept():
    outcome = validate_rows([create_row(measuredDepth="955")], WellDefaults(sensor_offset=50), now=NOW)
    assert outcome.records[0].measured_depth == pytest.approx(955.0)


def test_file_well_name_wins_over_default():
    outcome = validate_rows([create_row(wellName="Jones 2H")], WellDefaults(well_name="Smith 1H"), now=NOW)
    assert outcome.records[0].well_name == "Jones 2H"


def test_timestamps_from_source():
    rows = [create_row(timestamp="2024-01-02T03:04:05Z"), create_row(timestamp="garbage")]
    outcome = validate_rows(rows, now=NOW)
    assert outcome.records[0].timestamp == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    assert outcome.records[1].timestamp == NOW
    assert [w.field for w in outcome.warnings] == ["timestamp"]


def test_ids_are_unique_and_order_is_preserved():
    rows = [create_row(bitDepth=str(d)) for d in (1300, 1000, 1200)]
    outcome = validate_rows(rows, now=NOW)
    assert [r.bit_depth for r in outcome.records] == [1300.0, 1000.0, 1200.0]
    assert len({r.id for r in outcome.records}) == 3


def test_out_of_envelope_values_are_kept_and_flagged():
    outcome = validate_rows([create_row(inclination="190")], now=NOW)
    assert outcome.records[0].quality_check.status == QualityStatus.FAIL


def test_no_valid_rows_raises():
    with pytest.raises(NoValidDataError) as exc_info:
        validate_rows([{"bitDepth": "0"}, {}], now=NOW)
    assert exc_info.value.error_code == "no_valid_data"
    assert exc_info.value.details["rows_rejected"] == 2


def test_parse_timestamp_variants():
    assert parse_timestamp("2024-03-15 14:30:00") == datetime(2024, 3, 15, 14, 30, tzinfo=timezone.utc)
    assert parse_timestamp(45366) == datetime(2024, 3, 15, tzinfo=timezone.utc)
    assert parse_timestamp(1710513000) == datetime(2024, 3, 15, 14, 30, tzinfo=timezone.utc)
    assert parse_timestamp("") is None
    assert parse_timestamp("not a date") is None
