"""
Tests for survey column header mapping.
Covers vendor spellings, unit suffixes, LAS mnemonics and unrecognized headers.
"""

import sys
import os

import pytest

# Add the project root to the Python path
sys.path.append(os.path.abspath('.'))

from app.services.surveys.header_mapper import (
    CANONICAL_FIELDS,
    build_field_mappings,
    count_mapped,
    is_survey_header,
    map_header,
    map_headers,
    normalize_header,
)


@pytest.mark.parametrize("header, expected", [
    ("MD", "bitDepth"),
    ("Depth", "bitDepth"),
    ("Bit Depth", "bitDepth"),
    ("MD [ft]", "bitDepth"),
    ("DEPT.FT", "bitDepth"),
    ("Inc", "inclination"),
    ("inc.", "inclination"),
    ("Inc (°)", "inclination"),
    ("AZI (deg)", "azimuth"),
    ("Azm", "azimuth"),
    ("TF", "toolFace"),
    ("Tool Face", "toolFace"),
    ("B Total", "bTotal"),
    ("btotal", "bTotal"),
    ("A_Total", "aTotal"),
    ("Dip", "dip"),
    ("Temp", "toolTemp"),
    ("Tool Temp (F)", "toolTemp"),
    ("Sensor Offset", "sensorOffset"),
    ("Well Name", "wellName"),
    ("Date", "timestamp"),
])
def test_known_headers(header, expected):
    assert map_header(header) == expected


def test_unknown_headers_map_to_none():
    assert map_headers(["Comments", "", None, "Vendor QC"]) == [None, None, None, None]


def test_canonical_names_map_to_themselves():
    assert map_headers(CANONICAL_FIELDS) == list(CANONICAL_FIELDS)


def test_normalize_header_strips_units_and_punctuation():
    assert normalize_header("  AZI (deg) ") == "azi"
    assert normalize_header("MD [ft]") == "md"
    assert normalize_header("GR.API") == "gr"
    assert normalize_header(None) == ""


def test_build_field_mappings_keeps_unmapped_headers():
    mappings = build_field_mappings(["MD", "Comments", "INC", "AZI"])
    assert [m.original_header for m in mappings] == ["MD", "Comments", "INC", "AZI"]
    assert [m.canonical_field for m in mappings] == ["bitDepth", None, "inclination", "azimuth"]


def test_survey_header_detection():
    assert is_survey_header(["MD", "INC", "AZI", "TF"])
    assert is_survey_header(["Sensor Depth", "Inclination", "Azimuth"])
    assert not is_survey_header(["MD", "INC", "GR"])
    assert count_mapped(["MD", "INC", "foo", "AZI"]) == 3
