"""
Tests for the per-station quality envelope and status ordering.
"""

import pytest

from app.schemas.surveys import QualityStatus, worst_status
from app.services.surveys.quality import QUALITY_RULES, assess


@pytest.mark.parametrize("inclination, azimuth, status, rule", [
    (45.0, 180.0, QualityStatus.PASS, "pass"),
    (0.0, 0.0, QualityStatus.PASS, "pass"),
    (180.0, 360.0, QualityStatus.WARNING, "high_inclination"),
    (-1.0, 90.0, QualityStatus.FAIL, "inclination_range"),
    (181.0, 90.0, QualityStatus.FAIL, "inclination_range"),
    (45.0, -0.5, QualityStatus.FAIL, "azimuth_range"),
    (45.0, 360.5, QualityStatus.FAIL, "azimuth_range"),
    (121.0, 90.0, QualityStatus.WARNING, "high_inclination"),
    (120.0, 90.0, QualityStatus.PASS, "pass"),
    (2.0, 45.0, QualityStatus.WARNING, "near_vertical"),
    (2.0, 0.0, QualityStatus.PASS, "pass"),
    (3.0, 45.0, QualityStatus.PASS, "pass"),
    (float("nan"), 45.0, QualityStatus.FAIL, "inclination_range"),
    (45.0, float("inf"), QualityStatus.FAIL, "azimuth_range"),
])
def test_assess(inclination, azimuth, status, rule):
    check = assess(inclination, azimuth)
    assert check.status == status
    assert check.details["rule"] == rule


def test_messages():
    assert assess(200, 10).message == "Inclination out of valid range (0-180 degrees)"
    assert assess(10, 400).message == "Azimuth out of valid range (0-360 degrees)"
    assert assess(45, 180).message == "All parameters within acceptable ranges"


def test_first_matching_rule_wins():
    # Invalid inclination takes precedence over an invalid azimuth
    assert assess(-5, 500).details["rule"] == "inclination_range"
    assert [r.name for r in QUALITY_RULES][0] == "inclination_range"


def test_assess_is_deterministic():
    assert assess(2.5, 33.3) == assess(2.5, 33.3)


def test_status_ordering():
    assert QualityStatus.PASS < QualityStatus.WARNING < QualityStatus.FAIL
    assert worst_status([QualityStatus.PASS, QualityStatus.FAIL, QualityStatus.WARNING]) == QualityStatus.FAIL
    assert worst_status([]) == QualityStatus.PASS
    assert sorted([QualityStatus.FAIL, QualityStatus.PASS]) == [QualityStatus.PASS, QualityStatus.FAIL]
