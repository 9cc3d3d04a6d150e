"""
Tests for directional analytics: dogleg severity, quality score, consistency,
magnetic interference and recommendations.
"""

import math
from datetime import datetime, timezone
import uuid

import pytest

from app.schemas.surveys import QualityStatus, SurveyRecord
from app.services.surveys import analytics
from app.services.surveys.quality import assess


def create_record(bit_depth, inclination=10.0, azimuth=45.0, b_total=0.5, a_total=1.0, dip=60.0):
    return SurveyRecord(
        id=str(uuid.uuid4()),
        timestamp=datetime(2024, 3, 15, tzinfo=timezone.utc),
        bit_depth=bit_depth,
        measured_depth=bit_depth,
        inclination=inclination,
        azimuth=azimuth,
        b_total=b_total,
        a_total=a_total,
        dip=dip,
        quality_check=assess(inclination, azimuth),
    )


def create_smooth_well():
    """Ten stations 90 ft apart building gently, identical field readings."""
    return [create_record(1000 + 90 * i, inclination=10 + 0.5 * i, azimuth=45.0) for i in range(10)]


def test_interval_dogleg_pure_build():
    assert analytics.interval_dogleg(10, 45, 13, 45) == pytest.approx(3.0)


def test_interval_dogleg_takes_short_way_round():
    assert analytics.interval_dogleg(90, 359, 90, 1) == pytest.approx(2.0)


def test_dogleg_intervals_sorted_and_short_courses_skipped():
    records = [
        create_record(1200, inclination=14),
        create_record(1000, inclination=10),
        create_record(1000.5, inclination=10.2),
        create_record(1100, inclination=12),
    ]
    intervals = analytics.dogleg_intervals(records)
    assert [(i.from_depth, i.to_depth) for i in intervals] == [(1000.5, 1100), (1100, 1200)]
    assert intervals[1].severity == pytest.approx(2.0)
    assert intervals[1].build_rate == pytest.approx(2.0)
    # input order is left alone
    assert records[0].bit_depth == 1200


def test_dogleg_severity_is_length_weighted():
    records = [
        create_record(1000, inclination=10),
        create_record(1100, inclination=12),   # 2°/100ft over 100 ft
        create_record(1400, inclination=15),   # 1°/100ft over 300 ft
    ]
    assert analytics.dogleg_severity(records) == pytest.approx((2 * 100 + 1 * 300) / 400)


def test_dogleg_severity_needs_two_records():
    assert analytics.dogleg_severity([]) == 0.0
    assert analytics.dogleg_severity([create_record(1000)]) == 0.0


def test_minimum_curvature_dogleg():
    assert analytics.minimum_curvature_dogleg(10, 45, 13, 45) == pytest.approx(3.0)
    assert analytics.minimum_curvature_dogleg(0, 0, 0, 180) == pytest.approx(0.0)
    assert analytics.minimum_curvature_dogleg(90, 0, 90, 90) == pytest.approx(90.0)


def test_quality_score_and_rating():
    records = [create_record(1000), create_record(1100), create_record(1200, inclination=2.0),
               create_record(1300, inclination=200)]
    # pass, pass, warning, fail -> (200 + 50) / 4 = 62.5
    assert analytics.quality_score(records) == 63
    assert analytics.quality_rating(63) == "FAIR"
    assert analytics.quality_score([]) == 0


@pytest.mark.parametrize("score, rating", [(100, "EXCELLENT"), (90, "EXCELLENT"), (89, "GOOD"),
                                           (75, "GOOD"), (50, "FAIR"), (49, "POOR")])
def test_quality_rating_buckets(score, rating):
    assert analytics.quality_rating(score) == rating


def test_consistency_rating():
    assert analytics.consistency_rating([create_record(1000)]) == "Insufficient Data"
    assert analytics.consistency_rating(create_smooth_well()) == "Excellent"
    noisy = [create_record(1000, b_total=0.0, a_total=0.0), create_record(1100, b_total=1.0, a_total=1.0)]
    # population std-dev 0.5 for both
    assert analytics.consistency_rating(noisy) == "Poor"


def test_magnetic_interference():
    assert analytics.magnetic_interference([]) == "No Data"
    assert analytics.magnetic_interference(create_smooth_well()) == "Minimal"
    records = [create_record(1000, b_total=0.5), create_record(1100, b_total=0.5), create_record(1200, b_total=0.9)]
    # mean 0.633, max deviation 0.267
    assert analytics.magnetic_interference(records) == "Low"


def test_consistency_percentages():
    assert analytics.magnetic_consistency([create_record(1000)]) == 50.0
    assert analytics.gravity_consistency([]) == 50.0
    records = [create_record(1000, b_total=0.4, a_total=0.9), create_record(1100, b_total=0.6, a_total=1.1)]
    assert analytics.magnetic_consistency(records) == pytest.approx(80.0)
    assert analytics.gravity_consistency(records) == pytest.approx(70.0)
    wild = [create_record(1000, b_total=0.0), create_record(1100, b_total=10.0)]
    assert analytics.magnetic_consistency(wild) == 0.0


def test_max_survey_spacing():
    records = [create_record(1300), create_record(1000), create_record(1050)]
    assert analytics.max_survey_spacing(records) == pytest.approx(250.0)
    assert analytics.max_survey_spacing(records[:1]) == 0.0


def test_recommendations_clean_well():
    assert analytics.generate_recommendations(create_smooth_well()) == [
        "All survey parameters are within acceptable ranges",
        "Continue monitoring for consistent survey quality",
    ]


def test_recommendations_empty():
    assert analytics.generate_recommendations([]) == ["No survey data available for analysis"]


def test_recommendations_fire_independently():
    records = [
        create_record(1000, inclination=10, b_total=0.3, a_total=0.8),
        create_record(1050, inclination=200, b_total=0.7, a_total=1.2),
        create_record(1300, inclination=30, b_total=0.5, a_total=1.0),
    ]
    recommendations = analytics.generate_recommendations(records)
    assert recommendations[0] == "Review 1 failed survey(s) and consider remeasuring at those depths"
    assert any(r.startswith("Magnetic field readings show inconsistency") for r in recommendations)
    assert any(r.startswith("Gravity sensor readings show inconsistency") for r in recommendations)
    assert any(r.startswith("Survey spacing exceeds 100ft") for r in recommendations)
    assert any(r.startswith("Dogleg severity of") and r.endswith("Monitor for potential drilling issues")
               for r in recommendations)


def test_summarize_is_deterministic_and_complete():
    records = create_smooth_well()
    summary = analytics.summarize(list(reversed(records)))
    assert summary == analytics.summarize(records)
    assert summary.statistics.survey_count == 10
    assert summary.statistics.inclination_change == pytest.approx(4.5)
    assert summary.statistics.status_counts == {"pass": 10, "warning": 0, "fail": 0}
    assert summary.quality_score == 100
    assert summary.quality_rating == "EXCELLENT"
    assert len(summary.intervals) == 9
    assert summary.dogleg_severity == pytest.approx(0.5 / 90 * 100)
    assert summary.max_survey_spacing == pytest.approx(90.0)
    assert not math.isnan(summary.average_turn_rate)


def test_identical_stations_have_zero_dogleg_severity():
    records = [create_record(1000, inclination=25, azimuth=130), create_record(1100, inclination=25, azimuth=130)]
    assert analytics.dogleg_severity(records) == 0
    assert analytics.dogleg_intervals(records)[0].dogleg == 0


def test_all_failed_stations_score_zero():
    records = [create_record(1000 + 100 * i, inclination=200) for i in range(3)]
    assert all(r.quality_check.status == QualityStatus.FAIL for r in records)
    assert analytics.quality_score(records) == 0
    assert analytics.quality_rating(0) == "POOR"


def test_statistics_report_the_worst_status():
    records = create_smooth_well()
    assert analytics.directional_statistics(records).worst_status == QualityStatus.PASS
    records.append(create_record(2000, inclination=1.0))
    assert analytics.directional_statistics(records).worst_status == QualityStatus.WARNING
    assert analytics.directional_statistics([]).worst_status == QualityStatus.PASS
