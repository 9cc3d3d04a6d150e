# app/services/surveys/analytics.py
"""
Directional analytics over a survey sequence.

Every function sorts its input by bit depth (stable) before doing anything
else and never mutates the records it is given. Units are feet, degrees and
degrees per 100 ft throughout.
"""
import math
from collections import Counter
from typing import List, Sequence

import numpy as np

from app.schemas.directional import DirectionalStatistics, DirectionalSummary, DoglegInterval
from app.schemas.surveys import QualityStatus, SurveyRecord, worst_status

MIN_COURSE_LENGTH = 1.0  # ft; shorter intervals are skipped
MAX_SURVEY_SPACING = 100.0  # ft
DOGLEG_SEVERITY_LIMIT = 3.0  # °/100ft
CONSISTENCY_LIMIT = 70.0  # percent

QUALITY_RATINGS = ((90, "EXCELLENT"), (75, "GOOD"), (50, "FAIR"))
CONSISTENCY_RATINGS = ((0.05, "Excellent"), (0.1, "Good"), (0.2, "Fair"))
INTERFERENCE_RATINGS = ((0.1, "Minimal"), (0.3, "Low"), (0.5, "Moderate"))


def sort_by_depth(records: Sequence[SurveyRecord]) -> List[SurveyRecord]:
    return sorted(records, key=lambda r: r.bit_depth)


def _column(records: Sequence[SurveyRecord], attr: str) -> np.ndarray:
    return np.array([getattr(r, attr) for r in records], dtype=float)


def _std(values: np.ndarray) -> float:
    """Population standard deviation; 0 for fewer than two values."""
    if values.size < 2:
        return 0.0
    return float(np.std(values))


def _bucket(value: float, thresholds, fallback: str) -> str:
    for limit, label in thresholds:
        if value < limit:
            return label
    return fallback


def azimuth_difference(az1: float, az2: float) -> float:
    """Signed azimuth change from ``az1`` to ``az2``, wrapped to [-180, 180]."""
    delta = (az2 - az1) % 360.0
    return delta - 360.0 if delta > 180.0 else delta


def interval_dogleg(inc1: float, az1: float, inc2: float, az2: float) -> float:
    """
    Dogleg angle between two stations, degrees.

    Tangential approximation: sqrt(Δinc² + Δaz² · sin(inc1) · sin(inc2)),
    with the azimuth change taken the short way round.
    """
    d_inc = inc2 - inc1
    d_az = azimuth_difference(az1, az2)
    cross = d_az * d_az * math.sin(math.radians(inc1)) * math.sin(math.radians(inc2))
    return math.sqrt(max(d_inc * d_inc + cross, 0.0))


def minimum_curvature_dogleg(inc1: float, az1: float, inc2: float, az2: float) -> float:
    """Dogleg angle by the minimum curvature method, degrees."""
    i1, i2 = math.radians(inc1), math.radians(inc2)
    d_az = math.radians(az2 - az1)
    cos_dl = math.cos(i2 - i1) - math.sin(i1) * math.sin(i2) * (1 - math.cos(d_az))
    return math.degrees(math.acos(min(1.0, max(-1.0, cos_dl))))


def dogleg_intervals(records: Sequence[SurveyRecord]) -> List[DoglegInterval]:
    """Per-interval dogleg, severity, build and turn between consecutive stations."""
    ordered = sort_by_depth(records)
    intervals = []
    for prev, curr in zip(ordered, ordered[1:]):
        course = abs(curr.bit_depth - prev.bit_depth)
        if course < MIN_COURSE_LENGTH:
            continue
        dogleg = interval_dogleg(prev.inclination, prev.azimuth, curr.inclination, curr.azimuth)
        intervals.append(
            DoglegInterval(
                from_depth=prev.bit_depth,
                to_depth=curr.bit_depth,
                course_length=course,
                dogleg=dogleg,
                severity=dogleg / course * 100,
                build_rate=(curr.inclination - prev.inclination) / course * 100,
                turn_rate=azimuth_difference(prev.azimuth, curr.azimuth) / course * 100,
            )
        )
    return intervals


def _weighted(intervals: Sequence[DoglegInterval], attr: str) -> float:
    if not intervals:
        return 0.0
    weights = np.array([i.course_length for i in intervals])
    values = np.array([getattr(i, attr) for i in intervals])
    return float(np.average(values, weights=weights))


def dogleg_severity(records: Sequence[SurveyRecord]) -> float:
    """Length-weighted average dogleg severity over the well, °/100ft."""
    return _weighted(dogleg_intervals(records), "severity")


def quality_score(records: Sequence[SurveyRecord]) -> int:
    if not records:
        return 0
    counts = Counter(r.quality_check.status for r in records)
    score = (counts[QualityStatus.PASS] * 100 + counts[QualityStatus.WARNING] * 50) / len(records)
    # round half up
    return int(math.floor(score + 0.5))


def quality_rating(score: float) -> str:
    for limit, label in QUALITY_RATINGS:
        if score >= limit:
            return label
    return "POOR"


def consistency_rating(records: Sequence[SurveyRecord]) -> str:
    if len(records) < 2:
        return "Insufficient Data"
    variation = (_std(_column(records, "b_total")) + _std(_column(records, "a_total"))) / 2
    return _bucket(variation, CONSISTENCY_RATINGS, "Poor")


def magnetic_interference(records: Sequence[SurveyRecord]) -> str:
    if not records:
        return "No Data"
    b_total = _column(records, "b_total")
    max_deviation = float(np.max(np.abs(b_total - b_total.mean())))
    return _bucket(max_deviation, INTERFERENCE_RATINGS, "High")


def _consistency_percent(values: np.ndarray, scale: float) -> float:
    if values.size < 2:
        return 50.0
    return float(np.clip(100 - _std(values) * scale, 0, 100))


def magnetic_consistency(records: Sequence[SurveyRecord]) -> float:
    return _consistency_percent(_column(records, "b_total"), 200)


def gravity_consistency(records: Sequence[SurveyRecord]) -> float:
    return _consistency_percent(_column(records, "a_total"), 300)


def max_survey_spacing(records: Sequence[SurveyRecord]) -> float:
    if len(records) < 2:
        return 0.0
    depths = np.sort(_column(records, "bit_depth"))
    return float(np.max(np.diff(depths)))


def generate_recommendations(records: Sequence[SurveyRecord]) -> List[str]:
    """Independent checks; each one that trips adds a suggestion."""
    if not records:
        return ["No survey data available for analysis"]

    recommendations = []
    failed = sum(1 for r in records if r.quality_check.status == QualityStatus.FAIL)
    if failed:
        recommendations.append(f"Review {failed} failed survey(s) and consider remeasuring at those depths")

    if magnetic_consistency(records) < CONSISTENCY_LIMIT:
        recommendations.append(
            "Magnetic field readings show inconsistency. Check for nearby magnetic interference sources"
        )
    if gravity_consistency(records) < CONSISTENCY_LIMIT:
        recommendations.append("Gravity sensor readings show inconsistency. Consider recalibrating the tool")

    if max_survey_spacing(records) > MAX_SURVEY_SPACING:
        recommendations.append(
            "Survey spacing exceeds 100ft in some sections. "
            "Consider taking additional surveys for better wellbore positioning"
        )

    severity = dogleg_severity(records)
    if severity > DOGLEG_SEVERITY_LIMIT:
        recommendations.append(
            f"Dogleg severity of {severity:.2f}°/100ft detected. Monitor for potential drilling issues"
        )

    if not recommendations:
        recommendations = [
            "All survey parameters are within acceptable ranges",
            "Continue monitoring for consistent survey quality",
        ]
    return recommendations


def directional_statistics(records: Sequence[SurveyRecord]) -> DirectionalStatistics:
    ordered = sort_by_depth(records)
    counts = Counter(r.quality_check.status.value for r in ordered)
    status_counts = {status.value: counts.get(status.value, 0) for status in QualityStatus}
    if not ordered:
        return DirectionalStatistics(
            survey_count=0,
            average_inclination=0.0,
            average_azimuth=0.0,
            min_inclination=0.0,
            max_inclination=0.0,
            inclination_change=0.0,
            status_counts=status_counts,
        )

    inclination = _column(ordered, "inclination")
    return DirectionalStatistics(
        survey_count=len(ordered),
        average_inclination=float(inclination.mean()),
        average_azimuth=float(_column(ordered, "azimuth").mean()),
        min_inclination=float(inclination.min()),
        max_inclination=float(inclination.max()),
        inclination_change=float(inclination[-1] - inclination[0]),
        status_counts=status_counts,
        worst_status=worst_status(r.quality_check.status for r in ordered),
    )


def summarize(records: Sequence[SurveyRecord]) -> DirectionalSummary:
    """Everything above, for one well's survey sequence."""
    ordered = sort_by_depth(records)
    intervals = dogleg_intervals(ordered)
    score = quality_score(ordered)
    return DirectionalSummary(
        statistics=directional_statistics(ordered),
        intervals=intervals,
        dogleg_severity=_weighted(intervals, "severity"),
        max_dogleg_severity=max((i.severity for i in intervals), default=0.0),
        average_build_rate=_weighted(intervals, "build_rate"),
        average_turn_rate=_weighted(intervals, "turn_rate"),
        quality_score=score,
        quality_rating=quality_rating(score),
        consistency_rating=consistency_rating(ordered),
        magnetic_interference=magnetic_interference(ordered),
        magnetic_consistency=magnetic_consistency(ordered),
        gravity_consistency=gravity_consistency(ordered),
        max_survey_spacing=max_survey_spacing(ordered),
        recommendations=generate_recommendations(ordered),
    )
