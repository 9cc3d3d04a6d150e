"""
Per-station quality envelope.

A single ordered rule table is the source of truth for thresholds and
messages; the first rule that matches decides the status. Out-of-envelope
stations are flagged, never dropped.
"""
import math
from dataclasses import dataclass
from typing import Callable, Tuple

from app.schemas.surveys import QualityCheck, QualityStatus, SurveyRecord

INCLINATION_RANGE = (0.0, 180.0)
AZIMUTH_RANGE = (0.0, 360.0)
HIGH_INCLINATION = 120.0
NEAR_VERTICAL_INCLINATION = 3.0


@dataclass(frozen=True)
class QualityRule:
    name: str
    status: QualityStatus
    message: str
    applies: Callable[[float, float], bool]


def _out_of_range(value: float, bounds: Tuple[float, float]) -> bool:
    low, high = bounds
    return not math.isfinite(value) or value < low or value > high


QUALITY_RULES: Tuple[QualityRule, ...] = (
    QualityRule(
        "inclination_range",
        QualityStatus.FAIL,
        "Inclination out of valid range (0-180 degrees)",
        lambda inc, az: _out_of_range(inc, INCLINATION_RANGE),
    ),
    QualityRule(
        "azimuth_range",
        QualityStatus.FAIL,
        "Azimuth out of valid range (0-360 degrees)",
        lambda inc, az: _out_of_range(az, AZIMUTH_RANGE),
    ),
    QualityRule(
        "high_inclination",
        QualityStatus.WARNING,
        "Unusually high inclination value - verify sensor readings",
        lambda inc, az: inc > HIGH_INCLINATION,
    ),
    QualityRule(
        "near_vertical",
        QualityStatus.WARNING,
        "Near-vertical wellbore - azimuth readings may be unreliable",
        lambda inc, az: inc < NEAR_VERTICAL_INCLINATION and az != 0,
    ),
)

PASS_MESSAGE = "All parameters within acceptable ranges"


def assess(inclination: float, azimuth: float) -> QualityCheck:
    """Quality check for one station's inclination and azimuth."""
    inclination = float(inclination)
    azimuth = float(azimuth)
    details = {"inclination": inclination, "azimuth": azimuth}
    for rule in QUALITY_RULES:
        if rule.applies(inclination, azimuth):
            return QualityCheck(status=rule.status, message=rule.message, details={"rule": rule.name, **details})
    return QualityCheck(status=QualityStatus.PASS, message=PASS_MESSAGE, details={"rule": "pass", **details})


def assess_record(record: SurveyRecord) -> SurveyRecord:
    """Copy of ``record`` with a fresh quality check."""
    return record.with_changes(quality_check=assess(record.inclination, record.azimuth))
