# app/schemas/directional.py
from typing import Dict, List, Optional

from pydantic import Field

from app.schemas.surveys import CamelModel, QualityStatus


class DoglegInterval(CamelModel):
    from_depth: float
    to_depth: float
    course_length: float
    dogleg: float = Field(..., description="Dogleg angle over the interval, degrees")
    severity: float = Field(..., description="Dogleg severity, °/100ft")
    build_rate: float = Field(..., description="Inclination change, °/100ft")
    turn_rate: float = Field(..., description="Azimuth change, °/100ft")


class DirectionalStatistics(CamelModel):
    survey_count: int
    average_inclination: float
    average_azimuth: float
    min_inclination: float
    max_inclination: float
    inclination_change: float
    status_counts: Dict[str, int]
    worst_status: QualityStatus = Field(QualityStatus.PASS, description="Most severe quality status in the sequence")


class DirectionalSummary(CamelModel):
    statistics: DirectionalStatistics
    intervals: List[DoglegInterval]
    dogleg_severity: float = Field(..., description="Length-weighted average DLS, °/100ft")
    max_dogleg_severity: float
    average_build_rate: float
    average_turn_rate: float
    quality_score: int
    quality_rating: str
    consistency_rating: str
    magnetic_interference: str
    magnetic_consistency: float
    gravity_consistency: float
    max_survey_spacing: float
    recommendations: List[str]


class CurveProjectionInput(CamelModel):
    current_inclination: float = Field(..., description="Current inclination, degrees")
    current_azimuth: float = Field(..., description="Current azimuth, degrees")
    tool_face: float = Field(0.0, description="Tool face, degrees")
    slide_distance: float = Field(..., description="Distance slid, ft")
    bend_angle: float = Field(..., description="Motor bend angle, degrees")
    bit_to_bend: float = Field(..., description="Bit to bend distance, ft")
    build_rate: float = Field(0.0, description="Build rate, °/100ft")
    turn_rate: float = Field(0.0, description="Turn rate, °/100ft")
    projection_distance: float = Field(..., description="Distance to project ahead, ft")
    target_inclination: Optional[float] = Field(None, description="Target inclination, degrees")
    target_azimuth: Optional[float] = Field(None, description="Target azimuth, degrees")
    target_distance: Optional[float] = Field(None, description="Distance to target, ft")
    rotating: bool = Field(False, description="True while rotating rather than sliding")


class CurveProjectionResult(CamelModel):
    motor_yield: float
    slide_seen: float
    slide_ahead: float
    projected_inclination: float
    projected_azimuth: float
    nudge_inclination: float
    nudge_azimuth: float
    dogleg_needed: Optional[float] = None
