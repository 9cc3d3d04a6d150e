# app/services/surveys/projection.py
"""
Curve projection calculators for slide planning.

Pure functions of the current tool state and motor geometry; nothing here
looks at survey history. Angles in degrees, distances in feet, rates in
degrees per 100 ft.
"""
import logging
import math
from typing import Tuple

from app.schemas.directional import CurveProjectionInput, CurveProjectionResult
from app.services.surveys.analytics import minimum_curvature_dogleg
from app.utils.error_handling import CalculationError

logger = logging.getLogger(__name__)

# Below this inclination azimuth is undefined and a nudge only changes inclination
MIN_NUDGE_INCLINATION = 0.1


def _require_positive(name: str, value: float) -> None:
    if not math.isfinite(value) or value <= 0:
        raise CalculationError(f"{name} must be greater than zero", details={name: value})


def _require_non_negative(name: str, value: float) -> None:
    if not math.isfinite(value) or value < 0:
        raise CalculationError(f"{name} cannot be negative", details={name: value})


def normalize_azimuth(azimuth: float) -> float:
    """Wrap an azimuth into [0, 360)."""
    return ((azimuth % 360) + 360) % 360


def motor_yield(slide_distance: float, bend_angle: float, bit_to_bend: float) -> float:
    """
    Build capability of a bent motor over a slide, °/100ft.

    The bend only acts on the fraction slide / (slide + bit-to-bend) of the
    course, so short slides with a long bit-to-bend yield less.
    """
    _require_positive("slide_distance", slide_distance)
    _require_non_negative("bit_to_bend", bit_to_bend)
    effective_bend = bend_angle * (slide_distance / (slide_distance + bit_to_bend))
    return effective_bend / slide_distance * 100


def slide_seen(motor_yield: float, slide_distance: float, rotating: bool = False) -> float:
    """Angle change already realized at the bit, degrees. Zero while rotating."""
    if rotating:
        return 0.0
    return motor_yield * slide_distance / 100


def slide_ahead(motor_yield: float, slide_distance: float, bit_to_bend: float, rotating: bool = False) -> float:
    """Angle change still to come from the bend being behind the bit, degrees. Zero while rotating."""
    if rotating:
        return 0.0
    total = slide_distance + bit_to_bend
    if total <= 0:
        return 0.0
    return motor_yield * slide_distance / 100 * (bit_to_bend / total)


def projected_inclination(inclination: float, build_rate: float, distance: float) -> float:
    return inclination + build_rate * distance / 100


def projected_azimuth(azimuth: float, turn_rate: float, distance: float) -> float:
    return normalize_azimuth(azimuth + turn_rate * distance / 100)


def dogleg_needed(
    inclination: float,
    azimuth: float,
    target_inclination: float,
    target_azimuth: float,
    distance: float,
) -> float:
    """Dogleg severity required to reach the target attitude within ``distance``, °/100ft."""
    _require_positive("target_distance", distance)
    dogleg = minimum_curvature_dogleg(inclination, azimuth, target_inclination, target_azimuth)
    return dogleg / distance * 100


def nudge_projection(
    inclination: float,
    azimuth: float,
    tool_face: float,
    motor_yield: float,
    slide_distance: float,
) -> Tuple[float, float]:
    """
    Attitude after sliding ``slide_distance`` at ``tool_face``.

    The slide dogleg splits into an inclination part (cos of tool face) and
    an azimuth part (sin of tool face, scaled by 1/sin(inc)).

    Returns:
        (projected_inclination, projected_azimuth)
    """
    dogleg = motor_yield * slide_distance / 100
    tool_face_rad = math.radians(tool_face)

    new_inclination = inclination + math.cos(tool_face_rad) * dogleg

    azimuth_change = 0.0
    if inclination > MIN_NUDGE_INCLINATION:
        azimuth_change = math.sin(tool_face_rad) * math.radians(dogleg) / math.sin(math.radians(inclination))
    new_azimuth = normalize_azimuth(azimuth + math.degrees(azimuth_change))
    return new_inclination, new_azimuth


def project_curve(data: CurveProjectionInput) -> CurveProjectionResult:
    """Run every calculator for one set of inputs."""
    _require_non_negative("projection_distance", data.projection_distance)

    yield_rate = motor_yield(data.slide_distance, data.bend_angle, data.bit_to_bend)
    nudge_inc, nudge_az = nudge_projection(
        data.current_inclination,
        data.current_azimuth,
        data.tool_face,
        yield_rate,
        data.slide_distance,
    )

    needed = None
    if None not in (data.target_inclination, data.target_azimuth, data.target_distance):
        needed = dogleg_needed(
            data.current_inclination,
            data.current_azimuth,
            data.target_inclination,
            data.target_azimuth,
            data.target_distance,
        )

    result = CurveProjectionResult(
        motor_yield=yield_rate,
        slide_seen=slide_seen(yield_rate, data.slide_distance, data.rotating),
        slide_ahead=slide_ahead(yield_rate, data.slide_distance, data.bit_to_bend, data.rotating),
        projected_inclination=projected_inclination(
            data.current_inclination, data.build_rate, data.projection_distance
        ),
        projected_azimuth=projected_azimuth(data.current_azimuth, data.turn_rate, data.projection_distance),
        nudge_inclination=nudge_inc,
        nudge_azimuth=nudge_az,
        dogleg_needed=needed,
    )
    logger.debug(f"Curve projection: motor yield {yield_rate:.2f}°/100ft, dogleg needed {needed}")
    return result
