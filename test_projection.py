"""
Tests for the slide planning calculators.
"""

import pytest

from app.schemas.directional import CurveProjectionInput
from app.services.surveys import projection
from app.utils.error_handling import CalculationError


def create_projection_input(**overrides):
    data = dict(
        current_inclination=45.0,
        current_azimuth=180.0,
        tool_face=0.0,
        slide_distance=30.0,
        bend_angle=2.0,
        bit_to_bend=5.0,
        build_rate=3.0,
        turn_rate=1.0,
        projection_distance=100.0,
    )
    data.update(overrides)
    return CurveProjectionInput(**data)


def test_motor_yield():
    # 2° * (30 / 35) over 30 ft, per 100 ft
    assert projection.motor_yield(30, 2, 5) == pytest.approx(2 * 30 / 35 / 30 * 100)


@pytest.mark.parametrize("slide, b2b", [(0, 5), (-10, 5), (30, -1)])
def test_motor_yield_rejects_bad_geometry(slide, b2b):
    with pytest.raises(CalculationError):
        projection.motor_yield(slide, 2, b2b)


def test_slide_seen_and_ahead():
    my = 10.0
    assert projection.slide_seen(my, 30) == pytest.approx(3.0)
    assert projection.slide_ahead(my, 30, 10) == pytest.approx(3.0 * 10 / 40)
    assert projection.slide_seen(my, 30, rotating=True) == 0.0
    assert projection.slide_ahead(my, 30, 10, rotating=True) == 0.0


def test_projected_inclination_and_azimuth():
    assert projection.projected_inclination(45, 3, 100) == pytest.approx(48)
    assert projection.projected_azimuth(359, 5, 100) == pytest.approx(4)
    assert projection.projected_azimuth(2, -5, 100) == pytest.approx(357)


def test_dogleg_needed():
    assert projection.dogleg_needed(45, 180, 48, 180, 100) == pytest.approx(3.0)
    with pytest.raises(CalculationError):
        projection.dogleg_needed(45, 180, 48, 180, 0)


def test_nudge_projection_high_side_builds():
    inc, az = projection.nudge_projection(45, 180, 0, 10, 30)
    assert inc == pytest.approx(48)
    assert az == pytest.approx(180)


def test_nudge_projection_right_turns():
    inc, az = projection.nudge_projection(90, 180, 90, 10, 30)
    assert inc == pytest.approx(90)
    assert az == pytest.approx(183)


def test_nudge_projection_near_vertical_keeps_azimuth():
    inc, az = projection.nudge_projection(0.05, 200, 90, 10, 30)
    assert az == pytest.approx(200)


def test_project_curve_bundles_everything():
    result = projection.project_curve(create_projection_input())
    my = projection.motor_yield(30, 2, 5)
    assert result.motor_yield == pytest.approx(my)
    assert result.slide_seen == pytest.approx(my * 30 / 100)
    assert result.projected_inclination == pytest.approx(48)
    assert result.projected_azimuth == pytest.approx(181)
    assert result.nudge_inclination == pytest.approx(45 + my * 30 / 100)
    assert result.dogleg_needed is None


def test_project_curve_with_target():
    result = projection.project_curve(create_projection_input(
        target_inclination=48.0, target_azimuth=180.0, target_distance=100.0,
    ))
    assert result.dogleg_needed == pytest.approx(3.0)


def test_project_curve_is_reproducible():
    data = create_projection_input(tool_face=37.0)
    assert projection.project_curve(data) == projection.project_curve(data)


def test_project_curve_rejects_negative_projection_distance():
    with pytest.raises(CalculationError):
        projection.project_curve(create_projection_input(projection_distance=-1))
