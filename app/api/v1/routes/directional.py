import logging

from fastapi import APIRouter

from app.schemas.directional import CurveProjectionInput, CurveProjectionResult
from app.services.surveys import survey_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["directional"])


@router.post(
    "/projection",
    response_model=CurveProjectionResult,
    response_model_by_alias=True,
    summary="Project the curve ahead of the bit",
)
async def curve_projection(data: CurveProjectionInput) -> CurveProjectionResult:
    """
    Slide planning calculators for one set of inputs.

    Returns motor yield, slide seen and slide ahead, the inclination and
    azimuth projected from the current build and turn rates, the attitude
    after a nudge at the given tool face, and (when a target inclination,
    azimuth and distance are all given) the dogleg severity needed to reach
    the target.

    Example:
    ```json
    {
      "currentInclination": 45,
      "currentAzimuth": 180,
      "toolFace": 30,
      "slideDistance": 30,
      "bendAngle": 2,
      "bitToBend": 5,
      "buildRate": 3,
      "turnRate": 1,
      "projectionDistance": 100
    }
    ```
    """
    return survey_service.project_curve(data)
