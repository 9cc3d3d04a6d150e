import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.responses import Response
from sqlmodel import Session

from app.core.config import settings
from app.db.session import session
from app.schemas.directional import DirectionalSummary
from app.schemas.surveys import (
    ExportFormat,
    IngestionResult,
    QualityCheck,
    QualityRequest,
    SurveyRecord,
    SurveyUpdate,
    WellDefaults,
)
from app.services.surveys import survey_service
from app.services.surveys.export import MEDIA_TYPES
from app.utils.error_handling import APIError

# Set up logging
logger = logging.getLogger(__name__)

# Create router
router = APIRouter(tags=["surveys"])


@router.post(
    "/import",
    response_model=IngestionResult,
    response_model_by_alias=True,
    summary="Import a survey file",
)
async def import_surveys(
    file: UploadFile = File(..., description="CSV, TXT, LAS, XLSX or XLS survey export"),
    well_name: Optional[str] = Form(None),
    rig_name: Optional[str] = Form(None),
    sensor_offset: Optional[float] = Form(None),
    well_id: Optional[str] = Form(None),
    commit: bool = Form(False),
    db: Session = Depends(session),
) -> IngestionResult:
    """
    Parse an uploaded survey file into validated, quality-checked records.

    The format is detected from the extension and content: delimited text
    with any common delimiter, report exports with header blocks and unit
    lines, LAS 2.0 files and spreadsheets. Well name, rig name and sensor
    offset are used only where the file does not carry its own.

    With `commit=true` the records are appended to storage after the whole
    file has been processed; a failed import stores nothing.

    The response lists every parse strategy attempted, the detected headers,
    coercion warnings, and `contextChanged`/`wellContext` when the file names
    a different well or rig than the one supplied.
    """
    content = await file.read()
    if len(content) > settings.MAX_UPLOAD_BYTES:
        raise APIError(
            f"File exceeds the {settings.MAX_UPLOAD_BYTES} byte upload limit",
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            error_code="file_too_large",
            details={"filename": file.filename, "size": len(content)},
        )

    defaults = WellDefaults(
        well_name=well_name or None,
        rig_name=rig_name or None,
        sensor_offset=sensor_offset,
        well_id=well_id or None,
    )
    logger.info(f"Import requested for {file.filename} (commit={commit})")
    return survey_service.import_file(content, file.filename or "", defaults, session=db, commit=commit)


@router.get("/wells/{well_id}", response_model=List[SurveyRecord], response_model_by_alias=True)
async def list_well_surveys(well_id: str, db: Session = Depends(session)) -> List[SurveyRecord]:
    """Stored surveys for a well, ordered by bit depth."""
    return survey_service.list_surveys(well_id, db)


@router.get("/wells/{well_id}/analytics", response_model=DirectionalSummary, response_model_by_alias=True)
async def well_analytics(well_id: str, db: Session = Depends(session)) -> DirectionalSummary:
    """Directional summary over a well's stored surveys."""
    return survey_service.summarize_well(well_id, db)


@router.get("/wells/{well_id}/export", response_class=Response)
async def export_well_surveys(
    well_id: str,
    format: ExportFormat = Query(ExportFormat.CSV, description="csv or las"),
    db: Session = Depends(session),
) -> Response:
    """
    Download a well's stored surveys, sorted by bit depth.

    The file can be imported again through `POST /surveys/import`.
    """
    content, filename = survey_service.export_well(well_id, format, db)
    return Response(
        content=content,
        media_type=MEDIA_TYPES[format],
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.put("/{survey_id}", response_model=SurveyRecord, response_model_by_alias=True)
async def update_survey(survey_id: str, data: SurveyUpdate, db: Session = Depends(session)) -> SurveyRecord:
    """
    Replace a stored survey with the given values applied.

    Measured depth is recomputed when bit depth or sensor offset change and
    the quality check is run again.
    """
    return survey_service.update_survey(survey_id, data, db)


@router.delete("/{survey_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_survey(survey_id: str, db: Session = Depends(session)) -> None:
    survey_service.delete_survey(survey_id, db)


@router.post("/quality", response_model=QualityCheck, response_model_by_alias=True)
async def assess_quality(data: QualityRequest) -> QualityCheck:
    """Quality check for a single station, e.g. one decoded from live telemetry."""
    return survey_service.assess_station(data.inclination, data.azimuth)


@router.post("/analytics", response_model=DirectionalSummary, response_model_by_alias=True)
async def analyze_surveys(records: List[SurveyRecord]) -> DirectionalSummary:
    """
    Directional summary for posted records.

    Records are sorted by bit depth before any calculation. Returns dogleg
    severity per interval and overall, quality score and rating,
    magnetic and gravity consistency, interference rating and
    recommendations.
    """
    return survey_service.summarize(records)
