import logging
from typing import List, Optional, Tuple

from sqlmodel import Session

from app.core.config import settings
from app.crud import surveys as survey_crud
from app.crud.wells import get_well
from app.schemas.directional import CurveProjectionInput, CurveProjectionResult, DirectionalSummary
from app.schemas.surveys import (
    ExportFormat,
    IngestionResult,
    QualityCheck,
    SurveyRecord,
    SurveyUpdate,
    WellDefaults,
)
from app.services.surveys.analytics import summarize
from app.services.surveys.export import export_surveys
from app.services.surveys.pipeline import ingest_survey_file
from app.services.surveys.projection import project_curve
from app.services.surveys.quality import assess, assess_record
from app.services.surveys.validator import is_acceptable
from app.utils.error_handling import NotFoundError, ValidationError

# Configure logging
logger = logging.getLogger(__name__)


class SurveyService:
    """
    Service for survey ingestion, quality checks and directional analytics.

    The engine modules never touch storage; this is where an import result
    meets the database, and only after the whole file has been processed.
    """

    def resolve_defaults(self, defaults: WellDefaults, session: Optional[Session] = None) -> WellDefaults:
        """Fill unset defaults from the stored well named by ``defaults.well_id``."""
        if not defaults.well_id or session is None:
            return defaults
        well = get_well(defaults.well_id, session)
        if well is None:
            logger.info(f"Well {defaults.well_id} is not stored; using the defaults as given")
            return defaults
        return WellDefaults(
            well_id=well.id,
            well_name=defaults.well_name or well.well_name,
            rig_name=defaults.rig_name or well.rig_name,
            sensor_offset=defaults.sensor_offset if defaults.sensor_offset is not None else well.sensor_offset,
        )

    def import_file(
        self,
        content: bytes,
        filename: str,
        defaults: WellDefaults,
        session: Optional[Session] = None,
        commit: bool = False,
    ) -> IngestionResult:
        """
        Ingest one uploaded file and optionally append its records to storage.

        Args:
            content: Raw file bytes
            filename: Original file name
            defaults: Caller well context
            session: Database session, required when ``commit`` is set
            commit: Store the accepted records once ingestion has succeeded

        Returns:
            The ingestion result, with ``committed`` set when records were stored

        Raises:
            UnsupportedFormatError, NoValidDataError: From the pipeline
            NotFoundError: If committing against a well that is not stored
        """
        defaults = self.resolve_defaults(defaults, session)
        if defaults.sensor_offset is None:
            defaults = defaults.model_copy(update={"sensor_offset": settings.DEFAULT_SENSOR_OFFSET})
        result = ingest_survey_file(content, filename, defaults)

        if commit:
            if session is None:
                raise ValidationError("A database session is required to store surveys")
            if defaults.well_id and get_well(defaults.well_id, session) is None:
                raise NotFoundError(f"Well {defaults.well_id} not found", details={"well_id": defaults.well_id})
            survey_crud.append_surveys(result.records, session)
            result = result.model_copy(update={"committed": True})
            logger.info(f"Committed {len(result.records)} records from {filename}")
        return result

    def assess_station(self, inclination: float, azimuth: float) -> QualityCheck:
        check = assess(inclination, azimuth)
        logger.debug(f"Station inc={inclination} az={azimuth}: {check.status.value}")
        return check

    def list_surveys(self, well_id: str, session: Session) -> List[SurveyRecord]:
        return survey_crud.get_surveys_for_well(well_id, session)

    def update_survey(self, survey_id: str, update: SurveyUpdate, session: Session) -> SurveyRecord:
        """Replace a stored record with ``update`` applied, re-validated and re-assessed."""
        current = survey_crud.get_survey(survey_id, session)
        if current is None:
            raise NotFoundError(f"Survey {survey_id} not found", details={"id": survey_id})

        changes = update.model_dump(exclude_unset=True, exclude_none=True)
        record = current.with_changes(**changes)
        if not is_acceptable([record.bit_depth, record.inclination, record.azimuth]):
            raise ValidationError(
                "A survey needs a positive bit depth, inclination or azimuth",
                details={"id": survey_id},
            )
        record = assess_record(record)
        survey_crud.replace_survey(record, session)
        logger.info(f"Survey {survey_id} replaced; quality {record.quality_check.status.value}")
        return record

    def delete_survey(self, survey_id: str, session: Session) -> None:
        if not survey_crud.delete_survey(survey_id, session):
            raise NotFoundError(f"Survey {survey_id} not found", details={"id": survey_id})
        logger.info(f"Survey {survey_id} deleted")

    def summarize(self, records: List[SurveyRecord]) -> DirectionalSummary:
        logger.info(f"Summarizing {len(records)} surveys")
        summary = summarize(records)
        logger.info(
            f"Summary: DLS={summary.dogleg_severity:.2f}°/100ft, "
            f"quality {summary.quality_score} ({summary.quality_rating})"
        )
        return summary

    def summarize_well(self, well_id: str, session: Session) -> DirectionalSummary:
        return self.summarize(self.list_surveys(well_id, session))

    def export_well(self, well_id: str, export_format: ExportFormat, session: Session) -> Tuple[str, str]:
        """
        Stored surveys for a well as CSV or LAS text.

        Returns:
            ``(content, filename)``

        Raises:
            NotFoundError: If the well has no stored surveys
        """
        records = self.list_surveys(well_id, session)
        if not records:
            raise NotFoundError(f"No surveys stored for well {well_id}", details={"well_id": well_id})
        well_name = next((r.well_name for r in records if r.well_name), None) or well_id
        filename = f"{well_name.replace(' ', '_')}_surveys.{export_format.value}"
        return export_surveys(records, export_format), filename

    def project_curve(self, data: CurveProjectionInput) -> CurveProjectionResult:
        logger.info(f"Projecting curve over {data.projection_distance} ft, slide {data.slide_distance} ft")
        return project_curve(data)


# Create a singleton instance
survey_service = SurveyService()
