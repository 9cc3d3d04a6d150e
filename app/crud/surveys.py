import logging
from typing import List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from app.models.survey import SurveyStation
from app.schemas.surveys import QualityCheck, SurveyRecord
from app.utils.datetime_utils import ensure_timezone_aware
from app.utils.error_handling import StorageError

logger = logging.getLogger(__name__)

_SHARED_FIELDS = (
    "id", "bit_depth", "sensor_offset", "measured_depth", "inclination", "azimuth", "tool_face",
    "b_total", "a_total", "dip", "tool_temp", "tvd", "north_south", "east_west", "gamma",
    "well_name", "rig_name", "well_id",
)


def to_station(record: SurveyRecord) -> SurveyStation:
    return SurveyStation(
        **{name: getattr(record, name) for name in _SHARED_FIELDS},
        timestamp=record.timestamp,
        quality_status=record.quality_check.status.value,
        quality_message=record.quality_check.message,
        quality_details=record.quality_check.details,
    )


def to_record(station: SurveyStation) -> SurveyRecord:
    return SurveyRecord(
        **{name: getattr(station, name) for name in _SHARED_FIELDS},
        timestamp=ensure_timezone_aware(station.timestamp),
        quality_check=QualityCheck(
            status=station.quality_status,
            message=station.quality_message,
            details=station.quality_details,
        ),
    )


def append_surveys(records: Sequence[SurveyRecord], session: Session) -> List[SurveyRecord]:
    """Store a batch of records in one transaction; nothing is written if any insert fails."""
    try:
        session.add_all([to_station(r) for r in records])
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to store {len(records)} survey records: {e}")
        raise StorageError("Could not store survey records", details={"count": len(records)}) from e
    logger.info(f"Stored {len(records)} survey records")
    return list(records)


def get_surveys_for_well(well_id: str, session: Session) -> List[SurveyRecord]:
    stations = session.exec(
        select(SurveyStation)
        .where(SurveyStation.well_id == well_id)
        .order_by(SurveyStation.bit_depth.asc(), SurveyStation.timestamp.asc())
    ).all()
    return [to_record(s) for s in stations]


def get_survey(survey_id: str, session: Session) -> Optional[SurveyRecord]:
    station = session.get(SurveyStation, survey_id)
    return to_record(station) if station else None


def replace_survey(record: SurveyRecord, session: Session) -> Optional[SurveyRecord]:
    """Overwrite the stored row for ``record.id`` with every field of ``record``."""
    station = session.get(SurveyStation, record.id)
    if station is None:
        return None
    replacement = to_station(record)
    for name in SurveyStation.model_fields:
        setattr(station, name, getattr(replacement, name))
    try:
        session.add(station)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise StorageError("Could not update survey record", details={"id": record.id}) from e
    return record


def delete_survey(survey_id: str, session: Session) -> bool:
    station = session.get(SurveyStation, survey_id)
    if station is None:
        return False
    try:
        session.delete(station)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise StorageError("Could not delete survey record", details={"id": survey_id}) from e
    return True
