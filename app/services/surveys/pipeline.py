# app/services/surveys/pipeline.py
import logging
from datetime import datetime
from typing import Optional

from app.schemas.surveys import IngestionResult, WellDefaults
from app.services.surveys.parsers import SurveySource, run_chain
from app.services.surveys.sniffer import extension_of, sniff_format
from app.services.surveys.validator import validate_rows
from app.utils.error_handling import NoValidDataError

logger = logging.getLogger(__name__)


def _file_context(records, defaults: WellDefaults) -> Optional[WellDefaults]:
    """Well name and rig name carried by the file itself, when they differ from the caller's."""
    well_name = next((r.well_name for r in records if r.well_name), None)
    rig_name = next((r.rig_name for r in records if r.rig_name), None)
    changed_well = well_name is not None and well_name != defaults.well_name
    changed_rig = rig_name is not None and rig_name != defaults.rig_name
    if not (changed_well or changed_rig):
        return None
    return WellDefaults(
        well_name=well_name or defaults.well_name,
        rig_name=rig_name or defaults.rig_name,
        sensor_offset=defaults.sensor_offset,
        well_id=defaults.well_id,
    )


def ingest_survey_file(
    content: bytes,
    filename: str,
    defaults: Optional[WellDefaults] = None,
    now: Optional[datetime] = None,
) -> IngestionResult:
    """
    Run one uploaded file through sniffing, parsing and validation.

    Args:
        content: Raw file bytes
        filename: Original file name; its extension selects the format
        defaults: Caller-supplied well context, used only where the file is silent
        now: Timestamp for rows that carry none

    Returns:
        IngestionResult with the accepted records in source order

    Raises:
        UnsupportedFormatError: If the extension is not supported
        NoValidDataError: If the file yields no acceptable rows
    """
    defaults = defaults or WellDefaults()
    logger.info(f"Ingesting {filename} ({len(content)} bytes)")

    detected = sniff_format(content, filename)
    if detected is None:
        raise NoValidDataError("File is empty", details={"filename": filename})

    source = SurveySource(filename=filename, extension=extension_of(filename), content=content)
    chain = run_chain(source, detected)

    outcome = validate_rows(chain.rows, defaults, now)
    records = outcome.records

    well_context = _file_context(records, defaults)
    if well_context:
        logger.info(
            f"{filename} names well '{well_context.well_name}' / rig '{well_context.rig_name}', "
            f"which differs from the current context"
        )

    result = IngestionResult(
        filename=filename,
        records=records,
        detected_format=detected,
        detected_headers=chain.headers,
        strategy=chain.strategy,
        attempts=chain.attempts,
        warnings=outcome.warnings,
        rows_read=len(chain.rows),
        rows_rejected=outcome.rejected,
        context_changed=well_context is not None,
        well_context=well_context,
    )
    logger.info(
        f"Ingested {filename}: {len(records)} records via '{chain.strategy}', "
        f"{outcome.rejected} rows rejected, {len(outcome.warnings)} warnings"
    )
    return result

