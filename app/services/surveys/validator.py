"""
Raw rows to SurveyRecords.

Numbers are coerced leniently (thousands separators, degree marks and unit
suffixes are stripped); anything that still is not a finite number becomes
0 and leaves a FieldCoercionWarning behind. Rows with no usable depth,
inclination or azimuth are dropped.
"""
import logging
import math
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple

from app.schemas.surveys import FieldCoercionWarning, RawField, RawRow, SurveyRecord, WellDefaults
from app.services.surveys.quality import assess
from app.utils.datetime_utils import parse_timestamp
from app.utils.error_handling import NoValidDataError

logger = logging.getLogger(__name__)

# canonical field -> SurveyRecord attribute, for values that default to 0
NUMERIC_FIELDS = {
    "bitDepth": "bit_depth",
    "inclination": "inclination",
    "azimuth": "azimuth",
    "toolFace": "tool_face",
    "bTotal": "b_total",
    "aTotal": "a_total",
    "dip": "dip",
    "toolTemp": "tool_temp",
}

# values that stay None when the source does not carry them
OPTIONAL_NUMERIC_FIELDS = {
    "sensorOffset": "sensor_offset",
    "measuredDepth": "measured_depth",
    "tvd": "tvd",
    "northSouth": "north_south",
    "eastWest": "east_west",
    "gamma": "gamma",
}

ACCEPTANCE_FIELDS = ("bitDepth", "inclination", "azimuth")

_UNIT_SUFFIX = re.compile(r"(°|º|deg|degrees|ft|feet|m|usft)\.?$", re.IGNORECASE)


@dataclass
class ValidationOutcome:
    records: List[SurveyRecord] = field(default_factory=list)
    warnings: List[FieldCoercionWarning] = field(default_factory=list)
    rejected: int = 0


def coerce_number(raw: RawField) -> Optional[float]:
    """
    Finite float for ``raw``, or None when it is missing or unparseable.

    >>> coerce_number("1,234.5 ft")
    1234.5
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
        return value if math.isfinite(value) else None

    text = str(raw).strip().replace(",", "").replace(" ", "")
    text = _UNIT_SUFFIX.sub("", text)
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _text(raw: RawField) -> Optional[str]:
    if raw is None:
        return None
    text = str(raw).strip()
    return text or None


def _coerce_field(
    row: RawRow, name: str, row_index: int, warnings: List[FieldCoercionWarning]
) -> Optional[float]:
    raw = row.get(name)
    value = coerce_number(raw)
    if value is None and _text(raw) is not None:
        warnings.append(
            FieldCoercionWarning(
                row_index=row_index,
                field=name,
                raw_value=str(raw),
                message=f"Could not read '{raw}' as a number for {name}",
            )
        )
    return value


def is_acceptable(values: Sequence[Optional[float]]) -> bool:
    """At least one value present in the source and at least one of them positive."""
    present = [v for v in values if v is not None]
    return bool(present) and any(v > 0 for v in present)


def build_record(
    row: RawRow,
    row_index: int,
    defaults: WellDefaults,
    now: datetime,
) -> Tuple[Optional[SurveyRecord], List[FieldCoercionWarning]]:
    """
    One validated record, or None when the row fails acceptance.

    Warnings for a rejected row are returned separately so they are not
    reported for data that never made it into the result.
    """
    row_warnings: List[FieldCoercionWarning] = []
    numbers = {name: _coerce_field(row, name, row_index, row_warnings) for name in NUMERIC_FIELDS}
    optional = {name: _coerce_field(row, name, row_index, row_warnings) for name in OPTIONAL_NUMERIC_FIELDS}

    if not is_acceptable([numbers[name] for name in ACCEPTANCE_FIELDS]):
        return None, row_warnings

    values = {attr: numbers[name] if numbers[name] is not None else 0.0 for name, attr in NUMERIC_FIELDS.items()}

    sensor_offset = optional["sensorOffset"]
    if sensor_offset is None:
        sensor_offset = defaults.sensor_offset
    measured_depth = optional["measuredDepth"]
    if measured_depth is None:
        measured_depth = values["bit_depth"] - (sensor_offset or 0.0)

    timestamp = None
    if _text(row.get("timestamp")) is not None:
        timestamp = parse_timestamp(row.get("timestamp"))
        if timestamp is None:
            row_warnings.append(
                FieldCoercionWarning(
                    row_index=row_index,
                    field="timestamp",
                    raw_value=str(row.get("timestamp")),
                    message="Unrecognized timestamp, using ingestion time",
                )
            )

    record = SurveyRecord(
        id=str(uuid.uuid4()),
        timestamp=timestamp or now,
        sensor_offset=sensor_offset,
        measured_depth=measured_depth,
        tvd=optional["tvd"],
        north_south=optional["northSouth"],
        east_west=optional["eastWest"],
        gamma=optional["gamma"],
        well_name=_text(row.get("wellName")) or defaults.well_name,
        rig_name=_text(row.get("rigName")) or defaults.rig_name,
        well_id=defaults.well_id,
        quality_check=assess(values["inclination"], values["azimuth"]),
        **values,
    )
    return record, row_warnings


def validate_rows(
    rows: Sequence[RawRow],
    defaults: Optional[WellDefaults] = None,
    now: Optional[datetime] = None,
) -> ValidationOutcome:
    """
    Coerce, default and assess every raw row, keeping source order.

    Args:
        rows: Raw rows keyed by canonical field name
        defaults: Well context applied where a row carries none of its own
        now: Timestamp for rows without one (defaults to the current UTC time)

    Raises:
        NoValidDataError: If no row survives
    """
    defaults = defaults or WellDefaults()
    now = now or datetime.now(timezone.utc)
    outcome = ValidationOutcome()

    for index, row in enumerate(rows):
        record, row_warnings = build_record(row, index, defaults, now)
        if record is None:
            outcome.rejected += 1
            logger.debug(f"Rejected row {index}: no positive depth, inclination or azimuth")
            continue
        outcome.records.append(record)
        outcome.warnings.extend(row_warnings)

    logger.info(
        f"Validated {len(rows)} rows: {len(outcome.records)} accepted, "
        f"{outcome.rejected} rejected, {len(outcome.warnings)} coercion warnings"
    )
    if not outcome.records:
        raise NoValidDataError(
            "No valid survey data found in file",
            details={"rows_read": len(rows), "rows_rejected": outcome.rejected},
        )
    return outcome
