# app/schemas/surveys.py
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# A raw cell after parsing: number, text, or missing (None)
RawField = Union[float, int, str, None]
RawRow = Dict[str, RawField]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QualityStatus(str, Enum):
    PASS = "pass"
    WARNING = "warning"
    FAIL = "fail"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    def __lt__(self, other):
        if not isinstance(other, QualityStatus):
            return NotImplemented
        return self.severity < other.severity

    def __le__(self, other):
        if not isinstance(other, QualityStatus):
            return NotImplemented
        return self.severity <= other.severity

    def __gt__(self, other):
        if not isinstance(other, QualityStatus):
            return NotImplemented
        return self.severity > other.severity

    def __ge__(self, other):
        if not isinstance(other, QualityStatus):
            return NotImplemented
        return self.severity >= other.severity


_SEVERITY = {QualityStatus.PASS: 0, QualityStatus.WARNING: 1, QualityStatus.FAIL: 2}


def worst_status(statuses) -> QualityStatus:
    """Highest-severity status in ``statuses``; PASS for an empty iterable."""
    return max(statuses, default=QualityStatus.PASS)


class QualityCheck(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    status: QualityStatus
    message: str
    details: Optional[Dict[str, Any]] = None


class FormatKind(str, Enum):
    DELIMITED = "delimited"
    LEGACY = "legacy"
    LAS = "las"
    SPREADSHEET = "spreadsheet"


class ExportFormat(str, Enum):
    CSV = "csv"
    LAS = "las"


class DetectedFormat(CamelModel):
    """Classification of an uploaded file. Lives only for the duration of a parse."""
    format_kind: FormatKind
    extension: str
    header_row_index: int = 0
    data_start_row_index: int = 1
    delimiter: Optional[str] = None
    layout_name: Optional[str] = None


class FieldMapping(CamelModel):
    original_header: str
    canonical_field: Optional[str] = None


class WellDefaults(CamelModel):
    """Well context supplied by the caller; only fills values the file does not carry."""
    well_name: Optional[str] = None
    rig_name: Optional[str] = None
    sensor_offset: Optional[float] = None
    well_id: Optional[str] = None


class FieldCoercionWarning(CamelModel):
    row_index: int = Field(..., description="Zero-based index of the parsed row")
    field: str
    raw_value: Optional[str] = None
    message: str


class SurveyRecord(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    timestamp: datetime
    bit_depth: float = Field(0.0, description="Measured depth at the bit, ft")
    sensor_offset: Optional[float] = Field(None, description="Bit to sensor distance, ft")
    measured_depth: float = Field(0.0, description="Sensor depth, bit_depth - sensor_offset, ft")
    inclination: float = Field(0.0, description="Inclination, degrees")
    azimuth: float = Field(0.0, description="Azimuth, degrees")
    tool_face: float = Field(0.0, description="Tool face, degrees")
    b_total: float = Field(0.0, description="Total magnetic field")
    a_total: float = Field(0.0, description="Total gravity field")
    dip: float = Field(0.0, description="Magnetic dip angle, degrees")
    tool_temp: float = Field(0.0, description="Tool temperature")
    tvd: Optional[float] = Field(None, description="True vertical depth, ft")
    north_south: Optional[float] = None
    east_west: Optional[float] = None
    gamma: Optional[float] = None
    well_name: Optional[str] = None
    rig_name: Optional[str] = None
    well_id: Optional[str] = None
    quality_check: QualityCheck

    def with_changes(self, **changes: Any) -> "SurveyRecord":
        """
        Return a new record with ``changes`` applied.

        Measured depth is derived: it is recomputed whenever bit depth or
        sensor offset change, unless the caller passes it explicitly.
        """
        if ("bit_depth" in changes or "sensor_offset" in changes) and "measured_depth" not in changes:
            bit_depth = changes.get("bit_depth", self.bit_depth)
            sensor_offset = changes.get("sensor_offset", self.sensor_offset)
            changes["measured_depth"] = bit_depth - (sensor_offset or 0.0)
        return self.model_validate({**self.model_dump(), **changes})


class ParseAttempt(CamelModel):
    strategy: str
    succeeded: bool
    rows: int = 0
    error: Optional[str] = None


class IngestionResult(CamelModel):
    filename: str
    records: List[SurveyRecord]
    detected_format: DetectedFormat
    detected_headers: List[FieldMapping] = []
    strategy: str
    attempts: List[ParseAttempt] = []
    warnings: List[FieldCoercionWarning] = []
    rows_read: int = 0
    rows_rejected: int = 0
    context_changed: bool = False
    well_context: Optional[WellDefaults] = None
    committed: bool = False


class QualityRequest(CamelModel):
    inclination: float
    azimuth: float


class SurveyUpdate(CamelModel):
    """Replacement values for a stored station. Runs through the Validator again."""
    bit_depth: Optional[float] = None
    sensor_offset: Optional[float] = None
    inclination: Optional[float] = None
    azimuth: Optional[float] = None
    tool_face: Optional[float] = None
    b_total: Optional[float] = None
    a_total: Optional[float] = None
    dip: Optional[float] = None
    tool_temp: Optional[float] = None
    timestamp: Optional[datetime] = None
