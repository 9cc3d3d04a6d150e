# app/services/surveys/export.py
"""
Survey export to CSV and LAS 2.0.

Both formats are sorted by bit depth and use headers and curve mnemonics the
importer maps back to the same fields, so an exported file can be uploaded
again as-is.
"""
import io
import logging
import math
from datetime import datetime, timezone
from typing import List, Optional, Sequence

import lasio
import polars as pl

from app.schemas.surveys import ExportFormat, SurveyRecord
from app.services.surveys.analytics import sort_by_depth

logger = logging.getLogger(__name__)

# (record attribute, CSV header)
CSV_COLUMNS = (
    ("bit_depth", "Bit Depth (ft)"),
    ("measured_depth", "Sensor MD (ft)"),
    ("sensor_offset", "Sensor Offset (ft)"),
    ("inclination", "Inc (deg)"),
    ("azimuth", "Azi (deg)"),
    ("tool_face", "TF (deg)"),
    ("tvd", "TVD (ft)"),
    ("north_south", "NS (ft)"),
    ("east_west", "EW (ft)"),
    ("b_total", "B Total"),
    ("a_total", "A Total"),
    ("dip", "Dip (deg)"),
    ("tool_temp", "Temp (F)"),
    ("gamma", "Gamma"),
    ("timestamp", "Timestamp"),
    ("well_name", "Well Name"),
    ("rig_name", "Rig Name"),
)

# (record attribute, mnemonic, unit, description); the first curve is the index
LAS_CURVES = (
    ("bit_depth", "DEPT", "FT", "BIT DEPTH"),
    ("measured_depth", "SENSOR_MD", "FT", "SENSOR MEASURED DEPTH"),
    ("inclination", "INC", "DEG", "INCLINATION"),
    ("azimuth", "AZI", "DEG", "AZIMUTH"),
    ("tool_face", "TF", "DEG", "TOOL FACE"),
    ("b_total", "BTOT", "", "TOTAL MAGNETIC FIELD"),
    ("a_total", "ATOT", "G", "TOTAL GRAVITY"),
    ("dip", "DIP", "DEG", "DIP ANGLE"),
    ("tool_temp", "TEMP", "F", "TOOL TEMPERATURE"),
)

MEDIA_TYPES = {ExportFormat.CSV: "text/csv", ExportFormat.LAS: "text/plain"}


def _csv_value(record: SurveyRecord, attr: str):
    value = getattr(record, attr)
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def to_csv(records: Sequence[SurveyRecord]) -> str:
    ordered = sort_by_depth(records)
    columns = {header: [_csv_value(r, attr) for r in ordered] for attr, header in CSV_COLUMNS}
    columns["Quality"] = [r.quality_check.status.value for r in ordered]
    return pl.DataFrame(columns).write_csv()


def _deepest_value(records: Sequence[SurveyRecord], attr: str) -> Optional[str]:
    return next((getattr(r, attr) for r in reversed(records) if getattr(r, attr)), None)


def _curve_values(records: Sequence[SurveyRecord], attr: str) -> List[float]:
    values = []
    for record in records:
        value = getattr(record, attr)
        values.append(math.nan if value is None else float(value))
    return values


def to_las(records: Sequence[SurveyRecord]) -> str:
    """
    LAS 2.0 text with one curve per survey measurement.

    WELL and RIG come from the deepest record that names them.
    """
    ordered = sort_by_depth(records)
    las = lasio.LASFile()
    las.well["WELL"] = lasio.HeaderItem("WELL", value=_deepest_value(ordered, "well_name") or "", descr="WELL NAME")
    las.well["RIG"] = lasio.HeaderItem("RIG", value=_deepest_value(ordered, "rig_name") or "", descr="RIG NAME")
    las.well["DATE"] = lasio.HeaderItem(
        "DATE", value=datetime.now(timezone.utc).date().isoformat(), descr="EXPORT DATE"
    )
    for attr, mnemonic, unit, descr in LAS_CURVES:
        las.append_curve(mnemonic, _curve_values(ordered, attr), unit=unit, descr=descr)

    buffer = io.StringIO()
    las.write(buffer, version=2.0, wrap=False)
    return buffer.getvalue()


def export_surveys(records: Sequence[SurveyRecord], export_format: ExportFormat) -> str:
    logger.info(f"Exporting {len(records)} surveys as {export_format.value}")
    if export_format == ExportFormat.LAS:
        return to_las(records)
    return to_csv(records)
