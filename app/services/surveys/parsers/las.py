import io
import logging
import math
from typing import Any, Optional

import lasio
import numpy as np

from app.schemas.surveys import DetectedFormat, RawRow
from app.services.surveys.header_mapper import build_field_mappings, has_survey_fields
from app.services.surveys.parsers.base import (
    ParsedTable,
    ParseStrategy,
    SurveySource,
    assign_cell,
    is_blank_row,
    to_raw_field,
)
from app.utils.error_handling import ParseFailure

logger = logging.getLogger(__name__)


def _header_value(section, mnemonic: str) -> Optional[str]:
    try:
        item = section[mnemonic]
    except KeyError:
        return None
    value = str(item.value).strip()
    return value or None


def _cell(value: Any):
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, float) and not math.isfinite(value):
        # LAS null values (-999.25 etc.) arrive as NaN
        return None
    return to_raw_field(value)


class LasStrategy(ParseStrategy):
    """
    LAS 2.0 well-log text via lasio.

    Curve mnemonics from ~C are mapped like any other header; the ~A block
    is whitespace-padded columns in curve order. The WELL and RIG items of
    the ~W section become row values, so a file's own well name wins over
    caller defaults.
    """
    name = "las"

    def parse(self, source: SurveySource, detected: DetectedFormat) -> ParsedTable:
        las = lasio.read(io.StringIO(source.text), ignore_header_errors=True)

        mnemonics = [curve.mnemonic for curve in las.curves]
        if not mnemonics:
            raise ParseFailure("LAS file has no ~Curve section", self.name)

        mappings = build_field_mappings(mnemonics)
        fields = [m.canonical_field for m in mappings]
        table = ParsedTable(strategy=self.name, headers=mappings)
        if not has_survey_fields(fields):
            logger.info(f"{self.name}: none of the curves {mnemonics} are survey fields")
            return table

        data = np.asarray(las.data)
        if data.size == 0:
            return table
        if data.ndim == 1:
            data = data.reshape(1, -1)

        well_name = _header_value(las.well, "WELL")
        rig_name = _header_value(las.well, "RIG")

        for index, values in enumerate(data):
            cells = [_cell(v) for v in values]
            if is_blank_row(cells):
                logger.debug(f"{self.name}: skipping data row {index}, every value is null")
                continue
            row: RawRow = {}
            for canonical, cell in zip(fields, cells):
                if canonical is not None:
                    assign_cell(row, canonical, cell)
            if well_name and row.get("wellName") is None:
                row["wellName"] = well_name
            if rig_name and row.get("rigName") is None:
                row["rigName"] = rig_name
            table.rows.append(row)
        return table
