import logging
import re
from typing import Any, List

from app.schemas.surveys import DetectedFormat, FieldMapping, RawRow
from app.services.surveys.parsers.base import ParsedTable, ParseStrategy, SurveySource, to_raw_field
from app.services.surveys.sniffer import is_numeric_cell

logger = logging.getLogger(__name__)

# Column order assumed when nothing else worked
POSITIONAL_FIELDS = (
    "bitDepth",
    "inclination",
    "azimuth",
    "toolFace",
    "bTotal",
    "aTotal",
    "dip",
    "toolTemp",
)

MIN_NUMERIC_CELLS = 3

_ANY_SEPARATOR = re.compile(r"[,;\t]|\s+")


def _numeric(cell: Any) -> Any:
    value = to_raw_field(cell)
    if isinstance(value, str):
        return value.replace(",", "")
    return value


class PositionalStrategy(ParseStrategy):
    """
    Last resort: read any row with at least three numbers positionally.

    Headers are ignored entirely; the first eight numeric cells of a row are
    taken as depth, inclination, azimuth, tool face, B total, A total, dip
    and temperature.
    """
    name = "positional"

    def _grid(self, source: SurveySource) -> List[List[Any]]:
        if source.is_spreadsheet:
            return source.sheet_rows
        return [[c for c in _ANY_SEPARATOR.split(line.strip()) if c] for line in source.lines]

    def parse(self, source: SurveySource, detected: DetectedFormat) -> ParsedTable:
        table = ParsedTable(
            strategy=self.name,
            headers=[FieldMapping(original_header=f"column {i + 1}", canonical_field=f)
                     for i, f in enumerate(POSITIONAL_FIELDS)],
        )
        for index, cells in enumerate(self._grid(source)):
            numbers = [_numeric(c) for c in cells if is_numeric_cell(c)]
            if len(numbers) < MIN_NUMERIC_CELLS:
                continue
            row: RawRow = dict(zip(POSITIONAL_FIELDS, numbers))
            table.rows.append(row)
        logger.debug(f"{self.name}: {len(table.rows)} numeric rows in {source.filename}")
        return table
