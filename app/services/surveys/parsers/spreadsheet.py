import io
import logging
from typing import Any, List

import polars as pl

from app.schemas.surveys import DetectedFormat
from app.services.surveys.parsers.base import ParsedTable, ParseStrategy, SurveySource, rows_from_grid
from app.services.surveys.sniffer import find_legacy_layout

logger = logging.getLogger(__name__)


def read_sheet_rows(content: bytes) -> List[List[Any]]:
    """
    First worksheet as a list of rows, header included.

    The sheet is read without a header so the header row is just another
    row of cells; locating it is the strategy's job.
    """
    frame = pl.read_excel(
        io.BytesIO(content),
        sheet_id=1,
        engine="calamine",
        has_header=False,
        raise_if_empty=False,
    )
    rows = [list(row) for row in frame.rows()]
    logger.debug(f"Read {len(rows)} rows x {frame.width} columns from the first sheet")
    return rows


class SpreadsheetStrategy(ParseStrategy):
    """XLSX/XLS first sheet; header on row 0 unless a report header is found further down."""
    name = "spreadsheet"

    def parse(self, source: SurveySource, detected: DetectedFormat) -> ParsedTable:
        rows = source.sheet_rows
        header_index, data_start = detected.header_row_index, detected.data_start_row_index

        legacy = find_legacy_layout([[_cell_text(c) for c in row] for row in rows])
        if legacy:
            header_index, data_start, layout = legacy
            if header_index or data_start > 1:
                logger.info(f"{self.name}: report layout '{layout.name}', header on row {header_index}")
        return rows_from_grid(rows, header_index, data_start, self.name)


def _cell_text(cell: Any) -> str:
    return "" if cell is None else str(cell).strip()
