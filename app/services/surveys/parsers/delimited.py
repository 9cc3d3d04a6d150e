import logging

from app.schemas.surveys import DetectedFormat
from app.services.surveys.header_mapper import count_mapped
from app.services.surveys.parsers.base import ParsedTable, ParseStrategy, SurveySource, rows_from_grid
from app.services.surveys.sniffer import infer_delimiter

logger = logging.getLogger(__name__)

GENERIC_HEADER_SCAN_ROWS = 10


class DelimitedStrategy(ParseStrategy):
    """Delimited text (and legacy report exports) using the sniffed layout as-is."""
    name = "delimited"

    def parse(self, source: SurveySource, detected: DetectedFormat) -> ParsedTable:
        grid = source.grid(detected.delimiter)
        return rows_from_grid(grid, detected.header_row_index, detected.data_start_row_index, self.name)


class GenericDelimitedStrategy(ParseStrategy):
    """
    Second opinion that ignores the sniffed layout.

    Re-infers the delimiter and takes the row with the most recognizable
    headers among the first ten as the header row. Works on sheet rows too.
    """
    name = "generic-delimited"

    def parse(self, source: SurveySource, detected: DetectedFormat) -> ParsedTable:
        delimiter = None if source.is_spreadsheet else infer_delimiter(source.lines)
        grid = source.grid(delimiter)

        best_index, best_count = 0, 0
        for index, cells in enumerate(grid[:GENERIC_HEADER_SCAN_ROWS]):
            matched = count_mapped(cells)
            if matched > best_count:
                best_index, best_count = index, matched

        logger.debug(f"{self.name}: header row {best_index} with {best_count} recognized columns")
        return rows_from_grid(grid, best_index, best_index + 1, self.name)
