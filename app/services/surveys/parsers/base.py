import io
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime, time
from functools import cached_property
from typing import Any, List, Optional, Sequence, Tuple

import polars as pl

from app.schemas.surveys import DetectedFormat, FieldMapping, ParseAttempt, RawField, RawRow
from app.services.surveys.header_mapper import build_field_mappings, has_survey_fields
from app.services.surveys.sniffer import (
    COMMA,
    SEMICOLON,
    SPREADSHEET_EXTENSIONS,
    TAB,
    decode_text,
    is_ruler_line,
    split_line,
)
from app.utils.error_handling import ParseFailure

logger = logging.getLogger(__name__)

MIN_ROW_CELLS = 3

# Delimiters polars can split; padded and whitespace layouts are split by hand
CSV_DELIMITERS = (COMMA, TAB, SEMICOLON)


def read_delimited_rows(lines: Sequence[str], delimiter: str) -> List[List[Any]]:
    """
    Split text lines into cells with polars, one row per line.

    Blank lines come back as empty rows so row indexes keep matching line
    numbers. Short rows are padded with None up to the widest row.
    """
    grid: List[List[Any]] = [[] for _ in lines]
    indexed = [index for index, line in enumerate(lines) if line.strip()]
    if not indexed:
        return grid

    width = max(len(split_line(lines[index], delimiter)) for index in indexed)
    body = "\n".join(lines[index] for index in indexed) + "\n"
    frame = pl.read_csv(
        io.BytesIO(body.encode("utf-8")),
        separator=delimiter,
        has_header=False,
        schema={f"column_{n + 1}": pl.String for n in range(width)},
        truncate_ragged_lines=True,
        raise_if_empty=False,
    )
    if frame.height != len(indexed):
        raise ParseFailure(
            f"Read {frame.height} rows from {len(indexed)} lines; quoted fields span lines",
            details={"delimiter": delimiter},
        )
    for index, row in zip(indexed, frame.rows()):
        grid[index] = [cell.strip() if isinstance(cell, str) else cell for cell in row]
    return grid


@dataclass
class SurveySource:
    """An uploaded file, decoded lazily into whatever shape a strategy needs."""
    filename: str
    extension: str
    content: bytes

    @property
    def is_spreadsheet(self) -> bool:
        return self.extension in SPREADSHEET_EXTENSIONS

    @cached_property
    def text(self) -> str:
        if self.is_spreadsheet:
            raise ParseFailure(f"{self.filename} is a spreadsheet, not text")
        return decode_text(self.content)

    @cached_property
    def lines(self) -> List[str]:
        return self.text.splitlines()

    @cached_property
    def sheet_rows(self) -> List[List[Any]]:
        # Imported here; the spreadsheet module builds on this one
        from app.services.surveys.parsers.spreadsheet import read_sheet_rows
        return read_sheet_rows(self.content)

    def grid(self, delimiter: Optional[str]) -> List[List[Any]]:
        """Rows of cells: the first sheet for spreadsheets, split lines for text."""
        if self.is_spreadsheet:
            return self.sheet_rows
        if delimiter in CSV_DELIMITERS:
            return read_delimited_rows(self.lines, delimiter)
        return [split_line(line, delimiter) for line in self.lines]


@dataclass
class ParsedTable:
    strategy: str
    rows: List[RawRow] = field(default_factory=list)
    headers: List[FieldMapping] = field(default_factory=list)


def to_raw_field(cell: Any) -> RawField:
    """Collapse a cell into a number, text, or None for missing."""
    if cell is None:
        return None
    if isinstance(cell, bool):
        return str(cell)
    if isinstance(cell, (int, float)):
        return cell
    if isinstance(cell, (datetime, date, time)):
        return cell.isoformat()
    text = str(cell).strip()
    return text or None


def is_blank_row(cells: Sequence[Any]) -> bool:
    return all(to_raw_field(cell) is None for cell in cells)


def _join_date_and_time(day: RawField, clock: RawField) -> RawField:
    if not isinstance(day, str) or not isinstance(clock, str):
        return day
    if day.endswith("T00:00:00"):
        day = day[: -len("T00:00:00")]
    return f"{day} {clock}"


def assign_cell(row: RawRow, canonical: str, value: RawField) -> None:
    """
    Store ``value`` under ``canonical`` unless an earlier column already filled it.

    Separate date and time columns both map to ``timestamp``; their cells
    are joined instead.
    """
    current = row.get(canonical)
    if current is None:
        row[canonical] = value
    elif canonical == "timestamp" and value is not None:
        row[canonical] = _join_date_and_time(current, value)


def rows_from_grid(
    grid: Sequence[Sequence[Any]],
    header_index: int,
    data_start: int,
    strategy: str,
) -> ParsedTable:
    """
    Zip data rows with the mapped header row.

    Blank rows, ruler rows and rows split into fewer than three cells are
    skipped. Empty cells stay in the row as None. Unmapped columns are
    ignored.
    """
    if header_index >= len(grid):
        raise ParseFailure(f"Header row {header_index} is beyond the end of the file", strategy)

    header_cells = list(grid[header_index])
    mappings = build_field_mappings(header_cells)
    fields = [m.canonical_field for m in mappings]
    table = ParsedTable(strategy=strategy, headers=mappings)
    if not has_survey_fields(fields):
        logger.info(f"{strategy}: no recognizable columns in header row {header_index}")
        return table

    for index in range(data_start, len(grid)):
        cells = list(grid[index])
        if is_blank_row(cells) or is_ruler_line(" ".join(str(c) for c in cells if c is not None)):
            continue
        if len(cells) < MIN_ROW_CELLS:
            logger.debug(f"{strategy}: skipping row {index}, only {len(cells)} cells")
            continue
        row: RawRow = {}
        for canonical, cell in zip(fields, cells):
            if canonical is not None:
                assign_cell(row, canonical, to_raw_field(cell))
        table.rows.append(row)
    return table


class ParseStrategy(ABC):
    """
    One way of turning a file into raw rows.

    Subclasses implement ``parse`` and may raise freely; ``try_parse`` is
    what the chain calls and it never raises.
    """
    name: str = "base"

    @abstractmethod
    def parse(self, source: SurveySource, detected: DetectedFormat) -> ParsedTable:
        """Read ``source`` into raw rows keyed by canonical field name."""

    def try_parse(
        self, source: SurveySource, detected: DetectedFormat
    ) -> Tuple[Optional[ParsedTable], ParseAttempt]:
        try:
            table = self.parse(source, detected)
        except ParseFailure as e:
            logger.warning(f"{self.name} could not parse {source.filename}: {e.message}")
            return None, ParseAttempt(strategy=self.name, succeeded=False, error=e.message)
        except Exception as e:
            failure = ParseFailure(f"{type(e).__name__}: {e}", self.name)
            logger.warning(f"{self.name} failed on {source.filename}: {failure.message}")
            return None, ParseAttempt(strategy=self.name, succeeded=False, error=failure.message)

        succeeded = bool(table.rows)
        logger.info(f"{self.name} produced {len(table.rows)} rows from {source.filename}")
        return table, ParseAttempt(strategy=self.name, succeeded=succeeded, rows=len(table.rows))
