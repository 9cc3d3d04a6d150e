"""
Format sniffing for uploaded survey files.

Classifies raw bytes as delimited text, a legacy report export (header block
above the column labels, units/ruler lines between labels and data), a LAS
file or a spreadsheet, and works out where the header and first data row
sit and which delimiter separates the columns.
"""
import csv
import logging
import re
from collections import Counter
from dataclasses import dataclass
from pathlib import PurePath
from typing import List, Optional, Sequence, Tuple

from app.core.config import settings
from app.schemas.surveys import DetectedFormat, FormatKind
from app.services.surveys.header_mapper import is_survey_header
from app.utils.error_handling import UnsupportedFormatError

logger = logging.getLogger(__name__)

TEXT_EXTENSIONS = ("csv", "txt", "las")
SPREADSHEET_EXTENSIONS = ("xlsx", "xls")
SUPPORTED_EXTENSIONS = TEXT_EXTENSIONS + SPREADSHEET_EXTENSIONS

COMMA = ","
TAB = "\t"
SEMICOLON = ";"
MULTI_SPACE = "  "
WHITESPACE = " "

# Order matters: ties go to the earlier candidate
DELIMITER_CANDIDATES = (COMMA, TAB, SEMICOLON, MULTI_SPACE, WHITESPACE)

_MULTI_SPACE_SPLIT = re.compile(r"\s{2,}|\t")
_RULER = re.compile(r"^[\s=\-_*#|+]+$")
_NUMBER = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
# A unit annotation standing alone after a space: "(ft)", "[deg]", "{°}"
_UNIT_TOKEN = re.compile(r"^[\(\[\{][^\)\]\}]*[\)\]\}]$")


@dataclass(frozen=True)
class LegacyLayout:
    name: str
    data_offset: int
    description: str


# Checked in order; the first offset that lands on a data line wins.
LEGACY_LAYOUTS: Tuple[LegacyLayout, ...] = (
    LegacyLayout("report_header", 1, "column labels directly above the data"),
    LegacyLayout("report_with_units", 2, "column labels, units line, data"),
    LegacyLayout("report_with_units_and_ruler", 3, "column labels, units line, ruler, data"),
)


def extension_of(filename: str) -> str:
    suffix = PurePath(filename or "").suffix
    if not suffix and filename and "." not in filename:
        # A bare extension such as "csv"
        return filename.lower()
    return suffix.lstrip(".").lower()


def decode_text(content: bytes) -> str:
    if isinstance(content, str):
        return content
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        return content.decode("latin-1")


def merge_unit_tokens(tokens: Sequence[str]) -> List[str]:
    """
    Attach each standalone unit token to the label before it.

    Splitting "MD (ft) Inc (deg)" on single spaces gives four tokens for two
    columns; this turns them back into "MD (ft)" and "Inc (deg)". A run of
    units with no label, such as a units line, is left as it is.
    """
    merged: List[str] = []
    for token in tokens:
        if merged and _UNIT_TOKEN.match(token) and not _UNIT_TOKEN.match(merged[-1]):
            merged[-1] = f"{merged[-1]} {token}"
        else:
            merged.append(token)
    return merged


def split_line(line: str, delimiter: Optional[str]) -> List[str]:
    """Split one text line into stripped cells."""
    if delimiter is None or delimiter == WHITESPACE:
        return merge_unit_tokens(line.split())
    if delimiter == MULTI_SPACE:
        return [cell for cell in _MULTI_SPACE_SPLIT.split(line.strip()) if cell]
    try:
        cells = next(csv.reader([line], delimiter=delimiter))
    except (csv.Error, StopIteration):
        cells = line.split(delimiter)
    return [cell.strip() for cell in cells]


def is_numeric_cell(cell) -> bool:
    if isinstance(cell, bool):
        return False
    if isinstance(cell, (int, float)):
        return True
    if cell is None:
        return False
    return bool(_NUMBER.match(str(cell).strip().replace(",", "")))


def is_ruler_line(line: str) -> bool:
    return bool(line.strip()) and bool(_RULER.match(line))


def is_data_row(cells: Sequence, expected_columns: Optional[int] = None) -> bool:
    """At least three numeric cells, numeric cells in the majority, and the expected width."""
    if expected_columns is not None and len(cells) != expected_columns:
        return False
    numeric = sum(1 for cell in cells if is_numeric_cell(cell))
    return numeric >= 3 and numeric * 2 >= len(cells)


def infer_delimiter(lines: Sequence[str], sample_size: Optional[int] = None) -> str:
    """
    Pick the delimiter giving the most consistent column count.

    Each candidate scores ``modal column count * number of lines with that
    count`` over the first non-blank lines; single-column splits score zero.
    """
    sample_size = sample_size or settings.DELIMITER_SAMPLE_LINES
    sample = [line for line in lines if line.strip() and not is_ruler_line(line)][:sample_size]
    best, best_score = COMMA, 0
    for candidate in DELIMITER_CANDIDATES:
        counts = Counter(len(split_line(line, candidate)) for line in sample)
        if not counts:
            continue
        columns, frequency = max(counts.items(), key=lambda item: (item[1], item[0]))
        score = columns * frequency if columns > 1 else 0
        if score > best_score:
            best, best_score = candidate, score
    return best


def find_header_row(rows: Sequence[Sequence], scan_lines: Optional[int] = None) -> Optional[int]:
    """Index of the first row naming depth, inclination and azimuth columns."""
    scan_lines = scan_lines or settings.HEADER_SCAN_LINES
    for index, cells in enumerate(rows[:scan_lines]):
        if cells and is_survey_header(cells):
            return index
    return None


def find_legacy_layout(
    rows: Sequence[Sequence], scan_lines: Optional[int] = None
) -> Optional[Tuple[int, int, LegacyLayout]]:
    """
    Locate a header row and the fixed-offset data row that follows it.

    Returns ``(header_row_index, data_start_row_index, layout)`` or None.
    """
    header_index = find_header_row(rows, scan_lines)
    if header_index is None:
        return None
    expected = len(rows[header_index])
    for layout in LEGACY_LAYOUTS:
        data_index = header_index + layout.data_offset
        if data_index >= len(rows):
            break
        if is_data_row(rows[data_index], expected):
            return header_index, data_index, layout
    return None


def looks_like_las(lines: Sequence[str]) -> bool:
    return any(line.strip().upper().startswith(("~V", "~A")) for line in lines)


def _las_format(lines: Sequence[str], extension: str) -> DetectedFormat:
    curve_index = next((i for i, line in enumerate(lines) if line.strip().upper().startswith("~C")), 0)
    data_index = next(
        (i + 1 for i, line in enumerate(lines) if line.strip().upper().startswith("~A")), curve_index + 1
    )
    return DetectedFormat(
        format_kind=FormatKind.LAS,
        extension=extension,
        header_row_index=curve_index,
        data_start_row_index=data_index,
        delimiter=WHITESPACE,
    )


def sniff_text(text: str, extension: str, scan_lines: Optional[int] = None,
               sample_lines: Optional[int] = None) -> Optional[DetectedFormat]:
    lines = text.splitlines()
    if not any(line.strip() for line in lines):
        return None

    if extension == "las" and looks_like_las(lines):
        return _las_format(lines, extension)

    delimiter = infer_delimiter(lines, sample_lines)
    rows = [split_line(line, delimiter) for line in lines]
    legacy = find_legacy_layout(rows, scan_lines)
    if legacy:
        header_index, data_index, layout = legacy
        if header_index > 0 or data_index > 1:
            logger.info(
                f"Legacy layout '{layout.name}' detected: header line {header_index}, "
                f"data from line {data_index}"
            )
            return DetectedFormat(
                format_kind=FormatKind.LEGACY,
                extension=extension,
                header_row_index=header_index,
                data_start_row_index=data_index,
                delimiter=delimiter,
                layout_name=layout.name,
            )

    header_index = find_header_row(rows, scan_lines) or 0
    return DetectedFormat(
        format_kind=FormatKind.DELIMITED,
        extension=extension,
        header_row_index=header_index,
        data_start_row_index=header_index + 1,
        delimiter=delimiter,
    )


def sniff_format(content: bytes, filename: str, scan_lines: Optional[int] = None,
                 sample_lines: Optional[int] = None) -> Optional[DetectedFormat]:
    """
    Classify an uploaded file.

    Args:
        content: Raw file bytes
        filename: File name (or bare extension) used for the extension check

    Returns:
        The detected format, or None when a text file holds no content at all

    Raises:
        UnsupportedFormatError: If the extension is not csv, txt, las, xlsx or xls
    """
    extension = extension_of(filename)
    if extension not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFormatError(
            f"Unsupported file format '.{extension}'. Upload a CSV, TXT, LAS, XLSX or XLS file.",
            details={"filename": filename, "supported": list(SUPPORTED_EXTENSIONS)},
        )

    if extension in SPREADSHEET_EXTENSIONS:
        return DetectedFormat(
            format_kind=FormatKind.SPREADSHEET,
            extension=extension,
            header_row_index=0,
            data_start_row_index=1,
        )

    detected = sniff_text(decode_text(content), extension, scan_lines, sample_lines)
    if detected:
        logger.info(
            f"Sniffed {filename}: kind={detected.format_kind.value}, "
            f"header={detected.header_row_index}, data={detected.data_start_row_index}, "
            f"delimiter={detected.delimiter!r}"
        )
    return detected
