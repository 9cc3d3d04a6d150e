"""
Column header vocabulary for survey files.

Survey exports label their columns however the vendor pleases ("MD",
"Depth", "inc.", "AZI (deg)", "DEPT.FT"). Everything downstream works with
the canonical field names below; this module is the only place that knows
the synonyms. Extend ``HEADER_SYNONYMS`` rather than adding branches.
"""
import re
from typing import Any, Dict, Iterable, List, Optional

from app.schemas.surveys import FieldMapping

HEADER_SYNONYMS: Dict[str, tuple] = {
    "bitDepth": (
        "MD", "DEPTH", "BIT DEPTH", "MEASURED DEPTH", "DEPT", "MEAS DEPTH",
        "SD", "SURVEY DEPTH", "HOLE DEPTH",
    ),
    "measuredDepth": ("SENSOR DEPTH", "SENSOR MD"),
    "sensorOffset": ("SENSOR OFFSET", "OFFSET"),
    "inclination": ("INC", "INCLINATION", "INCL", "INC ANGLE", "ANGLE"),
    "azimuth": ("AZI", "AZM", "AZIMUTH", "AZ", "AZIM", "HEADING", "BEARING"),
    "toolFace": ("TF", "TOOL FACE", "GTF", "MTF"),
    "tvd": ("TVD", "TRUE VERTICAL DEPTH"),
    "northSouth": ("NS", "N/S", "NORTHING"),
    "eastWest": ("EW", "E/W", "EASTING"),
    "gamma": ("GAMMA", "GR", "GAMMA RAY"),
    "bTotal": ("B TOTAL", "BTOTAL", "BTOT", "TOTAL FIELD", "MAGNETIC FIELD"),
    "aTotal": ("A TOTAL", "ATOTAL", "ATOT", "G TOTAL", "TOTAL GRAVITY", "GRAVITY"),
    "dip": ("DIP", "DIP ANGLE", "MAGNETIC DIP"),
    "toolTemp": ("TEMP", "TOOL TEMP", "TEMPERATURE"),
    "timestamp": ("TIMESTAMP", "DATETIME", "DATE", "TIME", "SURVEY DATE", "SURVEY TIME"),
    "wellName": ("WELL", "WELL NAME"),
    "rigName": ("RIG", "RIG NAME"),
}

CANONICAL_FIELDS = tuple(HEADER_SYNONYMS)

DEPTH_FIELDS = ("bitDepth", "measuredDepth")
SURVEY_FIELDS = DEPTH_FIELDS + ("inclination", "azimuth")

# Trailing unit annotations: "AZI (deg)", "MD [ft]", "Inc {°}"
_BRACKETED_UNIT = re.compile(r"[\(\[\{][^\)\]\}]*[\)\]\}]")
# LAS curve mnemonics carry their unit after a dot: "DEPT.FT", "INC."
_LAS_UNIT = re.compile(r"^([^.\s]+)\.[^\s.]*$")
_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_header(header: Any) -> str:
    """Lowercase, unit-free, punctuation-free form of a header cell."""
    if header is None:
        return ""
    text = str(header).strip()
    text = _BRACKETED_UNIT.sub("", text).strip()
    match = _LAS_UNIT.match(text)
    if match:
        text = match.group(1)
    return _NON_ALNUM.sub("", text.lower())


def _build_index() -> Dict[str, str]:
    index: Dict[str, str] = {}
    for field, synonyms in HEADER_SYNONYMS.items():
        for synonym in synonyms:
            index.setdefault(normalize_header(synonym), field)
    # Canonical names last so a synonym keeps its documented meaning
    # ("Measured Depth" is a bit depth column, not the derived field).
    for field in HEADER_SYNONYMS:
        index.setdefault(normalize_header(field), field)
    return index


_INDEX = _build_index()


def map_header(header: Any) -> Optional[str]:
    """Canonical field for one header cell, or None when it is not recognized."""
    if header is None:
        return None
    raw = str(header).strip()
    if raw in HEADER_SYNONYMS:
        return raw
    key = normalize_header(raw)
    if not key:
        return None
    return _INDEX.get(key)


def map_headers(headers: Iterable[Any]) -> List[Optional[str]]:
    return [map_header(h) for h in headers]


def build_field_mappings(headers: Iterable[Any]) -> List[FieldMapping]:
    """Pair every original header with its canonical field, unmapped ones included."""
    mappings = []
    for header in headers:
        original = "" if header is None else str(header).strip()
        mappings.append(FieldMapping(original_header=original, canonical_field=map_header(header)))
    return mappings


def count_mapped(headers: Iterable[Any]) -> int:
    return sum(1 for field in map_headers(headers) if field is not None)


def is_survey_header(headers: Iterable[Any]) -> bool:
    """True when the cells name a depth, an inclination and an azimuth column."""
    fields = set(map_headers(headers))
    return bool(fields & set(DEPTH_FIELDS)) and "inclination" in fields and "azimuth" in fields


def has_survey_fields(fields: Iterable[Optional[str]]) -> bool:
    """True when at least one mapped column can carry a depth, inclination or azimuth."""
    return bool(set(fields) & set(SURVEY_FIELDS))
