import logging
from typing import Dict, List, Optional

from app.schemas.surveys import DetectedFormat, FormatKind, ParseAttempt
from app.services.surveys.parsers.base import ParsedTable, ParseStrategy, SurveySource
from app.services.surveys.parsers.delimited import DelimitedStrategy, GenericDelimitedStrategy
from app.services.surveys.parsers.las import LasStrategy
from app.services.surveys.parsers.positional import PositionalStrategy
from app.services.surveys.parsers.spreadsheet import SpreadsheetStrategy

logger = logging.getLogger(__name__)

PRIMARY_STRATEGIES: Dict[FormatKind, ParseStrategy] = {
    FormatKind.DELIMITED: DelimitedStrategy(),
    FormatKind.LEGACY: DelimitedStrategy(),
    FormatKind.LAS: LasStrategy(),
    FormatKind.SPREADSHEET: SpreadsheetStrategy(),
}

FALLBACK_STRATEGIES: List[ParseStrategy] = [GenericDelimitedStrategy(), PositionalStrategy()]


class ChainResult:
    """Outcome of running the strategy chain over one file."""

    def __init__(self, table: Optional[ParsedTable], attempts: List[ParseAttempt]):
        self.table = table
        self.attempts = attempts

    @property
    def rows(self):
        return self.table.rows if self.table else []

    @property
    def strategy(self) -> str:
        return self.table.strategy if self.table else "none"

    @property
    def headers(self):
        return self.table.headers if self.table else []


def strategies_for(detected: DetectedFormat) -> List[ParseStrategy]:
    return [PRIMARY_STRATEGIES[detected.format_kind], *FALLBACK_STRATEGIES]


def run_chain(source: SurveySource, detected: DetectedFormat) -> ChainResult:
    """
    Try each strategy in order and stop at the first that yields rows.

    When every strategy comes back empty the last table with recognized
    headers (if any) is returned so callers can still report what was seen.
    """
    attempts: List[ParseAttempt] = []
    fallback_table: Optional[ParsedTable] = None

    for strategy in strategies_for(detected):
        table, attempt = strategy.try_parse(source, detected)
        attempts.append(attempt)
        if table is None:
            continue
        if table.rows:
            logger.info(
                f"Parsed {source.filename} with '{strategy.name}' after {len(attempts)} attempt(s): "
                f"{len(table.rows)} rows"
            )
            return ChainResult(table, attempts)
        if fallback_table is None and any(h.canonical_field for h in table.headers):
            fallback_table = table

    logger.warning(f"No strategy produced rows for {source.filename} ({len(attempts)} attempts)")
    return ChainResult(fallback_table, attempts)
