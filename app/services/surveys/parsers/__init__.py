from app.services.surveys.parsers.base import ParsedTable, ParseStrategy, SurveySource
from app.services.surveys.parsers.chain import ChainResult, run_chain, strategies_for

__all__ = [
    "ChainResult",
    "ParsedTable",
    "ParseStrategy",
    "SurveySource",
    "run_chain",
    "strategies_for",
]
