# app/services/surveys/__init__.py
"""
Survey ingestion and directional analytics.

Pipeline: sniffer -> parsers (strategy chain) -> validator -> quality,
with analytics and projection operating on the resulting records.
"""
from app.services.surveys.pipeline import ingest_survey_file
from app.services.surveys.survey_service import SurveyService, survey_service

__all__ = ["SurveyService", "ingest_survey_file", "survey_service"]
