from datetime import datetime, timezone
from typing import Optional
import uuid

from sqlalchemy import Column, DateTime, JSON
from sqlmodel import SQLModel, Field


class Well(SQLModel, table=True):
    __tablename__ = "wells"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    well_name: str = Field(max_length=255, index=True)
    rig_name: Optional[str] = Field(default=None, max_length=255)
    sensor_offset: Optional[float] = None
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )


class SurveyStation(SQLModel, table=True):
    """One stored survey record. Rows are appended by imports and replaced whole by edits."""
    __tablename__ = "survey_stations"

    id: str = Field(primary_key=True)
    well_id: Optional[str] = Field(default=None, foreign_key="wells.id", index=True)
    timestamp: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))
    bit_depth: float
    sensor_offset: Optional[float] = None
    measured_depth: float
    inclination: float
    azimuth: float
    tool_face: float
    b_total: float
    a_total: float
    dip: float
    tool_temp: float
    tvd: Optional[float] = None
    north_south: Optional[float] = None
    east_west: Optional[float] = None
    gamma: Optional[float] = None
    well_name: Optional[str] = Field(default=None, max_length=255)
    rig_name: Optional[str] = Field(default=None, max_length=255)
    quality_status: str = Field(max_length=16)
    quality_message: str = Field(max_length=255)
    quality_details: Optional[dict] = Field(default=None, sa_column=Column(JSON))
