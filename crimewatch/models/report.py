from datetime import date, datetime
from typing import Optional

from sqlalchemy import DateTime, Text
from sqlmodel import Field, SQLModel
from crimewatch.models.base import IDModel, TimestampModel
from crimewatch.models.enums import CrimeType, ReportStatus, enum_column


class Report(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'reports'

    tracking_id: str = Field(max_length=16, index=True, unique=True)
    title: str
    description: str = Field(sa_type=Text)
    crime_type: CrimeType = Field(sa_column=enum_column(CrimeType, 'crime_type'))
    location: str = ''
    latitude: Optional[float] = Field(default=None, index=True)
    longitude: Optional[float] = Field(default=None, index=True)

    is_anonymous: bool = Field(default=False, index=True)
    reporter_id: Optional[str] = Field(default=None, index=True)
    reporter_name: Optional[str] = None
    reporter_contact: Optional[str] = None

    incident_date: date
    incident_time: str = Field(max_length=5)
    incident_datetime: datetime = Field(sa_type=DateTime(timezone=False), index=True)

    status: ReportStatus = Field(
        default=ReportStatus.PENDING,
        sa_column=enum_column(ReportStatus, 'report_status', index=True),
    )
    action_details: Optional[str] = Field(default=None, sa_type=Text)
    images: Optional[str] = Field(default=None, sa_type=Text)
