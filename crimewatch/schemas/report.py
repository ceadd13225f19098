from typing import Optional
from datetime import date, datetime
from pydantic import BaseModel, Field, field_validator
from crimewatch.models.enums import CrimeType, ReportStatus


class GeoPoint(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class ReportImage(BaseModel):
    url: str
    thumbnail: Optional[str] = None


class ReportCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str
    crime_type: CrimeType
    location: str = ''
    geo_point: Optional[GeoPoint] = None
    incident_date: Optional[str] = None
    incident_time: Optional[str] = None
    incident_datetime: Optional[str] = None
    is_anonymous: bool = False
    reporter_name: Optional[str] = None
    reporter_contact: Optional[str] = None
    images: list[ReportImage] = Field(default_factory=list, max_length=3)

    @field_validator('title')
    @classmethod
    def strip_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError('title must not be blank')
        return value


class ReportUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    crime_type: Optional[CrimeType] = None
    location: Optional[str] = None
    geo_point: Optional[GeoPoint] = None
    incident_date: Optional[str] = None
    incident_time: Optional[str] = None
    incident_datetime: Optional[str] = None
    images: Optional[list[ReportImage]] = Field(default=None, max_length=3)
    action_details: Optional[str] = None


class ReportStatusUpdate(BaseModel):
    status: ReportStatus
    action_details: Optional[str] = None


class ReportOut(BaseModel):
    id: str
    tracking_id: str
    title: str
    description: str
    crime_type: CrimeType
    location: str
    geo_point: Optional[GeoPoint] = None
    is_anonymous: bool
    reporter_id: Optional[str] = None
    reporter_name: Optional[str] = None
    reporter_contact: Optional[str] = None
    incident_date: date
    incident_time: str
    incident_datetime: datetime
    status: ReportStatus
    action_details: Optional[str] = None
    images: list[ReportImage] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class ReportPage(BaseModel):
    reports: list[ReportOut]
    total: int
    page: int
    page_size: int
