"""Read side of the report service and the single home of visibility rules.

* public listings show every non-anonymous report, plus anonymous reports
  once an admin has verified or resolved them;
* the reporter identity of an anonymous report is only ever shown to admins.
"""
import json
from typing import Any, Optional

from sqlalchemy import or_
from sqlmodel import Session

from crimewatch.core.errors import NotFoundError
from crimewatch.models.report import Report
from crimewatch.models.user import User
from crimewatch.schemas.report import GeoPoint, ReportImage, ReportOut
from crimewatch.services import geo, report_store
from crimewatch.services.auth_service import is_admin
from crimewatch.services.status_workflow import PUBLIC_ANONYMOUS_STATUSES


def serialize_images(images: Optional[list[ReportImage]]) -> Optional[str]:
    if not images:
        return None
    return json.dumps([image.model_dump() for image in images])


def deserialize_images(raw: Optional[str]) -> list[ReportImage]:
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        return []
    if not isinstance(value, list):
        return []
    images: list[ReportImage] = []
    for item in value:
        if isinstance(item, str):
            images.append(ReportImage(url=item))
        elif isinstance(item, dict) and item.get('url'):
            images.append(ReportImage(url=str(item['url']), thumbnail=item.get('thumbnail')))
    return images


def public_visibility_clause():
    return or_(
        Report.is_anonymous.is_(False),
        Report.status.in_(list(PUBLIC_ANONYMOUS_STATUSES)),
    )


def is_publicly_visible(record: Report) -> bool:
    return not record.is_anonymous or record.status in PUBLIC_ANONYMOUS_STATUSES


def present_report(record: Report, viewer: Optional[User] = None) -> ReportOut:
    point = geo.coerce_geo_point(record.latitude, record.longitude)
    hide_reporter = record.is_anonymous and not is_admin(viewer)
    return ReportOut(
        id=record.id,
        tracking_id=record.tracking_id,
        title=record.title,
        description=record.description,
        crime_type=record.crime_type,
        location=record.location,
        geo_point=GeoPoint(latitude=point[0], longitude=point[1]) if point else None,
        is_anonymous=record.is_anonymous,
        reporter_id=None if hide_reporter else record.reporter_id,
        reporter_name=None if hide_reporter else record.reporter_name,
        reporter_contact=None if hide_reporter else record.reporter_contact,
        incident_date=record.incident_date,
        incident_time=record.incident_time,
        incident_datetime=record.incident_datetime,
        status=record.status,
        action_details=record.action_details,
        images=deserialize_images(record.images),
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def list_public(session: Session, page: int, page_size: int) -> tuple[list[Report], int]:
    return report_store.list_reports(session, page, page_size, where=public_visibility_clause())


def list_all_for_admin(session: Session, page: int, page_size: int) -> tuple[list[Report], int]:
    return report_store.list_reports(session, page, page_size)


def list_for_owner(session: Session, owner_id: str, page: int, page_size: int) -> tuple[list[Report], int]:
    return report_store.list_reports_by_owner(session, owner_id, page, page_size)


def get_report(session: Session, report_id: str) -> Report:
    record = report_store.get_report(session, report_id)
    if record is None:
        raise NotFoundError('Report not found')
    return record


def find_by_tracking_id(session: Session, tracking_id: str) -> Report:
    # Falls back to the primary key so links built from either id resolve.
    value = tracking_id.strip()
    record = report_store.find_by_tracking_id(session, value.lower())
    if record is None:
        record = report_store.get_report(session, value)
    if record is None:
        raise NotFoundError('No report found for this tracking id')
    return record


def search_area(
    session: Session,
    lat: Any,
    lng: Any,
    radius_km: Any,
    page: int,
    page_size: int,
    viewer: Optional[User] = None,
) -> tuple[list[Report], int]:
    where = None if is_admin(viewer) else public_visibility_clause()
    return geo.search_within_radius(session, lat, lng, radius_km, page, page_size, where=where)
