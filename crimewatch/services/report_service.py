from typing import Any, Optional
from fastapi import HTTPException, status
from loguru import logger
from sqlmodel import Session
from crimewatch.models.enums import ReportStatus
from crimewatch.models.report import Report
from crimewatch.models.user import User
from crimewatch.schemas.report import ReportCreate, ReportUpdate
from crimewatch.services import report_store
from crimewatch.services.auth_service import is_admin
from crimewatch.services.incident_time import reconcile_incident_time
from crimewatch.services.report_query import get_report, serialize_images
from crimewatch.services.status_workflow import transition

TEMPORAL_FIELDS = ('incident_date', 'incident_time', 'incident_datetime')


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def create_report(session: Session, payload: ReportCreate, user: Optional[User] = None) -> Report:
    incident_date, incident_time, incident_datetime = reconcile_incident_time(
        payload.incident_date,
        payload.incident_time,
        payload.incident_datetime,
    )
    record = Report(
        tracking_id='',
        title=payload.title,
        description=payload.description,
        crime_type=payload.crime_type,
        location=payload.location.strip(),
        latitude=payload.geo_point.latitude if payload.geo_point else None,
        longitude=payload.geo_point.longitude if payload.geo_point else None,
        is_anonymous=payload.is_anonymous,
        reporter_id=user.id if user else None,
        reporter_name=None if payload.is_anonymous else _clean(payload.reporter_name) or (user.name if user else None),
        reporter_contact=None if payload.is_anonymous else _clean(payload.reporter_contact),
        incident_date=incident_date,
        incident_time=incident_time,
        incident_datetime=incident_datetime,
        status=ReportStatus.PENDING,
        images=serialize_images(payload.images),
    )
    record = report_store.create_report(session, record)
    logger.info(
        'report.created',
        report_id=record.id,
        tracking_id=record.tracking_id,
        anonymous=record.is_anonymous,
    )
    return record


def _ensure_can_edit(record: Report, user: User, data: dict[str, Any]) -> None:
    if is_admin(user):
        return
    if record.reporter_id is None or record.reporter_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail='Not allowed')
    if record.status != ReportStatus.PENDING:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail='Report can no longer be edited once review has started',
        )
    if 'action_details' in data:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail='Only admins can set action details')


def update_report(session: Session, report_id: str, payload: ReportUpdate, user: User) -> Report:
    record = get_report(session, report_id)
    data = payload.model_dump(exclude_unset=True)
    _ensure_can_edit(record, user, data)

    fields: dict[str, Any] = {}
    if any(key in data for key in TEMPORAL_FIELDS):
        if data.get('incident_datetime'):
            # stored date/time are replaced, so only the patched parts must agree
            merged = (data.get('incident_date'), data.get('incident_time'), data['incident_datetime'])
        else:
            merged = (
                data.get('incident_date') or record.incident_date.isoformat(),
                data.get('incident_time') or record.incident_time,
                None,
            )
        incident_date, incident_time, incident_datetime = reconcile_incident_time(*merged)
        fields.update(
            incident_date=incident_date,
            incident_time=incident_time,
            incident_datetime=incident_datetime,
        )
    if 'geo_point' in data:
        point = payload.geo_point
        fields['latitude'] = point.latitude if point else None
        fields['longitude'] = point.longitude if point else None
    if 'images' in data:
        fields['images'] = serialize_images(payload.images)
    for key in ('title', 'description', 'crime_type', 'location', 'action_details'):
        if key in data and (data[key] is not None or key == 'action_details'):
            fields[key] = data[key]

    record = report_store.update_report(session, record.id, fields)
    logger.info('report.updated', report_id=record.id, fields=sorted(fields))
    return record


def update_report_status(
    session: Session,
    report_id: str,
    new_status: ReportStatus,
    action_details: Optional[str] = None,
) -> Report:
    record = get_report(session, report_id)
    previous = record.status
    fields: dict[str, Any] = {'status': transition(previous, new_status)}
    if action_details is not None:
        fields['action_details'] = action_details
    record = report_store.update_report(session, report_id, fields)
    logger.info(
        'report.status_changed',
        report_id=record.id,
        from_status=ReportStatus(previous).value,
        to_status=record.status.value,
    )
    return record


def delete_report(session: Session, report_id: str, user: User) -> None:
    record = get_report(session, report_id)
    if not is_admin(user) and (record.reporter_id is None or record.reporter_id != user.id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail='Not allowed')
    report_store.delete_report(session, report_id)
    logger.info('report.deleted', report_id=report_id, by=user.id)
