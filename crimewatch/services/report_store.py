from __future__ import annotations

import secrets
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Optional

from loguru import logger
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from crimewatch.core.config import settings
from crimewatch.core.errors import NotFoundError, ServiceUnavailableError, ValidationError
from crimewatch.models.base import utc_now
from crimewatch.models.enums import ReportStatus
from crimewatch.models.report import Report
from crimewatch.services.pagination import page_offset

if TYPE_CHECKING:
    from crimewatch.services.geo import BoundingBox

IMMUTABLE_FIELDS = frozenset({'id', 'tracking_id', 'created_at', 'updated_at'})


def new_tracking_id() -> str:
    return secrets.token_hex(8)


@contextmanager
def _guard(session: Session, operation: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        session.rollback()
        logger.warning('report_store.failed', operation=operation, error=str(exc))
        raise ServiceUnavailableError(f"Report store failed during {operation}") from exc


def _tracking_id_taken(session: Session, tracking_id: str) -> bool:
    return session.exec(select(Report.id).where(Report.tracking_id == tracking_id)).first() is not None


def create_report(session: Session, record: Report) -> Report:
    attempts = max(1, settings.TRACKING_ID_ATTEMPTS)
    with _guard(session, 'create'):
        for _ in range(attempts):
            candidate = new_tracking_id()
            if _tracking_id_taken(session, candidate):
                logger.warning('report_store.tracking_id_collision', tracking_id=candidate)
                continue
            record.tracking_id = candidate
            session.add(record)
            try:
                session.commit()
            except IntegrityError:
                # Lost a race for the same tracking id between check and insert.
                session.rollback()
                logger.warning('report_store.tracking_id_collision', tracking_id=candidate)
                continue
            session.refresh(record)
            return record
    raise ServiceUnavailableError('Could not allocate a unique tracking id')


def get_report(session: Session, report_id: str) -> Optional[Report]:
    with _guard(session, 'get'):
        return session.exec(select(Report).where(Report.id == report_id)).first()


def find_by_tracking_id(session: Session, tracking_id: str) -> Optional[Report]:
    with _guard(session, 'find_by_tracking_id'):
        return session.exec(select(Report).where(Report.tracking_id == tracking_id)).first()


def list_reports(
    session: Session,
    page: int,
    page_size: int,
    where: Any = None,
) -> tuple[list[Report], int]:
    offset = page_offset(page, page_size)
    statement = select(Report)
    count_statement = select(func.count()).select_from(Report)
    if where is not None:
        statement = statement.where(where)
        count_statement = count_statement.where(where)
    statement = statement.order_by(Report.updated_at.desc(), Report.id).offset(offset).limit(page_size)
    with _guard(session, 'list'):
        records = list(session.exec(statement).all())
        total = session.exec(count_statement).one()
    return records, int(total or 0)


def list_reports_by_owner(
    session: Session,
    owner_id: str,
    page: int,
    page_size: int,
) -> tuple[list[Report], int]:
    return list_reports(session, page, page_size, where=Report.reporter_id == owner_id)


def list_in_bounding_box(session: Session, box: BoundingBox, where: Any = None) -> list[Report]:
    statement = select(Report).where(
        Report.latitude.is_not(None),
        Report.longitude.is_not(None),
        Report.latitude.between(box.min_lat, box.max_lat),
        Report.longitude.between(box.min_lng, box.max_lng),
    )
    if where is not None:
        statement = statement.where(where)
    statement = statement.order_by(Report.updated_at.desc(), Report.id)
    with _guard(session, 'list_in_bounding_box'):
        return list(session.exec(statement).all())


def list_reports_by_status(session: Session, statuses: Iterable[ReportStatus]) -> list[Report]:
    statement = (
        select(Report)
        .where(Report.status.in_(list(statuses)))
        .order_by(Report.incident_datetime.asc())
    )
    with _guard(session, 'list_by_status'):
        return list(session.exec(statement).all())


def update_report(session: Session, report_id: str, fields: dict[str, Any]) -> Report:
    for key in fields:
        if key in IMMUTABLE_FIELDS:
            raise ValidationError(f"{key} cannot be changed")
        if key not in Report.model_fields:
            raise ValidationError(f"Unknown report field: {key}")
    with _guard(session, 'update'):
        record = session.exec(select(Report).where(Report.id == report_id)).first()
        if record is None:
            raise NotFoundError('Report not found')
        for key, value in fields.items():
            setattr(record, key, value)
        record.updated_at = utc_now()
        session.add(record)
        session.commit()
        session.refresh(record)
        return record


def delete_report(session: Session, report_id: str) -> None:
    with _guard(session, 'delete'):
        record = session.exec(select(Report).where(Report.id == report_id)).first()
        if record is None:
            raise NotFoundError('Report not found')
        session.delete(record)
        session.commit()
