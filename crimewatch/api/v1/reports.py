from typing import Annotated, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session
from crimewatch.core.config import settings
from crimewatch.db.session import get_session
from crimewatch.models.report import Report
from crimewatch.models.user import User
from crimewatch.schemas.report import ReportCreate, ReportOut, ReportPage, ReportStatusUpdate, ReportUpdate
from crimewatch.services import report_query, report_service
from crimewatch.services.auth_service import get_current_user, get_optional_user, require_admin

router = APIRouter(prefix='/reports', tags=['reports'])

PageParam = Annotated[int, Query(ge=1)]
PageSizeParam = Annotated[int, Query(ge=1, le=settings.MAX_PAGE_SIZE)]


def _to_page(records: list[Report], total: int, page: int, page_size: int, viewer: Optional[User]) -> ReportPage:
    return ReportPage(
        reports=[report_query.present_report(record, viewer) for record in records],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post('', response_model=ReportOut, status_code=status.HTTP_201_CREATED)
def create_report_endpoint(
    payload: ReportCreate,
    session: Session = Depends(get_session),
    user: Optional[User] = Depends(get_optional_user),
) -> ReportOut:
    record = report_service.create_report(session, payload, user)
    return report_query.present_report(record, user)


@router.get('/public', response_model=ReportPage)
def list_public_reports(
    page: PageParam = 1,
    page_size: PageSizeParam = settings.DEFAULT_PAGE_SIZE,
    session: Session = Depends(get_session),
    user: Optional[User] = Depends(get_optional_user),
) -> ReportPage:
    records, total = report_query.list_public(session, page, page_size)
    return _to_page(records, total, page, page_size, user)


@router.get('/all', response_model=ReportPage)
def list_all_reports(
    page: PageParam = 1,
    page_size: PageSizeParam = settings.DEFAULT_PAGE_SIZE,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
) -> ReportPage:
    records, total = report_query.list_all_for_admin(session, page, page_size)
    return _to_page(records, total, page, page_size, admin)


@router.get('/mine', response_model=ReportPage)
def list_my_reports(
    page: PageParam = 1,
    page_size: PageSizeParam = settings.DEFAULT_PAGE_SIZE,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> ReportPage:
    records, total = report_query.list_for_owner(session, user.id, page, page_size)
    return _to_page(records, total, page, page_size, user)


@router.get('/area', response_model=ReportPage)
def search_reports_by_area(
    lat: Optional[str] = None,
    lng: Optional[str] = None,
    radius: str = str(settings.DEFAULT_AREA_RADIUS_KM),
    page: PageParam = 1,
    page_size: PageSizeParam = settings.DEFAULT_PAGE_SIZE,
    session: Session = Depends(get_session),
    user: Optional[User] = Depends(get_optional_user),
) -> ReportPage:
    records, total = report_query.search_area(session, lat, lng, radius, page, page_size, viewer=user)
    return _to_page(records, total, page, page_size, user)


@router.get('/track/{tracking_id}', response_model=ReportOut)
def track_report(
    tracking_id: str,
    session: Session = Depends(get_session),
    user: Optional[User] = Depends(get_optional_user),
) -> ReportOut:
    record = report_query.find_by_tracking_id(session, tracking_id)
    return report_query.present_report(record, user)


@router.get('/{report_id}', response_model=ReportOut)
def get_report_endpoint(
    report_id: str,
    session: Session = Depends(get_session),
    user: Optional[User] = Depends(get_optional_user),
) -> ReportOut:
    record = report_query.get_report(session, report_id)
    return report_query.present_report(record, user)


@router.patch('/{report_id}', response_model=ReportOut)
def update_report_endpoint(
    report_id: str,
    payload: ReportUpdate,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> ReportOut:
    record = report_service.update_report(session, report_id, payload, user)
    return report_query.present_report(record, user)


@router.patch('/{report_id}/status', response_model=ReportOut)
def update_report_status_endpoint(
    report_id: str,
    payload: ReportStatusUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
) -> ReportOut:
    record = report_service.update_report_status(session, report_id, payload.status, payload.action_details)
    return report_query.present_report(record, admin)


@router.delete('/{report_id}')
def delete_report_endpoint(
    report_id: str,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> dict:
    report_service.delete_report(session, report_id, user)
    return {'status': 'ok'}
