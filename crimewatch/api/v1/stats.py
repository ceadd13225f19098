from fastapi import APIRouter, Depends
from sqlmodel import Session

from crimewatch.db.session import get_session
from crimewatch.schemas.stats import ReportStats
from crimewatch.services.stats_service import get_public_stats

router = APIRouter(prefix='/stats', tags=['stats'])


@router.get('', response_model=ReportStats)
def report_stats(session: Session = Depends(get_session)) -> ReportStats:
    return get_public_stats(session)
