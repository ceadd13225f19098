from collections import Counter
from typing import Iterable, Optional

from sqlmodel import Session

from crimewatch.models.enums import CrimeType
from crimewatch.models.report import Report
from crimewatch.schemas.stats import CountItem, ReportStats
from crimewatch.services import report_store
from crimewatch.services.status_workflow import PUBLIC_ANONYMOUS_STATUSES

TOP_CITIES = 10


def city_from_location(location: Optional[str]) -> Optional[str]:
    """Second-to-last comma separated part of an address, e.g. 'Mumbai' in
    '12 Hill Rd, Bandra, Mumbai, 400050'."""
    if not location:
        return None
    parts = [part.strip() for part in location.split(',')]
    if len(parts) < 2:
        return None
    return parts[-2] or None


def _items(counter: Counter, order=None) -> list[CountItem]:
    pairs = list(counter.items())
    if order is None:
        pairs.sort(key=lambda pair: (-pair[1], pair[0]))
    else:
        pairs.sort(key=order)
    return [CountItem(name=name, count=count) for name, count in pairs]


def compute_stats(reports: Iterable[Report]) -> ReportStats:
    by_type: Counter = Counter()
    by_city: Counter = Counter()
    by_month: Counter = Counter()
    by_hour: Counter = Counter()
    total = 0
    for report in reports:
        total += 1
        crime_type = report.crime_type.value if isinstance(report.crime_type, CrimeType) else str(report.crime_type)
        by_type[crime_type] += 1
        city = city_from_location(report.location)
        if city:
            by_city[city] += 1
        if report.incident_datetime:
            by_month[report.incident_datetime.strftime('%Y-%m')] += 1
        if report.incident_time:
            by_hour[f"{report.incident_time.split(':')[0].zfill(2)}:00"] += 1

    return ReportStats(
        total=total,
        by_crime_type=_items(by_type),
        by_city=_items(by_city)[:TOP_CITIES],
        by_month=_items(by_month, order=lambda pair: pair[0]),
        by_hour=_items(by_hour, order=lambda pair: pair[0]),
    )


def get_public_stats(session: Session) -> ReportStats:
    return compute_stats(report_store.list_reports_by_status(session, PUBLIC_ANONYMOUS_STATUSES))
