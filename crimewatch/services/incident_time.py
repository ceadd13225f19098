from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import Optional

from crimewatch.core.errors import ValidationError

TIME_PATTERN = re.compile(r'^([01]\d|2[0-3]):[0-5]\d$')
DATE_FORMATS = ('%d/%m/%Y', '%Y-%m-%d')


def parse_incident_date(value: str) -> date:
    raw = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(raw, fmt).date()
        except ValueError:
            continue
    raise ValidationError(f"Invalid incident_date: {value!r} (expected DD/MM/YYYY or YYYY-MM-DD)")


def parse_incident_time(value: str) -> str:
    if not TIME_PATTERN.fullmatch(value):
        raise ValidationError('incident_time must be in HH:MM format')
    return value


def parse_incident_datetime(value: str) -> datetime:
    raw = value.strip()
    if raw.endswith('Z'):
        raw = raw[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError as exc:
        raise ValidationError(f"Invalid incident_datetime: {value!r}") from exc
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed.replace(second=0, microsecond=0)


def combine(incident_date: date, incident_time: str) -> datetime:
    hours, minutes = incident_time.split(':')
    return datetime(incident_date.year, incident_date.month, incident_date.day, int(hours), int(minutes))


def reconcile_incident_time(
    incident_date: Optional[str],
    incident_time: Optional[str],
    incident_datetime: Optional[str],
) -> tuple[date, str, datetime]:
    """Return a consistent ``(date, 'HH:MM', datetime)`` triple.

    Date and time win when both are present; the combined timestamp is then
    derived, and a supplied ``incident_datetime`` must agree with it. When
    only the timestamp is given, date and time are split out of it. Any
    field the caller did supply has to match what was derived.
    """
    parsed_date = parse_incident_date(incident_date) if incident_date else None
    parsed_time = parse_incident_time(incident_time) if incident_time else None
    parsed_dt = parse_incident_datetime(incident_datetime) if incident_datetime else None

    if parsed_date is not None and parsed_time is not None:
        derived = combine(parsed_date, parsed_time)
        if parsed_dt is not None and parsed_dt != derived:
            raise ValidationError('incident_datetime does not match incident_date and incident_time')
        return parsed_date, parsed_time, derived

    if parsed_dt is None:
        raise ValidationError('incident_date and incident_time are required')

    derived_date = parsed_dt.date()
    derived_time = parsed_dt.strftime('%H:%M')
    if parsed_date is not None and parsed_date != derived_date:
        raise ValidationError('incident_date does not match incident_datetime')
    if parsed_time is not None and parsed_time != derived_time:
        raise ValidationError('incident_time does not match incident_datetime')
    return derived_date, derived_time, parsed_dt
