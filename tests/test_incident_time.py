from datetime import date, datetime

import pytest

from crimewatch.core.errors import ValidationError
from crimewatch.services.incident_time import reconcile_incident_time


def test_date_and_time_derive_datetime():
    incident_date, incident_time, incident_datetime = reconcile_incident_time('25/12/2024', '14:30', None)
    assert incident_date == date(2024, 12, 25)
    assert incident_time == '14:30'
    assert incident_datetime == datetime(2024, 12, 25, 14, 30)
    assert incident_datetime.isoformat() == '2024-12-25T14:30:00'


def test_datetime_alone_splits_back_into_date_and_time():
    assert reconcile_incident_time(None, None, '2024-12-25T14:30:00') == (
        date(2024, 12, 25),
        '14:30',
        datetime(2024, 12, 25, 14, 30),
    )


def test_iso_date_is_accepted():
    assert reconcile_incident_time('2024-12-25', '09:05', None)[2] == datetime(2024, 12, 25, 9, 5)


def test_aware_datetime_is_normalised_to_utc():
    _, incident_time, incident_datetime = reconcile_incident_time(None, None, '2024-12-25T20:00:45+05:30')
    assert incident_time == '14:30'
    assert incident_datetime == datetime(2024, 12, 25, 14, 30)


def test_missing_everything_is_rejected():
    with pytest.raises(ValidationError) as exc:
        reconcile_incident_time(None, '14:30', None)
    assert exc.value.detail == 'incident_date and incident_time are required'


@pytest.mark.parametrize('value', ['2:30', '24:00', '14:60', '14:30:00', 'noon', ' 14:30 ', '14:30\n'])
def test_time_must_be_strict_hh_mm(value):
    with pytest.raises(ValidationError):
        reconcile_incident_time('25/12/2024', value, None)


def test_mismatched_datetime_is_rejected():
    with pytest.raises(ValidationError):
        reconcile_incident_time('25/12/2024', '14:30', '2024-12-25T15:30:00')


def test_invalid_date_is_rejected():
    with pytest.raises(ValidationError):
        reconcile_incident_time('31/02/2024', '14:30', None)
