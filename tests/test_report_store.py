import re
from datetime import date, datetime

import pytest
from sqlalchemy.exc import OperationalError

from crimewatch.core.errors import NotFoundError, ServiceUnavailableError, ValidationError
from crimewatch.models.enums import CrimeType, ReportStatus
from crimewatch.models.report import Report
from crimewatch.services import report_store


def _record(**overrides) -> Report:
    values = dict(
        tracking_id='',
        title='Bike stolen',
        description='Chain cut outside the station',
        crime_type=CrimeType.THEFT,
        location='Station Rd, Andheri, Mumbai, 400058',
        latitude=19.1,
        longitude=72.85,
        incident_date=date(2024, 12, 25),
        incident_time='14:30',
        incident_datetime=datetime(2024, 12, 25, 14, 30),
    )
    values.update(overrides)
    return Report(**values)


def test_create_assigns_unique_hex_tracking_ids(db_session):
    first = report_store.create_report(db_session, _record())
    second = report_store.create_report(db_session, _record())
    for record in (first, second):
        assert re.fullmatch(r'[a-f0-9]{16}', record.tracking_id)
    assert first.tracking_id != second.tracking_id
    assert first.status == ReportStatus.PENDING


def test_incident_fields_read_back_from_store(db_session):
    created = report_store.create_report(db_session, _record())
    db_session.expire_all()

    stored = report_store.find_by_tracking_id(db_session, created.tracking_id)
    assert stored.incident_date == date(2024, 12, 25)
    assert stored.incident_time == '14:30'
    assert stored.incident_datetime == datetime(2024, 12, 25, 14, 30)
    assert stored.incident_datetime.tzinfo is None


def test_create_retries_on_tracking_id_collision(db_session, monkeypatch):
    existing = report_store.create_report(db_session, _record())
    candidates = iter([existing.tracking_id, 'abcdef0123456789'])
    monkeypatch.setattr(report_store, 'new_tracking_id', lambda: next(candidates))

    created = report_store.create_report(db_session, _record())
    assert created.tracking_id == 'abcdef0123456789'


def test_create_gives_up_after_repeated_collisions(db_session, monkeypatch):
    existing = report_store.create_report(db_session, _record())
    monkeypatch.setattr(report_store, 'new_tracking_id', lambda: existing.tracking_id)
    with pytest.raises(ServiceUnavailableError):
        report_store.create_report(db_session, _record())


def test_list_orders_by_updated_at_and_counts(db_session):
    first = report_store.create_report(db_session, _record(title='first'))
    report_store.create_report(db_session, _record(title='second'))
    report_store.create_report(db_session, _record(title='third'))
    report_store.update_report(db_session, first.id, {'title': 'first, edited'})

    records, total = report_store.list_reports(db_session, page=1, page_size=2)
    assert total == 3
    assert [record.title for record in records] == ['first, edited', 'third']

    records, total = report_store.list_reports(db_session, page=2, page_size=2)
    assert total == 3
    assert [record.title for record in records] == ['second']


def test_list_by_owner(db_session):
    report_store.create_report(db_session, _record(reporter_id='user-1'))
    report_store.create_report(db_session, _record(reporter_id='user-2'))
    records, total = report_store.list_reports_by_owner(db_session, 'user-1', 1, 20)
    assert total == 1
    assert records[0].reporter_id == 'user-1'


def test_list_rejects_bad_page(db_session):
    with pytest.raises(ValidationError):
        report_store.list_reports(db_session, page=0, page_size=20)


def test_update_stamps_updated_at_and_keeps_tracking_id(db_session):
    record = report_store.create_report(db_session, _record())
    tracking_id = record.tracking_id
    before = record.updated_at

    updated = report_store.update_report(db_session, record.id, {'action_details': 'CCTV requested'})
    assert updated.action_details == 'CCTV requested'
    assert updated.tracking_id == tracking_id
    assert updated.updated_at >= before

    with pytest.raises(ValidationError):
        report_store.update_report(db_session, record.id, {'tracking_id': '0' * 16})


def test_update_and_delete_missing_report(db_session):
    with pytest.raises(NotFoundError):
        report_store.update_report(db_session, 'missing', {'title': 'x'})
    with pytest.raises(NotFoundError):
        report_store.delete_report(db_session, 'missing')


def test_delete_twice_is_not_found(db_session):
    record = report_store.create_report(db_session, _record())
    report_store.delete_report(db_session, record.id)
    assert report_store.get_report(db_session, record.id) is None
    with pytest.raises(NotFoundError):
        report_store.delete_report(db_session, record.id)


def test_store_failure_is_service_unavailable(db_session, monkeypatch):
    def broken(*args, **kwargs):
        raise OperationalError('SELECT 1', {}, Exception('database is down'))

    monkeypatch.setattr(db_session, 'exec', broken)
    with pytest.raises(ServiceUnavailableError):
        report_store.list_reports(db_session, 1, 20)
    with pytest.raises(ServiceUnavailableError):
        report_store.get_report(db_session, 'any')
