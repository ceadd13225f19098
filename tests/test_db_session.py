from sqlmodel import select

from crimewatch.db.session import _connect_args, get_session
from crimewatch.models.report import Report


def test_session_dependency_reaches_report_table():
    init = get_session()
    session = next(init)
    assert isinstance(session.exec(select(Report)).all(), list)
    init.close()


def test_sqlite_engines_allow_cross_thread_sessions():
    assert _connect_args("sqlite:///./crimewatch.db") == {"check_same_thread": False}
    assert _connect_args("mysql+pymysql://root@localhost/crimewatch") == {}
