import os
from uuid import uuid4

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.engine import make_url

DEFAULT_TEST_DB_URL = "sqlite:///./crimewatch_test.db"
TEST_DB_URL = os.getenv("TEST_DB_URL", DEFAULT_TEST_DB_URL)
os.environ["DB_URL"] = TEST_DB_URL
os.environ.setdefault("SECRET_KEY", "test-secret")

from fastapi.testclient import TestClient
from sqlmodel import Session

from crimewatch.core.config import settings
from crimewatch.db.init_db import init_db
from crimewatch.db.session import engine
from crimewatch.main import app
from crimewatch.services.user_service import ensure_admin_user

settings.DB_URL = TEST_DB_URL

PASSWORD = "secret123"


def _ensure_mysql_database(url: str) -> None:
    parsed_url = make_url(url)
    if not parsed_url.drivername.startswith("mysql"):
        return
    database = parsed_url.database
    if not database:
        raise RuntimeError("TEST_DB_URL must include a database name.")
    test_engine = create_engine(parsed_url, pool_pre_ping=True)
    try:
        with test_engine.connect() as connection:
            connection.execute(text("SELECT 1"))
            return
    except OperationalError as exc:
        if "Unknown database" not in str(exc):
            raise
    finally:
        test_engine.dispose()

    admin_url = os.getenv("TEST_DB_ADMIN_URL")
    if admin_url:
        admin_engine = create_engine(admin_url, pool_pre_ping=True)
    else:
        root_password = os.getenv("MYSQL_ROOT_PASSWORD", "")
        server_url = parsed_url.set(
            username="root" if root_password else parsed_url.username,
            password=root_password or parsed_url.password,
            database="mysql",
        )
        admin_engine = create_engine(server_url, pool_pre_ping=True)
    with admin_engine.connect() as connection:
        connection.execute(
            text(
                f"CREATE DATABASE IF NOT EXISTS `{database}` "
                "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
            )
        )
    admin_engine.dispose()


@pytest.fixture(autouse=True, scope="session")
def _configure_test_database():
    _ensure_mysql_database(TEST_DB_URL)
    init_db(drop_all=True)
    yield


@pytest.fixture
def db_session():
    init_db(drop_all=True)
    with Session(engine) as session:
        yield session


def register_client(name: str = "Citizen") -> TestClient:
    """A client holding the session cookie of a freshly registered user."""
    client = TestClient(app)
    email = f"{uuid4()}@b.com"
    response = client.post(
        "/api/v1/auth/register",
        json={"email": email, "password": PASSWORD, "name": name},
    )
    assert response.status_code == 201
    return client


def admin_client() -> TestClient:
    email = f"admin-{uuid4()}@b.com"
    with Session(engine) as session:
        ensure_admin_user(session, email, PASSWORD)
    client = TestClient(app)
    response = client.post(
        "/api/v1/auth/login",
        json={"email": email, "password": PASSWORD, "is_admin_login": True},
    )
    assert response.status_code == 200
    return client


def report_payload(**overrides) -> dict:
    payload = {
        "title": "Phone snatched",
        "description": "Two men on a bike grabbed my phone",
        "crime_type": "theft",
        "location": "Linking Rd, Bandra West, Mumbai, 400050",
        "geo_point": {"latitude": 19.0, "longitude": 72.8},
        "incident_date": "25/12/2024",
        "incident_time": "14:30",
        "is_anonymous": False,
        "reporter_name": "Asha",
        "reporter_contact": "asha@b.com",
    }
    payload.update(overrides)
    return payload
