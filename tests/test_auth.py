from uuid import uuid4
from fastapi.testclient import TestClient
from crimewatch.db.init_db import init_db
from crimewatch.main import app


def test_register_login_me_logout():
    init_db(drop_all=True)
    with TestClient(app) as client:
        email = f"{uuid4()}@b.com"
        r = client.post('/api/v1/auth/register', json={'email': email, 'password': 'secret123', 'name': 'Ravi'})
        assert r.status_code == 201
        assert r.json()['user']['role'] == 'user'
        assert 'token' in r.cookies

        me = client.get('/api/v1/auth/me')
        assert me.json()['user']['email'] == email

        client.post('/api/v1/auth/logout')
        client.cookies.clear()
        assert client.get('/api/v1/auth/me').json() == {'user': None}

        login = client.post('/api/v1/auth/login', json={'email': email, 'password': 'secret123'})
        assert login.status_code == 200
        assert login.json()['user']['name'] == 'Ravi'
        assert client.get('/api/v1/auth/me').json()['user']['email'] == email


def test_register_rejects_duplicate_email():
    init_db(drop_all=True)
    with TestClient(app) as client:
        payload = {'email': 'dup@b.com', 'password': 'secret123', 'name': 'Dup'}
        assert client.post('/api/v1/auth/register', json=payload).status_code == 201
        again = client.post('/api/v1/auth/register', json=payload)
        assert again.status_code == 409


def test_login_errors():
    init_db(drop_all=True)
    with TestClient(app) as client:
        missing = client.post('/api/v1/auth/login', json={'email': 'missing@b.com', 'password': 'secret123'})
        assert missing.status_code == 404

        email = f"{uuid4()}@b.com"
        client.post('/api/v1/auth/register', json={'email': email, 'password': 'secret123', 'name': 'X'})
        wrong = client.post('/api/v1/auth/login', json={'email': email, 'password': 'wrongpass'})
        assert wrong.status_code == 401
        assert wrong.json()['detail'] == 'Invalid credentials'

        not_admin = client.post(
            '/api/v1/auth/login',
            json={'email': email, 'password': 'secret123', 'is_admin_login': True},
        )
        assert not_admin.status_code == 403


def test_invalid_cookie_is_treated_as_anonymous():
    init_db(drop_all=True)
    with TestClient(app) as client:
        client.cookies.set('token', 'not-a-jwt')
        assert client.get('/api/v1/auth/me').json() == {'user': None}
        assert client.get('/api/v1/reports/mine').status_code == 401
