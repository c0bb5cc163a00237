from datetime import date, time, timedelta

import pytest
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials
from fastapi.testclient import TestClient

from tutagora.auth.dependencies import get_gateway, security
from tutagora.gateway.client import GatewayClient
from tutagora.main import app

PASSWORD = 'secret-pass'
EVERY_MORNING = tuple((day, time(9, 0), time(12, 0)) for day in range(7))


@pytest.fixture
def client(session_factory):
    def override_get_gateway(
        credentials: HTTPAuthorizationCredentials | None = Depends(security),
    ) -> GatewayClient:
        return GatewayClient(session_factory, access_token=credentials.credentials if credentials else None)

    app.dependency_overrides[get_gateway] = override_get_gateway
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _login(client: TestClient, email: str) -> dict:
    response = client.post('/auth/login', json={'email': email, 'password': PASSWORD})
    assert response.status_code == 200
    return {'Authorization': f"Bearer {response.json()['access_token']}"}


def test_root_reports_status(client) -> None:
    assert client.get('/').json() == {'status': 'Tutagora API Running'}


def test_signup_and_login(client) -> None:
    payload = {'email': ' Wanjiru@Example.com ', 'password': PASSWORD, 'full_name': 'Wanjiru Kamau', 'role': 'student'}

    created = client.post('/auth/signup', json=payload)
    duplicate = client.post('/auth/signup', json=payload)
    bad_login = client.post('/auth/login', json={'email': 'wanjiru@example.com', 'password': 'nope'})
    login = client.post('/auth/login', json={'email': 'wanjiru@example.com', 'password': PASSWORD})

    assert created.status_code == 201
    assert created.json()['email'] == 'wanjiru@example.com'
    assert duplicate.status_code == 409
    assert bad_login.status_code == 401
    assert login.status_code == 200
    assert login.json()['profile']['full_name'] == 'Wanjiru Kamau'


def test_signup_rejects_unknown_role(client) -> None:
    response = client.post(
        '/auth/signup',
        json={'email': 'x@example.com', 'password': PASSWORD, 'full_name': 'X', 'role': 'admin'},
    )

    assert response.status_code == 422


def test_signup_rejects_short_password(client) -> None:
    response = client.post(
        '/auth/signup',
        json={'email': 'x@example.com', 'password': '123', 'full_name': 'X', 'role': 'student'},
    )

    assert response.status_code == 400
    assert response.json()['detail']['code'] == 'ValidationError'


@pytest.mark.parametrize('email', ['a@b..com', 'x@-bad-.com', 'not-an-email'])
def test_signup_rejects_malformed_email(client, email) -> None:
    response = client.post(
        '/auth/signup',
        json={'email': email, 'password': PASSWORD, 'full_name': 'X', 'role': 'student'},
    )

    assert response.status_code == 422


def test_me_requires_authentication(client) -> None:
    assert client.get('/auth/me').status_code == 401


def test_logout_revokes_token(client, make_student) -> None:
    make_student(email='wanjiru@example.com')
    headers = _login(client, 'wanjiru@example.com')

    assert client.get('/auth/me', headers=headers).json()['email'] == 'wanjiru@example.com'
    assert client.post('/auth/logout', headers=headers).status_code == 204
    assert client.get('/auth/me', headers=headers).status_code == 401


def test_list_tutors_filters_by_search(client, make_tutor) -> None:
    make_tutor('Amina Otieno', 'Math', rating=4.9)
    make_tutor('Brian Kiptoo', 'Physics', rating=4.7)

    everyone = client.get('/tutors').json()
    maths = client.get('/tutors', params={'search': 'math'}).json()
    brian = client.get('/tutors', params={'search': 'bri'}).json()

    assert [tutor['account']['full_name'] for tutor in everyone] == ['Amina Otieno', 'Brian Kiptoo']
    assert [tutor['account']['full_name'] for tutor in maths] == ['Amina Otieno']
    assert [tutor['account']['full_name'] for tutor in brian] == ['Brian Kiptoo']


def test_tutor_calendar_and_slots(client, make_tutor) -> None:
    tutor = make_tutor('Amina Otieno', 'Math', windows=((1, time(9, 0), time(12, 0)),))
    next_monday = date.today() + timedelta(days=(7 - date.today().weekday()) % 7)

    calendar = client.get(f"/tutors/{tutor['id']}/calendar").json()
    slots = client.get(f"/tutors/{tutor['id']}/slots", params={'date': next_monday.isoformat()}).json()

    assert len(calendar) == 7
    assert [day['enabled'] for day in calendar].count(True) == 1
    assert slots == {'date': next_monday.isoformat(), 'slots': ['09:00', '10:00', '11:00']}


def test_unknown_tutor_returns_404(client) -> None:
    assert client.get('/tutors/999').status_code == 404


def test_booking_flow(client, make_tutor, make_student) -> None:
    tutor = make_tutor('Amina Otieno', 'Math', windows=EVERY_MORNING)
    make_student(email='wanjiru@example.com')
    headers = _login(client, 'wanjiru@example.com')
    tomorrow = (date.today() + timedelta(days=1)).isoformat()
    payload = {'tutor_id': tutor['id'], 'date': tomorrow, 'time': '09:00'}

    created = client.post('/bookings', json=payload, headers=headers)
    repeated = client.post('/bookings', json=payload, headers=headers)
    off_slot = client.post('/bookings', json={**payload, 'time': '15:00'}, headers=headers)
    listed = client.get('/bookings', headers=headers)
    summary = client.get('/bookings/summary', headers=headers)

    assert created.status_code == 201
    body = created.json()
    assert body['booking']['status'] == 'confirmed'
    assert body['booking']['subject'] == 'Math'
    assert body['booking']['tutor']['account']['full_name'] == 'Amina Otieno'
    assert [row['id'] for row in body['bookings']] == [body['booking']['id']]
    assert repeated.status_code == 409
    assert off_slot.status_code == 400
    assert [row['lesson_date'] for row in listed.json()] == [tomorrow]
    assert summary.json()['upcoming_count'] == 1
    assert summary.json()['earnings'] is None


def test_bookings_require_authentication(client) -> None:
    assert client.get('/bookings').status_code == 401


def test_tutor_dashboard_and_profile_edit(client, make_tutor, make_student) -> None:
    tutor = make_tutor('Amina Otieno', 'Math', windows=EVERY_MORNING, hourly_rate=1500)
    make_student(email='wanjiru@example.com')
    student_headers = _login(client, 'wanjiru@example.com')
    tomorrow = (date.today() + timedelta(days=1)).isoformat()
    client.post('/bookings', json={'tutor_id': tutor['id'], 'date': tomorrow, 'time': '10:00'}, headers=student_headers)

    tutor_headers = _login(client, 'amina.otieno@example.com')
    bookings = client.get('/bookings', headers=tutor_headers).json()
    summary = client.get('/bookings/summary', headers=tutor_headers).json()
    edited = client.patch('/tutors/me', json={'headline': 'Calculus coach'}, headers=tutor_headers)
    negative = client.patch('/tutors/me', json={'hourly_rate': -1}, headers=tutor_headers)
    by_student = client.patch('/tutors/me', json={'headline': 'Nope'}, headers=student_headers)

    assert [row['student']['full_name'] for row in bookings] == ['Wanjiru Kamau']
    assert summary['hourly_rate'] == 1500
    assert summary['earnings'] == 0
    assert edited.status_code == 200
    assert edited.json()['tutor']['headline'] == 'Calculus coach'
    assert negative.status_code == 422
    assert by_student.status_code == 401


def test_profile_edit_rejects_explicit_nulls(client, make_tutor) -> None:
    make_tutor('Amina Otieno', 'Math', hourly_rate=1500)
    headers = _login(client, 'amina.otieno@example.com')

    response = client.patch('/tutors/me', json={'hourly_rate': None, 'subject': None}, headers=headers)
    profile = client.get('/auth/me', headers=headers).json()

    assert response.status_code == 400
    assert response.json()['detail']['code'] == 'ValidationError'
    assert profile['tutor']['hourly_rate'] == 1500
    assert profile['tutor']['subject'] == 'Math'
