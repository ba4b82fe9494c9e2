"""Test attendance endpoints."""
import json

import pytest

from attendscan.services.session_service import SessionService

@pytest.fixture
def live_session(app, instructor):
    return SessionService.create_session(instructor, course='CS101', class_name='Lecture 1', duration_minutes=30)

def redeem(client, headers, **body):
    return client.post('/api/attendance/redeem', headers=headers, json=body)

def test_health_check(client):
    response = client.get('/api/attendance/health')
    assert response.status_code == 200

def test_redeem_with_code(client, live_session, student, auth_headers):
    response = redeem(client, auth_headers(student), code=live_session.session_code.lower())

    assert response.status_code == 201
    data = json.loads(response.data)
    assert data['data']['status'] == 'present'
    assert data['data']['method'] == 'manual'
    assert data['data']['class_id'] == live_session.class_id

def test_redeem_with_scanned_payload(client, live_session, student, auth_headers):
    from attendscan.services.qr_service import QRService

    response = redeem(client, auth_headers(student), qr_data=QRService.encode_payload(live_session))

    assert response.status_code == 201
    assert json.loads(response.data)['data']['method'] == 'qr'

def test_redeem_twice(client, live_session, student, auth_headers):
    headers = auth_headers(student)
    redeem(client, headers, code=live_session.session_code)

    response = redeem(client, headers, code=live_session.session_code)

    assert response.status_code == 409
    assert json.loads(response.data)['code'] == 'already_marked'

def test_instructor_cannot_redeem(client, live_session, instructor, auth_headers):
    response = redeem(client, auth_headers(instructor), code=live_session.session_code)

    assert response.status_code == 403
    assert json.loads(response.data)['code'] == 'not_a_student'

@pytest.mark.parametrize('body, status, code', [
    ({'code': 'ZZZZZZZZ'}, 404, 'session_not_found'),
    ({'code': 'abc'}, 400, 'invalid_payload'),
    ({'qr_data': '{oops'}, 400, 'invalid_payload'),
    ({}, 400, 'invalid_input'),
])
def test_redeem_rejections(client, live_session, student, auth_headers, body, status, code):
    response = redeem(client, auth_headers(student), **body)

    assert response.status_code == status
    assert json.loads(response.data)['code'] == code

def test_redeem_expired(client, live_session, instructor, student, auth_headers):
    SessionService.end_session(live_session, instructor)

    response = redeem(client, auth_headers(student), code=live_session.session_code)

    assert response.status_code == 410
    assert json.loads(response.data)['code'] == 'session_expired'

def test_redeem_requires_token(client, live_session):
    response = client.post('/api/attendance/redeem', json={'code': live_session.session_code})
    assert response.status_code == 401

def test_my_records_and_stats(client, live_session, student, auth_headers):
    headers = auth_headers(student)
    redeem(client, headers, code=live_session.session_code)

    records = json.loads(client.get('/api/attendance/my-records', headers=headers).data)['data']
    stats = json.loads(client.get('/api/attendance/my-stats', headers=headers).data)['data']

    assert [r['class_id'] for r in records] == [live_session.class_id]
    assert stats == {'totalClasses': 1, 'present': 1, 'late': 0, 'percentage': 100}
