"""Test session endpoints."""
import json
from urllib.parse import quote

import pytest

from attendscan.models.user import UserRole

@pytest.fixture
def created(client, instructor, auth_headers):
    response = client.post('/api/sessions', headers=auth_headers(instructor),
        json={'course': 'CS101', 'class_name': 'Lecture 1', 'section': 'A', 'duration_minutes': 30})
    assert response.status_code == 201
    return json.loads(response.data)['data']

def test_create_session(created, instructor):
    assert created['course'] == 'CS101'
    assert created['is_live'] is True
    assert created['instructor_id'] == instructor.id
    assert len(created['session_id']) == 8
    assert created['qr_image'].startswith('data:image/png;base64,')
    assert json.loads(created['qr_data'])['sessionId'] == created['session_id']
    assert 0 < created['expires_in'] <= 30 * 60

def test_create_session_validation(client, instructor, auth_headers):
    response = client.post('/api/sessions', headers=auth_headers(instructor),
        json={'course': 'CS101', 'class_name': 'Lecture 1', 'duration_minutes': 45})

    assert response.status_code == 400
    assert json.loads(response.data)['code'] == 'invalid_input'

def test_students_cannot_create_sessions(client, student, auth_headers):
    response = client.post('/api/sessions', headers=auth_headers(student),
        json={'course': 'CS101', 'class_name': 'Lecture 1'})

    assert response.status_code == 403

def test_create_requires_token(client):
    response = client.post('/api/sessions', json={'course': 'CS101', 'class_name': 'Lecture 1'})
    assert response.status_code == 401

def test_list_and_active(client, created, instructor, auth_headers):
    headers = auth_headers(instructor)

    listed = json.loads(client.get('/api/sessions', headers=headers).data)['data']
    active = json.loads(client.get('/api/sessions/active', headers=headers).data)['data']

    assert [s['class_id'] for s in listed] == [created['class_id']]
    assert [s['class_id'] for s in active] == [created['class_id']]

def test_get_session_and_qr(client, created, instructor, auth_headers):
    headers = auth_headers(instructor)

    detail = client.get(f"/api/sessions/{created['class_id']}", headers=headers)
    qr = client.get(f"/api/sessions/{created['class_id']}/qr", headers=headers)

    assert detail.status_code == 200
    assert json.loads(detail.data)['data']['session_id'] == created['session_id']
    assert json.loads(qr.data)['data']['qr_data'] == created['qr_data']

def test_unknown_session(client, instructor, auth_headers):
    response = client.get('/api/sessions/nope-123', headers=auth_headers(instructor))
    assert response.status_code == 404

def test_other_instructor_forbidden(client, created, make_user, auth_headers):
    other = make_user(role=UserRole.INSTRUCTOR)

    response = client.get(f"/api/sessions/{created['class_id']}", headers=auth_headers(other))

    assert response.status_code == 403
    assert json.loads(response.data)['code'] == 'permission_denied'

def test_end_session(client, created, instructor, auth_headers):
    headers = auth_headers(instructor)

    response = client.post(f"/api/sessions/{created['class_id']}/end", headers=headers)

    assert response.status_code == 200
    assert json.loads(response.data)['data']['is_live'] is False
    assert json.loads(client.get('/api/sessions/active', headers=headers).data)['data'] == []

def test_redeploy_session(client, created, instructor, auth_headers):
    response = client.post(f"/api/sessions/{created['class_id']}/redeploy", headers=auth_headers(instructor))

    assert response.status_code == 201
    fresh = json.loads(response.data)['data']
    assert fresh['class_id'] != created['class_id']
    assert fresh['class_name'] == created['class_name']
    assert fresh['is_live'] is True

def test_session_records(client, created, instructor, student, auth_headers):
    client.post('/api/attendance/redeem', headers=auth_headers(student), json={'code': created['session_id']})

    response = client.get(f"/api/sessions/{created['class_id']}/records", headers=auth_headers(instructor))

    data = json.loads(response.data)['data']
    assert data['count'] == 1
    assert data['records'][0]['student_id'] == student.id

def test_class_name_with_slash_stays_reachable(client, instructor, auth_headers):
    headers = auth_headers(instructor)
    response = client.post('/api/sessions', headers=headers,
        json={'course': 'CS101', 'class_name': 'Lab 1/2', 'duration_minutes': 30})
    assert response.status_code == 201
    session = json.loads(response.data)['data']
    assert session['class_name'] == 'Lab 1/2'
    base = f"/api/sessions/{quote(session['class_id'])}"

    assert client.get(base, headers=headers).status_code == 200
    assert client.get(f'{base}/qr', headers=headers).status_code == 200
    assert client.get(f'{base}/records', headers=headers).status_code == 200
    assert client.post(f'{base}/end', headers=headers).status_code == 200
    assert client.post(f'{base}/redeploy', headers=headers).status_code == 201
