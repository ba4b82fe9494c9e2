"""Test instructor settings endpoints."""
import json

def test_get_defaults(client, instructor, auth_headers):
    response = client.get('/api/settings', headers=auth_headers(instructor))

    data = json.loads(response.data)['data']
    assert data['late_threshold_minutes'] == 15
    assert data['duration_choices'] == [15, 30, 60, 120, 180, 360, 720, 1440]

def test_update_settings(client, instructor, auth_headers):
    headers = auth_headers(instructor)

    response = client.put('/api/settings', headers=headers,
        json={'late_threshold_minutes': 10, 'default_duration_minutes': 120, 'system_name': 'Roll Call'})

    assert response.status_code == 200
    data = json.loads(client.get('/api/settings', headers=headers).data)['data']
    assert data['late_threshold_minutes'] == 10
    assert data['default_duration_minutes'] == 120
    assert data['system_name'] == 'Roll Call'

def test_update_rejects_invalid_duration(client, instructor, auth_headers):
    response = client.put('/api/settings', headers=auth_headers(instructor),
        json={'default_duration_minutes': 45})

    assert response.status_code == 400
    assert json.loads(response.data)['code'] == 'invalid_input'

def test_students_cannot_read_settings(client, student, auth_headers):
    assert client.get('/api/settings', headers=auth_headers(student)).status_code == 403
