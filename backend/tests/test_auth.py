"""Test authentication endpoints."""
import json

import pytest

from attendscan.models.user import UserRole

@pytest.fixture
def sample_user(make_user):
    """Create sample user for testing."""
    return make_user(email='test@example.com', first_name='Test', last_name='User')

def test_health_check(client):
    """Test auth health endpoint."""
    response = client.get('/api/auth/health')
    assert response.status_code == 200
    data = json.loads(response.data)
    assert data['message'] == 'Auth service is running'

def test_app_health(client):
    response = client.get('/health')
    assert response.status_code == 200
    assert json.loads(response.data)['status'] == 'healthy'

def test_register_student(client):
    """Student registration formats the institutional ID."""
    response = client.post('/api/auth/register',
        json={
            'email': 'NewUser@example.com',
            'password': 'password123',
            'first_name': 'New',
            'last_name': 'User',
            'student_id': '1234567',
            'course': 'CS101',
            'section': 'A'
        })

    assert response.status_code == 201
    data = json.loads(response.data)
    assert data['error'] is False
    assert data['data']['email'] == 'newuser@example.com'
    assert data['data']['student_id'] == '12-3456'
    assert data['data']['role'] == 'student'
    assert 'password_hash' not in data['data']

def test_register_instructor_has_no_student_id(client):
    response = client.post('/api/auth/register',
        json={
            'email': 'prof@example.com',
            'password': 'password123',
            'first_name': 'Pro',
            'last_name': 'Fessor',
            'role': 'instructor',
            'student_id': '123'
        })

    assert response.status_code == 201
    assert json.loads(response.data)['data']['student_id'] is None

def test_register_validation(client, sample_user):
    """Test registration validation."""
    # Not a JSON body
    response = client.post('/api/auth/register', data='x', content_type='text/plain')
    assert response.status_code == 400

    base = {'email': 'a@example.com', 'password': 'password123', 'first_name': 'A',
            'last_name': 'B', 'student_id': '250099'}

    for override in (
        {'email': 'invalid-email'},
        {'password': '123'},
        {'first_name': ''},
        {'student_id': None},
        {'role': 'superuser'},
        {'email': 'test@example.com'},
        {'student_id': sample_user.student_id},
    ):
        response = client.post('/api/auth/register', json=dict(base, **override))
        assert response.status_code == 400, override
        assert json.loads(response.data)['code'] == 'invalid_input'

def test_login_success(client, sample_user):
    """Test successful login."""
    response = client.post('/api/auth/login',
        json={
            'email': 'test@example.com',
            'password': 'password123'
        })

    assert response.status_code == 200
    data = json.loads(response.data)
    assert 'access_token' in data['data']
    assert 'refresh_token' in data['data']
    assert data['data']['user']['email'] == 'test@example.com'
    assert sample_user.last_login is not None

def test_login_invalid_credentials(client, sample_user):
    """Test login with invalid credentials."""
    response = client.post('/api/auth/login',
        json={
            'email': 'test@example.com',
            'password': 'wrongpassword'
        })

    assert response.status_code == 401
    assert json.loads(response.data)['code'] == 'not_authenticated'

def test_login_inactive_account(client, sample_user):
    sample_user.update(is_active=False)

    response = client.post('/api/auth/login',
        json={'email': 'test@example.com', 'password': 'password123'})

    assert response.status_code == 401

def test_login_missing_fields(client):
    response = client.post('/api/auth/login', json={'email': 'test@example.com'})
    assert response.status_code == 400

def test_me(client, sample_user, auth_headers):
    response = client.get('/api/auth/me', headers=auth_headers(sample_user))

    assert response.status_code == 200
    assert json.loads(response.data)['data']['id'] == sample_user.id

def test_me_requires_token(client):
    response = client.get('/api/auth/me')

    assert response.status_code == 401
    assert json.loads(response.data)['code'] == 'not_authenticated'

def test_refresh(client, sample_user):
    login = client.post('/api/auth/login',
        json={'email': 'test@example.com', 'password': 'password123'})
    refresh_token = json.loads(login.data)['data']['refresh_token']

    response = client.post('/api/auth/refresh', headers={'Authorization': f'Bearer {refresh_token}'})

    assert response.status_code == 200
    assert 'access_token' in json.loads(response.data)['data']

def test_refresh_rejects_access_token(client, sample_user, auth_headers):
    response = client.post('/api/auth/refresh', headers=auth_headers(sample_user))
    assert response.status_code == 401

def test_instructor_role_in_profile(client, make_user, auth_headers):
    instructor = make_user(role=UserRole.INSTRUCTOR)

    response = client.get('/api/auth/me', headers=auth_headers(instructor))

    assert json.loads(response.data)['data']['role'] == 'instructor'
