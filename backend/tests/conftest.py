"""Shared fixtures for the AttendScan test suite."""
from datetime import datetime

import pytest
from flask_jwt_extended import create_access_token

from attendscan import create_app, db
from attendscan.models.user import User, UserRole

T0 = datetime(2025, 3, 10, 9, 0, 0)

@pytest.fixture
def app():
    """Create test app."""
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()

@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()

@pytest.fixture
def make_user(app):
    """Factory for persisted users."""
    counter = {'n': 0}

    def _make_user(role=UserRole.STUDENT, course='CS101', section='A', email=None,
                   first_name='Test', last_name=None, password='password123'):
        counter['n'] += 1
        n = counter['n']
        user = User(
            email=email or f'{role.value}{n}@example.com',
            first_name=first_name,
            last_name=last_name or f'User{n}',
            role=role,
            student_id=f'25-{n:04d}' if role == UserRole.STUDENT else None,
            course=course if role == UserRole.STUDENT else None,
            section=section if role == UserRole.STUDENT else None
        )
        user.set_password(password)
        return user.save()

    return _make_user

@pytest.fixture
def instructor(make_user):
    return make_user(role=UserRole.INSTRUCTOR, first_name='Maria', last_name='Santos')

@pytest.fixture
def student(make_user):
    return make_user(first_name='Juan', last_name='Cruz')

@pytest.fixture
def auth_headers(app):
    """Bearer header for a user."""
    def _auth_headers(user):
        token = create_access_token(identity=str(user.id))
        return {'Authorization': f'Bearer {token}'}
    return _auth_headers
