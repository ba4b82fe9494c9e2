"""Authentication service for user management."""
from datetime import datetime
from typing import Dict, Optional

from flask import current_app
from flask_jwt_extended import create_access_token, create_refresh_token
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from attendscan import db
from attendscan.models.user import User, UserRole
from attendscan.utils.errors import InvalidInput, NotAuthenticated, StoreUnavailable
from attendscan.utils.helpers import utcnow
from attendscan.utils.student_id import format_student_id
from attendscan.utils.validators import Validator

class AuthService:

    @staticmethod
    def issue_tokens(user: User) -> Dict:
        """Access and refresh tokens for ``user``; identities are strings."""
        return {
            "access_token": create_access_token(identity=str(user.id)),
            "refresh_token": create_refresh_token(identity=str(user.id)),
            "user": user.to_dict()
        }

    @staticmethod
    def login(email: str, password: str, now: Optional[datetime] = None) -> Dict:
        """Authenticate user and return tokens."""
        if not email or not password:
            raise InvalidInput("Email and password are required")

        if not Validator.validate_email(email.strip()):
            raise InvalidInput("Invalid email format")

        try:
            user = User.query.filter_by(email=email.lower().strip()).first()
        except SQLAlchemyError as e:
            raise StoreUnavailable() from e

        if not user or not user.check_password(password):
            raise NotAuthenticated("Invalid email or password")

        if not user.is_active:
            raise NotAuthenticated("Account is deactivated")

        try:
            user.last_login = now or utcnow()
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StoreUnavailable() from e

        current_app.logger.info('User %s logged in', user.id)
        return AuthService.issue_tokens(user)

    @staticmethod
    def register(
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        role: str = "student",
        student_id: str = None,
        course: str = None,
        section: str = None
    ) -> User:
        """Register new user. Student identifiers are normalized to NN-NNNN."""
        if not Validator.validate_email((email or '').strip()):
            raise InvalidInput("Invalid email format")

        password_errors = Validator.validate_password(password)
        if password_errors:
            raise InvalidInput(password_errors[0])

        first_name = Validator.clean_text(first_name, 'First name')
        last_name = Validator.clean_text(last_name, 'Last name')

        try:
            user_role = UserRole((role or 'student').lower())
        except ValueError:
            raise InvalidInput(f"Unknown role: {role}")

        if user_role == UserRole.STUDENT:
            if not student_id or not str(student_id).strip():
                raise InvalidInput("Student ID is required for students")
            student_id = format_student_id(student_id)
        else:
            student_id = None

        email = email.lower().strip()
        try:
            if User.query.filter_by(email=email).first():
                raise InvalidInput("Email already exists")
            if student_id and User.query.filter_by(student_id=student_id).first():
                raise InvalidInput("Student ID already registered")

            user = User(
                email=email,
                first_name=first_name,
                last_name=last_name,
                role=user_role,
                student_id=student_id,
                course=Validator.clean_text(course, 'Course', required=False, max_length=50) or None,
                section=Validator.clean_text(section, 'Section', required=False, max_length=20) or None
            )
            user.set_password(password)
            user.save()
        except IntegrityError:
            db.session.rollback()
            raise InvalidInput("Email or student ID already registered")
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StoreUnavailable() from e

        current_app.logger.info('Registered %s user %s', user_role.value, user.id)
        return user

    @staticmethod
    def refresh_token(user_id) -> Dict:
        """Generate new access token."""
        try:
            user = db.session.get(User, int(user_id))
        except (TypeError, ValueError):
            user = None
        except SQLAlchemyError as e:
            raise StoreUnavailable() from e

        if not user or not user.is_active:
            raise NotAuthenticated("User not found or inactive")

        return {
            "access_token": create_access_token(identity=str(user.id)),
            "user": user.to_dict()
        }
