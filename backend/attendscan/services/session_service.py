"""Attendance session minting and lookup."""
import secrets
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from flask import current_app
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from attendscan import db
from attendscan.models.attendance_session import AttendanceSession
from attendscan.models.user import User, UserRole
from attendscan.services.settings_service import SettingsService
from attendscan.utils.errors import (
    CodeAllocationFailed, InvalidInput, NotAuthenticated, PermissionDenied, StoreUnavailable
)
from attendscan.utils.helpers import utcnow
from attendscan.utils.validators import Validator

class SessionService:
    """Session Minter and Session Directory."""

    @staticmethod
    def generate_session_code() -> str:
        """Draw a manual-entry code from the unambiguous alphabet."""
        alphabet = current_app.config['SESSION_CODE_ALPHABET']
        length = current_app.config['SESSION_CODE_LENGTH']
        return ''.join(secrets.choice(alphabet) for _ in range(length))

    @staticmethod
    def normalize_code(code: str) -> str:
        return code.strip().upper()

    @staticmethod
    def _live_filter(now: datetime):
        return (
            AttendanceSession.expires_at > now,
            or_(AttendanceSession.ended_at.is_(None), AttendanceSession.ended_at > now)
        )

    @staticmethod
    def code_is_live(code: str, now: datetime) -> bool:
        return db.session.query(
            AttendanceSession.query.filter(
                AttendanceSession.session_code == code,
                *SessionService._live_filter(now)
            ).exists()
        ).scalar()

    @staticmethod
    def allocate_code(now: datetime) -> str:
        """Draw codes until one is not held by a live session."""
        for _ in range(current_app.config['SESSION_CODE_MAX_ATTEMPTS']):
            code = SessionService.generate_session_code()
            if not SessionService.code_is_live(code, now):
                return code
            current_app.logger.warning('Session code collision on %s, redrawing', code)
        raise CodeAllocationFailed()

    @staticmethod
    def allocate_class_id(class_name: str, now: datetime) -> str:
        """
        ``{className}-{epochMillis}``, bumping the millis if already taken.

        The id is a single URL path segment, so slashes in the class name
        become hyphens. The class name itself is stored unchanged.
        """
        slug = class_name.replace('/', '-')
        millis = int(now.replace(tzinfo=timezone.utc).timestamp() * 1000)
        while True:
            class_id = f"{slug}-{millis}"
            if not db.session.query(
                AttendanceSession.query.filter_by(class_id=class_id).exists()
            ).scalar():
                return class_id
            millis += 1

    @staticmethod
    def validate_duration(duration_minutes) -> int:
        choices = current_app.config['SESSION_DURATION_CHOICES']
        if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int) \
                or duration_minutes not in choices:
            raise InvalidInput(
                f"Duration must be one of {', '.join(str(c) for c in choices)} minutes"
            )
        return duration_minutes

    @staticmethod
    def create_session(
        instructor: Optional[User],
        course: str,
        class_name: str,
        section: str = '',
        duration_minutes: Optional[int] = None,
        now: Optional[datetime] = None
    ) -> AttendanceSession:
        """Mint and persist a new attendance session."""
        if instructor is None or not instructor.is_instructor():
            raise NotAuthenticated("Instructor identity required to create a session")

        course = Validator.clean_text(course, 'Course', max_length=50)
        class_name = Validator.clean_text(class_name, 'Class name')
        section = Validator.clean_text(section, 'Section', required=False, max_length=20)

        if duration_minutes is None:
            duration_minutes = SettingsService.get_settings(instructor.id)['default_duration_minutes']
        duration_minutes = SessionService.validate_duration(duration_minutes)

        now = now or utcnow()
        local_date = now.replace(tzinfo=timezone.utc).astimezone(
            SettingsService.timezone_for(instructor.id)
        ).date().isoformat()

        try:
            session = AttendanceSession(
                session_code=SessionService.allocate_code(now),
                class_id=SessionService.allocate_class_id(class_name, now),
                class_name=class_name,
                course=course,
                section=section,
                instructor_id=instructor.id,
                instructor_name=instructor.full_name,
                duration_minutes=duration_minutes,
                created_at=now,
                updated_at=now,
                expires_at=now + timedelta(minutes=duration_minutes),
                date=local_date
            )
            db.session.add(session)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error('Failed to persist session for instructor %s: %s', instructor.id, e)
            raise StoreUnavailable() from e

        current_app.logger.info(
            'Session %s (%s) created by instructor %s, expires %s',
            session.class_id, session.session_code, instructor.id, session.expires_at.isoformat()
        )
        return session

    @staticmethod
    def get_by_class_id(class_id: str) -> Optional[AttendanceSession]:
        try:
            return AttendanceSession.query.filter_by(class_id=class_id).first()
        except SQLAlchemyError as e:
            raise StoreUnavailable() from e

    @staticmethod
    def find_by_code(code: str, now: Optional[datetime] = None) -> Optional[AttendanceSession]:
        """
        Resolve a manual-entry code, case-insensitively.

        A live holder of the code wins; otherwise the most recently created
        expired session with that code is returned so the caller can report
        expiry rather than absence.
        """
        now = now or utcnow()
        code = SessionService.normalize_code(code)
        try:
            live = AttendanceSession.query.filter(
                AttendanceSession.session_code == code,
                *SessionService._live_filter(now)
            ).order_by(AttendanceSession.created_at.desc()).first()
            if live:
                return live
            return AttendanceSession.query.filter_by(session_code=code).order_by(
                AttendanceSession.created_at.desc()
            ).first()
        except SQLAlchemyError as e:
            raise StoreUnavailable() from e

    @staticmethod
    def sessions_for_instructor(instructor_id: int, limit: int = None) -> List[AttendanceSession]:
        try:
            query = AttendanceSession.query.filter_by(instructor_id=instructor_id).order_by(
                AttendanceSession.created_at.desc()
            )
            if limit:
                query = query.limit(limit)
            return query.all()
        except SQLAlchemyError as e:
            raise StoreUnavailable() from e

    @staticmethod
    def active_sessions_for_instructor(instructor_id: int, now: Optional[datetime] = None) -> List[AttendanceSession]:
        now = now or utcnow()
        try:
            return AttendanceSession.query.filter(
                AttendanceSession.instructor_id == instructor_id,
                *SessionService._live_filter(now)
            ).order_by(AttendanceSession.created_at.desc()).all()
        except SQLAlchemyError as e:
            raise StoreUnavailable() from e

    @staticmethod
    def ensure_owner(session: AttendanceSession, user: Optional[User]) -> None:
        if user is None:
            raise NotAuthenticated()
        if session.instructor_id != user.id and user.role != UserRole.ADMIN:
            raise PermissionDenied("You can only manage your own sessions")

    @staticmethod
    def end_session(session: AttendanceSession, instructor: User, now: Optional[datetime] = None) -> AttendanceSession:
        """Persist an early-expiry marker. Ending an already-ended session is a no-op."""
        SessionService.ensure_owner(session, instructor)
        now = now or utcnow()

        if session.ended_at is not None or not session.is_live(now):
            return session

        try:
            session.ended_at = now
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StoreUnavailable() from e

        current_app.logger.info('Session %s ended early by user %s', session.class_id, instructor.id)
        return session

    @staticmethod
    def redeploy_session(session: AttendanceSession, instructor: User, now: Optional[datetime] = None) -> AttendanceSession:
        """End ``session`` and mint a brand-new one for the same class."""
        SessionService.ensure_owner(session, instructor)
        now = now or utcnow()
        SessionService.end_session(session, instructor, now)

        owner = session.instructor if session.instructor_id != instructor.id else instructor
        return SessionService.create_session(
            owner,
            course=session.course,
            class_name=session.class_name,
            section=session.section,
            duration_minutes=session.duration_minutes,
            now=now
        )
