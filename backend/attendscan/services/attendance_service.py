"""Redemption of attendance sessions by students."""
import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Optional, Union

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from attendscan import db
from attendscan.models.attendance import AttendanceRecord, AttendanceStatus
from attendscan.models.attendance_session import AttendanceSession
from attendscan.models.enrollment import Enrollment
from attendscan.models.user import User
from attendscan.services.qr_service import QRService
from attendscan.services.session_service import SessionService
from attendscan.services.settings_service import SettingsService
from attendscan.utils.errors import (
    AlreadyMarked, InvalidPayload, NotAStudent, NotAuthenticated, NotEnrolled,
    RedemptionRejected, SessionExpired, SessionNotFound, StoreUnavailable
)
from attendscan.utils.helpers import utcnow

MANUAL_CODE_PATTERN = re.compile(r'^[A-Z0-9]+$')

@dataclass
class RedemptionResult:
    """Outcome of one redemption attempt: a committed record or a named rejection."""
    accepted: bool
    record: Optional[AttendanceRecord] = None
    reason: Optional[RedemptionRejected] = None

    @property
    def reason_code(self) -> Optional[str]:
        return self.reason.code if self.reason else None

class AttendanceService:
    """
    Redemption Validator.

    Each attempt moves through role check, parse and lookup, liveness,
    optional enrollment, duplicate check and commit, stopping at the first
    rejection. Rejections are
    returned, never raised; ``StoreUnavailable`` is raised so callers can
    tell infrastructure failures apart and retry the whole attempt.
    """

    @staticmethod
    def redeem(
        presented: Union[str, Dict],
        caller: Optional[User],
        now: Optional[datetime] = None
    ) -> RedemptionResult:
        """Redeem a scanned payload or manual code on behalf of ``caller``."""
        if caller is None or not caller.is_active:
            raise NotAuthenticated()

        scanned_at = now or utcnow()

        try:
            # Role first so non-students get the same answer whatever the session state
            if not caller.is_student():
                raise NotAStudent()

            session, method = AttendanceService._resolve_session(presented, scanned_at)

            if not session.is_live(scanned_at):
                raise SessionExpired()

            if current_app.config.get('ENFORCE_ENROLLMENT'):
                AttendanceService._check_enrollment(session, caller)

            if AttendanceService.has_record(caller.id, session.class_id):
                raise AlreadyMarked()

            record = AttendanceService._commit(session, caller, scanned_at, method)

        except RedemptionRejected as rejection:
            current_app.logger.info(
                'Redemption rejected for user %s: %s', caller.id, rejection.code
            )
            return RedemptionResult(accepted=False, reason=rejection)

        current_app.logger.info(
            'Attendance %s recorded for user %s in %s',
            record.status.value, caller.id, record.class_id
        )
        return RedemptionResult(accepted=True, record=record)

    @staticmethod
    def _resolve_session(presented, now: datetime):
        """Parse what the student presented and look the session up in the directory."""
        if presented is None or (isinstance(presented, str) and not presented.strip()):
            raise InvalidPayload("A QR code or session code is required")

        if QRService.looks_like_payload(presented):
            payload = QRService.parse_payload(presented)
            session = SessionService.get_by_class_id(payload.classId)
            if session is None:
                raise SessionNotFound()
            if SessionService.normalize_code(payload.sessionId) != session.session_code:
                raise InvalidPayload("QR code does not match its session")
            return session, 'qr'

        if not isinstance(presented, str):
            raise InvalidPayload()

        code = SessionService.normalize_code(presented)
        if len(code) != current_app.config['SESSION_CODE_LENGTH'] or not MANUAL_CODE_PATTERN.match(code):
            raise InvalidPayload(
                f"Session codes are {current_app.config['SESSION_CODE_LENGTH']} letters and digits"
            )

        session = SessionService.find_by_code(code, now)
        if session is None:
            raise SessionNotFound()
        return session, 'manual'

    @staticmethod
    def _check_enrollment(session: AttendanceSession, student: User) -> None:
        """Roster entry under the session's instructor, or matching profile course/section."""
        if student.course == session.course and (student.section or '') == session.section:
            return

        query = Enrollment.query.filter(
            Enrollment.instructor_id == session.instructor_id,
            Enrollment.email == student.email.lower().strip(),
            Enrollment.course == session.course
        )
        if session.section:
            query = query.filter(Enrollment.section == session.section)

        try:
            enrolled = db.session.query(query.exists()).scalar()
        except SQLAlchemyError as e:
            raise StoreUnavailable() from e

        if not enrolled:
            raise NotEnrolled()

    @staticmethod
    def has_record(student_id: int, class_id: str) -> bool:
        try:
            return db.session.query(
                AttendanceRecord.query.filter_by(student_id=student_id, class_id=class_id).exists()
            ).scalar()
        except SQLAlchemyError as e:
            raise StoreUnavailable() from e

    @staticmethod
    def derive_status(session: AttendanceSession, scanned_at: datetime) -> AttendanceStatus:
        """Late strictly after the grace period; exactly on the boundary is present."""
        threshold = timedelta(minutes=SettingsService.late_threshold_minutes(session.instructor_id))
        if scanned_at - session.created_at > threshold:
            return AttendanceStatus.LATE
        return AttendanceStatus.PRESENT

    @staticmethod
    def _commit(session: AttendanceSession, student: User, scanned_at: datetime, method: str) -> AttendanceRecord:
        """
        Insert the record; the unique constraint settles concurrent duplicates.

        Any other integrity failure, such as a session or user deleted
        mid-request, is a store failure rather than a duplicate.
        """
        student_id, class_id = student.id, session.class_id
        record = AttendanceRecord(
            student_id=student_id,
            student_name=student.full_name,
            student_number=student.student_id,
            class_id=class_id,
            class_name=session.class_name,
            course=session.course,
            section=session.section,
            instructor_id=session.instructor_id,
            date=session.date,
            scanned_at=scanned_at,
            status=AttendanceService.derive_status(session, scanned_at),
            method=method
        )
        try:
            db.session.add(record)
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            try:
                duplicate = db.session.query(
                    AttendanceRecord.query.filter_by(student_id=student_id, class_id=class_id).exists()
                ).scalar()
            except SQLAlchemyError as lookup_error:
                raise StoreUnavailable() from lookup_error
            if duplicate:
                raise AlreadyMarked()
            current_app.logger.error('Integrity failure recording attendance for user %s: %s', student_id, e)
            raise StoreUnavailable() from e
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error('Failed to commit attendance for user %s: %s', student_id, e)
            raise StoreUnavailable() from e
        return record
