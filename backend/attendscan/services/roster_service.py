"""Instructor roster (registered students) management."""
from typing import Dict, List, Optional

import pandas as pd
from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from attendscan import db
from attendscan.models.enrollment import Enrollment
from attendscan.models.user import User, UserRole
from attendscan.utils.errors import InvalidInput, PermissionDenied, StoreUnavailable
from attendscan.utils.validators import Validator

ROSTER_COLUMNS = ('name', 'email', 'course', 'section')

class RosterService:
    """Service for an instructor's registered-student list."""

    @staticmethod
    def _clean(data: Dict) -> Dict:
        if not isinstance(data, dict):
            raise InvalidInput("Request body must be a JSON object")
        Validator.require_fields(data, ('name', 'email', 'course'))

        email = str(data['email']).lower().strip()
        if not Validator.validate_email(email):
            raise InvalidInput(f"Invalid email format: {email}")

        return {
            'name': Validator.clean_text(data['name'], 'Name', max_length=255),
            'email': email,
            'course': Validator.clean_text(data['course'], 'Course', max_length=50),
            'section': Validator.clean_text(data.get('section'), 'Section', required=False, max_length=20)
        }

    @staticmethod
    def list_for_instructor(instructor_id: int, course: str = None, section: str = None) -> List[Enrollment]:
        query = Enrollment.query.filter_by(instructor_id=instructor_id)
        if course:
            query = query.filter_by(course=course)
        if section:
            query = query.filter_by(section=section)
        try:
            return query.order_by(Enrollment.course, Enrollment.section, Enrollment.name).all()
        except SQLAlchemyError as e:
            raise StoreUnavailable() from e

    @staticmethod
    def registered_students(course: str = None, section: str = None) -> List[User]:
        """Every student account, whether or not it appears on a roster."""
        query = User.query.filter_by(role=UserRole.STUDENT)
        if course:
            query = query.filter_by(course=course)
        if section:
            query = query.filter_by(section=section)
        try:
            return query.order_by(User.last_name, User.first_name).all()
        except SQLAlchemyError as e:
            raise StoreUnavailable() from e

    @staticmethod
    def get_owned(instructor: User, enrollment_id: int) -> Enrollment:
        try:
            enrollment = db.session.get(Enrollment, enrollment_id)
        except SQLAlchemyError as e:
            raise StoreUnavailable() from e
        if enrollment is None or enrollment.instructor_id != instructor.id:
            raise PermissionDenied("Roster entry not found")
        return enrollment

    @staticmethod
    def add_student(instructor: User, data: Dict) -> Enrollment:
        enrollment = Enrollment(instructor_id=instructor.id, **RosterService._clean(data))
        try:
            db.session.add(enrollment)
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise InvalidInput("Student is already registered in this course and section")
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StoreUnavailable() from e

        current_app.logger.info('Instructor %s registered %s', instructor.id, enrollment.email)
        return enrollment

    @staticmethod
    def update_student(instructor: User, enrollment_id: int, data: Dict) -> Enrollment:
        enrollment = RosterService.get_owned(instructor, enrollment_id)
        cleaned = RosterService._clean(data)
        try:
            enrollment.update(**cleaned)
        except IntegrityError:
            db.session.rollback()
            raise InvalidInput("Student is already registered in this course and section")
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StoreUnavailable() from e
        return enrollment

    @staticmethod
    def remove_student(instructor: User, enrollment_id: int) -> None:
        enrollment = RosterService.get_owned(instructor, enrollment_id)
        try:
            enrollment.delete()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StoreUnavailable() from e

    @staticmethod
    def import_csv(instructor: User, stream, default_course: Optional[str] = None) -> List[Dict]:
        """Bulk-register students from a CSV with name, email, course and section columns."""
        try:
            df = pd.read_csv(stream, dtype=str).fillna('')
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            raise InvalidInput(f"Could not read CSV file: {e}")

        df.columns = [str(column).strip().lower() for column in df.columns]
        missing = [column for column in ('name', 'email') if column not in df.columns]
        if missing:
            raise InvalidInput(f"CSV is missing column(s): {', '.join(missing)}")

        results = []
        for index, row in df.iterrows():
            data = {column: row.get(column, '') for column in ROSTER_COLUMNS}
            if not data['course'] and default_course:
                data['course'] = default_course
            try:
                enrollment = RosterService.add_student(instructor, data)
                results.append({'row': index + 2, 'email': enrollment.email, 'success': True})
            except InvalidInput as e:
                results.append({'row': index + 2, 'email': data['email'], 'success': False, 'error': e.message})

        return results
