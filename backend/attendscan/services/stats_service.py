"""Attendance statistics and reporting over the ledger."""
import io
import math
from typing import Dict, Iterable, List, Optional

import pandas as pd
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from attendscan import db
from attendscan.models.attendance import AttendanceRecord, AttendanceStatus
from attendscan.utils.errors import StoreUnavailable

EXPORT_COLUMNS = [
    ('student_number', 'Student ID'),
    ('student_name', 'Student Name'),
    ('course', 'Course'),
    ('section', 'Section'),
    ('class_name', 'Class'),
    ('class_id', 'Class ID'),
    ('date', 'Date'),
    ('scanned_at', 'Scanned At'),
    ('status', 'Status'),
    ('method', 'Method'),
]

def attendance_percentage(present: int, total: int) -> int:
    """Whole-number percentage, halves rounded up; 0 when there is nothing to count."""
    if total <= 0:
        return 0
    return int(math.floor(present / total * 100 + 0.5))

class StatsService:
    """Aggregator: pure reads over the attendance ledger."""

    @staticmethod
    def _status_counts(*criteria) -> Dict[AttendanceStatus, int]:
        try:
            rows = db.session.query(
                AttendanceRecord.status, func.count(AttendanceRecord.id)
            ).filter(*criteria).group_by(AttendanceRecord.status).all()
        except SQLAlchemyError as e:
            raise StoreUnavailable() from e
        return {status: count for status, count in rows}

    @staticmethod
    def stats_for_instructor(instructor_id: int) -> Dict[str, int]:
        """Counts of the instructor's ledger records partitioned by status."""
        counts = StatsService._status_counts(AttendanceRecord.instructor_id == instructor_id)
        return {
            'total': sum(counts.values()),
            'present': counts.get(AttendanceStatus.PRESENT, 0),
            'late': counts.get(AttendanceStatus.LATE, 0),
            'absent': counts.get(AttendanceStatus.ABSENT, 0)
        }

    @staticmethod
    def stats_for_student(student_id: int) -> Dict[str, int]:
        counts = StatsService._status_counts(AttendanceRecord.student_id == student_id)
        total = sum(counts.values())
        present = counts.get(AttendanceStatus.PRESENT, 0)
        return {
            'totalClasses': total,
            'present': present,
            'late': counts.get(AttendanceStatus.LATE, 0),
            'percentage': attendance_percentage(present, total)
        }

    @staticmethod
    def history_for_student(student_id: int, limit: Optional[int] = None) -> List[AttendanceRecord]:
        """The student's records, most recent scan first."""
        try:
            query = AttendanceRecord.query.filter_by(student_id=student_id).order_by(
                AttendanceRecord.scanned_at.desc(), AttendanceRecord.id.desc()
            )
            if limit:
                query = query.limit(limit)
            return query.all()
        except SQLAlchemyError as e:
            raise StoreUnavailable() from e

    @staticmethod
    def records_for_instructor(
        instructor_id: int,
        date: Optional[str] = None,
        course: Optional[str] = None,
        section: Optional[str] = None,
        class_id: Optional[str] = None,
        status: Optional[AttendanceStatus] = None,
        student_id: Optional[int] = None
    ) -> List[AttendanceRecord]:
        """The instructor's ledger, most recent scan first, optionally filtered."""
        query = AttendanceRecord.query.filter_by(instructor_id=instructor_id)
        if date:
            query = query.filter_by(date=date)
        if course:
            query = query.filter_by(course=course)
        if section:
            query = query.filter_by(section=section)
        if class_id:
            query = query.filter_by(class_id=class_id)
        if status:
            query = query.filter_by(status=status)
        if student_id:
            query = query.filter_by(student_id=student_id)

        try:
            return query.order_by(
                AttendanceRecord.scanned_at.desc(), AttendanceRecord.id.desc()
            ).all()
        except SQLAlchemyError as e:
            raise StoreUnavailable() from e

    @staticmethod
    def records_for_session(class_id: str) -> List[AttendanceRecord]:
        """Everyone who redeemed one session, in scan order."""
        try:
            return AttendanceRecord.query.filter_by(class_id=class_id).order_by(
                AttendanceRecord.scanned_at.asc(), AttendanceRecord.id.asc()
            ).all()
        except SQLAlchemyError as e:
            raise StoreUnavailable() from e

    @staticmethod
    def export_csv(records: Iterable[AttendanceRecord]) -> str:
        """Render records as CSV with human-readable headers."""
        rows = [record.to_dict() for record in records]
        df = pd.DataFrame(rows, columns=[key for key, _ in EXPORT_COLUMNS])
        df = df.rename(columns=dict(EXPORT_COLUMNS))

        output = io.StringIO()
        df.to_csv(output, index=False)
        return output.getvalue()
