"""Instructor-facing attendance reports."""
from datetime import datetime
from flask import Blueprint, Response, abort, g, request
from flask_jwt_extended import jwt_required
from attendscan import db
from attendscan.models.attendance import AttendanceStatus
from attendscan.models.user import User
from attendscan.services.roster_service import RosterService
from attendscan.services.stats_service import StatsService
from attendscan.utils.decorators import instructor_required
from attendscan.utils.errors import InvalidInput
from attendscan.utils.helpers import success_response

reports_bp = Blueprint('reports', __name__)

def _filtered_records():
    status = request.args.get('status')
    if status:
        try:
            status = AttendanceStatus(status.lower())
        except ValueError:
            raise InvalidInput(f"Unknown status: {status}")

    return StatsService.records_for_instructor(
        g.current_user.id,
        date=request.args.get('date'),
        course=request.args.get('course'),
        section=request.args.get('section'),
        class_id=request.args.get('class_id'),
        status=status,
        student_id=request.args.get('student_id', type=int)
    )

@reports_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return success_response(message='Reports service is running')

@reports_bp.route('/stats', methods=['GET'])
@jwt_required()
@instructor_required
def instructor_stats():
    """Status counts across all of the instructor's sessions."""
    return success_response(data=StatsService.stats_for_instructor(g.current_user.id))

@reports_bp.route('/records', methods=['GET'])
@jwt_required()
@instructor_required
def instructor_records():
    """Ledger records for the instructor, filterable by date/course/section/class/status."""
    records = _filtered_records()
    return success_response(data=[r.to_dict() for r in records])

@reports_bp.route('/export', methods=['GET'])
@jwt_required()
@instructor_required
def export_records():
    """Same filters as /records, as a CSV download."""
    csv_text = StatsService.export_csv(_filtered_records())
    filename = f"attendance_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv"

    return Response(
        csv_text,
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename={filename}'}
    )

@reports_bp.route('/students', methods=['GET'])
@jwt_required()
@instructor_required
def registered_students():
    """Student accounts, optionally narrowed to a course and section."""
    students = RosterService.registered_students(
        course=request.args.get('course'),
        section=request.args.get('section')
    )
    return success_response(data=[s.to_dict() for s in students])

@reports_bp.route('/students/<int:student_id>/records', methods=['GET'])
@jwt_required()
@instructor_required
def student_records(student_id):
    """One student's records in the instructor's sessions, most recent first."""
    student = db.session.get(User, student_id)
    if student is None or not student.is_student():
        abort(404, description="Student not found")

    records = StatsService.records_for_instructor(g.current_user.id, student_id=student.id)
    return success_response(data={
        'student': student.to_dict(),
        'records': [r.to_dict() for r in records]
    })
