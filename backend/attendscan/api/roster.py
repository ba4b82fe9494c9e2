"""Instructor roster endpoints."""
import io
from flask import Blueprint, current_app, g, request
from flask_jwt_extended import jwt_required
from attendscan.services.roster_service import RosterService
from attendscan.utils.decorators import instructor_required
from attendscan.utils.errors import InvalidInput
from attendscan.utils.helpers import get_json_body, success_response

roster_bp = Blueprint('roster', __name__)

@roster_bp.route('', methods=['GET'])
@jwt_required()
@instructor_required
def list_roster():
    students = RosterService.list_for_instructor(
        g.current_user.id,
        course=request.args.get('course'),
        section=request.args.get('section')
    )
    return success_response(data=[s.to_dict() for s in students])

@roster_bp.route('', methods=['POST'])
@jwt_required()
@instructor_required
def add_student():
    enrollment = RosterService.add_student(g.current_user, get_json_body())
    return success_response(data=enrollment.to_dict(), message="Student registered successfully", status_code=201)

@roster_bp.route('/<int:enrollment_id>', methods=['PUT'])
@jwt_required()
@instructor_required
def update_student(enrollment_id):
    enrollment = RosterService.update_student(g.current_user, enrollment_id, get_json_body())
    return success_response(data=enrollment.to_dict(), message="Student updated successfully")

@roster_bp.route('/<int:enrollment_id>', methods=['DELETE'])
@jwt_required()
@instructor_required
def remove_student(enrollment_id):
    RosterService.remove_student(g.current_user, enrollment_id)
    return success_response(message="Student removed successfully")

@roster_bp.route('/import', methods=['POST'])
@jwt_required()
@instructor_required
def import_roster():
    """Bulk registration from an uploaded CSV file."""
    file = request.files.get('file')
    if file is None or not file.filename:
        raise InvalidInput("A CSV file is required")
    extension = file.filename.rsplit('.', 1)[-1].lower() if '.' in file.filename else ''
    if extension not in current_app.config['ALLOWED_EXTENSIONS']:
        raise InvalidInput("Only .csv files are supported")

    results = RosterService.import_csv(
        g.current_user,
        io.StringIO(file.stream.read().decode('utf-8-sig')),
        default_course=request.form.get('course')
    )
    imported = sum(1 for r in results if r['success'])
    return success_response(
        data={'results': results, 'imported': imported, 'failed': len(results) - imported},
        message=f"Imported {imported} of {len(results)} students"
    )
