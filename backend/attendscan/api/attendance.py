"""Attendance redemption and student history endpoints."""
from flask import Blueprint, current_app, g, request
from flask_jwt_extended import jwt_required
from attendscan import limiter
from attendscan.services.attendance_service import AttendanceService
from attendscan.services.stats_service import StatsService
from attendscan.utils.decorators import user_required
from attendscan.utils.errors import InvalidInput
from attendscan.utils.helpers import error_response, get_json_body, success_response

attendance_bp = Blueprint('attendance', __name__)

@attendance_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return success_response(message='Attendance service is running')

@attendance_bp.route('/redeem', methods=['POST'])
@limiter.limit(lambda: current_app.config['RATELIMIT_REDEEM'])
@jwt_required()
@user_required
def redeem():
    """
    Mark attendance from a scanned QR payload (``qr_data``) or a typed
    session code (``code``). Rejections carry a machine-readable ``code``.
    """
    data = get_json_body()

    presented = data.get('qr_data')
    if presented is None:
        presented = data.get('code')
    if presented is None:
        raise InvalidInput("Either qr_data or code is required")

    result = AttendanceService.redeem(presented, g.current_user)

    if not result.accepted:
        return error_response(result.reason.message, result.reason.status_code, code=result.reason_code)

    record = result.record
    if record.status.value == 'late':
        message = f"Attendance marked as LATE for {record.class_name}"
    else:
        message = "Attendance marked successfully"

    return success_response(data=record.to_dict(), message=message, status_code=201)

@attendance_bp.route('/my-records', methods=['GET'])
@jwt_required()
@user_required
def my_records():
    """Caller's attendance history, most recent first."""
    limit = request.args.get('limit', type=int)
    records = StatsService.history_for_student(g.current_user.id, limit=limit)
    return success_response(data=[r.to_dict() for r in records])

@attendance_bp.route('/my-stats', methods=['GET'])
@jwt_required()
@user_required
def my_stats():
    return success_response(data=StatsService.stats_for_student(g.current_user.id))
