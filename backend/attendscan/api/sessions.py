"""Attendance session API endpoints."""
from flask import Blueprint, abort, g, request
from flask_jwt_extended import jwt_required
from attendscan.services.qr_service import QRService
from attendscan.services.session_service import SessionService
from attendscan.services.stats_service import StatsService
from attendscan.utils.decorators import instructor_required
from attendscan.utils.helpers import get_json_body, success_response, utcnow

sessions_bp = Blueprint('sessions', __name__)

def _owned_session(class_id: str):
    session = SessionService.get_by_class_id(class_id)
    if session is None:
        abort(404, description="Session not found")
    SessionService.ensure_owner(session, g.current_user)
    return session

def _session_with_qr(session, now):
    data = session.to_dict(now)
    data.update(QRService.generate_session_qr(session))
    data['expires_in'] = max(0, int((session.effective_expires_at - now).total_seconds()))
    return data

@sessions_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return success_response(message='Session service is running')

@sessions_bp.route('', methods=['POST'])
@jwt_required()
@instructor_required
def create_session():
    """Mint a session and return its QR code and manual code."""
    data = get_json_body()
    now = utcnow()

    session = SessionService.create_session(
        g.current_user,
        course=data.get('course'),
        class_name=data.get('class_name'),
        section=data.get('section', ''),
        duration_minutes=data.get('duration_minutes'),
        now=now
    )

    return success_response(
        data=_session_with_qr(session, now),
        message="Attendance session created",
        status_code=201
    )

@sessions_bp.route('', methods=['GET'])
@jwt_required()
@instructor_required
def list_sessions():
    """The instructor's sessions, newest first."""
    limit = request.args.get('limit', type=int)
    now = utcnow()
    sessions = SessionService.sessions_for_instructor(g.current_user.id, limit=limit)
    return success_response(data=[s.to_dict(now) for s in sessions])

@sessions_bp.route('/active', methods=['GET'])
@jwt_required()
@instructor_required
def active_sessions():
    now = utcnow()
    sessions = SessionService.active_sessions_for_instructor(g.current_user.id, now)
    return success_response(data=[s.to_dict(now) for s in sessions])

@sessions_bp.route('/<class_id>', methods=['GET'])
@jwt_required()
@instructor_required
def get_session(class_id):
    session = _owned_session(class_id)
    return success_response(data=session.to_dict(utcnow()))

@sessions_bp.route('/<class_id>/qr', methods=['GET'])
@jwt_required()
@instructor_required
def session_qr(class_id):
    """Re-render the QR code of a session, e.g. after a page reload."""
    session = _owned_session(class_id)
    return success_response(data=_session_with_qr(session, utcnow()))

@sessions_bp.route('/<class_id>/end', methods=['POST'])
@jwt_required()
@instructor_required
def end_session(class_id):
    """Stop accepting redemptions before natural expiry."""
    now = utcnow()
    session = SessionService.end_session(_owned_session(class_id), g.current_user, now)
    return success_response(data=session.to_dict(now), message="Session ended")

@sessions_bp.route('/<class_id>/redeploy', methods=['POST'])
@jwt_required()
@instructor_required
def redeploy_session(class_id):
    """End a session and mint a fresh one for the same class."""
    now = utcnow()
    session = SessionService.redeploy_session(_owned_session(class_id), g.current_user, now)
    return success_response(
        data=_session_with_qr(session, now),
        message="Session redeployed",
        status_code=201
    )

@sessions_bp.route('/<class_id>/records', methods=['GET'])
@jwt_required()
@instructor_required
def session_records(class_id):
    """Students who redeemed this session, in scan order."""
    session = _owned_session(class_id)
    records = StatsService.records_for_session(session.class_id)
    return success_response(data={
        'session': session.to_dict(utcnow()),
        'records': [r.to_dict() for r in records],
        'count': len(records)
    })
