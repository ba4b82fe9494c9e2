"""Instructor settings endpoints."""
from flask import Blueprint, current_app, g
from flask_jwt_extended import jwt_required
from attendscan.services.settings_service import SettingsService
from attendscan.utils.decorators import instructor_required
from attendscan.utils.helpers import get_json_body, success_response

settings_bp = Blueprint('settings', __name__)

@settings_bp.route('', methods=['GET'])
@jwt_required()
@instructor_required
def get_settings():
    data = SettingsService.get_settings(g.current_user.id)
    data['duration_choices'] = list(current_app.config['SESSION_DURATION_CHOICES'])
    return success_response(data=data)

@settings_bp.route('', methods=['PUT'])
@jwt_required()
@instructor_required
def update_settings():
    SettingsService.save_settings(g.current_user, get_json_body())
    return success_response(
        data=SettingsService.get_settings(g.current_user.id),
        message="Settings saved successfully"
    )
