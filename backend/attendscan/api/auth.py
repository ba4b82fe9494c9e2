"""Authentication API."""
from flask import Blueprint, current_app, g
from flask_jwt_extended import jwt_required, get_jwt_identity
from flask_limiter.util import get_remote_address
from attendscan import limiter
from attendscan.services.auth_service import AuthService
from attendscan.utils.decorators import user_required
from attendscan.utils.helpers import get_json_body, success_response

auth_bp = Blueprint("auth", __name__)

@auth_bp.route("/health", methods=["GET"])
def health_check():
    """Health check endpoint."""
    return success_response(message="Auth service is running")

@auth_bp.route("/register", methods=["POST"])
@limiter.limit(lambda: current_app.config["RATELIMIT_REGISTER"], key_func=get_remote_address)
def register():
    """Register a student or instructor account."""
    data = get_json_body()
    
    user = AuthService.register(
        email=data.get("email"),
        password=data.get("password"),
        first_name=data.get("first_name"),
        last_name=data.get("last_name"),
        role=data.get("role", "student"),
        student_id=data.get("student_id"),
        course=data.get("course"),
        section=data.get("section")
    )
    
    return success_response(data=user.to_dict(), message="Registration successful", status_code=201)

@auth_bp.route("/login", methods=["POST"])
@limiter.limit(lambda: current_app.config["RATELIMIT_LOGIN"], key_func=get_remote_address)
def login():
    """Email and password login for every role."""
    data = get_json_body()
    
    result = AuthService.login(data.get("email", ""), data.get("password", ""))
    
    return success_response(data=result, message="Login successful")

@auth_bp.route("/refresh", methods=["POST"])
@jwt_required(refresh=True)
def refresh():
    """Exchange a refresh token for a new access token."""
    result = AuthService.refresh_token(get_jwt_identity())
    return success_response(data=result, message="Token refreshed")

@auth_bp.route("/me", methods=["GET"])
@jwt_required()
@user_required
def me():
    """Current user profile."""
    return success_response(data=g.current_user.to_dict())
