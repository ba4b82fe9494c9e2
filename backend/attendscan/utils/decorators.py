"""Custom decorators for authorization."""
from functools import wraps
from flask import g
from flask_jwt_extended import get_jwt_identity
from attendscan import db
from attendscan.models.user import User, UserRole
from attendscan.utils.helpers import error_response

def load_current_user():
    """Resolve the JWT identity to an active user, or None."""
    identity = get_jwt_identity()
    if identity is None:
        return None
    try:
        user = db.session.get(User, int(identity))
    except (TypeError, ValueError):
        return None
    if user is None or not user.is_active:
        return None
    return user

def _role_required(roles, message):
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            user = load_current_user()
            
            if not user:
                return error_response("User not found", 401, code='not_authenticated')
            
            if roles is not None and user.role not in roles:
                return error_response(message, 403, code='permission_denied')
            
            g.current_user = user
            return f(*args, **kwargs)
        return decorated_function
    return decorator

def user_required(f):
    """Decorator to load any authenticated user into ``g.current_user``."""
    return _role_required(None, None)(f)

def instructor_required(f):
    """Decorator to require instructor role or higher."""
    return _role_required(
        (UserRole.INSTRUCTOR, UserRole.ADMIN), "Instructor access required"
    )(f)
