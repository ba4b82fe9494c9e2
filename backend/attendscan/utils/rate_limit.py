"""Rate-limit keys for Flask-Limiter."""
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException
from flask_limiter.util import get_remote_address
from jwt.exceptions import PyJWTError

def user_or_address() -> str:
    """Caller's JWT identity, or the client address when there is no usable token."""
    try:
        verify_jwt_in_request(optional=True)
    except (JWTExtendedException, PyJWTError):
        # jwt_required on the view answers 401 for these
        return get_remote_address()

    identity = get_jwt_identity()
    if identity is None:
        return get_remote_address()
    return f"user:{identity}"
