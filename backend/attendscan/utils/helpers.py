"""Helper functions for the application."""
from datetime import datetime, timezone
from flask import jsonify, request
from typing import Any, Optional

from attendscan.utils.errors import InvalidInput

def handle_error(error, status_code: int):
    """Handle application errors with consistent format."""
    return error_response(str(error), status_code)

def success_response(data: Any = None, message: str = "Success", status_code: int = 200):
    """Return consistent success response."""
    response = {
        'error': False,
        'message': message
    }
    
    if data is not None:
        response['data'] = data
    
    return jsonify(response), status_code

def error_response(message: str, status_code: int = 400, code: Optional[str] = None):
    """Return consistent error response."""
    response = {
        'error': True,
        'message': message,
        'status_code': status_code
    }
    if code:
        response['code'] = code
    
    return jsonify(response), status_code

def utcnow() -> datetime:
    """Naive UTC now, the representation every stored timestamp uses."""
    return datetime.now(timezone.utc).replace(tzinfo=None)

def to_utc_naive(value: datetime) -> datetime:
    """Normalize an aware datetime to naive UTC; naive values are assumed UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value

def isoformat_utc(value: Optional[datetime]) -> Optional[str]:
    """Serialize a stored naive-UTC datetime as ISO-8601 with a Z suffix."""
    if value is None:
        return None
    return to_utc_naive(value).isoformat(timespec='milliseconds') + 'Z'

def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 string into naive UTC. Raises ValueError."""
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    return to_utc_naive(datetime.fromisoformat(value))

def get_json_body() -> dict:
    """The request's JSON object body, or InvalidInput."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidInput("Request body must be JSON")
    return data
