"""Validation utilities for the application."""
import re
from typing import Dict, Iterable, List

from attendscan.utils.errors import InvalidInput

EMAIL_PATTERN = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'

class Validator:
    """Validation helper class."""
    
    @staticmethod
    def validate_email(email: str) -> bool:
        """Validate email format."""
        if not email:
            return False
        return bool(re.match(EMAIL_PATTERN, email))
    
    @staticmethod
    def validate_password(password: str) -> List[str]:
        """Validate password strength."""
        errors = []
        
        if not password:
            errors.append("Password is required")
        elif len(password) < 6:
            errors.append("Password must be at least 6 characters long")
        elif len(password) > 128:
            errors.append("Password is too long")
        
        return errors
    
    @staticmethod
    def missing_fields(data: Dict, required_fields: Iterable[str]) -> List[str]:
        """Return the required fields that are absent or blank."""
        missing = []
        
        for field in required_fields:
            value = data.get(field) if data else None
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(field)
        
        return missing
    
    @staticmethod
    def require_fields(data: Dict, required_fields: Iterable[str]) -> None:
        """Raise InvalidInput naming every missing field."""
        missing = Validator.missing_fields(data, required_fields)
        if missing:
            raise InvalidInput(f"Missing required field(s): {', '.join(missing)}")
    
    @staticmethod
    def clean_text(value, label: str, required: bool = True, max_length: int = 100) -> str:
        """Trim a text field, enforcing presence and length."""
        if value is None:
            value = ''
        if not isinstance(value, str):
            raise InvalidInput(f"{label} must be a string")
        value = value.strip()
        if required and not value:
            raise InvalidInput(f"{label} is required")
        if len(value) > max_length:
            raise InvalidInput(f"{label} is too long")
        return value
