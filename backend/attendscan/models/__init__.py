"""Models package with all models."""
from .base import BaseModel
from .user import User, UserRole
from .attendance_session import AttendanceSession
from .attendance import AttendanceRecord, AttendanceStatus
from .settings import InstructorSettings
from .enrollment import Enrollment

__all__ = [
    'BaseModel', 'User', 'UserRole',
    'AttendanceSession', 'AttendanceRecord', 'AttendanceStatus',
    'InstructorSettings', 'Enrollment'
]
