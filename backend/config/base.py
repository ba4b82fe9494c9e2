"""Settings shared by every environment."""
import os
from datetime import timedelta

class BaseConfig:
    """Base configuration."""
    SECRET_KEY = os.getenv('SECRET_KEY') or 'dev-secret-key-change-in-production'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = False
    SQLALCHEMY_ENGINE_OPTIONS = {}
    
    # JWT Configuration
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY') or 'jwt-secret-key-change-in-production'
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=2)
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(days=7)
    JWT_ALGORITHM = 'HS256'
    
    # CORS
    CORS_ORIGINS = ["http://localhost:*", "http://127.0.0.1:*"]
    
    # Rate Limiting
    RATELIMIT_STORAGE_URI = 'memory://'
    # Keyed on the JWT identity; login and register on the client address
    RATELIMIT_DEFAULT = "2000 per day, 300 per hour"
    RATELIMIT_REDEEM = "10 per minute"
    RATELIMIT_LOGIN = "5 per minute"
    RATELIMIT_REGISTER = "300 per hour"
    
    # Sessions
    SESSION_CODE_LENGTH = 8
    # No O/0 or I/1 so codes survive being read off a projector
    SESSION_CODE_ALPHABET = 'ABCDEFGHJKLMNPQRSTUVWXYZ23456789'
    SESSION_CODE_MAX_ATTEMPTS = 20
    SESSION_DURATION_CHOICES = (15, 30, 60, 120, 180, 360, 720, 1440)
    DEFAULT_DURATION_MINUTES = 60
    
    # Attendance
    LATE_THRESHOLD_MINUTES = 15
    ENFORCE_ENROLLMENT = False
    DEFAULT_TIMEZONE = 'UTC'
    
    # Instructor settings defaults
    DEFAULT_SYSTEM_NAME = 'AttendScan'
    DEFAULT_UNIVERSITY = 'Your University'
    
    # Store
    STORE_TIMEOUT_SECONDS = 10
    
    # File Upload
    MAX_CONTENT_LENGTH = 4 * 1024 * 1024
    ALLOWED_EXTENSIONS = {'csv'}
    
    # Logging
    LOG_LEVEL = 'INFO'
    LOG_FILE = 'logs/app.log'
