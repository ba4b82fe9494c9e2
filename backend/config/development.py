"""Development configuration."""
import os

from .base import BaseConfig

class DevelopmentConfig(BaseConfig):
    """Development configuration class."""
    
    DEBUG = True
    TESTING = False
    
    # Database
    SQLALCHEMY_DATABASE_URI = os.getenv('DEV_DATABASE_URL') or \
        'sqlite:///attendscan_dev.db'
    SQLALCHEMY_ECHO = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'connect_args': {'timeout': BaseConfig.STORE_TIMEOUT_SECONDS}
    }
    
    # Redis (optional in dev)
    REDIS_URL = os.getenv('REDIS_URL')
    RATELIMIT_STORAGE_URI = REDIS_URL or 'memory://'
    
    LOG_LEVEL = 'DEBUG'
