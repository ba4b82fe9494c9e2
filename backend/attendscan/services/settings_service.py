"""Instructor settings service."""
from typing import Dict, Optional
import pytz
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from attendscan import db
from attendscan.models.settings import InstructorSettings
from attendscan.models.user import User
from attendscan.utils.errors import InvalidInput, NotAuthenticated, StoreUnavailable
from attendscan.utils.validators import Validator

class SettingsService:
    """Reads and writes the per-instructor settings row, falling back to config."""
    
    @staticmethod
    def defaults() -> Dict:
        config = current_app.config
        return {
            'system_name': config['DEFAULT_SYSTEM_NAME'],
            'university': config['DEFAULT_UNIVERSITY'],
            'late_threshold_minutes': config['LATE_THRESHOLD_MINUTES'],
            'default_duration_minutes': config['DEFAULT_DURATION_MINUTES'],
            'timezone': config['DEFAULT_TIMEZONE']
        }
    
    @staticmethod
    def get_row(instructor_id: int) -> Optional[InstructorSettings]:
        try:
            return InstructorSettings.query.filter_by(instructor_id=instructor_id).first()
        except SQLAlchemyError as e:
            raise StoreUnavailable() from e
    
    @staticmethod
    def get_settings(instructor_id: int) -> Dict:
        """Effective settings for an instructor."""
        settings = SettingsService.defaults()
        row = SettingsService.get_row(instructor_id)
        if row:
            settings.update({key: getattr(row, key) for key in settings})
        return settings
    
    @staticmethod
    def late_threshold_minutes(instructor_id: int) -> int:
        return SettingsService.get_settings(instructor_id)['late_threshold_minutes']
    
    @staticmethod
    def timezone_for(instructor_id: int):
        name = SettingsService.get_settings(instructor_id)['timezone']
        try:
            return pytz.timezone(name)
        except pytz.UnknownTimeZoneError:
            current_app.logger.warning(
                'Unknown timezone %r for instructor %s, using UTC', name, instructor_id
            )
            return pytz.utc
    
    @staticmethod
    def save_settings(instructor: User, data: Dict) -> InstructorSettings:
        """Validate and persist a partial settings update."""
        if instructor is None or not instructor.is_instructor():
            raise NotAuthenticated("Instructor identity required")
        if not isinstance(data, dict):
            raise InvalidInput("Request body must be a JSON object")
        
        updates = {}
        
        if 'system_name' in data:
            updates['system_name'] = Validator.clean_text(data['system_name'], 'System name')
        
        if 'university' in data:
            updates['university'] = Validator.clean_text(data['university'], 'University', max_length=255)
        
        if 'late_threshold_minutes' in data:
            value = data['late_threshold_minutes']
            if isinstance(value, bool) or not isinstance(value, int) or value < 0 or value > 1440:
                raise InvalidInput("Late threshold must be a whole number of minutes between 0 and 1440")
            updates['late_threshold_minutes'] = value
        
        if 'default_duration_minutes' in data:
            value = data['default_duration_minutes']
            choices = current_app.config['SESSION_DURATION_CHOICES']
            if isinstance(value, bool) or not isinstance(value, int) or value not in choices:
                raise InvalidInput(f"Duration must be one of {', '.join(str(c) for c in choices)} minutes")
            updates['default_duration_minutes'] = value
        
        if 'timezone' in data:
            value = data['timezone']
            if not isinstance(value, str) or value not in pytz.all_timezones_set:
                raise InvalidInput(f"Unknown timezone: {value}")
            updates['timezone'] = value
        
        try:
            row = SettingsService.get_row(instructor.id)
            if row is None:
                row = InstructorSettings(instructor_id=instructor.id, **SettingsService.defaults())
                db.session.add(row)
            for key, value in updates.items():
                setattr(row, key, value)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StoreUnavailable() from e
        
        current_app.logger.info('Settings updated for instructor %s: %s', instructor.id, sorted(updates))
        return row
