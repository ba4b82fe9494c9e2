"""Per-instructor attendance settings."""
from attendscan import db
from attendscan.models.base import BaseModel

class InstructorSettings(BaseModel):
    """Settings an instructor configures once and every session inherits."""
    
    __tablename__ = 'instructor_settings'
    
    instructor_id = db.Column(db.Integer, db.ForeignKey('users.id'), unique=True, nullable=False)
    system_name = db.Column(db.String(100), nullable=False)
    university = db.Column(db.String(255), nullable=False)
    late_threshold_minutes = db.Column(db.Integer, nullable=False)
    default_duration_minutes = db.Column(db.Integer, nullable=False)
    timezone = db.Column(db.String(64), nullable=False, default='UTC')
    
    instructor = db.relationship('User', backref=db.backref('settings', uselist=False))
    
    def to_dict(self):
        return super().to_dict(exclude=['id', 'created_at'])
