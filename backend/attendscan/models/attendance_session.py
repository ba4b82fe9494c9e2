"""Attendance session: one class occurrence that accepts redemptions."""
from datetime import datetime
from typing import Optional
from attendscan import db
from attendscan.models.base import BaseModel
from attendscan.utils.helpers import utcnow, isoformat_utc

class AttendanceSession(BaseModel):
    """Time-boxed session minted by an instructor and rendered as a QR code."""
    
    __tablename__ = 'attendance_sessions'
    
    # Manual-entry code; unique only among live sessions
    session_code = db.Column(db.String(16), nullable=False, index=True)
    class_id = db.Column(db.String(160), unique=True, nullable=False, index=True)
    
    class_name = db.Column(db.String(100), nullable=False)
    course = db.Column(db.String(50), nullable=False)
    section = db.Column(db.String(20), nullable=False, default='')
    
    instructor_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    instructor_name = db.Column(db.String(255), nullable=False)
    
    duration_minutes = db.Column(db.Integer, nullable=False)
    expires_at = db.Column(db.DateTime, nullable=False, index=True)
    ended_at = db.Column(db.DateTime, nullable=True)
    date = db.Column(db.String(10), nullable=False)
    
    # Relationships
    instructor = db.relationship('User', backref=db.backref('attendance_sessions', lazy='dynamic'))
    
    __table_args__ = (
        db.CheckConstraint('expires_at > created_at', name='ck_session_expiry_after_creation'),
    )
    
    @property
    def effective_expires_at(self) -> datetime:
        """Natural expiry, or the early-expiry marker when it comes first."""
        if self.ended_at is not None and self.ended_at < self.expires_at:
            return self.ended_at
        return self.expires_at
    
    def is_live(self, now: Optional[datetime] = None) -> bool:
        """A session is live strictly before its expiry instant."""
        now = now or utcnow()
        return now < self.effective_expires_at
    
    def to_payload(self) -> dict:
        """The JSON object encoded in the session's QR code."""
        return {
            'classId': self.class_id,
            'className': self.class_name,
            'instructorId': str(self.instructor_id),
            'instructorName': self.instructor_name,
            'timestamp': isoformat_utc(self.created_at),
            'expiresAt': isoformat_utc(self.expires_at),
            'date': self.date,
            'sessionId': self.session_code,
            'course': self.course,
            'section': self.section
        }
    
    def to_dict(self, now: Optional[datetime] = None):
        """Convert to dictionary."""
        data = super().to_dict(exclude=['updated_at'])
        data['session_id'] = data.pop('session_code')
        data['is_live'] = self.is_live(now)
        return data
    
    def __repr__(self):
        return f'<AttendanceSession {self.class_id} {self.session_code}>'
