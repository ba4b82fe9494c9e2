"""Attendance ledger record."""
from enum import Enum
from attendscan import db
from attendscan.models.base import BaseModel
from attendscan.utils.helpers import utcnow

class AttendanceStatus(Enum):
    """Attendance status enumeration."""
    PRESENT = 'present'
    LATE = 'late'
    ABSENT = 'absent'  # only written by external batch processes

class AttendanceRecord(BaseModel):
    """One accepted redemption. Immutable once written."""
    
    __tablename__ = 'attendance_records'
    
    student_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    student_name = db.Column(db.String(255), nullable=False)
    student_number = db.Column(db.String(7), nullable=True)
    
    # Denormalized from the session at redemption time
    class_id = db.Column(db.String(160), db.ForeignKey('attendance_sessions.class_id'), nullable=False, index=True)
    class_name = db.Column(db.String(100), nullable=False)
    course = db.Column(db.String(50), nullable=False)
    section = db.Column(db.String(20), nullable=False, default='')
    instructor_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    date = db.Column(db.String(10), nullable=False)
    
    scanned_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    status = db.Column(db.Enum(AttendanceStatus), nullable=False, default=AttendanceStatus.PRESENT)
    method = db.Column(db.String(10), nullable=False, default='qr')  # qr, manual
    
    __table_args__ = (
        db.UniqueConstraint('student_id', 'class_id', name='uq_attendance_student_class'),
    )
    
    def to_dict(self):
        """Convert to dictionary."""
        data = super().to_dict(exclude=['updated_at'])
        data['status'] = self.status.value
        return data
    
    def __repr__(self):
        return f'<AttendanceRecord {self.student_id}-{self.class_id} {self.status.value}>'
