"""Instructor roster entries."""
from attendscan import db
from attendscan.models.base import BaseModel

class Enrollment(BaseModel):
    """A student email registered on an instructor's course/section list."""
    
    __tablename__ = 'enrollments'
    
    instructor_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    email = db.Column(db.String(255), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    course = db.Column(db.String(50), nullable=False)
    section = db.Column(db.String(20), nullable=False, default='')
    
    __table_args__ = (
        db.UniqueConstraint('instructor_id', 'email', 'course', 'section', name='uq_enrollment_entry'),
    )
    
    def to_dict(self):
        return super().to_dict(exclude=['updated_at'])
    
    def __repr__(self):
        return f'<Enrollment {self.email} {self.course}-{self.section}>'
