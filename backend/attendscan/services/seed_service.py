"""Database seeding service for demo data."""
from flask import current_app
from attendscan import db
from attendscan.models.user import User, UserRole
from attendscan.models.enrollment import Enrollment
from attendscan.services.auth_service import AuthService

DEMO_PASSWORD = 'attendscan123'

class SeedService:
    """Service to seed database with demo data."""

    @staticmethod
    def seed_all():
        """Seed all demo data."""
        instructor = SeedService.seed_instructor()
        SeedService.seed_students(instructor)

    @staticmethod
    def seed_instructor() -> User:
        instructor = User.query.filter_by(email='instructor@university.edu').first()
        if not instructor:
            instructor = AuthService.register(
                email='instructor@university.edu',
                password=DEMO_PASSWORD,
                first_name='Maria',
                last_name='Santos',
                role=UserRole.INSTRUCTOR.value
            )
        current_app.logger.info('Seeded instructor %s', instructor.email)
        return instructor

    @staticmethod
    def seed_students(instructor: User, count: int = 10):
        """Seed students enrolled in CS101 section A on the instructor's roster."""
        for number in range(1, count + 1):
            email = f'student{number:02d}@university.edu'
            if not User.query.filter_by(email=email).first():
                AuthService.register(
                    email=email,
                    password=DEMO_PASSWORD,
                    first_name='Student',
                    last_name=f'{number:02d}',
                    role=UserRole.STUDENT.value,
                    student_id=f'25{number:04d}',
                    course='CS101',
                    section='A'
                )
            if not Enrollment.query.filter_by(instructor_id=instructor.id, email=email).first():
                db.session.add(Enrollment(
                    instructor_id=instructor.id,
                    email=email,
                    name=f'Student {number:02d}',
                    course='CS101',
                    section='A'
                ))

        db.session.commit()
        current_app.logger.info('Seeded %d students', count)
