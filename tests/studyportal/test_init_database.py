from studyportal.auth.passwords import verify_password
from studyportal.init_database import initialize_database
from studyportal.models.user import User


def test_initialize_database_creates_default_accounts_once(database, db) -> None:
    assert initialize_database(database) == ['admin', 'student']
    assert initialize_database(database) == []

    admin = db.query(User).filter(User.username == 'admin').one()
    student = db.query(User).filter(User.username == 'student').one()
    assert admin.role == 'admin'
    assert admin.student_id is None
    assert verify_password('admin123', admin.hashed_password)
    assert student.role == 'student'
    assert student.student_id == 'STU-12345'
    assert verify_password('password123', student.hashed_password)
