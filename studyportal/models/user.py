"""User model definitions."""

from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String

from studyportal.database import Base

ROLE_ADMIN = "admin"
ROLE_STUDENT = "student"
ROLES = (ROLE_ADMIN, ROLE_STUDENT)

PROFILE_FIELDS = (
    "name",
    "department",
    "division",
    "semester",
    "emergency_contact_name",
    "emergency_contact_relationship",
    "emergency_contact_phone",
)


def utcnow() -> datetime:
    # Naive UTC, so comparisons behave the same on SQLite and Postgres.
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(Base):
    """Represents an application user."""
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('student', 'admin')", name="ck_users_role"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    username = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String, nullable=False, default=ROLE_STUDENT)  # student/admin
    student_id = Column(String, unique=True, nullable=True)
    department = Column(String)
    division = Column(String)
    semester = Column(String)
    emergency_contact_name = Column(String)
    emergency_contact_relationship = Column(String)
    emergency_contact_phone = Column(String)
    avatar_url = Column(String)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @property
    def is_student(self) -> bool:
        return self.role == ROLE_STUDENT
