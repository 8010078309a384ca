import logging
import time

from sqlalchemy.orm import Session

from studyportal.auth.passwords import get_password_hash
from studyportal.core.errors import BusinessRuleError, NotFoundError
from studyportal.models.user import ROLE_ADMIN, ROLE_STUDENT, User, utcnow
from studyportal.schemas.auth import (
    AdminRegistrationRequest,
    ProfileUpdateRequest,
    StudentRegistrationRequest,
)

logger = logging.getLogger(__name__)

AVATAR_URL_TEMPLATE = "https://placehold.co/256x256/E0F2FE/0891B2?text={initial}"


def avatar_url_for(name: str) -> str:
    return AVATAR_URL_TEMPLATE.format(initial=name[:1].upper())


def generate_student_id() -> str:
    return f"STU-{str(int(time.time() * 1000))[-8:]}"


def _ensure_username_free(db: Session, username: str) -> None:
    if db.query(User.id).filter(User.username == username).first():
        raise BusinessRuleError("Username already exists")


def register_student(db: Session, data: StudentRegistrationRequest) -> User:
    _ensure_username_free(db, data.username)
    if data.student_id and db.query(User.id).filter(User.student_id == data.student_id).first():
        raise BusinessRuleError("Student ID already exists")

    now = utcnow()
    user = User(
        name=data.name,
        username=data.username,
        hashed_password=get_password_hash(data.password),
        role=ROLE_STUDENT,
        student_id=data.student_id or generate_student_id(),
        department=data.department or "General Studies",
        division=data.division or "A",
        semester=data.semester or "1st",
        avatar_url=avatar_url_for(data.name),
        created_at=now,
        updated_at=now,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Student %s registered", user.id)
    return user


def register_admin(db: Session, data: AdminRegistrationRequest, created_by: int) -> User:
    _ensure_username_free(db, data.username)

    now = utcnow()
    user = User(
        name=data.name,
        username=data.username,
        hashed_password=get_password_hash(data.password),
        role=ROLE_ADMIN,
        department=data.department or "Administration",
        division=data.division or "Admin",
        semester="N/A",
        avatar_url=avatar_url_for(data.name),
        created_at=now,
        updated_at=now,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Admin %s registered by user %s", user.id, created_by)
    return user


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise NotFoundError("User not found")
    return user


def update_profile(db: Session, user_id: int, data: ProfileUpdateRequest) -> User:
    changes = data.changes()
    if not changes:
        raise BusinessRuleError("No valid fields to update")

    user = get_user(db, user_id)
    for field, value in changes.items():
        setattr(user, field, value)
    user.updated_at = utcnow()
    db.commit()
    db.refresh(user)
    logger.info("Profile of user %s updated (%s)", user_id, ", ".join(sorted(changes)))
    return user
