"""Credential checks and the login session store.

A token is usable only while its JWT signature verifies *and* a matching
``sessions`` row exists whose ``expires_at`` lies in the future.
"""

import logging
from datetime import timedelta

from sqlalchemy.orm import Session

from studyportal.auth import jwt_handler
from studyportal.auth.passwords import dummy_verify, get_password_hash, verify_password
from studyportal.core import config
from studyportal.core.errors import AuthenticationError, BusinessRuleError
from studyportal.models.session import UserSession
from studyportal.models.user import User, utcnow

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


def authenticate(db: Session, username: str, password: str) -> tuple[User, str]:
    user = db.query(User).filter(User.username == username).first()
    if user is None:
        dummy_verify()
        logger.info("Login failed for unknown username %r", username)
        raise AuthenticationError(INVALID_CREDENTIALS)

    if not verify_password(password, user.hashed_password):
        logger.info("Login failed for username %r: wrong password", username)
        raise AuthenticationError(INVALID_CREDENTIALS)

    token = jwt_handler.create_access_token(
        {"userId": user.id, "username": user.username, "role": user.role}
    )
    db.add(
        UserSession(
            user_id=user.id,
            token=token,
            expires_at=utcnow() + timedelta(hours=config.SESSION_TTL_HOURS),
        )
    )
    db.commit()
    logger.info("User %s logged in", user.id)
    return user, token


def find_active_session(db: Session, token: str) -> UserSession | None:
    return (
        db.query(UserSession)
        .filter(UserSession.token == token, UserSession.expires_at > utcnow())
        .first()
    )


def revoke(db: Session, token: str) -> None:
    deleted = db.query(UserSession).filter(UserSession.token == token).delete(
        synchronize_session=False
    )
    db.commit()
    if deleted:
        logger.info("Revoked %d session(s)", deleted)


def revoke_all(db: Session, user_id: int) -> int:
    deleted = db.query(UserSession).filter(UserSession.user_id == user_id).delete(
        synchronize_session=False
    )
    db.commit()
    logger.info("Revoked all %d session(s) of user %s", deleted, user_id)
    return deleted


def change_password(db: Session, user: User, current_password: str, new_password: str) -> None:
    if not verify_password(current_password, user.hashed_password):
        raise BusinessRuleError("Current password is incorrect")

    user.hashed_password = get_password_hash(new_password)
    user.updated_at = utcnow()
    db.commit()
    logger.info("Password changed for user %s", user.id)
    revoke_all(db, user.id)
