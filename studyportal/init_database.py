"""Create the tables and the default accounts.

Run with ``python -m studyportal.init_database``. Existing accounts are left
untouched, so the script is safe to run repeatedly.
"""

import logging

from sqlalchemy.orm import Session

from studyportal.auth.passwords import get_password_hash
from studyportal.core import config
from studyportal.database import Database
from studyportal.models.user import ROLE_ADMIN, ROLE_STUDENT, User, utcnow
from studyportal.services.accounts import avatar_url_for

logger = logging.getLogger(__name__)


def _default_accounts() -> list[dict]:
    return [
        {
            "name": "Admin User",
            "username": config.DEFAULT_ADMIN_USERNAME,
            "password": config.DEFAULT_ADMIN_PASSWORD,
            "role": ROLE_ADMIN,
            "student_id": None,
            "department": "Administration",
            "division": "Admin",
            "semester": "N/A",
        },
        {
            "name": "Student User",
            "username": config.DEFAULT_STUDENT_USERNAME,
            "password": config.DEFAULT_STUDENT_PASSWORD,
            "role": ROLE_STUDENT,
            "student_id": "STU-12345",
            "department": "Computer Science",
            "division": "A",
            "semester": "5th",
            "emergency_contact_name": "Emergency Contact",
            "emergency_contact_relationship": "Mother",
            "emergency_contact_phone": "+15551234567",
        },
    ]


def seed_default_accounts(db: Session) -> list[str]:
    created = []
    for account in _default_accounts():
        account = dict(account)
        password = account.pop("password")
        if db.query(User.id).filter(User.username == account["username"]).first():
            logger.info("Default %s user %r already exists", account["role"], account["username"])
            continue
        now = utcnow()
        db.add(
            User(
                **account,
                hashed_password=get_password_hash(password),
                avatar_url=avatar_url_for(account["name"]),
                created_at=now,
                updated_at=now,
            )
        )
        created.append(account["username"])
        logger.info("Default %s user %r created", account["role"], account["username"])
    db.commit()
    return created


def initialize_database(database: Database | None = None) -> list[str]:
    database = database or Database()
    database.create_schema()
    db = database.session()
    try:
        return seed_default_accounts(db)
    finally:
        db.close()


if __name__ == "__main__":
    config.configure_logging()
    initialize_database()
