"""Login session model definitions."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from studyportal.database import Base
from studyportal.models.user import utcnow


class UserSession(Base):
    """A token issued at login; deleting the row revokes the token."""
    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    token = Column(String, nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
