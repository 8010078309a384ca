"""Homework and assignment model definitions.

Both tables share one column layout; ``TaskColumns`` holds it so the two
models cannot drift apart.
"""

from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import declared_attr, relationship

from studyportal.database import Base
from studyportal.models.user import utcnow

STATUS_PENDING = "Pending"
STATUS_COMPLETED = "Completed"
STATUS_OVERDUE = "Overdue"
TASK_STATUSES = (STATUS_PENDING, STATUS_COMPLETED, STATUS_OVERDUE)


class TaskColumns:
    id = Column(Integer, primary_key=True)
    subject = Column(String, nullable=False)
    title = Column(String, nullable=False)
    description = Column(String, nullable=False)
    due_date = Column(Date, nullable=False)
    status = Column(String, nullable=False, default=STATUS_PENDING)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)

    @declared_attr
    def __table_args__(cls):
        return (
            CheckConstraint(
                "status IN ('Pending', 'Completed', 'Overdue')",
                name=f"ck_{cls.__tablename__}_status",
            ),
        )

    @declared_attr
    def created_by(cls):
        return Column(Integer, ForeignKey("users.id"), nullable=False)

    @declared_attr
    def assigned_to(cls):
        # NULL means the task is global and visible to every student.
        return Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    @declared_attr
    def assignee(cls):
        return relationship("User", foreign_keys=f"{cls.__name__}.assigned_to", lazy="joined")


class Homework(TaskColumns, Base):
    """A homework item created by an administrator."""
    __tablename__ = "homework"


class Assignment(TaskColumns, Base):
    """An assignment created by an administrator."""
    __tablename__ = "assignments"
