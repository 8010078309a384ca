"""Role-aware queries over homework and assignments.

Homework and assignments are the same entity stored in two tables. One
``TaskService`` serves both; a ``TaskKind`` names the table and the words
used in responses.

Visibility rule: administrators see every task; a student sees the tasks
assigned to them plus the global ones (``assigned_to IS NULL``). The rule is
part of the SQL query, and a task a student may not see is reported as
missing rather than forbidden.
"""

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from studyportal.auth.dependencies import CurrentUser
from studyportal.core.errors import AuthorizationError, BusinessRuleError, NotFoundError
from studyportal.models.task import STATUS_PENDING, Assignment, Homework, TaskColumns
from studyportal.models.user import ROLE_STUDENT, User, utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaskKind:
    model: type[TaskColumns]
    label: str
    item_key: str
    collection_key: str
    plural_label: str

    @property
    def not_found_message(self) -> str:
        return f"{self.label} not found"


HOMEWORK = TaskKind(
    model=Homework,
    label="Homework",
    item_key="homework",
    collection_key="homework",
    plural_label="homework",
)
ASSIGNMENTS = TaskKind(
    model=Assignment,
    label="Assignment",
    item_key="assignment",
    collection_key="assignments",
    plural_label="assignments",
)

INVALID_ASSIGNEE_MESSAGE = "Invalid student ID for assignment"


class TaskService:
    def __init__(self, kind: TaskKind, db: Session):
        self.kind = kind
        self.model = kind.model
        self.db = db

    def _visible_to(self, caller: CurrentUser) -> Query:
        query = self.db.query(self.model)
        if caller.role == ROLE_STUDENT:
            query = query.filter(
                or_(self.model.assigned_to == caller.id, self.model.assigned_to.is_(None))
            )
        elif not caller.is_admin:
            raise AuthorizationError("Insufficient permissions")
        return query

    def _require_admin(self, caller: CurrentUser, detail: str = "Insufficient permissions") -> None:
        if not caller.is_admin:
            raise AuthorizationError(detail)

    def _ensure_student(self, user_id: int) -> None:
        student = (
            self.db.query(User.id)
            .filter(User.id == user_id, User.role == ROLE_STUDENT)
            .first()
        )
        if student is None:
            raise BusinessRuleError(INVALID_ASSIGNEE_MESSAGE)

    def _find(self, task_id: int):
        return self.db.query(self.model).filter(self.model.id == task_id).first()

    def list(self, caller: CurrentUser) -> list:
        return (
            self._visible_to(caller)
            .order_by(
                self.model.due_date.asc(),
                self.model.created_at.desc(),
                self.model.id.desc(),
            )
            .all()
        )

    def get(self, caller: CurrentUser, task_id: int):
        task = self._visible_to(caller).filter(self.model.id == task_id).first()
        if task is None:
            raise NotFoundError(self.kind.not_found_message)
        return task

    def create(self, caller: CurrentUser, fields: dict[str, Any]):
        self._require_admin(caller)

        assigned_to = fields.get("assigned_to")
        if assigned_to is not None:
            self._ensure_student(assigned_to)

        now = utcnow()
        task = self.model(
            subject=fields["subject"],
            title=fields["title"],
            description=fields["description"],
            due_date=fields["due_date"],
            status=STATUS_PENDING,
            created_by=caller.id,
            assigned_to=assigned_to,
            created_at=now,
            updated_at=now,
        )
        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)
        logger.info("%s %s created by user %s", self.kind.label, task.id, caller.id)
        return task

    def update(self, caller: CurrentUser, task_id: int, changes: dict[str, Any]):
        task = self._find(task_id)
        if task is None:
            raise NotFoundError(self.kind.not_found_message)

        self._require_admin(
            caller, detail=f"Only administrators can update {self.kind.plural_label}"
        )

        new_assignee = changes.get("assigned_to")
        if new_assignee and new_assignee != task.assigned_to:
            self._ensure_student(new_assignee)

        for field, value in changes.items():
            setattr(task, field, value)
        task.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(task)
        logger.info("%s %s updated by user %s", self.kind.label, task.id, caller.id)
        return task

    def delete(self, caller: CurrentUser, task_id: int) -> None:
        self._require_admin(caller)

        task = self._find(task_id)
        if task is None:
            raise NotFoundError(self.kind.not_found_message)

        self.db.delete(task)
        self.db.commit()
        logger.info("%s %s deleted by user %s", self.kind.label, task_id, caller.id)
