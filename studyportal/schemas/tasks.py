from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, field_validator

from studyportal.core.validation import check_length, check_not_past, parse_iso_date, require
from studyportal.models.task import TASK_STATUSES
from studyportal.schemas.common import RequestBody

SUBJECT_LENGTH_MESSAGE = "Subject must be between 2 and 50 characters"
TITLE_LENGTH_MESSAGE = "Title must be between 5 and 200 characters"
DESCRIPTION_LENGTH_MESSAGE = "Description must be between 10 and 1000 characters"
STATUS_MESSAGE = f"Status must be one of: {', '.join(TASK_STATUSES)}"
ASSIGNEE_MESSAGE = "Assigned to must be a valid user ID"


def _validate_status(value: str | None) -> str | None:
    if value is not None and value not in TASK_STATUSES:
        raise ValueError(STATUS_MESSAGE)
    return value


def _validate_assignee(value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(ASSIGNEE_MESSAGE)
    if isinstance(value, str):
        value = value.strip()
        if not value.isdigit():
            raise ValueError(ASSIGNEE_MESSAGE)
        value = int(value)
    if not isinstance(value, int) or value < 1:
        raise ValueError(ASSIGNEE_MESSAGE)
    return value


class TaskCreateRequest(RequestBody):
    subject: str | None = None
    title: str | None = None
    description: str | None = None
    due_date: date | None = None
    status: str | None = None
    assigned_to: int | None = None

    @field_validator("subject")
    @classmethod
    def validate_subject(cls, value: str | None) -> str:
        require(value, "Subject is required")
        return check_length(value, SUBJECT_LENGTH_MESSAGE, 2, 50)

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str | None) -> str:
        require(value, "Title is required")
        return check_length(value, TITLE_LENGTH_MESSAGE, 5, 200)

    @field_validator("description")
    @classmethod
    def validate_description(cls, value: str | None) -> str:
        require(value, "Description is required")
        return check_length(value, DESCRIPTION_LENGTH_MESSAGE, 10, 1000)

    @field_validator("due_date", mode="before")
    @classmethod
    def validate_due_date(cls, value: Any) -> date:
        require(value, "Due date is required")
        return check_not_past(parse_iso_date(value))

    @field_validator("status")
    @classmethod
    def validate_status(cls, value: str | None) -> str | None:
        return _validate_status(value)

    @field_validator("assigned_to", mode="before")
    @classmethod
    def validate_assigned_to(cls, value: Any) -> int | None:
        return _validate_assignee(value)


class TaskUpdateRequest(RequestBody):
    """Partial update: only supplied, non-empty fields are applied.

    ``assigned_to`` is the one field where an explicit ``null`` means
    something: it turns the task into a global one.
    """

    subject: str | None = None
    title: str | None = None
    description: str | None = None
    due_date: date | None = None
    status: str | None = None
    assigned_to: int | None = None

    @field_validator("subject")
    @classmethod
    def validate_subject(cls, value: str | None) -> str | None:
        return None if value is None else check_length(value, SUBJECT_LENGTH_MESSAGE, 2, 50)

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str | None) -> str | None:
        return None if value is None else check_length(value, TITLE_LENGTH_MESSAGE, 5, 200)

    @field_validator("description")
    @classmethod
    def validate_description(cls, value: str | None) -> str | None:
        return None if value is None else check_length(value, DESCRIPTION_LENGTH_MESSAGE, 10, 1000)

    @field_validator("due_date", mode="before")
    @classmethod
    def validate_due_date(cls, value: Any) -> date | None:
        return None if value is None else parse_iso_date(value)

    @field_validator("status")
    @classmethod
    def validate_status(cls, value: str | None) -> str | None:
        return _validate_status(value)

    @field_validator("assigned_to", mode="before")
    @classmethod
    def validate_assigned_to(cls, value: Any) -> int | None:
        return _validate_assignee(value)

    def changes(self) -> dict[str, Any]:
        """Fields to write; falsy values other than an explicit assignee are skipped."""
        updates = {
            field: getattr(self, field)
            for field in ("subject", "title", "description", "due_date", "status")
            if getattr(self, field)
        }
        if "assigned_to" in self.model_fields_set:
            updates["assigned_to"] = self.assigned_to
        return updates


class TaskResponse(BaseModel):
    id: int
    subject: str
    title: str
    description: str
    due_date: date
    status: str
    created_by: int
    assigned_to: int | None = None
    assigned_to_name: str | None = None
    assigned_to_username: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_task(cls, task) -> "TaskResponse":
        assignee = task.assignee
        return cls(
            id=task.id,
            subject=task.subject,
            title=task.title,
            description=task.description,
            due_date=task.due_date,
            status=task.status,
            created_by=task.created_by,
            assigned_to=task.assigned_to,
            assigned_to_name=assignee.name if assignee else None,
            assigned_to_username=assignee.username if assignee else None,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )
