"""Reusable field rules for the request models in ``studyportal.schemas``.

Each helper raises ``ValueError`` with the user-facing message; pydantic
collects those per field so one response reports every failing field.
"""

import re
from datetime import date, datetime
from typing import Any

from fastapi.exceptions import RequestValidationError

NAME_PATTERN = re.compile(r"^[a-zA-Z\s]+$")
USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]+$")
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")
PHONE_PATTERN = re.compile(r"^[+]?[1-9]\d{0,15}$")
ISO_DATE_PATTERN = re.compile(r"^(\d{4}-\d{2}-\d{2})(?:[T ][\d:.]+(?:Z|[+-]\d{2}:?\d{2})?)?$")

PASSWORD_COMPLEXITY_MESSAGE = (
    "Password must contain at least one uppercase letter, one lowercase letter, and one number"
)


def is_blank(value: Any) -> bool:
    """True for values that count as "not provided": None or anything that stringifies to ''."""
    return value is None or str(value) == ""


def require(value: Any, message: str) -> Any:
    if is_blank(value):
        raise ValueError(message)
    return value


def check_length(value: str, message: str, min_length: int = 0, max_length: int | None = None) -> str:
    if len(value) < min_length or (max_length is not None and len(value) > max_length):
        raise ValueError(message)
    return value


def check_pattern(value: str, pattern: re.Pattern, message: str) -> str:
    if not pattern.search(value):
        raise ValueError(message)
    return value


def parse_iso_date(value: Any, message: str = "Please provide a valid date in YYYY-MM-DD format") -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    match = ISO_DATE_PATTERN.match(str(value).strip())
    if not match:
        raise ValueError(message)
    try:
        return date.fromisoformat(match.group(1))
    except ValueError as exc:
        raise ValueError(message) from exc


def check_not_past(value: date, today: date | None = None) -> date:
    if value < (today or date.today()):
        raise ValueError("Due date cannot be in the past")
    return value


def format_validation_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Flatten pydantic errors into the ``details`` list of an error response."""
    details = []
    for error in exc.errors():
        location = error.get("loc", ())
        path = ".".join(str(part) for part in location[1:]) if len(location) > 1 else ""
        message = error.get("msg", "Invalid value")
        if error.get("type") == "value_error" and message.startswith("Value error, "):
            message = message[len("Value error, "):]
        details.append({
            "type": "field",
            "msg": message,
            "path": path,
            "location": str(location[0]) if location else "body",
        })
    return details
