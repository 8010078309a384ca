from datetime import datetime

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from studyportal.core.validation import (
    NAME_PATTERN,
    PASSWORD_COMPLEXITY_MESSAGE,
    PASSWORD_PATTERN,
    PHONE_PATTERN,
    USERNAME_PATTERN,
    check_length,
    check_pattern,
    is_blank,
    require,
)
from studyportal.schemas.common import RequestBody

NAME_LENGTH_MESSAGE = "Name must be between 2 and 100 characters"
NAME_PATTERN_MESSAGE = "Name can only contain letters and spaces"
USERNAME_LENGTH_MESSAGE = "Username must be between 3 and 50 characters"
DEPARTMENT_LENGTH_MESSAGE = "Department must be between 2 and 100 characters"
DIVISION_LENGTH_MESSAGE = "Division must be between 1 and 10 characters"
SEMESTER_LENGTH_MESSAGE = "Semester must be between 1 and 10 characters"


def _validate_name(value: str) -> str:
    check_length(value, NAME_LENGTH_MESSAGE, 2, 100)
    return check_pattern(value, NAME_PATTERN, NAME_PATTERN_MESSAGE)


def _validate_new_username(value: str | None) -> str:
    require(value, "Username is required")
    check_length(value, USERNAME_LENGTH_MESSAGE, 3, 50)
    return check_pattern(
        value,
        USERNAME_PATTERN,
        "Username can only contain letters, numbers, and underscores",
    )


def _validate_new_password(value: str | None) -> str:
    require(value, "Password is required")
    check_length(value, "Password must be at least 6 characters long", 6)
    return check_pattern(value, PASSWORD_PATTERN, PASSWORD_COMPLEXITY_MESSAGE)


def _optional_length(value: str | None, message: str, min_length: int, max_length: int) -> str | None:
    if is_blank(value):
        return None
    return check_length(value, message, min_length, max_length)


class LoginRequest(RequestBody):
    username: str | None = None
    password: str | None = None

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str | None) -> str:
        require(value, "Username is required")
        return check_length(value, USERNAME_LENGTH_MESSAGE, 3, 50)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str | None) -> str:
        require(value, "Password is required")
        return check_length(value, "Password must be at least 6 characters long", 6)


class AdminRegistrationRequest(RequestBody):
    name: str | None = None
    username: str | None = None
    password: str | None = None
    department: str | None = None
    division: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str | None) -> str:
        require(value, "Name is required")
        return _validate_name(value)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str | None) -> str:
        return _validate_new_username(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str | None) -> str:
        return _validate_new_password(value)

    @field_validator("department")
    @classmethod
    def validate_department(cls, value: str | None) -> str | None:
        return _optional_length(value, DEPARTMENT_LENGTH_MESSAGE, 2, 100)

    @field_validator("division")
    @classmethod
    def validate_division(cls, value: str | None) -> str | None:
        return _optional_length(value, DIVISION_LENGTH_MESSAGE, 1, 10)


class StudentRegistrationRequest(AdminRegistrationRequest):
    confirm_password: str | None = Field(default=None, alias="confirmPassword")
    student_id: str | None = None
    semester: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str | None) -> str:
        require(value, "Full name is required")
        return _validate_name(value)

    @field_validator("confirm_password")
    @classmethod
    def validate_confirm_password(cls, value: str | None, info: ValidationInfo) -> str:
        require(value, "Please confirm your password")
        # A failed password already reports its own error.
        if "password" in info.data and value != info.data["password"]:
            raise ValueError("Passwords do not match")
        return value

    @field_validator("student_id")
    @classmethod
    def validate_student_id(cls, value: str | None) -> str | None:
        return _optional_length(value, "Student ID must be between 5 and 20 characters", 5, 20)

    @field_validator("semester")
    @classmethod
    def validate_semester(cls, value: str | None) -> str | None:
        return _optional_length(value, SEMESTER_LENGTH_MESSAGE, 1, 10)


class ProfileUpdateRequest(RequestBody):
    """Every field is optional; blank values mean "leave unchanged"."""

    name: str | None = None
    department: str | None = None
    division: str | None = None
    semester: str | None = None
    emergency_contact_name: str | None = None
    emergency_contact_relationship: str | None = None
    emergency_contact_phone: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str | None) -> str | None:
        if is_blank(value):
            return None
        return _validate_name(value).strip() or None

    @field_validator("department")
    @classmethod
    def validate_department(cls, value: str | None) -> str | None:
        return _trimmed(_optional_length(value, DEPARTMENT_LENGTH_MESSAGE, 2, 100))

    @field_validator("division")
    @classmethod
    def validate_division(cls, value: str | None) -> str | None:
        return _trimmed(_optional_length(value, DIVISION_LENGTH_MESSAGE, 1, 10))

    @field_validator("semester")
    @classmethod
    def validate_semester(cls, value: str | None) -> str | None:
        return _trimmed(_optional_length(value, SEMESTER_LENGTH_MESSAGE, 1, 10))

    @field_validator("emergency_contact_name")
    @classmethod
    def validate_emergency_contact_name(cls, value: str | None) -> str | None:
        if is_blank(value):
            return None
        check_length(value, "Emergency contact name must be between 2 and 100 characters", 2, 100)
        check_pattern(value, NAME_PATTERN, "Emergency contact name can only contain letters and spaces")
        return value.strip() or None

    @field_validator("emergency_contact_relationship")
    @classmethod
    def validate_emergency_contact_relationship(cls, value: str | None) -> str | None:
        return _trimmed(
            _optional_length(
                value,
                "Emergency contact relationship must be between 2 and 50 characters",
                2,
                50,
            )
        )

    @field_validator("emergency_contact_phone")
    @classmethod
    def validate_emergency_contact_phone(cls, value: str | None) -> str | None:
        if is_blank(value):
            return None
        check_pattern(
            value,
            PHONE_PATTERN,
            "Please enter a valid phone number (e.g., +1234567890 or 1234567890)",
        )
        return value.strip()

    def changes(self) -> dict[str, str]:
        return {field: value for field, value in self.model_dump().items() if value}


def _trimmed(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


class PasswordChangeRequest(RequestBody):
    current_password: str | None = Field(default=None, alias="currentPassword")
    new_password: str | None = Field(default=None, alias="newPassword")

    @field_validator("current_password")
    @classmethod
    def validate_current_password(cls, value: str | None) -> str:
        return require(value, "Current password is required")

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, value: str | None) -> str:
        value = value or ""
        check_length(value, "New password must be at least 6 characters long", 6)
        return check_pattern(
            value,
            PASSWORD_PATTERN,
            "New password must contain at least one uppercase letter, one lowercase letter, and one number",
        )


class UserResponse(BaseModel):
    id: int
    name: str
    username: str
    role: str
    student_id: str | None = None
    department: str | None = None
    division: str | None = None
    semester: str | None = None
    emergency_contact_name: str | None = None
    emergency_contact_relationship: str | None = None
    emergency_contact_phone: str | None = None
    avatar_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class RegisteredUserResponse(BaseModel):
    id: int
    name: str
    username: str
    role: str
    student_id: str | None = None

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    message: str
    user: UserResponse
    token: str


class ProfileResponse(BaseModel):
    user: UserResponse


class RegistrationResponse(BaseModel):
    message: str
    user: RegisteredUserResponse
