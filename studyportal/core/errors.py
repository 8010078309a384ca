"""Error taxonomy shared by services and routes.

Each error carries the HTTP status it maps to; ``main.py`` renders them as
``{"error": message, "details": [...]}``.
"""

from typing import Any


class PortalError(Exception):
    status_code = 500

    def __init__(self, message: str, details: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(PortalError):
    status_code = 400

    def __init__(self, details: list[dict[str, Any]], message: str = "Validation failed"):
        super().__init__(message, details)


class BusinessRuleError(PortalError):
    status_code = 400


class AuthenticationError(PortalError):
    status_code = 401


class AuthorizationError(PortalError):
    status_code = 403


class NotFoundError(PortalError):
    status_code = 404


class InternalError(PortalError):
    status_code = 500
