from dataclasses import dataclass

import jwt
from fastapi import Depends
from fastapi.security import APIKeyHeader
from sqlalchemy.orm import Session

from studyportal.auth import jwt_handler, sessions
from studyportal.core.errors import AuthenticationError, AuthorizationError
from studyportal.database import get_db
from studyportal.models.user import ROLE_ADMIN, ROLE_STUDENT, User

security = APIKeyHeader(name="Authorization", auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    id: int
    username: str
    role: str
    name: str
    token: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def _extract_token(authorization: str | None) -> str | None:
    # "<scheme> <token>": the scheme word itself is not checked.
    if not authorization:
        return None
    parts = authorization.split(" ")
    return parts[1] if len(parts) > 1 else None


def get_current_user(
    authorization: str | None = Depends(security),
    db: Session = Depends(get_db),
) -> CurrentUser:
    token = _extract_token(authorization)
    if not token:
        raise AuthenticationError("Access token required")

    try:
        payload = jwt_handler.decode_access_token(token)
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationError("Token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthorizationError("Invalid token") from exc

    user_id = payload.get("userId")
    if not isinstance(user_id, int):
        raise AuthorizationError("Invalid token")

    if sessions.find_active_session(db, token) is None:
        raise AuthenticationError("Invalid or expired token")

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise AuthenticationError("User not found")

    return CurrentUser(
        id=user.id,
        username=user.username,
        role=user.role,
        name=user.name,
        token=token,
    )


def require_roles(*roles: str, detail: str = "Insufficient permissions"):
    allowed = frozenset(roles)

    def dependency(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if current_user.role not in allowed:
            raise AuthorizationError(detail)
        return current_user

    return dependency


require_admin = require_roles(ROLE_ADMIN)
require_student = require_roles(ROLE_STUDENT)
require_any_role = require_roles(ROLE_ADMIN, ROLE_STUDENT)
