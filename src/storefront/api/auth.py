"""Bearer-token authentication for the Storefront API.

Tokens are issued by the accounts service and signed with HS256 using the
shared ``JWT_SECRET``. Claims used here: ``sub`` (user id) and ``role``
(``user`` or ``admin``, defaulting to ``user``).
"""

import os
from dataclasses import dataclass

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from storefront.errors import Forbidden, Unauthorized

JWT_ALGORITHM = "HS256"
ADMIN_ROLE = "admin"
USER_ROLE = "user"

_DEVELOPMENT_SECRET = "storefront-development-secret"

_bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    user_id: str
    role: str = USER_ROLE

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


def jwt_secret() -> str:
    return os.getenv("JWT_SECRET", _DEVELOPMENT_SECRET)


def decode_token(token: str) -> Principal:
    try:
        claims = jwt.decode(token, jwt_secret(), algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise Unauthorized("Access denied. Token has expired.") from None
    except jwt.InvalidTokenError:
        raise Unauthorized("Access denied. Invalid token.") from None

    user_id = claims.get("sub")
    if not user_id:
        raise Unauthorized("Access denied. Invalid token.")
    return Principal(user_id=str(user_id), role=claims.get("role", USER_ROLE))


def issue_token(user_id: str, role: str = USER_ROLE, **claims) -> str:
    """Sign a token the way the accounts service does. Used by tooling and tests."""
    return jwt.encode({"sub": str(user_id), "role": role, **claims}, jwt_secret(), algorithm=JWT_ALGORITHM)


async def current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> Principal:
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Access denied. No token provided.")
    return decode_token(credentials.credentials)


async def require_admin(principal: Principal = Depends(current_principal)) -> Principal:
    if not principal.is_admin:
        raise Forbidden("Access denied. Admin privileges required.")
    return principal
