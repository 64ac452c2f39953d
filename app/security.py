"""
Bearer-token verification and the ownership policy.

Tokens are issued by the identity service; this API only verifies the
signature and reads two claims:

- ``Id``  : the acting user's id (missing → None, which owns nothing)
- ``role``: a role name or a list of role names

Route handlers resolve the acting user id through these dependencies and
pass it explicitly into the service layer.
"""
import logging
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.config import settings
from app.exceptions import AuthenticationError, ForbiddenError
from app.models import ROLES

logger = logging.getLogger(__name__)

USER_ID_CLAIM = "Id"
ROLE_CLAIM = "role"

_bearer = HTTPBearer(auto_error=False)


def create_access_token(user_id: str, roles: str | list[str] = "user", **extra) -> str:
    """Mint a signed token in the identity service's format (seeding, tests)."""
    payload = {USER_ID_CLAIM: user_id, ROLE_CLAIM: roles, **extra}
    payload["exp"] = datetime.now(timezone.utc) + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token has expired")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid token")


def current_user_id(claims: dict | None) -> str | None:
    """Return the ``Id`` claim, or None when it is absent."""
    if not claims:
        return None
    value = claims.get(USER_ID_CLAIM)
    return str(value) if value is not None else None


def is_owner(acting_user_id: str | None, owner_id: str | None) -> bool:
    return acting_user_id is not None and acting_user_id == owner_id


def _roles_of(claims: dict) -> set[str]:
    """A single role string or a list of them; any other shape grants nothing."""
    roles = claims.get(ROLE_CLAIM)
    if isinstance(roles, str):
        return {roles}
    if isinstance(roles, (list, tuple)):
        return {r for r in roles if isinstance(r, str)}
    return set()


# ---------------------------------------------------------------------------
# FastAPI dependencies
# ---------------------------------------------------------------------------

async def optional_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> dict | None:
    if credentials is None:
        return None
    return decode_token(credentials.credentials)


async def require_claims(claims: dict | None = Depends(optional_claims)) -> dict:
    if claims is None:
        raise AuthenticationError("Authorization header is missing or invalid")
    return claims


def require_roles(*roles: str):
    """Dependency factory: the caller must hold at least one of *roles*."""
    allowed = set(roles)

    async def _check(claims: dict = Depends(require_claims)) -> dict:
        if not _roles_of(claims) & allowed:
            logger.warning(
                "User %s refused: roles %s not in %s",
                current_user_id(claims), sorted(_roles_of(claims)), sorted(allowed),
            )
            raise ForbiddenError("Insufficient role")
        return claims

    return _check


require_member = require_roles(*ROLES)
