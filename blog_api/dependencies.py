from dataclasses import dataclass
from datetime import datetime, timezone

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from blog_api.database import get_db
from blog_api.exceptions import AuthenticationError
from blog_api.models import AccessToken, User
from blog_api.security import hash_token

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class AuthContext:
    """
    Request-scoped identity handed to every handler that needs one.

    Attributes
    ----------
    user:
        The account the bearer token belongs to.
    token:
        The ``AccessToken`` row matching the presented token; logout
        deletes exactly this row.
    """

    user: User
    token: AccessToken


async def _resolve_token(db: AsyncSession, raw_token: str) -> AuthContext | None:
    q = (
        select(AccessToken)
        .where(AccessToken.token_hash == hash_token(raw_token))
        .options(joinedload(AccessToken.user))
    )
    token = (await db.execute(q)).unique().scalar_one_or_none()
    if token is None or token.user is None:
        return None
    token.last_used_at = datetime.now(timezone.utc)
    return AuthContext(user=token.user, token=token)


async def get_optional_auth(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> AuthContext | None:
    """
    ``None`` when no ``Authorization`` header is sent. A header that is
    present but does not match a live token is still rejected with 401.
    """
    if credentials is None:
        return None
    auth = await _resolve_token(db, credentials.credentials)
    if auth is None:
        raise AuthenticationError()
    return auth


async def require_auth(
    auth: AuthContext | None = Depends(get_optional_auth),
) -> AuthContext:
    if auth is None:
        raise AuthenticationError()
    return auth
