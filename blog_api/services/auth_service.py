"""
Auth service: accounts and bearer tokens.

Login failures are reported with one generic message whether the account
is missing or the password is wrong, so the response shape does not reveal
which addresses are registered.
"""
import logging

from passlib.exc import PasswordSizeError
from pydantic import ValidationError as SchemaError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.config import settings
from blog_api.dependencies import AuthContext
from blog_api.exceptions import AuthenticationError, ForbiddenError, ValidationError, field_errors
from blog_api.models import AccessToken, User, isoformat
from blog_api.schemas import LoginRequest, RegisterRequest
from blog_api.security import generate_token, hash_password, hash_token, verify_password

logger = logging.getLogger(__name__)

EMAIL_TAKEN = "A user with this email address already exists."
INVALID_CREDENTIALS = "Invalid credentials"


def _user_to_dict(user: User) -> dict:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "created_at": isoformat(user.created_at),
        "updated_at": isoformat(user.updated_at),
    }


async def validate_registration(db: AsyncSession, payload: dict) -> RegisterRequest:
    """
    Validate a raw registration body.

    The unique-email rule runs whenever the address itself is well formed,
    so a taken email is reported together with any other failing field.
    """
    errors: dict[str, list[str]] = {}
    data = None
    try:
        data = RegisterRequest.model_validate(payload)
    except SchemaError as exc:
        errors = field_errors(exc.errors())

    email = data.email if data is not None else payload.get("email")
    if isinstance(email, str) and "email" not in errors:
        existing = await db.execute(select(User.id).where(User.email == email.lower()))
        if existing.scalar_one_or_none() is not None:
            errors["email"] = [EMAIL_TAKEN]

    if errors:
        order = list(RegisterRequest.model_fields)
        ranked = sorted(errors, key=lambda f: order.index(f) if f in order else len(order))
        raise ValidationError({field: errors[field] for field in ranked})
    return data


async def register_user(db: AsyncSession, data: RegisterRequest) -> dict:
    """
    Create an account with a hashed password. No token is issued; the
    client logs in separately.
    """
    email = data.email.lower()
    existing = await db.execute(select(User.id).where(User.email == email))
    if existing.scalar_one_or_none() is not None:
        raise ValidationError({"email": [EMAIL_TAKEN]})

    user = User(name=data.name, email=email, password=hash_password(data.password))
    db.add(user)
    try:
        await db.flush()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same address.
        raise ValidationError({"email": [EMAIL_TAKEN]})

    logger.info("Registered user id=%s", user.id)
    return _user_to_dict(user)


async def login(db: AsyncSession, data: LoginRequest) -> dict:
    """Verify credentials and issue a fresh token for a new session."""
    result = await db.execute(select(User).where(User.email == data.email.lower()))
    user = result.scalar_one_or_none()
    try:
        verified = user is not None and verify_password(data.password, user.password)
    except PasswordSizeError:
        # No stored password can be this long.
        verified = False
    if not verified:
        logger.warning("Failed login attempt for %s", data.email)
        raise AuthenticationError(INVALID_CREDENTIALS)

    plain_token = generate_token()
    db.add(AccessToken(user_id=user.id, token_hash=hash_token(plain_token)))
    await db.flush()

    logger.info("User id=%s logged in", user.id)
    return {"token": plain_token, "user": _user_to_dict(user)}


async def logout(db: AsyncSession, auth: AuthContext) -> None:
    """Revoke only the token used on this request; other sessions survive."""
    await db.delete(auth.token)
    await db.flush()
    logger.info("User id=%s logged out (token id=%s)", auth.user.id, auth.token.id)


def authorize_owner(owner_id: int, auth: AuthContext | None) -> None:
    """
    Gate for post/comment mutations.

    A no-op unless ``settings.ENFORCE_OWNERSHIP`` is on, in which case the
    caller must be authenticated and must own the resource.
    """
    if not settings.ENFORCE_OWNERSHIP:
        return
    if auth is None:
        raise AuthenticationError()
    if auth.user.id != owner_id:
        raise ForbiddenError()
