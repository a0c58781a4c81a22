"""
Password hashing and bearer-token primitives.

Tokens are opaque URL-safe strings handed to the client once; only their
SHA-256 digest is persisted.
"""
import hashlib
import secrets

from passlib.context import CryptContext

from blog_api.config import settings

pwd_ctx = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def hash_password(password: str) -> str:
    return pwd_ctx.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return pwd_ctx.verify(password, hashed)


def generate_token() -> str:
    return secrets.token_urlsafe(settings.TOKEN_BYTES)


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
