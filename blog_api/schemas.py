from typing import Annotated

from pydantic import AliasChoices, BaseModel, EmailStr, Field, StringConstraints, field_validator

# Surrounding whitespace is dropped before the emptiness check.
NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]

# 255 characters stays well under passlib's 4096-byte secret limit.
PASSWORD_MAX_LENGTH = 255


# --- Auth ---

class RegisterRequest(BaseModel):
    name: NonEmptyStr
    email: EmailStr
    password: str = Field(min_length=8, max_length=PASSWORD_MAX_LENGTH)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


# --- Post ---

class PostCreate(BaseModel):
    title: Title
    content: NonEmptyStr


class PostUpdate(BaseModel):
    """Partial update; a field may be omitted but not sent as null."""

    title: Title | None = None
    content: NonEmptyStr | None = None

    @field_validator("title", "content", mode="before")
    @classmethod
    def reject_null(cls, value, info):
        if value is None:
            raise ValueError(f"The {info.field_name} field is required.")
        return value


# --- Comment ---

class CommentCreate(BaseModel):
    content: NonEmptyStr
    post_id: int = Field(validation_alias=AliasChoices("post_id", "postId"))


class CommentUpdate(BaseModel):
    content: NonEmptyStr | None = None

    @field_validator("content", mode="before")
    @classmethod
    def reject_null(cls, value, info):
        if value is None:
            raise ValueError(f"The {info.field_name} field is required.")
        return value
