"""
Application exception hierarchy.

Services raise these; the handlers registered in ``blog_api.main`` turn
each one into a JSON body with the matching HTTP status::

    BlogAPIError (base)
    ├── ValidationError      → 422 {"message", "errors"}
    ├── AuthenticationError  → 401 {"message"}
    ├── ForbiddenError       → 403 {"message"}
    └── NotFoundError        → 404 {"message"}
"""

from typing import Dict, List, Optional


class BlogAPIError(Exception):
    """Base class; ``message`` is always safe to return to the client."""

    status_code: int = 500

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"message": self.message}


class ValidationError(BlogAPIError):
    """
    Client input failed a rule. ``errors`` maps each offending field to a
    list of human-readable messages, e.g. ``{"email": ["..."]}``.
    """

    status_code = 422

    def __init__(
        self,
        errors: Dict[str, List[str]],
        message: Optional[str] = None,
    ):
        self.errors = errors
        super().__init__(message or summarize_errors(errors))

    def to_dict(self) -> dict:
        return {"message": self.message, "errors": self.errors}


class AuthenticationError(BlogAPIError):
    status_code = 401

    def __init__(self, message: str = "Unauthenticated."):
        super().__init__(message)


class ForbiddenError(BlogAPIError):
    status_code = 403

    def __init__(self, message: str = "This action is unauthorized."):
        super().__init__(message)


class NotFoundError(BlogAPIError):
    status_code = 404

    def __init__(self, resource: str = "Resource"):
        self.resource = resource
        super().__init__(f"{resource} not found")


def summarize_errors(errors: Dict[str, List[str]]) -> str:
    """First field message, plus a count of the remaining ones."""
    messages = [msg for field_messages in errors.values() for msg in field_messages]
    if not messages:
        return "The given data was invalid."
    remaining = len(messages) - 1
    if remaining == 0:
        return messages[0]
    suffix = "error" if remaining == 1 else "errors"
    return f"{messages[0]} (and {remaining} more {suffix})"


def field_errors(errors, loc_prefix: int = 0) -> Dict[str, List[str]]:
    """
    Convert pydantic error dicts into ``{field: [messages]}``.

    *loc_prefix* leading location parts are dropped (FastAPI prefixes body
    errors with ``"body"``); an error with no remaining location is filed
    under ``"body"``.
    """
    result: Dict[str, List[str]] = {}
    for err in errors:
        loc = [str(part) for part in err["loc"][loc_prefix:]] or ["body"]
        message = err["msg"]
        if err["type"] == "missing":
            message = f"The {loc[-1]} field is required."
        elif err["type"] == "value_error" and "error" in err.get("ctx", {}):
            message = str(err["ctx"]["error"])
        result.setdefault(".".join(loc), []).append(message)
    return result
