"""
Key-casing adapter: storage field names (``snake_case``) to wire field
names (``camelCase``).
"""
from typing import Any


def to_camel(key: str) -> str:
    """
    ``"comments_count"`` -> ``"commentsCount"``.

    Segments after the first get their first letter upper-cased, the
    underscores are dropped, and the first character of the result is
    lower-cased. Keys that are already camelCase come back unchanged.
    """
    head, *rest = key.split("_")
    joined = head + "".join(part[:1].upper() + part[1:] for part in rest)
    return joined[:1].lower() + joined[1:]


def camelize(data: Any) -> Any:
    """
    Return a copy of *data* with every mapping key rewritten by
    :func:`to_camel`.

    Nested mappings are converted recursively. Lists and tuples are rebuilt
    element by element, so mappings inside them are converted too while
    scalar elements pass through unchanged. Non-string keys and leaf values
    are never touched.
    """
    if isinstance(data, dict):
        return {
            (to_camel(k) if isinstance(k, str) else k): camelize(v)
            for k, v in data.items()
        }
    if isinstance(data, (list, tuple)):
        return type(data)(camelize(item) for item in data)
    return data
