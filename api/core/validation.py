"""
Input rules for counted paths and reactions.

Used by the pydantic request models and again by the services, so a caller
that skips the HTTP layer still cannot reach the database with bad input.
"""

from __future__ import annotations

from typing import Any

from .errors import ValidationError

MAX_REACTION_LENGTH = 48
MAX_BATCH_PATHS = 500


def validate_path(path: Any) -> str:
    if not path or not isinstance(path, str):
        raise ValidationError("path is required")
    if not path.startswith("/"):
        raise ValidationError("path must start with /")
    return path


def validate_reaction(reaction: Any) -> str:
    if not reaction or not isinstance(reaction, str):
        raise ValidationError("reaction is required")
    if len(reaction) > MAX_REACTION_LENGTH:
        raise ValidationError("reaction too long")
    return reaction


def validate_paths(paths: Any) -> list[str]:
    if not isinstance(paths, list) or any(not isinstance(p, str) for p in paths):
        raise ValidationError("paths must be an array of strings")
    if len(paths) > MAX_BATCH_PATHS:
        raise ValidationError(f"paths must contain at most {MAX_BATCH_PATHS} entries")
    return paths


def as_value_error(check, value):
    """
    Run a check from a pydantic validator; pydantic only collects ValueError.
    """
    try:
        return check(value)
    except ValidationError as exc:
        raise ValueError(exc.message) from exc
