"""
Pydantic schemas for reaction endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, field_validator

from core import validation


class ReactRequest(BaseModel):
    path: str
    reaction: str

    @field_validator("path", mode="before")
    @classmethod
    def _check_path(cls, value: object) -> str:
        return validation.as_value_error(validation.validate_path, value)

    @field_validator("reaction", mode="before")
    @classmethod
    def _check_reaction(cls, value: object) -> str:
        return validation.as_value_error(validation.validate_reaction, value)
