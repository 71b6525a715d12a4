"""
Pydantic schemas for view-counting endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, field_validator

from core import validation


class TrackViewRequest(BaseModel):
    path: str

    @field_validator("path", mode="before")
    @classmethod
    def _check_path(cls, value: object) -> str:
        return validation.as_value_error(validation.validate_path, value)


class BatchViewsRequest(BaseModel):
    paths: list[str]

    @field_validator("paths", mode="before")
    @classmethod
    def _check_paths(cls, value: object) -> list[str]:
        return validation.as_value_error(validation.validate_paths, value)
