# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Request bodies accepted at the auth and task boundaries.

Bodies arrive as plain JSON objects; ``parse`` turns them into one of these
models or raises the project's ``ValidationError`` (HTTP 400).
"""

from __future__ import annotations

from typing import Any, Optional, Type, TypeVar

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator

from tasklist.errors import ValidationError

M = TypeVar("M", bound=BaseModel)


def _strip_required(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip()
    return value


def _not_blank(value: Optional[str]) -> Optional[str]:
    # Stored as sent; only the emptiness check ignores surrounding whitespace.
    if value is not None and not value.strip():
        raise ValueError("Task title is required")
    return value


class RegisterIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: str = ""
    password: str = ""
    name: str = ""

    @field_validator("email", "name", mode="before")
    @classmethod
    def strip_fields(cls, v: Any) -> Any:
        return _strip_required(v)


class LoginIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: str = ""
    password: str = ""

    @field_validator("email", mode="before")
    @classmethod
    def strip_fields(cls, v: Any) -> Any:
        return _strip_required(v)


class TaskCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str
    description: str = ""
    completed: bool = False

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return _not_blank(v)

    @field_validator("description", mode="before")
    @classmethod
    def none_is_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class TaskPatch(BaseModel):
    """Mutable task fields. Identity fields are only echoed back by clients."""

    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    description: Optional[str] = None
    completed: Optional[bool] = None

    # Echoed identity fields; the task store rejects them unless unchanged.
    id: Optional[str] = None
    mongo_id: Optional[str] = Field(default=None, alias="_id")
    ownerId: Optional[str] = None
    createdAt: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return _not_blank(v)

    def changes(self) -> dict[str, Any]:
        """Only the mutable fields the caller actually sent."""
        data = self.model_dump(include={"title", "description", "completed"}, exclude_unset=True)
        if "description" in data and data["description"] is None:
            data["description"] = ""
        if "title" in data and data["title"] is None:
            raise ValidationError("Task title is required")
        if "completed" in data and data["completed"] is None:
            raise ValidationError("'completed' must be true or false")
        return data


def _describe(exc: pydantic.ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "__root__")
        if err.get("type") == "extra_forbidden":
            parts.append(f"Field '{loc}' cannot be set")
        elif loc == "title":
            parts.append("Task title is required")
        else:
            parts.append(f"{loc}: {err.get('msg', 'invalid value')}" if loc else err.get("msg", "invalid value"))
    return "; ".join(parts) or "Invalid request body"


def parse(model: Type[M], body: Any) -> M:
    if body is None:
        body = {}
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    try:
        return model.model_validate(body)
    except pydantic.ValidationError as e:
        raise ValidationError(_describe(e))
