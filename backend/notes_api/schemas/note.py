"""
Notes API — Pydantic Request/Response Schemas
===============================================

What:  Pydantic models defining the JSON contract of the notes endpoints.
How:   FastAPI validates request bodies against the input models before the
       storage accessor runs, and serializes responses through the output
       models (camelCase keys via alias generation).

Input rules:
    NoteCreate: title required and non-blank; content optional ("" default)
    NoteUpdate: any subset of title/content; explicit null is rejected
    Unknown keys are ignored on both.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel


TITLE_MAX_LENGTH = 255


def _check_title(v: Optional[str]) -> str:
    if v is None:
        raise ValueError("title cannot be null")
    if not v.strip():
        raise ValueError("title cannot be blank")
    return v


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """Body of POST /api/notes."""

    title: str = Field(max_length=TITLE_MAX_LENGTH, description="Note title (required)")
    content: str = Field(default="", description="Free-form note body")

    model_config = {"extra": "ignore"}

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _check_title(v)


class NoteUpdate(BaseModel):
    """
    Body of PUT /api/notes/{id}.

    Only the keys present in the request are applied; callers read them
    with `model_dump(exclude_unset=True)`.
    """

    title: Optional[str] = Field(default=None, max_length=TITLE_MAX_LENGTH)
    content: Optional[str] = Field(default=None)

    model_config = {"extra": "ignore"}

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> str:
        return _check_title(v)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("content cannot be null")
        return v


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """
    Full representation of a stored note.

    Serialized as:
        {"id": "...", "title": "...", "content": "...",
         "createdAt": "...", "updatedAt": "..."}
    """

    id: uuid.UUID = Field(description="Unique note identifier (UUID)")
    title: str
    content: str
    created_at: datetime = Field(description="When the note was created (UTC ISO 8601)")
    updated_at: datetime = Field(description="When the note was last updated (UTC ISO 8601)")

    model_config = {
        "from_attributes": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class NoteDeleted(BaseModel):
    """Confirmation returned by DELETE /api/notes/{id}."""

    message: str = Field(default="Note deleted")
    id: uuid.UUID


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Error body shared by every endpoint.

    Example:
        {"error": "not found",
         "message": "note with ID '...' was not found",
         "request_id": "a1b2c3d4"}
    """

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[List[dict]] = Field(default=None, description="Per-field validation errors")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
