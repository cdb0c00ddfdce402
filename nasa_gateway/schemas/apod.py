"""Pydantic schemas for Astronomy Picture of the Day records."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

MAX_TITLE_LENGTH = 255


def _require_text(value: str) -> str:
    if not value or not value.strip():
        raise ValueError("is required")
    return value.strip()


class ApodBase(BaseModel):
    """Fields shared by live, stored, and submitted pictures."""

    date: str
    title: str
    explanation: str
    url: str
    hdurl: str | None = None
    copyright: str | None = None


class ApodOut(ApodBase):
    """A picture as returned by the API; ``id`` is unset until saved."""

    id: int | None = None

    class Config:
        from_attributes = True


class ApodUpdate(BaseModel):
    """Body accepted by ``PUT /api/apod/{id}``.

    Only ``title`` and ``explanation`` are applied. Any other field a client
    sends (a full record is typical) is ignored.
    """

    title: str = Field(..., max_length=MAX_TITLE_LENGTH)
    explanation: str


class ApodForm(ApodBase):
    """Edit form posted from the list page."""

    id: int | None = None

    @field_validator("date", "title", "explanation", "url")
    @classmethod
    def validate_required(cls, value: str) -> str:
        return _require_text(value)

    @field_validator("hdurl", "copyright", mode="before")
    @classmethod
    def blank_to_none(cls, value: str | None) -> str | None:
        if isinstance(value, str) and not value.strip():
            return None
        return value
