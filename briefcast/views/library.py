"""Schemas for the saved briefing library."""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from briefcast.library import Briefing, DeleteResult


class SaveRequest(BaseModel):
    """Save whatever is currently loaded under ``topic``."""

    topic: str = Field(..., description="Title to file the briefing under")

    @field_validator("topic")
    @classmethod
    def strip_topic(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("must not be blank")
        return cleaned


class LibraryEntry(BaseModel):
    id: UUID
    topic: str
    created_at: datetime
    audio_ref: str

    @classmethod
    def from_briefing(cls, briefing: Briefing) -> "LibraryEntry":
        return cls(
            id=briefing.id,
            topic=briefing.topic,
            created_at=briefing.created_at,
            audio_ref=briefing.audio_ref,
        )


class DeleteResultView(BaseModel):
    """Composite outcome of a delete."""

    id: UUID
    index_removed: bool
    blob: str
    index_persisted: bool
    clean: bool
    error: Optional[str] = None

    @classmethod
    def from_result(cls, result: DeleteResult) -> "DeleteResultView":
        return cls(
            id=result.briefing_id,
            index_removed=result.index_removed,
            blob=result.blob.value,
            index_persisted=result.index_persisted,
            clean=result.clean,
            error=result.error,
        )
