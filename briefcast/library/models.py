"""Persisted briefing record.

The index is written with the legacy key names (``date``, ``filename``) and
read tolerantly: unknown keys are ignored and missing fields fall back to
defaults so one odd entry never costs the whole library.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_TOPIC = "Untitled briefing"
DEFAULT_EXTENSION = "wav"
UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
# Numeric dates in older indexes count seconds from 2001-01-01 UTC.
REFERENCE_EPOCH = datetime(2001, 1, 1, tzinfo=timezone.utc)


def blob_key_for(briefing_id: UUID | str, extension: str = DEFAULT_EXTENSION) -> str:
    """Storage key of the audio blob owned by ``briefing_id``."""

    return f"briefing-{briefing_id}.{extension.lstrip('.')}"


class Briefing(BaseModel):
    id: UUID
    topic: str = DEFAULT_TOPIC
    created_at: datetime = Field(default=UNIX_EPOCH, alias="date")
    audio_ref: str = Field(default="", alias="filename")

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    @model_validator(mode="before")
    @classmethod
    def derive_audio_ref(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        if data.get("filename") or data.get("audio_ref"):
            return data
        if data.get("id") is None:
            return data
        return {**data, "filename": blob_key_for(data["id"])}

    @field_validator("topic", mode="before")
    @classmethod
    def default_topic(cls, value: Any) -> Any:
        if not isinstance(value, str) or not value.strip():
            return DEFAULT_TOPIC
        return value.strip()

    @field_validator("created_at", mode="before")
    @classmethod
    def coerce_date(cls, value: Any) -> Any:
        if value is None or isinstance(value, bool):
            return UNIX_EPOCH
        if isinstance(value, (int, float)):
            try:
                return REFERENCE_EPOCH + timedelta(seconds=value)
            except (OverflowError, ValueError):
                return UNIX_EPOCH
        if isinstance(value, str):
            try:
                return datetime.fromisoformat(value.replace("Z", "+00:00"))
            except ValueError:
                return UNIX_EPOCH
        return value

    @field_validator("created_at")
    @classmethod
    def ensure_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def to_record(self) -> dict[str, Any]:
        """JSON-ready dict using the persisted key names."""

        return self.model_dump(mode="json", by_alias=True)


__all__ = ["Briefing", "DEFAULT_TOPIC", "blob_key_for"]
