"""Schemas for briefing generation."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field, field_validator

from briefcast.pipelines.briefing import DEFAULT_LENGTH_SECONDS, DEFAULT_TONE

from .playback import PlaybackView


class GenerateRequest(BaseModel):
    """Request schema for generating and playing a briefing."""

    topic: str = Field(..., description="What the briefing should be about")
    length_seconds: int = Field(
        DEFAULT_LENGTH_SECONDS,
        ge=10,
        le=600,
        description="Approximate spoken length in seconds",
    )
    tone: str = Field(DEFAULT_TONE, description="Delivery style, e.g. Professional or Calm")

    @field_validator("topic", "tone")
    @classmethod
    def strip_and_require(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("must not be blank")
        return cleaned


class StageInfo(BaseModel):
    order: int
    stage: str
    label: str
    summary: str


class BriefingOptions(BaseModel):
    """Suggested inputs for the generator."""

    topics: List[str]
    lengths: List[int]
    tones: List[str]
    default_length_seconds: int
    default_tone: str
    stages: List[StageInfo]


class GenerateResponse(BaseModel):
    topic: str
    script: str
    media_type: str
    size_bytes: int
    playback: PlaybackView
