"""Error taxonomy shared by the pipeline, the playback engine and the library."""

from __future__ import annotations

from enum import Enum


class BriefcastError(Exception):
    """Base class for every error raised by briefcast itself."""


class ConfigError(BriefcastError):
    """Raised when a required credential or setting is missing."""


class ProviderError(BriefcastError):
    """Raised when a script or speech provider rejects or botches a request."""


class NetworkError(ProviderError):
    """Raised when a provider cannot be reached."""


class ProviderTimeoutError(NetworkError):
    """Raised when a provider call exceeds the configured time bound."""


class AuthError(ProviderError):
    """Raised when a provider refuses our credentials."""


class DecodeError(BriefcastError):
    """Raised when loaded bytes cannot be interpreted as audio."""


class StorageError(BriefcastError):
    """Raised when a durable storage read, write or remove fails."""


class MissingBlobError(StorageError):
    """Raised when an indexed briefing has no backing audio blob."""


class PipelineStage(str, Enum):
    """Stages of the briefing generation pipeline, in execution order."""

    SCRIPT = "script"
    SYNTHESIS = "synthesis"
    ENCODING = "encoding"
    PLAYBACK_LOAD = "playback_load"
    AUTOPLAY = "autoplay"


_STAGE_LABELS = {
    PipelineStage.SCRIPT: "Generating script",
    PipelineStage.SYNTHESIS: "Synthesizing audio",
    PipelineStage.ENCODING: "Encoding audio",
    PipelineStage.PLAYBACK_LOAD: "Loading audio",
    PipelineStage.AUTOPLAY: "Starting playback",
}


class PipelineError(BriefcastError):
    """A stage failure annotated with the stage that produced it."""

    def __init__(self, stage: PipelineStage, cause: BaseException) -> None:
        self.stage = stage
        self.cause = cause
        super().__init__(f"{_STAGE_LABELS[stage]} failed: {cause}")

    @property
    def label(self) -> str:
        return _STAGE_LABELS[self.stage]


def stage_label(stage: PipelineStage) -> str:
    """Return the human-readable progress label for a pipeline stage."""

    return _STAGE_LABELS[stage]


__all__ = [
    "AuthError",
    "BriefcastError",
    "ConfigError",
    "DecodeError",
    "MissingBlobError",
    "NetworkError",
    "PipelineError",
    "PipelineStage",
    "ProviderError",
    "ProviderTimeoutError",
    "StorageError",
    "stage_label",
]
