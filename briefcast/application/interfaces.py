from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class FormatHint(str, Enum):
    """Encoding of a synthesized payload."""

    RAW_PCM = "raw-pcm-16-24k-mono"
    ENCODED = "encoded"


@dataclass(frozen=True)
class SynthesizedAudio:
    """Audio returned by a speech synthesizer plus its encoding hint."""

    data: bytes
    format_hint: FormatHint
    media_type: str = "application/octet-stream"


class ScriptGenerator(ABC):
    """Turns a topic, target length and tone into a spoken script"""

    @abstractmethod
    async def generate(self, topic: str, length_seconds: int, tone: str) -> str:
        ...


class SpeechSynthesizer(ABC):
    """Turns a script into audio bytes"""

    @abstractmethod
    async def synthesize(self, text: str) -> SynthesizedAudio:
        ...


class DurableStorage(ABC):
    """Key/blob storage used by the briefing library.

    Implementations raise ``StorageError`` for I/O failures.
    """

    @abstractmethod
    def read_all(self, key: str) -> Optional[bytes]:
        """Return the stored bytes, or None when the key is absent."""

    @abstractmethod
    def write_all(self, key: str, data: bytes) -> None:
        """Durably replace the contents stored under ``key``."""

    @abstractmethod
    def remove(self, key: str) -> bool:
        """Delete ``key``; return False when there was nothing to delete."""
