"""Saved briefing library."""

from .models import DEFAULT_TOPIC, Briefing, blob_key_for
from .store import BlobRemoval, BriefingLibrary, DeleteResult

__all__ = [
    "BlobRemoval",
    "Briefing",
    "BriefingLibrary",
    "DEFAULT_TOPIC",
    "DeleteResult",
    "blob_key_for",
]
