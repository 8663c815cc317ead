"""Pydantic schemas used as views in the MVC architecture."""

from .briefings import BriefingOptions, GenerateRequest, GenerateResponse, StageInfo
from .common import ErrorDetail, ErrorResponse
from .library import DeleteResultView, LibraryEntry, SaveRequest
from .playback import PlaybackView, SeekRequest, format_clock

__all__ = [
    "BriefingOptions",
    "DeleteResultView",
    "ErrorDetail",
    "ErrorResponse",
    "GenerateRequest",
    "GenerateResponse",
    "LibraryEntry",
    "PlaybackView",
    "SaveRequest",
    "SeekRequest",
    "StageInfo",
    "format_clock",
]
