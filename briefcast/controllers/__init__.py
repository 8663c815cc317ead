"""FastAPI routers exposed by the application."""

from . import briefings, library, playback

__all__ = ["briefings", "library", "playback"]
