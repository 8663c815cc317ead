"""Briefcast: generate, play back and keep short spoken audio briefings."""

__version__ = "1.0.0"
