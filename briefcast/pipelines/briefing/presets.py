"""Suggested topics, lengths and tones offered to clients."""

TRENDING_TOPICS = (
    "Market News",
    "Quick Tips",
    "Motivation",
    "Tech Trends",
    "Insurance 101",
)

LENGTH_CHOICES = (30, 60, 180)

TONES = ("Professional", "Motivational", "Fun", "Calm")

DEFAULT_LENGTH_SECONDS = 60
DEFAULT_TONE = "Professional"

__all__ = [
    "DEFAULT_LENGTH_SECONDS",
    "DEFAULT_TONE",
    "LENGTH_CHOICES",
    "TONES",
    "TRENDING_TOPICS",
]
