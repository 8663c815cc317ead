"""Prompt assembly for briefing scripts."""

from __future__ import annotations

SYSTEM_PROMPT = "You are a briefing assistant."


def build_script_prompt(topic: str, length_seconds: int, tone: str) -> str:
    """User prompt asking for a short spoken script."""

    return (
        f"Generate a spoken audio script on the topic: {topic.strip()}.\n"
        f"Use a {tone.strip().lower()} tone.\n"
        f"Make it suitable for an audio update of about {int(length_seconds)} seconds.\n"
        "Use short, conversational sentences."
    )


def build_script_messages(topic: str, length_seconds: int, tone: str) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_script_prompt(topic, length_seconds, tone)},
    ]


__all__ = ["SYSTEM_PROMPT", "build_script_messages", "build_script_prompt"]
