"""Settings loading from the environment."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from briefcast.config import Settings
from briefcast.config.settings import GeminiTtsConfig, OpenAIConfig, PlaybackConfig


def test_defaults(monkeypatch):
    for name in ("OPENAI_API_KEY", "OPENAI_KEY", "SYNTHESIS_PROVIDER", "LIBRARY_BACKEND"):
        monkeypatch.delenv(name, raising=False)

    config = Settings(_env_file=None)

    assert config.synthesis_provider == "gemini"
    assert config.library.backend == "local"
    assert config.library.index_key == "briefings.json"
    assert config.playback.tick_interval == 0.2
    assert config.timeouts.request_timeout == 120.0
    assert config.timeouts.resource_timeout == 180.0
    assert config.gemini.voice == "zephyr"


def test_legacy_key_names_are_accepted(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setenv("OPENAI_KEY", "sk-legacy")
    monkeypatch.setenv("GOOGLE_TTS_KEY", "g-legacy")

    assert OpenAIConfig(_env_file=None).api_key.get_secret_value() == "sk-legacy"
    assert GeminiTtsConfig(_env_file=None).api_key.get_secret_value() == "g-legacy"


def test_tick_interval_is_bounded(monkeypatch):
    monkeypatch.setenv("PLAYBACK_TICK_INTERVAL", "0.5")

    with pytest.raises(ValidationError):
        PlaybackConfig(_env_file=None)
