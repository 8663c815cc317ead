"""Process-wide singletons wired from settings and exposed as FastAPI dependencies."""

from __future__ import annotations

import asyncio
import logging
from functools import lru_cache
from typing import Annotated, Callable, Optional

from fastapi import Depends

from briefcast.application.interfaces import DurableStorage, ScriptGenerator, SpeechSynthesizer
from briefcast.config import settings
from briefcast.library import BriefingLibrary
from briefcast.pipelines.briefing import BriefingPipeline
from briefcast.playback import AsyncioTicker, ClockedAudioOutput, PlaybackEngine
from briefcast.services import (
    GeminiSpeechSynthesizer,
    LocalDirectoryStorage,
    OpenAIScriptGenerator,
    PollySpeechSynthesizer,
    S3ObjectStorage,
)
from briefcast.services.aws import create_boto3_client

logger = logging.getLogger(__name__)

_engine: Optional[PlaybackEngine] = None
_pipeline: Optional[BriefingPipeline] = None


def _secret(value) -> str | None:
    return value.get_secret_value() if value is not None else None


def loop_dispatcher(loop: asyncio.AbstractEventLoop) -> Callable[[Callable[[], None]], None]:
    """Hand callbacks raised on worker threads back to ``loop``."""

    def dispatch(callback: Callable[[], None]) -> None:
        if loop.is_closed():
            logger.debug("Dropping playback event, control loop is closed")
            return
        loop.call_soon_threadsafe(callback)

    return dispatch


def build_playback_engine(loop: asyncio.AbstractEventLoop) -> PlaybackEngine:
    return PlaybackEngine(
        ClockedAudioOutput(),
        AsyncioTicker(settings.playback.tick_interval, loop=loop),
        dispatcher=loop_dispatcher(loop),
    )


def build_storage() -> DurableStorage:
    config = settings.library
    if config.backend == "s3":
        client = create_boto3_client(
            "s3",
            region_name=config.s3_region,
            aws_access_key_id=config.access_key,
            aws_secret_access_key=config.secret_key,
        )
        return S3ObjectStorage(client, config.s3_bucket, prefix=config.s3_prefix)
    return LocalDirectoryStorage(config.root)


async def get_playback_engine() -> PlaybackEngine:
    """Return the engine bound to the running event loop, creating it on first use."""

    global _engine
    if _engine is None:
        _engine = build_playback_engine(asyncio.get_running_loop())
    return _engine


def reset_playback_engine() -> None:
    global _engine, _pipeline
    if _engine is not None:
        _engine.stop()
    _engine = None
    _pipeline = None


@lru_cache
def get_library() -> BriefingLibrary:
    library = BriefingLibrary(build_storage(), index_key=settings.library.index_key)
    library.load_index()
    return library


@lru_cache
def get_script_generator() -> ScriptGenerator:
    return OpenAIScriptGenerator(
        api_key=_secret(settings.openai.api_key),
        model=settings.openai.model,
        base_url=settings.openai.base_url,
        request_timeout=settings.timeouts.request_timeout,
        resource_timeout=settings.timeouts.resource_timeout,
    )


@lru_cache
def get_speech_synthesizer() -> SpeechSynthesizer:
    if settings.synthesis_provider == "polly":
        client = create_boto3_client("polly", region_name=settings.polly.region)
        return PollySpeechSynthesizer(
            client,
            voice_id=settings.polly.voice_id,
            engine=settings.polly.engine,
            resource_timeout=settings.timeouts.resource_timeout,
        )
    return GeminiSpeechSynthesizer(
        api_key=_secret(settings.gemini.api_key),
        model=settings.gemini.model,
        voice=settings.gemini.voice,
        base_url=settings.gemini.base_url,
        request_timeout=settings.timeouts.request_timeout,
        resource_timeout=settings.timeouts.resource_timeout,
    )


EngineDep = Annotated[PlaybackEngine, Depends(get_playback_engine)]
LibraryDep = Annotated[BriefingLibrary, Depends(get_library)]


async def get_pipeline(
    engine: EngineDep,
    script_generator: Annotated[ScriptGenerator, Depends(get_script_generator)],
    synthesizer: Annotated[SpeechSynthesizer, Depends(get_speech_synthesizer)],
) -> BriefingPipeline:
    global _pipeline
    if _pipeline is None or _pipeline.engine is not engine:
        _pipeline = BriefingPipeline(engine, script_generator, synthesizer)
    return _pipeline


PipelineDep = Annotated[BriefingPipeline, Depends(get_pipeline)]


__all__ = [
    "EngineDep",
    "LibraryDep",
    "PipelineDep",
    "build_playback_engine",
    "build_storage",
    "get_library",
    "get_pipeline",
    "get_playback_engine",
    "get_script_generator",
    "get_speech_synthesizer",
    "loop_dispatcher",
    "reset_playback_engine",
]
