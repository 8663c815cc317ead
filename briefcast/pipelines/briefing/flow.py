"""End-to-end orchestration of a briefing request.

Execution order:

1. ``script`` – ask the script generator for spoken text.
2. ``synthesis`` – turn the text into audio bytes plus a format hint.
3. ``encoding`` – wrap raw PCM in a WAV container, pass encoded audio through.
4. ``playback`` (load) – hand the bytes to the playback engine.
5. ``playback`` (autoplay) – start playing.

Any active playback is stopped before stage 1. A failing stage aborts the
run and surfaces as :class:`PipelineError` tagged with that stage; the engine
is left idle.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, List, Union

from briefcast.application.interfaces import ScriptGenerator, SpeechSynthesizer
from briefcast.errors import BriefcastError, PipelineError, PipelineStage, stage_label
from briefcast.playback import PlaybackEngine, PlaybackState
from briefcast.telemetry import observe_stage

from .encoding import encode_for_playback
from .playback import load_into_engine, start_playback
from .script import generate_script
from .synthesis import synthesize_script
from .types import BriefingRequest, GenerationOutcome

logger = logging.getLogger("briefcast.pipeline")

StageCall = Callable[[], Union[Awaitable[Any], Any]]


@dataclass(frozen=True)
class StageDescription:
    """Human-readable description of one stage in the briefing pipeline."""

    order: int
    stage: PipelineStage
    module: str
    summary: str

    @property
    def label(self) -> str:
        return stage_label(self.stage)


class BriefingPipeline:
    """Runs script → synthesis → encoding → load → autoplay against one engine."""

    _STAGES: List[StageDescription] = [
        StageDescription(
            1,
            PipelineStage.SCRIPT,
            "briefcast.pipelines.briefing.script",
            "Build the prompt and ask the chat model for a short spoken script.",
        ),
        StageDescription(
            2,
            PipelineStage.SYNTHESIS,
            "briefcast.pipelines.briefing.synthesis",
            "Send the script to the configured TTS provider (Gemini or Polly).",
        ),
        StageDescription(
            3,
            PipelineStage.ENCODING,
            "briefcast.pipelines.briefing.encoding",
            "Wrap 24 kHz mono 16-bit PCM in a WAV header; encoded audio passes through.",
        ),
        StageDescription(
            4,
            PipelineStage.PLAYBACK_LOAD,
            "briefcast.pipelines.briefing.playback",
            "Replace the active playback session with the new audio.",
        ),
        StageDescription(
            5,
            PipelineStage.AUTOPLAY,
            "briefcast.pipelines.briefing.playback",
            "Start playback of the freshly loaded briefing.",
        ),
    ]

    def __init__(
        self,
        engine: PlaybackEngine,
        script_generator: ScriptGenerator,
        synthesizer: SpeechSynthesizer,
    ) -> None:
        self._engine = engine
        self._script_generator = script_generator
        self._synthesizer = synthesizer
        self._lock = asyncio.Lock()

    @property
    def engine(self) -> PlaybackEngine:
        return self._engine

    @classmethod
    def describe(cls) -> Iterable[StageDescription]:
        """Expose the ordered list of stages for debugging and documentation."""

        return tuple(cls._STAGES)

    async def run(self, request: BriefingRequest) -> GenerationOutcome:
        """Generate, synthesize, load and play one briefing.

        Runs are serialized; a second request waits for the first to settle.
        """

        async with self._lock:
            self._engine.stop()
            started = time.perf_counter()
            logger.info(
                "Briefing requested topic=%r length=%ss tone=%s",
                request.topic,
                request.length_seconds,
                request.tone,
            )
            try:
                script = await self._run_stage(
                    PipelineStage.SCRIPT,
                    lambda: generate_script(self._script_generator, request),
                )
                synthesized = await self._run_stage(
                    PipelineStage.SYNTHESIS,
                    lambda: synthesize_script(self._synthesizer, script),
                )
                audio = await self._run_stage(
                    PipelineStage.ENCODING,
                    lambda: encode_for_playback(synthesized),
                )
                await self._run_stage(
                    PipelineStage.PLAYBACK_LOAD,
                    lambda: load_into_engine(self._engine, audio),
                )
                session = await self._run_stage(
                    PipelineStage.AUTOPLAY,
                    lambda: start_playback(self._engine),
                )
            except PipelineError:
                if self._engine.session.state is not PlaybackState.IDLE:
                    self._engine.stop()
                raise

            logger.info(
                "Briefing ready topic=%r bytes=%s duration=%.2fs in %.2fs",
                request.topic,
                len(audio.data),
                session.duration_seconds,
                time.perf_counter() - started,
            )
            return GenerationOutcome(request=request, script=script, audio=audio, session=session)

    async def _run_stage(self, stage: PipelineStage, call: StageCall) -> Any:
        started = time.perf_counter()
        logger.debug("%s...", stage_label(stage))
        try:
            result = call()
            if inspect.isawaitable(result):
                result = await result
        except Exception as exc:
            elapsed = time.perf_counter() - started
            observe_stage(stage.value, elapsed, failed=True)
            if isinstance(exc, BriefcastError):
                logger.warning("Stage %s failed after %.2fs: %s", stage.value, elapsed, exc)
            else:
                logger.exception("Unexpected failure in stage %s", stage.value)
            raise PipelineError(stage, exc) from exc

        elapsed = time.perf_counter() - started
        observe_stage(stage.value, elapsed)
        logger.debug("Stage %s finished in %.2fs", stage.value, elapsed)
        return result


__all__ = ["BriefingPipeline", "StageDescription"]
