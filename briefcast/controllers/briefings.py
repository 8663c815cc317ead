"""Briefing generation endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from briefcast.pipelines.briefing import (
    DEFAULT_LENGTH_SECONDS,
    DEFAULT_TONE,
    LENGTH_CHOICES,
    TONES,
    TRENDING_TOPICS,
    BriefingPipeline,
    BriefingRequest,
)
from briefcast.views import (
    BriefingOptions,
    ErrorResponse,
    GenerateRequest,
    GenerateResponse,
    PlaybackView,
    StageInfo,
)

from .dependencies import PipelineDep

router = APIRouter(prefix="/briefings", tags=["briefings"])


@router.get("/options", response_model=BriefingOptions)
async def briefing_options() -> BriefingOptions:
    """Suggested topics, lengths and tones plus the pipeline stages."""

    return BriefingOptions(
        topics=list(TRENDING_TOPICS),
        lengths=list(LENGTH_CHOICES),
        tones=list(TONES),
        default_length_seconds=DEFAULT_LENGTH_SECONDS,
        default_tone=DEFAULT_TONE,
        stages=[
            StageInfo(
                order=stage.order,
                stage=stage.stage.value,
                label=stage.label,
                summary=stage.summary,
            )
            for stage in BriefingPipeline.describe()
        ],
    )


@router.post(
    "/generate",
    response_model=GenerateResponse,
    responses={
        422: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
        504: {"model": ErrorResponse},
    },
)
async def generate_briefing(payload: GenerateRequest, pipeline: PipelineDep) -> GenerateResponse:
    """Generate a script, synthesize it and start playing it."""

    outcome = await pipeline.run(
        BriefingRequest(
            topic=payload.topic,
            length_seconds=payload.length_seconds,
            tone=payload.tone,
        )
    )
    return GenerateResponse(
        topic=outcome.request.topic,
        script=outcome.script,
        media_type=outcome.audio.media_type,
        size_bytes=len(outcome.audio.data),
        playback=PlaybackView.from_session(pipeline.engine.snapshot()),
    )
