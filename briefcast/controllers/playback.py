"""Playback control endpoints.

Handlers are ``async`` so every engine command runs on the event loop, the
same thread that delivers ticks and completion events.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import Response

from briefcast.audio import guess_media_type
from briefcast.views import PlaybackView, SeekRequest

from .dependencies import EngineDep

router = APIRouter(prefix="/playback", tags=["playback"])


@router.get("", response_model=PlaybackView)
async def playback_state(engine: EngineDep) -> PlaybackView:
    return PlaybackView.from_session(engine.snapshot())


@router.post("/play", response_model=PlaybackView)
async def play(engine: EngineDep) -> PlaybackView:
    return PlaybackView.from_session(engine.play())


@router.post("/pause", response_model=PlaybackView)
async def pause(engine: EngineDep) -> PlaybackView:
    return PlaybackView.from_session(engine.pause())


@router.post("/stop", response_model=PlaybackView)
async def stop(engine: EngineDep) -> PlaybackView:
    return PlaybackView.from_session(engine.stop())


@router.post("/seek", response_model=PlaybackView)
async def seek(payload: SeekRequest, engine: EngineDep) -> PlaybackView:
    """Move to ``fraction`` of the duration; values outside [0, 1] are clamped."""

    return PlaybackView.from_session(engine.seek(payload.fraction))


@router.get("/audio", response_class=Response)
async def current_audio(engine: EngineDep) -> Response:
    """Return the bytes of the loaded source."""

    data = engine.current_audio_bytes()
    if not data:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": "No audio loaded"},
        )
    return Response(content=data, media_type=guess_media_type(data))
