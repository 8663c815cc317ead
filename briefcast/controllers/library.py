"""Saved briefing endpoints."""

from __future__ import annotations

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, HTTPException, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response

from briefcast.audio import guess_media_type
from briefcast.library import BriefingLibrary
from briefcast.pipelines.briefing import load_audio
from briefcast.views import (
    DeleteResultView,
    ErrorResponse,
    LibraryEntry,
    PlaybackView,
    SaveRequest,
)

from .dependencies import EngineDep, LibraryDep

router = APIRouter(prefix="/library", tags=["library"])

logger = logging.getLogger(__name__)


def _not_found(briefing_id: UUID) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"message": f"Briefing {briefing_id} not found"},
    )


async def _read_saved_audio(library: BriefingLibrary, briefing_id: UUID) -> bytes:
    briefing = library.get(briefing_id)
    if briefing is None:
        raise _not_found(briefing_id)
    return await run_in_threadpool(library.read_audio, briefing)


@router.get("", response_model=List[LibraryEntry])
async def list_briefings(library: LibraryDep) -> List[LibraryEntry]:
    """Saved briefings, most recent first."""

    return [LibraryEntry.from_briefing(item) for item in library.briefings]


@router.post(
    "",
    response_model=LibraryEntry,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def save_current(payload: SaveRequest, engine: EngineDep, library: LibraryDep) -> LibraryEntry:
    """Persist exactly the audio that is currently loaded."""

    data = engine.current_audio_bytes()
    if not data:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": "No audio loaded to save"},
        )
    try:
        briefing = await run_in_threadpool(library.add, payload.topic, data)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": str(exc)},
        ) from exc
    return LibraryEntry.from_briefing(briefing)


@router.post("/{briefing_id}/play", response_model=PlaybackView)
async def play_saved(briefing_id: UUID, engine: EngineDep, library: LibraryDep) -> PlaybackView:
    """Load a saved briefing and start playing it."""

    data = await _read_saved_audio(library, briefing_id)
    await load_audio(engine, data)
    logger.info("Replaying saved briefing %s", briefing_id)
    return PlaybackView.from_session(engine.play())


@router.get("/{briefing_id}/audio", response_class=Response)
async def saved_audio(briefing_id: UUID, library: LibraryDep) -> Response:
    data = await _read_saved_audio(library, briefing_id)
    return Response(content=data, media_type=guess_media_type(data))


@router.delete("/{briefing_id}", response_model=DeleteResultView)
async def delete_briefing(briefing_id: UUID, library: LibraryDep) -> DeleteResultView:
    """Remove the blob and the index entry; the result reports any blob residue."""

    if library.get(briefing_id) is None:
        raise _not_found(briefing_id)
    result = await run_in_threadpool(library.delete, briefing_id)
    return DeleteResultView.from_result(result)
