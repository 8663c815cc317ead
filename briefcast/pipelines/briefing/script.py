"""Script generation stage."""

from __future__ import annotations

import logging

from briefcast.application.interfaces import ScriptGenerator
from briefcast.errors import ProviderError

from .types import BriefingRequest

logger = logging.getLogger("briefcast.pipeline")


async def generate_script(generator: ScriptGenerator, request: BriefingRequest) -> str:
    """Ask the script generator for text; blank text counts as a provider failure."""

    script = await generator.generate(request.topic, request.length_seconds, request.tone)
    script = (script or "").strip()
    if not script:
        raise ProviderError("Script generator returned no text")
    logger.debug("Script for %r: %s chars", request.topic, len(script))
    return script


__all__ = ["generate_script"]
