"""Bounded JSON POST helper shared by the HTTP-based providers."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Optional

import httpx

from briefcast.errors import AuthError, NetworkError, ProviderError, ProviderTimeoutError

logger = logging.getLogger(__name__)

_ERROR_BODY_LIMIT = 300


async def post_json(
    url: str,
    *,
    payload: Mapping[str, Any],
    provider: str,
    headers: Optional[Mapping[str, str]] = None,
    request_timeout: float = 120.0,
    resource_timeout: float = 180.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Any:
    """POST ``payload`` and return the decoded JSON body.

    ``request_timeout`` bounds each network phase, ``resource_timeout`` the
    whole exchange. Failures are mapped onto the provider error taxonomy.
    """

    async def _send() -> Any:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(request_timeout),
            transport=transport,
        ) as client:
            response = await client.post(url, json=dict(payload), headers=dict(headers or {}))
            response.raise_for_status()
            return response.json()

    try:
        return await asyncio.wait_for(_send(), timeout=resource_timeout)
    except asyncio.TimeoutError as exc:
        raise ProviderTimeoutError(
            f"{provider} did not answer within {resource_timeout:g}s"
        ) from exc
    except httpx.TimeoutException as exc:
        raise ProviderTimeoutError(f"{provider} request timed out: {exc}") from exc
    except httpx.HTTPStatusError as exc:
        status_code = exc.response.status_code
        body = exc.response.text[:_ERROR_BODY_LIMIT]
        logger.warning("%s returned HTTP %s: %s", provider, status_code, body)
        if status_code in (401, 403):
            raise AuthError(f"{provider} rejected the credentials (HTTP {status_code})") from exc
        raise ProviderError(f"{provider} returned HTTP {status_code}: {body}") from exc
    except httpx.RequestError as exc:
        raise NetworkError(f"Unable to reach {provider}: {exc}") from exc
    except ValueError as exc:
        raise ProviderError(f"{provider} returned a non-JSON response") from exc


__all__ = ["post_json"]
