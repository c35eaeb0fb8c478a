"""Shared HTTP transport for LLM providers: JSON POST with retry."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

BACKOFF_BASE_SECONDS = 0.5


async def post_json(
    http: httpx.AsyncClient,
    path: str,
    payload: dict[str, Any],
    *,
    max_retries: int,
) -> dict[str, Any]:
    """POST ``payload`` and return the decoded JSON body.

    5xx responses and transport errors are retried with exponential backoff,
    up to ``max_retries`` extra attempts. 4xx responses are never retried.

    Raises:
        httpx.HTTPStatusError: The final response was not a success.
        httpx.TransportError: The final attempt could not reach the server.
    """
    attempts = max(1, max_retries + 1)
    for attempt in range(attempts):
        last = attempt == attempts - 1
        try:
            resp = await http.post(path, json=payload)
        except httpx.TransportError as exc:
            if last:
                raise
            delay = BACKOFF_BASE_SECONDS * 2**attempt
            logger.warning("Transport error on %s: %s, retrying in %.1fs", path, exc, delay)
            await asyncio.sleep(delay)
            continue
        if resp.status_code >= 500 and not last:
            delay = BACKOFF_BASE_SECONDS * 2**attempt
            logger.warning(
                "%s returned %d, retrying in %.1fs (%d/%d)",
                path, resp.status_code, delay, attempt + 1, attempts,
            )
            await asyncio.sleep(delay)
            continue
        resp.raise_for_status()
        return resp.json()
    raise RuntimeError("unreachable")  # pragma: no cover
