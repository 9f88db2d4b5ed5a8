"""Shared webhook POST used by the chat adapters."""

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


async def post_webhook(url: str, payload: dict, timeout: float = 10.0) -> Any:
    """POST a JSON payload and return the parsed body (or raw text).

    Raises httpx.HTTPStatusError on a non-2xx response.
    """
    async with httpx.AsyncClient(timeout=timeout) as client:
        resp = await client.post(
            url,
            json=payload,
            headers={"Content-Type": "application/json"},
        )
        resp.raise_for_status()
    logger.debug(f"Webhook {url[:30]}*** answered {resp.status_code}")
    if "application/json" in resp.headers.get("content-type", ""):
        return resp.json()
    return resp.text
