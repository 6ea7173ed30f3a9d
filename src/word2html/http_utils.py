"""HTTP utilities for fetching pasted-document HTML with retry logic."""

from __future__ import annotations

import asyncio
import logging
from typing import Final

import httpx

from word2html.config import (
    WORD2HTML_FETCH_BACKOFF_S,
    WORD2HTML_FETCH_MAX_RETRIES,
    WORD2HTML_FETCH_TIMEOUT_S,
    WORD2HTML_USER_AGENT,
)
from word2html.exceptions import FetchError
from word2html.html_utils import decode_markup

logger = logging.getLogger(__name__)

RETRY_STATUS_CODES: Final[frozenset[int]] = frozenset({429, 500, 502, 503, 504})

_MAX_REDIRECTS: Final[int] = 5
# Exported documents are sometimes served as plain text.
_HTML_CONTENT_TYPES: Final[tuple[str, ...]] = ("text/html", "application/xhtml+xml", "text/plain")


async def fetch_html(url: str, *, client: httpx.AsyncClient | None = None) -> str:
    """Fetch an HTML document, retrying transient failures.

    Args:
        url: The URL to fetch.
        client: Optional httpx.AsyncClient to reuse. If not provided, a new
            client is created for this request.

    Returns:
        The decoded response body.

    Raises:
        FetchError: If the resource does not exist, is not HTML, or every
            attempt failed.
    """
    timeout = httpx.Timeout(WORD2HTML_FETCH_TIMEOUT_S)
    headers = {"User-Agent": WORD2HTML_USER_AGENT}
    last_exc: Exception | None = None

    async def do_fetch(http_client: httpx.AsyncClient) -> str:
        nonlocal last_exc

        for attempt in range(WORD2HTML_FETCH_MAX_RETRIES + 1):
            try:
                response = await http_client.get(url)

                if response.status_code == 404:
                    raise FetchError(f"Document not found at {url}")

                if response.status_code in RETRY_STATUS_CODES:
                    last_exc = FetchError(f"HTTP {response.status_code} from {url}")
                else:
                    response.raise_for_status()
                    return _decode_response(url, response)
            except (httpx.RequestError, httpx.HTTPStatusError) as exc:
                last_exc = exc

            if attempt < WORD2HTML_FETCH_MAX_RETRIES:
                backoff = WORD2HTML_FETCH_BACKOFF_S * (2**attempt)
                logger.debug("Retrying %s in %.2fs after: %s", url, backoff, last_exc)
                await asyncio.sleep(backoff)

        raise FetchError(f"Failed to fetch {url}: {last_exc}")

    if client is not None:
        return await do_fetch(client)

    async with httpx.AsyncClient(
        timeout=timeout,
        headers=headers,
        follow_redirects=True,
        max_redirects=_MAX_REDIRECTS,
    ) as new_client:
        return await do_fetch(new_client)


def _decode_response(url: str, response: httpx.Response) -> str:
    """Check the content type and decode the body.

    A missing content type is accepted. The HTTP charset wins over any
    ``<meta charset>`` in the document.
    """
    content_type = response.headers.get("content-type", "")
    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type and media_type not in _HTML_CONTENT_TYPES:
        raise FetchError(f"Expected HTML from {url}, got {media_type}")
    return decode_markup(response.content, response.charset_encoding)
