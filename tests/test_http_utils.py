"""Tests for HTTP utilities module."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from word2html.exceptions import FetchError
from word2html.http_utils import RETRY_STATUS_CODES, fetch_html


def _mock_client(mock_client_class: MagicMock, **get_kwargs) -> AsyncMock:
    mock_client = AsyncMock()
    mock_client.get = AsyncMock(**get_kwargs)
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=None)
    mock_client_class.return_value = mock_client
    return mock_client


def _response(
    status_code: int, text: str = "", content_type: str = "text/html; charset=utf-8"
) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.headers = {"content-type": content_type} if content_type else {}
    response.content = text.encode("utf-8")
    response.charset_encoding = "utf-8" if "charset=utf-8" in content_type else None
    response.raise_for_status = MagicMock()
    return response


class TestRetryStatusCodes:
    """Tests for RETRY_STATUS_CODES constant."""

    def test_contains_expected_codes(self) -> None:
        """Should contain all expected retryable status codes."""
        assert RETRY_STATUS_CODES == frozenset({429, 500, 502, 503, 504})


class TestFetchHtml:
    """Tests for fetch_html function."""

    @pytest.mark.asyncio
    async def test_returns_text(self) -> None:
        """Returns the decoded body on success."""
        with patch("word2html.http_utils.httpx.AsyncClient") as mock_client_class:
            _mock_client(mock_client_class, return_value=_response(200, "<p>doc</p>"))
            result = await fetch_html("https://example.com/doc.html")

        assert result == "<p>doc</p>"

    @pytest.mark.asyncio
    async def test_raises_on_404(self) -> None:
        """A missing document is not retried."""
        with patch("word2html.http_utils.httpx.AsyncClient") as mock_client_class:
            mock_client = _mock_client(mock_client_class, return_value=_response(404))

            with pytest.raises(FetchError, match="not found"):
                await fetch_html("https://example.com/missing")

        assert mock_client.get.call_count == 1

    @pytest.mark.asyncio
    async def test_retries_on_503(self) -> None:
        """Retries on 503 status code."""
        with (
            patch("word2html.http_utils.WORD2HTML_FETCH_MAX_RETRIES", 2),
            patch("word2html.http_utils.WORD2HTML_FETCH_BACKOFF_S", 0.01),
            patch("word2html.http_utils.httpx.AsyncClient") as mock_client_class,
        ):
            mock_client = _mock_client(
                mock_client_class, side_effect=[_response(503), _response(200, "ok")]
            )
            result = await fetch_html("https://example.com")

        assert result == "ok"
        assert mock_client.get.call_count == 2

    @pytest.mark.asyncio
    async def test_raises_after_max_retries(self) -> None:
        """Raises FetchError after exhausting retries."""
        with (
            patch("word2html.http_utils.WORD2HTML_FETCH_MAX_RETRIES", 2),
            patch("word2html.http_utils.WORD2HTML_FETCH_BACKOFF_S", 0.01),
            patch("word2html.http_utils.httpx.AsyncClient") as mock_client_class,
        ):
            mock_client = _mock_client(mock_client_class, return_value=_response(503))

            with pytest.raises(FetchError, match="Failed to fetch"):
                await fetch_html("https://example.com")

            # Initial attempt + 2 retries = 3 total
            assert mock_client.get.call_count == 3

    @pytest.mark.asyncio
    async def test_retries_on_request_error(self) -> None:
        """Retries on network request errors."""
        with (
            patch("word2html.http_utils.WORD2HTML_FETCH_MAX_RETRIES", 1),
            patch("word2html.http_utils.WORD2HTML_FETCH_BACKOFF_S", 0.01),
            patch("word2html.http_utils.httpx.AsyncClient") as mock_client_class,
        ):
            _mock_client(
                mock_client_class,
                side_effect=[httpx.RequestError("Connection failed"), _response(200, "ok")],
            )
            result = await fetch_html("https://example.com")

        assert result == "ok"

    @pytest.mark.asyncio
    async def test_uses_provided_client(self) -> None:
        """A caller-supplied client is used as is."""
        client = AsyncMock()
        client.get = AsyncMock(return_value=_response(200, "shared"))

        with patch("word2html.http_utils.httpx.AsyncClient") as mock_client_class:
            result = await fetch_html("https://example.com", client=client)

        assert result == "shared"
        mock_client_class.assert_not_called()

    @pytest.mark.asyncio
    async def test_rejects_non_html_content(self) -> None:
        """A binary download is not retried or decoded."""
        client = AsyncMock()
        client.get = AsyncMock(return_value=_response(200, "%PDF-1.7", "application/pdf"))

        with pytest.raises(FetchError, match="Expected HTML"):
            await fetch_html("https://example.com/doc.pdf", client=client)

        assert client.get.call_count == 1

    @pytest.mark.asyncio
    async def test_missing_content_type_accepted(self) -> None:
        client = AsyncMock()
        client.get = AsyncMock(return_value=_response(200, "<p>bare</p>", ""))

        assert await fetch_html("https://example.com", client=client) == "<p>bare</p>"

    @pytest.mark.asyncio
    async def test_decodes_with_meta_charset(self) -> None:
        """Without an HTTP charset the document's own declaration is used."""
        body = '<meta charset="windows-1252"><p>caf\xe9 \x93quoted\x94</p>'.encode("latin-1")
        response = _response(200, "", "text/html")
        response.content = body
        client = AsyncMock()
        client.get = AsyncMock(return_value=response)

        result = await fetch_html("https://example.com", client=client)

        assert "café “quoted”" in result
