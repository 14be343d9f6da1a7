"""Unit tests for the default aiohttp transport."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from src.catalog.errors import MalformedResponseError, TransportError
from src.catalog.transport import aiohttp_transport
from src.models.models import ErrorKind, TransportResponse


def mock_client_session(mock_session_cls: MagicMock, status: int = 200, text: str = "{}") -> MagicMock:
    """Wire a patched ClientSession class to return a response with `status` and `text`."""
    mock_response = MagicMock()
    mock_response.status = status
    mock_response.text = AsyncMock(return_value=text)

    mock_session = MagicMock()
    request_ctx = mock_session.get.return_value
    request_ctx.__aenter__.return_value = mock_response
    request_ctx.__aexit__.return_value = False

    session_ctx = mock_session_cls.return_value
    session_ctx.__aenter__.return_value = mock_session
    session_ctx.__aexit__.return_value = False
    return mock_session


class TestAiohttpTransport:
    """Tests for aiohttp_transport."""

    @pytest.mark.asyncio
    @patch("src.catalog.transport.aiohttp.ClientSession")
    async def test_returns_status_and_body(self, mock_session_cls: MagicMock) -> None:
        """Test successful GET returns status and text body."""
        mock_session = mock_client_session(mock_session_cls, status=200, text='{"meals": null}')

        result = await aiohttp_transport("https://catalog.test/search.php?s=", {"Cache-Control": "no-cache"})

        assert result == TransportResponse(status=200, body='{"meals": null}')
        mock_session.get.assert_called_once_with(
            "https://catalog.test/search.php?s=", headers={"Cache-Control": "no-cache"}
        )

    @pytest.mark.asyncio
    @patch("src.catalog.transport.aiohttp.ClientSession")
    async def test_non_success_status_is_returned_not_raised(self, mock_session_cls: MagicMock) -> None:
        """Test that HTTP errors are left for the gateway to classify."""
        mock_client_session(mock_session_cls, status=503, text="Service Unavailable")

        result = await aiohttp_transport("https://catalog.test/", {})

        assert result.status == 503
        assert result.body == "Service Unavailable"

    @pytest.mark.asyncio
    @patch("src.catalog.transport.aiohttp.ClientSession")
    async def test_uses_configured_timeout(self, mock_session_cls: MagicMock) -> None:
        """Test that the session is created with a total timeout."""
        mock_client_session(mock_session_cls)

        await aiohttp_transport("https://catalog.test/", {})

        timeout = mock_session_cls.call_args.kwargs["timeout"]
        assert isinstance(timeout, aiohttp.ClientTimeout)
        assert timeout.total > 0

    @pytest.mark.asyncio
    @patch("src.catalog.transport.aiohttp.ClientSession")
    async def test_client_error_becomes_transport_error(self, mock_session_cls: MagicMock) -> None:
        """Test that connection failures are raised as TransportError with the library message."""
        mock_session = mock_client_session(mock_session_cls)
        mock_session.get.side_effect = aiohttp.ClientConnectionError("Cannot connect to host catalog.test")

        with pytest.raises(TransportError, match="Cannot connect to host catalog.test"):
            await aiohttp_transport("https://catalog.test/", {})

    @pytest.mark.asyncio
    @patch("src.catalog.transport.aiohttp.ClientSession")
    async def test_timeout_becomes_transport_error(self, mock_session_cls: MagicMock) -> None:
        """Test that a timeout is raised as TransportError with a readable message."""
        mock_session = mock_client_session(mock_session_cls)
        mock_session.get.return_value.__aenter__.return_value.text.side_effect = asyncio.TimeoutError()

        with pytest.raises(TransportError) as exc:
            await aiohttp_transport("https://catalog.test/", {})

        assert "did not respond" in exc.value.message

    @pytest.mark.asyncio
    @patch("src.catalog.transport.aiohttp.ClientSession")
    async def test_undecodable_body_becomes_malformed_error(self, mock_session_cls: MagicMock) -> None:
        """Test that a body that cannot be decoded as text is raised as MalformedResponseError."""
        mock_session = mock_client_session(mock_session_cls)
        mock_session.get.return_value.__aenter__.return_value.text.side_effect = UnicodeDecodeError(
            "utf-8", b"\xff", 0, 1, "invalid start byte"
        )

        with pytest.raises(MalformedResponseError) as exc:
            await aiohttp_transport("https://catalog.test/", {})

        assert exc.value.kind is ErrorKind.MALFORMED
        assert "invalid start byte" in exc.value.message
