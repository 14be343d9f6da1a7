"""Transport capability used by the catalog gateway.

The gateway only depends on the `Transport` signature: an async callable
taking a URL and a header mapping and returning a TransportResponse.
aiohttp_transport() is the default implementation used by query.py; tests
inject their own.
"""

import asyncio
from typing import Awaitable, Callable, Mapping

import aiohttp

from src.catalog.errors import MalformedResponseError, TransportError
from src.models.models import TransportResponse
from src.utils.config import config
from src.utils.logger import logger

Transport = Callable[[str, Mapping[str, str]], Awaitable[TransportResponse]]


async def aiohttp_transport(url: str, headers: Mapping[str, str]) -> TransportResponse:
    """Issue one GET request with aiohttp (async).

    Args:
        url: Fully built request URL.
        headers: Request headers.

    Returns:
        TransportResponse with the status code and the body as text.

    Raises:
        TransportError: If the request times out or the connection fails.
        MalformedResponseError: If the body cannot be decoded with its declared charset.
    """
    timeout = aiohttp.ClientTimeout(total=config.REQUEST_TIMEOUT_SECONDS)
    try:
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(url, headers=dict(headers)) as response:
                body = await response.text()
                logger.debug(f"GET {url} -> {response.status} ({len(body)} chars)")
                return TransportResponse(status=response.status, body=body)
    except asyncio.TimeoutError as e:
        raise TransportError(
            str(e) or f"Recipe service did not respond within {config.REQUEST_TIMEOUT_SECONDS:g}s"
        ) from e
    except aiohttp.ClientError as e:
        raise TransportError(str(e) or "Unable to reach recipe service") from e
    except UnicodeDecodeError as e:
        raise MalformedResponseError(f"Recipe data malformed: response is not valid text ({e.reason}).") from e
