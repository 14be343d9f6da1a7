"""Catalog search gateway.

This module provides the CatalogGateway class which issues one search against
the recipe catalog through an injected transport, validates the response
envelope, and normalizes every record. Failures are classified into the
SearchError taxonomy; search_outcome() returns them as a tagged result instead.
"""

import asyncio
import json
from typing import Any, Optional
from urllib.parse import quote

from src.catalog.errors import HttpError, MalformedResponseError, SearchError, TransportError
from src.catalog.normalizer import normalize
from src.catalog.transport import Transport
from src.models.models import Recipe, SearchFailure, SearchOutcome, SearchSuccess
from src.utils.config import config
from src.utils.logger import logger

# Characters encodeURIComponent leaves untouched besides letters and digits
_URI_COMPONENT_SAFE = "-_.!~*'()"

REQUEST_HEADERS = {"Cache-Control": "no-cache"}


class CatalogGateway:
    """Search the recipe catalog through an injected transport.

    Each search makes exactly one transport call. There are no retries and no
    caching: recovery is the caller's next search.
    """

    def __init__(self, transport: Transport, base_url: Optional[str] = None) -> None:
        """Initialize CatalogGateway.

        Args:
            transport: Async callable performing the HTTP GET.
            base_url: Search endpoint prefix the encoded term is appended to.
                Defaults to CATALOG_API_URL from configuration.
        """
        self.transport = transport
        self.base_url = base_url or config.CATALOG_API_URL

    def build_url(self, term: str) -> str:
        """Append the percent-encoded term to the endpoint. Empty term matches everything."""
        return f"{self.base_url}{quote(term, safe=_URI_COMPONENT_SAFE)}"

    async def search(self, term: str) -> list[Recipe]:
        """Search the catalog for `term` (async).

        Args:
            term: Free-text search term, may be empty.

        Returns:
            Normalized recipes in server order; empty list when nothing matched.

        Raises:
            TransportError: If the request could not be completed.
            HttpError: If the catalog answered with a non-2xx status.
            MalformedResponseError: If the body is not the expected envelope.
        """
        url = self.build_url(term)
        logger.debug(f"Searching catalog: {url}")

        try:
            response = await self.transport(url, REQUEST_HEADERS)
        except TransportError:
            raise
        except (OSError, asyncio.TimeoutError) as e:
            raise TransportError(str(e) or "Unable to reach recipe service") from e

        if not 200 <= response.status < 300:
            raise HttpError(response.status)

        meals = self._parse_envelope(response.body)
        if meals is None:
            logger.debug(f"No recipes matched {term!r}")
            return []

        recipes = [normalize(meal) for meal in meals]
        logger.debug(f"Catalog returned {len(recipes)} recipes for {term!r}")
        return recipes

    async def search_outcome(self, term: str) -> SearchOutcome:
        """Search like search(), but return failures as a SearchFailure instead of raising."""
        try:
            recipes = await self.search(term)
        except SearchError as e:
            return SearchFailure(kind=e.kind, message=e.message, status_code=e.status_code)
        return SearchSuccess(recipes=recipes)

    @staticmethod
    def _parse_envelope(body: Any) -> Optional[list[dict[str, Any]]]:
        """Decode the body and return the meals list, or None for "no results".

        Raises:
            MalformedResponseError: If the body or any meal entry has the wrong shape.
        """
        # ValueError covers JSONDecodeError and UnicodeDecodeError from bytes bodies
        try:
            payload = json.loads(body)
        except (ValueError, TypeError) as e:
            raise MalformedResponseError("Recipe data malformed: response is not valid JSON.") from e

        if not isinstance(payload, dict) or "meals" not in payload:
            raise MalformedResponseError("Recipe data malformed: missing meals array.")

        meals = payload["meals"]
        if meals is None:
            return None
        if not isinstance(meals, list):
            raise MalformedResponseError("Recipe data malformed: missing meals array.")

        for index, meal in enumerate(meals):
            if not isinstance(meal, dict):
                raise MalformedResponseError(f"Recipe data malformed: entry {index} is not an object.")
            for field in ("idMeal", "strMeal"):
                value = meal.get(field)
                if value is None or not str(value).strip():
                    raise MalformedResponseError(f"Recipe data malformed: entry {index} has no {field}.")

        return meals
