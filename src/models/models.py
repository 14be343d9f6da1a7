"""Data models for the recipe search core.

Defines Pydantic models for the normalized recipe record, the orchestrator's
published search state, the transport response, and the tagged outcome of a
single catalog search. All models use Pydantic v2.
"""

import re
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from src.catalog.instructions import segment

_WHITESPACE_RUN = re.compile(r"\s+")


class Recipe(BaseModel):
    """Normalized catalog record.

    Built by `src.catalog.normalizer.normalize` from one wire record. Only id and
    name are required; every other field degrades to None (or an empty
    ingredient list) when the catalog leaves it blank.
    """

    model_config = ConfigDict(frozen=True)

    id: Annotated[str, Field(min_length=1, description="Catalog identifier (idMeal)")]
    name: Annotated[str, Field(min_length=1, description="Display name (strMeal)")]
    category: Annotated[Optional[str], Field(description="Catalog category, e.g. Dessert")] = None
    cuisine: Annotated[Optional[str], Field(description="Area of origin, e.g. Italian")] = None
    instructions: Annotated[
        Optional[str],
        Field(description="Free-text instructions, may contain line breaks and step numbers"),
    ] = None
    ingredients: Annotated[
        List[str],
        Field(default_factory=list, description='Ingredients as "<measure> <name>" or "<name>"'),
    ]
    image: Annotated[Optional[str], Field(description="Thumbnail URL")] = None
    source: Annotated[Optional[str], Field(description="URL of the original recipe")] = None
    tags: Annotated[
        Optional[List[str]],
        Field(description="Trimmed tags in catalog order, None when the catalog has none"),
    ] = None

    @property
    def preview(self) -> str:
        """Instructions collapsed onto one line, for list previews."""
        if not self.instructions:
            return ""
        return _WHITESPACE_RUN.sub(" ", self.instructions).strip()

    @property
    def steps(self) -> list[str]:
        """Ordered preparation steps derived from the instructions."""
        return segment(self.instructions)

    def ingredient_summary(self, limit: int = 3) -> str:
        """Join the first `limit` ingredients, marking truncation with an ellipsis."""
        if not self.ingredients:
            return ""
        summary = ", ".join(self.ingredients[:limit])
        if len(self.ingredients) > limit:
            summary += "…"
        return summary


class TransportResponse(BaseModel):
    """Raw result of one transport call: HTTP status and undecoded body."""

    status: int
    body: Union[str, bytes] = ""


class ErrorKind(str, Enum):
    """Failure classes a catalog search can end in."""

    TRANSPORT = "transport"
    HTTP = "http"
    MALFORMED = "malformed"
    UNEXPECTED = "unexpected"


class SearchSuccess(BaseModel):
    """Search completed; `recipes` may be empty when nothing matched."""

    ok: Literal[True] = True
    recipes: List[Recipe] = Field(default_factory=list)


class SearchFailure(BaseModel):
    """Search failed; `message` is suitable for direct display."""

    ok: Literal[False] = False
    kind: ErrorKind
    message: str
    status_code: Optional[int] = None


SearchOutcome = Union[SearchSuccess, SearchFailure]


class SearchStatus(str, Enum):
    """Orchestrator status.

    - IDLE: last applied dispatch succeeded
    - LOADING: a dispatch is in flight
    - ERROR: last applied dispatch failed; results may belong to an older query
    """

    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"


class SearchState(BaseModel):
    """Mutable state published by the query orchestrator."""

    model_config = ConfigDict(validate_assignment=True)

    status: SearchStatus = SearchStatus.LOADING
    results: List[Recipe] = Field(default_factory=list)
    last_error: Optional[str] = None
    query: str = ""
    refreshing: bool = False
