"""Failure taxonomy for catalog searches.

Every failure of a single search is a SearchError subclass. The message is
human-readable and shown to the user as-is; `kind` lets callers and tests
tell the classes apart without isinstance chains.
"""

from typing import Optional

from src.models.models import ErrorKind


class SearchError(Exception):
    """Base class for a failed catalog search.

    Raised directly only for failures that fit none of the subclasses.
    """

    kind: ErrorKind = ErrorKind.UNEXPECTED

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def status_code(self) -> Optional[int]:
        return None


class TransportError(SearchError):
    """The request never produced a response (network unreachable, timeout)."""

    kind = ErrorKind.TRANSPORT


class HttpError(SearchError):
    """The catalog answered with a non-2xx status."""

    kind = ErrorKind.HTTP

    def __init__(self, status_code: int, message: Optional[str] = None) -> None:
        super().__init__(message or f"Unable to reach recipe service (status {status_code})")
        self._status_code = status_code

    @property
    def status_code(self) -> Optional[int]:
        return self._status_code


class MalformedResponseError(SearchError):
    """The response body does not have the expected envelope shape."""

    kind = ErrorKind.MALFORMED
