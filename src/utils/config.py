"""Configuration management for the recipe search core.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults
"""

import os

from dotenv import load_dotenv


# Load .env file (if exists, silently continues if missing)
load_dotenv()

DEFAULT_CATALOG_API_URL = "https://www.themealdb.com/api/json/v1/1/search.php?s="


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        # Catalog search endpoint. The URL-encoded search term is appended as-is,
        # so the value must end with the query parameter (e.g. "?s=")
        self.CATALOG_API_URL: str = os.getenv("CATALOG_API_URL", DEFAULT_CATALOG_API_URL)
        # Debounce window in milliseconds between the last query change and the dispatch. Default: 450
        self.SEARCH_DEBOUNCE_MS: int = int(os.getenv("SEARCH_DEBOUNCE_MS", "450"))
        # Total timeout (seconds) for one catalog request made by the default transport. Default: 10
        self.REQUEST_TIMEOUT_SECONDS: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "10"))
        # Stale response handling:
        # true  = only the latest dispatch may publish results (older completions are dropped)
        # false = whichever dispatch completes last wins, even if it was issued first
        self.DISCARD_STALE_RESPONSES: bool = os.getenv("DISCARD_STALE_RESPONSES", "true").lower() in (
            "true",
            "1",
            "yes",
        )

    @property
    def search_debounce_seconds(self) -> float:
        """Debounce window converted to seconds for the event loop scheduler."""
        return self.SEARCH_DEBOUNCE_MS / 1000

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If any value is out of range or malformed.
        """
        if not self.CATALOG_API_URL.startswith(("http://", "https://")):
            raise ValueError(
                f"CATALOG_API_URL must be an http(s) URL, got: {self.CATALOG_API_URL}"
            )
        if self.SEARCH_DEBOUNCE_MS < 0:
            raise ValueError(
                f"SEARCH_DEBOUNCE_MS must be at least 0, got: {self.SEARCH_DEBOUNCE_MS}"
            )
        if self.REQUEST_TIMEOUT_SECONDS <= 0:
            raise ValueError(
                f"REQUEST_TIMEOUT_SECONDS must be greater than 0, got: {self.REQUEST_TIMEOUT_SECONDS}"
            )


# Create module-level config instance and validate immediately
config = Config()
config.validate()
