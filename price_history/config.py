"""Configuration management."""

import os
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

DEFAULT_API_URL = "https://api.gdax.com"
DEFAULT_PRODUCT_ID = "BTC-USD"


@dataclass
class HistoryConfig:
    """Historical price source configuration from environment variables."""

    api_url: str = DEFAULT_API_URL
    product_id: str = DEFAULT_PRODUCT_ID
    request_timeout: Optional[float] = None

    @classmethod
    def from_env(cls) -> "HistoryConfig":
        """Load configuration from environment variables.

        Reads GDAX_API_URL, GDAX_PRODUCT_ID and GDAX_REQUEST_TIMEOUT. An unset
        timeout leaves the transport's default behaviour in place.
        """
        api_url = os.getenv("GDAX_API_URL", DEFAULT_API_URL).strip().rstrip("/")
        product_id = os.getenv("GDAX_PRODUCT_ID", DEFAULT_PRODUCT_ID).strip().upper()

        timeout_str = os.getenv("GDAX_REQUEST_TIMEOUT", "").strip()
        request_timeout = None
        if timeout_str:
            try:
                request_timeout = float(timeout_str)
            except ValueError as e:
                raise ValueError(
                    f"GDAX_REQUEST_TIMEOUT must be a number of seconds, got {timeout_str!r}"
                ) from e

        return cls(
            api_url=api_url,
            product_id=product_id,
            request_timeout=request_timeout,
        )

    def validate(self) -> None:
        """Validate configuration."""
        parsed = urlparse(self.api_url)
        if parsed.scheme not in ["http", "https"] or not parsed.netloc:
            raise ValueError(f"GDAX_API_URL must be an http(s) URL, got {self.api_url!r}")

        parts = self.product_id.split("-")
        if len(parts) != 2 or not all(parts):
            raise ValueError(
                f"GDAX_PRODUCT_ID must look like 'BASE-QUOTE' (e.g., 'BTC-USD'). "
                f"Got: {self.product_id}"
            )

        if self.request_timeout is not None and self.request_timeout <= 0:
            raise ValueError("GDAX_REQUEST_TIMEOUT must be positive")
