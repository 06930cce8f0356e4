"""HTTP fetching for snapshot capture and live checks."""

from reqsnap_engine.fetch.http_fetcher import (
    DEFAULT_USER_AGENT,
    decode_body,
    fetch_response,
    normalise_headers,
)

__all__ = [
    "DEFAULT_USER_AGENT",
    "decode_body",
    "fetch_response",
    "normalise_headers",
]
