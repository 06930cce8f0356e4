"""Perform one HTTP request and normalise the response into a snapshot record.

The request is synchronous with a caller-supplied timeout in milliseconds;
when it expires the in-flight request is abandoned and
:class:`FetchTimeoutError` is raised.  There is no retry.  Redirects are not
followed, so the recorded status is that of the first response.
"""

from __future__ import annotations

import json
import logging

import httpx

from reqsnap_engine.config import DEFAULT_TIMEOUT_MS, DEFAULT_USER_AGENT
from reqsnap_engine.errors import FetchError, FetchTimeoutError
from reqsnap_engine.models.snapshot import SnapshotRecord, utc_timestamp

logger = logging.getLogger(__name__)


def normalise_headers(headers: httpx.Headers) -> dict[str, str]:
    """Lower-case header names and join repeated headers with ``", "``."""
    merged: dict[str, str] = {}
    for name, value in headers.multi_items():
        key = name.lower()
        merged[key] = f"{merged[key]}, {value}" if key in merged else value
    return merged


def _reject_constant(name: str) -> object:
    raise ValueError(f"{name} is not valid JSON")


def decode_body(text: str) -> object:
    """Return *text* decoded as JSON, or unchanged when it is not JSON.

    ``NaN`` and ``Infinity`` are rejected, so such payloads stay raw text.
    """
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except ValueError:
        return text


def fetch_response(
    url: str,
    method: str = "GET",
    headers: dict[str, str] | None = None,
    body: str | None = None,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    *,
    user_agent: str = DEFAULT_USER_AGENT,
    transport: httpx.BaseTransport | None = None,
) -> SnapshotRecord:
    """Send the request and return the response as a :class:`SnapshotRecord`.

    Parameters
    ----------
    url:
        Absolute URL to request.
    method:
        HTTP method; upper-cased before sending.
    headers:
        Extra request headers, merged over the default ``User-Agent``.
    body:
        Raw request payload, sent as-is when given.
    timeout_ms:
        Overall timeout for connect, read and write, in milliseconds.
    user_agent:
        ``User-Agent`` sent unless *headers* provides one.
    transport:
        Optional transport, e.g. :class:`httpx.MockTransport` in tests.

    Raises
    ------
    FetchTimeoutError
        When the request does not complete within ``timeout_ms``.
    FetchError
        On any other transport-level failure.
    """
    method = method.strip().upper()
    request_headers = dict(headers or {})
    if not any(name.lower() == "user-agent" for name in request_headers):
        request_headers["User-Agent"] = user_agent

    logger.debug("%s %s (timeout=%dms)", method, url, timeout_ms)
    try:
        with httpx.Client(
            timeout=httpx.Timeout(timeout_ms / 1000),
            follow_redirects=False,
            transport=transport,
        ) as client:
            response = client.request(
                method,
                url,
                headers=request_headers,
                content=body.encode("utf-8") if body else None,
            )
    except httpx.TimeoutException as exc:
        raise FetchTimeoutError(timeout_ms) from exc
    except (httpx.RequestError, httpx.InvalidURL) as exc:
        raise FetchError(f"{method} {url} failed: {exc}") from exc

    logger.debug("%s %s -> %d", method, url, response.status_code)
    return SnapshotRecord(
        url=url,
        method=method,
        status=response.status_code,
        headers=normalise_headers(response.headers),
        body=decode_body(response.text),
        timestamp=utc_timestamp(),
    )
