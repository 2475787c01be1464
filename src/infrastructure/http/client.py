"""Async HTTP transport for the registry REST and WFS APIs.

Wraps ``httpx.AsyncClient`` and normalizes every failure into
``UpstreamError`` so adapters and domain services only deal with one
error type.

Usage::

    async with HttpClient("https://geodata.naturvardsverket.se/n2000/rest/v3") as http:
        areas = await http.request("/omrade/nolinks", params={"lan": "AB"})
"""

from __future__ import annotations

import logging
from typing import Any, Literal, Mapping

import httpx

from domain.protected_areas.errors import UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0  # seconds
DEFAULT_HEADERS: Mapping[str, str] = {"Accept": "application/json, text/plain, */*"}

# Leading part of an unexpected XML body kept in the error message
_XML_SNIPPET_CHARS = 200


class HttpClient:
    """Typed request helper bound to one base URL.

    Parameters
    ----------
    base_url:
        Root URL of the service; request paths are resolved against it.
    timeout:
        Per-request timeout in seconds.
    headers:
        Extra headers merged over ``DEFAULT_HEADERS``.
    transport:
        Optional httpx transport (tests pass ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        headers: Mapping[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self._timeout = timeout
        self._headers = {**DEFAULT_HEADERS, **(headers or {})}
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    # -- Lifecycle -----------------------------------------------------------

    async def open(self) -> httpx.AsyncClient:
        """Create the underlying client (idempotent) and return it."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self._timeout),
                headers=self._headers,
                transport=self._transport,
                follow_redirects=True,
            )
        return self._client

    async def close(self) -> None:
        """Close the underlying client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> HttpClient:
        await self.open()
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # -- Requests ------------------------------------------------------------

    async def request(
        self,
        path: str,
        *,
        method: Literal["GET", "POST"] = "GET",
        params: Mapping[str, Any] | None = None,
        body: Any = None,
    ) -> Any:
        """Perform a request and decode the response.

        Returns:
            ``str`` for ``text/plain`` responses (e.g. WKT), decoded JSON
            otherwise.

        Raises:
            UpstreamError: non-2xx status, XML error document, undecodable
                JSON (status of the response), or timeout / network failure
                (status 0)
        """
        client = await self.open()

        clean_path = path.lstrip("/")
        query = {
            key: str(value)
            for key, value in (params or {}).items()
            if value is not None and value != ""
        }

        try:
            response = await client.request(
                method,
                clean_path,
                params=query,
                json=body,
            )
        except httpx.TimeoutException as exc:
            raise UpstreamError(
                f"Request timeout after {self._timeout * 1000:.0f}ms",
                status=0,
                origin=self.base_url,
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(
                f"Network error: {str(exc) or type(exc).__name__}",
                status=0,
                origin=self.base_url,
            ) from exc

        logger.debug("%s %s -> %d", method, response.url, response.status_code)

        if not response.is_success:
            logger.warning(
                "Upstream %s returned HTTP %d for %s",
                self.base_url,
                response.status_code,
                clean_path or "/",
            )
            raise UpstreamError(
                f"API request failed: {response.status_code} {response.reason_phrase}",
                status=response.status_code,
                origin=self.base_url,
            )

        content_type = response.headers.get("content-type", "")

        if "text/plain" in content_type:
            return response.text

        # WFS ServiceExceptionReport arrives as XML with HTTP 200
        if "text/xml" in content_type or "application/xml" in content_type:
            raise UpstreamError(
                "API returned XML error response: "
                + response.text[:_XML_SNIPPET_CHARS],
                status=response.status_code,
                origin=self.base_url,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(
                f"API returned malformed JSON ({content_type or 'no content type'})",
                status=response.status_code,
                origin=self.base_url,
            ) from exc
