"""Shared asynchronous HTTP transport for the watchlist source and the managers."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Mapping, Optional

import httpx

from .version import __version__

LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
USER_AGENT = f"watchlistarr/{__version__}"

_SECRET_PARAMS = re.compile(r"([?&](?:apikey|X-Plex-Token)=)[^&]*", re.IGNORECASE)


class TransportError(RuntimeError):
    """Raised when a request cannot be completed (connection error, timeout, non-2xx)."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, body: Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class HttpStatusError(TransportError):
    """Raised when the remote answers with a non-2xx status."""


class ResponseDecodeError(TransportError):
    """Raised when a response body is not valid JSON."""


def sanitize_url(url: str) -> str:
    """Mask credentials passed as query parameters so the URL is safe to log."""
    return _SECRET_PARAMS.sub(r"\1***", url)


def _decode_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        snippet = response.text[:200]
        raise ResponseDecodeError(
            f"Response from {sanitize_url(str(response.request.url))} is not JSON: {snippet}",
            status_code=response.status_code,
            body=response.text,
        ) from exc


class HttpTransport:
    """Thin wrapper around one long-lived ``httpx.AsyncClient``.

    Every call carries the client timeout, so a hung connection surfaces as a
    :class:`TransportError` instead of suspending forever. The transport holds
    no per-request state and is safe to share between concurrent loops.
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            headers={"User-Agent": USER_AGENT},
        )

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        json: Any = None,
    ) -> httpx.Response:
        try:
            response = await self._client.request(
                method,
                url,
                params=params,
                headers=headers,
                json=json,
                timeout=self.timeout,
            )
        except httpx.HTTPError as exc:
            LOGGER.debug("%s %s failed: %s", method.upper(), sanitize_url(url), exc)
            raise TransportError(f"{method.upper()} {sanitize_url(url)} failed: {exc}") from exc

        LOGGER.debug("%s %s -> %d", method.upper(), sanitize_url(str(response.request.url)), response.status_code)

        if not response.is_success:
            snippet = response.text[:200]
            raise HttpStatusError(
                f"{method.upper()} {sanitize_url(str(response.request.url))} failed ({response.status_code}): {snippet}",
                status_code=response.status_code,
                body=response.text,
            )
        return response

    async def get_text(self, url: str, **kwargs: Any) -> str:
        response = await self.request("GET", url, **kwargs)
        return response.text

    async def get_json(self, url: str, **kwargs: Any) -> Any:
        response = await self.request("GET", url, **kwargs)
        return _decode_json(response)

    async def post_json(self, url: str, body: Any, **kwargs: Any) -> Any:
        response = await self.request("POST", url, json=body, **kwargs)
        if not response.content:
            return None
        return _decode_json(response)

    async def delete(self, url: str, **kwargs: Any) -> None:
        await self.request("DELETE", url, **kwargs)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpTransport:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()


__all__ = [
    "HttpStatusError",
    "HttpTransport",
    "ResponseDecodeError",
    "TransportError",
    "sanitize_url",
]
