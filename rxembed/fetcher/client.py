"""Upstream HTTP access: post listings, HTML pages and JSON APIs."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..errors import (
    MalformedPayloadError,
    NotFoundError,
    UpstreamError,
    UpstreamRateLimitedError,
    UpstreamSuppressedError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)
from ..link_utils import post_json_path
from ..models.config import UpstreamConfig

log = logging.getLogger(__name__)


def _retry_after(response: httpx.Response) -> int | None:
    value = response.headers.get("retry-after", "").strip()
    return int(value) if value.isdigit() else None


def raise_for_upstream_status(response: httpx.Response) -> None:
    """Map an upstream HTTP status onto the matching error kind."""
    status = response.status_code
    if status < 400:
        return
    try:
        url = str(response.request.url)
    except RuntimeError:
        url = "?"
    if status == 403:
        raise UpstreamSuppressedError(f"upstream suppressed {url}", status_code=status)
    if status == 404:
        raise NotFoundError(f"upstream has no {url}")
    if status == 429:
        raise UpstreamRateLimitedError(f"upstream rate limited {url}", retry_after=_retry_after(response))
    if status >= 500:
        raise UpstreamUnavailableError(f"upstream returned {status} for {url}", status_code=status)
    raise UpstreamError(f"upstream returned {status} for {url}", status_code=status)


class UpstreamClient:
    """Request-scoped async client for the source platform and enrichment hosts.

    Use as an async context manager; leaving the block (normally or through
    cancellation) closes every connection the request opened.
    """

    def __init__(self, config: UpstreamConfig, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.config = config
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            headers={"User-Agent": config.user_agent},
            follow_redirects=True,
            transport=transport,
        )

    async def __aenter__(self) -> UpstreamClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get(self, url: str, *, timeout: float, params: dict[str, str] | None = None) -> httpx.Response:
        try:
            response = await self._client.get(url, params=params, timeout=timeout)
        except httpx.TimeoutException as exc:
            raise UpstreamTimeoutError(f"timed out after {timeout}s fetching {url}") from exc
        except httpx.RequestError as exc:
            # also covers redirect loops and undecodable bodies
            raise UpstreamUnavailableError(f"request failed fetching {url}: {exc}") from exc
        raise_for_upstream_status(response)
        return response

    async def fetch_post(self, post_id: str, comment_id: str | None = None, *, timeout: float | None = None) -> Any:
        """Fetch the raw listing (post plus inline comments) for a post."""
        path = post_json_path(post_id, comment_id)
        response = await self._get(
            path,
            timeout=timeout if timeout is not None else self.config.post_timeout_seconds,
            params={"raw_json": "1"},
        )
        try:
            return response.json()
        except ValueError as exc:
            raise MalformedPayloadError(f"undecodable JSON from {path}") from exc

    async def fetch_text(self, url: str, *, timeout: float | None = None) -> str:
        """Fetch a page body as text."""
        response = await self._get(
            url,
            timeout=timeout if timeout is not None else self.config.enrichment_timeout_seconds,
        )
        return response.text

    async def fetch_json(self, url: str, *, params: dict[str, str] | None = None, timeout: float | None = None) -> Any:
        """Fetch and decode a JSON document."""
        response = await self._get(
            url,
            timeout=timeout if timeout is not None else self.config.enrichment_timeout_seconds,
            params=params,
        )
        try:
            return response.json()
        except ValueError as exc:
            raise MalformedPayloadError(f"undecodable JSON from {url}") from exc
