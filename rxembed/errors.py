"""Error kinds raised by the embed pipeline."""

from __future__ import annotations


class RxEmbedError(RuntimeError):
    """Base class for rxembed errors."""


class MalformedPayloadError(RxEmbedError):
    """Raised when an upstream payload is missing required structure."""


class UnsupportedPostTypeError(RxEmbedError):
    """Raised when an upstream post hint maps to no known rendering branch."""


class NoPlayableVariantError(RxEmbedError):
    """Raised when a hosted video has no candidate variants at all."""


class NotFoundError(RxEmbedError):
    """Raised when a post or stable media reference can no longer be located."""


class UpstreamError(RxEmbedError):
    """Raised when an upstream request fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class UpstreamTimeoutError(UpstreamError):
    """Raised when an upstream request exceeds its timeout."""


class UpstreamRateLimitedError(UpstreamError):
    """Raised when upstream answers 429."""

    def __init__(self, message: str, retry_after: int | None = None) -> None:
        super().__init__(message, status_code=429)
        self.retry_after = retry_after


class UpstreamSuppressedError(UpstreamError):
    """Raised when upstream answers 403, which almost always means disallowed content."""


class UpstreamUnavailableError(UpstreamError):
    """Raised on upstream 5xx answers or failed requests."""
