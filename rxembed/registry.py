"""Stable ``/v/<token>`` handles for upstream media whose URLs expire."""

from __future__ import annotations

import base64
import binascii
import logging
import re

from .errors import NoPlayableVariantError, NotFoundError, UpstreamSuppressedError
from .fetcher import UpstreamClient
from .link_utils import is_valid_post_id
from .models import Post, StableMediaHandle
from .normalizer import normalize
from .video import resolve_video

log = logging.getLogger(__name__)

VIDEO_REF = "video"
IMAGE_REF = "image"
GALLERY_REF_PREFIX = "gallery:"
_MEDIA_REF_RE = re.compile(r"^(?:video|image|gallery:\d{1,3})$")


def _encode(text: str) -> str:
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


def _decode(token: str) -> str:
    padded = token + "=" * (-len(token) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8")


def issue(post: Post, media_ref: str = VIDEO_REF) -> StableMediaHandle:
    """Issue the handle for one piece of a post's media. Pure and deterministic."""
    if not _MEDIA_REF_RE.match(media_ref):
        raise ValueError(f"unknown media reference {media_ref!r}")
    return StableMediaHandle(token=_encode(f"{post.id}:{media_ref}"), post_id=post.id, media_ref=media_ref)


def decode_token(token: str) -> tuple[str, str]:
    """Return ``(post_id, media_ref)`` for a token, or raise ``NotFoundError``."""
    try:
        decoded = _decode(token)
    except (binascii.Error, UnicodeError, ValueError) as exc:
        raise NotFoundError(f"undecodable media token {token!r}") from exc
    post_id, _, media_ref = decoded.partition(":")
    if not is_valid_post_id(post_id) or not _MEDIA_REF_RE.match(media_ref):
        raise NotFoundError(f"media token {token!r} does not reference known media")
    return post_id, media_ref


class MediaRegistry:
    """Resolves handles against upstream on every dereference.

    Nothing is cached here: the published token is permanent while the URL
    behind it keeps changing, so each ``resolve`` fetches the post again.
    """

    def __init__(self, client: UpstreamClient, timeout: float | None = None) -> None:
        self.client = client
        self.timeout = timeout if timeout is not None else client.config.media_timeout_seconds

    def issue(self, post: Post, media_ref: str = VIDEO_REF) -> StableMediaHandle:
        return issue(post, media_ref)

    async def resolve(self, token: str) -> str:
        """Return a currently valid upstream URL for ``token``."""
        post_id, media_ref = decode_token(token)
        try:
            payload = await self.client.fetch_post(post_id, timeout=self.timeout)
        except UpstreamSuppressedError as exc:
            raise NotFoundError(f"post {post_id} is no longer available") from exc
        post = normalize(payload)

        url = await self._locate(post, media_ref)
        if not url:
            raise NotFoundError(f"post {post_id} has no {media_ref} media")
        log.debug("resolved %s for post %s to %s", media_ref, post_id, url)
        return url

    async def _locate(self, post: Post, media_ref: str) -> str | None:
        if media_ref == VIDEO_REF:
            try:
                variant = await resolve_video(post, self.client, timeout=self.timeout)
            except NoPlayableVariantError:
                return None
            return variant.url
        if media_ref == IMAGE_REF:
            return post.primary_media.url if post.primary_media else None
        index = int(media_ref.removeprefix(GALLERY_REF_PREFIX))
        if index < len(post.gallery):
            return post.gallery[index].url
        return None
