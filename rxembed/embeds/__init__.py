"""Hostname-keyed embed strategies for link posts.

Every known hostname maps to one ``HandlerKind``; each kind has exactly one
handler. Supporting a new site means adding a kind (if needed), its handler
and the hostname entries below.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from enum import Enum

from ..models import MetaDirective, Post
from .context import EmbedContext, player_dimensions
from .images import image_host_embed
from .reddit import crosslink_embed
from .twitch import twitch_clip_embed
from .youtube import youtube_embed


class HandlerKind(str, Enum):
    CLIP_HOST = "clip_host"
    VIDEO_HOST = "video_host"
    IMAGE_HOST = "image_host"
    SOURCE_PLATFORM_LINK = "source_platform_link"
    GENERIC = "generic"


HOST_KINDS: dict[str, HandlerKind] = {
    "clips.twitch.tv": HandlerKind.CLIP_HOST,
    "www.twitch.tv": HandlerKind.CLIP_HOST,
    "twitch.tv": HandlerKind.CLIP_HOST,
    "m.twitch.tv": HandlerKind.CLIP_HOST,
    "youtu.be": HandlerKind.VIDEO_HOST,
    "www.youtube.com": HandlerKind.VIDEO_HOST,
    "youtube.com": HandlerKind.VIDEO_HOST,
    "m.youtube.com": HandlerKind.VIDEO_HOST,
    "i.imgur.com": HandlerKind.IMAGE_HOST,
    "imgur.com": HandlerKind.IMAGE_HOST,
    "www.imgur.com": HandlerKind.IMAGE_HOST,
    "m.imgur.com": HandlerKind.IMAGE_HOST,
    "i.redd.it": HandlerKind.IMAGE_HOST,
    "reddit.com": HandlerKind.SOURCE_PLATFORM_LINK,
    "www.reddit.com": HandlerKind.SOURCE_PLATFORM_LINK,
    "old.reddit.com": HandlerKind.SOURCE_PLATFORM_LINK,
    "new.reddit.com": HandlerKind.SOURCE_PLATFORM_LINK,
    "np.reddit.com": HandlerKind.SOURCE_PLATFORM_LINK,
    "redd.it": HandlerKind.SOURCE_PLATFORM_LINK,
}

Handler = Callable[[str, Post, EmbedContext], Awaitable[list[MetaDirective] | None]]

HANDLERS: dict[HandlerKind, Handler] = {
    HandlerKind.CLIP_HOST: twitch_clip_embed,
    HandlerKind.VIDEO_HOST: youtube_embed,
    HandlerKind.IMAGE_HOST: image_host_embed,
    HandlerKind.SOURCE_PLATFORM_LINK: crosslink_embed,
}


def handler_kind(hostname: str) -> HandlerKind:
    return HOST_KINDS.get(hostname, HandlerKind.GENERIC)


async def dispatch(hostname: str, url: str, post: Post, ctx: EmbedContext) -> list[MetaDirective] | None:
    """Run the specialised handler for ``hostname``.

    ``None`` means no specialised embed applies (unknown host, or the handler
    declined) and the caller should fall back to a generic link card.
    """
    handler = HANDLERS.get(handler_kind(hostname))
    if handler is None:
        return None
    return await handler(url, post, ctx) or None


__all__ = [
    "HANDLERS",
    "HOST_KINDS",
    "EmbedContext",
    "HandlerKind",
    "dispatch",
    "handler_kind",
    "player_dimensions",
]
