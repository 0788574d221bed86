"""Embeds for external image hosts."""

from __future__ import annotations

from collections.abc import Callable
from urllib.parse import SplitResult, urlsplit

from ..link_utils import is_image_url, normalize_hostname
from ..models import MetaDirective, Post, image_directives, meta, video_directives
from .context import EmbedContext

_IMGUR_IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "webp"}
_IMGUR_VIDEO_EXTENSIONS = {"gifv", "mp4"}
_IMGUR_RESERVED = {"a", "gallery", "t", "user", "r", "upload", "signin"}

# (kind, media url), kind being "image" or "video"
ResolvedMedia = tuple[str, str]


def _imgur_direct(parsed: SplitResult) -> ResolvedMedia | None:
    name = parsed.path.strip("/")
    if not name or "/" in name:
        return None
    stem, dot, extension = name.rpartition(".")
    if not dot or not stem:
        return None
    extension = extension.lower()
    if extension in _IMGUR_IMAGE_EXTENSIONS:
        return "image", f"https://i.imgur.com/{name}"
    if extension in _IMGUR_VIDEO_EXTENSIONS:
        return "video", f"https://i.imgur.com/{stem}.mp4"
    return None


def _imgur_page(parsed: SplitResult) -> ResolvedMedia | None:
    parts = [part for part in parsed.path.split("/") if part]
    if len(parts) != 1 or parts[0] in _IMGUR_RESERVED:
        return None
    if "." in parts[0]:
        return _imgur_direct(parsed)
    return "image", f"https://i.imgur.com/{parts[0]}.jpg"


def _reddit_image(parsed: SplitResult) -> ResolvedMedia | None:
    name = parsed.path.strip("/")
    if not name or "/" in name or not is_image_url(f"https://i.redd.it/{name}"):
        return None
    return "image", f"https://i.redd.it/{name}"


IMAGE_RESOLVERS: dict[str, Callable[[SplitResult], ResolvedMedia | None]] = {
    "i.imgur.com": _imgur_direct,
    "imgur.com": _imgur_page,
    "www.imgur.com": _imgur_page,
    "m.imgur.com": _imgur_page,
    "i.redd.it": _reddit_image,
}


def resolve_image_host(url: str) -> ResolvedMedia | None:
    """Return the direct media URL for an image-host link, or ``None``."""
    resolver = IMAGE_RESOLVERS.get(normalize_hostname(url))
    if resolver is None:
        return None
    return resolver(urlsplit(url))


async def image_host_embed(url: str, post: Post, ctx: EmbedContext) -> list[MetaDirective] | None:
    resolved = resolve_image_host(url)
    if resolved is None:
        return None
    kind, media_url = resolved

    # the upstream preview of the link carries the only known dimensions
    preview = post.thumbnail
    width = preview.width if preview else None
    height = preview.height if preview else None

    if kind == "video":
        directives = [meta("twitter:card", "player")]
        directives.extend(video_directives(media_url, width, height, "video/mp4"))
        if preview:
            directives.extend(image_directives(preview.url, width, height))
        return directives

    return [meta("twitter:card", "summary_large_image"), *image_directives(media_url, width, height)]
