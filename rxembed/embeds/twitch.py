"""Twitch clip embeds."""

from __future__ import annotations

from collections.abc import Callable
from urllib.parse import SplitResult, urlencode, urlsplit

from ..link_utils import normalize_hostname
from ..models import MetaDirective, Post, image_directives, meta, video_directives
from .context import EmbedContext, player_dimensions

CLIP_EMBED_URL = "https://clips.twitch.tv/embed"


def _slug_from_clips_host(parsed: SplitResult) -> str | None:
    # https://clips.twitch.tv/<slug>
    slug = parsed.path.strip("/")
    return slug or None


def _slug_from_main_site(parsed: SplitResult) -> str | None:
    # https://www.twitch.tv/<channel>/clip/<slug>
    parts = [part for part in parsed.path.split("/") if part]
    if "clip" not in parts:
        return None
    index = parts.index("clip")
    return parts[index + 1] if index + 1 < len(parts) else None


SLUG_EXTRACTORS: dict[str, Callable[[SplitResult], str | None]] = {
    "clips.twitch.tv": _slug_from_clips_host,
    "www.twitch.tv": _slug_from_main_site,
    "twitch.tv": _slug_from_main_site,
    "m.twitch.tv": _slug_from_main_site,
}


def extract_clip_slug(url: str) -> str | None:
    """Return the clip slug for a Twitch clip URL, or ``None``."""
    extractor = SLUG_EXTRACTORS.get(normalize_hostname(url))
    if extractor is None:
        return None
    return extractor(urlsplit(url))


def clip_embed_url(slug: str, ancestors: list[str]) -> str:
    """Player URL for ``slug``, listing every allowed frame ancestor as a ``parent``."""
    params = [("clip", slug)] + [("parent", ancestor) for ancestor in ancestors]
    return f"{CLIP_EMBED_URL}?{urlencode(params)}"


async def twitch_clip_embed(url: str, post: Post, ctx: EmbedContext) -> list[MetaDirective] | None:
    slug = extract_clip_slug(url)
    if not slug:
        return None

    width, height = player_dimensions(post, ctx.settings)
    embed_url = clip_embed_url(slug, ctx.settings.embeds.twitch_ancestors)

    directives = [meta("twitter:card", "player")]
    directives.extend(video_directives(embed_url, width, height, "text/html"))
    if post.oembed and post.oembed.thumbnail_url:
        directives.extend(image_directives(post.oembed.thumbnail_url, width, height))
    return directives
