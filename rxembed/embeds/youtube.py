"""YouTube embeds through a direct-stream resolver."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any
from urllib.parse import SplitResult, parse_qs, urlsplit

from ..errors import RxEmbedError
from ..fetcher import scrape_meta
from ..link_utils import normalize_hostname
from ..models import MetaDirective, Post, image_directives, meta, video_directives
from .context import EmbedContext, player_dimensions

log = logging.getLogger(__name__)


def _id_from_short_link(parsed: SplitResult) -> str | None:
    # https://youtu.be/<id>
    video_id = parsed.path.strip("/").split("/")[0]
    return video_id or None


def _id_from_watch_page(parsed: SplitResult) -> str | None:
    # https://www.youtube.com/watch?v=<id> or /shorts/<id>
    parts = [part for part in parsed.path.split("/") if part]
    if len(parts) >= 2 and parts[0] == "shorts":
        return parts[1]
    values = parse_qs(parsed.query).get("v")
    return values[0] if values and values[0] else None


VIDEO_ID_EXTRACTORS: dict[str, Callable[[SplitResult], str | None]] = {
    "youtu.be": _id_from_short_link,
    "www.youtube.com": _id_from_watch_page,
    "youtube.com": _id_from_watch_page,
    "m.youtube.com": _id_from_watch_page,
}


def extract_video_id(url: str) -> str | None:
    extractor = VIDEO_ID_EXTRACTORS.get(normalize_hostname(url))
    if extractor is None:
        return None
    return extractor(urlsplit(url))


def thumbnail_url(video_id: str) -> str:
    return f"https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"


def _parse_dimension(value: Any, default: int) -> int:
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return value
    if isinstance(value, str) and value.strip().isdigit() and int(value.strip()) > 0:
        return int(value.strip())
    return default


def thumbnail_card(video_id: str, width: int, height: int) -> list[MetaDirective]:
    """Static card used whenever no direct stream is available."""
    return [
        meta("twitter:card", "summary_large_image"),
        *image_directives(thumbnail_url(video_id), width, height),
    ]


async def _clip_embed(url: str, post: Post, ctx: EmbedContext) -> list[MetaDirective] | None:
    # Clip players are only discoverable from the clip page itself
    try:
        tags = await scrape_meta(ctx.client, url, ["twitter:player", "twitter:image"])
    except RxEmbedError as exc:
        log.info("could not scrape YouTube clip %s: %s", url, exc)
        return None

    width, height = player_dimensions(post, ctx.settings)
    directives: list[MetaDirective] = []
    if tags["twitter:player"]:
        directives.append(meta("twitter:card", "player"))
        directives.extend(video_directives(tags["twitter:player"], width, height, "text/html"))
    if tags["twitter:image"]:
        directives.extend(image_directives(tags["twitter:image"], width, height))
    return directives or None


async def youtube_embed(url: str, post: Post, ctx: EmbedContext) -> list[MetaDirective] | None:
    if urlsplit(url).path.startswith("/clip/"):
        return await _clip_embed(url, post, ctx)

    video_id = extract_video_id(url)
    if not video_id:
        return None

    embeds = ctx.settings.embeds
    fallback = thumbnail_card(video_id, embeds.default_width, embeds.default_height)
    try:
        data = await ctx.client.fetch_json(embeds.stream_api_url, params={"v": video_id})
    except RxEmbedError as exc:
        log.info("stream resolution failed for YouTube video %s: %s", video_id, exc)
        return fallback

    if not isinstance(data, dict) or data.get("error"):
        reason = data.get("error") if isinstance(data, dict) else "non-object response"
        log.info("stream resolver rejected YouTube video %s: %s", video_id, reason)
        return fallback
    stream_url = data.get("playerStreamUrl")
    if not isinstance(stream_url, str) or not stream_url:
        return fallback

    width = _parse_dimension(data.get("videoWidth"), embeds.default_width)
    height = _parse_dimension(data.get("videoHeight"), embeds.default_height)
    image = data.get("image")
    if not isinstance(image, str) or not image:
        image = thumbnail_url(video_id)

    directives = [meta("twitter:card", "player")]
    directives.extend(video_directives(stream_url, width, height, "video/mp4"))
    directives.extend(image_directives(image, width, height))
    return directives
