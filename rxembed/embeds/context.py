"""Shared state and helpers for domain handlers."""

from __future__ import annotations

from dataclasses import dataclass

from ..fetcher import UpstreamClient
from ..models import AppConfig, Post


@dataclass
class EmbedContext:
    """Per-request collaborators handed to every domain handler."""

    client: UpstreamClient
    settings: AppConfig


def player_dimensions(post: Post, settings: AppConfig) -> tuple[int, int]:
    """Player size from the post's oEmbed hint, per axis, falling back to the defaults.

    Small oEmbed sizes are thumbnails of the upstream player and look broken
    when used for a full embed, so only values above the threshold count.
    """
    embeds = settings.embeds
    width, height = embeds.default_width, embeds.default_height
    oembed = post.oembed
    if oembed and oembed.width and oembed.width > embeds.min_oembed_dimension:
        width = oembed.width
    if oembed and oembed.height and oembed.height > embeds.min_oembed_dimension:
        height = oembed.height
    return width, height
