"""Request pipeline: fetch, normalize, resolve and compile one post."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .compiler import EmbedCompiler
from .embeds import EmbedContext
from .errors import NoPlayableVariantError
from .fetcher import UpstreamClient
from .models import AppConfig, MediaDescriptor, MetaDirective, Post, PostHint
from .normalizer import normalize
from .video import resolve_video

log = logging.getLogger(__name__)


@dataclass
class CompiledEmbed:
    post: Post
    directives: list[MetaDirective]


async def prepare_video(post: Post, client: UpstreamClient, settings: AppConfig) -> None:
    """Pick the rendition whose dimensions the player card will advertise."""
    try:
        variant = await resolve_video(post, client, timeout=settings.upstream.enrichment_timeout_seconds)
    except NoPlayableVariantError:
        log.info("post %s is a hosted video without playable variants", post.id)
        return
    post.primary_media = MediaDescriptor(
        url=variant.url,
        width=variant.width,
        height=variant.height,
        mime_type="video/mp4",
    )


async def build_embed(
    client: UpstreamClient,
    settings: AppConfig,
    post_id: str,
    comment_id: str | None = None,
) -> CompiledEmbed:
    """Build the embed for one post.

    Errors from the primary post fetch propagate to the caller; every later
    enrichment step degrades instead of failing.
    """
    payload = await client.fetch_post(post_id, comment_id)
    post = normalize(payload, comment_id)

    compiler = EmbedCompiler(EmbedContext(client=client, settings=settings))
    if post.post_hint is PostHint.HOSTED_VIDEO and not compiler.withholds_media(post):
        await prepare_video(post, client, settings)

    return CompiledEmbed(post=post, directives=await compiler.compile(post))
