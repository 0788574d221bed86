"""Selection of the best playable rendition for hosted videos."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any

from .errors import NoPlayableVariantError, RxEmbedError
from .fetcher import UpstreamClient, element_attribute, parse_html
from .link_utils import canonical_post_url
from .models import MediaVariant, Post, PostHint

log = logging.getLogger(__name__)

# Attribute on the post page's player element holding muxed (audio + video) renditions
PACKAGED_MEDIA_ATTRIBUTE = "packaged-media-json"


def resolve_best_variant(candidates: Sequence[MediaVariant]) -> MediaVariant:
    """Pick the variant to publish.

    Audio beats silence, then the higher ``bitrate_rank`` wins, and only a
    full tie falls back to the later position in ``candidates``.
    """
    if not candidates:
        raise NoPlayableVariantError("no video variants to choose from")
    best = max(
        range(len(candidates)),
        key=lambda i: (candidates[i].has_audio, candidates[i].bitrate_rank, i),
    )
    return candidates[best]


def parse_packaged_media(raw: str) -> list[MediaVariant]:
    """Read the muxed renditions out of a ``packaged-media-json`` attribute value."""
    try:
        data: Any = json.loads(raw)
    except ValueError:
        log.debug("packaged media attribute is not JSON")
        return []
    mp4s = data.get("playbackMp4s") if isinstance(data, dict) else None
    permutations = mp4s.get("permutations") if isinstance(mp4s, dict) else None
    if not isinstance(permutations, list):
        return []

    variants: list[MediaVariant] = []
    for position, permutation in enumerate(permutations):
        source = permutation.get("source") if isinstance(permutation, dict) else None
        if not isinstance(source, dict) or not isinstance(source.get("url"), str):
            continue
        dimensions = source.get("dimensions") if isinstance(source.get("dimensions"), dict) else {}
        width = dimensions.get("width") if isinstance(dimensions.get("width"), int) else None
        height = dimensions.get("height") if isinstance(dimensions.get("height"), int) else None
        variants.append(
            MediaVariant(
                url=source["url"].strip(),
                width=width,
                height=height,
                has_audio=True,
                bitrate_rank=height or position,
            )
        )
    return variants


def video_owner(post: Post) -> Post:
    """The post whose page actually hosts the video (crossposts defer to their origin)."""
    owner = post
    while owner.crosspost_origin is not None and owner.crosspost_origin.post_hint is PostHint.HOSTED_VIDEO:
        owner = owner.crosspost_origin
    return owner


async def fetch_alternate_variants(
    post: Post,
    client: UpstreamClient,
    *,
    timeout: float | None = None,
) -> list[MediaVariant]:
    """Scrape the post's canonical page for its packaged renditions."""
    page_url = canonical_post_url(client.config.base_url, video_owner(post).permalink)
    soup = parse_html(await client.fetch_text(page_url, timeout=timeout))
    raw = element_attribute(soup, PACKAGED_MEDIA_ATTRIBUTE)
    if not raw:
        return []
    return parse_packaged_media(raw)


async def resolve_video(
    post: Post,
    client: UpstreamClient,
    *,
    timeout: float | None = None,
) -> MediaVariant:
    """Resolve the best rendition of a hosted video, fetching the page when nothing has sound.

    A failed or silent alternate fetch is not fatal: the best silent variant
    is accepted. ``NoPlayableVariantError`` only escapes when neither the
    payload nor the page offered any variant.
    """
    candidates = list(post.video_variants)
    if any(variant.has_audio for variant in candidates):
        return resolve_best_variant(candidates)

    alternates: list[MediaVariant] = []
    try:
        alternates = await fetch_alternate_variants(post, client, timeout=timeout)
    except RxEmbedError as exc:
        log.info("alternate renditions for post %s unavailable: %s", post.id, exc)

    if any(variant.has_audio for variant in alternates):
        return resolve_best_variant(alternates)
    return resolve_best_variant(candidates + alternates)
