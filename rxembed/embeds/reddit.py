"""Embeds for links that point back at another source platform post."""

from __future__ import annotations

from ..link_utils import display_url_for, parse_post_url
from ..models import MetaDirective, Post, meta
from .context import EmbedContext


def crosslink_path(post_id: str, comment_id: str | None = None) -> str:
    if comment_id:
        return f"/comments/{post_id}/_/{comment_id}"
    return f"/comments/{post_id}"


async def crosslink_embed(url: str, post: Post, ctx: EmbedContext) -> list[MetaDirective] | None:
    parsed = parse_post_url(url)
    if parsed is None:
        return None
    post_id, comment_id = parsed
    target = ctx.settings.service.public_url.rstrip("/") + crosslink_path(post_id, comment_id)
    return [
        meta("twitter:card", "summary"),
        meta("og:see_also", target),
        meta("og:description", f"\U0001f517 {display_url_for(url)}"),
    ]
