"""Post embed routes."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse, Response

from ...errors import (
    NotFoundError,
    UpstreamRateLimitedError,
    UpstreamSuppressedError,
    UpstreamTimeoutError,
)
from ...fetcher import UpstreamClient
from ...link_utils import is_valid_post_id
from ...pipeline import build_embed
from ..agents import is_embed_client

log = logging.getLogger(__name__)

router = APIRouter(tags=["posts"])


async def serve_post(request: Request, post_id: str, comment_id: str | None = None) -> Response:
    """Answer one post link: a redirect for browsers, an embed for crawlers."""
    settings = request.app.state.settings
    responses = request.app.state.responses

    if not is_embed_client(request.headers.get("user-agent")):
        target = settings.upstream.base_url.rstrip("/") + request.url.path
        return RedirectResponse(target, status_code=307)

    post_id = post_id.lower()
    comment_id = comment_id.lower() if comment_id else None
    if not is_valid_post_id(post_id) or (comment_id and not is_valid_post_id(comment_id)):
        return responses.not_found(request)

    try:
        async with UpstreamClient(settings.upstream, transport=request.app.state.transport) as client:
            embed = await build_embed(client, settings, post_id, comment_id)
    except UpstreamSuppressedError:
        return responses.suppressed(request)
    except UpstreamRateLimitedError as exc:
        log.warning("rate limited by upstream while embedding %s: %s", post_id, exc)
        return responses.rate_limited(request, exc.retry_after)
    except UpstreamTimeoutError as exc:
        log.warning("upstream timed out while embedding %s: %s", post_id, exc)
        return responses.timeout(request)
    except NotFoundError:
        log.info("post %s not found", post_id)
        return responses.not_found(request)
    except Exception:
        log.exception("failed to build embed for %s", post_id)
        return responses.unexpected_error(request)

    return responses.embed(request, embed)


@router.get("/r/{subreddit}/comments/{post_id}")
@router.get("/r/{subreddit}/comments/{post_id}/{slug}")
async def subreddit_post(request: Request, subreddit: str, post_id: str, slug: str | None = None) -> Response:
    return await serve_post(request, post_id)


@router.get("/r/{subreddit}/comments/{post_id}/{slug}/{comment_id}")
async def subreddit_comment(request: Request, subreddit: str, post_id: str, slug: str, comment_id: str) -> Response:
    """Embed a post focused on one of its comments."""
    return await serve_post(request, post_id, comment_id)


@router.get("/comments/{post_id}")
@router.get("/comments/{post_id}/{slug}")
async def bare_post(request: Request, post_id: str, slug: str | None = None) -> Response:
    return await serve_post(request, post_id)


@router.get("/comments/{post_id}/{slug}/{comment_id}")
async def bare_comment(request: Request, post_id: str, slug: str, comment_id: str) -> Response:
    return await serve_post(request, post_id, comment_id)
