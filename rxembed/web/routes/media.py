"""Stable media handle routes."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import Response

from ...errors import NotFoundError, UpstreamRateLimitedError, UpstreamTimeoutError
from ...fetcher import UpstreamClient
from ...registry import MediaRegistry

log = logging.getLogger(__name__)

router = APIRouter(tags=["media"])


@router.get("/v/{token}")
async def media_handle(request: Request, token: str) -> Response:
    """Redirect a stable handle to the media URL upstream currently serves."""
    settings = request.app.state.settings
    responses = request.app.state.responses

    try:
        async with UpstreamClient(settings.upstream, transport=request.app.state.transport) as client:
            url = await MediaRegistry(client).resolve(token)
    except NotFoundError:
        return responses.not_found(request)
    except UpstreamRateLimitedError as exc:
        log.warning("rate limited by upstream while resolving media %s: %s", token, exc)
        return responses.rate_limited(request, exc.retry_after)
    except UpstreamTimeoutError:
        return responses.timeout(request)
    except Exception:
        log.exception("failed to resolve media handle %s", token)
        # media handles never answer with a substitute embed
        return responses.server_error(request)

    return responses.media_redirect(url)
