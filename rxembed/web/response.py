"""HTTP responses for embeds, failures and media redirects."""

from __future__ import annotations

import random
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from email.utils import format_datetime

from fastapi import Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from ..models import MetaDirective, ServiceConfig, meta
from ..pipeline import CompiledEmbed
from .render import attribute_for, expand_directives

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ErrorEmbedPolicy:
    """Decides how an unexpected failure is answered.

    Chat clients and intermediate caches keep whatever they fetched first, so
    a failure that is always answered with an error page can outlive the
    failure itself. A fraction ``ratio`` of failures is answered with a
    minimal but valid embed instead.
    """

    def __init__(self, ratio: float, rng: random.Random) -> None:
        self.ratio = ratio
        self.rng = rng

    def serve_embed(self) -> bool:
        return self.rng.random() < self.ratio


class ResponseBuilder:
    def __init__(
        self,
        templates: Jinja2Templates,
        service: ServiceConfig,
        *,
        rng: random.Random | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.templates = templates
        self.service = service
        self.policy = ErrorEmbedPolicy(service.error_embed_ratio, rng or random.Random())
        self.clock = clock or utc_now

    def cache_headers(self, max_age: int) -> dict[str, str]:
        expires = self.clock() + timedelta(seconds=max_age)
        return {
            "Cache-Control": f"public, max-age={max_age}",
            "Expires": format_datetime(expires.astimezone(timezone.utc), usegmt=True),
        }

    def _page(
        self,
        request: Request,
        directives: list[MetaDirective],
        *,
        title: str | None,
        status_code: int,
        max_age: int,
        message: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> HTMLResponse:
        tags = [(attribute_for(prop), prop, content) for prop, content in expand_directives(directives)]
        return self.templates.TemplateResponse(
            request,
            "embed.html",
            {"title": title, "tags": tags, "message": message},
            status_code=status_code,
            headers={**self.cache_headers(max_age), **(headers or {})},
        )

    def embed(self, request: Request, embed: CompiledEmbed) -> HTMLResponse:
        return self._page(
            request,
            embed.directives,
            title=embed.post.title,
            status_code=200,
            max_age=self.service.cache_max_age,
        )

    def suppressed(self, request: Request) -> HTMLResponse:
        """Upstream refused the post; answer successfully with nothing in it."""
        return self._page(request, [], title=None, status_code=200, max_age=self.service.error_max_age)

    def rate_limited(self, request: Request, retry_after: int | None = None) -> HTMLResponse:
        headers = {"Retry-After": str(retry_after)} if retry_after else None
        return self._page(
            request,
            [],
            title="Rate limited",
            status_code=429,
            max_age=self.service.error_max_age,
            message="The source platform is rate limiting requests. Try again shortly.",
            headers=headers,
        )

    def timeout(self, request: Request) -> HTMLResponse:
        return self._page(
            request,
            [],
            title="Timed out",
            status_code=504,
            max_age=self.service.error_max_age,
            message="The source platform took too long to answer.",
        )

    def not_found(self, request: Request) -> HTMLResponse:
        return self._page(
            request,
            [],
            title="Not found",
            status_code=404,
            max_age=self.service.error_max_age,
            message="This post could not be found.",
        )

    def server_error(self, request: Request) -> HTMLResponse:
        return self._page(
            request,
            [],
            title="Error",
            status_code=500,
            max_age=self.service.error_max_age,
            message="Something went wrong while answering this request.",
        )

    def unexpected_error(self, request: Request) -> HTMLResponse:
        """Answer an unexpected post failure, sometimes with a minimal embed."""
        if self.policy.serve_embed():
            directives = [
                meta("og:site_name", self.service.site_name),
                meta("og:title", "Reddit post"),
                meta("twitter:card", "summary"),
            ]
            return self._page(
                request,
                directives,
                title="Reddit post",
                status_code=200,
                max_age=self.service.error_max_age,
            )
        return self.server_error(request)

    def media_redirect(self, url: str) -> RedirectResponse:
        return RedirectResponse(url, status_code=302, headers=self.cache_headers(self.service.media_redirect_max_age))
