"""FastAPI application serving embeds and media redirects."""

from __future__ import annotations

import random
from pathlib import Path

import httpx
from fastapi import FastAPI
from fastapi.templating import Jinja2Templates

from .. import __version__
from ..config import load_settings
from ..models import AppConfig
from .response import Clock, ResponseBuilder
from .routes import media, posts

# Template path
TEMPLATES_DIR = Path(__file__).parent / "templates"


def create_app(
    settings: AppConfig | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    rng: random.Random | None = None,
    clock: Clock | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or load_settings()
    app = FastAPI(
        title="rxembed",
        description="Link-preview embeds for source platform posts",
        version=__version__,
    )

    templates = Jinja2Templates(directory=TEMPLATES_DIR)

    # Store shared state for routes to access
    app.state.settings = settings
    app.state.transport = transport
    app.state.responses = ResponseBuilder(templates, settings.service, rng=rng, clock=clock)

    # Media first so /v/<token> is not read as a short post link
    app.include_router(media.router)
    app.include_router(posts.router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
