"""Pydantic models for the rxembed application."""

from __future__ import annotations

from .config import (
    AppConfig,
    EmbedsConfig,
    ServiceConfig,
    UpstreamConfig,
)
from .embed import MetaDirective, image_directives, meta, video_directives
from .media import (
    MediaDescriptor,
    MediaVariant,
    OEmbedHint,
    StableMediaHandle,
)
from .post import (
    Comment,
    Poll,
    PollOption,
    Post,
    PostHint,
)

__all__ = [
    "AppConfig",
    "Comment",
    "EmbedsConfig",
    "MediaDescriptor",
    "MediaVariant",
    "MetaDirective",
    "OEmbedHint",
    "Poll",
    "PollOption",
    "Post",
    "PostHint",
    "ServiceConfig",
    "StableMediaHandle",
    "UpstreamConfig",
    "image_directives",
    "meta",
    "video_directives",
]
