"""Pydantic models for rxembed configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field

# Twitch refuses to render a clip unless every frame ancestor is listed
DEFAULT_TWITCH_ANCESTORS = [
    "twitter.com",
    "x.com",
    "cards-frame.twitter.com",
    "tweetdeck.twitter.com",
    "discordapp.com",
    "discord.com",
    "ptb.discordapp.com",
    "ptb.discord.com",
    "canary.discordapp.com",
    "canary.discord.com",
    "embedly.com",
    "cdn.embedly.com",
    "facebook.com",
    "www.facebook.com",
    "meta.com",
    "www.meta.com",
    "vk.com",
]


class UpstreamConfig(BaseModel):
    """Source platform access configuration."""

    base_url: str = "https://www.reddit.com"
    user_agent: str = "rxembed/1.0 (+https://github.com/rxembed/rxembed)"
    post_timeout_seconds: float = 2.0
    media_timeout_seconds: float = 5.0
    enrichment_timeout_seconds: float = 3.0


class ServiceConfig(BaseModel):
    """Public service and response policy configuration."""

    public_url: str = "http://localhost:8000"
    site_name: str = "rxembed"
    cache_max_age: int = 3600
    media_redirect_max_age: int = 60
    error_max_age: int = 60
    error_embed_ratio: float = Field(default=0.1, ge=0.0, le=1.0)


class EmbedsConfig(BaseModel):
    """Embed rendering configuration."""

    # link previews show at most four images
    gallery_limit: int = Field(default=4, ge=1, le=4)
    default_width: int = 1280
    default_height: int = 720
    min_oembed_dimension: int = 500
    show_nsfw_media: bool = False
    stream_api_url: str = "https://koutube.com/api/watch"
    twitch_ancestors: list[str] = Field(default_factory=lambda: list(DEFAULT_TWITCH_ANCESTORS))


class AppConfig(BaseModel):
    """Root configuration."""

    upstream: UpstreamConfig = UpstreamConfig()
    service: ServiceConfig = ServiceConfig()
    embeds: EmbedsConfig = EmbedsConfig()
