"""Pydantic models for post media."""

from __future__ import annotations

from pydantic import BaseModel


class MediaDescriptor(BaseModel):
    """A resolved piece of media ready to be published."""

    url: str
    width: int | None = None
    height: int | None = None
    mime_type: str | None = None


class OEmbedHint(BaseModel):
    """Size/thumbnail hints from the upstream oEmbed block."""

    width: int | None = None
    height: int | None = None
    thumbnail_url: str | None = None


class MediaVariant(BaseModel):
    """One candidate encoding of a hosted video."""

    url: str
    width: int | None = None
    height: int | None = None
    has_audio: bool = False
    bitrate_rank: int = 0


class StableMediaHandle(BaseModel):
    """Opaque, long-lived identifier that redirects to live upstream media."""

    token: str
    post_id: str
    media_ref: str

    @property
    def path(self) -> str:
        return f"/v/{self.token}"
