"""Pydantic models for normalized posts and comments."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from .media import MediaDescriptor, MediaVariant, OEmbedHint


class PostHint(str, Enum):
    """Discriminator selecting the rendering branch for a post."""

    IMAGE = "image"
    HOSTED_VIDEO = "hosted_video"
    EXTERNAL_LINK = "external_link"
    GALLERY = "gallery"
    POLL = "poll"
    TEXT_ONLY = "text_only"


class PollOption(BaseModel):
    """A poll option. ``None`` fields mean upstream sent no data."""

    text: str | None = None
    vote_count: int | None = None


class Poll(BaseModel):
    options: list[PollOption] = []
    total_vote_count: int | None = None


class Comment(BaseModel):
    """A comment and the replies it owns."""

    id: str
    author: str
    body: str = ""
    children: list[Comment] = []


class Post(BaseModel):
    """Canonical form of one source-platform submission."""

    id: str
    subreddit: str
    title: str = ""
    author_name: str
    post_hint: PostHint = PostHint.TEXT_ONLY
    permalink: str = ""
    description: str = ""
    nsfw: bool = False
    primary_media: MediaDescriptor | None = None
    thumbnail: MediaDescriptor | None = None
    video_variants: list[MediaVariant] = []
    oembed: OEmbedHint | None = None
    external_link: str | None = None
    gallery: list[MediaDescriptor] = []
    poll: Poll | None = None
    comment: Comment | None = None
    crosspost_origin: Post | None = None
