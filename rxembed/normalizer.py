"""Normalization of raw upstream listings into ``Post`` models."""

from __future__ import annotations

import html
import logging
from collections.abc import Iterator
from typing import Any

from .errors import MalformedPayloadError, UnsupportedPostTypeError
from .link_utils import is_image_url
from .models import (
    Comment,
    MediaDescriptor,
    MediaVariant,
    OEmbedHint,
    Poll,
    PollOption,
    Post,
    PostHint,
)

log = logging.getLogger(__name__)

MAX_CROSSPOST_DEPTH = 10
MAX_COMMENT_DEPTH = 100

_UPSTREAM_HINTS = {
    "image": PostHint.IMAGE,
    "hosted:video": PostHint.HOSTED_VIDEO,
    "link": PostHint.EXTERNAL_LINK,
    "rich:video": PostHint.EXTERNAL_LINK,
    "self": PostHint.TEXT_ONLY,
}
_MEDIA_HINTS = {PostHint.IMAGE, PostHint.HOSTED_VIDEO, PostHint.GALLERY}


def _coerce_str(value: Any) -> str | None:
    if isinstance(value, str):
        s = value.strip()
        return s if s else None
    return None


def _coerce_id(value: Any) -> str | None:
    if isinstance(value, str):
        v = value.strip()
        return v if v else None
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return None


def _coerce_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _unescape(value: str | None) -> str:
    return html.unescape(value) if value else ""


def hint_from_upstream(value: str) -> PostHint:
    """Map upstream's ``post_hint`` onto a rendering branch."""
    hint = _UPSTREAM_HINTS.get(value)
    if hint is None:
        raise UnsupportedPostTypeError(f"unsupported post hint {value!r}")
    return hint


def _split_payload(raw: Any) -> tuple[dict[str, Any], list[Any]]:
    """Return ``(post data, comment things)`` for the payload shapes upstream serves."""
    if isinstance(raw, list):
        if not raw:
            raise MalformedPayloadError("empty listing payload")
        post_data, _ = _split_payload(raw[0])
        comments: list[Any] = []
        if len(raw) > 1:
            comments = _as_dict(_as_dict(raw[1]).get("data")).get("children") or []
        return post_data, comments if isinstance(comments, list) else []

    if not isinstance(raw, dict):
        raise MalformedPayloadError(f"unexpected payload type {type(raw).__name__}")

    kind = raw.get("kind")
    if kind == "Listing":
        children = _as_dict(raw.get("data")).get("children")
        if not isinstance(children, list) or not children:
            raise MalformedPayloadError("post listing has no children")
        return _split_payload(children[0])
    if kind == "t3":
        return _as_dict(raw.get("data")), []
    return raw, []


def _reddit_video_blocks(data: dict[str, Any]) -> Iterator[dict[str, Any]]:
    # secure_media and media describe the same video; prefer the https one
    for key in ("secure_media", "media"):
        video = _as_dict(data.get(key)).get("reddit_video")
        if isinstance(video, dict):
            yield video
            break
    preview_video = _as_dict(data.get("preview")).get("reddit_video_preview")
    if isinstance(preview_video, dict):
        yield preview_video


def _extract_video_variants(data: dict[str, Any]) -> list[MediaVariant]:
    variants: list[MediaVariant] = []
    seen: set[str] = set()
    for video in _reddit_video_blocks(data):
        url = _coerce_str(video.get("fallback_url"))
        if not url:
            continue
        if url in seen:
            continue
        seen.add(url)
        height = _coerce_int(video.get("height"))
        variants.append(
            MediaVariant(
                url=url,
                width=_coerce_int(video.get("width")),
                height=height,
                # fallback_url is a video-only DASH rendition even when the post has sound
                has_audio=False,
                bitrate_rank=_coerce_int(video.get("bitrate_kbps")) or height or 0,
            )
        )
    return variants


def _extract_preview(data: dict[str, Any]) -> MediaDescriptor | None:
    images = _as_dict(data.get("preview")).get("images")
    if not isinstance(images, list) or not images:
        return None
    source = _as_dict(_as_dict(images[0]).get("source"))
    source_url = _coerce_str(source.get("url"))
    if not source_url:
        return None
    return MediaDescriptor(
        url=source_url,
        width=_coerce_int(source.get("width")),
        height=_coerce_int(source.get("height")),
    )


def _extract_image(url: str | None, preview: MediaDescriptor | None) -> MediaDescriptor | None:
    """The image of an image post: the original file when linked directly, else the preview."""
    if url and is_image_url(url):
        return MediaDescriptor(
            url=url,
            width=preview.width if preview else None,
            height=preview.height if preview else None,
        )
    return preview


def _gallery_entries(data: dict[str, Any]) -> Iterator[dict[str, Any]]:
    metadata = _as_dict(data.get("media_metadata"))
    items = _as_dict(data.get("gallery_data")).get("items")
    if isinstance(items, list):
        for item in items:
            media_id = _as_dict(item).get("media_id")
            if media_id in metadata:
                yield _as_dict(metadata[media_id])
    elif data.get("is_gallery"):
        for entry in metadata.values():
            yield _as_dict(entry)


def _extract_gallery(data: dict[str, Any]) -> list[MediaDescriptor]:
    if not (data.get("is_gallery") or data.get("gallery_data")):
        return []
    gallery: list[MediaDescriptor] = []
    for entry in _gallery_entries(data):
        # failed/unprocessed uploads have no usable source
        if entry.get("status", "valid") != "valid":
            continue
        source = _as_dict(entry.get("s"))
        url = _coerce_str(source.get("u")) or _coerce_str(source.get("gif")) or _coerce_str(source.get("mp4"))
        if not url:
            continue
        gallery.append(
            MediaDescriptor(
                url=url,
                width=_coerce_int(source.get("x")),
                height=_coerce_int(source.get("y")),
                mime_type=_coerce_str(entry.get("m")),
            )
        )
    return gallery


def _extract_poll(data: dict[str, Any]) -> Poll | None:
    poll_data = data.get("poll_data")
    if not isinstance(poll_data, dict):
        return None
    options: list[PollOption] = []
    for option in poll_data.get("options") or []:
        if not isinstance(option, dict):
            continue
        text = _coerce_str(option.get("text"))
        options.append(
            PollOption(
                text=html.unescape(text) if text else None,
                vote_count=_coerce_int(option.get("vote_count")),
            )
        )
    return Poll(options=options, total_vote_count=_coerce_int(poll_data.get("total_vote_count")))


def _extract_oembed(data: dict[str, Any]) -> OEmbedHint | None:
    for key in ("secure_media", "media"):
        oembed = _as_dict(data.get(key)).get("oembed")
        if isinstance(oembed, dict):
            thumbnail = _coerce_str(oembed.get("thumbnail_url"))
            return OEmbedHint(
                width=_coerce_int(oembed.get("width")),
                height=_coerce_int(oembed.get("height")),
                thumbnail_url=thumbnail,
            )
    return None


def _infer_hint(
    data: dict[str, Any],
    *,
    variants: list[MediaVariant],
    url: str | None,
) -> PostHint:
    if variants or data.get("is_video"):
        return PostHint.HOSTED_VIDEO
    if url and is_image_url(url):
        return PostHint.IMAGE
    if url and not data.get("is_self"):
        return PostHint.EXTERNAL_LINK
    return PostHint.TEXT_ONLY


def _determine_hint(
    data: dict[str, Any],
    *,
    gallery: list[MediaDescriptor],
    poll: Poll | None,
    variants: list[MediaVariant],
    url: str | None,
) -> PostHint:
    # upstream has no post_hint value for galleries and polls; their payload blocks are the marker
    if gallery:
        return PostHint.GALLERY
    if poll is not None:
        return PostHint.POLL
    raw_hint = _coerce_str(data.get("post_hint"))
    if raw_hint:
        try:
            return hint_from_upstream(raw_hint)
        except UnsupportedPostTypeError as exc:
            log.debug("%s; inferring from payload", exc)
    return _infer_hint(data, variants=variants, url=url)


def _inherit_crosspost_media(post: Post, origin: Post) -> None:
    """Fill a media-less crosspost with its origin's media fields."""
    if post.primary_media or post.video_variants or post.gallery:
        return
    post.primary_media = origin.primary_media
    post.video_variants = list(origin.video_variants)
    post.gallery = list(origin.gallery)
    if post.thumbnail is None:
        post.thumbnail = origin.thumbnail
    if origin.post_hint in _MEDIA_HINTS:
        post.post_hint = origin.post_hint


def _normalize_post_data(data: Any, depth: int) -> Post:
    if depth > MAX_CROSSPOST_DEPTH:
        raise MalformedPayloadError(f"crosspost chain deeper than {MAX_CROSSPOST_DEPTH}")
    if not isinstance(data, dict):
        raise MalformedPayloadError("post data is not an object")

    post_id = _coerce_id(data.get("id"))
    subreddit = _coerce_str(data.get("subreddit"))
    author = _coerce_str(data.get("author"))
    missing = [name for name, value in (("id", post_id), ("subreddit", subreddit), ("author", author)) if not value]
    if missing:
        raise MalformedPayloadError(f"post payload missing {', '.join(missing)}")

    # raw_json=1 URLs are used verbatim
    url = _coerce_str(data.get("url_overridden_by_dest")) or _coerce_str(data.get("url"))

    gallery = _extract_gallery(data)
    poll = None if gallery else _extract_poll(data)
    variants = _extract_video_variants(data)
    preview = _extract_preview(data)
    hint = _determine_hint(data, gallery=gallery, poll=poll, variants=variants, url=url)
    primary = _extract_image(url, preview) if hint is PostHint.IMAGE else None

    post = Post(
        id=post_id,
        subreddit=subreddit,
        title=_unescape(_coerce_str(data.get("title"))),
        author_name=author,
        post_hint=hint,
        permalink=_coerce_str(data.get("permalink")) or f"/comments/{post_id}/",
        description=_unescape(_coerce_str(data.get("selftext"))),
        nsfw=bool(data.get("over_18")),
        primary_media=primary,
        thumbnail=preview,
        video_variants=variants,
        oembed=_extract_oembed(data),
        external_link=url if hint is PostHint.EXTERNAL_LINK else None,
        gallery=gallery,
        poll=poll,
    )

    parents = data.get("crosspost_parent_list")
    if isinstance(parents, list) and parents:
        origin = _normalize_post_data(parents[0], depth + 1)
        post.crosspost_origin = origin
        post.nsfw = post.nsfw or origin.nsfw
        _inherit_crosspost_media(post, origin)

    return post


def build_comment_tree(things: list[Any], depth: int = 0) -> list[Comment]:
    """Convert an upstream comment listing into owned ``Comment`` nodes."""
    if depth > MAX_COMMENT_DEPTH:
        raise MalformedPayloadError(f"comment tree deeper than {MAX_COMMENT_DEPTH}")
    comments: list[Comment] = []
    for thing in things:
        # "more" stubs only point at comments that were not inlined
        if not isinstance(thing, dict) or thing.get("kind") != "t1":
            continue
        data = _as_dict(thing.get("data"))
        comment_id = _coerce_id(data.get("id"))
        if not comment_id:
            continue
        replies = _as_dict(_as_dict(data.get("replies")).get("data")).get("children")
        comments.append(
            Comment(
                id=comment_id,
                author=_coerce_str(data.get("author")) or "[deleted]",
                body=_unescape(_coerce_str(data.get("body"))),
                children=build_comment_tree(replies if isinstance(replies, list) else [], depth + 1),
            )
        )
    return comments


def find_comment(comments: list[Comment], comment_id: str) -> Comment | None:
    """Depth-first search for ``comment_id``."""
    stack = list(reversed(comments))
    while stack:
        comment = stack.pop()
        if comment.id == comment_id:
            return comment
        stack.extend(reversed(comment.children))
    return None


def normalize(raw_payload: Any, comment_id: str | None = None) -> Post:
    """Build a ``Post`` from a raw upstream payload.

    Accepts the ``[post listing, comment listing]`` pair served for a post
    page, a single ``t3`` thing, or bare post data. When ``comment_id`` is
    given the inline comment tree is searched for it; a missing comment is
    not an error.
    """
    post_data, comment_things = _split_payload(raw_payload)
    post = _normalize_post_data(post_data, depth=0)

    if comment_id:
        wanted = comment_id.removeprefix("t1_")
        post.comment = find_comment(build_comment_tree(comment_things), wanted)

    return post
