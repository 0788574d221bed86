"""Utilities for parsing and classifying links found in posts."""

from __future__ import annotations

import html
import re
from urllib.parse import urlsplit

_TRAILING_PUNCT_RE = re.compile(r"[)\],.?!:;]+$")
_POST_URL_RE = re.compile(
    r"^/(?:r/[A-Za-z0-9_]+/)?comments/([a-z0-9]+)(?:/[^/]*(?:/([a-z0-9]+))?)?",
    re.IGNORECASE,
)
_SHORT_POST_RE = re.compile(r"^/([a-z0-9]+)/?$", re.IGNORECASE)
_POST_ID_RE = re.compile(r"^[a-z0-9]{1,16}$")
_IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp")

REDDIT_HOSTS = {
    "reddit.com",
    "www.reddit.com",
    "old.reddit.com",
    "new.reddit.com",
    "np.reddit.com",
}
SHORT_LINK_HOSTS = {"redd.it"}


def clean_url_candidate(url: str) -> str:
    """Trim whitespace, HTML entities and trailing punctuation from a URL."""
    cleaned = html.unescape(url.strip())
    cleaned = _TRAILING_PUNCT_RE.sub("", cleaned)
    return cleaned


def normalize_hostname(url: str | None) -> str:
    """Return the lower-cased hostname of ``url`` without port, or ``""``."""
    if not url:
        return ""
    try:
        return (urlsplit(url).hostname or "").lower()
    except ValueError:
        return ""


def display_url_for(url: str) -> str:
    try:
        parsed = urlsplit(url)
    except ValueError:
        return url
    host = (parsed.netloc or "").lower()
    path = parsed.path or ""
    query = f"?{parsed.query}" if parsed.query else ""
    if not host:
        return url
    return f"{host}{path}{query}"


def is_image_url(url: str | None) -> bool:
    """Check whether ``url`` points directly at an image file."""
    if not url:
        return False
    try:
        path = urlsplit(url).path.lower()
    except ValueError:
        return False
    return path.endswith(_IMAGE_EXTENSIONS)


def is_valid_post_id(value: str | None) -> bool:
    return bool(value) and bool(_POST_ID_RE.match(value.lower()))


def parse_post_url(url: str | None) -> tuple[str, str | None] | None:
    """Extract ``(post_id, comment_id)`` from a source platform URL."""
    if not url:
        return None
    try:
        parsed = urlsplit(url)
    except ValueError:
        return None
    host = (parsed.hostname or "").lower()
    path = parsed.path or ""

    if host in SHORT_LINK_HOSTS:
        match = _SHORT_POST_RE.match(path)
        return (match.group(1).lower(), None) if match else None

    if host not in REDDIT_HOSTS:
        return None
    match = _POST_URL_RE.match(path)
    if not match:
        return None
    comment_id = match.group(2).lower() if match.group(2) else None
    return match.group(1).lower(), comment_id


def post_json_path(post_id: str, comment_id: str | None = None) -> str:
    """Path of the JSON listing for a post, optionally focused on one comment."""
    if comment_id:
        return f"/comments/{post_id}/_/{comment_id}.json"
    return f"/comments/{post_id}.json"


def canonical_post_url(base_url: str, permalink: str) -> str:
    """Join the source platform base URL with a post permalink."""
    if permalink.startswith(("http://", "https://")):
        return permalink
    return base_url.rstrip("/") + "/" + permalink.lstrip("/")
