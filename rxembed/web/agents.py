"""User-agent classification for choosing between embed and redirect responses."""

from __future__ import annotations

# Substrings of the user agents sent by link-preview crawlers
EMBED_CLIENT_MARKERS = (
    "discordbot",
    "twitterbot",
    "telegrambot",
    "slackbot",
    "slack-imgproxy",
    "facebookexternalhit",
    "facebot",
    "whatsapp",
    "skypeuripreview",
    "mastodon",
    "matrix-media-repo",
    "synapse",
    "vkshare",
    "embedly",
    "iframely",
    "linkedinbot",
    "cardyb",
)


def is_embed_client(user_agent: str | None) -> bool:
    """Check whether the request comes from a link-preview crawler rather than a browser."""
    if not user_agent:
        return False
    lowered = user_agent.lower()
    return any(marker in lowered for marker in EMBED_CLIENT_MARKERS)
