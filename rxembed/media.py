"""Utilities for formatting post media as embed description text."""

from __future__ import annotations

from .models import Comment, Poll

NO_DATA = "no data"
MAX_COMMENT_CHARS = 350


def truncate(text: str, limit: int) -> str:
    text = text.strip()
    if len(text) <= limit:
        return text
    return text[: limit - 1].rstrip() + "…"


def format_votes(count: int | None) -> str:
    if count is None:
        return NO_DATA
    return f"{count:,} vote" + ("" if count == 1 else "s")


def build_poll_summary(poll: Poll) -> str:
    """Describe each option on its own line.

    Options upstream sent without text or votes show ``no data``; a missing
    count is never rendered as zero.
    """
    lines: list[str] = []
    for option in poll.options:
        text = option.text or NO_DATA
        lines.append(f"• {text}: {format_votes(option.vote_count)}")
    if poll.total_vote_count is not None and any(option.vote_count is not None for option in poll.options):
        lines.append(f"Total: {format_votes(poll.total_vote_count)}")
    return "\n".join(lines)


def build_gallery_caption(shown: int, total: int) -> str:
    return f"Showing {shown} of {total} images"


def build_comment_excerpt(comment: Comment) -> str:
    body = truncate(comment.body, MAX_COMMENT_CHARS) if comment.body else ""
    return f"\U0001f4ac u/{comment.author}: {body}".rstrip()
