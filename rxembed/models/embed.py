"""Pydantic models for compiled embeds."""

from __future__ import annotations

from pydantic import BaseModel


class MetaDirective(BaseModel):
    """One property/value pair destined for document-head metadata."""

    property: str
    content: str

    def as_pair(self) -> tuple[str, str]:
        return (self.property, self.content)


def meta(prop: str, content: str | int) -> MetaDirective:
    return MetaDirective(property=prop, content=str(content))


def image_directives(url: str, width: int | None = None, height: int | None = None) -> list[MetaDirective]:
    """Directives for a single ``og:image`` with optional dimensions."""
    directives = [meta("og:image", url)]
    if width and height:
        directives.append(meta("og:image:width", width))
        directives.append(meta("og:image:height", height))
    return directives


def video_directives(url: str, width: int | None, height: int | None, mime_type: str) -> list[MetaDirective]:
    """Directives for a single ``og:video`` with type and optional dimensions."""
    directives = [
        meta("og:video", url),
        meta("og:video:secure_url", url),
        meta("og:video:type", mime_type),
    ]
    if width and height:
        directives.append(meta("og:video:width", width))
        directives.append(meta("og:video:height", height))
    return directives
