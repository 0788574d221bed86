"""HTML scraping helpers for enrichment fetches."""

from __future__ import annotations

from typing import TYPE_CHECKING

from bs4 import BeautifulSoup

if TYPE_CHECKING:
    from .client import UpstreamClient


def parse_html(text: str) -> BeautifulSoup:
    return BeautifulSoup(text, "html.parser")


def meta_content(soup: BeautifulSoup, name: str) -> str | None:
    """Return the ``content`` of the meta tag whose name or property is exactly ``name``."""
    tag = soup.find("meta", attrs={"name": name}) or soup.find("meta", attrs={"property": name})
    if tag is None:
        return None
    content = (tag.get("content") or "").strip()
    return content or None


def element_attribute(soup: BeautifulSoup, attribute: str) -> str | None:
    """Return the value of ``attribute`` on the first element that carries it."""
    tag = soup.find(attrs={attribute: True})
    if tag is None:
        return None
    value = tag.get(attribute)
    if isinstance(value, list):
        value = " ".join(value)
    return value or None


async def scrape_meta(
    client: UpstreamClient,
    url: str,
    names: list[str],
    *,
    timeout: float | None = None,
) -> dict[str, str | None]:
    """Fetch ``url`` and extract the named meta tags. Missing tags map to ``None``."""
    soup = parse_html(await client.fetch_text(url, timeout=timeout))
    return {name: meta_content(soup, name) for name in names}
