"""Upstream collaborators: post fetches, page scrapes and JSON APIs."""

from .client import UpstreamClient, raise_for_upstream_status
from .scrape import element_attribute, meta_content, parse_html, scrape_meta

__all__ = [
    "UpstreamClient",
    "element_attribute",
    "meta_content",
    "parse_html",
    "raise_for_upstream_status",
    "scrape_meta",
]
