"""Serialization of meta directives into document head tags."""

from __future__ import annotations

from ..models import MetaDirective

# Open Graph names that Twitter-card consumers read under their own name
TWITTER_ALIASES = {
    "og:title": "twitter:title",
    "og:description": "twitter:description",
    "og:image": "twitter:image",
    "og:video": "twitter:player",
    "og:video:width": "twitter:player:width",
    "og:video:height": "twitter:player:height",
}


def expand_directives(directives: list[MetaDirective]) -> list[tuple[str, str]]:
    """Return ``(property, content)`` pairs with Twitter-card duplicates added.

    A duplicate follows its Open Graph original, and is skipped when the
    directives already carry that Twitter name themselves.
    """
    explicit = {directive.property for directive in directives if directive.property.startswith("twitter:")}
    pairs: list[tuple[str, str]] = []
    for directive in directives:
        pairs.append(directive.as_pair())
        alias = TWITTER_ALIASES.get(directive.property)
        if alias and alias not in explicit:
            pairs.append((alias, directive.content))
    return pairs


def attribute_for(prop: str) -> str:
    """Twitter cards are read from ``name=``, Open Graph from ``property=``."""
    return "name" if prop.startswith("twitter:") else "property"
