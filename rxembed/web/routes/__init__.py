"""Route modules for the rxembed web service."""

from . import media, posts

__all__ = ["media", "posts"]
