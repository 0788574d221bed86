"""rxembed - Rich link previews for Reddit posts."""

try:
    from importlib.metadata import version

    __version__ = version("rxembed")
except Exception:
    __version__ = "0.0.0-dev"
