"""Shared pytest fixtures for rxembed tests."""

import sys
from pathlib import Path

import httpx
import pytest

# Add the package to the path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from rxembed.fetcher import UpstreamClient  # noqa: E402
from rxembed.models import AppConfig, EmbedsConfig, ServiceConfig, UpstreamConfig  # noqa: E402

UPSTREAM_HOST = "reddit.test"
PUBLIC_URL = "https://rx.test"


class FakeUpstream:
    """Routes requests by ``host + path`` to canned responses and records every call."""

    def __init__(self):
        self.routes = {}
        self.calls: list[httpx.Request] = []

    def add(self, host_path, status=200, *, json=None, text=None, headers=None):
        def respond(request):
            if json is not None:
                return httpx.Response(status, json=json, headers=headers)
            return httpx.Response(status, text=text or "", headers=headers)

        self.routes[host_path] = respond

    def add_handler(self, host_path, handler):
        self.routes[host_path] = handler

    def add_redirect_loop(self, host_path):
        """Answer ``host_path`` with a redirect back to itself."""
        self.add(host_path, 302, headers={"Location": f"https://{host_path}"})

    def add_undecodable(self, host_path):
        """Answer ``host_path`` with a body that claims gzip encoding but is not."""

        def respond(request):
            return httpx.Response(200, headers={"Content-Encoding": "gzip"}, content=b"definitely not gzip")

        self.routes[host_path] = respond

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        handler = self.routes.get(f"{request.url.host}{request.url.path}")
        if handler is None:
            return httpx.Response(404, text="not found")
        return handler(request)

    def called(self, host_path) -> int:
        return sum(1 for request in self.calls if f"{request.url.host}{request.url.path}" == host_path)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


def make_post_data(**overrides):
    data = {
        "id": "abc123",
        "subreddit": "pics",
        "author": "someone",
        "title": "A title",
        "permalink": "/r/pics/comments/abc123/a_title/",
        "selftext": "",
        "score": 42,
        "num_comments": 3,
        "over_18": False,
    }
    data.update(overrides)
    return data


def make_listing(post_data, comments=None):
    """The ``[post listing, comment listing]`` pair served for a post page."""
    return [
        {"kind": "Listing", "data": {"children": [{"kind": "t3", "data": post_data}]}},
        {"kind": "Listing", "data": {"children": comments or []}},
    ]


def make_comment(comment_id, body, author="commenter", replies=None):
    return {
        "kind": "t1",
        "data": {
            "id": comment_id,
            "author": author,
            "body": body,
            "replies": {"kind": "Listing", "data": {"children": replies or []}} if replies else "",
        },
    }


def make_reddit_video(url="https://v.redd.it/vid/DASH_720.mp4", width=1280, height=720, bitrate=4800):
    return {"reddit_video": {"fallback_url": url, "width": width, "height": height, "bitrate_kbps": bitrate}}


@pytest.fixture
def settings():
    return AppConfig(
        upstream=UpstreamConfig(base_url=f"https://{UPSTREAM_HOST}"),
        service=ServiceConfig(public_url=PUBLIC_URL),
        embeds=EmbedsConfig(),
    )


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def client_factory(settings, upstream):
    def factory():
        return UpstreamClient(settings.upstream, transport=upstream.transport)

    return factory


@pytest.fixture
def isolated_config(monkeypatch, tmp_path):
    """Point XDG config at an empty temp dir and clear env overrides."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    monkeypatch.delenv("RXEMBED_PUBLIC_URL", raising=False)
    monkeypatch.delenv("RXEMBED_UPSTREAM_URL", raising=False)
    return tmp_path
