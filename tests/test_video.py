"""Tests for hosted video rendition selection."""

import asyncio
import json

import pytest
from conftest import UPSTREAM_HOST, make_listing, make_post_data, make_reddit_video

from rxembed.errors import NoPlayableVariantError
from rxembed.models import MediaVariant, Post, PostHint
from rxembed.normalizer import normalize
from rxembed.video import parse_packaged_media, resolve_best_variant, resolve_video, video_owner

PAGE_PATH = f"{UPSTREAM_HOST}/r/pics/comments/abc123/a_title/"


def _packaged_page(*permutations):
    packaged = json.dumps({"playbackMp4s": {"permutations": list(permutations)}})
    # single-quoted attribute, as embedded JSON keeps its double quotes
    return f"<html><body><shreddit-player packaged-media-json='{packaged}'></shreddit-player></body></html>"


def _permutation(url, height):
    return {"source": {"url": url, "dimensions": {"width": height * 16 // 9, "height": height}}}


def _video_post():
    return normalize(make_listing(make_post_data(post_hint="hosted:video", secure_media=make_reddit_video())))


def test_audio_beats_higher_bitrate():
    silent = MediaVariant(url="https://v/silent", bitrate_rank=9000)
    with_audio = MediaVariant(url="https://v/audio", has_audio=True, bitrate_rank=100)

    assert resolve_best_variant([silent, with_audio]).url == "https://v/audio"


def test_bitrate_then_later_position_breaks_ties():
    low = MediaVariant(url="https://v/low", bitrate_rank=1)
    high = MediaVariant(url="https://v/high", bitrate_rank=5)
    also_high = MediaVariant(url="https://v/also-high", bitrate_rank=5)

    assert resolve_best_variant([low, high]).url == "https://v/high"
    assert resolve_best_variant([high, also_high, low]).url == "https://v/also-high"


def test_empty_candidates_raise():
    with pytest.raises(NoPlayableVariantError):
        resolve_best_variant([])


def test_parse_packaged_media_ignores_garbage():
    assert parse_packaged_media("not json") == []
    assert parse_packaged_media(json.dumps({"playbackMp4s": None})) == []

    variants = parse_packaged_media(
        json.dumps({"playbackMp4s": {"permutations": [{"source": None}, _permutation("https://v/480.mp4", 480)]}})
    )
    assert [(v.url, v.height, v.has_audio) for v in variants] == [("https://v/480.mp4", 480, True)]


def test_video_owner_follows_hosted_video_crossposts():
    origin = Post(id="o", subreddit="s", author_name="a", post_hint=PostHint.HOSTED_VIDEO, permalink="/o/")
    xpost = Post(id="x", subreddit="s", author_name="a", post_hint=PostHint.HOSTED_VIDEO, crosspost_origin=origin)

    assert video_owner(xpost).id == "o"


def test_resolve_video_prefers_packaged_audio_renditions(upstream, client_factory):
    upstream.add(
        PAGE_PATH,
        text=_packaged_page(_permutation("https://v.redd.it/vid/CMAF_480.mp4", 480), _permutation("https://v.redd.it/vid/CMAF_1080.mp4", 1080)),
    )

    async def run():
        async with client_factory() as client:
            return await resolve_video(_video_post(), client)

    variant = asyncio.run(run())

    assert variant.url == "https://v.redd.it/vid/CMAF_1080.mp4"
    assert variant.has_audio


def test_resolve_video_falls_back_to_silent_variant_when_page_fails(upstream, client_factory):
    upstream.add(PAGE_PATH, status=503)

    async def run():
        async with client_factory() as client:
            return await resolve_video(_video_post(), client)

    variant = asyncio.run(run())

    assert variant.url == "https://v.redd.it/vid/DASH_720.mp4"
    assert upstream.called(PAGE_PATH) == 1


def test_resolve_video_falls_back_when_page_has_no_manifest(upstream, client_factory):
    upstream.add(PAGE_PATH, text="<html><body>nothing here</body></html>")

    async def run():
        async with client_factory() as client:
            return await resolve_video(_video_post(), client)

    assert asyncio.run(run()).url == "https://v.redd.it/vid/DASH_720.mp4"


def test_resolve_video_without_any_variant_raises(upstream, client_factory):
    upstream.add(PAGE_PATH, text="<html></html>")
    post = normalize(make_listing(make_post_data(post_hint="hosted:video")))

    async def run():
        async with client_factory() as client:
            return await resolve_video(post, client)

    with pytest.raises(NoPlayableVariantError):
        asyncio.run(run())


@pytest.mark.parametrize("break_route", ["add_redirect_loop", "add_undecodable"])
def test_resolve_video_survives_broken_page_requests(upstream, client_factory, break_route):
    getattr(upstream, break_route)(PAGE_PATH)

    async def run():
        async with client_factory() as client:
            return await resolve_video(_video_post(), client)

    variant = asyncio.run(run())

    assert variant.url == "https://v.redd.it/vid/DASH_720.mp4"
    assert not variant.has_audio
