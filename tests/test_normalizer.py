"""Tests for turning raw upstream listings into posts."""

import pytest
from conftest import make_comment, make_listing, make_post_data, make_reddit_video

from rxembed.errors import MalformedPayloadError, UnsupportedPostTypeError
from rxembed.models import PostHint
from rxembed.normalizer import MAX_CROSSPOST_DEPTH, build_comment_tree, find_comment, hint_from_upstream, normalize


@pytest.mark.parametrize("field", ["id", "subreddit", "author"])
def test_missing_required_field_is_malformed(field):
    data = make_post_data()
    del data[field]

    with pytest.raises(MalformedPayloadError):
        normalize(make_listing(data))


def test_blank_author_is_malformed():
    with pytest.raises(MalformedPayloadError):
        normalize(make_listing(make_post_data(author="  ")))


@pytest.mark.parametrize("payload", [[], "text", 12, {"kind": "Listing", "data": {"children": []}}])
def test_unusable_payload_shapes_are_malformed(payload):
    with pytest.raises(MalformedPayloadError):
        normalize(payload)


def test_accepts_listing_pair_single_thing_and_bare_data():
    data = make_post_data()
    for payload in (make_listing(data), {"kind": "t3", "data": data}, data):
        post = normalize(payload)
        assert post.id == "abc123"
        assert post.subreddit == "pics"
        assert post.author_name == "someone"


def test_text_fields_are_unescaped():
    post = normalize(make_listing(make_post_data(title="Cats &amp; dogs", selftext="a &lt; b", is_self=True)))

    assert post.title == "Cats & dogs"
    assert post.description == "a < b"
    assert post.post_hint is PostHint.TEXT_ONLY


def test_upstream_hint_mapping():
    assert hint_from_upstream("image") is PostHint.IMAGE
    assert hint_from_upstream("hosted:video") is PostHint.HOSTED_VIDEO
    assert hint_from_upstream("link") is PostHint.EXTERNAL_LINK
    assert hint_from_upstream("rich:video") is PostHint.EXTERNAL_LINK
    assert hint_from_upstream("self") is PostHint.TEXT_ONLY
    with pytest.raises(UnsupportedPostTypeError):
        hint_from_upstream("hologram")


def test_unknown_hint_falls_back_to_inference():
    post = normalize(make_listing(make_post_data(post_hint="hologram", url="https://i.redd.it/x1.png")))

    assert post.post_hint is PostHint.IMAGE
    assert post.primary_media.url == "https://i.redd.it/x1.png"


def test_image_post_uses_direct_url_with_preview_dimensions():
    data = make_post_data(
        post_hint="image",
        url="https://i.redd.it/pic.jpg",
        preview={"images": [{"source": {"url": "https://preview.redd.it/pic.jpg?s=1&w=2", "width": 800, "height": 600}}]},
    )

    post = normalize(make_listing(data))

    assert post.primary_media.url == "https://i.redd.it/pic.jpg"
    assert (post.primary_media.width, post.primary_media.height) == (800, 600)
    assert post.thumbnail.url == "https://preview.redd.it/pic.jpg?s=1&w=2"


def test_hosted_video_variants_are_silent_and_ranked_by_bitrate():
    data = make_post_data(
        post_hint="hosted:video",
        secure_media=make_reddit_video(bitrate=2400),
        preview={"reddit_video_preview": {"fallback_url": "https://v.redd.it/vid/DASH_480.mp4", "height": 480}},
    )

    post = normalize(make_listing(data))

    assert post.post_hint is PostHint.HOSTED_VIDEO
    assert [v.url for v in post.video_variants] == [
        "https://v.redd.it/vid/DASH_720.mp4",
        "https://v.redd.it/vid/DASH_480.mp4",
    ]
    assert [v.bitrate_rank for v in post.video_variants] == [2400, 480]
    assert not any(v.has_audio for v in post.video_variants)
    assert post.primary_media is None


def test_external_link_post_keeps_link_and_oembed():
    data = make_post_data(
        post_hint="rich:video",
        url="https://clips.twitch.tv/AbcXyz123",
        secure_media={"oembed": {"width": 600, "height": 340, "thumbnail_url": "https://t.example/a.jpg"}},
    )

    post = normalize(make_listing(data))

    assert post.post_hint is PostHint.EXTERNAL_LINK
    assert post.external_link == "https://clips.twitch.tv/AbcXyz123"
    assert post.oembed.width == 600
    assert post.oembed.thumbnail_url == "https://t.example/a.jpg"


@pytest.mark.parametrize(
    "url",
    [
        "https://en.wikipedia.org/wiki/Foo_(bar)",
        "https://example.com/ends-with-dot.",
        "https://example.com/search?q=a&amp;b",
    ],
)
def test_external_link_is_kept_verbatim(url):
    post = normalize(make_listing(make_post_data(post_hint="link", url=f"  {url} ")))

    assert post.external_link == url


def test_gallery_follows_item_order_and_skips_failed_media():
    data = make_post_data(
        is_gallery=True,
        gallery_data={"items": [{"media_id": "m2"}, {"media_id": "m1"}, {"media_id": "m3"}, {"media_id": "gone"}]},
        media_metadata={
            "m1": {"status": "valid", "m": "image/png", "s": {"u": "https://preview.redd.it/m1.png?a=1&b=2", "x": 10, "y": 20}},
            "m2": {"status": "valid", "m": "image/jpg", "s": {"u": "https://preview.redd.it/m2.jpg", "x": 30, "y": 40}},
            "m3": {"status": "failed"},
        },
    )

    post = normalize(make_listing(data))

    assert post.post_hint is PostHint.GALLERY
    assert [item.url for item in post.gallery] == [
        "https://preview.redd.it/m2.jpg",
        "https://preview.redd.it/m1.png?a=1&b=2",
    ]
    assert post.gallery[0].mime_type == "image/jpg"


def test_poll_keeps_missing_counts_as_none():
    data = make_post_data(
        is_self=True,
        poll_data={
            "total_vote_count": None,
            "options": [{"id": "1", "text": "Yes"}, {"id": "2", "text": "No", "vote_count": 7}, {"id": "3"}],
        },
    )

    post = normalize(make_listing(data))

    assert post.post_hint is PostHint.POLL
    assert [(o.text, o.vote_count) for o in post.poll.options] == [("Yes", None), ("No", 7), (None, None)]
    assert post.poll.total_vote_count is None


def test_crosspost_inherits_origin_media():
    origin = make_post_data(id="orig1", subreddit="videos", post_hint="hosted:video", secure_media=make_reddit_video())
    data = make_post_data(id="xpost1", post_hint="link", url="/r/videos/comments/orig1/", crosspost_parent_list=[origin])

    post = normalize(make_listing(data))

    assert post.crosspost_origin.id == "orig1"
    assert post.post_hint is PostHint.HOSTED_VIDEO
    assert post.video_variants == post.crosspost_origin.video_variants
    assert post.id == "xpost1"


def test_crosspost_of_nsfw_origin_is_nsfw():
    origin = make_post_data(id="orig1", post_hint="image", url="https://i.redd.it/origin.png", over_18=True)
    data = make_post_data(id="xpost1", post_hint="link", url="/r/pics/comments/orig1/", crosspost_parent_list=[origin])

    post = normalize(make_listing(data))

    assert post.nsfw
    assert not normalize(make_listing(make_post_data(is_self=True))).nsfw


def test_crosspost_keeps_its_own_media():
    origin = make_post_data(id="orig1", post_hint="image", url="https://i.redd.it/origin.png")
    data = make_post_data(id="xpost1", post_hint="image", url="https://i.redd.it/own.png", crosspost_parent_list=[origin])

    post = normalize(make_listing(data))

    assert post.primary_media.url == "https://i.redd.it/own.png"


def test_crosspost_chain_beyond_ceiling_is_malformed():
    data = make_post_data(id="p0")
    for depth in range(1, MAX_CROSSPOST_DEPTH + 2):
        data = make_post_data(id=f"p{depth}", crosspost_parent_list=[data])

    with pytest.raises(MalformedPayloadError):
        normalize(data)


def test_crosspost_chain_at_ceiling_is_accepted():
    data = make_post_data(id="p0")
    for depth in range(1, MAX_CROSSPOST_DEPTH + 1):
        data = make_post_data(id=f"p{depth}", crosspost_parent_list=[data])

    post = normalize(data)

    assert post.id == f"p{MAX_CROSSPOST_DEPTH}"


def test_focused_comment_is_found_depth_first():
    comments = [
        make_comment("c1", "top", replies=[make_comment("c2", "nested reply", replies=[make_comment("c3", "deep")])]),
        {"kind": "more", "data": {"children": ["c9"]}},
        make_comment("c4", "second top"),
    ]

    post = normalize(make_listing(make_post_data(), comments), comment_id="c3")

    assert post.comment.id == "c3"
    assert post.comment.body == "deep"


def test_focused_comment_accepts_prefixed_id():
    post = normalize(make_listing(make_post_data(), [make_comment("c1", "hello")]), comment_id="t1_c1")

    assert post.comment.body == "hello"


def test_missing_focused_comment_is_not_an_error():
    post = normalize(make_listing(make_post_data(), [make_comment("c1", "hello")]), comment_id="zzz")

    assert post.comment is None


def test_find_comment_prefers_earlier_subtree():
    tree = build_comment_tree(
        [make_comment("c1", "a", replies=[make_comment("dup", "first")]), make_comment("dup", "second")]
    )

    assert find_comment(tree, "dup").body == "first"
