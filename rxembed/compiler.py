"""Compilation of normalized posts into ordered meta directives."""

from __future__ import annotations

import logging

from .embeds import EmbedContext, dispatch
from .link_utils import canonical_post_url, normalize_hostname
from .media import build_comment_excerpt, build_gallery_caption, build_poll_summary
from .models import MediaDescriptor, MetaDirective, Post, PostHint, image_directives, meta, video_directives
from .registry import VIDEO_REF, issue
from .video import resolve_best_variant

log = logging.getLogger(__name__)

DESCRIPTION = "og:description"
NSFW_TITLE_PREFIX = "[NSFW] "

# post types whose card carries images, video or a third-party player
MEDIA_HINTS = {PostHint.IMAGE, PostHint.HOSTED_VIDEO, PostHint.GALLERY, PostHint.EXTERNAL_LINK}


class EmbedCompiler:
    """Turns a ``Post`` into the directives of its link preview.

    Branches strictly on ``post.post_hint``. Description text from every
    source (the focused comment first, then the branch) is merged into a
    single trailing ``og:description``.
    """

    def __init__(self, ctx: EmbedContext) -> None:
        self.ctx = ctx
        self.settings = ctx.settings

    async def compile(self, post: Post) -> list[MetaDirective]:
        directives = self._common(post)
        description: list[str] = []
        if post.comment is not None:
            description.append(build_comment_excerpt(post.comment))

        for directive in await self._branch(post):
            if directive.property == DESCRIPTION:
                description.append(directive.content)
            else:
                directives.append(directive)

        if description:
            directives.append(meta(DESCRIPTION, "\n\n".join(description)))
        return directives

    def withholds_media(self, post: Post) -> bool:
        """NSFW posts get a text card unless the deployment opts into their media."""
        return post.nsfw and not self.settings.embeds.show_nsfw_media

    def _common(self, post: Post) -> list[MetaDirective]:
        title = post.title or f"r/{post.subreddit}"
        if post.nsfw:
            title = f"{NSFW_TITLE_PREFIX}{title}"
        return [
            meta("og:site_name", self.settings.service.site_name),
            meta("og:title", title),
            meta("og:url", canonical_post_url(self.settings.upstream.base_url, post.permalink)),
        ]

    async def _branch(self, post: Post) -> list[MetaDirective]:
        hint = post.post_hint
        if self.withholds_media(post) and hint in MEDIA_HINTS:
            log.debug("withholding media of NSFW post %s", post.id)
            return self._text_only()
        if hint is PostHint.IMAGE:
            return self._image(post)
        if hint is PostHint.HOSTED_VIDEO:
            return self._hosted_video(post)
        if hint is PostHint.GALLERY:
            return self._gallery(post)
        if hint is PostHint.POLL:
            return self._poll(post)
        if hint is PostHint.EXTERNAL_LINK:
            return await self._external_link(post)
        return self._text_only()

    def _text_only(self) -> list[MetaDirective]:
        return [meta("twitter:card", "summary")]

    def _image(self, post: Post) -> list[MetaDirective]:
        media = post.primary_media or post.thumbnail
        if media is None:
            return self._text_only()
        return self._image_card(media)

    def _image_card(self, media: MediaDescriptor) -> list[MetaDirective]:
        return [meta("twitter:card", "summary_large_image"), *image_directives(media.url, media.width, media.height)]

    def _hosted_video(self, post: Post) -> list[MetaDirective]:
        # primary_media holds the rendition picked by the video resolver, when it ran
        resolved = post.primary_media
        if resolved is None and post.video_variants:
            resolved = resolve_best_variant(post.video_variants)
        if resolved is None:
            log.debug("post %s has no playable video, falling back to its preview", post.id)
            if post.thumbnail is None:
                return self._text_only()
            return self._image_card(post.thumbnail)

        handle = issue(post, VIDEO_REF)
        stable_url = self.settings.service.public_url.rstrip("/") + handle.path
        directives = [meta("twitter:card", "player")]
        directives.extend(video_directives(stable_url, resolved.width, resolved.height, "video/mp4"))
        if post.thumbnail is not None:
            directives.extend(image_directives(post.thumbnail.url, post.thumbnail.width, post.thumbnail.height))
        return directives

    def _gallery(self, post: Post) -> list[MetaDirective]:
        limit = self.settings.embeds.gallery_limit
        shown = post.gallery[:limit]
        directives = [meta("twitter:card", "summary_large_image")]
        for item in shown:
            directives.extend(image_directives(item.url, item.width, item.height))
        if len(post.gallery) > len(shown):
            directives.append(meta(DESCRIPTION, build_gallery_caption(len(shown), len(post.gallery))))
        return directives

    def _poll(self, post: Post) -> list[MetaDirective]:
        directives = [meta("twitter:card", "summary")]
        if post.poll is not None and post.poll.options:
            directives.append(meta(DESCRIPTION, build_poll_summary(post.poll)))
        return directives

    async def _external_link(self, post: Post) -> list[MetaDirective]:
        url = post.external_link
        if url:
            directives = await dispatch(normalize_hostname(url), url, post, self.ctx)
            if directives:
                return directives
        # generic link card: title and site name only
        return self._text_only()
