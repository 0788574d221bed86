"""Inspect command: build an embed locally and print its directives."""

import asyncio

import rich_click as click
from rich.table import Table

from ..config import load_settings
from ..errors import RxEmbedError
from ..fetcher import UpstreamClient
from ..link_utils import clean_url_candidate, parse_post_url
from ..pipeline import CompiledEmbed, build_embed
from ..web.render import expand_directives
from ._console import console, setup_logging


async def _build(url_ids: tuple[str, str | None]) -> CompiledEmbed:
    settings = load_settings()
    async with UpstreamClient(settings.upstream) as client:
        return await build_embed(client, settings, *url_ids)


@click.command()
@click.argument("url")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug output")
def inspect(url: str, verbose: bool):
    """Show the meta tags a post link would embed with."""
    setup_logging(verbose)
    ids = parse_post_url(clean_url_candidate(url))
    if ids is None:
        raise click.ClickException(f"Not a post link: {url}")

    try:
        embed = asyncio.run(_build(ids))
    except RxEmbedError as exc:
        raise click.ClickException(f"Could not build embed: {exc}") from exc

    post = embed.post
    console.print(f"[bold]{post.title or post.id}[/bold] r/{post.subreddit} ({post.post_hint.value})")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Property")
    table.add_column("Content", overflow="fold")
    for prop, content in expand_directives(embed.directives):
        table.add_row(prop, content)
    console.print(table)
