"""
CLI entry point for modpack-updater.

Commands:
  - ``modpack-updater update [--launcher N]``
  - ``modpack-updater release``
  - ``modpack-updater where [--launcher N]``
  - ``modpack-updater cache-path``
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import NoReturn, Optional

import click

from modpack_updater.api import GitHubReleases
from modpack_updater.config import (
    CachePolicy,
    ChecksumPolicy,
    InstallMode,
    Settings,
)
from modpack_updater.errors import AssetNotFoundError, UpdaterError
from modpack_updater.models import Launcher
from modpack_updater.paths import resolve
from modpack_updater.updater import ModpackUpdater

MENU = [
    "Which launcher do you use?",
    f"1. {Launcher.MODRINTH.label}",
    f"2. {Launcher.CURSEFORGE.label}",
    f"3. {Launcher.PRISM.label}",
]


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _fail(error: UpdaterError) -> NoReturn:
    click.echo(f"Error: {error}", err=True)
    sys.exit(1)


def _settings(ctx: click.Context, **overrides) -> Settings:
    try:
        return ctx.obj["settings"].with_overrides(**overrides)
    except UpdaterError as e:
        _fail(e)


def _prompt_choice() -> str:
    for line in MENU:
        click.echo(line)
    return click.prompt("Enter your choice (1-3)", type=str, prompt_suffix=": ").strip()


def _human_size(size: int) -> str:
    return f"{size / 1024 / 1024:.1f} MB"


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """modpack-updater: Install the latest modpack release into your launcher."""
    _setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    if "settings" not in ctx.obj:
        try:
            ctx.obj["settings"] = Settings.from_env()
        except UpdaterError as e:
            _fail(e)


@main.command()
@click.option("--launcher", "-l", "choice", default=None, help="1=Modrinth, 2=CurseForge, 3=Prism.")
@click.option("--owner", default=None, help="Repository owner.")
@click.option("--repo", default=None, help="Repository name.")
@click.option("--instance", "instance_name", default=None, help="Instance directory name.")
@click.option(
    "--checksum",
    "checksum_policy",
    type=click.Choice([p.value for p in ChecksumPolicy]),
    default=None,
    help="Where the expected SHA-256 comes from.",
)
@click.option("--no-cache", is_flag=True, help="Always download, never use the cache.")
@click.option(
    "--install-mode",
    type=click.Choice([m.value for m in InstallMode]),
    default=None,
    help="replace: clear in place; swap: extract aside, then rename over.",
)
@click.pass_context
def update(
    ctx: click.Context,
    choice: Optional[str],
    owner: Optional[str],
    repo: Optional[str],
    instance_name: Optional[str],
    checksum_policy: Optional[str],
    no_cache: bool,
    install_mode: Optional[str],
) -> None:
    """Download the latest release and install it into a launcher instance."""
    settings = _settings(
        ctx,
        owner=owner,
        repo=repo,
        instance_name=instance_name,
        checksum_policy=checksum_policy,
        cache_policy=CachePolicy.DISABLED if no_cache else None,
        install_mode=install_mode,
    )
    if choice is None:
        choice = _prompt_choice()

    async def run():
        async with ModpackUpdater(settings, transport=ctx.obj.get("transport")) as updater:
            return await updater.run(choice)

    try:
        result = asyncio.run(run())
    except AssetNotFoundError as e:
        click.echo(f"No new release found or '{e.asset_name}' not available.")
        return
    except UpdaterError as e:
        _fail(e)

    source = "cache" if result.from_cache else "download"
    click.echo(f"\n✓ Installed {result.asset_name} ({result.tag})")
    click.echo(f"  Source:  {source}, {_human_size(result.size)}")
    click.echo(f"  Entries: {result.entries}")
    click.echo(f"  Output:  {result.destination}")
    click.echo("Update completed successfully!")


@main.command()
@click.option("--owner", default=None, help="Repository owner.")
@click.option("--repo", default=None, help="Repository name.")
@click.pass_context
def release(ctx: click.Context, owner: Optional[str], repo: Optional[str]) -> None:
    """Show the latest release and its assets."""
    settings = _settings(ctx, owner=owner, repo=repo)

    async def run():
        async with GitHubReleases(
            token=settings.github_token,
            timeout=settings.timeout,
            transport=ctx.obj.get("transport"),
        ) as gh:
            return await gh.get_latest_release(settings.owner, settings.repo)

    try:
        latest = asyncio.run(run())
    except UpdaterError as e:
        _fail(e)

    click.echo("=" * 55)
    click.echo(f"  Repository: {settings.owner}/{settings.repo}")
    click.echo(f"  Release:    {latest.tag_name}")
    if latest.name and latest.name != latest.tag_name:
        click.echo(f"  Title:      {latest.name}")
    if latest.published_at:
        click.echo(f"  Published:  {latest.published_at.strftime('%Y-%m-%d %H:%M')}")
    if latest.html_url:
        click.echo(f"  URL:        {latest.html_url}")
    click.echo("=" * 55)

    if not latest.assets:
        click.echo("\n  No assets attached.")
        return
    click.echo(f"\n  Assets ({len(latest.assets)}):")
    for asset in latest.assets:
        click.echo(f"    {asset.name}  ({_human_size(asset.size)})")
        if asset.digest:
            click.echo(f"      {asset.digest}")


@main.command()
@click.option("--launcher", "-l", "choice", default=None, help="1=Modrinth, 2=CurseForge, 3=Prism.")
@click.option("--instance", "instance_name", default=None, help="Instance directory name.")
@click.pass_context
def where(ctx: click.Context, choice: Optional[str], instance_name: Optional[str]) -> None:
    """Print the directory the instance would be installed into."""
    settings = _settings(ctx, instance_name=instance_name)
    if choice is None:
        choice = _prompt_choice()
    try:
        click.echo(str(resolve(choice, settings.instance_name)))
    except UpdaterError as e:
        _fail(e)


@main.command("cache-path")
@click.pass_context
def cache_path(ctx: click.Context) -> None:
    """Print the download cache directory."""
    click.echo(str(ctx.obj["settings"].cache_dir))


if __name__ == "__main__":
    main()
