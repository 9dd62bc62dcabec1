"""replaytv CLI - Main command-line interface."""

import asyncio
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from replaytv import __version__
from replaytv.collector import download_shows, list_shows
from replaytv.config import Config, get_config, save_config
from replaytv.downloader import is_download_available
from replaytv.exceptions import ConfigError
from replaytv.http import HttpGetter
from replaytv.models import MatchRequest, Show
from replaytv.providers import FranceTVProvider, Provider, get_all_providers, get_provider, register

console = Console()


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def select_providers(name: Optional[str]) -> list[Provider]:
    """Providers to query, all of them when no name is given."""
    if not name:
        return get_all_providers()
    prov = get_provider(name)
    if not prov:
        raise click.BadParameter(f"Provider '{name}' not found", param_hint="--provider")
    return [prov]


def build_requests(show: str, title: str, pitch: str, provider: Optional[str]) -> list[MatchRequest]:
    req = MatchRequest(show=show, title=title, pitch=pitch, provider=provider or "")
    if req.is_empty():
        return []
    return [req]


def display_shows(shows: list[Show], title: str = "Shows") -> None:
    """Display a table of shows."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("#", style="dim", width=4)
    table.add_column("Show", style="cyan")
    table.add_column("Title")
    table.add_column("S/E", style="green", width=7)
    table.add_column("Aired", style="dim", width=10)
    table.add_column("Channel", style="magenta")
    table.add_column("ID", style="dim")

    for i, s in enumerate(shows, 1):
        se = f"{s.season}/{s.episode}" if s.season or s.episode else ""
        table.add_row(str(i), s.show, s.title, se, s.air_date.strftime("%Y-%m-%d"), s.channel, s.id)

    console.print(table)


def run_async(coro):
    """Run an async function, closing provider connections afterwards."""
    async def runner():
        try:
            return await coro
        finally:
            for prov in get_all_providers():
                await prov.aclose()

    return asyncio.run(runner())


# ===== CLI COMMANDS =====

criteria_options = [
    click.option("--provider", "-p", default=None, help="Provider to query (default: all)"),
    click.option("--show", "-s", default="", help="Part of the show name"),
    click.option("--title", "-t", default="", help="Part of the episode title"),
    click.option("--pitch", default="", help="Part of the synopsis"),
]


def with_criteria(fn):
    for option in reversed(criteria_options):
        fn = option(fn)
    return fn


@click.group(invoke_without_command=True)
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.option("--verbose", is_flag=True, help="Debug logging")
@click.pass_context
def main(ctx, version, verbose):
    """replaytv - Download catch-up TV shows."""
    if version:
        console.print(f"replaytv v{__version__}")
        return

    config = get_config()
    setup_logging("DEBUG" if verbose else config.log_level)

    # Providers share one HTTP client configured from the config file
    register(FranceTVProvider(HttpGetter(timeout=config.http_timeout, user_agent=config.user_agent)))

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@main.command("list")
@with_criteria
def list_cmd(provider: Optional[str], show: str, title: str, pitch: str):
    """List available shows matching the criteria."""
    requests = build_requests(show, title, pitch, provider) or [
        MatchRequest(provider=provider or "", match_all=True)
    ]
    providers = select_providers(provider)

    with console.status("[dim]Fetching catalogs...[/]"):
        result = run_async(list_shows(providers, requests))

    for name, error in result.errors.items():
        console.print(f"[red]{name}: catalog unavailable ({error})[/]")

    shows = [s for _, s in result.shows]
    if not shows:
        console.print("[yellow]No shows found[/]")
        return
    display_shows(shows, f"Shows ({len(shows)})")


@main.command()
@with_criteria
@click.option("--output", "-o", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Download directory (default from config)")
@click.option("--dry-run", "-n", is_flag=True, help="Only report what would be downloaded")
def download(provider: Optional[str], show: str, title: str, pitch: str, output: Optional[Path], dry_run: bool):
    """Download matching shows not already on disk.

    Uses the configured watch list when no criteria are given.
    """
    config = get_config()
    requests = build_requests(show, title, pitch, provider) or config.watch_list
    if not requests:
        console.print("[yellow]Nothing to look for: give criteria or fill the watch list[/]")
        return
    if not dry_run and not is_download_available():
        console.print("[red]Neither ffmpeg nor yt-dlp is installed[/]")
        raise SystemExit(1)

    root = output or Path(config.download_dir)
    report = run_async(download_shows(select_providers(provider), requests, root, dry_run=dry_run))

    planned = f"[cyan]{len(report.planned)} planned[/], " if dry_run else ""
    console.print(
        f"[green]{len(report.downloaded)} downloaded[/], "
        f"{planned}"
        f"[dim]{len(report.skipped)} already there[/], "
        f"[red]{len(report.failed)} failed[/]"
    )
    for path in report.downloaded:
        console.print(f"  [green]✓[/] {path}")
    for path in report.planned:
        console.print(f"  [cyan]would download[/] {path}")


@main.group()
def config():
    """Show or change the configuration."""


@config.command("show")
def config_show():
    """Print the configuration."""
    data = asdict(get_config())
    table = Table(show_header=False)
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, value in data.items():
        table.add_row(key, str(value))
    console.print(table)


@config.command("set")
@click.argument("key")
@click.argument("value")
def config_set(key: str, value: str):
    """Set a configuration option."""
    cfg = get_config()
    try:
        cfg.set(key, value)
    except ConfigError as e:
        raise click.BadParameter(str(e)) from e
    save_config(cfg)
    console.print(f"[green]{key} = {value}[/]")


@config.command("watch")
@with_criteria
@click.option("--destination", "-d", default="", help="Sub-directory of the download directory")
def config_watch(provider: Optional[str], show: str, title: str, pitch: str, destination: str):
    """Add an entry to the watch list."""
    req = MatchRequest(show=show, title=title, pitch=pitch, provider=provider or "", destination=destination)
    if req.is_empty():
        raise click.UsageError("Give at least one of --show, --title or --pitch")
    cfg: Config = get_config()
    cfg.watch_list.append(req)
    save_config(cfg)
    console.print(f"[green]Watching {req.show or req.title or req.pitch}[/]")


if __name__ == "__main__":
    main()
