"""Run match requests against providers and fetch the results."""

import asyncio
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from replaytv import downloader
from replaytv.exceptions import ReplayError
from replaytv.matcher import find_request
from replaytv.models import MatchRequest, Show
from replaytv.providers.base import Provider

log = logging.getLogger(__name__)


@dataclass
class ListResult:
    """Shows found across providers, with enumeration failures per provider."""
    shows: list[tuple[Provider, Show]] = field(default_factory=list)
    errors: dict[str, BaseException] = field(default_factory=dict)


@dataclass
class DownloadReport:
    downloaded: list[Path] = field(default_factory=list)
    planned: list[Path] = field(default_factory=list)  # dry run only
    skipped: list[Path] = field(default_factory=list)
    failed: list[Show] = field(default_factory=list)


async def list_shows(providers: Iterable[Provider], requests: list[MatchRequest]) -> ListResult:
    """Drain each provider's catalog stream."""
    result = ListResult()
    for provider in providers:
        async with provider.shows(requests) as stream:
            async for show in stream:
                result.shows.append((provider, show))
        if stream.error is not None:
            result.errors[provider.name] = stream.error
    return result


def target_path(root: Path, request: MatchRequest | None, relative: str) -> Path:
    base = root / request.destination if request and request.destination else root
    return base / relative


Downloader = Callable[[str, Path], Path | None]


async def download_shows(
    providers: Iterable[Provider],
    requests: list[MatchRequest],
    root: Path,
    dry_run: bool = False,
    fetch: Downloader = downloader.download,
) -> DownloadReport:
    """Download matched shows that aren't already on disk."""
    report = DownloadReport()
    found = await list_shows(providers, requests)

    for provider, show in found.shows:
        path = target_path(root, find_request(requests, show), provider.get_show_file_name_matcher(show))
        if path.exists():
            log.debug("Already downloaded: %s", path)
            report.skipped.append(path)
            continue

        try:
            url = await provider.get_show_stream_url(show)
        except ReplayError as e:
            log.error("[%s] Can't get stream for %s: %s", provider.name, show.id, e)
            report.failed.append(show)
            continue

        if dry_run:
            log.info("Would download %s", path)
            report.planned.append(path)
            continue

        # ffmpeg blocks, keep the event loop free
        saved = await asyncio.to_thread(fetch, url, path)
        if saved is None:
            report.failed.append(show)
        else:
            report.downloaded.append(saved)

    return report
