"""France Télévisions provider (pluzz replay web services)."""

import json
import logging
import posixpath
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone
from typing import Any

from replaytv.exceptions import DecodeError, StreamNotFoundError
from replaytv.http import Getter, HttpGetter
from replaytv.matcher import is_show_match
from replaytv.models import EPOCH, MatchRequest, Show
from replaytv.naming import file_name_cleaner, format_2_digits, path_name_cleaner
from replaytv.providers.base import Provider
from replaytv.stream import Emit, ShowStream

log = logging.getLogger(__name__)

PROVIDER_NAME = "francetv"

LIST_URL = "http://pluzz.webservices.francetelevisions.fr/pluzz/liste/type/replay/nb/{nb}/debut/0"
INFO_URL = "http://webservices.francetelevisions.fr/tools/getInfosOeuvre/v2/?catalogue=Pluzz&idDiffusion="

CATALOG_SIZE = 3000  # most recent shows only
STREAM_FORMAT = "hls_v5_os"
FILE_EXTENSION = ".mp4"


def _decode_json(body: bytes, what: str) -> Any:
    try:
        return json.loads(body)
    except ValueError as e:
        raise DecodeError(f"Can't decode {what}: {e}") from e


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _number(value: Any) -> float:
    """Numbers may come as JSON numbers or as strings, sometimes empty."""
    if value is None or value == "":
        return 0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0


def _air_date(value: Any) -> datetime:
    ts = _number(value)
    if not ts:
        return EPOCH
    try:
        return datetime.fromtimestamp(ts, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return EPOCH


def _duration(value: Any) -> timedelta:
    # duree_reelle is taken as seconds
    try:
        return timedelta(seconds=_number(value))
    except (OverflowError, ValueError):
        return timedelta()


def parse_catalog(body: bytes) -> list[dict]:
    """Decode the listing body into its list of raw entries."""
    data = _decode_json(body, "catalog")
    try:
        emissions = data["reponse"]["emissions"]
    except (KeyError, TypeError) as e:
        raise DecodeError(f"Can't decode catalog: missing {e}") from e
    if not isinstance(emissions, list):
        raise DecodeError("Can't decode catalog: emissions is not a list")
    return emissions


def map_show(entry: dict) -> Show:
    """Map a raw catalog entry onto a Show."""
    return Show(
        id=_text(entry.get("id_diffusion")),
        show=_text(entry.get("titre")),
        title=_text(entry.get("soustitre")),
        season=_text(entry.get("saison")),
        episode=_text(entry.get("episode")),
        pitch=_text(entry.get("accroche")),
        air_date=_air_date(entry.get("ts_diffusion_utc")),
        channel=_text(entry.get("chaine_id")),
        detailed=False,
        drm=False,
        duration=_duration(entry.get("duree_reelle")),
        category=_text(entry.get("rubrique")),
        provider=PROVIDER_NAME,
        show_url=_text(entry.get("oas_sitepage")),
        stream_url="",  # filled by get_show_info
        thumbnail_url=_text(entry.get("image_large")),
    )


class FranceTVProvider(Provider):
    """France Télévisions catalog adapter."""

    def __init__(self, getter: Getter | None = None):
        self.getter = getter or HttpGetter()

    @property
    def name(self) -> str:
        return PROVIDER_NAME

    def shows(self, requests: Iterable[MatchRequest]) -> ShowStream:
        """Stream the catalog shows matching one of ``requests``.

        Must be called from a running event loop. Failures end the stream
        early and are kept in ``ShowStream.error``.
        """
        requests = list(requests)

        async def produce(emit: Emit) -> None:
            body = await self.getter.get(LIST_URL.format(nb=CATALOG_SIZE))
            entries = parse_catalog(body)
            log.debug("[%s] %d entries in catalog", PROVIDER_NAME, len(entries))

            for entry in entries:
                if not isinstance(entry, dict):
                    continue
                show = map_show(entry)
                if not show.id:
                    continue
                if is_show_match(requests, show):
                    await emit(show)

        return ShowStream(produce, name=PROVIDER_NAME)

    async def get_show_info(self, show: Show) -> None:
        """Resolve the show's HLS stream and secure thumbnail.

        Nothing is changed on the show when an error is raised.
        """
        if show.detailed:
            return

        url = INFO_URL + show.id
        body = await self.getter.get(url)
        info = _decode_json(body, "show's detailed information")
        if not isinstance(info, dict):
            raise DecodeError("Can't decode show's detailed information: not an object")

        stream_url = ""
        for video in info.get("videos") or []:
            if isinstance(video, dict) and video.get("format") == STREAM_FORMAT:
                stream_url = _text(video.get("url"))
                break
        if not stream_url:
            raise StreamNotFoundError(show.id, STREAM_FORMAT)

        show.thumbnail_url = _text(info.get("image_secure"))
        show.stream_url = stream_url
        show.detailed = True
        log.debug("[%s] %s resolved to %s", PROVIDER_NAME, show.id, stream_url)

    def get_show_file_name(self, show: Show) -> str:
        """Plex compatible path: ``Show/Season NN/Show - sNNeMM - Title.mp4``.

        Without a season the air date year is used, without an episode the
        air date replaces ``sNNeMM`` and the show ID disambiguates untitled
        episodes.
        """
        show_path = path_name_cleaner(show.show)

        if show.season == "":
            season_path = "Season " + show.air_date.strftime("%Y")
        else:
            season_path = "Season " + format_2_digits(show.season)

        if show.episode == "":
            episode_path = file_name_cleaner(show.show) + " - " + show.air_date.strftime("%Y-%m-%d")
        else:
            episode_path = (
                file_name_cleaner(show.show)
                + " - s" + format_2_digits(show.season)
                + "e" + format_2_digits(show.episode)
            )

        if show.episode == "" and (show.title == "" or show.title == show.show):
            episode_path += " - " + show.id + FILE_EXTENSION
        elif show.title != "" and show.title != show.show:
            episode_path += " - " + file_name_cleaner(show.title) + FILE_EXTENSION
        else:
            episode_path += FILE_EXTENSION

        return posixpath.join(show_path, season_path, episode_path)

    # Already downloaded shows are detected with the exact save path
    get_show_file_name_matcher = get_show_file_name

    async def aclose(self) -> None:
        aclose = getattr(self.getter, "aclose", None)
        if aclose is not None:
            await aclose()
