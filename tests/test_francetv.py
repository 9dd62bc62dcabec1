"""Tests for the France Télévisions provider."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from conftest import FakeGetter, dumps
from replaytv.exceptions import DecodeError, StreamNotFoundError, TransportError
from replaytv.models import EPOCH, MatchRequest, Show
from replaytv.providers.francetv import (
    CATALOG_SIZE,
    INFO_URL,
    LIST_URL,
    FranceTVProvider,
    map_show,
    parse_catalog,
)

CATALOG_URL = LIST_URL.format(nb=CATALOG_SIZE)


def entry(id_diffusion: str, titre: str, **extra) -> dict:
    data = {
        "id_diffusion": id_diffusion,
        "titre": titre,
        "soustitre": "",
        "saison": "",
        "episode": "",
        "accroche": "",
        "ts_diffusion_utc": 1682942400,
        "chaine_id": "france2",
        "duree_reelle": 1560,
        "rubrique": "info",
        "oas_sitepage": "https://www.france.tv/" + id_diffusion,
        "image_large": "http://img/" + id_diffusion + ".jpg",
    }
    data.update(extra)
    return data


def catalog(*entries: dict) -> bytes:
    return dumps({"reponse": {"emissions": list(entries)}})


def info(*videos: tuple[str, str], image: str = "https://img/secure.jpg") -> bytes:
    return dumps({"image_secure": image, "videos": [{"format": f, "url": u} for f, u in videos]})


def make_provider(responses: dict) -> tuple[FranceTVProvider, FakeGetter]:
    getter = FakeGetter(responses)
    return FranceTVProvider(getter), getter


def test_map_show_trims_and_converts() -> None:
    show = map_show(entry(
        "123",
        "  Le Journal ",
        soustitre=" Edition du soir\n",
        accroche="  résumé ",
        rubrique=" info ",
    ))

    assert show.id == "123"
    assert show.show == "Le Journal"
    assert show.title == "Edition du soir"
    assert show.pitch == "résumé"
    assert show.category == "info"
    assert show.air_date == datetime(2023, 5, 1, 12, 0, tzinfo=timezone.utc)
    assert show.duration == timedelta(minutes=26)
    assert show.provider == "francetv"
    assert show.thumbnail_url == "http://img/123.jpg"
    assert show.detailed is False
    assert show.drm is False
    assert show.stream_url == ""


def test_map_show_accepts_string_numbers() -> None:
    show = map_show(entry("1", "A", ts_diffusion_utc="1682942400", duree_reelle=""))

    assert show.air_date.year == 2023
    assert show.duration == timedelta()


@pytest.mark.parametrize("body", [b"not json", b"{}", b'{"reponse": {"emissions": 3}}', b"[]"])
def test_parse_catalog_rejects_malformed_bodies(body: bytes) -> None:
    with pytest.raises(DecodeError):
        parse_catalog(body)


@pytest.mark.anyio("asyncio")
async def test_shows_emits_matches_in_catalog_order() -> None:
    provider, getter = make_provider({
        CATALOG_URL: catalog(
            entry("3", "Drama"),
            entry("1", "Le Journal"),
            entry("2", "Drama Queen"),
            entry("4", "Sport"),
        ),
    })

    shows = await provider.shows([MatchRequest(show="drama")]).collect()

    assert [s.id for s in shows] == ["3", "2"]
    assert getter.calls == [CATALOG_URL]
    for s in shows:
        assert s.id
        assert s.detailed is False
        assert s.stream_url == ""


@pytest.mark.anyio("asyncio")
async def test_shows_skips_entries_without_identifier() -> None:
    provider, _ = make_provider({
        CATALOG_URL: catalog(entry("", "Drama"), entry("7", "Drama")),
    })

    shows = await provider.shows([MatchRequest(show="Drama")]).collect()

    assert [s.id for s in shows] == ["7"]


@pytest.mark.anyio("asyncio")
async def test_shows_without_match_ends_empty_without_error() -> None:
    provider, _ = make_provider({CATALOG_URL: catalog(entry("1", "Drama"))})

    stream = provider.shows([MatchRequest(show="cartoon")])
    shows = await stream.collect()

    assert shows == []
    assert stream.error is None
    assert stream.closed


@pytest.mark.anyio("asyncio")
async def test_shows_transport_failure_ends_stream_and_keeps_error() -> None:
    provider, _ = make_provider({CATALOG_URL: TransportError(CATALOG_URL, "boom")})

    stream = provider.shows([MatchRequest(show="Drama")])
    shows = await stream.collect()

    assert shows == []
    assert isinstance(stream.error, TransportError)


@pytest.mark.anyio("asyncio")
async def test_shows_decode_failure_emits_nothing() -> None:
    provider, _ = make_provider({CATALOG_URL: b'{"reponse": {"emissions": [{"id_diffusion": "1"'})

    stream = provider.shows([MatchRequest(show="Drama")])

    assert await stream.collect() == []
    assert isinstance(stream.error, DecodeError)


@pytest.mark.anyio("asyncio")
async def test_shows_tolerates_out_of_range_numbers() -> None:
    provider, _ = make_provider({
        CATALOG_URL: catalog(
            entry("1", "Drama"),
            entry("2", "Drama", ts_diffusion_utc="99999999999999999"),
            entry("3", "Drama", duree_reelle=1e300),
            entry("4", "Drama"),
        ),
    })

    stream = provider.shows([MatchRequest(show="Drama")])
    shows = await stream.collect()

    assert [s.id for s in shows] == ["1", "2", "3", "4"]
    assert stream.error is None
    assert shows[1].air_date == EPOCH
    assert shows[2].duration == timedelta()


@pytest.mark.anyio("asyncio")
async def test_get_show_info_picks_first_hls_v5_rendition() -> None:
    provider, getter = make_provider({
        INFO_URL + "42": info(
            ("hls_v1_os", "http://v/1.m3u8"),
            ("hls_v5_os", "http://v/5.m3u8"),
            ("hls_v5_os", "http://v/5-bis.m3u8"),
        ),
    })
    show = Show(id="42", show="Drama")

    await provider.get_show_info(show)

    assert show.detailed is True
    assert show.stream_url == "http://v/5.m3u8"
    assert show.thumbnail_url == "https://img/secure.jpg"
    assert getter.calls == [INFO_URL + "42"]


@pytest.mark.anyio("asyncio")
async def test_get_show_info_is_idempotent() -> None:
    provider, getter = make_provider({INFO_URL + "42": info(("hls_v5_os", "http://v/5.m3u8"))})
    show = Show(id="42")

    await provider.get_show_info(show)
    await provider.get_show_info(show)

    assert len(getter.calls) == 1
    assert show.stream_url == "http://v/5.m3u8"


@pytest.mark.anyio("asyncio")
@pytest.mark.parametrize(
    ("payload", "error"),
    [
        (TransportError(INFO_URL + "42", "Unexpected status 500"), TransportError),
        (b"<html>", DecodeError),
        (b"[1, 2]", DecodeError),
        (info(("mp4", "http://v/a.mp4"), ("hls_v1_os", "http://v/1.m3u8")), StreamNotFoundError),
        (dumps({"image_secure": "https://img/x.jpg"}), StreamNotFoundError),
    ],
)
async def test_get_show_info_failures_leave_show_untouched(payload, error) -> None:
    provider, _ = make_provider({INFO_URL + "42": payload})
    show = Show(id="42", thumbnail_url="http://img/42.jpg")

    with pytest.raises(error):
        await provider.get_show_info(show)

    assert show.detailed is False
    assert show.stream_url == ""
    assert show.thumbnail_url == "http://img/42.jpg"


@pytest.mark.anyio("asyncio")
async def test_get_show_stream_url_resolves_once() -> None:
    provider, getter = make_provider({INFO_URL + "42": info(("hls_v5_os", "http://v/5.m3u8"))})
    show = Show(id="42")

    assert await provider.get_show_stream_url(show) == "http://v/5.m3u8"
    assert await provider.get_show_stream_url(show) == "http://v/5.m3u8"
    assert len(getter.calls) == 1


@pytest.mark.anyio("asyncio")
async def test_get_show_stream_url_propagates_errors() -> None:
    provider, _ = make_provider({INFO_URL + "42": info()})

    with pytest.raises(StreamNotFoundError):
        await provider.get_show_stream_url(Show(id="42"))


AIRED = datetime(2023, 5, 1, 20, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    ("show", "expected"),
    [
        (
            Show(id="abc123", show="Le Journal", air_date=AIRED),
            "Le Journal/Season 2023/Le Journal - 2023-05-01 - abc123.mp4",
        ),
        (
            Show(id="1", show="Drama", season="2", episode="5", title="Pilot", air_date=AIRED),
            "Drama/Season 02/Drama - s02e05 - Pilot.mp4",
        ),
        (
            Show(id="1", show="Drama", season="2", episode="5", title="Drama", air_date=AIRED),
            "Drama/Season 02/Drama - s02e05.mp4",
        ),
        (
            Show(id="1", show="Drama", season="2", episode="5", air_date=AIRED),
            "Drama/Season 02/Drama - s02e05.mp4",
        ),
        (
            Show(id="xyz", show="Le Journal", title="Le Journal", air_date=AIRED),
            "Le Journal/Season 2023/Le Journal - 2023-05-01 - xyz.mp4",
        ),
        (
            Show(id="xyz", show="Magazine", title="Spécial: été?", air_date=AIRED),
            "Magazine/Season 2023/Magazine - 2023-05-01 - Spécial- été-.mp4",
        ),
        (
            Show(id="1", show="Doc", season="12", episode="3", title="Un/Deux", air_date=AIRED),
            "Doc/Season 12/Doc - s12e03 - Un-Deux.mp4",
        ),
        (
            Show(id="x", show="Drama", episode="5", title="Pilot", air_date=AIRED),
            "Drama/Season 2023/Drama - s00e05 - Pilot.mp4",
        ),
    ],
)
def test_get_show_file_name(show: Show, expected: str) -> None:
    provider = FranceTVProvider(FakeGetter())

    assert provider.get_show_file_name(show) == expected
    assert provider.get_show_file_name_matcher(show) == expected


def test_matcher_path_is_the_save_path_function() -> None:
    assert FranceTVProvider.get_show_file_name_matcher is FranceTVProvider.get_show_file_name


def test_provider_name() -> None:
    assert FranceTVProvider(FakeGetter()).name == "francetv"
