"""Data models shared by all providers."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(eq=False)
class Show:
    """A show (episode) offered by a provider.

    Instances are built by the provider's catalog listing and then passed
    around by reference: detail resolution fills ``stream_url`` and
    ``thumbnail_url`` in place.
    """
    id: str
    show: str = ""  # series name
    title: str = ""  # episode title
    season: str = ""
    episode: str = ""
    pitch: str = ""
    category: str = ""
    channel: str = ""
    air_date: datetime = EPOCH
    duration: timedelta = field(default_factory=timedelta)
    detailed: bool = False
    drm: bool = False  # not reported by any provider yet
    stream_url: str = ""
    thumbnail_url: str = ""
    provider: str = ""
    show_url: str = ""


@dataclass
class MatchRequest:
    """Criteria selecting shows of interest.

    Text criteria are case-insensitive substring tests, empty ones are
    ignored. ``destination`` is a sub-directory of the download root.
    """
    show: str = ""
    title: str = ""
    pitch: str = ""
    provider: str = ""
    destination: str = ""
    match_all: bool = False  # select every show of the provider

    def is_empty(self) -> bool:
        return not (self.match_all or self.show or self.title or self.pitch)
