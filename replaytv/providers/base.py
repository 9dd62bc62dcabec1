"""Abstract base class for catch-up TV providers."""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from replaytv.models import MatchRequest, Show
from replaytv.stream import ShowStream


class Provider(ABC):
    """Base class for all providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name, used as registry key and ``Show.provider`` tag."""
        ...

    @abstractmethod
    def shows(self, requests: Iterable[MatchRequest]) -> ShowStream:
        """Stream the catalog shows matching one of the requests."""
        ...

    @abstractmethod
    async def get_show_info(self, show: Show) -> None:
        """Fetch detailed information, including the stream URL, into ``show``."""
        ...

    async def get_show_stream_url(self, show: Show) -> str:
        """Return the show's stream URL, resolving details when needed."""
        if not show.stream_url:
            await self.get_show_info(show)
        return show.stream_url

    @abstractmethod
    def get_show_file_name(self, show: Show) -> str:
        """Relative path where the show is saved."""
        ...

    def get_show_file_name_matcher(self, show: Show) -> str:
        """Relative path used to detect an already downloaded show."""
        return self.get_show_file_name(show)

    async def aclose(self) -> None:
        """Release network resources."""
