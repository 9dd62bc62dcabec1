"""Match shows against user criteria."""

from collections.abc import Iterable

from replaytv.models import MatchRequest, Show


def _contains(needle: str, haystack: str) -> bool:
    return not needle or needle.casefold() in haystack.casefold()


def match_request(request: MatchRequest, show: Show) -> bool:
    """Check a single request against a show."""
    if request.is_empty():
        return False
    if request.provider and request.provider.lower() != show.provider.lower():
        return False
    return (
        _contains(request.show, show.show)
        and _contains(request.title, show.title)
        and _contains(request.pitch, show.pitch)
    )


def is_show_match(requests: Iterable[MatchRequest], show: Show) -> bool:
    """True when at least one of the requests selects the show."""
    return any(match_request(r, show) for r in requests)


def find_request(requests: Iterable[MatchRequest], show: Show) -> MatchRequest | None:
    """Return the first request selecting the show."""
    for r in requests:
        if match_request(r, show):
            return r
    return None
