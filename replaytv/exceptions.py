"""Exceptions raised by replaytv."""


class ReplayError(Exception):
    """Base class for all replaytv errors."""


class TransportError(ReplayError):
    """A web service could not be reached or answered with an error status."""

    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(f"{message} ({url})")


class DecodeError(ReplayError):
    """A web service answered with a payload we can't understand."""


class StreamNotFoundError(ReplayError):
    """No rendition with the wanted format is offered for a show."""

    def __init__(self, show_id: str, stream_format: str):
        self.show_id = show_id
        self.stream_format = stream_format
        super().__init__(f"Can't find {stream_format} stream for the show {show_id}")


class ConfigError(ReplayError):
    """Invalid configuration value."""
