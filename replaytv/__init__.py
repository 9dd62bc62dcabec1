"""replaytv - catch-up TV downloader."""

__version__ = "0.1.0"
