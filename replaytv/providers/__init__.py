"""Providers package."""

from replaytv.providers.base import Provider
from replaytv.providers.francetv import FranceTVProvider

__all__ = [
    "Provider",
    "FranceTVProvider",
    "register",
    "get_provider",
    "get_all_providers",
]

# Provider registry, keyed by lower case provider name
PROVIDERS: dict[str, Provider] = {}


def register(provider: Provider) -> None:
    """Add a provider to the registry, replacing one with the same name."""
    PROVIDERS[provider.name.lower()] = provider


def get_provider(name: str) -> Provider | None:
    """Get a provider by name."""
    return PROVIDERS.get(name.lower())


def get_all_providers() -> list[Provider]:
    """Get all registered providers."""
    return list(PROVIDERS.values())


def register_providers() -> None:
    """Register all available providers."""
    register(FranceTVProvider())


# Auto-register on import
register_providers()
