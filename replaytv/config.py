"""Configuration management for replaytv."""

import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path

from replaytv.exceptions import ConfigError
from replaytv.http import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from replaytv.models import MatchRequest

log = logging.getLogger(__name__)


def get_config_dir() -> Path:
    """Get config directory path."""
    if os.name == "nt":
        base = Path(os.environ.get("APPDATA", Path.home()))
    else:
        base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return base / "replaytv"


@dataclass
class Config:
    """replaytv configuration."""
    download_dir: str = str(Path.home() / "Videos" / "replaytv")
    http_timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    log_level: str = "INFO"
    watch_list: list[MatchRequest] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        values["watch_list"] = [
            MatchRequest(**{k: v for k, v in item.items() if k in MatchRequest.__dataclass_fields__})
            for item in values.get("watch_list", [])
        ]
        return cls(**values)

    def set(self, key: str, value: str) -> None:
        """Set a scalar option from its string representation."""
        if key == "watch_list" or key not in {f.name for f in fields(self)}:
            raise ConfigError(f"Unknown option: {key}")
        if key == "http_timeout":
            try:
                setattr(self, key, float(value))
            except ValueError as e:
                raise ConfigError(f"Invalid timeout: {value}") from e
        elif key == "log_level":
            level = value.upper()
            if level not in logging.getLevelNamesMapping():
                raise ConfigError(f"Invalid log level: {value}")
            self.log_level = level
        else:
            setattr(self, key, value)


_config: Config | None = None


def config_file() -> Path:
    return get_config_dir() / "config.json"


def load_config() -> Config:
    """Load configuration from file."""
    global _config
    if _config is not None:
        return _config

    path = config_file()

    if path.exists():
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            _config = Config.from_dict(data)
        except (OSError, ValueError, TypeError, AttributeError) as e:
            log.warning("Failed to load config %s: %s", path, e)
            _config = Config()
    else:
        _config = Config()

    return _config


def save_config(config: Config) -> None:
    """Save configuration to file."""
    global _config
    _config = config

    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    with open(config_file(), "w", encoding="utf-8") as f:
        json.dump(asdict(config), f, indent=2)


def get_config() -> Config:
    """Get current configuration."""
    return load_config()


def reset_config() -> None:
    """Forget the cached configuration."""
    global _config
    _config = None
