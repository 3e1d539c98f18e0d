from __future__ import annotations

import configparser
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from ring_to_tv.exceptions import ConfigError

TOKEN_ENV_VAR = "RING_REFRESH_TOKEN"
HOST_ENV_VAR = "RING_TO_TV_HOST"


class TvConfig(BaseModel):
    host: str
    port: int = 7979
    display_duration: int = 12
    position: int = 0
    title_color: str = "#0066cc"
    title_size: int = 20
    message_color: str = "#000000"
    message_size: int = 14
    background_color: str = "#ffffff"
    image_width: int = 640
    request_timeout_seconds: float = 10.0


class RingConfig(BaseModel):
    token_file: str = "token.txt"
    poll_interval_seconds: int = 2
    display_name: str = "ring-to-android-tv"
    snapshot_timeout_seconds: float = 15.0


class AppConfig(BaseModel):
    notify_on_start: bool = True
    timezone: str = "America/New_York"
    snapshot_dir: Optional[str] = None
    shutdown_grace_seconds: float = 10.0


class LoggingConfig(BaseModel):
    level: str = "INFO"
    log_file: Optional[str] = None
    max_log_size: int = 10485760
    backup_count: int = 5


class Config(BaseModel):
    tv: TvConfig = Field(alias="TV")
    ring: RingConfig = Field(alias="RING", default_factory=RingConfig)
    app: AppConfig = Field(alias="APP", default_factory=AppConfig)
    logging: LoggingConfig = Field(alias="LOGGING", default_factory=LoggingConfig)

    # Directory the config file was read from; relative paths resolve against it.
    base_dir: str = "."

    model_config = {"validate_by_name": True}

    def resolve_path(self, path: str) -> Path:
        """Resolve a path from the config file relative to the config directory."""
        candidate = Path(path).expanduser()
        if candidate.is_absolute():
            return candidate
        return Path(self.base_dir) / candidate


def load_config(config_path: Path) -> Config:
    """
    Load configuration from an INI file, applying environment overrides.

    The file may be absent when the environment supplies the TV host.

    Raises:
        ConfigError: If the resulting configuration is invalid.
    """
    config_path = Path(config_path)
    parser = configparser.ConfigParser()
    if config_path.exists():
        parser.read(config_path)

    config_dict = {s.upper(): dict(parser.items(s)) for s in parser.sections()}

    host = os.environ.get(HOST_ENV_VAR)
    if host:
        config_dict.setdefault("TV", {})["host"] = host

    # Empty INI values mean "use the default"
    for section in config_dict.values():
        for key in [k for k, v in section.items() if v == ""]:
            del section[key]

    config_dict["base_dir"] = str(config_path.resolve().parent)

    try:
        return Config.model_validate(config_dict)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_path}: {e}") from e


def load_refresh_token(config: Config) -> str:
    """
    Return the Ring refresh token from the environment or the token file.

    Raises:
        ConfigError: If no non-empty token can be found.
    """
    token = os.environ.get(TOKEN_ENV_VAR, "").strip()
    if token:
        return token

    token_path = config.resolve_path(config.ring.token_file)
    try:
        with open(token_path, "r") as f:
            token = f.read().strip()
    except OSError as e:
        raise ConfigError(
            f"Unable to read API token from {token_path} - ensure you have an API token before running."
        ) from e

    if not token:
        raise ConfigError(f"API token file {token_path} is empty")
    return token
