"""
User configuration.

The configuration file is YAML, for example::

    credentials:
      client_secret_file: client_secret.json
      token_file: token.json
    profiles:
      family:
        token_file: token-family.json
    logging:
      console_level: WARNING
    media:
      filename_regex: '.*\\.(jpg|png|mp4)'

Relative file names are looked up in the working directory, then in
``$XDG_CONFIG_HOME/photo_sync`` and then in each ``$XDG_CONFIG_DIRS/photo_sync``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Mapping

import yaml

from config import APP_NAME, CLIENT_SECRET_FILE, CONFIG_FILE, MEDIA_FILENAME_REGEX, TOKEN_FILE
from errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass
class CredentialsConfig:
    client_secret_file: str = CLIENT_SECRET_FILE
    token_file: str = TOKEN_FILE


@dataclass
class Settings:
    credentials: CredentialsConfig = field(default_factory=CredentialsConfig)
    profiles: dict[str, dict] = field(default_factory=dict)
    console_level: str | None = None
    filename_regex: str = MEDIA_FILENAME_REGEX

    # Runtime state
    config_path: Path | None = None

    def credentials_for(self, profile: str | None) -> CredentialsConfig:
        """Credentials of a profile; keys missing in the profile come from the defaults."""
        if profile is None:
            return self.credentials
        overrides = {
            key: value for key, value in (self.profiles.get(profile) or {}).items()
            if key in CredentialsConfig.__dataclass_fields__
        }
        return replace(self.credentials, **overrides)


def _env_or_default(env: Mapping[str, str], name: str, default: str) -> str:
    value = env.get(name, "")
    return value if value.strip() else default


def config_dirs(env: Mapping[str, str] | None = None) -> list[Path]:
    """Directories searched for configuration files, most specific first."""
    env = os.environ if env is None else env
    home = env.get("HOME") or str(Path.home())
    config_home = _env_or_default(env, "XDG_CONFIG_HOME", os.path.join(home, ".config"))
    system_dirs = _env_or_default(env, "XDG_CONFIG_DIRS", "/etc/xdg")

    dirs = [Path("."), Path(config_home) / APP_NAME]
    dirs.extend(Path(d) / APP_NAME for d in system_dirs.split(os.pathsep) if d)
    return dirs


def find_config_file(name: str, env: Mapping[str, str] | None = None) -> Path | None:
    """First readable file of this name in the config directories (or the path itself if absolute)."""
    path = Path(name).expanduser()
    if path.is_absolute():
        return path if path.is_file() else None
    for directory in config_dirs(env):
        candidate = directory / path
        if candidate.is_file() and os.access(candidate, os.R_OK):
            return candidate
    return None


def resolve_path(name: str, env: Mapping[str, str] | None = None) -> Path:
    """
    Like find_config_file, but for a file that may not exist yet: it then
    belongs in the user's config directory.
    """
    found = find_config_file(name, env)
    if found is not None:
        return found.absolute()
    path = Path(name).expanduser()
    if path.is_absolute():
        return path
    return (config_dirs(env)[1] / path).absolute()


def load_settings(config_file: str = CONFIG_FILE,
                  env: Mapping[str, str] | None = None) -> Settings:
    """Loads the configuration file; defaults are used when there is none."""
    path = find_config_file(config_file, env)
    if path is None:
        logger.debug("No config file %s found, using defaults", config_file)
        return Settings()

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot load config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    logger.debug("Loaded config from %s", path)

    credentials = data.get("credentials") or {}
    settings = Settings(
        credentials=CredentialsConfig(
            client_secret_file=credentials.get("client_secret_file", CLIENT_SECRET_FILE),
            token_file=credentials.get("token_file", TOKEN_FILE),
        ),
        profiles=data.get("profiles") or {},
        console_level=(data.get("logging") or {}).get("console_level"),
        filename_regex=(data.get("media") or {}).get("filename_regex", MEDIA_FILENAME_REGEX),
        config_path=path,
    )
    return settings
