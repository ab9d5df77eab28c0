"""
Config store for the access-control file (config.yaml)

The current AppConfig is published as a single reference. Readers take
current() once per request and work from that snapshot; reload() builds a
whole new AppConfig and swaps the reference, so a reader sees either the old
or the new config, never a mix.
"""

import logging
import threading
from typing import Optional

import yaml
from pydantic import ValidationError

from .config import DEFAULT_PORT
from .errors import ConfigParseError
from .schemas.app_config import AppConfig

logger = logging.getLogger("geoapi.config")


def load(path: str) -> AppConfig:
    """Parse the YAML file at path into an AppConfig, raising ConfigParseError"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigParseError(f"Cannot read {path}: {e.strerror or e}") from e
    except yaml.YAMLError as e:
        raise ConfigParseError(f"Malformed YAML in {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise ConfigParseError(f"{path} is not valid UTF-8: {e}") from e

    if not isinstance(data, dict):
        raise ConfigParseError(
            f"Expected a mapping at the top of {path}, got {type(data).__name__}"
        )

    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigParseError(f"Invalid config in {path}: {e}") from e


def normalize_startup(config: AppConfig) -> AppConfig:
    """Return config with a zero port replaced by the default. Startup only."""
    if config.port == 0:
        logger.info("Port not defined, using port %d", DEFAULT_PORT)
        return config.model_copy(update={"port": DEFAULT_PORT})
    return config


class ConfigStore:
    """Holds the live AppConfig; one writer (reload), many readers"""

    def __init__(self, path: str, config: AppConfig, listen_port: Optional[int] = None):
        self.path = path
        self._config = config
        # port the listener was bound with; reloads never change it
        self.listen_port = listen_port if listen_port is not None else config.port
        self._write_lock = threading.Lock()

    @classmethod
    def open(cls, path: str) -> "ConfigStore":
        config = normalize_startup(load(path))
        logger.info("Loaded %d API key(s) from %s", len(config.api_key_hashes), path)
        return cls(path, config)

    def current(self) -> AppConfig:
        return self._config

    def reload(self, path: Optional[str] = None) -> int:
        """Re-read the file and publish it. On error the old config stays live."""
        path = path or self.path
        with self._write_lock:
            new_config = load(path)
            if new_config.port != self.listen_port:
                logger.warning(
                    "Config port changed to %d but the listener stays on %d until restart",
                    new_config.port, self.listen_port,
                )
            self._config = new_config
        return len(new_config.api_key_hashes)
