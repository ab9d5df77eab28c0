"""
Process settings for the GeoIP API

These only select where things live. Access control (key hashes, logging of
bad tokens, listen port) lives in the YAML file at CONFIG_PATH.
"""

import os


def env_bool(key: str, default: bool = False) -> bool:
    """Get boolean value from environment variable"""
    value = os.getenv(key, str(default)).lower()
    return value in ("true", "1", "yes", "on")

# Files
CONFIG_PATH = os.getenv("GEOAPI_CONFIG_PATH", "config.yaml")
GEOIP_DB_CITY = os.getenv("GEOAPI_GEOIP_DB", "GeoLite2-City.mmdb")

# Listener
HOST = os.getenv("GEOAPI_HOST", "0.0.0.0")
DEFAULT_PORT = 8080

# Logging configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")
ACCESS_LOG_ENABLED: bool = env_bool("ACCESS_LOG_ENABLED", True)
