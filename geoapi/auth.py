"""
Bearer token extraction, hashing and the two authorization tiers
"""

import hashlib
import logging
from typing import Optional

from .errors import AuthError
from .schemas.app_config import AppConfig

log = logging.getLogger("geoapi.auth")

BEARER_PREFIX = "Bearer "

LOOKUP_DENIED = "Missing or invalid API token"
ADMIN_DENIED = "Missing or invalid admin token"


def hash_token(s: str) -> str:
    return hashlib.sha256(s.encode("utf-8")).hexdigest()


def extract_bearer_token(header: Optional[str]) -> Optional[str]:
    # Case-sensitive "Bearer " prefix only; no raw tokens, no X-API-Key
    if header is None or not header.startswith(BEARER_PREFIX):
        return None
    return header[len(BEARER_PREFIX):].strip()


def _log_denied(kind: str, token: Optional[str], config: AppConfig, remote: Optional[str]):
    # Token goes in whole or not at all
    if config.log_invalid_tokens:
        log.warning("Bad %s %s from %s", kind, token, remote)
    else:
        log.warning("Bad %s from %s", kind, remote)


def is_authorized_for_lookup(token: Optional[str], config: AppConfig,
                             remote: Optional[str] = None) -> bool:
    if token is not None and hash_token(token) in config.api_key_hashes:
        return True
    _log_denied("token", token, config, remote)
    return False


def is_authorized_for_admin(token: Optional[str], config: AppConfig,
                            remote: Optional[str] = None) -> bool:
    if (
        token is not None
        and config.admin_key_hash is not None
        and hash_token(token) == config.admin_key_hash
    ):
        return True
    _log_denied("admin token", token, config, remote)
    return False


def authenticate_lookup(token: Optional[str], config: AppConfig,
                        remote: Optional[str] = None) -> Optional[AuthError]:
    if is_authorized_for_lookup(token, config, remote):
        return None
    return AuthError(error=LOOKUP_DENIED)


def authenticate_admin(token: Optional[str], config: AppConfig,
                       remote: Optional[str] = None) -> Optional[AuthError]:
    if is_authorized_for_admin(token, config, remote):
        return None
    return AuthError(error=ADMIN_DENIED)
