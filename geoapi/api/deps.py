from fastapi import Request

from ..config_store import ConfigStore
from ..geo import GeoResolver


def get_store(request: Request) -> ConfigStore:
    return request.app.state.config_store


def get_resolver(request: Request) -> GeoResolver:
    return request.app.state.geo_resolver


def remote_host(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def request_uri(request: Request) -> str:
    """Request target as the client sent it: raw (still percent-encoded) path plus query"""
    raw_path = request.scope.get("raw_path")
    if raw_path:
        uri = raw_path.split(b"?", 1)[0].decode("latin-1")
    else:
        uri = request.url.path
    if request.url.query:
        uri += "?" + request.url.query
    return uri
