import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request

from ..auth import authenticate_lookup, extract_bearer_token
from ..config_store import ConfigStore
from ..errors import GeoApiError, error_response
from ..geo import GeoResolver
from ..schemas.geo import ErrorResponse, GeoResult
from .deps import get_resolver, get_store, remote_host

router = APIRouter(tags=["geo"])

log = logging.getLogger("geoapi.api")


@router.get(
    "/geo",
    response_model=GeoResult,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse},
               500: {"model": ErrorResponse}},
)
def geo_lookup(
    request: Request,
    ip: Optional[str] = None,
    authorization: Optional[str] = Header(default=None),
    store: ConfigStore = Depends(get_store),
    resolver: GeoResolver = Depends(get_resolver),
):
    """Look up the ?ip= address, or the caller's own address"""
    config = store.current()
    remote = remote_host(request)

    denied = authenticate_lookup(extract_bearer_token(authorization), config, remote)
    if denied:
        return error_response(denied)

    target = ip if ip is not None else remote

    address = resolver.parse_address(target)
    if isinstance(address, GeoApiError):
        return error_response(address)

    record = resolver.lookup(address)
    if isinstance(record, GeoApiError):
        return error_response(record)

    log.info("Lookup from %s for IP %s", remote, target)
    # echo the IP as supplied, not the resolved form
    return GeoResult(ip=target, **record._asdict())
