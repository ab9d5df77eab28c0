import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request

from ..auth import authenticate_admin, extract_bearer_token
from ..config_store import ConfigStore
from ..errors import ConfigParseError, error_response
from ..schemas.geo import ErrorResponse, ReloadResult
from .deps import get_store, remote_host

router = APIRouter(tags=["admin"])

log = logging.getLogger("geoapi.api")


@router.post(
    "/reload",
    response_model=ReloadResult,
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def reload_keys(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    store: ConfigStore = Depends(get_store),
):
    """Re-read config.yaml and swap in the new keys"""
    remote = remote_host(request)

    denied = authenticate_admin(extract_bearer_token(authorization), store.current(), remote)
    if denied:
        return error_response(denied)

    try:
        count = store.reload(request.app.state.config_path)
    except ConfigParseError as e:
        log.error("Failed to reload keys!", exc_info=True)
        return error_response(e)

    log.info("Reload request from %s", remote)
    return ReloadResult(keys_loaded=count)
