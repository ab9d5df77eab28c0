"""App factory and process entrypoint for the GeoIP API.

- GET /geo: bearer-token protected IP geolocation
- POST /reload: admin-token protected hot reload of config.yaml
- everything else: 404 ErrorResponse

Startup loads config.yaml and opens the GeoLite2 City database before the
listener is bound; failure of either aborts the process.
"""

import logging
import sys
from typing import Optional

import maxminddb
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .api import admin, fallback, geo
from .api.deps import request_uri
from .config import CONFIG_PATH, GEOIP_DB_CITY, HOST
from .config_store import ConfigStore
from .errors import ConfigParseError, RouteNotFound, error_response
from .geo import GeoResolver
from .logging_config import setup_logging
from .middleware import TracingMiddleware

logger = logging.getLogger("geoapi")


def create_app(store: ConfigStore, resolver: GeoResolver,
               config_path: Optional[str] = None) -> FastAPI:
    app = FastAPI(
        title="GeoIP API",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.state.config_store = store
    app.state.geo_resolver = resolver
    app.state.config_path = config_path or store.path

    app.add_middleware(TracingMiddleware)

    app.include_router(geo.router)
    app.include_router(admin.router)
    # catch-all goes last
    app.include_router(fallback.router)

    # methods the catch-all does not list (TRACE, PROPFIND, ...) surface as 405
    @app.exception_handler(StarletteHTTPException)
    async def _route_not_found(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (404, 405):
            return error_response(RouteNotFound(request_uri(request)))
        return await http_exception_handler(request, exc)

    return app


def main() -> int:
    import uvicorn

    setup_logging()

    try:
        store = ConfigStore.open(CONFIG_PATH)
    except ConfigParseError as e:
        logger.error("Cannot load config: %s", e.details)
        return 1

    try:
        resolver = GeoResolver.open(GEOIP_DB_CITY)
    except (OSError, ValueError, maxminddb.InvalidDatabaseError):
        logger.exception("Cannot open GeoIP database %s", GEOIP_DB_CITY)
        return 1

    app = create_app(store, resolver, CONFIG_PATH)

    logger.info("Starting GeoIP API on %s:%d", HOST, store.listen_port)
    uvicorn.run(
        app,
        host=HOST,
        port=store.listen_port,
        log_config=None,
        access_log=False,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
