"""
Error taxonomy for the GeoIP API

Every per-request failure is a GeoApiError carrying its HTTP status, the
client-facing summary and the underlying cause text. The resolver and the
authenticator hand these back as values; routes turn them into responses
with error_response().
"""

from typing import Optional

from fastapi.responses import JSONResponse

from .schemas.geo import ErrorResponse


class GeoApiError(Exception):
    status_code: int = 500
    error: str = "Internal error"

    def __init__(self, details: Optional[str] = None, error: Optional[str] = None):
        super().__init__(details or error or self.error)
        if error is not None:
            self.error = error
        self.details = details

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(error=self.error, details=self.details)


class ConfigParseError(GeoApiError):
    """Config file missing, unreadable, malformed YAML or wrong shape"""
    status_code = 500
    error = "Failed to reload keys"


class AddressParseError(GeoApiError):
    status_code = 400
    error = "Invalid IP address"


class GeoLookupError(GeoApiError):
    """The database could not produce a record for the address"""
    status_code = 500
    error = "Geo lookup failed"


class AuthError(GeoApiError):
    status_code = 401
    error = "Missing or invalid API token"


class RouteNotFound(GeoApiError):
    status_code = 404
    error = "Route not found"


def error_response(err: GeoApiError) -> JSONResponse:
    return JSONResponse(err.to_response().model_dump(), status_code=err.status_code)
