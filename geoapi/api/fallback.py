from fastapi import APIRouter, Request

from ..errors import RouteNotFound, error_response
from .deps import request_uri

router = APIRouter(include_in_schema=False)

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


# Must be included last: it matches every path and method
@router.api_route("/{path:path}", methods=ALL_METHODS)
def route_not_found(request: Request, path: str):
    return error_response(RouteNotFound(request_uri(request)))
