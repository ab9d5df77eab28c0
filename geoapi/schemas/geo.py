from pydantic import BaseModel
from typing import Optional


class GeoResult(BaseModel):
    ip: str
    country: Optional[str] = None
    city: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None


class ReloadResult(BaseModel):
    keys_loaded: int
