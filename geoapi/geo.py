"""
GeoIP resolver using MaxMind GeoLite2 City

One Reader is opened at startup and shared by all requests; geoip2 readers
are safe for concurrent reads.
"""

import ipaddress
import logging
import socket
from typing import NamedTuple, Optional, Union

import geoip2.database
import geoip2.errors
import maxminddb

from .errors import AddressParseError, GeoLookupError

logger = logging.getLogger("geoapi.geo")

ParsedAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


class GeoRecord(NamedTuple):
    country: Optional[str]
    city: Optional[str]
    lat: Optional[float]
    lon: Optional[float]


def parse_address(text: str) -> Union[ParsedAddress, AddressParseError]:
    """Parse an IP literal, falling back to the platform resolver for host names"""
    if not text:
        return AddressParseError("Empty address")
    try:
        return ipaddress.ip_address(text)
    except ValueError:
        pass

    try:
        infos = socket.getaddrinfo(text, None)
    except (socket.gaierror, UnicodeError) as e:
        return AddressParseError(f"{text}: {e}")
    if not infos:
        return AddressParseError(f"{text}: no addresses")

    # sockaddr[0] is the address; IPv6 may carry a %scope suffix
    host = infos[0][4][0].split("%", 1)[0]
    try:
        return ipaddress.ip_address(host)
    except ValueError as e:
        return AddressParseError(str(e))


class GeoResolver:
    """Read-only wrapper over a geoip2 City database"""

    def __init__(self, reader, db_path: Optional[str] = None):
        self._reader = reader
        self.db_path = db_path

    @classmethod
    def open(cls, db_path: str) -> "GeoResolver":
        # FileNotFoundError / maxminddb.InvalidDatabaseError propagate: fatal at startup
        reader = geoip2.database.Reader(db_path)
        logger.info("GeoIP database loaded", extra={
            "db_path": db_path,
            "database_type": reader.metadata().database_type,
        })
        return cls(reader, db_path)

    def parse_address(self, text: str) -> Union[ParsedAddress, AddressParseError]:
        return parse_address(text)

    def lookup(self, address: ParsedAddress) -> Union[GeoRecord, GeoLookupError]:
        try:
            rec = self._reader.city(address)
        except (geoip2.errors.GeoIP2Error, maxminddb.InvalidDatabaseError,
                ValueError, TypeError, OSError) as e:
            logger.error("Geo lookup failed for %s", address, exc_info=True)
            return GeoLookupError(str(e))
        return GeoRecord(
            country=rec.country.name,
            city=rec.city.name,
            lat=rec.location.latitude,
            lon=rec.location.longitude,
        )

    def close(self):
        self._reader.close()
