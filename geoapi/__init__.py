"""
GeoIP lookup API: bearer-token protected IP geolocation with hot-reloadable keys
"""

__version__ = "1.2"
