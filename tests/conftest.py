# tests/conftest.py
import socket
from types import SimpleNamespace
from unittest.mock import MagicMock

import geoip2.errors
import pytest
import yaml
from fastapi.testclient import TestClient

from geoapi.auth import hash_token
from geoapi.config_store import ConfigStore
from geoapi.geo import GeoResolver
from geoapi.main import create_app

API_KEY = "TEST_API_KEY"
OTHER_API_KEY = "TEST_OTHER_KEY"
ADMIN_KEY = "TEST_ADMIN_KEY"

# TestClient reports its peer as "testclient"
FAKE_DNS = {
    "testclient": "203.0.113.9",
    "localhost": "127.0.0.1",
}

CITY_RECORDS = {
    "8.8.8.8": ("United States", None, 37.751, -97.822),
    "81.2.69.142": ("United Kingdom", "London", 51.5142, -0.0931),
    "203.0.113.9": ("Testland", "Testville", 1.5, 2.5),
    "127.0.0.1": (None, None, None, None),
}


def _city(country, city, lat, lon):
    return SimpleNamespace(
        country=SimpleNamespace(name=country),
        city=SimpleNamespace(name=city),
        location=SimpleNamespace(latitude=lat, longitude=lon),
    )


def _fake_city(address):
    rec = CITY_RECORDS.get(str(address))
    if rec is None:
        raise geoip2.errors.AddressNotFoundError(
            f"The address {address} is not in the database."
        )
    return _city(*rec)


@pytest.fixture(autouse=True)
def fake_dns(monkeypatch):
    def getaddrinfo(host, port, *args, **kwargs):
        if host in FAKE_DNS:
            return [(socket.AF_INET, socket.SOCK_STREAM, 6, "", (FAKE_DNS[host], 0))]
        raise socket.gaierror(socket.EAI_NONAME, "Name or service not known")

    monkeypatch.setattr("geoapi.geo.socket.getaddrinfo", getaddrinfo)


@pytest.fixture
def write_config(tmp_path):
    """Write a config.yaml (dict or raw text) and return its path"""
    path = tmp_path / "config.yaml"

    def _write(data):
        text = data if isinstance(data, str) else yaml.safe_dump(data)
        path.write_text(text, encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def base_config():
    return {
        "api_key_hashes": [hash_token(API_KEY)],
        "admin_key_hash": hash_token(ADMIN_KEY),
        "log_invalid_tokens": False,
        "port": 8080,
    }


@pytest.fixture
def config_path(write_config, base_config):
    return write_config(base_config)


@pytest.fixture
def store(config_path):
    return ConfigStore.open(config_path)


@pytest.fixture
def reader():
    r = MagicMock()
    r.city.side_effect = _fake_city
    return r


@pytest.fixture
def resolver(reader):
    return GeoResolver(reader)


@pytest.fixture
def client(store, resolver, config_path):
    return TestClient(create_app(store, resolver, config_path))


@pytest.fixture
def api_headers():
    return {"Authorization": f"Bearer {API_KEY}"}


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_KEY}"}
