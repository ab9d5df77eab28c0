"""
Startup tests: config and database failures must stop the process before binding
"""

from unittest.mock import MagicMock, patch

import pytest

from geoapi import main as main_mod


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    monkeypatch.setattr(main_mod, "setup_logging", lambda: None)


def test_bad_config_is_fatal(monkeypatch, write_config):
    monkeypatch.setattr(main_mod, "CONFIG_PATH", write_config("api_key_hashes: [\n"))
    with patch("uvicorn.run") as run, patch.object(main_mod.GeoResolver, "open") as open_db:
        assert main_mod.main() == 1
    run.assert_not_called()
    open_db.assert_not_called()


def test_missing_database_is_fatal(monkeypatch, config_path, tmp_path):
    monkeypatch.setattr(main_mod, "CONFIG_PATH", config_path)
    monkeypatch.setattr(main_mod, "GEOIP_DB_CITY", str(tmp_path / "missing.mmdb"))
    with patch("uvicorn.run") as run:
        assert main_mod.main() == 1
    run.assert_not_called()


def test_binds_configured_port(monkeypatch, write_config, base_config):
    monkeypatch.setattr(main_mod, "CONFIG_PATH", write_config({**base_config, "port": 0}))
    with patch("uvicorn.run") as run, \
         patch.object(main_mod.GeoResolver, "open", return_value=MagicMock()):
        assert main_mod.main() == 0
    _, kwargs = run.call_args
    assert kwargs["port"] == 8080
    assert kwargs["log_config"] is None


def test_non_utf8_config_is_fatal(monkeypatch, tmp_path):
    path = tmp_path / "config.yaml"
    path.write_bytes(b"api_key_hashes: [\xff\xfe]\n")
    monkeypatch.setattr(main_mod, "CONFIG_PATH", str(path))
    with patch("uvicorn.run") as run:
        assert main_mod.main() == 1
    run.assert_not_called()
