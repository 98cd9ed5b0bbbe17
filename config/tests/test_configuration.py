from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from django.conf import settings

from config.configuration import DEFAULT_CONFIGURATION, ConfigurationService, database_settings
from config.schemas import SchemaService


@pytest.fixture
def schema_service():
    return SchemaService(settings.SCHEMA_DIR)


def _write(tmp_path: Path, payload) -> Path:
    path = tmp_path / "config.json"
    path.write_text(json.dumps(payload) if not isinstance(payload, str) else payload, encoding="utf-8")
    return path


def test_valid_configuration_is_loaded(tmp_path, schema_service):
    path = _write(tmp_path, {"port": 8080, "database": {"engine": "sqlite3", "name": "x.db"}, "jwt": "a" * 32})
    config = ConfigurationService(path, schema_service).get_configuration()
    assert config["port"] == 8080
    assert config["database"]["name"] == "x.db"


def test_configuration_is_read_once_and_read_only(tmp_path, schema_service):
    path = _write(tmp_path, {"port": 8080})
    service = ConfigurationService(path, schema_service)
    first = service.get_configuration()
    path.write_text(json.dumps({"port": 9090}), encoding="utf-8")
    assert service.get_configuration() is first
    assert first["port"] == 8080
    with pytest.raises(TypeError):
        first["port"] = 1  # type: ignore[index]


def test_invalid_configuration_falls_back_to_defaults(tmp_path, schema_service, caplog):
    path = _write(tmp_path, {"port": "not-a-number"})
    with caplog.at_level(logging.ERROR, logger="config.configuration"):
        config = ConfigurationService(path, schema_service).get_configuration()
    assert dict(config) == DEFAULT_CONFIGURATION
    assert "Error loading config!" in caplog.text


def test_missing_file_falls_back_to_defaults(tmp_path, schema_service, caplog):
    with caplog.at_level(logging.ERROR, logger="config.configuration"):
        config = ConfigurationService(tmp_path / "absent.json", schema_service).get_configuration()
    assert config["port"] == 3000
    assert "Falling back to defaults" in caplog.text


def test_unparseable_file_falls_back_to_defaults(tmp_path, schema_service):
    path = _write(tmp_path, "{port: ")
    assert ConfigurationService(path, schema_service).get_configuration()["port"] == 3000


def test_database_settings_defaults_to_sqlite_in_base_dir(tmp_path):
    entry = database_settings({"port": 3000}, tmp_path)
    assert entry == {"ENGINE": "django.db.backends.sqlite3", "NAME": tmp_path / "db.sqlite3"}


def test_database_settings_with_host_and_auth(tmp_path):
    entry = database_settings(
        {
            "database": {
                "engine": "postgresql",
                "name": "booking",
                "host": "db.local",
                "port": 5432,
                "auth": {"username": "svc", "password": "secret"},
            }
        },
        tmp_path,
    )
    assert entry["ENGINE"] == "django.db.backends.postgresql"
    assert entry["NAME"] == "booking"
    assert entry["HOST"] == "db.local"
    assert entry["PORT"] == "5432"
    assert (entry["USER"], entry["PASSWORD"]) == ("svc", "secret")


def test_non_utf8_file_falls_back_to_defaults(tmp_path, schema_service, caplog):
    path = tmp_path / "config.json"
    path.write_bytes(b'{"port": 3000, "jwt": "\xff\xfe"}')
    with caplog.at_level(logging.ERROR, logger="config.configuration"):
        config = ConfigurationService(path, schema_service).get_configuration()
    assert dict(config) == DEFAULT_CONFIGURATION
    assert "Falling back to defaults" in caplog.text
