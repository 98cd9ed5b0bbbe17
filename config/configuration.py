"""Application configuration file loader.

The configuration file is a small JSON document::

    {
        "port": 3000,
        "database": {"engine": "sqlite3", "name": "db.sqlite3"},
        "jwt": "<token signing secret>"
    }

It is read and validated once per process; later calls return the cached,
read-only result. An unreadable or invalid file is logged and replaced by
the defaults so the service can still start locally.
"""
from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from .schemas import SchemaError, SchemaService

logger = logging.getLogger(__name__)

CONFIG_SCHEMA = "config.schema.json"
DEFAULT_CONFIGURATION: dict[str, Any] = {"port": 3000}


class ConfigurationService:
    def __init__(self, config_path: str | Path, schema_service: SchemaService):
        self.config_path = Path(config_path)
        self.schema_service = schema_service
        self._config: Mapping[str, Any] | None = None
        self._lock = threading.Lock()

    def get_configuration(self) -> Mapping[str, Any]:
        """Return the loaded configuration, reading the file on first use."""
        with self._lock:
            if self._config is None:
                self._config = MappingProxyType(self._load())
            return self._config

    def _load(self) -> dict[str, Any]:
        logger.info("Loading configuration from %s", self.config_path)
        try:
            with self.config_path.open(encoding="utf-8") as fh:
                candidate = json.load(fh)
            errors = self.schema_service.validate(candidate, CONFIG_SCHEMA)
        except (OSError, ValueError, SchemaError) as exc:
            logger.error("Could not load configuration! Falling back to defaults! (%s)", exc)
            return dict(DEFAULT_CONFIGURATION)

        if errors:
            logger.error("Error loading config!\n%s", "\n".join(errors))
            return dict(DEFAULT_CONFIGURATION)
        return candidate


def database_settings(config: Mapping[str, Any], base_dir: Path) -> dict[str, Any]:
    """Translate the ``database`` section into a Django ``DATABASES`` entry."""
    section = config.get("database") or {}
    engine = section.get("engine", "sqlite3")
    name = section.get("name", "db.sqlite3")
    if engine == "sqlite3" and name != ":memory:" and not Path(name).is_absolute():
        name = base_dir / name

    entry: dict[str, Any] = {"ENGINE": f"django.db.backends.{engine}", "NAME": name}
    if section.get("host"):
        entry["HOST"] = section["host"]
    if section.get("port"):
        entry["PORT"] = str(section["port"])
    auth = section.get("auth") or {}
    if auth:
        entry["USER"] = auth.get("username", "")
        entry["PASSWORD"] = auth.get("password", "")
    return entry
