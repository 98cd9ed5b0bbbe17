"""JSON-schema store and validation.

Schemas live as JSON files in a single directory. They are read from disk
on first use and cached for the life of the process. A name with a file
extension refers to one schema file; a name without one refers to a
directory whose files are all loaded (``./`` is the schema directory itself).

This module must stay importable before Django settings are configured: the
settings module uses it to validate the configuration file.
"""
from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, Iterable

from jsonschema import Draft7Validator
from referencing import Registry, Resource
from referencing.jsonschema import DRAFT7

logger = logging.getLogger(__name__)


class SchemaError(Exception):
    """A schema could not be loaded or registered."""


class SchemaService:
    """Validate JSON documents against schemas stored in ``schema_dir``."""

    def __init__(self, schema_dir: str | Path):
        self.schema_dir = Path(schema_dir)
        self._store: dict[str, Any] = {}
        self._lock = threading.Lock()

    def get_schema(self, name: str) -> dict | list[dict]:
        """Return a schema, or the list of schemas for a directory name."""
        with self._lock:
            if name not in self._store:
                if Path(name).suffix:
                    self._store[name] = self._read_schema(name)
                else:
                    loaded = self._read_dir(name)
                    for file_name, schema in loaded:
                        self._store.setdefault(file_name, schema)
                    self._store[name] = [schema for _, schema in loaded]
            return self._store[name]

    def validate(self, obj: Any, schema_name: str, additional_schemas: Iterable[str] = ()) -> list[str]:
        """Validate ``obj`` against ``schema_name``.

        Additional schemas are registered under their ``$id`` so the main
        schema can reference them. Returns the error messages, empty when
        ``obj`` is valid.
        """
        main = self.get_schema(schema_name)
        if isinstance(main, list):
            raise SchemaError(f"{schema_name} is a directory, not a schema")

        resources = []
        for extra_name in additional_schemas:
            extra = self.get_schema(extra_name)
            for schema in extra if isinstance(extra, list) else [extra]:
                schema_id = schema.get("$id")
                if not schema_id:
                    raise SchemaError("Schema without ID found!")
                resources.append((schema_id, Resource.from_contents(schema, default_specification=DRAFT7)))

        validator = Draft7Validator(main, registry=Registry().with_resources(resources))
        errors = sorted(validator.iter_errors(obj), key=lambda e: [str(p) for p in e.absolute_path])
        return [_format_error(e) for e in errors]

    def _resolve(self, name: str) -> Path:
        path = Path(name)
        return path if path.is_absolute() else self.schema_dir / path

    def _read_schema(self, name: str) -> dict:
        path = self._resolve(name)
        try:
            with path.open(encoding="utf-8") as fh:
                return json.load(fh)
        except FileNotFoundError as exc:
            raise SchemaError(f"Unknown schema {name}") from exc
        except json.JSONDecodeError as exc:
            raise SchemaError(f"Schema {name} is not valid JSON: {exc}") from exc

    def _read_dir(self, name: str) -> list[tuple[str, dict]]:
        directory = self._resolve(name)
        if not directory.is_dir():
            raise SchemaError(f"Unknown schema directory {name}")
        loaded = []
        for path in sorted(directory.iterdir()):
            if path.is_file() and path.suffix:
                loaded.append((path.name, self._read_schema(str(path))))
        logger.debug("Loaded %d schemas from %s", len(loaded), directory)
        return loaded


def _format_error(error) -> str:
    location = "/".join(str(p) for p in error.absolute_path)
    return f"{location}: {error.message}" if location else error.message
