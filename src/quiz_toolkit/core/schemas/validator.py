"""
Schema Validation Utilities

Validates external JSON payloads against the bundled JSON Schemas before
anything is built from them:

- catalog sources (``{"questions": [...]}``)
- dataset manifests (``{"datasets": [...]}``)
- session backups (storage key -> session list)

Validation is structural only. Per-record normalization (dropping blank
ids, coercing index lists) happens in ``catalog.loader``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema

# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def _validate(name: str, data: Any, *, source: str = "") -> None:
    validator = jsonschema.Draft7Validator(_load_schema(name))
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.absolute_path))
    if not errors:
        return
    messages = []
    for error in errors[:10]:
        location = "/".join(str(p) for p in error.absolute_path) or "<root>"
        messages.append(f"{location}: {error.message}")
    where = f" in {source}" if source else ""
    raise ValidationError(
        f"Invalid {name} payload{where}: {messages[0]}",
        path=source,
        errors=messages,
    )


def validate_catalog_payload(data: Any, *, source: str = "") -> None:
    """
    Validate a catalog source payload.

    Raises:
        ValidationError: If the payload is not an object or ``questions``
            is present but not an array of objects
    """
    _validate("catalog", data, source=source)


def validate_manifest(data: Any, *, source: str = "") -> None:
    """
    Validate a dataset manifest.

    Raises:
        ValidationError: If ``datasets`` is missing or an entry has no id
    """
    _validate("manifest", data, source=source)


def validate_backup_payload(data: Any) -> None:
    """
    Validate a session backup. Only the top-level shape is checked;
    malformed per-dataset values are replaced with empty lists on import.

    Raises:
        ValidationError: If the payload is not a JSON object
    """
    _validate("backup", data)
