"""JSON Schema definitions and validators for external payloads."""

from .validator import (
    ValidationError,
    validate_backup_payload,
    validate_catalog_payload,
    validate_manifest,
)

__all__ = [
    "ValidationError",
    "validate_backup_payload",
    "validate_catalog_payload",
    "validate_manifest",
]
