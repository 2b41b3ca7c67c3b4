from __future__ import annotations

import json
from typing import Any, Dict

from jsonschema import Draft202012Validator

from ..errors import LedgerValidationError
from .models import SCHEMA_VERSION, LedgerSnapshot

LEDGER_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["schema_version"],
    "properties": {
        "schema_version": {"type": "integer", "minimum": 1},
        "updated_at": {"type": "string"},
        "scores": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "required": ["current", "highest"],
                "properties": {
                    "current": {"type": "integer", "minimum": 0},
                    "highest": {"type": "integer", "minimum": 0},
                },
            },
        },
        "rules_shown": {"type": "object", "additionalProperties": {"type": "boolean"}},
        "selected_difficulties": {
            "type": "object",
            "additionalProperties": {"enum": ["easy", "medium", "hard"]},
        },
    },
}

_validator = Draft202012Validator(LEDGER_SCHEMA)


def encode_ledger(snapshot: LedgerSnapshot) -> str:
    """Encode a LedgerSnapshot to a pretty-printed JSON string."""
    return json.dumps(snapshot.to_dict(), ensure_ascii=False, sort_keys=True, indent=2)


def decode_ledger(text: str) -> LedgerSnapshot:
    """Decode JSON text into a LedgerSnapshot with schema and version validation."""
    try:
        data: Dict[str, Any] = json.loads(text)
    except json.JSONDecodeError as e:
        raise LedgerValidationError(f"Invalid JSON: {e}") from e

    errors = sorted(_validator.iter_errors(data), key=lambda e: list(e.path))
    if errors:
        details = "; ".join(
            f"{'/'.join(str(p) for p in err.path) or '<root>'}: {err.message}" for err in errors
        )
        raise LedgerValidationError(f"Ledger failed schema validation: {details}")

    version = int(data["schema_version"])
    if version != SCHEMA_VERSION:
        data = migrate_data(data, from_version=version, to_version=SCHEMA_VERSION)
    return LedgerSnapshot.from_dict(data)


def migrate_data(data: Dict[str, Any], from_version: int, to_version: int) -> Dict[str, Any]:
    """Migrate ledger data between schema versions.

    Only version 1 exists, so there are no steps yet.
    """
    if from_version == to_version:
        return data
    if from_version > to_version:
        raise LedgerValidationError(
            f"Ledger schema version {from_version} is newer than supported {to_version}."
        )
    data["schema_version"] = to_version
    return data
