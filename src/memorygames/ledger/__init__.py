"""Persisted score ledger.

This package provides:
- ScoreEntry / LedgerSnapshot models with a versioned JSON schema
- Encoding/decoding with jsonschema validation
- Stores: a JSON file store with atomic writes and backup recovery, and an
  in-memory store for tests
- ScoreLedger, the write-through facade the game sessions talk to
"""

from .codec import decode_ledger, encode_ledger
from .ledger import ScoreLedger, score_key
from .models import SCHEMA_VERSION, LedgerSnapshot, ScoreEntry
from .store import InMemoryLedgerStore, JsonFileLedgerStore, LedgerStore

__all__ = [
    "SCHEMA_VERSION",
    "ScoreEntry",
    "LedgerSnapshot",
    "encode_ledger",
    "decode_ledger",
    "LedgerStore",
    "JsonFileLedgerStore",
    "InMemoryLedgerStore",
    "ScoreLedger",
    "score_key",
]
