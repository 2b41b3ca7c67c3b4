from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from ..errors import CorruptLedgerError, LedgerError
from ..paths import default_ledger_path, ensure_dir
from .codec import decode_ledger, encode_ledger
from .models import LedgerSnapshot

logger = logging.getLogger(__name__)


class LedgerStore(ABC):
    """Abstract storage backend for the score ledger."""

    @abstractmethod
    def load(self) -> LedgerSnapshot:
        """Load the persisted snapshot. If none exists, return an empty one."""

    @abstractmethod
    def save(self, snapshot: LedgerSnapshot) -> None:
        """Durably persist the full snapshot."""


class JsonFileLedgerStore(LedgerStore):
    """LedgerStore writing one JSON document with atomic replace and a backup.

    Write strategy:
    - write ledger.json.tmp, flush and fsync
    - move the current ledger.json to ledger.json.bak
    - rename the tmp file over ledger.json
    A crash at any point leaves either the new file or the backup readable.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path is not None else default_ledger_path()
        ensure_dir(self.path.parent)

    @property
    def backup_path(self) -> Path:
        return self.path.with_suffix(self.path.suffix + ".bak")

    @property
    def tmp_path(self) -> Path:
        return self.path.with_suffix(self.path.suffix + ".tmp")

    def load(self) -> LedgerSnapshot:
        if not self.path.exists() and not self.backup_path.exists():
            logger.info("Ledger file not found at %s; starting with an empty ledger", self.path)
            return LedgerSnapshot()
        primary_exc: Optional[Exception] = None
        if self.path.exists():
            try:
                return self._read(self.path)
            except (OSError, LedgerError) as e:
                primary_exc = e
                logger.warning("Failed to read ledger %s (%s); trying backup", self.path, e)
        if self.backup_path.exists():
            try:
                snapshot = self._read(self.backup_path)
                logger.warning("Recovered ledger from backup %s", self.backup_path)
                return snapshot
            except (OSError, LedgerError) as e:
                logger.error("Backup ledger %s is unreadable: %s", self.backup_path, e)
                primary_exc = primary_exc or e
        raise CorruptLedgerError(f"Unable to load ledger from {self.path}: {primary_exc}")

    def save(self, snapshot: LedgerSnapshot) -> None:
        text = encode_ledger(snapshot)
        try:
            self._atomic_write(text)
        except OSError as e:
            logger.exception("Failed to write ledger to %s", self.path)
            raise LedgerError(f"Failed to write ledger to {self.path}: {e}") from e
        logger.debug("Saved ledger to %s", self.path)

    def _read(self, path: Path) -> LedgerSnapshot:
        return decode_ledger(path.read_text(encoding="utf-8"))

    def _atomic_write(self, text: str) -> None:
        ensure_dir(self.path.parent)
        with self.tmp_path.open("w", encoding="utf-8") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        if self.path.exists():
            os.replace(self.path, self.backup_path)
        os.replace(self.tmp_path, self.path)


class InMemoryLedgerStore(LedgerStore):
    """Test/deterministic LedgerStore that holds the encoded snapshot in memory only."""

    def __init__(self) -> None:
        self._text: Optional[str] = None
        self.save_count = 0

    def load(self) -> LedgerSnapshot:
        if self._text is None:
            return LedgerSnapshot()
        return decode_ledger(self._text)

    def save(self, snapshot: LedgerSnapshot) -> None:
        self._text = encode_ledger(snapshot)
        self.save_count += 1
