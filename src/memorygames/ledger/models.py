from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict

from ..core.difficulty import DifficultyTier
from ..errors import LedgerValidationError

# Increment when making breaking schema changes
SCHEMA_VERSION = 1


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class ScoreEntry:
    """Score pair for one score key.

    `highest` never decreases over the lifetime of an entry; `current` is the
    last committed session score and may drop back to 0 on reset.
    """

    current: int = 0
    highest: int = 0

    def __post_init__(self) -> None:
        for name in ("current", "highest"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise LedgerValidationError(f"ScoreEntry.{name} must be a non-negative integer")

    def with_score(self, score: int) -> "ScoreEntry":
        return ScoreEntry(current=score, highest=max(self.highest, score))

    def with_current_reset(self) -> "ScoreEntry":
        return ScoreEntry(current=0, highest=self.highest)

    def to_dict(self) -> Dict[str, int]:
        return {"current": self.current, "highest": self.highest}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "ScoreEntry":
        return ScoreEntry(current=int(data.get("current", 0)), highest=int(data.get("highest", 0)))


@dataclass
class LedgerSnapshot:
    """Full persisted ledger: scores, rules-seen flags and selected tiers."""

    scores: Dict[str, ScoreEntry] = field(default_factory=dict)
    rules_shown: Dict[str, bool] = field(default_factory=dict)
    selected_difficulties: Dict[str, DifficultyTier] = field(default_factory=dict)
    schema_version: int = SCHEMA_VERSION
    updated_at: str = field(default_factory=_now)

    def touch(self) -> None:
        self.updated_at = _now()

    def copy(self) -> "LedgerSnapshot":
        return LedgerSnapshot(
            scores=dict(self.scores),
            rules_shown=dict(self.rules_shown),
            selected_difficulties=dict(self.selected_difficulties),
            schema_version=self.schema_version,
            updated_at=self.updated_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schema_version": self.schema_version,
            "updated_at": self.updated_at,
            "scores": {k: v.to_dict() for k, v in self.scores.items()},
            "rules_shown": dict(self.rules_shown),
            "selected_difficulties": {k: v.value for k, v in self.selected_difficulties.items()},
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "LedgerSnapshot":
        return LedgerSnapshot(
            scores={k: ScoreEntry.from_dict(v) for k, v in data.get("scores", {}).items()},
            rules_shown={k: bool(v) for k, v in data.get("rules_shown", {}).items()},
            selected_difficulties={
                k: DifficultyTier.parse(v) for k, v in data.get("selected_difficulties", {}).items()
            },
            schema_version=int(data.get("schema_version", SCHEMA_VERSION)),
            updated_at=data.get("updated_at") or _now(),
        )
