from __future__ import annotations

from enum import Enum
from typing import Union

from ..errors import LedgerValidationError


class DifficultyTier(str, Enum):
    """Player-selected difficulty, fixed for the length of a session."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, value: Union["DifficultyTier", str]) -> "DifficultyTier":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            raise LedgerValidationError(f"Unknown difficulty tier: {value!r}") from e

    @property
    def label(self) -> str:
        """Capitalized name for end screens ("Easy", "Medium", "Hard")."""
        return self.value.capitalize()


DEFAULT_TIER = DifficultyTier.EASY
