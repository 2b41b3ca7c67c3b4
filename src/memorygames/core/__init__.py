from .difficulty import DEFAULT_TIER, DifficultyTier
from .rng import RNG

__all__ = ["DEFAULT_TIER", "DifficultyTier", "RNG"]
