class MemoryGamesError(Exception):
    """Base error for memorygames library exceptions."""


class LedgerError(MemoryGamesError):
    """Raised when the score ledger cannot be read or written."""


class LedgerValidationError(LedgerError):
    """Raised when a score, tier or ledger file fails validation."""


class CorruptLedgerError(LedgerError):
    """Raised when the ledger file is corrupted and cannot be recovered from backup."""


class UnknownGameError(MemoryGamesError):
    """Raised when a game id is not present in the catalog."""


class ConfigError(MemoryGamesError):
    """Raised when a tuning file cannot be read or contains invalid values."""
