from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from platformdirs import PlatformDirs

logger = logging.getLogger(__name__)

APP_NAME = "MemoryGames"
LEDGER_FILENAME = "ledger.json"

# Environment variable override (useful for tests and portable installs)
ENV_DATA_DIR = "MEMORYGAMES_DATA_DIR"


def default_data_dir(app_name: str = APP_NAME) -> Path:
    """Return the directory holding the persisted ledger.

    Uses the platform user data dir (e.g. ~/.local/share/MemoryGames on Linux)
    unless MEMORYGAMES_DATA_DIR is set.
    """
    override = os.getenv(ENV_DATA_DIR)
    if override:
        return Path(override).expanduser().resolve()
    dirs = PlatformDirs(appname=app_name, appauthor=False)
    return Path(dirs.user_data_dir).expanduser().resolve()


def default_ledger_path(data_dir: Optional[Path] = None) -> Path:
    base = Path(data_dir) if data_dir is not None else default_data_dir()
    return base / LEDGER_FILENAME


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path
