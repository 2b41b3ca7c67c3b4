import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from memorygames.core.rng import RNG  # noqa: E402
from memorygames.ledger import InMemoryLedgerStore, ScoreLedger  # noqa: E402
from memorygames.scheduling import ManualScheduler  # noqa: E402


@pytest.fixture()
def ledger():
    return ScoreLedger(InMemoryLedgerStore())


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def rng():
    return RNG(seed=1234)
