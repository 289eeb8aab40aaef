from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Local "src/" wins over an installed "govledger" distribution.
SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture(autouse=True)
def _fresh_metrics():
    from govledger.runtime import metrics

    metrics.reset()
    yield
    metrics.reset()
