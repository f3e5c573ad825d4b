from __future__ import annotations

import sys
from collections import Counter
from pathlib import Path
from typing import List

import pytest

ROOT = Path(__file__).resolve().parent.parent

for entry in (ROOT, ROOT / "src"):
    if str(entry) not in sys.path:
        sys.path.append(str(entry))


@pytest.fixture(autouse=True)
def _quiet_py_trace(monkeypatch: pytest.MonkeyPatch) -> None:
    """A developer's LOX_DEBUG_PY_TRACE must not leak tracebacks into captured stderr."""
    monkeypatch.delenv("LOX_DEBUG_PY_TRACE", raising=False)


def pytest_collection_modifyitems(
    session: pytest.Session,
    config: pytest.Config,
    items: List[pytest.Item],
) -> None:
    """Parametrized scenario tables must give every case a distinct id."""
    del session, config

    counts = Counter(item.nodeid for item in items)
    duplicates = sorted(nodeid for nodeid, seen in counts.items() if seen > 1)
    if not duplicates:
        return

    listing = "\n".join(f"- {nodeid}" for nodeid in duplicates)
    raise pytest.UsageError(f"Duplicate scenario ids collected:\n{listing}")
