from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure `import genrerec...` works when pytest uses importlib import mode.
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

from genrerec.sources import FetchResponse  # noqa: E402


def _flags(*present: int) -> str:
    """18 genre flags with the given 0-based positions set to 1."""
    return "|".join("1" if i in present else "0" for i in range(18))


ITEM_TEXT = "\n".join(
    [
        # 0=Action, 7=Drama, 4=Comedy, 13=Romance, 14=Sci-Fi
        f"1|Alpha (1995)|01-Jan-1995||http://example/1|0|{_flags(0)}",
        f"2|bravo (1995)|01-Jan-1995||http://example/2|0|{_flags(0, 14)}",
        f"3|Charlie (1996)|01-Jan-1996||http://example/3|0|{_flags(7)}",
        f"4|Delta (1997)|01-Jan-1997||http://example/4|0|{_flags(0, 14)}",
        f"5|Echo (1998)|01-Jan-1998||http://example/5|0|{_flags()}",
    ]
)

DATA_TEXT = "196\t1\t3\t881250949\n186\t2\t3\t891717742\n22\t3\t1\t878887116\n"


class FakeSource:
    """In-memory TextSource; `statuses` maps a resource name to a failing HTTP status."""

    def __init__(self, texts: dict[str, str], statuses: dict[str, int] | None = None) -> None:
        self.texts = dict(texts)
        self.statuses = dict(statuses or {})
        self.calls: list[str] = []

    async def fetch(self, name: str) -> FetchResponse:
        self.calls.append(name)
        status = self.statuses.get(name)
        if status is not None:
            return FetchResponse(name=name, ok=False, status=status)
        if name not in self.texts:
            return FetchResponse(name=name, ok=False, status=404)
        return FetchResponse(name=name, ok=True, status=200, body=self.texts[name])


@pytest.fixture
def item_text() -> str:
    return ITEM_TEXT


@pytest.fixture
def data_text() -> str:
    return DATA_TEXT


@pytest.fixture
def fake_source() -> FakeSource:
    return FakeSource({"u.item": ITEM_TEXT, "u.data": DATA_TEXT})


@pytest.fixture
def make_source():
    return FakeSource
