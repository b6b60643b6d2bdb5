import sys
from datetime import datetime
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture
def repo(tmp_path: Path):
    from dukan.repositories.sqlite_store import SqliteKeyValueStore
    from dukan.repositories.state_repo import StateRepository

    store = SqliteKeyValueStore(tmp_path / "dukan.db")
    store.init_db()
    return StateRepository(store)


class FixedClock:
    def __init__(self, when: datetime = datetime(2024, 5, 1, 10, 30, 0)):
        self.when = when

    def __call__(self) -> datetime:
        return self.when


class StubAi:
    """Answers with a fixed ordering and records what it was asked."""

    def __init__(self, order=None, image: bytes = b"\x89PNG-fake", fail: Exception | None = None):
        self.order = order
        self.image = image
        self.fail = fail
        self.sort_calls: list[list[str]] = []
        self.image_prompts: list[str] = []

    def request_image(self, prompt: str) -> bytes:
        self.image_prompts.append(prompt)
        if self.fail:
            raise self.fail
        return self.image

    def request_category_sort(self, names):
        self.sort_calls.append(list(names))
        if self.fail:
            raise self.fail
        return list(self.order) if self.order is not None else sorted(names)
