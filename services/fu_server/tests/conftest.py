import datetime as dt

import pytest

from fu_server.names import NameGenerator
from fu_server.store import ObjectStore


class FakeClock:
    def __init__(self, start: dt.datetime):
        self.now = start

    def __call__(self) -> dt.datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += dt.timedelta(**kwargs)


class FixedNames(NameGenerator):
    """Hands out the given names in order, repeating the last one."""

    def __init__(self, *stems: str):
        super().__init__(seed=0)
        self._stems = list(stems)

    def generate(self, extension: str = "") -> str:
        stem = self._stems.pop(0) if len(self._stems) > 1 else self._stems[0]
        return stem + extension


@pytest.fixture
def clock():
    return FakeClock(dt.datetime(2024, 1, 1, 12, 0, 0, 123456))


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'store.db'}"


@pytest.fixture
def make_store(db_url, upload_dir, clock):
    opened = []

    def _make(**kwargs):
        kwargs.setdefault("names", NameGenerator(seed=1234))
        kwargs.setdefault("clock", clock)
        store = ObjectStore(db_url, upload_dir, **kwargs).open()
        opened.append(store)
        return store

    yield _make
    for store in opened:
        store.close()


@pytest.fixture
def store(make_store):
    return make_store()
