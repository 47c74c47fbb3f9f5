from datetime import datetime, timedelta, timezone

import pytest

from data_store import SUBJECTS, JsonFileStore
from session_lifecycle import SessionLifecycleManager
from subject_catalog import DEFAULT_SUBJECTS, seed_subjects

START = datetime(2026, 10, 19, 9, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Returns a settable time; advance() moves it forward."""

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(tmp_path, clock):
    s = JsonFileStore(tmp_path / "data", clock=clock)
    seed_subjects(s)
    return s


@pytest.fixture
def manager(store, clock):
    return SessionLifecycleManager(store, clock=clock)


@pytest.fixture
def binary_search(store):
    """The seeded subject whose correct answer is '5'."""
    slug = DEFAULT_SUBJECTS[0]["slug"]
    return store.select(SUBJECTS, filters={"slug": slug})[0]
