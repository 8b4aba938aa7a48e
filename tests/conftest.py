from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from todo_app.services.task_store import TaskStore


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(minutes=1)
        return current


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def store(clock: FakeClock) -> TaskStore:
    return TaskStore(clock=clock)
