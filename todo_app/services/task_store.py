from __future__ import annotations

import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime

from todo_app.domain.entities import EditSession, Task, utcnow
from todo_app.domain.enums import Priority, ViewFilter
from todo_app.domain.filters import InvalidFilterError, filter_tasks, parse_filter

logger = logging.getLogger(__name__)

DEMO_TASKS = [
    ("Learn PySide6 widgets", True, Priority.MEDIUM),
    ("Build a todo app", False, Priority.HIGH),
    ("Practice Python", False, Priority.MEDIUM),
]


@dataclass(frozen=True)
class StoreSnapshot:
    tasks: tuple[Task, ...]
    visible_tasks: tuple[Task, ...]
    view_filter: ViewFilter
    edit_session: EditSession | None
    total_count: int
    completed_count: int
    pending_count: int
    all_completed: bool
    progress_fraction: float | None


Listener = Callable[[StoreSnapshot], None]


class TaskStore:
    """In-memory owner of the task list, the view filter and the inline edit.

    Every command runs to completion before observers hear about it, and
    commands that change nothing (blank text, unknown ids, no active edit)
    are silently ignored without notifying anyone.
    """

    def __init__(
        self,
        tasks: list[Task] | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._clock = clock
        self._tasks: list[Task] = list(tasks or [])
        self._filter = ViewFilter.ALL
        self._edit: EditSession | None = None
        self._listeners: list[Listener] = []
        start = max((task.id for task in self._tasks), default=0) + 1
        self._ids = itertools.count(start)

    @classmethod
    def with_demo_tasks(cls, clock: Callable[[], datetime] = utcnow) -> TaskStore:
        now = clock()
        tasks = [
            Task(
                id=task_id,
                text=text,
                created_at=now,
                completed=completed,
                completed_at=now if completed else None,
                priority=priority,
            )
            for task_id, (text, completed, priority) in enumerate(DEMO_TASKS, start=1)
        ]
        return cls(tasks, clock=clock)

    # -- observers --------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)

    # -- read accessors ---------------------------------------------------

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    @property
    def visible_tasks(self) -> list[Task]:
        return filter_tasks(self._tasks, self._filter)

    @property
    def view_filter(self) -> ViewFilter:
        return self._filter

    @property
    def edit_session(self) -> EditSession | None:
        return self._edit

    @property
    def total_count(self) -> int:
        return len(self._tasks)

    @property
    def completed_count(self) -> int:
        return sum(1 for task in self._tasks if task.completed)

    @property
    def pending_count(self) -> int:
        return self.total_count - self.completed_count

    @property
    def all_completed(self) -> bool:
        return bool(self._tasks) and all(task.completed for task in self._tasks)

    @property
    def progress_fraction(self) -> float | None:
        total = self.total_count
        if total == 0:
            return None
        return self.completed_count / total

    def get(self, task_id: int) -> Task | None:
        return next((task for task in self._tasks if task.id == task_id), None)

    def is_editing(self, task_id: int) -> bool:
        return self._edit is not None and self._edit.target_id == task_id

    def snapshot(self) -> StoreSnapshot:
        tasks = tuple(self._tasks)
        completed = sum(1 for task in tasks if task.completed)
        total = len(tasks)
        return StoreSnapshot(
            tasks=tasks,
            visible_tasks=tuple(filter_tasks(tasks, self._filter)),
            view_filter=self._filter,
            edit_session=self._edit,
            total_count=total,
            completed_count=completed,
            pending_count=total - completed,
            all_completed=total > 0 and completed == total,
            progress_fraction=completed / total if total else None,
        )

    # -- commands ---------------------------------------------------------

    def add(self, raw_text: str, priority: Priority = Priority.MEDIUM) -> Task | None:
        text = raw_text.strip()
        if not text:
            logger.debug("Ignoring add with blank text")
            return None
        task = Task(id=next(self._ids), text=text, created_at=self._clock(), priority=priority)
        self._tasks = [task, *self._tasks]
        logger.debug("Added task %s", task.id)
        self._notify()
        return task

    def toggle_complete(self, task_id: int) -> None:
        task = self.get(task_id)
        if task is None:
            logger.debug("Ignoring toggle of unknown task %s", task_id)
            return
        if task.completed:
            updated = replace(task, completed=False, completed_at=None)
        else:
            updated = replace(task, completed=True, completed_at=self._clock())
        self._replace(updated)
        logger.debug("Task %s completed=%s", task_id, updated.completed)
        self._notify()

    def delete(self, task_id: int) -> None:
        if self.get(task_id) is None:
            logger.debug("Ignoring delete of unknown task %s", task_id)
            return
        self._tasks = [task for task in self._tasks if task.id != task_id]
        if self.is_editing(task_id):
            self._edit = None
        logger.debug("Deleted task %s", task_id)
        self._notify()

    def start_edit(self, task_id: int) -> None:
        task = self.get(task_id)
        if task is None:
            logger.debug("Ignoring edit of unknown task %s", task_id)
            return
        self._edit = EditSession(target_id=task.id, draft_text=task.text)
        self._notify()

    def update_draft(self, text: str) -> None:
        if self._edit is None:
            return
        if text == self._edit.draft_text:
            return
        self._edit = replace(self._edit, draft_text=text)
        self._notify()

    def save_edit(self) -> None:
        if self._edit is None:
            return
        text = self._edit.draft_text.strip()
        if not text:
            logger.debug("Ignoring save of blank draft for task %s", self._edit.target_id)
            return
        task = self.get(self._edit.target_id)
        if task is not None:
            self._replace(replace(task, text=text))
            logger.debug("Saved edit of task %s", task.id)
        self._edit = None
        self._notify()

    def cancel_edit(self) -> None:
        if self._edit is None:
            return
        self._edit = None
        self._notify()

    def clear_completed(self) -> None:
        remaining = [task for task in self._tasks if not task.completed]
        if len(remaining) == len(self._tasks):
            return
        removed = len(self._tasks) - len(remaining)
        self._tasks = remaining
        if self._edit is not None and self.get(self._edit.target_id) is None:
            self._edit = None
        logger.debug("Cleared %s completed tasks", removed)
        self._notify()

    def toggle_all_completion(self) -> None:
        if not self._tasks:
            return
        if self.all_completed:
            self._tasks = [replace(task, completed=False, completed_at=None) for task in self._tasks]
        else:
            now = self._clock()
            self._tasks = [replace(task, completed=True, completed_at=now) for task in self._tasks]
        logger.debug("Marked all %s tasks completed=%s", len(self._tasks), self._tasks[0].completed)
        self._notify()

    def set_filter(self, value: ViewFilter | str) -> None:
        try:
            view_filter = parse_filter(value)
        except InvalidFilterError:
            logger.warning("Rejected view filter %r", value)
            raise
        if view_filter is self._filter:
            return
        self._filter = view_filter
        self._notify()

    def _replace(self, updated: Task) -> None:
        self._tasks = [updated if task.id == updated.id else task for task in self._tasks]
