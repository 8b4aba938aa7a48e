from __future__ import annotations

from collections.abc import Iterable

from .entities import Task
from .enums import ViewFilter


class InvalidFilterError(ValueError):
    def __init__(self, value: object) -> None:
        self.value = value
        allowed = ", ".join(f.value for f in ViewFilter)
        super().__init__(f"Unknown view filter {value!r}; expected one of: {allowed}")


def parse_filter(value: ViewFilter | str) -> ViewFilter:
    if isinstance(value, ViewFilter):
        return value
    if isinstance(value, str):
        try:
            return ViewFilter(value)
        except ValueError:
            pass
    raise InvalidFilterError(value)


def matches(task: Task, view_filter: ViewFilter) -> bool:
    if view_filter is ViewFilter.PENDING:
        return not task.completed
    if view_filter is ViewFilter.COMPLETED:
        return task.completed
    return True


def filter_tasks(tasks: Iterable[Task], view_filter: ViewFilter) -> list[Task]:
    return [task for task in tasks if matches(task, view_filter)]
