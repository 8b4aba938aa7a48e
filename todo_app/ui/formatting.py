"""Display strings for the main window.

Kept free of Qt imports so the wording can be checked without a display.
"""
from __future__ import annotations

from datetime import datetime

from todo_app.domain.entities import Task
from todo_app.domain.enums import Priority, ViewFilter
from todo_app.services.task_store import StoreSnapshot

FILTER_TITLES = {
    ViewFilter.ALL: "All",
    ViewFilter.PENDING: "Pending",
    ViewFilter.COMPLETED: "Completed",
}

EMPTY_STATES = {
    ViewFilter.ALL: ("📝", "No tasks yet. Add one above!"),
    ViewFilter.PENDING: ("⏳", "No pending tasks. Great job!"),
    ViewFilter.COMPLETED: ("🎉", "No completed tasks yet."),
}

PRIORITY_LABELS = {
    Priority.LOW: "Low",
    Priority.MEDIUM: "Medium",
    Priority.HIGH: "High",
}

CELEBRATION = "🎉 All tasks completed! Great job!"


def header_stats(snapshot: StoreSnapshot) -> str:
    if snapshot.total_count == 0:
        return ""
    return f"{snapshot.completed_count} of {snapshot.total_count} tasks completed"


def filter_button_text(view_filter: ViewFilter, snapshot: StoreSnapshot) -> str:
    counts = {
        ViewFilter.ALL: snapshot.total_count,
        ViewFilter.PENDING: snapshot.pending_count,
        ViewFilter.COMPLETED: snapshot.completed_count,
    }
    return f"{FILTER_TITLES[view_filter]} ({counts[view_filter]})"


def toggle_all_text(all_completed: bool) -> tuple[str, str]:
    """Return the toggle-all button caption and its tooltip."""
    if all_completed:
        return "↩️ All", "Mark all as pending"
    return "✅ All", "Mark all as completed"


def progress_percent(snapshot: StoreSnapshot) -> int:
    if snapshot.progress_fraction is None:
        return 0
    return round(snapshot.progress_fraction * 100)


def progress_counters(snapshot: StoreSnapshot) -> list[str]:
    return [
        f"📋 Total: {snapshot.total_count}",
        f"⏳ Pending: {snapshot.pending_count}",
        f"✅ Completed: {snapshot.completed_count}",
    ]


def format_date(value: datetime) -> str:
    return value.astimezone().strftime("%d.%m.%Y")


def task_dates(task: Task) -> str:
    text = f"Created: {format_date(task.created_at)}"
    if task.completed and task.completed_at:
        text += f" • Completed: {format_date(task.completed_at)}"
    return text
