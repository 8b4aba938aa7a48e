from __future__ import annotations

from datetime import datetime, timezone

import pytest

from todo_app.domain.enums import Priority, ViewFilter
from todo_app.domain.filters import InvalidFilterError
from todo_app.services.task_store import TaskStore


def _assert_counts_consistent(store: TaskStore) -> None:
    assert store.pending_count + store.completed_count == store.total_count


def test_add_prepends_trimmed_pending_task(store: TaskStore, clock) -> None:
    store.add("First")
    task = store.add("  Buy milk  ")

    assert task is not None
    assert store.visible_tasks[0].text == "Buy milk"
    assert store.visible_tasks[0].completed is False
    assert store.visible_tasks[0].completed_at is None
    assert store.visible_tasks[0].priority is Priority.MEDIUM
    assert [t.text for t in store.tasks] == ["Buy milk", "First"]
    assert task.created_at == datetime(2026, 1, 1, 9, 1, tzinfo=timezone.utc)


@pytest.mark.parametrize("text", ["", "   ", "\t\n"])
def test_add_blank_text_is_ignored(store: TaskStore, text: str) -> None:
    assert store.add(text) is None
    assert store.total_count == 0


def test_ids_are_never_reused(store: TaskStore) -> None:
    first = store.add("one")
    store.delete(first.id)
    second = store.add("two")

    assert second.id != first.id


def test_toggle_twice_restores_pending(store: TaskStore, clock) -> None:
    task = store.add("Walk dog")

    store.toggle_complete(task.id)
    done = store.get(task.id)
    assert done.completed is True
    assert done.completed_at is not None

    store.toggle_complete(task.id)
    undone = store.get(task.id)
    assert undone.completed is False
    assert undone.completed_at is None
    assert undone.created_at == task.created_at


def test_toggle_and_delete_unknown_id_are_noops(store: TaskStore) -> None:
    store.add("Keep me")
    before = store.tasks

    store.toggle_complete(999)
    store.delete(999)

    assert store.tasks == before


def test_toggle_does_not_reorder(store: TaskStore) -> None:
    a = store.add("a")
    store.add("b")
    store.add("c")

    store.toggle_complete(a.id)

    assert [t.text for t in store.tasks] == ["c", "b", "a"]


def test_toggle_all_completes_then_reopens_everything() -> None:
    store = TaskStore.with_demo_tasks()
    assert store.completed_count == 1
    assert store.pending_count == 2

    store.toggle_all_completion()
    assert store.completed_count == 3
    assert store.all_completed is True
    assert all(t.completed_at is not None for t in store.tasks)

    store.toggle_all_completion()
    assert store.pending_count == 3
    assert all(t.completed_at is None for t in store.tasks)


def test_toggle_all_refreshes_completed_at_of_done_tasks(store: TaskStore) -> None:
    done = store.add("done")
    store.add("pending")
    store.toggle_complete(done.id)
    first_completed_at = store.get(done.id).completed_at

    store.toggle_all_completion()

    assert store.get(done.id).completed_at > first_completed_at


def test_toggle_all_on_empty_store_is_noop(store: TaskStore) -> None:
    store.toggle_all_completion()

    assert store.total_count == 0
    assert store.all_completed is False


def test_clear_completed_keeps_pending_in_order(store: TaskStore) -> None:
    b = store.add("B")
    a = store.add("A")
    c = store.add("C")
    store.toggle_complete(a.id)

    store.clear_completed()

    assert [t.id for t in store.tasks] == [c.id, b.id]


def test_edit_cancel_keeps_committed_text(store: TaskStore) -> None:
    task = store.add("Original")

    store.start_edit(task.id)
    store.update_draft("x")
    assert store.get(task.id).text == "Original"
    store.cancel_edit()

    assert store.edit_session is None
    assert store.get(task.id).text == "Original"


def test_save_with_blank_draft_keeps_session(store: TaskStore) -> None:
    task = store.add("Original")

    store.start_edit(task.id)
    store.update_draft("   ")
    store.save_edit()

    assert store.edit_session is not None
    assert store.edit_session.target_id == task.id
    assert store.get(task.id).text == "Original"


def test_save_edit_commits_trimmed_draft_only(store: TaskStore) -> None:
    task = store.add("Original")
    store.toggle_complete(task.id)
    before = store.get(task.id)

    store.start_edit(task.id)
    assert store.edit_session.draft_text == "Original"
    store.update_draft("  Renamed ")
    store.save_edit()

    after = store.get(task.id)
    assert store.edit_session is None
    assert after.text == "Renamed"
    assert after.completed == before.completed
    assert after.completed_at == before.completed_at
    assert after.created_at == before.created_at


def test_start_edit_replaces_previous_session(store: TaskStore) -> None:
    first = store.add("first")
    second = store.add("second")

    store.start_edit(first.id)
    store.update_draft("discarded")
    store.start_edit(second.id)
    store.save_edit()

    assert store.get(first.id).text == "first"
    assert store.get(second.id).text == "second"


def test_start_edit_unknown_id_is_noop(store: TaskStore) -> None:
    store.start_edit(42)

    assert store.edit_session is None


def test_edit_commands_without_session_are_noops(store: TaskStore) -> None:
    store.add("task")

    store.update_draft("ignored")
    store.save_edit()
    store.cancel_edit()
    store.cancel_edit()

    assert store.edit_session is None
    assert store.tasks[0].text == "task"


def test_deleting_edit_target_clears_session(store: TaskStore) -> None:
    task = store.add("doomed")
    other = store.add("other")
    store.start_edit(task.id)

    store.delete(other.id)
    assert store.edit_session is not None

    store.delete(task.id)
    assert store.edit_session is None


def test_clearing_completed_edit_target_clears_session(store: TaskStore) -> None:
    task = store.add("done soon")
    store.toggle_complete(task.id)
    store.start_edit(task.id)

    store.clear_completed()

    assert store.edit_session is None


def test_filter_views_preserve_order(store: TaskStore) -> None:
    a = store.add("a")
    b = store.add("b")
    c = store.add("c")
    store.toggle_complete(b.id)

    store.set_filter("pending")
    assert [t.id for t in store.visible_tasks] == [c.id, a.id]
    assert all(not t.completed for t in store.visible_tasks)

    store.set_filter(ViewFilter.COMPLETED)
    assert [t.id for t in store.visible_tasks] == [b.id]

    store.set_filter("all")
    assert [t.id for t in store.visible_tasks] == [c.id, b.id, a.id]


@pytest.mark.parametrize("value", ["done", "ALL", "", None, 1])
def test_set_filter_rejects_unknown_values(store: TaskStore, value) -> None:
    store.set_filter("pending")

    with pytest.raises(InvalidFilterError):
        store.set_filter(value)

    assert store.view_filter is ViewFilter.PENDING


def test_progress_fraction(store: TaskStore) -> None:
    assert store.progress_fraction is None

    a = store.add("a")
    store.add("b")
    store.add("c")
    store.add("d")
    store.toggle_complete(a.id)

    assert store.progress_fraction == 0.25


def test_counts_stay_consistent_across_operations(store: TaskStore) -> None:
    a = store.add("a")
    _assert_counts_consistent(store)
    b = store.add("b")
    store.toggle_complete(a.id)
    _assert_counts_consistent(store)
    store.toggle_all_completion()
    _assert_counts_consistent(store)
    store.toggle_complete(b.id)
    _assert_counts_consistent(store)
    store.clear_completed()
    _assert_counts_consistent(store)
    store.delete(b.id)
    _assert_counts_consistent(store)
    assert store.total_count == 0


def test_demo_tasks() -> None:
    store = TaskStore.with_demo_tasks()

    assert store.total_count == 3
    done = [t for t in store.tasks if t.completed]
    assert len(done) == 1
    assert done[0].completed_at == done[0].created_at
    assert [t.priority for t in store.tasks] == [Priority.MEDIUM, Priority.HIGH, Priority.MEDIUM]
    assert store.add("new").id not in {1, 2, 3}


def test_observers_get_one_snapshot_per_change(store: TaskStore) -> None:
    seen = []
    unsubscribe = store.subscribe(seen.append)

    task = store.add("watched")
    store.add("  ")
    store.toggle_complete(999)
    store.cancel_edit()
    store.set_filter("all")
    store.toggle_complete(task.id)

    assert len(seen) == 2
    assert seen[0].total_count == 1
    assert seen[1].completed_count == 1
    assert seen[1].progress_fraction == 1.0
    assert seen[1].all_completed is True

    unsubscribe()
    store.delete(task.id)
    assert len(seen) == 2


def test_snapshot_is_detached_from_later_changes(store: TaskStore) -> None:
    store.add("a")
    snapshot = store.snapshot()

    store.add("b")

    assert snapshot.total_count == 1
    assert len(snapshot.tasks) == 1
    assert store.total_count == 2
