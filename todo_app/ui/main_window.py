from __future__ import annotations

import logging

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidgetItem,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from todo_app.config import SETTINGS
from todo_app.services.task_store import StoreSnapshot, TaskStore

from .formatting import header_stats
from .widgets import EmptyState, FilterBar, ProgressPanel, TaskItemWidget, TaskListWidget

logger = logging.getLogger(__name__)


class MainWindow(QWidget):
    def __init__(self, store: TaskStore):
        super().__init__()
        self.setWindowTitle(SETTINGS.window_title)
        self.resize(640, 760)

        self.store = store
        self._list_key: tuple | None = None
        self._render_pending = False

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(12)

        layout.addWidget(self._build_header())
        layout.addWidget(self._build_add_row())

        self.filter_bar = FilterBar(
            self.store.set_filter,
            self.store.toggle_all_completion,
            self.store.clear_completed,
        )
        layout.addWidget(self.filter_bar)

        self.task_list = TaskListWidget()
        self.task_list.setObjectName("TaskList")
        self.task_list.setSpacing(10)
        self.empty_state = EmptyState()
        layout.addWidget(self.task_list, 1)
        layout.addWidget(self.empty_state, 1)

        self.progress = ProgressPanel()
        layout.addWidget(self.progress)

        self._unsubscribe = self.store.subscribe(self._schedule_render)
        self.render(self.store.snapshot())

        QShortcut(QKeySequence("Ctrl+N"), self, self.add_input.setFocus)

    def _build_header(self) -> QWidget:
        frame = QFrame()
        frame.setObjectName("Header")
        layout = QVBoxLayout(frame)
        layout.setContentsMargins(16, 20, 16, 20)
        layout.setSpacing(6)

        title = QLabel(f"✨ {SETTINGS.window_title}")
        title.setProperty("class", "panel-title")
        title.setAlignment(Qt.AlignCenter)

        self.stats_label = QLabel("")
        self.stats_label.setProperty("class", "stats-badge")
        self.stats_label.setAlignment(Qt.AlignCenter)

        layout.addWidget(title)
        layout.addWidget(self.stats_label)
        return frame

    def _build_add_row(self) -> QWidget:
        frame = QFrame()
        frame.setObjectName("ActionBar")
        layout = QHBoxLayout(frame)
        layout.setContentsMargins(12, 10, 12, 10)
        layout.setSpacing(8)

        self.add_input = QLineEdit()
        self.add_input.setPlaceholderText("What needs to be done?")
        self.add_input.textChanged.connect(self._sync_add_button)
        self.add_input.returnPressed.connect(self.add_task)

        self.add_button = QPushButton("➕ Add Task")
        self.add_button.clicked.connect(self.add_task)

        layout.addWidget(self.add_input, 1)
        layout.addWidget(self.add_button)
        self._sync_add_button(self.add_input.text())
        return frame

    def _sync_add_button(self, text: str) -> None:
        self.add_button.setEnabled(bool(text.strip()))

    def add_task(self) -> None:
        if self.store.add(self.add_input.text()) is not None:
            self.add_input.clear()

    def _schedule_render(self, _snapshot: StoreSnapshot) -> None:
        # Item widgets may be the signal sender, so never rebuild them synchronously.
        if self._render_pending:
            return
        self._render_pending = True
        QTimer.singleShot(0, self._render_latest)

    def _render_latest(self) -> None:
        self._render_pending = False
        self.render(self.store.snapshot())

    def render(self, snapshot: StoreSnapshot) -> None:
        self.stats_label.setText(header_stats(snapshot))
        self.stats_label.setVisible(snapshot.total_count > 0)
        self.filter_bar.update_from(snapshot)
        self.progress.update_from(snapshot)

        edit_target = snapshot.edit_session.target_id if snapshot.edit_session else None
        list_key = (snapshot.visible_tasks, snapshot.view_filter, edit_target)
        if list_key == self._list_key:
            # Only the draft changed; the editor already shows it.
            return
        self._list_key = list_key
        self._render_tasks(snapshot)

    def _render_tasks(self, snapshot: StoreSnapshot) -> None:
        self.task_list.clear()
        has_tasks = bool(snapshot.visible_tasks)
        self.task_list.setVisible(has_tasks)
        self.empty_state.setVisible(not has_tasks)
        if not has_tasks:
            self.empty_state.show_for(snapshot.view_filter)
            return

        session = snapshot.edit_session
        editor_widget: TaskItemWidget | None = None
        for task in snapshot.visible_tasks:
            editing = session is not None and session.target_id == task.id
            widget = TaskItemWidget(
                task,
                session.draft_text if editing else None,
                self.store.toggle_complete,
                self.store.delete,
                self.store.start_edit,
                self.store.update_draft,
                self.store.save_edit,
                self.store.cancel_edit,
            )
            item = QListWidgetItem()
            item.setData(Qt.UserRole, task.id)
            self.task_list.addItem(item)
            self.task_list.setItemWidget(item, widget)
            item.setSizeHint(widget.sizeHint())
            if editing:
                editor_widget = widget

        self.task_list.sync_item_sizes()
        if editor_widget is not None:
            editor_widget.focus_editor()
        logger.debug(
            "Rendered %s of %s tasks (filter=%s)",
            len(snapshot.visible_tasks),
            snapshot.total_count,
            snapshot.view_filter.value,
        )

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self._unsubscribe()
        super().closeEvent(event)
