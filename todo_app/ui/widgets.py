from __future__ import annotations

from PySide6.QtCore import QSize, Qt, Signal
from PySide6.QtWidgets import (
    QAbstractItemView,
    QButtonGroup,
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QProgressBar,
    QPushButton,
    QSizePolicy,
    QVBoxLayout,
    QWidget,
)

from todo_app.domain.entities import Task
from todo_app.domain.enums import Priority, ViewFilter
from todo_app.services.task_store import StoreSnapshot

from .formatting import (
    CELEBRATION,
    EMPTY_STATES,
    PRIORITY_LABELS,
    filter_button_text,
    progress_counters,
    progress_percent,
    task_dates,
    toggle_all_text,
)

PRIORITY_COLORS = {
    Priority.LOW: "#7CC4A1",
    Priority.MEDIUM: "#E0B25B",
    Priority.HIGH: "#E57B63",
}


class DraftLineEdit(QLineEdit):
    cancelled = Signal()

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        if event.key() == Qt.Key_Escape:
            self.cancelled.emit()
            return
        super().keyPressEvent(event)


class TaskLabel(QLabel):
    doubleClicked = Signal()

    def mouseDoubleClickEvent(self, event) -> None:  # type: ignore[override]
        self.doubleClicked.emit()
        super().mouseDoubleClickEvent(event)


def _icon_button(text: str, tooltip: str, variant: str) -> QPushButton:
    button = QPushButton(text)
    button.setToolTip(tooltip)
    button.setProperty("variant", variant)
    # Clicking must not take focus from the inline editor.
    button.setFocusPolicy(Qt.NoFocus)
    button.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Fixed)
    return button


class TaskItemWidget(QWidget):
    def __init__(
        self,
        task: Task,
        draft_text: str | None,
        on_toggle,
        on_delete,
        on_start_edit,
        on_draft_changed,
        on_save,
        on_cancel,
        parent=None,
    ):
        super().__init__(parent)
        self.task = task
        self.editor: DraftLineEdit | None = None
        self.setObjectName("TaskCard")
        self.setAttribute(Qt.WA_StyledBackground, True)
        self.setProperty("completed", task.completed)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)
        self.setMinimumHeight(64)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(12, 8, 12, 8)
        layout.setSpacing(12)

        check = QPushButton("✓" if task.completed else "")
        check.setObjectName("CheckButton")
        check.setProperty("completed", task.completed)
        check.setFixedSize(28, 28)
        check.setFocusPolicy(Qt.NoFocus)
        check.clicked.connect(lambda: on_toggle(task.id))
        layout.addWidget(check, 0, Qt.AlignTop)

        content = QVBoxLayout()
        content.setSpacing(4)
        if draft_text is not None:
            self.editor = DraftLineEdit(draft_text)
            self.editor.setObjectName("EditInput")
            self.editor.textEdited.connect(on_draft_changed)
            self.editor.editingFinished.connect(on_save)
            self.editor.cancelled.connect(on_cancel)
            content.addWidget(self.editor)
        else:
            title = TaskLabel(task.text)
            title.setProperty("class", "task-title")
            title.setProperty("completed", task.completed)
            title.setWordWrap(True)
            title.setMinimumWidth(0)
            title.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Preferred)
            title.setToolTip("Double-click to edit")
            if not task.completed:
                title.doubleClicked.connect(lambda: on_start_edit(task.id))
            content.addWidget(title)

            meta = QLabel(task_dates(task))
            meta.setProperty("class", "task-meta")
            content.addWidget(meta)
        layout.addLayout(content, 1)

        priority = QLabel(PRIORITY_LABELS[task.priority])
        priority.setProperty("class", "task-priority")
        priority.setStyleSheet(f"background-color: {PRIORITY_COLORS[task.priority]};")
        priority.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Fixed)
        layout.addWidget(priority, 0, Qt.AlignTop)

        if self.editor is not None:
            save = _icon_button("💾", "Save changes", "secondary")
            save.clicked.connect(on_save)
            cancel = _icon_button("❌", "Cancel editing", "ghost")
            cancel.clicked.connect(on_cancel)
            layout.addWidget(save, 0, Qt.AlignTop)
            layout.addWidget(cancel, 0, Qt.AlignTop)
        else:
            if not task.completed:
                edit = _icon_button("✏️", "Edit task", "ghost")
                edit.clicked.connect(lambda: on_start_edit(task.id))
                layout.addWidget(edit, 0, Qt.AlignTop)
            delete = _icon_button("🗑️", "Delete task", "danger")
            delete.clicked.connect(lambda: on_delete(task.id))
            layout.addWidget(delete, 0, Qt.AlignTop)

    def focus_editor(self) -> None:
        if self.editor is not None:
            self.editor.setFocus()
            self.editor.end(False)


class TaskListWidget(QListWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self._h_margin = 12
        self._v_margin = 8
        self.setSelectionMode(QAbstractItemView.NoSelection)
        self.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.setFocusPolicy(Qt.NoFocus)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self._update_viewport_margins()

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self.sync_item_sizes()

    def _update_viewport_margins(self) -> None:
        scrollbar_width = self.verticalScrollBar().width() or self.verticalScrollBar().sizeHint().width()
        right_margin = self._h_margin + (scrollbar_width if self.verticalScrollBar().isVisible() else 0)
        self.setViewportMargins(self._h_margin, self._v_margin, right_margin, self._v_margin)

    def sync_item_sizes(self) -> None:
        self._update_viewport_margins()
        viewport_width = self.viewport().width()
        for index in range(self.count()):
            item = self.item(index)
            widget = self.itemWidget(item)
            if widget:
                widget.setMinimumWidth(viewport_width)
                widget.setMaximumWidth(viewport_width)
                widget.adjustSize()
                hint = widget.sizeHint()
                item.setSizeHint(QSize(viewport_width, hint.height()))
                widget.resize(viewport_width, hint.height())


class FilterBar(QFrame):
    def __init__(self, on_filter, on_toggle_all, on_clear_completed, parent=None):
        super().__init__(parent)
        self.setObjectName("FilterBar")
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(8)

        self._group = QButtonGroup(self)
        self._group.setExclusive(True)
        self._buttons: dict[ViewFilter, QPushButton] = {}
        for view_filter in ViewFilter:
            button = QPushButton()
            button.setCheckable(True)
            button.setProperty("variant", "filter")
            button.clicked.connect(lambda _checked=False, f=view_filter: on_filter(f))
            self._group.addButton(button)
            self._buttons[view_filter] = button
            layout.addWidget(button)

        layout.addStretch()

        self.toggle_all_button = QPushButton()
        self.toggle_all_button.setProperty("variant", "success")
        self.toggle_all_button.clicked.connect(on_toggle_all)

        self.clear_button = QPushButton("🧹 Clear")
        self.clear_button.setToolTip("Clear completed tasks")
        self.clear_button.setProperty("variant", "danger")
        self.clear_button.clicked.connect(on_clear_completed)

        layout.addWidget(self.toggle_all_button)
        layout.addWidget(self.clear_button)

    def update_from(self, snapshot: StoreSnapshot) -> None:
        self.setVisible(snapshot.total_count > 0)
        for view_filter, button in self._buttons.items():
            button.setText(filter_button_text(view_filter, snapshot))
            button.setChecked(view_filter is snapshot.view_filter)
        caption, tooltip = toggle_all_text(snapshot.all_completed)
        self.toggle_all_button.setText(caption)
        self.toggle_all_button.setToolTip(tooltip)
        self.clear_button.setVisible(snapshot.completed_count > 0)


class EmptyState(QFrame):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("EmptyState")
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 32, 12, 32)
        self.icon = QLabel()
        self.icon.setObjectName("EmptyIcon")
        self.icon.setAlignment(Qt.AlignCenter)
        self.message = QLabel()
        self.message.setProperty("class", "task-meta")
        self.message.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.icon)
        layout.addWidget(self.message)

    def show_for(self, view_filter: ViewFilter) -> None:
        icon, message = EMPTY_STATES[view_filter]
        self.icon.setText(icon)
        self.message.setText(message)


class ProgressPanel(QFrame):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("ProgressPanel")
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 10, 12, 10)
        layout.setSpacing(8)

        counters = QHBoxLayout()
        self._counters = [QLabel() for _ in range(3)]
        for label in self._counters:
            label.setProperty("class", "stats")
            counters.addWidget(label)
            counters.addStretch()

        self.bar = QProgressBar()
        self.bar.setObjectName("TaskProgress")
        self.bar.setRange(0, 100)
        self.bar.setTextVisible(False)

        self.celebration = QLabel(CELEBRATION)
        self.celebration.setObjectName("Celebration")
        self.celebration.setAlignment(Qt.AlignCenter)

        layout.addLayout(counters)
        layout.addWidget(self.bar)
        layout.addWidget(self.celebration)

    def update_from(self, snapshot: StoreSnapshot) -> None:
        self.setVisible(snapshot.total_count > 0)
        for label, text in zip(self._counters, progress_counters(snapshot)):
            label.setText(text)
        self.bar.setValue(progress_percent(snapshot))
        self.bar.setProperty("done", snapshot.all_completed)
        self.bar.style().unpolish(self.bar)
        self.bar.style().polish(self.bar)
        self.celebration.setVisible(snapshot.all_completed)
