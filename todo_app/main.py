from __future__ import annotations

import logging
import sys
from pathlib import Path

from PySide6.QtGui import QColor, QFont, QPalette
from PySide6.QtWidgets import QApplication, QMessageBox, QStyleFactory

from todo_app.config import PROJECT_ROOT, SETTINGS
from todo_app.infra.logging import setup_logging
from todo_app.services.task_store import TaskStore
from todo_app.ui.main_window import MainWindow

logger = logging.getLogger(__name__)


def _apply_dark_palette(app: QApplication) -> None:
    palette = QPalette()
    palette.setColor(QPalette.Window, QColor("#0F172A"))
    palette.setColor(QPalette.WindowText, QColor("#E6EDF3"))
    palette.setColor(QPalette.Base, QColor("#111827"))
    palette.setColor(QPalette.AlternateBase, QColor("#1B2230"))
    palette.setColor(QPalette.Text, QColor("#E6EDF3"))
    palette.setColor(QPalette.Button, QColor("#202A3B"))
    palette.setColor(QPalette.ButtonText, QColor("#E6EDF3"))
    palette.setColor(QPalette.ToolTipBase, QColor("#1B2230"))
    palette.setColor(QPalette.ToolTipText, QColor("#E6EDF3"))
    palette.setColor(QPalette.Highlight, QColor("#667EEA"))
    palette.setColor(QPalette.HighlightedText, QColor("#FFFFFF"))
    app.setPalette(palette)


def _find_qss_path() -> Path | None:
    candidates = [
        Path(__file__).resolve().parent / "ui" / "styles.qss",
        PROJECT_ROOT / "todo_app" / "ui" / "styles.qss",
    ]

    if getattr(sys, "frozen", False):
        meipass = getattr(sys, "_MEIPASS", None)
        if meipass:
            candidates.append(Path(meipass) / "todo_app" / "ui" / "styles.qss")

    for path in candidates:
        if path.exists():
            return path
    return None


def load_styles(app: QApplication) -> None:
    qss_path = _find_qss_path()
    if not qss_path:
        logger.warning("Stylesheet not found, using the plain palette")
        return
    app.setStyleSheet(qss_path.read_text(encoding="utf-8"))


def build_store() -> TaskStore:
    if SETTINGS.seed_demo_tasks:
        return TaskStore.with_demo_tasks()
    return TaskStore()


def main() -> None:
    setup_logging()
    app = QApplication(sys.argv)
    try:
        store = build_store()
    except Exception as exc:  # noqa: BLE001
        logger.exception("Failed to initialise the task store")
        QMessageBox.critical(None, "Startup error", str(exc))
        return

    app.setStyle(QStyleFactory.create("Fusion"))
    _apply_dark_palette(app)
    app.setFont(QFont("Segoe UI", 10))
    load_styles(app)

    window = MainWindow(store)
    window.show()
    logger.info("Started with %s tasks", store.total_count)
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
