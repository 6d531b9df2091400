from __future__ import annotations

import sys
from PySide6.QtWidgets import QApplication

from pulsemon.config import get_engine_settings, get_paths
from pulsemon.logging_setup import setup_logging
from pulsemon.storage.db import SQLiteDatabase
from pulsemon.storage.migrations import apply_migrations
from pulsemon.ui.app_controller import AppController


def main() -> None:
    paths = get_paths()
    setup_logging(paths.logs_dir / "pulsemon.log", console="--console" in sys.argv)

    db = SQLiteDatabase(paths.db_path)
    apply_migrations(db)

    app = QApplication(sys.argv)
    app.setApplicationName("pulsemon")

    controller = AppController(db=db, paths=paths, engine_settings=get_engine_settings())
    app.aboutToQuit.connect(controller.engine.stop)
    controller.start()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
