#!/usr/bin/env python3
import logging
import sqlite3
from pathlib import Path

from PySide6 import QtWidgets

from services.db import connect, get_setting, set_setting
from services.editor_config import EditorConfig, config_path, load_editor_config
from services.items import add_item
from ui_constants import SETTINGS_LAST_TABLE_ID
from ui_tabs.chance_editor_tab import ChanceEditorTab

_LOGGER = logging.getLogger(__name__)


class App(QtWidgets.QMainWindow):
    def __init__(self, config: EditorConfig | None = None):
        super().__init__()
        self.resize(1100, 700)

        self.config = config or load_editor_config(self._config_path())
        logging.getLogger("services").setLevel(self.config.level)
        self.default_rows = self.config.default_rows
        self.db_path = Path(self.config.db_path)
        self.conn: sqlite3.Connection = connect(self.db_path)

        self.status_bar = self.statusBar()
        self.status_bar.showMessage("Ready")

        self._build_menu()
        self._update_title()

        self.editor = ChanceEditorTab(self, default_quantity=self.config.quantity)
        self.setCentralWidget(self.editor)
        self.editor.render_tables()
        self._restore_last_table()

    def _config_path(self) -> Path:
        try:
            here = Path(__file__).resolve().parent
            return config_path(here)
        except Exception:
            return config_path(Path("."))

    def _restore_last_table(self) -> None:
        raw = get_setting(self.conn, SETTINGS_LAST_TABLE_ID)
        if not raw or not raw.isdigit():
            return
        idx = self.editor.table_selector.findData(int(raw))
        if idx >= 0:
            self.editor.open_table(int(raw))

    # ---------- Menu / DB handling ----------
    def _build_menu(self) -> None:
        menubar = self.menuBar()

        file_menu = menubar.addMenu("File")
        file_menu.addAction("Open DB…", self.menu_open_db)
        file_menu.addSeparator()
        file_menu.addAction("Quit", self.close)

        items_menu = menubar.addMenu("Items")
        items_menu.addAction("Add Item…", self.menu_add_item)

    def _update_title(self) -> None:
        try:
            name = self.db_path.name
        except Exception:
            name = "(unknown)"
        self.setWindowTitle(f"Loot Container Editor — {name}")

    def _remember_table(self) -> None:
        if self.editor.table_id is not None:
            set_setting(self.conn, SETTINGS_LAST_TABLE_ID, str(self.editor.table_id))

    def closeEvent(self, event) -> None:
        try:
            self._remember_table()
            self.editor.close_menu()
            self.conn.close()
        finally:
            event.accept()

    def menu_open_db(self) -> None:
        path, _ = QtWidgets.QFileDialog.getOpenFileName(
            self,
            "Open Drop Table DB",
            str(self.db_path),
            "SQLite DB (*.db);;All files (*)",
        )
        if not path:
            return
        self._remember_table()
        self.editor.close_menu()
        self.conn.close()
        self.db_path = Path(path)
        self.conn = connect(self.db_path)
        self._update_title()
        self.editor.render_tables()
        self._restore_last_table()
        self.status_bar.showMessage(f"Opened DB: {self.db_path.name}")

    def menu_add_item(self) -> None:
        key, ok = QtWidgets.QInputDialog.getText(self, "Add Item", "Item key (e.g. minecraft:diamond):")
        if not ok or not key.strip():
            return
        name, ok = QtWidgets.QInputDialog.getText(self, "Add Item", "Display name:")
        if not ok:
            return
        try:
            add_item(self.conn, key, name)
        except sqlite3.IntegrityError:
            QtWidgets.QMessageBox.warning(self, "Add Item", f"An item with key '{key.strip()}' already exists.")
            return
        _LOGGER.info("Added item %s", key.strip())
        self.editor.render_tables()
        self.status_bar.showMessage(f"Added item: {name.strip() or key.strip()}")
