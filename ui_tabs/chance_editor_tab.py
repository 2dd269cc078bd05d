from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from PySide6 import QtCore, QtWidgets

from services.chance_menu import ContainerChancesMenu
from services.drop_source import SlotResult
from services.drop_tables import create_drop_table, drop_source_for_table, get_drop_table, list_drop_tables
from services.grid_layout import ROW_SIZE, GridLayout
from services.items import DropItem, fetch_items, item_from_row
from services.modes import InteractionMode, QuantityMode
from services.quantity import ClickLocation, ClickType
from services.slot_render import (
    EMPTY_VISUAL,
    KIND_EMPTY,
    KIND_FILLER,
    KIND_ITEM,
    SlotVisual,
    format_weight,
)

_LOGGER = logging.getLogger(__name__)
if not _LOGGER.handlers:
    _log_path = Path(__file__).resolve().parent / "chance_editor_tab.log"
    _handler = logging.FileHandler(_log_path, encoding="utf-8")
    _handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    _LOGGER.addHandler(_handler)
    _LOGGER.setLevel(logging.INFO)

SLOT_STYLES = {
    "mode_toggle": "background-color: #5a4a1a; border: 1px solid #c9a227;",
    "quantity_toggle": "background-color: #2f4a5a; border: 1px solid #4f8cff;",
    KIND_FILLER: "background-color: #3a3c40; border: 1px solid #2b2d31;",
    KIND_EMPTY: "",
}
ANNOTATED_STYLE = "background-color: #24452d; border: 1px solid #3f9e5a;"


def click_type_for(button: QtCore.Qt.MouseButton, modifiers: QtCore.Qt.KeyboardModifier) -> ClickType | None:
    shift = bool(modifiers & QtCore.Qt.KeyboardModifier.ShiftModifier)
    if button == QtCore.Qt.MouseButton.LeftButton:
        return ClickType.SHIFT_LEFT if shift else ClickType.LEFT
    if button == QtCore.Qt.MouseButton.RightButton:
        return ClickType.SHIFT_RIGHT if shift else ClickType.RIGHT
    if button == QtCore.Qt.MouseButton.MiddleButton:
        return ClickType.MIDDLE
    return None


def item_label(item) -> str:
    if isinstance(item, DropItem):
        return item.label()
    return str(item)


class SlotButton(QtWidgets.QToolButton):
    slotClicked = QtCore.Signal(int, object)

    def __init__(self, slot: int, parent=None):
        super().__init__(parent)
        self.slot = slot
        self.setFixedSize(88, 56)
        self.setToolButtonStyle(QtCore.Qt.ToolButtonStyle.ToolButtonTextOnly)

    def mouseReleaseEvent(self, event) -> None:
        click = click_type_for(event.button(), event.modifiers())
        if click is not None and self.rect().contains(event.position().toPoint()):
            self.slotClicked.emit(self.slot, click)
        super().mouseReleaseEvent(event)

    def mouseDoubleClickEvent(self, event) -> None:
        self.slotClicked.emit(self.slot, ClickType.DOUBLE_CLICK)


class ChanceEditorTab(QtWidgets.QWidget):
    def __init__(self, app, parent=None, *, default_quantity: QuantityMode = QuantityMode.ONE):
        super().__init__(parent)
        self.app = app
        self.default_quantity = default_quantity
        self.menu: ContainerChancesMenu | None = None
        self.table_id: int | None = None
        self.live: dict[int, object] = {}
        self.cursor_item: DropItem | None = None
        self.slot_buttons: dict[int, SlotButton] = {}
        self.catalog: list = []

        root_layout = QtWidgets.QHBoxLayout(self)
        root_layout.setContentsMargins(8, 8, 8, 8)

        left = QtWidgets.QVBoxLayout()
        root_layout.addLayout(left, stretch=0)

        right = QtWidgets.QVBoxLayout()
        root_layout.addLayout(right, stretch=1)

        left.addWidget(QtWidgets.QLabel("Your items:"))
        self.palette = QtWidgets.QListWidget()
        self.palette.setMinimumWidth(220)
        self.palette.itemClicked.connect(self._on_palette_clicked)
        left.addWidget(self.palette, stretch=1)

        self.cursor_label = QtWidgets.QLabel("Holding: nothing")
        self.cursor_label.setStyleSheet("color: #666;")
        left.addWidget(self.cursor_label)

        table_row = QtWidgets.QHBoxLayout()
        right.addLayout(table_row)
        table_row.addWidget(QtWidgets.QLabel("Drop table:"))
        self.table_selector = QtWidgets.QComboBox()
        self.table_selector.currentIndexChanged.connect(self._on_table_changed)
        table_row.addWidget(self.table_selector)
        self.btn_new_table = QtWidgets.QPushButton("New…")
        self.btn_new_table.clicked.connect(self._prompt_new_table)
        table_row.addWidget(self.btn_new_table)
        table_row.addStretch(1)

        self.title_label = QtWidgets.QLabel("")
        font = self.title_label.font()
        font.setBold(True)
        font.setPointSize(max(11, font.pointSize()))
        self.title_label.setFont(font)
        right.addWidget(self.title_label)

        self.grid_host = QtWidgets.QWidget()
        self.grid = QtWidgets.QGridLayout(self.grid_host)
        self.grid.setSpacing(2)
        right.addWidget(self.grid_host)

        self.info_label = QtWidgets.QLabel("")
        self.info_label.setStyleSheet("color: #666;")
        right.addWidget(self.info_label)

        btns = QtWidgets.QHBoxLayout()
        right.addLayout(btns)
        self.btn_save = QtWidgets.QPushButton("Save")
        self.btn_save.clicked.connect(self.save)
        btns.addWidget(self.btn_save)
        btns.addStretch(1)
        right.addStretch(1)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def render_tables(self) -> None:
        tables = list_drop_tables(self.app.conn)
        self.table_selector.blockSignals(True)
        self.table_selector.clear()
        for table in tables:
            self.table_selector.addItem(str(table["name"]), int(table["id"]))
        self.table_selector.blockSignals(False)

        self.catalog = fetch_items(self.app.conn)
        self.palette.clear()
        for row in self.catalog:
            entry = QtWidgets.QListWidgetItem(row["name"])
            entry.setData(QtCore.Qt.ItemDataRole.UserRole, row["key"])
            self.palette.addItem(entry)

        if tables:
            self.open_table(int(tables[0]["id"]))

    def open_table(self, table_id: int) -> None:
        self.close_menu()
        source = drop_source_for_table(self.app.conn, table_id, on_commit=self._on_committed)
        table = get_drop_table(self.app.conn, table_id)
        quantity = self.default_quantity
        if quantity.is_fractional and not source.allow_fractional_quantities:
            quantity = QuantityMode.ONE
        self.table_id = table_id
        self.menu = ContainerChancesMenu(
            source,
            self,
            layout=GridLayout(rows=int(table["rows"])),
            quantity=quantity,
        )
        self._build_grid(self.menu.layout)
        self.set_title(self.menu.title())
        self.redraw()

        idx = self.table_selector.findData(table_id)
        if idx >= 0 and idx != self.table_selector.currentIndex():
            self.table_selector.blockSignals(True)
            self.table_selector.setCurrentIndex(idx)
            self.table_selector.blockSignals(False)

    def _build_grid(self, layout: GridLayout) -> None:
        for button in self.slot_buttons.values():
            self.grid.removeWidget(button)
            button.deleteLater()
        self.slot_buttons = {}
        for slot in range(layout.size):
            button = SlotButton(slot, self.grid_host)
            button.slotClicked.connect(self.click_slot)
            self.grid.addWidget(button, slot // ROW_SIZE, slot % ROW_SIZE)
            self.slot_buttons[slot] = button

    # ------------------------------------------------------------------
    # GridView
    # ------------------------------------------------------------------

    def live_item_at(self, slot: int):
        return self.live.get(slot)

    def set_title(self, title: str) -> None:
        self.title_label.setText(title)

    def redraw(self) -> None:
        if self.menu is None:
            return
        self.live = {}
        for slot in self.slot_buttons:
            visual = self.menu.render_slot(slot)
            if visual.kind == KIND_ITEM and slot < self.menu.layout.bottom_row_start:
                self.live[slot] = visual.item
            self._paint(slot, visual)
        self.info_label.setText("\n".join(self.menu.info_lines()))

    def redraw_slot(self, slot: int) -> None:
        if self.menu is None or slot not in self.slot_buttons:
            return
        self._paint(slot, self.menu.render_slot(slot))

    def _paint(self, slot: int, visual: SlotVisual) -> None:
        button = self.slot_buttons[slot]
        if visual.kind == KIND_ITEM:
            text = item_label(visual.item)
            if visual.annotated:
                text = f"{text}\n{format_weight(visual.weight)}"
            button.setText(text)
            button.setStyleSheet(ANNOTATED_STYLE if visual.annotated else "")
            button.setToolTip("\n".join([item_label(visual.item), *visual.lore]).strip())
            return
        button.setText(visual.title.strip())
        button.setStyleSheet(SLOT_STYLES.get(visual.kind, ""))
        button.setToolTip("\n".join([visual.title, *visual.lore]).strip())

    # ------------------------------------------------------------------
    # Clicking
    # ------------------------------------------------------------------

    def click_slot(self, slot: int, click: ClickType) -> None:
        if self.menu is None:
            return
        clicked = self.live.get(slot) if self.menu.mode is InteractionMode.PLACE else self.menu.source.item_at(slot)
        allowed = self.menu.dispatch_click(ClickLocation.MENU, slot, click, clicked, self.cursor_item)
        if not allowed:
            return

        # Swap the held item with the slot content.
        held, self.cursor_item = self.cursor_item, clicked
        if held is None:
            self.live.pop(slot, None)
            self._paint(slot, EMPTY_VISUAL)
        else:
            self.live[slot] = held
            self._paint(slot, SlotVisual(KIND_ITEM, item=held))
        self._refresh_cursor_label()

    def _on_palette_clicked(self, entry: QtWidgets.QListWidgetItem) -> None:
        key = entry.data(QtCore.Qt.ItemDataRole.UserRole)
        row = next((r for r in self.catalog if r["key"] == key), None)
        if row is None:
            return
        self.pick_up(item_from_row(row))

    def pick_up(self, item: DropItem | None) -> bool:
        if self.menu is None:
            return False
        if not self.menu.dispatch_click(ClickLocation.PLAYER, -1, ClickType.LEFT, item, self.cursor_item):
            return False
        self.cursor_item = item
        self._refresh_cursor_label()
        return True

    def _refresh_cursor_label(self) -> None:
        held = item_label(self.cursor_item) if self.cursor_item is not None else "nothing"
        self.cursor_label.setText(f"Holding: {held}")

    # ------------------------------------------------------------------
    # Saving
    # ------------------------------------------------------------------

    def save(self) -> None:
        if self.menu is None:
            return
        try:
            self.menu.on_close()
        except sqlite3.Error as exc:
            _LOGGER.exception("Failed to save drop table %s", self.table_id)
            self._status(f"Save failed: {exc}")
            return
        self.redraw()

    def close_menu(self) -> None:
        if self.menu is None:
            return
        try:
            self.menu.on_close()
        except sqlite3.Error as exc:
            _LOGGER.exception("Failed to save drop table %s on close", self.table_id)
            self._status(f"Save failed: {exc}")
        self.menu = None

    def _on_committed(self, results: list[SlotResult]) -> None:
        filled = sum(1 for r in results if r.item is not None)
        self._status(f"Saved {filled} drops ({len(results)} slots).")

    def _on_table_changed(self, _index: int) -> None:
        table_id = self.table_selector.currentData()
        if table_id is None or int(table_id) == self.table_id:
            return
        self.open_table(int(table_id))

    def _prompt_new_table(self) -> None:
        name, ok = QtWidgets.QInputDialog.getText(self, "New Drop Table", "Name:")
        if not ok or not name.strip():
            return
        try:
            table_id = create_drop_table(
                self.app.conn,
                name=name,
                rows=getattr(self.app, "default_rows", 4),
            )
        except (ValueError, sqlite3.IntegrityError) as exc:
            QtWidgets.QMessageBox.warning(self, "New Drop Table", str(exc))
            return
        self.table_selector.blockSignals(True)
        self.table_selector.addItem(name.strip(), table_id)
        self.table_selector.blockSignals(False)
        self.open_table(table_id)

    def _status(self, message: str) -> None:
        status_bar = getattr(self.app, "status_bar", None)
        if status_bar is not None:
            status_bar.showMessage(message)
