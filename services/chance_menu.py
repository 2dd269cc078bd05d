"""Container editor that places drop items and tunes their drop chances.

The menu has two modes. In *Items* mode the host grid lets the operator move
items in and out of the content slots. In *Drop Chances* mode the grid is
frozen and left/right clicks lower/raise the chance of the clicked slot by the
active quantity step. Edits live in a :class:`WeightStore` until the menu is
closed or the mode is switched; both paths commit every editable slot once
through :meth:`ContainerChancesMenu.finalize_and_commit`.
"""

from __future__ import annotations

import logging
from typing import Any

from services.drop_source import DropSource, GridView, SlotResult
from services.grid_layout import GridLayout
from services.modes import InteractionMode, ModeController, QuantityMode
from services.quantity import ClickLocation, ClickType, next_step, quantity_percent_text
from services.slot_render import SlotRenderer, SlotVisual
from services.weights import WeightStore

_LOGGER = logging.getLogger(__name__)

PLACE_INFO = [
    "This menu allows you to drop",
    "items to this container.",
    "",
    "Simply drag and drop items",
    "from your inventory here.",
]

EDIT_WEIGHT_INFO = [
    "This menu allows you to edit drop",
    "chances for items in this container.",
    "",
    "Right or left click on items",
    "to adjust their drop chance.",
]


class ContainerChancesMenu:
    def __init__(
        self,
        source: DropSource,
        view: GridView,
        *,
        layout: GridLayout | None = None,
        quantity: QuantityMode = QuantityMode.ONE,
    ):
        self.source = source
        self.view = view
        self.layout = layout or GridLayout()
        self.controller = ModeController(
            allow_fractional=source.allow_fractional_quantities,
            quantity=quantity,
        )
        self.store = WeightStore()
        self.renderer = SlotRenderer(self.layout, self.controller, self.store, source)

    @property
    def mode(self) -> InteractionMode:
        return self.controller.mode

    @property
    def quantity(self) -> QuantityMode:
        return self.controller.quantity

    def title(self) -> str:
        return self.controller.title()

    def info_lines(self) -> list[str]:
        if self.controller.mode is InteractionMode.PLACE:
            return list(PLACE_INFO)
        return list(EDIT_WEIGHT_INFO)

    def quantity_text(self) -> str:
        return f"{quantity_percent_text(self.controller.quantity)}%"

    def render_slot(self, slot: int) -> SlotVisual:
        return self.renderer.render(slot)

    # ------------------------------------------------------------------
    # Modes
    # ------------------------------------------------------------------

    def advance_mode(self) -> InteractionMode:
        # Save what the grid holds right now, then reopen in the next mode.
        self.finalize_and_commit()
        self.store.clear()
        mode = self.controller.advance_mode()
        _LOGGER.info("Switched chance menu to %s mode", mode.key)
        self.view.set_title(self.controller.title())
        self.view.redraw()
        return mode

    def advance_quantity(self) -> QuantityMode:
        quantity = self.controller.advance_quantity()
        self.view.redraw_slot(self.layout.quantity_toggle_slot)
        return quantity

    # ------------------------------------------------------------------
    # Clicking
    # ------------------------------------------------------------------

    def is_gesture_allowed(self, location: ClickLocation, slot: int, clicked: Any, cursor: Any) -> bool:
        if self.controller.editing_weights:
            return False

        if location is not ClickLocation.MENU:
            return True

        if not self.source.can_edit_with(location, slot, clicked, cursor):
            return False

        return slot < self.layout.bottom_row_start

    def on_gesture(self, slot: int, click: ClickType, clicked: Any) -> float | None:
        """Apply one chance step to ``slot``; returns the new weight or None when nothing changed."""
        if not (self.controller.editing_weights and self.renderer.is_chance_slot(slot)):
            return None

        if clicked is None:
            _LOGGER.error("Chance click on slot %s without an item", slot)
            raise RuntimeError(f"Should have not handled a chance click for a missing item at slot {slot}")

        step = next_step(self.controller.quantity, click)
        if step is None:
            return None

        weight = self.store.apply(slot, step, self.source.baseline_weight)
        self.view.redraw_slot(slot)
        return weight

    def on_single_click(self, slot: int, clicked: Any) -> None:
        raise NotImplementedError(f"unsupported call: single-item click at slot {slot}")

    def dispatch_click(
        self,
        location: ClickLocation,
        slot: int,
        click: ClickType,
        clicked: Any,
        cursor: Any = None,
    ) -> bool:
        """Route a host click; returns True when the host may move items itself."""
        if location is ClickLocation.MENU:
            if slot == self.layout.mode_toggle_slot:
                self.advance_mode()
                return False
            if slot == self.layout.quantity_toggle_slot and self.renderer.shows_quantity_toggle():
                self.advance_quantity()
                return False

        if self.is_gesture_allowed(location, slot, clicked, cursor):
            return True

        if location is ClickLocation.MENU and clicked is not None:
            self.on_gesture(slot, click, clicked)
        return False

    # ------------------------------------------------------------------
    # Saving
    # ------------------------------------------------------------------

    def collect_results(self) -> list[SlotResult]:
        place_mode = self.controller.mode is InteractionMode.PLACE
        slots = [slot for slot in self.layout.content_slots() if self.source.can_edit(slot)]
        weights = self.store.resolve_all(slots, self.source.baseline_weight)

        results: list[SlotResult] = []
        for slot in slots:
            item = self.view.live_item_at(slot) if place_mode else self.source.item_at(slot)
            results.append(SlotResult(slot, item, weights[slot]))
        return results

    def finalize_and_commit(self) -> list[SlotResult]:
        results = self.collect_results()
        self.source.commit(results)
        _LOGGER.info(
            "Committed %d slots in %s mode (%d edited chances)",
            len(results),
            self.controller.mode.key,
            len(self.store),
        )
        return results

    def on_close(self) -> list[SlotResult]:
        results = self.finalize_and_commit()
        self.store.clear()
        return results
