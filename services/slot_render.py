from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from services.drop_source import DropSource, fill_placeholders
from services.grid_layout import GridLayout
from services.modes import InteractionMode, ModeController
from services.quantity import quantity_percent_text
from services.weights import WeightStore

KIND_MODE_TOGGLE = "mode_toggle"
KIND_QUANTITY_TOGGLE = "quantity_toggle"
KIND_ITEM = "item"
KIND_FILLER = "filler"
KIND_EMPTY = "empty"


@dataclass(frozen=True)
class SlotVisual:
    kind: str
    title: str = ""
    lore: list[str] = field(default_factory=list)
    item: Any = None
    icon: str | None = None
    glow: bool = False
    annotated: bool = False
    weight: float | None = None


EMPTY_VISUAL = SlotVisual(KIND_EMPTY)
FILLER_VISUAL = SlotVisual(KIND_FILLER, title=" ", icon="gray_stained_glass_pane")


def format_weight(weight: float) -> str:
    return f"{100 * weight:.2f}%"


class SlotRenderer:
    """Decides what each slot shows; never changes editor state."""

    def __init__(
        self,
        layout: GridLayout,
        controller: ModeController,
        store: WeightStore,
        source: DropSource,
    ):
        self.layout = layout
        self.controller = controller
        self.store = store
        self.source = source

    def shows_quantity_toggle(self) -> bool:
        return self.controller.editing_weights

    def is_chance_slot(self, slot: int) -> bool:
        return slot < self.layout.bottom_row_start and bool(self.source.can_edit(slot))

    def render(self, slot: int) -> SlotVisual:
        if slot == self.layout.mode_toggle_slot:
            return self.mode_toggle_visual()

        if slot == self.layout.quantity_toggle_slot and self.shows_quantity_toggle():
            return self.quantity_toggle_visual()

        item = self.source.item_at(slot)
        if item is not None:
            if self.controller.mode is InteractionMode.PLACE or not self.is_chance_slot(slot):
                return SlotVisual(KIND_ITEM, item=item)

            weight = self.store.get(slot, self.source.baseline_weight)
            if weight is None:
                raise ValueError(f"No drop chance for editable slot {slot} holding {item!r}.")
            lore = fill_placeholders(
                list(self.source.chance_lore(item)),
                dropChance=format_weight(weight),
                quantity=quantity_percent_text(self.controller.quantity),
            )
            return SlotVisual(KIND_ITEM, item=item, lore=lore, annotated=True, weight=weight)

        if self.layout.in_bottom_row(slot):
            return FILLER_VISUAL

        return EMPTY_VISUAL

    def mode_toggle_visual(self) -> SlotVisual:
        mode = self.controller.mode
        chances = mode is InteractionMode.EDIT_WEIGHT
        return SlotVisual(
            KIND_MODE_TOGGLE,
            title=f"Editing {mode.key}",
            lore=["", f"Click to edit {mode.next().key.lower()}."],
            icon="gold_nugget" if chances else "chest",
            glow=chances,
        )

    def quantity_toggle_visual(self) -> SlotVisual:
        text = quantity_percent_text(self.controller.quantity)
        return SlotVisual(
            KIND_QUANTITY_TOGGLE,
            title=f"Edit quantity: {text}%",
            lore=["", "Click to change the step", "used for drop chances."],
            icon="string",
        )
