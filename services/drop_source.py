from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, NamedTuple, Optional, Protocol

DEFAULT_CHANCE_LORE = (
    "",
    "Drop chance: {dropChance}",
    "",
    "   (Mouse click)",
    "  < -{quantity}%    +{quantity}% >",
)


def default_chance_lore(_item: Any) -> list[str]:
    return list(DEFAULT_CHANCE_LORE)


class SlotResult(NamedTuple):
    slot: int
    item: Any
    weight: float


@dataclass
class DropSource:
    """Callbacks a chance container reads its drops from and saves them to.

    ``baseline_weight`` must return a weight for every editable slot.
    ``can_edit_gesture`` receives ``(location, slot, clicked, cursor)`` and
    defaults to ``can_edit(slot)``.
    """

    baseline_weight: Callable[[int], Optional[float]]
    item_at: Callable[[int], Any]
    commit: Callable[[list[SlotResult]], None]
    can_edit: Callable[[int], bool] = lambda _slot: True
    can_edit_gesture: Optional[Callable[[Any, int, Any, Any], bool]] = None
    allow_fractional_quantities: bool = False
    chance_lore: Callable[[Any], list[str]] = default_chance_lore

    def can_edit_with(self, location: Any, slot: int, clicked: Any, cursor: Any) -> bool:
        if self.can_edit_gesture is not None:
            return bool(self.can_edit_gesture(location, slot, clicked, cursor))
        return bool(self.can_edit(slot))


class GridView(Protocol):
    """The host grid a chance container is displayed in."""

    def live_item_at(self, slot: int) -> Any: ...

    def set_title(self, title: str) -> None: ...

    def redraw(self) -> None: ...

    def redraw_slot(self, slot: int) -> None: ...


def fill_placeholders(lines: list[str], **values: str) -> list[str]:
    out = []
    for line in lines:
        for key, value in values.items():
            line = line.replace("{" + key + "}", value)
        out.append(line)
    return out
