from __future__ import annotations

from enum import Enum

from services.modes import QuantityMode


class ClickType(Enum):
    LEFT = "left"
    RIGHT = "right"
    SHIFT_LEFT = "shift_left"
    SHIFT_RIGHT = "shift_right"
    MIDDLE = "middle"
    DOUBLE_CLICK = "double_click"


class ClickLocation(Enum):
    MENU = "menu"
    PLAYER = "player"


def next_step(quantity: QuantityMode, click: ClickType) -> float | None:
    """Signed weight delta for a click, or None when the click neither lowers nor raises."""
    if click is ClickType.LEFT:
        return -quantity.fraction
    if click is ClickType.RIGHT:
        return quantity.fraction
    return None


def quantity_percent_text(quantity: QuantityMode) -> str:
    # 10.0 -> "10", 0.5 -> "0.5"
    return f"{quantity.percent:g}"
