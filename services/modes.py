from __future__ import annotations

from enum import Enum
from typing import Sequence, TypeVar

T = TypeVar("T")


def next_in_cycle(value: T, values: Sequence[T]) -> T:
    """Return the entry after ``value`` in ``values``, wrapping around at the end."""
    if not values:
        raise ValueError("Cannot cycle through an empty sequence.")
    idx = list(values).index(value)
    return values[(idx + 1) % len(values)]


class InteractionMode(Enum):
    PLACE = "Items"
    EDIT_WEIGHT = "Drop Chances"

    @property
    def key(self) -> str:
        return self.value

    def next(self) -> "InteractionMode":
        return next_in_cycle(self, list(InteractionMode))


class QuantityMode(Enum):
    POINT_ONE = 0.1
    POINT_FIVE = 0.5
    ONE = 1.0
    FIVE = 5.0
    TEN = 10.0
    TWENTY = 20.0
    FIFTY = 50.0

    @property
    def percent(self) -> float:
        return float(self.value)

    @property
    def fraction(self) -> float:
        return self.percent / 100.0

    @property
    def is_fractional(self) -> bool:
        return self.percent < 1.0


def available_quantities(allow_fractional: bool) -> list[QuantityMode]:
    return [q for q in QuantityMode if allow_fractional or not q.is_fractional]


class ModeController:
    """Holds the active interaction mode and quantity step of one editor."""

    def __init__(
        self,
        *,
        allow_fractional: bool = False,
        mode: InteractionMode = InteractionMode.PLACE,
        quantity: QuantityMode = QuantityMode.ONE,
    ):
        self.allow_fractional = bool(allow_fractional)
        if quantity not in available_quantities(self.allow_fractional):
            raise ValueError(f"Quantity {quantity.name} needs fractional quantities enabled.")
        self.mode = mode
        self.quantity = quantity

    @property
    def editing_weights(self) -> bool:
        return self.mode is InteractionMode.EDIT_WEIGHT

    def advance_mode(self) -> InteractionMode:
        self.mode = self.mode.next()
        return self.mode

    def advance_quantity(self) -> QuantityMode:
        self.quantity = next_in_cycle(self.quantity, available_quantities(self.allow_fractional))
        return self.quantity

    def title(self) -> str:
        return f"Editing {self.mode.key}"
