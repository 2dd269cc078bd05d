from __future__ import annotations

from typing import Callable, Iterable

BaselineSupplier = Callable[[int], "float | None"]


def clamp_weight(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


class WeightStore:
    """Edited weights layered over the baseline weights of a drop source.

    A slot only has an entry once it has been edited; a missing entry means the
    baseline still applies.
    """

    def __init__(self) -> None:
        self._edited: dict[int, float] = {}

    def __len__(self) -> int:
        return len(self._edited)

    def is_edited(self, slot: int) -> bool:
        return slot in self._edited

    def get(self, slot: int, baseline: BaselineSupplier) -> float | None:
        if slot in self._edited:
            return self._edited[slot]
        return baseline(slot)

    def apply(self, slot: int, delta: float, baseline: BaselineSupplier) -> float:
        current = self.get(slot, baseline)
        if current is None:
            raise ValueError(f"No baseline weight for slot {slot}.")
        new_value = clamp_weight(current + delta)
        self._edited[slot] = new_value
        return new_value

    def resolve_all(self, slots: Iterable[int], baseline: BaselineSupplier) -> dict[int, float]:
        resolved: dict[int, float] = {}
        for slot in slots:
            weight = self.get(slot, baseline)
            if weight is None:
                raise ValueError(f"No baseline weight for editable slot {slot}.")
            resolved[slot] = weight
        return resolved

    def clear(self) -> None:
        self._edited.clear()
