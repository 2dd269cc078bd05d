from __future__ import annotations

from dataclasses import dataclass

ROW_SIZE = 9


@dataclass(frozen=True)
class GridLayout:
    """Slot geometry of a chance container; the last row is the control bar."""

    rows: int = 4

    def __post_init__(self) -> None:
        if int(self.rows) < 2:
            raise ValueError("A chance container needs at least one content row plus the bottom bar.")

    @classmethod
    def from_size(cls, size: int) -> "GridLayout":
        if size <= 0 or size % ROW_SIZE != 0:
            raise ValueError(f"Container size must be a positive multiple of {ROW_SIZE}, got {size}.")
        return cls(rows=size // ROW_SIZE)

    @property
    def size(self) -> int:
        return self.rows * ROW_SIZE

    @property
    def bottom_row_start(self) -> int:
        return self.size - ROW_SIZE

    @property
    def mode_toggle_slot(self) -> int:
        return self.size - 4

    @property
    def quantity_toggle_slot(self) -> int:
        return self.size - 6

    def in_bottom_row(self, slot: int) -> bool:
        return self.bottom_row_start <= slot < self.size

    def content_slots(self) -> range:
        return range(0, self.bottom_row_start)
