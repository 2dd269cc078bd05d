from __future__ import annotations

from services.chance_menu import ContainerChancesMenu
from services.drop_source import DropSource
from services.grid_layout import GridLayout
from services.items import DropItem
from services.modes import QuantityMode

DIAMOND = DropItem("minecraft:diamond", "Diamond")
BONE = DropItem("minecraft:bone", "Bone", amount=4)


class FakeView:
    def __init__(self, live=None):
        self.live = dict(live or {})
        self.titles: list[str] = []
        self.redraws = 0
        self.redrawn_slots: list[int] = []

    def live_item_at(self, slot):
        return self.live.get(slot)

    def set_title(self, title):
        self.titles.append(title)

    def redraw(self):
        self.redraws += 1

    def redraw_slot(self, slot):
        self.redrawn_slots.append(slot)


class FakeDrops:
    """In-memory drop table recording every commit."""

    def __init__(self, items=None, weights=None, default_weight=0.5):
        self.items = dict(items or {})
        self.weights = dict(weights or {})
        self.default_weight = default_weight
        self.commits: list[list] = []

    def baseline_weight(self, slot):
        return self.weights.get(slot, self.default_weight)

    def item_at(self, slot):
        return self.items.get(slot)

    def commit(self, results):
        self.commits.append(list(results))

    def source(self, **kwargs) -> DropSource:
        return DropSource(
            baseline_weight=self.baseline_weight,
            item_at=self.item_at,
            commit=self.commit,
            **kwargs,
        )


def make_menu(drops: FakeDrops, view: FakeView | None = None, *, rows=3, quantity=QuantityMode.TEN, **kwargs):
    view = view or FakeView()
    menu = ContainerChancesMenu(drops.source(**kwargs), view, layout=GridLayout(rows=rows), quantity=quantity)
    return menu, view
