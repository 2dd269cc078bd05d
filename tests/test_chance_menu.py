import pytest

from helpers import BONE, DIAMOND, FakeDrops, FakeView, make_menu
from services.modes import InteractionMode, QuantityMode
from services.quantity import ClickLocation, ClickType
from services.slot_render import KIND_EMPTY, KIND_FILLER, KIND_ITEM, KIND_MODE_TOGGLE, KIND_QUANTITY_TOGGLE


def _edit_mode(menu):
    menu.advance_mode()
    assert menu.mode is InteractionMode.EDIT_WEIGHT


def test_three_increases_from_twenty_percent_reach_fifty():
    drops = FakeDrops(items={5: DIAMOND}, weights={5: 0.20})
    menu, view = make_menu(drops)
    _edit_mode(menu)

    for _ in range(3):
        menu.on_gesture(5, ClickType.RIGHT, DIAMOND)

    assert menu.store.get(5, drops.baseline_weight) == pytest.approx(0.50)
    visual = menu.render_slot(5)
    assert visual.annotated
    assert "Drop chance: 50.00%" in visual.lore
    assert view.redrawn_slots == [5, 5, 5]


def test_increase_clamps_at_one_hundred_percent():
    drops = FakeDrops(items={5: DIAMOND}, weights={5: 0.95})
    menu, _view = make_menu(drops)
    _edit_mode(menu)

    assert menu.on_gesture(5, ClickType.RIGHT, DIAMOND) == 1.0
    assert menu.on_gesture(5, ClickType.RIGHT, DIAMOND) == 1.0
    assert "Drop chance: 100.00%" in menu.render_slot(5).lore


def test_left_click_lowers_and_other_clicks_do_nothing():
    drops = FakeDrops(items={2: BONE}, weights={2: 0.5})
    menu, view = make_menu(drops)
    _edit_mode(menu)

    assert menu.on_gesture(2, ClickType.LEFT, BONE) == pytest.approx(0.4)
    assert menu.on_gesture(2, ClickType.MIDDLE, BONE) is None
    assert menu.on_gesture(2, ClickType.SHIFT_RIGHT, BONE) is None
    assert view.redrawn_slots == [2]


def test_chance_click_without_item_is_a_contract_violation():
    drops = FakeDrops(items={5: DIAMOND})
    menu, _view = make_menu(drops)
    _edit_mode(menu)

    with pytest.raises(RuntimeError, match="slot 5"):
        menu.on_gesture(5, ClickType.RIGHT, None)


def test_gesture_is_ignored_outside_chance_mode_or_for_locked_slots():
    drops = FakeDrops(items={1: DIAMOND, 2: BONE})
    menu, _view = make_menu(drops, can_edit=lambda slot: slot != 2)

    assert menu.on_gesture(1, ClickType.RIGHT, DIAMOND) is None
    _edit_mode(menu)
    assert menu.on_gesture(2, ClickType.RIGHT, BONE) is None
    assert not menu.store.is_edited(2)


def test_single_item_click_entry_point_is_unsupported():
    menu, _view = make_menu(FakeDrops())
    with pytest.raises(NotImplementedError):
        menu.on_single_click(0, DIAMOND)


def test_chance_mode_blocks_every_gesture():
    drops = FakeDrops(items={0: DIAMOND})
    menu, _view = make_menu(drops)
    _edit_mode(menu)

    for location in ClickLocation:
        for slot in range(menu.layout.size):
            assert not menu.is_gesture_allowed(location, slot, DIAMOND, None)


def test_item_mode_allows_content_slots_and_outside_clicks():
    menu, _view = make_menu(FakeDrops(), can_edit=lambda slot: slot != 3)

    assert menu.is_gesture_allowed(ClickLocation.PLAYER, 999, None, DIAMOND)
    assert menu.is_gesture_allowed(ClickLocation.MENU, 0, None, DIAMOND)
    assert menu.is_gesture_allowed(ClickLocation.MENU, 17, None, DIAMOND)
    assert not menu.is_gesture_allowed(ClickLocation.MENU, 3, None, DIAMOND)
    assert not menu.is_gesture_allowed(ClickLocation.MENU, 18, None, DIAMOND)
    assert not menu.is_gesture_allowed(ClickLocation.MENU, 26, None, None)


def test_gesture_policy_receives_full_click_context():
    seen = []

    def policy(location, slot, clicked, cursor):
        seen.append((location, slot, clicked, cursor))
        return cursor is not BONE

    menu, _view = make_menu(FakeDrops(), can_edit_gesture=policy)

    assert menu.is_gesture_allowed(ClickLocation.MENU, 4, None, DIAMOND)
    assert not menu.is_gesture_allowed(ClickLocation.MENU, 4, None, BONE)
    assert seen[0] == (ClickLocation.MENU, 4, None, DIAMOND)


def test_mode_switch_commits_grid_contents_before_switching():
    drops = FakeDrops(weights={0: 0.3})
    view = FakeView(live={0: DIAMOND, 4: BONE})
    menu, _ = make_menu(drops, view)

    observed_modes = []
    original_commit = menu.source.commit

    def commit(results):
        observed_modes.append(menu.mode)
        original_commit(results)

    menu.source.commit = commit
    menu.advance_mode()

    assert observed_modes == [InteractionMode.PLACE]
    committed = {r.slot: r for r in drops.commits[0]}
    assert committed[0].item == DIAMOND
    assert committed[0].weight == 0.3
    assert committed[4].item == BONE
    assert committed[1].item is None
    assert view.titles == ["Editing Drop Chances"]
    assert view.redraws == 1


def test_mode_switch_keeps_chance_edits():
    drops = FakeDrops(items={5: DIAMOND}, weights={5: 0.2})
    menu, _view = make_menu(drops)
    _edit_mode(menu)
    menu.on_gesture(5, ClickType.RIGHT, DIAMOND)

    menu.advance_mode()

    last = {r.slot: r for r in drops.commits[-1]}
    assert last[5].item == DIAMOND
    assert last[5].weight == pytest.approx(0.3)
    assert len(menu.store) == 0
    assert menu.mode is InteractionMode.PLACE


def test_commit_has_one_ordered_entry_per_editable_slot():
    drops = FakeDrops(items={19: DIAMOND})
    menu, _view = make_menu(drops, can_edit=lambda slot: slot % 2 == 0)

    results = menu.on_close()

    assert [r.slot for r in results] == list(range(0, 18, 2))
    assert len(drops.commits) == 1
    assert all(r.slot < 18 for r in results)


def test_close_without_edits_commits_baseline_weights():
    weights = {slot: slot / 100 for slot in range(18)}
    drops = FakeDrops(weights=weights)
    menu, _view = make_menu(drops)

    results = menu.on_close()

    assert {r.slot: r.weight for r in results} == weights


def test_commit_in_chance_mode_reads_source_items():
    drops = FakeDrops(items={2: BONE})
    view = FakeView(live={2: DIAMOND})
    menu, _ = make_menu(drops, view)
    _edit_mode(menu)

    results = menu.finalize_and_commit()

    assert results[2].item == BONE


def test_commit_rejects_missing_weight():
    drops = FakeDrops()
    drops.weights[3] = None
    drops.default_weight = 0.5
    menu, _view = make_menu(drops)

    with pytest.raises(ValueError, match="slot 3"):
        menu.on_close()
    assert drops.commits == []


def test_repeated_commits_do_not_reapply_edits():
    drops = FakeDrops(items={5: DIAMOND}, weights={5: 0.2})
    menu, _view = make_menu(drops)
    _edit_mode(menu)
    menu.on_gesture(5, ClickType.RIGHT, DIAMOND)

    first = menu.finalize_and_commit()
    second = menu.finalize_and_commit()

    assert first == second
    assert first[5].weight == pytest.approx(0.3)


def test_dispatch_click_routes_controls_and_chance_clicks():
    drops = FakeDrops(items={5: DIAMOND}, weights={5: 0.2})
    menu, view = make_menu(drops, allow_fractional_quantities=True)

    assert menu.dispatch_click(ClickLocation.MENU, 5, ClickType.LEFT, None, DIAMOND)
    assert not menu.dispatch_click(ClickLocation.MENU, menu.layout.mode_toggle_slot, ClickType.LEFT, None)
    assert menu.mode is InteractionMode.EDIT_WEIGHT

    assert not menu.dispatch_click(ClickLocation.MENU, 5, ClickType.RIGHT, DIAMOND)
    assert menu.store.get(5, drops.baseline_weight) == pytest.approx(0.3)

    assert not menu.dispatch_click(ClickLocation.MENU, 6, ClickType.RIGHT, None)
    assert not menu.store.is_edited(6)

    assert not menu.dispatch_click(ClickLocation.MENU, menu.layout.quantity_toggle_slot, ClickType.LEFT, None)
    assert menu.quantity is QuantityMode.TWENTY
    assert view.redrawn_slots[-1] == menu.layout.quantity_toggle_slot


def test_render_decision_order():
    drops = FakeDrops(items={0: DIAMOND, 19: BONE}, weights={0: 0.25})
    menu, _view = make_menu(drops, allow_fractional_quantities=True, can_edit=lambda slot: slot < 18)
    layout = menu.layout

    toggle = menu.render_slot(layout.mode_toggle_slot)
    assert toggle.kind == KIND_MODE_TOGGLE
    assert toggle.title == "Editing Items"
    assert toggle.lore == ["", "Click to edit drop chances."]
    assert not toggle.glow

    assert menu.render_slot(layout.quantity_toggle_slot).kind == KIND_FILLER
    assert menu.render_slot(0).kind == KIND_ITEM
    assert not menu.render_slot(0).annotated
    assert menu.render_slot(19).item == BONE
    assert menu.render_slot(20).kind == KIND_FILLER
    assert menu.render_slot(1).kind == KIND_EMPTY

    _edit_mode(menu)

    toggle = menu.render_slot(layout.mode_toggle_slot)
    assert toggle.title == "Editing Drop Chances"
    assert toggle.lore[-1] == "Click to edit items."
    assert toggle.glow

    quantity = menu.render_slot(layout.quantity_toggle_slot)
    assert quantity.kind == KIND_QUANTITY_TOGGLE
    assert quantity.title == "Edit quantity: 10%"

    annotated = menu.render_slot(0)
    assert annotated.annotated
    assert annotated.item == DIAMOND
    assert annotated.lore == [
        "",
        "Drop chance: 25.00%",
        "",
        "   (Mouse click)",
        "  < -10%    +10% >",
    ]
    assert not menu.render_slot(19).annotated


def test_quantity_toggle_cycles_whole_steps_without_fractional_capability():
    menu, view = make_menu(FakeDrops(), quantity=QuantityMode.ONE)
    slot = menu.layout.quantity_toggle_slot

    assert menu.render_slot(slot).kind == KIND_FILLER
    _edit_mode(menu)

    visual = menu.render_slot(slot)
    assert visual.kind == KIND_QUANTITY_TOGGLE
    assert visual.title == "Edit quantity: 1%"

    seen = []
    for _ in range(5):
        assert not menu.dispatch_click(ClickLocation.MENU, slot, ClickType.LEFT, None)
        seen.append(menu.quantity)

    assert seen == [
        QuantityMode.FIVE,
        QuantityMode.TEN,
        QuantityMode.TWENTY,
        QuantityMode.FIFTY,
        QuantityMode.ONE,
    ]
    assert view.redrawn_slots == [slot] * 5


def test_bottom_row_items_never_take_chance_edits():
    drops = FakeDrops(items={20: BONE, 5: DIAMOND})
    menu, view = make_menu(drops)
    _edit_mode(menu)

    assert not menu.dispatch_click(ClickLocation.MENU, 20, ClickType.RIGHT, BONE)
    assert menu.on_gesture(20, ClickType.RIGHT, BONE) is None
    assert not menu.store.is_edited(20)
    assert view.redrawn_slots == []

    visual = menu.render_slot(20)
    assert visual.item == BONE
    assert not visual.annotated
    assert menu.render_slot(5).annotated


def test_render_rejects_missing_weight():
    drops = FakeDrops(items={4: DIAMOND})
    drops.weights[4] = None
    menu, _view = make_menu(drops)
    menu.controller.advance_mode()

    with pytest.raises(ValueError, match="slot 4"):
        menu.render_slot(4)


def test_annotated_visual_carries_weight():
    drops = FakeDrops(items={4: DIAMOND}, weights={4: 0.35})
    menu, _view = make_menu(drops)
    _edit_mode(menu)

    assert menu.render_slot(4).weight == 0.35
    assert menu.render_slot(menu.layout.mode_toggle_slot).weight is None


def test_custom_chance_lore_template():
    drops = FakeDrops(items={0: DIAMOND}, weights={0: 0.125})
    menu, _view = make_menu(
        drops,
        chance_lore=lambda item: [f"{item.name}", "{dropChance} per kill", "step {quantity}%"],
    )
    _edit_mode(menu)

    assert menu.render_slot(0).lore == ["Diamond", "12.50% per kill", "step 10%"]


def test_rendering_does_not_touch_state():
    drops = FakeDrops(items={0: DIAMOND}, weights={0: 0.4})
    menu, view = make_menu(drops)
    _edit_mode(menu)
    commits = len(drops.commits)

    for slot in range(menu.layout.size):
        menu.render_slot(slot)

    assert len(menu.store) == 0
    assert len(drops.commits) == commits
    assert view.redrawn_slots == []


def test_info_lines_follow_mode():
    menu, _view = make_menu(FakeDrops())
    assert "items to this container." in menu.info_lines()
    _edit_mode(menu)
    assert "to adjust their drop chance." in menu.info_lines()
    assert menu.quantity_text() == "10%"
