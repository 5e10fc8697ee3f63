import pytest

from conftest import make_record
from grievance_map.aggregation import aggregate_blocks, build_stats_lookup
from grievance_map.models import SelectionState
from grievance_map.selection import SelectionController, apply_map_click


def test_starts_unselected():
    controller = SelectionController()

    assert controller.state == SelectionState()
    assert controller.selected_key is None
    assert not controller.is_selected


def test_select_then_dismiss():
    controller = SelectionController()

    controller.select("hindol")
    assert controller.state == SelectionState(key="hindol")

    controller.dismiss()
    assert controller.state == SelectionState()
    assert not controller.is_selected


def test_reselect_and_switch():
    controller = SelectionController()

    controller.select("hindol")
    controller.select("hindol")
    assert controller.selected_key == "hindol"

    controller.select("gondia")
    assert controller.selected_key == "gondia"


def test_dismiss_when_unselected():
    controller = SelectionController()
    controller.dismiss()

    assert not controller.is_selected


def test_empty_key_is_rejected():
    with pytest.raises(ValueError):
        SelectionController().select("")


def test_resolve_returns_stats_for_selected_block(kamakhyanagar_scenario):
    records, features = kamakhyanagar_scenario
    lookup = build_stats_lookup(aggregate_blocks(records, features))
    controller = SelectionController()

    assert controller.resolve(lookup) is None

    controller.select("kamakhyanagar")
    assert controller.resolve(lookup).total == 3


def test_stale_selection_resolves_to_none():
    controller = SelectionController()
    controller.select("hindol")

    before = build_stats_lookup(aggregate_blocks([make_record(1, "Hindol")], []))
    after = build_stats_lookup(aggregate_blocks([make_record(1, "Gondia")], []))

    assert controller.resolve(before).label == "Hindol"
    assert controller.resolve(after) is None
    assert controller.selected_key == "hindol"


def test_map_click_selects_new_block():
    controller = SelectionController()

    last = apply_map_click(controller, "hindol", None)

    assert last == "hindol"
    assert controller.selected_key == "hindol"


def test_dismissed_block_stays_closed_while_map_reports_it():
    controller = SelectionController()
    last = apply_map_click(controller, "hindol", None)

    controller.dismiss()
    # the map widget returns the same selection on the following reruns
    last = apply_map_click(controller, "hindol", last)
    last = apply_map_click(controller, "hindol", last)

    assert not controller.is_selected
    assert last == "hindol"


def test_map_click_after_sidebar_selection():
    controller = SelectionController()
    last = apply_map_click(controller, "hindol", None)

    controller.select("gondia")
    last = apply_map_click(controller, "hindol", last)
    assert controller.selected_key == "gondia"

    last = apply_map_click(controller, "bhuban", last)
    assert controller.selected_key == "bhuban"


def test_cleared_map_selection_allows_same_block_again():
    controller = SelectionController()
    last = apply_map_click(controller, "hindol", None)
    controller.dismiss()

    last = apply_map_click(controller, None, last)
    assert last is None

    apply_map_click(controller, "hindol", last)
    assert controller.selected_key == "hindol"
