import json
from dataclasses import replace
from datetime import datetime, timezone

import pytest

from farm.actions import BuyCrop, IncreasePlotSize, PlantCrop, SetPlayerName, UnlockCrop
from farm.engine import transition
from farm.save_state import load_game, save_game, state_from_dict, state_to_dict
from farm.state import new_game
from farm.storage import JsonFileSlot, MemorySlot


def _played_state():
    state = replace(new_game(), coins=2_000)
    for action in (
        UnlockCrop("carrot"),
        BuyCrop("carrot", 4),
        PlantCrop("plot-0-0", "carrot"),
        PlantCrop("plot-1-0", "potato"),
        IncreasePlotSize(),
        SetPlayerName("Ana"),
    ):
        state = transition(state, action, 5_000)
    return state


class _BrokenSlot:
    def get(self, key):
        raise OSError("storage unavailable")

    def set(self, key, value):
        raise OSError("quota exceeded")


def test_round_trip_fresh_state():
    """A new game should survive encode/decode exactly."""
    state = new_game()
    assert state_from_dict(state_to_dict(state)) == state


def test_round_trip_played_state():
    state = _played_state()
    slot = MemorySlot()
    assert save_game(slot, state)
    assert load_game(slot) == state


def test_snapshot_records_save_date():
    saved_at = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
    slot = MemorySlot()
    save_game(slot, new_game(), key="slot-a", saved_at=saved_at)
    record = json.loads(slot.get("slot-a"))
    assert record["save_date"] == "2024-03-01T12:00:00+00:00"
    assert record["grid_size"] == {"rows": 4, "cols": 4}
    assert record["unlocked_crop_ids"] == ["potato"]


def test_legacy_snapshot_gets_defaults():
    """Saves from before unlocking and expansion load with default values."""
    record = state_to_dict(new_game())
    del record["unlocked_crop_ids"]
    del record["grid_size"]
    state = state_from_dict(record)
    assert state.unlocked_crop_ids == frozenset({"potato"})
    assert (state.grid.rows, state.grid.cols) == (4, 4)


def test_starter_always_unlocked_and_unknown_ids_dropped():
    record = state_to_dict(_played_state())
    record["unlocked_crop_ids"] = ["carrot", "mystery"]
    record["inventory"]["mystery"] = 3
    record["plots"][0]["crop_id"] = "mystery"
    state = state_from_dict(record)
    assert state.unlocked_crop_ids == frozenset({"potato", "carrot"})
    assert "mystery" not in state.inventory
    assert state.plots[0].is_empty


def test_inventory_list_form_is_accepted():
    record = state_to_dict(new_game())
    record["inventory"] = [{"crop_id": "potato", "quantity": 2}, {"crop_id": "carrot", "quantity": 1}]
    assert state_from_dict(record).inventory == {"potato": 2, "carrot": 1}


def test_load_missing_or_corrupt_returns_none():
    """Absent and unparsable slots mean 'no saved game', never an error."""
    slot = MemorySlot()
    assert load_game(slot) is None
    slot.set("farm-save", "{not json")
    assert load_game(slot) is None
    slot.set("farm-save", json.dumps({"coins": 10}))
    assert load_game(slot) is None
    slot.set("farm-save", json.dumps([1, 2, 3]))
    assert load_game(slot) is None
    slot.set("farm-save", json.dumps({**state_to_dict(new_game()), "coins": -5}))
    assert load_game(slot) is None


def test_storage_faults_are_swallowed():
    assert save_game(_BrokenSlot(), new_game()) is False
    assert load_game(_BrokenSlot()) is None


def test_save_overwrites_previous_snapshot():
    slot = MemorySlot()
    save_game(slot, new_game())
    save_game(slot, replace(new_game(), coins=7))
    assert load_game(slot).coins == 7


def test_json_file_slot(tmp_path):
    """File slots keep one JSON document per key."""
    slot = JsonFileSlot(tmp_path / "saves")
    assert slot.get("farm-save") is None
    state = _played_state()
    assert save_game(slot, state)
    assert (tmp_path / "saves" / "farm-save.json").exists()
    assert load_game(JsonFileSlot(tmp_path / "saves")) == state
    assert slot.path_for("../evil").name == ".._evil.json"


def test_undecodable_save_file_returns_none(tmp_path):
    """A save file that is not UTF-8 reads as 'no saved game'."""
    (tmp_path / "farm-save.json").write_bytes(b'{"coins": \xff\xfe}')
    assert load_game(JsonFileSlot(tmp_path)) is None


def test_non_finite_numbers_return_none():
    """json accepts Infinity and NaN; neither is a usable coin or day count."""
    slot = MemorySlot()
    record = state_to_dict(new_game())
    slot.set("farm-save", json.dumps(record).replace('"coins": 100', '"coins": Infinity'))
    assert load_game(slot) is None
    slot.set("farm-save", json.dumps({**record, "day_count": float("nan")}))
    assert load_game(slot) is None


@pytest.mark.parametrize(
    "grid_size, plot_count",
    [
        ({"rows": -1, "cols": 4}, 16),
        ({"rows": 0, "cols": 0}, 0),
        ({"rows": 5, "cols": 5}, 16),
        ({"rows": 2, "cols": 2}, 16),
    ],
)
def test_grid_size_must_match_plots(grid_size, plot_count):
    record = state_to_dict(new_game())
    record["grid_size"] = grid_size
    record["plots"] = record["plots"][:plot_count]
    slot = MemorySlot()
    slot.set("farm-save", json.dumps(record))
    assert load_game(slot) is None


def test_duplicate_plot_cells_are_rejected():
    record = state_to_dict(new_game())
    record["plots"][1] = dict(record["plots"][0])
    with pytest.raises(ValueError):
        state_from_dict(record)


def test_legacy_grid_backfill_is_checked_against_plots():
    """A save without grid_size must still have the default grid's plot count."""
    record = state_to_dict(transition(replace(new_game(), coins=1000), IncreasePlotSize(), 0))
    del record["grid_size"]
    with pytest.raises(ValueError):
        state_from_dict(record)
