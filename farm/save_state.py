from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Mapping

from farm.config import GameConfig, _normalize_season
from farm.crop_catalog import CropCatalog, default_catalog
from farm.plots import Plot, plot_id
from farm.state import GameState, GridSize
from farm.storage import KeyValueSlot

logger = logging.getLogger(__name__)

_GROWTH_STAGES = ("empty", "growing", "ready")


def state_to_dict(state: GameState, saved_at: datetime | None = None) -> dict[str, Any]:
    """Encode a state as a JSON-ready snapshot record."""
    record: dict[str, Any] = {
        "plots": [_plot_to_dict(plot) for plot in state.plots],
        "inventory": dict(state.inventory),
        "coins": state.coins,
        "selected_crop_id": state.selected_crop_id,
        "selected_plot_id": state.selected_plot_id,
        "current_season": state.season,
        "day_count": state.day_count,
        "player_name": state.player_name,
        "unlocked_crop_ids": sorted(state.unlocked_crop_ids),
        "grid_size": {"rows": state.grid.rows, "cols": state.grid.cols},
    }
    if saved_at is not None:
        record["save_date"] = saved_at.isoformat()
    return record


def _plot_to_dict(plot: Plot) -> dict[str, Any]:
    return {
        "id": plot.plot_id,
        "x": plot.x,
        "y": plot.y,
        "crop_id": plot.crop.crop_id if plot.crop is not None else None,
        "planted_at": plot.planted_at,
        "growth_stage": plot.growth_stage,
    }


def state_from_dict(
    raw: Mapping[str, Any],
    catalog: CropCatalog | None = None,
    config: GameConfig | None = None,
) -> GameState:
    """
    Decode a snapshot record, filling fields older saves did not have.

    Saves written before crop unlocking existed get the starter crop as their
    only unlocked crop; saves written before grid expansion get the default
    grid size. Crop ids the catalog no longer knows are dropped. Anything else
    malformed raises ValueError (or KeyError/TypeError from the raw data).
    """
    if not isinstance(raw, Mapping):
        raise ValueError("snapshot must be a mapping")
    catalog = catalog or default_catalog()
    config = config or GameConfig()
    starter_id = catalog.starter.crop_id

    unlocked_raw = raw.get("unlocked_crop_ids")
    if unlocked_raw is None:
        unlocked = {starter_id}
    else:
        unlocked = {str(crop_id) for crop_id in unlocked_raw if str(crop_id) in catalog.by_id}
        unlocked.add(starter_id)

    grid_raw = raw.get("grid_size")
    if grid_raw is None:
        grid = GridSize(rows=config.grid.rows, cols=config.grid.cols)
    else:
        grid = GridSize(rows=int(grid_raw["rows"]), cols=int(grid_raw["cols"]))

    coins = int(raw["coins"])
    day_count = int(raw["day_count"])
    if coins < 0:
        raise ValueError(f"snapshot coins must be >= 0 (got {coins})")
    if day_count < 1:
        raise ValueError(f"snapshot day_count must be >= 1 (got {day_count})")

    plots = tuple(_plot_from_dict(p, catalog) for p in raw["plots"])
    check_grid(grid, plots)

    return GameState(
        plots=plots,
        inventory=_parse_inventory(raw.get("inventory"), catalog),
        coins=coins,
        selected_crop_id=_optional_str(raw.get("selected_crop_id")),
        selected_plot_id=_optional_str(raw.get("selected_plot_id")),
        season=_normalize_season(raw["current_season"]),
        day_count=day_count,
        player_name=str(raw.get("player_name") or ""),
        unlocked_crop_ids=frozenset(unlocked),
        grid=grid,
    )


def check_grid(grid: GridSize, plots: tuple[Plot, ...]) -> None:
    """Raise ValueError unless `plots` fills a grid of at least 1x1 exactly."""
    if grid.rows < 1 or grid.cols < 1:
        raise ValueError(f"grid must be at least 1x1 (got {grid.rows}x{grid.cols})")
    if len(plots) != grid.plot_count:
        raise ValueError(f"{grid.rows}x{grid.cols} grid needs {grid.plot_count} plots (got {len(plots)})")
    cells = {(plot.x, plot.y) for plot in plots}
    if len(cells) != len(plots) or any(not (0 <= x < grid.cols and 0 <= y < grid.rows) for x, y in cells):
        raise ValueError("plots must cover each grid cell exactly once")


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _plot_from_dict(raw: Mapping[str, Any], catalog: CropCatalog) -> Plot:
    x = int(raw["x"])
    y = int(raw["y"])
    plot = Plot(plot_id=str(raw.get("id") or plot_id(x, y)), x=x, y=y)
    crop = catalog.find_crop(raw.get("crop_id"))
    planted_at = raw.get("planted_at")
    if crop is None or planted_at is None:
        return plot
    stage = raw.get("growth_stage")
    if stage not in _GROWTH_STAGES or stage == "empty":
        stage = "growing"
    return Plot(plot_id=plot.plot_id, x=x, y=y, crop=crop, planted_at=int(planted_at), growth_stage=stage)


def _parse_inventory(raw: Any, catalog: CropCatalog) -> dict[str, int]:
    """Parse inventory as a {crop_id: qty} mapping or a list of entries."""
    if raw is None:
        return {}
    if isinstance(raw, Mapping):
        pairs = list(raw.items())
    elif isinstance(raw, list):
        pairs = [(entry["crop_id"], entry["quantity"]) for entry in raw]
    else:
        raise ValueError("inventory must be a mapping or a list")
    out: dict[str, int] = {}
    for crop_id, qty in pairs:
        crop_id = str(crop_id)
        if crop_id not in catalog.by_id:
            continue
        qty = int(qty)
        if qty < 0:
            raise ValueError(f"inventory.{crop_id} must be >= 0 (got {qty})")
        out[crop_id] = out.get(crop_id, 0) + qty
    return out


def save_game(
    slot: KeyValueSlot,
    state: GameState,
    key: str = "farm-save",
    saved_at: datetime | None = None,
) -> bool:
    """Write a snapshot to `slot`. Returns False instead of raising on failure."""
    saved_at = saved_at or datetime.now(timezone.utc)
    try:
        payload = json.dumps(state_to_dict(state, saved_at), ensure_ascii=False)
        slot.set(key, payload)
    except (OSError, TypeError, ValueError) as exc:
        logger.warning("could not save game to %r: %s", key, exc)
        return False
    logger.debug("saved game to %r (day %d, %d coins)", key, state.day_count, state.coins)
    return True


def load_game(
    slot: KeyValueSlot,
    key: str = "farm-save",
    catalog: CropCatalog | None = None,
    config: GameConfig | None = None,
) -> GameState | None:
    """Read the snapshot in `slot`; None if there is none or it cannot be used."""
    try:
        payload = slot.get(key)
    except (OSError, ValueError) as exc:
        # UnicodeDecodeError is a ValueError.
        logger.warning("could not read saved game %r: %s", key, exc)
        return None
    if payload is None:
        return None
    try:
        state = state_from_dict(json.loads(payload), catalog=catalog, config=config)
    except (KeyError, TypeError, ValueError, OverflowError) as exc:
        # json.JSONDecodeError is a ValueError; int(Infinity) is an OverflowError.
        logger.warning("ignoring unreadable saved game %r: %s", key, exc)
        return None
    logger.debug("loaded game from %r (day %d, %d coins)", key, state.day_count, state.coins)
    return state
