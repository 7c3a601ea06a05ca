"""
The farm's rules as one pure function over immutable states.

`attempt(state, action, now)` applies an action and reports whether it was
accepted; `transition(state, action, now)` is the same call reduced to the
resulting state. A rejected action always hands back the very same state
object, so callers can test `result is state` as well as equality.

Neither function reads the clock or touches storage: `now` is the caller's
wall-clock time in milliseconds, and saving is left to the session driver.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Literal, Mapping

from farm.actions import (
    Action,
    BuyCrop,
    ChangeSeason,
    HarvestCrop,
    IncreasePlotSize,
    LoadGame,
    NextDay,
    PlantCrop,
    SelectCrop,
    SelectPlot,
    SellCrop,
    SetPlayerName,
    UnlockCrop,
    UpdateGrowth,
)
from farm.config import GameConfig
from farm.crop_catalog import CropCatalog, default_catalog
from farm.growth import growth_stage_of
from farm.plots import SEASONS, Plot, expand_grid, next_season, season_advances_after
from farm.pricing import buy_cost, crop_unlock_cost, expansion_cost, sell_earnings
from farm.save_state import check_grid, state_from_dict
from farm.state import GameState, GridSize

RejectReason = Literal[
    "unknown_crop",
    "unknown_plot",
    "unknown_season",
    "crop_locked",
    "wrong_season",
    "no_seeds",
    "plot_occupied",
    "plot_empty",
    "not_ready",
    "insufficient_coins",
    "insufficient_stock",
    "invalid_quantity",
    "already_unlocked",
    "invalid_snapshot",
]


@dataclass(frozen=True)
class Outcome:
    state: GameState
    reason: RejectReason | None = None

    @property
    def applied(self) -> bool:
        return self.reason is None


@dataclass(frozen=True)
class _Rules:
    catalog: CropCatalog
    config: GameConfig


def transition(
    state: GameState,
    action: Action,
    now: int,
    catalog: CropCatalog | None = None,
    config: GameConfig | None = None,
) -> GameState:
    """Return the state after `action`, or `state` itself if it was rejected."""
    return attempt(state, action, now, catalog=catalog, config=config).state


def attempt(
    state: GameState,
    action: Action,
    now: int,
    catalog: CropCatalog | None = None,
    config: GameConfig | None = None,
) -> Outcome:
    """Apply `action` at time `now` (ms) and say why if it was rejected."""
    rules = _Rules(catalog=catalog or default_catalog(), config=config or GameConfig())
    handler = _HANDLERS.get(type(action))
    if handler is None:
        # Not part of the action protocol; nothing to do.
        return Outcome(state)
    return handler(state, action, now, rules)


def _reject(state: GameState, reason: RejectReason) -> Outcome:
    return Outcome(state, reason)


def _replace_plot(plots: tuple[Plot, ...], updated: Plot) -> tuple[Plot, ...]:
    return tuple(updated if p.plot_id == updated.plot_id else p for p in plots)


def _select_crop(state: GameState, action: SelectCrop, now: int, rules: _Rules) -> Outcome:
    return Outcome(replace(state, selected_crop_id=action.crop_id))


def _select_plot(state: GameState, action: SelectPlot, now: int, rules: _Rules) -> Outcome:
    return Outcome(replace(state, selected_plot_id=action.plot_id))


def _plant_crop(state: GameState, action: PlantCrop, now: int, rules: _Rules) -> Outcome:
    crop = rules.catalog.find_crop(action.crop_id)
    if crop is None:
        return _reject(state, "unknown_crop")
    if not state.is_unlocked(crop.crop_id):
        return _reject(state, "crop_locked")
    if not crop.grows_in(state.season):
        return _reject(state, "wrong_season")
    if state.quantity(crop.crop_id) <= 0:
        return _reject(state, "no_seeds")
    plot = state.plot(action.plot_id)
    if plot is None:
        return _reject(state, "unknown_plot")
    if not plot.is_empty:
        return _reject(state, "plot_occupied")

    inventory = dict(state.inventory)
    inventory[crop.crop_id] -= 1
    return Outcome(
        replace(
            state,
            plots=_replace_plot(state.plots, plot.planted(crop, now)),
            inventory=inventory,
            selected_plot_id=None,
        )
    )


def _harvest_crop(state: GameState, action: HarvestCrop, now: int, rules: _Rules) -> Outcome:
    plot = state.plot(action.plot_id)
    if plot is None:
        return _reject(state, "unknown_plot")
    if plot.crop is None:
        return _reject(state, "plot_empty")
    if growth_stage_of(plot.crop, plot.planted_at, now) != "ready":
        return _reject(state, "not_ready")
    return Outcome(
        replace(
            state,
            plots=_replace_plot(state.plots, plot.cleared()),
            coins=state.coins + plot.crop.harvest_yield,
        )
    )


def _update_growth(state: GameState, action: UpdateGrowth, now: int, rules: _Rules) -> Outcome:
    changed = False
    plots = []
    for plot in state.plots:
        if plot.crop is not None:
            stage = growth_stage_of(plot.crop, plot.planted_at, now)
            if stage != plot.growth_stage:
                plot = replace(plot, growth_stage=stage)
                changed = True
        plots.append(plot)
    if not changed:
        return Outcome(state)
    return Outcome(replace(state, plots=tuple(plots)))


def _buy_crop(state: GameState, action: BuyCrop, now: int, rules: _Rules) -> Outcome:
    if action.quantity < 1:
        return _reject(state, "invalid_quantity")
    crop = rules.catalog.find_crop(action.crop_id)
    if crop is None:
        return _reject(state, "unknown_crop")
    if not state.is_unlocked(crop.crop_id):
        return _reject(state, "crop_locked")
    cost = buy_cost(crop, action.quantity)
    if state.coins < cost:
        return _reject(state, "insufficient_coins")

    inventory = dict(state.inventory)
    inventory[crop.crop_id] = inventory.get(crop.crop_id, 0) + action.quantity
    return Outcome(replace(state, inventory=inventory, coins=state.coins - cost))


def _sell_crop(state: GameState, action: SellCrop, now: int, rules: _Rules) -> Outcome:
    if action.quantity < 1:
        return _reject(state, "invalid_quantity")
    crop = rules.catalog.find_crop(action.crop_id)
    if crop is None:
        return _reject(state, "unknown_crop")
    if state.quantity(crop.crop_id) < action.quantity:
        return _reject(state, "insufficient_stock")

    inventory = dict(state.inventory)
    left = inventory[crop.crop_id] - action.quantity
    if left == 0:
        del inventory[crop.crop_id]
    else:
        inventory[crop.crop_id] = left
    earnings = sell_earnings(crop, action.quantity, rules.config.economy)
    return Outcome(replace(state, inventory=inventory, coins=state.coins + earnings))


def _unlock_crop(state: GameState, action: UnlockCrop, now: int, rules: _Rules) -> Outcome:
    crop = rules.catalog.find_crop(action.crop_id)
    if crop is None:
        return _reject(state, "unknown_crop")
    if state.is_unlocked(crop.crop_id):
        return _reject(state, "already_unlocked")
    cost = crop_unlock_cost(crop, rules.config.economy)
    if state.coins < cost:
        return _reject(state, "insufficient_coins")

    inventory = dict(state.inventory)
    inventory.setdefault(crop.crop_id, 0)
    return Outcome(
        replace(
            state,
            coins=state.coins - cost,
            unlocked_crop_ids=state.unlocked_crop_ids | {crop.crop_id},
            inventory=inventory,
        )
    )


def _change_season(state: GameState, action: ChangeSeason, now: int, rules: _Rules) -> Outcome:
    if action.season not in SEASONS:
        return _reject(state, "unknown_season")
    return Outcome(replace(state, season=action.season))


def _next_day(state: GameState, action: NextDay, now: int, rules: _Rules) -> Outcome:
    season = state.season
    if season_advances_after(state.day_count, rules.config.calendar.days_per_season):
        season = next_season(season)
    return Outcome(replace(state, season=season, day_count=state.day_count + 1))


def _increase_plot_size(state: GameState, action: IncreasePlotSize, now: int, rules: _Rules) -> Outcome:
    rows, cols = state.grid.rows, state.grid.cols
    cost = expansion_cost(rows, cols, rules.config.economy)
    if state.coins < cost:
        return _reject(state, "insufficient_coins")
    return Outcome(
        replace(
            state,
            coins=state.coins - cost,
            plots=expand_grid(state.plots, rows, cols, rows + 1, cols + 1),
            grid=GridSize(rows=rows + 1, cols=cols + 1),
        )
    )


def _load_game(state: GameState, action: LoadGame, now: int, rules: _Rules) -> Outcome:
    snapshot = action.snapshot
    if isinstance(snapshot, Mapping):
        try:
            snapshot = state_from_dict(snapshot, catalog=rules.catalog, config=rules.config)
        except (KeyError, TypeError, ValueError, OverflowError):
            return _reject(state, "invalid_snapshot")
    elif isinstance(snapshot, GameState):
        try:
            check_grid(snapshot.grid, snapshot.plots)
        except ValueError:
            return _reject(state, "invalid_snapshot")
    else:
        return _reject(state, "invalid_snapshot")

    starter_id = rules.catalog.starter.crop_id
    if starter_id not in snapshot.unlocked_crop_ids:
        snapshot = replace(snapshot, unlocked_crop_ids=snapshot.unlocked_crop_ids | {starter_id})
    # Stages in a snapshot were computed against the save-time clock.
    return Outcome(_update_growth(snapshot, UpdateGrowth(), now, rules).state)


def _set_player_name(state: GameState, action: SetPlayerName, now: int, rules: _Rules) -> Outcome:
    return Outcome(replace(state, player_name=action.name))


_HANDLERS: dict[type, Callable[[GameState, object, int, _Rules], Outcome]] = {
    SelectCrop: _select_crop,
    SelectPlot: _select_plot,
    PlantCrop: _plant_crop,
    HarvestCrop: _harvest_crop,
    UpdateGrowth: _update_growth,
    BuyCrop: _buy_crop,
    SellCrop: _sell_crop,
    UnlockCrop: _unlock_crop,
    ChangeSeason: _change_season,
    NextDay: _next_day,
    IncreasePlotSize: _increase_plot_size,
    LoadGame: _load_game,
    SetPlayerName: _set_player_name,
}
