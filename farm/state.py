from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from farm.config import GameConfig
from farm.crop_catalog import CropCatalog, default_catalog
from farm.plots import Plot, Season, build_grid


@dataclass(frozen=True)
class GridSize:
    rows: int = 4
    cols: int = 4

    @property
    def plot_count(self) -> int:
        return self.rows * self.cols


@dataclass(frozen=True)
class GameState:
    """
    One immutable snapshot of a farming session.

    The engine never edits a state in place: every accepted action yields a
    new GameState, so older snapshots stay valid. `inventory` maps crop id to
    seed count; it is stored as a read-only copy of whatever mapping is passed.
    """

    plots: tuple[Plot, ...]
    inventory: Mapping[str, int] = field(default_factory=dict)
    coins: int = 0
    selected_crop_id: str | None = None
    selected_plot_id: str | None = None
    season: Season = "spring"
    day_count: int = 1
    player_name: str = ""
    unlocked_crop_ids: frozenset[str] = frozenset()
    grid: GridSize = GridSize()

    def __post_init__(self) -> None:
        object.__setattr__(self, "inventory", MappingProxyType(dict(self.inventory)))

    def plot(self, plot_id: str | None) -> Plot | None:
        if plot_id is None:
            return None
        for plot in self.plots:
            if plot.plot_id == plot_id:
                return plot
        return None

    def quantity(self, crop_id: str) -> int:
        return self.inventory.get(crop_id, 0)

    def is_unlocked(self, crop_id: str) -> bool:
        return crop_id in self.unlocked_crop_ids


def new_game(config: GameConfig | None = None, catalog: CropCatalog | None = None) -> GameState:
    """Return the fresh state a brand-new session starts from."""
    config = config or GameConfig()
    catalog = catalog or default_catalog()
    starter = catalog.starter
    return GameState(
        plots=build_grid(config.grid.rows, config.grid.cols),
        inventory={starter.crop_id: config.starting_seeds},
        coins=config.starting_coins,
        season=config.starting_season,
        day_count=1,
        player_name=config.player_name,
        unlocked_crop_ids=frozenset({starter.crop_id}),
        grid=GridSize(rows=config.grid.rows, cols=config.grid.cols),
    )
