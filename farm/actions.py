from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Union

from farm.plots import Season
from farm.state import GameState


@dataclass(frozen=True)
class SelectCrop:
    crop_id: str | None


@dataclass(frozen=True)
class SelectPlot:
    plot_id: str | None


@dataclass(frozen=True)
class PlantCrop:
    plot_id: str
    crop_id: str


@dataclass(frozen=True)
class HarvestCrop:
    plot_id: str


@dataclass(frozen=True)
class UpdateGrowth:
    pass


@dataclass(frozen=True)
class BuyCrop:
    crop_id: str
    quantity: int = 1


@dataclass(frozen=True)
class SellCrop:
    crop_id: str
    quantity: int = 1


@dataclass(frozen=True)
class UnlockCrop:
    crop_id: str


@dataclass(frozen=True)
class ChangeSeason:
    season: Season


@dataclass(frozen=True)
class NextDay:
    pass


@dataclass(frozen=True)
class IncreasePlotSize:
    pass


@dataclass(frozen=True)
class LoadGame:
    # Either a decoded GameState or a raw snapshot dict as written by save_state.
    snapshot: GameState | Mapping[str, Any]


@dataclass(frozen=True)
class SetPlayerName:
    name: str


Action = Union[
    SelectCrop,
    SelectPlot,
    PlantCrop,
    HarvestCrop,
    UpdateGrowth,
    BuyCrop,
    SellCrop,
    UnlockCrop,
    ChangeSeason,
    NextDay,
    IncreasePlotSize,
    LoadGame,
    SetPlayerName,
]

# Actions whose effects are worth persisting; selection and growth ticks are not.
TRANSIENT_ACTIONS = (SelectCrop, SelectPlot, UpdateGrowth)


def is_durable(action: Action) -> bool:
    return not isinstance(action, TRANSIENT_ACTIONS)
