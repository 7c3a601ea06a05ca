from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
import json
from pathlib import Path

from .plots import SEASONS, Season


@dataclass(frozen=True)
class EconomyConfig:
    """Pricing knobs shared by the engine and the economy report."""

    sell_ratio: float = 0.8
    unlock_multiplier: int = 10
    expansion_cost_per_plot: float = 25


@dataclass(frozen=True)
class CalendarConfig:
    days_per_season: int = 28
    # Wall-clock length of one in-game day for the session's day timer.
    seconds_per_day: int = 300


@dataclass(frozen=True)
class GridConfig:
    rows: int = 4
    cols: int = 4


@dataclass(frozen=True)
class GameConfig:
    starting_coins: int = 100
    starting_seeds: int = 5
    starting_season: Season = "spring"
    player_name: str = "Farmer"
    save_key: str = "farm-save"
    grid: GridConfig = field(default_factory=GridConfig)
    economy: EconomyConfig = field(default_factory=EconomyConfig)
    calendar: CalendarConfig = field(default_factory=CalendarConfig)

    @staticmethod
    def from_json_file(path: str | Path) -> "GameConfig":
        """Load config from a JSON file on disk."""
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        return GameConfig.from_dict(raw)

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> "GameConfig":
        """Build config from a decoded JSON dict."""
        if not isinstance(raw, dict):
            raise ValueError("config must be a mapping")
        grid_raw = _section(raw, "grid")
        economy_raw = _section(raw, "economy")
        calendar_raw = _section(raw, "calendar")

        grid = GridConfig(
            rows=int(grid_raw.get("rows", 4)),
            cols=int(grid_raw.get("cols", 4)),
        )
        economy = EconomyConfig(
            sell_ratio=float(economy_raw.get("sell_ratio", 0.8)),
            unlock_multiplier=int(economy_raw.get("unlock_multiplier", 10)),
            expansion_cost_per_plot=float(economy_raw.get("expansion_cost_per_plot", 25)),
        )
        calendar = CalendarConfig(
            days_per_season=int(calendar_raw.get("days_per_season", 28)),
            seconds_per_day=_parse_duration(calendar_raw.get("seconds_per_day", 300)),
        )
        return GameConfig(
            starting_coins=int(raw.get("starting_coins", 100)),
            starting_seeds=int(raw.get("starting_seeds", 5)),
            starting_season=_normalize_season(raw.get("starting_season", "spring")),
            player_name=str(raw.get("player_name", "Farmer")),
            save_key=str(raw.get("save_key", "farm-save")),
            grid=grid,
            economy=economy,
            calendar=calendar,
        )


def _section(raw: dict[str, Any], key: str) -> dict[str, Any]:
    """Return a nested config section, treating a missing one as empty."""
    value = raw.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{key} must be a mapping")
    return value


def _normalize_season(raw: Any) -> Season:
    """Normalize season identifiers to lowercase canonical values."""
    key = str(raw).strip().lower()
    if key == "autumn":
        key = "fall"
    if key not in SEASONS:
        raise ValueError(f"Unknown season: {raw}")
    return key


def _parse_duration(raw: Any) -> int:
    """Parse a duration in seconds from an int or a '5m' / '90s' style string."""
    if isinstance(raw, (int, float)):
        return int(raw)
    text = str(raw).strip().lower()
    if text.endswith("m") and text[:-1].isdigit():
        return int(text[:-1]) * 60
    if text.endswith("s") and text[:-1].isdigit():
        return int(text[:-1])
    if text.isdigit():
        return int(text)
    raise ValueError(f"Unknown duration: {raw}")
