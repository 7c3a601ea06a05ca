from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Literal, Sequence

if TYPE_CHECKING:
    from farm.crops import Crop

Season = Literal["spring", "summer", "fall", "winter"]
GrowthStage = Literal["empty", "growing", "ready"]

SEASONS: tuple[Season, ...] = ("spring", "summer", "fall", "winter")

SEASON_NAMES = {
    "spring": "Spring",
    "summer": "Summer",
    "fall": "Fall",
    "winter": "Winter",
}
SEASON_ICONS = {
    "spring": "🌱",
    "summer": "☀️",
    "fall": "🍂",
    "winter": "❄️",
}


def next_season(season: Season) -> Season:
    """Return the season that follows `season` in the yearly cycle."""
    idx = SEASONS.index(season)
    return SEASONS[(idx + 1) % len(SEASONS)]


def season_advances_after(day_count: int, days_per_season: int = 28) -> bool:
    """Return True if ending `day_count` rolls the calendar into a new season."""
    # Checked against the day being left, so day 28 -> 29 is the first rollover.
    if days_per_season <= 0:
        raise ValueError("days_per_season must be > 0")
    return day_count % days_per_season == 0


def plot_id(x: int, y: int) -> str:
    return f"plot-{x}-{y}"


@dataclass(frozen=True)
class Plot:
    plot_id: str
    x: int
    y: int
    crop: Crop | None = None
    planted_at: int | None = None
    # Cached view of the crop's progress; refreshed by the engine against a clock.
    growth_stage: GrowthStage = "empty"

    @property
    def is_empty(self) -> bool:
        return self.crop is None

    def planted(self, crop: Crop, now: int) -> "Plot":
        """Return a copy of this plot with `crop` sown at `now`."""
        return replace(self, crop=crop, planted_at=now, growth_stage="growing")

    def cleared(self) -> "Plot":
        """Return an empty copy of this plot at the same position."""
        return replace(self, crop=None, planted_at=None, growth_stage="empty")


def empty_plot(x: int, y: int) -> Plot:
    return Plot(plot_id=plot_id(x, y), x=x, y=y)


def build_grid(rows: int, cols: int) -> tuple[Plot, ...]:
    """Build a rows x cols grid of empty plots, row by row."""
    if rows < 0 or cols < 0:
        raise ValueError("rows and cols must be >= 0")
    return tuple(empty_plot(x, y) for y in range(rows) for x in range(cols))


def expand_grid(
    plots: Sequence[Plot],
    old_rows: int,
    old_cols: int,
    new_rows: int,
    new_cols: int,
) -> tuple[Plot, ...]:
    """
    Grow a grid to new bounds without touching existing plots.

    New cells are appended after the existing plots: first the new columns
    of every existing row, then every cell of the new rows.
    """
    if new_rows < old_rows or new_cols < old_cols:
        raise ValueError("grid can only grow")
    added: list[Plot] = []
    for y in range(old_rows):
        for x in range(old_cols, new_cols):
            added.append(empty_plot(x, y))
    for y in range(old_rows, new_rows):
        for x in range(new_cols):
            added.append(empty_plot(x, y))
    return tuple(plots) + tuple(added)
