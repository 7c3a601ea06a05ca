from __future__ import annotations

from typing import TYPE_CHECKING

from farm.config import GameConfig
from farm.plots import SEASONS

if TYPE_CHECKING:
    from farm.crop_catalog import CropCatalog


class ValidationError(ValueError):
    """Raised when input data is logically invalid."""


def validate_game_config(cfg: GameConfig) -> None:
    """Validate configuration invariants before a session is built from it."""
    _ensure_non_negative(cfg.starting_coins, "starting_coins")
    _ensure_non_negative(cfg.starting_seeds, "starting_seeds")
    _ensure_positive(cfg.grid.rows, "grid.rows")
    _ensure_positive(cfg.grid.cols, "grid.cols")
    _ensure_positive(cfg.calendar.days_per_season, "calendar.days_per_season")
    _ensure_positive(cfg.calendar.seconds_per_day, "calendar.seconds_per_day")
    if cfg.starting_season not in SEASONS:
        raise ValidationError(f"starting_season must be one of {SEASONS} (got {cfg.starting_season!r})")
    if not cfg.save_key:
        raise ValidationError("save_key must not be empty")
    _validate_economy(cfg)


def validate_crop_catalog(catalog: CropCatalog) -> None:
    """Validate that every crop is well-formed and exactly one is a starter."""
    starters = [crop.crop_id for crop in catalog if crop.starts_unlocked]
    if len(starters) != 1:
        raise ValidationError(f"catalog must have exactly one starter crop (got {starters})")
    for crop in catalog:
        _ensure_positive(crop.growth_seconds, f"{crop.crop_id}.growth_seconds")
        _ensure_positive(crop.unit_price, f"{crop.crop_id}.unit_price")
        _ensure_positive(crop.harvest_yield, f"{crop.crop_id}.harvest_yield")
        if crop.season != "any" and crop.season not in SEASONS:
            raise ValidationError(f"{crop.crop_id} has unknown season '{crop.season}'")


def _ensure_non_negative(value: int, name: str) -> None:
    if value < 0:
        raise ValidationError(f"{name} must be >= 0 (got {value})")


def _ensure_positive(value: int | float, name: str) -> None:
    if value <= 0:
        raise ValidationError(f"{name} must be > 0 (got {value})")


def _validate_economy(cfg: GameConfig) -> None:
    economy = cfg.economy
    if economy.sell_ratio <= 0 or economy.sell_ratio > 1:
        raise ValidationError(f"economy.sell_ratio must be in (0, 1] (got {economy.sell_ratio})")
    _ensure_positive(economy.unlock_multiplier, "economy.unlock_multiplier")
    _ensure_positive(economy.expansion_cost_per_plot, "economy.expansion_cost_per_plot")
