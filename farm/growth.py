from __future__ import annotations

import math

from farm.crops import Crop
from farm.plots import GrowthStage


def _elapsed_seconds(planted_at: int, now: int) -> float:
    return (now - planted_at) / 1000


def growth_stage_of(crop: Crop | None, planted_at: int | None, now: int) -> GrowthStage:
    """Return the stage of a crop sown at `planted_at` (ms) as seen at `now` (ms)."""
    if crop is None or planted_at is None:
        return "empty"
    if _elapsed_seconds(planted_at, now) >= crop.growth_seconds:
        return "ready"
    return "growing"


def growth_percent(crop: Crop | None, planted_at: int | None, now: int) -> int:
    """Return growth progress as an integer percentage in 0..100."""
    if crop is None or planted_at is None:
        return 0
    elapsed = _elapsed_seconds(planted_at, now)
    percent = math.floor(min(100.0, 100.0 * elapsed / crop.growth_seconds))
    return max(0, percent)


def seconds_remaining(crop: Crop | None, planted_at: int | None, now: int) -> int:
    """Return whole seconds left until the crop is ready (0 once ready)."""
    if crop is None or planted_at is None:
        return 0
    left = crop.growth_seconds - _elapsed_seconds(planted_at, now)
    return max(0, math.ceil(left))


def format_duration(seconds: int) -> str:
    """Format seconds the way the shop shows growth times ('45s', '1m 10s')."""
    if seconds < 60:
        return f"{seconds}s"
    minutes, rest = divmod(seconds, 60)
    return f"{minutes}m {rest}s"
