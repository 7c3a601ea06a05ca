from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from farm.config import EconomyConfig
from farm.crop_catalog import CropCatalog, unlock_cost
from farm.plots import Season


@dataclass(frozen=True)
class CropReturn:
    crop_id: str
    season: str
    profit_per_harvest: int
    profit_per_minute: float
    unlock_cost: int
    payback_harvests: int | None  # None = never pays back


def crop_returns(catalog: CropCatalog, economy: EconomyConfig = EconomyConfig()) -> list[CropReturn]:
    """Return seed-to-harvest economics for every crop in the catalog."""
    crops = list(catalog)
    if not crops:
        return []
    yields = np.array([c.harvest_yield for c in crops], dtype=float)
    prices = np.array([c.unit_price for c in crops], dtype=float)
    seconds = np.array([c.growth_seconds for c in crops], dtype=float)
    unlocks = np.array(
        [0 if c.starts_unlocked else unlock_cost(c, economy.unlock_multiplier) for c in crops],
        dtype=float,
    )

    profit = yields - prices
    per_minute = profit / (seconds / 60.0)
    with np.errstate(divide="ignore", invalid="ignore"):
        payback = np.where(profit > 0, np.ceil(unlocks / profit), np.nan)

    out = []
    for idx, crop in enumerate(crops):
        harvests = None if np.isnan(payback[idx]) else int(payback[idx])
        out.append(
            CropReturn(
                crop_id=crop.crop_id,
                season=crop.season,
                profit_per_harvest=int(profit[idx]),
                profit_per_minute=round(float(per_minute[idx]), 2),
                unlock_cost=int(unlocks[idx]),
                payback_harvests=harvests,
            )
        )
    return out


def best_crop_for_season(
    catalog: CropCatalog,
    season: Season,
    unlocked: frozenset[str] | set[str] | None = None,
    economy: EconomyConfig = EconomyConfig(),
) -> CropReturn | None:
    """Pick the highest profit-per-minute crop sowable in `season`."""
    candidates = [
        r
        for r in crop_returns(catalog, economy)
        if catalog.by_id[r.crop_id].grows_in(season) and (unlocked is None or r.crop_id in unlocked)
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda r: r.profit_per_minute)
