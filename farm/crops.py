from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from farm.plots import Season

CropSeason = Literal["spring", "summer", "fall", "winter", "any"]
ANY_SEASON = "any"


@dataclass(frozen=True)
class Crop:
    crop_id: str
    name: str
    growth_seconds: int
    unit_price: int  # seed cost
    harvest_yield: int  # coins paid out per harvest
    season: CropSeason = ANY_SEASON
    starts_unlocked: bool = False
    icon: str = ""
    description: str = ""

    def grows_in(self, season: Season) -> bool:
        """Return True if this crop can be sown during `season`."""
        return self.season == ANY_SEASON or self.season == season
