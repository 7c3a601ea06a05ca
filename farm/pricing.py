from __future__ import annotations

import math
from fractions import Fraction

from farm.config import EconomyConfig
from farm.crop_catalog import unlock_cost
from farm.crops import Crop


def _exact(value: float) -> Fraction:
    # Fraction(str(0.8)) is 4/5, so floor(7 * 0.8 * 5) stays 28 instead of drifting.
    return Fraction(str(value))


def buy_cost(crop: Crop, quantity: int) -> int:
    return crop.unit_price * quantity


def sell_earnings(crop: Crop, quantity: int, economy: EconomyConfig = EconomyConfig()) -> int:
    """Coins paid for selling `quantity` seeds back at the configured ratio."""
    return math.floor(crop.unit_price * _exact(economy.sell_ratio) * quantity)


def crop_unlock_cost(crop: Crop, economy: EconomyConfig = EconomyConfig()) -> int:
    return unlock_cost(crop, economy.unlock_multiplier)


def expansion_cost(rows: int, cols: int, economy: EconomyConfig = EconomyConfig()) -> int:
    """Coins needed to grow a rows x cols grid by one row and one column."""
    return math.floor(rows * cols * _exact(economy.expansion_cost_per_plot))
