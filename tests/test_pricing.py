from farm.config import EconomyConfig
from farm.crops import Crop
from farm.pricing import buy_cost, crop_unlock_cost, expansion_cost, sell_earnings


def _make_crop(unit_price: int) -> Crop:
    return Crop(crop_id="test", name="Test", growth_seconds=10, unit_price=unit_price, harvest_yield=unit_price * 2)


def test_buy_cost():
    assert buy_cost(_make_crop(10), 5) == 50


def test_sell_earnings_floor_at_eighty_percent():
    """Selling pays floor(price * 0.8 * qty)."""
    assert sell_earnings(_make_crop(5), 3) == 12
    assert sell_earnings(_make_crop(7), 1) == 5
    assert sell_earnings(_make_crop(7), 5) == 28
    assert sell_earnings(_make_crop(35), 1) == 28


def test_sell_earnings_custom_ratio():
    assert sell_earnings(_make_crop(10), 3, EconomyConfig(sell_ratio=0.5)) == 15


def test_unlock_and_expansion_costs():
    assert crop_unlock_cost(_make_crop(35)) == 350
    assert crop_unlock_cost(_make_crop(35), EconomyConfig(unlock_multiplier=3)) == 105
    assert expansion_cost(4, 4) == 400
    assert expansion_cost(5, 5) == 625
    assert expansion_cost(3, 3, EconomyConfig(expansion_cost_per_plot=2.5)) == 22
