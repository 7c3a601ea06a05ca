import pytest

from farm.crops import Crop
from farm.plots import (
    SEASONS,
    build_grid,
    expand_grid,
    next_season,
    plot_id,
    season_advances_after,
)


def test_next_season_cycles():
    """Seasons should advance in yearly order and wrap after winter."""
    assert next_season("spring") == "summer"
    assert next_season("summer") == "fall"
    assert next_season("fall") == "winter"
    assert next_season("winter") == "spring"


def test_season_advances_after_day_multiples():
    """Only leaving a multiple of the season length rolls the season."""
    assert not season_advances_after(1)
    assert not season_advances_after(27)
    assert season_advances_after(28)
    assert not season_advances_after(29)
    assert season_advances_after(56)
    assert season_advances_after(7, days_per_season=7)
    with pytest.raises(ValueError):
        season_advances_after(1, days_per_season=0)


def test_build_grid_covers_every_coordinate():
    """A fresh grid should hold one empty plot per coordinate."""
    plots = build_grid(4, 4)
    assert len(plots) == 16
    coords = {(p.x, p.y) for p in plots}
    assert coords == {(x, y) for x in range(4) for y in range(4)}
    assert all(p.is_empty and p.growth_stage == "empty" for p in plots)
    assert plots[0].plot_id == "plot-0-0"
    assert plots[1].plot_id == "plot-1-0"


def test_build_grid_ids_are_stable():
    """The same coordinate should always map to the same id."""
    assert build_grid(3, 2) == build_grid(3, 2)
    assert plot_id(2, 1) == "plot-2-1"
    assert len({p.plot_id for p in build_grid(5, 5)}) == 25


def test_expand_grid_is_additive():
    """Expansion should append new cells and keep existing plots untouched."""
    original = build_grid(2, 2)
    bean = Crop(crop_id="bean", name="Bean", growth_seconds=10, unit_price=1, harvest_yield=2)
    sown = original[3].planted(bean, 5)
    original = original[:3] + (sown,)

    expanded = expand_grid(original, 2, 2, 3, 3)
    assert len(expanded) == 9
    assert expanded[:4] == original
    # New columns for existing rows come first, then whole new rows.
    assert [p.plot_id for p in expanded[4:]] == [
        "plot-2-0",
        "plot-2-1",
        "plot-0-2",
        "plot-1-2",
        "plot-2-2",
    ]
    assert all(p.is_empty for p in expanded[4:])


def test_expand_grid_rejects_shrinking():
    """Grids never shrink."""
    with pytest.raises(ValueError):
        expand_grid(build_grid(3, 3), 3, 3, 2, 3)


def test_seasons_order():
    assert SEASONS == ("spring", "summer", "fall", "winter")
