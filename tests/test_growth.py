import pytest

from farm.crops import Crop
from farm.growth import format_duration, growth_percent, growth_stage_of, seconds_remaining

CROP = Crop(crop_id="potato", name="Potato", growth_seconds=70, unit_price=7, harvest_yield=16)


def test_growth_stage_boundary():
    """A 70s crop sown at t=1000 is ready exactly at t=71000."""
    assert growth_stage_of(CROP, 1000, 1000) == "growing"
    assert growth_stage_of(CROP, 1000, 70999) == "growing"
    assert growth_stage_of(CROP, 1000, 71000) == "ready"
    assert growth_stage_of(CROP, 1000, 10_000_000) == "ready"


@pytest.mark.parametrize("growth_seconds", [1, 7, 60, 180])
def test_growth_stage_is_monotonic(growth_seconds):
    """Stages go growing -> ready once and never report empty while planted."""
    crop = Crop(crop_id="c", name="c", growth_seconds=growth_seconds, unit_price=1, harvest_yield=2)
    t0 = 5_000
    stages = [growth_stage_of(crop, t0, t0 + ms) for ms in range(0, (growth_seconds + 2) * 1000, 250)]
    assert "empty" not in stages
    first_ready = stages.index("ready")
    assert all(s == "growing" for s in stages[:first_ready])
    assert all(s == "ready" for s in stages[first_ready:])
    assert first_ready * 250 == growth_seconds * 1000


def test_growth_stage_empty_without_crop():
    assert growth_stage_of(None, None, 1000) == "empty"
    assert growth_stage_of(CROP, None, 1000) == "empty"


def test_growth_percent():
    """Percent should floor and cap at 100."""
    assert growth_percent(CROP, 0, 0) == 0
    assert growth_percent(CROP, 0, 35_000) == 50
    assert growth_percent(CROP, 0, 69_999) == 99
    assert growth_percent(CROP, 0, 70_000) == 100
    assert growth_percent(CROP, 0, 500_000) == 100
    assert growth_percent(None, None, 5) == 0


def test_seconds_remaining():
    assert seconds_remaining(CROP, 0, 0) == 70
    assert seconds_remaining(CROP, 0, 69_500) == 1
    assert seconds_remaining(CROP, 0, 71_000) == 0


def test_format_duration():
    assert format_duration(45) == "45s"
    assert format_duration(60) == "1m 0s"
    assert format_duration(70) == "1m 10s"
