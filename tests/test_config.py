import json

import pytest

from farm.config import GameConfig, _normalize_season, _parse_duration
from farm.validation import ValidationError, validate_game_config


def test_defaults_match_a_new_farm():
    """Default config should describe the standard 4x4 spring start."""
    cfg = GameConfig()
    assert cfg.grid.rows == 4
    assert cfg.grid.cols == 4
    assert cfg.starting_season == "spring"
    assert cfg.economy.sell_ratio == 0.8
    assert cfg.economy.unlock_multiplier == 10
    assert cfg.economy.expansion_cost_per_plot == 25
    assert cfg.calendar.days_per_season == 28
    validate_game_config(cfg)


def test_normalize_season():
    """Season normalization should enforce valid values."""
    assert _normalize_season("Winter") == "winter"
    assert _normalize_season(" autumn ") == "fall"
    with pytest.raises(ValueError):
        _normalize_season("monsoon")


def test_parse_duration():
    assert _parse_duration(90) == 90
    assert _parse_duration("5m") == 300
    assert _parse_duration("45s") == 45
    assert _parse_duration("12") == 12
    with pytest.raises(ValueError):
        _parse_duration("soon")


def test_from_json_file(tmp_path):
    """JSON config should override nested sections and keep other defaults."""
    raw = {
        "starting_coins": 250,
        "starting_season": "Summer",
        "player_name": "Ana",
        "grid": {"rows": 3},
        "economy": {"sell_ratio": 0.5, "expansion_cost_per_plot": 10},
        "calendar": {"seconds_per_day": "2m"},
    }
    path = tmp_path / "config.json"
    path.write_text(json.dumps(raw), encoding="utf-8")

    cfg = GameConfig.from_json_file(path)
    assert cfg.starting_coins == 250
    assert cfg.starting_season == "summer"
    assert cfg.player_name == "Ana"
    assert cfg.grid.rows == 3
    assert cfg.grid.cols == 4
    assert cfg.economy.sell_ratio == 0.5
    assert cfg.economy.unlock_multiplier == 10
    assert cfg.economy.expansion_cost_per_plot == 10
    assert cfg.calendar.seconds_per_day == 120
    assert cfg.calendar.days_per_season == 28


def test_from_dict_rejects_bad_sections():
    with pytest.raises(ValueError):
        GameConfig.from_dict({"grid": 4})
    with pytest.raises(ValueError):
        GameConfig.from_dict([])


@pytest.mark.parametrize(
    "raw",
    [
        {"starting_coins": -1},
        {"grid": {"rows": 0}},
        {"economy": {"sell_ratio": 1.5}},
        {"economy": {"unlock_multiplier": 0}},
        {"calendar": {"days_per_season": 0}},
        {"save_key": ""},
    ],
)
def test_validate_game_config_rejects(raw):
    """Logically invalid configs should raise ValidationError."""
    with pytest.raises(ValidationError):
        validate_game_config(GameConfig.from_dict(raw))
