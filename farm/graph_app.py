from __future__ import annotations

import sys

import matplotlib.pyplot as plt
import numpy as np

from farm.config import GameConfig, _normalize_season
from farm.crop_catalog import default_catalog
from farm.economy import CropReturn, crop_returns
from farm.plots import SEASON_NAMES, SEASONS

_SEASON_COLORS = {
    "spring": "#7cc36a",
    "summer": "#f2c14e",
    "fall": "#e07a3f",
    "winter": "#6fa8dc",
    "any": "#999999",
}


def _parse_args(argv: list[str]) -> tuple[str | None, str, str | None]:
    """Parse CLI args into (config_path, output_path, season_filter)."""
    season = None
    config_path = None
    args: list[str] = []
    idx = 1
    while idx < len(argv):
        arg = argv[idx]
        if arg in ("--season", "--config"):
            if idx + 1 >= len(argv):
                raise ValueError(f"missing value for {arg}")
            value = argv[idx + 1]
            idx += 2
        elif arg.startswith("--season=") or arg.startswith("--config="):
            arg, value = arg.split("=", 1)
            idx += 1
        else:
            args.append(arg)
            idx += 1
            continue
        if arg == "--season":
            season = _normalize_season(value)
        else:
            config_path = value

    output_path = args[0] if args else ""
    return config_path, output_path, season


def _ordered_returns(returns: list[CropReturn], season: str | None) -> list[CropReturn]:
    """Group crops by season in calendar order, best earners first within a season."""
    order = {name: idx for idx, name in enumerate(SEASONS + ("any",))}
    if season is not None:
        returns = [r for r in returns if r.season in (season, "any")]
    return sorted(returns, key=lambda r: (order.get(r.season, len(order)), -r.profit_per_minute))


def _payback_label(r: CropReturn) -> str:
    if r.unlock_cost == 0:
        return "starter"
    if r.payback_harvests is None:
        return "never"
    return f"{r.payback_harvests}x"


def main() -> int:
    """Render a profit-per-minute chart for the crop catalog."""
    try:
        config_path, output_path, season = _parse_args(sys.argv)
    except ValueError as exc:
        print(f"error: {exc}")
        print("Usage: python -m farm.graph_app [output.png] [--season spring] [--config config.json]")
        return 2

    cfg = GameConfig.from_json_file(config_path) if config_path else GameConfig()
    returns = _ordered_returns(crop_returns(default_catalog(), cfg.economy), season)
    if not returns:
        print("no crops to chart")
        return 1

    labels = [r.crop_id for r in returns]
    values = np.array([r.profit_per_minute for r in returns], dtype=float)
    bar_colors = [_SEASON_COLORS.get(r.season, "#999999") for r in returns]

    fig, ax = plt.subplots(figsize=(max(6.0, 0.6 * len(returns)), 5.0))
    positions = np.arange(len(returns))
    bars = ax.bar(positions, values, color=bar_colors)
    ax.set_xticks(positions)
    ax.set_xticklabels(labels, rotation=45, ha="right")
    ax.set_ylabel("profit per minute (coins)")
    title = "Crop Returns"
    if season is not None:
        title += f" ({SEASON_NAMES[season]})"
    ax.set_title(title)
    for bar, r in zip(bars, returns):
        ax.annotate(
            _payback_label(r),
            (bar.get_x() + bar.get_width() / 2, bar.get_height()),
            ha="center",
            va="bottom",
            fontsize=8,
        )
    handles = [
        plt.Rectangle((0, 0), 1, 1, color=_SEASON_COLORS[name])
        for name in SEASONS + ("any",)
    ]
    ax.legend(handles, [SEASON_NAMES.get(name, "Any") for name in SEASONS + ("any",)], fontsize=8)
    fig.tight_layout()

    if output_path:
        fig.savefig(output_path, dpi=200)
        print(f"wrote {output_path}")
    else:
        plt.show()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
