from __future__ import annotations

import argparse
import logging
import sys
import time

from farm.actions import (
    Action,
    BuyCrop,
    ChangeSeason,
    HarvestCrop,
    IncreasePlotSize,
    NextDay,
    PlantCrop,
    SellCrop,
    SetPlayerName,
    UnlockCrop,
    UpdateGrowth,
)
from farm.config import GameConfig, _normalize_season
from farm.crop_catalog import crops_for_season
from farm.economy import best_crop_for_season
from farm.growth import format_duration, growth_percent, seconds_remaining
from farm.plots import SEASON_ICONS, SEASON_NAMES, plot_id
from farm.pricing import crop_unlock_cost, expansion_cost, sell_earnings
from farm.session import Session
from farm.storage import JsonFileSlot
from farm.validation import validate_game_config

REASON_MESSAGES = {
    "unknown_crop": "no such crop",
    "unknown_plot": "no such plot",
    "unknown_season": "no such season",
    "crop_locked": "that crop is still locked",
    "wrong_season": "that crop can't be planted this season",
    "no_seeds": "you have no seeds of that crop",
    "plot_occupied": "that plot already has a crop",
    "plot_empty": "nothing is planted there",
    "not_ready": "that crop isn't ready yet",
    "insufficient_coins": "not enough coins",
    "insufficient_stock": "not enough seeds to sell",
    "invalid_quantity": "quantity must be at least 1",
    "already_unlocked": "that crop is already unlocked",
    "invalid_snapshot": "that save can't be loaded",
}


def _now_ms() -> int:
    return int(time.time() * 1000)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="farm", description="Play the farm from the command line.")
    parser.add_argument("save_dir", help="directory holding the save slot")
    parser.add_argument("--config", help="optional JSON game config")
    parser.add_argument("--verbose", action="store_true", help="log engine and save activity")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("status", help="show coins, calendar, inventory and plots")
    shop = sub.add_parser("shop", help="list crops with prices")
    shop.add_argument("--season", help="only crops plantable in this season")

    for name in ("buy", "sell"):
        p = sub.add_parser(name, help=f"{name} seeds")
        p.add_argument("crop")
        p.add_argument("quantity", type=int, nargs="?", default=1)

    plant = sub.add_parser("plant", help="sow a crop at x y")
    plant.add_argument("x", type=int)
    plant.add_argument("y", type=int)
    plant.add_argument("crop")

    harvest = sub.add_parser("harvest", help="harvest the crop at x y")
    harvest.add_argument("x", type=int)
    harvest.add_argument("y", type=int)

    unlock = sub.add_parser("unlock", help="unlock a crop for purchase")
    unlock.add_argument("crop")

    sub.add_parser("expand", help="grow the field by one row and column")

    next_day = sub.add_parser("next-day", help="end the current day")
    next_day.add_argument("days", type=int, nargs="?", default=1)

    season = sub.add_parser("season", help="switch the current season")
    season.add_argument("season")

    name = sub.add_parser("name", help="set the farmer's name")
    name.add_argument("name")
    return parser


def _action_for(args: argparse.Namespace) -> list[Action]:
    cmd = args.command
    if cmd == "buy":
        return [BuyCrop(args.crop, args.quantity)]
    if cmd == "sell":
        return [SellCrop(args.crop, args.quantity)]
    if cmd == "plant":
        return [PlantCrop(plot_id(args.x, args.y), args.crop)]
    if cmd == "harvest":
        return [HarvestCrop(plot_id(args.x, args.y))]
    if cmd == "unlock":
        return [UnlockCrop(args.crop)]
    if cmd == "expand":
        return [IncreasePlotSize()]
    if cmd == "next-day":
        return [NextDay() for _ in range(max(0, args.days))]
    if cmd == "season":
        return [ChangeSeason(_normalize_season(args.season))]
    if cmd == "name":
        return [SetPlayerName(args.name)]
    return []


def _print_status(session: Session, now: int) -> None:
    state = session.state
    catalog = session.catalog
    season = state.season
    print(f"farmer: {state.player_name}")
    print(f"day {state.day_count}, {SEASON_ICONS[season]} {SEASON_NAMES[season]}")
    print(f"coins: {state.coins}")
    print(f"field: {state.grid.rows}x{state.grid.cols}")

    print("inventory:")
    if not state.inventory:
        print("  (empty)")
    for crop_id, qty in state.inventory.items():
        crop = catalog.find_crop(crop_id)
        icon = crop.icon if crop else ""
        print(f"  {icon} {crop_id}: {qty}")

    print("plots:")
    planted = [p for p in state.plots if p.crop is not None]
    if not planted:
        print("  (nothing planted)")
    for plot in planted:
        pct = growth_percent(plot.crop, plot.planted_at, now)
        left = seconds_remaining(plot.crop, plot.planted_at, now)
        detail = "ready" if left == 0 else f"{pct}% ({format_duration(left)} left)"
        print(f"  ({plot.x},{plot.y}) {plot.crop.icon} {plot.crop.crop_id}: {detail}")
    cost = expansion_cost(state.grid.rows, state.grid.cols, session.config.economy)
    print(f"next expansion: {cost} coins")


def _print_shop(session: Session, season: str | None) -> None:
    state = session.state
    economy = session.config.economy
    for crop in crops_for_season(session.catalog, season):
        if state.is_unlocked(crop.crop_id):
            status = f"buy {crop.unit_price}, sells back {sell_earnings(crop, 1, economy)}"
        else:
            status = f"locked (unlock {crop_unlock_cost(crop, economy)})"
        print(
            f"{crop.icon} {crop.crop_id:<11} {crop.season:<7} "
            f"grows {format_duration(crop.growth_seconds):<7} yields {crop.harvest_yield:<4} {status}"
        )
    best = best_crop_for_season(session.catalog, season or state.season, state.unlocked_crop_ids, economy)
    if best is not None:
        print(f"best unlocked crop: {best.crop_id} ({best.profit_per_minute} coins/min)")


def main(argv: list[str] | None = None) -> int:
    """Run one CLI command against the save in SAVE_DIR."""
    parser = _build_parser()
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    cfg = GameConfig.from_json_file(args.config) if args.config else GameConfig()
    validate_game_config(cfg)
    session = Session.start(JsonFileSlot(args.save_dir), config=cfg)
    now = _now_ms()
    session.dispatch(UpdateGrowth(), now)

    if args.command == "status":
        _print_status(session, now)
        return 0
    if args.command == "shop":
        try:
            season = _normalize_season(args.season) if args.season else None
        except ValueError as exc:
            print(f"error: {exc}")
            return 2
        _print_shop(session, season)
        return 0

    try:
        actions = _action_for(args)
    except ValueError as exc:
        print(f"error: {exc}")
        return 2
    for action in actions:
        outcome = session.dispatch(action, now)
        if not outcome.applied:
            print(f"can't do that: {REASON_MESSAGES.get(outcome.reason, outcome.reason)}")
            return 1
    state = session.state
    print(f"ok. day {state.day_count}, {SEASON_NAMES[state.season]}, {state.coins} coins")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
