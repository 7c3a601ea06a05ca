from __future__ import annotations

import logging

from farm.actions import Action, NextDay, UpdateGrowth, is_durable
from farm.config import GameConfig
from farm.crop_catalog import CropCatalog, default_catalog
from farm.engine import Outcome, attempt
from farm.save_state import load_game, save_game
from farm.state import GameState, new_game
from farm.storage import KeyValueSlot

logger = logging.getLogger(__name__)


class Session:
    """
    Owns the current GameState for one player and feeds it actions.

    The session never reads the clock itself: callers pass `now` in
    milliseconds to `dispatch` and `tick`. When a slot is attached, every
    accepted action that changes durable state is saved straight away.
    """

    def __init__(
        self,
        state: GameState,
        slot: KeyValueSlot | None = None,
        catalog: CropCatalog | None = None,
        config: GameConfig | None = None,
    ) -> None:
        self.state = state
        self.slot = slot
        self.catalog = catalog or default_catalog()
        self.config = config or GameConfig()
        self._last_tick: int | None = None
        self._day_elapsed_ms = 0

    @classmethod
    def start(
        cls,
        slot: KeyValueSlot | None = None,
        catalog: CropCatalog | None = None,
        config: GameConfig | None = None,
    ) -> "Session":
        """Resume the game saved in `slot`, or begin a fresh one."""
        catalog = catalog or default_catalog()
        config = config or GameConfig()
        state = None
        if slot is not None:
            state = load_game(slot, key=config.save_key, catalog=catalog, config=config)
        if state is None:
            logger.info("starting a new game")
            state = new_game(config, catalog)
        return cls(state, slot=slot, catalog=catalog, config=config)

    def dispatch(self, action: Action, now: int) -> Outcome:
        outcome = attempt(self.state, action, now, catalog=self.catalog, config=self.config)
        if not outcome.applied:
            logger.debug("rejected %s: %s", type(action).__name__, outcome.reason)
            return outcome
        changed = outcome.state is not self.state
        self.state = outcome.state
        if changed and is_durable(action):
            self.save()
        return outcome

    def tick(self, now: int) -> int:
        """
        Advance growth to `now` and roll over any in-game days that have passed.

        Returns the number of days that ended during this tick.
        """
        self.dispatch(UpdateGrowth(), now)
        if self._last_tick is not None and now > self._last_tick:
            self._day_elapsed_ms += now - self._last_tick
        self._last_tick = now

        day_ms = self.config.calendar.seconds_per_day * 1000
        days = 0
        while self._day_elapsed_ms >= day_ms:
            self._day_elapsed_ms -= day_ms
            self.dispatch(NextDay(), now)
            days += 1
        return days

    @property
    def day_progress(self) -> float:
        """Fraction of the current in-game day that has elapsed, 0.0 to 1.0."""
        day_ms = self.config.calendar.seconds_per_day * 1000
        return min(1.0, self._day_elapsed_ms / day_ms)

    def save(self) -> bool:
        if self.slot is None:
            return False
        return save_game(self.slot, self.state, key=self.config.save_key)
