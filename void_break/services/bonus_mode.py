"""
Event Horizon bonus mode engine.

- Free spins on a 9x9 grid with a 3x3 void core
- Void Absorption turns some dead symbols into WILDs
- Scatter retrigger adds spins, capped so a bonus never exceeds its maximum
"""

import logging
import secrets
from decimal import Decimal

from void_break.constants import (
    BONUS_MAX_SPINS, BONUS_RETRIGGER_SCATTERS, BONUS_RETRIGGER_SPINS, GRID_SIZE_BONUS,
    VOID_ABSORPTION_RATE, Symbol
)
from void_break.utils.grid_generator import generate_grid
from void_break.utils.grid_helpers import count_symbol, get_active_cells, is_symbol

logger = logging.getLogger(__name__)


class BonusMode:

    def __init__(self, rng=None, max_spins=BONUS_MAX_SPINS, retrigger_scatters=BONUS_RETRIGGER_SCATTERS,
                 retrigger_spins=BONUS_RETRIGGER_SPINS, absorption_rate=VOID_ABSORPTION_RATE):
        self.rng = rng or secrets.SystemRandom()
        self.max_spins = max_spins
        self.retrigger_scatters = retrigger_scatters
        self.retrigger_spins = retrigger_spins
        self.absorption_rate = absorption_rate

        self.active = False
        self.spins_remaining = 0
        self.spins_used = 0
        self.total_win = Decimal("0")
        self.grid_size = GRID_SIZE_BONUS

    def start(self, initial_spins=None):
        self.active = True
        self.spins_remaining = self.max_spins if initial_spins is None else initial_spins
        self.spins_used = 0
        self.total_win = Decimal("0")
        self.grid_size = GRID_SIZE_BONUS
        logger.info(f"Event Horizon bonus started with {self.spins_remaining} spins")

    def use_spin(self) -> bool:
        if self.spins_remaining <= 0:
            return False
        self.spins_remaining -= 1
        self.spins_used += 1
        return True

    def check_retrigger(self, grid) -> int:
        """
        Awards extra spins when the grid holds enough scatters.

        The remaining count is capped at max_spins - spins_used. Returns the
        number of spins actually added, which is 0 when the cap leaves no room.
        """
        if count_symbol(grid, Symbol.SCATTER) < self.retrigger_scatters:
            return 0

        before = self.spins_remaining
        self.spins_remaining = min(self.spins_remaining + self.retrigger_spins, self.max_spins - self.spins_used)
        added = max(0, self.spins_remaining - before)
        self.spins_remaining = max(before, self.spins_remaining)
        if added:
            logger.info(f"Bonus retrigger: +{added} spins ({self.spins_remaining} remaining)")
        return added

    def apply_void_absorption(self, grid, exclude_cells=()):
        """
        Converts dead symbols to WILD in place, each independently with probability absorption_rate.

        WILD, SCATTER and any cell in `exclude_cells` are left untouched.

        Returns:
            list[tuple]: Converted (row, col) cells in row-major order.
        """
        excluded = set(exclude_cells)
        converted = []
        for row, col in get_active_cells(len(grid)):
            if (row, col) in excluded:
                continue
            cell = grid[row][col]
            if not is_symbol(cell) or cell in (Symbol.WILD, Symbol.SCATTER):
                continue
            if self.rng.random() < self.absorption_rate:
                grid[row][col] = Symbol.WILD
                converted.append((row, col))
        if converted:
            logger.debug(f"Void absorption converted {len(converted)} cells to WILD")
        return converted

    def generate_bonus_grid(self):
        return generate_grid(self.grid_size, rng=self.rng)

    def add_win(self, amount):
        self.total_win += Decimal(str(amount))

    def end(self):
        total = self.total_win
        logger.info(f"Event Horizon bonus ended after {self.spins_used} spins, total win {total}")
        self.active = False
        self.total_win = Decimal("0")
        self.spins_remaining = 0
        self.spins_used = 0
        return total

    @property
    def is_complete(self):
        return self.spins_remaining <= 0
