"""
Game session orchestration.

A GameSession owns one meter, one bubble system, one bonus engine, one state
machine and one RNG, and runs a single spin lifecycle at a time. spin()
resolves the whole outcome up front; the presentation layer then walks the
state machine through the cascade steps (see spin_playback) and calls
finish_spin() when it is done. play_spin() does all of that synchronously.
"""

import logging
import random
import secrets
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from void_break.config import Config
from void_break.constants import (
    BET_LEVELS, BONUS_BUY, GRAVITATIONAL_SURGE_SIZE, GRID_SIZE, GRID_SIZE_BONUS, Symbol
)
from void_break.exceptions import NotFoundException, ValidationException
from void_break.services.bonus_mode import BonusMode
from void_break.services.game_state_machine import GameState, GameStateMachine
from void_break.services.multiplier_system import MultiplierSystem
from void_break.services.singularity_meter import SingularityMeter
from void_break.utils.cascade_resolver import resolve_cascades
from void_break.utils.cluster_detector import find_clusters
from void_break.utils.grid_generator import FORCED_OUTCOMES, apply_forced_outcome, generate_grid
from void_break.utils.grid_helpers import count_symbol, freeze_grid
from void_break.utils.pay_calculator import calculate_total_win

logger = logging.getLogger(__name__)


@dataclass
class SpinResult:
    initial_grid: tuple
    steps: list
    total_win: Decimal
    step_details: list
    bet_amount: Decimal
    is_bonus: bool
    scatter_count: int
    converted_cells: list = field(default_factory=list)
    activated_bubbles: list = field(default_factory=list)
    event_horizon_triggered: bool = False
    retrigger_spins: int = 0
    meter_value: int = 0
    bonus_spins_remaining: int = 0

    @property
    def is_win(self):
        return bool(self.steps)

    @property
    def win_multiplier(self):
        """Total win as a multiple of the bet."""
        if not self.bet_amount:
            return Decimal("0")
        return self.total_win / self.bet_amount


class GameSession:

    def __init__(self, config=Config, rng=None):
        self.config = config
        if rng is None:
            rng = random.Random(config.RNG_SEED) if config.RNG_SEED is not None else secrets.SystemRandom()
        self.rng = rng

        self.meter = SingularityMeter()
        self.bubbles = MultiplierSystem(rng=self.rng, lifespan=config.BUBBLE_LIFESPAN)
        self.bonus = BonusMode(
            rng=self.rng,
            max_spins=config.BONUS_MAX_SPINS,
            retrigger_scatters=config.RETRIGGER_SCATTERS,
            retrigger_spins=config.RETRIGGER_SPINS,
            absorption_rate=config.VOID_ABSORPTION_RATE,
        )
        self.state_machine = GameStateMachine()

        self.bet_index = config.DEFAULT_BET_INDEX
        self.last_result: Optional[SpinResult] = None
        self.last_bonus_total: Optional[Decimal] = None
        self._pending_event_horizon = False

        self.meter.on_threshold(self._handle_threshold)

    # --- Bets ---

    @property
    def bet_amount(self) -> Decimal:
        return BET_LEVELS[self.bet_index]

    def set_bet_index(self, index: int) -> bool:
        """Changes the bet level. Only allowed while idle in the base game."""
        if not 0 <= index < len(BET_LEVELS):
            raise ValidationException(
                f"Bet index {index} is out of range (0-{len(BET_LEVELS) - 1})",
                details={'bet_index': index}
            )
        if not self.state_machine.is_idle or self.bonus.active:
            return False
        self.bet_index = index
        return True

    @property
    def grid_size(self) -> int:
        return GRID_SIZE_BONUS if self.bonus.active else GRID_SIZE

    @property
    def state(self) -> GameState:
        return self.state_machine.current

    # --- Threshold effects ---

    def _handle_threshold(self, threshold, value):
        if threshold == 25:
            self.bubbles.spawn_bubble(self.grid_size)
        elif threshold == 75:
            self.bubbles.double_all()
        elif threshold == 100 and not self.bonus.active:
            logger.info(f"Singularity meter full ({value}); Event Horizon pending")
            self._pending_event_horizon = True

    def _start_pending_event_horizon_if_idle(self):
        if self._pending_event_horizon and self.state_machine.is_idle:
            self._pending_event_horizon = False
            self.state_machine.start_event_horizon()

    # --- Spin lifecycle ---

    def spin(self, forced_outcome: str = None) -> Optional[SpinResult]:
        """
        Resolves one spin and leaves the state machine in RESOLVING.

        Args:
            forced_outcome (str, optional): Name from FORCED_OUTCOMES applied to the generated grid.

        Returns:
            SpinResult, or None when a spin cannot start (wrong state or no bonus spins left).

        Raises:
            NotFoundException: If forced_outcome is not a registered outcome.
        """
        if forced_outcome is not None and forced_outcome not in FORCED_OUTCOMES:
            raise NotFoundException(
                f"Unknown forced outcome '{forced_outcome}'",
                details={'forced_outcome': forced_outcome}
            )

        in_bonus = self.bonus.active
        if in_bonus and self.bonus.is_complete:
            return None
        if not self.state_machine.start_spin():
            logger.debug(f"Spin refused in state {self.state_machine.current.value}")
            return None
        if in_bonus:
            self.bonus.use_spin()

        self.bubbles.on_spin()

        grid_size = self.grid_size
        grid = generate_grid(grid_size, rng=self.rng)
        if forced_outcome:
            apply_forced_outcome(forced_outcome, grid)

        converted = []
        if in_bonus and not find_clusters(grid):
            converted = self.bonus.apply_void_absorption(grid)

        initial_grid = freeze_grid(grid)
        self.state_machine.spin_complete()

        steps = resolve_cascades(grid, rng=self.rng, max_cascades=self.config.MAX_CASCADES)

        step_multipliers = []
        activated = []
        for step in steps:
            # Bubbles spawned by this step can only be hit by later steps.
            activation = self.bubbles.check_activation(step.removed_cells)
            step_multipliers.append(activation["total_multiplier"])
            activated.extend(activation["bubbles"])

            for cluster in step.clusters:
                self.meter.charge_from_cluster(cluster.size)
                if cluster.size >= GRAVITATIONAL_SURGE_SIZE:
                    logger.info(f"Gravitational Surge: {cluster.symbol.value} cluster of {cluster.size}")
                    self.bubbles.spawn_bubble(grid_size)

        if not steps:
            self.meter.decay()

        bet = self.bet_amount
        win = calculate_total_win(steps, bet, step_multipliers)
        scatter_count = count_symbol(initial_grid, Symbol.SCATTER)

        retrigger_spins = 0
        if in_bonus:
            retrigger_spins = self.bonus.check_retrigger(initial_grid)
            self.bonus.add_win(win["total_win"])
        elif scatter_count >= self.config.BASE_TRIGGER_SCATTERS:
            logger.info(f"{scatter_count} scatters landed; Event Horizon pending")
            self._pending_event_horizon = True

        result = SpinResult(
            initial_grid=initial_grid,
            steps=steps,
            total_win=win["total_win"],
            step_details=win["steps"],
            bet_amount=bet,
            is_bonus=in_bonus,
            scatter_count=scatter_count,
            converted_cells=converted,
            activated_bubbles=activated,
            event_horizon_triggered=self._pending_event_horizon,
            retrigger_spins=retrigger_spins,
            meter_value=self.meter.value,
            bonus_spins_remaining=self.bonus.spins_remaining,
        )
        self.last_result = result
        logger.info(
            f"Spin resolved: bonus={in_bonus} bet={bet} cascades={len(steps)} win={result.total_win} "
            f"meter={self.meter.value} scatters={scatter_count}"
        )
        return result

    def finish_spin(self) -> GameState:
        """
        Leaves WIN_DISPLAY once presentation is done.

        Starts a pending Event Horizon, ends a completed bonus (its total is kept
        in last_bonus_total and the meter is emptied) or returns to IDLE / BONUS_ACTIVE.
        """
        if self.state_machine.current is not GameState.WIN_DISPLAY:
            return self.state_machine.current

        if self._pending_event_horizon and not self.bonus.active:
            self._pending_event_horizon = False
            self.state_machine.start_event_horizon()
        elif self.bonus.active and self.bonus.is_complete:
            self.last_bonus_total = self.bonus.end()
            # Charge gathered during free spins does not carry into the base game.
            self.meter.reset()
            self.bubbles.exit_bonus()
            self.bubbles.update_orbits(0, GRID_SIZE)
            self.state_machine.return_to_idle(in_bonus=False)
        else:
            self.state_machine.return_to_idle(in_bonus=self.bonus.active)
        return self.state_machine.current

    # --- Event Horizon ---

    def complete_event_horizon(self) -> bool:
        """Starts the free spins once the Event Horizon presentation is over."""
        if self.state_machine.current is not GameState.EVENT_HORIZON:
            return False
        self.bonus.start()
        self.bubbles.enter_bonus()
        self.bubbles.update_orbits(0, GRID_SIZE_BONUS)
        self.meter.reset()
        self._pending_event_horizon = False
        return self.state_machine.enter_bonus()

    def trigger_event_horizon(self) -> bool:
        if self.bonus.active:
            return False
        self._pending_event_horizon = False
        return self.state_machine.start_event_horizon()

    def set_meter(self, value):
        """Debug override for the meter. Threshold effects fire as for a charge."""
        crossed = self.meter.set(value)
        self._start_pending_event_horizon_if_idle()
        return crossed

    def buy_bonus(self, tier: str) -> Optional[dict]:
        """
        Buys a meter head start. Only available while idle in the base game.

        Returns:
            dict with tier, name, cost, meter_value and event_horizon, or None when not allowed.

        Raises:
            NotFoundException: If tier is not a bonus-buy tier.
        """
        option = BONUS_BUY.get(tier)
        if option is None:
            raise NotFoundException(
                f"Unknown bonus buy tier '{tier}'. Valid tiers are: {list(BONUS_BUY.keys())}",
                details={'tier': tier}
            )
        if not self.state_machine.is_idle or self.bonus.active:
            return None

        cost = option['cost_multiplier'] * self.bet_amount
        self.meter.set(option['meter_value'])
        self._start_pending_event_horizon_if_idle()
        logger.info(f"Bonus buy {tier} for {cost}; meter at {self.meter.value}")
        return {
            'tier': tier,
            'name': option['name'],
            'cost': cost,
            'meter_value': self.meter.value,
            'event_horizon': self.state_machine.current is GameState.EVENT_HORIZON,
        }

    def play_spin(self, forced_outcome: str = None) -> Optional[SpinResult]:
        """Runs spin() and every presentation transition without delays."""
        result = self.spin(forced_outcome)
        if result is None:
            return None
        for _ in result.steps:
            self.state_machine.start_cascade()
            self.state_machine.cascade_complete()
        self.state_machine.show_win()
        self.finish_spin()
        if self.state_machine.current is GameState.EVENT_HORIZON:
            self.complete_event_horizon()
        return result

    def snapshot(self) -> dict:
        return {
            'state': self.state_machine.current,
            'bet_amount': self.bet_amount,
            'meter': self.meter.value,
            'meter_level': self.meter.level,
            'bubbles': self.bubbles.snapshot(),
            'bonus_active': self.bonus.active,
            'bonus_spins_remaining': self.bonus.spins_remaining,
            'bonus_total_win': self.bonus.total_win,
        }
