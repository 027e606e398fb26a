"""
Game State Machine
Base:  IDLE -> SPINNING -> RESOLVING -> (CASCADING -> RESOLVING)* -> WIN_DISPLAY -> IDLE
Bonus: EVENT_HORIZON -> BONUS_ACTIVE, which loops through the same spin cycle back to BONUS_ACTIVE
"""

import logging
from enum import Enum

from void_break.utils.observers import ObserverRegistry

logger = logging.getLogger(__name__)


class GameState(str, Enum):
    IDLE = "IDLE"
    SPINNING = "SPINNING"
    RESOLVING = "RESOLVING"
    CASCADING = "CASCADING"
    WIN_DISPLAY = "WIN_DISPLAY"
    EVENT_HORIZON = "EVENT_HORIZON"
    BONUS_ACTIVE = "BONUS_ACTIVE"


class GameStateMachine:
    """Every transition returns True on success; from an illegal source it returns False and changes nothing."""

    def __init__(self):
        self.state = GameState.IDLE
        self._listeners = ObserverRegistry()

    @property
    def current(self):
        return self.state

    @property
    def is_idle(self):
        return self.state is GameState.IDLE

    @property
    def is_bonus(self):
        return self.state is GameState.BONUS_ACTIVE

    def on_change(self, callback) -> int:
        """Registers callback(new_state, old_state); returns a handle for remove_listener."""
        return self._listeners.subscribe(callback)

    def remove_listener(self, handle) -> bool:
        return self._listeners.unsubscribe(handle)

    def _transition(self, allowed_from, new_state):
        if allowed_from is not None and self.state not in allowed_from:
            logger.debug(f"Ignored transition {self.state.value} -> {new_state.value}")
            return False
        old_state = self.state
        self.state = new_state
        self._listeners.notify(new_state, old_state)
        return True

    def start_spin(self):
        return self._transition((GameState.IDLE, GameState.BONUS_ACTIVE), GameState.SPINNING)

    def spin_complete(self):
        return self._transition((GameState.SPINNING,), GameState.RESOLVING)

    def start_cascade(self):
        return self._transition((GameState.RESOLVING,), GameState.CASCADING)

    def cascade_complete(self):
        return self._transition((GameState.CASCADING,), GameState.RESOLVING)

    def show_win(self):
        return self._transition((GameState.RESOLVING,), GameState.WIN_DISPLAY)

    def start_event_horizon(self):
        allowed = tuple(s for s in GameState if s is not GameState.EVENT_HORIZON)
        return self._transition(allowed, GameState.EVENT_HORIZON)

    def enter_bonus(self):
        return self._transition((GameState.EVENT_HORIZON,), GameState.BONUS_ACTIVE)

    def return_to_idle(self, in_bonus=False):
        target = GameState.BONUS_ACTIVE if in_bonus else GameState.IDLE
        return self._transition((GameState.WIN_DISPLAY,), target)
