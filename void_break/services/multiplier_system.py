import logging
import math
import secrets
from dataclasses import dataclass
from typing import Optional

from void_break.constants import BUBBLE_BASE_LIFESPAN, BUBBLE_ORBIT_STEP, BUBBLE_VALUES, GRID_SIZE

logger = logging.getLogger(__name__)

TWO_PI = math.pi * 2


@dataclass
class Bubble:
    id: int
    value: int
    orbit_angle: float
    row: int
    col: int
    spins_left: Optional[int]  # None while sticky in bonus mode
    active: bool = True


def perimeter_position(grid_size, angle):
    """
    Maps an orbit angle to a perimeter cell, clockwise from the top-left corner.

    The perimeter has 4 * size - 4 cells: the top edge left to right, the right
    edge downward, the bottom edge right to left, then the left edge upward.
    """
    perimeter = grid_size * 4 - 4
    idx = math.floor(((angle % TWO_PI) / TWO_PI) * perimeter) % perimeter

    if idx < grid_size:
        return 0, idx
    if idx < grid_size * 2 - 1:
        return idx - grid_size + 1, grid_size - 1
    if idx < grid_size * 3 - 2:
        return grid_size - 1, grid_size - 1 - (idx - (grid_size * 2 - 1))
    return grid_size - 1 - (idx - (grid_size * 3 - 2)), 0


class MultiplierSystem:
    """
    Multiplier bubbles orbiting the grid perimeter.

    A bubble sitting on a cell that is part of a winning cluster is consumed and
    multiplies that step's win. Several bubbles on the same win multiply each
    other. Bubbles expire after a number of spins in the base game and stay
    until consumed during bonus mode.
    """

    def __init__(self, rng=None, lifespan=BUBBLE_BASE_LIFESPAN):
        self.rng = rng or secrets.SystemRandom()
        self.lifespan = lifespan
        self.bubbles = []
        self.is_bonus = False
        self._next_id = 0

    def spawn_bubble(self, grid_size=GRID_SIZE):
        value = self.rng.choice(BUBBLE_VALUES)
        orbit_angle = self.rng.uniform(0, TWO_PI)
        row, col = perimeter_position(grid_size, orbit_angle)

        bubble = Bubble(
            id=self._next_id,
            value=value,
            orbit_angle=orbit_angle,
            row=row,
            col=col,
            spins_left=None if self.is_bonus else self.lifespan,
        )
        self._next_id += 1
        self.bubbles.append(bubble)
        logger.info(f"Spawned x{value} multiplier bubble {bubble.id} at ({row}, {col})")
        return bubble

    def update_orbits(self, delta_angle=BUBBLE_ORBIT_STEP, grid_size=GRID_SIZE):
        for bubble in self.bubbles:
            if not bubble.active:
                continue
            bubble.orbit_angle += delta_angle
            bubble.row, bubble.col = perimeter_position(grid_size, bubble.orbit_angle)

    def check_activation(self, cluster_cells):
        """
        Consumes every active bubble that sits on one of `cluster_cells`.

        Returns:
            dict: {"bubbles": list[Bubble], "total_multiplier": int}; the multiplier is 1 when nothing matched.
        """
        cell_set = set(cluster_cells)
        matched = [b for b in self.bubbles if b.active and (b.row, b.col) in cell_set]

        total_multiplier = 1
        for bubble in matched:
            total_multiplier *= bubble.value
            bubble.active = False

        if matched:
            logger.info(f"Activated {len(matched)} bubble(s) for x{total_multiplier}")
        return {"bubbles": matched, "total_multiplier": total_multiplier}

    def on_spin(self):
        """Drops consumed bubbles and ages the rest; bubbles reaching zero spins expire."""
        survivors = []
        for bubble in self.bubbles:
            if not bubble.active:
                continue
            if bubble.spins_left is not None:
                bubble.spins_left -= 1
                if bubble.spins_left <= 0:
                    continue
            survivors.append(bubble)
        self.bubbles = survivors

    def double_all(self):
        for bubble in self.bubbles:
            if bubble.active:
                bubble.value *= 2

    def enter_bonus(self):
        self.is_bonus = True
        for bubble in self.bubbles:
            bubble.spins_left = None

    def exit_bonus(self):
        # Bubbles carried out of bonus keep infinite lifespan until consumed.
        self.is_bonus = False

    def clear(self):
        self.bubbles = []

    @property
    def active_bubbles(self):
        return [b for b in self.bubbles if b.active]

    def snapshot(self):
        return [
            {"id": b.id, "value": b.value, "row": b.row, "col": b.col}
            for b in self.active_bubbles
        ]
