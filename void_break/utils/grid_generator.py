import logging
import secrets
from collections import namedtuple

from void_break.constants import GRID_SIZE, SYMBOL_WEIGHTS, Symbol
from void_break.exceptions import NotFoundException
from void_break.utils.grid_helpers import Marker, empty_grid, is_void_core

logger = logging.getLogger(__name__)


def _weighted_choice(weights, rng):
    """
    Picks one key of `weights` with probability proportional to its weight.

    A uniform draw in [0, total_weight) is scanned against the cumulative weights
    in the mapping's iteration order.
    """
    total_weight = sum(weights.values())
    if total_weight <= 0:
        raise ValueError("Cannot pick a symbol: total weight must be positive.")

    draw = rng.random() * total_weight
    cumulative = 0
    for key, weight in weights.items():
        cumulative += weight
        if draw < cumulative:
            return key
    # Float rounding can leave draw == total_weight; fall back to the last positive weight.
    return next(k for k, w in reversed(list(weights.items())) if w > 0)


def random_symbol(rng=None, weights=None):
    """Single weighted-random symbol. `rng` defaults to a fresh SystemRandom."""
    return _weighted_choice(weights or SYMBOL_WEIGHTS, rng or secrets.SystemRandom())


def generate_grid(grid_size=GRID_SIZE, rng=None, weights=None):
    """
    Generates a grid[row][col] of weighted-random symbols.

    Every non-void cell is drawn independently; void-core cells are Marker.VOID.

    Args:
        grid_size (int): 7 for the base game, 9 for bonus mode.
        rng (random.Random, optional): Source of randomness. Defaults to secrets.SystemRandom().
        weights (dict, optional): Symbol -> weight map. Defaults to SYMBOL_WEIGHTS.

    Returns:
        list[list]: The generated grid.

    Raises:
        ValidationException: If grid_size is not a supported size.
    """
    rng = rng or secrets.SystemRandom()
    weights = weights or SYMBOL_WEIGHTS
    grid = empty_grid(grid_size)
    for row in range(grid_size):
        for col in range(grid_size):
            if grid[row][col] is Marker.EMPTY:
                grid[row][col] = _weighted_choice(weights, rng)
    return grid


# --- Forced outcomes (debug / QA) ---

def _place(grid, positions, symbol):
    size = len(grid)
    for row, col in positions:
        if 0 <= row < size and 0 <= col < size and not is_void_core(row, col, size):
            grid[row][col] = symbol


def _setup_big_cluster(grid):
    target = Symbol.S7_NEUTRON
    block = [(r, c) for r in range(3) for c in range(4)]
    _place(grid, block, target)
    # Fence the block so neighbours can't extend the cluster past 12.
    fence = [(3, c) for c in range(4)] + [(r, 4) for r in range(3)]
    fence_symbols = (Symbol.S1_VOID_SHARD, Symbol.S2_NEBULA_CORE)
    for i, pos in enumerate(fence):
        _place(grid, [pos], fence_symbols[i % 2])
    return grid


def _setup_dead_spin(grid):
    # Row-major index mod 4 never repeats between orthogonal neighbours on a 7x7 or 9x9 grid.
    paying = (Symbol.S1_VOID_SHARD, Symbol.S2_NEBULA_CORE, Symbol.S3_PLASMA_ORB, Symbol.S4_STELLAR_FRAG)
    size = len(grid)
    for row in range(size):
        for col in range(size):
            if grid[row][col] is not Marker.VOID:
                grid[row][col] = paying[(row * size + col) % len(paying)]
    return grid


def _setup_cascade_chain(grid):
    bottom = len(grid) - 1
    # Cluster A: five S4 along the bottom row.
    _place(grid, [(bottom, c) for c in range(5)], Symbol.S4_STELLAR_FRAG)
    # Cluster B waits as a static group of four S2 plus one S2 that drops in once A clears.
    _place(grid, [(bottom, 5), (bottom, 6), (bottom - 1, 6), (bottom - 2, 6)], Symbol.S2_NEBULA_CORE)
    _place(grid, [(bottom - 1, 4)], Symbol.S2_NEBULA_CORE)
    # Separators keep A at exactly five and B at four until the drop.
    _place(grid, [(bottom - 1, 0), (bottom - 1, 2)], Symbol.S3_PLASMA_ORB)
    _place(grid, [(bottom - 1, 1), (bottom - 1, 3), (bottom - 1, 5), (bottom - 2, 5), (bottom - 3, 6)],
           Symbol.S1_VOID_SHARD)
    return grid


def _setup_scatter_trigger(grid):
    last = len(grid) - 1
    _place(grid, [(0, 0), (0, last), (last, 0)], Symbol.SCATTER)
    return grid


ForcedOutcome = namedtuple('ForcedOutcome', ['name', 'description', 'setup'])

FORCED_OUTCOMES = {
    'BIG_CLUSTER': ForcedOutcome(
        'BIG_CLUSTER', 'Places a fenced block of 12 Neutron Crystals for a guaranteed tier-2 cluster',
        _setup_big_cluster),
    'DEAD_SPIN': ForcedOutcome(
        'DEAD_SPIN', 'Arranges paying symbols so no cluster of 5+ exists',
        _setup_dead_spin),
    'CASCADE_CHAIN': ForcedOutcome(
        'CASCADE_CHAIN', 'Arranges symbols so removing one cluster creates another after gravity',
        _setup_cascade_chain),
    'SCATTER_TRIGGER': ForcedOutcome(
        'SCATTER_TRIGGER', 'Places 3 scatters on the grid corners',
        _setup_scatter_trigger),
}


def apply_forced_outcome(name, grid):
    """
    Applies a named forced outcome to `grid` in place and returns it.

    Raises:
        NotFoundException: If `name` is not a registered forced outcome.
    """
    outcome = FORCED_OUTCOMES.get(name)
    if outcome is None:
        raise NotFoundException(
            f"Unknown forced outcome '{name}'. Valid outcomes are: {list(FORCED_OUTCOMES.keys())}",
            details={'forced_outcome': name}
        )
    logger.debug(f"Applying forced outcome {name} to {len(grid)}x{len(grid)} grid")
    return outcome.setup(grid)
