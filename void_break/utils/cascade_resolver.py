import logging
import secrets
from dataclasses import dataclass
from typing import Tuple

from void_break.constants import MAX_CASCADES, Symbol
from void_break.utils.cluster_detector import Cluster, find_clusters
from void_break.utils.grid_generator import random_symbol
from void_break.utils.grid_helpers import Coord, Marker, clone_grid, freeze_grid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SettleMove:
    source: Coord
    destination: Coord
    symbol: Symbol


@dataclass(frozen=True)
class SpawnedCell:
    cell: Coord
    symbol: Symbol


@dataclass(frozen=True)
class CascadeStep:
    clusters: Tuple[Cluster, ...]
    removed_cells: Tuple[Coord, ...]
    settled_moves: Tuple[SettleMove, ...]
    spawned_cells: Tuple[SpawnedCell, ...]
    grid_after: tuple

    @property
    def winning_cells(self):
        return frozenset(self.removed_cells)


def _column_runs(grid, col):
    """Contiguous non-void row ranges of a column, top to bottom, as (first_row, last_row)."""
    runs = []
    start = None
    for row in range(len(grid)):
        if grid[row][col] is Marker.VOID:
            if start is not None:
                runs.append((start, row - 1))
                start = None
        elif start is None:
            start = row
    if start is not None:
        runs.append((start, len(grid) - 1))
    return runs


def settle_grid(grid):
    """
    Applies gravity in place and returns the list of SettleMoves.

    Each column is split into contiguous non-void runs; within a run, symbols are
    compacted toward the bottom. Void cells never receive or pass on a symbol.
    """
    moves = []
    size = len(grid)
    for col in range(size):
        for top, bottom in _column_runs(grid, col):
            write_row = bottom
            for read_row in range(bottom, top - 1, -1):
                cell = grid[read_row][col]
                if cell is Marker.EMPTY:
                    continue
                if read_row != write_row:
                    moves.append(SettleMove((read_row, col), (write_row, col), cell))
                    grid[write_row][col] = cell
                    grid[read_row][col] = Marker.EMPTY
                write_row -= 1
    return moves


def fill_empty_cells(grid, rng):
    """Spawns a weighted-random symbol into every EMPTY cell (row-major); returns SpawnedCells."""
    spawned = []
    for row, cells in enumerate(grid):
        for col, cell in enumerate(cells):
            if cell is Marker.EMPTY:
                symbol = random_symbol(rng)
                grid[row][col] = symbol
                spawned.append(SpawnedCell((row, col), symbol))
    return spawned


def resolve_cascades(initial_grid, rng=None, max_cascades=MAX_CASCADES):
    """
    Runs the cascade loop until the grid has no winning cluster.

    Each iteration removes every clustered cell, lets the remaining symbols fall,
    spawns new symbols into the gaps and records the whole step. The input grid
    is not modified.

    Args:
        initial_grid (list[list]): Grid as produced by generate_grid.
        rng (random.Random, optional): Source for spawned symbols. Defaults to secrets.SystemRandom().
        max_cascades (int): Hard cap on the number of steps.

    Returns:
        list[CascadeStep]: Ordered steps; empty when the initial grid has no win.
    """
    rng = rng or secrets.SystemRandom()
    grid = clone_grid(initial_grid)
    steps = []

    while len(steps) < max_cascades:
        clusters = find_clusters(grid)
        if not clusters:
            break

        removal_set = {cell for cluster in clusters for cell in cluster.cells}
        removed_cells = tuple(sorted(removal_set))
        for row, col in removed_cells:
            grid[row][col] = Marker.EMPTY

        settled_moves = settle_grid(grid)
        spawned_cells = fill_empty_cells(grid, rng)

        steps.append(CascadeStep(
            clusters=tuple(clusters),
            removed_cells=removed_cells,
            settled_moves=tuple(settled_moves),
            spawned_cells=tuple(spawned_cells),
            grid_after=freeze_grid(grid),
        ))
        logger.debug(f"Cascade step {len(steps)}: {len(clusters)} clusters, {len(removed_cells)} removed, "
                     f"{len(settled_moves)} moved, {len(spawned_cells)} spawned")
    else:
        if find_clusters(grid):
            logger.warning(f"Cascade cap of {max_cascades} steps reached with clusters still on the grid")

    return steps
