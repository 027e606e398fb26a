from dataclasses import dataclass
from typing import List, Tuple

from void_break.constants import MIN_CLUSTER_SIZE, Symbol
from void_break.utils.grid_helpers import Coord, is_symbol


@dataclass(frozen=True)
class Cluster:
    symbol: Symbol
    cells: Tuple[Coord, ...]
    has_wild: bool = False

    @property
    def size(self) -> int:
        return len(self.cells)


def _can_seed(cell) -> bool:
    return is_symbol(cell) and cell not in (Symbol.WILD, Symbol.SCATTER)


def find_clusters(grid, min_size: int = MIN_CLUSTER_SIZE) -> List[Cluster]:
    """
    Finds every winning cluster on the grid.

    Cells are scanned in row-major order. Each unvisited paying symbol seeds a
    flood fill over orthogonal neighbours that hold the same symbol or a WILD.
    WILDs join clusters but never seed one; SCATTERs, empty and void cells are
    never part of a cluster. Visited marks are shared across seeds, so clusters
    never overlap.

    Args:
        grid (list[list]): The grid to scan. Not modified.
        min_size (int): Smallest region that counts as a cluster.

    Returns:
        list[Cluster]: Clusters in order of their seed cell.
    """
    size = len(grid)
    visited = [[False] * size for _ in range(size)]
    clusters = []

    for row in range(size):
        for col in range(size):
            if visited[row][col]:
                continue
            seed = grid[row][col]
            if not _can_seed(seed):
                continue

            cells = []
            has_wild = False
            stack = [(row, col)]
            while stack:
                r, c = stack.pop()
                if not (0 <= r < size and 0 <= c < size) or visited[r][c]:
                    continue
                cell = grid[r][c]
                # Void and empty cells are not symbols, so they fail this check too.
                if cell is not seed and cell is not Symbol.WILD:
                    continue

                visited[r][c] = True
                cells.append((r, c))
                if cell is Symbol.WILD:
                    has_wild = True

                stack.extend(((r - 1, c), (r + 1, c), (r, c - 1), (r, c + 1)))

            if len(cells) >= min_size:
                clusters.append(Cluster(symbol=seed, cells=tuple(cells), has_wild=has_wild))

    return clusters
