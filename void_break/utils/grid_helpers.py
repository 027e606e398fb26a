from enum import Enum
from typing import List, Tuple, Union

from void_break.constants import SUPPORTED_GRID_SIZES, VOID_CORE_CELLS, Symbol
from void_break.exceptions import ValidationException


class Marker(Enum):
    """Non-symbol cell states."""
    EMPTY = "EMPTY"  # cleared, waiting for a spawn
    VOID = "VOID"    # void core, never holds a symbol


Cell = Union[Symbol, Marker]
Grid = List[List[Cell]]
Coord = Tuple[int, int]


def validate_grid_size(grid_size: int) -> int:
    if grid_size not in SUPPORTED_GRID_SIZES:
        raise ValidationException(
            f"Unsupported grid size {grid_size}. Supported sizes: {list(SUPPORTED_GRID_SIZES)}",
            details={'grid_size': grid_size}
        )
    return grid_size


def is_void_core(row: int, col: int, grid_size: int) -> bool:
    """True if (row, col) is part of the void core for the given grid size."""
    return (row, col) in VOID_CORE_CELLS[validate_grid_size(grid_size)]


def get_active_cells(grid_size: int) -> List[Coord]:
    """All non-void cells in row-major order."""
    void_cells = VOID_CORE_CELLS[validate_grid_size(grid_size)]
    return [
        (row, col)
        for row in range(grid_size)
        for col in range(grid_size)
        if (row, col) not in void_cells
    ]


def empty_grid(grid_size: int) -> Grid:
    """A grid with every active cell EMPTY and the void core marked VOID."""
    void_cells = VOID_CORE_CELLS[validate_grid_size(grid_size)]
    return [
        [Marker.VOID if (row, col) in void_cells else Marker.EMPTY for col in range(grid_size)]
        for row in range(grid_size)
    ]


def is_symbol(cell: Cell) -> bool:
    return isinstance(cell, Symbol)


def clone_grid(grid) -> Grid:
    return [list(row) for row in grid]


def freeze_grid(grid) -> Tuple[Tuple[Cell, ...], ...]:
    """Immutable snapshot of a grid."""
    return tuple(tuple(row) for row in grid)


def count_symbol(grid, symbol: Symbol) -> int:
    return sum(1 for row in grid for cell in row if cell is symbol)
