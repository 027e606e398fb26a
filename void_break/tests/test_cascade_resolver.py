import random
import unittest
from collections import Counter

from void_break.constants import MAX_CASCADES, VOID_CORE_CELLS, Symbol
from void_break.utils.cascade_resolver import (
    SettleMove, fill_empty_cells, resolve_cascades, settle_grid
)
from void_break.utils.grid_generator import apply_forced_outcome, generate_grid
from void_break.utils.grid_helpers import Marker, clone_grid, empty_grid, freeze_grid, is_symbol


def symbol_counts(grid):
    return Counter(cell for row in grid for cell in row if is_symbol(cell))


def cascade_chain_grid():
    grid = apply_forced_outcome('DEAD_SPIN', empty_grid(7))
    return apply_forced_outcome('CASCADE_CHAIN', grid)


class TestSettleGrid(unittest.TestCase):

    def test_symbols_fall_to_the_bottom_of_a_column(self):
        grid = empty_grid(7)
        grid[0][0] = Symbol.S1_VOID_SHARD
        grid[2][0] = Symbol.S2_NEBULA_CORE

        moves = settle_grid(grid)

        self.assertIs(grid[6][0], Symbol.S2_NEBULA_CORE)
        self.assertIs(grid[5][0], Symbol.S1_VOID_SHARD)
        self.assertIs(grid[0][0], Marker.EMPTY)
        self.assertEqual(moves, [
            SettleMove((2, 0), (6, 0), Symbol.S2_NEBULA_CORE),
            SettleMove((0, 0), (5, 0), Symbol.S1_VOID_SHARD),
        ])

    def test_symbols_never_pass_through_the_void(self):
        grid = empty_grid(7)
        grid[0][3] = Symbol.S1_VOID_SHARD
        grid[5][3] = Symbol.S2_NEBULA_CORE

        moves = settle_grid(grid)

        self.assertEqual(moves, [
            SettleMove((0, 3), (2, 3), Symbol.S1_VOID_SHARD),
            SettleMove((5, 3), (6, 3), Symbol.S2_NEBULA_CORE),
        ])
        self.assertIs(grid[3][3], Marker.VOID)
        self.assertIs(grid[4][3], Marker.VOID)

    def test_full_column_does_not_move(self):
        grid = generate_grid(7, rng=random.Random(1))
        before = clone_grid(grid)
        self.assertEqual(settle_grid(grid), [])
        self.assertEqual(grid, before)

    def test_fill_empty_cells_only_fills_empty(self):
        grid = empty_grid(9)
        grid[8][8] = Symbol.S7_NEUTRON

        spawned = fill_empty_cells(grid, random.Random(4))

        self.assertEqual(len(spawned), 72 - 1)
        self.assertIs(grid[8][8], Symbol.S7_NEUTRON)
        for row, col in VOID_CORE_CELLS[9]:
            self.assertIs(grid[row][col], Marker.VOID)
        self.assertEqual([s.cell for s in spawned], sorted(s.cell for s in spawned))


class TestResolveCascades(unittest.TestCase):

    def test_no_initial_win_returns_no_steps(self):
        grid = apply_forced_outcome('DEAD_SPIN', empty_grid(7))
        self.assertEqual(resolve_cascades(grid, rng=random.Random(0)), [])

    def test_input_grid_is_not_mutated(self):
        grid = generate_grid(7, rng=random.Random(12))
        before = freeze_grid(grid)
        resolve_cascades(grid, rng=random.Random(12))
        self.assertEqual(freeze_grid(grid), before)

    def test_cascade_chain_produces_a_second_cluster(self):
        steps = resolve_cascades(cascade_chain_grid(), rng=random.Random(3))

        self.assertGreaterEqual(len(steps), 2)
        first = steps[0]
        self.assertEqual(len(first.clusters), 1)
        self.assertIs(first.clusters[0].symbol, Symbol.S4_STELLAR_FRAG)
        self.assertEqual(first.removed_cells, tuple((6, c) for c in range(5)))

        second_symbols = {c.symbol: c for c in steps[1].clusters}
        self.assertIn(Symbol.S2_NEBULA_CORE, second_symbols)
        self.assertIn((6, 4), second_symbols[Symbol.S2_NEBULA_CORE].cells)

    def test_conservation_and_void_safety(self):
        for seed in range(30):
            for size in (7, 9):
                rng = random.Random(seed)
                grid = generate_grid(size, rng=rng)
                before = grid
                for step in resolve_cascades(grid, rng=rng):
                    self.assertEqual(len(step.spawned_cells), len(step.removed_cells))
                    self.assertEqual(list(step.removed_cells), sorted(step.removed_cells))

                    removed = Counter(before[r][c] for r, c in step.removed_cells)
                    spawned = Counter(s.symbol for s in step.spawned_cells)
                    expected = symbol_counts(before)
                    expected.subtract(removed)
                    expected.update(spawned)
                    self.assertEqual(+expected, symbol_counts(step.grid_after))

                    for spawned_cell in step.spawned_cells:
                        self.assertNotIn(spawned_cell.cell, VOID_CORE_CELLS[size])
                    for row, col in VOID_CORE_CELLS[size]:
                        self.assertIs(step.grid_after[row][col], Marker.VOID)
                    before = step.grid_after

    def test_steps_are_capped(self):
        with self.assertLogs('void_break.utils.cascade_resolver', level='WARNING') as logs:
            steps = resolve_cascades(cascade_chain_grid(), rng=random.Random(3), max_cascades=1)
        self.assertEqual(len(steps), 1)
        self.assertIn("Cascade cap of 1 steps reached", logs.output[0])

    def test_default_cap_bounds_any_spin(self):
        for seed in range(20):
            rng = random.Random(seed)
            steps = resolve_cascades(generate_grid(9, rng=rng), rng=rng)
            self.assertLessEqual(len(steps), MAX_CASCADES)

    def test_grid_after_is_immutable(self):
        grid = apply_forced_outcome('BIG_CLUSTER', generate_grid(7, rng=random.Random(8)))
        steps = resolve_cascades(grid, rng=random.Random(8))
        self.assertIsInstance(steps[0].grid_after, tuple)
        self.assertIsInstance(steps[0].grid_after[0], tuple)


if __name__ == '__main__':
    unittest.main()
