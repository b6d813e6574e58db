"""
Tests for the board state: construction, counters, snapshots and the lose condition.
"""

from unittest import TestCase, main

import numpy as np

from gridmerge.core.gameboard import MAX_TILE, Board, count_mergeable_pairs, is_done, is_full, is_tile_value
from gridmerge.errors import InvalidSize


class TestBoard(TestCase):
    """Test Board construction and mutators."""

    def test_new_board_is_empty(self):
        """A new board has no tile, zero scores and cleared flags."""
        board = Board(size=4)

        self.assertEqual(board.cells.shape, (4, 4))
        self.assertEqual(np.count_nonzero(board.cells), 0)
        self.assertEqual(board.tile_count, 0)
        self.assertEqual(board.score, 0)
        self.assertEqual(board.high_score, 0)
        self.assertFalse(board.has_won)
        self.assertFalse(board.continued)

    def test_size_below_two_is_rejected(self):
        """Boards smaller than 2x2 cannot be built."""
        with self.assertRaises(InvalidSize):
            Board(size=1)

    def test_from_cells_counts_tiles(self):
        """Tile count is derived from the grid."""
        board = Board.from_cells([[2, 0, 0], [0, 4, 0], [0, 0, 8]], score=12)

        self.assertEqual(board.size, 3)
        self.assertEqual(board.tile_count, 3)
        self.assertEqual(board.score, 12)
        self.assertEqual(board.high_score, 12)

    def test_from_cells_copies_the_grid(self):
        """The board never aliases the array it was built from."""
        grid = np.array([[2, 0], [0, 0]])
        board = Board.from_cells(grid)
        grid[1, 1] = 4

        self.assertEqual(board.get(1, 1), 0)

    def test_from_cells_rejects_invalid_values(self):
        """Values that are not powers of two >= 2 are rejected."""
        for grid in ([[3, 0], [0, 0]], [[1, 0], [0, 0]], [[-2, 0], [0, 0]]):
            with self.subTest(grid=grid):
                with self.assertRaises(ValueError):
                    Board.from_cells(grid)

    def test_from_cells_rejects_non_square_grid(self):
        """Only square grids are accepted."""
        with self.assertRaises(ValueError):
            Board.from_cells([[2, 0, 0], [0, 0, 0]])

    def test_from_cells_rejects_score_above_high_score(self):
        """The high score can never be below the score."""
        with self.assertRaises(ValueError):
            Board.from_cells([[2, 0], [0, 0]], score=8, high_score=4)

    def test_place_tile(self):
        """Placing a tile fills the cell and counts it."""
        board = Board(size=2)
        board.place(1, 0, 4)

        self.assertEqual(board.get(1, 0), 4)
        self.assertEqual(board.tile_count, 1)

    def test_place_on_occupied_cell(self):
        """A tile cannot be placed over another one."""
        board = Board.from_cells([[2, 0], [0, 0]])

        with self.assertRaises(ValueError):
            board.place(0, 0, 2)
        self.assertEqual(board.tile_count, 1)

    def test_add_score_carries_high_score(self):
        """High score follows the score only when exceeded."""
        board = Board.from_cells([[2, 0], [0, 0]], score=4, high_score=100)
        board.add_score(8)
        self.assertEqual((board.score, board.high_score), (12, 100))

        board.add_score(100)
        self.assertEqual((board.score, board.high_score), (112, 112))

    def test_is_full(self):
        """A board is full when every cell holds a tile."""
        self.assertTrue(Board.from_cells([[2, 4], [8, 16]]).is_full())
        self.assertFalse(Board.from_cells([[2, 4], [8, 0]]).is_full())

    def test_snapshot_is_independent(self):
        """Later changes to the board never reach a snapshot."""
        board = Board.from_cells([[2, 0], [0, 0]], score=4)
        snapshot = board.snapshot()

        board.place(1, 1, 2)
        board.add_score(8)

        np.testing.assert_array_equal(snapshot.cells, np.array([[2, 0], [0, 0]]))
        self.assertEqual(snapshot.tile_count, 1)
        self.assertEqual(snapshot.score, 4)
        self.assertFalse(snapshot.cells.flags.writeable)

    def test_restore_keeps_high_score_and_flags(self):
        """Restoring a snapshot leaves the high score and win flags alone."""
        board = Board.from_cells([[2, 0], [0, 0]])
        snapshot = board.snapshot()

        board.place(1, 1, 2)
        board.add_score(2048)
        board.has_won = True
        board.restore(snapshot)

        np.testing.assert_array_equal(board.cells, np.array([[2, 0], [0, 0]]))
        self.assertEqual(board.tile_count, 1)
        self.assertEqual(board.score, 0)
        self.assertEqual(board.high_score, 2048)
        self.assertTrue(board.has_won)

        # ##>: The restored grid is writable and separate from the snapshot.
        board.place(0, 1, 2)
        self.assertEqual(snapshot.cells[0, 1], 0)

    def test_reset_keeps_high_score(self):
        """Reset clears everything but the high score."""
        board = Board.from_cells([[2, 2048], [0, 0]], score=30, high_score=50, has_won=True, continued=True)
        board.reset()

        self.assertEqual(np.count_nonzero(board.cells), 0)
        self.assertEqual((board.tile_count, board.score, board.high_score), (0, 0, 50))
        self.assertFalse(board.has_won)
        self.assertFalse(board.continued)


class TestBoardUtils(TestCase):
    """Test helper functions operating on grids."""

    def test_is_tile_value(self):
        """Only powers of two from 2 upward are tile values."""
        self.assertTrue(all(is_tile_value(2**exponent) for exponent in range(1, 63)))
        self.assertFalse(any(is_tile_value(value) for value in (-4, 0, 1, 3, 6, 2049)))

    def test_count_mergeable_pairs(self):
        """Each equal non-zero neighbour pair is counted once."""
        cells = np.array([[2, 2, 2, 0], [4, 0, 0, 0], [4, 8, 8, 0], [0, 0, 0, 0]])

        # ##>: Two pairs in the first row, one vertical pair of 4, one pair of 8.
        self.assertEqual(count_mergeable_pairs(cells), 4)

    def test_empty_neighbours_are_not_pairs(self):
        """Adjacent empty cells never count as mergeable."""
        self.assertEqual(count_mergeable_pairs(np.zeros((4, 4), dtype=np.int64)), 0)

    def test_largest_tiles_are_not_pairs(self):
        """A full board whose only equal neighbours hold the largest tile is finished."""
        cells = np.array([[MAX_TILE, MAX_TILE], [2, 4]], dtype=np.int64)

        self.assertEqual(count_mergeable_pairs(cells), 0)
        self.assertTrue(is_done(cells))

    def test_is_full(self):
        """Full grids have no zero."""
        self.assertTrue(is_full(np.array([[2, 4], [4, 2]])))
        self.assertFalse(is_full(np.array([[2, 4], [4, 0]])))

    def test_is_finished(self):
        """A full board without mergeable pairs is lost."""
        cells = np.array([[2, 4, 8, 16], [32, 64, 128, 256], [512, 1024, 2048, 4096], [8192, 16384, 32768, 65536]])
        self.assertTrue(is_done(cells))

    def test_not_finished(self):
        """A full board with a mergeable pair is still playable."""
        cells = np.array([[2, 2, 8, 16], [32, 64, 128, 256], [512, 1024, 2048, 4096], [8192, 16384, 32768, 65536]])
        self.assertFalse(is_done(cells))

    def test_not_full_is_not_finished(self):
        """A board with an empty cell is never lost."""
        cells = np.array([[2, 4, 8, 16], [32, 64, 128, 256], [512, 1024, 2048, 4096], [8192, 16384, 32768, 0]])
        self.assertFalse(is_done(cells))


if __name__ == '__main__':
    main()
