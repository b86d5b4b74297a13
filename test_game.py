import random
import unittest
import numpy as np
from unittest.mock import patch
from game2048.game import Direction, Grid, ShiftResult
from game2048.tile import Tile


def line_grid(row):
    """A 4x4 grid whose first row is `row` and everything else empty."""
    board = np.zeros((4, 4), dtype=int)
    board[0] = row
    return Grid.from_board(board)


class TestTile(unittest.TestCase):

    def test_merge(self):
        a, b = Tile(8), Tile(8)
        self.assertEqual(a.merge(b), 16)
        self.assertEqual((a.value, b.value), (16, 0))
        self.assertTrue(b.is_empty)

    def test_swap(self):
        a, b = Tile(2), Tile(0)
        a.swap(b)
        self.assertEqual((a.value, b.value), (0, 2))


class TestGrid(unittest.TestCase):

    def setUp(self):
        self.grid = Grid(rng=random.Random(7))

    def test_initial_board(self):
        # Ensure the board starts with exactly two tiles
        self.assertEqual(np.count_nonzero(self.grid.board), 2)
        self.assertTrue(np.all(np.isin(self.grid.board[self.grid.board != 0], [2, 4])))

    def test_spawn(self):
        # Add a random tile and check if the count increases
        initial_count = np.count_nonzero(self.grid.board)
        self.assertTrue(self.grid.spawn())
        self.assertEqual(np.count_nonzero(self.grid.board), initial_count + 1)
        r, c, val = self.grid.last_spawn
        self.assertEqual(self.grid.board[r, c], val)

    def test_spawn_full_grid(self):
        full = np.arange(1, 17).reshape(4, 4)
        grid = Grid.from_board(full)
        self.assertFalse(grid.spawn())
        np.testing.assert_array_equal(grid.board, full)

    def test_spawn_value_probability(self):
        grid = Grid(start_tiles=0)
        with patch.object(grid.rng, 'random', return_value=0.95):
            grid.spawn()
        self.assertEqual(grid.max_tile(), 4)
        with patch.object(grid.rng, 'random', return_value=0.5):
            grid.spawn()
        self.assertEqual(sorted(grid.board[grid.board != 0]), [2, 4])

    def test_board_setter_rejects_wrong_shape(self):
        with self.assertRaises(ValueError):
            self.grid.board = np.zeros((3, 3), dtype=int)

    def test_lines_are_live(self):
        grid = line_grid([0, 0, 0, 2])
        row = grid.row(0)
        grid.shift(Direction.LEFT)
        self.assertEqual(row[0].value, 2)
        self.assertEqual(grid.column(0)[0].value, 2)


class TestShift(unittest.TestCase):

    def test_slide_and_merge(self):
        grid = line_grid([2, 2, 4, 0])
        result = grid.shift(Direction.LEFT)
        np.testing.assert_array_equal(grid.board[0], [4, 4, 0, 0])
        self.assertEqual(result, ShiftResult(4, True, 4))

        grid = line_grid([2, 2, 2, 2])
        result = grid.shift(Direction.LEFT)
        np.testing.assert_array_equal(grid.board[0], [4, 4, 0, 0])
        self.assertEqual(result.score_delta, 8)

    def test_merge_in_place_counts_as_moved(self):
        grid = line_grid([2, 2, 0, 0])
        result = grid.shift('left')
        np.testing.assert_array_equal(grid.board[0], [4, 0, 0, 0])
        self.assertTrue(result.moved)

    def test_move_left(self):
        grid = Grid.from_board([
            [2, 2, 0, 0],
            [4, 0, 4, 0],
            [0, 0, 0, 0],
            [2, 2, 2, 2]
        ])
        result = grid.shift(Direction.LEFT)
        expected = np.array([
            [4, 0, 0, 0],
            [8, 0, 0, 0],
            [0, 0, 0, 0],
            [4, 4, 0, 0]
        ])
        np.testing.assert_array_equal(grid.board, expected)
        self.assertEqual(result.score_delta, 4 + 8 + 8)

    def test_move_up_and_down(self):
        board = np.array([
            [2, 0, 0, 4],
            [2, 0, 0, 0],
            [4, 8, 0, 4],
            [4, 0, 2, 2]
        ])
        up = Grid.from_board(board)
        up.shift(Direction.UP)
        np.testing.assert_array_equal(up.board, [
            [4, 8, 2, 8],
            [8, 0, 0, 2],
            [0, 0, 0, 0],
            [0, 0, 0, 0]
        ])
        down = Grid.from_board(board)
        down.shift('DOWN')
        np.testing.assert_array_equal(down.board, [
            [0, 0, 0, 0],
            [0, 0, 0, 0],
            [4, 0, 0, 8],
            [8, 8, 2, 2]
        ])

    def test_no_double_merge(self):
        grid = line_grid([4, 2, 2, 0])
        result = grid.shift(Direction.LEFT)
        np.testing.assert_array_equal(grid.board[0], [4, 4, 0, 0])
        self.assertEqual(result.score_delta, 4)

        grid = line_grid([0, 4, 4, 8])
        grid.shift(Direction.RIGHT)
        np.testing.assert_array_equal(grid.board[0], [0, 0, 8, 8])

    def test_merge_conservation(self):
        grid = line_grid([0, 16, 0, 16])
        before = np.count_nonzero(grid.board)
        result = grid.shift(Direction.LEFT)
        self.assertEqual(np.count_nonzero(grid.board), before - 1)
        self.assertEqual(grid.board[0, 0], 32)
        self.assertEqual(result.score_delta, 32)
        self.assertEqual(result.max_merged, 32)

    def test_empty_grid_is_noop(self):
        grid = Grid(start_tiles=0)
        for direction in Direction:
            self.assertEqual(grid.shift(direction), ShiftResult(0, False, 0))

    def test_full_line_without_pairs_is_noop(self):
        grid = line_grid([2, 4, 8, 16])
        result = grid.shift(Direction.LEFT)
        self.assertFalse(result.moved)
        self.assertFalse(result.changed)
        np.testing.assert_array_equal(grid.board[0], [2, 4, 8, 16])

    def test_second_shift_is_stable(self):
        grid = Grid.from_board([
            [0, 2, 2, 4],
            [8, 0, 8, 0],
            [2, 4, 0, 4],
            [0, 0, 0, 2]
        ])
        for direction in Direction:
            g = Grid.from_board(grid.board)
            g.shift(direction)
            self.assertFalse(g.shift(direction).moved, direction)

    def test_directional_symmetry(self):
        rng = np.random.default_rng(3)
        for _ in range(25):
            board = rng.choice([0, 0, 2, 4, 8], size=(4, 4))
            right = Grid.from_board(board)
            right_result = right.shift(Direction.RIGHT)
            left = Grid.from_board(np.fliplr(board))
            left_result = left.shift(Direction.LEFT)
            np.testing.assert_array_equal(np.fliplr(right.board), left.board)
            self.assertEqual(right_result, left_result)

            down = Grid.from_board(board)
            down.shift(Direction.DOWN)
            up = Grid.from_board(np.flipud(board))
            up.shift(Direction.UP)
            np.testing.assert_array_equal(np.flipud(down.board), up.board)

    def test_unknown_direction_is_noop(self):
        grid = line_grid([0, 2, 0, 2])
        for bad in ('sideways', None, 3):
            self.assertEqual(grid.shift(bad), ShiftResult())
        np.testing.assert_array_equal(grid.board[0], [0, 2, 0, 2])


class TestCanMove(unittest.TestCase):

    def test_game_over(self):
        grid = Grid.from_board([
            [2, 4, 2, 4],
            [4, 2, 4, 2],
            [2, 4, 2, 4],
            [4, 2, 4, 2]
        ])
        self.assertFalse(grid.can_move())

    def test_empty_cell(self):
        grid = Grid.from_board([
            [2, 4, 2, 4],
            [4, 2, 4, 2],
            [2, 4, 2, 4],
            [4, 2, 4, 0]
        ])
        self.assertTrue(grid.can_move())

    def test_vertical_pair(self):
        grid = Grid.from_board([
            [2, 4, 2, 4],
            [4, 2, 4, 2],
            [2, 4, 2, 8],
            [4, 2, 4, 8]
        ])
        self.assertTrue(grid.can_move())

    def test_horizontal_pair(self):
        grid = Grid.from_board([
            [2, 4, 2, 4],
            [4, 2, 4, 2],
            [2, 4, 2, 4],
            [4, 2, 16, 16]
        ])
        self.assertTrue(grid.can_move())


if __name__ == "__main__":
    unittest.main()
