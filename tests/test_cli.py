"""
Tests for the terminal front end.
"""

import io
from contextlib import redirect_stdout
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest import TestCase, main
from unittest.mock import patch

import numpy as np

from gridmerge.cli import key_handler, main as cli_main, play, random_game, simulate
from gridmerge.config import GameConfig
from gridmerge.core.gameboard import Board
from gridmerge.envs.session import GameSession
from gridmerge.utils.codec import encode
from gridmerge.utils.storage import GameStorage


class TestPlay(TestCase):
    """Test the play loop with scripted input."""

    def setUp(self):
        self._tmp = TemporaryDirectory()
        self.save_dir = Path(self._tmp.name)
        self.session = GameSession(GameConfig(save_dir=self.save_dir), rng=0)

    def tearDown(self):
        self._tmp.cleanup()

    def test_scripted_game(self):
        """Commands are applied until the player quits."""
        GameStorage(self.save_dir).save(encode(Board.from_cells([[2, 2, 0, 0]] + [[0] * 4] * 3)))
        commands = iter(['a', 'u', 'left', 'q', 'd'])

        with redirect_stdout(io.StringIO()) as output:
            play(self.session, size=4, read=lambda prompt: next(commands))

        self.assertEqual(self.session.get(0, 0), 4)
        self.assertEqual(self.session.score, 4)
        self.assertEqual(next(commands), 'd')
        self.assertIn('Score: 4', output.getvalue())

    def test_end_of_input_saves(self):
        """The loop stops at the end of the input."""

        def read(prompt):
            raise EOFError

        with redirect_stdout(io.StringIO()):
            play(self.session, size=3, read=read)
        self.assertTrue(GameStorage(self.save_dir).exists(3))

    def test_unknown_command(self):
        """Unknown commands print the help and keep the loop running."""
        self.session.start_game(4)

        with redirect_stdout(io.StringIO()) as output:
            self.assertTrue(key_handler(self.session, 'x'))
        self.assertIn('Invalid direction', output.getvalue())

    def test_undo_without_history(self):
        """Undo without history says so."""
        self.session.start_game(4)

        with redirect_stdout(io.StringIO()) as output:
            self.assertTrue(key_handler(self.session, 'u'))
        self.assertIn('Nothing to undo', output.getvalue())

    def test_render_shows_empty_cells_as_dots(self):
        """Rows are printed tab-separated, empty cells as dots."""
        GameStorage(self.save_dir).save(encode(Board.from_cells([[2, 0], [0, 4]])))
        self.session.start_game(2)

        with redirect_stdout(io.StringIO()) as output:
            self.session.render()
        self.assertEqual(output.getvalue(), '2\t.\n.\t4\n')

    def test_reset_deletes_save(self):
        """The reset flag removes the save of the chosen size before playing."""
        storage = GameStorage(self.save_dir)
        storage.save(encode(Board.from_cells([[2, 2, 0], [0, 0, 0], [0, 0, 0]], score=8)))
        storage.save(encode(Board.from_cells([[2, 2], [0, 0]], score=4)))

        with patch('gridmerge.cli.play') as play_mock:
            code = cli_main(['play', '--size', '3', '--save-dir', str(self.save_dir), '--reset'])

        self.assertEqual(code, 0)
        self.assertFalse(storage.exists(3))
        self.assertTrue(storage.exists(2))
        play_mock.assert_called_once()


class TestSimulate(TestCase):
    """Test random games."""

    def test_random_game_ends_lost(self):
        """A random game is played until no move is left."""
        board = random_game(3, np.random.default_rng(0))

        self.assertTrue(board.is_done())
        self.assertEqual(board.tile_count, 9)

    def test_simulate_counts_games(self):
        """Every game is counted under its largest tile."""
        with redirect_stdout(io.StringIO()):
            result = simulate(games=5, size=3, seed=0)

        self.assertEqual(sum(result.values()), 5)
        self.assertTrue(all(tile >= 4 and tile & (tile - 1) == 0 for tile in result))

    def test_simulate_reproducible(self):
        """Same seed produces the same results."""
        self.assertEqual(simulate(games=3, size=3, seed=9), simulate(games=3, size=3, seed=9))

    def test_main_rejects_bad_size(self):
        """Command-line errors are reported with a non-zero exit code."""
        with redirect_stdout(io.StringIO()) as output:
            code = cli_main(['simulate', '--games', '1', '--size', '1'])

        self.assertEqual(code, 2)
        self.assertIn('error:', output.getvalue())


if __name__ == '__main__':
    main()
