# -*- coding: utf-8 -*-
"""
Play 2048 from the terminal, or simulate random games.
"""
import logging
from argparse import ArgumentParser
from collections import Counter
from collections.abc import Callable
from typing import Dict

import numpy as np
from numpy.random import default_rng
from tqdm import trange

from gridmerge.config import GameConfig
from gridmerge.core import Board, Spawner, apply_move, is_done, legal_directions
from gridmerge.envs import GameSession, GameStatus
from gridmerge.errors import GridMergeError
from gridmerge.utils.storage import GameStorage

# ##: Keys accepted by the play loop, besides the direction names.
KEYS = {'w': 'up', 'a': 'left', 's': 'down', 'd': 'right'}

HELP = 'w/a/s/d or left/up/right/down to move, u: undo, r: restart, c: continue after a win, q: quit'


def redraw(session: GameSession):
    """
    Redraw the game board with the scores.

    Parameters
    ----------
    session: GameSession
        The game session to draw
    """
    print(f'High score: {session.high_score}  Score: {session.score}')
    session.render()


def key_handler(session: GameSession, key: str) -> bool:
    """
    Handle one command of the player.

    Parameters
    ----------
    session: GameSession
        The game session

    key: str
        The command typed by the player

    Returns
    -------
    bool
        False when the player quits, True otherwise
    """
    key = key.strip().lower()

    if key == 'q':
        session.save()
        return False

    if key == 'u':
        if not session.undo():
            print('Nothing to undo.')
    elif key == 'r':
        session.restart_game()
    elif key == 'c':
        session.continue_game()
    else:
        direction = KEYS.get(key, key)
        try:
            report = session.move(direction)
        except GridMergeError as error:
            print(f'{error}. {HELP}')
            return True
        if not report.effective:
            return True

    redraw(session)
    if session.status is GameStatus.WON:
        print('You win! Type c to keep playing or r to start over.')
    elif session.status is GameStatus.LOST:
        print('Game over! Type r to start over.')
    return True


def play(session: GameSession, size: int | None = None, read: Callable[[str], str] = input) -> None:
    """
    Run the terminal play loop until the player quits or the input ends.

    Parameters
    ----------
    session: GameSession
        The game session

    size: int, optional
        Board size to play on

    read: Callable[[str], str]
        Source of the player's commands
    """
    session.start_game(size)
    print(HELP)
    redraw(session)

    while True:
        try:
            key = read('> ')
        except EOFError:
            session.save()
            return
        if not key_handler(session, key):
            return


def random_game(size: int, rng: np.random.Generator) -> Board:
    """
    Play one game with uniformly random legal moves, in memory.

    Parameters
    ----------
    size : int
        Side length of the board.
    rng : Generator
        Random source for the moves and the spawned tiles.

    Returns
    -------
    Board
        The final board.
    """
    board = Board(size=size)
    spawner = Spawner(rng)
    spawner.spawn(board)
    spawner.spawn(board)

    while not is_done(board.cells):
        directions = legal_directions(board.cells)
        apply_move(board, directions[rng.integers(len(directions))])
        spawner.spawn(board)
    return board


def simulate(games: int = 10, size: int = 4, seed: int | None = None) -> Dict[int, int]:
    """
    Play random games and count the largest tile of each.

    Parameters
    ----------
    games : int, optional
        The number of games to play (default is 10).
    size : int, optional
        Side length of the board (default is 4).
    seed : int, optional
        Random number generator seed for reproducibility.

    Returns
    -------
    Dict[int, int]
        How many games ended with each largest tile.
    """
    rng = default_rng(seed)
    score = []

    with trange(games) as period:
        for num in period:
            board = random_game(size, rng)

            # ##: Log.
            period.set_description(f'Simulation: {num + 1}')
            period.set_postfix(score=board.score, max=int(np.max(board.cells)))

            # ##: Save max cells.
            score.append(int(np.max(board.cells)))

    return dict(Counter(score))


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(prog='gridmerge', description='Single-board 2048.')
    parser.add_argument('--log-level', type=str, default='WARNING')
    commands = parser.add_subparsers(dest='command', required=True)

    play_parser = commands.add_parser('play', help='play in the terminal')
    play_parser.add_argument('--size', type=int, default=None)
    play_parser.add_argument('--undo-limit', type=int, default=1)
    play_parser.add_argument('--save-dir', type=str, default='SaveData')
    play_parser.add_argument('--seed', type=int, default=None)
    play_parser.add_argument('--reset', action='store_true', help='delete the save of the board size first')

    simulate_parser = commands.add_parser('simulate', help='play random games')
    simulate_parser.add_argument('--games', type=int, default=10)
    simulate_parser.add_argument('--size', type=int, default=4)
    simulate_parser.add_argument('--seed', type=int, default=None)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    try:
        if args.command == 'play':
            config = GameConfig(undo_limit=args.undo_limit, save_dir=args.save_dir)
            if args.reset:
                GameStorage(config.save_dir).delete(args.size or config.size)
            play(GameSession(config, rng=args.seed), size=args.size)
        else:
            result = simulate(games=args.games, size=args.size, seed=args.seed)
            print(f'Largest tiles over {args.games} games: {dict(sorted(result.items()))}')
    except (GridMergeError, ValueError) as error:
        print(f'error: {error}')
        return 2
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
