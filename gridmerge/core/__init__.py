# -*- coding: utf-8 -*-
"""
This module provides the grid engine of the 2048 game.

It includes the board and its derived counters, the slide-and-merge move, random tile spawning and the bounded
undo history.
"""

from .gameboard import MAX_TILE, WIN_TILE, Board, count_mergeable_pairs, is_done, is_full
from .gamemove import ACTIONS, DIRECTIONS, MoveReport, apply_move, legal_directions, resolve_direction
from .history import Snapshot, UndoHistory
from .spawner import TILE_SPAWN_PROBS, Spawner

__all__ = [
    "MAX_TILE",
    "WIN_TILE",
    "Board",
    "count_mergeable_pairs",
    "is_done",
    "is_full",
    "ACTIONS",
    "DIRECTIONS",
    "MoveReport",
    "apply_move",
    "legal_directions",
    "resolve_direction",
    "Snapshot",
    "UndoHistory",
    "TILE_SPAWN_PROBS",
    "Spawner",
]
