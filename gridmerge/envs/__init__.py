# -*- coding: utf-8 -*-
"""
Python implementation of a 2048 game session.

This module provides the `GameSession` class, which owns the board of the current size and drives the game: moves,
undo, restarts and saves.
"""

from .session import GameSession, GameStatus

__all__ = ["GameSession", "GameStatus"]
