# -*- coding: utf-8 -*-
"""
This module provides utilities for encoding boards and managing their saves.

It includes the compact grid encoding, the record stored for each board size, and the `GameStorage` class that
reads and writes those records.
"""

from .codec import Record, decode, decode_grid, empty_record, encode, encode_grid
from .storage import GameStorage

__all__ = ["Record", "decode", "decode_grid", "empty_record", "encode", "encode_grid", "GameStorage"]
