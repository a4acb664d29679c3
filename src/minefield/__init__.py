"""
Minefield rules engine.

Provides the Minesweeper board state machine, cell state and a
Gymnasium environment for driving games.
"""
from .cell import MINE, Cell, CellSnapshot, CellUpdate, CellView
from .board import (
    Board,
    BoardConfig,
    CoordinateError,
    FlagChange,
    FlagResult,
    Phase,
    RevealResult,
    make_random_index,
)
from .environment import MinesweeperEnv

__all__ = [
    "MINE",
    "Cell",
    "CellSnapshot",
    "CellUpdate",
    "CellView",
    "Board",
    "BoardConfig",
    "CoordinateError",
    "FlagChange",
    "FlagResult",
    "Phase",
    "RevealResult",
    "make_random_index",
    "MinesweeperEnv",
]
