"""
Cell module for the minefield rules engine.

Represents individual grid positions with their content (mine/number)
and annotation state (revealed/flagged/questioned), plus the immutable
snapshots handed to callers after each board operation.
"""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


# ============================================================================
# Constants
# ============================================================================

MINE = -1
"""Sentinel ``adjacent_mines`` value for mine cells."""


class CellView(Enum):
    """How a renderer should draw a cell."""

    HIDDEN = auto()
    FLAG = auto()
    QUESTION = auto()
    REVEALED = auto()
    MINE = auto()
    EXPLODED = auto()
    MISFLAGGED = auto()
    CORRECT_FLAG = auto()


# ============================================================================
# Cell Data Classes
# ============================================================================

@dataclass
class Cell:
    """
    Mutable state of a single grid position, owned by a Board.

    Attributes:
        is_mine: Whether this cell contains a mine.
        is_revealed: Whether the cell has been uncovered.
        is_flagged: Whether the player marked the cell as a mine.
        is_question: Whether the player marked the cell as uncertain.
        adjacent_mines: Mines among the 8 neighbours, or MINE for mines.
    """

    is_mine: bool = False
    is_revealed: bool = False
    is_flagged: bool = False
    is_question: bool = False
    adjacent_mines: int = 0

    def reveal(self) -> bool:
        """
        Uncover this cell, dropping any question mark.

        Returns:
            True if the cell was covered and unflagged, False otherwise.
        """
        if self.is_revealed or self.is_flagged:
            return False
        self.is_revealed = True
        self.is_question = False
        return True

    @property
    def is_hidden(self) -> bool:
        """Check if cell is covered with no annotation."""
        return not (self.is_revealed or self.is_flagged or self.is_question)

    def snapshot(self) -> "CellSnapshot":
        """Freeze the current state for a caller."""
        return CellSnapshot(
            is_mine=self.is_mine,
            is_revealed=self.is_revealed,
            is_flagged=self.is_flagged,
            is_question=self.is_question,
            adjacent_mines=self.adjacent_mines,
        )

    def to_observation(self) -> int:
        """
        Convert cell to a player-visible integer.

        Returns:
            -1: Hidden cell
            -2: Flagged cell
            -3: Questioned cell
            0-8: Revealed cell with adjacent mine count
            9: Revealed mine (game over state)
        """
        if self.is_flagged:
            return -2
        if self.is_question:
            return -3
        if not self.is_revealed:
            return -1
        if self.is_mine:
            return 9
        return self.adjacent_mines


@dataclass(frozen=True)
class CellSnapshot:
    """Read-only copy of a Cell at one point in time."""

    is_mine: bool
    is_revealed: bool
    is_flagged: bool
    is_question: bool
    adjacent_mines: int

    @property
    def view(self) -> CellView:
        """Classification of an ordinary (non end-of-game) cell."""
        if self.is_revealed:
            return CellView.MINE if self.is_mine else CellView.REVEALED
        if self.is_flagged:
            return CellView.FLAG
        if self.is_question:
            return CellView.QUESTION
        return CellView.HIDDEN


@dataclass(frozen=True)
class CellUpdate:
    """
    One entry of the delta returned by a board operation.

    Attributes:
        x: Column of the changed cell.
        y: Row of the changed cell.
        cell: State of the cell after the operation.
        view: Renderer classification for the change.
    """

    x: int
    y: int
    cell: CellSnapshot
    view: CellView

    @classmethod
    def of(
        cls, x: int, y: int, cell: Cell, view: Optional[CellView] = None
    ) -> "CellUpdate":
        """Build an update from a live cell, deriving the view if omitted."""
        snapshot = cell.snapshot()
        return cls(x, y, snapshot, view if view is not None else snapshot.view)
