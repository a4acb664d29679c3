"""
Board module for the minefield rules engine.

Implements the minefield grid with deferred mine placement, flood-fill
revealing, chording, the flag/question cycle and win/loss resolution.
"""
import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Iterable, Iterator, List, Optional, Tuple

import numpy as np

from .cell import MINE, Cell, CellSnapshot, CellUpdate, CellView


logger = logging.getLogger(__name__)

RandomIndex = Callable[[int], int]
Position = Tuple[int, int]


# ============================================================================
# Constants
# ============================================================================

class Phase(Enum):
    """Lifecycle of a board. WON and LOST are terminal."""

    NOT_STARTED = auto()
    IN_PROGRESS = auto()
    WON = auto()
    LOST = auto()


class FlagChange(Enum):
    """What a toggle_flag call did to the cell."""

    FLAG_SET = auto()
    FLAG_CLEARED = auto()
    QUESTION_SET = auto()
    QUESTION_CLEARED = auto()


class CoordinateError(IndexError):
    """Raised when a caller addresses a cell outside the grid."""


@dataclass
class BoardConfig:
    """
    Configuration for a minefield board.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        num_mines: Mines requested. May be reduced when the board is too
            small to hold them outside the first-reveal safe zone.
    """

    width: int = 9
    height: int = 9
    num_mines: int = 10

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if self.width < 1 or self.height < 1:
            raise ValueError("Board dimensions must be positive")
        if self.num_mines < 0:
            raise ValueError("Number of mines cannot be negative")


# ============================================================================
# Operation Results
# ============================================================================

@dataclass
class RevealResult:
    """
    Delta produced by reveal or chord.

    Attributes:
        opened: Every cell whose visual state changed.
        lost: True if this call detonated a mine.
        won: True if this call revealed the last safe cell.
    """

    opened: List[CellUpdate] = field(default_factory=list)
    lost: bool = False
    won: bool = False

    def merge(self, other: "RevealResult") -> None:
        """Fold another result into this one."""
        self.opened.extend(other.opened)
        self.lost = self.lost or other.lost
        self.won = self.won or other.won


@dataclass
class FlagResult:
    """Delta produced by toggle_flag; empty with no change on a no-op."""

    changed: List[CellUpdate] = field(default_factory=list)
    change: Optional[FlagChange] = None


def make_random_index(seed: Optional[int] = None) -> RandomIndex:
    """
    Build a uniform index source backed by a numpy Generator.

    Args:
        seed: Seed for reproducible layouts.

    Returns:
        Callable mapping n to a uniform integer in [0, n).
    """
    rng = np.random.default_rng(seed)

    def random_index(n: int) -> int:
        return int(rng.integers(n))

    return random_index


# ============================================================================
# Board Class
# ============================================================================

class Board:
    """
    Minesweeper game board.

    Owns the grid of cells and is the only writer of the revealed and
    flagged counters. Mines are not placed until the first reveal, which
    is guaranteed to land in a mine-free 3x3 area.
    """

    def __init__(
        self,
        width: int,
        height: int,
        mine_count: int,
        *,
        random_index: Optional[RandomIndex] = None,
        seed: Optional[int] = None,
    ) -> None:
        """
        Create an empty board.

        Args:
            width: Number of columns.
            height: Number of rows.
            mine_count: Mines requested.
            random_index: Source of uniform indices for the shuffle. Takes
                precedence over seed.
            seed: Seed for the default numpy-backed source.
        """
        self.config = BoardConfig(width, height, mine_count)
        self._random_index = random_index or make_random_index(seed)
        self._grid: List[List[Cell]] = [
            [Cell() for _ in range(width)] for _ in range(height)
        ]
        self._phase = Phase.NOT_STARTED
        self._mines_placed = False
        self._mine_count = mine_count
        self._revealed_safe_count = 0
        self._flagged_count = 0

    @classmethod
    def from_config(cls, config: BoardConfig, **kwargs) -> "Board":
        """Create a board from a BoardConfig."""
        return cls(config.width, config.height, config.num_mines, **kwargs)

    @classmethod
    def from_mine_positions(
        cls, width: int, height: int, mines: Iterable[Position]
    ) -> "Board":
        """
        Create a board with a fixed, already committed mine layout.

        The board starts IN_PROGRESS; the first reveal gets no safe zone.

        Args:
            width: Number of columns.
            height: Number of rows.
            mines: (x, y) positions holding mines.
        """
        positions = sorted(set(mines))
        board = cls(width, height, len(positions))
        for x, y in positions:
            board._cell_at(x, y)
        board._commit_layout(positions)
        return board

    # ========================================================================
    # Grid Utilities (Low-level)
    # ========================================================================

    def _is_valid_position(self, x: int, y: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= x < self.config.width and 0 <= y < self.config.height

    def _cell_at(self, x: int, y: int) -> Cell:
        if not self._is_valid_position(x, y):
            raise CoordinateError(
                f"({x}, {y}) is outside the {self.config.width}x"
                f"{self.config.height} board"
            )
        return self._grid[y][x]

    def _neighbors(self, x: int, y: int) -> List[Position]:
        """In-bounds positions of the up to 8 cells around (x, y)."""
        neighbors = []
        for delta_y in (-1, 0, 1):
            for delta_x in (-1, 0, 1):
                if delta_x == 0 and delta_y == 0:
                    continue
                new_x = x + delta_x
                new_y = y + delta_y
                if self._is_valid_position(new_x, new_y):
                    neighbors.append((new_x, new_y))
        return neighbors

    def _iter_cells(self) -> Iterator[Tuple[int, int, Cell]]:
        """Yield (x, y, cell) in row-major order."""
        for y, row in enumerate(self._grid):
            for x, cell in enumerate(row):
                yield x, y, cell

    # ========================================================================
    # Mine Placement
    # ========================================================================

    def place_mines(self, safe_x: int, safe_y: int) -> None:
        """
        Commit the mine layout, keeping (safe_x, safe_y) and its
        neighbours clear.

        Called by the first reveal. The effective mine count is clamped to
        the number of candidate cells and becomes permanent.

        Raises:
            RuntimeError: If mines were already placed.
            CoordinateError: If the safe cell is off the board.
        """
        if self._mines_placed:
            raise RuntimeError("Mines have already been placed on this board")
        self._cell_at(safe_x, safe_y)

        excluded = {(safe_x, safe_y), *self._neighbors(safe_x, safe_y)}
        pool = [(x, y) for x, y, _ in self._iter_cells() if (x, y) not in excluded]
        count = min(self.config.num_mines, len(pool))
        if count < self.config.num_mines:
            logger.debug(
                "Clamped mine count from %d to %d on %dx%d board",
                self.config.num_mines, count,
                self.config.width, self.config.height,
            )

        self._shuffle(pool)
        self._commit_layout(pool[:count])
        logger.debug(
            "Placed %d mines avoiding (%d, %d)", count, safe_x, safe_y
        )

    def _shuffle(self, pool: List[Position]) -> None:
        """Fisher-Yates shuffle in place using the injected index source."""
        for i in range(len(pool) - 1, 0, -1):
            j = self._random_index(i + 1)
            if not 0 <= j <= i:
                raise ValueError(
                    f"Random index source returned {j}, expected 0..{i}"
                )
            pool[i], pool[j] = pool[j], pool[i]

    def _commit_layout(self, mines: List[Position]) -> None:
        for x, y in mines:
            self._grid[y][x].is_mine = True
        self._mine_count = len(mines)
        self._calculate_adjacent_mines()
        self._mines_placed = True
        self._phase = Phase.IN_PROGRESS

    def _calculate_adjacent_mines(self) -> None:
        """Calculate adjacent mine counts for all cells."""
        for x, y, cell in self._iter_cells():
            if cell.is_mine:
                cell.adjacent_mines = MINE
                continue
            cell.adjacent_mines = sum(
                1 for nx, ny in self._neighbors(x, y)
                if self._grid[ny][nx].is_mine
            )

    # ========================================================================
    # Game Actions (Mid-level)
    # ========================================================================

    def reveal(self, x: int, y: int) -> RevealResult:
        """
        Reveal a cell at the given position.

        On the first reveal, places mines around a safe zone. A zero cell
        opens its connected zero region and the numbered cells bordering
        it. A mine ends the game and exposes the layout.

        Args:
            x: Column to reveal.
            y: Row to reveal.

        Returns:
            The cells that changed, empty when nothing happened.
        """
        cell = self._cell_at(x, y)
        if self.is_over or cell.is_revealed or cell.is_flagged:
            return RevealResult()

        if not self._mines_placed:
            self.place_mines(x, y)

        if cell.is_mine:
            return self._explode(x, y)

        result = RevealResult(opened=self._flood_fill(x, y))
        if self.check_win():
            self._finish_won(result)
        return result

    def _flood_fill(self, x: int, y: int) -> List[CellUpdate]:
        """Reveal outward from a safe cell; is_revealed is the visited set."""
        opened = []
        queue = deque([(x, y)])
        while queue:
            cx, cy = queue.popleft()
            cell = self._grid[cy][cx]
            if not cell.reveal():
                continue
            self._revealed_safe_count += 1
            opened.append(CellUpdate.of(cx, cy, cell))

            if cell.adjacent_mines == 0:
                for nx, ny in self._neighbors(cx, cy):
                    neighbor = self._grid[ny][nx]
                    if not neighbor.is_revealed and not neighbor.is_flagged:
                        queue.append((nx, ny))
        return opened

    def _explode(self, x: int, y: int) -> RevealResult:
        """Detonate the mine at (x, y) and sweep the rest of the layout."""
        cell = self._grid[y][x]
        cell.reveal()
        self._phase = Phase.LOST
        logger.info("Mine hit at (%d, %d); game lost", x, y)

        opened = [CellUpdate.of(x, y, cell, CellView.EXPLODED)]
        for ox, oy, other in self._iter_cells():
            if other.is_mine and other.is_flagged:
                opened.append(CellUpdate.of(ox, oy, other, CellView.CORRECT_FLAG))
            elif other.is_mine and not other.is_revealed:
                other.reveal()
                opened.append(CellUpdate.of(ox, oy, other, CellView.MINE))
            elif other.is_flagged:
                opened.append(CellUpdate.of(ox, oy, other, CellView.MISFLAGGED))
        return RevealResult(opened=opened, lost=True)

    def _finish_won(self, result: RevealResult) -> None:
        self._phase = Phase.WON
        result.won = True
        logger.info(
            "All %d safe cells revealed; game won", self._revealed_safe_count
        )
        for x, y, cell in self._iter_cells():
            if cell.is_mine and cell.is_flagged:
                result.opened.append(CellUpdate.of(x, y, cell, CellView.CORRECT_FLAG))

    def toggle_flag(self, x: int, y: int, question_mode: bool = False) -> FlagResult:
        """
        Advance the annotation cycle of a covered cell.

        The cycle is bare -> flagged -> questioned -> bare with question
        mode on, and bare -> flagged -> bare with it off. The mode is read
        on every call.

        Args:
            x: Column.
            y: Row.
            question_mode: Whether a flag turns into a question mark.

        Returns:
            The changed cell and the kind of change, or an empty result.
        """
        cell = self._cell_at(x, y)
        if self.is_over or cell.is_revealed:
            return FlagResult()

        if cell.is_flagged:
            cell.is_flagged = False
            self._flagged_count -= 1
            if question_mode:
                cell.is_question = True
                change = FlagChange.QUESTION_SET
            else:
                change = FlagChange.FLAG_CLEARED
        elif cell.is_question:
            cell.is_question = False
            change = FlagChange.QUESTION_CLEARED
        else:
            cell.is_flagged = True
            self._flagged_count += 1
            change = FlagChange.FLAG_SET

        return FlagResult(changed=[CellUpdate.of(x, y, cell)], change=change)

    def chord(self, x: int, y: int) -> RevealResult:
        """
        Reveal all unflagged neighbours of a satisfied number cell.

        Only acts when the number of flagged neighbours equals the cell's
        count. Flags are trusted, so a wrong flag can lose the game.

        Args:
            x: Column of a revealed number cell.
            y: Row of a revealed number cell.

        Returns:
            Aggregated delta of every neighbour reveal.
        """
        cell = self._cell_at(x, y)
        if self._phase != Phase.IN_PROGRESS:
            return RevealResult()
        if not cell.is_revealed or cell.adjacent_mines <= 0:
            return RevealResult()

        neighbors = self._neighbors(x, y)
        flagged = sum(1 for nx, ny in neighbors if self._grid[ny][nx].is_flagged)
        if flagged != cell.adjacent_mines:
            return RevealResult()

        result = RevealResult()
        for nx, ny in neighbors:
            neighbor = self._grid[ny][nx]
            if not neighbor.is_flagged and not neighbor.is_revealed:
                result.merge(self.reveal(nx, ny))
        return result

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    def check_win(self) -> bool:
        """True iff every safe cell is revealed and no mine went off."""
        if not self._mines_placed or self._phase == Phase.LOST:
            return False
        total_cells = self.config.width * self.config.height
        return total_cells - self._revealed_safe_count == self._mine_count

    def remaining_mines(self) -> int:
        """Mines not yet accounted for by flags, floored at zero."""
        return max(0, self._mine_count - self._flagged_count)

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def height(self) -> int:
        return self.config.height

    @property
    def mine_count(self) -> int:
        """Effective mine count, after clamping once mines are placed."""
        return self._mine_count

    @property
    def requested_mine_count(self) -> int:
        return self.config.num_mines

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def mines_placed(self) -> bool:
        return self._mines_placed

    @property
    def revealed_safe_count(self) -> int:
        return self._revealed_safe_count

    @property
    def flagged_count(self) -> int:
        return self._flagged_count

    @property
    def is_over(self) -> bool:
        """Check if the game reached a terminal phase."""
        return self._phase in (Phase.WON, Phase.LOST)

    @property
    def is_won(self) -> bool:
        return self._phase == Phase.WON

    @property
    def is_lost(self) -> bool:
        return self._phase == Phase.LOST

    def get_cell(self, x: int, y: int) -> CellSnapshot:
        """Snapshot of the cell at (x, y)."""
        return self._cell_at(x, y).snapshot()

    def get_hidden_cells(self) -> List[Position]:
        """
        Get cells a reveal would act on.

        Returns:
            (x, y) positions that are neither revealed nor flagged.
        """
        return [
            (x, y) for x, y, cell in self._iter_cells()
            if not cell.is_revealed and not cell.is_flagged
        ]

    def get_observation(self) -> np.ndarray:
        """
        Get the player-visible board as a numpy array.

        Returns:
            Array of shape (height, width) where:
                -1 = hidden
                -2 = flagged
                -3 = questioned
                0-8 = revealed with adjacent count
                9 = revealed mine
        """
        obs = np.zeros((self.config.height, self.config.width), dtype=np.int8)
        for x, y, cell in self._iter_cells():
            obs[y, x] = cell.to_observation()
        return obs
