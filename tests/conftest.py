"""
Pytest configuration and shared fixtures.
"""
import pytest
import sys
from pathlib import Path
from typing import Iterator, Tuple

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minefield import Board, BoardConfig, Cell, CellSnapshot


def iter_cells(board: Board) -> Iterator[Tuple[int, int, CellSnapshot]]:
    """Yield (x, y, snapshot) for every cell of a board."""
    for y in range(board.height):
        for x in range(board.width):
            yield x, y, board.get_cell(x, y)


def identity_index(n: int) -> int:
    """Index source that leaves the shuffled pool in row-major order."""
    return n - 1


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def beginner_board() -> Board:
    """Create a seeded 9x9 board with 10 mines."""
    return Board(9, 9, 10, seed=1234)


@pytest.fixture
def empty_board() -> Board:
    """Create a board with no mines for cascade testing."""
    return Board(5, 5, 0)


@pytest.fixture
def corner_board() -> Board:
    """
    5x5 board with mines at (4, 0) and (4, 4):

        0 0 0 1 *
        0 0 0 1 1
        0 0 0 0 0
        0 0 0 1 1
        0 0 0 1 *
    """
    return Board.from_mine_positions(5, 5, [(4, 0), (4, 4)])


@pytest.fixture
def two_board() -> Board:
    """
    3x3 board whose centre is a "2":

        * 1 0
        1 2 1
        0 1 *
    """
    return Board.from_mine_positions(3, 3, [(0, 0), (2, 2)])


@pytest.fixture
def wall_board() -> Board:
    """
    5x5 board with a column of mines splitting it in two:

        0 2 * 2 0
        0 3 * 3 0
        0 3 * 3 0
        0 3 * 3 0
        0 2 * 2 0
    """
    return Board.from_mine_positions(5, 5, [(2, y) for y in range(5)])


# ============================================================================
# Cell Fixtures
# ============================================================================

@pytest.fixture
def hidden_cell() -> Cell:
    """Create a hidden cell."""
    return Cell()


@pytest.fixture
def mine_cell() -> Cell:
    """Create a cell containing a mine."""
    return Cell(is_mine=True, adjacent_mines=-1)


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def valid_config() -> BoardConfig:
    """Create a valid board configuration."""
    return BoardConfig(9, 9, 10)
