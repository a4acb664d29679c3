"""
Unit tests for Cell, CellSnapshot and CellUpdate.

Tests reveal behaviour, snapshot views and observation conversion.
"""
import pytest
from minefield import Cell, CellSnapshot, CellUpdate, CellView


# ============================================================================
# Cell Initialization Tests
# ============================================================================

class TestCellInitialization:
    """Test cell creation and default values."""

    def test_default_cell_is_covered_and_safe(self) -> None:
        """New cell should be a covered, unannotated non-mine."""
        cell = Cell()
        assert cell.is_mine is False
        assert cell.is_revealed is False
        assert cell.is_flagged is False
        assert cell.is_question is False
        assert cell.is_hidden is True

    def test_default_cell_has_zero_adjacent_mines(self) -> None:
        """New cell should have 0 adjacent mines by default."""
        assert Cell().adjacent_mines == 0


# ============================================================================
# Cell Reveal Tests
# ============================================================================

class TestCellReveal:
    """Test cell reveal behavior."""

    def test_reveal_hidden_cell_returns_true(self, hidden_cell: Cell) -> None:
        """Revealing a hidden cell should succeed."""
        assert hidden_cell.reveal() is True
        assert hidden_cell.is_revealed is True

    def test_reveal_already_revealed_returns_false(
        self, hidden_cell: Cell
    ) -> None:
        """Revealing an already revealed cell should fail."""
        hidden_cell.reveal()
        assert hidden_cell.reveal() is False

    def test_reveal_flagged_cell_returns_false(self, hidden_cell: Cell) -> None:
        """Cannot reveal a flagged cell."""
        hidden_cell.is_flagged = True
        assert hidden_cell.reveal() is False
        assert hidden_cell.is_revealed is False

    def test_reveal_clears_question_mark(self, hidden_cell: Cell) -> None:
        """A questioned cell can be revealed and loses its mark."""
        hidden_cell.is_question = True
        assert hidden_cell.reveal() is True
        assert hidden_cell.is_question is False


# ============================================================================
# Snapshot Tests
# ============================================================================

class TestCellSnapshot:
    """Test frozen snapshots and their renderer views."""

    def test_snapshot_copies_state(self, mine_cell: Cell) -> None:
        """Snapshot fields should mirror the cell."""
        snap = mine_cell.snapshot()
        assert snap.is_mine is True
        assert snap.adjacent_mines == -1

    def test_snapshot_is_independent_of_cell(self, hidden_cell: Cell) -> None:
        """Later mutation of the cell should not leak into the snapshot."""
        snap = hidden_cell.snapshot()
        hidden_cell.reveal()
        assert snap.is_revealed is False

    def test_snapshot_is_frozen(self, hidden_cell: Cell) -> None:
        """Snapshots are immutable."""
        snap = hidden_cell.snapshot()
        with pytest.raises(AttributeError):
            snap.is_revealed = True

    @pytest.mark.parametrize(
        "fields, view",
        [
            (dict(), CellView.HIDDEN),
            (dict(is_flagged=True), CellView.FLAG),
            (dict(is_question=True), CellView.QUESTION),
            (dict(is_revealed=True), CellView.REVEALED),
            (dict(is_revealed=True, is_mine=True), CellView.MINE),
        ],
    )
    def test_view_classification(self, fields: dict, view: CellView) -> None:
        """Each ordinary cell state maps to one view."""
        assert Cell(**fields).snapshot().view == view

    def test_update_defaults_to_snapshot_view(self, hidden_cell: Cell) -> None:
        """CellUpdate.of derives the view when none is given."""
        hidden_cell.is_flagged = True
        update = CellUpdate.of(2, 3, hidden_cell)
        assert (update.x, update.y) == (2, 3)
        assert update.view == CellView.FLAG
        assert isinstance(update.cell, CellSnapshot)

    def test_update_keeps_explicit_view(self, mine_cell: Cell) -> None:
        """An explicit end-of-game view overrides the derived one."""
        mine_cell.reveal()
        assert CellUpdate.of(0, 0, mine_cell, CellView.EXPLODED).view == CellView.EXPLODED


# ============================================================================
# Cell Observation Tests
# ============================================================================

class TestCellObservation:
    """Test cell observation values."""

    def test_hidden_cell_observation_is_negative_one(
        self, hidden_cell: Cell
    ) -> None:
        """Hidden cell should return -1 for observation."""
        assert hidden_cell.to_observation() == -1

    def test_flagged_cell_observation_is_negative_two(
        self, hidden_cell: Cell
    ) -> None:
        """Flagged cell should return -2 for observation."""
        hidden_cell.is_flagged = True
        assert hidden_cell.to_observation() == -2

    def test_questioned_cell_observation_is_negative_three(
        self, hidden_cell: Cell
    ) -> None:
        """Questioned cell should return -3 for observation."""
        hidden_cell.is_question = True
        assert hidden_cell.to_observation() == -3

    @pytest.mark.parametrize("count", range(0, 9))
    def test_revealed_cell_observation_matches_adjacent_count(
        self, count: int
    ) -> None:
        """Revealed cell returns its adjacent mine count."""
        cell = Cell(adjacent_mines=count)
        cell.reveal()
        assert cell.to_observation() == count

    def test_revealed_mine_observation_is_nine(self, mine_cell: Cell) -> None:
        """Revealed mine should return 9 for observation."""
        mine_cell.reveal()
        assert mine_cell.to_observation() == 9
