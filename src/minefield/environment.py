"""
Gymnasium environment wrapper for the minefield engine.

Drives game turns against a Board through the standard RL interface.
"""
import logging
from typing import Any, Dict, Optional, Tuple, SupportsFloat

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .board import Board, BoardConfig, FlagResult, Phase, RevealResult


logger = logging.getLogger(__name__)

REVEAL, FLAG, CHORD = range(3)
ACTION_KINDS = ("reveal", "flag", "chord")


# ============================================================================
# Minesweeper Environment
# ============================================================================

class MinesweeperEnv(gym.Env):
    """
    Gymnasium environment for Minesweeper.

    Observation:
        2D int8 array where:
        - -1 = hidden cell
        - -2 = flagged cell
        - -3 = questioned cell
        - 0-8 = revealed cell with adjacent mine count
        - 9 = revealed mine

    Actions:
        Discrete action space of size 3 * width * height.
        ``action // cells`` selects reveal (0), flag (1) or chord (2);
        ``action % cells`` selects the cell at (i % width, i // width).

    Rewards:
        - +10 for winning the game
        - -10 for hitting a mine
        - +1 for a reveal or chord that opened cells
        - 0 for a flag change
        - -0.1 for an action that changed nothing
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        config: Optional[BoardConfig] = None,
        question_mode: bool = False,
        render_mode: Optional[str] = None,
    ) -> None:
        """
        Initialize the Minesweeper environment.

        Args:
            config: Board configuration (default: 9x9 with 10 mines).
            question_mode: Whether flag toggles pass through a question mark.
            render_mode: How to render the environment.
        """
        super().__init__()

        self.config = config or BoardConfig()
        self.question_mode = question_mode
        self.render_mode = render_mode
        self._cells = self.config.width * self.config.height

        self.observation_space = spaces.Box(
            low=-3,
            high=9,
            shape=(self.config.height, self.config.width),
            dtype=np.int8,
        )
        self.action_space = spaces.Discrete(len(ACTION_KINDS) * self._cells)

        self._steps = 0
        self.board = self._new_board()

    def _new_board(self) -> Board:
        """Build a fresh board drawing its layout from the env's RNG."""
        return Board.from_config(
            self.config,
            random_index=lambda n: int(self.np_random.integers(n)),
        )

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Start a new game on a fresh board.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        self.board = self._new_board()
        self._steps = 0
        return self.board.get_observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Execute one action in the environment.

        Args:
            action: Flat action index (see class docstring).

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        kind, x, y = self.decode_action(action)
        self._steps += 1

        if kind == FLAG:
            reward = self._flag_reward(
                self.board.toggle_flag(x, y, self.question_mode)
            )
        elif kind == CHORD:
            reward = self._reveal_reward(self.board.chord(x, y))
        else:
            reward = self._reveal_reward(self.board.reveal(x, y))

        terminated = self.board.is_over
        if terminated:
            logger.debug(
                "Episode ended after %d steps: %s",
                self._steps, self.board.phase.name,
            )
        return self.board.get_observation(), reward, terminated, False, self._get_info()

    def decode_action(self, action: int) -> Tuple[int, int, int]:
        """Convert a flat action index to (kind, x, y)."""
        kind, index = divmod(int(action), self._cells)
        y, x = divmod(index, self.config.width)
        return kind, x, y

    def encode_action(self, kind: int, x: int, y: int) -> int:
        """Convert (kind, x, y) to a flat action index."""
        return kind * self._cells + y * self.config.width + x

    @staticmethod
    def _reveal_reward(result: RevealResult) -> float:
        if result.lost:
            return -10.0
        if result.won:
            return 10.0
        if result.opened:
            return 1.0
        return -0.1

    @staticmethod
    def _flag_reward(result: FlagResult) -> float:
        return 0.0 if result.change is not None else -0.1

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        return {
            "steps": self._steps,
            "game_state": self.board.phase.name,
            "remaining_mines": self.board.remaining_mines(),
            "revealed": self.board.revealed_safe_count,
            "total_safe": self._cells - self.board.mine_count,
        }

    def render(self) -> Optional[str]:
        """Render the current board state."""
        if self.render_mode == "ansi":
            return self._render_ansi()
        if self.render_mode == "human":
            print(self._render_ansi())
        return None

    def _render_ansi(self) -> str:
        """Render board as ASCII string."""
        symbols = {-1: ".", -2: "F", -3: "?", 0: " ", 9: "*"}
        lines = []
        for row in self.board.get_observation():
            lines.append(" ".join(symbols.get(int(val), str(val)) for val in row))
        return "\n".join(lines)

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of actions that would change the board.

        Returns:
            Boolean array where True = valid action.
        """
        mask = np.zeros(self.action_space.n, dtype=bool)
        if self.board.is_over:
            return mask

        obs = self.board.get_observation().flatten()
        mask[REVEAL * self._cells:FLAG * self._cells] = obs == -1
        mask[REVEAL * self._cells:FLAG * self._cells] |= obs == -3
        mask[FLAG * self._cells:CHORD * self._cells] = obs < 0
        for index in np.flatnonzero((obs > 0) & (obs < 9)):
            y, x = divmod(int(index), self.config.width)
            if self._chord_ready(x, y):
                mask[CHORD * self._cells + index] = True
        return mask

    def _chord_ready(self, x: int, y: int) -> bool:
        """Check whether chording (x, y) would reveal anything."""
        if self.board.phase != Phase.IN_PROGRESS:
            return False
        count = self.board.get_cell(x, y).adjacent_mines
        flagged = covered = 0
        for nx in range(max(0, x - 1), min(self.config.width, x + 2)):
            for ny in range(max(0, y - 1), min(self.config.height, y + 2)):
                neighbor = self.board.get_cell(nx, ny)
                if neighbor.is_flagged:
                    flagged += 1
                elif not neighbor.is_revealed:
                    covered += 1
        return flagged == count and covered > 0
