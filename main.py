#!/usr/bin/env python3
"""
Minefield - command line entry point.

Usage:
    python main.py simulate [--games N] [--seed S]
    python main.py demo [--delay D] [--seed S]
"""
import argparse
import logging
import time
from typing import Optional

import numpy as np

from minefield import BoardConfig, MinesweeperEnv
from minefield.environment import ACTION_KINDS, REVEAL


def select_action(
    env: MinesweeperEnv, rng: np.random.Generator
) -> Optional[int]:
    """Reveal a uniformly random covered cell."""
    mask = env.get_action_mask()
    cells = env.config.width * env.config.height
    reveals = np.flatnonzero(mask[REVEAL * cells:(REVEAL + 1) * cells])
    if len(reveals) == 0:
        return None
    return REVEAL * cells + int(rng.choice(reveals))


def play_game(
    env: MinesweeperEnv,
    rng: np.random.Generator,
    seed: Optional[int] = None,
    delay: Optional[float] = None,
) -> dict:
    """Play one game to the end and return the final info dict."""
    env.reset(seed=seed)
    info = {}
    done = False
    while not done:
        action = select_action(env, rng)
        if action is None:
            break
        _, _, terminated, truncated, info = env.step(action)
        done = terminated or truncated

        if delay is not None:
            kind, x, y = env.decode_action(action)
            print(f"\n=== Step {info['steps']} | {ACTION_KINDS[kind]} ({x}, {y}) ===")
            print(f"Mines left: {info['remaining_mines']}\n")
            print(env.render())
            time.sleep(delay)
    return info


def simulate(args: argparse.Namespace) -> None:
    """Play many random-policy games and report statistics."""
    config = BoardConfig(args.width, args.height, args.mines)
    env = MinesweeperEnv(config=config)
    rng = np.random.default_rng(args.seed)

    print(
        f"Simulating {args.games} games on {config.width}x{config.height} "
        f"with {config.num_mines} mines..."
    )
    wins = 0
    steps = []
    revealed = []
    for game in range(args.games):
        seed = None if args.seed is None else args.seed + game
        info = play_game(env, rng, seed=seed)
        wins += info.get("game_state") == "WON"
        steps.append(info.get("steps", 0))
        revealed.append(info.get("revealed", 0))

    print(f"  Win rate: {wins / args.games:.1%}")
    print(f"  Avg steps: {np.mean(steps):.1f}")
    print(f"  Avg revealed: {np.mean(revealed):.1f} cells")


def demo(args: argparse.Namespace) -> None:
    """Play one game, printing the board after every move."""
    config = BoardConfig(args.width, args.height, args.mines)
    env = MinesweeperEnv(config=config, render_mode="ansi")
    rng = np.random.default_rng(args.seed)

    info = play_game(env, rng, seed=args.seed, delay=args.delay)
    if info.get("game_state") == "WON":
        print("\n*** WIN! ***")
    else:
        print("\n*** LOST (hit mine) ***")


def main() -> None:
    """Parse arguments and run the appropriate command."""
    parser = argparse.ArgumentParser(
        description="Minefield - play simulated Minesweeper games"
    )
    parser.add_argument(
        "--log-level", default="WARNING", help="Logging level (e.g. DEBUG)"
    )
    parser.add_argument("--width", type=int, default=9, help="Board columns")
    parser.add_argument("--height", type=int, default=9, help="Board rows")
    parser.add_argument("--mines", type=int, default=10, help="Number of mines")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    simulate_parser = subparsers.add_parser(
        "simulate", help="Play random games and report statistics"
    )
    simulate_parser.add_argument(
        "--games", type=int, default=100, help="Number of games to play"
    )

    demo_parser = subparsers.add_parser("demo", help="Watch one random game")
    demo_parser.add_argument(
        "--delay", type=float, default=0.3, help="Delay between moves"
    )

    args = parser.parse_args()
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if args.command == "simulate":
        simulate(args)
    elif args.command == "demo":
        demo(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
