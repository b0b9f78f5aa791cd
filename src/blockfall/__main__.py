"""Simple ASCII demo for the simulation core.

Run with: `python -m blockfall`

Advances a seeded game on a fake clock for a number of frames, then prints
the visible board plus the counters.  Useful as a smoke test that gravity,
locking and spawning all run without a real host attached.
"""

from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from .board import DEFAULT_COLS, DEFAULT_ROWS
from .game import GameController
from .utils import format_grid


LOGGER = logging.getLogger(__name__)

FRAME_SECONDS = 1.0 / 60.0


class FrameClock:
    """Clock advanced by whole frames rather than wall time."""

    def __init__(self) -> None:
        self.current = 0.0

    def advance(self, delta: float) -> None:
        self.current += delta

    def __call__(self) -> float:
        return self.current


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--cols", type=int, default=DEFAULT_COLS, help="Board width in cells.")
    parser.add_argument("--rows", type=int, default=DEFAULT_ROWS, help="Visible board height in cells.")
    parser.add_argument("--seed", type=int, default=0, help="Seed for piece selection.")
    parser.add_argument("--frames", type=int, default=600, help="Number of 60 Hz frames to simulate.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (e.g. DEBUG, INFO, WARNING).",
    )
    return parser.parse_args(argv)


def run(frames: int, game: GameController, clock: FrameClock) -> None:
    for _ in range(frames):
        clock.advance(FRAME_SECONDS)
        game.tick(clock())
        if game.is_game_over:
            LOGGER.info("Game over after %.2fs", clock())
            break


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING), format="%(message)s")

    clock = FrameClock()
    game = GameController(args.cols, args.rows, seed=args.seed, clock=clock)
    run(args.frames, game, clock)

    print(format_grid(game))
    print(f"Rows cleared: {game.rows_cleared}")
    print(f"T-spins: {game.t_spin_count}")
    message = game.current_message()
    if message is not None:
        print(message.text)


if __name__ == "__main__":
    main()
