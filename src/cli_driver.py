# cli_driver.py
# This file is intended to be run to play the game on the CLI

from typing import Callable, List, Optional
import argparse
import logging
import math
import random
import sys

from pydantic import ValidationError
from rich.console import Console
from rich.style import Style
from rich.text import Text

from grid_engine import DIRECTION
from settings import GameSettings
from simulation import GridSnapshot, Simulation

logger = logging.getLogger(__name__)

CELL_WIDTH = 6
PROMPT = "Move (arrows or h/j/k/l, q to quit): "
HELP_TEXT = (
    "Use your arrow keys or h, j, k, l to move\nthe tiles. "
    "Tiles with the same number merge\ninto one when they touch. "
    "Add them up to\nreach 2048!\n"
)

QUIT_KEYS = {"q", "ctrl+c", "\x03"}

KEY_BINDINGS = {
    "left": DIRECTION.LEFT,
    "h": DIRECTION.LEFT,
    "\x1b[D": DIRECTION.LEFT,
    "up": DIRECTION.UP,
    "k": DIRECTION.UP,
    "\x1b[A": DIRECTION.UP,
    "right": DIRECTION.RIGHT,
    "l": DIRECTION.RIGHT,
    "\x1b[C": DIRECTION.RIGHT,
    "down": DIRECTION.DOWN,
    "j": DIRECTION.DOWN,
    "\x1b[B": DIRECTION.DOWN,
}


def _cell_style(hex_color: str) -> Style:
    return Style(bold=True, underline=True, color=hex_color)


# indexed by log2 of the tile value, 0 for empty cells
TILE_STYLES: List[Style] = [
    _cell_style("#eeeeee"),  # 0
    _cell_style("#eee4da"),  # 2
    _cell_style("#eee1c9"),  # 4
    _cell_style("#f3b27a"),  # 8
    _cell_style("#f69664"),  # 16
    _cell_style("#f77c5f"),  # 32
    _cell_style("#f75f3b"),  # 64
    _cell_style("#edd073"),  # 128
    _cell_style("#edcc62"),  # 256
    _cell_style("#edc950"),  # 512
    _cell_style("#edc53f"),  # 1024
    _cell_style("#edc22e"),  # 2048
]


def tile_style(value: int) -> Style:
    """Returns the style for a tile value. Values past 2048 share the last style."""
    if value <= 0:
        return TILE_STYLES[0]
    return TILE_STYLES[min(int(math.log2(value)), len(TILE_STYLES) - 1)]


def parse_key(key: str) -> Optional[DIRECTION]:
    """Maps a key to a direction, or None if the key is not bound."""
    return KEY_BINDINGS.get(key)


def render_grid(snapshot: GridSnapshot, color: bool = True) -> Text:
    """Lays out the grid as styled text followed by the help message."""
    text = Text()
    for row in snapshot.cells:
        for value in row:
            num = str(value)
            text.append(num, style=tile_style(value) if color else None)
            text.append(" " * max(CELL_WIDTH - len(num), 0))
        text.append("\n\n")
    text.append(HELP_TEXT)
    return text


def play(simulation: Simulation, console: Console, color: bool = True,
         read_key: Optional[Callable[[str], str]] = None) -> None:
    """
    Runs the input loop until a quit key, Ctrl+C or end of input.
    Args:
        simulation (Simulation): The run to drive.
        console (Console): Where the grid is rendered.
        color (bool): Render tiles with colors.
        read_key (Callable[[str], str]): Reads one command, given a prompt. Defaults to input().
    """
    read_key = read_key or input
    console.print(render_grid(simulation.snapshot(), color))

    while True:
        try:
            key = read_key(PROMPT).strip()
        except (EOFError, KeyboardInterrupt):
            break

        if key in QUIT_KEYS:
            break

        direction = parse_key(key)
        if direction is None:
            continue

        if simulation.step(direction):
            console.print(render_grid(simulation.snapshot(), color))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Slide the tiles, merge the numbers.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for tile placement")
    parser.add_argument("--no-color", action="store_true", help="Render without colors")
    parser.add_argument("--log-level", default="WARNING", help="Logging level name")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = GameSettings(seed=args.seed, color=not args.no_color, log_level=args.log_level)
    except ValidationError as e:
        print(f"Invalid settings: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(level=settings.log_level)

    try:
        simulation = Simulation.new(random.Random(settings.seed))
        play(simulation, Console(), settings.color)
    except Exception:
        logger.exception("Game loop failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
