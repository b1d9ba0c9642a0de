# grid_engine.py
# This file holds the grid transformation logic: sliding, merging, compaction and spawning.

from enum import Enum
from typing import Dict, List, Tuple
import logging
import random

logger = logging.getLogger(__name__)

GRID_SIZE = 4
SPAWN_VALUE = 2

Grid = List[List[int]]
Coord = Tuple[int, int]
Line = Tuple[Coord, ...]


class GridFullError(ValueError):
    """Raised when a tile is spawned on a grid with no empty cell."""


class DIRECTION(Enum):
    """Represents the possible move directions."""
    UP = 1
    DOWN = 2
    LEFT = 3
    RIGHT = 4

# --- Traversal Tables ---

def _build_lines(direction: DIRECTION) -> Tuple[Line, ...]:
    """
    Builds the 4 lines for a direction. Each line starts at the edge the tiles slide toward.
    Args:
        direction (DIRECTION): The direction to build lines for.
    Returns:
        Tuple[Line, ...]: Four lines of four (row, col) coordinates each.
    """
    n = GRID_SIZE
    if direction == DIRECTION.UP:
        return tuple(tuple((row, col) for row in range(n)) for col in range(n))
    if direction == DIRECTION.DOWN:
        return tuple(tuple((n - 1 - row, col) for row in range(n)) for col in range(n))
    if direction == DIRECTION.LEFT:
        return tuple(tuple((row, col) for col in range(n)) for row in range(n))
    return tuple(tuple((row, n - 1 - col) for col in range(n)) for row in range(n))


LINES: Dict[DIRECTION, Tuple[Line, ...]] = {d: _build_lines(d) for d in DIRECTION}

# --- Grid Helper Functions ---

def new_empty_grid() -> Grid:
    """Returns a 4x4 grid with every cell empty."""
    return [[0] * GRID_SIZE for _ in range(GRID_SIZE)]


def copy_grid(grid: Grid) -> Grid:
    """Returns a deep copy of the grid."""
    return [list(row) for row in grid]


def validate_grid(grid: Grid) -> None:
    """
    Checks that a grid is 4x4 and holds only zeros or powers of two >= 2.
    Args:
        grid (Grid): The grid to check.
    Raises:
        ValueError: If the shape or any cell value is invalid.
    """
    if len(grid) != GRID_SIZE or not all(len(row) == GRID_SIZE for row in grid):
        raise ValueError(f"Grid must be a {GRID_SIZE}x{GRID_SIZE} matrix.")
    for row in grid:
        for value in row:
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f"Grid values must be integers, got {value!r}.")
            if value != 0 and (value < 2 or value & (value - 1)):
                raise ValueError(f"Grid values must be 0 or a power of two >= 2, got {value}.")


def empty_cells(grid: Grid) -> List[Coord]:
    """
    Get coordinates of empty (0-value) cells in the given grid.
    Args:
        grid (Grid): The grid to check.
    Returns:
        List[Coord]: (row, col) tuples for empty cells, in row-major order.
    """
    return [
        (row, col)
        for row in range(GRID_SIZE)
        for col in range(GRID_SIZE)
        if grid[row][col] == 0
    ]


def grid_changed(grid: Grid, previous: Grid) -> bool:
    """Returns True if any cell of grid differs from the same cell of previous."""
    for row in range(GRID_SIZE):
        for col in range(GRID_SIZE):
            if grid[row][col] != previous[row][col]:
                return True
    return False

# --- Line Manipulation ---

def _next_occupied(grid: Grid, line: Line, start: int) -> int:
    """Index of the first non-empty cell of line at or after start, or len(line)."""
    index = start
    while index < len(line):
        row, col = line[index]
        if grid[row][col] != 0:
            break
        index += 1
    return index


def _merge_line(grid: Grid, line: Line) -> int:
    """
    Merges equal neighbouring tiles along a line, in place.
    The doubled value lands on the later cell of the pair and the earlier cell is emptied.
    A cell that received a merge is skipped, so no tile merges twice in one move.
    Args:
        grid (Grid): The grid holding the line.
        line (Line): Coordinates ordered from head to tail.
    Returns:
        int: Number of merges performed.
    """
    merges = 0
    current = 0
    while current < len(line):
        current = _next_occupied(grid, line, current)
        if current == len(line):
            break
        lookahead = _next_occupied(grid, line, current + 1)
        if lookahead == len(line):
            break

        cur_row, cur_col = line[current]
        ahead_row, ahead_col = line[lookahead]
        if grid[cur_row][cur_col] == grid[ahead_row][ahead_col]:
            grid[cur_row][cur_col] = 0
            grid[ahead_row][ahead_col] *= 2
            merges += 1
            current = lookahead + 1
        else:
            current += 1
    return merges


def _compact_line(grid: Grid, line: Line) -> None:
    """
    Closes the gaps between the head of a line and its tiles, in place.
    Args:
        grid (Grid): The grid holding the line.
        line (Line): Coordinates ordered from head to tail.
    """
    # one pass per possible gap
    for _ in range(len(line) - 1):
        for head in range(len(line) - 1):
            head_row, head_col = line[head]
            if grid[head_row][head_col] != 0:
                continue
            source = _next_occupied(grid, line, head + 1)
            if source == len(line):
                break
            src_row, src_col = line[source]
            grid[head_row][head_col], grid[src_row][src_col] = (
                grid[src_row][src_col],
                grid[head_row][head_col],
            )

# --- Core Move Processing ---

def apply_direction(grid: Grid, direction: DIRECTION) -> int:
    """
    Slides every line of the grid toward the edge named by direction, in place.
    Args:
        grid (Grid): The grid to transform.
        direction (DIRECTION): The direction to move.
    Returns:
        int: Total number of merges performed.
    Raises:
        ValueError: If an invalid direction is specified.
    """
    if direction not in LINES:
        raise ValueError(f"Invalid direction specified: {direction!r}")

    merges = 0
    for line in LINES[direction]:
        merges += _merge_line(grid, line)
        _compact_line(grid, line)
    logger.debug("Applied %s with %d merge(s)", direction.name, merges)
    return merges


def spawn_tile(grid: Grid, rng: random.Random) -> Coord:
    """
    Sets a uniformly chosen empty cell to 2.
    Args:
        grid (Grid): The grid to place a tile on.
        rng (random.Random): Random source used to pick the cell.
    Returns:
        Coord: The (row, col) of the new tile.
    Raises:
        GridFullError: If the grid has no empty cell.
    """
    options = empty_cells(grid)
    if not options:
        raise GridFullError("Cannot spawn a tile on a full grid.")
    row, col = rng.choice(options)
    grid[row][col] = SPAWN_VALUE
    logger.debug("Spawned %d at (%d, %d)", SPAWN_VALUE, row, col)
    return row, col


def new_grid(rng: random.Random) -> Grid:
    """
    Creates the starting grid: all cells empty except two tiles of value 2.
    Args:
        rng (random.Random): Random source used to place the tiles.
    Returns:
        Grid: The seeded grid.
    """
    grid = new_empty_grid()
    spawn_tile(grid, rng)
    spawn_tile(grid, rng)
    return grid
