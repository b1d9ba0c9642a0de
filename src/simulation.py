# simulation.py
# Drives one round of play: move, detect change, spawn.

from typing import Optional, Tuple
import logging
import random

from pydantic import BaseModel, ConfigDict, Field

from grid_engine import (
    DIRECTION,
    Grid,
    apply_direction,
    copy_grid,
    grid_changed,
    new_grid,
    spawn_tile,
    validate_grid,
)

logger = logging.getLogger(__name__)


class GridSnapshot(BaseModel):
    """Read-only view of the grid handed to the presentation layer."""
    model_config = ConfigDict(frozen=True)

    cells: Tuple[Tuple[int, ...], ...] = Field(..., description="Grid rows, top to bottom.")


def step(grid: Grid, direction: DIRECTION, rng: random.Random) -> bool:
    """
    Plays one round on the grid, in place.
    Args:
        grid (Grid): The grid to move.
        direction (DIRECTION): The direction to move.
        rng (random.Random): Random source for the spawned tile.
    Returns:
        bool: True if the move changed the grid (a tile was then spawned), False otherwise.
    """
    previous = copy_grid(grid)
    apply_direction(grid, direction)

    changed = grid_changed(grid, previous)
    if changed:
        spawn_tile(grid, rng)
    logger.debug("Step %s effective=%s", direction.name, changed)
    return changed


class Simulation:
    """Owns the grid and the random source for one run."""

    def __init__(self, grid: Grid, rng: random.Random):
        validate_grid(grid)
        self._grid = copy_grid(grid)
        self._rng = rng

    @classmethod
    def new(cls, rng: Optional[random.Random] = None) -> "Simulation":
        """Starts a run on a fresh grid seeded with two tiles."""
        rng = rng if rng is not None else random.Random()
        return cls(new_grid(rng), rng)

    def step(self, direction: DIRECTION) -> bool:
        return step(self._grid, direction, self._rng)

    def snapshot(self) -> GridSnapshot:
        return GridSnapshot(cells=tuple(tuple(row) for row in self._grid))
