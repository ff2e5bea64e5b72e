"""
Bolt Geometry Types

A bolt is grown one generation at a time. Each generation is a Slice
holding the Cells born in that pass:
  - trunk cells walk downward with a small sideways jitter
  - branch cells walk horizontally along a compass Direction until
    their life runs out

Axis convention follows the engine the bolts were designed for:
forward = +z, right = +x, up = +y. Height is the y component.
"""

import enum
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np


Vec3 = Tuple[float, float, float]

UP = np.array([0.0, 1.0, 0.0])
DOWN = -UP
FORWARD = np.array([0.0, 0.0, 1.0])
RIGHT = np.array([1.0, 0.0, 0.0])


class Direction(enum.IntEnum):
    """8-way compass heading for branch growth."""

    NORTH = 0
    NORTH_EAST = 1
    EAST = 2
    SOUTH_EAST = 3
    SOUTH = 4
    SOUTH_WEST = 5
    WEST = 6
    NORTH_WEST = 7


NUM_DIRECTIONS = len(Direction)

# Diagonals are not normalised: they step sqrt(2) further
_DIRECTION_VECTORS = {
    Direction.NORTH: FORWARD,
    Direction.NORTH_EAST: FORWARD + RIGHT,
    Direction.EAST: RIGHT,
    Direction.SOUTH_EAST: -FORWARD + RIGHT,
    Direction.SOUTH: -FORWARD,
    Direction.SOUTH_WEST: -FORWARD - RIGHT,
    Direction.WEST: -RIGHT,
    Direction.NORTH_WEST: FORWARD - RIGHT,
}


def direction_to_vector(direction):
    """Horizontal step vector for a heading (y is always 0).

    Returns a fresh array, so callers may overwrite the y component.
    """
    return _DIRECTION_VECTORS[Direction(direction)].copy()


def random_direction(rng):
    """Any of the 8 headings, uniformly."""
    return Direction(rng.range_int(0, NUM_DIRECTIONS))


def random_adjacent_direction(rng, direction):
    """Turn one step left, one step right, or keep going (wraps at N/NW)."""
    turned = int(direction) + rng.range_int(-1, 2)
    return Direction((turned + NUM_DIRECTIONS) % NUM_DIRECTIONS)


def lerp(a, b, t):
    """Linear interpolation with t clamped to [0, 1]."""
    t = min(max(t, 0.0), 1.0)
    return a + (b - a) * t


def as_vec3(values) -> Vec3:
    x, y, z = values
    return (float(x), float(y), float(z))


@dataclass(frozen=True)
class Cell:
    """One growth point of the bolt. Never mutated once created."""

    position: Vec3
    is_trunk: bool
    size: float
    direction: Optional[Direction] = None
    branch_life_remaining: int = 0

    @property
    def height(self) -> float:
        return self.position[1]

    def position_array(self) -> np.ndarray:
        return np.array(self.position, dtype=np.float64)

    def translated(self, offset) -> "Cell":
        """Copy of this cell moved by offset."""
        moved = self.position_array() + np.asarray(offset, dtype=np.float64)
        return Cell(
            position=as_vec3(moved),
            is_trunk=self.is_trunk,
            size=self.size,
            direction=self.direction,
            branch_life_remaining=self.branch_life_remaining,
        )


@dataclass
class Slice:
    """All cells produced in a single growth pass, in emission order."""

    cells: List[Cell] = field(default_factory=list)

    def add_cell(self, cell: Cell):
        self.cells.append(cell)

    def trunk_cells(self) -> List[Cell]:
        return [c for c in self.cells if c.is_trunk]

    def branch_cells(self) -> List[Cell]:
        return [c for c in self.cells if not c.is_trunk]

    def translated(self, offset) -> "Slice":
        return Slice([c.translated(offset) for c in self.cells])

    def __len__(self):
        return len(self.cells)

    def __iter__(self):
        return iter(self.cells)
