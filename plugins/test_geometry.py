"""
Tests for geometry types and the random source.

Verifies:
1. Compass headings map to the engine's forward/right axes
2. Adjacent turns wrap around the compass
3. Cells are immutable and translate into new cells
4. BoltRandom follows exclusive-upper integer ranges and is reproducible
"""

import dataclasses

import numpy as np
import pytest

from conftest import ScriptedRandom
from lightning_bolt.geometry import (
    Cell, Direction, Slice, direction_to_vector, lerp,
    random_adjacent_direction, random_direction,
)
from lightning_bolt.rng import BoltRandom


def test_direction_vectors_follow_forward_and_right():
    assert tuple(direction_to_vector(Direction.NORTH)) == (0.0, 0.0, 1.0)
    assert tuple(direction_to_vector(Direction.EAST)) == (1.0, 0.0, 0.0)
    assert tuple(direction_to_vector(Direction.NORTH_EAST)) == (1.0, 0.0, 1.0)
    assert tuple(direction_to_vector(Direction.SOUTH_EAST)) == (1.0, 0.0, -1.0)
    assert tuple(direction_to_vector(Direction.SOUTH_WEST)) == (-1.0, 0.0, -1.0)
    assert tuple(direction_to_vector(Direction.WEST)) == (-1.0, 0.0, 0.0)
    for d in Direction:
        assert direction_to_vector(d)[1] == 0.0, f"{d.name} should be horizontal"


def test_direction_vector_is_a_copy():
    v = direction_to_vector(Direction.NORTH)
    v[1] = 1.0
    assert direction_to_vector(Direction.NORTH)[1] == 0.0, "Table entry must not be mutated"


def test_adjacent_direction_wraps():
    assert random_adjacent_direction(ScriptedRandom(ints=[-1]), Direction.NORTH) == Direction.NORTH_WEST
    assert random_adjacent_direction(ScriptedRandom(ints=[1]), Direction.NORTH_WEST) == Direction.NORTH
    assert random_adjacent_direction(ScriptedRandom(ints=[0]), Direction.EAST) == Direction.EAST


def test_random_direction_uses_full_compass():
    rng = BoltRandom(3)
    seen = {random_direction(rng) for _ in range(400)}
    assert seen == set(Direction)


def test_lerp_clamps_progress():
    assert lerp(0.5, 0.2, 0.0) == 0.5
    assert lerp(0.5, 0.2, 1.0) == pytest.approx(0.2)
    assert lerp(0.5, 0.2, 3.0) == pytest.approx(0.2), "Progress past 1 holds the end size"
    assert lerp(0.5, 0.2, -1.0) == 0.5


def test_cell_is_immutable_and_translates():
    cell = Cell(position=(1.0, 2.0, 3.0), is_trunk=False, size=0.3,
                direction=Direction.SOUTH, branch_life_remaining=4)
    with pytest.raises(dataclasses.FrozenInstanceError):
        cell.size = 1.0

    moved = cell.translated((-1.0, -2.0, -3.0))
    assert moved.position == (0.0, 0.0, 0.0)
    assert moved.direction == Direction.SOUTH
    assert moved.branch_life_remaining == 4
    assert cell.position == (1.0, 2.0, 3.0), "Original cell must be untouched"


def test_slice_splits_trunk_and_branch_cells():
    s = Slice()
    s.add_cell(Cell((0.0, 1.0, 0.0), True, 0.5))
    s.add_cell(Cell((1.0, 1.0, 0.0), False, 0.5, Direction.EAST, 2))
    assert len(s) == 2
    assert len(s.trunk_cells()) == 1
    assert len(s.branch_cells()) == 1
    assert [c.is_trunk for c in s] == [True, False]


def test_bolt_random_integer_range_excludes_upper_bound():
    rng = BoltRandom(0)
    draws = {rng.range_int(-1, 2) for _ in range(500)}
    assert draws == {-1, 0, 1}
    assert rng.range_int(5, 5) == 5, "Collapsed range returns lo"
    assert rng.range_int(7, 3) == 7


def test_bolt_random_is_reproducible():
    a, b = BoltRandom(42), BoltRandom(42)
    assert [a.value() for _ in range(10)] == [b.value() for _ in range(10)]
    values = np.array([a.value() for _ in range(1000)])
    assert values.min() >= 0.0 and values.max() < 1.0
