"""
Tests for single growth passes (trunk and branch rules).
"""

import pytest

from conftest import MidpointRandom, ScriptedRandom
from lightning_bolt.config import BranchScaleCurve
from lightning_bolt.geometry import Cell, Direction, Slice
from lightning_bolt.growth import grow


def _trunk_slice(y, size=0.5):
    return Slice([Cell(position=(0.0, y, 0.0), is_trunk=True, size=size)])


def _branch_slice(life, direction=Direction.NORTH, position=(0.0, 5.0, 0.0), size=0.5):
    return Slice([Cell(position=position, is_trunk=False, size=size,
                       direction=direction, branch_life_remaining=life)])


def test_trunk_steps_straight_down_with_zero_jitter(golden_config):
    new = grow(_trunk_slice(10.0), golden_config, 0.0, False, MidpointRandom())
    assert len(new) == 1
    cell = new.cells[0]
    # offset = (0.5 + 0.5) * (0.5 - 0.1)
    assert cell.position == pytest.approx((0.0, 9.6, 0.0))
    assert cell.is_trunk
    assert cell.size == 0.5


def test_trunk_jitter_draws_forward_then_right(golden_config):
    rng = ScriptedRandom(ints=[1, -1])
    new = grow(_trunk_slice(10.0), golden_config, 0.0, False, rng)
    assert new.cells[0].position == pytest.approx((-0.4, 9.6, 0.4))


def test_cell_size_follows_trunk_progress(golden_config):
    new = grow(_trunk_slice(10.0), golden_config, 0.5, False, MidpointRandom())
    assert new.cells[0].size == pytest.approx(0.35)
    clamped = grow(_trunk_slice(10.0), golden_config, 4.0, False, MidpointRandom())
    assert clamped.cells[0].size == pytest.approx(0.2)


def test_trunk_below_ground_is_dropped(golden_config):
    assert grow(_trunk_slice(0.1), golden_config, 0.0, True, MidpointRandom()) is None


def test_branch_starts_beside_the_current_trunk_cell(golden_config):
    new = grow(_trunk_slice(10.0), golden_config, 0.0, True, MidpointRandom())
    assert len(new) == 2
    trunk, branch = new.cells
    assert trunk.is_trunk and not branch.is_trunk
    # Midpoint of range_int(0, 8) is 3 -> SOUTH_EAST, from y=10 not y=9.6
    assert branch.direction == Direction.SOUTH_EAST
    assert branch.position == pytest.approx((0.4, 10.0, -0.4))
    assert branch.branch_life_remaining == 3
    assert branch.size == trunk.size


def test_branch_below_min_height_is_aborted(golden_config):
    config = golden_config.replace(min_height_to_branch=50.0)
    new = grow(_trunk_slice(10.0), config, 0.0, True, MidpointRandom())
    assert [c.is_trunk for c in new] == [True]


def test_short_branch_is_culled(golden_config):
    config = golden_config.replace(branch_cull_length=4)
    new = grow(_trunk_slice(10.0), config, 0.0, True, MidpointRandom())
    assert [c.is_trunk for c in new] == [True]


def test_branch_length_scales_with_progress(golden_config):
    config = golden_config.replace(
        min_branch_length=10, max_branch_length=10,
        branch_scale_with_trunk_progress=BranchScaleCurve([(0.0, 1.0), (1.0, 0.5)]),
    )
    new = grow(_trunk_slice(10.0), config, 1.0, True, MidpointRandom())
    assert new.cells[1].branch_life_remaining == 5


def test_dead_branch_emits_nothing(golden_config):
    assert grow(_branch_slice(0), golden_config, 0.0, False, MidpointRandom()) is None


def test_branch_keeps_heading_and_counts_down(golden_config):
    new = grow(_branch_slice(3, Direction.EAST), golden_config, 0.0, False, MidpointRandom())
    cell = new.cells[0]
    assert cell.direction == Direction.EAST
    assert cell.branch_life_remaining == 2
    assert cell.position == pytest.approx((0.4, 5.0, 0.0))


def test_branch_deviation_turns_one_step(golden_config):
    config = golden_config.replace(branch_deviation_chance=0.5, branch_vertical_chance=0.5)
    # deviate (0.0 < 0.5), turn -1, then no vertical drift (0.9 >= 0.5)
    rng = ScriptedRandom(floats=[0.0, 0.9], ints=[-1])
    new = grow(_branch_slice(3, Direction.NORTH), config, 0.0, False, rng)
    cell = new.cells[0]
    assert cell.direction == Direction.NORTH_WEST
    assert cell.position == pytest.approx((-0.4, 5.0, 0.4))


def test_branch_vertical_drift(golden_config):
    config = golden_config.replace(branch_deviation_chance=0.5, branch_vertical_chance=0.5)
    rng = ScriptedRandom(floats=[0.9, 0.0], ints=[1])
    new = grow(_branch_slice(3, Direction.NORTH), config, 0.0, False, rng)
    cell = new.cells[0]
    assert cell.direction == Direction.NORTH
    assert cell.position == pytest.approx((0.0, 5.4, 0.4))


def test_grow_leaves_input_slice_untouched(golden_config):
    source = _trunk_slice(10.0)
    before = list(source.cells)
    grow(source, golden_config, 0.0, True, MidpointRandom())
    assert source.cells == before


def test_mixed_slice_emits_in_parent_order(golden_config):
    source = Slice([
        Cell((0.0, 10.0, 0.0), True, 0.5),
        Cell((3.0, 10.0, 0.0), False, 0.5, Direction.EAST, 2),
        Cell((6.0, 10.0, 0.0), False, 0.5, Direction.WEST, 0),
        Cell((9.0, 10.0, 0.0), False, 0.5, Direction.NORTH, 1),
    ])
    new = grow(source, golden_config, 0.0, True, MidpointRandom())
    kinds = [(c.is_trunk, c.branch_life_remaining) for c in new]
    # trunk child, new root (life 3), then children of the living branches
    assert kinds == [(True, 0), (False, 3), (False, 1), (False, 0)]
