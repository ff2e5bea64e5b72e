"""
Growth Engine - one generation of bolt growth

grow() turns the frontier slice into the next slice:
  - trunk cells step down by one offset, with an independent -1/0/+1
    offset jitter on the forward and right axes, and may spawn a branch
  - branch cells keep walking along their compass heading, sometimes
    turning one step or drifting vertically, until their life hits zero

The offset between a cell and its successor is their mean diameter
shrunk by the configured overlap, so consecutive cells overlap visually:
  offset = (size + next_size) * (0.5 - cell_overlap)

Nothing here raises. Out-of-range growth is simply not emitted, and a
pass that emits nothing returns None so the caller knows to stop.
"""

from typing import Optional

from .geometry import (
    Cell, Slice, DOWN, FORWARD, RIGHT,
    as_vec3, direction_to_vector, lerp,
    random_direction, random_adjacent_direction,
)


def grow(slice_, config, trunk_progress, perform_branch, rng) -> Optional[Slice]:
    """Grow every cell of slice_ into a new slice.

    Args:
        slice_: Frontier slice (left untouched)
        config: LightningConfig
        trunk_progress: 0..1+ progress of the trunk, drives size and branch scale
        perform_branch: Whether trunk cells attempt a branch on this pass
        rng: Random source (value / range_int)

    Returns:
        The new Slice, or None if no cell produced a child
    """
    new_slice = Slice()
    next_cell_size = lerp(config.start_cell_size, config.end_cell_size, trunk_progress)

    for cell in slice_:
        offset = (cell.size + next_cell_size) * (0.5 - config.cell_overlap)
        if cell.is_trunk:
            _grow_trunk(config, cell, offset, next_cell_size,
                        perform_branch, trunk_progress, rng, new_slice)
        else:
            _grow_branch(config, cell, offset, next_cell_size, rng, new_slice)

    if not new_slice.cells:
        return None
    return new_slice


def _grow_trunk(config, cell, offset, next_cell_size, perform_branch,
                trunk_progress, rng, new_slice):
    position = cell.position_array()

    next_position = position + offset * DOWN
    next_position = next_position + offset * FORWARD * rng.range_int(-1, 2)
    next_position = next_position + offset * RIGHT * rng.range_int(-1, 2)

    # Below ground: this lineage ends, no branch either
    if next_position[1] < 0:
        return

    new_slice.add_cell(Cell(
        position=as_vec3(next_position),
        is_trunk=True,
        size=next_cell_size,
    ))

    if perform_branch:
        _spawn_branch(config, position, offset, next_cell_size,
                      trunk_progress, rng, new_slice)


def _spawn_branch(config, trunk_position, offset, next_cell_size,
                  trunk_progress, rng, new_slice):
    """Try to start a branch beside the trunk cell (not beside its child)."""
    direction = random_direction(rng)
    branch_position = trunk_position + direction_to_vector(direction) * offset

    if branch_position[1] < config.min_height_to_branch:
        return

    base_length = rng.range_int(config.min_branch_length, config.max_branch_length)
    scale = config.branch_scale_with_trunk_progress.evaluate(trunk_progress)
    branch_length = int(round(base_length * scale))

    if branch_length < config.branch_cull_length:
        return

    new_slice.add_cell(Cell(
        position=as_vec3(branch_position),
        is_trunk=False,
        size=next_cell_size,
        direction=direction,
        branch_life_remaining=branch_length,
    ))


def _grow_branch(config, cell, offset, next_cell_size, rng, new_slice):
    if cell.branch_life_remaining == 0:
        return

    direction = cell.direction
    if rng.value() < config.branch_deviation_chance:
        direction = random_adjacent_direction(rng, direction)

    step = direction_to_vector(direction)
    if rng.value() < config.branch_vertical_chance:
        step[1] = rng.range_int(-1, 2)

    next_position = cell.position_array() + step * offset

    new_slice.add_cell(Cell(
        position=as_vec3(next_position),
        is_trunk=False,
        size=next_cell_size,
        direction=direction,
        branch_life_remaining=cell.branch_life_remaining - 1,
    ))
