"""Shared fixtures: deterministic random sources and a small test config."""

import pytest

from lightning_bolt.config import BranchScaleCurve, LightningConfig


class MidpointRandom:
    """Always picks the middle: value() -> 0.5, range_int(-1, 2) -> 0."""

    def value(self):
        return 0.5

    def range_int(self, lo, hi):
        if hi <= lo:
            return lo
        return lo + (hi - lo - 1) // 2


class ScriptedRandom(MidpointRandom):
    """Replays queued draws, falling back to midpoints once a queue is empty."""

    def __init__(self, floats=(), ints=()):
        self.floats = list(floats)
        self.ints = list(ints)

    def value(self):
        if self.floats:
            return self.floats.pop(0)
        return super().value()

    def range_int(self, lo, hi):
        if self.ints:
            return self.ints.pop(0)
        return super().range_int(lo, hi)


@pytest.fixture
def golden_config():
    return LightningConfig(
        start_cell_size=0.5, end_cell_size=0.2, cell_overlap=0.1,
        min_branch_interval=5, max_branch_interval=5,
        min_branch_length=3, max_branch_length=3,
        branch_vertical_chance=0.0, branch_deviation_chance=0.0,
        min_height_to_branch=0.0,
        branch_scale_with_trunk_progress=BranchScaleCurve.constant(1.0),
        branch_cull_length=1,
        lightning_flash_time=0.5, lightning_persistence_time=0.2,
    )
