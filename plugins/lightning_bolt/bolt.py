"""
Bolt Assembler

Builds a complete bolt from a config and a strike height:

  1. Seed a single trunk cell at (0, height, 0)
  2. Grow slice after slice until a pass produces nothing, firing a
     branch attempt every min..max trunk passes
  3. Re-centre every cell on the trunk tip, so the bolt's local origin
     is where it hits
  4. Flatten slices into PlaybackElements, slice i lighting up at
     i * flash_time / slice_count

LightningGenerator wraps this for callers that strike repeatedly at
world-space targets with one config and one random stream.
"""

import numpy as np

from .config import LightningConfig
from .geometry import Cell, Slice
from .growth import grow
from .playback import PlaybackElement, PlaybackDriver
from .rng import BoltRandom


def estimate_trunk_slices(config, height):
    """Expected trunk passes to reach the ground (normalises progress)."""
    if height <= 0:
        return 0
    return int(round(height / config.end_cell_size))


def grow_slices(config, height, rng):
    """Run the growth loop from a seed at the given height.

    The loop always ends: every trunk pass drops at least
    2 * end_cell_size * (0.5 - cell_overlap), which validation keeps
    positive, and branch cells only live for their remaining life.

    Returns:
        List of slices, seed first. Positions are absolute (not recentred).
    """
    seed = Slice()
    seed.add_cell(Cell(position=(0.0, float(height), 0.0),
                       is_trunk=True, size=config.start_cell_size))
    slices = [seed]

    max_trunk_slices = estimate_trunk_slices(config, height)
    if max_trunk_slices == 0:
        return slices

    branch_countdown = rng.range_int(config.min_branch_interval, config.max_branch_interval)

    while True:
        trunk_progress = len(slices) / max_trunk_slices

        branch_countdown -= 1
        perform_branch = False
        if branch_countdown == 0:
            perform_branch = True
            branch_countdown = rng.range_int(config.min_branch_interval,
                                             config.max_branch_interval)

        new_slice = grow(slices[-1], config, trunk_progress, perform_branch, rng)
        if new_slice is None:
            break
        slices.append(new_slice)

    return slices


def find_tip(slices):
    """Position of the deepest trunk cell, or None if there is no trunk.

    The last slices may hold only branch remnants, so walk backwards
    until a slice with a trunk cell turns up.
    """
    for slice_ in reversed(slices):
        for cell in slice_:
            if cell.is_trunk:
                return cell.position
    return None


def recentre(slices):
    """New slices with every position expressed relative to the tip."""
    tip = find_tip(slices)
    if tip is None:
        return list(slices)
    offset = -np.array(tip, dtype=np.float64)
    return [s.translated(offset) for s in slices]


def flatten(slices, config):
    """One PlaybackElement per cell; cells of a slice share a start time."""
    elements = []
    if not slices:
        return elements

    time_per_slice = config.lightning_flash_time / len(slices)
    start_time = 0.0
    for slice_ in slices:
        for cell in slice_:
            elements.append(PlaybackElement(
                position=cell.position,
                size=cell.size,
                start_time=start_time,
                end_time=start_time + config.lightning_persistence_time,
            ))
        start_time += time_per_slice
    return elements


class LightningBolt:
    """A single bolt: its slices, its timed elements and its playback state."""

    def __init__(self, origin=(0.0, 0.0, 0.0)):
        self.origin = tuple(float(v) for v in origin)
        self.config = None
        self.height = 0.0
        self.slices = []
        self.elements = []
        self.driver = None

    def build(self, config, height, rng=None, sink=None):
        """Grow, recentre and flatten the bolt.

        Args:
            config: LightningConfig
            height: Strike height above the target
            rng: Random source; a fresh unseeded BoltRandom if omitted
            sink: Optional rendering sink handed to the playback driver

        Returns:
            Ordered list of PlaybackElements
        """
        if rng is None:
            rng = BoltRandom()
        self.config = config
        self.height = float(height)
        self.slices = recentre(grow_slices(config, height, rng))
        self.elements = flatten(self.slices, config)
        self.driver = PlaybackDriver(self.elements, sink=sink)
        return self.elements

    def tick(self, elapsed_time):
        return self.driver.tick(elapsed_time)

    def advance(self, dt):
        return self.driver.advance(dt)

    @property
    def finished(self):
        return self.driver is not None and self.driver.finished

    def world_positions(self):
        """(N, 3) array of element positions placed at the bolt's origin."""
        if not self.elements:
            return np.zeros((0, 3), dtype=np.float64)
        local = np.array([e.position for e in self.elements], dtype=np.float64)
        return local + np.array(self.origin)

    @property
    def tip_depth(self):
        """Vertical drop from the seed to the trunk tip.

        After re-centering the tip sits at y=0, so this is the height of
        the seed cell.
        """
        if not self.slices or not self.slices[0].cells:
            return 0.0
        return self.slices[0].cells[0].height

    @property
    def stats(self):
        """Summary counts for HUD / CLI output."""
        trunk = sum(len(s.trunk_cells()) for s in self.slices)
        branch = sum(len(s.branch_cells()) for s in self.slices)
        # Each living branch cell has exactly one child, so any surplus
        # branch cells in the next slice are new roots off the trunk
        roots = 0
        living = 0
        for s in self.slices:
            branch_cells = s.branch_cells()
            roots += len(branch_cells) - living
            living = sum(1 for c in branch_cells if c.branch_life_remaining > 0)
        return {
            "slices": len(self.slices),
            "trunk_cells": trunk,
            "branch_cells": branch,
            "branches": roots,
            "tip_depth": self.tip_depth,
            "elements": len(self.elements),
            "duration": self.driver.duration if self.driver else 0.0,
        }


class LightningGenerator:
    """Strikes bolts at world-space targets with a fixed config."""

    def __init__(self, config=None, height=75.0, rng=None):
        self.config = config if config is not None else LightningConfig()
        self.height = height
        self.rng = rng if rng is not None else BoltRandom()

    @classmethod
    def from_preset(cls, preset, seed=None):
        return cls(
            config=LightningConfig.from_dict(preset),
            height=preset.get("height", 75.0),
            rng=BoltRandom(seed),
        )

    def build_lightning(self, target, height=None, sink=None):
        """Build a new bolt whose tip lands on target."""
        bolt = LightningBolt(origin=target)
        bolt.build(self.config, self.height if height is None else height,
                   rng=self.rng, sink=sink)
        return bolt
