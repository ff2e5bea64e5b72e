"""
Lightning Configuration

LightningConfig is loaded once before a bolt is grown and never changes
during generation. Field defaults are the values the effect was tuned
with in the editor; presets.py holds named variations.

Bad values are rejected up front (InvalidConfigError) because most of
them would otherwise hang the growth loop or divide by zero:
  - cell_overlap >= 0.5 makes the trunk step zero or negative
  - min_branch_interval < 1 means the countdown never hits zero
  - end_cell_size <= 0 makes the slice estimate meaningless
"""

import dataclasses
from dataclasses import dataclass, field

import numpy as np
from scipy.interpolate import CubicHermiteSpline, PchipInterpolator


class InvalidConfigError(ValueError):
    """Raised when a LightningConfig or BranchScaleCurve is degenerate."""


class BranchScaleCurve:
    """Maps trunk progress (0..1) to a branch length multiplier.

    Keys are (time, value) or (time, value, slope) tuples, sorted by time.
    Slopes given on every key -> cubic Hermite segments (like an editor
    animation curve). No slopes -> monotone PCHIP through the values.
    Outside the key range the curve holds its end values.
    """

    def __init__(self, keys):
        keys = [tuple(k) for k in keys]
        if not keys:
            raise InvalidConfigError("BranchScaleCurve needs at least one key")
        if any(len(k) not in (2, 3) for k in keys):
            raise InvalidConfigError(
                "BranchScaleCurve keys must be (time, value) or (time, value, slope)")

        self.keys = keys
        self._times = np.array([k[0] for k in keys], dtype=np.float64)
        self._values = np.array([k[1] for k in keys], dtype=np.float64)
        if len(keys) > 1 and np.any(np.diff(self._times) <= 0):
            raise InvalidConfigError("BranchScaleCurve key times must be strictly increasing")

        if len(keys) == 1:
            self._spline = None
        elif all(len(k) == 3 for k in keys):
            slopes = np.array([k[2] for k in keys], dtype=np.float64)
            self._spline = CubicHermiteSpline(self._times, self._values, slopes)
        else:
            self._spline = PchipInterpolator(self._times, self._values)

    @classmethod
    def constant(cls, value=1.0):
        return cls([(0.0, value)])

    def evaluate(self, t):
        if self._spline is None:
            return float(self._values[0])
        t = min(max(float(t), self._times[0]), self._times[-1])
        return float(self._spline(t))

    __call__ = evaluate

    def __eq__(self, other):
        if not isinstance(other, BranchScaleCurve):
            return NotImplemented
        return self.keys == other.keys

    def __hash__(self):
        return hash(tuple(self.keys))

    def __repr__(self):
        return f"BranchScaleCurve({self.keys!r})"


@dataclass(frozen=True)
class LightningConfig:
    """Immutable parameters for growing and flashing one bolt."""

    # Cell size shrinks from start to end as the trunk progresses
    start_cell_size: float = 0.5
    end_cell_size: float = 0.2
    cell_overlap: float = 0.1

    # Trunk passes between branch attempts, [min, max)
    min_branch_interval: int = 15
    max_branch_interval: int = 30

    # Base branch life in cells, [min, max), scaled by the curve below
    min_branch_length: int = 30
    max_branch_length: int = 50
    branch_vertical_chance: float = 0.1
    branch_deviation_chance: float = 0.5
    min_height_to_branch: float = 20.0

    branch_scale_with_trunk_progress: BranchScaleCurve = field(
        default_factory=BranchScaleCurve.constant)
    branch_cull_length: int = 10

    # Playback timing (seconds)
    lightning_flash_time: float = 0.5
    lightning_persistence_time: float = 0.2

    def __post_init__(self):
        self.validate()

    def validate(self):
        """Raise InvalidConfigError describing the first bad field."""
        if self.start_cell_size <= 0 or self.end_cell_size <= 0:
            raise InvalidConfigError(
                f"Cell sizes must be positive "
                f"(start={self.start_cell_size}, end={self.end_cell_size})")
        if self.end_cell_size > self.start_cell_size:
            raise InvalidConfigError(
                f"end_cell_size ({self.end_cell_size}) must not exceed "
                f"start_cell_size ({self.start_cell_size})")
        if not 0.0 <= self.cell_overlap < 0.5:
            raise InvalidConfigError(
                f"cell_overlap must be in [0, 0.5), got {self.cell_overlap}")
        if self.min_branch_interval < 1:
            raise InvalidConfigError(
                f"min_branch_interval must be >= 1, got {self.min_branch_interval}")
        if self.min_branch_interval > self.max_branch_interval:
            raise InvalidConfigError(
                f"min_branch_interval ({self.min_branch_interval}) > "
                f"max_branch_interval ({self.max_branch_interval})")
        if self.min_branch_length < 0 or self.min_branch_length > self.max_branch_length:
            raise InvalidConfigError(
                f"Branch length range invalid "
                f"({self.min_branch_length}..{self.max_branch_length})")
        for name in ("branch_vertical_chance", "branch_deviation_chance"):
            chance = getattr(self, name)
            if not 0.0 <= chance <= 1.0:
                raise InvalidConfigError(f"{name} must be in [0, 1], got {chance}")
        if self.branch_cull_length < 0:
            raise InvalidConfigError(
                f"branch_cull_length must be >= 0, got {self.branch_cull_length}")
        if self.lightning_flash_time < 0 or self.lightning_persistence_time < 0:
            raise InvalidConfigError("Flash and persistence times must be >= 0")
        if not isinstance(self.branch_scale_with_trunk_progress, BranchScaleCurve):
            raise InvalidConfigError(
                "branch_scale_with_trunk_progress must be a BranchScaleCurve")

    def replace(self, **changes):
        """Validated copy with some fields changed."""
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_dict(cls, params):
        """Build from a preset-style dict.

        Keys that are not config fields (name, description, ...) are
        ignored. 'branch_scale_keys' becomes the branch scale curve.
        """
        names = {f.name for f in dataclasses.fields(cls)}
        kwargs = {k: v for k, v in params.items() if k in names}
        if "branch_scale_keys" in params:
            kwargs["branch_scale_with_trunk_progress"] = BranchScaleCurve(
                params["branch_scale_keys"])
        return cls(**kwargs)

    def to_dict(self):
        """Inverse of from_dict (curve written back as branch_scale_keys)."""
        out = {}
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if isinstance(value, BranchScaleCurve):
                out["branch_scale_keys"] = [list(k) for k in value.keys]
            else:
                out[f.name] = value
        return out
