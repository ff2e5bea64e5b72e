"""
Lightning Parameter Presets

Each preset is a plain dict of LightningConfig fields plus a display
name/description and a default strike height. "branch_scale_keys" lists
(progress, scale) keys for the branch length curve.
"""

PRESETS = {
    "storm": {
        "name": "Storm Strike",
        "description": "Tall bolt, long branches fading toward the ground",
        "height": 75.0,
        "start_cell_size": 0.5, "end_cell_size": 0.2, "cell_overlap": 0.1,
        "min_branch_interval": 15, "max_branch_interval": 30,
        "min_branch_length": 30, "max_branch_length": 50,
        "branch_vertical_chance": 0.1, "branch_deviation_chance": 0.5,
        "min_height_to_branch": 20.0,
        "branch_scale_keys": [(0.0, 1.0), (0.6, 0.7), (1.0, 0.2)],
        "branch_cull_length": 10,
        "lightning_flash_time": 0.5, "lightning_persistence_time": 0.2,
    },
    "forked": {
        "name": "Forked",
        "description": "Frequent short branches, crackling all the way down",
        "height": 60.0,
        "start_cell_size": 0.6, "end_cell_size": 0.25, "cell_overlap": 0.15,
        "min_branch_interval": 4, "max_branch_interval": 10,
        "min_branch_length": 10, "max_branch_length": 25,
        "branch_vertical_chance": 0.25, "branch_deviation_chance": 0.6,
        "min_height_to_branch": 5.0,
        "branch_scale_keys": [(0.0, 1.0), (1.0, 0.5)],
        "branch_cull_length": 4,
        "lightning_flash_time": 0.4, "lightning_persistence_time": 0.15,
    },
    "sheet": {
        "name": "Sheet Crawler",
        "description": "Wide horizontal branches high up, bare trunk below",
        "height": 50.0,
        "start_cell_size": 0.4, "end_cell_size": 0.3, "cell_overlap": 0.1,
        "min_branch_interval": 6, "max_branch_interval": 12,
        "min_branch_length": 40, "max_branch_length": 70,
        "branch_vertical_chance": 0.05, "branch_deviation_chance": 0.3,
        "min_height_to_branch": 30.0,
        "branch_scale_keys": [(0.0, 1.2), (0.3, 1.0), (0.5, 0.0)],
        "branch_cull_length": 8,
        "lightning_flash_time": 0.8, "lightning_persistence_time": 0.3,
    },
    "bare": {
        "name": "Bare Trunk",
        "description": "Single jagged trunk with no side branches",
        "height": 40.0,
        "start_cell_size": 0.5, "end_cell_size": 0.2, "cell_overlap": 0.1,
        "min_branch_interval": 15, "max_branch_interval": 30,
        "min_branch_length": 0, "max_branch_length": 0,
        "branch_vertical_chance": 0.0, "branch_deviation_chance": 0.0,
        "min_height_to_branch": 0.0,
        "branch_scale_keys": [(0.0, 1.0)],
        "branch_cull_length": 1,
        "lightning_flash_time": 0.3, "lightning_persistence_time": 0.15,
    },
}

PRESET_ORDER = ["storm", "forked", "sheet", "bare"]

DEFAULT_PRESET = "storm"


def get_preset(name):
    """Get a preset by name. Returns None if not found."""
    return PRESETS.get(name)


def require_preset(name):
    """Get a preset by name, raising ValueError if it does not exist."""
    preset = PRESETS.get(name)
    if preset is None:
        raise ValueError(f"Unknown preset: {name!r}. "
                         f"Valid: {', '.join(PRESET_ORDER)}")
    return preset


def list_presets():
    """Return list of (key, name, description) in display order."""
    return [(k, PRESETS[k]["name"], PRESETS[k]["description"])
            for k in PRESET_ORDER if k in PRESETS]
