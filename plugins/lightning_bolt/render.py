"""
Headless Bolt Renderer - zero pygame dependency

Draws bolt elements as soft discs into a numpy intensity buffer, maps it
through a white-core / electric-blue colour ramp and adds a bloom halo.
Positions are projected orthographically after a yaw around the vertical
axis, so the branches that grow along z still read on screen.

RasterSink implements the playback sink protocol (spawn / set_visible /
dispose), so a PlaybackDriver can drive it exactly as it would drive a
scene graph:

    sink = RasterSink(FrameRenderer(512, 768))
    bolt.build(config, 75.0, rng, sink=sink)
    while not bolt.advance(1 / 30):
        frames.append(sink.render())
"""

import math
import os

import numpy as np
from PIL import Image
from scipy.ndimage import gaussian_filter

CORE_COLOR = np.array([255, 255, 255], dtype=np.float32)
GLOW_COLOR = np.array([125, 249, 255], dtype=np.float32)
BACKGROUND = np.array([6, 6, 14], dtype=np.float32)


def project_positions(positions, yaw=0.6):
    """Orthographic projection after rotating by yaw (radians) around +y.

    Args:
        positions: (N, 3) array-like of x, y, z

    Returns:
        (N, 2) array of screen-space x (right) and y (up)
    """
    pts = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
    c, s = math.cos(yaw), math.sin(yaw)
    x = pts[:, 0] * c + pts[:, 2] * s
    return np.stack([x, pts[:, 1]], axis=1)


def apply_bloom(rgb, sigma=6.0, intensity=0.8):
    """Additive glow halo via gaussian blur of the lit image.

    Only light above BACKGROUND is blurred, so an empty frame stays
    exactly BACKGROUND.
    """
    base = rgb.astype(np.float32)
    lit = np.clip(base - BACKGROUND, 0, None)
    glow = gaussian_filter(lit, [sigma, sigma, 0])
    result = base + glow * intensity
    np.clip(result, 0, 255, out=result)
    return result.astype(np.uint8)


def save_png(rgb, path):
    """Write an (H, W, 3) uint8 image, creating parent directories."""
    parent = os.path.dirname(os.path.abspath(path))
    os.makedirs(parent, exist_ok=True)
    Image.fromarray(rgb).save(path)
    return path


class FrameRenderer:
    """Fits a bolt into a fixed-size frame and rasterises its elements."""

    def __init__(self, width=512, height=768, margin=0.08, yaw=0.6,
                 bloom_sigma=6.0, bloom_intensity=0.8):
        self.width = width
        self.height = height
        self.margin = margin
        self.yaw = yaw
        self.bloom_sigma = bloom_sigma
        self.bloom_intensity = bloom_intensity

        self.scale = 1.0
        self.center = np.zeros(2)

    def fit(self, positions, sizes=None):
        """Choose scale/centre so every position (plus its radius) is in frame.

        Fit once per bolt, so the view stays put while elements flash.
        """
        screen = project_positions(positions, self.yaw)
        if len(screen) == 0:
            self.scale = 1.0
            self.center = np.zeros(2)
            return
        pad = 0.0 if sizes is None or len(sizes) == 0 else float(np.max(sizes))
        lo = screen.min(axis=0) - pad
        hi = screen.max(axis=0) + pad
        span = np.maximum(hi - lo, 1e-6)
        usable_w = self.width * (1.0 - 2 * self.margin)
        usable_h = self.height * (1.0 - 2 * self.margin)
        self.scale = float(min(usable_w / span[0], usable_h / span[1]))
        self.center = (lo + hi) / 2.0

    def to_pixels(self, positions):
        """World positions -> (N, 2) pixel coordinates (row 0 at the top)."""
        screen = project_positions(positions, self.yaw)
        px = (screen[:, 0] - self.center[0]) * self.scale + self.width / 2.0
        py = self.height / 2.0 - (screen[:, 1] - self.center[1]) * self.scale
        return np.stack([px, py], axis=1)

    def intensity(self, positions, sizes):
        """Float buffer in [0, 1] with one soft disc per element."""
        buf = np.zeros((self.height, self.width), dtype=np.float32)
        if len(positions) == 0:
            return buf
        pixels = self.to_pixels(positions)
        Y, X = np.ogrid[:self.height, :self.width]
        for (cx, cy), size in zip(pixels, sizes):
            radius = max(1.0, 0.5 * size * self.scale)
            # Only touch the disc's bounding box
            x0, x1 = int(max(cx - radius - 1, 0)), int(min(cx + radius + 2, self.width))
            y0, y1 = int(max(cy - radius - 1, 0)), int(min(cy + radius + 2, self.height))
            if x0 >= x1 or y0 >= y1:
                continue
            dist = np.sqrt((X[:, x0:x1] - cx) ** 2 + (Y[y0:y1, :] - cy) ** 2)
            disc = np.clip(1.0 - dist / radius, 0.0, 1.0) ** 0.5
            np.maximum(buf[y0:y1, x0:x1], disc, out=buf[y0:y1, x0:x1])
        return buf

    def colorize(self, buf):
        """Intensity -> RGB: glow blue at the rim, white at the core."""
        t = buf[..., None]
        core = np.clip((t - 0.5) * 2.0, 0.0, 1.0)
        rim = np.clip(t * 2.0, 0.0, 1.0)
        rgb = BACKGROUND + (GLOW_COLOR - BACKGROUND) * rim
        rgb = rgb + (CORE_COLOR - rgb) * core
        return np.clip(rgb, 0, 255).astype(np.uint8)

    def render(self, positions, sizes):
        rgb = self.colorize(self.intensity(positions, sizes))
        if self.bloom_intensity > 0:
            rgb = apply_bloom(rgb, self.bloom_sigma, self.bloom_intensity)
        return rgb


class RasterSink:
    """Playback sink that keeps spawned elements and draws the visible ones."""

    def __init__(self, renderer, origin=(0.0, 0.0, 0.0)):
        self.renderer = renderer
        self.origin = np.asarray(origin, dtype=np.float64)
        self.positions = []
        self.scales = []
        self.visible = []
        self.disposed = False
        self._fitted = False

    def spawn(self, position, scale):
        self.positions.append(np.asarray(position, dtype=np.float64) + self.origin)
        self.scales.append(float(scale))
        self.visible.append(False)
        self._fitted = False
        return len(self.positions) - 1

    def set_visible(self, handle, visible):
        self.visible[handle] = bool(visible)

    def dispose(self):
        self.disposed = True

    def visible_count(self):
        return sum(self.visible)

    def render(self):
        """RGB frame of the currently visible elements."""
        if self.disposed:
            return self.renderer.render([], [])
        if not self._fitted:
            self.renderer.fit(self.positions, self.scales)
            self._fitted = True
        idx = [i for i, v in enumerate(self.visible) if v]
        positions = [self.positions[i] for i in idx]
        scales = [self.scales[i] for i in idx]
        return self.renderer.render(positions, scales)


def render_bolt(bolt, width=512, height=768, yaw=0.6):
    """Full bolt geometry (every element lit) as one RGB image."""
    renderer = FrameRenderer(width, height, yaw=yaw)
    positions = bolt.world_positions()
    sizes = [e.size for e in bolt.elements]
    renderer.fit(positions, sizes)
    return renderer.render(positions, sizes)
