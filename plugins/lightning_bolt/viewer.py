"""
Interactive Pygame Viewer for Lightning Bolts

Strikes bolts onto a flat ground plane and plays them back with the
wall clock. Each bolt is grown in full when it is struck, then its
elements flash on slice by slice and the bolt is dropped once every
element has finished.

Controls:
  SPACE       Strike at a random spot
  Mouse L     Strike at the cursor
  A           Toggle auto-strike
  1-9         Select preset
  H           Toggle HUD overlay
  S           Save screenshot
  Q / ESC     Quit
"""

import math
import os
import time
import numpy as np
import pygame

from .bolt import LightningGenerator
from .presets import PRESET_ORDER, get_preset
from .render import FrameRenderer, CORE_COLOR, GLOW_COLOR

BG_COLOR = (6, 6, 14)
GROUND_COLOR = (30, 30, 42)
HUD_COLOR = (210, 215, 225)

AUTO_STRIKE_INTERVAL = (0.4, 1.6)  # seconds between automatic strikes


class Viewer:
    def __init__(self, width=900, height=900, start_preset="storm", seed=None,
                 strike_height=None):
        self.canvas_w = width
        self.canvas_h = height
        self.running = True
        self.show_hud = True
        self.auto_strike = False
        self.fps_history = []

        self.preset_key = start_preset
        self.generator = None
        self.bolts = []
        self.strike_count = 0
        self._seed = seed
        self.strike_height = strike_height
        self._auto_timer = 0.0
        self._np_rng = np.random.default_rng(seed)

        self.camera = FrameRenderer(width, height, margin=0.05, yaw=0.6)
        self._apply_preset(start_preset)

    def _apply_preset(self, key):
        preset = get_preset(key)
        if preset is None:
            print(f"Unknown preset: {key}")
            return
        self.preset_key = key
        self.generator = LightningGenerator.from_preset(preset, seed=self._seed)
        if self.strike_height is not None:
            self.generator.height = self.strike_height
        height = self.generator.height
        # Frame the strike zone: ground width ~ strike height
        corners = np.array([
            [-height * 0.6, 0.0, 0.0],
            [height * 0.6, height * 1.05, 0.0],
        ])
        self.camera.fit(corners)
        self.bolts = []

    def _strike(self, target_x=None):
        height = self.generator.height
        if target_x is None:
            target_x = float(self._np_rng.uniform(-height * 0.4, height * 0.4))
        bolt = self.generator.build_lightning((target_x, 0.0, 0.0))
        self.bolts.append(bolt)
        self.strike_count += 1

    def _screen_to_target_x(self, mx):
        # Targets sit on z=0, where projected x is world x * cos(yaw)
        screen_x = (mx - self.canvas_w / 2.0) / self.camera.scale + self.camera.center[0]
        return screen_x / math.cos(self.camera.yaw)

    def _draw_bolts(self, screen):
        glow = pygame.Surface((self.canvas_w, self.canvas_h), pygame.SRCALPHA)
        core_color = tuple(int(c) for c in CORE_COLOR)
        glow_color = tuple(int(c) for c in GLOW_COLOR)
        for bolt in self.bolts:
            visible = bolt.driver.visible_elements()
            if not visible:
                continue
            origin = np.array(bolt.origin)
            positions = np.array([e.position for e in visible]) + origin
            pixels = self.camera.to_pixels(positions)
            for (px, py), element in zip(pixels, visible):
                r = max(1, int(0.5 * element.size * self.camera.scale))
                pygame.draw.circle(glow, glow_color + (60,), (int(px), int(py)), r * 3)
                pygame.draw.circle(screen, core_color, (int(px), int(py)), r)
        screen.blit(glow, (0, 0))

    def _draw_ground(self, screen):
        ground_y = int(self.camera.to_pixels(np.zeros((1, 3)))[0, 1])
        pygame.draw.rect(screen, GROUND_COLOR,
                         pygame.Rect(0, ground_y, self.canvas_w, self.canvas_h - ground_y))

    def _draw_hud(self, screen, fps):
        if not self.show_hud:
            return
        preset = get_preset(self.preset_key)
        live = sum(len(b.elements) for b in self.bolts)
        line = (f"{preset['name']}  |  Strikes: {self.strike_count}  |  "
                f"Active bolts: {len(self.bolts)}  |  Elements: {live:,}  |  "
                f"FPS: {fps:.0f}")
        if self.auto_strike:
            line = "[AUTO]  " + line

        bg_surface = pygame.Surface((self.canvas_w, 24), pygame.SRCALPHA)
        bg_surface.fill((0, 0, 0, 140))
        screen.blit(bg_surface, (0, 0))
        text_surface = self.hud_font.render(line, True, HUD_COLOR)
        screen.blit(text_surface, (10, 6))

    def _save_screenshot(self, screen):
        screenshots_dir = os.path.join(os.getcwd(), "screenshots")
        os.makedirs(screenshots_dir, exist_ok=True)
        timestamp = time.strftime("%Y%m%d_%H%M%S")
        path = os.path.join(screenshots_dir, f"bolt_{self.preset_key}_{timestamp}.png")
        pygame.image.save(screen, path)
        print(f"Screenshot saved: {path}")

    def _update(self, dt):
        if self.auto_strike:
            self._auto_timer -= dt
            if self._auto_timer <= 0:
                self._strike()
                self._auto_timer = float(self._np_rng.uniform(*AUTO_STRIKE_INTERVAL))

        # Dispose bolts as a whole once fully played out
        self.bolts = [b for b in self.bolts if not b.advance(dt)]

    def run(self):
        """Main viewer loop."""
        pygame.init()

        screen = pygame.display.set_mode((self.canvas_w, self.canvas_h))
        pygame.display.set_caption("Lightning")
        clock = pygame.time.Clock()
        self.hud_font = pygame.font.SysFont("menlo", 13)

        last_time = time.time()

        while self.running:
            now = time.time()
            dt = min(now - last_time, 0.1)  # cap dt to avoid jumps
            last_time = now

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                elif event.type == pygame.KEYDOWN:
                    self._handle_keydown(event, screen)
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    self._strike(self._screen_to_target_x(event.pos[0]))

            self._update(dt)

            screen.fill(BG_COLOR)
            self._draw_ground(screen)
            self._draw_bolts(screen)

            self.fps_history.append(max(dt, 1e-3))
            if len(self.fps_history) > 30:
                self.fps_history.pop(0)
            self._draw_hud(screen, 1.0 / np.mean(self.fps_history))

            pygame.display.flip()
            clock.tick(60)

        pygame.quit()

    def _handle_keydown(self, event, screen):
        key = event.key

        if key in (pygame.K_q, pygame.K_ESCAPE):
            self.running = False

        elif key == pygame.K_SPACE:
            self._strike()

        elif key == pygame.K_a:
            self.auto_strike = not self.auto_strike
            self._auto_timer = 0.0

        elif key == pygame.K_h:
            self.show_hud = not self.show_hud

        elif key == pygame.K_s:
            self._save_screenshot(screen)

        elif pygame.K_1 <= key <= pygame.K_9:
            idx = key - pygame.K_1
            if idx < len(PRESET_ORDER):
                self._apply_preset(PRESET_ORDER[idx])
