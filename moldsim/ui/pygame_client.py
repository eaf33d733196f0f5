"""Pygame 2D visualization for the mold simulation.

Renders trail intensity, food squares and molds from read-only
``Simulation.snapshot()`` frames.  The simulation steps at a
configurable tick rate while the display refreshes at the Pygame frame
rate.  Clicking on the canvas drops a food source at that point.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

import numpy as np
import pygame

if TYPE_CHECKING:
    from moldsim.simulation.engine import Frame, Simulation

# Colour palette
_BG = (0, 0, 0)
_TEXT = (200, 200, 200)
_FOOD_BORDER = (255, 255, 255, 100)
_MOLD = np.array([255, 255, 255], dtype=np.uint8)


class PygameRenderer:
    """Renders a Simulation into a Pygame window.

    Attributes:
        simulation: The simulation to visualise.
        scale: Screen pixels per simulation unit.
        screen: The Pygame display surface.
    """

    # Speed presets: ticks per second at 30 fps
    _SPEED_STEPS: ClassVar[list[float]] = [
        1.0,
        5.0,
        10.0,
        15.0,
        30.0,
        60.0,
        120.0,
    ]

    def __init__(
        self,
        simulation: Simulation,
        scale: int = 1,
        ticks_per_second: float = 30.0,
    ) -> None:
        """Initialise the renderer.

        Args:
            simulation: The simulation to render.
            scale: Screen pixels per simulation unit.
            ticks_per_second: Simulation ticks per real-time second.
        """
        self.simulation = simulation
        self.scale = scale
        self.ticks_per_second = ticks_per_second
        self._speed_index = self._nearest_speed(ticks_per_second)
        self._tick_accumulator = 0.0

        self._canvas_w = simulation.config.width * scale
        self._canvas_h = simulation.config.height * scale
        self._panel_width = 200

        pygame.init()
        self.screen = pygame.display.set_mode(
            (self._canvas_w + self._panel_width, self._canvas_h),
        )
        pygame.display.set_caption("moldsim")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", 14)
        self.running = True
        self.paused = False

    def _nearest_speed(self, tps: float) -> int:
        """Return the index of the closest speed preset."""
        diffs = [abs(s - tps) for s in self._SPEED_STEPS]
        return diffs.index(min(diffs))

    def run(self, fps: int = 30) -> None:
        """Main loop: handle events, step sim, render.

        Args:
            fps: Target frames per second.
        """
        while self.running:
            dt = self.clock.tick(fps) / 1000.0
            self._handle_events()
            if not self.paused:
                self._tick_accumulator += self.ticks_per_second * dt
                steps = int(self._tick_accumulator)
                self._tick_accumulator -= steps
                for _ in range(steps):
                    self.simulation.step()
            self._draw(self.simulation.snapshot())

        pygame.quit()

    def _handle_events(self) -> None:
        """Process Pygame input events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                px, py = event.pos
                if px < self._canvas_w:
                    self.simulation.spawn_food(px / self.scale, py / self.scale)
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_SPACE:
                    self.paused = not self.paused
                elif event.key in (pygame.K_PLUS, pygame.K_EQUALS):
                    self._speed_index = min(
                        len(self._SPEED_STEPS) - 1,
                        self._speed_index + 1,
                    )
                    self.ticks_per_second = self._SPEED_STEPS[self._speed_index]
                elif event.key == pygame.K_MINUS:
                    self._speed_index = max(0, self._speed_index - 1)
                    self.ticks_per_second = self._SPEED_STEPS[self._speed_index]

    def _draw(self, frame: Frame) -> None:
        """Render one frame."""
        self.screen.fill(_BG)
        self._draw_field(frame)
        self._draw_food(frame)
        self._draw_info_panel(frame)
        pygame.display.flip()

    def _draw_field(self, frame: Frame) -> None:
        """Draw trail intensity as grey levels with molds as white pixels."""
        cap = self.simulation.config.trail_max_intensity
        level = np.clip(frame.trail / cap * 255.0, 0, 255).astype(np.uint8)
        # surfarray is indexed [x, y]
        pixels = np.repeat(level.T[:, :, np.newaxis], 3, axis=2)

        if frame.molds:
            xs = np.array([m.x for m in frame.molds], dtype=int)
            ys = np.array([m.y for m in frame.molds], dtype=int)
            pixels[xs, ys] = _MOLD

        surface = pygame.surfarray.make_surface(pixels)
        if self.scale != 1:
            surface = pygame.transform.scale(surface, (self._canvas_w, self._canvas_h))
        self.screen.blit(surface, (0, 0))

    def _draw_food(self, frame: Frame) -> None:
        """Draw each active food square in its current grey level."""
        s = self.scale
        overlay = pygame.Surface((self._canvas_w, self._canvas_h), pygame.SRCALPHA)
        for food in frame.foods:
            if not food.active or food.size <= 0:
                continue
            side = int(food.size * s)
            rect = pygame.Rect(0, 0, side, side)
            rect.center = (int(food.x * s), int(food.y * s))
            pygame.draw.rect(self.screen, food.colour, rect)
            pygame.draw.rect(overlay, _FOOD_BORDER, rect, width=3)
        self.screen.blit(overlay, (0, 0))

    def _draw_info_panel(self, frame: Frame) -> None:
        """Draw a stats panel on the right side of the window."""
        panel_x = self._canvas_w + 10
        y = 10
        active = sum(1 for f in frame.foods if f.active)
        dispersing = sum(1 for m in frame.molds if m.is_dispersing)

        lines = [
            f"Tick: {frame.tick}",
            f"Speed: {self.ticks_per_second:.1f} t/s",
            f"{'PAUSED' if self.paused else 'RUNNING'}",
            "",
            f"Molds: {len(frame.molds)}",
            f"Dispersing: {dispersing}",
            f"Food: {active}/{len(frame.foods)}",
            "",
            "--- Controls ---",
            "CLICK: drop food",
            "SPACE: pause",
            "+/-: speed",
            "ESC: quit",
        ]

        for line in lines:
            surf = self.font.render(line, True, _TEXT)
            self.screen.blit(surf, (panel_x, y))
            y += 18
