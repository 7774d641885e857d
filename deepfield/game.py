"""Deepfield: main viewer module (pygame loop around the simulation)."""

from __future__ import annotations

import logging
import sys

import pygame

from .constants import BLACK, FPS, SCREEN_HEIGHT, SCREEN_WIDTH, TITLE
from .models.config import GenerationConfig, save_settings
from .models.simulation import Simulation
from .screens.scale_view import ScaleViewScreen
from .ui.hud import HUD
from .ui.target_panel import TargetPanel

logger = logging.getLogger(__name__)


class Game:
    """Owns the window and routes input and frames to the scale view."""

    def __init__(self, config: GenerationConfig, autopilot: bool = True) -> None:
        pygame.init()
        self.screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
        pygame.display.set_caption(TITLE)
        self.clock = pygame.time.Clock()
        self.running = True

        self.simulation = Simulation(config, autopilot=autopilot)
        # Startup with a bang
        self.simulation.context.clock.universe_age = 0.0
        self.simulation.context.big_bang_flash = 1.0

        self.view = ScaleViewScreen(self.simulation)
        self.hud = HUD()
        self.target_panel = TargetPanel()

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------

    def run(self) -> None:
        while self.running:
            dt = self.clock.tick(FPS) / 1000.0
            self._handle_events()
            self._update(dt)
            self._draw()

        self._shutdown()
        pygame.quit()
        sys.exit()

    def _handle_events(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
                return
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                self.running = False
                return
            self.view.handle_events(event)

    def _update(self, dt: float) -> None:
        self.view.update(dt)
        self.simulation.tick(dt)

    def _draw(self) -> None:
        self.screen.fill(BLACK)
        self.view.draw(self.screen)
        self.hud.draw(self.screen, self.simulation, self.clock.get_fps())

        ctx = self.simulation.context
        if self.view.show_location:
            descriptor = self.simulation.location_descriptor()
            if descriptor is not None:
                self.target_panel.draw(self.screen, descriptor, heading="CURRENT LOCATION")
        elif ctx.selected is not None and ctx.transition is None:
            self.target_panel.draw(self.screen, ctx.selected.descriptor)

        pygame.display.flip()

    def _shutdown(self) -> None:
        """Remember the last generation settings for the next session."""
        try:
            path = save_settings(self.simulation.context.config)
        except OSError as exc:
            logger.warning("Could not save settings: %s", exc)
        else:
            logger.info("Settings saved to %s", path)
