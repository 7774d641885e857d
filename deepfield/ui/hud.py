"""HUD overlay: coordinates, simulated age, frame rate and transition alerts."""

from __future__ import annotations

import pygame

from ..constants import (
    AMBER,
    CYAN,
    LIGHT_GREY,
    PANEL_BG,
    PANEL_BORDER,
    RED_ALERT,
    SCAN_GREEN,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    WHITE,
)
from ..models.simulation import Simulation

_HINTS = (
    "CLICK select   ENTER warp   E eject   C core   A autopilot   "
    "B big bang   R reseed   P pause   +/- time   1-4 quality   L location"
)


class HUD:
    """Persistent heads-up display drawn over the scale view."""

    def __init__(self) -> None:
        self.font = pygame.font.Font(None, 24)
        self.font_small = pygame.font.Font(None, 20)
        self.font_alert = pygame.font.Font(None, 40)
        self.panel_height = 40

    def draw(self, surface: pygame.Surface, sim: Simulation, fps: float) -> None:
        ctx = sim.context
        clock = ctx.clock

        # Semi-transparent top bar
        bar = pygame.Surface((SCREEN_WIDTH, self.panel_height), pygame.SRCALPHA)
        bar.fill(PANEL_BG)
        surface.blit(bar, (0, 0))
        pygame.draw.line(surface, PANEL_BORDER, (0, self.panel_height), (SCREEN_WIDTH, self.panel_height))

        x, y = 15, 10
        self._draw_stat(surface, "LVL", ctx.level.label.upper(), AMBER, x, y)
        x += 150

        cx, cy, cz = sim.coordinates()
        self._draw_stat(surface, "POS", f"{cx}  {cy}  {cz}", WHITE, x, y)
        x += 420

        age = clock.age_for(ctx.level)
        self._draw_stat(surface, "T", f"{age:.2f} Bn YR", CYAN, x, y)
        x += 150

        status = "PAUSED" if clock.paused else f"x{clock.time_scale:.2f}"
        self._draw_stat(surface, "SIM", status, RED_ALERT if clock.paused else LIGHT_GREY, x, y)
        x += 120

        if sim.autopilot.enabled:
            self._draw_stat(surface, "AP", "ON", SCAN_GREEN, x, y)
        x += 90

        self._draw_stat(surface, "FPS", f"{round(fps)}", LIGHT_GREY, x, y)

        hint = self.font_small.render(_HINTS, True, LIGHT_GREY)
        surface.blit(hint, (10, SCREEN_HEIGHT - 25))

        if ctx.transition is not None:
            self._draw_alert(surface, ctx.transition.headline, ctx.transition.message)

        if ctx.big_bang_flash > 0.0:
            flash = pygame.Surface((SCREEN_WIDTH, SCREEN_HEIGHT), pygame.SRCALPHA)
            flash.fill((255, 255, 255, int(255 * min(1.0, ctx.big_bang_flash))))
            surface.blit(flash, (0, 0))

    def _draw_alert(self, surface: pygame.Surface, headline: str, message: str) -> None:
        title = self.font_alert.render(headline, True, AMBER)
        body = self.font.render(message, True, CYAN)
        w = max(title.get_width(), body.get_width()) + 60
        h = 90
        bx = SCREEN_WIDTH // 2 - w // 2
        by = SCREEN_HEIGHT // 3 - h // 2

        box = pygame.Surface((w, h), pygame.SRCALPHA)
        box.fill((10, 10, 20, 220))
        surface.blit(box, (bx, by))
        pygame.draw.rect(surface, AMBER, (bx, by, w, h), 2, border_radius=6)
        surface.blit(title, (bx + w // 2 - title.get_width() // 2, by + 14))
        surface.blit(body, (bx + w // 2 - body.get_width() // 2, by + 56))

    def _draw_stat(
        self,
        surface: pygame.Surface,
        label: str,
        text: str,
        color: tuple[int, int, int],
        x: int,
        y: int,
    ) -> None:
        label_surf = self.font_small.render(label, True, LIGHT_GREY)
        surface.blit(label_surf, (x, y + 2))
        val_surf = self.font.render(text, True, color)
        surface.blit(val_surf, (x + label_surf.get_width() + 8, y))
