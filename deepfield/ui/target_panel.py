"""Target panel: descriptor read-out with a spectrograph strip."""

from __future__ import annotations

import pygame

from ..constants import (
    AMBER,
    CYAN,
    LIGHT_GREY,
    PANEL_BG,
    PANEL_BORDER,
    SCREEN_WIDTH,
    SPECTRUM_PALETTE,
    WHITE,
)
from ..models.descriptors import Descriptor


def _spectrum_color(position: float) -> tuple[int, int, int]:
    """Map a 0-100 spectrum position onto the red-to-violet palette."""
    index = int(position / 100.0 * len(SPECTRUM_PALETTE))
    return SPECTRUM_PALETTE[max(0, min(len(SPECTRUM_PALETTE) - 1, index))]


class TargetPanel:
    """Right-hand panel describing the selected or current entity."""

    width = 300
    line_height = 22

    def __init__(self) -> None:
        self.font_title = pygame.font.Font(None, 30)
        self.font_info = pygame.font.Font(None, 22)

    def draw(self, surface: pygame.Surface, descriptor: Descriptor, heading: str = "TARGET") -> None:
        rows = [
            ("TYPE", descriptor.type_label),
            ("AGE", f"{descriptor.age_text} Bn YR"),
            ("MASS", descriptor.mass_text),
            ("RADIUS", descriptor.radius_text),
            ("LUM", descriptor.luminosity_text),
        ]
        composition = descriptor.composition.splitlines()
        spectrum_h = 40 if descriptor.spectrum else 0
        h = 60 + (len(rows) + len(composition) + 1) * self.line_height + spectrum_h + 16
        x = SCREEN_WIDTH - self.width - 15
        y = 55

        panel = pygame.Surface((self.width, h), pygame.SRCALPHA)
        panel.fill(PANEL_BG)
        surface.blit(panel, (x, y))
        pygame.draw.rect(surface, PANEL_BORDER, (x, y, self.width, h), 1, border_radius=4)

        head = self.font_info.render(heading, True, LIGHT_GREY)
        surface.blit(head, (x + 12, y + 8))
        title = self.font_title.render(descriptor.designation, True, AMBER)
        surface.blit(title, (x + 12, y + 28))

        ty = y + 60
        for label, value in rows:
            surface.blit(self.font_info.render(label, True, LIGHT_GREY), (x + 12, ty))
            surface.blit(self.font_info.render(value, True, WHITE), (x + 90, ty))
            ty += self.line_height

        surface.blit(self.font_info.render("COMPOSITION", True, LIGHT_GREY), (x + 12, ty))
        ty += self.line_height
        for line in composition:
            surface.blit(self.font_info.render(line, True, CYAN), (x + 20, ty))
            ty += self.line_height

        if descriptor.spectrum:
            self._draw_spectrum(surface, descriptor, pygame.Rect(x + 12, ty + 4, self.width - 24, spectrum_h - 8))

    def _draw_spectrum(self, surface: pygame.Surface, descriptor: Descriptor, rect: pygame.Rect) -> None:
        """Absorption lines over a dark strip, brighter for stronger lines."""
        pygame.draw.rect(surface, (10, 10, 15), rect)
        for position, intensity in descriptor.spectrum:
            lx = rect.x + int(position / 100.0 * rect.width)
            r, g, b = _spectrum_color(position)
            k = 0.3 + 0.7 * intensity
            pygame.draw.line(surface, (int(r * k), int(g * k), int(b * k)), (lx, rect.top), (lx, rect.bottom), 2)
        pygame.draw.rect(surface, PANEL_BORDER, rect, 1)
