"""Scale view: perspective rendering and picking for whichever level is active."""

from __future__ import annotations

import math

import pygame

from ..constants import (
    AMBER,
    CYAN,
    SCALE_GALAXY,
    SCALE_SYSTEM,
    SCALE_UNIVERSE,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    WHITE,
)
from ..models.config import QualityPreset
from ..models.intents import Target
from ..models.simulation import Simulation
from ..models.vector import Vec3, add, cross, dot, length, normalize, scale, sub
from ..states import ScaleLevel

_FOV = math.radians(60)
_FOCAL = (SCREEN_HEIGHT / 2) / math.tan(_FOV / 2)
_NEAR = 1e-3

_MAX_DRAWN_POINTS = 6000
_HIT_RADIUS = 10
_DRAG_THRESHOLD = 4

# (min, max) camera distance from the look-at point per level
_ZOOM_LIMITS: dict[ScaleLevel, tuple[float, float]] = {
    ScaleLevel.UNIVERSE: (1000.0, SCALE_UNIVERSE * 2.0),
    ScaleLevel.GALAXY: (100.0, SCALE_GALAXY * 3.0),
    ScaleLevel.SYSTEM: (10.0, SCALE_SYSTEM * 4.0),
}

_PRESET_KEYS = {
    pygame.K_1: QualityPreset.LOW,
    pygame.K_2: QualityPreset.MED,
    pygame.K_3: QualityPreset.HIGH,
    pygame.K_4: QualityPreset.ULTRA,
}

_NEBULA_COLOR = (102, 26, 153)
_AURORA_COLOR = (0, 255, 140)
_CME_COLOR = (255, 120, 40)


def _to_rgb(color: tuple[float, float, float]) -> tuple[int, int, int]:
    """Point-field colours are 0-1 floats."""
    return (
        min(255, int(color[0] * 255)),
        min(255, int(color[1] * 255)),
        min(255, int(color[2] * 255)),
    )


class Projector:
    """Pinhole projection from the camera onto the screen."""

    def __init__(self, position: Vec3, look_at: Vec3) -> None:
        self.position = position
        forward = normalize(sub(look_at, position))
        if forward == (0.0, 0.0, 0.0):
            forward = (0.0, 0.0, -1.0)
        right = normalize(cross(forward, (0.0, 1.0, 0.0)))
        if right == (0.0, 0.0, 0.0):
            right = (1.0, 0.0, 0.0)
        self.forward = forward
        self.right = right
        self.up = cross(right, forward)

    def project(self, point: Vec3) -> tuple[int, int, float] | None:
        """Screen x, y and depth, or None when behind the camera."""
        d = sub(point, self.position)
        z = dot(d, self.forward)
        if z <= _NEAR:
            return None
        sx = SCREEN_WIDTH / 2 + dot(d, self.right) * _FOCAL / z
        sy = SCREEN_HEIGHT / 2 - dot(d, self.up) * _FOCAL / z
        if not (-200 < sx < SCREEN_WIDTH + 200 and -200 < sy < SCREEN_HEIGHT + 200):
            return None
        return int(sx), int(sy), z

    def radius(self, world_size: float, depth: float, lo: int = 1, hi: int = 4) -> int:
        return max(lo, min(hi, int(world_size * _FOCAL / depth)))


class ScaleViewScreen:
    """Draws the active level and turns clicks and keys into simulation calls."""

    def __init__(self, simulation: Simulation) -> None:
        self.sim = simulation
        self.font_info = pygame.font.Font(None, 22)
        self.show_location = False

        self._drag_start: tuple[int, int] | None = None
        self._dragging = False
        # (kind, index, sx, sy) for everything drawn last frame
        self._hit_list: list[tuple[str, int, int, int]] = []

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def handle_events(self, event: pygame.event.Event) -> None:
        sim = self.sim
        if event.type == pygame.KEYDOWN:
            if event.key in (pygame.K_RETURN, pygame.K_SPACE):
                sim.warp()
            elif event.key in (pygame.K_BACKSPACE, pygame.K_e):
                sim.eject()
            elif event.key == pygame.K_a:
                sim.set_autopilot(not sim.autopilot.enabled)
            elif event.key == pygame.K_b:
                sim.big_bang()
            elif event.key == pygame.K_r:
                sim.reseed()
            elif event.key == pygame.K_p:
                sim.toggle_pause()
            elif event.key == pygame.K_c:
                sim.pick_core()
            elif event.key == pygame.K_l:
                self.show_location = not self.show_location
            elif event.key in (pygame.K_EQUALS, pygame.K_PLUS, pygame.K_KP_PLUS):
                sim.set_time_scale(min(1.0, sim.context.clock.time_scale + 0.05))
            elif event.key in (pygame.K_MINUS, pygame.K_KP_MINUS):
                sim.set_time_scale(max(0.0, sim.context.clock.time_scale - 0.05))
            elif event.key in _PRESET_KEYS:
                sim.apply_preset(_PRESET_KEYS[event.key])
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self._drag_start = event.pos
            self._dragging = False
            # Any interaction hands control back to the user
            sim.set_autopilot(False)
        elif event.type == pygame.MOUSEMOTION and self._drag_start is not None:
            sx, sy = self._drag_start
            if self._dragging or math.hypot(event.pos[0] - sx, event.pos[1] - sy) > _DRAG_THRESHOLD:
                self._dragging = True
                self._orbit(event.rel[0] * 0.005, event.rel[1] * 0.005)
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            if not self._dragging:
                self._handle_click(event.pos)
            self._drag_start = None
            self._dragging = False
        elif event.type == pygame.MOUSEWHEEL:
            self._zoom(1 / 1.15 if event.y > 0 else 1.15)

    def _handle_click(self, pos: tuple[int, int]) -> Target | None:
        mx, my = pos
        best: tuple[str, int] | None = None
        best_dist = float("inf")
        for kind, index, sx, sy in self._hit_list:
            dist = math.hypot(mx - sx, my - sy)
            if dist < _HIT_RADIUS and dist < best_dist:
                best = (kind, index)
                best_dist = dist
        if best is None:
            return None
        kind, index = best
        if kind == "core":
            return self.sim.pick_core()
        if kind == "planet":
            return self.sim.pick_planet(index)
        return self.sim.pick(index)

    # ------------------------------------------------------------------
    # Camera controls
    # ------------------------------------------------------------------

    def _orbit(self, d_azimuth: float, d_elevation: float) -> None:
        ctx = self.sim.context
        if ctx.transitioning:
            return
        camera = ctx.camera
        offset = sub(camera.position, camera.look_at)
        radius = length(offset)
        if radius == 0.0:
            return
        azimuth = math.atan2(offset[2], offset[0]) + d_azimuth
        elevation = math.asin(max(-1.0, min(1.0, offset[1] / radius))) + d_elevation
        elevation = max(-1.5, min(1.5, elevation))
        camera.position = add(camera.look_at, (
            radius * math.cos(elevation) * math.cos(azimuth),
            radius * math.sin(elevation),
            radius * math.cos(elevation) * math.sin(azimuth),
        ))

    def _zoom(self, factor: float) -> None:
        ctx = self.sim.context
        if ctx.transitioning:
            return
        camera = ctx.camera
        offset = sub(camera.position, camera.look_at)
        radius = length(offset)
        if radius == 0.0:
            return
        lo, hi = _ZOOM_LIMITS[ctx.level]
        new_radius = max(lo, min(hi, radius * factor))
        camera.position = add(camera.look_at, scale(offset, new_radius / radius))

    def update(self, dt: float) -> None:
        sim = self.sim
        if sim.autopilot.enabled and sim.level is ScaleLevel.UNIVERSE:
            self._orbit(dt * 0.05, 0.0)

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def draw(self, surface: pygame.Surface) -> None:
        ctx = self.sim.context
        projector = Projector(ctx.camera.position, ctx.camera.look_at)
        self._hit_list = []

        if ctx.level is not ScaleLevel.SYSTEM:
            self._draw_universe(surface, projector)
        if ctx.galaxy is not None and ctx.level is not ScaleLevel.UNIVERSE:
            self._draw_galaxy(surface, projector)
        if ctx.system is not None and ctx.level is ScaleLevel.SYSTEM:
            self._draw_system(surface, projector)

        self._draw_selection(surface, projector)

    def _sample_indices(self, count: int) -> range:
        step = max(1, count // _MAX_DRAWN_POINTS)
        return range(0, count, step)

    def _draw_universe(self, surface: pygame.Surface, projector: Projector) -> None:
        universe = self.sim.context.universe
        if universe is None:
            return
        interactive = self.sim.level is ScaleLevel.UNIVERSE
        for i in self._sample_indices(len(universe)):
            hit = projector.project(universe.world_position(i))
            if hit is None:
                continue
            sx, sy, depth = hit
            pygame.draw.circle(surface, _to_rgb(universe.colors[i]), (sx, sy), projector.radius(universe.sizes[i], depth))
            if interactive:
                self._hit_list.append(("point", i, sx, sy))

    def _draw_galaxy(self, surface: pygame.Surface, projector: Projector) -> None:
        ctx = self.sim.context
        galaxy = ctx.galaxy
        galaxy_time = ctx.clock.galaxy_age
        interactive = ctx.level is ScaleLevel.GALAXY

        if galaxy.nebula is not None:
            haze = pygame.Surface((SCREEN_WIDTH, SCREEN_HEIGHT), pygame.SRCALPHA)
            for i in range(len(galaxy.nebula)):
                hit = projector.project(galaxy.nebula.world_position(i))
                if hit is None:
                    continue
                sx, sy, depth = hit
                r = projector.radius(galaxy.nebula.sizes[i], depth, lo=4, hi=160)
                pygame.draw.circle(haze, (*_NEBULA_COLOR, 18), (sx, sy), r)
            surface.blit(haze, (0, 0))

        for i in self._sample_indices(len(galaxy.stars)):
            hit = projector.project(galaxy.star_position(i, galaxy_time))
            if hit is None:
                continue
            sx, sy, depth = hit
            pygame.draw.circle(surface, _to_rgb(galaxy.stars.colors[i]), (sx, sy), projector.radius(galaxy.stars.sizes[i], depth))
            if interactive:
                self._hit_list.append(("point", i, sx, sy))

        hit = projector.project(galaxy.core_position)
        if hit is not None:
            sx, sy, depth = hit
            r = projector.radius(galaxy.core.radius, depth, lo=3, hi=40)
            pygame.draw.circle(surface, AMBER, (sx, sy), r + 2, 1)
            pygame.draw.circle(surface, (0, 0, 0), (sx, sy), r)
            if interactive:
                self._hit_list.append(("core", galaxy.core.handle, sx, sy))

    def _draw_system(self, surface: pygame.Surface, projector: Projector) -> None:
        system = self.sim.context.system
        ox, oy, oz = system.origin

        for cme in system.ejections:
            x, y, z = cme.position
            hit = projector.project((x + ox, y + oy, z + oz))
            if hit is not None:
                sx, sy, depth = hit
                pygame.draw.circle(surface, _CME_COLOR, (sx, sy), projector.radius(5.0 * cme.scale, depth, lo=2, hi=60), 1)

        for star in system.stars:
            x, y, z = star.position
            hit = projector.project((x + ox, y + oy, z + oz))
            if hit is None:
                continue
            sx, sy, depth = hit
            r = projector.radius(star.radius, depth, lo=3, hi=120)
            if star.is_compact:
                pygame.draw.circle(surface, star.color, (sx, sy), r + 3, 2)
                pygame.draw.circle(surface, (0, 0, 0), (sx, sy), r)
            else:
                pygame.draw.circle(surface, star.color, (sx, sy), r)

        for index, planet in enumerate(system.planets):
            body = system.bodies[planet.handle]
            hit = projector.project(system.planet_position(index))
            if hit is None:
                continue
            sx, sy, depth = hit
            r = projector.radius(body.radius, depth, lo=2, hi=60)
            pygame.draw.circle(surface, body.color, (sx, sy), r)
            if planet.aurora > 0.05:
                glow = tuple(int(c * planet.aurora) for c in _AURORA_COLOR)
                pygame.draw.circle(surface, glow, (sx, sy), r + 3, 1)
            self._hit_list.append(("planet", index, sx, sy))

    def _draw_selection(self, surface: pygame.Surface, projector: Projector) -> None:
        ctx = self.sim.context
        target = ctx.inspecting or ctx.selected
        if target is None:
            return
        position = target.position
        if target.level is ScaleLevel.SYSTEM and ctx.system is not None and target.index is not None:
            position = ctx.system.planet_position(target.index)
        hit = projector.project(position)
        if hit is None:
            return
        sx, sy, _ = hit
        color = CYAN if ctx.inspecting is None else AMBER
        pygame.draw.circle(surface, color, (sx, sy), 12, 1)
        label = self.font_info.render(target.descriptor.designation, True, WHITE)
        surface.blit(label, (sx + 16, sy - 8))
