"""Procedural cosmic web: clusters joined by dense filaments of galaxies."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from ..constants import SCALE_UNIVERSE
from .rng import SeededRandom
from .vector import ZERO, Vec3, distance_sq, lerp

logger = logging.getLogger(__name__)

Color = tuple[float, float, float]
Orbit = tuple[float, float, float]  # (radius, speed, phase)

NO_ORBIT: Orbit = (0.0, 0.0, 0.0)

# Palette anchors for the web, blended pairwise
_PALETTE: tuple[Color, Color, Color] = (
    (0x44 / 255, 0x88 / 255, 0xFF / 255),
    (0xFF / 255, 0xAA / 255, 0xEE / 255),
    (0xFF / 255, 0xDD / 255, 0xAA / 255),
)

_CANDIDATE_ANCHORS = 3
_MIN_POINT_SIZE = 10_000.0
_POINT_SIZE_RANGE = 40_000.0


@dataclass(frozen=True)
class CelestialPoint:
    """One star-proxy in a field, in world coordinates."""

    position: Vec3
    color: Color
    size: float
    orbit_radius: float = 0.0
    orbit_speed: float = 0.0
    orbit_phase: float = 0.0


@dataclass
class PointField:
    """Parallel buffers of generated points, ready for a renderer.

    Buffers are never edited after generation. Re-centring moves ``origin``,
    the field's placement in the world, instead of touching every point.
    """

    positions: list[Vec3] = field(default_factory=list)
    colors: list[Color] = field(default_factory=list)
    sizes: list[float] = field(default_factory=list)
    orbits: list[Orbit] = field(default_factory=list)
    origin: Vec3 = ZERO
    disposed: bool = False

    def __len__(self) -> int:
        return len(self.positions)

    def __getitem__(self, index: int) -> CelestialPoint:
        radius, speed, phase = self.orbits[index] if self.orbits else NO_ORBIT
        return CelestialPoint(
            position=self.world_position(index),
            color=self.colors[index],
            size=self.sizes[index],
            orbit_radius=radius,
            orbit_speed=speed,
            orbit_phase=phase,
        )

    def append(self, position: Vec3, color: Color, size: float, orbit: Orbit | None = None) -> None:
        self.positions.append(position)
        self.colors.append(color)
        self.sizes.append(size)
        if orbit is not None:
            self.orbits.append(orbit)

    def world_position(self, index: int) -> Vec3:
        x, y, z = self.positions[index]
        ox, oy, oz = self.origin
        return (x + ox, y + oy, z + oz)

    def shift(self, offset: Vec3) -> None:
        """Move the whole field by ``-offset``."""
        self.origin = (
            self.origin[0] - offset[0],
            self.origin[1] - offset[1],
            self.origin[2] - offset[2],
        )

    def dispose(self) -> None:
        self.positions = []
        self.colors = []
        self.sizes = []
        self.orbits = []
        self.disposed = True


def _ease(t: float) -> float:
    """Quadratic ease-in-out; mass gathers near both anchors."""
    if t < 0.5:
        return 2.0 * t * t
    return -1.0 + (4.0 - 2.0 * t) * t


def _web_color(rng: SeededRandom) -> Color:
    mix = rng.next()
    if mix < 0.33:
        start, end = _PALETTE[0], _PALETTE[1]
    elif mix < 0.66:
        start, end = _PALETTE[1], _PALETTE[2]
    else:
        start, end = _PALETTE[2], _PALETTE[0]
    return lerp(start, end, rng.next())


def _place_clusters(rng: SeededRandom, count: int) -> list[Vec3]:
    """Cluster anchors, denser toward the centre (r = sqrt(u) * R)."""
    clusters: list[Vec3] = []
    for _ in range(count):
        r = math.sqrt(rng.next()) * SCALE_UNIVERSE
        dx, dy, dz = rng.direction()
        clusters.append((r * dx, r * dy, r * dz))
    return clusters


def generate_universe(
    seed: int,
    star_count: int,
    cluster_count: int,
    filament_scatter: float,
) -> PointField:
    """Build the cosmic web.

    Point ``i`` is always the ``i``-th draw, so the same inputs always give the
    same field element for element.
    """
    star_count = max(1, int(star_count))
    cluster_count = max(1, int(cluster_count))
    filament_scatter = max(0.0, float(filament_scatter))

    rng = SeededRandom(seed)
    clusters = _place_clusters(rng, cluster_count)
    noise_scale = SCALE_UNIVERSE * filament_scatter

    web = PointField()
    for _ in range(star_count):
        # Filament endpoints: anchor A and the nearest of a few candidates
        first = rng.index(cluster_count)
        second = first
        best = math.inf
        for _ in range(_CANDIDATE_ANCHORS):
            candidate = rng.index(cluster_count)
            if candidate == first:
                continue
            dist = distance_sq(clusters[first], clusters[candidate])
            if dist < best:
                best = dist
                second = candidate

        base = lerp(clusters[first], clusters[second], _ease(rng.next()))

        spread = rng.next() * noise_scale
        dx, dy, dz = rng.direction()
        position = (base[0] + spread * dx, base[1] + spread * dy, base[2] + spread * dz)

        color = _web_color(rng)
        size = rng.next() * _POINT_SIZE_RANGE + _MIN_POINT_SIZE
        web.append(position, color, size)

    logger.info(
        "Generated universe seed=%d: %d points across %d clusters",
        seed, star_count, cluster_count,
    )
    return web
