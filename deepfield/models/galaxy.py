"""Procedural galaxy generation for Deepfield."""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass, field

from ..constants import GALAXY_ROTATION_RATE, SCALE_GALAXY
from .descriptors import Morphology
from .rng import SeededRandom
from .universe import Color, PointField
from .vector import ZERO, Vec3

logger = logging.getLogger(__name__)


class GalaxyLayout(enum.Enum):
    """Star-field shapes the generator knows how to build."""

    SPIRAL = "spiral"
    ELLIPTICAL = "elliptical"
    IRREGULAR = "irregular"


_LAYOUT_BY_MORPHOLOGY: dict[Morphology, GalaxyLayout] = {
    Morphology.SPIRAL: GalaxyLayout.SPIRAL,
    Morphology.ELLIPTICAL: GalaxyLayout.ELLIPTICAL,
    Morphology.LENTICULAR: GalaxyLayout.ELLIPTICAL,
    Morphology.IRREGULAR: GalaxyLayout.IRREGULAR,
    Morphology.PROTO: GalaxyLayout.IRREGULAR,
    Morphology.QUASAR: GalaxyLayout.IRREGULAR,
}


def layout_for(morphology: Morphology) -> GalaxyLayout:
    return _LAYOUT_BY_MORPHOLOGY[morphology]


def layout_for_age(universe_age: float) -> GalaxyLayout:
    """Young universes hold irregular galaxies, old ones elliptical."""
    if universe_age < 3.0:
        return GalaxyLayout.IRREGULAR
    if universe_age > 10.0:
        return GalaxyLayout.ELLIPTICAL
    return GalaxyLayout.SPIRAL


# Colours (0-1 RGB)
_BULGE_COLOR: Color = (1.0, 0.8, 0.4)
_ARM_BLUE: Color = (0.6, 0.7, 1.0)
_ARM_WHITE: Color = (1.0, 1.0, 1.0)
_ELLIPTICAL_COLOR: Color = (1.0, 0.7, 0.3)
_IRREGULAR_COLOR: Color = (0.6, 0.8, 1.0)
_REMNANT_COLOR: Color = (1.0, 0.2, 0.1)
_NEBULA_COLOR: Color = (0.4, 0.1, 0.6)

_ARMS = 2
_ARM_WINDING = 7.0
_ATTRACTORS = 4

# Stream offsets so each part of a galaxy draws from its own sequence
_ATTRACTOR_STREAM = 1
_NEBULA_STREAM = 2


@dataclass
class CentralObject:
    """The compact object sitting at a galaxy's centre."""

    handle: int
    radius: float
    position: Vec3 = ZERO


@dataclass
class Galaxy:
    """One galaxy's star field, optional nebula and central object."""

    layout: GalaxyLayout
    seed: int
    stars: PointField
    core: CentralObject
    nebula: PointField | None = None
    remnants: list[int] = field(default_factory=list)  # Supernova remnant indices
    origin: Vec3 = ZERO
    disposed: bool = False

    @property
    def core_position(self) -> Vec3:
        x, y, z = self.core.position
        return (x + self.origin[0], y + self.origin[1], z + self.origin[2])

    def star_position(self, index: int, galaxy_time: float) -> Vec3:
        """World position of a star after revolving for ``galaxy_time``."""
        x, y, z = self.stars.world_position(index)
        radius, speed, phase = self.stars.orbits[index]
        if radius <= 0.0:
            return (x, y, z)
        angle = phase + galaxy_time * speed * GALAXY_ROTATION_RATE
        ox, _, oz = self.origin
        return (ox + math.cos(angle) * radius, y, oz + math.sin(angle) * radius)

    def shift(self, offset: Vec3) -> None:
        self.origin = (
            self.origin[0] - offset[0],
            self.origin[1] - offset[1],
            self.origin[2] - offset[2],
        )
        self.stars.shift(offset)
        if self.nebula is not None:
            self.nebula.shift(offset)

    def dispose(self) -> None:
        self.stars.dispose()
        if self.nebula is not None:
            self.nebula.dispose()
        self.remnants = []
        self.disposed = True


# ---------------------------------------------------------------------------
# Per-layout star placement
# ---------------------------------------------------------------------------


def _spherical(rng: SeededRandom, r: float) -> Vec3:
    dx, dy, dz = rng.direction()
    return (r * dx, r * dy, r * dz)


def _spiral_star(rng: SeededRandom, index: int) -> tuple[Vec3, Color, float]:
    """Bulge (20%) or arm star; returns position, colour, orbit speed."""
    radius = SCALE_GALAXY
    if rng.next() < 0.2:
        x, y, z = _spherical(rng, rng.next() * radius * 0.25)
        return (x, y * 0.8, z), _BULGE_COLOR, 1.0

    r = (rng.next() * 0.1 + rng.next() ** 2 * 0.9) * radius
    arm_offset = (math.tau / _ARMS) * (index % _ARMS)
    angle = arm_offset + _ARM_WINDING * math.log(r / radius * 10.0 + 1.0)
    x = math.cos(angle) * r + (rng.next() - 0.5) * radius * 0.1
    z = math.sin(angle) * r + (rng.next() - 0.5) * radius * 0.1
    y = (rng.next() - 0.5) * radius * 0.02 * (1.0 + r / radius)
    speed = math.sqrt(1.0 / (r / radius + 0.1))
    color = _ARM_BLUE if rng.next() > 0.3 else _ARM_WHITE
    return (x, y, z), color, speed


def _elliptical_star(rng: SeededRandom) -> tuple[Vec3, Color, float]:
    r = rng.next() ** 2.5 * SCALE_GALAXY * 0.6
    x, y, z = _spherical(rng, r)
    return (x * 0.8, y * 0.6, z * 0.8), _ELLIPTICAL_COLOR, 0.1


def _attractors(rng: SeededRandom) -> list[Vec3]:
    radius = SCALE_GALAXY
    return [
        (
            (rng.next() - 0.5) * radius * 1.2,
            (rng.next() - 0.5) * radius * 0.8,
            (rng.next() - 0.5) * radius * 1.2,
        )
        for _ in range(_ATTRACTORS)
    ]


def _build_nebula(rng: SeededRandom, count: int) -> PointField:
    """Oversized billboards in a thick disk, rendered as fog downstream."""
    radius = SCALE_GALAXY
    nebula = PointField()
    for _ in range(count):
        r = rng.next() * radius * 0.8
        angle = rng.next() * math.tau
        position = (r * math.cos(angle), (rng.next() - 0.5) * radius * 0.2, r * math.sin(angle))
        nebula.append(position, _NEBULA_COLOR, rng.next() * 800_000 + 400_000)
    return nebula


# ---------------------------------------------------------------------------
# Galaxy generation
# ---------------------------------------------------------------------------


def generate_galaxy(layout: GalaxyLayout, star_count: int, seed: int) -> Galaxy:
    """Build a galaxy of ``star_count`` revolving stars in the given layout."""
    star_count = max(1, int(star_count))
    rng = SeededRandom(seed)
    attractors = _attractors(rng.derive(_ATTRACTOR_STREAM)) if layout is GalaxyLayout.IRREGULAR else []

    stars = PointField()
    remnants: list[int] = []
    for i in range(star_count):
        size = 0.0
        if layout is GalaxyLayout.SPIRAL:
            position, color, speed = _spiral_star(rng, i)
        elif layout is GalaxyLayout.ELLIPTICAL:
            position, color, speed = _elliptical_star(rng)
        else:
            ax, ay, az = attractors[i % len(attractors)]
            lx, ly, lz = _spherical(rng, rng.next() * SCALE_GALAXY * 0.3)
            position = (ax + lx, ay + ly, az + lz)
            speed = 0.5
            if rng.next() > 0.9:
                color = _REMNANT_COLOR
                size = rng.next() * 8000 + 4000
                remnants.append(i)
            else:
                color = _IRREGULAR_COLOR

        if size == 0.0:
            size = rng.next() * 4000.0 + 1000.0

        x, _, z = position
        stars.append(position, color, size, (math.sqrt(x * x + z * z), speed, math.atan2(z, x)))

    nebula = None
    if layout is not GalaxyLayout.ELLIPTICAL:
        count = 60 if layout is GalaxyLayout.IRREGULAR else 30
        nebula = _build_nebula(rng.derive(_NEBULA_STREAM), count)

    logger.info(
        "Generated %s galaxy seed=%d: %d stars, %d remnants, nebula=%s",
        layout.value, seed, star_count, len(remnants), len(nebula) if nebula else 0,
    )
    return Galaxy(
        layout=layout,
        seed=seed,
        stars=stars,
        core=CentralObject(handle=0, radius=SCALE_GALAXY * 0.005),
        nebula=nebula,
        remnants=remnants,
    )
