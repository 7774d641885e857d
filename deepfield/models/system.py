"""Star systems: stars and planets as physics bodies, plus solar activity."""

from __future__ import annotations

import colorsys
import logging
import math
from dataclasses import dataclass, field

from ..constants import GRAVITY, SCALE_SYSTEM
from .descriptors import Descriptor
from .rng import SeededRandom
from .vector import Vec3, ZERO, distance_sq

logger = logging.getLogger(__name__)

STAR_MASS = 1000.0  # Mass of a full-size primary
DEFAULT_STAR_COLOR = (255, 170, 0)

_ACTIVITY_STREAM = 7


@dataclass
class PhysicsBody:
    """A star or planet in the active system.

    ``position`` and ``velocity`` are mutable lists; the integrator updates
    them in place every tick.
    """

    handle: int  # Index into StarSystem.bodies
    mass: float
    radius: float
    position: list[float]
    velocity: list[float]
    is_primary: bool
    color: tuple[int, int, int] = DEFAULT_STAR_COLOR
    is_compact: bool = False


@dataclass
class Planet:
    """Display record for one planet; ``handle`` indexes its PhysicsBody."""

    handle: int
    designation: str
    is_gas: bool
    aurora: float = 0.0  # 0-1 intensity, driven by solar activity


@dataclass
class CoronalMassEjection:
    """An expanding plasma cloud thrown off by a star."""

    position: list[float]
    direction: Vec3
    age: float = 0.0
    life: float = 10.0
    speed: float = 20.0

    @property
    def scale(self) -> float:
        return 1.0 + self.age * 2.0

    @property
    def expired(self) -> bool:
        return self.age > self.life


@dataclass
class StarSystem:
    """Every body in one system. Replaced wholesale on regeneration."""

    seed: int
    bodies: list[PhysicsBody] = field(default_factory=list)
    planets: list[Planet] = field(default_factory=list)
    ejections: list[CoronalMassEjection] = field(default_factory=list)
    origin: Vec3 = ZERO
    disposed: bool = False

    @property
    def stars(self) -> list[PhysicsBody]:
        return [b for b in self.bodies if b.is_primary]

    @property
    def primary_mass(self) -> float:
        return self.bodies[0].mass if self.bodies else STAR_MASS

    def body(self, handle: int) -> PhysicsBody:
        return self.bodies[handle]

    def planet_position(self, planet_index: int) -> Vec3:
        x, y, z = self.bodies[self.planets[planet_index].handle].position
        return (x + self.origin[0], y + self.origin[1], z + self.origin[2])

    def shift(self, offset: Vec3) -> None:
        self.origin = (
            self.origin[0] - offset[0],
            self.origin[1] - offset[1],
            self.origin[2] - offset[2],
        )

    def dispose(self) -> None:
        self.bodies = []
        self.planets = []
        self.ejections = []
        self.disposed = True


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


def system_seed(position: Vec3) -> int:
    """Seed a system from where it sits in its galaxy."""
    return int(abs(position[0] + position[1] + position[2]))


def _draw_star_count(rng: SeededRandom) -> int:
    """One star 60%, two 30%, three 10%."""
    if rng.next() <= 0.6:
        return 1
    return 3 if rng.next() > 0.75 else 2


def _planet_color(hue: float, is_gas: bool) -> tuple[int, int, int]:
    r, g, b = colorsys.hls_to_rgb(hue, 0.5, 0.8 if is_gas else 0.2)
    return (int(r * 255), int(g * 255), int(b * 255))


def generate_system(seed_position: Vec3, descriptor: Descriptor | None = None) -> StarSystem:
    """Build the stars and planets for the system at ``seed_position``."""
    seed = system_seed(seed_position)
    rng = SeededRandom(seed)
    system = StarSystem(seed=seed)
    scale = SCALE_SYSTEM

    star_color = DEFAULT_STAR_COLOR
    star_radius = scale * 0.25
    is_black_hole = False
    if descriptor is not None and descriptor.stellar_class is not None:
        star_color = descriptor.stellar_class.color
        if descriptor.is_black_hole:
            star_radius = scale * 0.1
            is_black_hole = True

    num_stars = 1 if is_black_hole else _draw_star_count(rng)
    for i in range(num_stars):
        size_mod = 1.0 if i == 0 else 0.5 + rng.next() * 0.5
        mass = STAR_MASS * size_mod
        if num_stars == 1:
            position = [0.0, 0.0, 0.0]
            velocity = [0.0, 0.0, 0.0]
        else:
            # Stars share a ring, each moving tangentially
            dist = scale * 0.4
            angle = math.tau * i / num_stars
            speed = math.sqrt(GRAVITY * mass / (2 * dist))
            position = [math.cos(angle) * dist, 0.0, math.sin(angle) * dist]
            velocity = [-math.sin(angle) * speed, 0.0, math.cos(angle) * speed]
        system.bodies.append(
            PhysicsBody(
                handle=len(system.bodies),
                mass=mass,
                radius=star_radius * size_mod,
                position=position,
                velocity=velocity,
                is_primary=True,
                color=star_color,
                is_compact=is_black_hole,
            )
        )

    primary_mass = system.primary_mass
    orbit_base = scale * 0.8 if num_stars > 1 else scale * 0.3
    num_planets = int(rng.next() * 5) + 3
    for i in range(num_planets):
        dist = orbit_base + i * scale * 0.2 + rng.next() * scale * 0.1
        radius = scale * 0.01 + rng.next() * scale * 0.02
        is_gas = i > 2 and rng.next() > 0.3
        color = _planet_color(rng.next(), is_gas)
        angle = rng.next() * math.tau
        speed = math.sqrt(GRAVITY * primary_mass / dist)
        handle = len(system.bodies)
        system.bodies.append(
            PhysicsBody(
                handle=handle,
                mass=radius * 10.0,
                radius=radius,
                position=[math.cos(angle) * dist, 0.0, math.sin(angle) * dist],
                velocity=[-math.sin(angle) * speed, 0.0, math.cos(angle) * speed],
                is_primary=False,
                color=color,
            )
        )
        system.planets.append(Planet(handle=handle, designation=f"PLANET {chr(65 + i)}", is_gas=is_gas))

    logger.info(
        "Generated system seed=%d: %d star(s)%s, %d planets",
        seed, num_stars, " (black hole)" if is_black_hole else "", num_planets,
    )
    return system


# ---------------------------------------------------------------------------
# Solar activity
# ---------------------------------------------------------------------------


class SolarActivity:
    """Spawns coronal mass ejections and lights planetary aurorae."""

    spawn_chance = 0.005  # Per tick
    aurora_range = 30.0
    aurora_decay = 0.98

    def __init__(self, system: StarSystem) -> None:
        self.system = system
        self.rng = SeededRandom(system.seed).derive(_ACTIVITY_STREAM)

    def tick(self, dt: float) -> None:
        system = self.system
        if system.disposed:
            return

        if self.rng.next() < self.spawn_chance:
            self._spawn()

        for cme in system.ejections:
            cme.age += dt
            cme.position[0] += cme.direction[0] * cme.speed * dt
            cme.position[1] += cme.direction[1] * cme.speed * dt
            cme.position[2] += cme.direction[2] * cme.speed * dt

        reach = self.aurora_range ** 2
        clouds = [tuple(cme.position) for cme in system.ejections]
        for planet in system.planets:
            body_pos = tuple(system.bodies[planet.handle].position)
            if any(distance_sq(cloud, body_pos) < reach for cloud in clouds):
                planet.aurora = 1.0
            else:
                planet.aurora *= self.aurora_decay

        system.ejections = [cme for cme in system.ejections if not cme.expired]

    def _spawn(self) -> None:
        stars = self.system.stars
        if not stars:
            return
        star = stars[self.rng.index(len(stars))]
        theta = self.rng.next() * math.tau
        phi = self.rng.next() * math.pi
        direction = (
            math.sin(phi) * math.cos(theta),
            math.cos(phi),
            math.sin(phi) * math.sin(theta),
        )
        self.system.ejections.append(
            CoronalMassEjection(position=list(star.position), direction=direction)
        )
        logger.debug("Coronal mass ejection from body %d", star.handle)
