"""
Central-force orbital integrator for the active star system.

Planets feel a single fixed attractor at the origin; they do not pull on each
other, and primaries are never accelerated. Multi-star systems keep the
tangential velocities they were generated with and coast on them. This is a
visual model, not an N-body solver.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

from ..constants import GRAVITY, PHYSICS_SUBSTEPS
from .system import STAR_MASS, PhysicsBody


class OrbitalIntegrator:
    """Semi-implicit Euler with a fixed number of substeps per tick."""

    def __init__(
        self,
        gravity: float = GRAVITY,
        central_mass: float = STAR_MASS,
        substeps: int = PHYSICS_SUBSTEPS,
        min_radius: float = 1.0,
    ) -> None:
        self.gravity = gravity
        self.central_mass = central_mass
        self.substeps = max(1, substeps)
        self.min_radius = min_radius
        self.time = 0.0

    def acceleration(self, position: list[float]) -> tuple[float, float, float]:
        """Pull toward the origin, a = -G*M/r^2 along r-hat."""
        x, y, z = position
        r = max(math.sqrt(x * x + y * y + z * z), self.min_radius)
        k = -self.gravity * self.central_mass / (r * r * r)
        return (k * x, k * y, k * z)

    def step(self, bodies: Iterable[PhysicsBody], dt: float) -> None:
        bodies = list(bodies)
        h = dt / self.substeps
        for _ in range(self.substeps):
            for body in bodies:
                v = body.velocity
                if not body.is_primary:
                    ax, ay, az = self.acceleration(body.position)
                    v[0] += ax * h
                    v[1] += ay * h
                    v[2] += az * h
                p = body.position
                p[0] += v[0] * h
                p[1] += v[1] * h
                p[2] += v[2] * h
        self.time += dt
