"""Tests for the central-force orbital integrator."""

import math

import pytest

from deepfield.constants import GRAVITY
from deepfield.models.physics import OrbitalIntegrator
from deepfield.models.system import STAR_MASS, PhysicsBody, generate_system


def _planet(position, velocity):
    return PhysicsBody(handle=1, mass=1.0, radius=1.0, position=list(position), velocity=list(velocity), is_primary=False)


class TestOrbitalIntegrator:
    def test_body_at_origin_stays_finite(self):
        body = _planet((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))
        OrbitalIntegrator().step([body], 0.1)
        assert all(math.isfinite(v) for v in body.position + body.velocity)

    def test_acceleration_points_at_origin(self):
        ax, ay, az = OrbitalIntegrator().acceleration([100.0, 0.0, 0.0])
        assert ax == pytest.approx(-GRAVITY * STAR_MASS / 100.0 ** 2)
        assert ay == 0.0 and az == 0.0

    def test_radius_is_clamped(self):
        integrator = OrbitalIntegrator(min_radius=1.0)
        near = integrator.acceleration([1e-6, 0.0, 0.0])
        assert math.isfinite(near[0])
        assert abs(near[0]) == pytest.approx(GRAVITY * STAR_MASS * 1e-6)

    def test_circular_orbit_stays_bound(self):
        r = 150.0
        speed = math.sqrt(GRAVITY * STAR_MASS / r)
        body = _planet((r, 0.0, 0.0), (0.0, 0.0, speed))
        integrator = OrbitalIntegrator()
        for _ in range(2000):
            integrator.step([body], 0.01)
        radius = math.hypot(body.position[0], body.position[2])
        assert radius == pytest.approx(r, rel=0.05)
        assert integrator.time == pytest.approx(20.0)

    def test_primaries_coast(self):
        star = PhysicsBody(
            handle=0, mass=STAR_MASS, radius=10.0,
            position=[200.0, 0.0, 0.0], velocity=[0.0, 0.0, 5.0], is_primary=True,
        )
        OrbitalIntegrator().step([star], 1.0)
        assert star.velocity == [0.0, 0.0, 5.0]
        assert star.position == pytest.approx([200.0, 0.0, 5.0])

    def test_generated_system_remains_stable(self):
        system = generate_system((321.0, 0.0, 0.0))
        integrator = OrbitalIntegrator(central_mass=system.primary_mass)
        start = {
            p.handle: math.hypot(system.body(p.handle).position[0], system.body(p.handle).position[2])
            for p in system.planets
        }
        for _ in range(500):
            integrator.step(system.bodies, 0.05)
        for planet in system.planets:
            body = system.body(planet.handle)
            assert math.hypot(body.position[0], body.position[2]) == pytest.approx(start[planet.handle], rel=0.1)
