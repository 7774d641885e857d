"""Shared fixtures for the Deepfield test suite."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from deepfield.models.config import GenerationConfig
from deepfield.models.simulation import Simulation


@pytest.fixture
def small_config() -> GenerationConfig:
    """A config small enough to regenerate in every test."""
    return GenerationConfig(star_count=2000, cluster_count=20, filament_scatter=0.04, seed=1337)


@pytest.fixture
def sim(small_config: GenerationConfig) -> Simulation:
    return Simulation(small_config, autopilot=False)


def run_until(sim: Simulation, done: Callable[[], bool], dt: float = 0.1, max_ticks: int = 200) -> int:
    """Tick until ``done()`` holds; returns the number of ticks taken."""
    for tick in range(1, max_ticks + 1):
        sim.tick(dt)
        if done():
            return tick
    raise AssertionError(f"condition not reached after {max_ticks} ticks")
