"""Autopilot: an unattended tour that picks targets and flies to them."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field

from ..constants import AUTOPILOT_DELAY, AUTOPILOT_FIRST_DELAY, AUTOPILOT_MIN_UNIVERSE_AGE
from ..states import ScaleLevel
from .context import SimulationContext
from .descriptors import (
    Descriptor,
    compact_object_descriptor,
    galaxy_descriptor,
    planet_descriptor,
    star_system_descriptor,
)
from .intents import DrillDown, Eject, Inspect, Intent, Target
from .rng import SeededRandom

logger = logging.getLogger(__name__)

_AUTOPILOT_STREAM = 202


@dataclass(frozen=True)
class PriorityTarget:
    """An object the tour visits before any random star, e.g. a galactic core."""

    handle: int
    descriptor: Descriptor


@dataclass
class AutopilotState:
    enabled: bool = False
    timer: float = 0.0
    next_action_delay: float = AUTOPILOT_FIRST_DELAY
    priority_queue: deque[PriorityTarget] = field(default_factory=deque)
    tour_index: int = 0


class AutopilotController:
    """Turns elapsed time into intents while enabled.

    Actions fire every ``AUTOPILOT_DELAY`` seconds (the first after
    ``AUTOPILOT_FIRST_DELAY``). The timer only runs while no transition is in
    flight, and the first universe-level pick waits for the universe to age.
    """

    def __init__(self, seed: int) -> None:
        self.rng = SeededRandom(seed).derive(_AUTOPILOT_STREAM)
        self.state = AutopilotState()

    @property
    def enabled(self) -> bool:
        return self.state.enabled

    def enable(self, ctx: SimulationContext) -> None:
        state = self.state
        state.enabled = True
        state.timer = 0.0
        state.next_action_delay = AUTOPILOT_FIRST_DELAY
        ctx.inspecting = None
        if ctx.level is ScaleLevel.GALAXY and not state.priority_queue:
            self.queue_priority_targets(ctx)
        logger.info("Autopilot engaged")

    def disable(self) -> None:
        """Stop issuing intents; an in-flight transition still completes."""
        if self.state.enabled:
            logger.info("Autopilot disengaged")
        self.state.enabled = False

    def queue_priority_targets(self, ctx: SimulationContext) -> None:
        """Queue the current galaxy's core ahead of random stars."""
        queue = self.state.priority_queue
        queue.clear()
        if not self.state.enabled or ctx.level is not ScaleLevel.GALAXY or ctx.galaxy is None:
            return
        descriptor = compact_object_descriptor(ctx.active_galaxy, ctx.config.seed, ctx.clock.universe_age)
        queue.append(PriorityTarget(handle=ctx.galaxy.core.handle, descriptor=descriptor))

    def reset_tour(self) -> None:
        self.state.tour_index = 0

    def reset(self, seed: int) -> None:
        """Start over on the stream for ``seed``, as after a fresh start."""
        self.rng = SeededRandom(seed).derive(_AUTOPILOT_STREAM)
        self.state.priority_queue.clear()
        self.state.tour_index = 0
        self.state.timer = 0.0
        self.state.next_action_delay = AUTOPILOT_FIRST_DELAY

    # ------------------------------------------------------------------

    def tick(self, dt: float, ctx: SimulationContext) -> list[Intent]:
        state = self.state
        if not state.enabled or ctx.transitioning:
            return []

        state.timer += dt
        if ctx.level is ScaleLevel.UNIVERSE and ctx.clock.universe_age < AUTOPILOT_MIN_UNIVERSE_AGE:
            return []
        if state.timer <= state.next_action_delay:
            return []

        state.timer = 0.0
        state.next_action_delay = AUTOPILOT_DELAY

        if ctx.level is ScaleLevel.UNIVERSE:
            intent = self._pick_galaxy(ctx)
        elif ctx.level is ScaleLevel.GALAXY:
            intent = self._pick_system(ctx)
        else:
            intent = self._tour_planet(ctx)
        return [intent] if intent is not None else []

    def _pick_galaxy(self, ctx: SimulationContext) -> Intent | None:
        universe = ctx.universe
        if universe is None or len(universe) == 0:
            return None
        index = self.rng.index(len(universe))
        descriptor = galaxy_descriptor(ctx.config.seed + index, ctx.clock.universe_age)
        logger.debug("Autopilot selected galaxy %s (point %d)", descriptor.designation, index)
        return DrillDown(Target(ScaleLevel.UNIVERSE, universe.world_position(index), descriptor, index=index))

    def _pick_system(self, ctx: SimulationContext) -> Intent | None:
        galaxy = ctx.galaxy
        if galaxy is None:
            return None
        if self.state.priority_queue:
            priority = self.state.priority_queue.popleft()
            logger.debug("Autopilot heading for %s", priority.descriptor.designation)
            return DrillDown(
                Target(ScaleLevel.GALAXY, galaxy.core_position, priority.descriptor, handle=priority.handle)
            )
        if len(galaxy.stars) == 0:
            return None
        index = self.rng.index(len(galaxy.stars))
        descriptor = star_system_descriptor(galaxy.seed + index, ctx.clock.universe_age)
        logger.debug("Autopilot selected star %s (point %d)", descriptor.designation, index)
        return DrillDown(Target(ScaleLevel.GALAXY, galaxy.stars.world_position(index), descriptor, index=index))

    def _tour_planet(self, ctx: SimulationContext) -> Intent:
        system = ctx.system
        planets = system.planets if system is not None else []
        index = self.state.tour_index
        if index < len(planets):
            planet = planets[index]
            self.state.tour_index += 1
            descriptor = planet_descriptor(
                planet.designation, planet.is_gas, ctx.clock.universe_age, seed=system.seed + index,
            )
            return Inspect(
                Target(ScaleLevel.SYSTEM, system.planet_position(index), descriptor, index=index, handle=planet.handle)
            )
        self.state.tour_index = 0
        logger.debug("Autopilot planet tour finished, leaving system")
        return Eject()
