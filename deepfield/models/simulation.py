"""
The simulation scheduler.

``Simulation`` owns the context and the components that act on it, and runs
them in a fixed order each tick: autopilot, then the scale state machine,
then the orbital integrator and solar activity. Components hand back intents
or completed transitions; only the scheduler builds and replaces structures.
"""

from __future__ import annotations

import logging
import math

from ..constants import (
    BIG_BANG_FADE_RATE,
    MAX_FRAME_DELTA,
    PHYSICS_TIME_MULTIPLIER,
    SCALE_GALAXY,
    SCALE_SYSTEM,
)
from ..states import ScaleLevel
from .autopilot import AutopilotController
from .config import GenerationConfig, QualityPreset
from .context import SimulationContext
from .descriptors import (
    Descriptor,
    compact_object_descriptor,
    galaxy_descriptor,
    planet_descriptor,
    star_system_descriptor,
    universe_descriptor,
)
from .galaxy import Galaxy, generate_galaxy, layout_for, layout_for_age
from .intents import DrillDown, Eject, Inspect, Intent, Target
from .physics import OrbitalIntegrator
from .system import SolarActivity, generate_system
from .transition import ScaleStateMachine, TransitionState
from .universe import generate_universe
from .vector import ZERO, Vec3

logger = logging.getLogger(__name__)

_RESEED_RANGE = 10_000

# Where a manual arrival parks the camera, as fractions of the level's scale
_ARRIVAL_POSITIONS: dict[ScaleLevel, Vec3] = {
    ScaleLevel.GALAXY: (0.0, SCALE_GALAXY * 0.8, SCALE_GALAXY * 0.4),
    ScaleLevel.SYSTEM: (0.0, SCALE_SYSTEM * 0.4, SCALE_SYSTEM * 0.8),
}
_LEVEL_SCALES = {ScaleLevel.GALAXY: SCALE_GALAXY, ScaleLevel.SYSTEM: SCALE_SYSTEM}


def format_coord(value: float) -> str:
    """Format one camera coordinate for the HUD."""
    magnitude = abs(value)
    if magnitude >= 1e7:
        return f"{value:.2e}"
    if magnitude >= 1e4:
        return f"{round(value):,}"
    return f"{value:.1f}"


class Simulation:
    """Drives one sandbox session."""

    def __init__(self, config: GenerationConfig | None = None, autopilot: bool = True) -> None:
        config = (config or GenerationConfig()).clamped()
        self.context = SimulationContext(config=config)
        self.machine = ScaleStateMachine(self.context)
        self.autopilot = AutopilotController(config.seed)
        self.integrator = OrbitalIntegrator()
        self.activity: SolarActivity | None = None
        self._regenerate_universe()
        if autopilot:
            self.autopilot.enable(self.context)

    @property
    def level(self) -> ScaleLevel:
        return self.context.level

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def tick(self, dt: float) -> TransitionState | None:
        """Advance one frame. Returns the transition that completed, if any."""
        ctx = self.context
        frame_dt = min(max(dt, 0.0), MAX_FRAME_DELTA)
        sim_dt = 0.0 if ctx.clock.paused else frame_dt * ctx.clock.time_scale

        if ctx.big_bang_flash > 0.0:
            ctx.big_bang_flash = max(0.0, ctx.big_bang_flash - frame_dt * BIG_BANG_FADE_RATE)

        ctx.clock.advance(ctx.level, sim_dt)

        for intent in self.autopilot.tick(frame_dt, ctx):
            self.apply(intent)

        completed = self.machine.tick(frame_dt)
        if completed is not None:
            self._arrive(completed)

        if ctx.level is ScaleLevel.SYSTEM and ctx.system is not None and sim_dt > 0.0:
            self.integrator.step(ctx.system.bodies, sim_dt * PHYSICS_TIME_MULTIPLIER)
            if self.activity is not None:
                self.activity.tick(sim_dt)

        if ctx.inspecting is not None and ctx.system is not None and ctx.inspecting.index is not None:
            ctx.camera.look_at = ctx.system.planet_position(ctx.inspecting.index)
        return completed

    def apply(self, intent: Intent) -> bool:
        """Carry out an intent from the autopilot or the viewer."""
        if isinstance(intent, DrillDown):
            target = intent.target
            if target.level is ScaleLevel.SYSTEM:
                return False
            return self.machine.request_drill_down(target, ScaleLevel(target.level + 1))
        if isinstance(intent, Inspect):
            self._inspect(intent.target)
            return True
        if isinstance(intent, Eject):
            return self.machine.request_eject()
        raise TypeError(f"Unknown intent: {intent!r}")

    # ------------------------------------------------------------------
    # Structure lifecycle
    # ------------------------------------------------------------------

    def _regenerate_universe(self, config: GenerationConfig | None = None) -> None:
        ctx = self.context
        ctx.reset(config)
        self.activity = None
        self.autopilot.reset(ctx.config.seed)
        cfg = ctx.config
        ctx.replace_universe(
            generate_universe(cfg.seed, cfg.star_count, cfg.cluster_count, cfg.filament_scatter)
        )

    def _build_galaxy(self) -> Galaxy:
        ctx = self.context
        descriptor = ctx.active_galaxy
        if descriptor is not None and descriptor.morphology is not None:
            layout = layout_for(descriptor.morphology)
            seed = descriptor.seed
        else:
            layout = layout_for_age(ctx.clock.universe_age)
            seed = ctx.config.seed
        return generate_galaxy(layout, ctx.config.star_count, seed)

    def _arrive(self, transition: TransitionState) -> None:
        """Build whatever the newly entered level needs."""
        ctx = self.context
        level = transition.to_level

        if level is ScaleLevel.UNIVERSE:
            ctx.replace_galaxy(None)
            logger.info("Arrived in intergalactic space")
            return

        if level is ScaleLevel.GALAXY:
            self.activity = None
            ctx.replace_system(None)
            if ctx.galaxy is None or transition.from_level is ScaleLevel.UNIVERSE:
                ctx.replace_galaxy(self._build_galaxy())
                self.autopilot.queue_priority_targets(ctx)
            logger.info("Arrived at local galaxy")
        else:
            system = generate_system(transition.target, descriptor=ctx.active_system)
            ctx.replace_system(system)
            self.activity = SolarActivity(system)
            self.integrator = OrbitalIntegrator(central_mass=system.primary_mass)
            self.autopilot.reset_tour()
            logger.info("System orbit stable")

        if not transition.is_eject:
            self._place_camera(level)

    def _place_camera(self, level: ScaleLevel) -> None:
        """Park the camera after arriving; the autopilot picks a random vantage."""
        ctx = self.context
        if self.autopilot.enabled:
            dist = _LEVEL_SCALES[level] * 1.5
            theta = ctx.rng.next() * math.tau
            phi = ctx.rng.next() * math.pi * 0.5 + 0.1
            ctx.camera.position = (
                dist * math.sin(phi) * math.cos(theta),
                dist * math.cos(phi),
                dist * math.sin(phi) * math.sin(theta),
            )
        else:
            ctx.camera.position = _ARRIVAL_POSITIONS[level]
        ctx.camera.look_at = ZERO

    # ------------------------------------------------------------------
    # Picking
    # ------------------------------------------------------------------

    def pick(self, index: int) -> Target | None:
        """Select point ``index`` of the active level's field."""
        ctx = self.context
        self.autopilot.disable()
        age = ctx.clock.universe_age
        if ctx.level is ScaleLevel.UNIVERSE:
            if ctx.universe is None or not 0 <= index < len(ctx.universe):
                return None
            descriptor = galaxy_descriptor(ctx.config.seed + index, age)
            target = Target(ScaleLevel.UNIVERSE, ctx.universe.world_position(index), descriptor, index=index)
        elif ctx.level is ScaleLevel.GALAXY:
            galaxy = ctx.galaxy
            if galaxy is None or not 0 <= index < len(galaxy.stars):
                return None
            descriptor = star_system_descriptor(galaxy.seed + index, age)
            target = Target(ScaleLevel.GALAXY, galaxy.stars.world_position(index), descriptor, index=index)
        else:
            return self.pick_planet(index)
        ctx.selected = target
        logger.debug("Selected %s", descriptor.designation)
        return target

    def pick_core(self) -> Target | None:
        """Select the compact object at the centre of the active galaxy."""
        ctx = self.context
        self.autopilot.disable()
        if ctx.level is not ScaleLevel.GALAXY or ctx.galaxy is None:
            return None
        descriptor = compact_object_descriptor(ctx.active_galaxy, ctx.config.seed, ctx.clock.universe_age)
        ctx.selected = Target(
            ScaleLevel.GALAXY, ctx.galaxy.core_position, descriptor, handle=ctx.galaxy.core.handle,
        )
        return ctx.selected

    def pick_planet(self, index: int) -> Target | None:
        ctx = self.context
        self.autopilot.disable()
        system = ctx.system
        if ctx.level is not ScaleLevel.SYSTEM or system is None or not 0 <= index < len(system.planets):
            return None
        planet = system.planets[index]
        descriptor = planet_descriptor(
            planet.designation, planet.is_gas, ctx.clock.universe_age, seed=system.seed + index,
        )
        ctx.selected = Target(
            ScaleLevel.SYSTEM, system.planet_position(index), descriptor, index=index, handle=planet.handle,
        )
        return ctx.selected

    def _inspect(self, target: Target) -> None:
        ctx = self.context
        ctx.selected = target
        ctx.inspecting = target
        ctx.camera.look_at = target.position
        logger.debug("Inspecting %s", target.descriptor.designation)

    # ------------------------------------------------------------------
    # User commands
    # ------------------------------------------------------------------

    def warp(self) -> bool:
        """Travel to the selected target, or lock on to a selected planet."""
        ctx = self.context
        self.autopilot.disable()
        target = ctx.selected
        if target is None or target.level is not ctx.level or ctx.transitioning:
            return False
        if ctx.level is ScaleLevel.SYSTEM:
            self._inspect(target)
            return True
        return self.apply(DrillDown(target))

    def eject(self) -> bool:
        """Leave planet orbit if inspecting one, otherwise back out one level."""
        ctx = self.context
        self.autopilot.disable()
        if ctx.inspecting is not None:
            ctx.inspecting = None
            ctx.camera.look_at = ZERO
            return True
        return self.machine.request_eject()

    def set_autopilot(self, enabled: bool) -> None:
        if enabled:
            self.autopilot.enable(self.context)
        else:
            self.autopilot.disable()

    def big_bang(self) -> None:
        """Restart the current universe from time zero with a flash."""
        ctx = self.context
        self._regenerate_universe()
        ctx.clock.universe_age = 0.0
        ctx.big_bang_flash = 1.0
        logger.info("Big bang (seed=%d)", ctx.config.seed)

    def reseed(self, seed: int | None = None) -> int:
        """Regenerate the universe from a new seed and return it."""
        ctx = self.context
        if seed is None:
            seed = ctx.rng.index(_RESEED_RANGE)
        self._regenerate_universe(GenerationConfig(
            star_count=ctx.config.star_count,
            cluster_count=ctx.config.cluster_count,
            filament_scatter=ctx.config.filament_scatter,
            seed=seed,
        ))
        logger.info("Reseeded universe: 0x%X", seed)
        return seed

    def apply_preset(self, preset: QualityPreset) -> None:
        """Switch quality and rebuild the structure being viewed."""
        ctx = self.context
        config = ctx.config.with_preset(preset)
        logger.info("Quality preset %s: %d stars, %d clusters", preset.name, config.star_count, config.cluster_count)
        if ctx.level is ScaleLevel.UNIVERSE:
            self._regenerate_universe(config)
            return
        ctx.config = config
        if ctx.level is ScaleLevel.GALAXY and ctx.galaxy is not None:
            ox, oy, oz = ctx.galaxy.origin
            galaxy = self._build_galaxy()
            galaxy.shift((-ox, -oy, -oz))
            ctx.replace_galaxy(galaxy)
            self.autopilot.queue_priority_targets(ctx)

    def toggle_pause(self) -> bool:
        clock = self.context.clock
        clock.paused = not clock.paused
        logger.info("Simulation %s", "paused" if clock.paused else "resumed")
        return clock.paused

    def set_time_scale(self, time_scale: float) -> None:
        self.context.clock.time_scale = max(0.0, float(time_scale))

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    def location_descriptor(self) -> Descriptor | None:
        """Describe where the camera currently is."""
        ctx = self.context
        if ctx.level is ScaleLevel.UNIVERSE:
            return universe_descriptor(ctx.config.seed, ctx.config.star_count, ctx.clock.universe_age)
        if ctx.level is ScaleLevel.GALAXY:
            return ctx.active_galaxy
        if ctx.inspecting is not None:
            return ctx.inspecting.descriptor
        return ctx.active_system

    def coordinates(self) -> tuple[str, str, str]:
        x, y, z = self.context.absolute_camera_position
        return format_coord(x), format_coord(y), format_coord(z)
