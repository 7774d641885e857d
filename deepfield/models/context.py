"""The simulation context: all mutable sandbox state in one owned object."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..constants import DEFAULT_TIME_SCALE, SCALE_UNIVERSE
from ..states import ScaleLevel
from .config import GenerationConfig
from .descriptors import Descriptor
from .galaxy import Galaxy
from .intents import Target
from .rng import SeededRandom
from .system import StarSystem
from .universe import PointField
from .vector import ZERO, Vec3, add

if TYPE_CHECKING:
    from .transition import TransitionState

logger = logging.getLogger(__name__)

_SESSION_STREAM = 101


@dataclass
class SimClock:
    """Per-level simulated time, in Gyr for the ages."""

    universe_age: float = 0.0
    galaxy_age: float = 0.0
    physics_time: float = 0.0
    time_scale: float = DEFAULT_TIME_SCALE
    paused: bool = False

    def advance(self, level: ScaleLevel, sim_dt: float) -> None:
        """Only the active level's clock moves."""
        if self.paused:
            return
        if level is ScaleLevel.UNIVERSE:
            self.universe_age += sim_dt
        elif level is ScaleLevel.GALAXY:
            self.galaxy_age += sim_dt
        else:
            self.physics_time += sim_dt

    def age_for(self, level: ScaleLevel) -> float:
        return self.universe_age if level is ScaleLevel.UNIVERSE else self.galaxy_age


@dataclass
class Camera:
    """Where the viewer sits and what it looks at, in world coordinates."""

    position: Vec3 = (0.0, SCALE_UNIVERSE * 0.1, SCALE_UNIVERSE * 0.2)
    look_at: Vec3 = ZERO


def _session_rng(config: GenerationConfig) -> SeededRandom:
    return SeededRandom(config.seed).derive(_SESSION_STREAM)


@dataclass
class SimulationContext:
    """State shared by the scheduler's components.

    Structures are replaced through the ``replace_*`` methods, which dispose
    the previous structure before the new reference is stored.
    """

    config: GenerationConfig
    clock: SimClock = field(default_factory=SimClock)
    camera: Camera = field(default_factory=Camera)
    level: ScaleLevel = ScaleLevel.UNIVERSE
    transition: TransitionState | None = None
    world_offset: Vec3 = ZERO

    universe: PointField | None = None
    galaxy: Galaxy | None = None
    system: StarSystem | None = None

    active_galaxy: Descriptor | None = None
    active_system: Descriptor | None = None
    selected: Target | None = None
    inspecting: Target | None = None

    big_bang_flash: float = 0.0
    rng: SeededRandom | None = None

    def __post_init__(self) -> None:
        if self.rng is None:
            self.rng = _session_rng(self.config)

    @property
    def transitioning(self) -> bool:
        return self.transition is not None

    @property
    def absolute_camera_position(self) -> Vec3:
        return add(self.camera.position, self.world_offset)

    # ------------------------------------------------------------------
    # Structure ownership
    # ------------------------------------------------------------------

    def replace_universe(self, universe: PointField | None) -> None:
        if self.universe is not None and self.universe is not universe:
            self.universe.dispose()
        self.universe = universe

    def replace_galaxy(self, galaxy: Galaxy | None) -> None:
        if self.galaxy is not None and self.galaxy is not galaxy:
            self.galaxy.dispose()
        self.galaxy = galaxy

    def replace_system(self, system: StarSystem | None) -> None:
        if self.system is not None and self.system is not system:
            self.system.dispose()
        self.system = system

    def active_structures(self) -> list:
        """Everything that moves when the world origin is re-centred."""
        return [s for s in (self.universe, self.galaxy, self.system) if s is not None]

    def set_current(self, level: ScaleLevel, descriptor: Descriptor | None) -> None:
        if level is ScaleLevel.GALAXY:
            self.active_galaxy = descriptor
        elif level is ScaleLevel.SYSTEM:
            self.active_system = descriptor

    def reset(self, config: GenerationConfig | None = None) -> None:
        """Return to a fresh universe-level state; universe age is kept."""
        if config is not None:
            self.config = config
        self.rng = _session_rng(self.config)
        self.clock.galaxy_age = 0.0
        self.clock.physics_time = 0.0
        self.clock.paused = False
        self.level = ScaleLevel.UNIVERSE
        self.transition = None
        self.world_offset = ZERO
        self.replace_system(None)
        self.replace_galaxy(None)
        self.active_galaxy = None
        self.active_system = None
        self.selected = None
        self.inspecting = None
        self.big_bang_flash = 0.0
        self.camera = Camera()
        logger.debug("Simulation context reset (seed=%d)", self.config.seed)
