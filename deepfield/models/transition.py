"""Scale-level state machine: drill-down and eject transitions."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..constants import CAMERA_DAMPING, SCALE_GALAXY, SCALE_UNIVERSE, TRANSITION_TIMEOUT
from ..states import ScaleLevel
from .context import SimulationContext
from .descriptors import Descriptor
from .intents import Target
from .vector import Vec3, add, lerp

logger = logging.getLogger(__name__)

# Where the camera retreats to when leaving a level, keyed by the level left
_RETREAT_POINTS: dict[ScaleLevel, Vec3] = {
    ScaleLevel.SYSTEM: (0.0, SCALE_GALAXY * 0.5, 0.0),
    ScaleLevel.GALAXY: (0.0, SCALE_UNIVERSE * 0.1, 0.0),
}


@dataclass
class TransitionState:
    """One in-flight move between scale levels."""

    from_level: ScaleLevel
    to_level: ScaleLevel
    target: Vec3
    payload: Descriptor | None
    is_eject: bool = False
    elapsed: float = 0.0

    @property
    def sector_id(self) -> str:
        return format(int(abs(self.target[0] + self.target[1])), "X")

    @property
    def headline(self) -> str:
        if self.is_eject:
            return "LEAVING GRAVITY WELL"
        return "APPROACHING GALAXY" if self.to_level is ScaleLevel.GALAXY else "APPROACHING SYSTEM"

    @property
    def message(self) -> str:
        if self.is_eject:
            return "ACCELERATING TO ESCAPE VELOCITY..."
        if self.to_level is ScaleLevel.GALAXY:
            return f"SECTOR {self.sector_id} :: HYPERDRIVE ENGAGED"
        return f"STAR {self.sector_id} :: ORBITAL INSERTION"


class ScaleStateMachine:
    """Owns which level is active and the re-centring between levels.

    The machine is either steady at ``context.level`` or carrying exactly one
    ``TransitionState``. Requests made mid-transition are refused.
    """

    def __init__(self, context: SimulationContext) -> None:
        self.context = context

    @property
    def level(self) -> ScaleLevel:
        return self.context.level

    @property
    def transitioning(self) -> bool:
        return self.context.transition is not None

    def request_drill_down(
        self,
        target: Target,
        to_level: ScaleLevel,
        descriptor: Descriptor | None = None,
    ) -> bool:
        ctx = self.context
        if self.transitioning:
            return False
        if to_level != ctx.level + 1:
            logger.debug("Refused drill-down from %s to %s", ctx.level.name, to_level.name)
            return False
        ctx.selected = target
        ctx.transition = TransitionState(
            from_level=ctx.level,
            to_level=ScaleLevel(to_level),
            target=target.position,
            payload=descriptor if descriptor is not None else target.descriptor,
        )
        logger.info("%s (%s)", ctx.transition.headline, target.descriptor.designation)
        return True

    def request_eject(self) -> bool:
        ctx = self.context
        if self.transitioning or ctx.level is ScaleLevel.UNIVERSE:
            return False
        ctx.transition = TransitionState(
            from_level=ctx.level,
            to_level=ScaleLevel(ctx.level - 1),
            target=_RETREAT_POINTS[ctx.level],
            payload=None,
            is_eject=True,
        )
        ctx.inspecting = None
        logger.info("Ejecting from %s", ctx.level.label)
        return True

    def tick(self, dt: float) -> TransitionState | None:
        """Ease the camera toward the target; return the transition if it completed."""
        transition = self.context.transition
        if transition is None:
            return None
        transition.elapsed += dt
        camera = self.context.camera
        camera.position = lerp(camera.position, transition.target, CAMERA_DAMPING)
        camera.look_at = lerp(camera.look_at, transition.target, CAMERA_DAMPING)
        if transition.elapsed > TRANSITION_TIMEOUT:
            return self.complete_transition()
        return None

    def complete_transition(self) -> TransitionState | None:
        ctx = self.context
        transition = ctx.transition
        if transition is None:
            return None
        ctx.transition = None
        ctx.level = transition.to_level

        if transition.is_eject:
            # The level being left no longer has a current entity
            ctx.set_current(transition.from_level, None)
        else:
            shift = transition.target
            for structure in ctx.active_structures():
                structure.shift(shift)
            camera = ctx.camera
            camera.position = (
                camera.position[0] - shift[0],
                camera.position[1] - shift[1],
                camera.position[2] - shift[2],
            )
            camera.look_at = (
                camera.look_at[0] - shift[0],
                camera.look_at[1] - shift[1],
                camera.look_at[2] - shift[2],
            )
            ctx.world_offset = add(ctx.world_offset, shift)
            payload = transition.payload
            if payload is None and ctx.selected is not None:
                payload = ctx.selected.descriptor
            ctx.set_current(transition.to_level, payload)

        # Selections belong to the frame they were picked in
        ctx.selected = None

        logger.debug(
            "Transition complete: %s -> %s after %.2fs",
            transition.from_level.name, transition.to_level.name, transition.elapsed,
        )
        return transition
