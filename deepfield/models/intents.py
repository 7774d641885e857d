"""Targets and the intents that components hand to the scheduler."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..states import ScaleLevel
from .descriptors import Descriptor
from .vector import Vec3


@dataclass(frozen=True)
class Target:
    """A selected entity, handed to the camera and the target panel."""

    level: ScaleLevel
    position: Vec3
    descriptor: Descriptor
    index: int | None = None  # Point index in the level's field
    handle: int | None = None  # Object handle (galaxy core, planet)


@dataclass(frozen=True)
class DrillDown:
    """Travel into ``target``, one scale level down."""

    target: Target


@dataclass(frozen=True)
class Inspect:
    """Lock the camera on a body without changing level."""

    target: Target


@dataclass(frozen=True)
class Eject:
    """Back out one scale level."""


Intent = Union[DrillDown, Inspect, Eject]
