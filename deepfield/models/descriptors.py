"""Descriptors: display records for every selectable entity in the sandbox.

A single tagged type covers galaxies, star systems, compact objects, planets
and the universe itself. Callers branch on ``kind`` rather than probing for
optional attributes.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from ..constants import SCALE_UNIVERSE
from .rng import SeededRandom, polynomial_hash
from .stellar import (
    EvolutionState,
    StellarClass,
    classify,
    evolve,
    generate_composition,
    get_class,
    spectrum_samples,
)


class DescriptorKind(enum.Enum):
    """What a descriptor describes."""

    UNIVERSE = "universe"
    GALAXY = "galaxy"
    SYSTEM = "system"
    COMPACT_OBJECT = "compact_object"
    PLANET = "planet"


class Morphology(enum.Enum):
    """Galaxy classes, keyed by their display label."""

    SPIRAL = "SPIRAL GALAXY"
    ELLIPTICAL = "ELLIPTICAL GALAXY"
    LENTICULAR = "LENTICULAR GALAXY"
    IRREGULAR = "IRREGULAR GALAXY"
    PROTO = "PROTO-GALAXY"
    QUASAR = "QUASAR (AGN)"


@dataclass(frozen=True)
class Descriptor:
    """Everything the target panel shows about one entity."""

    kind: DescriptorKind
    designation: str
    type_label: str
    age: float  # Gyr
    mass: str
    radius: str
    luminosity: str
    composition: str = "ANALYZING..."
    spectrum: tuple[tuple[float, float], ...] = field(default_factory=tuple)
    stellar_class: StellarClass | None = None
    evolution: EvolutionState | None = None
    morphology: Morphology | None = None
    seed: int = 0

    @property
    def age_text(self) -> str:
        return f"{self.age:.3f}" if self.kind in _STELLAR_KINDS else f"{self.age:.2f}"

    @property
    def is_black_hole(self) -> bool:
        return self.stellar_class is not None and self.stellar_class.id == "BH"

    @property
    def mass_text(self) -> str:
        return f"{self.mass} M☉" if self.stellar_class is not None or self.kind is DescriptorKind.GALAXY else self.mass

    @property
    def radius_text(self) -> str:
        return f"{self.radius} R☉" if self.stellar_class is not None else self.radius

    @property
    def luminosity_text(self) -> str:
        if self.stellar_class is not None:
            return f"{self.luminosity} L☉"
        return "VAR" if self.kind is DescriptorKind.GALAXY else self.luminosity


_STELLAR_KINDS = (DescriptorKind.SYSTEM, DescriptorKind.COMPACT_OBJECT)


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def choose_morphology(rng: SeededRandom, age: float) -> Morphology:
    """Pick a morphology biased by universe age (Gyr)."""
    if age < 3.0:
        if rng.next() > 0.3:
            return Morphology.IRREGULAR
        if rng.next() > 0.5:
            return Morphology.QUASAR
        return Morphology.PROTO
    if age > 10.0:
        if rng.next() > 0.4:
            return Morphology.ELLIPTICAL
        return Morphology.LENTICULAR
    return Morphology.SPIRAL


def galaxy_descriptor(seed: int, age: float) -> Descriptor:
    """Describe the galaxy behind one point of the cosmic web."""
    rng = SeededRandom(seed)
    morphology = choose_morphology(rng, age)
    designation = f"NGC-{int(rng.next() * 5000)}"
    mass = f"{rng.next() * 50 + 10:.1f} Billion"
    radius = f"{rng.next() * 50 + 20:.1f} kly"
    return Descriptor(
        kind=DescriptorKind.GALAXY,
        designation=designation,
        type_label=morphology.value,
        age=age,
        mass=mass,
        radius=radius,
        luminosity="HIGH",
        composition=generate_composition(seed, is_star=False).text,
        morphology=morphology,
        seed=seed,
    )


def star_system_descriptor(seed: int, universe_age: float) -> Descriptor:
    """Describe the star behind one point of a galaxy."""
    rng = SeededRandom(seed)
    initial_class = classify(rng.next())
    formation_time = rng.next() * universe_age
    evolution = evolve(initial_class, formation_time, universe_age, rng=rng)
    designation = f"HIP-{int(rng.next() * 100000)}"
    star = evolution.stellar_class
    return Descriptor(
        kind=DescriptorKind.SYSTEM,
        designation=designation,
        type_label=evolution.label,
        age=evolution.age,
        mass=f"{star.mass:g}",
        radius=f"{star.radius:g}",
        luminosity=star.luminosity,
        composition=generate_composition(seed, is_star=True).text,
        spectrum=spectrum_samples(designation),
        stellar_class=star,
        evolution=evolution.state,
        seed=seed,
    )


def compact_object_descriptor(galaxy: Descriptor | None, fallback_seed: int, universe_age: float) -> Descriptor:
    """Describe the supermassive black hole at a galaxy's centre."""
    name = galaxy.designation if galaxy is not None else f"SEED-{fallback_seed}"
    base = polynomial_hash(name)
    is_quasar = galaxy is not None and galaxy.morphology is Morphology.QUASAR
    mass = 1_000_000 + base % 9_000_000
    radius = 0.02 + (base % 400) / 10_000

    if galaxy is not None:
        designation = f"{galaxy.designation} {'QUASAR' if is_quasar else 'CORE'}"
    else:
        designation = "QUASAR CORE" if is_quasar else "GALACTIC CORE"

    if is_quasar:
        composition = f"AGN: ACTIVE (QUASAR)\nACCRETION: EXTREME\nMASS: {mass:,} M☉"
    else:
        composition = f"EVENT HORIZON: STABLE\nACCRETION: ACTIVE\nMASS: {mass:,} M☉"

    return Descriptor(
        kind=DescriptorKind.COMPACT_OBJECT,
        designation=designation,
        type_label="CLASS BH (REMNANT)",
        age=universe_age,
        mass=f"{mass:,}",
        radius=f"{radius:.3f}",
        luminosity="ACTIVE" if is_quasar else "0",
        composition=composition,
        stellar_class=get_class("BH"),
        evolution=EvolutionState.REMNANT,
        seed=base,
    )


def planet_descriptor(designation: str, is_gas: bool, universe_age: float, seed: int = 0) -> Descriptor:
    """Describe a planet picked or toured at system level."""
    if is_gas:
        composition = generate_composition(seed, is_star=False).text
    else:
        composition = "SILICATES/ICE\nAtmosphere: N2, O2"
    return Descriptor(
        kind=DescriptorKind.PLANET,
        designation=designation,
        type_label="GAS GIANT" if is_gas else "ROCKY",
        age=universe_age,
        mass="VAR",
        radius="VAR",
        luminosity="REFLECTIVE",
        composition=composition,
        seed=seed,
    )


def universe_descriptor(seed: int, star_count: int, universe_age: float) -> Descriptor:
    """Describe the whole cosmic web for the 'current location' panel."""
    return Descriptor(
        kind=DescriptorKind.UNIVERSE,
        designation=f"UNIVERSE 0x{seed:X}",
        type_label="COSMIC WEB",
        age=universe_age,
        mass=f"{star_count:,} OBJECTS",
        radius=f"{SCALE_UNIVERSE / 1_000_000:.1f} MLY",
        luminosity="N/A",
        composition=f"SEED: 0x{seed:X}\nOBJECTS: {star_count:,}",
        seed=seed,
    )
