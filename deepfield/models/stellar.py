"""Stellar classes, evolution, and the display-side chemistry of stars."""

from __future__ import annotations

import enum
import logging
import random
from dataclasses import dataclass

from .rng import SeededRandom, checksum

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StellarClass:
    """One row of the spectral class table."""

    id: str
    probability: float  # Occurrence probability for an initial draw
    color: tuple[int, int, int]
    temperature: str  # Kelvin, display label
    mass: float  # Solar masses
    radius: float  # Solar radii
    luminosity: str  # Solar luminosities, display label
    lifespan: float  # Main-sequence lifetime in Gyr

    @property
    def selectable(self) -> bool:
        """Remnant classes are only reachable through evolution."""
        return self.probability > 0


STELLAR_CLASSES: tuple[StellarClass, ...] = (
    StellarClass("O", 0.0001, (153, 153, 255), "30,000+", 60, 8, "30,000+", 0.01),
    StellarClass("B", 0.0013, (170, 170, 255), "10,000-30,000", 10, 5, "25-30,000", 0.1),
    StellarClass("A", 0.006, (255, 255, 255), "7,500-10,000", 3, 2.5, "5-25", 1.0),
    StellarClass("F", 0.03, (255, 255, 238), "6,000-7,500", 1.5, 1.3, "1.5-5", 4.0),
    StellarClass("G", 0.076, (255, 221, 0), "5,200-6,000", 1.0, 1.0, "0.6-1.5", 10.0),
    StellarClass("K", 0.121, (255, 170, 34), "3,700-5,200", 0.7, 0.8, "0.08-0.6", 30.0),
    StellarClass("M", 0.7645, (255, 51, 0), "2,400-3,700", 0.3, 0.4, "< 0.08", 1000.0),
    # Remnants
    StellarClass("BH", 0.0, (0, 0, 0), "UNDEFINED", 20, 0.05, "0", 9999),
    StellarClass("N", 0.0, (0, 255, 255), "600,000", 2.5, 0.02, "0.001", 9999),
    StellarClass("WD", 0.0, (187, 255, 255), "100,000", 0.9, 0.1, "0.01", 9999),
)

_BY_ID: dict[str, StellarClass] = {c.id: c for c in STELLAR_CLASSES}

SELECTABLE_CLASSES: tuple[StellarClass, ...] = tuple(c for c in STELLAR_CLASSES if c.selectable)

PROTO_AGE = 0.05  # Gyr
GIANT_FACTOR = 1.1

# Progenitor -> remnant families
_COLLAPSING = ("O", "B")
_WHITE_DWARF_PROGENITORS = ("A", "F", "G")


def get_class(class_id: str) -> StellarClass:
    return _BY_ID[class_id]


def classify(roll: float) -> StellarClass:
    """Map a uniform roll onto the cumulative occurrence table."""
    cumulative = 0.0
    for stellar_class in SELECTABLE_CLASSES:
        cumulative += stellar_class.probability
        if roll < cumulative:
            return stellar_class
    return _BY_ID["M"]  # Fallback for the rounding tail


# ---------------------------------------------------------------------------
# Evolution
# ---------------------------------------------------------------------------


class EvolutionState(enum.IntEnum):
    """Life stages, ordered."""

    PROTO = 0
    MAIN_SEQUENCE = 1
    GIANT = 2
    REMNANT = 3


_STATE_SUFFIX: dict[EvolutionState, str] = {
    EvolutionState.PROTO: " (PROTO-STAR)",
    EvolutionState.MAIN_SEQUENCE: "",
    EvolutionState.GIANT: " (RED GIANT)",
    EvolutionState.REMNANT: " (REMNANT)",
}


@dataclass(frozen=True)
class Evolution:
    """Result of evolving a star to the current universe age."""

    state: EvolutionState
    age: float
    stellar_class: StellarClass  # Remnant class once collapsed

    @property
    def label(self) -> str:
        return f"CLASS {self.stellar_class.id}{_STATE_SUFFIX[self.state]}"


def evolve(
    initial_class: StellarClass,
    formation_time: float,
    current_age: float,
    rng: SeededRandom | None = None,
) -> Evolution:
    """Evolve a star formed at ``formation_time`` to ``current_age`` (Gyr).

    O/B progenitors collapse to a black hole or a neutron star with even odds.
    That draw comes from ``rng`` when one is given; without it the process-wide
    generator is used and the outcome is not reproducible.

    K and M stars outlive any universe age the sandbox reaches, so they stay
    on the main sequence once past the proto stage.
    """
    age = current_age - formation_time
    if age < PROTO_AGE:
        return Evolution(EvolutionState.PROTO, age, initial_class)

    if initial_class.id not in _COLLAPSING and initial_class.id not in _WHITE_DWARF_PROGENITORS:
        return Evolution(EvolutionState.MAIN_SEQUENCE, age, initial_class)

    if age < initial_class.lifespan:
        return Evolution(EvolutionState.MAIN_SEQUENCE, age, initial_class)
    if age < initial_class.lifespan * GIANT_FACTOR:
        return Evolution(EvolutionState.GIANT, age, initial_class)

    if initial_class.id in _COLLAPSING:
        roll = rng.next() if rng is not None else random.random()
        remnant_id = "BH" if roll > 0.5 else "N"
    else:
        remnant_id = "WD"
    return Evolution(EvolutionState.REMNANT, age, _BY_ID[remnant_id])


# ---------------------------------------------------------------------------
# Composition & spectrum (display only)
# ---------------------------------------------------------------------------

TRACE_ELEMENTS = ["O", "C", "Ne", "Fe", "N", "Si", "Mg", "S"]

SPECTRUM_SAMPLE_COUNT = 10


@dataclass(frozen=True)
class Composition:
    """Bulk chemistry in percent; the three fractions sum to 100."""

    hydrogen: float
    helium: float
    metals: float
    trace: str

    @property
    def text(self) -> str:
        return (
            "COMPOSITION:\n"
            f"H: {self.hydrogen:.2f}% | He: {self.helium:.2f}% | Met: {self.metals:.2f}%\n"
            f"Trace: {self.trace}"
        )


def generate_composition(seed: int, is_star: bool) -> Composition:
    """Deterministic H/He/metal split for a star or a galaxy's gas."""
    rng = SeededRandom(seed)
    if is_star:
        hydrogen = 70 + rng.next() * 10
        helium = 24 + rng.next() * 4
    else:
        hydrogen = 74 + rng.next() * 5
        helium = 23 + rng.next() * 2
    metals = 100 - (hydrogen + helium)
    if metals < 0:
        helium += metals
        metals = 0.0
    trace = TRACE_ELEMENTS[rng.index(len(TRACE_ELEMENTS))]
    return Composition(hydrogen, helium, metals, trace)


def spectrum_samples(designation: str) -> tuple[tuple[float, float], ...]:
    """Fixed-size (position, intensity) pairs seeded from the designation."""
    rng = SeededRandom(checksum(designation))
    return tuple(
        (rng.next() * 100, rng.next()) for _ in range(SPECTRUM_SAMPLE_COUNT)
    )
