"""Tests for descriptor factories and galaxy morphology."""

import pytest

from deepfield.models.descriptors import (
    DescriptorKind,
    Morphology,
    choose_morphology,
    compact_object_descriptor,
    galaxy_descriptor,
    planet_descriptor,
    star_system_descriptor,
    universe_descriptor,
)
from deepfield.models.rng import SeededRandom

YOUNG = {Morphology.IRREGULAR, Morphology.PROTO, Morphology.QUASAR}
OLD = {Morphology.ELLIPTICAL, Morphology.LENTICULAR}


class TestMorphology:
    def test_young_universe(self):
        seen = {galaxy_descriptor(seed, 2.0).morphology for seed in range(300)}
        assert seen <= YOUNG
        assert Morphology.IRREGULAR in seen

    def test_old_universe(self):
        seen = {galaxy_descriptor(seed, 12.0).morphology for seed in range(300)}
        assert seen == OLD

    def test_middle_aged_universe_is_spiral(self):
        assert choose_morphology(SeededRandom(0), 5.0) is Morphology.SPIRAL

    def test_irregular_dominates_young_galaxies(self):
        morphologies = [galaxy_descriptor(seed, 1.0).morphology for seed in range(1000)]
        share = morphologies.count(Morphology.IRREGULAR) / len(morphologies)
        assert share == pytest.approx(0.7, abs=0.06)


class TestGalaxyDescriptor:
    def test_deterministic(self):
        assert galaxy_descriptor(123, 4.0) == galaxy_descriptor(123, 4.0)

    def test_display_fields(self):
        desc = galaxy_descriptor(55, 4.0)
        assert desc.kind is DescriptorKind.GALAXY
        assert desc.designation.startswith("NGC-")
        assert desc.mass.endswith("Billion")
        assert desc.radius.endswith("kly")
        assert desc.type_label == desc.morphology.value
        assert desc.luminosity_text == "VAR"


class TestStarSystemDescriptor:
    def test_deterministic(self):
        assert star_system_descriptor(900, 8.0) == star_system_descriptor(900, 8.0)

    def test_fields(self):
        desc = star_system_descriptor(901, 8.0)
        assert desc.kind is DescriptorKind.SYSTEM
        assert desc.designation.startswith("HIP-")
        assert len(desc.spectrum) == 10
        assert desc.stellar_class is not None
        assert desc.evolution is not None
        assert desc.type_label.startswith(f"CLASS {desc.stellar_class.id}")
        assert desc.mass_text.endswith("M☉")

    def test_age_never_exceeds_universe(self):
        for seed in range(200):
            assert star_system_descriptor(seed, 6.0).age <= 6.0


class TestCompactObject:
    def test_core_of_a_galaxy(self):
        galaxy = galaxy_descriptor(10, 5.0)
        core = compact_object_descriptor(galaxy, 1337, 5.0)
        assert core.kind is DescriptorKind.COMPACT_OBJECT
        assert core.is_black_hole
        assert core.designation == f"{galaxy.designation} CORE"
        mass = int(core.mass.replace(",", ""))
        assert 1_000_000 <= mass < 10_000_000

    def test_quasar_reports_active_nucleus(self):
        quasar = next(
            d for d in (galaxy_descriptor(s, 1.0) for s in range(500)) if d.morphology is Morphology.QUASAR
        )
        core = compact_object_descriptor(quasar, 1337, 1.0)
        assert core.designation.endswith("QUASAR")
        assert "AGN: ACTIVE" in core.composition
        assert core.luminosity == "ACTIVE"

    def test_without_galaxy(self):
        core = compact_object_descriptor(None, 1337, 3.0)
        assert core.designation == "GALACTIC CORE"


class TestOtherDescriptors:
    def test_rocky_planet(self):
        desc = planet_descriptor("PLANET A", False, 9.0)
        assert desc.kind is DescriptorKind.PLANET
        assert desc.type_label == "ROCKY"
        assert desc.luminosity == "REFLECTIVE"

    def test_gas_giant(self):
        assert planet_descriptor("PLANET E", True, 9.0, seed=4).type_label == "GAS GIANT"

    def test_universe(self):
        desc = universe_descriptor(1337, 500_000, 2.5)
        assert desc.kind is DescriptorKind.UNIVERSE
        assert desc.designation == "UNIVERSE 0x539"
        assert desc.type_label == "COSMIC WEB"
        assert desc.mass == "500,000 OBJECTS"
