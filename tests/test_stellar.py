"""Tests for stellar classification, evolution and composition."""

import pytest

from deepfield.models.rng import SeededRandom
from deepfield.models.stellar import (
    SELECTABLE_CLASSES,
    TRACE_ELEMENTS,
    EvolutionState,
    classify,
    evolve,
    generate_composition,
    get_class,
    spectrum_samples,
)


class TestClassify:
    def test_frequencies_match_table(self):
        rng = SeededRandom(2024)
        rolls = 10_000
        counts = {c.id: 0 for c in SELECTABLE_CLASSES}
        for _ in range(rolls):
            counts[classify(rng.next()).id] += 1
        for stellar_class in SELECTABLE_CLASSES:
            assert counts[stellar_class.id] / rolls == pytest.approx(stellar_class.probability, abs=0.015)

    def test_lowest_roll_is_class_o(self):
        assert classify(0.0).id == "O"

    def test_tail_falls_back_to_m(self):
        assert classify(0.99995).id == "M"

    def test_remnants_never_selected(self):
        rng = SeededRandom(1)
        ids = {classify(rng.next()).id for _ in range(5000)}
        assert not ids & {"BH", "N", "WD"}


class TestEvolve:
    @pytest.mark.parametrize("stellar_class", SELECTABLE_CLASSES, ids=lambda c: c.id)
    def test_state_is_monotonic_in_age(self, stellar_class):
        horizon = min(max(stellar_class.lifespan * 2.0, 0.5), 50.0)
        previous = EvolutionState.PROTO
        for step in range(400):
            age = horizon * step / 399
            state = evolve(stellar_class, 0.0, age, rng=SeededRandom(step)).state
            assert state >= previous
            previous = state

    def test_young_star_is_proto(self):
        assert evolve(get_class("G"), 1.0, 1.01).state is EvolutionState.PROTO

    def test_giant_window(self):
        result = evolve(get_class("G"), 0.0, 10.5)
        assert result.state is EvolutionState.GIANT
        assert result.label == "CLASS G (RED GIANT)"

    def test_sunlike_star_becomes_white_dwarf(self):
        result = evolve(get_class("G"), 0.0, 12.0)
        assert result.state is EvolutionState.REMNANT
        assert result.stellar_class.id == "WD"

    def test_massive_star_collapses(self):
        result = evolve(get_class("O"), 0.0, 1.0, rng=SeededRandom(4))
        assert result.stellar_class.id in ("BH", "N")

    def test_seeded_remnant_is_reproducible(self):
        first = evolve(get_class("B"), 0.0, 5.0, rng=SeededRandom(77))
        second = evolve(get_class("B"), 0.0, 5.0, rng=SeededRandom(77))
        assert first == second

    @pytest.mark.parametrize("class_id", ["K", "M"])
    def test_long_lived_stars_stay_on_main_sequence(self, class_id):
        assert evolve(get_class(class_id), 0.0, 13.8).state is EvolutionState.MAIN_SEQUENCE


class TestComposition:
    @pytest.mark.parametrize("is_star", [True, False])
    def test_fractions_sum_to_100(self, is_star):
        for seed in range(300):
            comp = generate_composition(seed, is_star)
            assert comp.hydrogen + comp.helium + comp.metals == pytest.approx(100.0)
            assert comp.metals >= 0.0
            assert comp.trace in TRACE_ELEMENTS

    def test_text_lists_each_fraction(self):
        text = generate_composition(5, True).text
        assert text.startswith("COMPOSITION:")
        assert "H: " in text and "He: " in text and "Trace: " in text


class TestSpectrum:
    def test_fixed_size_and_ranges(self):
        samples = spectrum_samples("HIP-1234")
        assert len(samples) == 10
        for position, intensity in samples:
            assert 0.0 <= position < 100.0
            assert 0.0 <= intensity < 1.0

    def test_seeded_by_designation(self):
        assert spectrum_samples("HIP-1") == spectrum_samples("HIP-1")
        # Same character codes, same checksum
        assert spectrum_samples("HIP-12") == spectrum_samples("HIP-21")
