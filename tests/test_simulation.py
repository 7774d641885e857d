"""End-to-end tests for the simulation scheduler."""

from dataclasses import replace

import pytest

from conftest import run_until
from deepfield.constants import AUTOPILOT_FIRST_DELAY
from deepfield.models.config import GenerationConfig, QualityPreset
from deepfield.models.descriptors import DescriptorKind, Morphology
from deepfield.models.galaxy import GalaxyLayout, layout_for
from deepfield.models.intents import DrillDown, Inspect
from deepfield.models.simulation import Simulation, format_coord
from deepfield.states import ScaleLevel


def _enter_galaxy(sim, index=0):
    target = sim.pick(index)
    assert sim.warp()
    run_until(sim, lambda: sim.level is ScaleLevel.GALAXY)
    return target


def _first_autopilot_pick(sim):
    """Index of the galaxy the autopilot flies to first from a fresh universe."""
    sim.context.clock.universe_age = 5.0
    (intent,) = sim.autopilot.tick(AUTOPILOT_FIRST_DELAY + 0.5, sim.context)
    assert isinstance(intent, DrillDown)
    return intent.target.index


def _enter_core_system(sim):
    _enter_galaxy(sim)
    assert sim.pick_core() is not None
    assert sim.warp()
    run_until(sim, lambda: sim.level is ScaleLevel.SYSTEM)


class TestClock:
    def test_universe_age_advances_at_time_scale(self, sim):
        sim.tick(0.05)
        assert sim.context.clock.universe_age == pytest.approx(0.05 * 0.1)

    def test_frame_delta_is_clipped(self, sim):
        sim.tick(5.0)
        assert sim.context.clock.universe_age == pytest.approx(0.1 * 0.1)

    def test_pause_freezes_time(self, sim):
        assert sim.toggle_pause()
        sim.tick(0.1)
        assert sim.context.clock.universe_age == 0.0
        assert not sim.toggle_pause()

    def test_set_time_scale(self, sim):
        sim.set_time_scale(1.0)
        sim.tick(0.1)
        assert sim.context.clock.universe_age == pytest.approx(0.1)
        sim.set_time_scale(-3.0)
        assert sim.context.clock.time_scale == 0.0

    def test_only_active_level_clock_moves(self, sim):
        _enter_galaxy(sim)
        universe_age = sim.context.clock.universe_age
        sim.tick(0.1)
        assert sim.context.clock.universe_age == universe_age
        assert sim.context.clock.galaxy_age > 0.0


class TestLevels:
    def test_enter_galaxy(self, sim):
        target = _enter_galaxy(sim)
        ctx = sim.context
        assert ctx.active_galaxy == target.descriptor
        assert ctx.galaxy is not None
        assert ctx.galaxy.layout is layout_for(target.descriptor.morphology)
        assert ctx.world_offset == pytest.approx(target.position)
        # The pick was made in the previous frame, so it is not carried over
        assert ctx.selected is None
        assert not sim.warp()

    def test_young_universe_galaxy_is_irregular(self, sim):
        sim.context.clock.universe_age = 2.0
        target = _enter_galaxy(sim, index=5)
        assert target.descriptor.morphology in {Morphology.IRREGULAR, Morphology.PROTO, Morphology.QUASAR}
        assert sim.context.galaxy.layout is GalaxyLayout.IRREGULAR

    def test_old_universe_galaxy_is_elliptical(self, sim):
        sim.context.clock.universe_age = 12.0
        target = _enter_galaxy(sim, index=5)
        assert target.descriptor.morphology in {Morphology.ELLIPTICAL, Morphology.LENTICULAR}
        assert sim.context.galaxy.layout is GalaxyLayout.ELLIPTICAL

    def test_core_system_has_one_black_hole(self, sim):
        _enter_core_system(sim)
        system = sim.context.system
        assert sim.context.active_system.kind is DescriptorKind.COMPACT_OBJECT
        assert len(system.stars) == 1
        assert system.stars[0].is_compact
        assert sim.activity is not None

    def test_eject_from_system_keeps_galaxy(self, sim):
        _enter_core_system(sim)
        galaxy = sim.context.galaxy
        offset = sim.context.world_offset
        old_system = sim.context.system
        assert sim.eject()
        run_until(sim, lambda: sim.level is ScaleLevel.GALAXY)
        assert sim.context.galaxy is galaxy
        assert sim.context.system is None
        assert old_system.disposed
        assert sim.context.world_offset == offset

    def test_eject_to_universe_drops_galaxy(self, sim):
        _enter_galaxy(sim)
        galaxy = sim.context.galaxy
        offset = sim.context.world_offset
        assert sim.eject()
        run_until(sim, lambda: sim.level is ScaleLevel.UNIVERSE)
        assert sim.context.galaxy is None
        assert galaxy.disposed
        assert sim.context.world_offset == offset

    def test_planets_move_at_system_level(self, sim):
        _enter_core_system(sim)
        body = sim.context.system.body(sim.context.system.planets[0].handle)
        before = list(body.position)
        sim.tick(0.1)
        assert body.position != before

    def test_warp_without_selection(self, sim):
        assert not sim.warp()


class TestPicking:
    def test_pick_universe_point(self, sim):
        target = sim.pick(0)
        assert target.level is ScaleLevel.UNIVERSE
        assert target.descriptor.kind is DescriptorKind.GALAXY
        assert sim.context.selected is target

    def test_pick_index_zero_is_stable(self, small_config):
        first = Simulation(small_config, autopilot=False).pick(0)
        second = Simulation(small_config, autopilot=False).pick(0)
        assert first.position == second.position
        assert first.descriptor == second.descriptor

    def test_pick_out_of_range(self, sim):
        assert sim.pick(10**9) is None
        assert sim.pick(-1) is None

    def test_pick_core_only_in_galaxy(self, sim):
        assert sim.pick_core() is None

    def test_pick_disables_autopilot(self, small_config):
        sim = Simulation(small_config, autopilot=True)
        assert sim.autopilot.enabled
        sim.pick(1)
        assert not sim.autopilot.enabled

    def test_planet_inspection(self, sim):
        _enter_core_system(sim)
        target = sim.pick_planet(1)
        assert target.descriptor.kind is DescriptorKind.PLANET
        assert sim.warp()
        assert sim.context.inspecting is target
        sim.tick(0.1)
        assert sim.context.camera.look_at == sim.context.system.planet_position(1)
        assert sim.location_descriptor() is target.descriptor

        # First eject only leaves orbit
        assert sim.eject()
        assert sim.context.inspecting is None
        assert sim.level is ScaleLevel.SYSTEM
        assert sim.context.transition is None


class TestIntents:
    def test_drill_down_intent(self, sim):
        target = sim.pick(2)
        assert sim.apply(DrillDown(target))
        assert not sim.apply(DrillDown(target))

    def test_inspect_intent_locks_camera(self, sim):
        _enter_core_system(sim)
        target = sim.pick_planet(0)
        sim.apply(Inspect(target))
        assert sim.context.inspecting is target

    def test_autopilot_drives_a_tour(self, small_config):
        sim = Simulation(small_config, autopilot=True)
        sim.context.clock.universe_age = 5.0
        run_until(sim, lambda: sim.level is ScaleLevel.GALAXY, max_ticks=400)
        run_until(sim, lambda: sim.level is ScaleLevel.SYSTEM, max_ticks=400)
        # The first stop in a new galaxy is its core
        assert sim.context.active_system.kind is DescriptorKind.COMPACT_OBJECT


class TestCommands:
    def test_big_bang(self, sim):
        sim.context.clock.universe_age = 7.0
        _enter_galaxy(sim)
        sim.big_bang()
        ctx = sim.context
        assert ctx.level is ScaleLevel.UNIVERSE
        assert ctx.clock.universe_age == 0.0
        assert ctx.big_bang_flash == 1.0
        assert ctx.world_offset == (0.0, 0.0, 0.0)
        sim.tick(0.1)
        assert ctx.big_bang_flash == pytest.approx(0.95)

    def test_reseed(self, sim):
        old = sim.context.universe
        seed = sim.reseed(seed=4242)
        assert seed == 4242
        assert sim.context.config.seed == 4242
        assert old.disposed
        assert len(sim.context.universe) == 2000

    def test_reseed_restarts_autopilot_stream(self, small_config):
        fresh = Simulation(replace(small_config, seed=7), autopilot=True)
        expected = _first_autopilot_pick(fresh)

        sim = Simulation(replace(small_config, seed=1), autopilot=True)
        _first_autopilot_pick(sim)
        sim.reseed(seed=7)
        assert _first_autopilot_pick(sim) == expected

    def test_big_bang_replays_autopilot_choices(self, small_config):
        sim = Simulation(replace(small_config, seed=7), autopilot=True)
        first = _first_autopilot_pick(sim)
        sim.big_bang()
        assert _first_autopilot_pick(sim) == first

    def test_reseed_draws_new_seed(self, sim):
        seed = sim.reseed()
        assert 0 <= seed < 10_000
        assert sim.context.config.seed == seed

    def test_apply_preset_in_galaxy(self, sim):
        _enter_galaxy(sim)
        old = sim.context.galaxy
        sim.apply_preset(QualityPreset.LOW)
        assert sim.context.config.star_count == 100_000
        assert len(sim.context.galaxy.stars) == 100_000
        assert old.disposed
        assert sim.context.level is ScaleLevel.GALAXY

    def test_location_descriptor_at_universe(self, sim):
        desc = sim.location_descriptor()
        assert desc.kind is DescriptorKind.UNIVERSE
        assert desc.designation == "UNIVERSE 0x539"

    def test_out_of_range_config_is_clamped(self):
        sim = Simulation(GenerationConfig(star_count=0, cluster_count=0, filament_scatter=-1.0), autopilot=False)
        assert sim.context.config.star_count == 1
        assert len(sim.context.universe) == 1


class TestFormatCoord:
    @pytest.mark.parametrize(
        "value, text",
        [
            (12_345_678.0, "1.23e+07"),
            (-20_000_000.0, "-2.00e+07"),
            (12_345.6, "12,346"),
            (-10_000.0, "-10,000"),
            (12.34, "12.3"),
            (0.0, "0.0"),
        ],
    )
    def test_format(self, value, text):
        assert format_coord(value) == text

    def test_coordinates_include_world_offset(self, sim):
        _enter_galaxy(sim)
        x, y, z = sim.context.absolute_camera_position
        assert sim.coordinates() == (format_coord(x), format_coord(y), format_coord(z))
