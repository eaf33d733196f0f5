"""Tests for moldsim.molds.dispersal and the angle helpers."""

import numpy as np
import pytest
from numpy.random import Generator

from moldsim.molds.dispersal import check_density, dispersal_heading
from moldsim.molds.heading import angle_difference, normalize_heading
from moldsim.molds.mold import Mold
from moldsim.molds.population import Population
from moldsim.simulation.config import SimulationConfig


def _population(points: list[tuple[float, float]]) -> Population:
    population = Population(molds=[Mold(x=x, y=y) for x, y in points])
    population.take_snapshot()
    return population


class TestHeadingHelpers:
    """Tests for angle wrapping."""

    @pytest.mark.parametrize(
        ("angle", "expected"),
        [(0.0, 0.0), (360.0, 0.0), (-90.0, 270.0), (725.0, 5.0), (-1e-20, 0.0)],
    )
    def test_normalize(self, angle: float, expected: float) -> None:
        result = normalize_heading(angle)
        assert result == pytest.approx(expected)
        assert 0.0 <= result < 360.0

    @pytest.mark.parametrize(
        ("target", "current", "expected"),
        [(10.0, 350.0, 20.0), (350.0, 10.0, -20.0), (180.0, 0.0, -180.0), (90.0, 90.0, 0.0)],
    )
    def test_angle_difference(self, target: float, current: float, expected: float) -> None:
        assert angle_difference(target, current) == pytest.approx(expected)


class TestCheckDensity:
    """Tests for the bounded density check."""

    def test_cluster_triggers(
        self,
        canvas_config: SimulationConfig,
        rng: Generator,
    ) -> None:
        points = [(400.0, 400.0)] + [(400.0 + i, 400.0) for i in range(1, 9)]
        assert check_density(0, _population(points), rng, canvas_config)

    def test_one_short_of_cluster(
        self,
        canvas_config: SimulationConfig,
        rng: Generator,
    ) -> None:
        points = [(400.0, 400.0)] + [(400.0 + i, 400.0) for i in range(1, 8)]
        assert not check_density(0, _population(points), rng, canvas_config)

    def test_distant_molds_ignored(
        self,
        canvas_config: SimulationConfig,
        rng: Generator,
    ) -> None:
        points = [(400.0, 400.0)] + [(500.0 + i, 500.0) for i in range(20)]
        assert not check_density(0, _population(points), rng, canvas_config)

    def test_radius_is_exclusive(
        self,
        canvas_config: SimulationConfig,
        rng: Generator,
    ) -> None:
        points = [(400.0, 400.0)] + [(425.0, 400.0)] * 10
        assert not check_density(0, _population(points), rng, canvas_config)

    def test_cap_bounds_the_sample(self, rng: Generator) -> None:
        """With a cap of 3 the check can never count 8 neighbours."""
        config = SimulationConfig(width=800, height=800, num_molds=0, density_check_cap=3)
        points = [(400.0, 400.0)] * 30
        assert not check_density(0, _population(points), rng, config)


class TestDispersalHeading:
    """Tests for the repulsion force."""

    def test_turns_away_from_neighbour(
        self,
        canvas_config: SimulationConfig,
        rng: Generator,
    ) -> None:
        population = _population([(400.0, 400.0), (410.0, 400.0)])
        # Away from the neighbour is 180; 20% of the 90 degree turn
        heading = dispersal_heading(0, 90.0, population, rng, canvas_config)
        assert heading == pytest.approx(108.0)

    def test_takes_shortest_turn(
        self,
        canvas_config: SimulationConfig,
        rng: Generator,
    ) -> None:
        population = _population([(400.0, 400.0), (400.0, 410.0)])
        # Away is 270 (north); from 350 the short way is -80
        heading = dispersal_heading(0, 350.0, population, rng, canvas_config)
        assert heading == pytest.approx(350.0 - 16.0)

    def test_coincident_neighbour_skipped(
        self,
        canvas_config: SimulationConfig,
        rng: Generator,
    ) -> None:
        population = _population([(400.0, 400.0), (400.5, 400.0)])
        assert dispersal_heading(0, 90.0, population, rng, canvas_config) == 90.0

    def test_no_neighbours_in_radius(
        self,
        canvas_config: SimulationConfig,
        rng: Generator,
    ) -> None:
        population = _population([(400.0, 400.0), (500.0, 400.0)])
        assert dispersal_heading(0, 90.0, population, rng, canvas_config) == 90.0

    def test_alone(self, canvas_config: SimulationConfig, rng: Generator) -> None:
        population = _population([(400.0, 400.0)])
        assert dispersal_heading(0, 33.0, population, rng, canvas_config) == 33.0

    def test_symmetric_neighbours_closer_one_wins(
        self,
        canvas_config: SimulationConfig,
        rng: Generator,
    ) -> None:
        population = _population([(400.0, 400.0), (405.0, 400.0), (380.0, 400.0)])
        heading = dispersal_heading(0, 90.0, population, rng, canvas_config)
        # Net push is toward -x (away from the nearer mold on the right)
        assert heading > 90.0

    def test_reads_snapshot_not_live_positions(
        self,
        canvas_config: SimulationConfig,
        rng: Generator,
    ) -> None:
        population = _population([(400.0, 400.0), (410.0, 400.0)])
        population.molds[1].x = 600.0
        heading = dispersal_heading(0, 90.0, population, rng, canvas_config)
        assert heading == pytest.approx(108.0)


class TestDispersalInSimulation:
    """Density checks scheduled through the tick loop."""

    def test_cluster_switches_probe_on(self) -> None:
        from moldsim.simulation.engine import Simulation

        config = SimulationConfig(
            seed=3,
            width=800,
            height=800,
            num_molds=9,
            origin_x=400.0,
            origin_y=400.0,
        )
        sim = Simulation(config=config)
        for mold in sim.population.molds:
            mold.dispersal_counter = 0
        probe = sim.population.molds[0]
        probe.dispersal_counter = config.dispersal_interval - 1

        sim.step()
        assert probe.is_dispersing
        assert all(not m.is_dispersing for m in sim.population.molds[1:])

    def test_small_population_never_disperses(self) -> None:
        from moldsim.simulation.engine import Simulation

        config = SimulationConfig(
            seed=3,
            width=800,
            height=800,
            num_molds=8,
            origin_x=400.0,
            origin_y=400.0,
        )
        sim = Simulation(config=config)
        for _ in range(30):
            sim.step()
            assert all(not m.is_dispersing for m in sim.population.molds)


class TestSampleNeighbours:
    """Tests for the bounded neighbour scan."""

    def test_skips_self_and_visits_each_once(self, rng: Generator) -> None:
        population = _population([(float(i), 0.0) for i in range(5)])
        sampled = list(population.sample_neighbours(2, cap=50, rng=rng))
        assert sorted(sampled) == [0, 1, 3, 4]

    def test_respects_cap(self, rng: Generator) -> None:
        population = _population([(float(i), 0.0) for i in range(100)])
        sampled = list(population.sample_neighbours(0, cap=20, rng=rng))
        assert len(sampled) == 20
        assert len(set(sampled)) == 20
        assert 0 not in sampled

    def test_wraps_around(self) -> None:
        population = _population([(float(i), 0.0) for i in range(10)])
        sampled = list(
            population.sample_neighbours(0, cap=5, rng=np.random.default_rng(1)),
        )
        steps = {(b - a) % 10 for a, b in zip(sampled, sampled[1:])}
        assert steps <= {1, 2}

    def test_empty(self, empty_population: Population, rng: Generator) -> None:
        assert list(empty_population.sample_neighbours(0, cap=5, rng=rng)) == []
