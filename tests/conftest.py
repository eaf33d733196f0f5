"""Shared fixtures for the moldsim test suite."""

from __future__ import annotations

import numpy as np
import pytest
from numpy.random import Generator

from moldsim.food.registry import FoodRegistry
from moldsim.food.source import FoodSource
from moldsim.molds.population import Population
from moldsim.simulation.config import SimulationConfig
from moldsim.trail.field import TrailField


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def canvas_config() -> SimulationConfig:
    """An 800x800 canvas with no molds, for hand-placed agent tests."""
    return SimulationConfig(width=800, height=800, num_molds=0)


@pytest.fixture
def small_config() -> SimulationConfig:
    """A 100x100 canvas with 40 molds starting in the middle."""
    return SimulationConfig(
        seed=7,
        width=100,
        height=100,
        num_molds=40,
        origin_x=50.0,
        origin_y=50.0,
    )


@pytest.fixture
def small_trail() -> TrailField:
    """An 8x8 trail field for fast tests."""
    return TrailField(width=8, height=8)


@pytest.fixture
def canvas_trail() -> TrailField:
    """An empty 800x800 trail field."""
    return TrailField(width=800, height=800)


@pytest.fixture
def canvas_foods() -> FoodRegistry:
    """An empty food registry for an 800x800 canvas."""
    return FoodRegistry(width=800, height=800)


@pytest.fixture
def empty_population() -> Population:
    """A population with no molds."""
    return Population()


@pytest.fixture
def food() -> FoodSource:
    """A full, default-sized food square centred at (400, 400)."""
    return FoodSource(x=400.0, y=400.0, size=50.0)
