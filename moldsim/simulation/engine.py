"""Simulation — the main tick loop.

Owns all top-level simulation state and advances it in the canonical
tick order:

1. Decay the trail field
2. Update food sources (regeneration, deactivation)
3. Snapshot mold positions for neighbour queries
4. Update molds (dispersal check, move, sense, steer, buffered writes)
5. Merge buffered trail deposits and food consumption

Because every read in step 4 sees tick-start state and every write is
an additive buffer merged in step 5, molds may be processed in any order
with identical results.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np
from numpy.random import Generator
from numpy.typing import NDArray

from moldsim.food.registry import FoodRegistry
from moldsim.molds.population import Population
from moldsim.simulation.config import SimulationConfig
from moldsim.trail.field import TrailField

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MoldView:
    """Read-only view of one mold for display."""

    x: float
    y: float
    heading: float
    is_dispersing: bool = False


@dataclass(frozen=True)
class FoodView:
    """Read-only view of one food source for display."""

    x: float
    y: float
    size: float
    colour: tuple[int, int, int]
    active: bool


@dataclass(frozen=True)
class Frame:
    """Snapshot of the simulation handed to display sinks.

    Attributes:
        tick: Tick the snapshot was taken after.
        molds: Every mold's position, heading and dispersal flag.
        foods: Every food source, active or not.
        trail: Copy of the trail grid (``trail[y, x]``).
    """

    tick: int
    molds: tuple[MoldView, ...]
    foods: tuple[FoodView, ...]
    trail: NDArray[np.float64] = field(repr=False)


@dataclass
class Simulation:
    """Drives the simulation forward tick by tick.

    Attributes:
        config: Simulation configuration.
        trail: Shared trail field.
        foods: All food sources.
        population: All molds.
        rng: Master seeded random generator.
        origin: Shared start point of every mold.
        tick: Current tick count.
    """

    config: SimulationConfig
    trail: TrailField = field(init=False)
    foods: FoodRegistry = field(init=False)
    population: Population = field(init=False)
    rng: Generator = field(init=False)
    origin: tuple[float, float] = field(init=False)
    tick: int = 0

    def __post_init__(self) -> None:
        """Build the trail field, food registry and population from config."""
        cfg = self.config
        self.rng = np.random.default_rng(cfg.seed)
        self.trail = TrailField(
            width=cfg.width,
            height=cfg.height,
            decay_rate=cfg.trail_decay_rate,
            decay_mode=cfg.trail_decay_mode,
            max_intensity=cfg.trail_max_intensity,
        )
        self.foods = FoodRegistry(
            width=cfg.width,
            height=cfg.height,
            default_size=cfg.food_default_size,
            min_size=cfg.food_min_size,
            nutrition_value=cfg.food_nutrition,
            nutrition_floor=cfg.food_nutrition_floor,
            regeneration_rate=cfg.food_regen_rate,
        )

        ox = cfg.origin_x
        oy = cfg.origin_y
        if ox is None:
            ox = float(self.rng.uniform(0.0, cfg.width))
        if oy is None:
            oy = float(self.rng.uniform(0.0, cfg.height))
        self.origin = (ox, oy)

        self.population = Population()
        self.population.populate(
            cfg.num_molds,
            ox,
            oy,
            seed=int(self.rng.integers(2**32)),
            dispersal_interval=cfg.dispersal_interval,
        )
        logger.info(
            "Simulation built: %dx%d canvas, %d molds starting at (%.1f, %.1f)",
            cfg.width,
            cfg.height,
            cfg.num_molds,
            ox,
            oy,
        )

    def step(self, order: Sequence[int] | None = None) -> None:
        """Advance the simulation by one tick.

        Args:
            order: Optional processing order of mold indices.  Any
                permutation yields the same trail and food state.
        """
        # 1. Fade trails
        self.trail.decay()

        # 2. Food regeneration / deactivation
        self.foods.update()

        # 3. Freeze positions for dispersal queries
        self.population.take_snapshot()

        # 4. Molds
        molds = self.population.molds
        indices = range(len(molds)) if order is None else order
        for i in indices:
            molds[i].update(i, self.trail, self.foods, self.population, self.config)

        # 5. Merge buffered writes
        self.trail.commit()
        self.foods.commit()

        self.tick += 1

    def run(self, ticks: int) -> None:
        """Run the simulation for a fixed number of ticks.

        Args:
            ticks: Number of ticks to advance.
        """
        for _ in range(ticks):
            self.step()

    def spawn_food(self, x: float, y: float, size: float | None = None) -> bool:
        """Drop a new food source at ``(x, y)``.

        Args:
            x: Centre column.
            y: Centre row.
            size: Side length; defaults to ``food_default_size``.

        Returns:
            False if the point is off-canvas (nothing is created).
        """
        return self.foods.spawn(x, y, size) is not None

    def respawn_food(
        self,
        index: int,
        x: float,
        y: float,
        size: float | None = None,
    ) -> bool:
        """Reactivate food ``index`` at a new centre.

        Returns:
            False if the index is unknown or the point is off-canvas.
        """
        return self.foods.respawn(index, x, y, size)

    def snapshot(self) -> Frame:
        """Return a read-only frame of the current state for display."""
        return Frame(
            tick=self.tick,
            molds=tuple(
                MoldView(m.x, m.y, m.heading, m.is_dispersing)
                for m in self.population.molds
            ),
            foods=tuple(
                FoodView(f.x, f.y, f.size, f.colour, f.active)
                for f in self.foods.sources
            ),
            trail=self.trail.grid.copy(),
        )
