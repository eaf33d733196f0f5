"""Mold -- a single slime-mold agent.

Each mold walks at constant speed and steers using three sensors placed
ahead of it (forward, left, right).  A sensor reads the trail field plus
the nutrition of any food square it lands on.  The mold turns toward the
strongest reading, which reinforces trails already laid down by others:
the positive feedback that grows the transport network.

Steering each tick is governed by exactly one state, in strict priority:

- **EDGE_AVOIDANCE**: near a wall, turn away from it.
- **DISPERSING**: in an over-crowded cluster, steer away from neighbours.
- **TRAIL_FOLLOWING**: compare the sensors and turn toward the signal.

Wall bounces are physical and happen before steering, whatever the
state.  Everything a mold writes (trail deposit, food eaten) is buffered
and merged by the simulation after every mold has acted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, NamedTuple

import numpy as np

from moldsim.molds.dispersal import check_density, dispersal_heading
from moldsim.molds.heading import normalize_heading, step_vector

if TYPE_CHECKING:
    from numpy.random import Generator

    from moldsim.food.registry import FoodRegistry
    from moldsim.molds.population import Population
    from moldsim.simulation.config import SimulationConfig
    from moldsim.trail.field import TrailField


class MoldState(Enum):
    """Which steering rule set the heading this tick."""

    EDGE_AVOIDANCE = auto()
    DISPERSING = auto()
    TRAIL_FOLLOWING = auto()


class SensorReadings(NamedTuple):
    """Signal (trail + nutrition) seen by each sensor."""

    forward: float
    left: float
    right: float


def select_state(
    x: float,
    y: float,
    is_dispersing: bool,
    width: float,
    height: float,
    edge_buffer: float,
) -> MoldState:
    """Pick the governing state for a mold at ``(x, y)``.

    Edge avoidance pre-empts dispersal, which pre-empts trail following.
    """
    near_edge = (
        x < edge_buffer
        or x > width - edge_buffer
        or y < edge_buffer
        or y > height - edge_buffer
    )
    if near_edge:
        return MoldState.EDGE_AVOIDANCE
    if is_dispersing:
        return MoldState.DISPERSING
    return MoldState.TRAIL_FOLLOWING


def sensor_point(
    x: float,
    y: float,
    angle: float,
    distance: float,
    width: float,
    height: float,
) -> tuple[float, float]:
    """Return a sensor position clamped into ``[1, W-2] x [1, H-2]``."""
    dx, dy = step_vector(angle, distance)
    return (
        min(max(x + dx, 1.0), width - 2.0),
        min(max(y + dy, 1.0), height - 2.0),
    )


@dataclass
class Mold:
    """A single mold agent.

    Attributes:
        x: Current column (continuous).
        y: Current row (continuous).
        heading: Direction of travel in degrees, 0 = east, 90 = south.
        is_dispersing: Result of the latest density check.
        dispersal_counter: Ticks since the last density check.
        state: Steering state applied on the latest tick.
        rng: The mold's own random stream.
    """

    x: float
    y: float
    heading: float = 0.0
    is_dispersing: bool = False
    dispersal_counter: int = 0
    state: MoldState = MoldState.TRAIL_FOLLOWING
    rng: Generator = field(default_factory=lambda: np.random.default_rng(0), repr=False)

    @classmethod
    def at_origin(
        cls,
        x: float,
        y: float,
        rng: Generator,
        dispersal_interval: int = 10,
    ) -> Mold:
        """Create a mold at a shared start point with a random heading.

        The dispersal counter starts at a random phase so the population
        does not run its density checks on the same tick.

        Args:
            x: Start column.
            y: Start row.
            rng: The mold's own random stream.
            dispersal_interval: Ticks between density checks.

        Returns:
            A new Mold.
        """
        heading = float(rng.uniform(0.0, 360.0))
        counter = int(rng.integers(dispersal_interval))
        return cls(
            x=x,
            y=y,
            heading=normalize_heading(heading),
            dispersal_counter=counter,
            rng=rng,
        )

    def update(
        self,
        index: int,
        trail: TrailField,
        foods: FoodRegistry,
        population: Population,
        config: SimulationConfig,
    ) -> None:
        """Perform one tick of sensing, steering and movement.

        Args:
            index: This mold's position in ``population``.
            trail: Trail field to sense and deposit into.
            foods: Food registry to sense and eat from.
            population: Population whose snapshot feeds dispersal.
            config: Simulation tuning.
        """
        self.dispersal_counter += 1
        if self.dispersal_counter >= config.dispersal_interval:
            self.is_dispersing = check_density(index, population, self.rng, config)
            self.dispersal_counter = 0

        self.move(config.width, config.height, config.speed)
        readings = self.sense(trail, foods, config)

        self.state = select_state(
            self.x,
            self.y,
            self.is_dispersing,
            config.width,
            config.height,
            config.edge_buffer,
        )
        match self.state:
            case MoldState.EDGE_AVOIDANCE:
                self._avoid_edges(config)
            case MoldState.DISPERSING:
                self.heading = dispersal_heading(
                    index,
                    self.heading,
                    population,
                    self.rng,
                    config,
                )
            case MoldState.TRAIL_FOLLOWING:
                self._follow_trail(readings, config.rotation_angle)
        self.heading = normalize_heading(self.heading)

        trail.deposit(self.x, self.y, config.trail_deposit)
        for food_index in foods.containing(self.x, self.y):
            foods.queue_consumption(food_index, config.food_consumption)

    def move(self, width: float, height: float, speed: float = 1.0) -> None:
        """Step along the heading, bouncing off the canvas walls.

        A step that lands on or past a side wall reflects the heading
        horizontally (``180 - heading``); past the top or bottom wall it
        reflects vertically (``-heading``).  The position is then clamped
        one unit inside the canvas.
        """
        dx, dy = step_vector(self.heading, speed)
        new_x = self.x + dx
        new_y = self.y + dy

        if new_x <= 0 or new_x >= width - 1:
            self.heading = 180.0 - self.heading
            new_x = min(max(new_x, 1.0), width - 2.0)

        if new_y <= 0 or new_y >= height - 1:
            self.heading = -self.heading
            new_y = min(max(new_y, 1.0), height - 2.0)

        self.heading = normalize_heading(self.heading)
        self.x = new_x
        self.y = new_y

    def sensor_points(
        self,
        config: SimulationConfig,
    ) -> tuple[tuple[float, float], tuple[float, float], tuple[float, float]]:
        """Return the clamped forward, left and right sensor positions."""
        w, h, dist = config.width, config.height, config.sensor_distance
        return (
            sensor_point(self.x, self.y, self.heading, dist, w, h),
            sensor_point(self.x, self.y, self.heading - config.sensor_angle, dist, w, h),
            sensor_point(self.x, self.y, self.heading + config.sensor_angle, dist, w, h),
        )

    def sense(
        self,
        trail: TrailField,
        foods: FoodRegistry,
        config: SimulationConfig,
    ) -> SensorReadings:
        """Read trail intensity plus food nutrition at each sensor."""
        values = [
            trail.sample(sx, sy) + foods.nutrition_at(sx, sy)
            for sx, sy in self.sensor_points(config)
        ]
        return SensorReadings(*values)

    # -- Steering rules --

    def _avoid_edges(self, config: SimulationConfig) -> None:
        """Turn away from nearby walls.

        Side walls rotate the heading by ``rotation_angle``.  Near the top
        or bottom the heading snaps to a diagonal pointing back into the
        canvas, keeping its leftward or rightward lean.
        """
        buffer = config.edge_buffer
        rot = config.rotation_angle

        if self.x < buffer:
            self.heading += rot
        elif self.x > config.width - buffer:
            self.heading -= rot

        heading = normalize_heading(self.heading)
        if self.y < buffer:
            self.heading = 315.0 if heading > 180.0 else 45.0
        elif self.y > config.height - buffer:
            self.heading = 135.0 if heading < 180.0 else 225.0

    def _follow_trail(self, readings: SensorReadings, rot: float) -> None:
        """Turn toward the strongest sensor reading.

        Forward strongest: hold course.  Forward weakest: turn either way
        at random.  Otherwise turn toward the stronger side; an exact
        left/right tie holds course.
        """
        f, left, right = readings
        if f > left and f > right:
            return
        if f < left and f < right:
            self.heading += rot if self.rng.random() < 0.5 else -rot
        elif left > right:
            self.heading -= rot
        elif right > left:
            self.heading += rot

