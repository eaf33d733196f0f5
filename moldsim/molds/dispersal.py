"""Dispersal — density-triggered repulsion for over-crowded molds.

Thousands of molds drawn to one food source pile up on a single spot.
Every few ticks each mold samples a bounded slice of the population; if
enough of the sample sits within ``dispersal_radius`` it switches into
dispersal and, while dispersing, steers gradually away from whoever is
close.

Both passes look at a capped number of neighbours, so their cost does
not grow with the population.  The count is therefore an estimate: a
dense cluster can be missed when the sample falls elsewhere.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from moldsim.molds.heading import angle_difference

if TYPE_CHECKING:
    from numpy.random import Generator

    from moldsim.molds.population import Population
    from moldsim.simulation.config import SimulationConfig


def check_density(
    index: int,
    population: Population,
    rng: Generator,
    config: SimulationConfig,
) -> bool:
    """Return True if mold ``index`` sits in a cluster worth leaving.

    Samples up to ``density_check_cap`` other molds and counts those
    strictly inside ``dispersal_radius`` using squared distances.  Stops
    as soon as ``min_cluster_size`` is reached.

    Args:
        index: The mold being checked.
        population: Population whose snapshot is read.
        rng: The mold's random stream.
        config: Dispersal tuning.
    """
    positions = population.positions
    x, y = positions[index]
    radius_sq = config.dispersal_radius * config.dispersal_radius

    nearby = 0
    for other in population.sample_neighbours(index, config.density_check_cap, rng):
        dx = x - positions[other, 0]
        dy = y - positions[other, 1]
        if dx * dx + dy * dy < radius_sq:
            nearby += 1
            if nearby >= config.min_cluster_size:
                return True
    return False


def dispersal_heading(
    index: int,
    heading: float,
    population: Population,
    rng: Generator,
    config: SimulationConfig,
) -> float:
    """Return ``heading`` nudged away from nearby molds.

    Each neighbour inside ``dispersal_radius`` (and further than
    ``sqrt(dispersal_min_dist_sq)``) contributes a unit vector pointing
    away from it, weighted from ``dispersal_strength`` at distance 0 down
    to 0 at the radius.  The averaged vector becomes a target heading and
    ``dispersal_blend`` of the shortest turn toward it is applied.

    Args:
        index: The dispersing mold.
        heading: Its current heading in degrees.
        population: Population whose snapshot is read.
        rng: The mold's random stream.
        config: Dispersal tuning.

    Returns:
        The new, un-normalized heading; unchanged if nobody was close.
    """
    positions = population.positions
    x, y = positions[index]
    radius = config.dispersal_radius
    radius_sq = radius * radius

    push_x = 0.0
    push_y = 0.0
    count = 0
    for other in population.sample_neighbours(index, config.force_check_cap, rng):
        dx = x - positions[other, 0]
        dy = y - positions[other, 1]
        dist_sq = dx * dx + dy * dy
        if config.dispersal_min_dist_sq < dist_sq < radius_sq:
            distance = math.sqrt(dist_sq)
            strength = config.dispersal_strength * (1.0 - distance / radius)
            push_x += dx / distance * strength
            push_y += dy / distance * strength
            count += 1

    if count == 0:
        return heading

    push_x /= count
    push_y /= count
    target = math.degrees(math.atan2(push_y, push_x))
    return heading + angle_difference(target, heading) * config.dispersal_blend
