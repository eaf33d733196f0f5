"""FoodRegistry — the simulation's collection of food sources.

Handles spawn validation, the summed nutrition signal molds sense, and
the consumption buffer.  Molds queue what they eat during a tick and the
registry applies it in one pass afterwards, so every mold senses the
same footprints no matter which order they ran in.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from moldsim.food.source import FoodSource

logger = logging.getLogger(__name__)


@dataclass
class FoodRegistry:
    """All food sources within a canvas.

    Attributes:
        width: Canvas width used to validate spawns.
        height: Canvas height used to validate spawns.
        default_size: Size given to spawns that do not name one.
        min_size: ``min_size`` passed to new food.
        nutrition_value: ``nutrition_value`` passed to new food.
        nutrition_floor: ``nutrition_floor`` passed to new food.
        regeneration_rate: ``regeneration_rate`` passed to new food.
        sources: Every food ever spawned, active or not.
    """

    width: int
    height: int
    default_size: float = 50.0
    min_size: float = 5.0
    nutrition_value: float = 255.0
    nutrition_floor: float = 0.3
    regeneration_rate: float = 1.0
    sources: list[FoodSource] = field(default_factory=list)
    _queued: dict[int, float] = field(default_factory=dict, init=False, repr=False)

    def __len__(self) -> int:
        return len(self.sources)

    @property
    def active(self) -> list[FoodSource]:
        """Food that can still be sensed and eaten."""
        return [food for food in self.sources if food.active]

    def in_bounds(self, x: float, y: float) -> bool:
        """Return True if ``(x, y)`` lies on the canvas (edges included)."""
        return 0 <= x <= self.width and 0 <= y <= self.height

    def spawn(self, x: float, y: float, size: float | None = None) -> FoodSource | None:
        """Create and register a new active food source.

        Args:
            x: Centre column.
            y: Centre row.
            size: Side length; defaults to ``default_size``.

        Returns:
            The new FoodSource, or None if the point is off-canvas or the
            size is not positive.
        """
        size = self.default_size if size is None else size
        if not self.in_bounds(x, y) or size <= 0:
            logger.debug("Rejected food spawn at (%s, %s) size %s", x, y, size)
            return None

        food = FoodSource(
            x=x,
            y=y,
            size=size,
            min_size=self.min_size,
            nutrition_value=self.nutrition_value,
            nutrition_floor=self.nutrition_floor,
            regeneration_rate=self.regeneration_rate,
        )
        self.sources.append(food)
        logger.info("Food spawned at (%.1f, %.1f) size %.1f", x, y, size)
        return food

    def respawn(
        self,
        index: int,
        x: float,
        y: float,
        size: float | None = None,
    ) -> bool:
        """Reactivate an existing food source at a new centre.

        Args:
            index: Position of the food in ``sources``.
            x: New centre column.
            y: New centre row.
            size: New size; defaults to the food's original size.

        Returns:
            False if the index is unknown, the point is off-canvas or the
            size is not positive.
        """
        bad_size = size is not None and size <= 0
        if not 0 <= index < len(self.sources) or not self.in_bounds(x, y) or bad_size:
            logger.debug(
                "Rejected food respawn #%s at (%s, %s) size %s",
                index,
                x,
                y,
                size,
            )
            return False
        food = self.sources[index]
        food.respawn(x, y, size)
        logger.info("Food #%d respawned: %s", index, food.info())
        return True

    def update(self) -> None:
        """Run the per-tick regeneration/deactivation step on every food."""
        for food in self.sources:
            was_active = food.active
            food.update()
            if was_active and not food.active:
                logger.info(
                    "Food at (%.1f, %.1f) used up (size %.2f)",
                    food.x,
                    food.y,
                    food.size,
                )

    def nutrition_at(self, x: float, y: float) -> float:
        """Return the summed nutrition of every active food at ``(x, y)``."""
        return sum(food.nutrition_at(x, y) for food in self.sources if food.active)

    def containing(self, x: float, y: float) -> list[int]:
        """Return indices of active food whose footprint covers ``(x, y)``."""
        return [i for i, food in enumerate(self.sources) if food.contains(x, y)]

    def queue_consumption(self, index: int, amount: float) -> None:
        """Buffer ``amount`` to be eaten from food ``index`` at ``commit()``."""
        self._queued[index] = self._queued.get(index, 0.0) + amount

    def commit(self) -> None:
        """Apply all queued consumption in registry order and clear the queue."""
        for index in sorted(self._queued):
            self.sources[index].consume(self._queued[index])
        self._queued.clear()
