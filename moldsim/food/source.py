"""FoodSource — a square, depletable, self-regenerating food patch.

A food source adds a *nutrition* signal to any sensor that falls inside
its square footprint.  Molds standing on it eat it down; when left alone
for a tick it grows back toward its original size.  Once it shrinks to
``min_size`` it is used up for good unless respawned from outside.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field


@dataclass
class FoodSource:
    """A single food square.

    Attributes:
        x: Centre column.
        y: Centre row.
        size: Current side length of the square.
        original_size: Side length at spawn; also the regeneration cap.
        min_size: Size at or below which the food is deactivated.
        nutrition_value: Signal strength at the centre.
        nutrition_floor: Fraction of ``nutrition_value`` at the edge.
        regeneration_rate: Size regained per untouched tick.
        active: Whether the food is still available.
        being_eaten: Whether any mold ate from it since the last update.
    """

    x: float
    y: float
    size: float = 50.0
    original_size: float = field(init=False)
    min_size: float = 5.0
    nutrition_value: float = 255.0
    nutrition_floor: float = 0.3
    regeneration_rate: float = 1.0
    active: bool = True
    being_eaten: bool = False

    def __post_init__(self) -> None:
        """Remember the spawn size as the regeneration ceiling."""
        self.original_size = self.size

    @property
    def max_size(self) -> float:
        """Largest size the food can regrow to."""
        return self.original_size

    @property
    def colour(self) -> tuple[int, int, int]:
        """Grey level for display: white when full, black when eaten away."""
        level = int(255 * self.size / self.original_size) if self.original_size else 0
        level = max(0, min(255, level))
        return (level, level, level)

    def update(self) -> None:
        """Advance the food by one tick.

        ``being_eaten`` at this point reports whether any mold ate from
        the food during the tick just computed.  Untouched food regrows
        by ``regeneration_rate``; the flag is then cleared for the next
        tick, and food at or below ``min_size`` is deactivated.
        """
        if not self.active:
            return

        if not self.being_eaten and self.size < self.max_size:
            self.size = min(self.size + self.regeneration_rate, self.max_size)

        self.being_eaten = False

        if self.size <= self.min_size:
            self.active = False

    def consume(self, amount: float) -> bool:
        """Eat ``amount`` off the food.

        Args:
            amount: Size removed (>= 0).

        Returns:
            True if some food remains afterwards, False if the food is
            inactive or now fully eaten.

        Raises:
            ValueError: If ``amount`` is negative.
        """
        if amount < 0:
            msg = f"cannot consume a negative amount: {amount}"
            raise ValueError(msg)
        if not self.active:
            return False

        self.being_eaten = True
        self.size = max(0.0, self.size - amount)
        return self.size > 0

    def contains(self, x: float, y: float) -> bool:
        """Return True if ``(x, y)`` lies inside the active footprint."""
        if not self.active:
            return False
        half = self.size / 2
        return self.x - half <= x <= self.x + half and self.y - half <= y <= self.y + half

    def nutrition_at(self, x: float, y: float) -> float:
        """Return the nutrition signal sensed at ``(x, y)``.

        Zero outside the footprint.  Inside it falls off linearly with
        Euclidean distance from the centre, from ``nutrition_value`` at
        the centre to ``nutrition_floor * nutrition_value`` at half the
        side length.  Corners lie further out than half the side and
        continue the same line.
        """
        if not self.contains(x, y):
            return 0.0

        half = self.size / 2
        if half <= 0:
            return self.nutrition_value
        distance = math.hypot(x - self.x, y - self.y)
        factor = 1.0 - (1.0 - self.nutrition_floor) * distance / half
        return self.nutrition_value * factor

    def respawn(self, x: float, y: float, size: float | None = None) -> None:
        """Reactivate the food at a new centre.

        Args:
            x: New centre column.
            y: New centre row.
            size: New size; defaults to ``original_size``.
        """
        self.x = x
        self.y = y
        if size is None:
            self.size = self.original_size
        else:
            self.size = max(0.0, min(size, self.original_size))
        self.active = True
        self.being_eaten = False

    def info(self) -> dict[str, float | bool]:
        """Return a read-only summary for display or logging."""
        return {
            "x": self.x,
            "y": self.y,
            "size": self.size,
            "active": self.active,
            "nutrition_value": self.nutrition_value,
        }
