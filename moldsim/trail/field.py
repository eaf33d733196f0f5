"""TrailField — the shared, decaying trail intensity grid.

Intensities live in a single NumPy 2D array indexed ``grid[y, x]``.  A
continuous point ``(x, y)`` reads and writes the cell it falls in.

Deposits never touch the live grid directly.  They accumulate in a
pending buffer and are merged by ``commit()`` once every mold has acted,
so all sensors in a tick read the same field regardless of the order
in which molds are processed.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from moldsim.trail.decay import attenuate, evaporate


@dataclass
class TrailField:
    """Scalar trail intensity over the simulation plane.

    Attributes:
        width: Grid columns (canvas width).
        height: Grid rows (canvas height).
        decay_rate: Fraction (multiplicative) or amount (subtractive)
            removed from every cell per tick.
        decay_mode: ``"multiplicative"`` or ``"subtractive"``.
        max_intensity: Cap applied when deposits are merged.
        grid: Committed intensities (>= 0).
    """

    width: int
    height: int
    decay_rate: float = 5.0 / 255.0
    decay_mode: str = "multiplicative"
    max_intensity: float = 255.0
    grid: NDArray[np.float64] = field(init=False, repr=False)
    _pending: NDArray[np.float64] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Allocate the live grid and the deposit buffer, all zeroed."""
        self.grid = np.zeros((self.height, self.width), dtype=np.float64)
        self._pending = np.zeros_like(self.grid)

    def _cell(self, x: float, y: float) -> tuple[int, int]:
        """Map a continuous point to ``(row, column)``.

        Raises:
            IndexError: If the point lies outside the grid.
        """
        if not (0 <= x < self.width and 0 <= y < self.height):
            msg = f"({x}, {y}) out of bounds for {self.width}x{self.height}"
            raise IndexError(msg)
        return math.floor(y), math.floor(x)

    def sample(self, x: float, y: float) -> float:
        """Read the committed intensity at a point.

        Args:
            x: Column coordinate.
            y: Row coordinate.

        Returns:
            Intensity as of the last ``commit()``.
        """
        return float(self.grid[self._cell(x, y)])

    def deposit(self, x: float, y: float, amount: float) -> None:
        """Buffer an intensity deposit at a point.

        The deposit becomes visible to ``sample`` only after ``commit()``.

        Args:
            x: Column coordinate.
            y: Row coordinate.
            amount: Quantity to add (must be >= 0).
        """
        self._pending[self._cell(x, y)] += amount

    def commit(self) -> None:
        """Merge buffered deposits into the grid and clear the buffer."""
        np.add(self.grid, self._pending, out=self.grid)
        np.minimum(self.grid, self.max_intensity, out=self.grid)
        self._pending.fill(0.0)

    def decay(self) -> None:
        """Fade every cell by one tick's worth of decay."""
        if self.decay_mode == "subtractive":
            attenuate(self.grid, self.decay_rate)
        else:
            evaporate(self.grid, self.decay_rate)

    def pending_total(self) -> float:
        """Return the sum of deposits waiting for ``commit()``."""
        return float(self._pending.sum())
