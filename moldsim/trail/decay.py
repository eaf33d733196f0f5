"""Decay rules for the trail grid.

Operate in-place on the raw NumPy array inside ``TrailField``.  Kept
apart from ``field.py`` so the fade model can be swapped without
touching deposit bookkeeping.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray


def evaporate(grid: NDArray[np.float64], rate: float) -> None:
    """Scale every cell by ``1 - rate``.

    Mirrors a translucent background wash over the previous frame: each
    tick a fixed fraction of every trail fades.

    Args:
        grid: Trail intensities, modified in-place.
        rate: Fraction lost per tick (0.0-1.0).
    """
    grid *= 1.0 - rate


def attenuate(grid: NDArray[np.float64], amount: float) -> None:
    """Subtract a fixed amount from every cell, flooring at zero.

    Args:
        grid: Trail intensities, modified in-place.
        amount: Intensity removed per tick.
    """
    grid -= amount
    np.maximum(grid, 0.0, out=grid)
