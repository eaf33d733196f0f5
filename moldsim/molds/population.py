"""Population — the collection of every mold in the simulation.

The population owns the molds and a tick-start snapshot of their
positions.  Neighbour queries read the snapshot, never live positions,
so a mold that has already moved this tick does not skew another mold's
density check.  Queries are bounded: they scan at most ``cap`` molds
from a random start index, whatever the population size.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from moldsim.molds.mold import Mold

if TYPE_CHECKING:
    from numpy.random import Generator


@dataclass
class Population:
    """All molds plus their tick-start positions.

    Attributes:
        molds: Every mold, in creation order.
        positions: ``(n, 2)`` array of ``(x, y)`` captured by ``take_snapshot``.
    """

    molds: list[Mold] = field(default_factory=list)
    positions: NDArray[np.float64] = field(
        default_factory=lambda: np.zeros((0, 2), dtype=np.float64),
        repr=False,
    )

    def __len__(self) -> int:
        return len(self.molds)

    def populate(
        self,
        count: int,
        x: float,
        y: float,
        seed: int,
        dispersal_interval: int,
    ) -> None:
        """Create ``count`` molds co-located at ``(x, y)``.

        Each mold gets its own random stream spawned from ``seed`` so its
        draws do not depend on the order molds are processed in.

        Args:
            count: Number of molds to create.
            x: Shared start column.
            y: Shared start row.
            seed: Root seed for the per-mold streams.
            dispersal_interval: Ticks between density checks.
        """
        streams = np.random.SeedSequence(seed).spawn(count)
        for stream in streams:
            self.molds.append(
                Mold.at_origin(
                    x=x,
                    y=y,
                    rng=np.random.default_rng(stream),
                    dispersal_interval=dispersal_interval,
                ),
            )
        self.take_snapshot()

    def take_snapshot(self) -> None:
        """Record every mold's current position for this tick's queries."""
        self.positions = np.array(
            [(mold.x, mold.y) for mold in self.molds],
            dtype=np.float64,
        ).reshape(len(self.molds), 2)

    def sample_neighbours(
        self,
        index: int,
        cap: int,
        rng: Generator,
    ) -> Iterator[int]:
        """Yield up to ``cap`` other mold indices from a random start.

        Scans with wraparound and skips ``index`` itself.  Callers may stop
        early; the scan never visits more than the whole population.

        Args:
            index: The querying mold.
            cap: Maximum number of neighbours to yield.
            rng: Random stream used to pick the start index.
        """
        n = len(self.positions)
        if n == 0:
            return
        start = int(rng.integers(n))
        yielded = 0
        for i in range(n):
            if yielded >= cap:
                return
            other = (start + i) % n
            if other == index:
                continue
            yielded += 1
            yield other
