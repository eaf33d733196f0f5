"""Entry point for ``python -m moldsim``.

Loads the default YAML config, builds the simulation and opens a Pygame
window to watch the molds spread.  Click to drop food.
"""

from __future__ import annotations

import argparse
import logging
import pathlib

from moldsim.simulation.config import SimulationConfig
from moldsim.simulation.engine import Simulation
from moldsim.ui.pygame_client import PygameRenderer

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)


def _build_parser() -> argparse.ArgumentParser:
    """Return the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="moldsim",
        description="moldsim - slime mold foraging simulator",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--scale",
        type=int,
        default=1,
        help="Screen pixels per simulation unit (default: 1)",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=30,
        help="Target frames per second (default: 30)",
    )
    parser.add_argument(
        "--speed",
        type=float,
        default=30.0,
        help="Simulation ticks per second (default: 30)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )
    return parser


def main() -> None:
    """Parse CLI args, create simulation, launch renderer."""
    args = _build_parser().parse_args()

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = SimulationConfig.from_yaml(args.config)
    simulation = Simulation(config=config)

    renderer = PygameRenderer(
        simulation=simulation,
        scale=args.scale,
        ticks_per_second=args.speed,
    )
    renderer.run(fps=args.fps)


if __name__ == "__main__":
    main()
