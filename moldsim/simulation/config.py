"""Config — load simulation parameters from YAML files.

Every tunable constant (canvas size, sensor geometry, dispersal tuning,
food lifecycle rates, trail decay) lives in one dataclass.  Values are
read once when the simulation is built and never change afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path

import yaml

_DECAY_MODES = ("multiplicative", "subtractive")


@dataclass
class SimulationConfig:
    """Top-level simulation configuration.

    Attributes:
        seed: RNG seed for deterministic replay.
        width: Canvas width in simulation units.
        height: Canvas height in simulation units.
        num_molds: Number of molds created at start-up.
        origin_x: Shared start column for every mold (random if None).
        origin_y: Shared start row for every mold (random if None).
        speed: Distance a mold travels per tick.
        rotation_angle: Fixed turn in degrees used by every steering rule.
        sensor_angle: Angular offset of the left/right sensors in degrees.
        sensor_distance: How far ahead of the mold the sensors sit.
        edge_buffer: Distance from a wall at which edge avoidance kicks in.
        dispersal_interval: Ticks between density checks per mold.
        dispersal_radius: Neighbourhood radius for density and repulsion.
        min_cluster_size: Neighbour count that switches dispersal on.
        dispersal_strength: Repulsion weight at zero distance.
        dispersal_blend: Fraction of the heading error applied per tick.
        dispersal_min_dist_sq: Squared distance below which a neighbour is
            ignored by the repulsion force.
        density_check_cap: Molds sampled per density check.
        force_check_cap: Molds sampled per repulsion pass.
        trail_decay_mode: ``"multiplicative"`` or ``"subtractive"``.
        trail_decay_rate: Fraction (or absolute amount) removed per tick.
        trail_deposit: Intensity a mold leaves behind each tick.
        trail_max_intensity: Saturation cap for trail cells.
        food_default_size: Side length used when a spawn gives no size.
        food_min_size: Size at or below which food is used up.
        food_nutrition: Sensor signal at the centre of a food square.
        food_nutrition_floor: Fraction of ``food_nutrition`` at the edge.
        food_regen_rate: Size regained per untouched tick.
        food_consumption: Size a mold eats per tick when standing on food.
    """

    seed: int = 42
    width: int = 800
    height: int = 800
    num_molds: int = 5000
    origin_x: float | None = None
    origin_y: float | None = None
    speed: float = 1.0

    # Steering
    rotation_angle: float = 45.0
    sensor_angle: float = 45.0
    sensor_distance: float = 10.0
    edge_buffer: float = 20.0

    # Dispersal
    dispersal_interval: int = 10
    dispersal_radius: float = 25.0
    min_cluster_size: int = 8
    dispersal_strength: float = 2.0
    dispersal_blend: float = 0.2
    dispersal_min_dist_sq: float = 1.0
    density_check_cap: int = 50
    force_check_cap: int = 20

    # Trail field
    trail_decay_mode: str = "multiplicative"
    trail_decay_rate: float = 5.0 / 255.0
    trail_deposit: float = 255.0
    trail_max_intensity: float = 255.0

    # Food
    food_default_size: float = 50.0
    food_min_size: float = 5.0
    food_nutrition: float = 255.0
    food_nutrition_floor: float = 0.3
    food_regen_rate: float = 1.0
    food_consumption: float = 1.0

    def __post_init__(self) -> None:
        """Reject settings the tick loop cannot run with."""
        if self.width < 3 or self.height < 3:
            msg = f"canvas must be at least 3x3, got {self.width}x{self.height}"
            raise ValueError(msg)
        if self.num_molds < 0:
            msg = f"num_molds must be >= 0, got {self.num_molds}"
            raise ValueError(msg)
        if self.origin_x is not None and not 0 <= self.origin_x < self.width:
            msg = f"origin_x {self.origin_x} outside [0, {self.width})"
            raise ValueError(msg)
        if self.origin_y is not None and not 0 <= self.origin_y < self.height:
            msg = f"origin_y {self.origin_y} outside [0, {self.height})"
            raise ValueError(msg)
        for name in ("speed", "sensor_distance", "trail_deposit"):
            if getattr(self, name) < 0:
                msg = f"{name} must be >= 0, got {getattr(self, name)}"
                raise ValueError(msg)
        if self.food_default_size <= 0:
            msg = f"food_default_size must be > 0, got {self.food_default_size}"
            raise ValueError(msg)
        for name in ("food_min_size", "food_regen_rate", "food_consumption"):
            if getattr(self, name) < 0:
                msg = f"{name} must be >= 0, got {getattr(self, name)}"
                raise ValueError(msg)
        if self.dispersal_interval < 1:
            msg = f"dispersal_interval must be >= 1, got {self.dispersal_interval}"
            raise ValueError(msg)
        if not 0.0 <= self.dispersal_blend <= 1.0:
            msg = f"dispersal_blend must lie in [0, 1], got {self.dispersal_blend}"
            raise ValueError(msg)
        if self.dispersal_min_dist_sq <= 0:
            msg = "dispersal_min_dist_sq must be strictly positive"
            raise ValueError(msg)
        if self.trail_decay_mode not in _DECAY_MODES:
            msg = (
                f"unknown trail_decay_mode {self.trail_decay_mode!r}, "
                f"expected one of {_DECAY_MODES}"
            )
            raise ValueError(msg)
        if self.trail_decay_rate < 0 or (
            self.trail_decay_mode == "multiplicative" and self.trail_decay_rate > 1
        ):
            msg = f"trail_decay_rate out of range: {self.trail_decay_rate}"
            raise ValueError(msg)

    @classmethod
    def from_yaml(cls, path: str | Path) -> SimulationConfig:
        """Load configuration from a YAML file.

        Keys missing from the file keep their dataclass defaults.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated SimulationConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
            ValueError: If the file names an option that does not exist.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            msg = f"unknown config option(s) in {path}: {', '.join(unknown)}"
            raise ValueError(msg)

        return cls(**data)
