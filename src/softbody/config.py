"""
Construction defaults for springs and pressure bodies, and the settings of the
interactive demo. Every dataclass validates itself on construction so a bad
value fails before any physics runs.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
import math

_ALLOWED_ENGINES = {
    "object",
    "array",
}


@dataclass(frozen=True)
class SpringParams:
    stiffness: float = 0.001
    mass: float = 1.0
    damping: float = 0.05

    def __post_init__(self) -> None:
        if not self.mass > 0:
            raise ValueError(f"spring mass must be positive, got {self.mass}")
        if self.stiffness < 0:
            raise ValueError(f"spring stiffness must be non-negative, got {self.stiffness}")
        if self.damping < 0:
            raise ValueError(f"spring damping must be non-negative, got {self.damping}")


@dataclass(frozen=True)
class PressureParams:
    mass: float = 1.0
    volume: float = 1.0
    stiffness_coefficient: float = 0.005

    def __post_init__(self) -> None:
        if not self.mass > 0:
            raise ValueError(f"pressure mass must be positive, got {self.mass}")
        if not self.volume > 0:
            raise ValueError(f"pressure volume must be positive, got {self.volume}")
        if self.stiffness_coefficient < 0:
            raise ValueError(
                f"stiffness_coefficient must be non-negative, got {self.stiffness_coefficient}"
            )

    @property
    def pressure(self) -> float:
        return self.mass * self.volume * self.stiffness_coefficient


@dataclass
class SimConfig:
    width_px: int = 1000
    height_px: int = 800
    pixels_per_unit: float = 10.0
    pick_radius: float = 2.0
    target_fps: int = 60
    engine: str = "object"
    log_interval: int = 600

    def __post_init__(self) -> None:
        if self.width_px <= 0 or self.height_px <= 0:
            raise ValueError(f"window size must be positive, got {self.width_px}x{self.height_px}")
        if not self.pixels_per_unit > 0:
            raise ValueError(f"pixels_per_unit must be positive, got {self.pixels_per_unit}")
        if not self.pick_radius > 0:
            raise ValueError(f"pick_radius must be positive, got {self.pick_radius}")
        if self.target_fps <= 0:
            raise ValueError(f"target_fps must be positive, got {self.target_fps}")
        if self.engine not in _ALLOWED_ENGINES:
            raise ValueError(
                f"unknown engine {self.engine!r}, expected one of {sorted(_ALLOWED_ENGINES)}"
            )

    @property
    def world_width(self) -> float:
        return self.width_px / self.pixels_per_unit

    @property
    def world_height(self) -> float:
        return self.height_px / self.pixels_per_unit

    def copy(self, **changes: object) -> SimConfig:
        return replace(self, **changes)


def validate_extent(name: str, value: float) -> float:
    value = float(value)
    if math.isnan(value) or value <= 0:
        raise ValueError(f"world {name} must be positive, got {value}")
    return value
