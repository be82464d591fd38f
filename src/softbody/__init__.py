"""
Soft Body Simulation Package

A discrete-time 2D spring-mass simulation: rings of point masses joined by
damped springs, with an optional internal pressure term (gas-filled polygon
model) and one-sided clamping at the world boundaries.
"""

from .bodies import Body, PressureBody, SpringBody
from .config import PressureParams, SimConfig, SpringParams
from .interaction import DragController
from .models import Point, Spring, Vector2
from .world import World

__version__ = "0.1.0"

__all__ = [
    "Vector2",
    "Point",
    "Spring",
    "Body",
    "SpringBody",
    "PressureBody",
    "World",
    "DragController",
    "SpringParams",
    "PressureParams",
    "SimConfig",
]
