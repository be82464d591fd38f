# world.py
from __future__ import annotations

import logging
import math

import numpy as np

from softbody.bodies import Body
from softbody.config import validate_extent
from softbody.models import Point, Vector2
from softbody.types import INDICES, POSITIONS

logger = logging.getLogger(__name__)


class World:
    """
    Owns the bodies and advances them one tick at a time.

    Boundaries are the box ``[0, width] x [0, height]``. Pass ``math.inf`` for
    an extent to leave that axis unbounded.
    """

    def __init__(self, width: float = math.inf, height: float = math.inf, log_interval: int = 600) -> None:
        self.width = validate_extent("width", width)
        self.height = validate_extent("height", height)
        self.bodies: list[Body] = []
        self.steps = 0
        self.log_interval = log_interval

    def add(self, body: Body) -> Body:
        self.bodies.append(body)
        return body

    def all_points(self) -> list[Point]:
        out: list[Point] = []
        for body in self.bodies:
            out.extend(body.points)
        return out

    # ------------------------
    # Stepping
    # ------------------------

    def step(self) -> None:
        for body in self.bodies:
            body.update()

        # Clamp once all bodies have moved; clamped points are not re-integrated.
        for p in self.all_points():
            self.clamp(p)

        self.steps += 1
        if self.log_interval and self.steps % self.log_interval == 0:
            logger.debug(
                "step %d | kinetic energy %.6g", self.steps, self.kinetic_energy()
            )

    def run(self, steps: int) -> None:
        for _ in range(steps):
            self.step()

    def clamp(self, p: Point) -> None:
        """
        One-sided boundary clamp.

        An axis is clamped only when the point is on or past a wall AND still moving
        outward; points travelling back inside are left alone.
        """
        x, y = p.position
        vx, vy = p.velocity
        ax, ay = p.acceleration

        if x <= 0 and vx < 0:
            x, vx, ax = 0.0, 0.0, 0.0
        if x >= self.width and vx > 0:
            x, vx, ax = self.width, 0.0, 0.0

        if y <= 0 and vy < 0:
            y, vy, ay = 0.0, 0.0, 0.0
        if y >= self.height and vy > 0:
            y, vy, ay = self.height, 0.0, 0.0

        p.position = Vector2(x, y)
        p.velocity = Vector2(vx, vy)
        p.acceleration = Vector2(ax, ay)

    # ------------------------
    # Diagnostics
    # ------------------------

    def kinetic_energy(self) -> float:
        return sum(body.kinetic_energy() for body in self.bodies)

    def positions(self) -> POSITIONS:
        return np.array([tuple(p.position) for p in self.all_points()], dtype=np.float64).reshape(-1, 2)

    def accelerations(self) -> POSITIONS:
        return np.array(
            [tuple(p.acceleration) for p in self.all_points()], dtype=np.float64
        ).reshape(-1, 2)

    def spring_table(self) -> tuple[INDICES, POSITIONS]:
        """Spring endpoints as indices into ``all_points()``, plus rest lengths."""
        p_to_idx = {id(p): i for i, p in enumerate(self.all_points())}
        springs = [s for body in self.bodies for s in body.springs]
        pairs = np.array(
            [(p_to_idx[id(s.a)], p_to_idx[id(s.b)]) for s in springs], dtype=np.int64
        ).reshape(-1, 2)
        rest = np.array([s.rest_length for s in springs], dtype=np.float64)
        return pairs, rest

    def check_finite(self) -> None:
        for i, p in enumerate(self.all_points()):
            values = (*p.position, *p.velocity, *p.acceleration)
            if not all(math.isfinite(v) for v in values):
                logger.warning("Simulation became unstable at step %d (point %d)", self.steps, i)
                raise FloatingPointError(f"non-finite state on point {i} after step {self.steps}: {p!r}")
