# bodies.py
from __future__ import annotations

import logging

from softbody.config import PressureParams, SpringParams
from softbody.mesh.ring import complete_springs, generate_ring, perimeter_springs
from softbody.models import Point, Spring, Vector2

logger = logging.getLogger(__name__)


class Body:
    """A fixed set of points and the springs that drive them."""

    def __init__(self, points: list[Point], springs: list[Spring]) -> None:
        self.points = points
        self.springs = springs

    def update(self) -> None:
        for spring in self.springs:
            spring.update()

    def centroid(self) -> Vector2:
        sx = 0.0
        sy = 0.0
        for p in self.points:
            sx += p.position.x
            sy += p.position.y
        n = len(self.points)
        return Vector2(sx / n, sy / n)

    def kinetic_energy(self) -> float:
        return sum(p.kinetic_energy() for p in self.points)


class SpringBody(Body):
    """
    Ring of ``n`` points, fully connected pairwise by springs.

    With ``perimeter_only=True`` only neighbouring points are connected,
    closing the ring.
    """

    def __init__(
        self,
        n: int,
        r: float,
        x: float,
        y: float,
        *,
        perimeter_only: bool = False,
        spring_params: SpringParams | None = None,
        pop_in: bool = True,
    ) -> None:
        points = generate_ring(n, r, x, y)
        if perimeter_only:
            springs = perimeter_springs(points, spring_params, pop_in=pop_in)
        else:
            springs = complete_springs(points, spring_params, pop_in=pop_in)
        super().__init__(points, springs)
        self.perimeter_only = perimeter_only

        logger.info(
            "SpringBody at (%.2f, %.2f): %d points, %d springs (%s)",
            x,
            y,
            len(points),
            len(springs),
            "perimeter" if perimeter_only else "complete",
        )


class PressureBody(Body):
    """
    Perimeter ring of springs plus a uniform pressure term.

    After the springs run, every point is pulled toward its rest position
    relative to the current centroid. The pressure acceleration overwrites
    whatever the springs wrote, so it dominates each point's final step.
    """

    def __init__(
        self,
        n: int,
        r: float,
        x: float,
        y: float,
        mass: float | None = None,
        volume: float | None = None,
        stiffness_coefficient: float | None = None,
        *,
        spring_params: SpringParams | None = None,
        pop_in: bool = True,
    ) -> None:
        defaults = PressureParams()
        params = PressureParams(
            mass=defaults.mass if mass is None else mass,
            volume=defaults.volume if volume is None else volume,
            stiffness_coefficient=(
                defaults.stiffness_coefficient
                if stiffness_coefficient is None
                else stiffness_coefficient
            ),
        )

        points = generate_ring(n, r, x, y)
        super().__init__(points, perimeter_springs(points, spring_params, pop_in=pop_in))

        self.mass = params.mass
        self.volume = params.volume
        self.stiffness_coefficient = params.stiffness_coefficient
        self.pressure = params.pressure

        logger.info(
            "PressureBody at (%.2f, %.2f): %d points, pressure %.5f",
            x,
            y,
            len(points),
            self.pressure,
        )

    def update(self) -> None:
        super().update()

        centroid = self.centroid()
        for p in self.points:
            target = centroid + p.origin_offset
            p.acceleration = (p.position - target) * (-self.pressure)
            p.integrate()
