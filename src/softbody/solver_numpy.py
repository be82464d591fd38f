# solver_numpy.py
"""
Arena-backed stepping engine.

All points of a world live in contiguous float64 arrays and springs store
indices into them. One call to ``ArraySolver.step`` performs exactly the tick
that ``World.step`` performs, in the same order and with the same float
arithmetic, so both engines stay in lock-step.
"""

import logging
import math

from numba import njit  # type: ignore
import numpy as np

from softbody.bodies import PressureBody
from softbody.models import POP_IN_SCALE, Vector2
from softbody.types import INDICES, MASK, POSITIONS
from softbody.world import World

logger = logging.getLogger(__name__)

# ===============================
# PHYSICS KERNELS
# ===============================
# Kept sequential and without fastmath: springs sharing a point overwrite
# its acceleration, so update order is part of the result.


@njit(cache=True)  # type: ignore
def integrate_point(pos: POSITIONS, vel: POSITIONS, acc: POSITIONS, i: int) -> None:
    pos[i, 0] = pos[i, 0] + vel[i, 0]
    pos[i, 1] = pos[i, 1] + vel[i, 1]
    vel[i, 0] = vel[i, 0] + acc[i, 0]
    vel[i, 1] = vel[i, 1] + acc[i, 1]


@njit(cache=True)  # type: ignore
def update_spring(
    pos: POSITIONS,
    vel: POSITIONS,
    acc: POSITIONS,
    a: int,
    b: int,
    primed: MASK,
    s: int,
    rest_length: float,
    stiffness: float,
    mass: float,
    damping: float,
    pop_scale: float,
) -> None:
    if primed[s]:
        primed[s] = False
        pos[a, 0] = pos[a, 0] * pop_scale
        pos[a, 1] = pos[a, 1] * pop_scale

    dx = pos[b, 0] - pos[a, 0]
    dy = pos[b, 1] - pos[a, 1]
    f_net = stiffness * (math.sqrt(dx * dx + dy * dy) - rest_length)

    hx = dx * 0.5
    hy = dy * 0.5

    acc[a, 0] = hx * (f_net / mass) - vel[a, 0] * damping
    acc[a, 1] = hy * (f_net / mass) - vel[a, 1] * damping
    acc[b, 0] = hx * (-f_net / mass) - vel[b, 0] * damping
    acc[b, 1] = hy * (-f_net / mass) - vel[b, 1] * damping

    integrate_point(pos, vel, acc, a)
    integrate_point(pos, vel, acc, b)


@njit(cache=True)  # type: ignore
def apply_pressure(
    pos: POSITIONS,
    vel: POSITIONS,
    acc: POSITIONS,
    offset: POSITIONS,
    start: int,
    end: int,
    pressure: float,
) -> None:
    sx = 0.0
    sy = 0.0
    for i in range(start, end):
        sx += pos[i, 0]
        sy += pos[i, 1]
    n = end - start
    cx = sx / n
    cy = sy / n

    for i in range(start, end):
        acc[i, 0] = (pos[i, 0] - (cx + offset[i, 0])) * (-pressure)
        acc[i, 1] = (pos[i, 1] - (cy + offset[i, 1])) * (-pressure)
        integrate_point(pos, vel, acc, i)


@njit(cache=True)  # type: ignore
def clamp_to_bounds(
    pos: POSITIONS,
    vel: POSITIONS,
    acc: POSITIONS,
    width: float,
    height: float,
) -> None:
    """One-sided clamp: only points on or past a wall and still moving outward."""
    for i in range(len(pos)):
        if pos[i, 0] <= 0 and vel[i, 0] < 0:
            pos[i, 0] = 0.0
            vel[i, 0] = 0.0
            acc[i, 0] = 0.0
        if pos[i, 0] >= width and vel[i, 0] > 0:
            pos[i, 0] = width
            vel[i, 0] = 0.0
            acc[i, 0] = 0.0

        if pos[i, 1] <= 0 and vel[i, 1] < 0:
            pos[i, 1] = 0.0
            vel[i, 1] = 0.0
            acc[i, 1] = 0.0
        if pos[i, 1] >= height and vel[i, 1] > 0:
            pos[i, 1] = height
            vel[i, 1] = 0.0
            acc[i, 1] = 0.0


@njit(cache=True)  # type: ignore
def step_kernel(
    pos: POSITIONS,
    vel: POSITIONS,
    acc: POSITIONS,
    offset: POSITIONS,
    spring_i: INDICES,
    spring_j: INDICES,
    spring_params: POSITIONS,
    primed: MASK,
    body_springs: INDICES,
    body_points: INDICES,
    body_pressure: POSITIONS,
    width: float,
    height: float,
    pop_scale: float,
) -> None:
    for b in range(len(body_springs)):
        for s in range(body_springs[b, 0], body_springs[b, 1]):
            update_spring(
                pos,
                vel,
                acc,
                spring_i[s],
                spring_j[s],
                primed,
                s,
                spring_params[s, 0],
                spring_params[s, 1],
                spring_params[s, 2],
                spring_params[s, 3],
                pop_scale,
            )
        if not math.isnan(body_pressure[b]):
            apply_pressure(
                pos, vel, acc, offset, body_points[b, 0], body_points[b, 1], body_pressure[b]
            )

    clamp_to_bounds(pos, vel, acc, width, height)


# ===============================
# SOLVER CLASS
# ===============================


class ArraySolver:
    """
    Snapshot of a ``World`` in array form.

    The arrays are the source of truth once the solver is built; call
    ``write_back`` to copy the state into the world's Point objects.
    """

    def __init__(self, world: World) -> None:
        self.world = world
        self.points = world.all_points()

        self.pos = world.positions()
        self.vel = np.array([tuple(p.velocity) for p in self.points], dtype=np.float64).reshape(-1, 2)
        self.acc = world.accelerations()
        self.offset = np.array(
            [tuple(p.origin_offset) for p in self.points], dtype=np.float64
        ).reshape(-1, 2)

        # Springs
        springs = [s for body in world.bodies for s in body.springs]
        pairs, _ = world.spring_table()
        self.spring_i = np.ascontiguousarray(pairs[:, 0])
        self.spring_j = np.ascontiguousarray(pairs[:, 1])
        self.spring_params = np.array(
            [[s.rest_length, s.stiffness, s.mass, s.damping] for s in springs], dtype=np.float64
        ).reshape(-1, 4)
        self.primed = np.array([s.primed for s in springs], dtype=np.bool_)

        # Per-body [start, end) ranges into the spring and point arenas
        body_springs: list[tuple[int, int]] = []
        body_points: list[tuple[int, int]] = []
        body_pressure: list[float] = []
        s_start = p_start = 0
        for body in world.bodies:
            body_springs.append((s_start, s_start + len(body.springs)))
            body_points.append((p_start, p_start + len(body.points)))
            body_pressure.append(body.pressure if isinstance(body, PressureBody) else math.nan)
            s_start += len(body.springs)
            p_start += len(body.points)
        self.body_springs = np.array(body_springs, dtype=np.int64).reshape(-1, 2)
        self.body_points = np.array(body_points, dtype=np.int64).reshape(-1, 2)
        self.body_pressure = np.array(body_pressure, dtype=np.float64)

        self.width = world.width
        self.height = world.height
        self.steps = world.steps

        logger.info(
            "ArraySolver initialized: %d bodies, %d points, %d springs",
            len(world.bodies),
            len(self.points),
            len(springs),
        )

    def step(self) -> None:
        step_kernel(
            self.pos,
            self.vel,
            self.acc,
            self.offset,
            self.spring_i,
            self.spring_j,
            self.spring_params,
            self.primed,
            self.body_springs,
            self.body_points,
            self.body_pressure,
            self.width,
            self.height,
            POP_IN_SCALE,
        )
        self.steps += 1

    def run(self, steps: int) -> None:
        for _ in range(steps):
            self.step()

    def kinetic_energy(self) -> float:
        return float(np.sum(self.vel[:, 0] ** 2 + self.vel[:, 1] ** 2))

    def pick(self, x: float, y: float, radius: float) -> int | None:
        """Index of the last point within ``radius`` of ``(x, y)``, if any."""
        dist = np.sqrt((self.pos[:, 0] - x) ** 2 + (self.pos[:, 1] - y) ** 2)
        hits = np.nonzero(dist < radius)[0]
        return int(hits[-1]) if len(hits) else None

    def check_finite(self) -> None:
        for name, arr in (("position", self.pos), ("velocity", self.vel), ("acceleration", self.acc)):
            if not np.isfinite(arr).all():
                logger.warning("Simulation became unstable at step %d", self.steps)
                raise FloatingPointError(f"non-finite {name} after step {self.steps}")

    def write_back(self) -> None:
        """Copy arena state into the world's Point and Spring objects."""
        for i, p in enumerate(self.points):
            p.position = Vector2(self.pos[i, 0], self.pos[i, 1])
            p.velocity = Vector2(self.vel[i, 0], self.vel[i, 1])
            p.acceleration = Vector2(self.acc[i, 0], self.acc[i, 1])

        springs = [s for body in self.world.bodies for s in body.springs]
        for s, primed in zip(springs, self.primed):
            s.primed = bool(primed)

        self.world.steps = self.steps
