# models.py
from __future__ import annotations

from collections.abc import Iterator
import math

from softbody.config import SpringParams

POP_IN_SCALE = 1.1


class Vector2:
    """Immutable 2D vector. Every operation returns a new value."""

    __slots__ = ["x", "y"]

    def __init__(self, x: float, y: float) -> None:
        object.__setattr__(self, "x", float(x))
        object.__setattr__(self, "y", float(y))

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("Vector2 is immutable")

    @classmethod
    def zero(cls) -> Vector2:
        return cls(0.0, 0.0)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __repr__(self) -> str:
        return f"Vector2({self.x!r}, {self.y!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector2):
            return NotImplemented
        return self.x == other.x and self.y == other.y

    def __hash__(self) -> int:
        return hash((self.x, self.y))

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Vector2:
        return Vector2(self.x * scalar, self.y * scalar)

    def __rmul__(self, scalar: float) -> Vector2:  # Handles: scalar * vector
        return self.__mul__(scalar)

    def __truediv__(self, scalar: float) -> Vector2:
        return Vector2(self.x / scalar, self.y / scalar)

    def __neg__(self) -> Vector2:
        return Vector2(-self.x, -self.y)

    def multiply(self, other: Vector2) -> Vector2:
        """Element-wise product."""
        return Vector2(self.x * other.x, self.y * other.y)

    def dot(self, other: Vector2) -> float:
        return self.x * other.x + self.y * other.y

    def distance_to(self, other: Vector2) -> float:
        dx = other.x - self.x
        dy = other.y - self.y
        return math.sqrt(dx * dx + dy * dy)

    def length(self) -> float:
        return self.distance_to(Vector2.zero())

    def normalize(self) -> Vector2:
        length = self.length()
        if length == 0:
            raise ZeroDivisionError("cannot normalize a zero-length Vector2")
        return Vector2(self.x / length, self.y / length)


class Point:
    """
    A simulated mass point.

    ``origin_offset`` is the displacement from the owning body's center at
    construction time and never changes afterwards.
    """

    def __init__(self, x: float, y: float, origin_offset: Vector2 | None = None) -> None:
        self.position = Vector2(x, y)
        self.origin_offset = origin_offset if origin_offset is not None else Vector2.zero()
        self.velocity = Vector2.zero()
        self.acceleration = Vector2.zero()

    def __repr__(self) -> str:
        return f"Point(position={self.position!r}, velocity={self.velocity!r})"

    def integrate(self) -> None:
        """Semi-implicit Euler step. Acceleration is left as-is."""
        self.position = self.position + self.velocity
        self.velocity = self.velocity + self.acceleration

    def kinetic_energy(self) -> float:
        return self.velocity.length() ** 2


class Spring:
    """
    Damped linear spring between two points it does not own.

    Each update OVERWRITES the acceleration of both endpoints and then
    integrates them, so a point shared by several springs ends the pass with
    the acceleration written by the last spring that touched it.
    """

    def __init__(
        self,
        a: Point,
        b: Point,
        params: SpringParams | None = None,
        pop_in: bool = True,
    ) -> None:
        params = params if params is not None else SpringParams()
        self.a = a
        self.b = b
        self.rest_length = a.position.distance_to(b.position)
        self.stiffness = params.stiffness
        self.mass = params.mass
        self.damping = params.damping
        # primed -> fired, exactly once
        self.primed = pop_in

    def __repr__(self) -> str:
        return f"Spring(rest_length={self.rest_length!r}, primed={self.primed!r})"

    def length(self) -> float:
        return self.a.position.distance_to(self.b.position)

    def strain(self) -> float:
        return abs(self.length() - self.rest_length)

    def update(self) -> None:
        a, b = self.a, self.b

        if self.primed:
            self.primed = False
            a.position = a.position * POP_IN_SCALE

        f_net = self.stiffness * (self.length() - self.rest_length)
        d = (b.position - a.position) * 0.5

        a.acceleration = d * (f_net / self.mass) - a.velocity * self.damping
        b.acceleration = d * (-f_net / self.mass) - b.velocity * self.damping

        a.integrate()
        b.integrate()
