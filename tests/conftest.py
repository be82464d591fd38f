import math

import pytest

from softbody.bodies import Body, PressureBody, SpringBody
from softbody.models import Point, Vector2
from softbody.world import World


@pytest.fixture
def make_loose_point():
    """A world of the given size holding one spring-less point."""

    def _make(x: float, y: float, vx: float = 0.0, vy: float = 0.0, width: float = 100.0, height: float = 100.0):
        world = World(width, height)
        p = Point(x, y)
        p.velocity = Vector2(vx, vy)
        world.add(Body([p], []))
        return world, p

    return _make


@pytest.fixture
def demo_world() -> World:
    world = World(100.0, 80.0)
    world.add(SpringBody(3, 10, 10, 10))
    world.add(SpringBody(4, 10, 25, 25))
    world.add(SpringBody(5, 10, 40, 40))
    world.add(PressureBody(8, 10, 70, 40))
    return world


@pytest.fixture
def unbounded_world() -> World:
    return World(math.inf, math.inf)
