import math

import numpy as np
import pytest

from softbody.bodies import PressureBody, SpringBody
from softbody.models import Vector2
from softbody.world import World


@pytest.mark.parametrize("width, height", [(0, 10), (10, 0), (-5, 10), (10, -1), (math.nan, 10)])
def test_world_rejects_non_positive_extent(width, height):
    with pytest.raises(ValueError):
        World(width, height)


def test_all_points_is_body_then_point_order():
    world = World(100, 100)
    a = world.add(SpringBody(3, 10, 10, 10))
    b = world.add(PressureBody(5, 10, 50, 50))
    assert world.all_points() == a.points + b.points


# ------------------------
# Boundary clamp
# ------------------------


def test_clamp_point_moving_out_of_left_wall(make_loose_point):
    world, p = make_loose_point(-1, 5, vx=-0.5)
    p.acceleration = Vector2(-0.1, 0.2)

    world.clamp(p)

    assert p.position == Vector2(0, 5)
    assert p.velocity.x == 0
    assert p.acceleration.x == 0
    # the other axis is untouched
    assert p.acceleration.y == 0.2


def test_step_clamps_after_update(make_loose_point):
    world, p = make_loose_point(-1, 5, vx=-0.5)
    world.step()
    assert p.position == Vector2(0, 5)
    assert p.velocity == Vector2(0, 0)
    assert world.steps == 1


def test_point_moving_inward_is_not_clamped(make_loose_point):
    world, p = make_loose_point(-1, 105, vx=0.5, vy=-0.5)
    world.step()
    assert p.position == Vector2(-1, 105)
    assert p.velocity == Vector2(0.5, -0.5)


@pytest.mark.parametrize(
    "start, velocity, expected",
    [
        ((105, 5), (1, 0), (100, 5)),
        ((5, 105), (0, 2), (5, 100)),
        ((5, -3), (0, -2), (5, 0)),
        ((-2, -2), (-1, -1), (0, 0)),
        ((120, 130), (1, 1), (100, 100)),
    ],
)
def test_clamp_is_idempotent_at_every_wall(make_loose_point, start, velocity, expected):
    world, p = make_loose_point(*start)
    for _ in range(5):
        p.velocity = Vector2(*velocity)
        world.step()
        assert p.position == Vector2(*expected)
        assert p.velocity == Vector2(0, 0)
        assert p.acceleration == Vector2(0, 0)


@pytest.mark.parametrize(
    "start, velocity, expected_velocity",
    [
        ((100, 5), (1, 0), (0, 0)),
        ((0, 5), (-1, 0), (0, 0)),
        ((5, 100), (0, 3), (0, 0)),
        ((5, 0), (0, -3), (0, 0)),
        # on the wall but heading back inside
        ((100, 5), (-1, 0), (-1, 0)),
        ((5, 0), (0, 3), (0, 3)),
    ],
)
def test_point_exactly_on_wall(make_loose_point, start, velocity, expected_velocity):
    world, p = make_loose_point(*start, *velocity)
    world.step()
    assert p.position == Vector2(*start)
    assert p.velocity == Vector2(*expected_velocity)


def test_infinite_extent_disables_upper_walls(make_loose_point):
    world, p = make_loose_point(1e9, -1e9, vx=1, vy=-1, width=math.inf, height=math.inf)
    world.step()
    # only the lower wall applies on y
    assert p.position == Vector2(1e9, 0)
    assert p.velocity == Vector2(1, 0)


# ------------------------
# Scenarios
# ------------------------


def test_triangle_settles_in_unbounded_world(unbounded_world):
    unbounded_world.add(SpringBody(3, 10, 10, 10))

    energies = []
    for _ in range(1000):
        unbounded_world.step()
        energies.append(unbounded_world.kinetic_energy())

    unbounded_world.check_finite()
    assert max(energies) > 0
    assert energies[-1] < 1e-6
    assert energies[-1] < max(energies)


def test_pressure_body_centroid_after_one_step():
    world = World(100, 100)
    body = world.add(PressureBody(8, 10, 40, 40, pop_in=False))

    assert body.centroid().x == pytest.approx(40, abs=1e-9)
    assert body.centroid().y == pytest.approx(40, abs=1e-9)

    world.step()

    assert body.centroid().x == pytest.approx(40, abs=1e-9)
    assert body.centroid().y == pytest.approx(40, abs=1e-9)


def test_demo_scene_stays_in_bounds(demo_world):
    demo_world.run(500)
    demo_world.check_finite()

    pos = demo_world.positions()
    assert pos.shape == (len(demo_world.all_points()), 2)
    assert demo_world.steps == 500
    # a clamped point can overshoot by at most one outward-moving step
    assert (pos > -5).all()
    assert (pos[:, 0] < 105).all()
    assert (pos[:, 1] < 85).all()


# ------------------------
# Diagnostics
# ------------------------


def test_check_finite_raises_on_nan(make_loose_point):
    world, p = make_loose_point(1, 1)
    world.check_finite()
    p.position = Vector2(math.nan, 1)
    with pytest.raises(FloatingPointError):
        world.check_finite()


def test_arrays_follow_all_points(demo_world):
    points = demo_world.all_points()
    points[3].acceleration = Vector2(0.25, -0.5)

    np.testing.assert_array_equal(demo_world.positions()[3], tuple(points[3].position))
    np.testing.assert_array_equal(demo_world.accelerations()[3], [0.25, -0.5])


def test_spring_table_indexes_into_all_points(demo_world):
    pairs, rest = demo_world.spring_table()
    springs = [s for body in demo_world.bodies for s in body.springs]
    points = demo_world.all_points()

    assert pairs.shape == (len(springs), 2)
    assert pairs[:3].tolist() == [[0, 1], [0, 2], [1, 2]]
    # second body starts at point 3
    assert pairs[3].tolist() == [3, 4]
    for (i, j), s, r in zip(pairs, springs, rest):
        assert points[i] is s.a
        assert points[j] is s.b
        assert r == s.rest_length
