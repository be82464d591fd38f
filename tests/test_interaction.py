import pytest

from softbody.bodies import SpringBody
from softbody.interaction import DragController
from softbody.models import Vector2
from softbody.world import World


@pytest.fixture
def world() -> World:
    world = World(100, 100)
    world.add(SpringBody(4, 10, 25, 25))
    return world


def test_press_selects_point_within_radius(world):
    drag = DragController(world)
    target = world.all_points()[0]  # at (35, 25)

    picked = drag.press(35.5, 25.5)

    assert picked is target
    assert drag.selected is target
    assert target.position == Vector2(35.5, 25.5)


def test_press_outside_radius_selects_nothing(world):
    drag = DragController(world)
    before = [p.position for p in world.all_points()]

    assert drag.press(35, 28) is None
    drag.move(60, 60)

    assert [p.position for p in world.all_points()] == before


def test_move_overwrites_position_only(world):
    drag = DragController(world)
    target = world.all_points()[1]
    target.velocity = Vector2(0.3, -0.1)
    target.acceleration = Vector2(0.01, 0.02)

    drag.press(*target.position)
    drag.move(50, 60)

    assert target.position == Vector2(50, 60)
    assert target.velocity == Vector2(0.3, -0.1)
    assert target.acceleration == Vector2(0.01, 0.02)


def test_release_stops_dragging(world):
    drag = DragController(world)
    target = world.all_points()[0]
    drag.press(35, 25)
    drag.release()

    assert drag.selected is None
    drag.move(70, 70)
    assert target.position == Vector2(35, 25)


def test_last_point_in_radius_wins(world):
    points = world.all_points()
    points[2].position = Vector2(35.5, 25)

    drag = DragController(world)
    assert drag.pick(35.2, 25) is points[2]


def test_custom_radius():
    world = World(100, 100)
    world.add(SpringBody(3, 10, 50, 50))
    assert DragController(world, pick_radius=5).pick(57, 50) is world.all_points()[0]
    assert DragController(world).pick(57, 50) is None
    with pytest.raises(ValueError):
        DragController(world, pick_radius=0)


def test_dragged_point_moves_between_steps(world):
    drag = DragController(world)
    target = world.all_points()[0]
    drag.press(35, 25)

    for i in range(5):
        world.step()
        drag.move(35 + i, 25)
        assert target.position == Vector2(35 + i, 25)
