import numpy as np
import pytest

from softbody.bodies import PressureBody, SpringBody
from softbody.config import SimConfig
from softbody.sim import Simulation, build_world, parse_args, spring_strains


def test_build_world_is_demo_scene():
    world = build_world(SimConfig())

    assert (world.width, world.height) == (100, 80)
    assert [type(b) for b in world.bodies] == [SpringBody, SpringBody, SpringBody, PressureBody]
    assert [len(b.points) for b in world.bodies] == [3, 4, 5, 8]


def test_spring_strains_zero_at_rest():
    world = build_world(SimConfig())
    pairs, rest = world.spring_table()
    strains = spring_strains(world.positions(), pairs, rest)
    assert strains.shape == rest.shape
    np.testing.assert_allclose(strains, 0, atol=1e-12)


@pytest.mark.parametrize("engine", ["object", "array"])
def test_simulation_steps_and_drags(engine):
    sim = Simulation(SimConfig(engine=engine))

    for _ in range(20):
        sim.step()
    sim.check_finite()
    assert sim.steps == 20
    assert sim.kinetic_energy() > 0

    x, y = sim.positions()[0]
    sim.press(x, y)
    sim.move(30, 30)
    np.testing.assert_array_equal(sim.positions()[0], [30, 30])
    sim.release()
    sim.move(60, 60)
    np.testing.assert_array_equal(sim.positions()[0], [30, 30])


def test_engines_agree():
    obj = Simulation(SimConfig(engine="object"))
    arr = Simulation(SimConfig(engine="array"))
    for _ in range(100):
        obj.step()
        arr.step()
    np.testing.assert_allclose(arr.positions(), obj.positions(), rtol=0, atol=1e-9)


def test_reset_rebuilds_world():
    sim = Simulation(SimConfig())
    first = sim.world
    sim.step()
    sim.reset()
    assert sim.world is not first
    assert sim.steps == 0


def test_parse_args():
    config = parse_args(["--engine", "array", "--width", "640", "--height", "480"])
    assert config.engine == "array"
    assert (config.world_width, config.world_height) == (64, 48)
