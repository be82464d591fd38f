import argparse
import logging
import sys

import moderngl
import numpy as np
import pygame

from softbody.bodies import PressureBody, SpringBody
from softbody.config import SimConfig
from softbody.interaction import DragController
from softbody.renderer import Renderer
from softbody.solver_numpy import ArraySolver
from softbody.types import POSITIONS
from softbody.world import World

logger = logging.getLogger(__name__)


def build_world(config: SimConfig) -> World:
    """The demo scene: three spring bodies and one pressure body."""
    world = World(config.world_width, config.world_height, log_interval=config.log_interval)
    world.add(SpringBody(3, 10, 10, 10))
    world.add(SpringBody(4, 10, 25, 25))
    world.add(SpringBody(5, 10, 40, 40))
    world.add(PressureBody(8, 10, 70, 40))
    return world


def spring_strains(positions: POSITIONS, pairs: np.ndarray, rest: POSITIONS) -> POSITIONS:
    delta = positions[pairs[:, 1]] - positions[pairs[:, 0]]
    return np.abs(np.sqrt(np.sum(delta * delta, axis=1)) - rest)


class Simulation:
    """Couples a world to one of the two stepping engines and to the pointer."""

    def __init__(self, config: SimConfig) -> None:
        self.config = config
        self.reset()

    def reset(self) -> None:
        self.world = build_world(self.config)
        self.pairs, self.rest = self.world.spring_table()
        self.solver = ArraySolver(self.world) if self.config.engine == "array" else None
        self.drag = DragController(self.world, self.config.pick_radius)
        self.selected_idx: int | None = None

    def step(self) -> None:
        if self.solver is not None:
            self.solver.step()
        else:
            self.world.step()

    @property
    def steps(self) -> int:
        return self.solver.steps if self.solver is not None else self.world.steps

    def positions(self) -> POSITIONS:
        return self.solver.pos if self.solver is not None else self.world.positions()

    def accelerations(self) -> POSITIONS:
        return self.solver.acc if self.solver is not None else self.world.accelerations()

    def kinetic_energy(self) -> float:
        if self.solver is not None:
            return self.solver.kinetic_energy()
        return self.world.kinetic_energy()

    def check_finite(self) -> None:
        if self.solver is not None:
            self.solver.check_finite()
        else:
            self.world.check_finite()

    # ------------------------
    # Pointer
    # ------------------------

    def press(self, x: float, y: float) -> None:
        if self.solver is not None:
            self.selected_idx = self.solver.pick(x, y, self.config.pick_radius)
            self.move(x, y)
        else:
            self.drag.press(x, y)

    def move(self, x: float, y: float) -> None:
        if self.solver is not None:
            if self.selected_idx is not None:
                self.solver.pos[self.selected_idx] = (x, y)
        else:
            self.drag.move(x, y)

    def release(self) -> None:
        self.selected_idx = None
        self.drag.release()


def parse_args(argv: list[str] | None = None) -> SimConfig:
    parser = argparse.ArgumentParser(description="2D spring-mass soft body demo (pygame + moderngl)")
    parser.add_argument("--engine", choices=["object", "array"], default="object")
    parser.add_argument("--width", type=int, default=1000, help="Window width in pixels.")
    parser.add_argument("--height", type=int, default=800, help="Window height in pixels.")
    parser.add_argument("--fps", type=int, default=60, help="Simulation ticks per second.")
    parser.add_argument("--verbose", action="store_true", help="Log periodic step diagnostics.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(name)s] %(message)s",
    )
    return SimConfig(width_px=args.width, height_px=args.height, target_fps=args.fps, engine=args.engine)


def main(argv: list[str] | None = None) -> None:
    config = parse_args(argv)
    width, height = config.width_px, config.height_px
    ppu = config.pixels_per_unit

    pygame.init()
    clock = pygame.time.Clock()
    pygame.display.set_mode((width, height), pygame.OPENGL | pygame.DOUBLEBUF)
    pygame.display.set_caption("Soft Body Simulation")
    ctx = moderngl.create_context()

    renderer = Renderer(ctx, width, height, ppu)
    sim = Simulation(config)

    running = True
    paused = False
    dragging = False

    print("\n" + "=" * 60)
    print(f"SOFT BODY SIMULATION - {config.engine} engine")
    print("=" * 60)
    print("  Space           - Pause/Resume physics")
    print("  N               - Single step while paused")
    print("  R               - Reset simulation")
    print("  Left Click+Drag - Move a point")
    print("=" * 60)

    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_SPACE:
                    paused = not paused
                    print(f"[{'PAUSED' if paused else 'RESUMED'}]")
                elif event.key == pygame.K_n and paused:
                    sim.step()
                elif event.key == pygame.K_r:
                    sim.reset()
                    print("[Simulation RESET]")

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                dragging = True
                sim.press(event.pos[0] / ppu, event.pos[1] / ppu)

            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                dragging = False
                sim.release()

            elif event.type == pygame.MOUSEMOTION and dragging:
                sim.move(event.pos[0] / ppu, event.pos[1] / ppu)

        if not paused:
            sim.step()

        try:
            sim.check_finite()
        except FloatingPointError:
            logger.exception("Stopping: simulation exploded")
            running = False
            break

        positions = sim.positions()
        renderer.draw(
            positions,
            sim.pairs,
            spring_strains(positions, sim.pairs, sim.rest),
            sim.accelerations(),
            [
                f"FPS: {clock.get_fps():.1f}",
                f"Step: {sim.steps}",
                f"Kinetic: {sim.kinetic_energy():.5f}",
                f"Engine: {config.engine}{' (paused)' if paused else ''}",
            ],
        )

        clock.tick(config.target_fps)

    print("\n[Main] Shutting down...")
    pygame.quit()
    sys.exit()


if __name__ == "__main__":
    main()
