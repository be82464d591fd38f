# interaction.py
from __future__ import annotations

from softbody.models import Point, Vector2
from softbody.world import World


class DragController:
    """
    Pointer picking and dragging, applied between world steps.

    The selected point's position is overwritten on every move; its velocity
    and acceleration are left to the simulation.
    """

    def __init__(self, world: World, pick_radius: float = 2.0) -> None:
        if not pick_radius > 0:
            raise ValueError(f"pick_radius must be positive, got {pick_radius}")
        self.world = world
        self.pick_radius = pick_radius
        self.selected: Point | None = None

    def pick(self, x: float, y: float) -> Point | None:
        """Last point in ``world.all_points()`` order within the pick radius."""
        pointer = Vector2(x, y)
        hit = None
        for p in self.world.all_points():
            if p.position.distance_to(pointer) < self.pick_radius:
                hit = p
        return hit

    def press(self, x: float, y: float) -> Point | None:
        self.selected = self.pick(x, y)
        self.move(x, y)
        return self.selected

    def move(self, x: float, y: float) -> None:
        if self.selected is not None:
            self.selected.position = Vector2(x, y)

    def release(self) -> None:
        self.selected = None
