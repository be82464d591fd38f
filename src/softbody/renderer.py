# renderer.py
from pathlib import Path

import moderngl
import numpy as np
import pygame

from softbody.types import COLORS, INDICES, POSITIONS

TEXT_COLOR = (220, 220, 220)

# ------------------------
# Colour helpers
# ------------------------


def spring_colors(strains: POSITIONS) -> COLORS:
    """rgb(50, 50*strain, 255 - 50*strain), normalised to [0, 1]."""
    strains = np.asarray(strains, dtype=np.float64)
    rgb = np.empty((len(strains), 3), dtype=np.float64)
    rgb[:, 0] = 50.0
    rgb[:, 1] = 50.0 * strains
    rgb[:, 2] = 255.0 - 50.0 * strains
    return (np.clip(rgb, 0.0, 255.0) / 255.0).astype(np.float32)


def point_colors(accelerations: POSITIONS) -> COLORS:
    """Red and green track |ax| and |ay|, blue is saturated."""
    acc = np.asarray(accelerations, dtype=np.float64).reshape(-1, 2)
    rgb = np.empty((len(acc), 3), dtype=np.float64)
    rgb[:, 0] = np.minimum(255.0, np.abs(acc[:, 0]) * 5000.0)
    rgb[:, 1] = np.minimum(255.0, np.abs(acc[:, 1]) * 5000.0)
    rgb[:, 2] = 255.0
    return (rgb / 255.0).astype(np.float32)


def line_vertices(positions: POSITIONS, segments: INDICES, colors: COLORS) -> COLORS:
    """Interleaved ``x, y, r, g, b`` rows, two per segment."""
    segments = np.asarray(segments, dtype=np.int64).reshape(-1, 2)
    ends = positions[segments.ravel()]
    rgb = np.repeat(colors, 2, axis=0)
    return np.hstack([ends, rgb]).astype(np.float32)


def overlay_quad(
    size: tuple[int, int], viewport: tuple[int, int], margin: int = 10
) -> COLORS:
    """Triangle-strip ``x, y, u, v`` rows for a pixel-sized box anchored top-left."""
    w, h = size
    vw, vh = viewport
    left = -1.0 + 2.0 * margin / vw
    top = 1.0 - 2.0 * margin / vh
    right = left + 2.0 * w / vw
    bottom = top - 2.0 * h / vh
    return np.array(
        [
            [left, top, 0.0, 1.0],
            [left, bottom, 0.0, 0.0],
            [right, top, 1.0, 1.0],
            [right, bottom, 1.0, 0.0],
        ],
        dtype=np.float32,
    )


# ------------------------
# Renderer
# ------------------------


class Renderer:
    def __init__(
        self,
        ctx: moderngl.Context,
        width: int = 1000,
        height: int = 800,
        pixels_per_unit: float = 10.0,
    ):
        self.ctx = ctx
        self.ctx.enable(moderngl.PROGRAM_POINT_SIZE)

        self.width = width
        self.height = height
        self.pixels_per_unit = pixels_per_unit

        pygame.font.init()
        self.font = pygame.font.SysFont("monospace", 18)

        base = Path(__file__).parent / "shaders"

        # 2D program
        self.prog = self.ctx.program(
            vertex_shader=(base / "body.vert").read_text(),
            fragment_shader=(base / "body.frag").read_text(),
        )
        self.prog["u_extent"].value = (  # type: ignore
            width / pixels_per_unit,
            height / pixels_per_unit,
        )
        self.prog["u_point_size"].value = 0.8 * pixels_per_unit  # type: ignore

        # Geometry buffers, resized on demand
        self.line_vbo = self.ctx.buffer(reserve=4, dynamic=True)
        self.point_vbo = self.ctx.buffer(reserve=4, dynamic=True)
        self.line_vao = self.ctx.vertex_array(
            self.prog, [(self.line_vbo, "2f 3f", "in_position", "in_color")]
        )
        self.point_vao = self.ctx.vertex_array(
            self.prog, [(self.point_vbo, "2f 3f", "in_position", "in_color")]
        )

        # Text overlay: one textured quad, texture reallocated when the text size changes
        text_prog = self.ctx.program(
            vertex_shader=(base / "text.vert").read_text(),
            fragment_shader=(base / "text.frag").read_text(),
        )
        text_prog["u_texture"].value = 0  # type: ignore
        self.text_vbo = self.ctx.buffer(reserve=4 * 4 * 4, dynamic=True)
        self.text_vao = self.ctx.vertex_array(
            text_prog, [(self.text_vbo, "2f 2f", "in_pos", "in_uv")]
        )
        self.text_texture: moderngl.Texture | None = None

    # ------------------------
    # Draw
    # ------------------------

    def draw(
        self,
        positions: POSITIONS,
        segments: INDICES,
        strains: POSITIONS,
        accelerations: POSITIONS,
        overlay_lines: list[str],
    ) -> None:
        self.ctx.clear(0.0, 0.0, 0.0, 1.0)

        lines = line_vertices(positions, segments, spring_colors(strains))
        points = np.hstack([positions, point_colors(accelerations)]).astype(np.float32)

        if len(lines):
            self._upload(self.line_vbo, lines)
            self.line_vao.render(mode=moderngl.LINES, vertices=len(lines))
        if len(points):
            self._upload(self.point_vbo, points)
            self.point_vao.render(mode=moderngl.POINTS, vertices=len(points))

        if overlay_lines:
            self._upload_text(overlay_lines)
            self.ctx.enable(moderngl.BLEND)
            self.ctx.blend_func = moderngl.SRC_ALPHA, moderngl.ONE_MINUS_SRC_ALPHA
            self.text_texture.use(0)  # type: ignore[union-attr]
            self.text_vao.render(mode=moderngl.TRIANGLE_STRIP)
            self.ctx.disable(moderngl.BLEND)

        pygame.display.flip()

    def _upload(self, vbo: moderngl.Buffer, data: COLORS) -> None:
        vbo.orphan(data.nbytes)
        vbo.write(data.tobytes())

    def _upload_text(self, lines: list[str]) -> None:
        """Rasterise ``lines`` with pygame and place them in the top-left corner."""
        line_h = self.font.get_height()
        surface = pygame.Surface(
            (max(self.font.size(line)[0] for line in lines), line_h * len(lines)),
            pygame.SRCALPHA,
        )
        for row, line in enumerate(lines):
            surface.blit(self.font.render(line, True, TEXT_COLOR), (0, row * line_h))

        size = surface.get_size()
        if self.text_texture is None or self.text_texture.size != size:
            if self.text_texture is not None:
                self.text_texture.release()
            self.text_texture = self.ctx.texture(size, 4)
            self.text_texture.filter = (moderngl.NEAREST, moderngl.NEAREST)
        # GL rows run bottom-up
        self.text_texture.write(pygame.image.tobytes(surface, "RGBA", True))

        self.text_vbo.write(overlay_quad(size, (self.width, self.height)).tobytes())
