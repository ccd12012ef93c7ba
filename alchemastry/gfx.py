"""Batched quad rendering of solid colours and textured sprites onto a pygame surface."""

from __future__ import annotations

import itertools
import math
from dataclasses import dataclass, field
from enum import Enum

import pygame

from alchemastry.log import Logger
from alchemastry.maths import (
    IVec2,
    Mat4,
    Origin,
    Quad,
    Vec2,
    Vec4,
    quad_vertices,
    ui_projection,
)

MAX_COLOUR_QUADS = 10240
MAX_SPRITE_QUADS = 10240
MAX_TEXTURE_SLOTS = 16
FLOATS_PER_VERTEX = 5
FLOATS_PER_QUAD = 4 * FLOATS_PER_VERTEX
ATLAS_DELTA = 0.0005
UI_VIRTUAL_SIZE = Vec2(1280.0, 720.0)

_texture_ids = itertools.count(1)


@dataclass(frozen=True)
class Texture:
    """An image loaded for drawing; rows are stored bottom row first."""

    id: int
    width: int
    height: int
    channels: int
    surface: pygame.Surface = field(compare=False, repr=False)


@dataclass(frozen=True)
class Sprite:
    """A rectangular region of a texture, in texture coordinates."""

    texture: Texture
    tex_coord_origin: Vec2
    tex_coord_size: Vec2


@dataclass(frozen=True)
class TextureAtlas:
    """A texture divided into equally sized cells."""

    texture: Texture
    cell_size_pixels: IVec2
    cell_size_tex: Vec2
    delta: float = ATLAS_DELTA

    @property
    def two_delta(self) -> float:
        return 2 * self.delta

    def sprite(self, cell_coord: IVec2, cell_size: IVec2) -> Sprite:
        """Return the sprite covering ``cell_size`` cells starting at ``cell_coord``.

        The region is shrunk by a small margin to avoid bleeding from
        neighbouring cells.
        """
        origin = Vec2(
            cell_coord.x * self.cell_size_tex.x + self.delta,
            cell_coord.y * self.cell_size_tex.y + self.delta,
        )
        size = Vec2(
            cell_size.x * self.cell_size_tex.x - self.two_delta,
            cell_size.y * self.cell_size_tex.y - self.two_delta,
        )
        return Sprite(self.texture, origin, size)


class QuadKind(Enum):
    COLOUR = 0
    SPRITE = 1


class BuiltinShader(Enum):
    COLOUR = 0
    TEXTURE = 1


@dataclass(frozen=True)
class GfxQuad:
    """A quad to draw, filled either with a colour or with a sprite."""

    quad: Quad
    kind: QuadKind
    colour: Vec4 | None = None
    sprite: Sprite | None = None


def load_texture(path: str) -> Texture:
    """Load an RGB or RGBA image from ``path``, flipped so its bottom row comes first."""
    try:
        image = pygame.image.load(path)
    except (pygame.error, OSError, FileNotFoundError) as exc:
        raise OSError(f"Failed to load texture {path}") from exc

    channels = image.get_bytesize()
    if channels not in (3, 4):
        raise ValueError(
            f"UNKNOWN IMAGE FORMAT WITH {channels} CHANNELS IN TEXTURE {path}"
        )

    width, height = image.get_size()
    flipped = pygame.transform.flip(image, False, True)
    return Texture(next(_texture_ids), width, height, channels, flipped)


def make_atlas(texture: Texture, cell_size_pixels: IVec2) -> TextureAtlas:
    """Divide ``texture`` into cells of ``cell_size_pixels``."""
    # Cell height in texture space is derived from the cell width, so cells
    # are effectively square.
    cell_size_tex = Vec2(
        cell_size_pixels.x / texture.width,
        cell_size_pixels.x / texture.height,
    )
    return TextureAtlas(texture, cell_size_pixels, cell_size_tex)


def quad_colour_centred(position: Vec2, size: Vec2, colour: Vec4) -> GfxQuad:
    return GfxQuad(Quad(position, size, 0.0, Origin.CENTRE), QuadKind.COLOUR, colour=colour)


def quad_colour_bl(position: Vec2, size: Vec2, colour: Vec4) -> GfxQuad:
    return GfxQuad(
        Quad(position, size, 0.0, Origin.BOTTOM_LEFT), QuadKind.COLOUR, colour=colour
    )


def quad_tex_bl(position: Vec2, size: Vec2, sprite: Sprite) -> GfxQuad:
    return GfxQuad(
        Quad(position, size, 0.0, Origin.BOTTOM_LEFT), QuadKind.SPRITE, sprite=sprite
    )


def quad_tex_centred(position: Vec2, size: Vec2, sprite: Sprite) -> GfxQuad:
    return GfxQuad(Quad(position, size, 0.0, Origin.CENTRE), QuadKind.SPRITE, sprite=sprite)


def _to_byte(value: float) -> int:
    return int(max(0.0, min(1.0, value)) * 255 + 0.5)


def _to_pixel(projection: Mat4, x: float, y: float, width: int, height: int) -> tuple[float, float]:
    a = projection.a
    ndc_x = a[0] * x + a[1] * y + a[3]
    ndc_y = a[4] * x + a[5] * y + a[7]
    w = a[12] * x + a[13] * y + a[15]
    if w not in (0.0, 1.0):
        ndc_x /= w
        ndc_y /= w
    return (ndc_x + 1.0) * 0.5 * width, (1.0 - ndc_y) * 0.5 * height


def _bounding_rect(points: list[tuple[float, float]]) -> pygame.Rect:
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    left, top = round(min(xs)), round(min(ys))
    right, bottom = round(max(xs)), round(max(ys))
    return pygame.Rect(left, top, right - left, bottom - top)


class Gfx:
    """Collects quads and draws them in batches onto a target surface."""

    def __init__(
        self,
        target: pygame.Surface | None = None,
        logger: Logger | None = None,
        max_colour_quads: int = MAX_COLOUR_QUADS,
        max_sprite_quads: int = MAX_SPRITE_QUADS,
    ) -> None:
        self._target = target
        self._logger = logger if logger is not None else Logger()
        self.max_colour_quads = max_colour_quads
        self.max_sprite_quads = max_sprite_quads
        self.colour_quads: list[GfxQuad] = []
        self.sprite_quads: list[GfxQuad] = []
        initial = ui_projection(UI_VIRTUAL_SIZE)
        self.projections: dict[BuiltinShader, Mat4] = {
            BuiltinShader.COLOUR: initial,
            BuiltinShader.TEXTURE: initial,
        }

    @property
    def colour_quad_count(self) -> int:
        return len(self.colour_quads)

    @property
    def sprite_quad_count(self) -> int:
        return len(self.sprite_quads)

    def _surface(self) -> pygame.Surface:
        target = self._target if self._target is not None else pygame.display.get_surface()
        if target is None:
            raise RuntimeError("no surface to draw on")
        return target

    @property
    def viewport(self) -> IVec2:
        width, height = self._surface().get_size()
        return IVec2(width, height)

    def start_frame(self, bg_colour: Vec4) -> None:
        """Clear the target to ``bg_colour``."""
        self._surface().fill(
            (_to_byte(bg_colour.r), _to_byte(bg_colour.g), _to_byte(bg_colour.b), _to_byte(bg_colour.a))
        )

    def end_frame(self) -> None:
        self.flush_colour_quads()
        self.flush_sprite_quads()

    def draw_quad(self, quad: GfxQuad) -> None:
        """Queue ``quad``, flushing its batch first if the batch is full."""
        if quad.kind is QuadKind.COLOUR:
            if len(self.colour_quads) >= self.max_colour_quads:
                self.flush_colour_quads()
            self.colour_quads.append(quad)
        elif quad.kind is QuadKind.SPRITE:
            if len(self.sprite_quads) >= self.max_sprite_quads:
                self.flush_sprite_quads()
            self.sprite_quads.append(quad)
        else:
            raise ValueError(f"unknown quad kind {quad.kind!r}")

    def set_projection(self, shader: BuiltinShader, projection: Mat4) -> None:
        if not isinstance(shader, BuiltinShader):
            raise ValueError(f"TRYING TO SET PROJECTION OF UNKNOWN BUILTIN SHADER {shader}")
        self.projections[shader] = projection

    def flush_colour_quads(self) -> tuple[float, ...]:
        """Draw queued colour quads and return their vertex data.

        Each vertex is ``x, y, r, g, b``, in the order bottom left, bottom
        right, top left, top right.
        """
        quads, self.colour_quads = self.colour_quads, []
        target = self._surface() if quads else None
        projection = self.projections[BuiltinShader.COLOUR]
        vertices: list[float] = []

        for gquad in quads:
            v = quad_vertices(gquad.quad)
            c = gquad.colour
            corners = (v.bottom_left, v.bottom_right, v.top_left, v.top_right)
            for corner in corners:
                vertices.extend((corner.x, corner.y, c.r, c.g, c.b))
            self._fill_polygon(target, projection, (v.bottom_left, v.bottom_right, v.top_right, v.top_left), c)

        return tuple(vertices)

    def flush_sprite_quads(self) -> tuple[float, ...]:
        """Draw queued sprite quads and return their vertex data.

        Each vertex is ``x, y, u, v, slot``. At most sixteen textures can be
        used in one batch; quads needing more are left out with a warning.
        """
        quads, self.sprite_quads = self.sprite_quads, []
        target = self._surface() if quads else None
        projection = self.projections[BuiltinShader.TEXTURE]
        slots: dict[int, int] = {}
        vertices: list[float] = []

        for gquad in quads:
            sprite = gquad.sprite
            texture_id = sprite.texture.id
            slot = slots.get(texture_id)
            if slot is None and len(slots) < MAX_TEXTURE_SLOTS:
                slot = len(slots)
                slots[texture_id] = slot
            if slot is None:
                self._logger.warning("CANNOT YET RENDER MORE THAN 16 TEXTURES AT ONCE\n")
                continue

            v = quad_vertices(gquad.quad)
            u0, v0 = sprite.tex_coord_origin.x, sprite.tex_coord_origin.y
            u1 = u0 + sprite.tex_coord_size.x
            v1 = v0 + sprite.tex_coord_size.y
            vertices.extend((v.bottom_left.x, v.bottom_left.y, u0, v0, float(slot)))
            vertices.extend((v.bottom_right.x, v.bottom_right.y, u1, v0, float(slot)))
            vertices.extend((v.top_left.x, v.top_left.y, u0, v1, float(slot)))
            vertices.extend((v.top_right.x, v.top_right.y, u1, v1, float(slot)))
            self._blit_sprite(target, projection, v, sprite)

        return tuple(vertices)

    @staticmethod
    def _fill_polygon(target: pygame.Surface, projection: Mat4, corners, colour: Vec4) -> None:
        width, height = target.get_size()
        points = [_to_pixel(projection, p.x, p.y, width, height) for p in corners]
        rect = _bounding_rect(points)
        if rect.width <= 0 or rect.height <= 0:
            return
        layer = pygame.Surface(rect.size, pygame.SRCALPHA)
        local = [(x - rect.left, y - rect.top) for x, y in points]
        rgba = (_to_byte(colour.r), _to_byte(colour.g), _to_byte(colour.b), _to_byte(colour.a))
        pygame.draw.polygon(layer, rgba, local)
        target.blit(layer, rect.topleft)

    @staticmethod
    def _blit_sprite(target: pygame.Surface, projection: Mat4, v, sprite: Sprite) -> None:
        width, height = target.get_size()
        corners = (v.bottom_left, v.bottom_right, v.top_left, v.top_right)
        points = [_to_pixel(projection, p.x, p.y, width, height) for p in corners]
        dest = _bounding_rect(points)
        if dest.width <= 0 or dest.height <= 0:
            return

        source = sprite.texture.surface
        tex_w, tex_h = source.get_size()
        us = (sprite.tex_coord_origin.x, sprite.tex_coord_origin.x + sprite.tex_coord_size.x)
        vs = (sprite.tex_coord_origin.y, sprite.tex_coord_origin.y + sprite.tex_coord_size.y)
        left = max(0, min(tex_w, math.floor(min(us) * tex_w + 0.5)))
        right = max(0, min(tex_w, math.floor(max(us) * tex_w + 0.5)))
        top = max(0, min(tex_h, math.floor(min(vs) * tex_h + 0.5)))
        bottom = max(0, min(tex_h, math.floor(max(vs) * tex_h + 0.5)))
        if right <= left or bottom <= top:
            return

        region = source.subsurface(pygame.Rect(left, top, right - left, bottom - top))
        upright = pygame.transform.flip(region, False, True)
        target.blit(pygame.transform.scale(upright, dest.size), dest.topleft)