import io

import pygame
import pytest

from alchemastry.gfx import (
    ATLAS_DELTA,
    BuiltinShader,
    Gfx,
    QuadKind,
    Sprite,
    Texture,
    load_texture,
    make_atlas,
    quad_colour_bl,
    quad_colour_centred,
    quad_tex_bl,
    quad_tex_centred,
)
from alchemastry.log import Logger, LogLevel
from alchemastry.maths import IVec2, Origin, Vec2, Vec4, ui_projection

RED = (255, 0, 0)
GREEN = (0, 255, 0)
BLUE = (0, 0, 255)


def _save_two_row_image(path, width=2, height=2):
    surf = pygame.Surface((width, height), pygame.SRCALPHA)
    for x in range(width):
        for y in range(height):
            colour = (*RED, 255) if y < height // 2 else (*GREEN, 255)
            surf.set_at((x, y), colour)
    pygame.image.save(surf, str(path))
    return str(path)


def _texture(texture_id, size=(4, 4)):
    return Texture(texture_id, size[0], size[1], 4, pygame.Surface(size, pygame.SRCALPHA))


def _whole(texture):
    return Sprite(texture, Vec2(0.0, 0.0), Vec2(1.0, 1.0))


def _gfx(size=(100, 100), **kwargs):
    target = pygame.Surface(size, pygame.SRCALPHA)
    gfx = Gfx(target, **kwargs)
    projection = ui_projection(Vec2(float(size[0]), float(size[1])))
    gfx.set_projection(BuiltinShader.COLOUR, projection)
    gfx.set_projection(BuiltinShader.TEXTURE, projection)
    return gfx, target


def test_load_texture_reads_size_and_channels(tmp_path):
    path = _save_two_row_image(tmp_path / "img.png", 6, 4)
    texture = load_texture(path)
    assert (texture.width, texture.height) == (6, 4)
    assert texture.channels == 4


def test_load_texture_flips_rows(tmp_path):
    path = _save_two_row_image(tmp_path / "img.png")
    texture = load_texture(path)
    assert tuple(texture.surface.get_at((0, 0)))[:3] == GREEN
    assert tuple(texture.surface.get_at((0, 1)))[:3] == RED


def test_load_texture_ids_are_unique(tmp_path):
    path = _save_two_row_image(tmp_path / "img.png")
    ids = {load_texture(path).id for _ in range(3)}
    assert len(ids) == 3


def test_load_texture_missing_file(tmp_path):
    with pytest.raises(OSError):
        load_texture(str(tmp_path / "missing.png"))


def test_atlas_cell_size_and_delta():
    atlas = make_atlas(_texture(1, (64, 32)), IVec2(8, 8))
    assert atlas.cell_size_tex.x == pytest.approx(8 / 64)
    assert atlas.cell_size_tex.y == pytest.approx(8 / 32)
    assert atlas.delta == ATLAS_DELTA
    assert atlas.two_delta == pytest.approx(2 * ATLAS_DELTA)


def test_atlas_cell_height_follows_width():
    atlas = make_atlas(_texture(1, (64, 64)), IVec2(8, 16))
    assert atlas.cell_size_tex.y == pytest.approx(atlas.cell_size_tex.x)


def test_atlas_sprite_shrinks_by_margin():
    atlas = make_atlas(_texture(7, (64, 64)), IVec2(8, 8))
    first = atlas.sprite(IVec2(0, 0), IVec2(1, 1))
    assert first.texture.id == 7
    assert first.tex_coord_origin.x == pytest.approx(atlas.delta)
    assert first.tex_coord_origin.y == pytest.approx(atlas.delta)
    assert first.tex_coord_size.x == pytest.approx(atlas.cell_size_tex.x - atlas.two_delta)
    tall = atlas.sprite(IVec2(0, 0), IVec2(1, 2))
    assert tall.tex_coord_size.y > first.tex_coord_size.y
    shifted = atlas.sprite(IVec2(1, 0), IVec2(1, 1))
    assert shifted.tex_coord_origin.x - first.tex_coord_origin.x == pytest.approx(
        atlas.cell_size_tex.x
    )


def test_quad_constructors():
    colour = Vec4(1.0, 0.0, 0.0, 1.0)
    sprite = _whole(_texture(1))
    pos, size = Vec2(1.0, 2.0), Vec2(3.0, 4.0)
    assert quad_colour_centred(pos, size, colour).quad.origin is Origin.CENTRE
    bl = quad_colour_bl(pos, size, colour)
    assert bl.quad.origin is Origin.BOTTOM_LEFT
    assert bl.kind is QuadKind.COLOUR
    assert bl.colour == colour
    tex = quad_tex_bl(pos, size, sprite)
    assert tex.kind is QuadKind.SPRITE
    assert tex.sprite == sprite
    assert quad_tex_centred(pos, size, sprite).quad.origin is Origin.CENTRE


def test_colour_batch_flushes_when_full():
    gfx, _ = _gfx(max_colour_quads=2)
    quad = quad_colour_bl(Vec2(0.0, 0.0), Vec2(1.0, 1.0), Vec4(1.0, 0.0, 0.0, 1.0))
    for _ in range(3):
        gfx.draw_quad(quad)
    assert gfx.colour_quad_count == 1


def test_sprite_batch_flushes_when_full():
    gfx, _ = _gfx(max_sprite_quads=2)
    quad = quad_tex_bl(Vec2(0.0, 0.0), Vec2(1.0, 1.0), _whole(_texture(1)))
    for _ in range(5):
        gfx.draw_quad(quad)
    assert gfx.sprite_quad_count == 1


def test_colour_vertex_layout():
    gfx, _ = _gfx()
    gfx.draw_quad(quad_colour_bl(Vec2(0.0, 0.0), Vec2(1.0, 1.0), Vec4(1.0, 0.5, 0.25, 1.0)))
    data = gfx.flush_colour_quads()
    assert data == (
        0.0, 0.0, 1.0, 0.5, 0.25,
        1.0, 0.0, 1.0, 0.5, 0.25,
        0.0, 1.0, 1.0, 0.5, 0.25,
        1.0, 1.0, 1.0, 0.5, 0.25,
    )
    assert gfx.colour_quad_count == 0


def test_sprite_vertex_layout_and_slots():
    gfx, _ = _gfx()
    a, b = _texture(10), _texture(11)
    sprite_a = Sprite(a, Vec2(0.25, 0.5), Vec2(0.25, 0.5))
    gfx.draw_quad(quad_tex_bl(Vec2(0.0, 0.0), Vec2(1.0, 1.0), sprite_a))
    gfx.draw_quad(quad_tex_bl(Vec2(0.0, 0.0), Vec2(1.0, 1.0), _whole(b)))
    gfx.draw_quad(quad_tex_bl(Vec2(0.0, 0.0), Vec2(1.0, 1.0), _whole(a)))
    data = gfx.flush_sprite_quads()
    assert len(data) == 60
    assert data[:20] == (
        0.0, 0.0, 0.25, 0.5, 0.0,
        1.0, 0.0, 0.5, 0.5, 0.0,
        0.0, 1.0, 0.25, 1.0, 0.0,
        1.0, 1.0, 0.5, 1.0, 0.0,
    )
    assert data[4::5][4:8] == (1.0,) * 4
    assert data[4::5][8:12] == (0.0,) * 4


def test_more_than_sixteen_textures_are_skipped():
    out = io.StringIO()
    gfx, _ = _gfx(logger=Logger(LogLevel.DEBUG, out=out, err=io.StringIO()))
    for texture_id in range(1, 18):
        gfx.draw_quad(quad_tex_bl(Vec2(0.0, 0.0), Vec2(1.0, 1.0), _whole(_texture(texture_id))))
    data = gfx.flush_sprite_quads()
    assert len(data) == 16 * 20
    assert max(data[4::5]) == 15.0
    assert "CANNOT YET RENDER MORE THAN 16 TEXTURES AT ONCE" in out.getvalue()


def test_set_projection_rejects_unknown_shader():
    gfx, _ = _gfx()
    with pytest.raises(ValueError):
        gfx.set_projection("nonsense", ui_projection(Vec2(1.0, 1.0)))


def test_start_frame_clears_to_background():
    gfx, target = _gfx()
    gfx.start_frame(Vec4(0.0, 0.0, 1.0, 1.0))
    assert tuple(target.get_at((50, 50)))[:3] == BLUE


def test_colour_quad_is_drawn_at_bottom_left():
    gfx, target = _gfx()
    gfx.start_frame(Vec4(0.0, 0.0, 1.0, 1.0))
    gfx.draw_quad(quad_colour_bl(Vec2(0.0, 0.0), Vec2(50.0, 50.0), Vec4(1.0, 0.0, 0.0, 1.0)))
    gfx.end_frame()
    assert tuple(target.get_at((10, 90)))[:3] == RED
    assert tuple(target.get_at((90, 10)))[:3] == BLUE
    assert gfx.colour_quad_count == 0


def test_sprite_is_drawn_upright(tmp_path):
    texture = load_texture(_save_two_row_image(tmp_path / "img.png"))
    gfx, target = _gfx()
    gfx.start_frame(Vec4(0.0, 0.0, 1.0, 1.0))
    gfx.draw_quad(quad_tex_bl(Vec2(0.0, 0.0), Vec2(100.0, 100.0), _whole(texture)))
    gfx.end_frame()
    assert tuple(target.get_at((50, 10)))[:3] == RED
    assert tuple(target.get_at((50, 90)))[:3] == GREEN
    assert gfx.sprite_quad_count == 0


def test_flush_without_target_and_no_quads_returns_empty():
    gfx = Gfx(target=pygame.Surface((10, 10)))
    assert gfx.flush_colour_quads() == ()
    assert gfx.flush_sprite_quads() == ()