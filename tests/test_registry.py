import pygame
import pytest

from alchemastry.gfx import Texture, make_atlas
from alchemastry.maths import IVec2, Vec2
from alchemastry.registry import (
    ATLAS_CELL_SIZE,
    DroptableType,
    GroundObjectType,
    ItemType,
    Placeable,
    TileType,
    build_registry,
)


@pytest.fixture(scope="module")
def atlas():
    texture = Texture(1, 64, 64, 4, pygame.Surface((64, 64)))
    return make_atlas(texture, ATLAS_CELL_SIZE)


@pytest.fixture(scope="module")
def elisha():
    return Texture(2, 32, 32, 4, pygame.Surface((32, 32)))


@pytest.fixture(scope="module")
def registry(atlas, elisha):
    return build_registry(atlas, elisha)


def test_path_tile_is_faster(registry):
    assert registry.tile_info(TileType.PATH).speed_multiplier == 2.0
    assert registry.tile_info(TileType.GRASS).speed_multiplier == 1.0


def test_tile_sprites_come_from_atlas(registry, atlas):
    assert registry.tile_info(TileType.GRASS).sprite == atlas.sprite(IVec2(1, 0), IVec2(1, 1))
    assert registry.tile_info(TileType.STONE).sprite == atlas.sprite(IVec2(3, 0), IVec2(1, 1))


def test_elisha_item_uses_whole_texture(registry, elisha):
    info = registry.item_info(ItemType.ELISHA)
    assert info.sprite.texture == elisha
    assert info.sprite.tex_coord_origin == Vec2(0.0, 0.0)
    assert info.sprite.tex_coord_size == Vec2(1.0, 1.0)
    assert info.max_stack == 1


def test_path_item_places_path_tile(registry):
    info = registry.item_info(ItemType.PATH)
    assert info.placeable is Placeable.FOREGROUND
    assert info.place_type is TileType.PATH
    assert info.max_stack == 999


def test_wood_is_not_placeable(registry):
    info = registry.item_info(ItemType.WOOD)
    assert info.placeable is Placeable.NOT
    assert info.place_type is None


def test_tree_is_two_tiles_tall_and_drops_wood_table(registry, atlas):
    info = registry.ground_object_info(GroundObjectType.TREE)
    assert info.size == Vec2(1.0, 2.0)
    assert info.droptable is DroptableType.TREE
    assert info.sprite == atlas.sprite(IVec2(0, 1), IVec2(1, 2))


def test_rock_uses_stone_droptable(registry):
    assert registry.ground_object_info(GroundObjectType.ROCK).droptable is DroptableType.STONE


def test_number_sprites_follow_each_other(registry, atlas):
    assert len(registry.number_sprites) == 10
    for digit, sprite in enumerate(registry.number_sprites):
        assert sprite == atlas.sprite(IVec2(5 + digit, 0), IVec2(1, 1))


def test_lookup_by_integer_matches_enum(registry):
    assert registry.item_info(1) == registry.item_info(ItemType.WOOD)
    assert registry.tile_info(4) == registry.tile_info(TileType.PATH)


def test_unknown_lookup_raises(registry):
    with pytest.raises(ValueError):
        registry.tile_info(99)


def test_player_and_hotbar_sprites(registry, atlas):
    assert registry.player_sprite == atlas.sprite(IVec2(2, 1), IVec2(1, 2))
    assert registry.ui_hotbar_active_sprite == atlas.sprite(IVec2(3, 2), IVec2(1, 1))