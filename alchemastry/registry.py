"""Static game data: tile, item and ground object definitions and their sprites."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from alchemastry.gfx import Sprite, Texture, TextureAtlas
from alchemastry.maths import IVec2, Vec2

ATLAS_PATH = "assets/textures/atlas.png"
ELISHA_PATH = "assets/textures/Elisha.png"
ATLAS_CELL_SIZE = IVec2(8, 8)
NUMBER_SPRITE_COUNT = 10


class DroptableType(Enum):
    NONE = 0
    TREE = 1
    STONE = 2


class TileType(Enum):
    NONE = 0
    DIRT = 1
    GRASS = 2
    STONE = 3
    PATH = 4


class GroundObjectType(Enum):
    NONE = 0
    TREE = 1
    ROCK = 2


class ItemType(Enum):
    NONE = 0
    WOOD = 1
    STONE = 2
    ELISHA = 3
    PATH = 4


class Placeable(Enum):
    NOT = 0
    FOREGROUND = 1
    GROUND_OBJECT = 2


@dataclass(frozen=True)
class TileInfo:
    sprite: Sprite
    speed_multiplier: float


@dataclass(frozen=True)
class ItemInfo:
    """How an item stacks, whether it can be placed, and what it places."""

    max_stack: int
    placeable: Placeable
    place_type: TileType | GroundObjectType | None
    sprite: Sprite


@dataclass(frozen=True)
class GroundObjectInfo:
    droptable: DroptableType
    sprite: Sprite
    size: Vec2


@dataclass(frozen=True)
class Registry:
    """Lookup tables for everything the game draws or places."""

    atlas: TextureAtlas
    elisha_texture: Texture
    elisha_sprite: Sprite
    player_sprite: Sprite
    number_sprites: tuple[Sprite, ...]
    tiles: dict[TileType, TileInfo]
    ground_objects: dict[GroundObjectType, GroundObjectInfo]
    items: dict[ItemType, ItemInfo]
    ui_hotbar_sprite: Sprite
    ui_hotbar_active_sprite: Sprite

    def tile_info(self, tile: TileType | int) -> TileInfo:
        return self.tiles[TileType(tile)]

    def item_info(self, item: ItemType | int) -> ItemInfo:
        return self.items[ItemType(item)]

    def ground_object_info(self, ground_object: GroundObjectType | int) -> GroundObjectInfo:
        return self.ground_objects[GroundObjectType(ground_object)]


def build_registry(atlas: TextureAtlas, elisha_texture: Texture) -> Registry:
    """Build the game's registry from the sprite atlas and the Elisha texture."""

    def cell(x: int, y: int, w: int = 1, h: int = 1) -> Sprite:
        return atlas.sprite(IVec2(x, y), IVec2(w, h))

    elisha_sprite = Sprite(elisha_texture, Vec2(0.0, 0.0), Vec2(1.0, 1.0))

    tiles = {
        TileType.NONE: TileInfo(cell(0, 0), 1.0),
        TileType.GRASS: TileInfo(cell(1, 0), 1.0),
        TileType.DIRT: TileInfo(cell(2, 0), 1.0),
        TileType.STONE: TileInfo(cell(3, 0), 1.0),
        TileType.PATH: TileInfo(cell(4, 0), 2.0),
    }

    ground_objects = {
        GroundObjectType.NONE: GroundObjectInfo(DroptableType.NONE, cell(0, 0), Vec2(1.0, 1.0)),
        GroundObjectType.TREE: GroundObjectInfo(DroptableType.TREE, cell(0, 1, 1, 2), Vec2(1.0, 2.0)),
        GroundObjectType.ROCK: GroundObjectInfo(DroptableType.STONE, cell(1, 1), Vec2(1.0, 1.0)),
    }

    items = {
        ItemType.NONE: ItemInfo(0, Placeable.NOT, None, cell(0, 0)),
        ItemType.WOOD: ItemInfo(999, Placeable.NOT, None, cell(4, 1)),
        ItemType.STONE: ItemInfo(999, Placeable.NOT, None, cell(5, 1)),
        ItemType.ELISHA: ItemInfo(1, Placeable.NOT, None, elisha_sprite),
        ItemType.PATH: ItemInfo(999, Placeable.FOREGROUND, TileType.PATH, cell(4, 0)),
    }

    return Registry(
        atlas=atlas,
        elisha_texture=elisha_texture,
        elisha_sprite=elisha_sprite,
        player_sprite=cell(2, 1, 1, 2),
        number_sprites=tuple(cell(5 + digit, 0) for digit in range(NUMBER_SPRITE_COUNT)),
        tiles=tiles,
        ground_objects=ground_objects,
        items=items,
        ui_hotbar_sprite=cell(3, 1),
        ui_hotbar_active_sprite=cell(3, 2),
    )