"""The game world: the tile map, the player's inventory and items lying on the ground."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from alchemastry.log import Logger
from alchemastry.maths import IVec2, Vec2
from alchemastry.registry import (
    DroptableType,
    GroundObjectType,
    ItemType,
    Placeable,
    Registry,
    TileType,
)

MAP_SIZE = 256
MAP_AREA = MAP_SIZE * MAP_SIZE
MAP_CENTRE = 128
INVENTORY_SIZE = 36
HOTBAR_SIZE = 9
MAX_GROUND_ITEMS = 1024
GROUND_ITEM_SPEED = 0.3


@dataclass(slots=True)
class ItemStack:
    type: ItemType = ItemType.NONE
    count: int = 0

    @property
    def empty(self) -> bool:
        return self.type is ItemType.NONE or self.count == 0

    def copy(self) -> ItemStack:
        return ItemStack(self.type, self.count)


@dataclass(slots=True)
class MapTile:
    background: TileType = TileType.NONE
    foreground: TileType = TileType.NONE
    ground_object: GroundObjectType = GroundObjectType.NONE

    def top(self) -> TileType:
        """Return the foreground tile if there is one, otherwise the background."""
        if self.foreground is not TileType.NONE:
            return self.foreground
        return self.background


@dataclass(slots=True)
class GroundItem:
    position: Vec2 = Vec2(0.0, 0.0)
    stack: ItemStack = field(default_factory=ItemStack)
    player_detection_time: float = 0.0

    @property
    def empty(self) -> bool:
        return self.stack.empty

    def copy(self) -> GroundItem:
        return GroundItem(self.position, self.stack.copy(), self.player_detection_time)


def droptable(kind: DroptableType) -> list[ItemStack]:
    """Return the stacks dropped by a ground object with this droptable."""
    kind = DroptableType(kind)
    if kind is DroptableType.NONE:
        return []
    if kind is DroptableType.TREE:
        return [ItemStack(ItemType.WOOD, 5)]
    if kind is DroptableType.STONE:
        return [ItemStack(ItemType.STONE, 3)]
    raise ValueError(f"Trying to roll droptable {kind} which doesn't exist")


class World:
    """Map, player position and items, with the rules for changing them."""

    def __init__(self, registry: Registry, logger: Logger | None = None) -> None:
        self.registry = registry
        self._logger = logger if logger is not None else Logger()

        self.tiles = [MapTile() for _ in range(MAP_AREA)]

        self.position = Vec2(float(MAP_CENTRE), float(MAP_CENTRE))
        self.speed = 6.5
        self.reach = 3.5

        self.inventory = [ItemStack() for _ in range(INVENTORY_SIZE)]
        self.inventory[0] = ItemStack(ItemType.WOOD, 999)
        self.inventory[1] = ItemStack(ItemType.STONE, 15)
        self.inventory[2] = ItemStack(ItemType.PATH, 999)
        self.inventory[35] = ItemStack(ItemType.ELISHA, 1)
        self.inventory_hand = ItemStack()
        self.current_hotbar_slot = 0

        self.ground_items = [GroundItem() for _ in range(MAX_GROUND_ITEMS)]
        self.ground_item_count = 0
        self.ground_item_index = 0

    def generate(self, random: Callable[[], float]) -> None:
        """Fill the map using ``random``, which returns floats in [0, 1]."""
        tiles = []
        for i in range(MAP_AREA):
            y, x = divmod(i, MAP_SIZE)
            tile = MapTile(background=TileType.GRASS if random() > 0.5 else TileType.DIRT)
            if x == MAP_CENTRE:
                tile.background = TileType.STONE
            if y == MAP_CENTRE:
                tile.foreground = TileType.PATH
            if tile.top() is TileType.GRASS and random() > 0.95:
                tile.ground_object = GroundObjectType.TREE
            if tile.top() is TileType.STONE and random() > 0.9:
                tile.ground_object = GroundObjectType.ROCK
            tiles.append(tile)
        self.tiles = tiles

    def maptile(self, index: IVec2) -> MapTile:
        """Return the tile at ``index``; raise IndexError outside the map."""
        if not (0 <= index.x < MAP_SIZE and 0 <= index.y < MAP_SIZE):
            raise IndexError(
                f"Accessing tile ({index.x}, {index.y}) which is outside the map"
            )
        return self.tiles[index.y * MAP_SIZE + index.x]

    def top_tile(self, index: IVec2) -> TileType:
        """Return the visible tile type at ``index``, or NONE outside the map."""
        try:
            tile = self.maptile(index)
        except IndexError:
            self._logger.warning(
                f"Getting top of tile ({index.x}, {index.y}) which is outside the map\n"
            )
            return TileType.NONE
        return tile.top()

    def hand_item(self) -> ItemStack:
        """Return the inventory stack in the selected hotbar slot."""
        return self.inventory[self.current_hotbar_slot]

    def add_to_inventory(self, stack: ItemStack) -> ItemStack | None:
        """Add ``stack`` to the inventory.

        Existing stacks of the same type are topped up first; whatever is
        left goes into the first empty slot. Returns None if everything fit,
        otherwise the stack that did not.
        """
        remaining = stack.count
        empty_slot: int | None = None

        for slot, current in enumerate(self.inventory):
            if current.type is stack.type:
                can_add = self.registry.item_info(current.type).max_stack - current.count
                to_add = min(remaining, can_add)
                current.count += to_add
                remaining -= to_add
                if remaining <= 0:
                    return None
            elif current.type is ItemType.NONE and empty_slot is None:
                empty_slot = slot

        leftover = ItemStack(stack.type, remaining)
        if empty_slot is not None:
            self.inventory[empty_slot] = leftover
            return None
        return leftover

    def place_item(self, tile_pos: IVec2, item: ItemType) -> bool:
        """Place ``item`` on the tile at ``tile_pos``; return whether it was placed."""
        info = self.registry.item_info(item)
        try:
            tile = self.maptile(tile_pos)
        except IndexError as exc:
            self._logger.warning(f"{exc}\n")
            return False

        if info.placeable is Placeable.FOREGROUND:
            if tile.foreground is not TileType.NONE:
                return False
            tile.foreground = TileType(info.place_type)
            return True

        if info.placeable is Placeable.GROUND_OBJECT:
            if tile.ground_object is not GroundObjectType.NONE:
                return False
            tile.ground_object = GroundObjectType(info.place_type)
            return True

        return False

    def add_ground_item(self, item: GroundItem) -> bool:
        """Store a copy of ``item`` in the next free ground slot; return whether it fit."""
        if self.ground_item_count >= MAX_GROUND_ITEMS:
            self._logger.warning("Trying to add ground item, but there's no space\n")
            return False

        for offset in range(MAX_GROUND_ITEMS):
            slot = (self.ground_item_index + offset) % MAX_GROUND_ITEMS
            if self.ground_items[slot].empty:
                self.ground_items[slot] = item.copy()
                self.ground_item_index = slot
                self.ground_item_count += 1
                return True

        self._logger.error(
            "Couldn't find a free slot for ground item even though there should be space\n"
        )
        return False