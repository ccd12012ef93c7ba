"""Per-frame game logic and drawing of the world, hotbar and inventory."""

from __future__ import annotations

import math
from enum import Enum

import pygame

from alchemastry.gfx import (
    BuiltinShader,
    Gfx,
    quad_colour_bl,
    quad_tex_bl,
    quad_tex_centred,
)
from alchemastry.log import Logger
from alchemastry.maths import (
    IVec2,
    Vec2,
    Vec4,
    ui_projection,
    world_to_ndc_projection,
)
from alchemastry.registry import GroundObjectType, ItemType, Registry, TileType
from alchemastry.world import (
    GROUND_ITEM_SPEED,
    HOTBAR_SIZE,
    MAP_SIZE,
    GroundItem,
    ItemStack,
    World,
    droptable,
)

DEFAULT_ZOOM = 12.0
ASPECT = 9.0 / 16.0

UI_VIRTUAL_SIZE = Vec2(1280.0, 720.0)
UI_HOTBAR_POSITION = Vec2(370.0, 0.0)
UI_INVENTORY_POSITION = Vec2(370.0, 150.0)
UI_INVENTORY_CELL_SIZE = 60.0
UI_INVENTORY_ITEM_OFFSET = Vec2(10.0, 10.0)
UI_INVENTORY_ITEM_SIZE = 40.0
UI_INVENTORY_ITEM_TEXT_OFFSET = Vec2(38.0, 10.0)
UI_INVENTORY_ITEM_TEXT_SIZE = 15.0
INVENTORY_COLUMNS = 9
INVENTORY_ROWS = 4

TILE_SIZE = Vec2(1.0, 1.0)
GROUND_ITEM_OFFSET = Vec2(0.1, 0.1)
GROUND_ITEM_SIZE = Vec2(0.8, 0.8)
PLAYER_SIZE = Vec2(0.8, 1.6)
HIGHLIGHT_COLOUR = Vec4(0.7, 0.7, 0.7, 0.2)
TALLEST_OBJECT = 2


class UiPanel(Enum):
    NONE = 0
    INVENTORY = 1


class Game:
    """Runs the player's interaction with the world and draws it each frame.

    ``platform`` supplies ``keys`` and ``mouse`` input states, ``time`` and
    ``delta_time``, and the methods ``close``, ``viewport_size``,
    ``mouse_position`` and ``random``.
    """

    def __init__(
        self,
        platform,
        gfx: Gfx,
        registry: Registry,
        world: World | None = None,
        logger: Logger | None = None,
        zoom: float = DEFAULT_ZOOM,
    ) -> None:
        self.platform = platform
        self.gfx = gfx
        self.registry = registry
        self.logger = logger if logger is not None else Logger()
        self.zoom = zoom
        if world is None:
            world = World(registry, self.logger)
            world.generate(platform.random)
        self.world = world

        self.current_ui = UiPanel.NONE
        self.mouse_position_world = Vec2(0.0, 0.0)
        self.mouse_position_ui = Vec2(0.0, 0.0)
        self.mouse_tile = IVec2(0, 0)
        self.mouse_tile_index = 0
        self.mouse_inventory_index = -1

    # ---------- update ----------

    def update(self) -> None:
        """Apply one frame of input to the world."""
        platform = self.platform
        world = self.world

        if platform.keys.is_down(pygame.K_ESCAPE):
            platform.close()
            return

        self._update_mouse()

        if platform.keys.is_pressed(pygame.K_e):
            if self.current_ui is UiPanel.NONE:
                self.current_ui = UiPanel.INVENTORY
            elif self.current_ui is UiPanel.INVENTORY:
                self.current_ui = UiPanel.NONE

        if self.current_ui is UiPanel.INVENTORY:
            if (
                platform.mouse.is_pressed(pygame.BUTTON_LEFT)
                and self.mouse_inventory_index != -1
            ):
                index = self.mouse_inventory_index
                world.inventory[index], world.inventory_hand = (
                    world.inventory_hand,
                    world.inventory[index],
                )
            return

        for slot, key in enumerate(range(pygame.K_1, pygame.K_1 + HOTBAR_SIZE)):
            if platform.keys.is_down(key):
                world.current_hotbar_slot = slot

        if platform.mouse.is_pressed(pygame.BUTTON_LEFT):
            self._break_at_mouse()

        if platform.mouse.is_down(pygame.BUTTON_RIGHT):
            hand = world.hand_item()
            if hand.count > 0 and world.place_item(self.mouse_tile, hand.type):
                hand.count -= 1

        self._move_player()
        self.update_ground_items()

    def _update_mouse(self) -> None:
        mouse = self.platform.mouse_position()
        screen = self.platform.viewport_size()

        fx = mouse.x / screen.x
        fy = (screen.y - mouse.y) / screen.y

        offset = Vec2((fx * 2.0 - 1.0) * self.zoom, (fy * 2.0 - 1.0) * self.zoom * ASPECT)
        self.mouse_position_world = offset + self.world.position
        self.mouse_tile = self.mouse_position_world.to_ivec2()
        self.mouse_tile_index = self.mouse_tile.y * MAP_SIZE + self.mouse_tile.x

        self.mouse_position_ui = Vec2(fx * UI_VIRTUAL_SIZE.x, fy * UI_VIRTUAL_SIZE.y)
        slot = (
            (self.mouse_position_ui - UI_INVENTORY_POSITION)
            .scaled(1.0 / UI_INVENTORY_CELL_SIZE)
            .to_ivec2()
        )
        if 0 <= slot.x < INVENTORY_COLUMNS and 0 <= slot.y < INVENTORY_ROWS:
            self.mouse_inventory_index = slot.y * INVENTORY_COLUMNS + slot.x
        else:
            self.mouse_inventory_index = -1

    def _break_at_mouse(self) -> None:
        try:
            tile = self.world.maptile(self.mouse_tile)
        except IndexError as exc:
            self.logger.warning(f"{exc}\n")
            return

        ground_object = tile.ground_object
        tile.ground_object = GroundObjectType.NONE

        if ground_object is not GroundObjectType.NONE:
            info = self.registry.ground_object_info(ground_object)
            for stack in droptable(info.droptable):
                self.world.add_ground_item(
                    GroundItem(self.mouse_tile.to_vec2(), stack, 0.0)
                )
        elif tile.foreground is not TileType.NONE:
            tile.foreground = TileType.NONE

    def _move_player(self) -> None:
        keys = self.platform.keys
        world = self.world
        player_tile = world.position.to_ivec2()

        dx = dy = 0.0
        if keys.is_down(pygame.K_w):
            dy += 1.0
        if keys.is_down(pygame.K_s):
            dy -= 1.0
        if keys.is_down(pygame.K_d):
            dx += 1.0
        if keys.is_down(pygame.K_a):
            dx -= 1.0

        if dx == 0.0 and dy == 0.0:
            return

        multiplier = self.registry.tile_info(world.top_tile(player_tile)).speed_multiplier
        step = world.speed * multiplier * self.platform.delta_time
        world.position = world.position + Vec2(dx, dy).normalised().scaled(step)

    def update_ground_items(self) -> None:
        """Pull nearby ground items towards the player and pick up those that arrive."""
        world = self.world
        now = self.platform.time
        reach_sqr = world.reach * world.reach

        for slot, item in enumerate(world.ground_items):
            if item.empty:
                continue

            position = world.position
            to_player = position - item.position
            dist_sqr = to_player.length_sqr()

            if item.player_detection_time == 0.0 and dist_sqr <= reach_sqr:
                item.player_detection_time = now

            if item.player_detection_time != 0.0:
                time_to_reach = item.player_detection_time + GROUND_ITEM_SPEED - now
                if time_to_reach <= 0.05:
                    item.position = position
                else:
                    speed = math.sqrt(dist_sqr) / time_to_reach
                    item.position = item.position + to_player.normalised().scaled(
                        speed * self.platform.delta_time
                    )

            if item.position == position:
                leftover = world.add_to_inventory(item.stack)
                if leftover is None:
                    self.logger.debug(
                        f"Added {item.stack.count} of item {item.stack.type.value} to inventory\n"
                    )
                    world.ground_items[slot] = GroundItem()
                else:
                    item.stack = leftover

    # ---------- render ----------

    def _visible_range(self) -> tuple[range, range]:
        pos = self.world.position
        half_w = self.zoom
        half_h = self.zoom * ASPECT
        x0 = max(0, math.floor(pos.x - half_w) - 1)
        x1 = min(MAP_SIZE - 1, math.ceil(pos.x + half_w) + 1)
        y0 = max(0, math.floor(pos.y - half_h) - TALLEST_OBJECT - 1)
        y1 = min(MAP_SIZE - 1, math.ceil(pos.y + half_h) + 1)
        return range(y1, y0 - 1, -1), range(x0, x1 + 1)

    def render(self) -> None:
        """Queue the world and the UI for drawing; only tiles near the view are drawn."""
        gfx = self.gfx
        world = self.world
        registry = self.registry

        world_projection = world_to_ndc_projection(self.zoom)
        gfx.set_projection(BuiltinShader.TEXTURE, world_projection)
        gfx.set_projection(BuiltinShader.COLOUR, world_projection)

        player_tile = world.position.to_ivec2()
        rows, columns = self._visible_range()

        for y in rows:
            for x in columns:
                tile = world.tiles[y * MAP_SIZE + x]
                from_player = Vec2(float(x), float(y)) - world.position
                gfx.draw_quad(
                    quad_tex_bl(from_player, TILE_SIZE, registry.tile_info(tile.top()).sprite)
                )
                if IVec2(x, y) == self.mouse_tile and self.current_ui is UiPanel.NONE:
                    gfx.flush_sprite_quads()
                    gfx.draw_quad(quad_colour_bl(from_player, TILE_SIZE, HIGHLIGHT_COLOUR))
                    gfx.flush_colour_quads()

        for item in world.ground_items:
            if item.stack.type is not ItemType.NONE and item.stack.count > 0:
                gfx.draw_quad(
                    quad_tex_bl(
                        item.position + GROUND_ITEM_OFFSET - world.position,
                        GROUND_ITEM_SIZE,
                        registry.item_info(item.stack.type).sprite,
                    )
                )

        for y in rows:
            for x in columns:
                tile = world.tiles[y * MAP_SIZE + x]
                if tile.ground_object is GroundObjectType.NONE:
                    continue
                info = registry.ground_object_info(tile.ground_object)
                from_player = Vec2(float(x), float(y)) - world.position
                gfx.draw_quad(quad_tex_bl(from_player, info.size, info.sprite))

            if y == player_tile.y:
                gfx.draw_quad(
                    quad_tex_centred(Vec2(0.0, 0.0), PLAYER_SIZE, registry.player_sprite)
                )

        gfx.flush_colour_quads()
        gfx.flush_sprite_quads()
        projection = ui_projection(UI_VIRTUAL_SIZE)
        gfx.set_projection(BuiltinShader.TEXTURE, projection)
        gfx.set_projection(BuiltinShader.COLOUR, projection)

        cell = Vec2(UI_INVENTORY_CELL_SIZE, UI_INVENTORY_CELL_SIZE)

        for i in range(HOTBAR_SIZE):
            origin = UI_HOTBAR_POSITION + Vec2(i * UI_INVENTORY_CELL_SIZE, 0.0)
            sprite = (
                registry.ui_hotbar_active_sprite
                if world.current_hotbar_slot == i
                else registry.ui_hotbar_sprite
            )
            gfx.draw_quad(quad_tex_bl(origin, cell, sprite))
            self._render_stack(origin, world.inventory[i])

        if self.current_ui is not UiPanel.INVENTORY:
            return

        for row in range(INVENTORY_ROWS):
            for column in range(INVENTORY_COLUMNS):
                index = row * INVENTORY_COLUMNS + column
                origin = UI_INVENTORY_POSITION + Vec2(
                    column * UI_INVENTORY_CELL_SIZE, row * UI_INVENTORY_CELL_SIZE
                )
                sprite = (
                    registry.ui_hotbar_active_sprite
                    if self.mouse_inventory_index == index
                    else registry.ui_hotbar_sprite
                )
                gfx.draw_quad(quad_tex_bl(origin, cell, sprite))
                self._render_stack(origin, world.inventory[index])

        hand = world.inventory_hand
        if hand.count > 0 and hand.type is not ItemType.NONE:
            gfx.draw_quad(
                quad_tex_centred(
                    self.mouse_position_ui,
                    Vec2(UI_INVENTORY_ITEM_SIZE, UI_INVENTORY_ITEM_SIZE),
                    registry.item_info(hand.type).sprite,
                )
            )
            self.render_number(
                self.mouse_position_ui + UI_INVENTORY_ITEM_TEXT_OFFSET,
                UI_INVENTORY_ITEM_TEXT_SIZE,
                hand.count,
            )

    def _render_stack(self, origin: Vec2, stack: ItemStack) -> None:
        if stack.count <= 0:
            return
        self.gfx.draw_quad(
            quad_tex_bl(
                origin + UI_INVENTORY_ITEM_OFFSET,
                Vec2(UI_INVENTORY_ITEM_SIZE, UI_INVENTORY_ITEM_SIZE),
                self.registry.item_info(stack.type).sprite,
            )
        )
        self.render_number(
            origin + UI_INVENTORY_ITEM_TEXT_OFFSET, UI_INVENTORY_ITEM_TEXT_SIZE, stack.count
        )

    def render_number(self, position: Vec2, number_size: float, number: int) -> None:
        """Draw ``number`` right to left, its last digit at ``position``; zero draws nothing."""
        size = Vec2(number_size, number_size)
        index = 0
        while number > 0:
            number, digit = divmod(number, 10)
            self.gfx.draw_quad(
                quad_tex_bl(
                    position - Vec2(number_size * index, 0.0),
                    size,
                    self.registry.number_sprites[digit],
                )
            )
            index += 1