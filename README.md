# alchemastry

A small top-down, tile-based game about gathering and placing things. You walk
around a 256 × 256 tile map of grass, dirt and stone, chop trees and break
rocks, pick up what they drop, and lay down paths that let you move twice as
fast.

## Installing

```
pip install .
```

To run the test suite as well:

```
pip install ".[test]"
pytest
```

## Playing

Start the game from a directory that holds the game's assets:

```
alchemastry
```

Textures are read relative to the current working directory:

- `assets/textures/atlas.png`: the sprite atlas, laid out in 8 × 8 pixel cells
- `assets/textures/Elisha.png`: the picture used for the Elisha item

If either texture cannot be loaded the game logs the error and exits with
status 1.

The window opens at 1600 × 900 and can be resized; its title shows the
current frame rate, refreshed every 30 frames. Only the tiles around the
player are drawn each frame.

### Controls

| Input              | Action                                                          |
|--------------------|-----------------------------------------------------------------|
| W / A / S / D      | Move                                                            |
| 1 – 9              | Select a hotbar slot                                            |
| Left mouse button  | Harvest the tree or rock under the cursor, or remove a path     |
| Right mouse button | Place the item held in the selected hotbar slot (hold to paint) |
| E                  | Open or close the inventory                                     |
| Escape             | Quit                                                            |

Only path items can be placed; they go on top of the tile under the cursor.

While the inventory is open, left-clicking a slot swaps its contents with the
stack held on the cursor.

Trees drop 5 wood and rocks drop 3 stone. Dropped items fly towards you once
you come within reach. On arrival they top up existing stacks of the same
kind, and whatever is left goes into the first empty slot. You start with
wood, stone, a stack of path tiles and Elisha.

## The build helper

`alchemastry-build` drives a plain C toolchain build from a project
directory. It collects every `.c` file under `src/` and `vendor/` (files in a
directory first, in name order, then each subdirectory in name order), appends
the non-blank lines of `compile_flags.txt` as flags, recreates the `build/`
directory, runs `gcc` with the assembled command, and then starts
`build/game.o`.

```
alchemastry-build
```

It stops with exit status 1 if `src/` or `vendor/` cannot be read,
`compile_flags.txt` cannot be opened, or more than 256 sources or flags are
found. Subdirectories that cannot be read are reported and skipped.

## Using it as a library

The pieces of the game are usable on their own:

- `alchemastry.maths`: `Vec2`, `IVec2`, `Vec4`, `Mat2`, `Mat4`, the
  rotations `rotation_ccw` and `rotation_cw`, the projections
  `world_to_ndc_projection` and `ui_projection`, and `quad_vertices` for
  turning a `Quad` into its four corners.
- `alchemastry.log`: a `Logger` that filters by `LogLevel`.
- `alchemastry.window`: `Platform` (the pygame window), `InputState`, which
  tracks pressed / down / released / up transitions for keys and mouse
  buttons, and `read_file`.
- `alchemastry.gfx`: `load_texture`, `make_atlas`, sprites and `Gfx`, which
  batches quads and draws them onto a pygame surface.
- `alchemastry.registry` and `alchemastry.world`: tile, item and ground-object
  tables, the map, inventory handling and drop tables.
- `alchemastry.game` and `alchemastry.app`: the per-frame `Game` logic and the
  `run` loop.

```python
from alchemastry.maths import Origin, Quad, Vec2, quad_vertices

corners = quad_vertices(Quad(Vec2(0.0, 0.0), Vec2(2.0, 1.0), 0.0, Origin.CENTRE))
print(corners.bottom_left, corners.top_right)
```