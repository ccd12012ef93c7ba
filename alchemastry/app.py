"""Entry point that sets up the window, renderer and game and runs the main loop."""

from __future__ import annotations

import argparse
import sys

from alchemastry.game import Game
from alchemastry.gfx import Gfx, load_texture, make_atlas
from alchemastry.log import Logger, LogLevel
from alchemastry.maths import Vec4
from alchemastry.registry import ATLAS_CELL_SIZE, ATLAS_PATH, ELISHA_PATH, build_registry
from alchemastry.window import Platform

BACKGROUND = Vec4(1.0, 0.0, 1.0, 1.0)


def run(platform, gfx: Gfx, game: Game) -> int:
    """Run frames until the platform's window is closed; return the number of frames."""
    frames = 0
    while not platform.closed():
        game.update()
        gfx.start_frame(BACKGROUND)
        game.render()
        gfx.end_frame()
        platform.update()
        frames += 1
    return frames


def main(argv: list[str] | None = None) -> int:
    """Open the game window and play until it is closed."""
    parser = argparse.ArgumentParser(prog="alchemastry", description="Play Alchemastry.")
    parser.parse_args(argv)

    logger = Logger(LogLevel.DEBUG)
    try:
        platform = Platform(logger=logger)
    except RuntimeError:
        return 1

    try:
        gfx = Gfx(logger=logger)
        try:
            atlas_texture = load_texture(ATLAS_PATH)
            elisha_texture = load_texture(ELISHA_PATH)
        except (OSError, ValueError) as exc:
            logger.fatal(f"{exc}\n")
            return 1
        registry = build_registry(make_atlas(atlas_texture, ATLAS_CELL_SIZE), elisha_texture)
        game = Game(platform, gfx, registry, logger=logger)
        run(platform, gfx, game)
    finally:
        platform.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(main())