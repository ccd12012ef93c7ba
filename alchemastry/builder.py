"""Collect C sources and compiler flags, compile the game and launch it."""

from __future__ import annotations

import argparse
import os
import shutil
import subprocess
import sys
from collections.abc import Iterable

MAX_ENTRIES = 256
COMPILER = "gcc"
FLAGS_FILE = "compile_flags.txt"
SOURCE_DIRS = ("src", "vendor")
BUILD_DIR = "build"
GAME_BINARY = "build/game.o"


class BuildError(Exception):
    """Raised when the build inputs cannot be gathered."""


def _is_c_source(name: str) -> bool:
    return len(name) >= 3 and name.endswith(".c")


def find_sources(directory: str) -> list[str]:
    """Return the ``.c`` files under ``directory``, recursively.

    Files directly inside a directory come first in name order, followed by
    the contents of each subdirectory, also in name order. Subdirectories
    that cannot be read are skipped.
    """
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda entry: entry.name)
    except OSError as exc:
        raise BuildError(
            f"scandir failed to find files in directory {directory}"
        ) from exc

    sources = [
        f"{directory}/{entry.name}"
        for entry in entries
        if entry.is_file(follow_symlinks=False) and _is_c_source(entry.name)
    ]

    for entry in entries:
        if not entry.is_dir(follow_symlinks=False):
            continue
        try:
            sources.extend(find_sources(f"{directory}/{entry.name}"))
        except BuildError as exc:
            print(exc, file=sys.stderr)

    return sources


def read_compile_flags(path: str = FLAGS_FILE) -> list[str]:
    """Read one compiler flag per line from ``path``, ignoring blank lines."""
    try:
        with open(path, encoding="utf-8") as handle:
            lines = handle.read().splitlines()
    except OSError as exc:
        raise BuildError(f"Cannot open {path}") from exc

    flags = [line for line in lines if line]
    if len(flags) > MAX_ENTRIES:
        raise BuildError(
            "filled up file list while reading in compile flags, ruh roh!"
        )
    return flags


def build_command(sources: Iterable[str], flags: Iterable[str]) -> str:
    """Return the shell command that compiles ``sources`` with ``flags``."""
    return " ".join([COMPILER, *sources, *flags])


def main(argv: list[str] | None = None) -> int:
    """Compile every source into build/ and run the resulting game."""
    parser = argparse.ArgumentParser(
        prog="alchemastry-build",
        description="Compile the game from src/ and vendor/ and run it.",
    )
    parser.parse_args(argv)

    try:
        sources: list[str] = []
        for directory in SOURCE_DIRS:
            sources.extend(find_sources(directory))
            if len(sources) > MAX_ENTRIES:
                raise BuildError(
                    "filled up file list while finding sources in "
                    f"directory {directory}, ruh roh"
                )

        for source in sources:
            print(f"Adding source: {source}")

        flags = read_compile_flags(FLAGS_FILE)
        for flag in flags:
            print(f"Adding compile flag: {flag}")
    except BuildError as exc:
        print(exc, file=sys.stderr)
        return 1

    print(f"Creating directory: {BUILD_DIR}")
    shutil.rmtree(BUILD_DIR, ignore_errors=True)
    os.makedirs(BUILD_DIR, exist_ok=True)

    command = build_command(sources, flags)
    print(f"Compile command: {command}\n")
    subprocess.run(command, shell=True, check=False)

    subprocess.run(GAME_BINARY, shell=True, check=False)
    return 0


if __name__ == "__main__":
    sys.exit(main())