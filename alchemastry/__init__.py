"""A small top-down tile-based crafting and gathering game, with a helper for building C sources."""

__version__ = "0.1.0"