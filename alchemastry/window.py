"""Window, input and timing services backed by pygame."""

from __future__ import annotations

import random as _random
import time
from collections import defaultdict
from enum import Enum

import pygame

from alchemastry.log import Logger
from alchemastry.maths import IVec2, Vec2

WINDOW_WIDTH = 1600
WINDOW_HEIGHT = 900
WINDOW_TITLE = "Alchemastry"
TITLE_REFRESH_FRAMES = 30


class KeyState(Enum):
    PRESSED = 0
    DOWN = 1
    RELEASED = 2
    UP = 3


class InputState:
    """Tracks per-frame state of keys or buttons identified by integer codes."""

    def __init__(self) -> None:
        self._states: defaultdict[int, KeyState] = defaultdict(lambda: KeyState.UP)

    def __getitem__(self, code: int) -> KeyState:
        return self._states.get(code, KeyState.UP)

    def press(self, code: int) -> None:
        self._states[code] = KeyState.PRESSED

    def release(self, code: int) -> None:
        self._states[code] = KeyState.RELEASED

    def advance(self) -> None:
        """Move pressed codes to down and released codes to up for the next frame."""
        for code, state in self._states.items():
            if state is KeyState.PRESSED:
                self._states[code] = KeyState.DOWN
            elif state is KeyState.RELEASED:
                self._states[code] = KeyState.UP

    def is_down(self, code: int) -> bool:
        return self[code] in (KeyState.DOWN, KeyState.PRESSED)

    def is_pressed(self, code: int) -> bool:
        return self[code] is KeyState.PRESSED

    def is_released(self, code: int) -> bool:
        return self[code] is KeyState.RELEASED


def read_file(path: str) -> str:
    """Return the text of ``path``; an empty file is an error."""
    with open(path, encoding="utf-8") as handle:
        content = handle.read()
    if not content:
        raise ValueError(f"Trying to read file {path} but it's empty")
    return content


class Platform:
    """A game window with keyboard, mouse and frame timing."""

    def __init__(
        self,
        width: int = WINDOW_WIDTH,
        height: int = WINDOW_HEIGHT,
        title: str = WINDOW_TITLE,
        logger: Logger | None = None,
    ) -> None:
        self._logger = logger if logger is not None else Logger()
        self._title = title
        try:
            pygame.display.init()
            pygame.display.set_mode((width, height), pygame.RESIZABLE)
        except pygame.error as exc:
            self._logger.fatal(f"Failed to create window: {exc}\n")
            raise RuntimeError("Failed to create window") from exc
        pygame.display.set_caption(title)

        self.keys = InputState()
        self.mouse = InputState()
        self._closed = False

        self.viewport = self.viewport_size()
        self.viewport_changed = False

        self._start = time.perf_counter()
        self.time = 0.0
        self.delta_time = 0.0
        self.frame_count = 0

        self._rng = _random.Random(time.time())

    def _elapsed(self) -> float:
        return time.perf_counter() - self._start

    def _handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self._closed = True
        elif event.type == pygame.KEYDOWN:
            self.keys.press(event.key)
        elif event.type == pygame.KEYUP:
            self.keys.release(event.key)
        elif event.type == pygame.MOUSEBUTTONDOWN:
            self.mouse.press(event.button)
        elif event.type == pygame.MOUSEBUTTONUP:
            self.mouse.release(event.button)

    def update(self) -> None:
        """Finish the frame: advance input, present, poll events and time."""
        self.keys.advance()
        self.mouse.advance()

        pygame.display.flip()
        for event in pygame.event.get():
            self._handle_event(event)

        new_viewport = self.viewport_size()
        self.viewport_changed = new_viewport != self.viewport
        self.viewport = new_viewport

        now = self._elapsed()
        self.delta_time = now - self.time
        self.time = now

        if self.frame_count % TITLE_REFRESH_FRAMES == 0 and self.delta_time > 0.0:
            fps = round(1.0 / self.delta_time)
            pygame.display.set_caption(f"{self._title} - {fps} FPS")

        self.frame_count += 1

    def close(self) -> None:
        self._closed = True

    def closed(self) -> bool:
        return self._closed

    def viewport_size(self) -> IVec2:
        width, height = pygame.display.get_window_size()
        return IVec2(width, height)

    def mouse_position(self) -> Vec2:
        x, y = pygame.mouse.get_pos()
        return Vec2(float(x), float(y))

    def random(self) -> float:
        """Return a uniformly distributed float in [0, 1]."""
        return self._rng.random()

    def shutdown(self) -> None:
        pygame.display.quit()