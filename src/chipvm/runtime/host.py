import os
import logging as lg
from typing import Sequence

os.environ.setdefault('PYGAME_HIDE_SUPPORT_PROMPT', '1')
import pygame  # noqa: E402

from chipvm.common.hwconf import (  # noqa: E402
    SCREEN_WIDTH, SCREEN_HEIGHT, DISPLAY_SCALE, FRAME_RATE, WINDOW_TITLE,
    FOREGROUND, BACKGROUND, KEY_LAYOUT
)
from chipvm.runtime.display import Framebuffer  # noqa: E402


def key_codes(layout: Sequence[str]) -> list[int]:
    """Resolves pygame key names. Raises ValueError on an unknown name."""

    if not pygame.get_init():
        pygame.init()

    return [pygame.key.key_code(name) for name in layout]


class PygameKeypad:
    """Reads the logical keypad from the current pygame keyboard state"""

    def __init__(self, layout: Sequence[str] = KEY_LAYOUT):
        self.codes = key_codes(layout)

    def is_key_down(self, index: int) -> bool:
        return bool(pygame.key.get_pressed()[self.codes[index]])


class Screen:
    def __init__(self, title: str = WINDOW_TITLE, scale: int = DISPLAY_SCALE):
        self.scale = scale
        self.surface = pygame.display.set_mode(
            (SCREEN_WIDTH * scale, SCREEN_HEIGHT * scale)
        )
        pygame.display.set_caption(title)

    def render(self, frame: Framebuffer):
        s = self.scale
        self.surface.fill(BACKGROUND)

        for y, row in enumerate(frame):
            for x, lit in enumerate(row):
                if lit:
                    pygame.draw.rect(self.surface, FOREGROUND, (x * s, y * s, s, s))

        pygame.display.flip()


def should_quit() -> bool:
    for event in pygame.event.get():
        if event.type == pygame.QUIT:
            return True

        if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            return True

    return False


class Window:
    def __init__(self, title: str = WINDOW_TITLE):
        self.title = title
        self.screen: Screen | None = None
        self.clock: pygame.time.Clock | None = None

    def __enter__(self):
        pygame.init()
        self.screen = Screen(self.title)
        self.clock = pygame.time.Clock()
        lg.debug('Window opened')
        return self

    def __exit__(self, *exc):
        pygame.quit()
        lg.debug('Window closed')
        return False

    def frame(self, frame: Framebuffer) -> bool:
        """Draws a frame and waits for the next tick. Returns False once the user quits."""

        assert self.screen is not None and self.clock is not None

        if should_quit():
            return False

        self.screen.render(frame)
        self.clock.tick(FRAME_RATE)
        return True
