"""Pygame adapters for configuration values.

These are the only places where a ``ConfigColor`` or a font setting leaves the
configuration layer; colours are clamped here.
"""

import logging
from typing import Optional

import pygame

from .colors import ConfigColor

logger = logging.getLogger(__name__)

FALLBACK_FONT_FAMILY = "sans"
FALLBACK_FONT_SIZE = 14


def to_pygame_color(color: ConfigColor) -> pygame.Color:
    """Clamped 8-bit ``pygame.Color`` for ``color``."""
    return pygame.Color(*color.to_rgba255())


def color_to_pixel(surface: "pygame.Surface", color: Optional[ConfigColor]) -> int:
    """Mapped pixel value of ``color`` in ``surface``'s pixel format.

    Falls back to black when no colour is given.
    """
    if color is None:
        return surface.map_rgb((0, 0, 0))
    return surface.map_rgb(to_pygame_color(color))


def open_font(family: Optional[str], size: int) -> "pygame.font.Font":
    """Open a system font, falling back to sans 14 when the request is unusable."""
    if not pygame.font.get_init():
        pygame.font.init()
    if family and family.strip() and size > 0:
        try:
            return pygame.font.SysFont(family, size)
        except (pygame.error, OSError) as e:
            logger.warning("Could not open font %r size %d (%s), using fallback",
                           family, size, e)
    else:
        logger.debug("Unusable font request %r size %r, using fallback", family, size)
    return pygame.font.SysFont(FALLBACK_FONT_FAMILY, FALLBACK_FONT_SIZE)
