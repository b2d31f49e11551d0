"""Colour and scalar value codecs for CONF files.

Every parser in this module is total: malformed input never raises, it maps to
a defined fallback so that one bad line cannot spoil a whole load.
"""

import math
import re
import string
from enum import Enum
from typing import NamedTuple, Optional

from .utils import clamp


class ConfigColor(NamedTuple):
    """RGBA colour with float channels, nominally in [0.0, 1.0].

    Channels may drift outside the range while stored; they are clamped only
    when converted for rendering or to 8-bit hex.
    """
    r: float
    g: float
    b: float
    a: float = 1.0

    def clamped(self) -> "ConfigColor":
        return ConfigColor(*(clamp(float(c), 0.0, 1.0) for c in self))

    def to_rgb255(self):
        """8-bit (r, g, b) of the clamped colour, rounded to nearest."""
        c = self.clamped()
        return tuple(int(round(x * 255)) for x in (c.r, c.g, c.b))

    def to_rgba255(self):
        c = self.clamped()
        return tuple(int(round(x * 255)) for x in c)


FALLBACK_COLOR = ConfigColor(0.0, 0.0, 0.0, 1.0)

_HEX_DIGITS = set(string.hexdigits)
_FLOAT_SEP = re.compile(r"[,\s]+")
_LEADING_INT = re.compile(r"^[+-]?\d+")

TRUE_WORDS = ("true", "1", "yes", "on")


def _parse_hex(h: str) -> Optional[ConfigColor]:
    if h.startswith("#"):
        h = h[1:]
    if len(h) not in (6, 8) or not all(c in _HEX_DIGITS for c in h):
        return None
    channels = [int(h[i:i + 2], 16) / 255.0 for i in range(0, len(h), 2)]
    if len(channels) == 3:
        channels.append(1.0)
    return ConfigColor(*channels)


def _parse_floats(text: str) -> Optional[ConfigColor]:
    parts = [p for p in _FLOAT_SEP.split(text.strip()) if p]
    if len(parts) not in (3, 4):
        return None
    try:
        values = [float(p) for p in parts]
    except ValueError:
        return None
    if not all(math.isfinite(v) for v in values):
        return None
    if len(values) == 3:
        values.append(1.0)
    return ConfigColor(*values)


def parse_color(text: Optional[str]) -> ConfigColor:
    """Parse ``#RRGGBB``/``#RRGGBBAA`` (``#`` optional) or ``r, g, b[, a]`` floats.

    Returns opaque black for anything else.
    """
    if not text:
        return FALLBACK_COLOR
    text = text.strip()
    color = _parse_hex(text)
    if color is None:
        color = _parse_floats(text)
    return color if color is not None else FALLBACK_COLOR


def _exact_byte(c: float) -> Optional[int]:
    """The byte n with n/255 == c, if there is one."""
    if not 0.0 <= c <= 1.0:
        return None
    n = int(round(c * 255))
    return n if n / 255.0 == c else None


def color_to_hex(color: ConfigColor, uppercase: bool = True, prefix: bool = True) -> str:
    """8-bit hex of the clamped RGB channels; alpha is dropped."""
    text = "%02x%02x%02x" % color.to_rgb255()
    if uppercase:
        text = text.upper()
    return ("#" + text) if prefix else text


def format_color(color: ConfigColor, uppercase: bool = True) -> str:
    """Serialize a colour so that ``parse_color`` gives it back unchanged.

    Colours made of exact 8-bit channels use hex; anything else falls back to
    the float form at full precision.
    """
    rgb = [_exact_byte(c) for c in color[:3]]
    alpha = _exact_byte(color.a)
    if None not in rgb and alpha is not None:
        digits = "%02x%02x%02x" % tuple(rgb)
        if alpha != 255:
            digits += "%02x" % alpha
        return "#" + (digits.upper() if uppercase else digits)
    return ", ".join(repr(float(c)) for c in color)


def parse_int(value: Optional[str], fallback: int) -> int:
    """Leading integer of ``value`` (``"12px"`` -> 12), or ``fallback``."""
    if value is None:
        return fallback
    m = _LEADING_INT.match(value.strip())
    return int(m.group(0)) if m else fallback


def parse_bool(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() in TRUE_WORDS


def format_bool(value: bool) -> str:
    return "true" if value else "false"


class BorderMode(Enum):
    """How the swatch border colour is derived from the swatch colour."""
    COMPLEMENTARY = "complementary"
    INVERSE = "inverse"
    CONTRAST = "contrast"
    TRIADIC = "triadic"


def parse_border_mode(value: Optional[str], fallback: BorderMode = BorderMode.COMPLEMENTARY) -> BorderMode:
    try:
        return BorderMode((value or "").strip().lower())
    except ValueError:
        return fallback


def parse_hex_case(value: Optional[str]) -> bool:
    """``True`` for upper-case hex output (``upper`` or ``1``)."""
    return (value or "").strip().lower() in ("upper", "1")


def format_hex_case(uppercase: bool) -> str:
    return "upper" if uppercase else "lower"


def relative_luminance(color: ConfigColor) -> float:
    def chan(c):
        return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4
    c = color.clamped()
    return 0.2126 * chan(c.r) + 0.7152 * chan(c.g) + 0.0722 * chan(c.b)


def calculate_contrast_ratio(color1: ConfigColor, color2: ConfigColor) -> float:
    """Contrast ratio between two colours (WCAG AA requires 4.5:1)."""
    l1, l2 = relative_luminance(color1), relative_luminance(color2)
    return (max(l1, l2) + 0.05) / (min(l1, l2) + 0.05)
