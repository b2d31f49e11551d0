"""Configuration management for PixelPrism.

The aggregate ``PixelPrismConfig`` is a plain tree of dataclasses. Reading and
writing it goes through the section registry: the loader below only knows the
CONF grammar (``[section]`` headers and ``key = value`` lines) and hands every
line to whichever handler owns the current section.
"""

import io
import logging
import os
import shutil
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, Iterable, List, Optional

from .colors import (
    BorderMode, ConfigColor, calculate_contrast_ratio, parse_color,
)
from .registry import SectionRegistry, get_registry

logger = logging.getLogger(__name__)

# Configuration constants
DEFAULT_FONT = "DejaVu Sans"
CONFIG_DIRNAME = os.path.join(".config", "pixelprism")
CONFIG_FILENAME = "pixelprism.conf"
CONFIG_PATH_ENV = "PIXELPRISM_CONFIG"

AUTO_COPY_FORMATS = ("hex", "hsv", "hsl", "rgb", "rgbi")
INSTANCE_NAMES = ("hex", "hsl", "hsv", "rgbf", "rgbi")

# Instance rows shared by the entry and label columns (y offsets)
INSTANCE_ROWS = {"hsv": 40, "hsl": 75, "rgbf": 110, "rgbi": 145, "hex": 180}
ENTRY_COLUMN_X = 383
LABEL_COLUMN_X = 310

# GTK Adwaita light palette
WINDOW_BG = parse_color("#F6F5F4")
TEXT_FG = parse_color("#2E3436")
BORDER_GRAY = parse_color("#CDC7C2")
HOVER_BG = parse_color("#E1DEDB")
WHITE = parse_color("#FFFFFF")
SUCCESS_GREEN = parse_color("#26A269")
ERROR_RED = parse_color("#E01B24")
HOVER_BLUE = parse_color("#62A0EA")
ACCENT_BLUE = parse_color("#1C71D8")
CURSOR_BLUE = parse_color("#3584E4")
SELECTION_BLUE = parse_color("#4282F5")
BLACK = parse_color("#000000")


# ========== Styling blocks ==========

@dataclass
class EntryStyle:
    font_family: str = DEFAULT_FONT
    font_size: int = 16
    fg: ConfigColor = TEXT_FG
    bg: ConfigColor = WHITE
    border: ConfigColor = BORDER_GRAY
    valid_border: ConfigColor = SUCCESS_GREEN
    invalid_border: ConfigColor = ERROR_RED
    focus_border: ConfigColor = BORDER_GRAY


@dataclass
class MenuStyle:
    font_family: str = DEFAULT_FONT
    font_size: int = 14
    fg: ConfigColor = TEXT_FG
    bg: ConfigColor = WHITE
    border: ConfigColor = BORDER_GRAY
    hover_bg: ConfigColor = HOVER_BG
    active_bg: ConfigColor = HOVER_BG


@dataclass
class ButtonStyle:
    font_family: str = DEFAULT_FONT
    font_size: int = 14
    fg: ConfigColor = TEXT_FG
    bg: ConfigColor = WHITE
    border: ConfigColor = BORDER_GRAY
    hover_border: ConfigColor = HOVER_BLUE
    active_border: ConfigColor = ACCENT_BLUE


@dataclass
class LabelStyle:
    font_family: str = DEFAULT_FONT
    font_size: int = 16
    fg: ConfigColor = TEXT_FG
    bg: ConfigColor = WINDOW_BG
    border: ConfigColor = BORDER_GRAY


@dataclass
class TrayMenuStyle:
    font_family: str = DEFAULT_FONT
    font_size: int = 14
    fg: ConfigColor = TEXT_FG
    bg: ConfigColor = WINDOW_BG
    hover_bg: ConfigColor = HOVER_BG
    border: ConfigColor = BORDER_GRAY


@dataclass
class SwatchStyle:
    border: ConfigColor = BORDER_GRAY


@dataclass
class ZoomStyle:
    crosshair_color: ConfigColor = parse_color("#00FF00")
    square_color: ConfigColor = parse_color("#FF0000")


# ========== Geometry / behavior blocks ==========

@dataclass
class EntryGeometry:
    x: int = ENTRY_COLUMN_X
    y: int = 0
    width: int = 197
    padding: int = 4
    border_width: int = 1
    border_radius: int = 4


@dataclass
class LabelGeometry:
    x: int = LABEL_COLUMN_X
    y: int = 0
    width: int = 60
    padding: int = 4
    border_width: int = 1
    border_radius: int = 0
    border_enabled: bool = False


def default_entry_geometry(instance: str) -> EntryGeometry:
    return EntryGeometry(y=INSTANCE_ROWS[instance])


def default_label_geometry(instance: str) -> LabelGeometry:
    return LabelGeometry(y=INSTANCE_ROWS[instance])


@dataclass
class ButtonWidget:
    x: int = 492
    y: int = 255
    width: int = 88
    height: int = 32
    padding: int = 8
    border_width: int = 1
    hover_border_width: int = 1
    active_border_width: int = 1
    border_radius: int = 4


@dataclass
class SwatchWidget:
    x: int = 310
    y: int = 215
    width: int = 74
    height: int = 74
    border_width: int = 1
    border_radius: int = 4
    border_mode: BorderMode = BorderMode.COMPLEMENTARY


@dataclass
class MenubarWidget:
    x: int = 306
    y: int = 0
    width: int = 278
    border_width: int = 1
    border_radius: int = 4
    padding: int = 4


@dataclass
class TrayMenuWidget:
    padding: int = 2
    border_width: int = 1
    border_radius: int = 4


@dataclass
class ZoomWidget:
    crosshair_show: bool = True
    square_show: bool = True
    crosshair_show_after_pick: bool = False
    square_show_after_pick: bool = True


@dataclass
class MainWindow:
    background: ConfigColor = WINDOW_BG
    font_family: str = DEFAULT_FONT
    font_size: int = 14
    text_color: ConfigColor = TEXT_FG
    link_color: ConfigColor = ACCENT_BLUE
    link_underline: bool = True
    main_width: int = 590
    main_height: int = 300
    about_width: int = 590
    about_height: int = 300


@dataclass
class Behavior:
    always_on_top: bool = True
    cursor_blink_ms: int = 700
    cursor_color: ConfigColor = CURSOR_BLUE
    cursor_thickness: int = 1
    hex_uppercase: bool = True
    minimize_to_tray: bool = True
    remember_position: bool = True
    show_tray_icon: bool = True
    selection_color: ConfigColor = SELECTION_BLUE
    selection_text_color: ConfigColor = WHITE
    undo_depth: int = 64


@dataclass
class Clipboard:
    auto_copy: bool = False
    auto_copy_format: str = "hex"
    auto_copy_primary: bool = True
    hex_prefix: bool = True


# Smart application detection
EDITOR_CANDIDATES = ("code", "gedit", "kate", "mousepad", "leafpad", "geany",
                     "subl", "atom", "vim", "nano")
BROWSER_CANDIDATES = ("xdg-open", "firefox", "google-chrome", "chromium-browser",
                      "chromium", "opera", "brave", "waterfox", "palemoon", "seamonkey")


def _first_on_path(candidates: Iterable[str], fallback: str) -> str:
    for name in candidates:
        found = shutil.which(name)
        if found:
            return found
    return fallback


@lru_cache(maxsize=1)
def detect_editor() -> str:
    return _first_on_path(EDITOR_CANDIDATES, "/usr/bin/nano")


@lru_cache(maxsize=1)
def detect_browser() -> str:
    return _first_on_path(BROWSER_CANDIDATES, "/usr/bin/firefox")


@dataclass
class Paths:
    browser: str = field(default_factory=detect_browser)
    editor: str = field(default_factory=detect_editor)


# ========== Aggregate ==========

@dataclass
class PixelPrismConfig:
    entry_text: EntryStyle = field(default_factory=EntryStyle)
    entry_int: EntryStyle = field(default_factory=EntryStyle)
    entry_float: EntryStyle = field(default_factory=EntryStyle)
    entry_hex: EntryStyle = field(default_factory=EntryStyle)
    menu: MenuStyle = field(default_factory=MenuStyle)
    menubar: MenuStyle = field(default_factory=MenuStyle)
    button: ButtonStyle = field(default_factory=ButtonStyle)
    label: LabelStyle = field(default_factory=LabelStyle)
    tray_menu: TrayMenuStyle = field(default_factory=TrayMenuStyle)
    swatch: SwatchStyle = field(default_factory=SwatchStyle)
    zoom: ZoomStyle = field(default_factory=ZoomStyle)

    entry_positions: Dict[str, EntryGeometry] = field(
        default_factory=lambda: {i: default_entry_geometry(i) for i in INSTANCE_NAMES})
    label_positions: Dict[str, LabelGeometry] = field(
        default_factory=lambda: {i: default_label_geometry(i) for i in INSTANCE_NAMES})
    button_widget: ButtonWidget = field(default_factory=ButtonWidget)
    swatch_widget: SwatchWidget = field(default_factory=SwatchWidget)
    menubar_widget: MenubarWidget = field(default_factory=MenubarWidget)
    tray_menu_widget: TrayMenuWidget = field(default_factory=TrayMenuWidget)
    zoom_widget: ZoomWidget = field(default_factory=ZoomWidget)
    main: MainWindow = field(default_factory=MainWindow)
    behavior: Behavior = field(default_factory=Behavior)
    clipboard: Clipboard = field(default_factory=Clipboard)
    paths: Paths = field(default_factory=Paths)

    # Current color state - the user's picked/displayed color
    current_color: ConfigColor = BLACK

    # Change tracking
    config_changed: bool = field(default=False, compare=False)

    def mark_changed(self) -> None:
        self.config_changed = True

    def mark_saved(self) -> None:
        self.config_changed = False

    def has_unsaved_changes(self) -> bool:
        return self.config_changed


# ========== Paths ==========

def default_config_path(home: Optional[str] = None) -> str:
    home = home or os.path.expanduser("~")
    return os.path.join(home, CONFIG_DIRNAME, CONFIG_FILENAME)


def resolve_config_path(path: Optional[str] = None) -> str:
    """Explicit path, then $PIXELPRISM_CONFIG, then ~/.config/pixelprism."""
    return path or os.environ.get(CONFIG_PATH_ENV) or default_config_path()


# ========== Registry plumbing ==========

def _resolve_registry(registry: Optional[SectionRegistry]) -> SectionRegistry:
    if registry is not None:
        return registry
    default = get_registry()
    # Seed built-ins only into an empty registry.
    if not len(default):
        from .sections import register_builtin_sections
        register_builtin_sections(default)
    return default


def init_defaults(cfg: Optional[PixelPrismConfig] = None,
                  registry: Optional[SectionRegistry] = None) -> PixelPrismConfig:
    """Seed every registered section with its defaults and clear the dirty flag."""
    if cfg is None:
        cfg = PixelPrismConfig()
    registry = _resolve_registry(registry)
    registry.for_each(lambda handler, target: handler.init_defaults(target), cfg)
    cfg.mark_saved()
    return cfg


# ========== Loading ==========

def parse_lines(cfg: PixelPrismConfig, lines: Iterable[str],
                registry: Optional[SectionRegistry] = None) -> None:
    """Feed CONF lines to the registered handlers.

    Does not apply defaults; ``load_config`` does that first.
    """
    registry = _resolve_registry(registry)
    section = None  # None until the first header
    handler = None
    for lineno, raw in enumerate(lines, 1):
        line = raw.strip()
        if not line or line[0] in "#;":
            continue
        if line[0] == "[" and line[-1] == "]":
            section = line[1:-1].strip()
            handler = registry.find(section)
            if handler is None:
                logger.debug("Ignoring unknown section [%s] at line %d", section, lineno)
            continue
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            logger.debug("Skipping malformed line %d: %r", lineno, line)
            continue
        if section is None:
            logger.debug("Skipping line %d outside of any section", lineno)
            continue
        if handler is None:
            continue
        if not handler.parse(cfg, key, value.strip()):
            logger.debug("Ignoring unknown key %r in [%s]", key, section)


def load_config(cfg: PixelPrismConfig, path: Optional[str],
                registry: Optional[SectionRegistry] = None) -> bool:
    """Load ``path`` into ``cfg``.

    Defaults are applied first, so on failure (False) ``cfg`` holds a complete
    default configuration.
    """
    registry = _resolve_registry(registry)
    init_defaults(cfg, registry)
    if not path:
        return False
    try:
        with open(path, "r", encoding="utf-8-sig") as f:
            text = f.read()
    except FileNotFoundError:
        logger.info("No config file at %s, using defaults", path)
        return False
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read config %s (%s), using defaults", path, e)
        return False
    parse_lines(cfg, text.split("\n"), registry)
    cfg.mark_saved()
    logger.info("Loaded config from %s", path)
    return True


def load_config_from_home(cfg: PixelPrismConfig, home: Optional[str] = None,
                          registry: Optional[SectionRegistry] = None) -> bool:
    return load_config(cfg, default_config_path(home), registry)


# ========== Saving ==========

FILE_HEADER = (
    "# PixelPrism configuration\n"
    "# Lines starting with # or ; are comments. Unknown keys are ignored.\n"
    "\n"
)

GROUP_BANNERS = {
    "styling": ("VISUAL STYLING",
                "All color, font, and appearance settings for UI elements."),
    "behavior": ("CONFIGURATION & BEHAVIOR",
                 "Widget geometry, positioning, application behavior, and system settings."),
}

_RULE = "# " + "=" * 76 + "\n"


def _banner(group: str) -> str:
    title, blurb = GROUP_BANNERS.get(group, (group.upper(), ""))
    text = _RULE + f"# {title}\n"
    if blurb:
        text += f"# {blurb}\n"
    return text + _RULE + "\n"


def write_config(cfg: PixelPrismConfig, sink,
                 registry: Optional[SectionRegistry] = None) -> None:
    """Write every registered section of ``cfg`` to a text sink."""
    registry = _resolve_registry(registry)
    sink.write(FILE_HEADER)
    last_group = [None]

    def emit(handler, out):
        if handler.group != last_group[0]:
            out.write(_banner(handler.group))
            last_group[0] = handler.group
        out.write(f"[{handler.name}]\n")
        handler.write(cfg, out)
        out.write("\n")

    registry.for_each(emit, sink)


def save_config(cfg: PixelPrismConfig, path: str,
                registry: Optional[SectionRegistry] = None) -> bool:
    """Persist ``cfg`` to ``path``; clears the dirty flag on success."""
    buf = io.StringIO()
    write_config(cfg, buf, registry)
    tmp_path = path + ".tmp"
    try:
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(tmp_path, "w", encoding="utf-8", newline="\n") as f:
            f.write(buf.getvalue())
        os.replace(tmp_path, path)
    except OSError as e:
        logger.warning("Failed to save config to %s: %s", path, e)
        try:
            os.remove(tmp_path)
        except OSError:
            logger.debug("No temp file to remove at %s", tmp_path)
        return False
    cfg.mark_saved()
    logger.info("Saved config to %s", path)
    return True


def write_defaults(path: str, registry: Optional[SectionRegistry] = None) -> bool:
    """Write a pristine default configuration to ``path``."""
    registry = _resolve_registry(registry)
    cfg = init_defaults(PixelPrismConfig(), registry)
    return save_config(cfg, path, registry)


# ========== Single-key access ==========

def set_value(cfg: PixelPrismConfig, section: str, key: str, value: str,
              registry: Optional[SectionRegistry] = None) -> bool:
    """Apply one setting the way a loaded file would, marking ``cfg`` changed."""
    handler = _resolve_registry(registry).find(section)
    if handler is None or not handler.parse(cfg, key.strip(), value.strip()):
        return False
    cfg.mark_changed()
    return True


def get_value(cfg: PixelPrismConfig, section: str, key: str,
              registry: Optional[SectionRegistry] = None) -> Optional[str]:
    """The serialized value of ``key`` as ``save_config`` would write it."""
    handler = _resolve_registry(registry).find(section)
    if handler is None:
        return None
    key = getattr(handler, "aliases", {}).get(key.strip(), key.strip())
    buf = io.StringIO()
    handler.write(cfg, buf)
    for line in buf.getvalue().splitlines():
        k, sep, v = line.partition("=")
        if sep and k.strip() == key:
            return v.strip()
    return None


# ========== Validation ==========

MIN_TEXT_CONTRAST = 3.0


def validate_config(cfg: PixelPrismConfig) -> List[str]:
    """Validate configuration and return list of warnings/errors."""
    issues = []

    styled = {
        "entry-text": cfg.entry_text, "entry-int": cfg.entry_int,
        "entry-float": cfg.entry_float, "entry-hex": cfg.entry_hex,
        "context-menu": cfg.menu, "menubar": cfg.menubar,
        "button": cfg.button, "label": cfg.label, "tray-menu": cfg.tray_menu,
    }
    for name, block in styled.items():
        if block.font_size <= 0:
            issues.append(f"[{name}] font-size must be positive")
        if not block.font_family.strip():
            issues.append(f"[{name}] font-family is empty")
        ratio = calculate_contrast_ratio(block.fg, block.bg)
        if ratio < MIN_TEXT_CONTRAST:
            issues.append(f"[{name}] low text contrast ({ratio:.2f}:1)")

    if cfg.main.font_size <= 0:
        issues.append("[main] font-size must be positive")
    if cfg.main.main_width <= 0 or cfg.main.main_height <= 0:
        issues.append("[main] window size must be positive")

    geometry = [("button-widget", cfg.button_widget),
                ("swatch-widget", cfg.swatch_widget),
                ("menubar-widget", cfg.menubar_widget),
                ("tray-menu-widget", cfg.tray_menu_widget)]
    geometry += [(f"entry-widget-{i}", g) for i, g in sorted(cfg.entry_positions.items())]
    geometry += [(f"label-widget-{i}", g) for i, g in sorted(cfg.label_positions.items())]
    for name, block in geometry:
        for attr in ("width", "height", "padding", "border_width", "border_radius"):
            if getattr(block, attr, 0) < 0:
                issues.append(f"[{name}] {attr.replace('_', '-')} cannot be negative")

    if cfg.behavior.undo_depth <= 0:
        issues.append("[behavior] undo-depth must be positive")
    if cfg.behavior.cursor_blink_ms < 0:
        issues.append("[behavior] cursor-blink-ms cannot be negative")

    if cfg.clipboard.auto_copy_format not in AUTO_COPY_FORMATS:
        issues.append(f"[clipboard] invalid auto-copy-format: {cfg.clipboard.auto_copy_format}")

    return issues
