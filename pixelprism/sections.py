"""Built-in configuration sections.

Each ``[section]`` of ``pixelprism.conf`` is owned by one handler here. Most
sections map straight onto one dataclass block of ``PixelPrismConfig`` and are
described by a key table; the few that need more are small subclasses.
"""

import re
from functools import partial
from typing import Any, Callable, Dict, Iterable, NamedTuple, Optional, Tuple

from .colors import (
    format_bool, format_color, format_hex_case, parse_bool, parse_border_mode,
    parse_color, parse_hex_case, parse_int,
)
from .config import (
    BLACK, Behavior, ButtonStyle, ButtonWidget, Clipboard, EntryStyle,
    INSTANCE_NAMES, LabelStyle, MainWindow, MenuStyle, MenubarWidget, Paths,
    SwatchStyle, SwatchWidget, TrayMenuStyle, TrayMenuWidget, ZoomStyle,
    ZoomWidget, default_entry_geometry, default_label_geometry,
)
from .registry import SectionHandler, SectionRegistry, get_registry


_LINE_BREAK = re.compile(r"[\r\n]")


def parse_text(value: str, current: str) -> str:
    """First line of ``value``; a setting never spans lines."""
    return _LINE_BREAK.split(value, 1)[0].strip()


class Codec(NamedTuple):
    """How one key is read (``parse(value, current)``) and written."""
    parse: Callable[[str, Any], Any]
    format: Callable[[Any], str]


COLOR = Codec(lambda value, current: parse_color(value), format_color)
INT = Codec(parse_int, str)
BOOL = Codec(lambda value, current: parse_bool(value), format_bool)
TEXT = Codec(parse_text, str)
BORDER_MODE = Codec(parse_border_mode, lambda mode: mode.value)
HEX_CASE = Codec(lambda value, current: parse_hex_case(value), format_hex_case)

KeyTable = Dict[str, Tuple[str, Codec]]


class BlockSection(SectionHandler):
    """Section backed by one dataclass block of the configuration.

    ``keys`` maps each file key to ``(field name, codec)``. When ``instance``
    is set the block lives in a dict attribute, keyed by that instance name.
    """

    def __init__(self, name: str, attr: str, factory: Callable[[], Any],
                 keys: KeyTable, group: str = "styling",
                 aliases: Optional[Dict[str, str]] = None,
                 instance: Optional[str] = None):
        self.name = name
        self.attr = attr
        self.factory = factory
        self.keys = dict(keys)
        self.group = group
        self.aliases = dict(aliases or {})
        self.instance = instance

    def block(self, config):
        block = getattr(config, self.attr)
        return block if self.instance is None else block[self.instance]

    def init_defaults(self, config) -> None:
        if self.instance is None:
            setattr(config, self.attr, self.factory())
        else:
            getattr(config, self.attr)[self.instance] = self.factory()

    def parse(self, config, key: str, value: str) -> bool:
        entry = self.keys.get(self.aliases.get(key, key))
        if entry is None:
            return False
        field_name, codec = entry
        block = self.block(config)
        setattr(block, field_name, codec.parse(value, getattr(block, field_name)))
        return True

    def items(self, config) -> Iterable[Tuple[str, str]]:
        block = self.block(config)
        for key, (field_name, codec) in self.keys.items():
            yield key, codec.format(getattr(block, field_name))

    def write(self, config, sink) -> None:
        for key, text in sorted(self.items(config)):
            sink.write(f"{key} = {text}\n")


class MainSection(BlockSection):
    """``[main]`` also carries the last picked colour."""

    def init_defaults(self, config) -> None:
        super().init_defaults(config)
        config.current_color = BLACK

    def parse(self, config, key: str, value: str) -> bool:
        if key == "current-color":
            config.current_color = parse_color(value)
            return True
        return super().parse(config, key, value)

    def items(self, config):
        yield from super().items(config)
        yield "current-color", format_color(config.current_color)


class SwatchSection(BlockSection):
    """``[swatch]`` styling; still accepts ``border-mode`` from older files."""

    def parse(self, config, key: str, value: str) -> bool:
        if key == "border-mode":
            widget = config.swatch_widget
            widget.border_mode = parse_border_mode(value, widget.border_mode)
            return True
        return super().parse(config, key, value)


# ========== Key tables ==========

FONT_ALIASES = {"font": "font-family"}

STYLE_KEYS: KeyTable = {
    "background": ("bg", COLOR),
    "border": ("border", COLOR),
    "color": ("fg", COLOR),
    "font-family": ("font_family", TEXT),
    "font-size": ("font_size", INT),
}

ENTRY_KEYS: KeyTable = {
    **STYLE_KEYS,
    "focus-border": ("focus_border", COLOR),
    "invalid-border": ("invalid_border", COLOR),
    "valid-border": ("valid_border", COLOR),
}

MENU_KEYS: KeyTable = {
    **STYLE_KEYS,
    "active-background": ("active_bg", COLOR),
    "hover-background": ("hover_bg", COLOR),
}

BUTTON_KEYS: KeyTable = {
    **STYLE_KEYS,
    "active-border": ("active_border", COLOR),
    "hover-border": ("hover_border", COLOR),
}

TRAY_KEYS: KeyTable = {
    **STYLE_KEYS,
    "hover-background": ("hover_bg", COLOR),
}
TRAY_ALIASES = {**FONT_ALIASES, "fg": "color", "bg": "background",
                "hover-bg": "hover-background"}

BEHAVIOR_KEYS: KeyTable = {
    "always-on-top": ("always_on_top", BOOL),
    "cursor-blink-ms": ("cursor_blink_ms", INT),
    "cursor-color": ("cursor_color", COLOR),
    "cursor-width": ("cursor_thickness", INT),
    "hex-case": ("hex_uppercase", HEX_CASE),
    "minimize-to-tray": ("minimize_to_tray", BOOL),
    "remember-position": ("remember_position", BOOL),
    "selection-color": ("selection_color", COLOR),
    "selection-text-color": ("selection_text_color", COLOR),
    "show-tray-icon": ("show_tray_icon", BOOL),
    "undo-depth": ("undo_depth", INT),
}

CLIPBOARD_KEYS: KeyTable = {
    "auto-copy": ("auto_copy", BOOL),
    "auto-copy-format": ("auto_copy_format", TEXT),
    "auto-copy-primary": ("auto_copy_primary", BOOL),
    "hex-prefix": ("hex_prefix", BOOL),
}

MAIN_KEYS: KeyTable = {
    "about-height": ("about_height", INT),
    "about-width": ("about_width", INT),
    "background": ("background", COLOR),
    "color": ("text_color", COLOR),
    "font-family": ("font_family", TEXT),
    "font-size": ("font_size", INT),
    "link-color": ("link_color", COLOR),
    "link-underline": ("link_underline", BOOL),
    "main-height": ("main_height", INT),
    "main-width": ("main_width", INT),
}

PATHS_KEYS: KeyTable = {
    "browser": ("browser", TEXT),
    "editor": ("editor", TEXT),
}

ZOOM_KEYS: KeyTable = {
    "crosshair-color": ("crosshair_color", COLOR),
    "square-color": ("square_color", COLOR),
}

ZOOM_WIDGET_KEYS: KeyTable = {
    "crosshair-show": ("crosshair_show", BOOL),
    "crosshair-show-after-pick": ("crosshair_show_after_pick", BOOL),
    "square-show": ("square_show", BOOL),
    "square-show-after-pick": ("square_show_after_pick", BOOL),
}

TRAY_WIDGET_KEYS: KeyTable = {
    "border-radius": ("border_radius", INT),
    "border-width": ("border_width", INT),
    "padding": ("padding", INT),
}


def geometry_keys(prefix: str, *extra: str) -> KeyTable:
    """Geometry table with ``<prefix>-x``/``<prefix>-y`` coordinate keys."""
    keys: KeyTable = {
        "border-radius": ("border_radius", INT),
        "border-width": ("border_width", INT),
        f"{prefix}-x": ("x", INT),
        f"{prefix}-y": ("y", INT),
        "width": ("width", INT),
    }
    for key in extra:
        keys[key] = (key.replace("-", "_"), INT)
    return keys


def coordinate_aliases(prefix: str) -> Dict[str, str]:
    return {"x": f"{prefix}-x", "y": f"{prefix}-y"}


BUTTON_WIDGET_KEYS = geometry_keys(
    "button", "height", "padding", "hover-border-width", "active-border-width")
SWATCH_WIDGET_KEYS = {**geometry_keys("swatch", "height"),
                      "border-mode": ("border_mode", BORDER_MODE)}
MENUBAR_WIDGET_KEYS = geometry_keys("menubar", "padding")


def entry_widget_section(instance: str) -> BlockSection:
    prefix = f"entry-{instance}"
    return BlockSection(
        f"entry-widget-{instance}", "entry_positions",
        partial(default_entry_geometry, instance),
        geometry_keys(prefix, "padding"), group="behavior",
        aliases=coordinate_aliases(prefix), instance=instance)


def label_widget_section(instance: str) -> BlockSection:
    prefix = f"label-{instance}"
    keys = geometry_keys(prefix, "padding")
    keys["border-enabled"] = ("border_enabled", BOOL)
    return BlockSection(
        f"label-widget-{instance}", "label_positions",
        partial(default_label_geometry, instance),
        keys, group="behavior",
        aliases=coordinate_aliases(prefix), instance=instance)


# ========== Handlers ==========

button_section = BlockSection("button", "button", ButtonStyle, BUTTON_KEYS,
                              aliases=FONT_ALIASES)
context_menu_section = BlockSection("context-menu", "menu", MenuStyle, MENU_KEYS,
                                    aliases=FONT_ALIASES)
entry_float_section = BlockSection("entry-float", "entry_float", EntryStyle, ENTRY_KEYS,
                                   aliases=FONT_ALIASES)
entry_hex_section = BlockSection("entry-hex", "entry_hex", EntryStyle, ENTRY_KEYS,
                                 aliases=FONT_ALIASES)
entry_int_section = BlockSection("entry-int", "entry_int", EntryStyle, ENTRY_KEYS,
                                 aliases=FONT_ALIASES)
entry_text_section = BlockSection("entry-text", "entry_text", EntryStyle, ENTRY_KEYS,
                                  aliases=FONT_ALIASES)
label_section = BlockSection("label", "label", LabelStyle, STYLE_KEYS,
                             aliases=FONT_ALIASES)
menubar_section = BlockSection("menubar", "menubar", MenuStyle, MENU_KEYS,
                               aliases=FONT_ALIASES)
swatch_section = SwatchSection("swatch", "swatch", SwatchStyle,
                               {"border": ("border", COLOR)})
tray_menu_section = BlockSection("tray-menu", "tray_menu", TrayMenuStyle, TRAY_KEYS,
                                 aliases=TRAY_ALIASES)
zoom_section = BlockSection("zoom", "zoom", ZoomStyle, ZOOM_KEYS)

behavior_section = BlockSection("behavior", "behavior", Behavior, BEHAVIOR_KEYS,
                                group="behavior")
button_widget_section = BlockSection("button-widget", "button_widget", ButtonWidget,
                                     BUTTON_WIDGET_KEYS, group="behavior",
                                     aliases=coordinate_aliases("button"))
clipboard_section = BlockSection("clipboard", "clipboard", Clipboard, CLIPBOARD_KEYS,
                                 group="behavior")
main_section = MainSection("main", "main", MainWindow, MAIN_KEYS, group="behavior",
                           aliases=FONT_ALIASES)
menubar_widget_section = BlockSection("menubar-widget", "menubar_widget", MenubarWidget,
                                      MENUBAR_WIDGET_KEYS, group="behavior",
                                      aliases=coordinate_aliases("menubar"))
paths_section = BlockSection("paths", "paths", Paths, PATHS_KEYS, group="behavior")
swatch_widget_section = BlockSection("swatch-widget", "swatch_widget", SwatchWidget,
                                     SWATCH_WIDGET_KEYS, group="behavior",
                                     aliases=coordinate_aliases("swatch"))
tray_menu_widget_section = BlockSection("tray-menu-widget", "tray_menu_widget",
                                        TrayMenuWidget, TRAY_WIDGET_KEYS,
                                        group="behavior")
zoom_widget_section = BlockSection("zoom-widget", "zoom_widget", ZoomWidget,
                                   ZOOM_WIDGET_KEYS, group="behavior")

ENTRY_WIDGET_SECTIONS = tuple(entry_widget_section(i) for i in INSTANCE_NAMES)
LABEL_WIDGET_SECTIONS = tuple(label_widget_section(i) for i in INSTANCE_NAMES)

# Registration order is file order: styling first, then behavior, each alphabetical.
BUILTIN_SECTIONS = (
    button_section,
    context_menu_section,
    entry_float_section,
    entry_hex_section,
    entry_int_section,
    entry_text_section,
    label_section,
    menubar_section,
    swatch_section,
    tray_menu_section,
    zoom_section,
    behavior_section,
    button_widget_section,
    clipboard_section,
    *ENTRY_WIDGET_SECTIONS,
    *LABEL_WIDGET_SECTIONS,
    main_section,
    menubar_widget_section,
    paths_section,
    swatch_widget_section,
    tray_menu_widget_section,
    zoom_widget_section,
)


def register_builtin_sections(registry: Optional[SectionRegistry] = None) -> int:
    """Register every built-in section; returns how many were newly added."""
    target = registry if registry is not None else get_registry()
    return sum(1 for handler in BUILTIN_SECTIONS if target.register(handler))
