"""PixelPrism - configuration subsystem for the PixelPrism colour picker."""

__version__ = "0.1.0"

from .colors import (
    ConfigColor, BorderMode, parse_color, format_color, color_to_hex,
    parse_int, parse_bool, calculate_contrast_ratio
)
from .registry import (
    SectionHandler, SectionRegistry, MAX_CONFIG_HANDLERS, get_registry,
    register_section, find_section, for_each_section, reset_registry
)
from .config import (
    PixelPrismConfig, init_defaults, load_config, load_config_from_home,
    parse_lines, save_config, write_config, write_defaults, set_value,
    get_value, validate_config, default_config_path, resolve_config_path
)
from .sections import BlockSection, BUILTIN_SECTIONS, register_builtin_sections
from .utils import clamp, setup_logging, get_logger

__all__ = [
    "ConfigColor", "BorderMode", "parse_color", "format_color", "color_to_hex",
    "parse_int", "parse_bool", "calculate_contrast_ratio",
    "SectionHandler", "SectionRegistry", "MAX_CONFIG_HANDLERS", "get_registry",
    "register_section", "find_section", "for_each_section", "reset_registry",
    "PixelPrismConfig", "init_defaults", "load_config", "load_config_from_home",
    "parse_lines", "save_config", "write_config", "write_defaults", "set_value",
    "get_value", "validate_config", "default_config_path", "resolve_config_path",
    "BlockSection", "BUILTIN_SECTIONS", "register_builtin_sections",
    "clamp", "setup_logging", "get_logger"
]
