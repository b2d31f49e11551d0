"""Command-line entry point for PixelPrism configuration files."""

import argparse
import logging
import sys

from .config import (
    PixelPrismConfig, get_value, load_config, resolve_config_path, save_config,
    set_value, validate_config, write_config, write_defaults,
)
from .utils import default_log_level, setup_logging

logger = logging.getLogger(__name__)


def split_target(text: str):
    """``"section.key"`` -> ``("section", "key")``; ``None`` when malformed."""
    section, sep, key = text.partition(".")
    section, key = section.strip(), key.strip()
    if not sep or not section or not key:
        return None
    return section, key


def apply_assignments(cfg: PixelPrismConfig, assignments) -> int:
    """Apply ``section.key=value`` strings; returns the number rejected."""
    failed = 0
    for assignment in assignments:
        target, sep, value = assignment.partition("=")
        parts = split_target(target) if sep else None
        if parts is None:
            print(f"Malformed assignment: {assignment!r} (expected SECTION.KEY=VALUE)",
                  file=sys.stderr)
            failed += 1
            continue
        if not set_value(cfg, parts[0], parts[1], value):
            print(f"Unknown setting: [{parts[0]}] {parts[1]}", file=sys.stderr)
            failed += 1
    return failed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pixelprism-config",
        description="Inspect and edit the PixelPrism configuration file.")
    parser.add_argument("--config", metavar="PATH",
                        help="config file (default: $PIXELPRISM_CONFIG or "
                             "~/.config/pixelprism/pixelprism.conf)")
    parser.add_argument("--write-defaults", action="store_true",
                        help="write a fresh default configuration and exit")
    parser.add_argument("--dump", action="store_true",
                        help="print the effective configuration")
    parser.add_argument("--check", action="store_true",
                        help="validate the configuration")
    parser.add_argument("--get", metavar="SECTION.KEY",
                        help="print one setting")
    parser.add_argument("--set", metavar="SECTION.KEY=VALUE", action="append",
                        default=[], help="change a setting and save (repeatable)")
    parser.add_argument("--log-level", default=None,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="logging level (default: $PIXELPRISM_LOG_LEVEL or INFO)")
    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level or default_log_level())
    path = resolve_config_path(args.config)

    if args.write_defaults:
        if not write_defaults(path):
            print(f"Could not write {path}", file=sys.stderr)
            return 1
        print(f"Wrote default configuration to {path}")
        return 0

    cfg = PixelPrismConfig()
    loaded = load_config(cfg, path)
    status = 0

    if args.set:
        if apply_assignments(cfg, args.set):
            status = 1
        if cfg.has_unsaved_changes() and not save_config(cfg, path):
            print(f"Could not save {path}", file=sys.stderr)
            status = 1

    if args.get:
        parts = split_target(args.get)
        value = get_value(cfg, *parts) if parts else None
        if value is None:
            print(f"Unknown setting: {args.get}", file=sys.stderr)
            status = 1
        else:
            print(value)

    if args.check:
        issues = validate_config(cfg)
        for issue in issues:
            print(issue)
        if issues:
            status = 1
        else:
            print("Configuration OK")

    if args.dump:
        write_config(cfg, sys.stdout)

    if not (args.set or args.get or args.check or args.dump):
        state = "loaded" if loaded else "not found, using defaults"
        print(f"{path}: {state}")
    return status


if __name__ == "__main__":
    sys.exit(main())
