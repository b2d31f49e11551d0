"""Pytest configuration and common fixtures for PixelPrism tests."""

import logging
import os
import sys
import pytest

# Add the project root to the Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Set environment variables for testing
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")


@pytest.fixture(autouse=True)
def clean_default_registry():
    """Leave the process-wide registry and logger clean after every test."""
    from pixelprism.registry import reset_registry

    yield
    reset_registry()
    logger = logging.getLogger("pixelprism")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture(scope="function")
def registry():
    """Provide a private registry holding the built-in sections."""
    from pixelprism.registry import SectionRegistry
    from pixelprism.sections import register_builtin_sections

    reg = SectionRegistry()
    register_builtin_sections(reg)
    return reg


@pytest.fixture(scope="function")
def default_config(registry):
    """Provide a configuration seeded with defaults."""
    from pixelprism.config import init_defaults

    return init_defaults(registry=registry)


@pytest.fixture(scope="function")
def config_path(tmp_path):
    """Path of a not-yet-existing config file inside a temporary home."""
    return str(tmp_path / ".config" / "pixelprism" / "pixelprism.conf")


@pytest.fixture(scope="function")
def write_conf(tmp_path):
    """Write CONF text to a temporary file and return its path."""
    def _write(text, name="test.conf", newline="\n"):
        path = tmp_path / name
        with open(path, "w", encoding="utf-8", newline=newline) as f:
            f.write(text)
        return str(path)
    return _write


def pytest_configure(config):
    """Configure pytest for PixelPrism testing."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add default markers."""
    for item in items:
        if "test_cli.py" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)
