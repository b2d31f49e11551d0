"""Config section registry.

Keeps section handlers decoupled from the CONF parser. Each handler describes
the section it owns and knows how to default, parse and write it; the loader
and saver only ever talk to the registry.
"""

import logging
from typing import Any, Callable, Iterator, List, Optional

logger = logging.getLogger(__name__)

MAX_CONFIG_HANDLERS = 32


class SectionHandler:
    """Interface for one ``[section]`` of the configuration file.

    Subclasses set ``name`` and implement the three callbacks. ``group`` only
    affects the banner comments the saver writes between groups of sections.
    """

    name: str = ""
    group: str = "styling"

    def init_defaults(self, config) -> None:
        raise NotImplementedError

    def parse(self, config, key: str, value: str) -> bool:
        """Apply one ``key = value`` line. Return False if the key is unknown."""
        raise NotImplementedError

    def write(self, config, sink) -> None:
        """Write this section's ``key = value`` lines (without the header)."""
        raise NotImplementedError

    def __repr__(self):
        return f"<{type(self).__name__} [{self.name}]>"


class SectionRegistry:
    """Bounded, ordered collection of section handlers, unique by name.

    The registry stores references only; handlers are expected to live for
    the whole process.
    """

    def __init__(self, capacity: int = MAX_CONFIG_HANDLERS):
        self.capacity = capacity
        self._handlers: List[SectionHandler] = []

    def register(self, handler: Optional[SectionHandler]) -> bool:
        """Add ``handler``; duplicates (same object or same name) are ignored.

        Returns True only when the handler was actually added. A full registry
        drops the handler and logs a warning.
        """
        name = getattr(handler, "name", None)
        if handler is None or not isinstance(name, str) or not name:
            return False
        for existing in self._handlers:
            if existing is handler or existing.name == name:
                return False
        if self.is_full:
            logger.warning(
                "Config registry full (%d handlers), dropping section [%s]",
                self.capacity, name,
            )
            return False
        self._handlers.append(handler)
        return True

    def find(self, name: Optional[str]) -> Optional[SectionHandler]:
        if not name:
            return None
        for handler in self._handlers:
            if handler.name == name:
                return handler
        return None

    def for_each(self, visit: Optional[Callable[[SectionHandler, Any], None]],
                 context: Any = None) -> None:
        if visit is None:
            return
        for handler in tuple(self._handlers):
            visit(handler, context)

    def reset(self) -> None:
        self._handlers.clear()

    @property
    def is_full(self) -> bool:
        return len(self._handlers) >= self.capacity

    def names(self) -> List[str]:
        return [h.name for h in self._handlers]

    def __len__(self) -> int:
        return len(self._handlers)

    def __iter__(self) -> Iterator[SectionHandler]:
        return iter(tuple(self._handlers))

    def __contains__(self, name) -> bool:
        return self.find(name) is not None


# Process-wide registry used when callers do not pass their own.
_registry = SectionRegistry()


def get_registry() -> SectionRegistry:
    return _registry


def register_section(handler: SectionHandler) -> bool:
    return _registry.register(handler)


def find_section(name: Optional[str]) -> Optional[SectionHandler]:
    return _registry.find(name)


def for_each_section(visit, context: Any = None) -> None:
    _registry.for_each(visit, context)


def reset_registry() -> None:
    """Forget every registration (test isolation / reinitialisation)."""
    _registry.reset()
