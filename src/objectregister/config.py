"""
Registry configuration.

A single frozen dataclass passed explicitly to :class:`ObjectRegistry`; the
package keeps no module-level configuration state.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable

CalendarParser = Callable[[str, Any], datetime]


def default_calendar_parser(text: str, context: Any = None) -> datetime:
    """Parse an ISO 8601 timestamp. The simulation context is not consulted."""
    return datetime.fromisoformat(text.strip())


@dataclass(frozen=True)
class RegistryConfig:
    """Options for string conversion and key handling.

    Attributes:
        list_separators: Characters that separate collection elements.
        list_open: Opening bracket of a collection literal.
        list_close: Closing bracket of a collection literal.
        calendar_parser: ``parse(text, context) -> datetime`` used for datetime
            values; ``context`` is the registry's simulation back-reference.
        allow_type_override: If False (default), setting an existing key under a
            different type raises KeyTypeConflictError. If True the key is
            moved to the new type's store with a warning.
    """
    list_separators: str = ","
    list_open: str = "["
    list_close: str = "]"
    calendar_parser: CalendarParser = default_calendar_parser
    allow_type_override: bool = False

    def __post_init__(self):
        if not self.list_separators:
            raise ValueError("list_separators must contain at least one character")
        if not self.list_open or not self.list_close:
            raise ValueError("list_open and list_close must not be empty")
