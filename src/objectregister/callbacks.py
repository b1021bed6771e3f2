"""Named callback groups invoked together in insertion order."""

import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


class CallbackTable:
    """Maps a group name to the ordered callbacks added under that name.

    Several callbacks may share a name; invoking the name calls each of them,
    in the order they were added, with the same arguments. Invoking a name
    with no callbacks does nothing. Exceptions raised by a callback propagate
    and stop the rest of the group.
    """

    def __init__(self, kind: str = "void"):
        self.kind = kind
        self._groups: Dict[str, List[Callable[..., Any]]] = {}

    def add(self, name: str, callback: Callable[..., Any]) -> None:
        self._groups.setdefault(name, []).append(callback)
        logger.debug(f"Added {self.kind} callback to group '{name}': {callback}")

    def remove(self, name: str, callback: Callable[..., Any]) -> bool:
        """Remove the first occurrence of ``callback`` from a group.

        Returns:
            True if the callback was found.
        """
        group = self._groups.get(name)
        if not group or callback not in group:
            return False
        group.remove(callback)
        if not group:
            del self._groups[name]
        return True

    def invoke(self, name: str, *args: Any) -> int:
        """Call every callback in the group, returning how many were called."""
        # snapshot: callbacks added during invocation run next time
        group = list(self._groups.get(name, ()))
        logger.debug(f"{self.kind} callbacks '{name}': {len(group)} to invoke")
        for callback in group:
            callback(*args)
        return len(group)

    def count(self, name: str) -> int:
        return len(self._groups.get(name, ()))

    def names(self) -> List[str]:
        return list(self._groups)

    def clear(self) -> None:
        self._groups.clear()

    def __contains__(self, name: str) -> bool:
        return name in self._groups

    def __len__(self) -> int:
        return sum(len(group) for group in self._groups.values())
