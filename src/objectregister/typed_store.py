"""
Homogeneous store of one type of value, keyed by register string.

Each key holds a slot and, optionally, a remembered string. A slot is either a
plain value cell or a bound attribute of a registered object, so that a reset
writes re-derived values straight into the object's fields.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, Generic, Iterator, List, Optional, TypeVar

from objectregister.converters import Converter
from objectregister.errors import (
    ConversionError,
    KeyNotFoundError,
    ResetUnsupportedError,
    type_name,
)

if TYPE_CHECKING:
    from objectregister.registry import ObjectRegistry

logger = logging.getLogger(__name__)

T = TypeVar('T')


class _ValueSlot:
    __slots__ = ('value',)

    def __init__(self, value: Any = None):
        self.value = value

    def get(self) -> Any:
        return self.value

    def set(self, value: Any) -> None:
        self.value = value


class _AttributeSlot:
    """Slot backed by ``owner.attribute``."""
    __slots__ = ('owner', 'attribute')

    def __init__(self, owner: Any, attribute: str):
        self.owner = owner
        self.attribute = attribute

    def get(self) -> Any:
        return getattr(self.owner, self.attribute)

    def set(self, value: Any) -> None:
        setattr(self.owner, self.attribute, value)


class TypedStore(Generic[T]):
    """Values of one type tag plus their remembered origin strings."""

    def __init__(self, value_type: Any, converter: Converter):
        self.value_type = value_type
        self.converter = converter
        self._slots: Dict[str, Any] = {}
        self._strings: Dict[str, str] = {}

    def get(self, key: str) -> T:
        slot = self._slots.get(key)
        if slot is None:
            raise KeyNotFoundError(key)
        return slot.get()

    def get_string(self, key: str) -> str:
        try:
            return self._strings[key]
        except KeyError:
            raise KeyNotFoundError(
                key, f"No string representation stored for key [{key}]"
            ) from None

    def set(self, key: str, value: T, default_string: Optional[str] = None) -> None:
        """Store ``value``; a bound member key writes through to its attribute."""
        slot = self._slots.get(key)
        if slot is None:
            self._slots[key] = _ValueSlot(value)
        else:
            slot.set(value)
        if default_string is not None:
            self.set_string(key, default_string)

    def bind(self, key: str, owner: Any, attribute: str,
             default_string: Optional[str] = None) -> None:
        """Back ``key`` with ``owner.attribute``."""
        self._slots[key] = _AttributeSlot(owner, attribute)
        if default_string is not None:
            self.set_string(key, default_string)

    def set_string(self, key: str, text: str) -> None:
        self._strings[key] = text

    def to_string(self, key: str) -> str:
        """String form of the current value of ``key``."""
        return self.converter.to_string(self.get(key))

    def has_key(self, key: str) -> bool:
        return key in self._slots or key in self._strings

    def keys(self) -> List[str]:
        return list(self._slots)

    def discard(self, key: str) -> None:
        self._slots.pop(key, None)
        self._strings.pop(key, None)

    def clear(self) -> None:
        self._slots.clear()
        self._strings.clear()

    def reset(self, registry: 'ObjectRegistry') -> int:
        """Re-derive every value that has a remembered string.

        Returns:
            Number of entries reset.

        Raises:
            ConversionError: a string is not valid for this type (carries the key).
            KeyNotFoundError: an instance name could not be resolved.
            ResetUnsupportedError: this store holds functions.
        """
        count = 0
        for key, text in list(self._strings.items()):
            logger.debug(f"Reset: {text} -> {key}")
            try:
                value = self.converter.from_string(text, registry)
            except ConversionError as e:
                raise ConversionError(e.text, e.value_type, e.reason, key=key) from e
            except ResetUnsupportedError as e:
                raise ResetUnsupportedError(key) from e
            except KeyNotFoundError as e:
                raise KeyNotFoundError(e.key, f"{e} (while resetting [{key}])") from e

            slot = self._slots.get(key)
            if slot is None:
                self._slots[key] = _ValueSlot(value)
            else:
                slot.set(value)
            count += 1
        return count

    def __contains__(self, key: str) -> bool:
        return self.has_key(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._slots)

    def __repr__(self) -> str:
        return f"TypedStore({type_name(self.value_type)}, {len(self)} entries)"
