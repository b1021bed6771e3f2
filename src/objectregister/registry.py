"""
ObjectRegistry: name-indexed store of typed values.

The registry keeps one TypedStore per type tag and a type index from key to
tag, so that string operations (``get_string``, ``set_string``) can be routed
without the caller knowing the value's type. Registered objects expose their
fields as members; ``reset()`` re-derives every field that has a remembered
string, resolving instance names against the registry.

Typical use:
    registry = ObjectRegistry(context=simulation)
    registry.set_instance(Storage("Lake"))
    registry.set_string("Storage.Lake.EOL", "123.4")
    registry.reset()
    registry.get("Storage.Lake.EOL", float)   # 123.4

Thread safety: Not thread-safe; the owning application serializes access.
"""

import logging
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

from objectregister.callbacks import CallbackTable
from objectregister.config import RegistryConfig
from objectregister.converters import Converter, ConverterTable, Function, type_tag_of
from objectregister.errors import (
    KeyNotFoundError,
    KeyTypeConflictError,
    TypeRegistryNotFoundError,
    type_name,
)
from objectregister.keys import (
    class_name_of,
    function_register_string,
    instance_register_string,
    is_valid_variable_name,
    member_register_string,
)
from objectregister.members import Member
from objectregister.typed_store import TypedStore

logger = logging.getLogger(__name__)


class ObjectRegistry:
    """Heterogeneous registry of values, instances, and named callbacks.

    Args:
        context: Back-reference to the owning simulation; handed to the
            calendar parser and available to registered objects.
        config: String conversion and key handling options.
    """

    is_valid_variable_name = staticmethod(is_valid_variable_name)

    def __init__(self, context: Any = None, config: Optional[RegistryConfig] = None):
        self.context = context
        self._config = config or RegistryConfig()
        self._converters = ConverterTable(self._config)
        self._stores: Dict[Any, TypedStore] = {}
        self._type_index: Dict[str, Any] = {}
        # instance key -> class name, in registration order
        self._instance_keys: Dict[str, str] = {}
        self.void_callbacks = CallbackTable("void")
        self.time_callbacks = CallbackTable("time")

    @property
    def config(self) -> RegistryConfig:
        return self._config

    # ========== STORES AND CONVERTERS ==========

    def register_converter(self, value_type: Any, converter: Converter) -> None:
        """Use a custom converter for ``value_type``.

        An existing store for the type switches to the new converter.
        """
        self._converters.register(value_type, converter)
        store = self._stores.get(value_type)
        if store is not None:
            store.converter = converter

    def converter_for(self, value_type: Any) -> Converter:
        return self._converters.resolve(value_type)

    def store_for(self, value_type: Any) -> TypedStore:
        """Get the store for a type tag, creating it on first use."""
        store = self._stores.get(value_type)
        if store is None:
            store = TypedStore(value_type, self._converters.resolve(value_type))
            self._stores[value_type] = store
            logger.debug(f"Created type store for {type_name(value_type)}")
        return store

    def _route(self, key: str, value_type: Any) -> TypedStore:
        """Point ``key`` at the store for ``value_type`` in the type index."""
        existing = self._type_index.get(key)
        if existing is not None and existing != value_type:
            if not self._config.allow_type_override:
                raise KeyTypeConflictError(key, existing, value_type)
            logger.warning(
                f"Overriding type of [{key}]: {type_name(existing)} -> {type_name(value_type)}"
            )
            self._stores[existing].discard(key)
        store = self.store_for(value_type)
        self._type_index[key] = value_type
        return store

    def _store_of(self, key: str) -> TypedStore:
        value_type = self._type_index.get(key)
        if value_type is None:
            raise KeyNotFoundError(key, f"Couldn't find a type name for key [{key}]")
        return self._stores[value_type]

    # ========== VALUES ==========

    def get(self, key: str, value_type: Any = None) -> Any:
        """Get the value stored under ``key``.

        Args:
            key: Register string.
            value_type: Type tag to look in. If omitted the type index decides.

        Raises:
            TypeRegistryNotFoundError: no value of ``value_type`` was ever stored.
            KeyNotFoundError: the key is not in that store.
        """
        if value_type is None:
            return self._store_of(key).get(key)
        store = self._stores.get(value_type)
        if store is None:
            raise TypeRegistryNotFoundError(value_type)
        return store.get(key)

    def set(self, key: str, value: Any, value_type: Any = None,
            default_string: Optional[str] = None) -> None:
        """Store a value.

        Args:
            key: Register string.
            value: The value (kept by reference).
            value_type: Type tag; inferred from ``value`` when omitted.
            default_string: Also remember this string for the next reset.

        Raises:
            KeyTypeConflictError: ``key`` already holds a different type.
            TypeError: the type can't be inferred or has no converter.
        """
        if value_type is None:
            value_type = type_tag_of(value)
        self._route(key, value_type).set(key, value, default_string)

    def get_string(self, key: str) -> str:
        """Remembered string of ``key``.

        Raises:
            KeyNotFoundError: unknown key, or no string remembered for it.
        """
        return self._store_of(key).get_string(key)

    def set_string(self, key: str, text: str) -> None:
        """Remember ``text`` for ``key``; the value changes on the next reset.

        Raises:
            KeyNotFoundError: the key was never registered.
        """
        self._store_of(key).set_string(key, text)

    def to_string(self, key: str) -> str:
        """String form of the current value of ``key``."""
        return self._store_of(key).to_string(key)

    def has_key(self, key: str) -> bool:
        return key in self._type_index

    def get_type(self, key: str) -> Any:
        """Type tag of ``key``, or None if unknown."""
        return self._type_index.get(key)

    def keys(self) -> List[str]:
        return list(self._type_index)

    # ========== MEMBERS, FUNCTIONS, INSTANCES ==========

    def set_member(self, owner: Any, member: Member) -> str:
        """Bind ``Class.Instance.<member.name>`` to the owner's attribute.

        Returns:
            The member's key.
        """
        key = member_register_string(owner, member.name)
        self._route(key, member.value_type).bind(
            key, owner, member.attribute_name, member.default_string
        )
        return key

    def register_member(self, owner: Any, name: str, value_type: Any,
                        attribute: Optional[str] = None,
                        default_string: Optional[str] = None) -> str:
        return self.set_member(owner, Member(name, value_type, attribute, default_string))

    def set_function(self, name: str, function: Callable[..., Any]) -> str:
        """Store a callable under ``function.<name>``. Returns the key."""
        key = function_register_string(name)
        self.set(key, function, Function)
        return key

    def set_instance(self, obj: Any) -> str:
        """Register an object under ``ClassName.InstanceName``.

        The object's ``members()`` are bound next, then its ``register(registry)``
        hook runs.

        Returns:
            The instance key.
        """
        class_name = class_name_of(obj)
        key = instance_register_string(class_name, obj.name)
        if self.has_key(key):
            logger.warning(f"Overwriting existing instance: {key}")
        self.set(key, obj, type(obj))
        self._instance_keys[key] = class_name

        members = obj.members() if hasattr(obj, 'members') else []
        for m in members:
            self.set_member(obj, m)
        if hasattr(obj, 'register'):
            obj.register(self)

        logger.debug(f"Registered instance {key} with {len(members)} member(s)")
        return key

    def find_instance(self, cls_or_class_name: Union[type, str], instance_name: str) -> Any:
        """Look up a registered instance.

        Args:
            cls_or_class_name: A Registrable subclass (the result must be an
                instance of it) or a class name.
            instance_name: The instance name.

        Raises:
            KeyNotFoundError: no such instance.
        """
        if isinstance(cls_or_class_name, str):
            class_name, cls = cls_or_class_name, None
        else:
            class_name, cls = class_name_of(cls_or_class_name), cls_or_class_name

        key = instance_register_string(class_name, instance_name)
        obj = self.get(key)
        if cls is not None and not isinstance(obj, cls):
            raise KeyNotFoundError(
                key, f"[{key}] is a {type(obj).__name__}, not a {cls.__name__}"
            )
        return obj

    def instances(self, class_name: Optional[str] = None) -> List[Any]:
        """Registered instances in registration order, optionally of one class."""
        return [
            self.get(key)
            for key, key_class in self._instance_keys.items()
            if class_name is None or key_class == class_name
        ]

    # ========== RESET AND TEARDOWN ==========

    def reset(self) -> int:
        """Re-derive every value that has a remembered string.

        Stores are reset in creation order. Instance references resolve
        against handles already stored, so declaration order doesn't matter.

        Returns:
            Number of entries reset.
        """
        total = 0
        for store in list(self._stores.values()):
            total += store.reset(self)
        logger.info(f"Reset {total} entries across {len(self._stores)} type stores")
        return total

    def clear(self) -> None:
        """Drop all stores, the type index, and all callbacks."""
        self._stores.clear()
        self._type_index.clear()
        self._instance_keys.clear()
        self.void_callbacks.clear()
        self.time_callbacks.clear()
        logger.debug("Cleared object registry")

    # ========== CALLBACKS ==========

    def add_callback(self, name: str, callback: Callable[[], Any]) -> None:
        """Add a zero-argument callback to the group ``name``."""
        self.void_callbacks.add(name, callback)

    def remove_callback(self, name: str, callback: Callable[[], Any]) -> bool:
        return self.void_callbacks.remove(name, callback)

    def invoke_callbacks(self, name: str) -> int:
        """Call the group ``name`` in insertion order; unknown names are a no-op."""
        return self.void_callbacks.invoke(name)

    def add_time_callback(self, name: str, callback: Callable[[Any], Any]) -> None:
        """Add a callback taking one timestamp to the group ``name``."""
        self.time_callbacks.add(name, callback)

    def remove_time_callback(self, name: str, callback: Callable[[Any], Any]) -> bool:
        return self.time_callbacks.remove(name, callback)

    def invoke_time_callbacks(self, name: str, when: Any) -> int:
        """Call the group ``name`` with ``when``; unknown names are a no-op."""
        return self.time_callbacks.invoke(name, when)

    # ========== CONTAINER PROTOCOL ==========

    def __contains__(self, key: str) -> bool:
        return self.has_key(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._type_index)

    def __repr__(self) -> str:
        return f"ObjectRegistry({len(self)} keys, {len(self._stores)} type stores)"
