"""
Object factory: builds registered objects from a class name, an instance name
and field strings.

    factory = ObjectFactory(registry)
    factory.add_class(Storage)
    factory.add_class(Reservoir, base=Storage)
    factory.make("Storage", "Gordon", {"EOL": "123.4", "Sources": "[mersey, forth]"})
    registry.reset()

``make`` only remembers the field strings; values are derived by a later
``registry.reset()``, once every instance they may refer to exists.
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Type, Union

from objectregister.errors import (
    InvalidNameError,
    KeyNotFoundError,
    MissingMemberError,
    UnknownClassError,
)
from objectregister.keys import class_name_of, is_valid_variable_name, register_string
from objectregister.registry import ObjectRegistry

logger = logging.getLogger(__name__)

# maker(instance_name, registry) -> object, registered in the registry
Maker = Callable[[str, ObjectRegistry], Any]

FieldData = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


def make_object(cls: Type) -> Maker:
    """Default maker: ``cls(instance_name)`` followed by ``set_instance``."""
    def maker(instance_name: str, registry: ObjectRegistry) -> Any:
        obj = cls(instance_name)
        registry.set_instance(obj)
        return obj

    maker.__name__ = f"make_{cls.__name__}"
    maker.__qualname__ = maker.__name__
    return maker


class ObjectFactory:
    """Class name → maker table bound to one registry."""

    def __init__(self, registry: ObjectRegistry):
        self._registry = registry
        self._makers: Dict[str, Maker] = {}
        # subclass name -> base class name; bookkeeping only
        self._class_relationships: Dict[str, str] = {}

    @property
    def registry(self) -> ObjectRegistry:
        return self._registry

    def add_maker(self, class_name: str, maker: Maker, base_class: Optional[str] = None) -> None:
        """Register ``maker`` for ``class_name``, replacing any previous one.

        Args:
            class_name: Class name used in configuration.
            maker: ``maker(instance_name, registry)``; must register the object.
            base_class: Informational base class name; doesn't affect dispatch.
        """
        if class_name in self._makers:
            logger.warning(f"Replacing maker for class '{class_name}'")
        self._makers[class_name] = maker
        if base_class:
            self._class_relationships[class_name] = base_class
        logger.debug(f"Added maker for '{class_name}'" + (f" (base '{base_class}')" if base_class else ""))

    def add_class(self, cls: Type, base: Optional[Type] = None) -> None:
        """Register the default maker for a Registrable class."""
        self.add_maker(
            class_name_of(cls),
            make_object(cls),
            class_name_of(base) if base is not None else None,
        )

    def has_maker(self, class_name: str) -> bool:
        return class_name in self._makers

    def class_names(self) -> List[str]:
        return list(self._makers)

    def base_class_of(self, class_name: str) -> Optional[str]:
        return self._class_relationships.get(class_name)

    def subclasses_of(self, base_class: str) -> List[str]:
        return [name for name, base in self._class_relationships.items() if base == base_class]

    def make(self, class_name: str, instance_name: str, fields: Optional[FieldData] = None) -> Any:
        """Make and register an object, then remember its field strings.

        Fields are applied in order. A field the object didn't declare stops
        the call; fields before it stay applied.

        Args:
            class_name: Class to make.
            instance_name: Name of the new instance.
            fields: Field name → string value, or (name, value) pairs.

        Returns:
            The new object.

        Raises:
            UnknownClassError: no maker for ``class_name``.
            InvalidNameError: ``instance_name`` is not a valid variable name.
            MissingMemberError: a field isn't a member of the object.
        """
        maker = self._makers.get(class_name)
        if maker is None:
            raise UnknownClassError(class_name)
        if not is_valid_variable_name(instance_name):
            raise InvalidNameError(instance_name)

        obj = maker(instance_name, self._registry)

        items = fields.items() if isinstance(fields, Mapping) else (fields or ())
        for field_name, value in items:
            # an empty or dotted field name would address another key
            if not is_valid_variable_name(field_name):
                raise MissingMemberError(class_name, instance_name, field_name)
            key = register_string(class_name, instance_name, field_name)
            try:
                self._registry.set_string(key, value)
            except KeyNotFoundError as e:
                raise MissingMemberError(class_name, instance_name, field_name) from e

        logger.debug(f"Made {class_name}.{instance_name}")
        return obj

    def __contains__(self, class_name: str) -> bool:
        return self.has_maker(class_name)

    def __len__(self) -> int:
        return len(self._makers)
