"""
Build objects from a configuration source.

A configuration source is any ordered sequence of object definitions (class
name, instance name, field strings), typically produced by a file reader.
:func:`make_objects` makes each one with the factory, in order, and then
resets the registry once so references between objects resolve regardless
of declaration order.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional, Union

from objectregister.errors import ObjectCreationError, RegistryError
from objectregister.factory import ObjectFactory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ObjectDefinition:
    """One group of a configuration source."""
    class_name: str
    instance_name: str
    fields: Mapping[str, str] = field(default_factory=dict)
    source: Optional[str] = None  # file or stream the group came from


def _as_definition(item: Union[ObjectDefinition, tuple]) -> ObjectDefinition:
    if isinstance(item, ObjectDefinition):
        return item
    return ObjectDefinition(*item)


def make_objects(factory: ObjectFactory,
                 definitions: Iterable[Union[ObjectDefinition, tuple]],
                 source_name: Optional[str] = None,
                 reset: bool = True) -> List[Any]:
    """Make every definition in order, then reset the registry once.

    Args:
        factory: Factory holding the makers.
        definitions: ObjectDefinition items or (class, instance, fields) tuples.
        source_name: Reported in errors when a definition has no ``source``.
        reset: Skip the final reset when False (the caller resets later).

    Returns:
        The created objects, in definition order.

    Raises:
        ObjectCreationError: making one object failed; chained from the cause.
    """
    objects = []
    for item in definitions:
        definition = _as_definition(item)
        try:
            obj = factory.make(definition.class_name, definition.instance_name, definition.fields)
        except RegistryError as e:
            raise ObjectCreationError(
                definition.class_name,
                definition.instance_name,
                definition.source or source_name,
                e,
            ) from e
        objects.append(obj)

    logger.info(f"Made {len(objects)} object(s)" + (f" from {source_name}" if source_name else ""))
    if reset:
        factory.registry.reset()
    return objects
