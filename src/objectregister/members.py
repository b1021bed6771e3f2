"""
Domain object contract.

A registrable object has a class name, an instance name and a list of member
descriptors telling the registry which attributes hold its configurable
fields. Registration is two-step: the registry stores the object, then
consumes ``members()``; the object never has to call back into the registry
while it is being built.

Dataclasses declare members with :func:`member`::

    @dataclass(eq=False)
    class Storage(Registrable):
        class_name: ClassVar[str] = "Storage"
        name: str
        eol: Optional[float] = member("EOL")
        sources: "List[Storage]" = member("Sources", default_factory=list)

Plain classes override :meth:`Registrable.members` instead.
"""

import dataclasses
import typing
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, Dict, List, Optional, Tuple, Type

if TYPE_CHECKING:
    from objectregister.registry import ObjectRegistry

# Key under which member() stores its options in dataclass field metadata
MEMBER_METADATA_KEY = '_objectregister_member'

# Members resolved from dataclass fields, per class
_member_cache: Dict[Type, Tuple['Member', ...]] = {}


@dataclass(frozen=True)
class Member:
    """Descriptor of one configurable field of a registrable object.

    Attributes:
        name: Field segment of the key (``EOL`` in ``Storage.Lake.EOL``).
        value_type: Type tag of the value (float, List[Storage], ...).
        attribute: Attribute on the owner holding the value; defaults to ``name``.
        default_string: Remembered string set at registration, if any.
    """
    name: str
    value_type: Any
    attribute: Optional[str] = None
    default_string: Optional[str] = None

    @property
    def attribute_name(self) -> str:
        return self.attribute or self.name


def member(name: Optional[str] = None, value_type: Any = None,
           default_string: Optional[str] = None, **field_kwargs) -> Any:
    """Declare a dataclass field as a registry member.

    Args:
        name: Key segment; defaults to the field name.
        value_type: Type tag; defaults to the field annotation (``Optional[X]``
            is unwrapped to ``X``).
        default_string: Remembered string applied on the next reset.
        **field_kwargs: Passed to ``dataclasses.field``; ``default`` is None
            unless a default or default_factory is given.
    """
    if 'default' not in field_kwargs and 'default_factory' not in field_kwargs:
        field_kwargs['default'] = None
    metadata = dict(field_kwargs.pop('metadata', None) or {})
    metadata[MEMBER_METADATA_KEY] = {
        'name': name,
        'value_type': value_type,
        'default_string': default_string,
    }
    return field(metadata=metadata, **field_kwargs)


def _unwrap_optional(annotation: Any) -> Any:
    if typing.get_origin(annotation) is typing.Union:
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def dataclass_members(cls: Type) -> Tuple[Member, ...]:
    """Members declared with :func:`member` on a dataclass, in field order."""
    cached = _member_cache.get(cls)
    if cached is not None:
        return cached

    hints = None
    members = []
    for f in dataclasses.fields(cls):
        options = f.metadata.get(MEMBER_METADATA_KEY)
        if options is None:
            continue
        value_type = options['value_type']
        if value_type is None:
            if hints is None:
                hints = typing.get_type_hints(cls)
            value_type = _unwrap_optional(hints[f.name])
        members.append(Member(
            name=options['name'] or f.name,
            value_type=value_type,
            attribute=f.name,
            default_string=options['default_string'],
        ))

    result = tuple(members)
    _member_cache[cls] = result
    return result


class Registrable:
    """Base class for objects the registry and factory can manage.

    Subclasses set ``class_name`` (defaults to the Python class name) and an
    instance attribute ``name``. The default maker builds instances with
    ``cls(instance_name)``.
    """
    class_name: ClassVar[str] = ""

    @classmethod
    def get_class_name(cls) -> str:
        return cls.class_name or cls.__name__

    def members(self) -> List[Member]:
        """Describe the configurable fields of this object."""
        if dataclasses.is_dataclass(self):
            return list(dataclass_members(type(self)))
        return []

    def register(self, registry: 'ObjectRegistry') -> None:
        """Hook run after the members are registered (functions, callbacks)."""


def clear_member_cache() -> None:
    """Forget resolved dataclass members (for testing)."""
    _member_cache.clear()

