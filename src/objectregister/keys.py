"""
Register string (key) construction.

Every value in the object registry is identified by a dot-separated string of
one to three segments:

    Storage                     class
    Storage.Great_Lake          instance
    Storage.Great_Lake.EOL      member of an instance

Entries that don't belong to an instance use a reserved first segment:

    function.<name>
    collection.<name>
    file.<name>
"""

import re
from typing import Any, Tuple

SEPARATOR = "."

FUNCTION_PREFIX = "function"
COLLECTION_PREFIX = "collection"
FILE_PREFIX = "file"

RESERVED_PREFIXES = frozenset({FUNCTION_PREFIX, COLLECTION_PREFIX, FILE_PREFIX})

# (alpha) (alphanum | '_')*
_VARIABLE_NAME = re.compile(r"[A-Za-z][A-Za-z0-9_]*")


def register_string(first: str, second: str = "", third: str = "") -> str:
    """Join one to three segments into a register string.

    A segment is only appended when every segment before it is non-empty, so
    ``register_string("a", "", "c")`` is just ``"a"``.
    """
    key = first
    if second:
        key += SEPARATOR + second
        if third:
            key += SEPARATOR + third
    return key


def class_name_of(obj_or_type: Any) -> str:
    """Class name used in keys.

    Registrable classes answer through ``get_class_name()``; other classes use
    a ``class_name`` attribute, else ``__name__``.
    """
    cls = obj_or_type if isinstance(obj_or_type, type) else type(obj_or_type)
    if hasattr(cls, 'get_class_name'):
        return cls.get_class_name()
    return getattr(cls, 'class_name', None) or cls.__name__


def instance_register_string(class_name: str, instance_name: str) -> str:
    return register_string(class_name, instance_name)


def member_register_string(obj: Any, field_name: str = "") -> str:
    """Register string for a member of a registrable object.

    Requires ``obj`` to expose ``name`` (the instance name).
    """
    return register_string(class_name_of(obj), obj.name, field_name)


def function_register_string(function_name: str) -> str:
    return register_string(FUNCTION_PREFIX, function_name)


def collection_register_string(collection_name: str) -> str:
    return register_string(COLLECTION_PREFIX, collection_name)


def file_register_string(file_name: str) -> str:
    return register_string(FILE_PREFIX, file_name)


def split_register_string(key: str) -> Tuple[str, ...]:
    """Split a register string into its segments.

    Raises:
        ValueError: if the key is empty or has more than three segments.
    """
    if not key:
        raise ValueError("Register string must not be empty")
    parts = tuple(key.split(SEPARATOR))
    if len(parts) > 3:
        raise ValueError(f"Register string has more than three segments: {key!r}")
    return parts


def is_reserved(key: str) -> bool:
    """True for ``function.*``, ``collection.*`` and ``file.*`` keys."""
    return key.split(SEPARATOR, 1)[0] in RESERVED_PREFIXES


def is_valid_variable_name(name: str) -> bool:
    """Check a member/instance name is of the form ``(alpha)(alphanum | '_')*``."""
    return _VARIABLE_NAME.fullmatch(name or "") is not None
