"""Exceptions raised by the object registry and object factory.

Every error derives from :class:`RegistryError` and from the builtin exception
that best describes it, so callers can catch either.
"""

from typing import Any, Optional


def type_name(value_type: Any) -> str:
    """Readable name of a type tag (``float``, ``list[Storage]``, ...)."""
    return getattr(value_type, '__name__', None) or repr(value_type)


class RegistryError(Exception):
    """Base class for object registry errors."""


class KeyNotFoundError(RegistryError, LookupError):
    """A key is absent from the addressed store or has no type index entry."""

    def __init__(self, key: str, message: Optional[str] = None):
        self.key = key
        super().__init__(message or f"Couldn't find key [{key}] in object register")


class TypeRegistryNotFoundError(RegistryError, LookupError):
    """A typed lookup was made for a type that has never had a value stored."""

    def __init__(self, value_type: Any):
        self.value_type = value_type
        super().__init__(f"Couldn't find object register for type [{type_name(value_type)}]")


class ConversionError(RegistryError, ValueError):
    """A string could not be converted to the target type."""

    def __init__(self, text: str, value_type: Any, reason: Optional[str] = None,
                 key: Optional[str] = None):
        self.text = text
        self.value_type = value_type
        self.reason = reason
        self.key = key
        message = f"Couldn't convert {text!r} to {type_name(value_type)}"
        if key is not None:
            message += f" for key [{key}]"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ResetUnsupportedError(RegistryError, TypeError):
    """A function entry cannot be re-derived from a string."""

    def __init__(self, key: Optional[str] = None):
        self.key = key
        where = f" [{key}]" if key is not None else ""
        super().__init__(f"Function entry{where} cannot be reset from a string")


class KeyTypeConflictError(RegistryError, TypeError):
    """A key already registered under one type was set under another."""

    def __init__(self, key: str, existing_type: Any, requested_type: Any):
        self.key = key
        self.existing_type = existing_type
        self.requested_type = requested_type
        super().__init__(
            f"Key [{key}] is registered as {type_name(existing_type)}, "
            f"cannot set it as {type_name(requested_type)}"
        )


class UnknownClassError(RegistryError, LookupError):
    """The factory has no maker for a class name."""

    def __init__(self, class_name: str):
        self.class_name = class_name
        super().__init__(f"Class '{class_name}' not registered with the object factory")


class MissingMemberError(RegistryError, LookupError):
    """Configuration names a field the object never declared."""

    def __init__(self, class_name: str, instance_name: str, field_name: str):
        self.class_name = class_name
        self.instance_name = instance_name
        self.field_name = field_name
        super().__init__(
            f"member '{field_name}' not defined for {class_name} (instance '{instance_name}')"
        )


class InvalidNameError(RegistryError, ValueError):
    """A name that can't be a key segment (empty, dotted, leading digit...)."""

    def __init__(self, name: str, what: str = "instance name"):
        self.name = name
        self.what = what
        super().__init__(f"Invalid {what} '{name}'")


class ObjectCreationError(RegistryError):
    """Creating one object from a configuration source failed."""

    def __init__(self, class_name: str, instance_name: str, source: Optional[str],
                 cause: Exception):
        self.class_name = class_name
        self.instance_name = instance_name
        self.source = source
        self.cause = cause
        where = f" defined in {source}" if source else ""
        super().__init__(f"Failed creating object '{instance_name}'{where} ({cause})")
