"""
String converters, one per kind of value held in the registry.

A converter turns the remembered string of a registry entry back into a typed
value (``from_string``) and a typed value into its string form
(``to_string``). The :class:`ConverterTable` picks the converter for a type
tag once, when the store for that tag is created.

Supported kinds:
    - literals: any type constructible from its string (int, float, str, ...)
    - booleans: true/yes/y and false/no/n, case-insensitive
    - calendar values: datetime via the configured calendar parser, date
    - instance references: a Registrable subclass, written as the instance name
    - ordered collections: List[T], written as ``[a, b, c]``
    - functions: stored but never re-derived from a string
"""

import functools
import logging
import re
import types
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import TYPE_CHECKING, Any, Dict, Optional

from objectregister.config import RegistryConfig
from objectregister.errors import ConversionError, ResetUnsupportedError, type_name
from objectregister.members import Registrable
from objectregister.reified_generics import element_type, is_reified

if TYPE_CHECKING:
    from objectregister.registry import ObjectRegistry

logger = logging.getLogger(__name__)


class Function:
    """Type tag for callable entries (functions, bound methods, partials)."""


_CALLABLE_TYPES = (
    types.FunctionType,
    types.MethodType,
    types.BuiltinFunctionType,
    types.BuiltinMethodType,
    functools.partial,
)


def type_tag_of(value: Any) -> Any:
    """Infer the type tag of a value.

    Callables share the ``Function`` tag; a reified ``List[T]`` instance keeps
    its reified type. ``None`` carries no type and is rejected.
    """
    if value is None:
        raise TypeError("Cannot infer the type of None; pass value_type explicitly")
    if isinstance(value, _CALLABLE_TYPES):
        return Function
    return type(value)


class Converter(ABC):
    """String round trip for one type tag."""

    def __init__(self, value_type: Any):
        self.value_type = value_type

    @abstractmethod
    def from_string(self, text: str, registry: 'ObjectRegistry') -> Any:
        """Build a value from its string form.

        Raises:
            ConversionError: if ``text`` is not valid for this type.
        """

    def to_string(self, value: Any) -> str:
        return str(value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({type_name(self.value_type)})"


class LiteralConverter(Converter):
    """Values parsed by calling the type on the string, e.g. ``float("1.5")``."""

    def from_string(self, text: str, registry: 'ObjectRegistry') -> Any:
        try:
            return self.value_type(text)
        except (TypeError, ValueError, ArithmeticError) as e:
            raise ConversionError(text, self.value_type, str(e)) from e


class BoolConverter(Converter):
    TRUE_WORDS = ("true", "yes", "y")
    FALSE_WORDS = ("false", "no", "n")

    def __init__(self):
        super().__init__(bool)

    def from_string(self, text: str, registry: 'ObjectRegistry') -> bool:
        word = text.strip().lower()
        if word in self.TRUE_WORDS:
            return True
        if word in self.FALSE_WORDS:
            return False
        raise ConversionError(
            text, bool,
            f"expected one of {'/'.join(self.TRUE_WORDS + self.FALSE_WORDS)}"
        )

    def to_string(self, value: Any) -> str:
        return "true" if value else "false"


class CalendarConverter(Converter):
    """Calendar values, parsed by ``config.calendar_parser(text, registry.context)``."""

    def __init__(self, value_type: Any, parser):
        super().__init__(value_type)
        self._parser = parser

    def from_string(self, text: str, registry: 'ObjectRegistry') -> Any:
        try:
            return self._parser(text, registry.context)
        except (TypeError, ValueError) as e:
            raise ConversionError(text, self.value_type, str(e)) from e

    def to_string(self, value: Any) -> str:
        return value.isoformat()


def _parse_date(text: str, context: Any = None) -> date:
    return date.fromisoformat(text.strip())


class InstanceConverter(Converter):
    """Reference to a registered instance, written as its instance name."""

    def from_string(self, text: str, registry: 'ObjectRegistry') -> Any:
        return registry.find_instance(self.value_type, text.strip())

    def to_string(self, value: Any) -> str:
        return "" if value is None else value.name


class ListConverter(Converter):
    """Ordered collection ``[a, b, c]`` of independently converted elements."""

    def __init__(self, value_type: Any, element_converter: Converter, config: RegistryConfig):
        super().__init__(value_type)
        self.element_converter = element_converter
        self._open = config.list_open
        self._close = config.list_close
        self._joiner = config.list_separators[0] + " "
        self._splitter = re.compile(f"[{re.escape(config.list_separators)}]")

    def split(self, text: str):
        """Split a collection literal into its element strings."""
        body = text.strip()
        if not (body.startswith(self._open) and body.endswith(self._close)) \
                or len(body) < len(self._open) + len(self._close):
            raise ConversionError(
                text, self.value_type,
                f"expected a list enclosed in {self._open}{self._close}"
            )
        body = body[len(self._open):len(body) - len(self._close)]
        tokens = [token.strip() for token in self._splitter.split(body)]
        for token in tokens:
            if self._open in token or self._close in token:
                raise ConversionError(
                    text, self.value_type,
                    f"unexpected {self._open} or {self._close} in element '{token}'; "
                    "nested lists are not supported"
                )
        return [token for token in tokens if token]

    def from_string(self, text: str, registry: 'ObjectRegistry') -> Any:
        return self.value_type(
            self.element_converter.from_string(token, registry)
            for token in self.split(text)
        )

    def to_string(self, value: Any) -> str:
        items = self._joiner.join(self.element_converter.to_string(item) for item in value)
        return f"{self._open}{items}{self._close}"


class FunctionConverter(Converter):
    """Callable entries; they have a string form but cannot be rebuilt from one."""

    def __init__(self):
        super().__init__(Function)

    def from_string(self, text: str, registry: 'ObjectRegistry') -> Any:
        raise ResetUnsupportedError()

    def to_string(self, value: Any) -> str:
        return getattr(value, '__qualname__', None) or repr(value)


class ConverterTable:
    """Resolves type tags to converters, with per-tag overrides."""

    def __init__(self, config: Optional[RegistryConfig] = None):
        self._config = config or RegistryConfig()
        self._converters: Dict[Any, Converter] = {}

    def register(self, value_type: Any, converter: Converter) -> None:
        """Use ``converter`` for ``value_type`` instead of the default."""
        self._converters[value_type] = converter
        logger.debug(f"Registered converter {converter!r} for {type_name(value_type)}")

    def resolve(self, value_type: Any) -> Converter:
        """Get (creating on first use) the converter for a type tag.

        Raises:
            TypeError: for a plain ``list`` tag, which has no element type.
        """
        converter = self._converters.get(value_type)
        if converter is None:
            converter = self._create(value_type)
            self._converters[value_type] = converter
        return converter

    def _create(self, value_type: Any) -> Converter:
        if value_type is bool:
            return BoolConverter()
        if value_type is datetime:
            return CalendarConverter(datetime, self._config.calendar_parser)
        if value_type is date:
            return CalendarConverter(date, _parse_date)
        if value_type is Function:
            return FunctionConverter()
        item_type = element_type(value_type)
        if item_type is not None:
            return ListConverter(value_type, self.resolve(item_type), self._config)
        if is_reified(value_type) or value_type is list:
            raise TypeError(
                f"No converter for {type_name(value_type)}; "
                "declare ordered collections as List[T]"
            )
        if isinstance(value_type, type) and issubclass(value_type, Registrable):
            return InstanceConverter(value_type)
        if callable(value_type):
            return LiteralConverter(value_type)
        raise TypeError(f"No converter for {value_type!r}")
