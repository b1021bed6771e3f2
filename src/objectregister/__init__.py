"""
Runtime object registry for building simulations from string configuration.

Key Features:
- Name-indexed, type-checked storage of heterogeneous values
- String round trip for literals, booleans, calendar values, instance
  references and ordered collections
- Object factory building objects from class name + instance name + fields
- Deferred reset so references between objects resolve in any order
- Named callback groups

Quick Start:
    >>> from dataclasses import dataclass
    >>> from typing import ClassVar, Optional
    >>> from objectregister import (
    ...     ObjectRegistry, ObjectFactory, Registrable, List, member,
    ... )
    >>>
    >>> @dataclass(eq=False)
    ... class Storage(Registrable):
    ...     class_name: ClassVar[str] = "Storage"
    ...     name: str
    ...     eol: Optional[float] = member("EOL", float)
    >>>
    >>> registry = ObjectRegistry()
    >>> factory = ObjectFactory(registry)
    >>> factory.add_class(Storage)
    >>> lake = factory.make("Storage", "Lake", {"EOL": "123.4"})
    >>> registry.reset()
    1
    >>> lake.eol
    123.4

Modules:
    - keys: register string construction
    - errors: exception hierarchy
    - reified_generics: List[T] collection type tags
    - converters: per-type string conversion
    - config: RegistryConfig
    - members: Registrable base and member descriptors
    - typed_store: per-type value store
    - callbacks: named callback groups
    - registry: ObjectRegistry
    - factory: ObjectFactory and makers
    - loader: building objects from a configuration source
"""

# Keys
from objectregister.keys import (
    SEPARATOR,
    FUNCTION_PREFIX,
    COLLECTION_PREFIX,
    FILE_PREFIX,
    register_string,
    instance_register_string,
    member_register_string,
    function_register_string,
    collection_register_string,
    file_register_string,
    split_register_string,
    is_reserved,
    is_valid_variable_name,
)

# Errors
from objectregister.errors import (
    RegistryError,
    KeyNotFoundError,
    TypeRegistryNotFoundError,
    ConversionError,
    ResetUnsupportedError,
    KeyTypeConflictError,
    UnknownClassError,
    MissingMemberError,
    InvalidNameError,
    ObjectCreationError,
)

# Collection type tags
from objectregister.reified_generics import List, is_reified, element_type

# Configuration
from objectregister.config import RegistryConfig, default_calendar_parser

# Members
from objectregister.members import Member, Registrable, member

# Converters
from objectregister.converters import (
    Converter,
    ConverterTable,
    LiteralConverter,
    BoolConverter,
    CalendarConverter,
    InstanceConverter,
    ListConverter,
    FunctionConverter,
    Function,
)

# Stores, registry, factory
from objectregister.typed_store import TypedStore
from objectregister.callbacks import CallbackTable
from objectregister.registry import ObjectRegistry
from objectregister.factory import ObjectFactory, Maker, make_object
from objectregister.loader import ObjectDefinition, make_objects

__all__ = [
    # Keys
    'SEPARATOR',
    'FUNCTION_PREFIX',
    'COLLECTION_PREFIX',
    'FILE_PREFIX',
    'register_string',
    'instance_register_string',
    'member_register_string',
    'function_register_string',
    'collection_register_string',
    'file_register_string',
    'split_register_string',
    'is_reserved',
    'is_valid_variable_name',
    # Errors
    'RegistryError',
    'KeyNotFoundError',
    'TypeRegistryNotFoundError',
    'ConversionError',
    'ResetUnsupportedError',
    'KeyTypeConflictError',
    'UnknownClassError',
    'MissingMemberError',
    'InvalidNameError',
    'ObjectCreationError',
    # Collection type tags
    'List',
    'is_reified',
    'element_type',
    # Configuration
    'RegistryConfig',
    'default_calendar_parser',
    # Members
    'Member',
    'Registrable',
    'member',
    # Converters
    'Converter',
    'ConverterTable',
    'LiteralConverter',
    'BoolConverter',
    'CalendarConverter',
    'InstanceConverter',
    'ListConverter',
    'FunctionConverter',
    'Function',
    # Registry and factory
    'TypedStore',
    'CallbackTable',
    'ObjectRegistry',
    'ObjectFactory',
    'Maker',
    'make_object',
    'ObjectDefinition',
    'make_objects',
]

__version__ = '1.0.0'
__description__ = 'Runtime object registry and factory for string-configured simulations'
