"""
Reified collection types - element types preserved at runtime.

The registry keeps one store per value type, so an ordered collection has to
carry its element type as part of its type: ``List[float]`` and
``List[Storage]`` are distinct, hashable type objects that can key a store and
pick a converter.

Usage:
    from objectregister.reified_generics import List

    sources = List[Storage]([lake, spillway])
    type(sources) is List[Storage]      # True
    isinstance(sources, List[Storage])  # True
    element_type(type(sources))         # Storage
"""

from typing import Any, Dict, Optional, Tuple

# =============================================================================
# TYPE CACHE - one type object per (origin, args)
# =============================================================================

_reified_cache: Dict[Tuple[type, tuple], type] = {}


# =============================================================================
# REIFIED METACLASS
# =============================================================================

class ReifiedMeta(type):
    """
    Metaclass for reified collection types.

    Provides an isinstance check that respects the element type,
    and hash/equality based on (origin, args) so tags survive cache clears.
    """

    def __instancecheck__(cls, instance: Any) -> bool:
        inst_type = type(instance)
        if inst_type is cls:
            return True

        if hasattr(inst_type, '__args__') and hasattr(inst_type, '__origin__'):
            return inst_type.__origin__ is cls.__origin__ and inst_type.__args__ == cls.__args__

        # A plain list carries no element type; it is never a List[T]
        return False

    def __hash__(cls) -> int:
        return hash((cls.__origin__, cls.__args__))

    def __eq__(cls, other: Any) -> bool:
        if not isinstance(other, type):
            return False
        if hasattr(other, '__origin__') and hasattr(other, '__args__'):
            return cls.__origin__ is other.__origin__ and cls.__args__ == other.__args__
        return cls is other

    def __repr__(cls) -> str:
        return cls.__name__


def _make_reified_type(origin: type, args: tuple) -> type:
    """Create (or fetch from cache) the reified type for origin[args]."""
    key = (origin, args)
    cached = _reified_cache.get(key)
    if cached is not None:
        return cached

    args_str = ', '.join(
        arg.__name__ if hasattr(arg, '__name__') else repr(arg)
        for arg in args
    )
    reified_type = ReifiedMeta(
        f'{origin.__name__}[{args_str}]',
        (origin,),
        {
            '__origin__': origin,
            '__args__': args,
            '__reified__': True,
            '__module__': origin.__module__,
            '__repr__': _reified_instance_repr,
        }
    )
    _reified_cache[key] = reified_type
    return reified_type


def _reified_instance_repr(self) -> str:
    return f"{type(self).__name__}({list.__repr__(self)})"


# =============================================================================
# PUBLIC API
# =============================================================================

class ReifiedList(list):
    """
    Ordered collection whose element type is part of its runtime type.

    ``List[T]`` returns the cached reified type; calling it builds an instance:
        List[int]([1, 2, 3])
    """
    __origin__ = list
    __args__: tuple = ()
    __reified__ = True

    def __class_getitem__(cls, params):
        if isinstance(params, tuple):
            if len(params) != 1:
                raise TypeError(f"List takes exactly one element type, got {len(params)}")
            params = params[0]
        return _make_reified_type(list, (params,))


List = ReifiedList


def is_reified(t: Any) -> bool:
    """Check if a type is a reified collection type."""
    return isinstance(t, ReifiedMeta) and getattr(t, '__reified__', False)


def element_type(t: Any) -> Optional[Any]:
    """Element type of a reified ``List[T]``, or None for anything else."""
    if is_reified(t) and t.__origin__ is list:
        return t.__args__[0]
    return None


def clear_cache() -> None:
    """Clear the reified type cache (for testing)."""
    _reified_cache.clear()
