"""Capability discovery and matching.

A capability is an abstract contract: a ``typing.Protocol`` class, an abstract
class, or a generic alias of one (``Repo[int]``). A concrete class declares the
capabilities it subclasses; generic base classes are followed through the MRO
with the subclass' type arguments substituted, so ``class IntRepo(SqlRepo[int])``
declares ``Repo[int]`` when ``SqlRepo[T]`` subclasses ``Repo[T]``.
"""

from __future__ import annotations

import inspect
from abc import ABC
from typing import Any, Generic, Protocol, get_origin

from proxywire._internal.type_checks import is_protocol_class, is_runtime_class
from proxywire.typevars import contains_typevar, substitute_typevars, typevar_map

_NON_CAPABILITY_BASES: frozenset[Any] = frozenset({object, ABC, Generic, Protocol})


def is_capability_type(value: Any) -> bool:
    """Return whether ``value`` denotes an abstract capability.

    Args:
        value: A class or generic alias.

    Returns:
        ``True`` for protocols and abstract classes (and aliases of them),
        ``False`` for concrete classes and non-class values.

    """
    origin = get_origin(value) or value
    if not is_runtime_class(origin) or origin in _NON_CAPABILITY_BASES:
        return False
    if is_protocol_class(origin):
        return True
    return inspect.isabstract(origin) or ABC in origin.__bases__


def is_open_generic(value: Any) -> bool:
    """Return whether ``value`` still exposes unbound type parameters."""
    return contains_typevar(value)


def generic_definition(value: Any) -> Any | None:
    """Return the generic definition behind ``value``.

    ``Repo[int]``, ``Repo[T]`` and ``Repo`` all map to ``Repo``; non-generic
    values map to ``None``.
    """
    origin = get_origin(value)
    if origin is not None:
        return origin
    if getattr(value, "__parameters__", ()):
        return value
    return None


def declared_capabilities(candidate: Any) -> tuple[Any, ...]:
    """Collect every capability a class (or closed alias of one) declares.

    Args:
        candidate: A class such as ``IntRepo`` or a generic alias such as
            ``TimedRepo[int]``.

    Returns:
        Declared capabilities in MRO order without duplicates. Type arguments
        of ``candidate`` are substituted into its generic bases.

    """
    origin = get_origin(candidate) or candidate
    if not is_runtime_class(origin):
        return ()
    found: list[Any] = []
    _collect_capabilities(origin, mapping=typevar_map(candidate), found=found)
    return tuple(found)


def matching_capabilities(candidate: Any, capability: Any) -> tuple[Any, ...]:
    """Return the declared capabilities of ``candidate`` that satisfy ``capability``.

    A fixed capability matches only itself. An open capability (``Repo`` or
    ``Repo[T]``) matches any declaration of the same generic definition,
    whatever its type arguments.
    """
    declared = declared_capabilities(candidate)
    if not is_open_generic(capability):
        return tuple(item for item in declared if item == capability)
    definition = generic_definition(capability)
    return tuple(item for item in declared if generic_definition(item) is definition)


def matches(candidate: Any, capability: Any) -> bool:
    """Return whether ``candidate`` satisfies ``capability``."""
    return bool(matching_capabilities(candidate, capability))


def is_assignable(capability: Any, target: Any) -> bool:
    """Return whether a value of ``capability`` can stand in for ``target``.

    True when both are equal, or when ``target`` is one of the capabilities
    ``capability`` itself extends.
    """
    return capability == target or target in declared_capabilities(capability)


def _collect_capabilities(cls: type[Any], *, mapping: dict[Any, Any], found: list[Any]) -> None:
    for base in _original_bases(cls):
        closed = substitute_typevars(base, mapping=mapping)
        base_origin = get_origin(closed) or closed
        if base_origin in _NON_CAPABILITY_BASES or not is_runtime_class(base_origin):
            continue
        if is_capability_type(closed) and closed not in found:
            found.append(closed)
        _collect_capabilities(base_origin, mapping=typevar_map(closed), found=found)


def _original_bases(cls: type[Any]) -> tuple[Any, ...]:
    # ``__orig_bases__`` is inherited through attribute lookup; only the class'
    # own entry describes its direct bases.
    return cls.__dict__.get("__orig_bases__", cls.__bases__)
