from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar, get_args, get_origin

from proxywire.exceptions import ProxyWireInvalidGenericTypeArgumentError


def contains_typevar(value: Any) -> bool:
    """Return whether a type expression still contains a ``TypeVar``.

    A bare generic class such as ``Repo`` counts as open because it still
    exposes its ``__parameters__``.

    Args:
        value: Type expression or object to inspect.

    Returns:
        ``True`` when any nested node contains a TypeVar, else ``False``.

    """
    if isinstance(value, TypeVar):
        return True

    origin = get_origin(value)
    if origin is not None:
        return any(contains_typevar(argument) for argument in get_args(value))

    parameters = getattr(value, "__parameters__", ())
    return any(isinstance(parameter, TypeVar) for parameter in parameters)


def substitute_typevars(value: Any, *, mapping: Mapping[TypeVar, Any]) -> Any:
    """Substitute TypeVars in a type expression using a resolved mapping.

    Args:
        value: Type expression template that may contain TypeVars.
        mapping: Mapping from template TypeVars to concrete type arguments.

    Returns:
        The substituted type expression with available TypeVars replaced.

    """
    if isinstance(value, TypeVar):
        return mapping.get(value, value)

    origin = get_origin(value)
    if origin is None or not mapping:
        return value

    arguments = get_args(value)
    if not arguments:
        return value

    substituted_arguments = tuple(
        substitute_typevars(argument, mapping=mapping) for argument in arguments
    )
    return rebuild_alias(origin=origin, args=substituted_arguments, fallback=value)


def typevar_map(value: Any) -> dict[TypeVar, Any]:
    """Map the parameters of a generic alias' origin to the alias arguments.

    ``Repo[int]`` yields ``{T: int}``; non-generic values yield ``{}``.
    """
    origin = get_origin(value)
    if origin is None:
        return {}
    parameters = tuple(
        parameter
        for parameter in getattr(origin, "__parameters__", ())
        if isinstance(parameter, TypeVar)
    )
    arguments = get_args(value)
    if len(parameters) != len(arguments):
        return {}
    return dict(zip(parameters, arguments, strict=True))


def type_parameters(value: Any) -> tuple[TypeVar, ...]:
    """Return the TypeVars a class (or the origin of an alias) is generic over."""
    origin = get_origin(value) or value
    return tuple(
        parameter
        for parameter in getattr(origin, "__parameters__", ())
        if isinstance(parameter, TypeVar)
    )


def validate_typevar_arguments(typevar_map: Mapping[TypeVar, Any]) -> None:
    """Validate closed generic arguments against TypeVar constraints and bounds.

    Args:
        typevar_map: Mapping from open TypeVars to candidate concrete arguments.

    Raises:
        ProxyWireInvalidGenericTypeArgumentError: If any argument violates
            TypeVar constraints or bound requirements.

    """
    for typevar, argument in typevar_map.items():
        if not _is_type_argument_valid(typevar=typevar, argument=argument):
            constraints = getattr(typevar, "__constraints__", ())
            bound = getattr(typevar, "__bound__", None)
            if constraints:
                formatted_constraints = ", ".join(repr(item) for item in constraints)
                msg = (
                    f"Generic argument {argument!r} for TypeVar '{typevar.__name__}' must satisfy "
                    f"one of: {formatted_constraints}."
                )
            elif bound is not None:
                msg = (
                    f"Generic argument {argument!r} for TypeVar '{typevar.__name__}' must satisfy "
                    f"bound {bound!r}."
                )
            else:
                msg = f"Generic argument {argument!r} is invalid for TypeVar '{typevar.__name__}'."
            raise ProxyWireInvalidGenericTypeArgumentError(msg)


def rebuild_alias(*, origin: Any, args: tuple[Any, ...], fallback: Any) -> Any:
    try:
        if len(args) == 1:
            return origin[args[0]]
        return origin[args]
    except TypeError:
        return fallback


def origin_or_self(value: Any) -> Any:
    return get_origin(value) or value


def _is_type_argument_valid(*, typevar: TypeVar, argument: Any) -> bool:
    constraints = getattr(typevar, "__constraints__", ())
    if constraints:
        return any(
            _matches_type_constraint(argument=argument, constraint=constraint)
            for constraint in constraints
        )
    bound = getattr(typevar, "__bound__", None)
    if bound is None:
        return True
    return _matches_type_constraint(argument=argument, constraint=bound)


def _matches_type_constraint(*, argument: Any, constraint: Any) -> bool:
    if constraint is Any:
        return True
    argument_type = origin_or_self(argument)
    constraint_type = origin_or_self(constraint)
    if isinstance(argument_type, type) and isinstance(constraint_type, type):
        try:
            return issubclass(argument_type, constraint_type)
        except TypeError:
            return False
    return argument == constraint
