from __future__ import annotations

import logging
from typing import Any, get_args, get_origin

from proxywire.capabilities import declared_capabilities, is_assignable
from proxywire.exceptions import ProxyWireInvalidGenericTypeArgumentError
from proxywire.typevars import rebuild_alias, type_parameters, validate_typevar_arguments

logger = logging.getLogger(__name__)


def resolve_closed_candidate(open_candidate: Any, closed_capability: Any) -> Any | None:
    """Close an open generic candidate over the arguments of a capability.

    The first ``K`` type arguments of ``closed_capability`` are bound to the
    candidate's ``K`` type parameters in order. The closed candidate is kept
    only when its arguments satisfy the TypeVar bounds and constraints and
    when one of its declared capabilities is assignable from
    ``closed_capability``; aligned generic definitions alone are not enough.

    Args:
        open_candidate: A generic class such as ``TimedRepo`` (over ``T``).
        closed_capability: A closed capability alias such as ``Repo[int]``.

    Returns:
        The closed candidate alias (``TimedRepo[int]``), or ``None`` when the
        candidate cannot serve ``closed_capability``.

    """
    parameters = type_parameters(open_candidate)
    arguments = get_args(closed_capability)
    if not parameters or len(arguments) < len(parameters):
        logger.debug(
            "Cannot close %r over %r: %d type parameter(s), %d argument(s).",
            open_candidate,
            closed_capability,
            len(parameters),
            len(arguments),
        )
        return None

    mapping = dict(zip(parameters, arguments[: len(parameters)], strict=True))
    try:
        validate_typevar_arguments(mapping)
    except ProxyWireInvalidGenericTypeArgumentError as error:
        logger.debug("Cannot close %r over %r: %s", open_candidate, closed_capability, error)
        return None

    origin = get_origin(open_candidate) or open_candidate
    closed_candidate = rebuild_alias(origin=origin, args=tuple(mapping.values()), fallback=None)
    if closed_candidate is None:
        return None

    if any(
        is_assignable(closed_capability, declared)
        for declared in declared_capabilities(closed_candidate)
    ):
        return closed_candidate

    logger.debug(
        "Closed candidate %r does not implement %r; treating as no match.",
        closed_candidate,
        closed_capability,
    )
    return None
