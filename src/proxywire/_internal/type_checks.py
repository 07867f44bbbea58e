from __future__ import annotations

import inspect
import types
from typing import Any, TypeGuard


def is_runtime_class(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when candidate is a runtime class safe for class-only operations.

    Args:
        candidate: Value being checked for eligibility or runtime type constraints.

    """
    return isinstance(candidate, type) and not isinstance(candidate, types.GenericAlias)


def is_protocol_class(candidate: type[Any]) -> bool:
    return bool(candidate.__dict__.get("_is_protocol", False))


def is_concrete_candidate(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when a scanned value can be constructed as an implementation.

    Args:
        candidate: Value being checked for eligibility or runtime type constraints.

    """
    if not is_runtime_class(candidate):
        return False
    if inspect.isabstract(candidate) or is_protocol_class(candidate):
        return False
    return not issubclass(candidate, type)
