from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

C = TypeVar("C", bound=type[Any])

_BINDING_KEY_ATTRIBUTE = "__proxywire_binding_key__"


def keyed(key: Any) -> Callable[[C], C]:
    """Mark an implementation to be bound under ``key`` when scanned.

    Keyed and unkeyed bindings for the same capability are independent:
    ``provider.resolve(Repo[str], key="special")`` never returns the unkeyed
    binding, and decoration keeps the key of the binding it replaces.

    Examples:
        .. code-block:: python

            @keyed("special")
            class SpecialStringRepo(Repo[str]): ...

    """
    if key is None:
        msg = "keyed() requires a non-None key."
        raise ValueError(msg)

    def decorator(cls: C) -> C:
        setattr(cls, _BINDING_KEY_ATTRIBUTE, key)
        return cls

    return decorator


def binding_key(candidate: type[Any]) -> Any:
    """Return the key declared with ``@keyed`` on ``candidate`` itself, else ``None``."""
    return candidate.__dict__.get(_BINDING_KEY_ATTRIBUTE)
