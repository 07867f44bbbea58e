from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Literal, TypeAlias

from proxywire.exceptions import ProxyWireInvalidRegistrationError

if TYPE_CHECKING:
    from proxywire.provider import Provider

Capability: TypeAlias = Any
"""An abstract class, protocol, or generic alias of one, used as a binding key."""

BindingFactory: TypeAlias = "Callable[[Provider], Any]"
"""A factory invoked with the resolving provider to build the bound value."""

StrategyKind = Literal["concrete_type", "factory", "instance"]

_MISSING: Any = object()


class Lifetime(Enum):
    """Defines the lifetime of a bound value in the provider."""

    TRANSIENT = auto()
    """A new instance is created every time the capability is requested."""

    SCOPED = auto()
    """Instance is shared within a scope, different instances across scopes."""

    SINGLETON = auto()
    """A single instance is created and shared for the lifetime of the provider."""


@dataclass(frozen=True, eq=False, repr=False, kw_only=True)
class Binding:
    """One registration mapping a capability (and optional key) to a strategy.

    Exactly one of ``concrete_type``, ``factory`` and ``instance`` is
    populated. Bindings compare by identity, so two structurally equal bindings
    stay distinct entries in a registry and in a provenance table.
    """

    provides: Capability
    """The capability type this binding answers for."""

    key: Any = None
    """Optional binding key; keyed and unkeyed bindings never mix."""

    lifetime: Lifetime = Lifetime.TRANSIENT
    """How long a built value is reused."""

    concrete_type: Any = None
    """A class (or closed generic alias) built through constructor injection."""

    factory: BindingFactory | None = None
    """A callable receiving the resolving provider."""

    instance: Any = _MISSING
    """A pre-built value returned as is."""

    def __post_init__(self) -> None:
        populated = [kind for kind in ("concrete_type", "factory", "instance") if self._has(kind)]
        if len(populated) != 1:
            msg = (
                f"Binding for {self.provides!r} must define exactly one of "
                f"'concrete_type', 'factory' or 'instance', got {populated or 'none'}."
            )
            raise ProxyWireInvalidRegistrationError(msg)

    @property
    def strategy(self) -> StrategyKind:
        """Return which construction strategy this binding uses."""
        if self.concrete_type is not None:
            return "concrete_type"
        if self.factory is not None:
            return "factory"
        return "instance"

    @property
    def is_keyed(self) -> bool:
        return self.key is not None

    def has_instance(self) -> bool:
        return self.instance is not _MISSING

    def _has(self, kind: StrategyKind) -> bool:
        if kind == "instance":
            return self.has_instance()
        return getattr(self, kind) is not None

    def __repr__(self) -> str:
        target: Any
        if self.strategy == "concrete_type":
            target = self.concrete_type
        elif self.strategy == "factory":
            target = getattr(self.factory, "__qualname__", self.factory)
        else:
            target = type(self.instance).__qualname__
        key = "" if self.key is None else f", key={self.key!r}"
        return (
            f"Binding({self.provides!r}{key}, {self.lifetime.name.lower()}, "
            f"{self.strategy}={target})"
        )
