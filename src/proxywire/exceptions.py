from __future__ import annotations

from collections.abc import Sequence
from typing import Any


class ProxyWireError(Exception):
    """Represent a base class for all proxywire-specific failures.

    Catch this type when you want to handle any proxywire error path without
    matching each concrete exception class individually.
    """


class ProxyWireInvalidRegistrationError(ProxyWireError):
    """Signal an invalid binding or decorator configuration.

    Raised by ``Binding`` when zero or several construction strategies are
    populated, and by ``apply_decorators`` when a decorator constructor has more
    than one parameter able to receive the wrapped value.

    Typical fixes include passing exactly one of ``concrete_type``/``factory``/
    ``instance`` and annotating the decorator's inner parameter with the
    capability type it wraps.
    """


class ProxyWireAmbiguousImplementationError(ProxyWireError):
    """Signal that several candidates match where exactly one is required.

    Composition is not transactional: bindings replaced before the failure
    stay replaced, so startup should be aborted.
    """

    def __init__(self, capability: Any, candidates: Sequence[type[Any]]) -> None:
        self.capability = capability
        self.candidates = tuple(candidates)
        names = ", ".join(_type_name(candidate) for candidate in self.candidates)
        super().__init__(
            f"{self._subject} for {capability!r} is ambiguous; matching candidates: {names}.",
        )

    _subject = "Implementation"


class ProxyWireAmbiguousDecoratorError(ProxyWireAmbiguousImplementationError):
    """Signal that several decorator candidates target the same capability.

    Raised by ``apply_decorators``. Typical fix is splitting the candidates
    into separate ``apply_decorators`` calls, one per decoration layer.
    """

    _subject = "Decorator"


class ProxyWireInvalidGenericTypeArgumentError(ProxyWireError):
    """Signal invalid closed-generic arguments for an open candidate.

    Raised by ``validate_typevar_arguments`` when an argument violates a
    TypeVar bound or constraint. The generic resolver treats it as "no match".
    """


class ProxyWireDependencyNotRegisteredError(ProxyWireError):
    """Signal that a dependency key has no binding.

    Raised by ``Provider.resolve`` and by constructor injection when a required
    parameter cannot be satisfied from the registry. Decorator factories let it
    propagate unchanged.

    Typical fix is registering the dependency, or giving the parameter a
    default value.
    """


class ProxyWireDependencyInferenceError(ProxyWireError):
    """Signal that a required constructor parameter cannot be inferred.

    Common trigger is a missing or unresolvable type annotation on a required
    ``__init__`` parameter.
    """


class ProxyWireScopeMismatchError(ProxyWireError):
    """Signal resolution of a scoped binding outside of a scope.

    Typical fix is resolving inside ``with provider.enter_scope() as scope:``.
    """


def _type_name(value: Any) -> str:
    return getattr(value, "__qualname__", repr(value))
