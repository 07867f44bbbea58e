from __future__ import annotations

import inspect
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from types import TracebackType
from typing import TYPE_CHECKING, Any, cast

from proxywire.bindings import Binding, Lifetime
from proxywire.dependencies import ConstructorDependency, DependenciesExtractor
from proxywire.exceptions import (
    ProxyWireDependencyNotRegisteredError,
    ProxyWireScopeMismatchError,
)

if TYPE_CHECKING:
    from typing_extensions import Self

_MISSING_CACHE: Any = object()


class Provider:
    """Resolve values from a frozen sequence of bindings.

    A provider is built by ``Registry.build_provider`` once composition is
    finished. The root provider owns singleton values; ``enter_scope`` yields a
    child provider that owns scoped values. When several bindings answer the
    same capability and key, the last one wins for ``resolve`` and all of them
    are returned, in registration order, by ``resolve_all``.
    """

    def __init__(
        self,
        bindings: Sequence[Binding],
        *,
        root: Provider | None = None,
    ) -> None:
        self._root = self if root is None else root
        self._is_scope = root is not None
        self._cache: dict[Binding, Any] = {}
        if root is None:
            self._bindings_by_key: dict[tuple[Any, Any], list[Binding]] = {}
            for binding in bindings:
                self._bindings_by_key.setdefault((binding.provides, binding.key), []).append(
                    binding,
                )
            self._dependencies_extractor = DependenciesExtractor()
        else:
            self._bindings_by_key = root._bindings_by_key
            self._dependencies_extractor = root._dependencies_extractor

    def resolve(self, capability: Any, key: Any = None) -> Any:
        """Resolve the last binding registered for ``capability`` and ``key``.

        Raises:
            ProxyWireDependencyNotRegisteredError: If nothing is bound.
            ProxyWireScopeMismatchError: If the binding is scoped and this is
                the root provider, or if a singleton depends on a scoped
                binding.

        """
        bindings = self._bindings_by_key.get((capability, key))
        if not bindings:
            suffix = "" if key is None else f" with key {key!r}"
            msg = f"Dependency {capability!r}{suffix} is not registered."
            raise ProxyWireDependencyNotRegisteredError(msg)
        return self.resolve_binding(bindings[-1])

    def resolve_all(self, capability: Any, key: Any = None) -> list[Any]:
        """Resolve every binding registered for ``capability`` and ``key``."""
        return [
            self.resolve_binding(binding)
            for binding in self._bindings_by_key.get((capability, key), ())
        ]

    def is_registered(self, capability: Any, key: Any = None) -> bool:
        return bool(self._bindings_by_key.get((capability, key)))

    def resolve_binding(self, binding: Binding) -> Any:
        """Resolve one binding honoring its lifetime."""
        if binding.has_instance():
            return binding.instance

        if binding.lifetime is Lifetime.TRANSIENT:
            return self._build(binding)

        if binding.lifetime is Lifetime.SCOPED:
            if not self._is_scope:
                msg = (
                    f"Scoped binding {binding!r} cannot be resolved from the root provider. "
                    "Resolve it inside 'enter_scope()'."
                )
                raise ProxyWireScopeMismatchError(msg)
            owner = self
        else:
            owner = self._root

        cached = owner._cache.get(binding, _MISSING_CACHE)
        if cached is not _MISSING_CACHE:
            return cached
        # Singletons are built by the root so they never capture scoped values.
        value = owner._build(binding)
        owner._cache[binding] = value
        return value

    def instantiate(self, concrete_type: Any, **provided: Any) -> Any:
        """Construct ``concrete_type`` through constructor injection.

        Args:
            concrete_type: A class or a closed generic alias of one.
            **provided: Values supplied by parameter name instead of being
                resolved (for example the wrapped value of a decorator).

        Raises:
            ProxyWireDependencyNotRegisteredError: If a required parameter has
                no binding and no default.

        """
        positional_arguments: list[Any] = []
        keyword_arguments: dict[str, Any] = {}
        for dependency in self._dependencies_extractor.extract_from_concrete_type(concrete_type):
            name = dependency.parameter.name
            if name in provided:
                value = provided[name]
            elif dependency.has_default and not self.is_registered(dependency.provides):
                if dependency.parameter.kind is not inspect.Parameter.POSITIONAL_ONLY:
                    continue
                value = dependency.parameter.default
            else:
                try:
                    value = self.resolve(dependency.provides)
                except ProxyWireDependencyNotRegisteredError as error:
                    msg = (
                        f"Cannot construct {concrete_type!r}: parameter '{name}' "
                        f"requires {dependency.provides!r}, which is not registered."
                    )
                    raise ProxyWireDependencyNotRegisteredError(msg) from error
            _append_call_argument(
                dependency=dependency,
                value=value,
                positional_arguments=positional_arguments,
                keyword_arguments=keyword_arguments,
            )
        return concrete_type(*positional_arguments, **keyword_arguments)

    @contextmanager
    def enter_scope(self) -> Iterator[Provider]:
        """Open a child scope that owns its own scoped values."""
        scope = Provider((), root=self._root)
        try:
            yield scope
        finally:
            scope.close()

    def close(self) -> None:
        """Drop the values cached by this provider."""
        self._cache.clear()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def _build(self, binding: Binding) -> Any:
        if binding.concrete_type is not None:
            return self.instantiate(binding.concrete_type)
        factory = cast("Any", binding.factory)
        return factory(self)


def _append_call_argument(
    *,
    dependency: ConstructorDependency,
    value: Any,
    positional_arguments: list[Any],
    keyword_arguments: dict[str, Any],
) -> None:
    if dependency.parameter.kind is inspect.Parameter.POSITIONAL_ONLY:
        positional_arguments.append(value)
        return
    keyword_arguments[dependency.parameter.name] = value
