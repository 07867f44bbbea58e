from __future__ import annotations

from collections.abc import Iterator
from types import ModuleType
from typing import Any

from proxywire.bindings import Binding, BindingFactory, Lifetime
from proxywire.decoration import DecorationFilter, apply_decorators
from proxywire.exceptions import ProxyWireInvalidRegistrationError
from proxywire.provenance import ProvenanceTable, WrapRecord
from proxywire.provider import Provider
from proxywire.scanning import scan_and_bind


class Registry:
    """Collect bindings during application startup.

    The registry is an ordered, mutable list of ``Binding`` objects plus the
    provenance table of the decorations applied to it. Compose it with
    ``scan_and_bind`` and ``apply_decorators``, then call ``build_provider``.
    Composition passes are not thread-safe and must not run concurrently on
    the same registry.
    """

    def __init__(self, *, default_lifetime: Lifetime = Lifetime.TRANSIENT) -> None:
        """Initialize an empty registry.

        Args:
            default_lifetime: Lifetime used by registrations and scans that
                omit ``lifetime``.

        Examples:
            .. code-block:: python

                registry = Registry()
                registry.scan_and_bind(Repo, IntRepo, StrRepo)
                registry.apply_decorators(TimedRepo)
                provider = registry.build_provider()

        """
        self._default_lifetime = default_lifetime
        self._bindings: list[Binding] = []
        self.provenance = ProvenanceTable()
        """Wrap history of this registry's decoration passes."""

    @property
    def default_lifetime(self) -> Lifetime:
        return self._default_lifetime

    # region Binding Collection
    def bindings(self) -> list[Binding]:
        """Return a snapshot of the current bindings in registration order."""
        return list(self._bindings)

    def add(self, binding: Binding) -> None:
        self._bindings.append(binding)

    def remove(self, binding: Binding) -> None:
        """Remove ``binding`` (matched by identity).

        Raises:
            ProxyWireInvalidRegistrationError: If ``binding`` is not registered.

        """
        self._bindings.pop(self._index_of(binding))

    def replace(self, old: Binding, new: Binding) -> None:
        """Swap ``old`` for ``new`` at the same position."""
        self._bindings[self._index_of(old)] = new

    def find(self, provides: Any, key: Any = None) -> Binding | None:
        """Return the binding that ``resolve(provides, key)`` would use."""
        matching = self.find_all(provides, key)
        return matching[-1] if matching else None

    def find_all(self, provides: Any, key: Any = None) -> list[Binding]:
        return [
            binding
            for binding in self._bindings
            if binding.provides == provides and binding.key == key
        ]

    def _index_of(self, binding: Binding) -> int:
        for index, candidate in enumerate(self._bindings):
            if candidate is binding:
                return index
        msg = f"{binding!r} is not registered."
        raise ProxyWireInvalidRegistrationError(msg)

    # endregion Binding Collection

    # region Registration Methods
    def add_concrete(
        self,
        provides: Any,
        concrete_type: Any,
        *,
        key: Any = None,
        lifetime: Lifetime | None = None,
    ) -> Binding:
        """Bind ``provides`` to a class built through constructor injection."""
        binding = Binding(
            provides=provides,
            key=key,
            lifetime=self._default_lifetime if lifetime is None else lifetime,
            concrete_type=concrete_type,
        )
        self.add(binding)
        return binding

    def add_factory(
        self,
        provides: Any,
        factory: BindingFactory,
        *,
        key: Any = None,
        lifetime: Lifetime | None = None,
    ) -> Binding:
        """Bind ``provides`` to ``factory(provider)``."""
        binding = Binding(
            provides=provides,
            key=key,
            lifetime=self._default_lifetime if lifetime is None else lifetime,
            factory=factory,
        )
        self.add(binding)
        return binding

    def add_instance(self, provides: Any, instance: Any, *, key: Any = None) -> Binding:
        """Bind ``provides`` to a pre-built value; instance bindings are singletons."""
        binding = Binding(
            provides=provides,
            key=key,
            lifetime=Lifetime.SINGLETON,
            instance=instance,
        )
        self.add(binding)
        return binding

    # endregion Registration Methods

    # region Composition
    def scan_and_bind(
        self,
        capability: Any,
        *candidates: type[Any] | ModuleType,
        lifetime: Lifetime | None = None,
    ) -> list[Binding]:
        """Bind every candidate implementing ``capability``; see ``scanning.scan_and_bind``."""
        return scan_and_bind(
            self,
            capability,
            *candidates,
            lifetime=self._default_lifetime if lifetime is None else lifetime,
        )

    def apply_decorators(
        self,
        *candidates: type[Any] | ModuleType,
        filter: DecorationFilter | None = None,  # noqa: A002
    ) -> list[WrapRecord]:
        """Decorate matching bindings; see ``decoration.apply_decorators``."""
        return apply_decorators(self, *candidates, filter=filter, provenance=self.provenance)

    def build_provider(self) -> Provider:
        """Freeze the current bindings into a resolving provider."""
        return Provider(self.bindings())

    # endregion Composition

    def __iter__(self) -> Iterator[Binding]:
        return iter(self.bindings())

    def __len__(self) -> int:
        return len(self._bindings)
