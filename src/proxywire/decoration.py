"""Retroactive decoration of registered bindings.

``apply_decorators`` matches decorator classes against the capabilities already
bound in a registry and replaces each matching binding with a factory binding
that builds the original value first and then constructs the decorator around
it. Repeated passes are safe: a decorator never appears twice along one wrap
chain.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from types import ModuleType
from typing import TYPE_CHECKING, Any, TypeAlias

from proxywire._internal.type_checks import is_concrete_candidate
from proxywire.bindings import Binding, Lifetime
from proxywire.capabilities import (
    declared_capabilities,
    generic_definition,
    is_capability_type,
    is_open_generic,
)
from proxywire.dependencies import DependenciesExtractor
from proxywire.exceptions import (
    ProxyWireAmbiguousDecoratorError,
    ProxyWireInvalidRegistrationError,
)
from proxywire.open_generics import resolve_closed_candidate
from proxywire.provenance import ProvenanceTable, WrapRecord
from proxywire.scanning import iter_candidate_types
from proxywire.typevars import origin_or_self

if TYPE_CHECKING:
    from proxywire.provider import Provider
    from proxywire.registry import Registry

logger = logging.getLogger(__name__)

DecorationFilter: TypeAlias = Callable[[Any, Any], bool]
"""``filter(capability, resolved_decorator_type) -> bool``; ``False`` skips the binding."""


def apply_decorators(
    registry: Registry,
    *candidates: type[Any] | ModuleType,
    filter: DecorationFilter | None = None,  # noqa: A002
    provenance: ProvenanceTable | None = None,
) -> list[WrapRecord]:
    """Wrap matching bindings of ``registry`` with decorator classes.

    Bindings are processed over a snapshot of the registry, in registration
    order. Each replaced binding keeps its position, key and lifetime, except
    that wrapping a pre-built instance always yields a singleton binding.

    Args:
        registry: Registry whose bindings are decorated in place.
        *candidates: Decorator classes, or modules whose classes are used.
        filter: Optional predicate called with the binding's capability and
            the resolved decorator type; returning ``False`` leaves the
            binding untouched.
        provenance: Wrap history to consult and extend. Defaults to the
            registry's own table.

    Returns:
        The wrap records produced by this pass, already added to the
        provenance table.

    Raises:
        ProxyWireAmbiguousDecoratorError: If more than one candidate targets the
            capability of a bound binding. Bindings already replaced in this
            pass stay replaced.
        ProxyWireInvalidRegistrationError: If a decorator constructor has
            several parameters able to receive the wrapped value.

    """
    table = registry.provenance if provenance is None else provenance
    decorators_by_capability = index_decorators(candidates)
    if not decorators_by_capability:
        return []

    records: list[WrapRecord] = []
    for binding in registry.bindings():
        if not is_capability_type(binding.provides):
            continue
        record = _decorate_binding(
            binding=binding,
            decorators_by_capability=decorators_by_capability,
            table=table,
            filter=filter,
        )
        if record is None:
            continue
        registry.replace(binding, record.result)
        table.record(record)
        records.append(record)
        logger.debug("Decorated %r with %r.", binding, record.decorator_type)
    return records


def index_decorators(candidates: Iterable[type[Any] | ModuleType]) -> dict[Any, list[Any]]:
    """Group concrete decorator candidates by the capabilities they declare.

    Open declarations (``Repo[T]``) are indexed under their generic definition
    (``Repo``); closed ones under themselves.
    """
    index: dict[Any, list[Any]] = {}
    for candidate in iter_candidate_types(candidates):
        if not is_concrete_candidate(candidate):
            continue
        for declared in declared_capabilities(candidate):
            key = generic_definition(declared) if is_open_generic(declared) else declared
            bucket = index.setdefault(key, [])
            if candidate not in bucket:
                bucket.append(candidate)
    return index


def find_inner_parameter(decorator_type: Any, capability: Any) -> str | None:
    """Return the constructor parameter of ``decorator_type`` that receives the wrapped value.

    A parameter annotated exactly with ``capability`` wins; otherwise one
    annotated with the same generic definition is accepted.

    Raises:
        ProxyWireInvalidRegistrationError: If several parameters qualify.

    """
    dependencies = DependenciesExtractor().extract_from_concrete_type(decorator_type)
    matched = [
        dependency.parameter.name
        for dependency in dependencies
        if dependency.provides == capability
    ]
    if not matched:
        definition = generic_definition(capability)
        matched = [
            dependency.parameter.name
            for dependency in dependencies
            if definition is not None and generic_definition(dependency.provides) is definition
        ]
    if len(matched) > 1:
        names = ", ".join(f"'{name}'" for name in matched)
        msg = (
            f"Decorator {decorator_type!r} has several parameters able to receive "
            f"{capability!r}: {names}."
        )
        raise ProxyWireInvalidRegistrationError(msg)
    return matched[0] if matched else None


def _decorate_binding(
    *,
    binding: Binding,
    decorators_by_capability: dict[Any, list[Any]],
    table: ProvenanceTable,
    filter: DecorationFilter | None,  # noqa: A002
) -> WrapRecord | None:
    capability = binding.provides
    if is_open_generic(capability):
        logger.debug("Skipping %r: open generic bindings cannot be decorated.", binding)
        return None

    candidates = decorators_by_capability.get(capability)
    if candidates is None:
        definition = generic_definition(capability)
        if definition is not None:
            candidates = decorators_by_capability.get(definition)
    if not candidates:
        return None
    if len(candidates) > 1:
        raise ProxyWireAmbiguousDecoratorError(capability, candidates)

    decorator_type = candidates[0]
    if is_open_generic(decorator_type):
        decorator_type = resolve_closed_candidate(decorator_type, capability)
        if decorator_type is None:
            return None

    if table.already_wrapped(binding, decorator_type):
        logger.debug("Skipping %r: already wrapped by %r.", binding, decorator_type)
        return None
    if _builds_decorator_itself(binding, decorator_type):
        logger.debug("Skipping %r: it already builds %r.", binding, decorator_type)
        return None
    if filter is not None and not filter(capability, decorator_type):
        logger.debug("Skipping %r: rejected by filter for %r.", binding, decorator_type)
        return None

    inner_parameter = find_inner_parameter(decorator_type, capability)
    if inner_parameter is None:
        logger.debug(
            "Skipping %r: %r has no parameter accepting %r.",
            binding,
            decorator_type,
            capability,
        )
        return None

    result = Binding(
        provides=capability,
        key=binding.key,
        lifetime=Lifetime.SINGLETON if binding.has_instance() else binding.lifetime,
        factory=_decorating_factory(
            build_inner=_inner_builder(binding),
            decorator_type=decorator_type,
            inner_parameter=inner_parameter,
        ),
    )
    return WrapRecord(result=result, original=binding, decorator_type=decorator_type)


def _builds_decorator_itself(binding: Binding, decorator_type: Any) -> bool:
    if binding.concrete_type is not None:
        return bool(binding.concrete_type == decorator_type)
    if binding.has_instance():
        return type(binding.instance) is origin_or_self(decorator_type)
    return False


def _inner_builder(binding: Binding) -> Callable[[Provider], Any]:
    # Bypasses the provider's lifetime cache: the wrapper's own binding owns it.
    if binding.concrete_type is not None:
        concrete_type = binding.concrete_type
        return lambda provider: provider.instantiate(concrete_type)
    if binding.factory is not None:
        return binding.factory
    instance = binding.instance
    return lambda _provider: instance


def _decorating_factory(
    *,
    build_inner: Callable[[Provider], Any],
    decorator_type: Any,
    inner_parameter: str,
) -> Callable[[Provider], Any]:
    def factory(provider: Provider) -> Any:
        inner = build_inner(provider)
        return provider.instantiate(decorator_type, **{inner_parameter: inner})

    factory.__qualname__ = f"decorate[{decorator_type!r}]"
    return factory
