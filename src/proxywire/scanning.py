from __future__ import annotations

import inspect
import logging
from collections.abc import Iterable, Iterator
from types import ModuleType
from typing import TYPE_CHECKING, Any

from proxywire._internal.type_checks import is_concrete_candidate
from proxywire.bindings import Binding, Lifetime
from proxywire.capabilities import is_open_generic, matching_capabilities
from proxywire.markers import binding_key

if TYPE_CHECKING:
    from proxywire.registry import Registry

logger = logging.getLogger(__name__)


def scan_and_bind(
    registry: Registry,
    capability: Any,
    *candidates: type[Any] | ModuleType,
    lifetime: Lifetime = Lifetime.TRANSIENT,
) -> list[Binding]:
    """Bind every concrete candidate that implements ``capability``.

    One binding is emitted per matching declared capability, so scanning
    ``Repo`` over ``IntRepo(Repo[int])`` binds ``Repo[int]``. Abstract classes,
    protocols and still-open generic classes are skipped. A capability nothing
    implements binds nothing. Candidates are never discovered implicitly:
    calling it without classes or modules binds nothing.

    Args:
        registry: Registry receiving the new bindings.
        capability: Fixed (``Repo[int]``, ``Notifier``) or open (``Repo``)
            capability to scan for.
        *candidates: Classes, or modules whose classes are scanned.
        lifetime: Lifetime of every emitted binding.

    Returns:
        The bindings added to ``registry``, in scan order.

    """
    if not candidates:
        logger.debug("No candidates given for %r; pass classes or modules to scan.", capability)
        return []

    bindings: list[Binding] = []
    for candidate in iter_candidate_types(candidates):
        if not is_concrete_candidate(candidate):
            continue
        if is_open_generic(candidate):
            logger.debug("Skipping open generic candidate %r for %r.", candidate, capability)
            continue

        key = binding_key(candidate)
        for declared in matching_capabilities(candidate, capability):
            binding = Binding(
                provides=declared,
                key=key,
                lifetime=lifetime,
                concrete_type=candidate,
            )
            registry.add(binding)
            bindings.append(binding)
            logger.debug("Bound %r", binding)

    if not bindings:
        logger.debug("No candidate implements %r.", capability)
    return bindings


def iter_candidate_types(candidates: Iterable[type[Any] | ModuleType]) -> Iterator[type[Any]]:
    """Flatten classes and modules into unique classes, preserving order."""
    seen: set[type[Any]] = set()
    for candidate in candidates:
        types = module_types(candidate) if isinstance(candidate, ModuleType) else (candidate,)
        for item in types:
            if item in seen:
                continue
            seen.add(item)
            yield item


def module_types(module: ModuleType) -> tuple[type[Any], ...]:
    """Return the classes defined (not imported) in ``module``, in definition order."""
    return tuple(
        value
        for value in vars(module).values()
        if inspect.isclass(value) and value.__module__ == module.__name__
    )
