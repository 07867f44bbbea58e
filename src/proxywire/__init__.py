from proxywire.bindings import Binding, Lifetime
from proxywire.capabilities import (
    declared_capabilities,
    generic_definition,
    is_capability_type,
    matches,
)
from proxywire.decoration import DecorationFilter, apply_decorators
from proxywire.exceptions import (
    ProxyWireAmbiguousDecoratorError,
    ProxyWireAmbiguousImplementationError,
    ProxyWireDependencyInferenceError,
    ProxyWireDependencyNotRegisteredError,
    ProxyWireError,
    ProxyWireInvalidGenericTypeArgumentError,
    ProxyWireInvalidRegistrationError,
    ProxyWireScopeMismatchError,
)
from proxywire.markers import keyed
from proxywire.open_generics import resolve_closed_candidate
from proxywire.provenance import ProvenanceTable, WrapRecord
from proxywire.provider import Provider
from proxywire.registry import Registry
from proxywire.scanning import scan_and_bind

__all__ = [
    "Binding",
    "DecorationFilter",
    "Lifetime",
    "ProvenanceTable",
    "Provider",
    "ProxyWireAmbiguousDecoratorError",
    "ProxyWireAmbiguousImplementationError",
    "ProxyWireDependencyInferenceError",
    "ProxyWireDependencyNotRegisteredError",
    "ProxyWireError",
    "ProxyWireInvalidGenericTypeArgumentError",
    "ProxyWireInvalidRegistrationError",
    "ProxyWireScopeMismatchError",
    "Registry",
    "WrapRecord",
    "apply_decorators",
    "declared_capabilities",
    "generic_definition",
    "is_capability_type",
    "keyed",
    "matches",
    "resolve_closed_candidate",
    "scan_and_bind",
]
