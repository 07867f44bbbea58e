"""Tests for the custom exception hierarchy."""

from abc import ABC, abstractmethod

import pytest

from proxywire import (
    Binding,
    ProxyWireAmbiguousDecoratorError,
    ProxyWireAmbiguousImplementationError,
    ProxyWireDependencyInferenceError,
    ProxyWireDependencyNotRegisteredError,
    ProxyWireError,
    ProxyWireInvalidGenericTypeArgumentError,
    ProxyWireInvalidRegistrationError,
    ProxyWireScopeMismatchError,
    Registry,
)


class Clock(ABC):
    @abstractmethod
    def now(self) -> float: ...


class SystemClock(Clock):
    def now(self) -> float:
        return 0.0


class TestHierarchy:
    @pytest.mark.parametrize(
        "error_type",
        [
            ProxyWireAmbiguousDecoratorError,
            ProxyWireAmbiguousImplementationError,
            ProxyWireDependencyInferenceError,
            ProxyWireDependencyNotRegisteredError,
            ProxyWireInvalidGenericTypeArgumentError,
            ProxyWireInvalidRegistrationError,
            ProxyWireScopeMismatchError,
        ],
    )
    def test_every_error_derives_from_base(self, error_type: type[Exception]) -> None:
        assert issubclass(error_type, ProxyWireError)

    def test_ambiguous_decorator_is_ambiguous_implementation(self) -> None:
        assert issubclass(ProxyWireAmbiguousDecoratorError, ProxyWireAmbiguousImplementationError)


class TestAmbiguousImplementationError:
    def test_message_names_capability_and_candidates(self) -> None:
        error = ProxyWireAmbiguousImplementationError(Clock, [SystemClock, SystemClock])

        assert error.capability is Clock
        assert error.candidates == (SystemClock, SystemClock)
        assert str(error).startswith("Implementation for")
        assert "SystemClock" in str(error)

    def test_decorator_variant_uses_its_own_subject(self) -> None:
        error = ProxyWireAmbiguousDecoratorError(Clock, [SystemClock])

        assert str(error).startswith("Decorator for")


class TestInvalidRegistrationError:
    def test_binding_without_strategy(self) -> None:
        with pytest.raises(ProxyWireInvalidRegistrationError, match="exactly one"):
            Binding(provides=Clock)

    def test_binding_with_two_strategies(self) -> None:
        with pytest.raises(ProxyWireInvalidRegistrationError, match="concrete_type"):
            Binding(provides=Clock, concrete_type=SystemClock, instance=SystemClock())

    def test_replacing_unknown_binding(self) -> None:
        registry = Registry()
        stray = Binding(provides=Clock, concrete_type=SystemClock)

        with pytest.raises(ProxyWireInvalidRegistrationError, match="is not registered"):
            registry.replace(stray, stray)


class TestDependencyNotRegisteredError:
    def test_raises_when_capability_not_bound(self) -> None:
        provider = Registry().build_provider()

        with pytest.raises(ProxyWireDependencyNotRegisteredError, match="is not registered"):
            provider.resolve(Clock)

    def test_message_mentions_key(self) -> None:
        registry = Registry()
        registry.add_concrete(Clock, SystemClock)

        with pytest.raises(ProxyWireDependencyNotRegisteredError, match="with key 'utc'"):
            registry.build_provider().resolve(Clock, key="utc")
