from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

import pytest

from proxywire import (
    Binding,
    Lifetime,
    Provider,
    ProxyWireDependencyNotRegisteredError,
    ProxyWireScopeMismatchError,
    Registry,
)

T = TypeVar("T")


class Clock(ABC):
    @abstractmethod
    def now(self) -> float: ...


class SystemClock(Clock):
    def now(self) -> float:
        return 0.0


class FrozenClock(Clock):
    def now(self) -> float:
        return 1.0


class Settings:
    def __init__(self, retries: int = 3) -> None:
        self.retries = retries


class Service:
    def __init__(self, clock: Clock, settings: Settings) -> None:
        self.clock = clock
        self.settings = settings


class PositionalService:
    def __init__(self, clock: Clock, retries: int = 5, /) -> None:
        self.clock = clock
        self.retries = retries


class Box(Generic[T]):
    def __init__(self, clock: Clock) -> None:
        self.clock = clock


class TimedBox(Box[T]):
    pass


def test_resolve_builds_concrete_type_with_dependencies(registry: Registry) -> None:
    registry.add_concrete(Clock, SystemClock)
    registry.add_concrete(Settings, Settings)
    registry.add_concrete(Service, Service)

    service = registry.build_provider().resolve(Service)

    assert isinstance(service.clock, SystemClock)
    assert service.settings.retries == 3


def test_last_binding_wins_and_resolve_all_keeps_order(registry: Registry) -> None:
    registry.add_concrete(Clock, SystemClock)
    registry.add_concrete(Clock, FrozenClock)
    provider = registry.build_provider()

    assert isinstance(provider.resolve(Clock), FrozenClock)
    assert [type(clock) for clock in provider.resolve_all(Clock)] == [SystemClock, FrozenClock]


def test_keyed_and_unkeyed_bindings_are_separate(registry: Registry) -> None:
    registry.add_concrete(Clock, SystemClock)
    registry.add_concrete(Clock, FrozenClock, key="frozen")
    provider = registry.build_provider()

    assert isinstance(provider.resolve(Clock), SystemClock)
    assert isinstance(provider.resolve(Clock, key="frozen"), FrozenClock)
    assert provider.resolve_all(Clock, key="missing") == []


def test_instance_binding_returns_the_instance(registry: Registry) -> None:
    clock = FrozenClock()
    registry.add_instance(Clock, clock)

    assert registry.build_provider().resolve(Clock) is clock


def test_factory_receives_provider(registry: Registry) -> None:
    registry.add_instance(Settings, Settings(retries=9))
    registry.add_factory(Service, lambda provider: Service(SystemClock(), provider.resolve(Settings)))

    assert registry.build_provider().resolve(Service).settings.retries == 9


def test_transient_values_are_rebuilt(registry: Registry) -> None:
    registry.add_concrete(Clock, SystemClock)
    provider = registry.build_provider()

    assert provider.resolve(Clock) is not provider.resolve(Clock)


def test_singleton_values_are_shared_with_scopes(registry: Registry) -> None:
    registry.add_concrete(Clock, SystemClock, lifetime=Lifetime.SINGLETON)
    provider = registry.build_provider()
    root_value = provider.resolve(Clock)

    with provider.enter_scope() as scope:
        assert scope.resolve(Clock) is root_value


def test_scoped_values_are_shared_within_one_scope_only(registry: Registry) -> None:
    registry.add_concrete(Clock, SystemClock, lifetime=Lifetime.SCOPED)
    provider = registry.build_provider()

    with provider.enter_scope() as first_scope:
        first = first_scope.resolve(Clock)
        assert first_scope.resolve(Clock) is first
    with provider.enter_scope() as second_scope:
        assert second_scope.resolve(Clock) is not first


def test_singleton_depending_on_scoped_binding_is_rejected_inside_scope(
    registry: Registry,
) -> None:
    registry.add_concrete(Clock, SystemClock, lifetime=Lifetime.SCOPED)
    registry.add_concrete(Settings, Settings)
    registry.add_concrete(Service, Service, lifetime=Lifetime.SINGLETON)
    provider = registry.build_provider()

    with provider.enter_scope() as scope:
        assert isinstance(scope.resolve(Clock), SystemClock)
        with pytest.raises(ProxyWireScopeMismatchError, match="enter_scope"):
            scope.resolve(Service)


def test_singleton_built_in_scope_is_shared_across_scopes(registry: Registry) -> None:
    registry.add_concrete(Clock, SystemClock, lifetime=Lifetime.SINGLETON)
    registry.add_factory(
        Service,
        lambda provider: Service(provider.resolve(Clock), Settings()),
        lifetime=Lifetime.SINGLETON,
    )
    provider = registry.build_provider()

    with provider.enter_scope() as first_scope:
        service = first_scope.resolve(Service)
    with provider.enter_scope() as second_scope:
        assert second_scope.resolve(Service) is service
        assert second_scope.resolve(Clock) is service.clock


def test_scoped_binding_from_root_provider_is_rejected(registry: Registry) -> None:
    registry.add_concrete(Clock, SystemClock, lifetime=Lifetime.SCOPED)

    with pytest.raises(ProxyWireScopeMismatchError, match="enter_scope"):
        registry.build_provider().resolve(Clock)


def test_provider_snapshot_ignores_later_registrations(registry: Registry) -> None:
    provider = registry.build_provider()
    registry.add_concrete(Clock, SystemClock)

    assert not provider.is_registered(Clock)
    assert registry.build_provider().is_registered(Clock)


def test_close_drops_cached_singletons() -> None:
    binding = Binding(provides=Clock, lifetime=Lifetime.SINGLETON, concrete_type=SystemClock)
    with Provider([binding]) as provider:
        first = provider.resolve(Clock)
        provider.close()
        assert provider.resolve(Clock) is not first


def test_instantiate_uses_provided_values_and_defaults(registry: Registry) -> None:
    registry.add_concrete(Clock, SystemClock)
    provider = registry.build_provider()
    clock = FrozenClock()

    settings = provider.instantiate(Settings)
    service = provider.instantiate(Service, clock=clock, settings=settings)

    assert settings.retries == 3
    assert service.clock is clock


def test_instantiate_passes_positional_only_parameters(registry: Registry) -> None:
    registry.add_concrete(Clock, FrozenClock)

    service = registry.build_provider().instantiate(PositionalService)

    assert isinstance(service.clock, FrozenClock)
    assert service.retries == 5


def test_instantiate_closed_generic_alias(registry: Registry) -> None:
    registry.add_concrete(Clock, SystemClock)

    box = registry.build_provider().instantiate(TimedBox[int])

    assert isinstance(box, TimedBox)
    assert isinstance(box.clock, SystemClock)


def test_instantiate_reports_missing_parameter(registry: Registry) -> None:
    provider = registry.build_provider()

    with pytest.raises(ProxyWireDependencyNotRegisteredError, match="parameter 'clock'") as exc_info:
        provider.instantiate(Service)

    assert isinstance(exc_info.value.__cause__, ProxyWireDependencyNotRegisteredError)
