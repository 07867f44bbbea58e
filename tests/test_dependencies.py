import inspect
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, TypeVar

import pytest

from proxywire.dependencies import DependenciesExtractor
from proxywire.exceptions import ProxyWireDependencyInferenceError

T = TypeVar("T")


class Repo(ABC, Generic[T]):
    @abstractmethod
    def get(self) -> T: ...


class CachedRepo(Repo[T]):
    def __init__(self, inner: Repo[T], size: int = 10) -> None:
        self.inner = inner
        self.size = size

    def get(self) -> T:
        return self.inner.get()


@pytest.fixture(scope="module")
def dependencies_extractor() -> DependenciesExtractor:
    return DependenciesExtractor()


def test_extract_from_regular_class(dependencies_extractor: DependenciesExtractor) -> None:
    class ServiceA:
        pass

    class ServiceB:
        def __init__(self, service_a: ServiceA) -> None:
            self.service_a = service_a

    [dependency] = dependencies_extractor.extract_from_concrete_type(ServiceB)

    assert dependency.provides is ServiceA
    assert dependency.parameter.name == "service_a"
    assert not dependency.has_default


def test_extract_from_dataclass(dependencies_extractor: DependenciesExtractor) -> None:
    class ServiceA:
        pass

    @dataclass
    class ServiceB:
        service_a: ServiceA

    dependencies = dependencies_extractor.extract_from_concrete_type(ServiceB)

    assert [dependency.provides for dependency in dependencies] == [ServiceA]


def test_extract_substitutes_type_arguments_of_closed_alias(
    dependencies_extractor: DependenciesExtractor,
) -> None:
    dependencies = dependencies_extractor.extract_from_concrete_type(CachedRepo[int])

    assert [dependency.provides for dependency in dependencies] == [Repo[int], int]
    assert dependencies[1].has_default


def test_extract_keeps_typevars_for_open_class(
    dependencies_extractor: DependenciesExtractor,
) -> None:
    dependencies = dependencies_extractor.extract_from_concrete_type(CachedRepo)

    assert dependencies[0].provides == Repo[T]


def test_extract_skips_variadic_parameters(dependencies_extractor: DependenciesExtractor) -> None:
    class ServiceA:
        pass

    class ServiceB:
        def __init__(self, service_a: ServiceA, *args: int, **kwargs: str) -> None:
            self.service_a = service_a

    dependencies = dependencies_extractor.extract_from_concrete_type(ServiceB)

    assert [dependency.parameter.name for dependency in dependencies] == ["service_a"]


def test_extract_keeps_positional_only_kind(dependencies_extractor: DependenciesExtractor) -> None:
    class ServiceA:
        pass

    class ServiceB:
        def __init__(self, service_a: ServiceA, /) -> None:
            self.service_a = service_a

    [dependency] = dependencies_extractor.extract_from_concrete_type(ServiceB)

    assert dependency.parameter.kind is inspect.Parameter.POSITIONAL_ONLY


def test_extract_ignores_untyped_optional_parameter(
    dependencies_extractor: DependenciesExtractor,
) -> None:
    class ServiceB:
        def __init__(self, raw_value=None) -> None:  # type: ignore[no-untyped-def]
            self.raw_value = raw_value

    assert dependencies_extractor.extract_from_concrete_type(ServiceB) == []


def test_extract_rejects_untyped_required_parameter(
    dependencies_extractor: DependenciesExtractor,
) -> None:
    class ServiceB:
        def __init__(self, raw_value) -> None:  # type: ignore[no-untyped-def]
            self.raw_value = raw_value

    with pytest.raises(ProxyWireDependencyInferenceError, match=r"'raw_value' in '.*ServiceB'"):
        dependencies_extractor.extract_from_concrete_type(ServiceB)


def test_extract_from_class_without_constructor(
    dependencies_extractor: DependenciesExtractor,
) -> None:
    class Plain:
        pass

    assert dependencies_extractor.extract_from_concrete_type(Plain) == []
