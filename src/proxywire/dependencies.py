from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from inspect import Parameter
from typing import Any, get_origin, get_type_hints

from proxywire.exceptions import ProxyWireDependencyInferenceError
from proxywire.typevars import substitute_typevars, typevar_map

_MISSING_ANNOTATION: Any = object()
_IMPLICIT_FIRST_PARAMETER_NAMES = {"self", "cls"}


@dataclass(slots=True)
class ConstructorDependency:
    """Represents one constructor parameter to be injected."""

    provides: Any
    parameter: Parameter

    @property
    def has_default(self) -> bool:
        return self.parameter.default is not Parameter.empty


@dataclass(slots=True)
class DependenciesExtractor:
    """Extracts constructor dependencies from concrete types.

    Closed generic aliases are supported: ``TimedRepo[int]`` reports an
    ``inner: Repo[T]`` parameter as ``Repo[int]``.
    """

    def extract_from_concrete_type(self, concrete_type: Any) -> list[ConstructorDependency]:
        origin = get_origin(concrete_type) or concrete_type
        mapping = typevar_map(concrete_type)
        dependencies = self._extract_dependencies(
            constructor=origin.__init__,
            owner_name=origin.__qualname__,
        )
        if mapping:
            for dependency in dependencies:
                dependency.provides = substitute_typevars(dependency.provides, mapping=mapping)
        return dependencies

    def _extract_dependencies(
        self,
        *,
        constructor: Callable[..., Any],
        owner_name: str,
    ) -> list[ConstructorDependency]:
        parameters = self._constructor_parameters(constructor)
        annotations, annotation_error = self._resolved_type_hints(constructor)
        dependencies: list[ConstructorDependency] = []

        for parameter in parameters:
            provides = self._resolve_parameter_annotation(
                parameter=parameter,
                annotations=annotations,
                annotation_error=annotation_error,
                owner_name=owner_name,
            )
            if provides is _MISSING_ANNOTATION:
                continue

            dependencies.append(
                ConstructorDependency(
                    provides=provides,
                    parameter=parameter,
                ),
            )

        return dependencies

    def _resolve_parameter_annotation(
        self,
        *,
        parameter: Parameter,
        annotations: dict[str, Any],
        annotation_error: Exception | None,
        owner_name: str,
    ) -> Any:
        if parameter.kind in {Parameter.VAR_POSITIONAL, Parameter.VAR_KEYWORD}:
            return _MISSING_ANNOTATION

        annotation = annotations.get(parameter.name, _MISSING_ANNOTATION)
        if annotation is not _MISSING_ANNOTATION:
            return annotation

        raw_annotation = parameter.annotation
        if raw_annotation is not Parameter.empty and not isinstance(raw_annotation, str):
            return raw_annotation

        if not self._is_required_parameter(parameter):
            return _MISSING_ANNOTATION

        error_message = (
            f"Unable to infer dependency for required parameter '{parameter.name}' "
            f"in '{owner_name}'. Add a type annotation."
        )
        if annotation_error is None:
            raise ProxyWireDependencyInferenceError(error_message)
        msg = f"{error_message} Original annotation error: {annotation_error}"
        raise ProxyWireDependencyInferenceError(msg) from annotation_error

    def _constructor_parameters(self, constructor: Callable[..., Any]) -> tuple[Parameter, ...]:
        try:
            parameters = tuple(inspect.signature(constructor).parameters.values())
        except (TypeError, ValueError):
            return ()
        if parameters and parameters[0].name in _IMPLICIT_FIRST_PARAMETER_NAMES:
            return parameters[1:]
        return parameters

    def _resolved_type_hints(
        self,
        constructor: Callable[..., Any],
    ) -> tuple[dict[str, Any], Exception | None]:
        try:
            return get_type_hints(constructor), None
        except (AttributeError, NameError, TypeError) as error:
            return {}, error

    def _is_required_parameter(self, parameter: Parameter) -> bool:
        return (
            parameter.default is Parameter.empty
            and parameter.kind is not Parameter.VAR_POSITIONAL
            and parameter.kind is not Parameter.VAR_KEYWORD
        )
