"""Errors: what stops composition and what is reported at resolution time.

1. Two decorators targeting one capability in the same pass are ambiguous.
2. A decorator dependency that is not registered fails when resolving.
3. Scoped bindings must be resolved inside a scope.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from proxywire import (
    Lifetime,
    ProxyWireAmbiguousDecoratorError,
    ProxyWireDependencyNotRegisteredError,
    ProxyWireScopeMismatchError,
    Registry,
)


class Mailer(ABC):
    @abstractmethod
    def send(self, to: str) -> str: ...


class SmtpMailer(Mailer):
    def send(self, to: str) -> str:
        return f"smtp:{to}"


class RetryingMailer(Mailer):
    def __init__(self, inner: Mailer) -> None:
        self.inner = inner

    def send(self, to: str) -> str:
        return self.inner.send(to)


class Metrics:
    pass


class MeteredMailer(Mailer):
    def __init__(self, inner: Mailer, metrics: Metrics) -> None:
        self.inner = inner
        self.metrics = metrics

    def send(self, to: str) -> str:
        return self.inner.send(to)


def main() -> None:
    registry = Registry()
    registry.add_concrete(Mailer, SmtpMailer)

    try:
        registry.apply_decorators(RetryingMailer, MeteredMailer)
    except ProxyWireAmbiguousDecoratorError as error:
        print(f"ambiguous={type(error).__name__}")  # => ambiguous=ProxyWireAmbiguousDecoratorError
        print(f"candidates={len(error.candidates)}")  # => candidates=2

    registry.apply_decorators(MeteredMailer)
    provider = registry.build_provider()
    try:
        provider.resolve(Mailer)
    except ProxyWireDependencyNotRegisteredError as error:
        print(f"missing={type(error).__name__}")  # => missing=ProxyWireDependencyNotRegisteredError

    scoped_registry = Registry(default_lifetime=Lifetime.SCOPED)
    scoped_registry.add_concrete(Mailer, SmtpMailer)
    scoped_provider = scoped_registry.build_provider()
    try:
        scoped_provider.resolve(Mailer)
    except ProxyWireScopeMismatchError as error:
        print(f"scope={type(error).__name__}")  # => scope=ProxyWireScopeMismatchError
    with scoped_provider.enter_scope() as scope:
        print(f"scoped_send={scope.resolve(Mailer).send('ops')}")  # => scoped_send=smtp:ops


if __name__ == "__main__":
    main()
