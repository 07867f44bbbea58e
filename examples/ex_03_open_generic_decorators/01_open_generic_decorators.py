"""Open generic decorators: one decorator class for every closed capability.

This example shows how an open decorator (``CachedRepository[T]``) is closed
over each bound capability (``Repository[User]``, ``Repository[Invoice]``) and
how a TypeVar bound keeps a decorator away from capabilities it cannot serve.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, TypeVar

from proxywire import Registry

T = TypeVar("T")


@dataclass(frozen=True)
class User:
    name: str


@dataclass(frozen=True)
class Invoice:
    total: int


class Auditable:
    pass


@dataclass(frozen=True)
class Payment(Auditable):
    amount: int


A = TypeVar("A", bound=Auditable)


class Repository(ABC, Generic[T]):
    @abstractmethod
    def get(self, identifier: int) -> T: ...


class UserRepository(Repository[User]):
    def get(self, identifier: int) -> User:
        return User(name=f"user-{identifier}")


class InvoiceRepository(Repository[Invoice]):
    def get(self, identifier: int) -> Invoice:
        return Invoice(total=identifier * 100)


class PaymentRepository(Repository[Payment]):
    def get(self, identifier: int) -> Payment:
        return Payment(amount=identifier)


class CachedRepository(Repository[T]):
    def __init__(self, inner: Repository[T]) -> None:
        self.inner = inner
        self.cache: dict[int, T] = {}

    def get(self, identifier: int) -> T:
        if identifier not in self.cache:
            self.cache[identifier] = self.inner.get(identifier)
        return self.cache[identifier]


class AuditedRepository(Repository[A]):
    def __init__(self, inner: Repository[A]) -> None:
        self.inner = inner

    def get(self, identifier: int) -> A:
        return self.inner.get(identifier)


def main() -> None:
    registry = Registry()
    registry.scan_and_bind(Repository, UserRepository, InvoiceRepository, PaymentRepository)

    cached_records = registry.apply_decorators(CachedRepository)
    print(f"cached_records={len(cached_records)}")  # => cached_records=3
    print(
        f"first_decorator={cached_records[0].decorator_type == CachedRepository[User]}",
    )  # => first_decorator=True

    audited_records = registry.apply_decorators(AuditedRepository)
    print(f"audited_records={len(audited_records)}")  # => audited_records=1

    provider = registry.build_provider()
    users = provider.resolve(Repository[User])
    print(f"users_layer={type(users).__name__}")  # => users_layer=CachedRepository
    print(f"users_base={type(users.inner).__name__}")  # => users_base=UserRepository
    print(f"user={users.get(1).name}")  # => user=user-1

    payments = provider.resolve(Repository[Payment])
    print(f"payments_layer={type(payments).__name__}")  # => payments_layer=AuditedRepository
    print(f"payments_inner={type(payments.inner).__name__}")  # => payments_inner=CachedRepository


if __name__ == "__main__":
    main()
