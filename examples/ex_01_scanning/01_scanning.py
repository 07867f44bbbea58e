"""Scanning: bind every implementation of a capability in one call.

This example shows ``Registry.scan_and_bind(...)``:

1. Scan an open generic capability and get one binding per closed declaration.
2. Use ``@keyed`` to bind an implementation under a key.
3. Scan a whole module for a protocol capability.
"""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from typing import Generic, Protocol, TypeVar

from proxywire import Registry, keyed

T = TypeVar("T")


class Repository(ABC, Generic[T]):
    @abstractmethod
    def load(self, identifier: int) -> T: ...


class IntRepository(Repository[int]):
    def load(self, identifier: int) -> int:
        return identifier * 10


@keyed("archive")
class ArchivedTextRepository(Repository[str]):
    def load(self, identifier: int) -> str:
        return f"archived-{identifier}"


class DraftRepository(Repository[T]):
    def load(self, identifier: int) -> T:
        raise NotImplementedError


class Clock(Protocol):
    def now(self) -> str: ...


class UtcClock(Clock):
    def now(self) -> str:
        return "2024-01-01T00:00:00Z"


def main() -> None:
    registry = Registry()

    bindings = registry.scan_and_bind(
        Repository,
        IntRepository,
        ArchivedTextRepository,
        DraftRepository,
    )
    print(f"repository_bindings={len(bindings)}")  # => repository_bindings=2

    clock_bindings = registry.scan_and_bind(Clock, sys.modules[__name__])
    print(f"clock_bindings={len(clock_bindings)}")  # => clock_bindings=1

    provider = registry.build_provider()
    int_repository = provider.resolve(Repository[int])
    print(f"int_repository={type(int_repository).__name__}")  # => int_repository=IntRepository
    print(f"int_value={int_repository.load(4)}")  # => int_value=40

    archived = provider.resolve(Repository[str], key="archive")
    print(f"archived_value={archived.load(7)}")  # => archived_value=archived-7
    print(
        f"unkeyed_text_registered={provider.is_registered(Repository[str])}",
    )  # => unkeyed_text_registered=False
    print(f"clock={provider.resolve(Clock).now()}")  # => clock=2024-01-01T00:00:00Z


if __name__ == "__main__":
    main()
