"""Filters and keys: choose which bindings a decorator wraps.

This example shows:

1. ``filter=`` receiving the capability and the closed decorator type.
2. Keyed and unkeyed bindings of one capability decorated independently.
3. Pre-built instances wrapped into singleton bindings.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar, get_args

from proxywire import Registry, keyed

T = TypeVar("T")


class Queue(ABC, Generic[T]):
    @abstractmethod
    def push(self, item: T) -> str: ...


class IntQueue(Queue[int]):
    def push(self, item: int) -> str:
        return f"int:{item}"


class TextQueue(Queue[str]):
    def push(self, item: str) -> str:
        return f"text:{item}"


@keyed("priority")
class PriorityTextQueue(Queue[str]):
    def push(self, item: str) -> str:
        return f"priority:{item}"


class LoggingQueue(Queue[T]):
    def __init__(self, inner: Queue[T]) -> None:
        self.inner = inner

    def push(self, item: T) -> str:
        return f"logged({self.inner.push(item)})"


def only_text(capability: Any, decorator_type: Any) -> bool:
    return get_args(decorator_type)[0] is str


def main() -> None:
    registry = Registry()
    registry.scan_and_bind(Queue, IntQueue, TextQueue, PriorityTextQueue)

    records = registry.apply_decorators(LoggingQueue, filter=only_text)
    print(f"records={len(records)}")  # => records=2
    print(
        f"record_keys={[record.result.key for record in records]}",
    )  # => record_keys=[None, 'priority']

    provider = registry.build_provider()
    print(f"int_queue={provider.resolve(Queue[int]).push(1)}")  # => int_queue=int:1
    print(f"text_queue={provider.resolve(Queue[str]).push('a')}")  # => text_queue=logged(text:a)
    print(
        f"priority_queue={provider.resolve(Queue[str], key='priority').push('b')}",
    )  # => priority_queue=logged(priority:b)

    instance_registry = Registry()
    instance_registry.add_instance(Queue[int], IntQueue())
    [record] = instance_registry.apply_decorators(LoggingQueue)
    print(f"instance_lifetime={record.result.lifetime.name}")  # => instance_lifetime=SINGLETON
    instance_provider = instance_registry.build_provider()
    same = instance_provider.resolve(Queue[int]) is instance_provider.resolve(Queue[int])
    print(f"same_wrapper={same}")  # => same_wrapper=True
    print(f"original_strategy={record.original.strategy}")  # => original_strategy=instance


if __name__ == "__main__":
    main()
