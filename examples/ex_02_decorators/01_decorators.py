"""Decorators: wrap existing bindings, stack layers, re-apply safely.

This example shows ``Registry.apply_decorators(...)``:

1. Wrap an existing binding (``TracedHttpClient``); consumers still resolve ``HttpClient``.
2. Stack another decorator (the latest pass is outermost).
3. Re-apply a decorator already in the chain: nothing changes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from proxywire import Registry


class HttpClient(Protocol):
    def get(self, path: str) -> str: ...


class RequestsHttpClient(HttpClient):
    def get(self, path: str) -> str:
        return f"requests:{path}"


@dataclass
class Tracer:
    spans: list[str] = field(default_factory=list)


class TracedHttpClient(HttpClient):
    def __init__(self, inner: HttpClient, tracer: Tracer) -> None:
        self.inner = inner
        self.tracer = tracer

    def get(self, path: str) -> str:
        self.tracer.spans.append(f"GET {path}")
        return self.inner.get(path)


class MetricsHttpClient(HttpClient):
    def __init__(self, inner: HttpClient) -> None:
        self.inner = inner
        self.calls = 0

    def get(self, path: str) -> str:
        self.calls += 1
        return self.inner.get(path)


def main() -> None:
    registry = Registry()
    tracer = Tracer()
    registry.add_instance(Tracer, tracer)
    registry.add_concrete(HttpClient, RequestsHttpClient)

    traced_records = registry.apply_decorators(TracedHttpClient)
    print(f"traced_records={len(traced_records)}")  # => traced_records=1

    traced_client = registry.build_provider().resolve(HttpClient)
    print(f"traced_layer={type(traced_client).__name__}")  # => traced_layer=TracedHttpClient
    print(f"traced_result={traced_client.get('/health')}")  # => traced_result=requests:/health
    print(f"spans={tracer.spans}")  # => spans=['GET /health']

    registry.apply_decorators(MetricsHttpClient)
    stacked_client = registry.build_provider().resolve(HttpClient)
    print(f"stack_outer={type(stacked_client).__name__}")  # => stack_outer=MetricsHttpClient
    print(f"stack_inner={type(stacked_client.inner).__name__}")  # => stack_inner=TracedHttpClient
    print(
        f"stack_base={type(stacked_client.inner.inner).__name__}",
    )  # => stack_base=RequestsHttpClient

    reapplied_records = registry.apply_decorators(TracedHttpClient)
    print(f"reapplied_records={len(reapplied_records)}")  # => reapplied_records=0

    binding = registry.find(HttpClient)
    assert binding is not None
    chain = [record.decorator_type.__name__ for record in registry.provenance.chain(binding)]
    print(f"chain={chain}")  # => chain=['MetricsHttpClient', 'TracedHttpClient']


if __name__ == "__main__":
    main()
