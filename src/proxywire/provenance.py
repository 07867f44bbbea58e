from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any

from proxywire.bindings import Binding


@dataclass(frozen=True, slots=True)
class WrapRecord:
    """Link a decorated binding back to the binding it replaced."""

    result: Binding
    """The binding produced by decoration, now present in the registry."""

    original: Binding
    """The binding that was replaced. It may itself be a previous ``result``."""

    decorator_type: Any
    """The (closed) decorator class used for this layer."""


class ProvenanceTable:
    """Track which decorators were applied along each binding's wrap chain.

    One table belongs to one composition session, normally the ``Registry``
    that owns it, so decorations of unrelated registries never interact.
    Bindings are tracked by identity.
    """

    def __init__(self) -> None:
        self._records: dict[Binding, WrapRecord] = {}

    def record(self, record: WrapRecord) -> None:
        self._records[record.result] = record

    def extend(self, records: Iterable[WrapRecord]) -> None:
        for record in records:
            self.record(record)

    def get(self, binding: Binding) -> WrapRecord | None:
        return self._records.get(binding)

    def chain(self, binding: Binding) -> list[WrapRecord]:
        """Return the wrap records behind ``binding``, outermost layer first."""
        records: list[WrapRecord] = []
        record = self._records.get(binding)
        while record is not None:
            records.append(record)
            record = self._records.get(record.original)
        return records

    def already_wrapped(self, binding: Binding, decorator_type: Any) -> bool:
        """Return whether ``decorator_type`` already wraps ``binding`` at any depth."""
        return any(record.decorator_type == decorator_type for record in self.chain(binding))

    def clear(self) -> None:
        self._records.clear()

    def __contains__(self, binding: object) -> bool:
        return binding in self._records

    def __iter__(self) -> Iterator[WrapRecord]:
        return iter(self._records.values())

    def __len__(self) -> int:
        return len(self._records)
