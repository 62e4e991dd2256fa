"""Read-only traversal and aggregation over a collection's ordered records."""

from __future__ import annotations

import random
from collections import Counter
from functools import reduce as _reduce
from typing import Any, Callable, Iterator

from .index_table import resolve_field

_NO_INITIAL = object()


def _field_getter(key: str | Callable[[Any], Any]) -> Callable[[Any], Any]:
    """Turn a field name into a getter going through the record's ``get``."""
    if callable(key):
        return key

    def getter(record: Any) -> Any:
        getter_method = getattr(record, "get", None)
        if callable(getter_method):
            return getter_method(key)
        return resolve_field(record, key)

    return getter


class SequenceOps:
    """Mixin of read-only list operations.

    The host class keeps its ordered records in ``self._models``. Every
    operation works on a snapshot, so callbacks may mutate the collection
    without disturbing the traversal.
    """

    _models: list[Any]

    def _snapshot(self) -> list[Any]:
        return list(self._models)

    # -- Iteration --

    def __iter__(self) -> Iterator[Any]:
        return iter(self._snapshot())

    def for_each(self, fn: Callable[..., Any]) -> None:
        """Call ``fn(record, position)`` for every record."""
        for position, record in enumerate(self._snapshot()):
            fn(record, position)

    each = for_each

    def map(self, fn: Callable[[Any], Any]) -> list[Any]:
        return [fn(record) for record in self._snapshot()]

    def reduce(self, fn: Callable[[Any, Any], Any], initial: Any = _NO_INITIAL) -> Any:
        if initial is _NO_INITIAL:
            return _reduce(fn, self._snapshot())
        return _reduce(fn, self._snapshot(), initial)

    def reduce_right(self, fn: Callable[[Any, Any], Any], initial: Any = _NO_INITIAL) -> Any:
        records = self._snapshot()[::-1]
        if initial is _NO_INITIAL:
            return _reduce(fn, records)
        return _reduce(fn, records, initial)

    # -- Searching --

    def find(self, predicate: Callable[[Any], bool]) -> Any:
        for record in self._snapshot():
            if predicate(record):
                return record
        return None

    def filter(self, predicate: Callable[[Any], bool]) -> list[Any]:
        return [record for record in self._snapshot() if predicate(record)]

    def reject(self, predicate: Callable[[Any], bool]) -> list[Any]:
        return [record for record in self._snapshot() if not predicate(record)]

    def every(self, predicate: Callable[[Any], bool] = bool) -> bool:
        return all(predicate(record) for record in self._snapshot())

    def some(self, predicate: Callable[[Any], bool] = bool) -> bool:
        return any(predicate(record) for record in self._snapshot())

    def partition(self, predicate: Callable[[Any], bool]) -> tuple[list[Any], list[Any]]:
        matched: list[Any] = []
        rest: list[Any] = []
        for record in self._snapshot():
            (matched if predicate(record) else rest).append(record)
        return matched, rest

    # Membership is by reference, never by value.

    def includes(self, record: Any) -> bool:
        return any(item is record for item in self._models)

    def __contains__(self, record: Any) -> bool:
        return self.includes(record)

    def index_of(self, record: Any) -> int:
        for position, item in enumerate(self._models):
            if item is record:
                return position
        return -1

    def last_index_of(self, record: Any) -> int:
        for position in range(len(self._models) - 1, -1, -1):
            if self._models[position] is record:
                return position
        return -1

    def invoke(self, method: str, *args: Any, **kwargs: Any) -> list[Any]:
        """Call ``record.<method>(*args, **kwargs)`` on every record."""
        return [getattr(record, method)(*args, **kwargs) for record in self._snapshot()]

    def max(self, key: str | Callable[[Any], Any]) -> Any:
        records = self._snapshot()
        if not records:
            return None
        return max(records, key=_field_getter(key))

    def min(self, key: str | Callable[[Any], Any]) -> Any:
        records = self._snapshot()
        if not records:
            return None
        return min(records, key=_field_getter(key))

    # -- Slicing --

    def to_list(self) -> list[Any]:
        return self._snapshot()

    def size(self) -> int:
        return len(self._models)

    def is_empty(self) -> bool:
        return not self._models

    def first(self, n: int | None = None) -> Any:
        if n is None:
            return self._models[0] if self._models else None
        return self._snapshot()[:n]

    def initial(self, n: int = 1) -> list[Any]:
        """Everything but the last ``n`` records."""
        records = self._snapshot()
        return records[: max(len(records) - n, 0)]

    def rest(self, n: int = 1) -> list[Any]:
        """Everything but the first ``n`` records."""
        return self._snapshot()[n:]

    def last(self, n: int | None = None) -> Any:
        if n is None:
            return self._models[-1] if self._models else None
        if n <= 0:
            return []
        return self._snapshot()[-n:]

    def slice(self, start: int = 0, stop: int | None = None) -> list[Any]:
        return self._snapshot()[start:stop]

    def without(self, *records: Any) -> list[Any]:
        return [item for item in self._snapshot() if not any(item is r for r in records)]

    def difference(self, *others: Any) -> list[Any]:
        excluded = [record for other in others for record in other]
        return self.without(*excluded)

    def shuffle(self) -> list[Any]:
        records = self._snapshot()
        random.shuffle(records)
        return records

    def sample(self, n: int | None = None) -> Any:
        records = self._snapshot()
        if n is None:
            return random.choice(records) if records else None
        return random.sample(records, min(n, len(records)))

    # -- Field-keyed grouping --

    def group_by(self, key: str | Callable[[Any], Any]) -> dict[Any, list[Any]]:
        getter = _field_getter(key)
        groups: dict[Any, list[Any]] = {}
        for record in self._snapshot():
            groups.setdefault(getter(record), []).append(record)
        return groups

    def count_by(self, key: str | Callable[[Any], Any]) -> dict[Any, int]:
        getter = _field_getter(key)
        return dict(Counter(getter(record) for record in self._snapshot()))

    def sort_by(self, key: str | Callable[[Any], Any]) -> list[Any]:
        return sorted(self._snapshot(), key=_field_getter(key))

    def index_by(self, key: str | Callable[[Any], Any]) -> dict[Any, Any]:
        """Map each key to the last record carrying it."""
        getter = _field_getter(key)
        return {getter(record): record for record in self._snapshot()}
