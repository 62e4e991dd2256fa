"""Secondary key -> record indexes for a Collection."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from .conf import DEFAULT_ID_ATTRIBUTE, DEFAULT_INDEXES
from .log import store_log


def is_blank(value: Any) -> bool:
    """None, empty strings and empty containers never act as keys."""
    if value is None:
        return True
    if isinstance(value, (str, bytes, Mapping, list, tuple, set, frozenset)):
        return len(value) == 0
    return False


def resolve_field(record: Any, name: str) -> Any:
    """Resolve ``name`` on ``record``: attribute first, then ``record.get(name)``."""
    value = getattr(record, name, None)
    if not is_blank(value):
        return value
    getter = getattr(record, "get", None)
    if callable(getter):
        return getter(name)
    return value


def _safe_get(index: dict[Any, Any], key: Any) -> Any:
    try:
        return index.get(key)
    except TypeError:
        # unhashable key (records, dicts) can't be stored, so it can't match
        return None


class IndexTable:
    """One ``value -> record`` mapping per declared index name.

    Entries are added and dropped one record at a time as records enter and
    leave the owning collection.
    """

    def __init__(
        self,
        names: Iterable[str] = DEFAULT_INDEXES,
        id_attribute: str = DEFAULT_ID_ATTRIBUTE,
    ):
        self._names = tuple(names)
        self.id_attribute = id_attribute
        self.default_index = id_attribute if id_attribute in self._names else (
            self._names[0] if self._names else id_attribute
        )
        self._indexes: dict[str, dict[Any, Any]] = {}
        self.reset()

    @property
    def names(self) -> tuple[str, ...]:
        return self._names

    def reset(self) -> None:
        """Drop every entry, keeping one empty mapping per declared name."""
        self._indexes = {name: {} for name in self._names}

    def lookup(self, query: Any, index_name: str | None = None) -> Any:
        """Find the record stored under ``query``.

        ``query`` may be a raw key, or a record / mapping carrying one in its
        identity field. Blank queries and unknown index names match nothing.
        """
        if is_blank(query):
            return None
        index = self._indexes.get(index_name or self.default_index)
        if index is None:
            return None
        found = _safe_get(index, query)
        if found is not None:
            return found
        if isinstance(query, Mapping):
            key = query.get(self.id_attribute)
        else:
            key = resolve_field(query, self.id_attribute)
        if is_blank(key):
            return None
        return _safe_get(index, key)

    def index_record(self, record: Any) -> None:
        """Store ``record`` under every declared index it has a value for."""
        for name, index in self._indexes.items():
            value = resolve_field(record, name)
            if is_blank(value):
                continue
            try:
                index[value] = record
            except TypeError:
                store_log(f"index {name!r}: unhashable value {type(value).__name__} skipped")

    def de_index(self, record: Any) -> None:
        """Drop the entries keyed by ``record``'s current values.

        The entry is removed even if it points at a different record.
        """
        for name, index in self._indexes.items():
            value = resolve_field(record, name)
            if is_blank(value):
                continue
            try:
                index.pop(value, None)
            except TypeError:
                continue

    def reindex(self, record: Any) -> bool:
        """Move ``record`` to its new keys after a merge changed indexed fields.

        Relies on the record's ``has_changed`` / ``previous`` bookkeeping.
        Only entries still pointing at ``record`` are dropped. Returns whether
        anything moved.
        """
        moved = False
        for name, index in self._indexes.items():
            if not record.has_changed(name):
                continue
            old = record.previous(name)
            try:
                if not is_blank(old) and index.get(old) is record:
                    del index[old]
            except TypeError:
                pass
            value = resolve_field(record, name)
            if not is_blank(value):
                try:
                    index[value] = record
                except TypeError:
                    store_log(f"index {name!r}: unhashable value {type(value).__name__} skipped")
            moved = True
        return moved

    def keys(self, index_name: str | None = None) -> list[Any]:
        return list(self._indexes.get(index_name or self.default_index, {}))

    def __contains__(self, key: Any) -> bool:
        return self.lookup(key) is not None

    def __len__(self) -> int:
        return len(self._indexes.get(self.default_index, {}))
