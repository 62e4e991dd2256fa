"""Ordered, uniquely-keyed, indexed collection of Records."""

from __future__ import annotations

import functools
import inspect
from collections.abc import Mapping
from typing import Any, Callable, ClassVar, Iterable

from .conf import DEFAULT_INDEXES
from .events import CollectionEvent, Events
from .index_table import IndexTable
from .log import store_log
from .options import ADD_OPTIONS, SetOptions
from .record import Record
from .sequence_ops import SequenceOps

Comparator = str | Callable[..., Any] | None

_UNSET = object()


def _is_cmp_function(fn: Callable[..., Any]) -> bool:
    """True for ``fn(a, b)`` comparators, False for ``fn(record)`` key functions."""
    try:
        params = inspect.signature(fn).parameters.values()
    except (TypeError, ValueError):
        return False
    positional = [
        p for p in params
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD) and p.default is p.empty
    ]
    return len(positional) >= 2


def _matcher(attrs: dict[str, Any]) -> Callable[[Record], bool]:
    def matches(record: Record) -> bool:
        return all(record.get(key) == value for key, value in attrs.items())

    return matches


class Collection(SequenceOps, Events):
    """An ordered set of records with lookup indexes and optional sort order.

    Configure by subclassing (class attributes) or per instance through the
    constructor keywords:

    * ``model``: Record subclass used to build records from raw attrs.
    * ``comparator``: field name, ``fn(record)`` key or ``fn(a, b)`` cmp.
      When set, the collection keeps itself sorted.
    * ``indexes``: field names to index. Defaults to the model's identity
      field. ``get`` without an index name looks up that field.

    Events (see ``CollectionEvent``): ``sort`` with ``(collection, options)``,
    ``remove`` with ``(record, collection, {"index": prior_index})`` and
    ``reset`` with ``(collection, options)``.
    """

    model: ClassVar[type[Record]] = Record
    comparator: ClassVar[Comparator] = None
    indexes: ClassVar[list[str]] = list(DEFAULT_INDEXES)

    def __init__(
        self,
        models: Any = None,
        *,
        model: type[Record] | None = None,
        comparator: Any = _UNSET,
        indexes: Iterable[str] | None = None,
    ):
        if model is not None:
            self.model = model
        if comparator is not _UNSET:
            self.comparator = comparator
        if indexes is not None:
            self.indexes = list(indexes)

        if not (isinstance(self.model, type) and issubclass(self.model, Record)):
            raise TypeError(f"model must be a Record subclass, got {self.model!r}")
        if self.comparator is not None and not (
            isinstance(self.comparator, str) or callable(self.comparator)
        ):
            raise TypeError(
                f"comparator must be a field name or a callable, got {type(self.comparator).__name__}"
            )
        if indexes is None and type(self).indexes is Collection.indexes:
            self.indexes = [self.model.id_attribute]

        self.id_attribute = self.model.id_attribute
        self._generate_id = getattr(self.model, "generate_id", None)
        self._index_table = IndexTable(self.indexes, self.id_attribute)
        self._models: list[Record] = []
        self._reset()
        if models:
            self.reset(models, silent=True)

    # -- Reconcile --

    def set(self, models: Any = None, **options: Any) -> Any:
        """Reconcile the collection against ``models``.

        Matched inputs are merged into their existing records, unmatched ones
        are built and added, and records absent from ``models`` are removed,
        each step subject to the ``add`` / ``merge`` / ``remove`` flags (see
        ``SetOptions``). Returns the resolved record for a single input, or
        the resolved batch in input order.
        """
        opts = SetOptions(**options)
        if opts.parse:
            models = self.parse(models, opts)
        singular = not isinstance(models, (list, tuple))
        if singular:
            models = [models] if models else []
        else:
            models = list(models)

        at = opts.at
        sortable = self.comparator is not None and at is None and opts.sort
        sort_attr = self.comparator if isinstance(self.comparator, str) else None
        to_add: list[Record] = []
        to_remove: list[Record] = []
        retained: set[int] = set()
        seen: set[Any] = set()
        # An explicit order is only needed when the batch replaces the whole
        # sequence and nothing re-sorts it afterwards.
        order: list[Record] | None = [] if not sortable and opts.add and opts.remove else None
        resort = False

        for i, raw in enumerate(models):
            attrs = raw or {}
            model: Record | None = None
            if self._is_model(attrs):
                key = model = attrs
            else:
                key = self._input_id(attrs)

            existing = self.get(key)
            if existing is not None:
                if opts.remove:
                    retained.add(id(existing))
                if opts.merge:
                    if isinstance(attrs, Record):
                        attrs = attrs.to_dict()
                    if opts.parse:
                        attrs = existing.parse(attrs, opts)
                    existing.set(attrs)
                    self._index_table.reindex(existing)
                    if sortable and not resort and existing.has_changed(sort_attr):
                        resort = True
                models[i] = existing
            elif opts.add:
                model = models[i] = self._prepare_model(attrs)
                if model is None:
                    continue
                to_add.append(model)
                self._add_reference(model)

            resolved = existing if existing is not None else model
            if resolved is None:
                continue
            uid = resolved.uid
            if order is not None and (uid is None or uid not in seen):
                order.append(resolved)
            if uid is not None:
                seen.add(uid)

        if opts.remove:
            to_remove = [record for record in self._models if id(record) not in retained]
            if to_remove:
                self.remove(to_remove, silent=opts.silent)

        if to_add or order:
            if sortable:
                resort = True
            if at is not None:
                self._models[at:at] = to_add
            elif order is not None:
                self._models[:] = order
            else:
                self._models.extend(to_add)

        if resort:
            self.sort(silent=True)

        if not opts.silent and (resort or order):
            self.trigger(CollectionEvent.SORT, self, opts)

        if to_add or to_remove or resort:
            store_log(
                f"{type(self).__name__}.set: {len(to_add)} added, "
                f"{len(to_remove)} removed, resorted={resort}, size={len(self._models)}"
            )

        if singular:
            return models[0] if models else None
        return models

    def add(self, models: Any = None, **options: Any) -> Any:
        """Insert new records; inputs matching an existing record are left alone."""
        options.update(ADD_OPTIONS)
        return self.set(models, **options)

    def remove(self, models: Any, *, silent: bool = False) -> Any:
        """Evict records by key, record or key-bearing mapping.

        Inputs that resolve to nothing are skipped; their slot in the result
        is ``None``.
        """
        singular = not isinstance(models, (list, tuple))
        models = [models] if singular else list(models)
        for i, item in enumerate(models):
            record = item if self.includes(item) else self.get(item)
            models[i] = record
            if record is None:
                continue
            self._index_table.de_index(record)
            index = self.index_of(record)
            if index < 0:
                continue
            del self._models[index]
            if not silent:
                self.trigger(CollectionEvent.REMOVE, record, self, {"index": index})
            self._remove_reference(record)
        return models[0] if singular else models

    def reset(self, models: Any = None, *, silent: bool = False) -> Any:
        """Replace every record with ``models`` without per-record events."""
        for record in self._models:
            self._remove_reference(record)
        self._reset()
        added = self.add(models, silent=True)
        store_log(f"{type(self).__name__}.reset: size={len(self._models)}")
        if not silent:
            self.trigger(CollectionEvent.RESET, self, SetOptions(silent=silent))
        return added

    def parse(self, models: Any, options: SetOptions) -> Any:
        """Transform a raw batch before it is reconciled. Identity by default."""
        return models

    # -- Ordering --

    def sort(self, *, silent: bool = False) -> Collection:
        """Re-order records by the comparator."""
        if self.comparator is None:
            raise ValueError("Cannot sort a collection without a comparator")
        self._models.sort(key=self._sort_key())
        if not silent:
            self.trigger(CollectionEvent.SORT, self, SetOptions())
        return self

    def _sort_key(self) -> Callable[[Record], Any]:
        comparator = self.comparator
        if _is_cmp_function(comparator):
            return functools.cmp_to_key(comparator)
        if isinstance(comparator, str):
            key = lambda record: record.get(comparator)
        else:
            key = comparator

        def missing_last(record: Record) -> tuple[bool, Any]:
            value = key(record)
            return value is None, value

        return missing_last

    # -- Lookup --

    def get(self, query: Any, index_name: str | None = None) -> Record | None:
        """Find a record by key (or by a record / mapping carrying the key)."""
        return self._index_table.lookup(query, index_name)

    def at(self, position: int) -> Record | None:
        """Record at ``position``; None when out of range."""
        if 0 <= position < len(self._models):
            return self._models[position]
        return None

    def pluck(self, name: str) -> list[Any]:
        return [record.get(name) for record in self._models]

    def where(self, **attrs: Any) -> list[Record]:
        """Records whose fields equal every value in ``attrs``."""
        return self.filter(_matcher(attrs))

    def find_where(self, **attrs: Any) -> Record | None:
        return self.find(_matcher(attrs))

    @property
    def models(self) -> list[Record]:
        return list(self._models)

    @property
    def length(self) -> int:
        return len(self._models)

    def __len__(self) -> int:
        return len(self._models)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(size={len(self._models)}, indexes={list(self.indexes)})"

    def to_json(self) -> list[dict[str, Any]]:
        return [record.to_dict() for record in self._models]

    # -- Internals --

    def _reset(self) -> None:
        self._models = []
        self._index_table.reset()

    def _is_model(self, value: Any) -> bool:
        return isinstance(value, self.model)

    def _input_id(self, attrs: Any) -> Any:
        if self._generate_id is not None:
            return self._generate_id(attrs)
        if isinstance(attrs, Mapping):
            return attrs.get(self.id_attribute)
        return getattr(attrs, self.id_attribute, None)

    def _prepare_model(self, attrs: Any) -> Record | None:
        if self._is_model(attrs):
            return attrs
        return self.model.create(attrs, collection=self)

    def _add_reference(self, record: Record) -> None:
        self._index_table.index_record(record)

    def _remove_reference(self, record: Record) -> None:
        if record.collection is self:
            record._collection = None
