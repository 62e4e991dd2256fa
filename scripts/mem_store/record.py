"""Base record held by a Collection.

Field storage, change tracking and construction live here; membership and
ordering belong to the collection.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError

from .conf import DEFAULT_ID_ATTRIBUTE
from .log import store_log

if TYPE_CHECKING:
    from .collection import Collection

T = TypeVar("T", bound="Record")

_MISSING = object()


class Record(BaseModel):
    """A keyed record with key-value access and last-change tracking.

    Undeclared attributes are kept as pydantic extras, so a plain
    ``Record(id=1, rank=3)`` works without a subclass.

    Subclasses may override ``id_attribute`` to key on another field, and may
    define a ``generate_id(attrs)`` classmethod to derive identity from raw
    attributes (the collection then uses it instead of reading
    ``attrs[id_attribute]``).
    """

    model_config = ConfigDict(
        extra="allow",
        arbitrary_types_allowed=True,
        from_attributes=True,
    )

    # Which field serves as the identity key.
    id_attribute: ClassVar[str] = DEFAULT_ID_ATTRIBUTE

    id: Any = Field(default=None)

    _collection: Any = PrivateAttr(default=None)
    _changed: dict[str, Any] = PrivateAttr(default_factory=dict)
    _previous: dict[str, Any] = PrivateAttr(default_factory=dict)

    # -- Construction --

    @classmethod
    def create(
        cls: type[T],
        attrs: Any,
        collection: Collection | None = None,
    ) -> T | None:
        """Build a record from raw attributes, or return None if they don't validate."""
        if not isinstance(attrs, (Mapping, BaseModel)):
            store_log(f"{cls.__name__}: cannot build record from {type(attrs).__name__}")
            return None
        try:
            record = cls.model_validate(dict(attrs))
        except ValidationError as e:
            store_log(f"{cls.__name__}: invalid attributes skipped ({e.error_count()} errors)")
            return None
        record._collection = collection
        return record

    @property
    def collection(self) -> Collection | None:
        """The collection that owns this record, if any."""
        return self._collection

    # -- Identity --

    @property
    def uid(self) -> Any:
        """Return the value of the field designated as the identity key."""
        return self.get(self.id_attribute)

    def is_new(self) -> bool:
        """True until the record has an identity value."""
        return self.uid is None

    # -- Key-value access --

    def get(self, name: str, default: Any = None) -> Any:
        """Read a declared field or an extra attribute."""
        if name in type(self).model_fields:
            return getattr(self, name)
        extra = self.__pydantic_extra__ or {}
        return extra.get(name, default)

    def set(self, attrs: Mapping[str, Any] | None = None, **kwargs: Any) -> Record:
        """Merge ``attrs`` into the record.

        Replaces the last-change bookkeeping: afterwards ``has_changed``
        reports only keys whose value differs from what was stored before.
        """
        updates = dict(attrs or {})
        updates.update(kwargs)
        changed: dict[str, Any] = {}
        previous: dict[str, Any] = {}
        fields = type(self).model_fields
        for key, value in updates.items():
            current = self.get(key, _MISSING)
            if current is _MISSING or current != value:
                changed[key] = value
                previous[key] = None if current is _MISSING else current
            if key in fields:
                setattr(self, key, value)
            else:
                # extras bypass properties such as ``collection`` and ``uid``
                self.__pydantic_extra__[key] = value
        self._changed = changed
        self._previous = previous
        return self

    def has_changed(self, name: str | None = None) -> bool:
        """Did ``name`` (or, without a name, anything) change in the last ``set``."""
        if name is None:
            return bool(self._changed)
        return name in self._changed

    def changed_attributes(self) -> dict[str, Any]:
        return dict(self._changed)

    def previous(self, name: str) -> Any:
        """Value ``name`` held before the last ``set`` changed it."""
        if name in self._previous:
            return self._previous[name]
        return self.get(name)

    def previous_attributes(self) -> dict[str, Any]:
        return dict(self._previous)

    # -- Hooks --

    def parse(self, attrs: Any, options: Any = None) -> Any:
        """Transform raw attributes before they are merged. Identity by default."""
        return attrs

    # -- Serialization --

    def to_dict(self) -> dict[str, Any]:
        """Serialize declared and extra fields to a plain dict."""
        return self.model_dump()
