"""Tests for Record: key-value access, change tracking and construction."""

from typing import ClassVar

import pytest

from mem_store import Collection, Record


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class TaggedRecord(Record):
    """Record keyed on a custom field."""
    id_attribute: ClassVar[str] = "tag_id"
    tag_id: str = ""


class StrictRecord(Record):
    """Record with a required, typed field."""
    rank: int


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------

class TestIdentity:
    def test_default_id_attribute(self):
        r = Record(id=7)
        assert r.id_attribute == "id"
        assert r.uid == 7

    def test_custom_id_attribute(self):
        r = TaggedRecord(tag_id="t-1")
        assert r.uid == "t-1"

    def test_is_new_without_id(self):
        assert Record().is_new() is True
        assert Record(id=0).is_new() is False


# ---------------------------------------------------------------------------
# Key-value access
# ---------------------------------------------------------------------------

class TestGetSet:
    def test_get_declared_and_extra(self):
        r = Record(id=1, name="alpha")
        assert r.get("id") == 1
        assert r.get("name") == "alpha"
        assert r.name == "alpha"

    def test_get_missing_returns_default(self):
        r = Record(id=1)
        assert r.get("nope") is None
        assert r.get("nope", "fallback") == "fallback"

    def test_set_updates_values(self):
        r = Record(id=1, name="a")
        r.set({"name": "b", "rank": 3})
        assert r.get("name") == "b"
        assert r.get("rank") == 3

    def test_set_accepts_kwargs(self):
        r = Record(id=1)
        r.set(name="kw")
        assert r.name == "kw"

    def test_set_returns_self(self):
        r = Record(id=1)
        assert r.set({"x": 1}) is r

    def test_set_extra_named_like_a_property(self):
        r = Record.create({"id": 1, "collection": "books"})
        r.set({"collection": "films", "uid": "u-1"})
        assert r.get("collection") == "films"
        assert r.get("uid") == "u-1"
        assert r.collection is None
        assert r.uid == 1
        assert r.has_changed("collection")


# ---------------------------------------------------------------------------
# Change tracking
# ---------------------------------------------------------------------------

class TestChangeTracking:
    def test_has_changed_only_for_different_values(self):
        r = Record(id=1, name="a", rank=1)
        r.set({"name": "b", "rank": 1})
        assert r.has_changed("name") is True
        assert r.has_changed("rank") is False
        assert r.has_changed() is True

    def test_has_changed_false_when_nothing_differs(self):
        r = Record(id=1, name="a")
        r.set({"name": "a"})
        assert r.has_changed() is False

    def test_new_key_counts_as_change(self):
        r = Record(id=1)
        r.set({"color": "red"})
        assert r.has_changed("color")
        assert r.previous("color") is None

    def test_tracking_reflects_last_set_only(self):
        r = Record(id=1, name="a")
        r.set({"name": "b"})
        r.set({"rank": 2})
        assert r.has_changed("name") is False
        assert r.changed_attributes() == {"rank": 2}

    def test_previous_values(self):
        r = Record(id=1, name="a")
        r.set({"name": "b"})
        assert r.previous("name") == "a"
        assert r.previous_attributes() == {"name": "a"}
        # untouched keys report their current value
        assert r.previous("id") == 1


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

class TestCreate:
    def test_create_from_dict(self):
        r = Record.create({"id": "d1", "name": "from-dict"})
        assert r.uid == "d1"
        assert r.get("name") == "from-dict"
        assert r.collection is None

    def test_create_sets_back_reference(self):
        col = Collection()
        r = Record.create({"id": 1}, collection=col)
        assert r.collection is col

    def test_create_invalid_returns_none(self):
        assert StrictRecord.create({"id": 1, "rank": "not-a-number"}) is None
        assert StrictRecord.create({"id": 1}) is None

    def test_create_non_mapping_returns_none(self):
        assert Record.create(42) is None
        assert Record.create("text") is None

    def test_create_from_other_model(self):
        source = TaggedRecord(tag_id="t-9", name="copy")
        r = Record.create(source)
        assert r.get("tag_id") == "t-9"
        assert r.get("name") == "copy"

    def test_invalid_input_is_logged(self, isolated_log):
        StrictRecord.create({"id": 1})
        assert "invalid attributes skipped" in isolated_log.read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

class TestToDict:
    def test_includes_extra_fields(self):
        r = Record(id=1, name="a", tags=["x"])
        assert r.to_dict() == {"id": 1, "name": "a", "tags": ["x"]}

    def test_parse_is_identity(self):
        r = Record(id=1)
        attrs = {"id": 1, "name": "raw"}
        assert r.parse(attrs) is attrs


@pytest.mark.parametrize("value", [1, "one", 0])
def test_uid_round_trips_any_hashable(value):
    assert Record(id=value).uid == value
