"""Tests for the Events observer mixin."""

import pytest

from mem_store import Collection, CollectionEvent, Events


class Emitter(Events):
    pass


@pytest.fixture
def emitter():
    return Emitter()


class TestEvents:
    def test_event_values(self):
        assert CollectionEvent.SORT == "sort"
        assert CollectionEvent.REMOVE == "remove"
        assert CollectionEvent.RESET == "reset"

    def test_trigger_calls_handlers_in_order(self, emitter):
        calls = []
        emitter.on("ping", lambda x: calls.append(("a", x)))
        emitter.on("ping", lambda x: calls.append(("b", x)))
        emitter.trigger("ping", 1)
        assert calls == [("a", 1), ("b", 1)]

    def test_enum_and_string_names_match(self, emitter):
        calls = []
        emitter.on(CollectionEvent.SORT, lambda: calls.append("sorted"))
        emitter.trigger("sort")
        assert calls == ["sorted"]

    def test_off_single_callback(self, emitter):
        calls = []
        keep = lambda: calls.append("keep")  # noqa: E731
        drop = lambda: calls.append("drop")  # noqa: E731
        emitter.on("x", keep).on("x", drop)
        emitter.off("x", drop)
        emitter.trigger("x")
        assert calls == ["keep"]

    def test_off_event(self, emitter):
        emitter.on("x", lambda: None)
        emitter.off("x")
        assert not emitter.has_listeners("x")

    def test_off_callback_everywhere(self, emitter):
        handler = lambda: None  # noqa: E731
        emitter.on("x", handler).on("y", handler)
        emitter.off(callback=handler)
        assert not emitter.has_listeners("x")
        assert not emitter.has_listeners("y")

    def test_off_everything(self, emitter):
        emitter.on("x", lambda: None).on("y", lambda: None)
        emitter.off()
        assert not emitter.has_listeners("x")
        assert not emitter.has_listeners("y")

    def test_handler_may_unsubscribe_itself(self, emitter):
        calls = []

        def once():
            calls.append("once")
            emitter.off("x", once)

        emitter.on("x", once)
        emitter.trigger("x")
        emitter.trigger("x")
        assert calls == ["once"]

    def test_trigger_without_handlers(self, emitter):
        assert emitter.trigger("nothing") is emitter

    def test_collections_do_not_share_handlers(self):
        first, second = Collection(), Collection()
        calls = []
        first.on("remove", lambda *args: calls.append("first"))
        second.add({"id": 1})
        second.remove(1)
        assert calls == []

    def test_handler_errors_propagate(self):
        col = Collection([{"id": 1}])

        def boom(*args):
            raise RuntimeError("handler failed")

        col.on("remove", boom)
        with pytest.raises(RuntimeError, match="handler failed"):
            col.remove(1)
