"""Test EventDispatcher registration, ordering, once, removal and failures."""

import pytest

from theme_kernel.events.dispatcher import MAX_RECORDED_FAILURES, EventDispatcher, ignore_event
from theme_kernel.events.event import Event


class TestRegistration:
    def test_on_registers_listener(self, dispatcher):
        called = []
        dispatcher.on("test.event", lambda event: called.append(True))

        assert dispatcher.has_listeners("test.event")
        dispatcher.dispatch("test.event")
        assert called == [True]

    def test_listener_receives_event(self, dispatcher):
        received = []
        dispatcher.on("test.event", received.append)

        dispatcher.dispatch("test.event", {"key": "value"})

        assert len(received) == 1
        assert isinstance(received[0], Event)
        assert received[0].name == "test.event"
        assert received[0].get("key") == "value"

    def test_empty_event_name_rejected(self, dispatcher):
        with pytest.raises(ValueError):
            dispatcher.on("", lambda event: None)

    def test_has_listeners_false_for_unknown(self, dispatcher):
        assert not dispatcher.has_listeners("nothing.here")
        assert dispatcher.get_listeners("nothing.here") == []


class TestPriority:
    def test_priority_ordering(self, dispatcher):
        order = []
        dispatcher.on("test.priority", lambda e: order.append("low"), 1)
        dispatcher.on("test.priority", lambda e: order.append("high"), 100)
        dispatcher.on("test.priority", lambda e: order.append("medium"), 10)

        dispatcher.dispatch("test.priority")

        assert order == ["high", "medium", "low"]

    def test_equal_priority_keeps_registration_order(self, dispatcher):
        order = []
        for label in ("first", "second", "third"):
            dispatcher.on("tie", lambda e, label=label: order.append(label))

        dispatcher.dispatch("tie")

        assert order == ["first", "second", "third"]

    def test_get_listeners_in_dispatch_order(self, dispatcher):
        def callback1(event):
            pass

        def callback2(event):
            pass

        dispatcher.on("test.get", callback1, 10)
        dispatcher.on("test.get", callback2, 20)

        assert dispatcher.get_listeners("test.get") == [callback2, callback1]

    def test_negative_priority_runs_last(self, dispatcher):
        order = []
        dispatcher.on("p", lambda e: order.append("late"), -5)
        dispatcher.on("p", lambda e: order.append("default"))

        dispatcher.dispatch("p")

        assert order == ["default", "late"]


class TestStopPropagation:
    def test_stop_skips_lower_priorities(self, dispatcher):
        calls = []

        def first(event):
            calls.append("first")
            event.stop_propagation()

        dispatcher.on("test.stop", first, 10)
        dispatcher.on("test.stop", lambda e: calls.append("second"), 5)

        event = dispatcher.dispatch("test.stop")

        assert calls == ["first"]
        assert event.is_propagation_stopped()

    def test_stop_does_not_leak_to_next_dispatch(self, dispatcher):
        calls = []

        def stopper(event):
            calls.append("stopper")
            if event.get("stop"):
                event.stop_propagation()

        dispatcher.on("test.stop", stopper, 10)
        dispatcher.on("test.stop", lambda e: calls.append("after"), 5)

        dispatcher.dispatch("test.stop", {"stop": True})
        second = dispatcher.dispatch("test.stop")

        assert calls == ["stopper", "stopper", "after"]
        assert not second.is_propagation_stopped()

    def test_stop_skips_later_registered_permanent_listener(self, dispatcher):
        calls = []
        dispatcher.on("s", lambda e: e.stop_propagation(), 50)
        dispatcher.on("s", lambda e: calls.append("late"), 1)

        dispatcher.dispatch("s")

        assert calls == []


class TestOnce:
    def test_once_fires_exactly_once(self, dispatcher):
        calls = []
        dispatcher.once("test.once", lambda e: calls.append(1))

        for _ in range(3):
            dispatcher.dispatch("test.once")

        assert calls == [1]
        assert not dispatcher.has_listeners("test.once")

    def test_once_respects_priority(self, dispatcher):
        order = []
        dispatcher.on("mix", lambda e: order.append("permanent"), 1)
        dispatcher.once("mix", lambda e: order.append("once"), 50)

        dispatcher.dispatch("mix")
        dispatcher.dispatch("mix")

        assert order == ["once", "permanent", "permanent"]

    def test_once_removed_even_when_it_raises(self, dispatcher):
        calls = []

        def explode(event):
            calls.append("explode")
            raise RuntimeError("boom")

        dispatcher.once("fragile", explode)

        with pytest.raises(RuntimeError):
            dispatcher.dispatch("fragile")
        dispatcher.dispatch("fragile")

        assert calls == ["explode"]
        assert dispatcher.count_listeners("fragile") == 0

    def test_once_skipped_by_stop_is_kept(self, dispatcher):
        calls = []
        dispatcher.on("gate", lambda e: e.stop_propagation(), 100)
        dispatcher.once("gate", lambda e: calls.append("once"), 1)

        dispatcher.dispatch("gate")

        assert calls == []
        assert dispatcher.count_listeners("gate") == 2

    def test_once_listener_registered_twice_fires_twice(self, dispatcher):
        calls = []

        def listener(event):
            calls.append(1)

        dispatcher.once("dup", listener)
        dispatcher.once("dup", listener)

        dispatcher.dispatch("dup")
        dispatcher.dispatch("dup")

        assert calls == [1, 1]


class TestRemoval:
    def test_off_removes_listener(self, dispatcher):
        def callback(event):
            pass

        dispatcher.on("test.remove", callback)

        assert dispatcher.off("test.remove", callback) is True
        assert not dispatcher.has_listeners("test.remove")

    def test_off_twice_returns_false(self, dispatcher):
        def callback(event):
            pass

        dispatcher.on("test.remove", callback)

        assert dispatcher.off("test.remove", callback) is True
        assert dispatcher.off("test.remove", callback) is False

    def test_off_removes_only_first_match(self, dispatcher):
        def callback(event):
            pass

        dispatcher.on("dup", callback)
        dispatcher.on("dup", callback)

        dispatcher.off("dup", callback)

        assert dispatcher.count_listeners("dup") == 1

    def test_off_matches_identity_not_equality(self, dispatcher):
        class Listener:
            def __call__(self, event):
                pass

            def __eq__(self, other):
                return isinstance(other, Listener)

            __hash__ = object.__hash__

        registered = Listener()
        dispatcher.on("ident", registered)

        assert dispatcher.off("ident", Listener()) is False
        assert dispatcher.off("ident", registered) is True

    def test_off_unknown_event(self, dispatcher):
        assert dispatcher.off("unknown", lambda e: None) is False

    def test_remove_all_listeners(self, dispatcher):
        dispatcher.on("event1", lambda e: None)
        dispatcher.on("event2", lambda e: None)

        dispatcher.remove_all_listeners()

        assert not dispatcher.has_listeners("event1")
        assert not dispatcher.has_listeners("event2")
        assert dispatcher.count_listeners() == 0

    def test_remove_listeners_for_specific_event(self, dispatcher):
        dispatcher.on("event1", lambda e: None)
        dispatcher.on("event2", lambda e: None)

        dispatcher.remove_all_listeners("event1")

        assert not dispatcher.has_listeners("event1")
        assert dispatcher.has_listeners("event2")

    def test_count_listeners(self, dispatcher):
        dispatcher.on("event1", lambda e: None)
        dispatcher.on("event1", lambda e: None)
        dispatcher.on("event2", lambda e: None)

        assert dispatcher.count_listeners("event1") == 2
        assert dispatcher.count_listeners("event2") == 1
        assert dispatcher.count_listeners() == 3


class TestDispatch:
    def test_payload_roundtrip(self, dispatcher):
        def listener(event):
            event.set("modified", True)
            event.set("count", event.get("count", 0) + 1)

        dispatcher.on("test.data", listener)

        result = dispatcher.dispatch("test.data", {"count": 5})

        assert result.get("modified") is True
        assert result.get("count") == 6

    def test_multiple_listeners_same_event(self, dispatcher):
        executions = []
        for i in (1, 2, 3):
            dispatcher.on("multi", lambda e, i=i: executions.append(i))

        dispatcher.dispatch("multi")

        assert len(executions) == 3

    def test_no_listeners_does_not_raise(self, dispatcher):
        event = dispatcher.dispatch("nonexistent.event")

        assert isinstance(event, Event)
        assert event.name == "nonexistent.event"
        assert event.data == {}
        assert not event.is_propagation_stopped()

    def test_initial_data_not_mutated(self, dispatcher):
        initial = {"count": 1}
        dispatcher.on("inc", lambda e: e.set("count", 2))

        dispatcher.dispatch("inc", initial)

        assert initial == {"count": 1}

    def test_listener_added_during_dispatch_runs_next_time(self, dispatcher):
        calls = []

        def late(event):
            calls.append("late")

        def registrar(event):
            calls.append("registrar")
            dispatcher.on("grow", late)

        dispatcher.once("grow", registrar)

        dispatcher.dispatch("grow")
        dispatcher.dispatch("grow")

        assert calls == ["registrar", "late"]

    @pytest.mark.parametrize("name", ["", None])
    def test_dispatch_rejects_empty_event_name(self, dispatcher, name):
        with pytest.raises(ValueError, match="non-empty"):
            dispatcher.dispatch(name)

    def test_zero_argument_listener_via_adapter(self, dispatcher):
        calls = []

        def no_args():
            calls.append("called")

        listener = ignore_event(no_args)
        dispatcher.on("plain", listener)
        dispatcher.dispatch("plain")

        assert calls == ["called"]
        assert dispatcher.off("plain", listener) is True


class TestListenerFailures:
    def test_failure_propagates_and_aborts_by_default(self, dispatcher):
        calls = []

        def bad(event):
            raise ValueError("boom")

        dispatcher.on("fail", bad, 10)
        dispatcher.on("fail", lambda e: calls.append("after"), 1)

        with pytest.raises(ValueError, match="boom"):
            dispatcher.dispatch("fail")

        assert calls == []
        assert dispatcher.failures == []

    def test_error_callback_continues_dispatch(self):
        errors = []
        dispatcher = EventDispatcher(
            on_listener_error=lambda name, listener, exc: errors.append((name, str(exc)))
        )
        calls = []

        def bad(event):
            raise ValueError("boom")

        dispatcher.on("fail", bad, 10)
        dispatcher.on("fail", lambda e: calls.append("after"), 1)

        dispatcher.dispatch("fail")

        assert calls == ["after"]
        assert errors == [("fail", "boom")]
        failures = dispatcher.failures
        assert len(failures) == 1
        assert failures[0].event_name == "fail"
        assert failures[0].error == "boom"
        assert "bad" in failures[0].listener

    def test_failing_error_callback_is_contained(self):
        def broken_callback(name, listener, exc):
            raise RuntimeError("callback broke")

        dispatcher = EventDispatcher(on_listener_error=broken_callback)
        calls = []

        def bad(event):
            raise ValueError("boom")

        dispatcher.on("fail", bad, 10)
        dispatcher.on("fail", lambda e: calls.append("after"), 1)

        dispatcher.dispatch("fail")

        assert calls == ["after"]

    def test_clear_failures_drains(self):
        dispatcher = EventDispatcher(on_listener_error=lambda *args: None)

        def bad(event):
            raise ValueError("boom")

        dispatcher.on("fail", bad)
        dispatcher.dispatch("fail")

        drained = dispatcher.clear_failures()

        assert len(drained) == 1
        assert dispatcher.failures == []

    def test_recorded_failures_keep_most_recent(self):
        dispatcher = EventDispatcher(on_listener_error=lambda *args: None)

        def bad(event):
            raise ValueError(str(event.get("n")))

        dispatcher.on("fail", bad)
        for n in range(MAX_RECORDED_FAILURES + 1):
            dispatcher.dispatch("fail", {"n": n})

        failures = dispatcher.failures
        assert len(failures) == MAX_RECORDED_FAILURES
        assert failures[0].error == "1"
        assert failures[-1].error == str(MAX_RECORDED_FAILURES)
