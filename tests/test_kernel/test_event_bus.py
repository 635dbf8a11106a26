"""
Tests for the in-process EventBus and per-event locks
"""

import threading
import time
from datetime import datetime, timezone

from gigflow.kernel.bus import EventBus
from gigflow.kernel.events import DomainEvent
from gigflow.kernel.locks import EventLockRegistry
from gigflow.kernel.logging import configure_logging

OCCURRED_AT = datetime(2025, 6, 14, 9, 0, tzinfo=timezone.utc)


class Pinged(DomainEvent):
    message: str = ""


class Ponged(DomainEvent):
    pass


def pinged(n: int = 1) -> Pinged:
    return Pinged(event_id=f"fact-{n}", stream_id="evt-1", occurred_at=OCCURRED_AT)


class TestEventBus:
    def setup_method(self) -> None:
        configure_logging(json_output=False, log_level="DEBUG")

    def test_event_type_is_class_name(self) -> None:
        assert pinged().event_type == "Pinged"

    def test_handlers_run_in_registration_order(self) -> None:
        bus = EventBus()
        calls: list[str] = []
        bus.subscribe(Pinged, lambda e: calls.append("first"))
        bus.subscribe("Pinged", lambda e: calls.append("second"))

        bus.publish(pinged())

        assert calls == ["first", "second"]

    def test_handlers_only_see_their_type(self) -> None:
        bus = EventBus()
        seen: list[DomainEvent] = []
        bus.subscribe(Ponged, seen.append)

        bus.publish(pinged())

        assert seen == []

    def test_failing_handler_is_isolated(self) -> None:
        bus = EventBus()
        calls: list[str] = []

        def broken(event: DomainEvent) -> None:
            raise RuntimeError("handler crashed")

        bus.subscribe(Pinged, broken)
        bus.subscribe(Pinged, lambda e: calls.append(e.event_id))

        bus.publish(pinged())

        assert calls == ["fact-1"]

    def test_publish_all_keeps_order(self) -> None:
        bus = EventBus()
        seen: list[str] = []
        bus.subscribe(Pinged, lambda e: seen.append(e.event_id))

        bus.publish_all([pinged(1), pinged(2), pinged(3)])

        assert seen == ["fact-1", "fact-2", "fact-3"]

    def test_clear(self) -> None:
        bus = EventBus()
        bus.subscribe(Pinged, lambda e: None)
        assert bus.get_event_types() == ["Pinged"]

        bus.clear()

        assert bus.get_event_types() == []

    def test_log_context_has_no_payload(self) -> None:
        fact = Pinged(
            event_id="fact-1", stream_id="evt-1", occurred_at=OCCURRED_AT, message="private"
        )

        assert fact.log_context() == {
            "event_type": "Pinged",
            "event_id": "fact-1",
            "stream_id": "evt-1",
        }


class TestEventLockRegistry:
    def test_lock_is_reentrant(self) -> None:
        locks = EventLockRegistry()

        with locks.hold("evt-1"):
            with locks.hold("evt-1"):
                entered = True

        assert entered

    def test_one_lock_per_event(self) -> None:
        locks = EventLockRegistry()

        with locks.hold("evt-1"):
            pass
        with locks.hold("evt-2"):
            pass
        with locks.hold("evt-1"):
            pass

        assert len(locks) == 2

    def test_discard(self) -> None:
        locks = EventLockRegistry()
        with locks.hold("evt-1"):
            pass

        locks.discard("evt-1")
        locks.discard("evt-unknown")

        assert len(locks) == 0

    def test_writers_on_one_event_are_serialized(self) -> None:
        locks = EventLockRegistry()
        trace: list[str] = []

        def writer(name: str) -> None:
            with locks.hold("evt-1"):
                trace.append(f"{name}-start")
                time.sleep(0.01)
                trace.append(f"{name}-end")

        threads = [threading.Thread(target=writer, args=(f"w{n}",)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        # Every start is immediately followed by its own end
        for start, end in zip(trace[::2], trace[1::2]):
            assert start.replace("-start", "") == end.replace("-end", "")

    def test_different_events_do_not_contend(self) -> None:
        locks = EventLockRegistry()
        entered = threading.Event()

        def other_writer() -> None:
            with locks.hold("evt-2"):
                entered.set()

        with locks.hold("evt-1"):
            thread = threading.Thread(target=other_writer)
            thread.start()
            assert entered.wait(timeout=2)
        thread.join()
