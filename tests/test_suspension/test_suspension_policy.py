"""
Tests for rating-driven contractor suspension
"""

from pathlib import Path

import pytest

from gigflow import GigFlow
from gigflow.kernel.bus import EventBus
from gigflow.kernel.ids import SequentialIdFactory
from gigflow.kernel.policy import WorkflowPolicy
from gigflow.suspension.contractors import SQLiteContractorRegistry
from gigflow.suspension.events import ContractorSuspended
from gigflow.suspension.policy import SuspensionPolicy

from tests.helpers import create_business_event, paid_vendor, staff_event, vendor_for


@pytest.fixture
def registry(temp_db: Path) -> SQLiteContractorRegistry:
    return SQLiteContractorRegistry(temp_db)


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def suspended_facts(bus: EventBus) -> list[ContractorSuspended]:
    facts: list[ContractorSuspended] = []
    bus.subscribe(ContractorSuspended, facts.append)
    return facts


def make_policy(registry, bus, test_time, policy: WorkflowPolicy | None = None) -> SuspensionPolicy:
    return SuspensionPolicy(
        registry, bus, test_time, policy or WorkflowPolicy(), SequentialIdFactory("s")
    )


class TestThreshold:
    def test_three_one_stars_do_not_suspend(self, registry, bus, test_time) -> None:
        suspension = make_policy(registry, bus, test_time)

        results = [
            suspension.on_one_star_review("con-1", f"evt-{n}", f"evt-{n}:v")
            for n in range(1, 4)
        ]

        assert results == [False, False, False]
        assert registry.get_one_star_count("con-1") == 3
        assert registry.is_suspended("con-1") is False

    def test_fourth_one_star_suspends(
        self, registry, bus, test_time, suspended_facts
    ) -> None:
        suspension = make_policy(registry, bus, test_time)
        for n in range(1, 4):
            suspension.on_one_star_review("con-1", f"evt-{n}", f"evt-{n}:v")

        assert suspension.on_one_star_review("con-1", "evt-4", "evt-4:v") is True

        profile = registry.get_profile("con-1")
        assert profile.is_suspended is True
        assert profile.suspended_at == test_time.now()
        assert profile.suspension_reason == "Received more than 3 one-star ratings from hosts"
        [fact] = suspended_facts
        assert fact.contractor_id == "con-1"
        assert fact.one_star_count == 4
        assert fact.stream_id == "evt-4"
        assert fact.actor_id == "system"

    def test_suspension_is_sticky_and_announced_once(
        self, registry, bus, test_time, suspended_facts
    ) -> None:
        suspension = make_policy(registry, bus, test_time)
        for n in range(1, 6):
            suspension.on_one_star_review("con-1", f"evt-{n}", f"evt-{n}:v")

        assert registry.is_suspended("con-1") is True
        assert registry.get_one_star_count("con-1") == 5
        assert len(suspended_facts) == 1

    def test_same_review_counts_once(self, registry, bus, test_time) -> None:
        suspension = make_policy(registry, bus, test_time)

        for _ in range(5):
            suspension.on_one_star_review("con-1", "evt-1", "evt-1:v")

        assert registry.get_one_star_count("con-1") == 1
        assert registry.is_suspended("con-1") is False

    def test_custom_threshold(self, registry, bus, test_time) -> None:
        strict = WorkflowPolicy(one_star_suspension_threshold=1)
        suspension = make_policy(registry, bus, test_time, strict)

        assert suspension.on_one_star_review("con-1", "evt-1", "evt-1:v") is False
        assert suspension.on_one_star_review("con-1", "evt-2", "evt-2:v") is True

    def test_contractors_counted_separately(self, registry, bus, test_time) -> None:
        suspension = make_policy(registry, bus, test_time)
        for n in range(1, 5):
            suspension.on_one_star_review("con-1", f"evt-{n}", f"evt-{n}:a")
        suspension.on_one_star_review("con-2", "evt-1", "evt-1:b")

        assert registry.is_suspended("con-2") is False
        assert [p.contractor_id for p in registry.list_suspended()] == ["con-1"]

    def test_unknown_contractor_has_clean_profile(self, registry) -> None:
        profile = registry.get_profile("con-new")

        assert profile.one_star_count == 0
        assert profile.is_suspended is False


class TestReviewDriven:
    def one_star_events(self, gf: GigFlow, count: int, rating: int = 1) -> None:
        """Hire con-1 on `count` separate events and review them each time"""
        for n in range(count):
            event = create_business_event(gf, title=f"Market {n}")
            hired = staff_event(gf, event.event_id, {"con-1": "Casey"})
            vendor_id = vendor_for(hired, "con-1")
            paid_vendor(gf, event.event_id, vendor_id)
            gf.submit_review(
                event.event_id, vendor_id, rating, host_response="No-show after lunch"
            )

    def test_four_one_star_reviews_suspend(self, gf: GigFlow, dispatcher) -> None:
        self.one_star_events(gf, 3)
        assert gf.contractor_profile("con-1").is_suspended is False

        self.one_star_events(gf, 1)

        profile = gf.contractor_profile("con-1")
        assert profile.is_suspended is True
        assert profile.one_star_count == 4
        [notice] = dispatcher.with_subject("Account Suspension Notice")
        assert notice.to_user_id == "con-1"
        assert notice.from_user_id == "system"
        assert notice.from_role is None
        assert "multiple one-star ratings" in notice.body

    def test_later_reviews_do_not_renotify(self, gf: GigFlow, dispatcher) -> None:
        self.one_star_events(gf, 5)

        assert len(dispatcher.with_subject("Account Suspension Notice")) == 1
        assert [p.contractor_id for p in gf.suspended_contractors()] == ["con-1"]

    def test_two_stars_do_not_count(self, gf: GigFlow) -> None:
        self.one_star_events(gf, 5, rating=2)

        profile = gf.contractor_profile("con-1")
        assert profile.one_star_count == 0
        assert profile.is_suspended is False

    def test_walk_in_vendor_reviews_are_not_tallied(self, gf: GigFlow) -> None:
        event = create_business_event(gf)
        staff_event(gf, event.event_id, {"con-1": "Casey"})
        walk_in = gf.add_vendor(event.event_id, "Jordan")
        paid_vendor(gf, event.event_id, walk_in.vendor_id)

        gf.submit_review(event.event_id, walk_in.vendor_id, 1, host_response="Never showed")

        assert gf.suspended_contractors() == []
